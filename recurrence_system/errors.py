"""
Error taxonomy for model construction, solving and result projection.

Configuration and enumeration errors are raised while the model is being
built, before the solver is ever invoked.
"""


class SchedulingError(Exception):
    """Base class for every scheduler failure."""


class ConfigurationError(SchedulingError, ValueError):
    """Invalid horizon, catalog or config file."""


class InfeasibleActivityError(SchedulingError):
    """A single activity cannot be placed anywhere in the horizon."""

    def __init__(self, activity_id, reason):
        self.activity_id = activity_id
        self.reason = reason
        super().__init__(f"Activity {activity_id} cannot be scheduled: {reason}")


class ModelInfeasibleError(SchedulingError):
    """The solver proved that no assignment satisfies every constraint."""


class SolverStatusError(SchedulingError):
    """The solver stopped without a usable answer (time limit, invalid model)."""

    def __init__(self, status_name):
        self.status_name = status_name
        super().__init__(f"Solver finished with status {status_name}")


class InconsistentSolutionError(SchedulingError):
    """A reported-feasible solution does not select exactly one start per activity."""

    def __init__(self, activity_id, selected_units):
        self.activity_id = activity_id
        self.selected_units = list(selected_units)
        super().__init__(
            f"Activity {activity_id} has {len(self.selected_units)} selected start units "
            f"(expected exactly 1): {self.selected_units}"
        )
