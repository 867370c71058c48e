"""
Recurrence System Module

Builds a CP-SAT feasibility model that places recurring activities on a
discretized weekly calendar using one start indicator per (activity, unit)
pair instead of one occupancy variable per occupied unit.

Architecture:
    - time_grid.py: Horizon discretization and schedulable/blocked classification
    - activity_catalog.py: Activity validation, durations and gaps in units
    - decision_space.py: Start indicator BoolVar creation
    - recurrence_enumerator.py: Rolling-window recurrence groups + coverage query
    - recurrence_constraints.py: Exactly-one, day anchor and coverage constraints
    - model_assembly.py: Model + structured variable/constraint registries
    - result_projector.py: Solved assignment -> calendar schedule
    - errors.py: Error taxonomy
    - debug/: Visualization and debugging utilities
"""

__version__ = "1.0.0"
