"""
Model Assembly

Owns one CP-SAT model together with structured registries for the decision
variables and constraints added to it. Every build stage receives the same
ModelAssembly instance explicitly; nothing is kept in module globals, so
independent builds never share state.

Identifiers:
    - decisions:   (activity_id, unit_index) -> BoolVar
    - constraints: (kind, scope_id) -> Constraint
"""

import collections

from ortools.sat.python import cp_model


class ModelAssembly:

    def __init__(self):
        self.model = cp_model.CpModel()
        self.decisions = {}
        self.constraints = {}
        self.coverage_terms = {}  # unit_index -> number of representative decisions bounded there

    def new_decision(self, activity_id, unit_index):
        key = (activity_id, unit_index)
        if key in self.decisions:
            raise KeyError(f"Decision {key} already exists")
        var = self.model.NewBoolVar(f"start_a{activity_id}_u{unit_index}")
        self.decisions[key] = var
        return var

    def decision(self, activity_id, unit_index):
        return self.decisions[(activity_id, unit_index)]

    def add_constraint(self, kind, scope_id, linear_expr):
        """Register a bounded linear expression under a structured key."""
        key = (kind, scope_id)
        if key in self.constraints:
            raise KeyError(f"Constraint {key} already exists")
        ct = self.model.Add(linear_expr)
        ct.WithName(f"{kind}_{scope_id}")
        self.constraints[key] = ct
        return ct

    def fix_to_zero(self, kind, activity_id, unit_index):
        """Pin a decision to 0; repeated requests for the same decision are ignored."""
        scope_id = (activity_id, unit_index)
        if (kind, scope_id) in self.constraints:
            return self.constraints[(kind, scope_id)]
        return self.add_constraint(kind, scope_id, self.decision(activity_id, unit_index) == 0)

    def add_coverage(self, unit_index, representatives):
        ct = self.add_constraint("coverage", unit_index, sum(representatives) <= 1)
        self.coverage_terms[unit_index] = len(representatives)
        return ct

    def is_fixed_to_zero(self, activity_id, unit_index):
        scope_id = (activity_id, unit_index)
        return any((kind, scope_id) in self.constraints
                   for kind in ("blocked_unit", "blocked_start", "orphan_start"))

    def constraint_counts(self):
        counts = collections.Counter(kind for kind, _ in self.constraints)
        return dict(counts)

    def coverage_bounds(self):
        """unit_index -> (term count, upper bound) for every coverage constraint."""
        return {unit_idx: (terms, 1) for unit_idx, terms in sorted(self.coverage_terms.items())}

    def statistics(self):
        proto = self.model.Proto()
        return {
            "decisions": len(self.decisions),
            "variables": len(proto.variables),
            "constraints": len(proto.constraints),
            "by_kind": self.constraint_counts(),
        }
