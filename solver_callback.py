"""
Solver callback for logging feasible solutions as CP-SAT finds them.
"""

import os
import time
from datetime import datetime

from ortools.sat.python import cp_model


class SolutionPrinterCallback(cp_model.CpSolverSolutionCallback):
    """Prints each feasible solution with the number of selected starts and logs to file."""

    def __init__(self, decisions, log_file_path=None):
        cp_model.CpSolverSolutionCallback.__init__(self)
        self.__solution_count = 0
        self.__decisions = decisions
        self.__start_time = time.time()
        self.__log_file_path = log_file_path
        self.__stats_history = []

        if self.__log_file_path:
            os.makedirs(os.path.dirname(self.__log_file_path) or ".", exist_ok=True)
            with open(self.__log_file_path, "w", encoding="utf-8") as log_file:
                log_file.write("=== Solution Log ===\n")
                log_file.write(f"Started: {datetime.now().isoformat()}\n")
                log_file.write("--------------------\n")

    def on_solution_callback(self):
        self.__solution_count += 1
        elapsed_total = time.time() - self.__start_time

        selected = [key for key, var in self.__decisions.items() if self.Value(var)]

        minutes = int(elapsed_total // 60)
        seconds = elapsed_total % 60
        elapsed_str = f"{minutes}m {seconds:.1f}s" if minutes > 0 else f"{seconds:.2f}s"

        output = (f"Solution {self.__solution_count}, selected starts = {len(selected)}, "
                  f"time = {elapsed_str} | br: {self.NumBranches():,}, cf: {self.NumConflicts():,}")
        print(output)

        if self.__log_file_path:
            with open(self.__log_file_path, "a", encoding="utf-8") as log_file:
                log_file.write(output + "\n")
                for activity_id, unit_idx in sorted(selected):
                    log_file.write(f"   activity {activity_id} -> unit {unit_idx}\n")

        self.__stats_history.append({
            'time': elapsed_total,
            'solution': self.__solution_count,
            'selected': selected,
            'total_branches': self.NumBranches(),
            'total_conflicts': self.NumConflicts(),
        })

    def solution_count(self):
        return self.__solution_count

    def get_stats_history(self):
        """Return the statistics history for post-solve analysis."""
        return self.__stats_history
