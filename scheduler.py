# scheduler.py
import os
from datetime import datetime

from ortools.sat.python import cp_model

from recurrence_system.activity_catalog import ActivityCatalog
from recurrence_system.decision_space import create_decision_space
from recurrence_system.errors import ModelInfeasibleError, SolverStatusError
from recurrence_system.model_assembly import ModelAssembly
from recurrence_system.recurrence_constraints import add_recurrence_constraints
from recurrence_system.result_projector import project_schedule
from recurrence_system.time_grid import create_time_grid
from solver_callback import SolutionPrinterCallback

# ============================================================================
# SOLVER LOGGING CONFIGURATION
# ============================================================================
SHOW_MODEL_STATISTICS = True       # Write model size (variables, constraints) before solving
SHOW_SEARCH_LOGS = False           # Forward CP-SAT search progress to solver.log
# ============================================================================


def write_solver_diagnostics(solver, assembly, status, pass_name="", output_dir=None, stats_history=None):
    """
    Write solver diagnostics to a file for later review.

    Args:
        solver: CpSolver instance after solving
        assembly: ModelAssembly that was solved
        status: Solve status code
        pass_name: Label written in the report header
        output_dir: Directory to write diagnostics file (current directory if None)
        stats_history: Per-solution stats from SolutionPrinterCallback.get_stats_history()
    """
    diagnostics_path = os.path.join(output_dir or ".", "solver_diagnostics.txt")

    lines = []
    lines.append("")
    lines.append("=" * 100)
    lines.append(f"SOLVER DIAGNOSTICS - {pass_name}")
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("=" * 100)

    lines.append("")
    lines.append("BASIC STATISTICS:")
    lines.append(f"   Status:              {solver.StatusName(status)}")
    lines.append(f"   Wall time:           {solver.WallTime():.2f} seconds")
    lines.append(f"   User time:           {solver.UserTime():.2f} seconds")

    lines.append("")
    lines.append("SEARCH STATISTICS:")
    lines.append(f"   Branches:            {solver.NumBranches():,}")
    lines.append(f"   Conflicts:           {solver.NumConflicts():,}")

    if stats_history is not None:
        lines.append("")
        lines.append(f"SOLUTIONS FOUND: {len(stats_history)}")
        for entry in stats_history:
            lines.append(f"   #{entry['solution']} at {entry['time']:.2f}s "
                         f"(branches: {entry['total_branches']:,}, conflicts: {entry['total_conflicts']:,})")

    stats = assembly.statistics()
    lines.append("")
    lines.append("MODEL SIZE:")
    lines.append(f"   Start indicators:    {stats['decisions']:,}")
    lines.append(f"   Variables:           {stats['variables']:,}")
    lines.append(f"   Constraints:         {stats['constraints']:,}")
    lines.append("")
    lines.append("   Constraint breakdown:")
    for kind, count in sorted(stats['by_kind'].items(), key=lambda x: -x[1]):
        lines.append(f"      {kind}: {count:,}")

    lines.append("")
    lines.append("INTERPRETATION:")
    if status == cp_model.INFEASIBLE:
        lines.append("   [INFEASIBLE] Every activity fits on its own, but not all of them together.")
        lines.append("   Possible causes: too many hours for the open periods, competing anchor days")
    elif status in [cp_model.OPTIMAL, cp_model.FEASIBLE]:
        lines.append("   [OK] Feasible schedule found")
    else:
        lines.append("   [WARNING] No answer - time limit reached or model invalid")

    lines.append("=" * 100)
    lines.append("")

    with open(diagnostics_path, "a", encoding="utf-8") as f:
        f.write("\n".join(lines))

    print(f"\n[Diagnostics] {pass_name}: {solver.StatusName(status)} in {solver.WallTime():.2f}s")
    print(f"[Diagnostics] Full report saved to: {diagnostics_path}")


def write_model_statistics(assembly, path, solver_parameters=None):
    stats = assembly.statistics()
    with open(path, 'w', encoding='utf-8') as f:
        f.write("=" * 80 + "\n")
        f.write("MODEL STATISTICS\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write("=" * 80 + "\n\n")
        f.write(f"Start indicators: {stats['decisions']:,}\n")
        f.write(f"Variables: {stats['variables']:,}\n")
        f.write(f"Constraints: {stats['constraints']:,}\n")
        if solver_parameters:
            for key, value in solver_parameters.items():
                f.write(f"{key}: {value}\n")

        f.write("\nConstraint breakdown:\n")
        f.write("-" * 40 + "\n")
        for kind, count in sorted(stats['by_kind'].items(), key=lambda x: -x[1]):
            f.write(f"  {kind}: {count:,}\n")

    print(f"📊 Model statistics saved to: {path}")


def build_model(horizon, activities, symmetry_breaking=True):
    """
    Build the complete feasibility model.

    Construction order is fixed: time grid, catalog, start indicators,
    constraints. Any ConfigurationError or InfeasibleActivityError propagates
    before a model is returned.

    Args:
        horizon: HorizonConfig
        activities: Iterable of Activity objects (unresolved)
        symmetry_breaking: Add day-anchor constraints

    Returns:
        Tuple of (assembly, time_units, catalog, constraint_info)
    """
    time_units = create_time_grid(horizon)
    catalog = ActivityCatalog(
        activities,
        unit_width=horizon.unit_width,
        horizon_units=len(time_units),
        default_gap_units=horizon.default_gap_units,
    )
    print(f"[Activity Catalog] {len(catalog)} activities")

    assembly = ModelAssembly()
    create_decision_space(assembly, time_units, catalog)
    constraint_info = add_recurrence_constraints(
        assembly, time_units, catalog, symmetry_breaking=symmetry_breaking
    )
    return assembly, time_units, catalog, constraint_info


def solve_model(assembly, time_limit=None, random_seed=None, deterministic_mode=False,
                num_workers=8, log_dir=None, write_diagnostics=True):
    """
    Solve the assembled model with CP-SAT.

    When log_dir is given, the solution log and (optionally) the diagnostics
    report are written there, including for infeasible or unfinished solves.

    Returns:
        Tuple of (status, solver)

    Raises:
        ModelInfeasibleError: CP-SAT proved the model infeasible
        SolverStatusError: CP-SAT stopped without an answer
    """
    solver = cp_model.CpSolver()
    if random_seed is not None:
        solver.parameters.random_seed = random_seed
    solver.parameters.num_search_workers = 1 if deterministic_mode else num_workers
    solver.parameters.cp_model_presolve = True
    if time_limit:
        solver.parameters.max_time_in_seconds = time_limit

    solver_log_file = None
    if SHOW_SEARCH_LOGS and log_dir:
        solver_log_file = os.path.join(log_dir, "solver.log")
        with open(solver_log_file, 'w', encoding='utf-8') as f:
            f.write("CP-SAT Solver Log\n")
            f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("=" * 80 + "\n\n")

        def log_callback(msg):
            with open(solver_log_file, 'a', encoding='utf-8') as f:
                f.write(msg + '\n')

        solver.parameters.log_search_progress = True
        solver.log_callback = log_callback
        print(f"📝 Solver logs will be saved to: {solver_log_file}")

    log_file_path = os.path.join(log_dir, "solution_log.txt") if log_dir else None
    solution_printer = SolutionPrinterCallback(assembly.decisions, log_file_path=log_file_path)

    print(f"\n[Solver] Starting CP-SAT (time limit: {time_limit or 'none'}, "
          f"seed: {random_seed if random_seed is not None else 'default'})...")
    status = solver.Solve(assembly.model, solution_printer)
    print(f"[Solver] Finished with status {solver.StatusName(status)} "
          f"after {solution_printer.solution_count()} solution(s)")

    if log_dir and write_diagnostics:
        write_solver_diagnostics(solver, assembly, status, "Solve", output_dir=log_dir,
                                 stats_history=solution_printer.get_stats_history())

    if status == cp_model.INFEASIBLE:
        raise ModelInfeasibleError(
            "No schedule satisfies every constraint, although each activity fits on its own"
        )
    if status not in [cp_model.OPTIMAL, cp_model.FEASIBLE]:
        raise SolverStatusError(solver.StatusName(status))

    return status, solver


def run_scheduler(config, horizon, activities, output_folder=None):
    """
    Main function to build and solve the scheduling model.

    Args:
        config: Configuration dictionary (solver settings)
        horizon: HorizonConfig
        activities: List of Activity objects
        output_folder: Folder for logs, statistics and diagnostics (no files if None)

    Returns:
        Tuple of (status, solver, results) where results holds the schedule,
        time units, catalog and assembly
    """
    assembly, time_units, catalog, constraint_info = build_model(
        horizon, activities, symmetry_breaking=config.get("SYMMETRY_BREAKING", True)
    )

    deterministic_mode = config.get("DETERMINISTIC_MODE", False)
    random_seed = config.get("RANDOM_SEED")
    num_workers = config.get("NUM_SEARCH_WORKERS", 8)

    if output_folder and SHOW_MODEL_STATISTICS:
        write_model_statistics(
            assembly,
            os.path.join(output_folder, "model_statistics.txt"),
            solver_parameters={
                "Search workers": 1 if deterministic_mode else num_workers,
                "Deterministic mode": deterministic_mode,
                "Random seed": random_seed if random_seed is not None else "default",
            },
        )

    status, solver = solve_model(
        assembly,
        time_limit=config.get("TIME_LIMIT_SECONDS"),
        random_seed=random_seed,
        deterministic_mode=deterministic_mode,
        num_workers=num_workers,
        log_dir=output_folder,
        write_diagnostics=config.get("WRITE_DIAGNOSTICS", True),
    )

    schedule = project_schedule(solver.Value, assembly.decisions, time_units, catalog)

    return status, solver, {
        'schedule': schedule,
        'time_units': time_units,
        'catalog': catalog,
        'assembly': assembly,
        'constraint_info': constraint_info,
    }
