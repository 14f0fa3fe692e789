"""
Evaluation helpers for allocation runs.
"""
import numpy as np


def summarize_runs(costs, times=None):
    """
    Mean / std / min / max of a list of run costs (and times, if given).

    Returns:
        dict, empty values as None when costs is empty
    """
    keys = ("mean_cost", "std_cost", "min_cost", "max_cost")
    if len(costs) == 0:
        summary = {k: None for k in keys}
    else:
        arr = np.asarray(costs, dtype=float)
        summary = dict(zip(keys, (float(np.mean(arr)), float(np.std(arr)), float(np.min(arr)), float(np.max(arr)))))
    if times is not None:
        t = np.asarray(times, dtype=float)
        summary["mean_time"] = float(np.mean(t)) if len(t) else None
        summary["std_time"] = float(np.std(t)) if len(t) else None
    return summary


def gap_percent(cost, reference):
    """Relative gap of cost over reference, in percent. None without a usable reference."""
    if reference is None:
        return None
    if reference == 0:
        return 0.0 if cost == 0 else None
    return 100.0 * (cost - reference) / reference


def solution_row(solution, num_pods, num_nodes, algorithm, elapsed_ms):
    """Flat record for one run, in the column layout of the CSV reports."""
    return {
        "algorithm": algorithm,
        "number of pods": num_pods,
        "number of nodes": num_nodes,
        "solution cost": solution.cost,
        "used nodes": solution.opened_count,
        "unassigned pods": len(solution.unassigned),
        "time (ms)": elapsed_ms,
    }
