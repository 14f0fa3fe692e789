"""
JSONL run logging for GRASP experiments.
"""
import os
import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone

RUN_LOG_PATH = os.path.join("results", "run_logs", "grasp_runs.jsonl")


def append_jsonl(path: str, obj: dict) -> None:
    """Append a JSON object as a line in a .jsonl file, create folder if needed."""
    def default(o):
        if is_dataclass(o):
            return asdict(o)
        if hasattr(o, "__dict__"):
            return o.__dict__
        return str(o)
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(json.dumps(obj, ensure_ascii=False, default=default) + "\n")


def log_run(result, params: dict, path: str = RUN_LOG_PATH) -> None:
    """Log one GRASP result with its parameters. Assignment keys become strings in JSON."""
    append_jsonl(path, {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "params": params,
        "best_cost": result.best_cost,
        "reconstructed_cost": result.reconstructed_cost,
        "best_iteration": result.best_iteration,
        "history": result.history,
        "opened": result.solution.opened,
        "unassigned": result.solution.unassigned,
        "assignment": result.solution.assignment,
    })
