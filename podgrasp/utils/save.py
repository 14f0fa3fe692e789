import os
from datetime import datetime

import pandas as pd

CSV_SEPARATOR = ";"


def save_results(rows, name="grasp", folder="results"):
    """
    Save run records (list of dicts) to a timestamped CSV file.

    Args:
        rows (list): records, one per run (see metrics.solution_row)
        name (str): file prefix, e.g. the algorithm name
        folder (str): output folder

    Returns:
        str: path of the written file
    """
    os.makedirs(folder, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    df = pd.DataFrame(rows)
    full_path = os.path.join(folder, f"{name}_{timestamp}.csv")
    df.to_csv(full_path, index=False, sep=CSV_SEPARATOR)
    return full_path


def load_results(path):
    return pd.read_csv(path, sep=CSV_SEPARATOR)


def summary_table(df):
    """Mean/std cost and time per (algorithm, pods, nodes)."""
    return df.groupby(["algorithm", "number of pods", "number of nodes"]).agg({
        "solution cost": ["mean", "std"],
        "time (ms)": ["mean", "std"],
    }).round(2)
