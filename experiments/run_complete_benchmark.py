"""
Complete benchmark - pod-to-node allocation heuristics
=====================================================
Compares, on synthetic instances of the (pods x nodes) size grid:
- **FIRST-FIT** : kube-scheduler analogue, first node with room
- **GREEDY** : cheapest marginal cost per pod
- **GREEDY+LS** : greedy followed by best-improvement relocation search
- **GRASP** : randomized greedy + local search, multi-restart
- **REACTIVE-GRASP** : GRASP with adaptive alpha pool
- **MILP** (optional) : exact CBC baseline

Each configuration is timed over n_runs executions; the reported time is the
mean per execution in milliseconds.
"""

import sys
import os
import time
import logging
import argparse
import numpy as np
import pandas as pd
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from podgrasp.grasp.constructive import first_fit_construction, greedy_construction
from podgrasp.grasp.local_search import best_improvement_local_search
from podgrasp.grasp.orchestrator import run_grasp, run_reactive_grasp
from podgrasp.grasp.config import GraspParams, ALPHA_POOL, params_for_size, validate_params
from podgrasp.exact_milp.cflp_model import solve_exact
from podgrasp.utils.generate import generate_instance, benchmark_sizes, POD_SIZES, NODE_SIZES
from podgrasp.utils.metrics import solution_row, summarize_runs, gap_percent
from podgrasp.utils.save import save_results, summary_table


def greedy_with_local_search(cluster):
    greedy_construction(cluster)
    best_improvement_local_search(cluster)
    return cluster.to_solution()


def build_algorithms(params):
    return {
        "FIRST-FIT": lambda cluster: first_fit_construction(cluster),
        "GREEDY": lambda cluster: greedy_construction(cluster),
        "GREEDY+LS": greedy_with_local_search,
        "GRASP": lambda cluster: run_grasp(cluster, alpha=params.alpha, max_iterations=params.max_iterations,
                                           seed=params.seed, keep=params.keep).solution,
        "REACTIVE-GRASP": lambda cluster: run_reactive_grasp(
            cluster, alpha_pool=ALPHA_POOL, max_iterations=params.max_iterations, seed=params.seed,
            update_window=params_for_size(len(cluster.pods)).update_window, keep=params.keep).solution,
    }


def run_complete_benchmark(n_runs=10, params=None, max_pods=200, with_milp=False, milp_max_pods=100,
                           milp_time_limit=60, folder="results"):
    """
    Run every algorithm on every instance size up to max_pods.

    Args:
        n_runs (int): executions per configuration (timing is averaged)
        params (GraspParams): GRASP parameters (defaults if None)
        max_pods (int): largest pod count of the grid to run
        with_milp (bool): also solve instances up to milp_max_pods pods exactly

    Returns:
        pd.DataFrame: one row per (size, algorithm), or None if nothing ran
    """
    params = params or GraspParams()
    validate_params(params.alpha, params.max_iterations, params.seed, params.keep)
    algorithms = build_algorithms(params)
    sizes = [(p, n) for (p, n) in benchmark_sizes(POD_SIZES, NODE_SIZES) if p <= max_pods]

    logging.info("=" * 80)
    logging.info("POD ALLOCATION BENCHMARK")
    logging.info("=" * 80)
    logging.info(f"Protocol: {n_runs} runs per configuration, alpha={params.alpha}, "
                 f"iterations={params.max_iterations}, seed={params.seed}")
    logging.info(f"Sizes: {len(sizes)}, algorithms: {', '.join(algorithms)}")

    rows = []
    start_time = time.time()
    for num_pods, num_nodes in sizes:
        logging.info(f"\nTotal pods: {num_pods} and Total Nodes: {num_nodes}")
        cluster = generate_instance(num_pods, num_nodes, seed=params.seed)
        reference = None
        if with_milp and num_pods <= milp_max_pods:
            try:
                milp_start = time.perf_counter()
                exact = solve_exact(cluster, time_limit=milp_time_limit)
                milp_ms = (time.perf_counter() - milp_start) * 1000.0
                reference = exact['cost']
                rows.append({"algorithm": "MILP", "number of pods": num_pods, "number of nodes": num_nodes,
                             "solution cost": exact['cost'], "used nodes": len(set(exact['assignment'].values())),
                             "unassigned pods": num_pods - len(exact['assignment']), "time (ms)": milp_ms,
                             "gap (%)": 0.0 if exact['solved'] else None})
                logging.info(f"   MILP: status={exact['status']} cost={exact['cost']} time={milp_ms:.1f}ms")
            except Exception as e:
                logging.warning(f"   MILP failed: {e}")

        for alg_name, alg_func in algorithms.items():
            try:
                solution = None
                run_start = time.perf_counter()
                for _ in range(n_runs):
                    solution = alg_func(cluster)
                elapsed_ms = (time.perf_counter() - run_start) * 1000.0 / n_runs
                cluster.check_capacity()
            except Exception as e:
                logging.warning(f"   {alg_name} failed: {e}")
                continue
            row = solution_row(solution, num_pods, num_nodes, alg_name, elapsed_ms)
            row["gap (%)"] = gap_percent(solution.cost, reference)
            rows.append(row)
            logging.info(f"   {alg_name:15s} cost={solution.cost:10.1f} used={solution.opened_count:3d} "
                         f"unassigned={len(solution.unassigned):3d} time={elapsed_ms:.2f}ms")

    total_time = time.time() - start_time
    if not rows:
        logging.warning("\nNo results to save")
        return None
    df = pd.DataFrame(rows)
    logging.info("\n" + "=" * 80)
    logging.info(f"Benchmark finished in {total_time:.1f}s, {len(df)} records")
    logging.info(summary_table(df).to_string())
    for alg_name, group in df.groupby("algorithm"):
        stats = summarize_runs(group["solution cost"].tolist(), group["time (ms)"].tolist())
        logging.info(f"{alg_name:15s} mean cost={stats['mean_cost']:.1f} mean time={stats['mean_time']:.2f}ms")
    gaps = df["gap (%)"].dropna() if "gap (%)" in df else pd.Series(dtype=float)
    if len(gaps):
        logging.info(f"Mean gap vs MILP: {np.mean(gaps):.2f}%")
    filename = save_results(rows, name="benchmark", folder=folder)
    logging.info(f"\nResults saved: {filename}")
    return df


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--n_runs", type=int, default=10, help="Executions per configuration")
    parser.add_argument("--alpha", type=float, default=0.3)
    parser.add_argument("--iterations", type=int, default=10)
    parser.add_argument("--seed", type=int, default=100)
    parser.add_argument("--max_pods", type=int, default=200, help="Largest pod count of the size grid")
    parser.add_argument("--milp", action="store_true", help="Also solve small instances with the MILP model")
    parser.add_argument("--quiet", action="store_true", help="Only warnings and errors")
    args = parser.parse_args()

    if args.quiet:
        logging.basicConfig(level=logging.WARNING, format='%(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(message)s')

    params = GraspParams(alpha=args.alpha, max_iterations=args.iterations, seed=args.seed)
    df = run_complete_benchmark(n_runs=args.n_runs, params=params, max_pods=args.max_pods, with_milp=args.milp)
    if df is not None:
        logging.info("\nBenchmark done!")
    else:
        logging.warning("\nBenchmark failed")
