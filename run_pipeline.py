"""
Pod allocation pipeline: solve one instance and report

Usage:
    python run_pipeline.py --instance data/instances/example.json
    python run_pipeline.py --pods 200 --nodes 20 --algorithm grasp --alpha 0.3 --iterations 20
    python run_pipeline.py --pods 200 --nodes 20 --algorithm grasp --workers 4
    python run_pipeline.py --example --algorithm greedy --verbose

Pipeline:
    1. Load an instance (JSON) or generate one
    2. Solve it with the chosen algorithm
    3. Check the capacity invariant and print the solution summary
    4. Append the run to results/run_logs/grasp_runs.jsonl
"""

import os
import sys
import time
import logging
import argparse

from podgrasp.grasp.config import load_params, validate_params
from podgrasp.grasp.constructive import first_fit_construction, greedy_construction
from podgrasp.grasp.local_search import best_improvement_local_search
from podgrasp.grasp.orchestrator import run_grasp, run_grasp_parallel, run_reactive_grasp
from podgrasp.utils.generate import generate_instance
from podgrasp.utils.instance_io import example_instance, load_instance_from_json
from podgrasp.utils.log_utils import log_run, RUN_LOG_PATH

ALGORITHMS = ("first-fit", "greedy", "greedy-ls", "grasp", "reactive")


# --- INSTANCE ---
def load_cluster(args):
    """Instance from --example, --instance or generated from --pods/--nodes."""
    if args.example:
        return example_instance(), "example"
    if args.instance:
        return load_instance_from_json(args.instance), os.path.splitext(os.path.basename(args.instance))[0]
    return generate_instance(args.pods, args.nodes, seed=args.seed), f"generated_{args.pods}x{args.nodes}"


# --- SOLVE ---
def solve(cluster, algorithm, params):
    """Returns (solution, grasp_result or None)."""
    if algorithm == "first-fit":
        return first_fit_construction(cluster), None
    if algorithm == "greedy":
        return greedy_construction(cluster), None
    if algorithm == "greedy-ls":
        greedy_construction(cluster)
        best_improvement_local_search(cluster)
        return cluster.to_solution(), None
    if algorithm == "grasp":
        if params.workers > 1:
            result = run_grasp_parallel(cluster, alpha=params.alpha, max_iterations=params.max_iterations,
                                        seed=params.seed, keep=params.keep, workers=params.workers)
        else:
            result = run_grasp(cluster, alpha=params.alpha, max_iterations=params.max_iterations,
                               seed=params.seed, keep=params.keep)
        return result.solution, result
    if algorithm == "reactive":
        result = run_reactive_grasp(cluster, max_iterations=params.max_iterations, seed=params.seed, keep=params.keep)
        return result.solution, result
    raise ValueError(f"Unknown algorithm: {algorithm}")


def print_summary(name, algorithm, solution, result, elapsed):
    print(f"\n=== {algorithm.upper()} on {name} ===")
    print(f"Used nodes: {solution.opened_count} {solution.opened}")
    print(f"Solution cost: {solution.cost}")
    print(f"Unassigned pods: {len(solution.unassigned)}" + (f" {solution.unassigned}" if solution.unassigned else ""))
    if result is not None:
        print(f"Tracked best cost: {result.best_cost} (iteration {result.best_iteration})")
        if result.cost_mismatch:
            print(f"Reconstructed cost differs from tracked best: {result.reconstructed_cost}")
    print(f"Time taken: {elapsed * 1000.0:.1f} ms")


def main():
    parser = argparse.ArgumentParser(description="Pod-to-node allocation with GRASP")
    parser.add_argument("--instance", type=str, default=None, help="Instance JSON file")
    parser.add_argument("--example", action="store_true", help="Use the 2-node / 3-pod toy instance")
    parser.add_argument("--pods", type=int, default=100)
    parser.add_argument("--nodes", type=int, default=10)
    parser.add_argument("--algorithm", choices=ALGORITHMS, default="grasp")
    parser.add_argument("--config", type=str, default="data/grasp_params.json", help="GRASP parameters JSON")
    parser.add_argument("--alpha", type=float, default=None)
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--keep", choices=("assignment", "mask"), default=None)
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format='%(asctime)s %(message)s')

    try:
        params = load_params(args.config)
        for field_name, value in (("alpha", args.alpha), ("max_iterations", args.iterations), ("seed", args.seed),
                                  ("workers", args.workers), ("keep", args.keep)):
            if value is not None:
                setattr(params, field_name, value)
        validate_params(params.alpha, params.max_iterations, params.seed, params.keep)
        if params.workers <= 0:
            raise ValueError(f"workers must be positive, got {params.workers}")
        args.seed = params.seed
        cluster, name = load_cluster(args)
    except (ValueError, OSError) as e:
        print(f"[ERROR] {e}")
        sys.exit(2)

    logging.info(f"Loaded instance {name}: {len(cluster.nodes)} nodes, {len(cluster.pods)} pods")
    start = time.perf_counter()
    solution, result = solve(cluster, args.algorithm, params)
    elapsed = time.perf_counter() - start
    cluster.check_capacity()

    print_summary(name, args.algorithm, solution, result, elapsed)
    if result is not None:
        log_run(result, {"instance": name, "algorithm": args.algorithm, **vars(params)})
        logging.info(f"Run appended to {RUN_LOG_PATH}")


if __name__ == "__main__":
    main()
