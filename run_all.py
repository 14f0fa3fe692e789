#!/usr/bin/env python3
"""
Main execution script for the pod allocation benchmark
======================================================

Launches the complete benchmark comparison of first-fit, greedy,
greedy + local search, GRASP and reactive GRASP on the synthetic size grid.

Usage:
    python run_all.py
    python run_all.py --n_runs 5 --max_pods 1000 --milp

This script will:
1. Generate one instance per (pods, nodes) size with a fixed seed
2. Time every algorithm on it
3. Save a timestamped CSV file in results/
"""

import sys
import os
import logging
from datetime import datetime
import argparse

sys.path.append(os.path.dirname(os.path.abspath(__file__)))


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--n_runs", type=int, default=10)
    parser.add_argument("--alpha", type=float, default=0.3)
    parser.add_argument("--iterations", type=int, default=10)
    parser.add_argument("--seed", type=int, default=100)
    parser.add_argument("--max_pods", type=int, default=200)
    parser.add_argument("--milp", action="store_true")
    parser.add_argument("--quiet", action="store_true", help="Only warnings and errors")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO, format='%(message)s')

    from experiments.run_complete_benchmark import run_complete_benchmark
    from podgrasp.grasp.config import GraspParams

    try:
        print("=" * 60)
        print("POD ALLOCATION HEURISTICS BENCHMARK")
        print("=" * 60)
        print("Algorithms: FIRST-FIT, GREEDY, GREEDY+LS, GRASP, REACTIVE-GRASP" + (", MILP" if args.milp else ""))
        print(f"Sizes: up to {args.max_pods} pods")
        print(f"Protocol: {args.n_runs} runs per algorithm-size pair")
        print()

        start_time = datetime.now()
        print(f"Benchmark started at: {start_time}")
        print()

        params = GraspParams(alpha=args.alpha, max_iterations=args.iterations, seed=args.seed)
        df = run_complete_benchmark(n_runs=args.n_runs, params=params, max_pods=args.max_pods, with_milp=args.milp)

        duration = datetime.now() - start_time
        print()
        print("=" * 60)
        print("BENCHMARK COMPLETED")
        print("=" * 60)
        print(f"Duration: {duration}")
        print(f"Records: {0 if df is None else len(df)}")
        print("=" * 60)

    except ValueError as e:
        print(f"Invalid parameters: {e}")
        sys.exit(2)
    except Exception as e:
        print(f"Error during benchmark execution: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
