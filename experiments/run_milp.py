#python experiments/run_milp.py --instance data/instances/example.json
#python experiments/run_milp.py --pods 50 --nodes 10 --time_limit 600
#python experiments/run_milp.py --pods 100 --nodes 20 --gap_limit 0.05

import sys
import os
import time
import argparse
import logging
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from podgrasp.exact_milp.cflp_model import solve_exact
from podgrasp.grasp.orchestrator import run_grasp
from podgrasp.utils.generate import generate_instance
from podgrasp.utils.instance_io import load_instance_from_json
from podgrasp.utils.metrics import gap_percent

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="MILP baseline vs GRASP on one instance")
    parser.add_argument("--instance", type=str, default=None, help="Instance JSON file (generated instance if omitted)")
    parser.add_argument("--pods", type=int, default=50, help="Pods of the generated instance")
    parser.add_argument("--nodes", type=int, default=10, help="Nodes of the generated instance")
    parser.add_argument("--seed", type=int, default=100)
    parser.add_argument("--time_limit", type=int, default=600, help="Time limit in seconds (0 for no limit)")
    parser.add_argument("--gap_limit", type=float, default=0.01, help="Relative gap threshold (e.g., 0.01 for 1%%)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(message)s')

    if args.instance:
        if not os.path.exists(args.instance):
            print(f" File not found: {args.instance}")
            sys.exit(1)
        cluster = load_instance_from_json(args.instance)
    else:
        cluster = generate_instance(args.pods, args.nodes, seed=args.seed)

    print(f"Running MILP model on {cluster}")
    print(f"Time limit: {'none' if args.time_limit == 0 else f'{args.time_limit}s'}")
    if args.gap_limit is not None and args.gap_limit > 0:
        print(f"Gap criterion: {args.gap_limit*100:.2f}% (mipgap)")

    start = time.perf_counter()
    exact = solve_exact(cluster, time_limit=(args.time_limit or None),
                        gap_limit=(args.gap_limit if (args.gap_limit or 0) > 0 else None))
    milp_time = time.perf_counter() - start

    start = time.perf_counter()
    result = run_grasp(cluster, seed=args.seed)
    grasp_time = time.perf_counter() - start

    print(f"MILP  : status={exact['status']} cost={exact['cost']} time={milp_time:.2f}s")
    print(f"GRASP : cost={result.best_cost} used nodes={result.solution.opened_count} "
          f"unassigned={len(result.solution.unassigned)} time={grasp_time:.2f}s")
    gap = gap_percent(result.best_cost, exact['cost'])
    if gap is not None:
        print(f"Gap   : {gap:.2f}%")
