"""
Synthetic instance generation for benchmarks.

Value ranges (integers, drawn uniformly, bounds inclusive):
  - node capacity:    [num_pods // num_nodes + 1, 2 * num_pods]
  - pod demand:       [1, 10]
  - opening cost:     [1, 4 * num_nodes]
  - allocation cost:  [1, 4 * num_nodes]
"""
import numpy as np

from podgrasp.core.model import Cluster, Node, Pod

POD_SIZES = (10, 50, 100, 200, 500, 1000, 5000, 10000)
NODE_SIZES = (5, 10, 20, 50, 100, 200)

DEMAND_MIN = 1
DEMAND_MAX = 10


def generate_instance(num_pods, num_nodes, seed=100):
    """
    Random instance, reproducible from seed.

    Nodes are drawn first (capacity, opening cost, allocation cost per node),
    then pod demands, all from one numpy Generator.

    Returns:
        Cluster with an empty assignment
    """
    if num_pods < 0 or num_nodes < 0:
        raise ValueError(f"Sizes must be non-negative, got pods={num_pods}, nodes={num_nodes}")
    rng = np.random.default_rng(seed)
    nodes = []
    if num_nodes:
        capacity_min = num_pods // num_nodes + 1
        capacity_max = max(num_pods * 2, capacity_min)
        cost_max = 4 * num_nodes
        for i in range(num_nodes):
            capacity = int(rng.integers(capacity_min, capacity_max, endpoint=True))
            opening_cost = float(rng.integers(1, cost_max, endpoint=True))
            allocation_cost = float(rng.integers(1, cost_max, endpoint=True))
            nodes.append(Node(index=i, capacity=capacity, opening_cost=opening_cost, allocation_cost=allocation_cost))
    demands = rng.integers(DEMAND_MIN, DEMAND_MAX, size=num_pods, endpoint=True)
    pods = [Pod(index=j, demand=int(d)) for j, d in enumerate(demands)]
    return Cluster(nodes, pods)


def benchmark_sizes(pod_sizes=POD_SIZES, node_sizes=NODE_SIZES):
    """(num_pods, num_nodes) grid; 5 nodes is only paired with 10 pods."""
    pairs = []
    for num_pods in pod_sizes:
        for num_nodes in node_sizes:
            if num_nodes == 5 and num_pods != 10:
                continue
            pairs.append((num_pods, num_nodes))
    return pairs
