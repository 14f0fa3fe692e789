import json
import os

from podgrasp.core.errors import InvalidInstanceError
from podgrasp.core.model import Cluster, Node, Pod


def example_instance():
    """
    Toy instance for testing the constructors.

    Node0(capacity=5, opening=2, allocation=1), Node1(capacity=5, opening=3, allocation=1),
    three pods of demand 3. Greedy places pod0 on Node0, pod1 on Node1 and
    cannot place pod2: cost 7.

    Returns:
        Cluster
    """
    nodes = [
        Node(index=0, capacity=5, opening_cost=2.0, allocation_cost=1.0),
        Node(index=1, capacity=5, opening_cost=3.0, allocation_cost=1.0),
    ]
    pods = [Pod(index=j, demand=3) for j in range(3)]
    return Cluster(nodes, pods)


def cluster_from_dict(data):
    """
    Build a Cluster from a plain dict.
    Expected format: {"nodes": [{"index": 0, "capacity": 5, "opening_cost": 2.0, "allocation_cost": 1.0}, ...],
                     "pods": [{"index": 0, "demand": 3}, ...]}
    Missing "index" fields default to the list position.
    """
    try:
        nodes = [
            Node(
                index=int(n.get("index", i)),
                capacity=n["capacity"],
                opening_cost=float(n["opening_cost"]),
                allocation_cost=float(n["allocation_cost"]),
            )
            for i, n in enumerate(data.get("nodes", []))
        ]
        pods = [Pod(index=int(p.get("index", j)), demand=p["demand"]) for j, p in enumerate(data.get("pods", []))]
    except KeyError as e:
        raise InvalidInstanceError(f"Missing field in instance data: {e}") from e
    nodes.sort(key=lambda n: n.index)
    pods.sort(key=lambda p: p.index)
    return Cluster(nodes, pods)


def cluster_to_dict(cluster):
    return {
        "nodes": [
            {"index": n.index, "capacity": n.capacity, "opening_cost": n.opening_cost, "allocation_cost": n.allocation_cost}
            for n in cluster.nodes
        ],
        "pods": [{"index": p.index, "demand": p.demand} for p in cluster.pods],
    }


def load_instance_from_json(json_path):
    """
    Load an instance from a JSON file (see cluster_from_dict for the format).

    Returns:
        Cluster with an empty assignment
    """
    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return cluster_from_dict(data)


def save_instance_to_json(cluster, json_path):
    folder = os.path.dirname(json_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(cluster_to_dict(cluster), f, indent=2)
    return json_path
