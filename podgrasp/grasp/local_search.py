"""
Best-improvement local search for pod-to-node allocation

Neighborhood: relocate one assigned pod to another node that can host it.
Each pass scans the whole neighborhood (pods in index order, then destination
nodes in index order), applies the single most negative move, and starts
over. The search stops at the first pass without a negative delta, which is a
local optimum. Every applied move strictly lowers the total cost, so the loop
terminates.
"""
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class Move:
    pod: object
    source: object
    destination: object
    delta: float


@dataclass
class LocalSearchReport:
    initial_cost: float
    final_cost: float
    moves: int


def relocation_delta(pod, source, destination):
    """
    Cost change of moving pod from source to destination.

    delta = - alloc(source) + alloc(destination)
            - open(source)      if the pod is the last one on source
            + open(destination) if destination holds no pod yet
    """
    delta = -source.allocation_cost + destination.allocation_cost
    if len(source.pods) == 1 and source.pods[0] == pod.index:
        delta -= source.opening_cost
    if not destination.is_open:
        delta += destination.opening_cost
    return delta


def find_best_relocation(cluster) -> Optional[Move]:
    """
    Full scan of the relocation neighborhood.

    Destinations are checked as if the pod had already left its node; since the
    destination is always a different node, that is usage + demand <= capacity.
    Ties keep the first move encountered.

    Returns:
        The improving move with the most negative delta, or None at a local optimum.
    """
    best = None
    best_delta = 0.0
    for pod in cluster.pods:
        source = cluster.node_of(pod)
        if source is None:
            continue
        for destination in cluster.nodes:
            if destination.index == source.index:
                continue
            if not destination.can_accommodate(pod):
                continue
            delta = relocation_delta(pod, source, destination)
            if delta < best_delta:
                best_delta = delta
                best = Move(pod, source, destination, delta)
    return best


def apply_move(cluster, move):
    cluster.unassign(move.source, move.pod)
    cluster.assign(move.destination, move.pod)


def best_improvement_local_search(cluster, max_moves=None):
    """
    Drive the cluster to a local optimum of the relocation neighborhood.

    Args:
        cluster: Cluster holding a feasible assignment (modified in place)
        max_moves: optional cap on applied moves (None = until convergence)

    Returns:
        LocalSearchReport with initial cost, final cost and applied moves
    """
    initial_cost = cluster.total_cost()
    moves = 0
    while max_moves is None or moves < max_moves:
        move = find_best_relocation(cluster)
        if move is None:
            break
        apply_move(cluster, move)
        moves += 1
        logger.debug(f"[LS] move {moves}: pod {move.pod.index} {move.source.index}->{move.destination.index} delta={move.delta}")
    final_cost = cluster.total_cost()
    logger.debug(f"[LS] {moves} moves, cost {initial_cost} -> {final_cost}")
    return LocalSearchReport(initial_cost=initial_cost, final_cost=final_cost, moves=moves)
