"""
Constructive heuristics for pod-to-node allocation
==================================================

Three ways to build an initial assignment on a Cluster:

- first_fit_construction: kube-scheduler style, first node with room wins
  (costs ignored, reference baseline)
- greedy_construction: cheapest marginal cost per pod, deterministic
- greedy_randomized_construction: GRASP construction phase with a
  restricted candidate list (RCL) controlled by alpha

Marginal cost of a node for the next pod = opening cost (only while the node
holds no pod) + allocation cost. Pods are processed in index order; a pod that
fits nowhere stays unassigned.

Reference: Feo & Resende (1995) "Greedy Randomized Adaptive Search Procedures."
Journal of Global Optimization 6, pp. 109-133.
"""
import logging

from podgrasp.grasp.config import validate_alpha

logger = logging.getLogger(__name__)


def feasible_candidates(cluster, pod):
    """(node, marginal cost) for every node that can still host the pod, in node index order."""
    return [(node, node.marginal_cost()) for node in cluster.nodes if node.can_accommodate(pod)]


def first_fit_construction(cluster):
    """
    Baseline placement: each pod goes to the first node (index order) with enough room.

    Returns:
        Solution of the resulting state
    """
    cluster.reset()
    for pod in cluster.pods:
        for node in cluster.nodes:
            if node.can_accommodate(pod):
                cluster.assign(node, pod)
                break
    solution = cluster.to_solution()
    logger.debug(f"[FIRST-FIT] cost={solution.cost} opened={solution.opened_count} unassigned={len(solution.unassigned)}")
    return solution


def greedy_construction(cluster):
    """
    Deterministic greedy: every pod goes to its cheapest feasible node.

    Ties are broken by node index (the first node reaching the minimum wins).
    Identical input always yields identical output.

    Args:
        cluster: Cluster to fill (reset first)

    Returns:
        Solution of the resulting state
    """
    cluster.reset()
    for pod in cluster.pods:
        best_node = None
        best_cost = float('inf')
        for node in cluster.nodes:
            if not node.can_accommodate(pod):
                continue
            cost = node.marginal_cost()
            if cost < best_cost:
                best_cost = cost
                best_node = node
        if best_node is None:
            logger.debug(f"[GREEDY] pod {pod.index} (demand={pod.demand}) fits on no node")
            continue
        cluster.assign(best_node, pod)
    solution = cluster.to_solution()
    logger.debug(f"[GREEDY] cost={solution.cost} opened={solution.opened_count} unassigned={len(solution.unassigned)}")
    return solution


def build_rcl(candidates, alpha):
    """
    Restricted candidate list from (node, cost) pairs.

    Candidates are sorted by cost (stable, so ties keep node index order) and
    the ones within alpha of the min-to-max range are kept:
    cost <= min + alpha * (max - min). The comparison is done on the offset
    from the minimum so that alpha=0 keeps exactly the minimum-cost candidates
    and alpha=1 keeps all of them.

    Returns:
        List of nodes, cheapest first. Empty only if candidates is empty.
    """
    if not candidates:
        return []
    ordered = sorted(candidates, key=lambda nc: nc[1])
    min_cost = ordered[0][1]
    max_cost = ordered[-1][1]
    limit = alpha * (max_cost - min_cost)
    return [node for node, cost in ordered if cost - min_cost <= limit]


def greedy_randomized_construction(cluster, alpha, rng):
    """
    GRASP construction phase.

    For each pod, the feasible nodes form the candidate list; one node is drawn
    uniformly from the RCL using the caller's generator. The generator is not
    reseeded here: its state keeps advancing across calls, which is what makes
    a sequence of restarts reproducible from a single seed.

    - alpha=0 : pure greedy (random choice among tied minima only)
    - alpha=1 : uniform over every feasible node

    Args:
        cluster: Cluster to fill (reset first)
        alpha: randomness factor in [0, 1]
        rng: random.Random shared by the caller

    Returns:
        Solution of the resulting state
    """
    validate_alpha(alpha)
    cluster.reset()
    for pod in cluster.pods:
        candidates = feasible_candidates(cluster, pod)
        if not candidates:
            continue
        rcl = build_rcl(candidates, alpha)
        chosen = rcl[rng.randrange(len(rcl))]
        cluster.assign(chosen, pod)
    return cluster.to_solution()
