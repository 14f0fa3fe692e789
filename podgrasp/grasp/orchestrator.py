"""
GRASP drivers for pod-to-node allocation
========================================

Each restart = randomized greedy construction + best-improvement local search.
The cheapest local optimum over all restarts is kept.

- run_grasp: sequential, one random.Random(seed) shared by every restart.
  Identical (instance, alpha, seed, max_iterations) gives identical results.
- run_grasp_parallel: restarts on private cluster copies, one generator per
  restart derived from seed ^ iteration. Deterministic for a given seed, but
  not the same draw sequence as run_grasp.
- run_reactive_grasp: alpha drawn from a pool with weights adapted to the
  mean cost obtained by each value (Prais & Ribeiro, 2000).

Best retention ("keep"):
- "assignment": the full assignment of the best restart is stored and
  restored at the end; the returned cost equals the tracked best cost.
- "mask": only the opened-node mask and the cost are stored. The final
  assignment is rebuilt by reconstruct_from_mask, which only looks at
  allocation costs; its cost can differ from the tracked one. Both are
  reported in GraspResult.
"""
import logging
import random
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from podgrasp.core.errors import InvalidParameterError
from podgrasp.core.model import Solution
from podgrasp.grasp.config import ALPHA_POOL, validate_alpha, validate_params
from podgrasp.grasp.constructive import greedy_randomized_construction
from podgrasp.grasp.local_search import best_improvement_local_search

logger = logging.getLogger(__name__)


@dataclass
class GraspResult:
    solution: Solution
    best_cost: float
    reconstructed_cost: float
    best_iteration: int
    history: List[float]
    keep: str = 'assignment'
    alphas: List[float] = field(default_factory=list)

    @property
    def cost_mismatch(self) -> bool:
        return self.reconstructed_cost != self.best_cost


class _Incumbent:
    """Best restart seen so far. Only strictly cheaper restarts replace it."""

    def __init__(self, keep):
        self.keep = keep
        self.cost = float('inf')
        self.iteration = 0
        self.assignment: Optional[Dict[int, int]] = None
        self.mask: Optional[List[bool]] = None
        self.history: List[float] = []

    def offer(self, iteration, cost, assignment, mask):
        improved = cost < self.cost
        if improved:
            self.cost = cost
            self.iteration = iteration
            self.mask = list(mask)
            if self.keep == 'assignment':
                self.assignment = dict(assignment)
            logger.info(f"[GRASP] iteration {iteration}: new best cost {cost}")
        self.history.append(self.cost)
        return improved


def construct_and_improve(cluster, alpha, rng):
    """One GRASP restart on cluster. Returns the cost of the local optimum."""
    greedy_randomized_construction(cluster, alpha, rng)
    report = best_improvement_local_search(cluster)
    return report.final_cost


def reconstruct_from_mask(cluster, mask):
    """
    Rebuild an assignment from an opened-node mask.

    Reset the cluster, then give each pod (index order) to the open node with
    enough room and the lowest allocation cost, ties to the first node index.
    Opening costs and the move history of the search are not used.
    """
    cluster.reset()
    for pod in cluster.pods:
        best_node = None
        best_alloc = float('inf')
        for node in cluster.nodes:
            if not mask[node.index] or not node.can_accommodate(pod):
                continue
            if node.allocation_cost < best_alloc:
                best_alloc = node.allocation_cost
                best_node = node
        if best_node is not None:
            cluster.assign(best_node, pod)
    return cluster.to_solution()


def _finalize(cluster, incumbent, alphas=None):
    if incumbent.keep == 'assignment':
        cluster.restore(incumbent.assignment)
    else:
        reconstruct_from_mask(cluster, incumbent.mask)
    cluster.check_capacity()
    solution = cluster.to_solution()
    if solution.cost != incumbent.cost:
        logger.warning(f"[GRASP] reconstructed cost {solution.cost} differs from tracked best {incumbent.cost}")
    return GraspResult(
        solution=solution,
        best_cost=incumbent.cost,
        reconstructed_cost=solution.cost,
        best_iteration=incumbent.iteration,
        history=incumbent.history,
        keep=incumbent.keep,
        alphas=list(alphas or []),
    )


def run_grasp(cluster, alpha=0.3, max_iterations=10, seed=100, keep='assignment'):
    """
    Sequential GRASP with one shared pseudorandom stream.

    Args:
        cluster: Cluster (modified in place; holds the best assignment on return)
        alpha: RCL randomness factor in [0, 1]
        max_iterations: number of restarts (positive)
        seed: seed of the shared random.Random
        keep: "assignment" or "mask" (see module docstring)

    Returns:
        GraspResult

    Raises:
        InvalidParameterError: before any construction if a parameter is invalid
    """
    validate_params(alpha, max_iterations, seed, keep)
    rng = random.Random(seed)
    incumbent = _Incumbent(keep)
    for it in range(1, max_iterations + 1):
        cost = construct_and_improve(cluster, alpha, rng)
        logger.debug(f"[GRASP] iteration {it}/{max_iterations}: cost={cost}")
        incumbent.offer(it, cost, cluster.assignment, cluster.opened_mask())
    return _finalize(cluster, incumbent)


def _parallel_restart(cluster, alpha, seed, iteration):
    local = cluster.copy()
    rng = random.Random(seed ^ iteration)
    cost = construct_and_improve(local, alpha, rng)
    return iteration, cost, local.snapshot(), local.opened_mask()


def run_grasp_parallel(cluster, alpha=0.3, max_iterations=10, seed=100, keep='assignment', workers=4,
                       use_processes=False):
    """
    GRASP with independent restarts run concurrently.

    Every restart works on its own deep copy of the cluster with
    random.Random(seed ^ iteration); the shared cluster is only read while
    workers run. Results are folded into the incumbent one at a time, in
    iteration order, so the outcome does not depend on scheduling.

    Args:
        workers: pool size (positive)
        use_processes: ProcessPoolExecutor instead of threads

    Returns:
        GraspResult (cluster holds the best assignment on return)
    """
    validate_params(alpha, max_iterations, seed, keep)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers <= 0:
        raise InvalidParameterError(f"workers must be a positive integer, got {workers!r}")
    cluster.reset()
    executor_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor
    iterations = list(range(1, max_iterations + 1))
    incumbent = _Incumbent(keep)
    with executor_cls(max_workers=workers) as executor:
        results = executor.map(_parallel_restart, [cluster] * max_iterations, [alpha] * max_iterations,
                               [seed] * max_iterations, iterations)
        for iteration, cost, assignment, mask in results:
            logger.debug(f"[GRASP] restart {iteration}/{max_iterations}: cost={cost}")
            incumbent.offer(iteration, cost, assignment, mask)
    return _finalize(cluster, incumbent)


def run_reactive_grasp(cluster, alpha_pool=ALPHA_POOL, max_iterations=50, seed=100, update_window=8,
                       keep='assignment'):
    """
    Reactive GRASP: alpha chosen per restart from alpha_pool.

    Weights start uniform. Every update_window restarts, each alpha gets
    q = best_cost / mean_cost(alpha) (1.0 when its mean is zero, 0 when unused)
    and p = 0.1 + 0.9 * q / max(q), normalized. Alpha draws and constructions
    use the same shared random.Random(seed).

    Returns:
        GraspResult, with the alpha used at each restart in .alphas
    """
    if not alpha_pool:
        raise InvalidParameterError("alpha_pool must not be empty")
    for a in alpha_pool:
        validate_alpha(a)
    validate_params(alpha_pool[0], max_iterations, seed, keep)
    if isinstance(update_window, bool) or not isinstance(update_window, int) or update_window <= 0:
        raise InvalidParameterError(f"update_window must be a positive integer, got {update_window!r}")

    rng = random.Random(seed)
    p = np.ones(len(alpha_pool)) / len(alpha_pool)
    costs_by_alpha = {i: [] for i in range(len(alpha_pool))}
    incumbent = _Incumbent(keep)
    alphas = []
    for it in range(1, max_iterations + 1):
        k = rng.choices(range(len(alpha_pool)), weights=p.tolist())[0]
        alpha = alpha_pool[k]
        alphas.append(alpha)
        cost = construct_and_improve(cluster, alpha, rng)
        costs_by_alpha[k].append(cost)
        logger.debug(f"[RGRASP] iteration {it}/{max_iterations}: alpha={alpha} cost={cost}")
        incumbent.offer(it, cost, cluster.assignment, cluster.opened_mask())
        if it % update_window == 0:
            q = np.zeros(len(alpha_pool))
            for i, costs in costs_by_alpha.items():
                if not costs:
                    continue
                mean = float(np.mean(costs))
                q[i] = incumbent.cost / mean if mean > 0 else 1.0
            if q.max() > 0:
                p = 0.1 + 0.9 * (q / q.max())
            else:
                p = np.ones(len(alpha_pool))
            p /= p.sum()
            logger.debug(f"[RGRASP] weights updated: {np.round(p, 3).tolist()}")
    return _finalize(cluster, incumbent, alphas)
