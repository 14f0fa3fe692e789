"""
Exact MILP baseline: capacitated facility location formulation of the
pod-to-node allocation problem, solved with pulp (CBC).

    min  sum_i open_i * x_i + sum_i sum_j alloc_i * y_ij
    s.t. sum_i x_i >= 1                       (at least one node, when there are pods)
         y_ij <= x_i                          (assign only to open nodes)
         sum_i y_ij == 1          for each j  (every pod placed exactly once)
         sum_j demand_j * y_ij <= capacity_i * x_i
         x, y binary

Unlike the heuristics, the model must place every pod; an instance where that
is impossible is reported as not solved. Only used as an external cost
reference: the engine never imports this module.
"""
import logging
from typing import Any, Dict, Optional, Tuple

import pulp
from pulp import PULP_CBC_CMD

from podgrasp.core.model import total_cost

logger = logging.getLogger(__name__)

DEFAULT_GAP = 0.01


def build_model(cluster) -> Tuple[pulp.LpProblem, Dict[str, Any]]:
    node_ids = [n.index for n in cluster.nodes]
    pod_ids = [p.index for p in cluster.pods]

    model = pulp.LpProblem("nodePodsAllocation", pulp.LpMinimize)

    x = pulp.LpVariable.dicts('x', node_ids, cat='Binary')
    y = pulp.LpVariable.dicts('y', (node_ids, pod_ids), cat='Binary')

    model += pulp.lpSum(
        n.opening_cost * x[n.index] + pulp.lpSum(n.allocation_cost * y[n.index][j] for j in pod_ids)
        for n in cluster.nodes
    ), 'Total_cost'

    if pod_ids:
        model += pulp.lpSum(x[i] for i in node_ids) >= 1, 'min_nodes'
    for i in node_ids:
        for j in pod_ids:
            model += y[i][j] <= x[i], f'open_{i}_{j}'
    for j in pod_ids:
        model += pulp.lpSum(y[i][j] for i in node_ids) == 1, f'serve_{j}'
    for n in cluster.nodes:
        model += pulp.lpSum(p.demand * y[n.index][p.index] for p in cluster.pods) <= n.capacity * x[n.index], f'capacity_{n.index}'

    return model, {'x': x, 'y': y}


def solve_model(model: pulp.LpProblem, time_limit: Optional[int] = None, gap_limit: Optional[float] = DEFAULT_GAP,
                msg: bool = False) -> Tuple[bool, str]:
    """
    Solve with CBC.

    Returns:
        (solved, status): solved is True when the status is Optimal, i.e. CBC
        proved optimality within gap_limit.
    """
    time_limit_msg = f" (limit: {time_limit}s)" if time_limit else " (no time limit)"
    logger.info(f"[MILP] Using CBC{time_limit_msg}")
    if gap_limit is not None and gap_limit > 0:
        solver = PULP_CBC_CMD(msg=msg, timeLimit=time_limit, gapRel=gap_limit)
    else:
        solver = PULP_CBC_CMD(msg=msg, timeLimit=time_limit)
    model.solve(solver)
    status = pulp.LpStatus[model.status]
    logger.info(f"[MILP] Status: {status}")
    return status == 'Optimal', status


def extract_assignment(cluster, vars: Dict[str, Any]) -> Dict[int, int]:
    """Pod index -> node index from the y variables of a solved model."""
    y = vars['y']
    assignment = {}
    for p in cluster.pods:
        for n in cluster.nodes:
            value = pulp.value(y[n.index][p.index])
            if value is not None and value > 0.5:
                assignment[p.index] = n.index
                break
    return assignment


def solve_exact(cluster, time_limit: Optional[int] = None, gap_limit: Optional[float] = DEFAULT_GAP) -> Dict[str, Any]:
    """
    Build, solve and cross-check.

    The returned cost is recomputed with total_cost from the extracted
    assignment, so it is directly comparable with the heuristics.

    Returns:
        dict with keys solved, status, cost (None unless solved), objective, assignment
    """
    if not cluster.pods:
        return {'solved': True, 'status': 'Optimal', 'cost': 0.0, 'objective': 0.0, 'assignment': {}}
    model, vars = build_model(cluster)
    solved, status = solve_model(model, time_limit=time_limit, gap_limit=gap_limit)
    if not solved:
        logger.warning(f"[MILP] no proven solution ({status})")
        return {'solved': False, 'status': status, 'cost': None, 'objective': None, 'assignment': {}}
    assignment = extract_assignment(cluster, vars)
    cost = total_cost(cluster.nodes, assignment)
    objective = pulp.value(model.objective)
    if objective is not None and abs(cost - objective) > 1e-6 * max(1.0, abs(objective)):
        logger.warning(f"[MILP] objective {objective} and recomputed cost {cost} disagree")
    return {'solved': True, 'status': status, 'cost': cost, 'objective': objective, 'assignment': assignment}
