"""
Tests for the constructive heuristics (first-fit, greedy, randomized greedy / RCL).
"""
import random

import pytest
from podgrasp.core.model import Pod, Node, Cluster
from podgrasp.core.errors import InvalidParameterError
from podgrasp.grasp.constructive import (
    build_rcl, feasible_candidates, first_fit_construction, greedy_construction, greedy_randomized_construction
)
from podgrasp.utils.generate import generate_instance
from podgrasp.utils.instance_io import example_instance


# 1) Two nodes, three pods of demand 3: pod0->N0, pod1->N1, pod2 unassigned, cost 7
def test_greedy_example_scenario():
    cluster = example_instance()
    solution = greedy_construction(cluster)
    assert solution.assignment == {0: 0, 1: 1}
    assert solution.unassigned == [2]
    assert solution.opened == [0, 1]
    assert solution.cost == 7.0
    assert cluster.check_capacity()


# 2) Greedy is deterministic
def test_greedy_is_deterministic():
    first = greedy_construction(generate_instance(60, 10, seed=3))
    second = greedy_construction(generate_instance(60, 10, seed=3))
    assert first == second


# 3) Ties go to the lowest node index
def test_greedy_tie_breaks_by_node_index():
    nodes = [Node(i, 10, 1.0, 1.0) for i in range(3)]
    cluster = Cluster(nodes, [Pod(0, 1)])
    assert greedy_construction(cluster).assignment == {0: 0}


# 4) Once a node is open, its marginal cost drops to the allocation cost
def test_greedy_prefers_already_open_node():
    nodes = [Node(0, 10, 5.0, 1.0), Node(1, 10, 2.0, 2.0)]
    cluster = Cluster(nodes, [Pod(0, 1), Pod(1, 1)])
    solution = greedy_construction(cluster)
    # pod0: N0=6, N1=4 -> N1 ; pod1: N0=6, N1=2 -> N1
    assert solution.assignment == {0: 1, 1: 1}
    assert solution.cost == 2.0 + 2.0 + 2.0


# 5) Degenerate instances
def test_degenerate_instances():
    no_pods = Cluster([Node(0, 5, 1.0, 1.0)], [])
    solution = greedy_construction(no_pods)
    assert solution.cost == 0.0 and solution.opened == [] and solution.assignment == {}
    no_nodes = Cluster([], [Pod(0, 1), Pod(1, 2)])
    solution = greedy_construction(no_nodes)
    assert solution.cost == 0.0 and solution.unassigned == [0, 1]
    solution = greedy_randomized_construction(no_nodes, 0.5, random.Random(1))
    assert solution.cost == 0.0 and solution.unassigned == [0, 1]


# 6) An oversized pod is skipped by every constructor
@pytest.mark.parametrize("construct", [
    first_fit_construction,
    greedy_construction,
    lambda c: greedy_randomized_construction(c, 1.0, random.Random(0)),
])
def test_oversized_pod_left_unassigned(construct):
    nodes = [Node(0, 10, 1.0, 1.0), Node(1, 8, 1.0, 1.0)]
    cluster = Cluster(nodes, [Pod(0, 4), Pod(1, 11), Pod(2, 3)])
    solution = construct(cluster)
    assert solution.unassigned == [1]
    assert cluster.check_capacity()


# 7) First-fit ignores costs
def test_first_fit_ignores_costs():
    nodes = [Node(0, 4, 100.0, 100.0), Node(1, 10, 0.0, 0.0)]
    cluster = Cluster(nodes, [Pod(0, 3), Pod(1, 3)])
    solution = first_fit_construction(cluster)
    assert solution.assignment == {0: 0, 1: 1}


# 8) RCL boundaries
def test_build_rcl_boundaries():
    candidates = [("a", 3.0), ("b", 1.0), ("c", 1.0), ("d", 2.0)]
    assert build_rcl(candidates, 0.0) == ["b", "c"]
    assert build_rcl(candidates, 1.0) == ["b", "c", "d", "a"]
    assert build_rcl(candidates, 0.5) == ["b", "c", "d"]
    assert build_rcl([("z", 4.2)], 0.0) == ["z"]
    assert build_rcl([], 0.3) == []


# 9) alpha=1 keeps every candidate even with awkward float ranges
def test_build_rcl_alpha_one_keeps_all_float_costs():
    candidates = [("a", 0.1), ("b", 0.3), ("c", 0.7000000000000001), ("d", 1e-17)]
    assert sorted(build_rcl(candidates, 1.0)) == ["a", "b", "c", "d"]


# 10) feasible candidates carry the marginal cost
def test_feasible_candidates():
    cluster = example_instance()
    cluster.assign(cluster.nodes[0], cluster.pods[0])
    candidates = feasible_candidates(cluster, cluster.pods[1])
    assert [(n.index, c) for n, c in candidates] == [(1, 4.0)]


# 11) alpha=0 without ties reproduces greedy
def test_randomized_alpha_zero_matches_greedy_without_ties():
    cluster = example_instance()
    randomized = greedy_randomized_construction(cluster, 0.0, random.Random(42))
    assert randomized == greedy_construction(example_instance())


# 12) One candidate per pod: exactly one index draw per pod
def test_singleton_candidates_consume_one_draw_per_pod():
    cluster = Cluster([Node(0, 100, 1.0, 1.0)], [Pod(j, 1) for j in range(3)])
    rng = random.Random(9)
    reference = random.Random(9)
    greedy_randomized_construction(cluster, 0.7, rng)
    for _ in range(3):
        reference.randrange(1)
    assert rng.getstate() == reference.getstate()


# 13) The shared generator keeps advancing across calls
def test_randomized_uses_caller_stream():
    rng_a, rng_b = random.Random(5), random.Random(5)
    first_a = greedy_randomized_construction(generate_instance(40, 10, seed=1), 1.0, rng_a)
    second_a = greedy_randomized_construction(generate_instance(40, 10, seed=1), 1.0, rng_a)
    first_b = greedy_randomized_construction(generate_instance(40, 10, seed=1), 1.0, rng_b)
    assert first_a == first_b
    assert rng_a.getstate() != rng_b.getstate()
    assert second_a.assignment is not None


# 14) Feasibility holds on random instances for any alpha
@pytest.mark.parametrize("alpha", [0.0, 0.3, 1.0])
def test_randomized_feasibility(alpha):
    cluster = generate_instance(100, 10, seed=11)
    greedy_randomized_construction(cluster, alpha, random.Random(2))
    assert cluster.check_capacity()


# 15) alpha is validated
def test_randomized_rejects_bad_alpha():
    with pytest.raises(InvalidParameterError):
        greedy_randomized_construction(example_instance(), 1.5, random.Random(0))
