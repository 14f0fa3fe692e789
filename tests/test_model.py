"""
Unit tests for the entity model (Pod, Node, Cluster, total_cost).
"""
import math

import pytest
from podgrasp.core.model import Pod, Node, Cluster, total_cost, verify_instance
from podgrasp.core.errors import CapacityViolationError, InvalidInstanceError


def make_cluster(capacities=(5, 5), demands=(3, 3, 3)):
    nodes = [Node(index=i, capacity=c, opening_cost=2.0 + i, allocation_cost=1.0) for i, c in enumerate(capacities)]
    pods = [Pod(index=j, demand=d) for j, d in enumerate(demands)]
    return Cluster(nodes, pods)


# 1) can_accommodate is usage + demand <= capacity
def test_can_accommodate_boundary():
    node = Node(index=0, capacity=5, opening_cost=0.0, allocation_cost=0.0)
    assert node.can_accommodate(Pod(0, 5)) is True
    assert node.can_accommodate(Pod(1, 6)) is False
    node.usage = 3
    assert node.can_accommodate(Pod(2, 2)) is True
    assert node.can_accommodate(Pod(3, 3)) is False


# 2) assign updates usage, pod list and table together
def test_assign_and_unassign_keep_counters_in_sync():
    cluster = make_cluster()
    node, pod = cluster.nodes[0], cluster.pods[1]
    cluster.assign(node, pod)
    assert node.usage == 3
    assert node.pods == [1]
    assert cluster.assignment == {1: 0}
    assert cluster.node_of(pod) is node
    assert node.is_open
    cluster.unassign(node, pod)
    assert node.usage == 0
    assert node.pods == []
    assert cluster.assignment == {}
    assert cluster.node_of(pod) is None
    assert not node.is_open


# 3) assigning past capacity is a hard failure and leaves state untouched
def test_assign_over_capacity_raises():
    cluster = make_cluster()
    node = cluster.nodes[0]
    cluster.assign(node, cluster.pods[0])
    with pytest.raises(CapacityViolationError):
        cluster.assign(node, cluster.pods[1])
    assert node.usage == 3
    assert cluster.assignment == {0: 0}


# 4) double assignment and unassigning from the wrong node are defects
def test_inconsistent_primitives_raise():
    cluster = make_cluster()
    cluster.assign(cluster.nodes[0], cluster.pods[0])
    with pytest.raises(RuntimeError):
        cluster.assign(cluster.nodes[1], cluster.pods[0])
    with pytest.raises(RuntimeError):
        cluster.unassign(cluster.nodes[1], cluster.pods[0])


# 5) reset clears every node and the table
def test_reset():
    cluster = make_cluster()
    cluster.assign(cluster.nodes[0], cluster.pods[0])
    cluster.assign(cluster.nodes[1], cluster.pods[1])
    cluster.reset()
    assert cluster.assignment == {}
    assert all(n.usage == 0 and n.pods == [] for n in cluster.nodes)
    assert cluster.unassigned_pods() == [0, 1, 2]


# 6) total cost: opening once per used node, allocation once per pod (not scaled by demand)
def test_total_cost_counts_flat_allocation():
    nodes = [Node(0, 100, 10.0, 2.0), Node(1, 100, 7.0, 3.0)]
    assert total_cost(nodes, {}) == 0.0
    assert total_cost(nodes, {0: 0, 1: 0, 2: 0}) == 10.0 + 3 * 2.0
    assert total_cost(nodes, {0: 0, 1: 1}) == 10.0 + 7.0 + 2.0 + 3.0


# 7) total_cost is pure: it does not read node usage
def test_total_cost_is_pure():
    cluster = make_cluster()
    cluster.assign(cluster.nodes[0], cluster.pods[0])
    table = cluster.snapshot()
    cluster.reset()
    assert total_cost(cluster.nodes, table) == 2.0 + 1.0
    assert cluster.total_cost() == 0.0


# 8) check_capacity detects counters drifting from the table
def test_check_capacity_detects_tampering():
    cluster = make_cluster()
    cluster.assign(cluster.nodes[0], cluster.pods[0])
    assert cluster.check_capacity() is True
    cluster.nodes[0].usage += 1
    with pytest.raises(CapacityViolationError):
        cluster.check_capacity()


# 9) restore replays a table; copy is fully independent
def test_restore_and_copy():
    cluster = make_cluster()
    cluster.restore({0: 1, 1: 0})
    assert cluster.opened_nodes() == [0, 1]
    assert cluster.opened_mask() == [True, True]
    clone = cluster.copy()
    clone.reset()
    assert cluster.assignment == {0: 1, 1: 0}
    assert cluster.nodes[1].usage == 3
    solution = cluster.to_solution()
    assert solution.unassigned == [2]
    assert solution.cost == 2.0 + 3.0 + 1.0 + 1.0


# 10) instance validation
def test_verify_instance_rejects_bad_data():
    with pytest.raises(InvalidInstanceError):
        verify_instance([Node(1, 5, 1.0, 1.0)], [])
    with pytest.raises(InvalidInstanceError):
        verify_instance([Node(0, -1, 1.0, 1.0)], [])
    with pytest.raises(InvalidInstanceError):
        verify_instance([Node(0, 5, -1.0, 1.0)], [])
    with pytest.raises(InvalidInstanceError):
        verify_instance([], [Pod(0, -2)])
    with pytest.raises(InvalidInstanceError):
        Cluster([], [Pod(0, 1), Pod(0, 1)])
    assert verify_instance([], []) is True


# 11) non-finite costs and boolean sizes are not valid instance data
@pytest.mark.parametrize("node", [
    Node(0, 5, math.inf, 1.0),
    Node(0, 5, 1.0, math.nan),
    Node(0, 5, -math.inf, 1.0),
    Node(0, True, 1.0, 1.0),
])
def test_verify_instance_rejects_non_finite_costs_and_bools(node):
    with pytest.raises(InvalidInstanceError):
        Cluster([node], [Pod(0, 1)])


def test_verify_instance_rejects_boolean_demand():
    with pytest.raises(InvalidInstanceError):
        Cluster([Node(0, 5, 1.0, 1.0)], [Pod(0, True)])


# 12) pods are immutable
def test_pod_is_frozen():
    pod = Pod(0, 3)
    with pytest.raises(Exception):
        pod.demand = 4
