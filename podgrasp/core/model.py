"""
Entity model for pod-to-node allocation.

Pods are immutable demand records. Nodes carry capacity, costs and usage
bookkeeping. A Cluster owns both lists plus the assignment table
(pod index -> node index), the single source of truth for where a pod lives.
Node usage and the table are only ever changed together, through
Cluster.assign / Cluster.unassign / Cluster.reset.
"""
from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from podgrasp.core.errors import CapacityViolationError, InvalidInstanceError


@dataclass(frozen=True)
class Pod:
    index: int
    demand: int


@dataclass
class Node:
    index: int
    capacity: int
    opening_cost: float
    allocation_cost: float
    usage: int = 0
    pods: List[int] = field(default_factory=list)

    @property
    def is_open(self) -> bool:
        return len(self.pods) > 0

    def can_accommodate(self, pod: Pod) -> bool:
        return self.usage + pod.demand <= self.capacity

    def marginal_cost(self) -> float:
        """Cost of placing one more pod here: opening cost if still closed, plus allocation cost."""
        opening = self.opening_cost if not self.is_open else 0.0
        return opening + self.allocation_cost

    def reset(self) -> None:
        self.pods.clear()
        self.usage = 0

    def _add_pod(self, pod: Pod) -> None:
        self.pods.append(pod.index)
        self.usage += pod.demand

    def _remove_pod(self, pod: Pod) -> None:
        self.pods.remove(pod.index)
        self.usage -= pod.demand


@dataclass
class Solution:
    """Snapshot of an allocation: who went where, what it costs, who was left out."""
    assignment: Dict[int, int]
    opened: List[int]
    cost: float
    unassigned: List[int]

    @property
    def opened_count(self) -> int:
        return len(self.opened)


def verify_instance(nodes: Sequence[Node], pods: Sequence[Pod]) -> bool:
    """Check instance data before any run. Raises InvalidInstanceError."""
    for position, node in enumerate(nodes):
        if node.index != position:
            raise InvalidInstanceError(f"Node at position {position} has index {node.index}")
        if isinstance(node.capacity, bool) or not isinstance(node.capacity, int) or node.capacity < 0:
            raise InvalidInstanceError(f"Node {node.index}: capacity must be a non-negative integer, got {node.capacity!r}")
        for cost in (node.opening_cost, node.allocation_cost):
            if isinstance(cost, bool) or not isinstance(cost, (int, float)) or not math.isfinite(cost) or cost < 0:
                raise InvalidInstanceError(f"Node {node.index}: costs must be finite and non-negative, got {cost!r}")
    for position, pod in enumerate(pods):
        if pod.index != position:
            raise InvalidInstanceError(f"Pod at position {position} has index {pod.index}")
        if isinstance(pod.demand, bool) or not isinstance(pod.demand, int) or pod.demand < 0:
            raise InvalidInstanceError(f"Pod {pod.index}: demand must be a non-negative integer, got {pod.demand!r}")
    return True


def total_cost(nodes: Sequence[Node], assignment: Dict[int, int]) -> float:
    """
    Total cost of an assignment table.

    Sum of opening costs of the nodes that hold at least one pod (ascending node
    index) plus the allocation cost of the holding node for every assigned pod
    (ascending pod index). Unassigned pods cost nothing. Pure: node usage is not read.
    """
    cost = 0.0
    for node_index in sorted(set(assignment.values())):
        cost += nodes[node_index].opening_cost
    for pod_index in sorted(assignment):
        cost += nodes[assignment[pod_index]].allocation_cost
    return cost


class Cluster:
    """Mutable allocation state of one problem instance."""

    def __init__(self, nodes: Sequence[Node], pods: Sequence[Pod]):
        verify_instance(nodes, pods)
        self.nodes: List[Node] = list(nodes)
        self.pods: List[Pod] = list(pods)
        self.assignment: Dict[int, int] = {}
        for node in self.nodes:
            node.reset()

    def __repr__(self) -> str:
        return f"Cluster(nodes={len(self.nodes)}, pods={len(self.pods)}, assigned={len(self.assignment)})"

    # -- primitives -------------------------------------------------------

    def assign(self, node: Node, pod: Pod) -> None:
        if pod.index in self.assignment:
            raise RuntimeError(f"Pod {pod.index} is already assigned to node {self.assignment[pod.index]}")
        if not node.can_accommodate(pod):
            raise CapacityViolationError(
                f"Pod {pod.index} (demand={pod.demand}) does not fit on node {node.index} "
                f"(usage={node.usage}, capacity={node.capacity})"
            )
        node._add_pod(pod)
        self.assignment[pod.index] = node.index

    def unassign(self, node: Node, pod: Pod) -> None:
        if self.assignment.get(pod.index) != node.index:
            raise RuntimeError(f"Pod {pod.index} is not assigned to node {node.index}")
        node._remove_pod(pod)
        del self.assignment[pod.index]

    def reset(self) -> None:
        for node in self.nodes:
            node.reset()
        self.assignment.clear()

    # -- queries ----------------------------------------------------------

    def node_of(self, pod: Pod) -> Optional[Node]:
        node_index = self.assignment.get(pod.index)
        return None if node_index is None else self.nodes[node_index]

    def opened_nodes(self) -> List[int]:
        return [node.index for node in self.nodes if node.is_open]

    def opened_mask(self) -> List[bool]:
        return [node.is_open for node in self.nodes]

    def unassigned_pods(self) -> List[int]:
        return [pod.index for pod in self.pods if pod.index not in self.assignment]

    def total_cost(self) -> float:
        return total_cost(self.nodes, self.assignment)

    def check_capacity(self) -> bool:
        """
        Verify the capacity invariant and that node counters agree with the table.

        Raises:
            CapacityViolationError: on any mismatch (internal defect).
        """
        usage = [0] * len(self.nodes)
        members: List[List[int]] = [[] for _ in self.nodes]
        for pod_index, node_index in self.assignment.items():
            usage[node_index] += self.pods[pod_index].demand
            members[node_index].append(pod_index)
        for node in self.nodes:
            if node.usage != usage[node.index] or sorted(node.pods) != sorted(members[node.index]):
                raise CapacityViolationError(f"Node {node.index}: usage counters disagree with the assignment table")
            if node.usage > node.capacity:
                raise CapacityViolationError(f"Node {node.index}: usage {node.usage} exceeds capacity {node.capacity}")
        return True

    # -- snapshots --------------------------------------------------------

    def snapshot(self) -> Dict[int, int]:
        return dict(self.assignment)

    def restore(self, assignment: Dict[int, int]) -> None:
        """Reset, then replay an assignment table in pod index order."""
        self.reset()
        for pod_index in sorted(assignment):
            self.assign(self.nodes[assignment[pod_index]], self.pods[pod_index])

    def copy(self) -> "Cluster":
        """Private deep copy, for workers that must not share node state."""
        return copy.deepcopy(self)

    def to_solution(self) -> Solution:
        return Solution(
            assignment=self.snapshot(),
            opened=self.opened_nodes(),
            cost=self.total_cost(),
            unassigned=self.unassigned_pods(),
        )
