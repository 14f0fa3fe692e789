"""Top-level package exports for podgrasp.

Convenience re-exports so users can:

	from podgrasp import Cluster, Node, Pod, run_grasp

Versioning kept simple (manual bump).
"""

__all__ = [
	'Pod', 'Node', 'Cluster', 'Solution', 'total_cost',
	'greedy_construction', 'greedy_randomized_construction', 'first_fit_construction',
	'best_improvement_local_search', 'run_grasp', 'run_grasp_parallel', 'run_reactive_grasp',
	'GraspResult', 'VERSION'
]

from .core.model import Pod, Node, Cluster, Solution, total_cost
from .grasp.constructive import greedy_construction, greedy_randomized_construction, first_fit_construction
from .grasp.local_search import best_improvement_local_search
from .grasp.orchestrator import GraspResult, run_grasp, run_grasp_parallel, run_reactive_grasp

VERSION = '0.1.0'
