"""GRASP engine: constructors, local search and restart drivers."""
from .constructive import (
    feasible_candidates, build_rcl, first_fit_construction, greedy_construction, greedy_randomized_construction
)
from .local_search import Move, LocalSearchReport, relocation_delta, find_best_relocation, best_improvement_local_search
from .orchestrator import GraspResult, run_grasp, run_grasp_parallel, run_reactive_grasp, reconstruct_from_mask
from .config import GraspParams, load_params, validate_params, ALPHA_POOL
