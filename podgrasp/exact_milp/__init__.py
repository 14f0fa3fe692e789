"""Exact MILP baseline for pod-to-node allocation.
"""
from .cflp_model import build_model, solve_model, extract_assignment, solve_exact

__all__ = [
    'build_model', 'solve_model', 'extract_assignment', 'solve_exact'
]
