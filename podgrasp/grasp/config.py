"""Centralized GRASP parameters.

Size-based adaptation (number of pods):
  - small (<=200)
  - medium (201-1000)
  - large (1001-5000)
  - xlarge (>5000)
"""
from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from typing import Any

from podgrasp.core.errors import InvalidParameterError

KEEP_MODES = ('assignment', 'mask')


@dataclass
class GraspParams:
    alpha: float = 0.3
    max_iterations: int = 10
    seed: int = 100
    workers: int = 1
    keep: str = 'assignment'


@dataclass
class SizeParams:
    max_iterations: int
    update_window: int


def classify(n: int) -> str:
    if n <= 200: return 'small'
    if n <= 1000: return 'medium'
    if n <= 5000: return 'large'
    return 'xlarge'


PARAMS = {
    'small':  SizeParams(50, 8),
    'medium': SizeParams(30, 6),
    'large':  SizeParams(10, 4),
    'xlarge': SizeParams(5, 2),
}

ALPHA_POOL = (0.1, 0.3, 0.5, 0.7, 0.9)


def params_for_size(num_pods: int) -> SizeParams:
    return PARAMS[classify(num_pods)]


def validate_alpha(alpha: Any) -> None:
    if isinstance(alpha, bool) or not isinstance(alpha, (int, float)) or math.isnan(alpha):
        raise InvalidParameterError(f"alpha must be a real number, got {alpha!r}")
    if not 0.0 <= alpha <= 1.0:
        raise InvalidParameterError(f"alpha must lie in [0, 1], got {alpha}")


def validate_params(alpha: Any, max_iterations: Any, seed: Any = 0, keep: str = 'assignment') -> None:
    """Reject parameters before any construction or search runs."""
    validate_alpha(alpha)
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations <= 0:
        raise InvalidParameterError(f"max_iterations must be a positive integer, got {max_iterations!r}")
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InvalidParameterError(f"seed must be an integer, got {seed!r}")
    if keep not in KEEP_MODES:
        raise InvalidParameterError(f"keep must be one of {KEEP_MODES}, got {keep!r}")


def safe_get(d: dict, key: str, default: Any) -> Any:
    """Get dictionary value with default fallback."""
    return d[key] if key in d else default


def load_params(path: str | None = "data/grasp_params.json") -> GraspParams:
    """Load GRASP parameters from a JSON file, or return defaults. Values are validated."""
    params = GraspParams()
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        params = GraspParams(
            alpha=safe_get(data, "alpha", params.alpha),
            max_iterations=safe_get(data, "max_iterations", params.max_iterations),
            seed=safe_get(data, "seed", params.seed),
            workers=safe_get(data, "workers", params.workers),
            keep=safe_get(data, "keep", params.keep),
        )
    validate_params(params.alpha, params.max_iterations, params.seed, params.keep)
    if isinstance(params.workers, bool) or not isinstance(params.workers, int) or params.workers <= 0:
        raise InvalidParameterError(f"workers must be a positive integer, got {params.workers!r}")
    return params


__all__ = ['GraspParams', 'SizeParams', 'PARAMS', 'ALPHA_POOL', 'KEEP_MODES', 'classify',
           'params_for_size', 'validate_alpha', 'validate_params', 'load_params', 'safe_get']
