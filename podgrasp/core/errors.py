"""
Error types for the allocation engine.
"""


class InvalidParameterError(ValueError):
    """Algorithm parameters outside their domain (alpha, max_iterations, ...)."""


class InvalidInstanceError(ValueError):
    """Malformed instance data (negative demand, duplicate index, ...)."""


class CapacityViolationError(RuntimeError):
    """A node holds more demand than its capacity.

    Never expected at runtime: raised only when move application or the
    assignment table is broken.
    """
