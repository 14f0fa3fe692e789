from .model import Pod, Node, Cluster, Solution, total_cost, verify_instance
from .errors import InvalidParameterError, InvalidInstanceError, CapacityViolationError
