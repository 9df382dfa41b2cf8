"""Distance functions used to seed Q-values toward the goal."""

import math
from .types import Coord


def euclidean_distance(start: Coord, target: Coord) -> float:
    """
    Euclidean (L2) distance between two grid coordinates.
    Used as the heuristic gradient for greedy initialization.
    """
    dx = start[0] - target[0]
    dy = start[1] - target[1]
    return math.sqrt(dx * dx + dy * dy)
