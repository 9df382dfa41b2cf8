"""Action-value table backed by a numpy array."""

from typing import List, Sequence
import numpy as np

from .types import (
    Coord, ActionInt, InitMode, ACTION_DELTAS, NUM_ACTIONS, HEURISTIC_SCALE
)
from .heuristics import euclidean_distance


def best_action_index(values: Sequence[float], rng) -> ActionInt:
    """
    Index of the highest value, breaking ties uniformly at random.

    Ties include the all-equal rows of an unlearned table, so exploitation
    never settles on the first action just because it comes first.
    """
    values = np.asarray(values, dtype=float)
    tied = np.flatnonzero(values == values.max())
    if len(tied) == 1:
        return int(tied[0])
    return int(rng.choice(tied.tolist()))


class QTable:
    """
    Q-values for every cell of a square grid, stored as values[y][x][action].

    Wall cells keep a row too; the agent never occupies them, but their max
    value may still be read when a neighbour is updated.
    """

    def __init__(self, size: int):
        self.size = size
        self.values = np.zeros((size, size, NUM_ACTIONS), dtype=float)

    @classmethod
    def initialize(cls, size: int, mode: InitMode, goal: Coord) -> "QTable":
        """
        Build a fresh table.

        Args:
            size: Grid size
            mode: "tabula_rasa" for all zeros, "heuristic" for a goal-distance gradient
            goal: Goal coordinate the heuristic gradient points at

        Returns:
            New QTable instance
        """
        table = cls(size)
        if mode == "tabula_rasa":
            return table
        if mode != "heuristic":
            raise ValueError(f"Unknown initialization mode: {mode}")

        # Value of an action is minus the scaled distance from where it lands to the goal
        for y in range(size):
            for x in range(size):
                for action, (dx, dy) in ACTION_DELTAS.items():
                    dist = euclidean_distance((x + dx, y + dy), goal)
                    table.values[y, x, action] = -HEURISTIC_SCALE * dist
        return table

    def _check_coord(self, coord: Coord):
        x, y = coord
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise ValueError(f"Coordinate {coord} is out of bounds for a {self.size}x{self.size} table")

    def read(self, coord: Coord) -> np.ndarray:
        """Get a copy of the four action values at a coordinate."""
        self._check_coord(coord)
        return self.values[coord[1], coord[0]].copy()

    def write(self, coord: Coord, action: ActionInt, value: float):
        """Set the value of one state-action pair."""
        self._check_coord(coord)
        self.values[coord[1], coord[0], action] = value

    def get(self, coord: Coord, action: ActionInt) -> float:
        """Get the value of one state-action pair."""
        self._check_coord(coord)
        return float(self.values[coord[1], coord[0], action])

    def max_value(self, coord: Coord) -> float:
        """Value of being in a state: the best of its action values."""
        self._check_coord(coord)
        return float(self.values[coord[1], coord[0]].max())

    def best_action(self, coord: Coord, rng) -> ActionInt:
        """Greedy action at a coordinate with random tie-break."""
        self._check_coord(coord)
        return best_action_index(self.values[coord[1], coord[0]], rng)

    def max_values(self) -> np.ndarray:
        """Per-cell max values as a (size, size) array indexed [y][x]."""
        return self.values.max(axis=2)

    def policy(self, rng) -> List[List[ActionInt]]:
        """Greedy action for every cell, indexed [y][x]."""
        return [
            [best_action_index(self.values[y, x], rng) for x in range(self.size)]
            for y in range(self.size)
        ]
