"""Epsilon-greedy exploration policy."""

from typing import Sequence
from .types import ActionInt, NUM_ACTIONS
from .qtable import best_action_index


def select_action(q_row: Sequence[float], epsilon: float, rng) -> ActionInt:
    """
    Pick an action for a state.

    With probability epsilon a uniformly random action is returned, otherwise
    the greedy action of the row (ties broken at random). Stateless: epsilon
    may change between calls.
    """
    if rng.random() < epsilon:
        return rng.randint(0, NUM_ACTIONS - 1)
    return best_action_index(q_row, rng)
