"""Reward and transition function for the grid."""

from .types import (
    Coord, ActionInt, Transition, ACTION_DELTAS, REWARD_GOAL, REWARD_WALL, REWARD_STEP
)
from .grid import Grid


def transition(grid: Grid, pos: Coord, action: ActionInt) -> Transition:
    """
    Apply an action to a position without mutating anything.

    Args:
        grid: Grid to move on
        pos: Current agent position
        action: Action to take (0=up, 1=right, 2=down, 3=left)

    Returns:
        Transition with the landing position, reward, and terminal/blocked flags
    """
    dx, dy = ACTION_DELTAS[action]
    next_pos = (pos[0] + dx, pos[1] + dy)

    # Leaving the grid is a no-op; the current cell then decides the outcome
    if not grid.is_valid_coord(next_pos):
        next_pos = pos

    cell = grid.classify(next_pos)
    if cell == "goal":
        return Transition(next_pos=next_pos, reward=REWARD_GOAL, terminal=True)
    if cell == "wall":
        # Bounce back, the agent never enters a wall
        return Transition(next_pos=pos, reward=REWARD_WALL, blocked=True)
    return Transition(next_pos=next_pos, reward=REWARD_STEP)
