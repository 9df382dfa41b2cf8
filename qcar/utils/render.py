"""Plain-text rendering of the grid and the learned policy."""

from typing import Optional
import numpy as np

from ..domain.types import ActionInt, ACTION_ARROWS

# Tabula-rasa arrows below this magnitude carry no real signal yet
MIN_ARROW_SIGNAL = 0.1

CELL_GLYPHS = {
    "wall": "#",
    "start": "S",
    "goal": "G",
    "empty": ".",
}


def policy_arrow(q_row: np.ndarray, best: ActionInt, heuristic: bool) -> Optional[str]:
    """
    Arrow for a cell's greedy action, or None when it should be hidden.

    In tabula-rasa mode untouched rows and weak values are hidden; heuristic
    rows always have a direction.
    """
    if not heuristic:
        if not np.any(q_row):
            return None
        if abs(q_row[best]) < MIN_ARROW_SIGNAL:
            return None
    return ACTION_ARROWS[best]


def render_grid(engine, show_policy: bool = True) -> str:
    """
    Render the engine's grid as text.

    Walls are '#', start 'S', goal 'G', the agent 'A'. Other cells show the
    greedy policy arrow when enabled, '.' otherwise.
    """
    grid = engine.grid
    heuristic = engine.config.init_mode == "heuristic"
    policy = engine.policy_grid() if show_policy else None

    lines = []
    for y in range(grid.size):
        row = []
        for x in range(grid.size):
            coord = (x, y)
            cell = grid.classify(coord)
            if coord == engine.agent_pos:
                row.append("A")
            elif cell != "empty" or policy is None:
                row.append(CELL_GLYPHS[cell])
            else:
                arrow = policy_arrow(engine.q_values(coord), policy[y][x], heuristic)
                row.append(arrow or CELL_GLYPHS["empty"])
        lines.append(" ".join(row))
    return "\n".join(lines)
