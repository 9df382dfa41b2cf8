"""Grid factory for creating bordered grids and laying out walls."""

from typing import Optional, Iterable
from ..domain.grid import Grid
from ..domain.types import Coord
from .rng import SeededRNG

MIN_GRID_SIZE = 4


def default_start(size: int) -> Coord:
    """Default start: top-left interior corner."""
    return (1, 1)


def default_goal(size: int) -> Coord:
    """Default goal: bottom-right interior corner."""
    return (size - 2, size - 2)


def create_bordered_grid(size: int, start: Optional[Coord] = None,
                         goal: Optional[Coord] = None) -> Grid:
    """
    Create a square grid with a one-cell wall border.

    Args:
        size: Grid size (must be >= 4 so start and goal fit apart)
        start: Start coordinate (top-left interior corner if None)
        goal: Goal coordinate (bottom-right interior corner if None)

    Returns:
        New Grid with an empty interior apart from start and goal

    Raises:
        ValueError: If size is too small or start/goal are invalid
    """
    if size < MIN_GRID_SIZE:
        raise ValueError(f"Grid size must be at least {MIN_GRID_SIZE}, got {size}")

    start = start if start is not None else default_start(size)
    goal = goal if goal is not None else default_goal(size)

    grid = Grid(size=size, start=start, goal=goal)
    for coord, name in ((start, "Start"), (goal, "Goal")):
        if not grid.is_interior(coord):
            raise ValueError(f"{name} position {coord} must be inside the border")
    if start == goal:
        raise ValueError("Start and goal positions cannot be the same")

    grid.cells = [
        ["wall" if x in (0, size - 1) or y in (0, size - 1) else "empty" for x in range(size)]
        for y in range(size)
    ]
    grid.cells[start[1]][start[0]] = "start"
    grid.cells[goal[1]][goal[0]] = "goal"
    return grid


def apply_walls(grid: Grid, walls: Iterable[Coord]) -> int:
    """
    Paint a set of walls onto the grid.

    Coordinates on the border, start or goal are skipped.

    Returns:
        Number of cells that changed
    """
    return sum(1 for coord in walls if grid.set_cell(coord, "wall"))


def add_random_walls(grid: Grid, density: float, rng: Optional[SeededRNG] = None) -> int:
    """
    Add random walls to the interior of the grid.

    Args:
        grid: Grid to modify
        density: Fraction of empty interior cells to turn into walls (0.0 to 1.0)
        rng: Random number generator to use

    Returns:
        Number of walls placed
    """
    if not (0.0 <= density <= 1.0):
        raise ValueError(f"Density must be between 0.0 and 1.0, got {density}")

    if rng is None:
        rng = SeededRNG()

    empty_coords = [
        (x, y)
        for y in range(1, grid.size - 1)
        for x in range(1, grid.size - 1)
        if grid.cells[y][x] == "empty"
    ]
    num_walls = int(len(empty_coords) * density)
    return apply_walls(grid, rng.sample(empty_coords, num_walls))
