"""Grid environment: cell classification over a square grid."""

from dataclasses import dataclass, field
from typing import List, Set
from .types import Coord, Cell


EDITABLE_CELLS = ("empty", "wall")


@dataclass
class Grid:
    """
    Square grid of classified cells, indexed as cells[y][x].

    Exactly one start and one goal cell exist at any time. The grid does not
    know about the agent or the Q-table.
    """
    size: int
    start: Coord
    goal: Coord
    cells: List[List[Cell]] = field(default_factory=list)

    def is_valid_coord(self, coord: Coord) -> bool:
        """Check if coordinate is within grid bounds."""
        x, y = coord
        return 0 <= x < self.size and 0 <= y < self.size

    def is_interior(self, coord: Coord) -> bool:
        """Check if coordinate is inside the one-cell border."""
        x, y = coord
        return 0 < x < self.size - 1 and 0 < y < self.size - 1

    def _check_coord(self, coord: Coord):
        if not self.is_valid_coord(coord):
            raise ValueError(f"Coordinate {coord} is out of bounds for a {self.size}x{self.size} grid")

    def classify(self, coord: Coord) -> Cell:
        """Get the cell type at a coordinate."""
        self._check_coord(coord)
        x, y = coord
        return self.cells[y][x]

    def is_traversable(self, coord: Coord) -> bool:
        """True unless the cell is a wall or out of bounds."""
        return self.is_valid_coord(coord) and self.classify(coord) != "wall"

    def set_cell(self, coord: Coord, cell: Cell) -> bool:
        """
        Paint an interior cell as empty or wall.

        Start, goal and border cells are left untouched. Returns True if the
        cell changed.
        """
        if cell not in EDITABLE_CELLS:
            raise ValueError(f"Cell type {cell!r} cannot be painted")
        self._check_coord(coord)

        if coord == self.start or coord == self.goal or not self.is_interior(coord):
            return False

        x, y = coord
        if self.cells[y][x] == cell:
            return False
        self.cells[y][x] = cell
        return True

    def toggle_cell(self, coord: Coord) -> bool:
        """Flip an interior cell between empty and wall."""
        if coord == self.start or coord == self.goal:
            return False
        return self.set_cell(coord, "empty" if self.classify(coord) == "wall" else "wall")

    def place_markers(self, start: Coord, goal: Coord):
        """
        Place the start and goal markers, clearing their old cells.

        Raises:
            ValueError: If either position is out of bounds, on the border,
                a wall, or both positions are the same
        """
        for coord, name in ((start, "Start"), (goal, "Goal")):
            self._check_coord(coord)
            if not self.is_interior(coord):
                raise ValueError(f"{name} position {coord} must be inside the border")
            if self.classify(coord) == "wall":
                raise ValueError(f"{name} position {coord} is a wall")
        if start == goal:
            raise ValueError("Start and goal positions cannot be the same")

        for old in (self.start, self.goal):
            self.cells[old[1]][old[0]] = "empty"
        self.cells[start[1]][start[0]] = "start"
        self.cells[goal[1]][goal[0]] = "goal"
        self.start = start
        self.goal = goal

    def move_marker(self, marker: Cell, coord: Coord):
        """Move only the start or only the goal marker."""
        if marker == "start":
            self.place_markers(coord, self.goal)
        elif marker == "goal":
            self.place_markers(self.start, coord)
        else:
            raise ValueError(f"Only start and goal can be moved, got {marker!r}")

    def walls(self) -> Set[Coord]:
        """All wall coordinates, border included."""
        return {
            (x, y)
            for y in range(self.size)
            for x in range(self.size)
            if self.cells[y][x] == "wall"
        }
