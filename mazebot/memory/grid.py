"""
Grid memory for the maze being discovered.

Keeps what the agent has learned about each cell in three explicit layers:
known walls, junctions visited during discovery, and step distances
written by the shortest path search.
"""

import logging
from typing import Optional

import numpy as np

from mazebot.api.models import Position
from mazebot.exceptions import MazeConsistencyError, OutOfBoundsError

logger = logging.getLogger(__name__)

# Largest maze side the agent can address
MAX_MAZE_SIZE = 405


class GridMap:
    """
    Memory of a single maze.

    Distances are stored as ``1 + steps from the search source`` so that 0
    always means "not reached yet" and the source itself holds 1.
    """

    def __init__(self, size: int = MAX_MAZE_SIZE):
        """
        Initialize grid memory.

        Args:
            size: Number of addressable cells per side
        """
        self.size = size

        self._walls = np.zeros((size, size), dtype=bool)
        self._junctions = np.zeros((size, size), dtype=bool)
        self._distance = np.zeros((size, size), dtype=np.int32)

        # Known extent of the maze, grown while exploring
        self.max_x = 1
        self.max_y = 1

    def in_bounds(self, pos: Position) -> bool:
        """Check if position is addressable."""
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def _require(self, pos: Position) -> None:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(pos.x, pos.y, self.size)

    # -------------------------------------------------------------------------
    # Walls
    # -------------------------------------------------------------------------

    def mark_wall(self, pos: Position) -> None:
        """Record a wall. Walls are never unmarked during an attempt."""
        self._require(pos)
        if self._junctions[pos.y, pos.x] or self._distance[pos.y, pos.x] > 0:
            raise MazeConsistencyError(f"Cell {pos} is already known to be open")
        self._walls[pos.y, pos.x] = True

    def is_wall(self, pos: Position) -> bool:
        """Check if position is a known wall."""
        self._require(pos)
        return bool(self._walls[pos.y, pos.x])

    @property
    def wall_count(self) -> int:
        """Number of walls discovered so far."""
        return int(self._walls.sum())

    def snapshot_walls(self) -> np.ndarray:
        """Copy of the wall layer, for re-solving after discovery."""
        return self._walls.copy()

    def restore_walls(self, frame: np.ndarray) -> None:
        """
        Reinitialise the grid from a wall snapshot.

        Junction markers and distances are cleared; the bounding box is kept.
        """
        if frame.shape != self._walls.shape:
            raise MazeConsistencyError(
                f"Wall snapshot shape {frame.shape} does not match grid {self._walls.shape}"
            )
        self._walls[:] = frame
        self._junctions[:] = False
        self._distance[:] = 0

    # -------------------------------------------------------------------------
    # Junctions
    # -------------------------------------------------------------------------

    def mark_junction(self, pos: Position) -> None:
        """Mark a branch point as visited during discovery."""
        self._require(pos)
        if self._walls[pos.y, pos.x]:
            raise MazeConsistencyError(f"Cannot mark wall {pos} as a junction")
        self._junctions[pos.y, pos.x] = True

    def is_junction(self, pos: Position) -> bool:
        """Check if position is a visited junction."""
        self._require(pos)
        return bool(self._junctions[pos.y, pos.x])

    def count_junctions(self) -> int:
        """Number of junctions visited so far."""
        return int(self._junctions.sum())

    # -------------------------------------------------------------------------
    # Distances
    # -------------------------------------------------------------------------

    def distance(self, pos: Position) -> int:
        """Raw stored distance: 0 if unreached, else 1 + steps."""
        self._require(pos)
        return int(self._distance[pos.y, pos.x])

    def set_distance(self, pos: Position, value: int) -> None:
        """
        Store a distance value.

        A stored distance may only be lowered; walls never hold one.
        """
        self._require(pos)
        if self._walls[pos.y, pos.x]:
            raise MazeConsistencyError(f"Cannot store a distance in wall {pos}")
        current = int(self._distance[pos.y, pos.x])
        if value < 1 or (current and value >= current):
            raise MazeConsistencyError(
                f"Distance at {pos} may only decrease (stored={current}, new={value})"
            )
        self._distance[pos.y, pos.x] = value

    def steps_to(self, pos: Position) -> Optional[int]:
        """Steps from the last search source, or None if unreached."""
        value = self.distance(pos)
        return value - 1 if value else None

    def prepare_for_search(self, source: Position) -> None:
        """
        Repurpose the grid for a distance search.

        Clears junction markers and distances, then seeds the source with 1.
        """
        self._require(source)
        self._junctions[:] = False
        self._distance[:] = 0
        self.set_distance(source, 1)

    # -------------------------------------------------------------------------
    # Extent
    # -------------------------------------------------------------------------

    def extend_bounds(self, pos: Position) -> None:
        """Grow the known bounding box to include a position."""
        if pos.x > self.max_x:
            self.max_x = pos.x
        if pos.y > self.max_y:
            self.max_y = pos.y

    def count_open_in_bounds(self) -> int:
        """Count cells in [1..max_x] x [1..max_y] not known to be walls."""
        region = self._walls[1:self.max_y + 1, 1:self.max_x + 1]
        return int(region.size - region.sum())

    def clear(self) -> None:
        """Forget everything about the maze."""
        self._walls[:] = False
        self._junctions[:] = False
        self._distance[:] = 0
        self.max_x = 1
        self.max_y = 1

    def to_ascii(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        marks: Optional[dict[Position, str]] = None,
    ) -> str:
        """
        Render the discovered map as ASCII art.

        Args:
            width: Columns to render (defaults to the known extent plus border)
            height: Rows to render (defaults to the known extent plus border)
            marks: Characters to draw over specific cells, such as the target

        Returns:
            '#' for known walls, '+' for junctions, '.' for reached cells,
            ' ' for anything not yet known
        """
        width = min(width or self.max_x + 2, self.size)
        height = min(height or self.max_y + 2, self.size)
        marks = marks or {}

        lines = []
        for y in range(height):
            line = []
            for x in range(width):
                pos = Position(x, y)
                if pos in marks:
                    line.append(marks[pos])
                elif self._walls[y, x]:
                    line.append("#")
                elif self._junctions[y, x]:
                    line.append("+")
                elif self._distance[y, x]:
                    line.append(".")
                else:
                    line.append(" ")
            lines.append("".join(line).rstrip())
        return "\n".join(lines)
