"""
Maze host environment.

Defines what the navigator needs from the world it runs in, and provides
an in-memory grid maze that implements it for the CLI and the tests.
"""

import logging
from typing import Protocol

import numpy as np

from mazebot.exceptions import MazeFormatError

from .models import CellKind, Heading, Position

logger = logging.getLogger(__name__)

# Characters of the ASCII maze format
WALL_CHAR = "#"
OPEN_CHAR = "."
START_CHAR = "S"
TARGET_CHAR = "T"


class MazeHost(Protocol):
    """
    Capabilities the navigator consumes from the maze host.

    The host only reveals the four cells around the agent; it never exposes
    the maze layout itself.
    """

    @property
    def position(self) -> Position:
        """Current agent position."""
        ...

    @property
    def target(self) -> Position:
        """Target position."""
        ...

    @property
    def heading(self) -> Heading:
        """Heading the agent used for its last move."""
        ...

    @property
    def width(self) -> int:
        """Maze width in cells, including the outer walls."""
        ...

    @property
    def height(self) -> int:
        """Maze height in cells, including the outer walls."""
        ...

    def look(self, heading: Heading) -> CellKind:
        """Sense the cell adjacent to the agent in a heading."""
        ...


class GridMaze:
    """
    In-memory rectangular maze.

    Tracks which open cells the agent has entered so that sensing can tell
    unexplored passages from cells the agent has been to before. Cells
    outside the grid sense as walls.
    """

    def __init__(
        self,
        open_cells: np.ndarray,
        start: Position,
        target: Position,
        heading: Heading = Heading.EAST,
    ):
        """
        Initialize the maze.

        Args:
            open_cells: 2D boolean grid indexed [y, x], True where open
            start: Start cell (must be open)
            target: Target cell (must be open, distinct from start)
            heading: Heading the agent faces before its first move
        """
        self._open = np.asarray(open_cells, dtype=bool)
        for name, pos in (("start", start), ("target", target)):
            if not self._contains(pos) or not self._open[pos.y, pos.x]:
                raise MazeFormatError(f"The {name} cell {pos} is not an open cell of the maze")
        if start == target:
            raise MazeFormatError("Start and target must be different cells")

        self._start = start
        self._target = target
        self._initial_heading = heading

        self._position = start
        self._heading = heading
        self._visited = np.zeros_like(self._open)
        self._visited[start.y, start.x] = True
        self._moves = 0
        self._bumps = 0

    @classmethod
    def from_ascii(cls, text: str, heading: Heading = Heading.EAST) -> "GridMaze":
        """
        Parse a maze drawn with '#' walls, '.' open cells, 'S' and 'T'.

        Short lines are padded with walls.
        """
        lines = [line.rstrip("\n") for line in text.strip("\n").splitlines()]
        if not lines:
            raise MazeFormatError("Maze text is empty")

        width = max(len(line) for line in lines)
        open_cells = np.zeros((len(lines), width), dtype=bool)
        start = target = None

        for y, line in enumerate(lines):
            for x, char in enumerate(line):
                if char == WALL_CHAR or char == " ":
                    continue
                if char not in (OPEN_CHAR, START_CHAR, TARGET_CHAR):
                    raise MazeFormatError(f"Unexpected character {char!r} at ({x}, {y})")
                open_cells[y, x] = True
                if char == START_CHAR:
                    if start is not None:
                        raise MazeFormatError("Maze has more than one start cell")
                    start = Position(x, y)
                elif char == TARGET_CHAR:
                    if target is not None:
                        raise MazeFormatError("Maze has more than one target cell")
                    target = Position(x, y)

        if start is None or target is None:
            raise MazeFormatError("Maze needs exactly one 'S' and one 'T' cell")

        return cls(open_cells, start, target, heading)

    def to_ascii(self, show_agent: bool = False) -> str:
        """Render the maze in the format read by ``from_ascii``."""
        lines = []
        for y in range(self.height):
            line = []
            for x in range(self.width):
                pos = Position(x, y)
                if show_agent and pos == self._position:
                    line.append("@")
                elif pos == self._start:
                    line.append(START_CHAR)
                elif pos == self._target:
                    line.append(TARGET_CHAR)
                elif self._open[y, x]:
                    line.append(OPEN_CHAR)
                else:
                    line.append(WALL_CHAR)
            lines.append("".join(line))
        return "\n".join(lines)

    def _contains(self, pos: Position) -> bool:
        height, width = self._open.shape
        return 0 <= pos.x < width and 0 <= pos.y < height

    def is_open(self, pos: Position) -> bool:
        """Check if a cell is open (out-of-range cells are walls)."""
        return self._contains(pos) and bool(self._open[pos.y, pos.x])

    def look(self, heading: Heading) -> CellKind:
        """Sense the cell adjacent to the agent in a heading."""
        pos = self._position.move(heading)
        if not self.is_open(pos):
            return CellKind.WALL
        if self._visited[pos.y, pos.x]:
            return CellKind.BEEN_BEFORE
        return CellKind.PASSAGE

    def move(self, heading: Heading) -> bool:
        """
        Turn to a heading and move one cell.

        Moving into a wall leaves the agent where it is.

        Returns:
            True if the agent is now on the target
        """
        self._heading = heading
        next_pos = self._position.move(heading)
        if not self.is_open(next_pos):
            self._bumps += 1
            logger.warning(f"Agent at {self._position} bumped into a wall heading {heading.value}")
            return self.at_target

        self._position = next_pos
        self._visited[next_pos.y, next_pos.x] = True
        self._moves += 1
        return self.at_target

    def reset(self) -> None:
        """Put the agent back on the start for another run."""
        self._position = self._start
        self._heading = self._initial_heading
        self._visited[:] = False
        self._visited[self._start.y, self._start.x] = True
        self._moves = 0
        self._bumps = 0

    def open_positions(self) -> set[Position]:
        """All open cells of the maze."""
        ys, xs = np.nonzero(self._open)
        return {Position(int(x), int(y)) for x, y in zip(xs, ys)}

    def visited_positions(self) -> set[Position]:
        """All cells the agent has entered since the last reset."""
        ys, xs = np.nonzero(self._visited)
        return {Position(int(x), int(y)) for x, y in zip(xs, ys)}

    @property
    def open_cells(self) -> np.ndarray:
        """Read-only view of the open-cell grid."""
        view = self._open.view()
        view.flags.writeable = False
        return view

    @property
    def position(self) -> Position:
        return self._position

    @property
    def start(self) -> Position:
        return self._start

    @property
    def target(self) -> Position:
        return self._target

    @property
    def heading(self) -> Heading:
        return self._heading

    @property
    def width(self) -> int:
        return int(self._open.shape[1])

    @property
    def height(self) -> int:
        return int(self._open.shape[0])

    @property
    def at_target(self) -> bool:
        """Check if the agent stands on the target."""
        return self._position == self._target

    @property
    def moves(self) -> int:
        """Cells moved since the last reset."""
        return self._moves

    @property
    def bumps(self) -> int:
        """Wall collisions since the last reset."""
        return self._bumps

    def __repr__(self) -> str:
        return (
            f"GridMaze({self.width}x{self.height}, start={self._start}, "
            f"target={self._target}, agent={self._position})"
        )
