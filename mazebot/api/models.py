"""
Data models for the maze agent.

Headings, positions and sensing results shared by the host, the map
memory and the navigation state machine.
"""

from dataclasses import dataclass
from enum import Enum


class Heading(Enum):
    """Absolute movement headings, declared in scan order."""

    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this heading."""
        deltas = {
            Heading.NORTH: (0, -1),
            Heading.EAST: (1, 0),
            Heading.SOUTH: (0, 1),
            Heading.WEST: (-1, 0),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Heading":
        """The heading pointing the other way."""
        opposites = {
            Heading.NORTH: Heading.SOUTH,
            Heading.EAST: Heading.WEST,
            Heading.SOUTH: Heading.NORTH,
            Heading.WEST: Heading.EAST,
        }
        return opposites[self]

    @classmethod
    def from_string(cls, value: str) -> "Heading":
        """Parse a heading name ("north", "N", ...)."""
        value = value.strip().lower()
        for heading in cls:
            if value in (heading.value, heading.value[0]):
                return heading
        raise ValueError(f"Unknown heading: {value!r}")


# Fixed enumeration order used by every neighbour scan
HEADINGS = (Heading.NORTH, Heading.EAST, Heading.SOUTH, Heading.WEST)


class CellKind(Enum):
    """What the agent senses in an adjacent cell."""

    WALL = "wall"
    PASSAGE = "passage"  # Open and never entered
    BEEN_BEFORE = "been_before"  # Open and entered at least once


class MazeKind(Enum):
    """Shape of a maze, as generated or as classified after discovery."""

    TREE = "tree"  # Exactly one route between any two cells
    LOOPY = "loopy"  # Contains at least one cycle
    BLANK = "blank"  # No interior walls at all

    @classmethod
    def from_string(cls, value: str) -> "MazeKind":
        """Convert string to MazeKind."""
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown maze kind: {value!r}") from None


@dataclass(frozen=True, order=True)
class Position:
    """A cell position on the maze grid."""

    x: int
    y: int

    def move(self, heading: Heading) -> "Position":
        """Get position after moving one cell in a heading."""
        dx, dy = heading.delta
        return Position(self.x + dx, self.y + dy)

    def manhattan_to(self, other: "Position") -> int:
        """Manhattan distance - number of moves with 4-directional movement."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def adjacent(self) -> list["Position"]:
        """Get the four orthogonally adjacent positions in scan order."""
        return [self.move(heading) for heading in HEADINGS]
