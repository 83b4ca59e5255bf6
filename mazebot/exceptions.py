"""Exceptions raised by the maze agent."""


class MazeBotError(Exception):
    """Base class for all maze agent errors."""


class OutOfBoundsError(MazeBotError):
    """A position fell outside the grid the agent can address."""

    def __init__(self, x: int, y: int, size: int):
        self.x = x
        self.y = y
        self.size = size
        super().__init__(f"Position ({x}, {y}) is outside the {size}x{size} grid")


class MazeConsistencyError(MazeBotError):
    """The grid map was asked to break one of its invariants."""


class MazeFormatError(MazeBotError):
    """An ASCII maze could not be parsed."""


class NavigationError(MazeBotError):
    """The navigation state machine reached a state it cannot act on."""


class PathExhaustedError(NavigationError):
    """A shortest path was walked past its final step."""


class PathNotFoundError(MazeBotError):
    """The distance field does not lead back from destination to source."""
