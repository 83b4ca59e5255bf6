"""
Junction memory for backtracking.

Branch points are recorded in the order they are discovered, together with
the heading the agent was travelling when it first arrived, so the agent can
walk back through them in reverse order.
"""

from dataclasses import dataclass

from mazebot.api.models import Heading, Position
from mazebot.exceptions import NavigationError


@dataclass(frozen=True)
class JunctionRecord:
    """A branch point and the heading used to first arrive there."""

    position: Position
    arrived: Heading


class JunctionStack:
    """LIFO record of junctions the agent can still backtrack to."""

    def __init__(self):
        self._records: list[JunctionRecord] = []

    def push(self, record: JunctionRecord) -> None:
        """Record a newly discovered junction."""
        self._records.append(record)

    def pop(self) -> JunctionRecord:
        """Remove and return the most recent junction."""
        if not self._records:
            raise NavigationError("Cannot pop from an empty junction stack")
        return self._records.pop()

    def peek(self) -> JunctionRecord:
        """Return the most recent junction without removing it."""
        if not self._records:
            raise NavigationError("Junction stack is empty")
        return self._records[-1]

    def is_empty(self) -> bool:
        """Check if no junctions are left."""
        return not self._records

    def is_top(self, pos: Position) -> bool:
        """Check if a position is the most recent junction."""
        return bool(self._records) and self._records[-1].position == pos

    def clear(self) -> None:
        """Forget all junctions."""
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        """Iterate from the oldest junction to the newest."""
        return iter(self._records)
