"""
Pathfinding over the discovered maze.

Implements A* on the grid memory with a Manhattan heuristic, writing step
distances into the grid, and a retracer that turns the resulting distance
field into the sequence of headings to walk.

Follows the grid's distance convention: a stored value of 0 means "not
reached" and reached cells hold 1 + steps from the source.
"""

import heapq
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

import numpy as np

from mazebot.exceptions import PathExhaustedError, PathNotFoundError
from mazebot.memory.grid import GridMap

from .models import HEADINGS, Heading, Position

logger = logging.getLogger(__name__)


class PathStopReason(Enum):
    """Reasons why pathfinding stopped or couldn't start."""
    SUCCESS = "success"
    ALREADY_AT_TARGET = "already_at_target"
    TARGET_OUT_OF_BOUNDS = "target_out_of_bounds"
    TARGET_IS_WALL = "target_is_wall"
    NO_PATH_EXISTS = "no_path_exists"


@dataclass
class ShortestPath:
    """
    Headings to walk from a source to a destination.

    ``headings[0]`` is an unused sentinel so that ``headings[i]`` is the
    i-th move and the last index equals the number of steps. The cursor
    tracks the next move to hand out.
    """
    headings: list[Optional[Heading]] = field(default_factory=lambda: [None])
    cursor: int = 1

    @classmethod
    def of_length(cls, steps: int) -> "ShortestPath":
        """Create an empty path with room for a number of steps."""
        return cls(headings=[None] * (steps + 1))

    def next_heading(self) -> Heading:
        """Return the next move and advance the cursor."""
        if self.cursor >= len(self.headings):
            raise PathExhaustedError(
                f"Path of {len(self)} steps has no step {self.cursor}"
            )
        heading = self.headings[self.cursor]
        self.cursor += 1
        return heading

    def rewind(self) -> None:
        """Start walking the path again from its first move."""
        self.cursor = 1

    @property
    def remaining(self) -> int:
        """Moves not yet handed out."""
        return len(self.headings) - self.cursor

    @property
    def is_finished(self) -> bool:
        """Whether every move has been handed out."""
        return self.remaining <= 0

    def replay(self, source: Position) -> Position:
        """Return where walking the whole path from source ends up."""
        pos = source
        for heading in self:
            pos = pos.move(heading)
        return pos

    def __iter__(self) -> Iterator[Heading]:
        """Allow `for heading in path:` to iterate the moves in order."""
        return iter(self.headings[1:])

    def __len__(self) -> int:
        """Return path length in steps."""
        return len(self.headings) - 1

    def __repr__(self) -> str:
        return f"ShortestPath([{len(self)} steps], cursor={self.cursor})"


@dataclass
class PathResult:
    """Result of a shortest path computation."""
    path: ShortestPath
    reason: PathStopReason
    message: str = ""

    @property
    def success(self) -> bool:
        """Whether pathfinding succeeded."""
        return self.reason == PathStopReason.SUCCESS

    @property
    def distance(self) -> int:
        """Number of steps in the path."""
        return len(self.path)

    def __bool__(self) -> bool:
        """Allow `if result:` to check for success."""
        return self.success

    def __repr__(self) -> str:
        if self.success:
            return f"PathResult(path=[{len(self.path)} steps], reason=SUCCESS)"
        return f"PathResult(path=[], reason={self.reason.value}, message='{self.message}')"


def find_shortest_path(grid: GridMap, source: Position, destination: Position) -> PathResult:
    """
    Find the shortest path between two cells of the discovered maze.

    The grid is first prepared for a search from ``source`` (junction
    markers and old distances are cleared), then A* fills in distances and
    the path is retraced from ``destination``.

    Args:
        grid: Grid memory whose walls are already known
        source: Cell to start from
        destination: Cell to reach

    Returns:
        PathResult with the path and the reason for success/failure
    """
    if not grid.in_bounds(destination):
        return PathResult(
            ShortestPath(), PathStopReason.TARGET_OUT_OF_BOUNDS,
            f"Destination {destination} is out of map bounds",
        )
    if grid.is_wall(destination):
        return PathResult(
            ShortestPath(), PathStopReason.TARGET_IS_WALL,
            f"Destination {destination} is a known wall",
        )

    grid.prepare_for_search(source)

    if source == destination:
        return PathResult(ShortestPath(), PathStopReason.ALREADY_AT_TARGET, "Already at destination")

    steps = astar(grid, source, destination)
    if steps is None:
        logger.debug(f"find_shortest_path: A* found no path from {source} to {destination}")
        return PathResult(
            ShortestPath(), PathStopReason.NO_PATH_EXISTS,
            f"No path through known territory from {source} to {destination}",
        )

    path = retrace_path(grid, source, destination)
    logger.debug(f"find_shortest_path: {source} -> {destination} in {steps} steps")
    return PathResult(path, PathStopReason.SUCCESS)


def astar(grid: GridMap, source: Position, destination: Position) -> Optional[int]:
    """
    A* search writing step distances into the grid.

    The grid must already hold 1 at the source (see
    ``GridMap.prepare_for_search``). Cells are expanded in order of
    ``stored distance + Manhattan distance to destination`` and the search
    stops as soon as the destination is popped. A cell can sit in the
    frontier several times; a stale entry still expands, but none of its
    neighbours pass the improvement check against the updated values.

    Args:
        grid: Grid memory with known walls and the source seeded
        source: Starting position
        destination: Target position

    Returns:
        Number of steps from source to destination, or None if unreachable
    """
    # Priority queue: (priority, counter, position)
    # Counter keeps heap comparisons on ints when priorities are equal
    counter = 0
    frontier = [(0, counter, source)]
    expanded = 0

    while frontier:
        _, _, current = heapq.heappop(frontier)
        if current == destination:
            break
        expanded += 1

        current_value = grid.distance(current)
        for heading in HEADINGS:
            neighbor = current.move(heading)
            if not grid.in_bounds(neighbor) or grid.is_wall(neighbor):
                continue

            stored = grid.distance(neighbor)
            if stored == 0 or stored > current_value + 1:
                grid.set_distance(neighbor, current_value + 1)
                priority = current_value + 1 + _heuristic(neighbor, destination)
                counter += 1
                heapq.heappush(frontier, (priority, counter, neighbor))

    logger.debug(f"astar: expanded {expanded} cells from {source} toward {destination}")
    return grid.steps_to(destination)


def retrace_path(grid: GridMap, source: Position, destination: Position) -> ShortestPath:
    """
    Rebuild the headings of a shortest path from a solved distance field.

    Walks backward from the destination, each time stepping onto the first
    neighbour (in N/E/S/W order) whose distance is exactly one less, and
    records the heading that leads forward from that neighbour. Among
    equally short paths, the scan order decides which one is returned.

    Args:
        grid: Grid memory filled in by ``astar``
        source: Position the search started from
        destination: Position the search reached

    Returns:
        ShortestPath whose i-th heading is the i-th move from source

    Raises:
        PathNotFoundError: If the distance field does not lead back to source
    """
    steps = grid.steps_to(destination)
    if steps is None:
        raise PathNotFoundError(f"Destination {destination} was never reached")

    path = ShortestPath.of_length(steps)
    index = steps
    current = destination

    while current != source:
        current_value = grid.distance(current)
        for heading in HEADINGS:
            neighbor = current.move(heading)
            if not grid.in_bounds(neighbor):
                continue
            if grid.distance(neighbor) == current_value - 1:
                path.headings[index] = heading.opposite
                index -= 1
                current = neighbor
                break
        else:
            raise PathNotFoundError(
                f"No neighbour of {current} is one step closer to {source}"
            )

    return path


def bfs_distances(open_cells: np.ndarray, start: Position) -> Iterator[tuple[int, Position]]:
    """
    Generator that yields reachable positions via BFS.

    Used for picking far-away targets in generated mazes.

    Args:
        open_cells: 2D boolean grid indexed [y, x], True where a cell is open
        start: Starting position

    Yields:
        Tuple of (distance, position) for each reachable position in BFS order
    """
    height, width = open_cells.shape
    visited = {start}
    queue = deque([(0, start)])

    while queue:
        dist, pos = queue.popleft()
        yield (dist, pos)

        for neighbor in pos.adjacent():
            if neighbor in visited:
                continue
            if not (0 <= neighbor.x < width and 0 <= neighbor.y < height):
                continue
            if not open_cells[neighbor.y, neighbor.x]:
                continue
            visited.add(neighbor)
            queue.append((dist + 1, neighbor))


def _heuristic(a: Position, b: Position) -> int:
    """
    Heuristic for A* (Manhattan distance).

    Admissible on a 4-connected grid with unit moves, since no diagonal
    shortcuts exist.
    """
    return a.manhattan_to(b)
