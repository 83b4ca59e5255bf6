"""
Maze generation.

Builds rectangular mazes for the agent to solve: perfect mazes carved with
a randomized depth-first search, loopy mazes made by knocking extra holes
into a perfect maze, and blank mazes with no interior walls.
"""

import logging
import random
from typing import Optional

import numpy as np

from .environment import GridMaze
from .models import Heading, MazeKind, Position
from .pathfinding import bfs_distances

logger = logging.getLogger(__name__)

MIN_SIDE = 5


def generate_maze(
    width: int = 21,
    height: int = 21,
    kind: MazeKind = MazeKind.TREE,
    extra_openings: int = 0,
    seed: Optional[int] = None,
    heading: Heading = Heading.EAST,
) -> GridMaze:
    """
    Generate a maze surrounded by walls.

    Rooms sit on odd coordinates and walls on even ones, so even sizes leave
    a double wall on the far side. The start is always (1, 1) and the target
    is the open cell farthest from it.

    Args:
        width: Total width in cells, including the outer walls
        height: Total height in cells, including the outer walls
        kind: Shape of the maze
        extra_openings: Walls to remove for loopy mazes (0 picks a default)
        seed: Random seed for reproducible mazes
        heading: Heading the agent faces before its first move

    Returns:
        GridMaze ready to be solved
    """
    if width < MIN_SIDE or height < MIN_SIDE:
        raise ValueError(f"Maze must be at least {MIN_SIDE}x{MIN_SIDE}, got {width}x{height}")

    rng = random.Random(seed)
    open_cells = np.zeros((height, width), dtype=bool)

    if kind == MazeKind.BLANK:
        open_cells[1:height - 1, 1:width - 1] = True
    else:
        _carve_tree(open_cells, rng)
        if kind == MazeKind.LOOPY:
            _add_loops(open_cells, rng, extra_openings)

    start = Position(1, 1)
    target = start
    for _, pos in bfs_distances(open_cells, start):
        target = pos

    logger.debug(f"generate_maze: {kind.value} {width}x{height}, start={start}, target={target}")
    return GridMaze(open_cells, start, target, heading)


def _rooms(open_cells: np.ndarray) -> list[Position]:
    height, width = open_cells.shape
    return [
        Position(x, y)
        for y in range(1, height - 1, 2)
        for x in range(1, width - 1, 2)
    ]


def _carve_tree(open_cells: np.ndarray, rng: random.Random) -> None:
    """Carve a perfect maze with a randomized depth-first search."""
    rooms = set(_rooms(open_cells))
    first = Position(1, 1)
    open_cells[first.y, first.x] = True
    visited = {first}
    stack = [first]

    while stack:
        current = stack[-1]
        neighbors = []

        for dx, dy in ((0, -2), (2, 0), (0, 2), (-2, 0)):
            candidate = Position(current.x + dx, current.y + dy)
            if candidate in rooms and candidate not in visited:
                neighbors.append(candidate)

        if neighbors:
            chosen = rng.choice(neighbors)
            # Knock down the wall between the two rooms
            open_cells[(current.y + chosen.y) // 2, (current.x + chosen.x) // 2] = True
            open_cells[chosen.y, chosen.x] = True
            visited.add(chosen)
            stack.append(chosen)
        else:
            stack.pop()  # Backtrack


def _add_loops(open_cells: np.ndarray, rng: random.Random, extra_openings: int) -> None:
    """Remove walls that separate two open rooms, creating cycles."""
    height, width = open_cells.shape
    candidates = []
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if open_cells[y, x]:
                continue
            horizontal = x % 2 == 0 and y % 2 == 1 and open_cells[y, x - 1] and open_cells[y, x + 1]
            vertical = x % 2 == 1 and y % 2 == 0 and open_cells[y - 1, x] and open_cells[y + 1, x]
            if horizontal or vertical:
                candidates.append(Position(x, y))

    if extra_openings <= 0:
        extra_openings = max(1, len(_rooms(open_cells)) // 8)

    for pos in rng.sample(candidates, min(extra_openings, len(candidates))):
        open_cells[pos.y, pos.x] = True
