"""
Exploration of unvisited passages.

Records what the agent senses into the grid memory, pushes newly found
junctions and picks a random unexplored passage to follow. The target cell
is never offered as a passage: the whole maze is mapped before the agent
is allowed to finish.
"""

import logging
from typing import Optional

from mazebot.api.environment import MazeHost
from mazebot.api.models import HEADINGS, CellKind, Heading
from mazebot.memory import JunctionRecord

from .session import NavigationSession

logger = logging.getLogger(__name__)


def leads_to_target(host: MazeHost, heading: Heading) -> bool:
    """Check if moving in a heading would step onto the target."""
    return host.position.move(heading) == host.target


def headings_towards(host: MazeHost, kind: CellKind) -> list[Heading]:
    """
    Headings whose adjacent cell senses as a given kind.

    The target cell is never reported, whatever it senses as.
    """
    return [
        heading for heading in HEADINGS
        if host.look(heading) == kind and not leads_to_target(host, heading)
    ]


def count_adjacent(host: MazeHost, kind: CellKind) -> int:
    """Number of adjacent cells (excluding the target) of a given kind."""
    return len(headings_towards(host, kind))


def record_surroundings(session: NavigationSession, host: MazeHost, arrived: Heading) -> None:
    """
    Store sensed walls and register the current cell if it is a new junction.

    A junction is any cell with at most one wall around it. It is pushed
    with the heading the agent arrived on, so that backtracking can later
    leave it the way it came in.

    Args:
        session: Current navigation session
        host: Maze host to sense with
        arrived: Heading used to arrive on the current cell
    """
    grid = session.grid
    pos = host.position

    walls = headings_towards(host, CellKind.WALL)
    for heading in walls:
        neighbor = pos.move(heading)
        if not grid.in_bounds(neighbor):
            logger.debug(f"record_surroundings: wall at {neighbor} is outside the grid, skipped")
            continue
        grid.mark_wall(neighbor)

    if len(walls) <= 1 and not grid.is_junction(pos):
        grid.mark_junction(pos)
        session.junctions.push(JunctionRecord(pos, arrived))
        logger.debug(f"Turn {session.turn}: new junction at {pos} (arrived {arrived.value})")


def explore_control(session: NavigationSession, host: MazeHost) -> Optional[Heading]:
    """
    Pick an unexplored passage to follow.

    Args:
        session: Current navigation session (provides the random source)
        host: Maze host to sense with

    Returns:
        A random heading leading into an unexplored passage, or None when
        there is none and the agent has to backtrack
    """
    passages = headings_towards(host, CellKind.PASSAGE)
    if not passages:
        return None
    return session.rng.choice(passages)
