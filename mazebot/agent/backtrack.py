"""
Backtracking through explored territory.

Chooses the next heading when no unexplored passage is reachable from the
current cell, walks back through recorded junctions, detects when the agent
has rejoined an already mapped loop and, once the last junction is popped
at the start, solves the maze.
"""

import logging

from mazebot.api.environment import MazeHost
from mazebot.api.models import HEADINGS, CellKind, Heading
from mazebot.api.pathfinding import find_shortest_path
from mazebot.exceptions import NavigationError

from .explorer import count_adjacent, explore_control
from .logging import DecisionLogger
from .session import NavigationMode, NavigationSession

logger = logging.getLogger(__name__)
decision_logger = DecisionLogger()

# The start always counts as a junction when backtracking
START_EXITS = 3


def dead_end_move(host: MazeHost) -> Heading:
    """Return the only heading that does not lead into a wall."""
    for heading in HEADINGS:
        if host.look(heading) != CellKind.WALL:
            return heading
    raise NavigationError(f"Cell {host.position} is walled in on all sides")


def corridor_move(host: MazeHost, arrived: Heading) -> Heading:
    """Keep going along a corridor instead of turning back."""
    back = arrived.opposite
    for heading in HEADINGS:
        if heading == back:
            continue
        if host.look(heading) != CellKind.WALL:
            return heading
    return back


def backtrack_control(session: NavigationSession, host: MazeHost, arrived: Heading) -> Heading:
    """
    Decide where to go when there is no fresh passage ahead.

    Dead ends and corridors are simply followed. At a junction:

    1. If it is an already visited junction other than the most recent one,
       the agent has come round a loop into mapped territory: turn back.
    2. If it still has unexplored passages, explore one of them.
    3. Otherwise leave it the way it was first entered. Popping the last
       junction means the agent is back at the start and the maze is
       fully mapped, so the shortest path is computed and followed.

    Args:
        session: Current navigation session
        host: Maze host to sense with
        arrived: Heading used to arrive on the current cell

    Returns:
        Heading to move in this turn
    """
    pos = host.position
    exits = 4 - count_adjacent(host, CellKind.WALL)
    if pos == session.start:
        exits = START_EXITS

    if exits == 1:
        return dead_end_move(host)
    if exits == 2:
        return corridor_move(host, arrived)

    junctions = session.junctions
    if not junctions.is_empty() and session.grid.is_junction(pos) and not junctions.is_top(pos):
        session.maze_is_loopy = True
        session.loop_reversals += 1
        decision_logger.log_loop_reversal(session.turn, pos, session.loop_reversals)
        return arrived.opposite

    heading = explore_control(session, host)
    if heading is not None:
        session.switch_mode(NavigationMode.EXPLORE, pos)
        return heading

    record = junctions.pop()
    heading = record.arrived.opposite
    logger.debug(f"Turn {session.turn}: left junction {record.position} heading {heading.value}")

    if junctions.is_empty():
        heading = finish_discovery(session, host)
    return heading


def finish_discovery(session: NavigationSession, host: MazeHost) -> Heading:
    """
    Solve the mapped maze and start following the shortest path.

    Called on the turn the junction stack empties, with the agent back on
    the start. Snapshots the discovered walls for later re-solving.

    Returns:
        First heading of the shortest path to the target
    """
    pos = host.position
    if pos != session.start:
        logger.warning(f"Discovery finished at {pos}, not at the start {session.start}")

    junctions_seen = session.grid.count_junctions()
    session.wall_frame = session.grid.snapshot_walls()
    result = find_shortest_path(session.grid, pos, host.target)
    if not result.success:
        raise NavigationError(f"Cannot reach target after discovery: {result.message}")

    session.path = result.path
    session.discovery_turns = session.turn
    session.switch_mode(NavigationMode.FOLLOW_PATH, pos)
    decision_logger.log_discovery_complete(
        session.turn, pos, host.target, len(result.path), junctions_seen
    )
    return session.path.next_heading()
