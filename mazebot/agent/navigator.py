"""
Per-turn navigation.

Dispatches each turn to exploration, backtracking or path following
depending on the session's mode, and keeps the agent off the target until
the maze has been fully mapped.

Two entry points are exposed to a maze host: ``decide`` for every turn and
``reset`` when a new attempt begins. ``MazeNavigator`` bundles them with a
session for callers that do not want to carry the session around.
"""

import logging
from typing import Optional

from mazebot.api.environment import MazeHost
from mazebot.api.models import CellKind, Heading, MazeKind, Position
from mazebot.api.pathfinding import PathResult, ShortestPath, find_shortest_path
from mazebot.config import AgentConfig
from mazebot.exceptions import NavigationError, OutOfBoundsError
from mazebot.memory import JunctionRecord

from .backtrack import backtrack_control
from .explorer import count_adjacent, explore_control, leads_to_target, record_surroundings
from .session import NavigationMode, NavigationSession

logger = logging.getLogger(__name__)

# Arrival heading recorded for a start that is not a junction by itself
SYNTHETIC_START_ARRIVAL = Heading.SOUTH


def begin(session: NavigationSession, host: MazeHost) -> None:
    """
    Start a new attempt on the host's maze.

    A start that is not a branch point is still registered as a junction so
    that the backtracking walk always ends there.
    """
    if host.width > session.max_maze_size or host.height > session.max_maze_size:
        raise OutOfBoundsError(host.width - 1, host.height - 1, session.max_maze_size)

    start = host.position
    session.start = start
    if count_adjacent(host, CellKind.WALL) > 1:
        session.grid.mark_junction(start)
        session.junctions.push(JunctionRecord(start, SYNTHETIC_START_ARRIVAL))

    logger.info(f"Starting maze attempt at {start}, target {host.target}")


def decide(session: NavigationSession, host: MazeHost) -> Heading:
    """
    Choose the heading for this turn.

    Args:
        session: State of the current attempt, updated in place
        host: Maze host to sense with

    Returns:
        Heading the host should move the agent in
    """
    if not session.started:
        begin(session, host)

    session.turn += 1
    pos = host.position
    arrived = host.heading

    if session.mode == NavigationMode.EXPLORE:
        record_surroundings(session, host, arrived)
        heading = explore_control(session, host)
        if heading is None:
            session.switch_mode(NavigationMode.BACKTRACK, pos)
            heading = backtrack_control(session, host, arrived)
        session.grid.extend_bounds(pos.move(heading))
    elif session.mode == NavigationMode.BACKTRACK:
        heading = backtrack_control(session, host, arrived)
    else:
        heading = session.path.next_heading()

    # Never step onto the target before the maze is mapped
    if session.mode != NavigationMode.FOLLOW_PATH and leads_to_target(host, heading):
        logger.debug(f"Turn {session.turn}: target ahead at {host.target}, turning back")
        heading = arrived.opposite

    return heading


def reset(session: NavigationSession) -> None:
    """Forget the maze and go back to exploring, as for a new attempt."""
    session.grid.clear()
    session.junctions.clear()
    session.mode = NavigationMode.EXPLORE
    session.start = None
    session.path = None
    session.maze_is_loopy = False
    session.loop_reversals = 0
    session.turn = 0
    session.discovery_turns = None
    session.wall_frame = None
    session.rng.seed(session.seed)


def classify_maze(session: NavigationSession) -> Optional[MazeKind]:
    """
    Classify the maze once discovery is complete.

    Returns:
        BLANK if no wall was found inside the known extent, LOOPY if a loop
        was detected while mapping, TREE otherwise; None before completion
    """
    if not session.discovery_complete:
        return None

    grid = session.grid
    if grid.count_open_in_bounds() == grid.max_x * grid.max_y:
        return MazeKind.BLANK
    if session.maze_is_loopy:
        return MazeKind.LOOPY
    return MazeKind.TREE


def plan_route(session: NavigationSession, source: Position, destination: Position) -> PathResult:
    """
    Re-solve the mapped maze between two arbitrary cells.

    The grid is reinitialised from the wall snapshot taken when discovery
    finished, so the session's own path is left untouched.
    """
    if session.wall_frame is None:
        raise NavigationError("The maze has not been mapped yet")

    session.grid.restore_walls(session.wall_frame)
    return find_shortest_path(session.grid, source, destination)


class MazeNavigator:
    """
    Navigator bound to its own session.

    Example usage:
        navigator = MazeNavigator(seed=7)
        while not maze.at_target:
            maze.move(navigator.decide(maze))
    """

    def __init__(self, max_maze_size: Optional[int] = None, seed: Optional[int] = None):
        defaults = AgentConfig()
        self.session = NavigationSession(
            max_maze_size=max_maze_size or defaults.max_maze_size,
            seed=seed,
        )

    @classmethod
    def from_config(cls, config: AgentConfig) -> "MazeNavigator":
        """Create a navigator from agent configuration."""
        return cls(max_maze_size=config.max_maze_size, seed=config.seed)

    def decide(self, host: MazeHost) -> Heading:
        """Choose the heading for this turn."""
        return decide(self.session, host)

    def reset(self) -> None:
        """Forget the maze, as for a new attempt."""
        reset(self.session)

    def restart_run(self) -> None:
        """
        Prepare for another run on an already solved maze.

        The learned path is kept and walked again from its first step; the
        host is expected to have put the agent back on the start.
        """
        if not self.session.discovery_complete:
            raise NavigationError("Cannot restart a run before the maze is solved")
        self.session.path.rewind()

    def classify(self) -> Optional[MazeKind]:
        """Classify the mapped maze."""
        return classify_maze(self.session)

    def plan_route(self, source: Position, destination: Position) -> PathResult:
        """Re-solve the mapped maze between two cells."""
        return plan_route(self.session, source, destination)

    @property
    def mode(self) -> NavigationMode:
        return self.session.mode

    @property
    def path(self) -> Optional[ShortestPath]:
        return self.session.path
