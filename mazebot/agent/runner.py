"""
Run loop that drives a navigator through a maze.

The first run on a maze discovers and solves it; any further run on the
same maze replays the learned shortest path from the start.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from mazebot.api.environment import GridMaze
from mazebot.api.models import MazeKind
from mazebot.exceptions import MazeBotError

from .logging import MazeStateLogger
from .navigator import MazeNavigator

logger = logging.getLogger(__name__)
maze_state_logger = MazeStateLogger()


@dataclass
class EpisodeResult:
    """Result of one run through a maze."""

    run: int
    started_at: datetime
    ended_at: Optional[datetime] = None
    end_reason: str = ""
    reached_target: bool = False
    turns: int = 0
    bumps: int = 0
    discovery_turns: Optional[int] = None
    path_length: Optional[int] = None
    maze_kind: Optional[MazeKind] = None
    loop_reversals: int = 0
    errors: list[str] = field(default_factory=list)


def run_episode(
    maze: GridMaze,
    navigator: MazeNavigator,
    max_turns: int = 1000000,
    run: int = 1,
) -> EpisodeResult:
    """
    Drive the agent until it stands on the target or runs out of turns.

    Args:
        maze: Maze to move the agent through
        navigator: Navigator choosing a heading every turn
        max_turns: Turn limit for this run
        run: Run number, 1 for the discovery run

    Returns:
        EpisodeResult with the run's outcome
    """
    result = EpisodeResult(run=run, started_at=datetime.now())
    logger.info(f"Run {run} started on {maze}")

    try:
        while not maze.at_target:
            if result.turns >= max_turns:
                result.end_reason = "turn_limit"
                logger.warning(f"Run {run} stopped after {max_turns} turns")
                break

            heading = navigator.decide(maze)
            maze_state_logger.log_state(
                navigator.session.turn, maze.position, heading, navigator.mode.value
            )
            maze.move(heading)
            result.turns += 1
    except MazeBotError as e:
        logger.exception(f"Run {run} failed: {e}")
        result.end_reason = "error"
        result.errors.append(str(e))

    session = navigator.session
    result.ended_at = datetime.now()
    result.reached_target = maze.at_target
    result.bumps = maze.bumps
    result.discovery_turns = session.discovery_turns
    result.path_length = len(session.path) if session.path else None
    result.maze_kind = navigator.classify()
    result.loop_reversals = session.loop_reversals
    if result.reached_target:
        result.end_reason = "reached_target"

    logger.info(
        f"Run {run} ended: {result.end_reason} after {result.turns} turns "
        f"(path length {result.path_length}, maze {result.maze_kind})"
    )
    return result


def run_maze(
    maze: GridMaze,
    navigator: MazeNavigator,
    runs: int = 1,
    max_turns: int = 1000000,
) -> list[EpisodeResult]:
    """
    Run the agent through the same maze several times.

    Stops early if a run does not reach the target.
    """
    results = []
    for run in range(1, runs + 1):
        if run > 1:
            maze.reset()
            navigator.restart_run()

        result = run_episode(maze, navigator, max_turns=max_turns, run=run)
        results.append(result)
        if not result.reached_target:
            break

    if navigator.session.grid.max_x > 1:
        maze_state_logger.log_map(
            "Discovered map", navigator.session.grid.to_ascii(marks={maze.target: "T"})
        )
    return results
