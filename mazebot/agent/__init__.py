"""Agent orchestration - per-turn navigation and the run loop."""

from .navigator import MazeNavigator, classify_maze, decide, plan_route, reset
from .runner import EpisodeResult, run_episode, run_maze
from .session import NavigationMode, NavigationSession

__all__ = [
    # Session
    "NavigationMode",
    "NavigationSession",
    # Navigator
    "MazeNavigator",
    "classify_maze",
    "decide",
    "plan_route",
    "reset",
    # Runner
    "EpisodeResult",
    "run_episode",
    "run_maze",
]
