"""
Navigation session state.

Everything the navigator remembers between turns lives in one session
object that is handed to each turn's decision and reinitialised by reset.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from mazebot.api.models import Position
from mazebot.api.pathfinding import ShortestPath
from mazebot.memory import MAX_MAZE_SIZE, GridMap, JunctionStack

from .logging import DecisionLogger

decision_logger = DecisionLogger()


class NavigationMode(Enum):
    """Behaviour the navigator runs on the current turn."""

    EXPLORE = "explore"
    BACKTRACK = "backtrack"
    FOLLOW_PATH = "follow_path"


@dataclass
class NavigationSession:
    """State of one maze attempt."""

    max_maze_size: int = MAX_MAZE_SIZE
    seed: Optional[int] = None

    mode: NavigationMode = NavigationMode.EXPLORE
    start: Optional[Position] = None
    path: Optional[ShortestPath] = None
    maze_is_loopy: bool = False
    loop_reversals: int = 0
    turn: int = 0
    discovery_turns: Optional[int] = None
    wall_frame: Optional[np.ndarray] = None

    grid: GridMap = field(init=False)
    junctions: JunctionStack = field(init=False)
    rng: random.Random = field(init=False)

    def __post_init__(self):
        self.grid = GridMap(self.max_maze_size)
        self.junctions = JunctionStack()
        self.rng = random.Random(self.seed)

    @property
    def started(self) -> bool:
        """Whether the first turn of this attempt has been taken."""
        return self.start is not None

    @property
    def discovery_complete(self) -> bool:
        """Whether the maze has been fully mapped and solved."""
        return self.mode == NavigationMode.FOLLOW_PATH

    def switch_mode(self, mode: NavigationMode, position: Optional[Position] = None) -> None:
        """Change behaviour, logging transitions."""
        if mode != self.mode:
            decision_logger.log_mode_change(self.turn, self.mode.value, mode.value, position)
            self.mode = mode
