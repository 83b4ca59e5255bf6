"""Map memory built up while the agent discovers a maze."""

from .grid import MAX_MAZE_SIZE, GridMap
from .junctions import JunctionRecord, JunctionStack

__all__ = [
    # Grid
    "GridMap",
    "MAX_MAZE_SIZE",
    # Junctions
    "JunctionRecord",
    "JunctionStack",
]
