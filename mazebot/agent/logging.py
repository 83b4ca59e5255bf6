"""
Logging helpers for navigator runs.

Creates timestamped log files for a run and provides named loggers for
navigation decisions and maze state, so a whole discovery can be replayed
from the log.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from mazebot.api.models import Heading, Position


class RunLogger:
    """
    Manages logging for a single run.

    Creates a timestamped log file and routes all records to it.
    """

    LOG_DIR = Path("./data/logs")

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Initialize the run logger.

        Args:
            log_dir: Directory for log files (defaults to ./data/logs)
        """
        self.log_dir = log_dir or self.LOG_DIR
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.run_id = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.log_file = self.log_dir / f"run_{self.run_id}.log"

        self._file_handler: Optional[logging.FileHandler] = None
        self._original_handlers: list[logging.Handler] = []
        self._original_handler_levels: list[int] = []
        self._original_level = logging.NOTSET

    def setup(self) -> Path:
        """
        Set up logging for this run.

        The run file receives every record down to DEBUG. Handlers that were
        already installed keep filtering at the previously configured level,
        so the console stays as quiet as the user asked for.

        Returns:
            Path to the log file
        """
        self._file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
        self._file_handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        self._file_handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        self._original_handlers = root_logger.handlers.copy()
        self._original_handler_levels = [handler.level for handler in self._original_handlers]
        self._original_level = root_logger.level
        configured_level = root_logger.getEffectiveLevel()

        for handler in self._original_handlers:
            handler.setLevel(max(handler.level, configured_level))
        root_logger.handlers = self._original_handlers + [self._file_handler]
        root_logger.setLevel(logging.DEBUG)

        logger = logging.getLogger("mazebot.session")
        logger.info("=" * 80)
        logger.info(f"RUN STARTED: {self.run_id}")
        logger.info(f"Log file: {self.log_file}")
        logger.info("=" * 80)

        return self.log_file

    def teardown(self) -> None:
        """Clean up logging handlers and restore the previous levels."""
        logger = logging.getLogger("mazebot.session")
        logger.info("=" * 80)
        logger.info(f"RUN ENDED: {self.run_id}")
        logger.info("=" * 80)

        if self._file_handler:
            root_logger = logging.getLogger()
            for handler, level in zip(self._original_handlers, self._original_handler_levels):
                handler.setLevel(level)
            root_logger.handlers = self._original_handlers
            root_logger.setLevel(self._original_level)
            self._file_handler.close()
            self._file_handler = None


class DecisionLogger:
    """Logger for navigation decisions that change the agent's behaviour."""

    def __init__(self):
        self.logger = logging.getLogger("agent.decision")

    def log_mode_change(self, turn: int, old_mode: str, new_mode: str, position: Position) -> None:
        """Log a switch between explore, backtrack and follow-path."""
        self.logger.debug(f"DECISION: turn={turn} | {old_mode} -> {new_mode} | at {position}")

    def log_loop_reversal(self, turn: int, position: Position, reversals: int) -> None:
        """Log a reversal at an already mapped junction."""
        self.logger.info(
            f"DECISION: turn={turn} | loop detected at {position} | reversals={reversals}"
        )

    def log_discovery_complete(
        self,
        turn: int,
        start: Position,
        target: Position,
        path_length: int,
        junctions_seen: int,
    ) -> None:
        """Log the end of discovery and the solved route."""
        params = {
            "start": [start.x, start.y],
            "target": [target.x, target.y],
            "path_length": path_length,
            "junctions": junctions_seen,
        }
        self.logger.info(f"DECISION: turn={turn} | discovery complete | params={json.dumps(params)}")


class MazeStateLogger:
    """Logger for maze state changes."""

    def __init__(self):
        self.logger = logging.getLogger("maze.state")
        self.map_logger = logging.getLogger("maze.map")

    def log_state(
        self,
        turn: int,
        position: Position,
        heading: Heading,
        mode: str,
    ) -> None:
        """Log the agent's state for one turn."""
        self.logger.debug(
            f"Turn {turn}: Pos {position}, Heading {heading.value}, Mode {mode}"
        )

    def log_map(self, title: str, ascii_map: str) -> None:
        """Log an ASCII rendering of a map."""
        self.map_logger.debug(f"{title}:")
        for line in ascii_map.split('\n'):
            self.map_logger.debug(f"  {line}")


# Global instance for the current run
_current_run: Optional[RunLogger] = None


def setup_run_logging(log_dir: Optional[Path] = None) -> Path:
    """
    Set up logging for a new run.

    Args:
        log_dir: Optional custom log directory

    Returns:
        Path to the log file
    """
    global _current_run

    if _current_run:
        _current_run.teardown()

    _current_run = RunLogger(log_dir)
    return _current_run.setup()


def teardown_run_logging() -> None:
    """Clean up logging for the current run."""
    global _current_run

    if _current_run:
        _current_run.teardown()
        _current_run = None
