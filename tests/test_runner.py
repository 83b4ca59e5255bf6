"""Tests for the run loop and run logging."""

import logging
from unittest.mock import MagicMock

from mazebot.agent import EpisodeResult, MazeNavigator, run_episode, run_maze
from mazebot.agent.logging import (
    DecisionLogger,
    RunLogger,
    setup_run_logging,
    teardown_run_logging,
)
from mazebot.api.environment import GridMaze
from mazebot.api.generation import generate_maze
from mazebot.api.models import MazeKind, Position
from mazebot.exceptions import NavigationError

LOOP_MAZE = """
#######
#S....#
#.###.#
#.....#
###T###
#######
"""


class TestRunEpisode:
    """Tests for run_episode."""

    def test_reaches_target(self):
        """Test a full discovery run."""
        maze = GridMaze.from_ascii(LOOP_MAZE)
        navigator = MazeNavigator(seed=1)

        result = run_episode(maze, navigator)

        assert isinstance(result, EpisodeResult)
        assert result.reached_target
        assert result.end_reason == "reached_target"
        assert result.turns == maze.moves
        assert result.path_length == 5
        assert result.maze_kind == MazeKind.LOOPY
        assert result.loop_reversals >= 1
        assert result.discovery_turns is not None
        assert result.ended_at >= result.started_at
        assert result.errors == []

    def test_turn_limit(self):
        """Test a run stops at the turn limit."""
        maze = generate_maze(21, 21, seed=2)
        navigator = MazeNavigator(seed=2)

        result = run_episode(maze, navigator, max_turns=3)

        assert not result.reached_target
        assert result.end_reason == "turn_limit"
        assert result.turns == 3
        assert result.path_length is None
        assert result.maze_kind is None

    def test_navigation_error_recorded(self):
        """Test navigator failures end the run and are recorded."""
        maze = GridMaze.from_ascii(LOOP_MAZE)
        navigator = MazeNavigator(seed=1)
        navigator.decide = MagicMock(side_effect=NavigationError("stuck"))

        result = run_episode(maze, navigator)

        assert not result.reached_target
        assert result.end_reason == "error"
        assert result.errors == ["stuck"]


class TestRunMaze:
    """Tests for run_maze."""

    def test_later_runs_follow_the_path(self):
        """Test runs after the first walk only the learned path."""
        maze = generate_maze(15, 15, kind=MazeKind.TREE, seed=6)
        navigator = MazeNavigator(seed=6)

        results = run_maze(maze, navigator, runs=3)

        assert len(results) == 3
        assert all(result.reached_target for result in results)
        assert [result.run for result in results] == [1, 2, 3]
        assert results[0].turns > results[0].path_length
        assert results[1].turns == results[1].path_length
        assert results[2].turns == results[1].turns

    def test_stops_after_failed_run(self):
        """Test no replay is attempted when discovery did not finish."""
        maze = generate_maze(21, 21, seed=2)
        navigator = MazeNavigator(seed=2)

        results = run_maze(maze, navigator, runs=3, max_turns=5)

        assert len(results) == 1
        assert not results[0].reached_target


class TestRunLogger:
    """Tests for run log files."""

    def test_setup_and_teardown(self, tmp_path):
        """Test a run log file is created and released."""
        run_logger = RunLogger(tmp_path)
        log_file = run_logger.setup()

        logging.getLogger("mazebot.test").info("hello from the run")
        run_logger.teardown()

        assert log_file.parent == tmp_path
        assert log_file.name.startswith("run_")
        content = log_file.read_text()
        assert "RUN STARTED" in content
        assert "hello from the run" in content
        assert "RUN ENDED" in content

    def test_console_keeps_configured_level(self, tmp_path):
        """Test existing handlers stay at the configured level during a run."""
        root_logger = logging.getLogger()
        console = logging.StreamHandler()
        original_handlers = root_logger.handlers.copy()
        original_level = root_logger.level
        root_logger.addHandler(console)
        root_logger.setLevel(logging.WARNING)
        try:
            log_file = setup_run_logging(tmp_path)
            assert console.level == logging.WARNING
            logging.getLogger("mazebot.test").debug("turn detail")
            teardown_run_logging()

            assert "turn detail" in log_file.read_text()
            assert console.level == logging.NOTSET
            assert root_logger.level == logging.WARNING
            assert root_logger.handlers == original_handlers + [console]
        finally:
            root_logger.handlers = original_handlers
            root_logger.setLevel(original_level)


class TestDecisionLogger:
    """Tests for DecisionLogger."""

    def test_discovery_complete(self, caplog):
        """Test the end of discovery is logged with its parameters."""
        decision_logger = DecisionLogger()
        with caplog.at_level(logging.INFO, logger="agent.decision"):
            decision_logger.log_discovery_complete(42, Position(1, 1), Position(5, 3), 8, 4)

        assert "discovery complete" in caplog.text
        assert '"path_length": 8' in caplog.text

    def test_loop_reversal(self, caplog):
        """Test loop reversals are logged."""
        decision_logger = DecisionLogger()
        with caplog.at_level(logging.INFO, logger="agent.decision"):
            decision_logger.log_loop_reversal(7, Position(3, 3), 2)

        assert "loop detected at Position(x=3, y=3)" in caplog.text
        assert "reversals=2" in caplog.text

    def test_mode_change_is_debug(self, caplog):
        """Test mode changes are only logged at debug level."""
        decision_logger = DecisionLogger()
        with caplog.at_level(logging.INFO, logger="agent.decision"):
            decision_logger.log_mode_change(1, "explore", "backtrack", Position(1, 1))
        assert "backtrack" not in caplog.text

        with caplog.at_level(logging.DEBUG, logger="agent.decision"):
            decision_logger.log_mode_change(1, "explore", "backtrack", Position(1, 1))
        assert "explore -> backtrack" in caplog.text
