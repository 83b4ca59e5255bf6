"""Configuration management for the maze navigator."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from mazebot.api.models import Heading, MazeKind

logger = logging.getLogger(__name__)


@dataclass
class AgentConfig:
    """Navigator configuration."""

    # Largest maze side the grid memory can address
    max_maze_size: int = 405
    # Seed for the random choice between unexplored passages (None = random)
    seed: Optional[int] = None

    # Runtime settings
    max_turns: int = 1000000
    # Runs per maze; every run after the first replays the learned path
    runs: int = 1


@dataclass
class MazeConfig:
    """Generated maze configuration."""

    width: int = 21
    height: int = 21
    # Options: "tree", "loopy", "blank"
    kind: str = "tree"
    # Extra walls knocked out for loopy mazes (0 = derived from maze size)
    extra_openings: int = 0
    seed: Optional[int] = None
    initial_heading: str = "east"

    def get_kind(self) -> MazeKind:
        """Get maze kind as enum."""
        return MazeKind.from_string(self.kind)

    def get_initial_heading(self) -> Heading:
        """Get initial heading as enum."""
        return Heading.from_string(self.initial_heading)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = "./data/mazebot.log"
    log_decisions: bool = True
    log_maps: bool = False


@dataclass
class Config:
    """Main configuration container."""

    agent: AgentConfig = field(default_factory=AgentConfig)
    maze: MazeConfig = field(default_factory=MazeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    if config_path is None:
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            if "agent" in data:
                config.agent = AgentConfig(**data["agent"])
            if "maze" in data:
                config.maze = MazeConfig(**data["maze"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])

    # Environment variable overrides
    if os.environ.get("MAZEBOT_SEED"):
        config.agent.seed = int(os.environ["MAZEBOT_SEED"])
    if os.environ.get("MAZEBOT_MAX_MAZE_SIZE"):
        config.agent.max_maze_size = int(os.environ["MAZEBOT_MAX_MAZE_SIZE"])
    if os.environ.get("MAZEBOT_MAZE_KIND"):
        config.maze.kind = os.environ["MAZEBOT_MAZE_KIND"]
    if os.environ.get("MAZEBOT_LOG_LEVEL"):
        config.logging.level = os.environ["MAZEBOT_LOG_LEVEL"]

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )

    if not config.log_decisions:
        logging.getLogger("agent.decision").setLevel(logging.WARNING)
    if not config.log_maps:
        logging.getLogger("maze.map").setLevel(logging.INFO)

    logger.info(f"Logging configured at level {config.level}")
