"""
Command-line interface for the maze navigator.

Usage:
    mazebot solve                       Generate a maze from config and solve it
    mazebot solve --maze maze.txt       Solve a maze drawn in ASCII
    mazebot solve --runs 3 --show-map   Replay the learned path and print the map
    mazebot generate --kind loopy       Print a generated maze
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from mazebot.agent import EpisodeResult, MazeNavigator, run_maze
from mazebot.agent.logging import setup_run_logging, teardown_run_logging
from mazebot.api.environment import GridMaze
from mazebot.api.generation import generate_maze
from mazebot.api.models import Heading, MazeKind, Position
from mazebot.config import Config, load_config, setup_logging
from mazebot.exceptions import MazeBotError

logger = logging.getLogger(__name__)

CELL_STYLES = {
    "#": "bold blue",
    "S": "bold green",
    "T": "bold red",
    "*": "yellow",
}


def render_maze(maze: GridMaze, route: Optional[set[Position]] = None) -> Text:
    """Render a maze with the agent's route highlighted."""
    route = route or set()
    text = Text()
    for y, line in enumerate(maze.to_ascii().splitlines()):
        for x, char in enumerate(line):
            if char == "." and Position(x, y) in route:
                char = "*"
            text.append(char, style=CELL_STYLES.get(char, "dim"))
        text.append("\n")
    return text


def results_table(results: list[EpisodeResult]) -> Table:
    """Summarise runs as a table."""
    table = Table(title="Runs")
    table.add_column("Run", justify="right")
    table.add_column("Result")
    table.add_column("Turns", justify="right")
    table.add_column("Discovery", justify="right")
    table.add_column("Path", justify="right")
    table.add_column("Maze")
    table.add_column("Reversals", justify="right")

    for result in results:
        outcome = "[green]reached[/green]" if result.reached_target else f"[red]{result.end_reason}[/red]"
        table.add_row(
            str(result.run),
            outcome,
            str(result.turns),
            str(result.discovery_turns or "-"),
            str(result.path_length or "-"),
            result.maze_kind.value if result.maze_kind else "-",
            str(result.loop_reversals),
        )
    return table


def _build_maze(args: argparse.Namespace, config: Config) -> GridMaze:
    """Load the maze named on the command line, or generate one from config."""
    maze_config = config.maze
    heading = Heading.from_string(args.heading) if args.heading else maze_config.get_initial_heading()

    if getattr(args, "maze", None):
        return GridMaze.from_ascii(Path(args.maze).read_text(), heading=heading)

    kind = MazeKind.from_string(args.kind) if args.kind else maze_config.get_kind()
    return generate_maze(
        width=args.width or maze_config.width,
        height=args.height or maze_config.height,
        kind=kind,
        extra_openings=maze_config.extra_openings,
        seed=args.maze_seed if args.maze_seed is not None else maze_config.seed,
        heading=heading,
    )


def _route_cells(maze: GridMaze, navigator: MazeNavigator) -> set[Position]:
    path = navigator.path
    if path is None:
        return set()
    cells = set()
    pos = maze.start
    for heading in path:
        pos = pos.move(heading)
        cells.add(pos)
    return cells


def cmd_solve(args: argparse.Namespace, config: Config) -> int:
    """Solve one maze and report the runs."""
    console = Console()

    if args.seed is not None:
        config.agent.seed = args.seed
    runs = args.runs or config.agent.runs

    log_file = setup_run_logging()
    try:
        maze = _build_maze(args, config)
        navigator = MazeNavigator.from_config(config.agent)
        results = run_maze(maze, navigator, runs=runs, max_turns=config.agent.max_turns)
    except (MazeBotError, ValueError, OSError) as e:
        logger.exception(f"Solve failed: {e}")
        console.print(f"[red]Error:[/red] {e}")
        return 1
    finally:
        teardown_run_logging()

    if args.show_map:
        console.print(render_maze(maze, _route_cells(maze, navigator)))
    console.print(results_table(results))
    console.print(f"Log file: {log_file}", style="dim")

    return 0 if all(result.reached_target for result in results) else 2


def cmd_generate(args: argparse.Namespace, config: Config) -> int:
    """Print a generated maze in the ASCII format read by ``solve --maze``."""
    try:
        maze = _build_maze(args, config)
    except (MazeBotError, ValueError, OSError) as e:
        logger.error(f"Cannot generate maze: {e}")
        return 1

    if args.output:
        Path(args.output).write_text(maze.to_ascii() + "\n")
        logger.info(f"Maze written to {args.output}")
    else:
        print(maze.to_ascii())
    return 0


def _add_maze_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--width", type=int, default=None, help="Maze width in cells")
    parser.add_argument("--height", type=int, default=None, help="Maze height in cells")
    parser.add_argument(
        "--kind",
        type=str,
        default=None,
        choices=[kind.value for kind in MazeKind],
        help="Shape of the generated maze",
    )
    parser.add_argument("--maze-seed", type=int, default=None, help="Seed for maze generation")
    parser.add_argument(
        "--heading",
        type=str,
        default=None,
        help="Heading the agent faces before its first move (north/east/south/west)",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Maze navigator - discovers an unknown maze, then walks its shortest path",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level override",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # solve command
    solve_parser = subparsers.add_parser("solve", help="Discover and solve a maze")
    solve_parser.add_argument("--maze", "-m", type=str, default=None, help="ASCII maze file to solve")
    _add_maze_arguments(solve_parser)
    solve_parser.add_argument("--seed", type=int, default=None, help="Seed for the navigator")
    solve_parser.add_argument("--runs", "-r", type=int, default=None, help="Runs through the maze")
    solve_parser.add_argument("--show-map", action="store_true", help="Print the maze and route")
    solve_parser.set_defaults(func=cmd_solve)

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Print a generated maze")
    _add_maze_arguments(generate_parser)
    generate_parser.add_argument("--output", "-o", type=str, default=None, help="File to write to")
    generate_parser.set_defaults(func=cmd_generate)

    args = parser.parse_args(argv)

    # Load config and set up logging
    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
