"""Tests for A* shortest paths and path retracing."""

import numpy as np
import pytest

from mazebot.api.environment import GridMaze
from mazebot.api.generation import generate_maze
from mazebot.api.models import Heading, MazeKind, Position
from mazebot.api.pathfinding import (
    PathStopReason,
    ShortestPath,
    astar,
    bfs_distances,
    find_shortest_path,
    retrace_path,
)
from mazebot.exceptions import PathExhaustedError, PathNotFoundError
from mazebot.memory import GridMap


def grid_from_maze(maze: GridMaze) -> GridMap:
    """Build grid memory that already knows every wall of a maze."""
    grid = GridMap(max(maze.width, maze.height))
    for y in range(maze.height):
        for x in range(maze.width):
            if not maze.is_open(Position(x, y)):
                grid.mark_wall(Position(x, y))
    return grid


def bfs_steps(maze: GridMaze, source: Position, destination: Position):
    for dist, pos in bfs_distances(np.array(maze.open_cells), source):
        if pos == destination:
            return dist
    return None


class TestShortestPath:
    """Tests for ShortestPath."""

    def test_empty_path(self):
        """Test the default path holds only the sentinel."""
        path = ShortestPath()
        assert len(path) == 0
        assert path.is_finished
        assert list(path) == []

    def test_of_length(self):
        """Test allocating room for a number of steps."""
        path = ShortestPath.of_length(3)
        assert len(path) == 3
        assert path.headings[0] is None
        assert path.remaining == 3

    def test_next_heading_advances(self):
        """Test moves are handed out in order."""
        path = ShortestPath(headings=[None, Heading.EAST, Heading.SOUTH])
        assert path.next_heading() == Heading.EAST
        assert path.remaining == 1
        assert path.next_heading() == Heading.SOUTH
        assert path.is_finished

    def test_exhausted_path_raises(self):
        """Test asking past the last move raises."""
        path = ShortestPath(headings=[None, Heading.EAST])
        path.next_heading()
        with pytest.raises(PathExhaustedError):
            path.next_heading()

    def test_rewind(self):
        """Test walking the path again from the start."""
        path = ShortestPath(headings=[None, Heading.EAST, Heading.SOUTH])
        path.next_heading()
        path.next_heading()
        path.rewind()
        assert path.next_heading() == Heading.EAST

    def test_replay(self):
        """Test replaying a path from a source."""
        path = ShortestPath(headings=[None, Heading.EAST, Heading.EAST, Heading.SOUTH])
        assert path.replay(Position(1, 1)) == Position(3, 2)


class TestFindShortestPath:
    """Tests for find_shortest_path."""

    def test_open_grid_tie_break(self):
        """Test equal-length routes are decided by the north-first retrace scan."""
        grid = GridMap(3)
        result = find_shortest_path(grid, Position(0, 0), Position(1, 1))

        assert result.success
        assert result.distance == 2
        assert list(result.path) == [Heading.EAST, Heading.SOUTH]

    def test_straight_corridor(self):
        """Test a one-cell wide corridor."""
        maze = GridMaze.from_ascii("""
S####
.####
.####
.####
T####
""")
        grid = grid_from_maze(maze)
        result = find_shortest_path(grid, maze.start, maze.target)

        assert result.success
        assert list(result.path) == [Heading.SOUTH] * 4

    def test_detour_around_wall(self):
        """Test the path goes around walls."""
        maze = GridMaze.from_ascii("""
#######
#S#...#
#.#.#.#
#...#T#
#######
""")
        grid = grid_from_maze(maze)
        result = find_shortest_path(grid, maze.start, maze.target)

        assert result.success
        assert result.distance == 10
        assert result.path.replay(maze.start) == maze.target

    def test_matches_bfs_on_generated_mazes(self):
        """Test path lengths agree with breadth-first search."""
        for seed in range(5):
            for kind in (MazeKind.TREE, MazeKind.LOOPY):
                maze = generate_maze(15, 15, kind=kind, seed=seed)
                grid = grid_from_maze(maze)
                result = find_shortest_path(grid, maze.start, maze.target)

                assert result.success
                assert result.distance == bfs_steps(maze, maze.start, maze.target)
                assert result.path.replay(maze.start) == maze.target

    def test_path_never_enters_walls(self):
        """Test every cell along the path is open."""
        maze = generate_maze(21, 21, kind=MazeKind.LOOPY, seed=11)
        grid = grid_from_maze(maze)
        result = find_shortest_path(grid, maze.start, maze.target)

        pos = maze.start
        for heading in result.path:
            pos = pos.move(heading)
            assert maze.is_open(pos)

    def test_already_at_target(self):
        """Test source equal to destination."""
        grid = GridMap(5)
        result = find_shortest_path(grid, Position(2, 2), Position(2, 2))

        assert not result
        assert result.reason == PathStopReason.ALREADY_AT_TARGET
        assert len(result.path) == 0

    def test_target_out_of_bounds(self):
        """Test a destination outside the grid."""
        grid = GridMap(5)
        result = find_shortest_path(grid, Position(0, 0), Position(10, 10))
        assert result.reason == PathStopReason.TARGET_OUT_OF_BOUNDS

    def test_target_is_wall(self):
        """Test a destination known to be a wall."""
        grid = GridMap(5)
        grid.mark_wall(Position(3, 3))
        result = find_shortest_path(grid, Position(0, 0), Position(3, 3))
        assert result.reason == PathStopReason.TARGET_IS_WALL

    def test_no_path(self):
        """Test an enclosed destination."""
        grid = GridMap(5)
        for pos in Position(2, 2).adjacent():
            grid.mark_wall(pos)

        result = find_shortest_path(grid, Position(0, 0), Position(2, 2))

        assert not result.success
        assert result.reason == PathStopReason.NO_PATH_EXISTS
        assert "No path" in result.message

    def test_clears_junction_markers(self):
        """Test the search repurposes the grid."""
        grid = GridMap(5)
        grid.mark_junction(Position(4, 4))
        find_shortest_path(grid, Position(0, 0), Position(2, 0))
        assert grid.count_junctions() == 0


class TestAstar:
    """Tests for the A* distance fill."""

    def test_source_distance_is_one(self):
        """Test the source keeps the stored value 1."""
        grid = GridMap(5)
        grid.prepare_for_search(Position(0, 0))
        steps = astar(grid, Position(0, 0), Position(4, 0))

        assert steps == 4
        assert grid.distance(Position(0, 0)) == 1
        assert grid.distance(Position(4, 0)) == 5

    def test_walls_stay_unreached(self):
        """Test walls never receive a distance."""
        grid = GridMap(5)
        grid.mark_wall(Position(1, 0))
        grid.prepare_for_search(Position(0, 0))
        astar(grid, Position(0, 0), Position(2, 0))

        assert grid.distance(Position(1, 0)) == 0
        assert grid.steps_to(Position(2, 0)) == 4


class TestRetracePath:
    """Tests for retrace_path."""

    def test_unreached_destination_raises(self):
        """Test retracing before the destination was reached."""
        grid = GridMap(5)
        grid.prepare_for_search(Position(0, 0))
        with pytest.raises(PathNotFoundError):
            retrace_path(grid, Position(0, 0), Position(3, 3))

    def test_broken_distance_field_raises(self):
        """Test a gap in the distance field is reported."""
        grid = GridMap(5)
        grid.prepare_for_search(Position(0, 0))
        grid.set_distance(Position(3, 3), 4)
        with pytest.raises(PathNotFoundError):
            retrace_path(grid, Position(0, 0), Position(3, 3))


class TestBfsDistances:
    """Tests for bfs_distances."""

    def test_yields_in_distance_order(self):
        """Test BFS yields nondecreasing distances starting at the source."""
        open_cells = np.ones((4, 4), dtype=bool)
        results = list(bfs_distances(open_cells, Position(0, 0)))

        assert results[0] == (0, Position(0, 0))
        distances = [dist for dist, _ in results]
        assert distances == sorted(distances)
        assert len(results) == 16
        assert results[-1] == (6, Position(3, 3))

    def test_skips_closed_cells(self):
        """Test closed cells are never yielded."""
        open_cells = np.array([
            [True, False, True],
            [True, False, True],
            [True, True, True],
        ])
        results = dict((pos, dist) for dist, pos in bfs_distances(open_cells, Position(0, 0)))

        assert Position(1, 0) not in results
        assert results[Position(2, 0)] == 6
