"""Tests for headings, positions and sensing models."""

import pytest

from mazebot.api.models import HEADINGS, CellKind, Heading, MazeKind, Position


class TestHeading:
    """Tests for Heading enum."""

    def test_scan_order(self):
        """Test neighbour scans run north, east, south, west."""
        assert HEADINGS == (Heading.NORTH, Heading.EAST, Heading.SOUTH, Heading.WEST)

    def test_deltas(self):
        """Test heading deltas use y growing southwards."""
        assert Heading.NORTH.delta == (0, -1)
        assert Heading.EAST.delta == (1, 0)
        assert Heading.SOUTH.delta == (0, 1)
        assert Heading.WEST.delta == (-1, 0)

    def test_opposite(self):
        """Test opposite headings."""
        assert Heading.NORTH.opposite == Heading.SOUTH
        assert Heading.EAST.opposite == Heading.WEST
        assert Heading.SOUTH.opposite == Heading.NORTH
        assert Heading.WEST.opposite == Heading.EAST

    def test_opposite_is_involution(self):
        """Test reversing twice gives the same heading back."""
        for heading in HEADINGS:
            assert heading.opposite.opposite == heading

    def test_from_string(self):
        """Test parsing full names and single letters."""
        assert Heading.from_string("north") == Heading.NORTH
        assert Heading.from_string("EAST") == Heading.EAST
        assert Heading.from_string("s") == Heading.SOUTH
        assert Heading.from_string(" W ") == Heading.WEST

    def test_from_string_invalid(self):
        """Test unknown heading names are rejected."""
        with pytest.raises(ValueError):
            Heading.from_string("up")


class TestMazeKind:
    """Tests for MazeKind enum."""

    def test_from_string(self):
        """Test parsing maze kinds."""
        assert MazeKind.from_string("tree") == MazeKind.TREE
        assert MazeKind.from_string("LOOPY") == MazeKind.LOOPY
        assert MazeKind.from_string("blank") == MazeKind.BLANK

    def test_from_string_invalid(self):
        """Test unknown maze kinds are rejected."""
        with pytest.raises(ValueError, match="Unknown maze kind"):
            MazeKind.from_string("spiral")


class TestCellKind:
    """Tests for CellKind enum."""

    def test_values(self):
        """Test the three sensing results are distinct."""
        assert len({CellKind.WALL, CellKind.PASSAGE, CellKind.BEEN_BEFORE}) == 3


class TestPosition:
    """Tests for Position dataclass."""

    def test_move(self):
        """Test moving one cell in each heading."""
        pos = Position(5, 5)
        assert pos.move(Heading.NORTH) == Position(5, 4)
        assert pos.move(Heading.EAST) == Position(6, 5)
        assert pos.move(Heading.SOUTH) == Position(5, 6)
        assert pos.move(Heading.WEST) == Position(4, 5)

    def test_move_and_back(self):
        """Test a move followed by its opposite returns to the start."""
        pos = Position(3, 7)
        for heading in HEADINGS:
            assert pos.move(heading).move(heading.opposite) == pos

    def test_manhattan(self):
        """Test Manhattan distance."""
        assert Position(0, 0).manhattan_to(Position(3, 4)) == 7
        assert Position(2, 2).manhattan_to(Position(2, 2)) == 0

    def test_adjacent_in_scan_order(self):
        """Test adjacent cells follow the scan order."""
        assert Position(1, 1).adjacent() == [
            Position(1, 0),
            Position(2, 1),
            Position(1, 2),
            Position(0, 1),
        ]

    def test_hashable_and_ordered(self):
        """Test positions work in sets and sort by x then y."""
        cells = {Position(1, 2), Position(1, 2), Position(2, 1)}
        assert len(cells) == 2
        assert sorted([Position(2, 0), Position(1, 5)]) == [Position(1, 5), Position(2, 0)]
