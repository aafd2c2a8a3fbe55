"""Tests for the hex board model: coordinates, classification, values."""

import pytest

from hexclash.models.board import HexBoard, HexType
from hexclash.models.hex import HexCoord
from hexclash.util import constants


def _board():
    return HexBoard()


class TestBoardCoordinates:
    def test_default_board_has_91_hexes(self):
        board = _board()
        coords = list(board.all_coordinates())
        assert len(coords) == 91
        assert len(board) == 91
        assert len(set(coords)) == 91

    def test_coordinate_order(self):
        coords = list(_board().all_coordinates())
        assert coords[0] == HexCoord(-5, 0)
        assert coords[-1] == HexCoord(5, 0)
        assert coords == sorted(coords)

    def test_every_coordinate_is_valid(self):
        board = _board()
        for h in board.all_coordinates():
            assert board.is_valid(h)
            assert h in board

    def test_off_board(self):
        board = _board()
        assert not board.is_valid(HexCoord(6, 0))
        assert not board.is_valid(HexCoord(3, 3))
        assert HexCoord(-3, -3) not in board

    def test_smaller_radius_with_own_landmarks(self):
        board = HexBoard(
            radius=2,
            starting_locations=frozenset({HexCoord(0, -2), HexCoord(0, 2)}),
            high_value_locations=frozenset({HexCoord(1, -1)}),
        )
        assert len(list(board.all_coordinates())) == 19

    def test_default_landmarks_need_radius_five(self):
        with pytest.raises(ValueError, match="radius-4"):
            HexBoard(radius=4)

    def test_larger_radius_keeps_landmarks(self):
        board = HexBoard(radius=6)
        assert len(board) == 127
        assert board.classify(HexCoord(0, -5)) == HexType.STARTING_LOCATION


class TestBoardNeighbors:
    def test_center_has_six(self):
        assert len(_board().neighbors(HexCoord(0, 0))) == 6

    def test_corner_has_three(self):
        board = _board()
        for corner in constants.STARTING_LOCATIONS:
            assert len(board.neighbors(corner)) == 3

    def test_edge_has_four(self):
        assert len(_board().neighbors(HexCoord(2, -5))) == 4

    def test_neighbors_are_symmetric(self):
        board = _board()
        for h in board.all_coordinates():
            for n in board.neighbors(h):
                assert h in board.neighbors(n)

    def test_ring_is_clipped(self):
        board = _board()
        assert len(board.ring(HexCoord(0, 0), 5)) == 30
        assert all(board.is_valid(h) for h in board.ring(HexCoord(5, 0), 2))
        assert board.ring(HexCoord(0, 0), 6) == []


class TestBoardClassification:
    def test_starting_locations(self):
        board = _board()
        for h in constants.STARTING_LOCATIONS:
            assert board.classify(h) == HexType.STARTING_LOCATION
            assert board.hex_value(h) == 1

    def test_high_value_locations(self):
        board = _board()
        for h in constants.HIGH_VALUE_LOCATIONS:
            assert board.classify(h) == HexType.HIGH_VALUE
            assert board.is_heart(h)
            assert board.hex_value(h) == 2
            assert board.control_bonus(h) == 1

    def test_center(self):
        board = _board()
        center = HexCoord(0, 0)
        assert board.classify(center) == HexType.CENTER
        assert board.is_heart(center)
        assert board.hex_value(center) == 2
        assert board.control_bonus(center) == 2

    def test_normal(self):
        board = _board()
        h = HexCoord(1, 1)
        assert board.classify(h) == HexType.NORMAL
        assert board.hex_value(h) == 1
        assert board.control_bonus(h) == 0

    def test_seven_heart_hexes(self):
        hearts = _board().heart_hexes()
        assert len(hearts) == 7
        assert hearts[-1] == HexCoord(0, 0)

    def test_type_counts(self):
        board = _board()
        kinds = [board.classify(h) for h in board.all_coordinates()]
        assert kinds.count(HexType.STARTING_LOCATION) == 6
        assert kinds.count(HexType.HIGH_VALUE) == 6
        assert kinds.count(HexType.CENTER) == 1
        assert kinds.count(HexType.NORMAL) == 78
