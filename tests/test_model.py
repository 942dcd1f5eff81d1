"""
Unit tests for the puzzle model (Piece, Door, GameData).
"""
import os
import sys

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from grid import Direction
from model import (
    Door, GameData, GameDataError, Piece, Placement, Step, board_mask,
    derive_from_occupancy, fit_door, make_game_data, overlapping_pairs,
    owner_map, project, project_all,
)


def assert_tight(piece):
    """Every border row and column of the shape has an occupied cell."""
    shape = piece.shape
    assert shape[0].any() and shape[-1].any()
    assert shape[:, 0].any() and shape[:, -1].any()


def test_piece_single():
    piece = Piece.single((2, 1), 4, 4)
    assert piece.position == (2, 1)
    assert piece.shape.shape == (1, 1)
    assert piece.in_board[2, 1]
    assert piece.in_board.sum() == 1


def test_derive_from_occupancy():
    board = np.zeros((5, 4), dtype=bool)
    board[1, 1] = board[2, 1] = board[2, 2] = True
    piece = derive_from_occupancy(board)
    assert piece.position == (1, 1)
    assert np.array_equal(piece.shape, np.array([[True, False], [True, True]]))
    assert piece.height == 2 and piece.width == 2
    assert_tight(piece)


def test_derive_from_empty_is_none():
    assert derive_from_occupancy(np.zeros((3, 3), dtype=bool)) is None


def test_derive_is_idempotent():
    board = np.zeros((5, 5), dtype=bool)
    board[1:4, 2] = True
    board[3, 3] = True
    piece = derive_from_occupancy(board)
    again = derive_from_occupancy(piece.in_board)
    assert again == piece
    assert np.array_equal(again.in_board, piece.in_board)


def test_project_inside_board():
    piece = Piece(shape=np.ones((1, 2), dtype=bool), position=(3, 1))
    projected = project(piece, 5, 4)
    assert projected.position == (3, 1)
    assert projected.in_board[3, 1] and projected.in_board[3, 2]
    assert projected.in_board.shape == (5, 4)


def test_project_clips_and_renormalizes():
    """Shrinking the board truncates a piece and recomputes its box."""
    piece = Piece.from_cells([(2, 2), (2, 3), (3, 3)], 5, 5)
    projected = project(piece, 5, 3)
    assert projected.position == (2, 2)
    assert projected.shape.shape == (1, 1)
    assert_tight(projected)


def test_project_vanishes():
    piece = Piece.single((4, 4), 5, 5)
    assert project(piece, 3, 3) is None


def test_project_all_clears_vanished_king():
    pieces = [Piece.single((0, 0), 5, 5), Piece.single((4, 4), 5, 5), Piece.single((1, 1), 5, 5)]
    projected, king = project_all(pieces, 1, 3, 3)
    assert len(projected) == 2
    assert king is None

    projected, king = project_all(pieces, 2, 3, 3)
    assert king == 1
    assert projected[king].position == (1, 1)


def test_owner_map_and_board_mask():
    pieces = [Piece.from_cells([(0, 0), (0, 1)], 3, 3), Piece.single((2, 2), 3, 3)]
    owners = owner_map(pieces, 3, 3)
    assert owners[0, 0] == 0 and owners[0, 1] == 0
    assert owners[2, 2] == 1
    assert owners[1, 1] == -1
    assert owner_map(pieces, 3, 3, exclude=0)[0, 0] == -1
    assert board_mask(pieces, 3, 3).sum() == 3
    assert overlapping_pairs(pieces) == []


def test_overlapping_pairs_detected():
    pieces = [Piece.single((1, 1), 3, 3), Piece.from_cells([(1, 1), (1, 2)], 3, 3)]
    assert overlapping_pairs(pieces) == [(0, 1)]


def test_king_win_pos_bottom_door():
    """5x4 board, bottom door at 1 with a 1x2 king ends at (4, 1)."""
    king = Piece(shape=np.ones((1, 2), dtype=bool), position=(3, 1)).rebuild(5, 4)
    door = Door(placement=Placement.BOTTOM, start_index=1, x_size=2, y_size=1)
    game = make_game_data(5, 4, [king], 0, door)
    assert game.king_win_pos == (4, 1)


@pytest.mark.parametrize("placement,start,expected", [
    (Placement.TOP, 1, (0, 1)),
    (Placement.LEFT, 2, (2, 0)),
    (Placement.RIGHT, 2, (2, 2)),
    (Placement.BOTTOM, 0, (3, 0)),
])
def test_king_win_pos_each_edge(placement, start, expected):
    king = Piece(shape=np.ones((2, 2), dtype=bool), position=(0, 0)).rebuild(5, 4)
    door = Door(placement=placement, start_index=start, x_size=2, y_size=2)
    assert make_game_data(5, 4, [king], 0, door).king_win_pos == expected


def test_make_game_data_requires_pieces_and_king():
    door = Door(placement=Placement.BOTTOM, start_index=0, x_size=1, y_size=1)
    with pytest.raises(GameDataError):
        make_game_data(3, 3, [], None, door)
    with pytest.raises(GameDataError):
        make_game_data(3, 3, [Piece.single((0, 0), 3, 3)], None, door)


def test_fit_door_centres_and_clamps():
    king = Piece(shape=np.ones((2, 2), dtype=bool), position=(0, 0)).rebuild(5, 4)
    door = fit_door(Placement.BOTTOM, None, king, 5, 4)
    assert door.start_index == 1
    assert door.span == 2

    door = fit_door(Placement.BOTTOM, 3, king, 5, 4)
    assert door.start_index == 2
    assert door.fits(5, 4)

    door = fit_door(Placement.LEFT, 10, king, 5, 4)
    assert door.start_index == 3
    assert door.span == 2


def test_game_data_dict_round_trip():
    king = Piece(shape=np.ones((2, 2), dtype=bool), position=(0, 1)).rebuild(5, 4)
    other = Piece.from_cells([(3, 0), (4, 0)], 5, 4)
    door = Door(placement=Placement.BOTTOM, start_index=1, x_size=2, y_size=2)
    game = make_game_data(5, 4, [king, other], 0, door)
    game.solution = [Step(piece_index=0, direction=Direction.DOWN)]

    data = game.to_dict()
    assert data["kingWinPos"] == [3, 1]
    assert data["solution"] == [{"pieceIndex": 0, "direction": [1, 0]}]

    restored = GameData.from_dict(data)
    assert restored.piece_list == game.piece_list
    assert restored.door == game.door
    assert restored.solution == game.solution
    assert restored.piece_list[1].in_board[4, 0]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
