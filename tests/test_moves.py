"""
Unit tests for move legality, reachability and step replay.
"""
import os
import sys

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from grid import Direction
from model import Door, Piece, Placement, Step, make_game_data
from moves import (
    IllegalMoveError, apply_step, can_move, drag_range, is_won, legal_steps,
    reachable_positions, replay, revert_step, snap_position, unwind,
)


def piece(cells, rows=4, cols=4):
    return Piece.from_cells(cells, rows, cols)


def test_reachable_open_row():
    pieces = [piece([(0, 0)])]
    reach = reachable_positions(pieces, 0, 4, 4)
    assert reach[Direction.RIGHT] == [(0, 1), (0, 2), (0, 3)]
    assert reach[Direction.DOWN] == [(1, 0), (2, 0), (3, 0)]
    assert reach[Direction.UP] == []
    assert reach[Direction.LEFT] == []


def test_reachable_stops_before_other_piece():
    pieces = [piece([(0, 0)]), piece([(0, 2)])]
    assert reachable_positions(pieces, 0, 4, 4)[Direction.RIGHT] == [(0, 1)]


def test_reachable_multi_cell_piece():
    pieces = [piece([(0, 0), (1, 0), (1, 1)]), piece([(3, 1)])]
    reach = reachable_positions(pieces, 0, 4, 4)
    assert reach[Direction.DOWN] == [(1, 0)]
    assert reach[Direction.RIGHT] == [(0, 1), (0, 2)]


def test_boxed_in_piece():
    pieces = [
        piece([(0, 0)], 2, 2), piece([(0, 1)], 2, 2),
        piece([(1, 0)], 2, 2), piece([(1, 1)], 2, 2),
    ]
    reach = reachable_positions(pieces, 0, 2, 2)
    assert all(stops == [] for stops in reach.values())
    assert legal_steps(pieces, 2, 2) == []


def test_can_move_distance():
    pieces = [piece([(0, 0)]), piece([(0, 3)])]
    assert can_move(pieces, 0, Direction.RIGHT, 4, 4, distance=2)
    assert not can_move(pieces, 0, Direction.RIGHT, 4, 4, distance=3)
    assert not can_move(pieces, 0, Direction.UP, 4, 4)
    assert not can_move(pieces, 7, Direction.DOWN, 4, 4)


def test_apply_and_revert_step():
    pieces = [piece([(1, 1)])]
    step = Step(piece_index=0, direction=Direction.RIGHT)
    moved = apply_step(pieces, step, 4, 4)
    assert moved[0].position == (1, 2)
    assert moved[0].in_board[1, 2] and not moved[0].in_board[1, 1]
    assert pieces[0].position == (1, 1)
    assert revert_step(moved, step, 4, 4)[0].position == (1, 1)


def test_illegal_step_raises():
    pieces = [piece([(0, 0)]), piece([(0, 1)])]
    with pytest.raises(IllegalMoveError):
        apply_step(pieces, Step(piece_index=0, direction=Direction.RIGHT), 4, 4)
    with pytest.raises(IllegalMoveError):
        apply_step(pieces, Step(piece_index=0, direction=Direction.UP), 4, 4)


def test_replay_then_unwind():
    pieces = [piece([(0, 0)]), piece([(3, 3)])]
    steps = [
        Step(piece_index=0, direction=Direction.DOWN),
        Step(piece_index=0, direction=Direction.RIGHT),
        Step(piece_index=1, direction=Direction.UP),
    ]
    end = replay(pieces, steps, 4, 4)
    assert end[0].position == (1, 1)
    assert end[1].position == (2, 3)
    start = unwind(end, steps, 4, 4)
    assert start == pieces


def test_drag_range():
    pieces = [piece([(1, 1)]), piece([(1, 3)])]
    assert drag_range(pieces, 0, 4, 4) == (0, 3, 0, 2)


def test_snap_position():
    pieces = [piece([(1, 1)]), piece([(1, 3)])]
    assert snap_position(pieces, 0, (1, 3), 4, 4) == (1, 2)
    assert snap_position(pieces, 0, (3, 2), 4, 4) == (3, 1)
    assert snap_position(pieces, 0, (1, 1), 4, 4) == (1, 1)


def test_is_won():
    king = Piece(shape=np.ones((1, 2), dtype=bool), position=(3, 1)).rebuild(5, 4)
    door = Door(placement=Placement.BOTTOM, start_index=1, x_size=2, y_size=1)
    game = make_game_data(5, 4, [king], 0, door)
    assert not is_won(game)
    moved = apply_step(game.piece_list, Step(piece_index=0, direction=Direction.DOWN), 5, 4)
    assert is_won(game, moved)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
