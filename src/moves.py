"""
Move legality and reachability.
Pure functions answering where a piece may slide, and replaying steps
forward and backward for play, undo/redo and solution playback.
"""
from typing import Dict, List, Optional, Tuple

import numpy as np

from config import config
from grid import Cell, Direction
from model import GameData, Piece, Step, owner_map


class IllegalMoveError(ValueError):
    """Raised when a step would leave the board or collide with another piece."""


def _fits_at(piece: Piece, position: Cell, blocked: np.ndarray) -> bool:
    """Every occupied cell on the board and clear of other pieces."""
    rows, cols = blocked.shape
    if not piece.fits(rows, cols, position):
        return False
    r0, c0 = position
    for dr, dc in zip(*np.where(piece.shape)):
        if blocked[r0 + int(dr), c0 + int(dc)]:
            return False
    return True


def _blocked_by_others(pieces: List[Piece], index: int, rows: int, cols: int) -> np.ndarray:
    return owner_map(pieces, rows, cols, exclude=index) >= 0


def reachable_positions(pieces: List[Piece], index: int,
                        rows: int, cols: int) -> Dict[Direction, List[Cell]]:
    """
    All positions piece `index` can slide to, per direction.

    Each list is ordered from nearest to farthest and ends before the
    first position that leaves the board or hits another piece. A boxed-in
    piece gets empty lists.
    """
    piece = pieces[index]
    blocked = _blocked_by_others(pieces, index, rows, cols)
    reachable = {}
    for direction in Direction:
        stops = []
        position = direction.step(piece.position)
        while _fits_at(piece, position, blocked):
            stops.append(position)
            position = direction.step(position)
        reachable[direction] = stops
    return reachable


def can_move(pieces: List[Piece], index: int, direction: Direction,
             rows: int, cols: int, distance: int = 1) -> bool:
    """Whether piece `index` can slide `distance` cells along direction."""
    if not 0 <= index < len(pieces) or distance < 1:
        return False
    piece = pieces[index]
    blocked = _blocked_by_others(pieces, index, rows, cols)
    return all(
        _fits_at(piece, direction.step(piece.position, k), blocked)
        for k in range(1, distance + 1)
    )


def legal_steps(pieces: List[Piece], rows: int, cols: int) -> List[Step]:
    """Every legal single-cell step over the whole piece list."""
    steps = []
    for i in range(len(pieces)):
        for direction in Direction:
            if can_move(pieces, i, direction, rows, cols):
                steps.append(Step(piece_index=i, direction=direction))
    return steps


def drag_range(pieces: List[Piece], index: int, rows: int, cols: int) -> Tuple[int, int, int, int]:
    """
    Bounds for dragging piece `index`: (min_row, max_row, min_col, max_col).

    Vertical bounds come from the up/down stops, horizontal bounds from
    the left/right stops.
    """
    r0, c0 = pieces[index].position
    reach = reachable_positions(pieces, index, rows, cols)
    up, down = reach[Direction.UP], reach[Direction.DOWN]
    left, right = reach[Direction.LEFT], reach[Direction.RIGHT]
    return (
        up[-1][0] if up else r0,
        down[-1][0] if down else r0,
        left[-1][1] if left else c0,
        right[-1][1] if right else c0,
    )


def snap_position(pieces: List[Piece], index: int, target: Cell,
                  rows: int, cols: int) -> Cell:
    """
    Nearest legal stop for a drag towards target.

    The drag is locked to the axis with the larger displacement and snaps
    to the closest reachable stop along it (or stays put).
    """
    piece = pieces[index]
    dr = target[0] - piece.position[0]
    dc = target[1] - piece.position[1]
    if dr == 0 and dc == 0:
        return piece.position
    if abs(dc) > abs(dr):
        direction = Direction.RIGHT if dc > 0 else Direction.LEFT
        distance = abs(dc)
    else:
        direction = Direction.DOWN if dr > 0 else Direction.UP
        distance = abs(dr)
    stops = reachable_positions(pieces, index, rows, cols)[direction]
    if not stops:
        return piece.position
    return stops[min(distance, len(stops)) - 1]


def _translate(pieces: List[Piece], index: int, direction: Direction,
               rows: int, cols: int) -> List[Piece]:
    moved = pieces[index].moved(direction).rebuild(rows, cols)
    new_pieces = list(pieces)
    new_pieces[index] = moved
    return new_pieces


def apply_step(pieces: List[Piece], step: Step, rows: int, cols: int) -> List[Piece]:
    """New piece list with the step applied; raises IllegalMoveError if illegal."""
    if not can_move(pieces, step.piece_index, step.direction, rows, cols):
        raise IllegalMoveError(
            f"Piece {step.piece_index} cannot move {step.direction.name.lower()}"
        )
    return _translate(pieces, step.piece_index, step.direction, rows, cols)


def revert_step(pieces: List[Piece], step: Step, rows: int, cols: int) -> List[Piece]:
    """Undo a previously applied step (moves the piece back)."""
    reverse = Step(piece_index=step.piece_index, direction=step.direction.opposite)
    return apply_step(pieces, reverse, rows, cols)


def replay(pieces: List[Piece], steps: List[Step], rows: int, cols: int) -> List[Piece]:
    """Apply steps in order."""
    for step in steps:
        pieces = apply_step(pieces, step, rows, cols)
    return pieces


def unwind(pieces: List[Piece], steps: List[Step], rows: int, cols: int) -> List[Piece]:
    """Revert steps in reverse order."""
    for step in reversed(steps):
        pieces = revert_step(pieces, step, rows, cols)
    return pieces


def is_won(game: GameData, pieces: Optional[List[Piece]] = None) -> bool:
    """Whether the king sits on its win position."""
    pieces = game.piece_list if pieces is None else pieces
    if game.king_piece_index is None:
        return False
    won = tuple(pieces[game.king_piece_index].position) == tuple(game.king_win_pos)
    if won and config.DEBUG:
        print(f"[MOVES] king reached {game.king_win_pos}")
    return won
