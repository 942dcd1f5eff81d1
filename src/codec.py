"""
Flat grid codec.
Converts between GameData and the bordered integer grid used for
storage, solver exchange and duplicate detection.

Grid values: WALL (-2) impassable border, EMPTY (-1) free board cell or
door opening, v >= 0 cell of piece v. The king is always piece 0.
"""
import hashlib
import json
from typing import List, Optional, Tuple

import numpy as np

from config import config
from model import (
    Door, GameData, Piece, Placement, derive_from_occupancy, make_game_data,
)

WALL = -2
EMPTY = -1

FlatGrid = List[List[int]]


class CodecError(ValueError):
    """Raised for malformed flat grids."""


def _as_array(flat) -> np.ndarray:
    if not isinstance(flat, (list, tuple)) or not flat:
        raise CodecError("Flat grid must be a non-empty list of rows")
    if not all(isinstance(row, (list, tuple)) for row in flat):
        raise CodecError("Flat grid rows must be lists")
    widths = {len(row) for row in flat}
    if len(widths) != 1:
        raise CodecError("Flat grid is not rectangular")
    arr = np.array(flat)
    if not np.issubdtype(arr.dtype, np.integer):
        raise CodecError(f"Flat grid holds non-integer values (dtype {arr.dtype})")
    arr = arr.astype(np.int64)
    if arr.ndim != 2 or arr.shape[0] < 3 or arr.shape[1] < 3:
        raise CodecError(f"Flat grid too small: {arr.shape}")
    if (arr < WALL).any():
        raise CodecError(f"Unknown sentinel value {int(arr.min())}")
    return arr


def _edges(arr: np.ndarray) -> List[Tuple[Placement, np.ndarray]]:
    """Border edges without corners, in detection order."""
    return [
        (Placement.TOP, arr[0, 1:-1]),
        (Placement.RIGHT, arr[1:-1, -1]),
        (Placement.BOTTOM, arr[-1, 1:-1]),
        (Placement.LEFT, arr[1:-1, 0]),
    ]


def _find_door(arr: np.ndarray, king: Piece) -> Door:
    corners = [arr[0, 0], arr[0, -1], arr[-1, 0], arr[-1, -1]]
    if any(v != WALL for v in corners):
        raise CodecError("Border corners must be walls")
    door = None
    for placement, edge in _edges(arr):
        if (edge >= 0).any():
            raise CodecError(f"Piece cell on the {placement.value} border")
        openings = np.flatnonzero(edge == EMPTY)
        if len(openings) == 0:
            continue
        if door is not None:
            raise CodecError("More than one door")
        start = int(openings[0])
        if openings[-1] - start + 1 != len(openings):
            raise CodecError(f"Door on the {placement.value} edge is not contiguous")
        door = Door(placement=placement, start_index=start, x_size=king.width, y_size=king.height)
        if len(openings) != door.span:
            raise CodecError(
                f"Door opening on the {placement.value} edge is {len(openings)} cells, king needs {door.span}"
            )
    if door is None:
        raise CodecError("No door opening on the border")
    return door


def decode(flat) -> GameData:
    """
    Decode a bordered flat grid into GameData.

    Raises:
        CodecError: the grid is malformed
    """
    arr = _as_array(flat)
    interior = arr[1:-1, 1:-1]
    rows, cols = interior.shape

    ids = sorted(int(v) for v in np.unique(interior) if v >= 0)
    if not ids:
        raise CodecError("No piece on the board")
    if ids != list(range(len(ids))):
        raise CodecError(f"Piece indices are not contiguous: {ids}")
    if (interior == WALL).any():
        raise CodecError("Wall sentinel inside the board")

    pieces = [derive_from_occupancy(interior == i) for i in ids]
    door = _find_door(arr, pieces[0])
    if not door.fits(rows, cols):
        raise CodecError("Door does not fit its edge")

    game = make_game_data(rows, cols, pieces, 0, door)
    if config.DEBUG:
        print(f"[CODEC] decoded {rows}x{cols} board, {len(pieces)} pieces, door {door.placement.value}@{door.start_index}")
    return game


def encode(game: GameData) -> FlatGrid:
    """
    Encode GameData as a bordered flat grid.

    The king is renumbered to 0 and the remaining pieces keep their
    relative order.
    """
    rows, cols = game.board_rows, game.board_cols
    if game.king_piece_index is None:
        raise CodecError("Cannot encode a puzzle without a king piece")
    arr = np.full((rows + 2, cols + 2), WALL, dtype=np.int64)
    arr[1:-1, 1:-1] = EMPTY

    for i, piece in enumerate(_king_first(game)):
        for r, c in piece.cells():
            arr[r + 1, c + 1] = i

    door = game.door
    start = door.start_index + 1
    placement = Placement(door.placement)
    if placement == Placement.TOP:
        arr[0, start:start + door.x_size] = EMPTY
    elif placement == Placement.BOTTOM:
        arr[rows + 1, start:start + door.x_size] = EMPTY
    elif placement == Placement.LEFT:
        arr[start:start + door.y_size, 0] = EMPTY
    else:
        arr[start:start + door.y_size, cols + 1] = EMPTY
    return arr.tolist()


def _king_first(game: GameData) -> List[Piece]:
    king = game.king_piece_index
    return [game.piece_list[king]] + [p for i, p in enumerate(game.piece_list) if i != king]


def dumps(game: GameData) -> str:
    """JSON text of the flat grid."""
    return json.dumps(encode(game))


def loads(text: str) -> GameData:
    try:
        flat = json.loads(text)
    except json.JSONDecodeError as e:
        raise CodecError(f"Flat grid is not valid JSON: {e}")
    return decode(flat)


def identity_hash(game: GameData) -> str:
    """
    Content hash of a layout, independent of piece list order.

    The king's shape and position are hashed first under their own keys;
    the other pieces follow sorted by position (row, then column),
    ties broken by their occupied cells.
    """
    if game.king_piece_index is None:
        raise CodecError("Cannot hash a puzzle without a king piece")
    king = game.piece_list[game.king_piece_index]
    others = [p for i, p in enumerate(game.piece_list) if i != game.king_piece_index]
    others.sort(key=lambda p: (p.position[0], p.position[1], p.cells()))

    data = [
        {"boardRows": game.board_rows},
        {"boardCols": game.board_cols},
        {"kingWinPos": list(game.king_win_pos)},
        {"kingPieceShape": king.shape.tolist()},
        {"kingPiecePosition": list(king.position)},
    ]
    for piece in others:
        data.append({"pieceShape": piece.shape.tolist()})
        data.append({"piecePosition": list(piece.position)})
    payload = json.dumps(data, separators=(',', ':'))
    return hashlib.md5(payload.encode('utf-8')).hexdigest()


def same_layout(a: GameData, b: GameData) -> bool:
    return identity_hash(a) == identity_hash(b)


def board_text(game: GameData, pieces: Optional[List[Piece]] = None) -> str:
    """ASCII board: king as K, other pieces as their index (mod 10), empty as '·'."""
    pieces = game.piece_list if pieces is None else pieces
    rows = [['·'] * game.board_cols for _ in range(game.board_rows)]
    for i, piece in enumerate(pieces):
        mark = 'K' if i == game.king_piece_index else str(i % 10)
        for r, c in piece.cells():
            rows[r][c] = mark
    return '\n'.join(''.join(row) for row in rows)
