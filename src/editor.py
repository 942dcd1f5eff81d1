"""
Piece editing with connectivity checks.
Single-cell create, extend and cut edits on a piece list. Every edit is
validated first; rejections come back as EditResult values, not exceptions.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import grid
from config import config
from grid import Cell
from model import Piece, derive_from_occupancy, owner_map


class EditOutcome(Enum):
    """Result codes for designer edits."""
    OK = "OK"
    OUT_OF_BOUNDS = "OutOfBounds"
    NO_PIECE = "NoPiece"
    OCCUPIED = "Occupied"
    NOT_ADJACENT = "NotAdjacent"
    BLOCKED = "Blocked"
    NOT_IN_PIECE = "NotInPiece"
    DISCONNECTS = "Disconnects"
    CREATES_HOLE = "CreatesHole"


@dataclass
class EditResult:
    """Outcome of an edit, with the new piece list on success."""
    success: bool
    outcome: EditOutcome
    pieces: List[Piece] = field(default_factory=list)
    king_index: Optional[int] = None
    piece_index: Optional[int] = None  # edited piece, None when it was removed
    message: str = ""


def _reject(outcome: EditOutcome, pieces: List[Piece], king_index: Optional[int],
            piece_index: Optional[int], message: str) -> EditResult:
    if config.DEBUG:
        print(f"[EDITOR] {outcome.value}: {message}")
    return EditResult(success=False, outcome=outcome, pieces=pieces,
                      king_index=king_index, piece_index=piece_index, message=message)


def _on_board(cell: Cell, rows: int, cols: int) -> bool:
    return 0 <= cell[0] < rows and 0 <= cell[1] < cols


def check_create(pieces: List[Piece], cell: Cell, rows: int, cols: int) -> EditOutcome:
    """A new single-cell piece may be created on any empty cell."""
    if not _on_board(cell, rows, cols):
        return EditOutcome.OUT_OF_BOUNDS
    if owner_map(pieces, rows, cols)[cell] >= 0:
        return EditOutcome.OCCUPIED
    return EditOutcome.OK


def create_piece(pieces: List[Piece], cell: Cell, rows: int, cols: int,
                 king_index: Optional[int] = None) -> EditResult:
    """Append a single-cell piece at cell."""
    outcome = check_create(pieces, cell, rows, cols)
    if outcome != EditOutcome.OK:
        return _reject(outcome, pieces, king_index, None, f"cannot create piece at {cell}")
    new_pieces = list(pieces) + [Piece.single(cell, rows, cols)]
    return EditResult(success=True, outcome=EditOutcome.OK, pieces=new_pieces,
                      king_index=king_index, piece_index=len(new_pieces) - 1)


def _extended_footprint(piece: Piece, cell: Cell):
    footprint = grid.clone(piece.in_board)
    footprint[cell] = True
    return grid.fill_holes(footprint)


def check_extend(pieces: List[Piece], index: int, cell: Cell, rows: int, cols: int) -> EditOutcome:
    """
    Validate growing piece `index` by one cell.

    The cell must be empty and orthogonally adjacent to the piece. After
    adding it and closing any hole it creates, the footprint must not
    swallow a cell owned by another piece.
    """
    if not 0 <= index < len(pieces):
        return EditOutcome.NO_PIECE
    if not _on_board(cell, rows, cols):
        return EditOutcome.OUT_OF_BOUNDS
    owners = owner_map(pieces, rows, cols)
    if owners[cell] >= 0:
        return EditOutcome.OCCUPIED
    piece = pieces[index]
    if not any(piece.in_board[nb] for nb in grid.neighbors(cell, rows, cols)):
        return EditOutcome.NOT_ADJACENT
    footprint = _extended_footprint(piece, cell)
    others = owners[footprint]
    if ((others >= 0) & (others != index)).any():
        return EditOutcome.BLOCKED
    return EditOutcome.OK


def extend_piece(pieces: List[Piece], index: int, cell: Cell, rows: int, cols: int,
                 king_index: Optional[int] = None) -> EditResult:
    """Grow piece `index` by one cell, filling any hole that closes."""
    outcome = check_extend(pieces, index, cell, rows, cols)
    if outcome != EditOutcome.OK:
        return _reject(outcome, pieces, king_index, index, f"cannot extend piece {index} to {cell}")
    new_piece = derive_from_occupancy(_extended_footprint(pieces[index], cell))
    new_pieces = list(pieces)
    new_pieces[index] = new_piece
    if config.DEBUG:
        print(f"[EDITOR] extended piece {index} to {cell}: {new_piece.height}x{new_piece.width}")
    return EditResult(success=True, outcome=EditOutcome.OK, pieces=new_pieces,
                      king_index=king_index, piece_index=index)


def check_cut(pieces: List[Piece], index: int, cell: Cell, rows: int, cols: int) -> EditOutcome:
    """
    Validate removing one cell from piece `index`.

    Rejected when the cell would be re-filled as an enclosed hole, or when
    the remaining cells would no longer form one 4-connected piece.
    """
    if not 0 <= index < len(pieces):
        return EditOutcome.NO_PIECE
    if not _on_board(cell, rows, cols):
        return EditOutcome.OUT_OF_BOUNDS
    piece = pieces[index]
    if not piece.in_board[cell]:
        return EditOutcome.NOT_IN_PIECE

    remaining = grid.clone(piece.in_board)
    remaining[cell] = False
    if grid.fill_holes(remaining)[cell]:
        return EditOutcome.CREATES_HOLE

    total = grid.count(remaining)
    if total == 0:
        return EditOutcome.OK
    start = next((nb for nb in grid.neighbors(cell, rows, cols) if remaining[nb]), None)
    if start is None or len(grid.flood_fill(remaining, start)) < total:
        return EditOutcome.DISCONNECTS
    return EditOutcome.OK


def cut_piece(pieces: List[Piece], index: int, cell: Cell, rows: int, cols: int,
              king_index: Optional[int] = None) -> EditResult:
    """
    Remove one cell from piece `index`.

    When nothing remains the piece is deleted from the list.
    """
    outcome = check_cut(pieces, index, cell, rows, cols)
    if outcome != EditOutcome.OK:
        return _reject(outcome, pieces, king_index, index, f"cannot cut {cell} from piece {index}")

    remaining = grid.clone(pieces[index].in_board)
    remaining[cell] = False
    new_piece = derive_from_occupancy(remaining)
    if new_piece is None:
        if config.DEBUG:
            print(f"[EDITOR] piece {index} vanished")
        return delete_piece(pieces, index, king_index)

    new_pieces = list(pieces)
    new_pieces[index] = new_piece
    return EditResult(success=True, outcome=EditOutcome.OK, pieces=new_pieces,
                      king_index=king_index, piece_index=index)


def shift_king_index(king_index: Optional[int], removed: int) -> Optional[int]:
    """King index after the piece at `removed` leaves the list."""
    if king_index is None or king_index == removed:
        return None
    return king_index - 1 if king_index > removed else king_index


def delete_piece(pieces: List[Piece], index: int, king_index: Optional[int] = None) -> EditResult:
    """Remove piece `index`; clears the king index if the king was removed."""
    if not 0 <= index < len(pieces):
        return _reject(EditOutcome.NO_PIECE, pieces, king_index, None, f"no piece {index}")
    new_pieces = list(pieces[:index]) + list(pieces[index + 1:])
    return EditResult(success=True, outcome=EditOutcome.OK, pieces=new_pieces,
                      king_index=shift_king_index(king_index, index), piece_index=None)
