"""
Puzzle data model.
Pieces, doors, steps and game data, plus pure functions that derive
pieces from occupancy and project them onto a board.
"""
import numpy as np
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

import grid
from grid import Cell, Direction


class GameDataError(ValueError):
    """Raised when a puzzle cannot be assembled (no pieces, no king, ...)."""


@dataclass(eq=False)
class Piece:
    """
    A rigid piece on the board.

    shape is the tight bounding box of the occupied cells, position is the
    board cell of shape[0, 0], and in_board is the board-sized footprint
    derived from both. Call rebuild() after changing shape or position.
    """
    shape: np.ndarray
    position: Cell
    in_board: np.ndarray = field(default=None, repr=False)

    @classmethod
    def single(cls, cell: Cell, rows: int, cols: int) -> 'Piece':
        """One-cell piece created by a designer click."""
        piece = cls(shape=np.ones((1, 1), dtype=bool), position=(int(cell[0]), int(cell[1])))
        return piece.rebuild(rows, cols)

    @classmethod
    def from_cells(cls, cells, rows: int, cols: int) -> Optional['Piece']:
        """Build from a list of board cells."""
        mask = grid.empty_grid(rows, cols)
        for r, c in cells:
            mask[r, c] = True
        return derive_from_occupancy(mask)

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def size(self) -> int:
        return grid.count(self.shape)

    def rebuild(self, rows: int, cols: int) -> 'Piece':
        """Recompute in_board in place; assumes the piece fits the board."""
        board = grid.empty_grid(rows, cols)
        r0, c0 = self.position
        board[r0:r0 + self.height, c0:c0 + self.width] = self.shape
        self.in_board = board
        return self

    def fits(self, rows: int, cols: int, position: Optional[Cell] = None) -> bool:
        """Whether every occupied cell lies on a rows x cols board."""
        r0, c0 = self.position if position is None else position
        for dr, dc in zip(*np.where(self.shape)):
            r, c = r0 + int(dr), c0 + int(dc)
            if r < 0 or r >= rows or c < 0 or c >= cols:
                return False
        return True

    def cells(self) -> List[Cell]:
        """Occupied board cells in row-major order."""
        r0, c0 = self.position
        return [(r0 + int(r), c0 + int(c)) for r, c in zip(*np.where(self.shape))]

    def moved(self, direction: Direction, distance: int = 1) -> 'Piece':
        """Copy translated along a direction; in_board is not rebuilt."""
        return Piece(shape=self.shape.copy(), position=direction.step(self.position, distance))

    def copy(self) -> 'Piece':
        return Piece(
            shape=self.shape.copy(),
            position=self.position,
            in_board=None if self.in_board is None else self.in_board.copy(),
        )

    def __eq__(self, other):
        """Pieces are equal when shape and position match."""
        if not isinstance(other, Piece):
            return False
        return tuple(self.position) == tuple(other.position) and np.array_equal(self.shape, other.shape)

    def __str__(self) -> str:
        return grid.to_text(self.shape)


def derive_from_occupancy(occupancy: np.ndarray) -> Optional[Piece]:
    """
    Derive a piece from a board-sized occupancy mask.

    Returns:
        Piece with a tight shape, or None if no cell is occupied
    """
    cropped = grid.normalize(occupancy)
    if cropped is None:
        return None
    shape, origin = cropped
    return Piece(shape=shape, position=origin, in_board=grid.clone(occupancy))


def project(piece: Piece, rows: int, cols: int) -> Optional[Piece]:
    """
    Place a piece on a rows x cols board.

    If part of the piece falls off the board the piece is clipped and
    re-derived from what remains; None means nothing remained.
    """
    if piece.fits(rows, cols):
        return Piece(shape=piece.shape.copy(), position=tuple(piece.position)).rebuild(rows, cols)

    board = grid.empty_grid(rows, cols)
    for r, c in piece.cells():
        if 0 <= r < rows and 0 <= c < cols:
            board[r, c] = True
    return derive_from_occupancy(board)


def project_all(pieces: List[Piece], king_index: Optional[int],
                rows: int, cols: int) -> Tuple[List[Piece], Optional[int]]:
    """
    Re-project every piece after a board resize.

    Vanished pieces are dropped; the king index follows its piece and is
    cleared when the king itself vanished.
    """
    projected = []
    new_king = None
    for i, piece in enumerate(pieces):
        result = project(piece, rows, cols)
        if result is None:
            continue
        if i == king_index:
            new_king = len(projected)
        projected.append(result)
    return projected, new_king


def board_mask(pieces: List[Piece], rows: int, cols: int) -> np.ndarray:
    """Union of all piece footprints."""
    board = grid.empty_grid(rows, cols)
    for piece in pieces:
        for r, c in piece.cells():
            board[r, c] = True
    return board


def owner_map(pieces: List[Piece], rows: int, cols: int,
              exclude: Optional[int] = None) -> np.ndarray:
    """Board-to-piece-index map: -1 for empty cells, else the owning piece index."""
    owners = np.full((rows, cols), -1, dtype=np.int32)
    for i, piece in enumerate(pieces):
        if i == exclude:
            continue
        for r, c in piece.cells():
            owners[r, c] = i
    return owners


def overlapping_pairs(pieces: List[Piece]) -> List[Tuple[int, int]]:
    """Index pairs of pieces whose footprints share a cell."""
    seen: Dict[Cell, int] = {}
    pairs = []
    for i, piece in enumerate(pieces):
        for cell in piece.cells():
            if cell in seen:
                pairs.append((seen[cell], i))
            else:
                seen[cell] = i
    return pairs


class Placement(str, Enum):
    """Board edge holding the door."""
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def is_side(self) -> bool:
        return self in (Placement.LEFT, Placement.RIGHT)


@dataclass
class Door:
    """Gap in the board edge, start_index cells from the edge's origin corner."""
    placement: Placement
    start_index: int
    x_size: int
    y_size: int

    @property
    def span(self) -> int:
        """Number of border cells the door opens along its edge."""
        return self.y_size if Placement(self.placement).is_side else self.x_size

    def edge_length(self, rows: int, cols: int) -> int:
        return rows if Placement(self.placement).is_side else cols

    def fits(self, rows: int, cols: int) -> bool:
        return 0 <= self.start_index and self.start_index + self.span <= self.edge_length(rows, cols)

    def to_dict(self) -> dict:
        return {
            "placement": Placement(self.placement).value,
            "startIndex": self.start_index,
            "xSize": self.x_size,
            "ySize": self.y_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Door':
        return cls(
            placement=Placement(data["placement"]),
            start_index=int(data["startIndex"]),
            x_size=int(data["xSize"]),
            y_size=int(data["ySize"]),
        )


def fit_door(placement: Placement, start_index: Optional[int], king: Piece,
             rows: int, cols: int) -> Door:
    """
    Door sized for the king piece and kept inside the edge.

    An unset start (None or negative) centres the door on its edge.
    """
    placement = Placement(placement)
    door = Door(placement=placement, start_index=0, x_size=king.width, y_size=king.height)
    edge = door.edge_length(rows, cols)
    if start_index is None or start_index < 0:
        start = (edge - door.span) // 2
    else:
        start = min(start_index, edge - door.span)
    door.start_index = max(0, start)
    return door


@dataclass
class Step:
    """One move of one piece by a unit vector."""
    piece_index: int
    direction: Direction

    def to_dict(self) -> dict:
        return {"pieceIndex": self.piece_index, "direction": list(self.direction.value)}

    @classmethod
    def from_dict(cls, data: dict) -> 'Step':
        return cls(piece_index=int(data["pieceIndex"]), direction=Direction.from_vector(data["direction"]))


@dataclass
class GameData:
    """A complete puzzle: board, pieces, king, door and optional solution."""
    board_rows: int
    board_cols: int
    piece_list: List[Piece]
    king_piece_index: Optional[int]
    king_win_pos: Cell
    door: Door
    solution: Optional[List[Step]] = None

    @property
    def king(self) -> Optional[Piece]:
        if self.king_piece_index is None:
            return None
        return self.piece_list[self.king_piece_index]

    def copy(self) -> 'GameData':
        return replace(
            self,
            piece_list=[p.copy() for p in self.piece_list],
            door=replace(self.door),
            solution=None if self.solution is None else list(self.solution),
        )

    def to_dict(self) -> dict:
        """camelCase wire object shared with the solver and session files."""
        data = {
            "boardRows": self.board_rows,
            "boardCols": self.board_cols,
            "pieceList": [
                {"shape": piece.shape.tolist(), "position": list(piece.position)}
                for piece in self.piece_list
            ],
            "kingPieceIndex": -1 if self.king_piece_index is None else self.king_piece_index,
            "kingWinPos": list(self.king_win_pos),
            "door": self.door.to_dict(),
        }
        if self.solution is not None:
            data["solution"] = [step.to_dict() for step in self.solution]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'GameData':
        rows, cols = int(data["boardRows"]), int(data["boardCols"])
        pieces = []
        for item in data["pieceList"]:
            piece = Piece(
                shape=np.array(item["shape"], dtype=bool),
                position=(int(item["position"][0]), int(item["position"][1])),
            )
            pieces.append(piece.rebuild(rows, cols))
        king = int(data.get("kingPieceIndex", -1))
        solution = data.get("solution")
        return cls(
            board_rows=rows,
            board_cols=cols,
            piece_list=pieces,
            king_piece_index=None if king < 0 else king,
            king_win_pos=(int(data["kingWinPos"][0]), int(data["kingWinPos"][1])),
            door=Door.from_dict(data["door"]),
            solution=None if solution is None else [Step.from_dict(s) for s in solution],
        )


def king_win_position(door: Door, king: Piece, rows: int, cols: int) -> Cell:
    """Position the king's origin must reach to leave through the door."""
    placement = Placement(door.placement)
    if placement == Placement.TOP:
        return 0, door.start_index
    if placement == Placement.RIGHT:
        return door.start_index, cols - king.width
    if placement == Placement.BOTTOM:
        return rows - king.height, door.start_index
    return door.start_index, 0


def make_game_data(rows: int, cols: int, pieces: List[Piece],
                   king_index: Optional[int], door: Door) -> GameData:
    """Assemble a GameData, computing the king's win position."""
    if not pieces:
        raise GameDataError("No piece on the board")
    if king_index is None or not 0 <= king_index < len(pieces):
        raise GameDataError("No king piece selected")
    if door is None:
        raise GameDataError("No door placed")
    king = pieces[king_index]
    return GameData(
        board_rows=rows,
        board_cols=cols,
        piece_list=pieces,
        king_piece_index=king_index,
        king_win_pos=king_win_position(door, king, rows, cols),
        door=door,
    )
