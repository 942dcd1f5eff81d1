"""
Editing and playing sessions.
A DesignSession owns one puzzle being designed; a PlaySession owns one
puzzle being played. Both are explicit objects, and saving or loading
happens only when asked.
"""
import json
import os
from typing import List, Optional

import codec
import editor
from config import config
from editor import EditOutcome, EditResult
from grid import Cell, Direction
from model import (
    Door, GameData, Piece, Placement, Step, fit_door, make_game_data, project_all,
)
from moves import IllegalMoveError, apply_step, can_move, is_won, reachable_positions, revert_step


class DesignSession:
    """Puzzle designer state: board size, pieces, king, door and selection."""

    def __init__(self, rows: int = None, cols: int = None, name: str = ""):
        self.rows = config.clamp_board_size(rows or config.DEFAULT_ROWS)
        self.cols = config.clamp_board_size(cols or config.DEFAULT_COLS)
        self.name = name
        self.pieces: List[Piece] = []
        self.king_index: Optional[int] = None
        self.editing_index: Optional[int] = None
        self.door_placement = Placement.BOTTOM
        self.door_start: Optional[int] = None  # None centres the door
        self.door: Optional[Door] = None

    @classmethod
    def from_game(cls, game: GameData, name: str = "") -> 'DesignSession':
        session = cls(game.board_rows, game.board_cols, name=name)
        session.rows, session.cols = game.board_rows, game.board_cols
        session.pieces = [p.copy() for p in game.piece_list]
        session.king_index = game.king_piece_index
        session.door_placement = Placement(game.door.placement)
        session.door_start = game.door.start_index
        session._refresh_door()
        return session

    # -- edits ----------------------------------------------------------------

    def _apply(self, result: EditResult) -> EditResult:
        if result.success:
            self.pieces = result.pieces
            self.king_index = result.king_index
            self.editing_index = result.piece_index
            self._refresh_door()
        return result

    def create_piece(self, cell: Cell) -> EditResult:
        """Create a single-cell piece and select it for editing."""
        return self._apply(editor.create_piece(self.pieces, cell, self.rows, self.cols, self.king_index))

    def extend(self, cell: Cell) -> EditResult:
        """Grow the piece being edited by one cell."""
        if self.editing_index is None:
            return EditResult(False, EditOutcome.NO_PIECE, self.pieces, self.king_index, None,
                              "no piece selected")
        return self._apply(editor.extend_piece(
            self.pieces, self.editing_index, cell, self.rows, self.cols, self.king_index))

    def cut(self, cell: Cell) -> EditResult:
        """Remove one cell from the piece being edited."""
        if self.editing_index is None:
            return EditResult(False, EditOutcome.NO_PIECE, self.pieces, self.king_index, None,
                              "no piece selected")
        return self._apply(editor.cut_piece(
            self.pieces, self.editing_index, cell, self.rows, self.cols, self.king_index))

    def click(self, cell: Cell) -> Optional[EditResult]:
        """
        Designer click: extend the edited piece when possible, otherwise
        create a piece on an empty cell, otherwise select the clicked piece.
        """
        if self.editing_index is not None and \
                editor.check_extend(self.pieces, self.editing_index, cell, self.rows, self.cols) == EditOutcome.OK:
            return self.extend(cell)
        if editor.check_create(self.pieces, cell, self.rows, self.cols) == EditOutcome.OK:
            return self.create_piece(cell)
        self.select(self.piece_at(cell))
        return None

    def delete_piece(self, index: int) -> EditResult:
        result = editor.delete_piece(self.pieces, index, self.king_index)
        if result.success:
            self.pieces = result.pieces
            self.king_index = result.king_index
            if self.editing_index == index:
                self.editing_index = None
            elif self.editing_index is not None and self.editing_index > index:
                self.editing_index -= 1
            self._refresh_door()
        return result

    def piece_at(self, cell: Cell) -> Optional[int]:
        for i, piece in enumerate(self.pieces):
            if 0 <= cell[0] < self.rows and 0 <= cell[1] < self.cols and piece.in_board[cell]:
                return i
        return None

    def select(self, index: Optional[int]):
        """Select a piece for editing; selecting it again deselects it."""
        if index is not None and not 0 <= index < len(self.pieces):
            raise IndexError(f"No piece {index}")
        self.editing_index = None if index == self.editing_index else index

    def set_king(self, index: int):
        if not 0 <= index < len(self.pieces):
            raise IndexError(f"No piece {index}")
        self.king_index = index
        self._refresh_door()

    def resize(self, rows: int, cols: int):
        """Change board size; pieces are clipped and vanished ones dropped."""
        self.rows = config.clamp_board_size(rows)
        self.cols = config.clamp_board_size(cols)
        self.pieces, self.king_index = project_all(self.pieces, self.king_index, self.rows, self.cols)
        if self.editing_index is not None and self.editing_index >= len(self.pieces):
            self.editing_index = None
        self._refresh_door()
        if config.DEBUG:
            print(f"[SESSION] board resized to {self.rows}x{self.cols}, {len(self.pieces)} pieces left")

    def place_door(self, placement: Placement, start_index: Optional[int] = None):
        """Move the door to an edge; the start is clamped to keep it on the edge."""
        self.door_placement = Placement(placement)
        self.door_start = start_index
        self._refresh_door()

    def _refresh_door(self):
        """Keep the door sized for the king and inside its edge."""
        if self.king_index is None:
            self.door = None
            return
        king = self.pieces[self.king_index]
        self.door = fit_door(self.door_placement, self.door_start, king, self.rows, self.cols)
        self.door_start = self.door.start_index

    # -- output ---------------------------------------------------------------

    def game_data(self) -> GameData:
        """Assemble the puzzle; raises GameDataError when incomplete."""
        pieces = [p.copy() for p in self.pieces]
        return make_game_data(self.rows, self.cols, pieces, self.king_index, self.door)

    def to_flat(self):
        return codec.encode(self.game_data())

    def save(self, path: str = None):
        """Write the puzzle to JSON (flat grid plus name and hash)."""
        path = path or config.SESSION_PATH
        game = self.game_data()
        data = {
            "name": self.name,
            "gameShape": codec.encode(game),
            "md5": codec.identity_hash(game),
        }
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
        if config.DEBUG:
            print(f"[SESSION] saved '{self.name}' to {path}")

    @classmethod
    def load(cls, path: str = None) -> 'DesignSession':
        """Read a puzzle saved by save(); the king becomes piece 0."""
        path = path or config.SESSION_PATH
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path, 'r') as f:
            data = json.load(f)
        game = codec.decode(data["gameShape"])
        return cls.from_game(game, name=data.get("name", ""))


class PlaySession:
    """Interactive play on a copy of a puzzle, with undo and redo."""

    def __init__(self, game: GameData):
        if game.king_piece_index is None:
            raise ValueError("Cannot play a puzzle without a king piece")
        self.game = game
        self.rows = game.board_rows
        self.cols = game.board_cols
        self.pieces = [p.copy() for p in game.piece_list]
        self.history: List[Step] = []
        self.redo_stack: List[Step] = []

    def reachable(self, index: int):
        return reachable_positions(self.pieces, index, self.rows, self.cols)

    def can_move(self, index: int, direction: Direction) -> bool:
        return can_move(self.pieces, index, direction, self.rows, self.cols)

    def move(self, index: int, direction: Direction) -> bool:
        """Move a piece one cell; returns False when the move is illegal."""
        step = Step(piece_index=index, direction=direction)
        try:
            self.pieces = apply_step(self.pieces, step, self.rows, self.cols)
        except IllegalMoveError as e:
            if config.DEBUG:
                print(f"[SESSION] {e}")
            return False
        self.history.append(step)
        self.redo_stack.clear()
        return True

    def slide(self, index: int, target: Cell) -> int:
        """Slide a piece to a reachable position; returns the number of steps made."""
        for direction, stops in self.reachable(index).items():
            if tuple(target) in stops:
                distance = stops.index(tuple(target)) + 1
                for _ in range(distance):
                    self.move(index, direction)
                return distance
        return 0

    def undo(self) -> bool:
        if not self.history:
            return False
        step = self.history.pop()
        self.pieces = revert_step(self.pieces, step, self.rows, self.cols)
        self.redo_stack.append(step)
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        step = self.redo_stack.pop()
        self.pieces = apply_step(self.pieces, step, self.rows, self.cols)
        self.history.append(step)
        return True

    def reset(self):
        self.pieces = [p.copy() for p in self.game.piece_list]
        self.history.clear()
        self.redo_stack.clear()

    def is_won(self) -> bool:
        return is_won(self.game, self.pieces)

    def recorded_game(self) -> GameData:
        """Original puzzle carrying the moves played so far as its solution."""
        game = self.game.copy()
        game.solution = list(self.history)
        return game


class SolutionPlayer:
    """Steps forward and backward through a puzzle's solution."""

    def __init__(self, game: GameData):
        if game.solution is None:
            raise ValueError("Puzzle has no solution to play")
        self.game = game
        self.rows = game.board_rows
        self.cols = game.board_cols
        self.pieces = [p.copy() for p in game.piece_list]
        self.step_index = 0

    @property
    def total(self) -> int:
        return len(self.game.solution)

    def next_step(self) -> bool:
        if self.step_index >= self.total:
            return False
        step = self.game.solution[self.step_index]
        self.pieces = apply_step(self.pieces, step, self.rows, self.cols)
        self.step_index += 1
        return True

    def prev_step(self) -> bool:
        if self.step_index <= 0:
            return False
        self.step_index -= 1
        step = self.game.solution[self.step_index]
        self.pieces = revert_step(self.pieces, step, self.rows, self.cols)
        return True

    def seek(self, index: int):
        index = max(0, min(index, self.total))
        while self.step_index < index:
            self.next_step()
        while self.step_index > index:
            self.prev_step()

    def is_won(self) -> bool:
        return is_won(self.game, self.pieces)
