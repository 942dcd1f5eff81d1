"""
Configuration for the Klotski puzzle engine.
Stores board limits, rendering parameters and runtime flags.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass
class Config:
    """Main configuration for the puzzle designer and player."""

    # Board size limits (designer clamps rows/cols into this range)
    MIN_BOARD_SIZE: int = 2
    MAX_BOARD_SIZE: int = 9

    # Default board for a new design (rows x cols)
    DEFAULT_ROWS: int = 5
    DEFAULT_COLS: int = 4

    # Piece outlines: corner radius as a fraction of the grid size
    CORNER_RADIUS_RATIO: float = 0.1

    # Cover thumbnail (SVG)
    COVER_BOARD_SIZE: int = 210
    COVER_BORDER_SIZE: int = 10
    COVER_DOOR_THICKNESS: int = 16
    COVER_KING_COLOR: str = "#fffb00"
    COVER_PIECE_COLOR: str = "#0ed07e"

    # Raster preview (OpenCV, BGR)
    PREVIEW_GRID_SIZE: int = 60
    PREVIEW_BORDER: int = 16
    PREVIEW_BG_COLOR: Tuple[int, int, int] = (0, 0, 0)
    PREVIEW_CELL_COLOR: Tuple[int, int, int] = (51, 51, 51)
    PREVIEW_KING_COLOR: Tuple[int, int, int] = (0, 251, 255)
    PREVIEW_PIECE_COLOR: Tuple[int, int, int] = (126, 208, 14)
    PREVIEW_DOOR_COLOR: Tuple[int, int, int] = (90, 90, 90)

    # Sessions
    SESSION_PATH: str = "current_game.json"

    # Debug
    DEBUG: bool = False

    def save(self, path: str = "config.json"):
        """Save tunable settings to JSON."""
        import json
        data = {
            "MIN_BOARD_SIZE": self.MIN_BOARD_SIZE,
            "MAX_BOARD_SIZE": self.MAX_BOARD_SIZE,
            "DEFAULT_ROWS": self.DEFAULT_ROWS,
            "DEFAULT_COLS": self.DEFAULT_COLS,
            "CORNER_RADIUS_RATIO": self.CORNER_RADIUS_RATIO,
            "PREVIEW_GRID_SIZE": self.PREVIEW_GRID_SIZE,
            "SESSION_PATH": self.SESSION_PATH,
            "DEBUG": self.DEBUG,
        }
        with open(path, 'w') as f:
            json.dump(data, f, indent=4)

    def load(self, path: str = "config.json"):
        """Load settings from JSON."""
        import json
        import os
        if os.path.exists(path):
            with open(path, 'r') as f:
                data = json.load(f)
                self.MIN_BOARD_SIZE = data.get("MIN_BOARD_SIZE", self.MIN_BOARD_SIZE)
                self.MAX_BOARD_SIZE = data.get("MAX_BOARD_SIZE", self.MAX_BOARD_SIZE)
                self.DEFAULT_ROWS = data.get("DEFAULT_ROWS", self.DEFAULT_ROWS)
                self.DEFAULT_COLS = data.get("DEFAULT_COLS", self.DEFAULT_COLS)
                self.CORNER_RADIUS_RATIO = data.get("CORNER_RADIUS_RATIO", self.CORNER_RADIUS_RATIO)
                self.PREVIEW_GRID_SIZE = data.get("PREVIEW_GRID_SIZE", self.PREVIEW_GRID_SIZE)
                self.SESSION_PATH = data.get("SESSION_PATH", self.SESSION_PATH)
                self.DEBUG = data.get("DEBUG", self.DEBUG)

    def clamp_board_size(self, value: int) -> int:
        """Clamp a requested row/column count into the allowed range."""
        return min(max(value, self.MIN_BOARD_SIZE), self.MAX_BOARD_SIZE)


# Global config instance
config = Config()
