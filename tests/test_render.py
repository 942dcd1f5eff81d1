"""
Unit tests for SVG covers and OpenCV previews.
"""
import os
import sys

import cv2
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from config import config
from model import Door, Piece, Placement, make_game_data
from render import cover_svg, render_board, save_preview


def ring_game():
    """5x5 board with a ring-shaped king around an empty cell and one single."""
    cells = [(r, c) for r in range(3) for c in range(3) if (r, c) != (1, 1)]
    king = Piece.from_cells(cells, 5, 5)
    single = Piece.single((4, 4), 5, 5)
    door = Door(placement=Placement.BOTTOM, start_index=1, x_size=3, y_size=3)
    return make_game_data(5, 5, [king, single], 0, door)


def test_cover_svg_paths():
    svg = cover_svg(ring_game())
    assert svg.startswith('<svg')
    assert svg.endswith('</svg>')
    # ring outer + ring hole + single
    assert svg.count('<path') == 3
    assert config.COVER_KING_COLOR in svg
    assert config.COVER_PIECE_COLOR in svg


def test_render_board_size_and_colors():
    game = ring_game()
    image = render_board(game, grid_size=20)
    border = config.PREVIEW_BORDER
    assert image.shape == (5 * 20 + 2 * border, 5 * 20 + 2 * border, 3)
    # inside the king's second top cell
    assert tuple(image[border + 4, border + 30]) == config.PREVIEW_KING_COLOR
    # the ring's hole shows the empty cell colour
    assert tuple(image[border + 30, border + 30]) == config.PREVIEW_CELL_COLOR


def test_render_play_state():
    game = ring_game()
    moved = [game.piece_list[0], Piece.single((3, 4), 5, 5)]
    image = render_board(game, moved, grid_size=20)
    border = config.PREVIEW_BORDER
    assert tuple(image[border + 64, border + 94]) == config.PREVIEW_PIECE_COLOR


def test_save_preview(tmp_path):
    path = str(tmp_path / "preview.png")
    assert save_preview(ring_game(), path, grid_size=20)
    image = cv2.imread(path)
    assert image is not None
    assert image.shape[:2] == (100 + 2 * config.PREVIEW_BORDER,) * 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
