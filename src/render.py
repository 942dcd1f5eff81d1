"""
Puzzle rendering helpers.
SVG cover thumbnails and OpenCV raster previews built from piece outlines.
"""
import cv2
import numpy as np
from typing import List, Optional

from config import config
from model import GameData, Piece, Placement
from outline import shape_to_paths, trace_outlines


def _door_rect(game: GameData, grid_size: float, border: float, width: float,
               height: float, thickness: float):
    """(x, y, w, h) of the door opening drawn over the frame."""
    door = game.door
    start = door.start_index * grid_size + border
    placement = Placement(door.placement)
    if placement == Placement.TOP:
        return start, 0, door.x_size * grid_size, thickness
    if placement == Placement.RIGHT:
        return width - thickness, start, thickness, door.y_size * grid_size
    if placement == Placement.BOTTOM:
        return start, height - thickness, door.x_size * grid_size, thickness
    return 0, start, thickness, door.y_size * grid_size


def _fmt(value: float) -> str:
    return f"{value:g}"


def cover_svg(game: GameData, board_size: int = None, border_size: int = None) -> str:
    """
    Cover thumbnail of a puzzle as an SVG document.

    Pieces are drawn from their traced outlines; holes are drawn in the
    board colour on top of their piece.
    """
    board_size = board_size or config.COVER_BOARD_SIZE
    border_size = border_size if border_size is not None else config.COVER_BORDER_SIZE
    grid_size = min(
        (board_size - border_size * 2) / game.board_cols,
        (board_size - border_size * 2) / game.board_rows,
    )
    width = grid_size * game.board_cols + border_size * 2
    height = grid_size * game.board_rows + border_size * 2
    radius = grid_size * config.CORNER_RADIUS_RATIO

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(width)}" height="{_fmt(height)}">',
        f'<rect x="{_fmt(border_size - 3)}" y="{_fmt(border_size - 3)}" '
        f'width="{_fmt(width - border_size * 2 + 6)}" height="{_fmt(height - border_size * 2 + 6)}" '
        f'fill="#000" rx="{_fmt(radius)}" ry="{_fmt(radius)}"/>',
    ]
    x, y, w, h = _door_rect(game, grid_size, border_size, width, height, config.COVER_DOOR_THICKNESS)
    parts.append(f'<rect x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(w)}" height="{_fmt(h)}" fill="#000"/>')

    for i, piece in enumerate(game.piece_list):
        color = config.COVER_KING_COLOR if i == game.king_piece_index else config.COVER_PIECE_COLOR
        outer, *holes = shape_to_paths(piece.shape, grid_size, radius,
                                       border_size + piece.position[1] * grid_size,
                                       border_size + piece.position[0] * grid_size)
        parts.append(f'<path d="{outer}" fill="{color}" stroke="#000" stroke-width="2"/>')
        for hole in holes:
            parts.append(f'<path d="{hole}" fill="#000" stroke="#000" stroke-width="2"/>')
    parts.append('</svg>')
    return ''.join(parts)


def _fill_outlines(image: np.ndarray, piece: Piece, grid_size: int, offset: int,
                   color, hole_color):
    ox = offset + piece.position[1] * grid_size
    oy = offset + piece.position[0] * grid_size
    for outline in trace_outlines(piece.shape):
        poly = np.round(outline.to_polygon(grid_size, ox, oy)).astype(np.int32)
        cv2.fillPoly(image, [poly], hole_color if outline.is_hole else color)
        cv2.polylines(image, [poly], True, (0, 0, 0), 2)


def render_board(game: GameData, pieces: Optional[List[Piece]] = None,
                 grid_size: int = None) -> np.ndarray:
    """
    Draw the board, door and pieces into a BGR image.

    Args:
        game: Puzzle to draw
        pieces: Piece list to draw instead of game.piece_list (play state)
        grid_size: Pixels per cell

    Returns:
        BGR image as numpy array
    """
    pieces = game.piece_list if pieces is None else pieces
    grid_size = grid_size or config.PREVIEW_GRID_SIZE
    border = config.PREVIEW_BORDER
    height = game.board_rows * grid_size + border * 2
    width = game.board_cols * grid_size + border * 2

    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = config.PREVIEW_BG_COLOR

    for r in range(game.board_rows):
        for c in range(game.board_cols):
            x1, y1 = border + c * grid_size, border + r * grid_size
            cv2.rectangle(image, (x1 + 1, y1 + 1), (x1 + grid_size - 2, y1 + grid_size - 2),
                          config.PREVIEW_CELL_COLOR, -1)

    x, y, w, h = _door_rect(game, grid_size, border, width, height, border)
    cv2.rectangle(image, (int(x), int(y)), (int(x + w) - 1, int(y + h) - 1), config.PREVIEW_DOOR_COLOR, -1)

    for i, piece in enumerate(pieces):
        color = config.PREVIEW_KING_COLOR if i == game.king_piece_index else config.PREVIEW_PIECE_COLOR
        _fill_outlines(image, piece, grid_size, border, color, config.PREVIEW_CELL_COLOR)
        r, c = piece.cells()[0]
        cv2.putText(image, str(i), (border + c * grid_size + grid_size // 3, border + r * grid_size + grid_size * 2 // 3),
                    cv2.FONT_HERSHEY_SIMPLEX, grid_size / 80.0, (40, 40, 40), 1)
    return image


def save_preview(game: GameData, path: str, pieces: Optional[List[Piece]] = None,
                 grid_size: int = None) -> bool:
    """Render and write a preview image; returns cv2.imwrite's result."""
    image = render_board(game, pieces, grid_size)
    ok = cv2.imwrite(path, image)
    if config.DEBUG:
        print(f"[RENDER] preview {image.shape[1]}x{image.shape[0]} -> {path} ({'ok' if ok else 'failed'})")
    return bool(ok)
