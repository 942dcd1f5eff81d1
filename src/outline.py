"""
Boundary tracing for piece shapes.
Turns an occupancy mask, possibly with enclosed holes, into closed
grid-corner outlines and rounded-corner SVG paths.
"""
import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple

import grid
from grid import Cell, Direction

Corner = Tuple[int, int]  # grid-corner coordinates: corner (r, c) is the top-left of cell (r, c)

STRAIGHT = "straight"
CONVEX = "convex"
CONCAVE = "concave"

# Cell on the right / left of the edge leaving a corner in a direction,
# as an offset from that corner.
_RIGHT_CELL = {
    Direction.RIGHT: (0, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, -1),
    Direction.UP: (-1, 0),
}
_LEFT_CELL = {
    Direction.RIGHT: (-1, 0),
    Direction.DOWN: (0, 0),
    Direction.LEFT: (0, -1),
    Direction.UP: (-1, -1),
}


def _is_boundary_edge(region: np.ndarray, corner: Corner, d: Direction) -> bool:
    """True when the edge separates a region cell (right) from a non-region cell (left)."""
    rr, rc = _RIGHT_CELL[d]
    lr, lc = _LEFT_CELL[d]
    right = grid.is_set(region, (corner[0] + rr, corner[1] + rc))
    left = grid.is_set(region, (corner[0] + lr, corner[1] + lc))
    return right and not left


def _walk(region: np.ndarray) -> List[Corner]:
    """
    Walk the silhouette of a region clockwise (region on the right).

    Starts at the top-left corner of the first region cell in row-major
    order and, at each corner, takes the first boundary edge among
    turn-right, straight and turn-left.
    """
    box = grid.bounding_box(region)
    if box is None:
        raise ValueError("Cannot trace an empty occupancy")
    rows, cols = np.where(region)
    start = (int(rows[0]), int(cols[0]))
    corners = [start]
    heading = Direction.RIGHT
    current = heading.step(start)
    limit = 4 * (region.shape[0] + 1) * (region.shape[1] + 1)

    while current != start:
        corners.append(current)
        for candidate in (heading.turn_right, heading, heading.turn_left):
            if _is_boundary_edge(region, current, candidate):
                heading = candidate
                break
        else:
            raise ValueError(f"Boundary walk lost at corner {current}")
        current = heading.step(current)
        if len(corners) > limit:
            raise ValueError("Boundary walk did not close")
    return corners


@dataclass
class Outline:
    """Closed outline of one region (the outer shape or a hole)."""
    region: np.ndarray
    corners: List[Corner]
    is_hole: bool = False

    def __len__(self) -> int:
        return len(self.corners)

    def _neighbours(self, index: int) -> Tuple[Corner, Corner, Corner]:
        n = len(self.corners)
        return self.corners[index - 1], self.corners[index], self.corners[(index + 1) % n]

    def turn(self, index: int) -> str:
        """Classify the corner at index as straight, convex or concave."""
        prev, curr, nxt = self._neighbours(index)
        if prev[0] == curr[0] == nxt[0] or prev[1] == curr[1] == nxt[1]:
            return STRAIGHT
        # Elbow cell spanned by the three corners
        elbow = (min(prev[0], curr[0], nxt[0]), min(prev[1], curr[1], nxt[1]))
        return CONVEX if grid.is_set(self.region, elbow) else CONCAVE

    def turns(self) -> List[str]:
        return [self.turn(i) for i in range(len(self.corners))]

    def vertices(self) -> List[Corner]:
        """Corners where the outline changes direction."""
        return [c for i, c in enumerate(self.corners) if self.turn(i) != STRAIGHT]

    def to_polygon(self, grid_size: float, offset_x: float = 0, offset_y: float = 0) -> np.ndarray:
        """Vertex polygon in pixel (x, y) coordinates."""
        return np.array(
            [[c * grid_size + offset_x, r * grid_size + offset_y] for r, c in self.vertices()],
            dtype=np.float64,
        )

    def to_svg_path(self, grid_size: float, radius: float,
                    offset_x: float = 0, offset_y: float = 0) -> str:
        """
        Rounded-corner SVG path data.

        Each corner starts `radius` before the corner point; straight
        corners continue with a line, turning corners with an arc whose
        sweep flag is 1 for convex corners and 0 for concave ones.
        """
        def point(corner: Corner, towards: Corner, distance: float) -> str:
            y = corner[0] * grid_size + distance * (towards[0] - corner[0]) + offset_y
            x = corner[1] * grid_size + distance * (towards[1] - corner[1]) + offset_x
            return f"{_fmt(x)} {_fmt(y)}"

        parts = []
        for i in range(len(self.corners)):
            prev, curr, nxt = self._neighbours(i)
            arc_start = point(curr, prev, radius)
            arc_end = point(curr, nxt, radius)
            if i == 0:
                parts.append(f"M {arc_start}")
            kind = self.turn(i)
            if kind == STRAIGHT:
                parts.append(f"L {arc_start}")
            else:
                sweep = 1 if kind == CONVEX else 0
                parts.append(f"A {_fmt(radius)} {_fmt(radius)} 0 0 {sweep} {arc_end}")
            parts.append(f"L {point(curr, nxt, grid_size - radius)}")
        parts.append("Z")
        return ' '.join(parts)


def _fmt(value: float) -> str:
    return f"{value:g}"


def trace_region(region: np.ndarray, is_hole: bool = False) -> Outline:
    """Trace a single region."""
    region = np.asarray(region, dtype=bool)
    return Outline(region=region, corners=_walk(region), is_hole=is_hole)


def trace_outlines(shape: np.ndarray) -> List[Outline]:
    """
    Outlines of a shape: the outer boundary first, then one per hole.

    The outer boundary is traced on the hole-filled shape so holes do not
    break it; each hole is traced on its own cells.
    """
    shape = np.asarray(shape, dtype=bool)
    if not shape.any():
        raise ValueError("Cannot trace an empty occupancy")
    outlines = [trace_region(grid.fill_holes(shape))]
    for mask in grid.hole_masks(shape):
        outlines.append(trace_region(mask, is_hole=True))
    return outlines


def shape_to_paths(shape: np.ndarray, grid_size: float, radius: Optional[float] = None,
                   offset_x: float = 0, offset_y: float = 0) -> List[str]:
    """
    SVG path data for a shape: outer path first, then hole paths.

    Hole paths are meant to be composited as a cut-out layer over the
    outer fill.
    """
    if radius is None:
        from config import config
        radius = grid_size * config.CORNER_RADIUS_RATIO
    return [o.to_svg_path(grid_size, radius, offset_x, offset_y) for o in trace_outlines(shape)]


def outline_cells(outline: Outline) -> List[Cell]:
    """Cells enclosed by an outline, row-major."""
    return [(int(r), int(c)) for r, c in zip(*np.where(outline.region))]
