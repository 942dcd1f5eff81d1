"""
Boolean occupancy grid primitives.
Pure functions on 2-D numpy bool arrays: copying, bounding boxes,
flood fill and enclosed-hole labelling.
"""
import numpy as np
from collections import deque
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

Cell = Tuple[int, int]

EXTERIOR = -1  # label for empty cells connected to the grid border
OCCUPIED = 0   # label for occupied cells


class Direction(Enum):
    """Unit vector for one of the four orthogonal directions (row, col)."""
    UP = (-1, 0)
    RIGHT = (0, 1)
    DOWN = (1, 0)
    LEFT = (0, -1)

    @property
    def dr(self) -> int:
        return self.value[0]

    @property
    def dc(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> 'Direction':
        return Direction((-self.dr, -self.dc))

    @property
    def turn_right(self) -> 'Direction':
        """Clockwise on screen (rows grow downwards)."""
        return Direction((self.dc, -self.dr))

    @property
    def turn_left(self) -> 'Direction':
        return Direction((-self.dc, self.dr))

    def step(self, cell: Cell, distance: int = 1) -> Cell:
        return cell[0] + self.dr * distance, cell[1] + self.dc * distance

    @classmethod
    def from_vector(cls, vector) -> 'Direction':
        """Build from any (dr, dc) pair, e.g. a JSON list."""
        dr, dc = int(vector[0]), int(vector[1])
        try:
            return cls((dr, dc))
        except ValueError:
            raise ValueError(f"Not a unit direction: {vector!r}")


DIRECTIONS: List[Direction] = [Direction.DOWN, Direction.UP, Direction.RIGHT, Direction.LEFT]


def empty_grid(rows: int, cols: int) -> np.ndarray:
    return np.zeros((rows, cols), dtype=bool)


def clone(grid: np.ndarray) -> np.ndarray:
    """Deep copy that can be mutated independently."""
    return np.array(grid, dtype=bool, copy=True)


def in_bounds(grid: np.ndarray, cell: Cell) -> bool:
    rows, cols = grid.shape
    return 0 <= cell[0] < rows and 0 <= cell[1] < cols


def is_set(grid: np.ndarray, cell: Cell) -> bool:
    """Occupancy lookup that treats out-of-range cells as empty."""
    return in_bounds(grid, cell) and bool(grid[cell[0], cell[1]])


def neighbors(cell: Cell, rows: int, cols: int) -> Iterator[Cell]:
    """In-bounds orthogonal neighbours of a cell."""
    for d in DIRECTIONS:
        r, c = d.step(cell)
        if 0 <= r < rows and 0 <= c < cols:
            yield r, c


def bounding_box(grid: np.ndarray) -> Optional[Tuple[int, int, int, int]]:
    """
    Tight bounding box of occupied cells.

    Returns:
        (min_row, min_col, max_row, max_col), or None when nothing is occupied
    """
    rows, cols = np.where(grid)
    if len(rows) == 0:
        return None
    return int(rows.min()), int(cols.min()), int(rows.max()), int(cols.max())


def normalize(grid: np.ndarray) -> Optional[Tuple[np.ndarray, Cell]]:
    """Crop to the bounding box. Returns (sub_grid, origin) or None."""
    box = bounding_box(grid)
    if box is None:
        return None
    min_r, min_c, max_r, max_c = box
    sub = clone(grid[min_r:max_r + 1, min_c:max_c + 1])
    return sub, (min_r, min_c)


def count(grid: np.ndarray) -> int:
    return int(np.count_nonzero(grid))


def flood_fill(grid: np.ndarray, start: Cell) -> Set[Cell]:
    """Cells reachable from start through occupied cells (BFS, 4-connectivity)."""
    if not is_set(grid, start):
        return set()
    rows, cols = grid.shape
    seen = {start}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        for nb in neighbors(cell, rows, cols):
            if nb not in seen and grid[nb]:
                seen.add(nb)
                queue.append(nb)
    return seen


class UnionFind:
    """Disjoint sets over integer region ids."""

    def __init__(self):
        self.parent: Dict[int, int] = {}

    def add(self, x: int):
        self.parent.setdefault(x, x)

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> int:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra
        # Smaller id wins so the exterior (id 0) always stays a root
        if rb < ra:
            ra, rb = rb, ra
        self.parent[rb] = ra
        return ra


def label_holes(grid: np.ndarray) -> np.ndarray:
    """
    Label every empty cell as exterior or as part of an enclosed hole.

    One top-to-bottom, left-to-right sweep assigns provisional region ids
    from the already-visited up/left neighbours and merges ids through a
    union-find when both neighbours disagree. Border cells always belong
    to the exterior.

    Returns:
        int array: OCCUPIED (0) for occupied cells, EXTERIOR (-1) for the
        outside, and hole ids 1..n numbered in row-major order of first cell.
    """
    rows, cols = grid.shape
    provisional = np.zeros((rows, cols), dtype=np.int32)
    uf = UnionFind()
    exterior_id = 0
    uf.add(exterior_id)
    next_id = 1

    for r in range(rows):
        for c in range(cols):
            if grid[r, c]:
                continue
            linked = []
            for d in (Direction.UP, Direction.LEFT):
                nr, nc = d.step((r, c))
                if nr >= 0 and nc >= 0 and not grid[nr, nc]:
                    linked.append(int(provisional[nr, nc]))

            if r == 0 or c == 0 or r == rows - 1 or c == cols - 1:
                label = exterior_id
            elif linked:
                label = linked[0]
            else:
                label = next_id
                uf.add(label)
                next_id += 1

            for other in linked:
                uf.union(label, other)
            provisional[r, c] = label

    labels = np.full((rows, cols), OCCUPIED, dtype=np.int32)
    hole_ids: Dict[int, int] = {}
    exterior_root = uf.find(exterior_id)
    for r in range(rows):
        for c in range(cols):
            if grid[r, c]:
                continue
            root = uf.find(int(provisional[r, c]))
            if root == exterior_root:
                labels[r, c] = EXTERIOR
            else:
                if root not in hole_ids:
                    hole_ids[root] = len(hole_ids) + 1
                labels[r, c] = hole_ids[root]
    return labels


def count_holes(grid: np.ndarray) -> int:
    return int(label_holes(grid).max(initial=0))


def hole_masks(grid: np.ndarray) -> List[np.ndarray]:
    """One bool mask per enclosed hole, ordered by hole id."""
    labels = label_holes(grid)
    return [labels == hole_id for hole_id in range(1, int(labels.max(initial=0)) + 1)]


def fill_holes(grid: np.ndarray) -> np.ndarray:
    """Copy of grid with every enclosed empty region marked occupied."""
    filled = clone(grid)
    filled[label_holes(grid) > 0] = True
    return filled


def to_text(grid: np.ndarray) -> str:
    """ASCII representation."""
    return '\n'.join(''.join('█' if cell else '·' for cell in row) for row in grid)
