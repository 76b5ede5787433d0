from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np

from .pieces import Shape


logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]


class GameGrid:
    """Fixed-size board of locked cells.

    The grid uses 0 for empty cells and positive color tokens for locked
    blocks. Row 0 is the top of the board. Pieces may hang above row 0
    while they enter; those cells are never considered occupied.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return self.is_inside(x, y) and self.grid[y, x] != 0

    def collides(self, shape: Shape, x: int, y: int) -> bool:
        """Whether `shape` anchored at (x, y) overlaps a wall, the floor or a locked cell.

        The top edge is open: rows above 0 are treated as empty, but the
        side walls still apply there.
        """
        h, w = shape.shape
        for i in range(h):
            for j in range(w):
                if not shape[i, j]:
                    continue
                col = x + j
                row = y + i
                if col < 0 or col >= self.width or row >= self.height:
                    return True
                if row >= 0 and self.grid[row, col] != 0:
                    return True
        return False

    def lock(self, shape: Shape, x: int, y: int, color: int) -> bool:
        """Write `color` into every on-board cell covered by `shape`.

        Returns True when any filled cell sits on the top row (or above it).
        """
        locked_at_top = False
        h, w = shape.shape
        for i in range(h):
            for j in range(w):
                if not shape[i, j]:
                    continue
                col = x + j
                row = y + i
                if row <= 0:
                    locked_at_top = True
                if self.is_inside(col, row):
                    self.grid[row, col] = color
        return locked_at_top

    def clear_full_lines(self) -> int:
        full_rows = np.where(np.all(self.grid != 0, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Drop full rows, keep the rest in order and pad empty rows on top
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        logger.debug("Cleared rows %s", full_rows.tolist())
        return num

    def filled_cells(self) -> List[Coordinate]:
        ys, xs = np.nonzero(self.grid)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
