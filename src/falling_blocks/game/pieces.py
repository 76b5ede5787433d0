from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
}

# Color tokens are palette indices; 0 is reserved for an empty cell.
PIECE_COLORS: Dict[TetrominoType, int] = {kind: int(kind) for kind in TetrominoType}

PALETTE: Dict[int, Tuple[int, int, int]] = {
    0: (20, 20, 26),
    PIECE_COLORS[TetrominoType.I]: (0, 255, 255),   # cyan
    PIECE_COLORS[TetrominoType.O]: (255, 255, 0),   # yellow
    PIECE_COLORS[TetrominoType.T]: (255, 0, 255),   # magenta
    PIECE_COLORS[TetrominoType.S]: (0, 255, 0),     # green
    PIECE_COLORS[TetrominoType.Z]: (255, 0, 0),     # red
    PIECE_COLORS[TetrominoType.J]: (0, 0, 255),     # blue
    PIECE_COLORS[TetrominoType.L]: (255, 165, 0),   # orange
}


def base_piece(kind: TetrominoType | int) -> Tuple[Shape, int]:
    """Return a fresh copy of the unrotated shape and the color token for `kind`.

    Values outside the enumeration raise ValueError; callers are not expected
    to recover from that.
    """
    kind = TetrominoType(kind)
    return BASE_SHAPES[kind].copy(), PIECE_COLORS[kind]


def rotate_clockwise(shape: Shape) -> Shape:
    # out[j][h - 1 - i] = in[i][j]
    return np.ascontiguousarray(np.rot90(shape, 1, axes=(1, 0)))


@dataclass(eq=False)
class Piece:
    kind: TetrominoType
    shape: Shape
    x: int
    y: int
    color: int = field(default=0)

    @classmethod
    def spawn(cls, kind: TetrominoType | int, x: int, y: int) -> "Piece":
        shape, color = base_piece(kind)
        return cls(TetrominoType(kind), shape, x, y, color)

    def rotate_clockwise(self) -> Shape:
        """Rotate in place and return the previous shape for rollback."""
        previous = self.shape
        self.shape = rotate_clockwise(previous)
        return previous

    def translate(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        s = self.shape
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)
