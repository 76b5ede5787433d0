from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import PALETTE, GamePhase, GameSnapshot


def _color_for_value(v: int) -> Tuple[int, int, int]:
    return PALETTE.get(abs(v), (200, 200, 200))


_PHASE_LABELS = {
    GamePhase.NOT_STARTED: "Press Enter to start",
    GamePhase.PAUSED: "Paused - P to resume",
    GamePhase.GAME_OVER: "Game Over - R to restart",
}


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            width * self.cell_size + self.margin * 3 + self.panel_width,
            height * self.cell_size + self.margin * 2,
        )

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        width = w * self.cell_size
        height = h * self.cell_size
        surf = pygame.Surface((width, height))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                color = _color_for_value(v)
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color, rect)
        return surf

    def board_surface(self, snapshot: GameSnapshot) -> pygame.Surface:
        state = snapshot.grid.astype(np.int8)
        if snapshot.phase is not GamePhase.GAME_OVER:
            piece = snapshot.piece
            h, w = state.shape
            ys, xs = np.nonzero(piece.shape)
            for dy, dx in zip(ys, xs):
                x, y = piece.x + int(dx), piece.y + int(dy)
                if 0 <= x < w and 0 <= y < h:
                    state[y, x] = piece.color
        return self._grid_surface(state)

    def _text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int], color=(230, 230, 235)) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        screen.blit(self._font.render(text, True, color), pos)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        board = self.board_surface(snapshot)
        screen.fill((10, 10, 14))
        screen.blit(board, (self.margin, self.margin))

        panel_x = self.margin * 2 + board.get_width()
        self._text(screen, f"Score: {snapshot.score}", (panel_x, self.margin), (0, 255, 255))
        self._text(screen, f"Level: {snapshot.level}", (panel_x, self.margin + 36), (255, 255, 0))
        self._text(screen, f"Lines: {snapshot.lines_cleared_total}", (panel_x, self.margin + 72))
        label = _PHASE_LABELS.get(snapshot.phase)
        if label:
            self._text(screen, label, (panel_x, self.margin + 120), (255, 220, 220))
        pygame.display.flip()
