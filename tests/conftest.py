from __future__ import annotations

import os
from typing import Iterable

import pytest

from falling_blocks.game import (
    FallingBlocksGame,
    GameConfig,
    ManualClock,
    TetrominoType,
    TimerScheduler,
)

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class FixedPieces:
    """Piece source that replays a given sequence, then repeats the last kind."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self.kinds = list(kinds)
        self.index = 0

    def __call__(self) -> TetrominoType:
        kind = self.kinds[min(self.index, len(self.kinds) - 1)]
        self.index += 1
        return kind


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler(clock: ManualClock) -> TimerScheduler:
    return TimerScheduler(clock)


@pytest.fixture
def make_game(scheduler: TimerScheduler):
    def _make(*kinds: TetrominoType, **config) -> FallingBlocksGame:
        source = FixedPieces(kinds or [TetrominoType.O])
        return FallingBlocksGame(scheduler, GameConfig(**config), piece_source=source)

    return _make
