from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    spawn_x: int = 3
    spawn_y: int = 0
    random_seed: Optional[int] = None
    player_name: str = "Player"
    # False leaves a reset game waiting for start()
    reset_starts_game: bool = True

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board size must be positive, got {self.width}x{self.height}")
        if not 0 <= self.spawn_x < self.width:
            raise ValueError(f"spawn_x {self.spawn_x} outside board of width {self.width}")

    @classmethod
    def large(cls, **overrides) -> "GameConfig":
        """The 15x30 board variant."""
        params = dict(width=15, height=30, spawn_x=6)
        params.update(overrides)
        return cls(**params)
