from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import (
    PALETTE,
    Action,
    FallingBlocksGame,
    GameConfig,
    ManualClock,
    TetrominoType,
    TimerScheduler,
)


class FallingBlocksEnv(gym.Env):
    """
    The falling-block session as a Gymnasium environment.

    Actions (5 total), see `Action`:
      0: Move Left
      1: Move Right
      2: Rotate CW
      3: Soft Drop (one row, or lock)
      4: No-op

    Notes:
    - Time is simulated: after each action the session clock advances by
      `frame_ms` and any drop ticks that fall due are fired, so gravity speeds
      up with the level exactly as in the interactive game.
    - Observation is the board with the falling piece overlaid as negative
      color tokens.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 10}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        frame_ms: int = 100,
        max_episode_steps: int = 10000,
        terminal_penalty: float = 1.0,
    ) -> None:
        super().__init__()
        self.clock = ManualClock()
        self.scheduler = TimerScheduler(self.clock)
        self.game = FallingBlocksGame(self.scheduler, config)
        self.render_mode = render_mode
        self.frame_ms = int(frame_ms)
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        height, width = self.game.config.height, self.game.config.width
        top = len(TetrominoType)
        self.observation_space = spaces.Box(low=-top, high=top, shape=(height, width), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "level": self.game.level,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "max_height": self.game.grid.get_max_height(),
            "holes": self.game.grid.count_holes(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.seed(seed)
        self.game.reset()
        self.game.start()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.score
        self.game.step(Action(int(action)))
        if not self.game.game_over:
            self.scheduler.advance(self.clock, self.frame_ms)
        self._steps += 1

        lines = (self.game.score - score_before) / float(self.game.rules.points_per_line)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        reward = float(lines)
        if terminated:
            reward -= self.terminal_penalty

        info = self._get_info()
        info["lines_this_step"] = lines
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self._get_obs()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = PALETTE.get(abs(int(state[y, x])), (200, 200, 200))
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
