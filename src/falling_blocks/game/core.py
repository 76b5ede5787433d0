from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional

import numpy as np

from .config import GameConfig
from .grid import GameGrid
from .pieces import Piece, TetrominoType
from .rules import ScoringRules
from .scheduler import Scheduler, TimerHandle


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    NONE = 4


class GamePhase(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class PieceView:
    kind: TetrominoType
    shape: np.ndarray
    x: int
    y: int
    color: int


@dataclass(frozen=True)
class GameSnapshot:
    grid: np.ndarray
    piece: PieceView
    score: int
    level: int
    phase: GamePhase
    drop_interval_ms: int
    fast_drop: bool
    lines_cleared_total: int


@dataclass(frozen=True)
class GameResult:
    """What a finished game hands to the leaderboard."""

    player_name: str
    score: int
    level: int
    lines_cleared: int


GameOverListener = Callable[[GameResult], None]
PieceSource = Callable[[], TetrominoType]


def _frozen(array: np.ndarray) -> np.ndarray:
    copy = array.copy()
    copy.flags.writeable = False
    return copy


class FallingBlocksGame:
    """Game session: spawn, fall, lock, clear, spawn.

    All mutation happens from scheduler callbacks or from the command
    methods, which the host calls from a single thread. Two timers drive the
    piece down: the periodic drop timer at `drop_interval_ms` and, while fast
    drop is held, a second timer at the rules' fast interval.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        piece_source: Optional[PieceSource] = None,
    ) -> None:
        self.scheduler = scheduler
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self._piece_source = piece_source
        self.grid = GameGrid(self.config.width, self.config.height)
        self._listeners: List[GameOverListener] = []
        self._drop_timer: Optional[TimerHandle] = None
        self._fast_timer: Optional[TimerHandle] = None
        self.phase = GamePhase.NOT_STARTED
        self.fast_drop = False
        self._new_game()

    # -- setup ---------------------------------------------------------

    def _new_game(self) -> None:
        self.grid.reset()
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.drop_interval_ms = self.rules.drop_interval_ms(self.level)
        self.fast_drop = False
        self.current_piece = self._make_piece()

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def _next_kind(self) -> TetrominoType:
        if self._piece_source is not None:
            return self._piece_source()
        return self.rng.choice(list(TetrominoType))

    def _make_piece(self) -> Piece:
        return Piece.spawn(self._next_kind(), self.config.spawn_x, self.config.spawn_y)

    def add_game_over_listener(self, listener: GameOverListener) -> None:
        self._listeners.append(listener)

    # -- phase transitions ---------------------------------------------

    def start(self) -> None:
        if self.phase is not GamePhase.NOT_STARTED:
            logger.debug("start() ignored in phase %s", self.phase.value)
            return
        self.phase = GamePhase.RUNNING
        logger.info("Game started (interval %d ms)", self.drop_interval_ms)
        self._arm_drop_timer()
        if self.fast_drop:
            self._arm_fast_timer(0)

    def pause(self) -> None:
        if self.phase is not GamePhase.RUNNING:
            logger.debug("pause() ignored in phase %s", self.phase.value)
            return
        self.phase = GamePhase.PAUSED
        self._cancel_timers()
        logger.info("Game paused")

    def resume(self) -> None:
        if self.phase is not GamePhase.PAUSED:
            logger.debug("resume() ignored in phase %s", self.phase.value)
            return
        self.phase = GamePhase.RUNNING
        self._arm_drop_timer()
        if self.fast_drop:
            self._arm_fast_timer(0)
        logger.info("Game resumed (interval %d ms)", self.drop_interval_ms)

    def toggle_pause(self) -> None:
        if self.phase is GamePhase.PAUSED:
            self.resume()
        else:
            self.pause()

    def reset(self) -> None:
        self._cancel_timers()
        self._new_game()
        if self.config.reset_starts_game:
            self.phase = GamePhase.RUNNING
            self._arm_drop_timer()
        else:
            self.phase = GamePhase.NOT_STARTED
        logger.info("Game reset, phase %s", self.phase.value)
        # A board too small for the spawn position ends the game at once
        if self.grid.collides(self.current_piece.shape, self.current_piece.x, self.current_piece.y):
            self._game_over("spawn blocked")

    def _game_over(self, reason: str) -> None:
        self.phase = GamePhase.GAME_OVER
        self.fast_drop = False
        self._cancel_timers()
        result = GameResult(
            player_name=self.config.player_name,
            score=self.score,
            level=self.level,
            lines_cleared=self.lines_cleared_total,
        )
        logger.info("Game over (%s): score=%d level=%d", reason, result.score, result.level)
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("Game-over listener %r failed", listener)

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    # -- timers --------------------------------------------------------

    def _arm_drop_timer(self) -> None:
        self._drop_timer = self.scheduler.call_later(self.drop_interval_ms, self._on_drop_timer)

    def _arm_fast_timer(self, delay_ms: int) -> None:
        self._fast_timer = self.scheduler.call_later(delay_ms, self._on_fast_timer)

    def _cancel_timers(self) -> None:
        if self._drop_timer is not None:
            self.scheduler.cancel(self._drop_timer)
            self._drop_timer = None
        if self._fast_timer is not None:
            self.scheduler.cancel(self._fast_timer)
            self._fast_timer = None

    def _on_drop_timer(self) -> None:
        self._drop_timer = None
        self.tick()
        # Re-arm at the interval in force after this tick
        if self.phase is GamePhase.RUNNING and self._drop_timer is None:
            self._arm_drop_timer()

    def _on_fast_timer(self) -> None:
        self._fast_timer = None
        if self.phase is not GamePhase.RUNNING or not self.fast_drop:
            return
        self.move_down()
        if self.phase is GamePhase.RUNNING and self.fast_drop and self._fast_timer is None:
            self._arm_fast_timer(self.rules.fast_drop_interval_ms)

    def set_fast_drop(self, active: bool) -> None:
        active = bool(active)
        if active == self.fast_drop:
            return
        if self.phase is GamePhase.GAME_OVER:
            logger.debug("set_fast_drop() ignored after game over")
            return
        self.fast_drop = active
        if self.phase is not GamePhase.RUNNING:
            return
        if active:
            self._arm_fast_timer(0)
        elif self._fast_timer is not None:
            self.scheduler.cancel(self._fast_timer)
            self._fast_timer = None

    # -- commands ------------------------------------------------------

    def tick(self) -> None:
        if self.phase is not GamePhase.RUNNING:
            return
        self.move_down()

    def _collides(self, dx: int = 0, dy: int = 0) -> bool:
        p = self.current_piece
        return self.grid.collides(p.shape, p.x + dx, p.y + dy)

    def _move(self, dx: int, dy: int) -> bool:
        if self.phase is not GamePhase.RUNNING:
            logger.debug("Move ignored in phase %s", self.phase.value)
            return False
        if self._collides(dx, dy):
            return False
        self.current_piece.translate(dx, dy)
        return True

    def move_left(self) -> bool:
        return self._move(-1, 0)

    def move_right(self) -> bool:
        return self._move(1, 0)

    def rotate(self) -> bool:
        if self.phase is not GamePhase.RUNNING:
            logger.debug("rotate() ignored in phase %s", self.phase.value)
            return False
        previous = self.current_piece.rotate_clockwise()
        if self._collides():
            self.current_piece.shape = previous
            return False
        return True

    def move_down(self) -> bool:
        """Drop the piece one row, or settle it. Returns True if it moved."""
        if self._move(0, 1):
            return True
        if self.phase is not GamePhase.RUNNING:
            return False
        self._settle()
        return False

    def _settle(self) -> None:
        p = self.current_piece
        locked_at_top = self.grid.lock(p.shape, p.x, p.y, p.color)
        self.pieces_locked += 1
        if locked_at_top:
            self._game_over("locked at top")
            return

        lines = self.grid.clear_full_lines()
        if lines > 0:
            self.lines_cleared_total += lines
            self.score += self.rules.score_for_lines(lines)
            self.level = self.rules.next_level(self.level, lines)
            self.drop_interval_ms = self.rules.drop_interval_ms(self.level)
            logger.info(
                "Cleared %d line(s): score=%d level=%d interval=%d ms",
                lines, self.score, self.level, self.drop_interval_ms,
            )

        self.current_piece = self._make_piece()
        if self._collides():
            self._game_over("spawn blocked")

    def step(self, action: Action) -> bool:
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE:
            return self.rotate()
        if action == Action.SOFT_DROP:
            return self.move_down()
        return False

    # -- read-only views -----------------------------------------------

    def snapshot(self) -> GameSnapshot:
        p = self.current_piece
        return GameSnapshot(
            grid=_frozen(self.grid.grid),
            piece=PieceView(p.kind, _frozen(p.shape), p.x, p.y, p.color),
            score=self.score,
            level=self.level,
            phase=self.phase,
            drop_interval_ms=self.drop_interval_ms,
            fast_drop=self.fast_drop,
            lines_cleared_total=self.lines_cleared_total,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if not self.game_over:
            for x, y in self.current_piece.cells():
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.color
        return state
