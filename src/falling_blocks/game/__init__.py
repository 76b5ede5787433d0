"""Game module for Falling Blocks.

Exports the simulation core and supporting classes:
- GameGrid: Board cells, collision, locking and line clearing
- Piece: Active tetromino with clockwise rotation
- TetrominoType: Enum of the seven piece kinds
- ScoringRules: Score, level and drop-interval helpers
- GameConfig: Board geometry and session policy
- TimerScheduler / ManualClock: Cancellable timers driving the drop ticks
- FallingBlocksGame: Session state machine
"""

from .config import GameConfig
from .grid import GameGrid
from .pieces import PALETTE, Piece, TetrominoType, base_piece
from .rules import ScoringRules
from .scheduler import ManualClock, Scheduler, TimerHandle, TimerScheduler
from .core import Action, FallingBlocksGame, GamePhase, GameResult, GameSnapshot

__all__ = [
    "GameConfig",
    "GameGrid",
    "PALETTE",
    "Piece",
    "TetrominoType",
    "base_piece",
    "ScoringRules",
    "ManualClock",
    "Scheduler",
    "TimerHandle",
    "TimerScheduler",
    "Action",
    "FallingBlocksGame",
    "GamePhase",
    "GameResult",
    "GameSnapshot",
]
