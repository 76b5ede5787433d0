from __future__ import annotations

import logging
from typing import List, Optional

from falling_blocks.game import GameResult


logger = logging.getLogger(__name__)


class HighScoreTable:
    """In-memory ranking of finished games, best score first."""

    def __init__(self, limit: int = 10) -> None:
        self.limit = int(limit)
        self._results: List[GameResult] = []

    def __len__(self) -> int:
        return len(self._results)

    def record(self, result: GameResult) -> None:
        self._results.append(result)
        # sort is stable, so equal scores keep arrival order
        self._results.sort(key=lambda r: r.score, reverse=True)
        del self._results[self.limit :]
        logger.info("Recorded %s: %d", result.player_name, result.score)

    def top(self, n: Optional[int] = None) -> List[GameResult]:
        if n is None:
            return list(self._results)
        return self._results[:n]
