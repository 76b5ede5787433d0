from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    points_per_line: int = 100
    max_level: int = 10
    base_interval_ms: int = 1000
    min_interval_ms: int = 100
    fast_drop_interval_ms: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.points_per_line

    def next_level(self, level: int, lines: int) -> int:
        # One level per cleared line, capped
        return min(self.max_level, level + max(0, lines))

    def drop_interval_ms(self, level: int) -> int:
        return max(self.min_interval_ms, self.base_interval_ms // max(1, level))
