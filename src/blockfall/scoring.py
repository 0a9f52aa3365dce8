"""Guideline scoring: line clears, T-spins, combos and back-to-back.

The award for a lock is looked up by ``(TSpin kind, lines cleared)`` and
scaled by the current level.  Consecutive *difficult* clears (four lines or
any line-clearing T-spin) earn a 1.5x back-to-back multiplier, and a combo
bonus of ``50 * combo * level`` rewards clearing on consecutive locks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .controller import TSpin

LINES_PER_LEVEL = 10
COMBO_BONUS = 50
BACK_TO_BACK_MULTIPLIER = 1.5
SOFT_DROP_POINTS = 1
HARD_DROP_POINTS = 2

CLEAR_TABLE: Dict[Tuple[TSpin, int], int] = {
    (TSpin.NONE, 0): 0,
    (TSpin.NONE, 1): 100,
    (TSpin.NONE, 2): 300,
    (TSpin.NONE, 3): 500,
    (TSpin.NONE, 4): 800,
    (TSpin.MINI, 0): 100,
    (TSpin.MINI, 1): 200,
    (TSpin.MINI, 2): 400,
    (TSpin.FULL, 0): 400,
    (TSpin.FULL, 1): 800,
    (TSpin.FULL, 2): 1200,
    (TSpin.FULL, 3): 1600,
}


def base_award(lines: int, tspin: TSpin = TSpin.NONE) -> int:
    """Return the unscaled award for clearing ``lines`` with ``tspin``.

    A mini T-spin can only clear up to two rows; a larger clear means the
    placement is scored as a full T-spin.
    """

    if not 0 <= lines <= 4:
        raise ValueError(f"Invalid line count: {lines}")
    if tspin is TSpin.MINI and lines > 2:
        tspin = TSpin.FULL
    return CLEAR_TABLE.get((tspin, lines), CLEAR_TABLE[(TSpin.NONE, lines)])


def is_difficult(lines: int, tspin: TSpin) -> bool:
    return lines == 4 or (lines > 0 and tspin is not TSpin.NONE)


@dataclass
class ScoreState:
    """Cumulative score, combo and progression counters for one session."""

    score: int = 0
    combo: int = 0
    back_to_back: bool = False
    lines: int = 0
    level: int = 1
    pieces: int = 0
    start_level: int = 1
    _chain: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.start_level < 1:
            raise ValueError("start_level must be at least 1")
        self.level = max(self.level, self.start_level)

    def add_drop_points(self, rows: int, *, hard: bool) -> int:
        """Award points for ``rows`` dropped and return them."""

        points = rows * (HARD_DROP_POINTS if hard else SOFT_DROP_POINTS)
        self.score += points
        return points

    def register_lock(self, lines: int, tspin: TSpin = TSpin.NONE) -> int:
        """Update the counters for a lock and return the awarded points.

        The award uses the level in effect before the cleared lines are
        counted towards the next level.
        """

        level = self.level
        award = base_award(lines, tspin) * level
        self.pieces += 1

        if lines:
            if self._chain:
                self.combo += 1
            self._chain = True
            award += COMBO_BONUS * self.combo * level

            if is_difficult(lines, tspin):
                if self.back_to_back:
                    award += int(base_award(lines, tspin) * level * (BACK_TO_BACK_MULTIPLIER - 1))
                self.back_to_back = True
            else:
                self.back_to_back = False

            self.lines += lines
            self.level = self.start_level + self.lines // LINES_PER_LEVEL
        else:
            self.combo = 0
            self._chain = False

        self.score += award
        return award

    def reset(self) -> None:
        self.score = 0
        self.combo = 0
        self.back_to_back = False
        self.lines = 0
        self.level = self.start_level
        self.pieces = 0
        self._chain = False
