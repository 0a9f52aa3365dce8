"""Piece sequencing: 7-bag and pure random generators."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Deque, List, Optional
import random

from .tetromino import OVERHANG_SHAPES, TetrominoType

if TYPE_CHECKING:  # pragma: no cover
    from .config import EngineConfig


# Upcoming pieces kept buffered at all times (Guideline preview depth).
LOOKAHEAD = 14


class PieceGenerator:
    """Produce the stream of upcoming tetromino identities.

    In bag mode the queue is extended with ``bag_amount`` freshly shuffled
    permutations of all seven shapes whenever fewer than ``lookahead`` entries
    remain.  In pure random mode every entry is an independent uniform draw.
    The queue is consumed front to back.
    """

    def __init__(
        self,
        *,
        modern: bool = True,
        bag_amount: int = 1,
        first_piece_no_overhang: bool = True,
        lookahead: int = LOOKAHEAD,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        if bag_amount < 1:
            raise ValueError("bag_amount must be at least 1")
        if lookahead < 1:
            raise ValueError("lookahead must be at least 1")
        self.modern = modern
        self.bag_amount = bag_amount
        self.first_piece_no_overhang = first_piece_no_overhang
        self.lookahead = lookahead
        self._rng = rng or random.Random(seed)
        self._queue: Deque[TetrominoType] = deque()
        self._generated = 0
        self._refill()

    @classmethod
    def from_config(
        cls, config: "EngineConfig", *, seed: Optional[int] = None
    ) -> "PieceGenerator":
        return cls(
            modern=config.modern_piece_rng,
            bag_amount=config.piece_bag_amount,
            first_piece_no_overhang=config.first_piece_no_overhang,
            seed=seed,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def draw(self) -> TetrominoType:
        """Remove and return the next piece."""

        piece = self._queue.popleft()
        self._refill()
        return piece

    def preview(self, count: int = LOOKAHEAD) -> List[TetrominoType]:
        """Return up to ``count`` upcoming pieces without consuming them."""

        count = max(0, min(count, len(self._queue)))
        return [self._queue[i] for i in range(count)]

    def __len__(self) -> int:
        return len(self._queue)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _refill(self) -> None:
        while len(self._queue) < self.lookahead:
            if self.modern:
                for _ in range(self.bag_amount):
                    self._queue.extend(self._new_bag())
            else:
                self._queue.append(self._rng.choice(list(TetrominoType)))
            self._generated += 1

    def _new_bag(self) -> List[TetrominoType]:
        bag = list(TetrominoType)
        self._rng.shuffle(bag)
        if self._generated == 0 and not self._queue and self.first_piece_no_overhang:
            while bag[0] in OVERHANG_SHAPES:
                self._rng.shuffle(bag)
        return bag
