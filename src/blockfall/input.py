"""Delayed auto-shift (DAS) and auto-repeat (ARR) for horizontal movement.

This lives outside the engine core: it turns how long a direction key has
been held into a number of discrete ``move_left``/``move_right`` calls.
"""

from __future__ import annotations

from .board import WIDTH


class ShiftRepeat:
    """Track a held direction and report how many steps to move each frame.

    The first frame a direction is pressed yields one step.  After
    ``das_delay`` ms of holding, a step is produced every ``arr_speed`` ms; an
    ARR of ``0`` moves all the way to the wall at once.
    """

    def __init__(self, das_delay: int = 167, arr_speed: int = 33) -> None:
        if das_delay < 0 or arr_speed < 0:
            raise ValueError("DAS and ARR must be non-negative")
        self.das_delay = das_delay
        self.arr_speed = arr_speed
        self.direction = 0
        self.held_ms = 0.0
        self._repeat_ms = 0.0

    @classmethod
    def from_config(cls, config) -> "ShiftRepeat":
        return cls(das_delay=config.das_delay, arr_speed=config.arr_speed)

    def reset(self) -> None:
        self.direction = 0
        self.held_ms = 0.0
        self._repeat_ms = 0.0

    def update(self, dt_ms: float, left: bool, right: bool) -> int:
        """Return the signed number of column steps for this frame."""

        direction = (-1 if left else 0) + (1 if right else 0)
        if direction != self.direction:
            self.reset()
            self.direction = direction
            return direction

        if direction == 0:
            return 0

        before = self.held_ms
        self.held_ms += dt_ms
        if self.held_ms < self.das_delay:
            return 0
        if self.arr_speed == 0:
            return direction * WIDTH

        steps = 0
        if before < self.das_delay:
            # DAS charged during this frame: shift once, then repeat on the remainder.
            steps = 1
            self._repeat_ms = self.held_ms - self.das_delay
        else:
            self._repeat_ms += dt_ms
        repeats = int(self._repeat_ms // self.arr_speed)
        self._repeat_ms -= repeats * self.arr_speed
        return direction * (steps + repeats)
