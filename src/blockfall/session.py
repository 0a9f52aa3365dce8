"""High level game session: turns, gravity, lock delay, hold and scoring.

A :class:`GameSession` is driven by discrete calls: one :meth:`tick` per
logical clock step (60 per second) plus the player actions.  Every call
returns an :class:`ActionResult`; illegal actions are reported, never raised.
Once the session is over only :meth:`reset` is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import logging

from .board import Board
from .config import EngineConfig
from .controller import PieceController, TSpin
from .generator import PieceGenerator
from .scoring import ScoreState
from .tetromino import Tetromino, TetrominoType
from .utils import Coord, gravity_interval_ticks


LOGGER = logging.getLogger(__name__)


class ActionResult(str, Enum):
    """Outcome of an inbound action or tick."""

    MOVED = "moved"
    BLOCKED = "blocked"
    SPAWNED = "spawned"
    HELD = "held"
    LOCKED = "locked"
    GAME_OVER = "game_over"
    PAUSED = "paused"
    IGNORED = "ignored"
    IDLE = "idle"


class SessionStatus(str, Enum):
    PLAYING = "playing"
    CLEARING = "clearing"
    GAME_OVER = "game_over"


@dataclass
class TurnState:
    """Counters tied to the current active piece."""

    lock_ticks: int = 0
    resets_used: int = 0
    grounded: bool = False
    hold_used: bool = False
    soft_drop_distance: int = 0
    hard_drop_distance: int = 0


@dataclass(frozen=True)
class LockEvent:
    """Summary of the most recent lock."""

    shape: TetrominoType
    rows: Tuple[int, ...]
    tspin: TSpin
    award: int
    combo: int
    back_to_back: bool

    @property
    def lines(self) -> int:
        return len(self.rows)


class GameSession:
    """Mutable state for one single-player game."""

    def __init__(
        self, config: Optional[EngineConfig] = None, *, seed: Optional[int] = None
    ) -> None:
        self.config = config or EngineConfig()
        self.reset(seed=seed)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def reset(self, *, seed: Optional[int] = None) -> None:
        """Start a new game: empty board, fresh queue and counters."""

        self.board = Board()
        self.controller = PieceController(self.board, wall_kicks=self.config.wall_kicks)
        self.generator = PieceGenerator.from_config(self.config, seed=seed)
        self.score = ScoreState(start_level=self.config.start_level)
        self.turn = TurnState()
        self.held: Optional[TetrominoType] = None
        self.status = SessionStatus.PLAYING
        self.paused = False
        self.ticks = 0
        self.last_lock: Optional[LockEvent] = None
        self._gravity_counter = 0.0
        self._clear_ticks = 0
        self._next_turn()

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    @property
    def game_over(self) -> bool:
        return self.status is SessionStatus.GAME_OVER

    # ------------------------------------------------------------------
    # Inbound actions
    # ------------------------------------------------------------------
    def _guard(self) -> Optional[ActionResult]:
        """Return the result for an action that must not run right now."""

        if self.status is SessionStatus.GAME_OVER:
            return ActionResult.GAME_OVER
        if self.paused:
            return ActionResult.PAUSED
        if self.controller.active is None:
            return ActionResult.IGNORED
        return None

    def spawn(self) -> ActionResult:
        """Spawn the next queued piece if no piece is active."""

        if self.status is SessionStatus.GAME_OVER:
            return ActionResult.GAME_OVER
        if self.paused:
            return ActionResult.PAUSED
        if self.controller.active is not None or self.status is SessionStatus.CLEARING:
            return ActionResult.IGNORED
        return self._next_turn()

    def move_left(self) -> ActionResult:
        return self._player_move(self.controller.move_left)

    def move_right(self) -> ActionResult:
        return self._player_move(self.controller.move_right)

    def rotate_cw(self) -> ActionResult:
        return self._player_move(lambda: self.controller.rotate(True))

    def rotate_ccw(self) -> ActionResult:
        return self._player_move(lambda: self.controller.rotate(False))

    def soft_drop_step(self) -> ActionResult:
        """Move the piece down one row, awarding soft-drop points."""

        blocked = self._guard()
        if blocked is not None:
            return blocked
        if not self.controller.soft_drop_one():
            return ActionResult.BLOCKED
        self.turn.soft_drop_distance += 1
        self.score.add_drop_points(1, hard=False)
        self._gravity_counter = 0.0
        self._update_grounded()
        return ActionResult.MOVED

    def hard_drop(self) -> ActionResult:
        """Drop the piece to the floor and lock it immediately."""

        blocked = self._guard()
        if blocked is not None:
            return blocked
        distance = self.controller.hard_drop()
        self.turn.hard_drop_distance = distance
        self.score.add_drop_points(distance, hard=True)
        return self._lock()

    def hold(self) -> ActionResult:
        """Swap the active piece with the held one (once per turn)."""

        blocked = self._guard()
        if blocked is not None:
            return blocked
        if self.turn.hold_used:
            return ActionResult.BLOCKED
        current = self.controller.despawn()
        if self.held is None:
            self.held = current
            result = self._next_turn()
        else:
            incoming, self.held = self.held, current
            result = self._start_turn(incoming)
        LOGGER.debug("Held %s", current.value)
        if result is ActionResult.GAME_OVER:
            return result
        self.turn.hold_used = True
        return ActionResult.HELD

    def tick(self) -> ActionResult:
        """Advance the logical clock by one tick."""

        if self.status is SessionStatus.GAME_OVER:
            return ActionResult.GAME_OVER
        if self.paused:
            return ActionResult.PAUSED
        self.ticks += 1

        if self.status is SessionStatus.CLEARING:
            self._clear_ticks -= 1
            if self._clear_ticks > 0:
                return ActionResult.IDLE
            return self._next_turn()

        if self.controller.active is None:
            return ActionResult.IDLE

        if self.turn.grounded:
            self.turn.lock_ticks -= 1
            if self.turn.lock_ticks <= 0:
                return self._lock()
            return ActionResult.IDLE

        interval = gravity_interval_ticks(self.score.level)
        self._gravity_counter += 1
        moved = False
        while self._gravity_counter >= interval:
            self._gravity_counter -= interval
            if not self.controller.soft_drop_one():
                self._gravity_counter = 0.0
                break
            moved = True
        self._update_grounded()
        return ActionResult.MOVED if moved else ActionResult.IDLE

    # ------------------------------------------------------------------
    # Outbound queries
    # ------------------------------------------------------------------
    def grid(self):
        """Return a copy of the board, active piece included."""

        return self.board.snapshot()

    @property
    def active_piece(self) -> Optional[Tetromino]:
        active = self.controller.active
        return replace(active) if active is not None else None

    def active_blocks(self) -> List[Coord]:
        active = self.controller.active
        return active.blocks() if active is not None else []

    def ghost_blocks(self) -> List[Coord]:
        if not self.config.ghost_piece:
            return []
        return self.controller.ghost_blocks()

    def next_pieces(self, depth: Optional[int] = None) -> List[TetrominoType]:
        return self.generator.preview(self.config.next_preview if depth is None else depth)

    @property
    def last_cleared_rows(self) -> Tuple[int, ...]:
        return self.last_lock.rows if self.last_lock is not None else ()

    def debug_info(self) -> Dict[str, Any]:
        """Internal counters for diagnostic overlays."""

        active = self.controller.active
        return {
            "ticks": self.ticks,
            "status": self.status.value,
            "paused": self.paused,
            "piece": active.shape.value if active else None,
            "rotation": active.rotation if active else None,
            "position": active.position if active else None,
            "grounded": self.turn.grounded,
            "lock_ticks": self.turn.lock_ticks,
            "resets_used": self.turn.resets_used,
            "hold_used": self.turn.hold_used,
            "last_action": self.controller.last_action.value,
            "gravity": gravity_interval_ticks(self.score.level),
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _player_move(self, operation) -> ActionResult:
        blocked = self._guard()
        if blocked is not None:
            return blocked
        was_grounded = self.turn.grounded
        before = self.controller.footprint()
        if not operation():
            return ActionResult.BLOCKED
        if was_grounded and self.controller.footprint() != before:
            self._consume_reset()
        self._update_grounded()
        return ActionResult.MOVED

    def _resets_exhausted(self) -> bool:
        if self.config.unlimited_resets:
            return False
        return self.turn.resets_used >= self.config.lock_move_resets

    def _consume_reset(self) -> None:
        self.turn.resets_used += 1
        if self._resets_exhausted():
            self.turn.lock_ticks = 0
        else:
            self.turn.lock_ticks = self.config.piece_lock_ticks

    def _update_grounded(self) -> None:
        grounded = self.controller.is_grounded()
        if grounded and not self.turn.grounded:
            # A zero reset limit still grants the first countdown.
            spent = self.turn.resets_used > 0 and self._resets_exhausted()
            self.turn.lock_ticks = 0 if spent else self.config.piece_lock_ticks
        self.turn.grounded = grounded

    def _next_turn(self) -> ActionResult:
        return self._start_turn(self.generator.draw())

    def _start_turn(self, shape: TetrominoType) -> ActionResult:
        self.turn = TurnState()
        self._gravity_counter = 0.0
        if not self.controller.spawn(shape):
            self.status = SessionStatus.GAME_OVER
            LOGGER.info(
                "Game over: %s could not spawn (score=%d, lines=%d)",
                shape.value, self.score.score, self.score.lines,
            )
            return ActionResult.GAME_OVER
        self.status = SessionStatus.PLAYING
        self._update_grounded()
        return ActionResult.SPAWNED

    def _lock(self) -> ActionResult:
        tspin = self.controller.tspin()
        piece = self.controller.lock()
        rows = self.board.find_full_rows()
        self.board.remove_rows(rows)
        award = self.score.register_lock(len(rows), tspin)
        self.last_lock = LockEvent(
            shape=piece.shape,
            rows=rows,
            tspin=tspin,
            award=award,
            combo=self.score.combo,
            back_to_back=self.score.back_to_back,
        )
        LOGGER.debug(
            "Locked %s at %s: rows=%s tspin=%s award=%d",
            piece.shape.value, piece.position, rows, tspin.value, award,
        )
        delay = self.config.line_clear_ticks
        if rows and delay > 0:
            self.status = SessionStatus.CLEARING
            self._clear_ticks = delay
            return ActionResult.LOCKED
        if self._next_turn() is ActionResult.GAME_OVER:
            return ActionResult.GAME_OVER
        return ActionResult.LOCKED
