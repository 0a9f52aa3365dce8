"""Movement, rotation and drop operations for the active piece.

:class:`PieceController` keeps the active :class:`~blockfall.tetromino.Tetromino`
and its footprint on the :class:`~blockfall.board.Board` in sync.  Every
operation probes the destination cells first and only then erases the old
footprint and writes the new one, so a failed move never leaves the board
half-updated.

Rotation follows SRS: the candidate rotation is tried at each kick offset of
the piece's kick table in order and the first fitting placement wins.  With
``wall_kicks=False`` only the unshifted placement is tried.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from .board import Board
from .tetromino import NO_KICKS, Tetromino, TetrominoType, kick_tests
from .utils import Coord, can_move, cells_fit, drop_distance


class LastAction(str, Enum):
    """Kind of the most recent successful piece movement."""

    NONE = "none"
    MOVE = "move"
    DROP = "drop"
    ROTATE = "rotate"


class TSpin(str, Enum):
    NONE = "none"
    MINI = "mini"
    FULL = "full"


# Pivot of the T piece inside its mask.
T_PIVOT: Coord = (1, 1)
_CORNERS: Tuple[Coord, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
# Diagonal corners on the side the T points towards, per rotation state.
_FRONT_CORNERS = {
    0: ((-1, -1), (-1, 1)),
    1: ((-1, 1), (1, 1)),
    2: ((1, -1), (1, 1)),
    3: ((-1, -1), (1, -1)),
}
# Index of the final SRS test; a T-spin reached through it always counts full.
_LAST_KICK_TEST = 4


class PieceController:
    """Own the active piece and mutate the board on its behalf."""

    def __init__(self, board: Board, *, wall_kicks: bool = True) -> None:
        self.board = board
        self.wall_kicks = wall_kicks
        self.active: Optional[Tetromino] = None
        self.last_action = LastAction.NONE
        self.last_kick = -1

    # ------------------------------------------------------------------
    # Footprint helpers
    # ------------------------------------------------------------------
    def footprint(self) -> FrozenSet[Coord]:
        """Return the board cells covered by the active piece."""

        if self.active is None:
            return frozenset()
        return frozenset(self.active.blocks())

    def _erase(self, piece: Tetromino) -> None:
        for row, col in piece.blocks():
            self.board.clear_cell(row, col)

    def _draw(self, piece: Tetromino) -> None:
        color = piece.color
        for row, col in piece.blocks():
            self.board.set_cell(row, col, color)

    def _commit(self, candidate: Tetromino, action: LastAction) -> None:
        assert self.active is not None
        self._erase(self.active)
        self._draw(candidate)
        self.active = candidate
        self.last_action = action

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def spawn(
        self,
        shape: TetrominoType,
        *,
        rotation: int = 0,
        position: Optional[Coord] = None,
    ) -> bool:
        """Place a new active piece and return whether it fit.

        Spawning fails without touching the board when any target cell is
        already occupied or off the board.
        """

        if self.active is not None:
            raise RuntimeError("Cannot spawn while a piece is active")
        piece = Tetromino(shape, rotation=rotation % 4)
        if position is not None:
            piece.position = position
        if not cells_fit(self.board, piece.blocks()):
            return False
        self._draw(piece)
        self.active = piece
        self.last_action = LastAction.NONE
        self.last_kick = -1
        return True

    def despawn(self) -> TetrominoType:
        """Erase the active piece from the board and return its shape."""

        if self.active is None:
            raise RuntimeError("No active piece to remove")
        shape = self.active.shape
        self._erase(self.active)
        self.active = None
        return shape

    def lock(self) -> Tetromino:
        """Detach the active piece; its cells become settled geometry."""

        if self.active is None:
            raise RuntimeError("No active piece to lock")
        piece = self.active
        self.active = None
        return piece

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def _shift(self, dx: int, dy: int, action: LastAction) -> bool:
        if self.active is None:
            return False
        own = self.footprint()
        if not can_move(self.board, own, dx, dy, own):
            return False
        candidate = replace(self.active)
        candidate.move(dx, dy)
        self._commit(candidate, action)
        return True

    def move_left(self) -> bool:
        return self._shift(-1, 0, LastAction.MOVE)

    def move_right(self) -> bool:
        return self._shift(1, 0, LastAction.MOVE)

    def soft_drop_one(self) -> bool:
        return self._shift(0, 1, LastAction.DROP)

    def hard_drop(self) -> int:
        """Drop the piece as far as it goes and return the rows fallen."""

        fallen = 0
        while self.soft_drop_one():
            fallen += 1
        return fallen

    def is_grounded(self) -> bool:
        """Return ``True`` when the piece cannot move down."""

        if self.active is None:
            return False
        own = self.footprint()
        return not can_move(self.board, own, 0, 1, own)

    def rotate(self, clockwise: bool = True) -> bool:
        """Rotate the active piece, trying SRS kicks in table order.

        Returns ``False`` and leaves everything untouched when no candidate
        placement fits.
        """

        if self.active is None:
            return False
        start = self.active.rotation
        end = (start + (1 if clockwise else -1)) % 4
        tests = kick_tests(self.active.shape, start, end) if self.wall_kicks else NO_KICKS
        own = self.footprint()
        for index, (x, y) in enumerate(tests):
            candidate = replace(self.active, rotation=end)
            candidate.move(x, -y)
            if cells_fit(self.board, candidate.blocks(), own):
                self._commit(candidate, LastAction.ROTATE)
                self.last_kick = index
                return True
        return False

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------
    def ghost_blocks(self) -> List[Coord]:
        """Return the cells the active piece would occupy after a hard drop."""

        if self.active is None:
            return []
        cells = self.active.blocks()
        distance = drop_distance(self.board, cells)
        return [(row + distance, col) for row, col in cells]

    def tspin(self) -> TSpin:
        """Classify the current placement of the active piece as a T-spin.

        Only a T piece whose last successful action was a rotation qualifies.
        Three or more filled diagonal corners around the pivot make a T-spin;
        it is a full one when both front corners are filled or the rotation
        needed the last kick test, otherwise a mini.
        """

        piece = self.active
        if piece is None or piece.shape is not TetrominoType.T:
            return TSpin.NONE
        if self.last_action is not LastAction.ROTATE:
            return TSpin.NONE
        pivot_row = piece.position[0] + T_PIVOT[0]
        pivot_col = piece.position[1] + T_PIVOT[1]

        def filled(corner: Coord) -> bool:
            return not self.board.is_cell_empty(pivot_row + corner[0], pivot_col + corner[1])

        if sum(filled(corner) for corner in _CORNERS) < 3:
            return TSpin.NONE
        if all(filled(corner) for corner in _FRONT_CORNERS[piece.rotation]):
            return TSpin.FULL
        if self.last_kick == _LAST_KICK_TEST:
            return TSpin.FULL
        return TSpin.MINI
