"""Tetromino catalog and the falling piece value.

Every shape carries four precomputed 4x4 rotation masks following the Super
Rotation System (SRS).  A piece's board cells are the set mask cells shifted
by its ``position``, the ``(row, col)`` of the mask's top-left corner.  The
module also holds the SRS wallkick tables consumed by
:mod:`blockfall.controller`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

Mask = Tuple[Tuple[int, ...], ...]
RotationState = List[Tuple[int, int]]
Kick = Tuple[int, int]


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    Z = "Z"
    T = "T"


# Integer stored in the board for each shape.  ``0`` is an empty cell.
PIECE_COLORS: Dict[TetrominoType, int] = {
    TetrominoType.I: 1,
    TetrominoType.J: 2,
    TetrominoType.L: 3,
    TetrominoType.O: 4,
    TetrominoType.S: 5,
    TetrominoType.Z: 6,
    TetrominoType.T: 7,
}

# Top-left corner of the 4x4 mask when a piece enters the board.
SPAWN_POSITION: Tuple[int, int] = (0, 3)

# Shapes that may not open a game when the first-piece rule is active.
OVERHANG_SHAPES = frozenset({TetrominoType.S, TetrominoType.Z, TetrominoType.O})


def _mask(*rows: str) -> Mask:
    return tuple(tuple(1 if ch == "#" else 0 for ch in row) for row in rows)


# Rotation masks for states 0 (spawn), R, 2 and L.
ROTATION_MASKS: Dict[TetrominoType, Tuple[Mask, ...]] = {
    TetrominoType.I: (
        _mask("....", "####", "....", "...."),
        _mask("..#.", "..#.", "..#.", "..#."),
        _mask("....", "....", "####", "...."),
        _mask(".#..", ".#..", ".#..", ".#.."),
    ),
    TetrominoType.J: (
        _mask("#...", "###.", "....", "...."),
        _mask(".##.", ".#..", ".#..", "...."),
        _mask("....", "###.", "..#.", "...."),
        _mask(".#..", ".#..", "##..", "...."),
    ),
    TetrominoType.L: (
        _mask("..#.", "###.", "....", "...."),
        _mask(".#..", ".#..", ".##.", "...."),
        _mask("....", "###.", "#...", "...."),
        _mask("##..", ".#..", ".#..", "...."),
    ),
    TetrominoType.O: (
        _mask("....", ".##.", ".##.", "...."),
        _mask("....", ".##.", ".##.", "...."),
        _mask("....", ".##.", ".##.", "...."),
        _mask("....", ".##.", ".##.", "...."),
    ),
    TetrominoType.S: (
        _mask(".##.", "##..", "....", "...."),
        _mask(".#..", ".##.", "..#.", "...."),
        _mask("....", ".##.", "##..", "...."),
        _mask("#...", "##..", ".#..", "...."),
    ),
    TetrominoType.Z: (
        _mask("##..", ".##.", "....", "...."),
        _mask("..#.", ".##.", ".#..", "...."),
        _mask("....", "##..", ".##.", "...."),
        _mask(".#..", "##..", "#...", "...."),
    ),
    TetrominoType.T: (
        _mask(".#..", "###.", "....", "...."),
        _mask(".#..", ".##.", ".#..", "...."),
        _mask("....", "###.", ".#..", "...."),
        _mask(".#..", "##..", ".#..", "...."),
    ),
}


def _mask_cells(mask: Mask) -> RotationState:
    return [(r, c) for r, row in enumerate(mask) for c, value in enumerate(row) if value]


TETROMINO_SHAPES: Dict[TetrominoType, List[RotationState]] = {
    t_type: [_mask_cells(mask) for mask in masks] for t_type, masks in ROTATION_MASKS.items()
}


# SRS wallkick tests per (from, to) rotation transition, written as
# ``(x, y)`` with ``y`` pointing up as in the Guideline tables.  The
# controller converts them to board deltas ``(-y, x)``.
JLSTZ_KICKS: Dict[Tuple[int, int], Tuple[Kick, ...]] = {
    (0, 1): ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (1, 0): ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    (1, 2): ((0, 0), (1, 0), (1, -1), (0, 2), (1, 2)),
    (2, 1): ((0, 0), (-1, 0), (-1, 1), (0, -2), (-1, -2)),
    (2, 3): ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
    (3, 2): ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (3, 0): ((0, 0), (-1, 0), (-1, -1), (0, 2), (-1, 2)),
    (0, 3): ((0, 0), (1, 0), (1, 1), (0, -2), (1, -2)),
}

I_KICKS: Dict[Tuple[int, int], Tuple[Kick, ...]] = {
    (0, 1): ((0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)),
    (1, 0): ((0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)),
    (1, 2): ((0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)),
    (2, 1): ((0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)),
    (2, 3): ((0, 0), (2, 0), (-1, 0), (2, 1), (-1, -2)),
    (3, 2): ((0, 0), (-2, 0), (1, 0), (-2, -1), (1, 2)),
    (3, 0): ((0, 0), (1, 0), (-2, 0), (1, -2), (-2, 1)),
    (0, 3): ((0, 0), (-1, 0), (2, 0), (-1, 2), (2, -1)),
}

NO_KICKS: Tuple[Kick, ...] = ((0, 0),)


def shape_blocks(shape: TetrominoType, rotation: int) -> RotationState:
    """Return the mask cells for ``shape`` at ``rotation``.

    Parameters
    ----------
    shape:
        The :class:`TetrominoType` to query.
    rotation:
        Index of the desired rotation state.  Values are wrapped so any integer
        is accepted.
    """

    states = TETROMINO_SHAPES[shape]
    return states[rotation % len(states)]


def kick_tests(shape: TetrominoType, start: int, end: int) -> Tuple[Kick, ...]:
    """Return the ordered kick tests for rotating ``shape`` from ``start`` to ``end``."""

    if shape is TetrominoType.O:
        return NO_KICKS
    table = I_KICKS if shape is TetrominoType.I else JLSTZ_KICKS
    return table.get((start % 4, end % 4), NO_KICKS)


@dataclass
class Tetromino:
    """Active falling piece in the game."""

    shape: TetrominoType
    rotation: int = 0
    position: Tuple[int, int] = SPAWN_POSITION  # (row, col)

    @property
    def color(self) -> int:
        return PIECE_COLORS[self.shape]

    def rotate(self, direction: int = 1) -> None:
        """Rotate the piece.

        Positive values rotate clockwise whilst negative values rotate
        counter-clockwise.  Only the sign of ``direction`` matters.
        """

        step = 1 if direction > 0 else -1
        self.rotation = (self.rotation + step) % 4

    def move(self, dx: int, dy: int) -> None:
        """Move the piece by the given offsets.

        ``dx`` moves horizontally (columns) and ``dy`` moves vertically
        (rows).  The piece's position is stored as ``(row, col)``.
        """

        row, col = self.position
        self.position = (row + dy, col + dx)

    def blocks(self) -> List[Tuple[int, int]]:
        """Return the global block coordinates for this piece."""

        row, col = self.position
        state = shape_blocks(self.shape, self.rotation)
        return [(row + dr, col + dc) for dr, dc in state]
