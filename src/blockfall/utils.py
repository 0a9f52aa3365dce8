"""Utility helpers for the engine."""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional, Tuple

from .board import Board

Coord = Tuple[int, int]

TICKS_PER_SECOND = 60
# Highest level the gravity curve is evaluated at.
MAX_GRAVITY_LEVEL = 20
# Marker used for ghost cells in rendered copies of the grid.
GHOST_VALUE = 8


def gravity_interval_ticks(level: int) -> float:
    """Return the number of ticks the active piece waits per row at ``level``.

    Follows the Guideline curve ``(0.8 - (level - 1) * 0.007) ** (level - 1)``
    seconds per row.  Values below ``1`` mean the piece falls several rows
    within a single tick.
    """

    level = min(max(level, 1), MAX_GRAVITY_LEVEL)
    seconds = (0.8 - (level - 1) * 0.007) ** (level - 1)
    return seconds * TICKS_PER_SECOND


def cells_fit(
    board: Board, cells: Iterable[Coord], own: AbstractSet[Coord] = frozenset()
) -> bool:
    """Return ``True`` if every cell is on the board and free.

    Cells listed in ``own`` belong to the piece being moved and therefore never
    block it.
    """

    for row, col in cells:
        if (row, col) in own:
            continue
        if not board.is_cell_empty(row, col):
            return False
    return True


def can_move(
    board: Board, cells: Iterable[Coord], dx: int, dy: int,
    own: AbstractSet[Coord] = frozenset(),
) -> bool:
    """Return ``True`` if ``cells`` can be translated by ``dx`` and ``dy``.

    Out-of-bounds destinations and cells occupied by anything outside ``own``
    block the move.  Used to validate movement before any cell is written.
    """

    return cells_fit(board, ((r + dy, c + dx) for r, c in cells), own)


def drop_distance(board: Board, cells: Iterable[Coord]) -> int:
    """Return how many rows ``cells`` can fall before landing.

    The scan treats ``cells`` themselves as transparent so it works whether or
    not the piece is currently drawn into ``board``.  The board is only read.
    """

    own = frozenset(cells)
    if not own:
        return 0
    distance = board.height
    for row, col in own:
        probe = row + 1
        while (probe, col) in own or board.is_cell_empty(probe, col):
            probe += 1
        distance = min(distance, probe - row - 1)
    return distance


def render_grid(board: Board, ghost: Optional[Iterable[Coord]] = None) -> List[List[int]]:
    """Return a copy of the board grid with ghost cells overlaid.

    The active piece is already part of the board, so only empty cells under
    the ghost projection are marked with :data:`GHOST_VALUE`.
    """

    grid = board.grid.tolist()
    if ghost is not None:
        for r, c in ghost:
            if board.in_bounds(r, c) and grid[r][c] == 0:
                grid[r][c] = GHOST_VALUE
    return grid
