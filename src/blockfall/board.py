"""Board representation for the playfield.

The grid lives in a single flat ``uint8`` buffer indexed by
``row * width + col`` with row ``0`` at the top.  The active piece is drawn
into the same buffer as settled geometry, so callers that move a piece must
erase its old footprint before writing the new one.
"""

from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
from numpy.typing import NDArray


# Dimensions of the standard playfield including the two hidden spawn rows.
WIDTH = 10
HEIGHT = 22

EMPTY = 0

Cells = NDArray[np.uint8]


def create_empty_cells(height: int = HEIGHT, width: int = WIDTH) -> Cells:
    """Return a new empty flat cell buffer."""

    return np.zeros(height * width, dtype=np.uint8)


class Board:
    """Fixed-size grid of cell colors."""

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self, height: int = HEIGHT, width: int = WIDTH) -> None:
        if height <= 0 or width <= 0:
            raise ValueError("Board dimensions must be positive")
        self.height = height
        self.width = width
        self.cells: Cells = create_empty_cells(height, width)

    @property
    def grid(self) -> NDArray[np.uint8]:
        """Two-dimensional view of the cell buffer (no copy)."""

        return self.cells.reshape(self.height, self.width)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def _index(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) out of bounds")
        return row * self.width + col

    def get_cell(self, row: int, col: int) -> int:
        """Return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """

        return int(self.cells[self._index(row, col)])

    def set_cell(self, row: int, col: int, color: int) -> None:
        """Set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """

        self.cells[self._index(row, col)] = np.uint8(color)

    def clear_cell(self, row: int, col: int) -> None:
        self.set_cell(row, col, EMPTY)

    def is_cell_empty(self, row: int, col: int) -> bool:
        """Return ``True`` if the cell at ``(row, col)`` is empty.

        Any coordinates outside the board are treated as occupied.  This makes
        collision probes simpler as off-board positions are automatically
        rejected.
        """

        if self.in_bounds(row, col):
            return bool(self.cells[row * self.width + col] == EMPTY)
        return False

    def find_full_rows(self) -> Tuple[int, ...]:
        """Return the indices of completely filled rows, top to bottom."""

        full = np.all(self.grid != EMPTY, axis=1)
        return tuple(int(row) for row in np.flatnonzero(full))

    def remove_rows(self, rows: Iterable[int]) -> None:
        """Remove ``rows`` and shift everything above them down.

        The surviving rows are selected from a single snapshot so removal order
        never affects the result.  Empty rows are inserted at the top.
        """

        doomed = {int(row) for row in rows}
        if not doomed:
            return
        for row in doomed:
            if not 0 <= row < self.height:
                raise IndexError(f"Row {row} out of bounds")
        keep = np.ones(self.height, dtype=bool)
        keep[list(doomed)] = False
        remaining = self.grid[keep].ravel()
        self.cells = np.concatenate(
            (create_empty_cells(len(doomed), self.width), remaining)
        )

    def clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed."""

        rows = self.find_full_rows()
        self.remove_rows(rows)
        return len(rows)

    def snapshot(self) -> NDArray[np.uint8]:
        """Return an independent 2-D copy of the grid."""

        return self.grid.copy()

    def reset(self) -> None:
        self.cells = create_empty_cells(self.height, self.width)
