"""Simple ASCII demo for the engine.

Run with: `python -m blockfall`

This module prints a single frame composed of the board, the active piece and
its ghost, useful as a minimal smoke test to ensure renderers see more than a
blank grid.
"""

from __future__ import annotations

import argparse

from . import GameSession, render_grid
from .utils import GHOST_VALUE


def _print_grid(grid: list[list[int]]) -> None:
    for row in grid:
        print("".join(":" if cell == GHOST_VALUE else "#" if cell else "." for cell in row))


def main() -> None:
    parser = argparse.ArgumentParser(description="Print one frame of a new game.")
    parser.add_argument("--seed", type=int, default=None, help="Piece generator seed.")
    args = parser.parse_args()

    session = GameSession(seed=args.seed)
    grid = render_grid(session.board, session.ghost_blocks())
    _print_grid(grid)
    print("next:", " ".join(piece.value for piece in session.next_pieces()))


if __name__ == "__main__":
    main()
