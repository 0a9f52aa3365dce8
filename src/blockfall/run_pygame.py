"""Simple pygame front-end for the engine.

This module provides a minimal playable game on top of
:class:`~blockfall.session.GameSession`.  It owns everything the engine does
not: drawing, keyboard handling and DAS/ARR timing.  The engine only sees
discrete actions and one :meth:`~blockfall.session.GameSession.tick` per
logical frame.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional, Sequence

import pygame

from .config import EngineConfig
from .input import ShiftRepeat
from .session import ActionResult, GameSession
from .tetromino import PIECE_COLORS, TetrominoType, shape_blocks
from .utils import TICKS_PER_SECOND


LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 28
# Hidden rows above the visible playfield
HIDDEN_ROWS = 2
# Width of the side panel holding hold/next/score
PANEL_WIDTH = 6 * CELL_SIZE

# Colours for each tetromino type
SHAPE_COLORS = {
    TetrominoType.I: (0, 255, 255),
    TetrominoType.J: (0, 0, 255),
    TetrominoType.L: (255, 165, 0),
    TetrominoType.O: (255, 255, 0),
    TetrominoType.S: (0, 255, 0),
    TetrominoType.Z: (255, 0, 0),
    TetrominoType.T: (128, 0, 128),
}

# Mapping from the integer stored in the board grid to a colour
CELL_COLORS = {0: (0, 0, 0)}
for shape, value in PIECE_COLORS.items():
    CELL_COLORS[value] = SHAPE_COLORS[shape]

SETTLED_GREY = (110, 110, 110)
GRID_LINE = (50, 50, 50)


def _cell_rect(row: int, col: int) -> pygame.Rect:
    return pygame.Rect(col * CELL_SIZE, (row - HIDDEN_ROWS) * CELL_SIZE, CELL_SIZE, CELL_SIZE)


def draw_board(screen: pygame.Surface, session: GameSession) -> None:
    """Render the grid, greying settled cells when coloured boards are off."""

    grid = session.grid()
    active = set(session.active_blocks())
    for r in range(HIDDEN_ROWS, session.board.height):
        for c in range(session.board.width):
            value = int(grid[r][c])
            color = CELL_COLORS[value]
            if value and (r, c) not in active and not session.config.colored_board:
                color = SETTLED_GREY
            rect = _cell_rect(r, c)
            pygame.draw.rect(screen, color, rect)
            pygame.draw.rect(screen, GRID_LINE, rect, 1)


def draw_ghost(screen: pygame.Surface, session: GameSession) -> None:
    """Outline the landing position of the active piece."""

    piece = session.active_piece
    if piece is None:
        return
    active = set(session.active_blocks())
    for r, c in session.ghost_blocks():
        if r < HIDDEN_ROWS or (r, c) in active:
            continue
        pygame.draw.rect(screen, SHAPE_COLORS[piece.shape], _cell_rect(r, c), 2)


def draw_preview(
    screen: pygame.Surface, shape: Optional[TetrominoType], left: int, top: int, scale: int
) -> None:
    if shape is None:
        return
    for dr, dc in shape_blocks(shape, 0):
        rect = pygame.Rect(left + dc * scale, top + dr * scale, scale, scale)
        pygame.draw.rect(screen, SHAPE_COLORS[shape], rect)


def draw_panel(screen: pygame.Surface, session: GameSession, font: pygame.font.Font) -> None:
    left = session.board.width * CELL_SIZE + CELL_SIZE // 2
    small = CELL_SIZE // 2
    y = CELL_SIZE // 2

    screen.blit(font.render("HOLD", True, (255, 255, 255)), (left, y))
    draw_preview(screen, session.held, left, y + 18, small)
    y += 3 * CELL_SIZE

    screen.blit(font.render("NEXT", True, (255, 255, 255)), (left, y))
    y += 18
    for shape in session.next_pieces():
        draw_preview(screen, shape, left, y, small)
        y += 3 * small

    y += small
    stats = session.score
    lines = [
        f"Score: {stats.score}",
        f"Level: {stats.level}",
        f"Lines: {stats.lines}",
        f"Combo: {stats.combo}",
        f"B2B: {'yes' if stats.back_to_back else 'no'}",
    ]
    if session.config.show_debug_info:
        lines.extend(f"{key}: {value}" for key, value in session.debug_info().items())
    for text in lines:
        screen.blit(font.render(text, True, (255, 255, 255)), (left, y))
        y += 18


def handle_key(event: pygame.event.Event, session: GameSession) -> Optional[ActionResult]:
    """Translate a key press into an engine action."""

    if event.key == pygame.K_UP or event.key == pygame.K_x:
        return session.rotate_cw()
    if event.key == pygame.K_z or event.key == pygame.K_LCTRL:
        return session.rotate_ccw()
    if event.key == pygame.K_SPACE:
        return session.hard_drop()
    if event.key == pygame.K_c or event.key == pygame.K_LSHIFT:
        return session.hold()
    return None


class GameRunner:
    """Manage the game loop with start/pause/resume/stop controls."""

    def __init__(self, config: Optional[EngineConfig] = None, *, seed: Optional[int] = None) -> None:
        self.config = config or EngineConfig()
        self.seed = seed
        self._running = False
        self._session: GameSession | None = None
        self._shift = ShiftRepeat.from_config(self.config)
        self._soft_drop = ShiftRepeat(das_delay=0, arr_speed=self.config.arr_speed)
        self._tick_accum = 0.0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return bool(self._session and self._session.paused)

    def _apply_repeat(self, session: GameSession, dt: float) -> None:
        keys = pygame.key.get_pressed()
        steps = self._shift.update(dt, keys[pygame.K_LEFT], keys[pygame.K_RIGHT])
        move = session.move_left if steps < 0 else session.move_right
        for _ in range(abs(steps)):
            if move() is not ActionResult.MOVED:
                break
        drops = self._soft_drop.update(dt, False, keys[pygame.K_DOWN])
        for _ in range(max(0, drops)):
            if session.soft_drop_step() is not ActionResult.MOVED:
                break

    async def _run_loop(self) -> None:
        pygame.init()
        board_px = 10 * CELL_SIZE + PANEL_WIDTH
        board_py = 20 * CELL_SIZE
        screen = pygame.display.set_mode((board_px, board_py))
        pygame.display.set_caption("Blockfall")
        clock = pygame.time.Clock()
        font = pygame.font.SysFont(None, 20)

        self._session = GameSession(self.config, seed=self.seed)
        session = self._session
        LOGGER.info("Game started")

        tick_ms = 1000.0 / TICKS_PER_SECOND
        self._running = True
        while self._running:
            dt = clock.tick(TICKS_PER_SECOND)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_p:
                        if session.paused:
                            session.resume()
                        else:
                            session.pause()
                    elif event.key == pygame.K_r:
                        session.reset(seed=self.seed)
                        LOGGER.info("Game restarted")
                    elif not session.paused:
                        handle_key(event, session)

            if not session.paused and not session.game_over:
                self._apply_repeat(session, dt)
                self._tick_accum += dt
                while self._tick_accum >= tick_ms:
                    self._tick_accum -= tick_ms
                    session.tick()

            screen.fill((0, 0, 0))
            draw_board(screen, session)
            draw_ghost(screen, session)
            draw_panel(screen, session, font)
            state = "Game Over - " if session.game_over else "Paused - " if session.paused else ""
            pygame.display.set_caption(f"Blockfall - {state}Score: {session.score.score}")
            pygame.display.flip()

            # Yield to the host event loop to keep UI responsive
            await asyncio.sleep(0)

        pygame.quit()
        LOGGER.info("Game stopped")

    def start(self) -> None:
        if self._running:
            LOGGER.info("Game already running")
            return
        asyncio.run(self._run_loop())

    def pause(self) -> None:
        if not self._session:
            LOGGER.info("Pause ignored: game not running")
            return
        self._session.pause()

    def resume(self) -> None:
        if not self._session:
            LOGGER.info("Resume ignored: game not running")
            return
        self._session.resume()

    def stop(self) -> None:
        self._running = False


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play with a pygame window.")
    parser.add_argument("--seed", type=int, default=None, help="Piece generator seed.")
    parser.add_argument(
        "--set",
        dest="settings",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a setting, e.g. --set GHOST_PIECE=false (repeatable).",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g. DEBUG, INFO).")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    stored = dict(item.split("=", 1) for item in args.settings if "=" in item)
    GameRunner(EngineConfig.from_mapping(stored), seed=args.seed).start()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
