import logging
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

from blockfall import render_grid
from blockfall.__main__ import _print_grid
from blockfall.config import EngineConfig
from blockfall.run_pygame import (
    CELL_COLORS,
    CELL_SIZE,
    HIDDEN_ROWS,
    SETTLED_GREY,
    GameRunner,
    draw_board,
    handle_key,
    parse_args,
)
from blockfall.session import ActionResult, GameSession


def test_ascii_frame_shows_piece_and_ghost(capsys):
    session = GameSession(seed=1)
    _print_grid(render_grid(session.board, session.ghost_blocks()))
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 22
    assert "#" in "".join(lines[:3])
    assert ":" in lines[-1]


def test_handle_key_maps_to_engine_actions():
    session = GameSession(seed=1)
    space = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE)
    assert handle_key(space, session) is ActionResult.LOCKED
    hold = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_c)
    assert handle_key(hold, session) is ActionResult.HELD
    other = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q)
    assert handle_key(other, session) is None


def test_settled_cells_grey_without_colored_board():
    session = GameSession(EngineConfig(colored_board=False), seed=1)
    session.hard_drop()
    screen = pygame.Surface((10 * CELL_SIZE, 20 * CELL_SIZE))
    draw_board(screen, session)

    row = session.board.height - 1
    col = next(c for c in range(session.board.width) if session.board.get_cell(row, c))
    centre = (col * CELL_SIZE + CELL_SIZE // 2, (row - HIDDEN_ROWS) * CELL_SIZE + CELL_SIZE // 2)
    assert tuple(screen.get_at(centre))[:3] == SETTLED_GREY
    empty = next(c for c in range(session.board.width) if not session.board.get_cell(row, c))
    centre = (empty * CELL_SIZE + CELL_SIZE // 2, centre[1])
    assert tuple(screen.get_at(centre))[:3] == CELL_COLORS[0]


def test_runner_controls_before_start(caplog):
    runner = GameRunner(EngineConfig(das_delay=100), seed=3)
    assert not runner.running
    assert not runner.paused
    with caplog.at_level(logging.INFO, logger="blockfall.run_pygame"):
        runner.pause()
        runner.resume()
    assert "Pause ignored: game not running" in caplog.messages
    assert "Resume ignored: game not running" in caplog.messages
    assert runner._shift.das_delay == 100


def test_parse_args_collects_overrides():
    args = parse_args(["--seed", "5", "--set", "GHOST_PIECE=false", "--set", "ARR_SPEED=0"])
    assert args.seed == 5
    assert args.settings == ["GHOST_PIECE=false", "ARR_SPEED=0"]
    stored = dict(item.split("=", 1) for item in args.settings)
    config = EngineConfig.from_mapping(stored)
    assert config.ghost_piece is False
    assert config.arr_speed == 0
