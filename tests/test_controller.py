from __future__ import annotations

import numpy as np
import pytest

from blockfall.board import WIDTH, Board
from blockfall.controller import LastAction, PieceController, TSpin
from blockfall.tetromino import PIECE_COLORS, Tetromino, TetrominoType


def _occupied(board: Board) -> set[tuple[int, int]]:
    rows, cols = np.nonzero(board.grid)
    return {(int(r), int(c)) for r, c in zip(rows, cols)}


@pytest.mark.parametrize("shape", list(TetrominoType))
def test_spawn_fails_only_when_target_cell_taken(shape):
    board = Board()
    board.set_cell(21, 0, 1)
    controller = PieceController(board)
    assert controller.spawn(shape)
    assert len(controller.footprint()) == 4

    for target in Tetromino(shape).blocks():
        blocked = Board()
        blocked.set_cell(*target, 1)
        other = PieceController(blocked)
        assert other.spawn(shape) is False
        assert other.active is None
        assert _occupied(blocked) == {target}


def test_spawn_twice_is_a_programming_error():
    controller = PieceController(Board())
    controller.spawn(TetrominoType.T)
    with pytest.raises(RuntimeError):
        controller.spawn(TetrominoType.I)


def test_move_left_then_right_restores_offset():
    board = Board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.T)
    start = controller.active.position

    assert controller.move_left()
    assert controller.active.position == (start[0], start[1] - 1)
    assert controller.move_right()
    assert controller.active.position == start
    assert _occupied(board) == controller.footprint()
    assert controller.last_action is LastAction.MOVE


@pytest.mark.parametrize("shape", list(TetrominoType))
def test_hard_drop_on_empty_board_lands_on_last_row(shape):
    board = Board()
    controller = PieceController(board)
    controller.spawn(shape)

    fallen = controller.hard_drop()

    assert 0 < fallen <= 22
    assert max(r for r, _ in controller.footprint()) == board.height - 1
    assert _occupied(board) == controller.footprint()
    assert {board.get_cell(r, c) for r, c in controller.footprint()} == {PIECE_COLORS[shape]}
    assert controller.soft_drop_one() is False
    assert controller.is_grounded()


def test_walls_block_horizontal_moves():
    controller = PieceController(Board())
    controller.spawn(TetrominoType.I)
    for _ in range(3):
        assert controller.move_left()
    assert controller.move_left() is False
    assert min(c for _, c in controller.footprint()) == 0

    for _ in range(WIDTH - 4):
        assert controller.move_right()
    assert controller.move_right() is False
    assert max(c for _, c in controller.footprint()) == WIDTH - 1


def test_foreign_cell_blocks_move_and_state_is_unchanged():
    board = Board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.O)
    board.set_cell(1, 3, 2)
    before = board.snapshot()
    position = controller.active.position

    assert controller.move_left() is False
    assert controller.active.position == position
    np.testing.assert_array_equal(board.grid, before)


def test_rotation_uses_wall_kick_against_left_wall():
    board = Board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.I)
    assert controller.rotate(True)
    for _ in range(5):
        assert controller.move_left()
    assert {c for _, c in controller.footprint()} == {0}

    assert controller.rotate(True)

    assert controller.active.rotation == 2
    assert controller.last_kick == 2
    assert controller.active.position == (0, 0)
    assert sorted(controller.footprint()) == [(2, 0), (2, 1), (2, 2), (2, 3)]
    assert _occupied(board) == controller.footprint()
    assert controller.last_action is LastAction.ROTATE


def test_rotation_without_kicks_fails_against_wall():
    board = Board()
    controller = PieceController(board, wall_kicks=False)
    controller.spawn(TetrominoType.I)
    controller.rotate(True)
    for _ in range(5):
        controller.move_left()
    before = board.snapshot()

    assert controller.rotate(True) is False
    assert controller.active.rotation == 1
    np.testing.assert_array_equal(board.grid, before)


def test_rotation_tries_kicks_in_table_order():
    board = Board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.T)
    board.set_cell(2, 4, 1)

    assert controller.rotate(False)

    # (0, 0) collides with the block, the next test shifts one column right.
    assert controller.active.rotation == 3
    assert controller.last_kick == 1
    assert controller.active.position == (0, 4)
    assert board.get_cell(2, 4) == 1


def test_blocked_rotation_without_kicks_leaves_board_untouched():
    board = Board()
    controller = PieceController(board, wall_kicks=False)
    controller.spawn(TetrominoType.T)
    board.set_cell(2, 4, 1)
    before = board.snapshot()

    assert controller.rotate(False) is False
    assert controller.active.rotation == 0
    np.testing.assert_array_equal(board.grid, before)


def test_rotation_can_reuse_own_cells():
    controller = PieceController(Board(), wall_kicks=False)
    controller.spawn(TetrominoType.S)
    for _ in range(4):
        assert controller.rotate(True)
    assert controller.active.rotation == 0


def test_ghost_is_pure_projection():
    board = Board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.T)
    before = board.snapshot()

    ghost = controller.ghost_blocks()

    np.testing.assert_array_equal(board.grid, before)
    assert sorted(ghost) == [(20, 4), (21, 3), (21, 4), (21, 5)]

    board.set_cell(10, 4, 3)
    assert sorted(controller.ghost_blocks()) == [(8, 4), (9, 3), (9, 4), (9, 5)]
    assert controller.active.position == (0, 3)


def _tsd_board() -> Board:
    board = Board()
    for col in range(WIDTH):
        if col != 4:
            board.set_cell(21, col, 1)
        if col not in (3, 4, 5):
            board.set_cell(20, col, 1)
    board.set_cell(19, 3, 1)
    return board


def test_rotation_into_slot_is_full_tspin():
    board = _tsd_board()
    controller = PieceController(board)
    assert controller.spawn(TetrominoType.T, rotation=1, position=(19, 3))

    assert controller.rotate(True)

    assert controller.last_kick == 0
    assert controller.tspin() is TSpin.FULL
    controller.lock()
    assert board.find_full_rows() == (20, 21)


def test_spin_requires_rotation_as_last_action():
    board = _tsd_board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.T, rotation=2, position=(19, 3))
    assert controller.tspin() is TSpin.NONE


def test_single_front_corner_is_mini_tspin():
    board = Board()
    for col in range(WIDTH):
        if col != 4:
            board.set_cell(21, col, 1)
    board.set_cell(19, 3, 1)
    controller = PieceController(board)
    assert controller.spawn(TetrominoType.T, rotation=3, position=(19, 3))

    assert controller.rotate(True)

    assert controller.active.rotation == 0
    assert controller.tspin() is TSpin.MINI


def test_non_t_pieces_never_spin():
    board = _tsd_board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.J)
    controller.rotate(True)
    assert controller.tspin() is TSpin.NONE


def test_lock_keeps_cells_and_detaches_piece():
    board = Board()
    controller = PieceController(board)
    controller.spawn(TetrominoType.L)
    controller.hard_drop()
    cells = controller.footprint()

    piece = controller.lock()

    assert piece.shape is TetrominoType.L
    assert controller.active is None
    assert _occupied(board) == cells
    assert controller.move_left() is False
