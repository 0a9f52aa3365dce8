from __future__ import annotations

import pytest

from blockfall.tetromino import (
    I_KICKS,
    JLSTZ_KICKS,
    NO_KICKS,
    PIECE_COLORS,
    SPAWN_POSITION,
    TETROMINO_SHAPES,
    Tetromino,
    TetrominoType,
    kick_tests,
    shape_blocks,
)


@pytest.mark.parametrize("shape", list(TetrominoType))
def test_every_rotation_has_four_cells_inside_mask(shape):
    states = TETROMINO_SHAPES[shape]
    assert len(states) == 4
    for cells in states:
        assert len(cells) == 4
        assert len(set(cells)) == 4
        assert all(0 <= r < 4 and 0 <= c < 4 for r, c in cells)


def test_o_piece_is_rotation_invariant():
    states = {tuple(sorted(s)) for s in TETROMINO_SHAPES[TetrominoType.O]}
    assert len(states) == 1


def test_t_spawn_state_points_up():
    assert sorted(shape_blocks(TetrominoType.T, 0)) == [(0, 1), (1, 0), (1, 1), (1, 2)]
    # Rotation indices wrap.
    assert shape_blocks(TetrominoType.T, 4) == shape_blocks(TetrominoType.T, 0)
    assert shape_blocks(TetrominoType.T, -1) == shape_blocks(TetrominoType.T, 3)


def test_colors_are_distinct_and_non_zero():
    values = list(PIECE_COLORS.values())
    assert sorted(values) == list(range(1, 8))


def test_blocks_follow_position_and_rotation():
    piece = Tetromino(TetrominoType.I)
    assert piece.position == SPAWN_POSITION
    assert piece.blocks() == [(1, 3), (1, 4), (1, 5), (1, 6)]

    piece.rotate(1)
    piece.move(1, 2)
    assert piece.rotation == 1
    assert sorted(piece.blocks()) == [(2, 6), (3, 6), (4, 6), (5, 6)]

    piece.rotate(-1)
    piece.rotate(-1)
    assert piece.rotation == 3


def test_kick_tables_cover_all_transitions():
    transitions = {(a, (a + 1) % 4) for a in range(4)} | {(a, (a - 1) % 4) for a in range(4)}
    for table in (JLSTZ_KICKS, I_KICKS):
        assert set(table) == transitions
        for tests in table.values():
            assert len(tests) == 5
            assert tests[0] == (0, 0)


def test_kick_lookup_per_shape():
    assert kick_tests(TetrominoType.O, 0, 1) == NO_KICKS
    assert kick_tests(TetrominoType.I, 0, 1) == I_KICKS[(0, 1)]
    assert kick_tests(TetrominoType.T, 3, 0) == JLSTZ_KICKS[(3, 0)]
    assert kick_tests(TetrominoType.J, 0, 2) == NO_KICKS
