from __future__ import annotations

import logging

import pytest

from blockfall.config import EngineConfig


def test_defaults():
    config = EngineConfig()
    assert config.ghost_piece is True
    assert config.modern_piece_rng is True
    assert config.piece_bag_amount == 1
    assert config.lock_move_resets == 15
    assert not config.unlimited_resets
    assert config.line_clear_ticks == 18


def test_from_mapping_parses_stored_strings():
    config = EngineConfig.from_mapping(
        {
            "GHOST_PIECE": "false",
            "LINE_CLEAR_DELAY": "0",
            "LOCK_MOVE_RESETS": "-1",
            "PIECE_BAG_AMOUNT": 2,
            "SHOW_DEBUG_INFO": True,
        }
    )
    assert config.ghost_piece is False
    assert config.line_clear_delay == 0
    assert config.line_clear_ticks == 0
    assert config.unlimited_resets
    assert config.piece_bag_amount == 2
    assert config.show_debug_info is True


@pytest.mark.parametrize(
    "key, raw, attr, default",
    [
        ("PIECE_LOCK_TICKS", "-5", "piece_lock_ticks", 30),
        ("PIECE_BAG_AMOUNT", "zero", "piece_bag_amount", 1),
        ("PIECE_BAG_AMOUNT", "0", "piece_bag_amount", 1),
        ("GHOST_PIECE", "maybe", "ghost_piece", True),
        ("LOCK_MOVE_RESETS", "-2", "lock_move_resets", 15),
        ("NEXT_PREVIEW", "99", "next_preview", 5),
    ],
)
def test_invalid_stored_value_falls_back_with_warning(caplog, key, raw, attr, default):
    with caplog.at_level(logging.WARNING, logger="blockfall.config"):
        config = EngineConfig.from_mapping({key: raw})

    assert getattr(config, attr) == default
    assert any(key in record.getMessage() for record in caplog.records)


def test_unknown_keys_are_ignored():
    assert EngineConfig.from_mapping({"GAME_MODE": "sprint"}) == EngineConfig()
    assert EngineConfig.from_mapping(None) == EngineConfig()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"piece_lock_ticks": -1},
        {"lock_move_resets": -3},
        {"piece_bag_amount": 0},
        {"ghost_piece": 1},
        {"das_delay": "167"},
        {"next_preview": 15},
    ],
)
def test_constructor_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_line_clear_ticks_round_up():
    assert EngineConfig(line_clear_delay=10).line_clear_ticks == 1
    assert EngineConfig(line_clear_delay=250).line_clear_ticks == 15


def test_to_mapping_round_trip():
    config = EngineConfig(ghost_piece=False, lock_move_resets=-1, arr_speed=0)
    stored = config.to_mapping()
    assert stored["GHOST_PIECE"] == "false"
    assert stored["LOCK_MOVE_RESETS"] == "-1"
    assert stored["ARR_SPEED"] == "0"
    assert EngineConfig.from_mapping(stored) == config


def test_config_is_frozen():
    config = EngineConfig()
    with pytest.raises(AttributeError):
        config.ghost_piece = False  # type: ignore[misc]
