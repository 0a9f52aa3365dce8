"""Immutable engine configuration.

:class:`EngineConfig` is handed to :class:`~blockfall.session.GameSession` at
construction time and never changes afterwards, so several sessions can run
side by side with different settings.  Stored settings arrive as a mapping of
upper-case keys to raw values (usually strings such as ``"true"`` or
``"300"``); :meth:`EngineConfig.from_mapping` parses them and falls back to the
default for anything malformed instead of raising.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional
import logging

from .generator import LOOKAHEAD
from .utils import TICKS_PER_SECOND


LOGGER = logging.getLogger(__name__)

UNLIMITED_RESETS = -1

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """Settings snapshot consumed by the engine and its front-ends."""

    show_debug_info: bool = False
    colored_board: bool = True
    ghost_piece: bool = True
    line_clear_delay: int = 300
    modern_piece_rng: bool = True
    piece_bag_amount: int = 1
    first_piece_no_overhang: bool = True
    piece_lock_ticks: int = 30
    lock_move_resets: int = 15
    das_delay: int = 167
    arr_speed: int = 33
    wall_kicks: bool = True
    next_preview: int = 5
    start_level: int = 1

    def __post_init__(self) -> None:
        for f in fields(self):
            problem = _validate(f.name, getattr(self, f.name))
            if problem:
                raise ValueError(f"{f.name.upper()}: {problem}")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def unlimited_resets(self) -> bool:
        return self.lock_move_resets == UNLIMITED_RESETS

    @property
    def line_clear_ticks(self) -> int:
        """``LINE_CLEAR_DELAY`` converted to whole engine ticks."""

        return -(-self.line_clear_delay * TICKS_PER_SECOND // 1000)

    # ------------------------------------------------------------------
    # Stored representation
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]] = None) -> "EngineConfig":
        """Build a config from stored ``KEY -> value`` pairs.

        Missing keys use defaults.  Values that cannot be parsed or fail
        validation are replaced by the default and reported with a warning.
        """

        values = dict(values or {})
        known = {f.name: f for f in fields(cls)}
        parsed: Dict[str, Any] = {}
        for key, raw in values.items():
            name = str(key).lower()
            if name not in known:
                LOGGER.debug("Ignoring unknown config key %s", key)
                continue
            default = known[name].default
            value = _parse(raw, type(default))
            problem = "unparseable value" if value is None else _validate(name, value)
            if problem:
                LOGGER.warning(
                    "Invalid value %r for %s (%s); using default %r",
                    raw, name.upper(), problem, default,
                )
                continue
            parsed[name] = value
        return cls(**parsed)

    def to_mapping(self) -> Dict[str, str]:
        """Return the settings in their stored string form."""

        out: Dict[str, str] = {}
        for name, value in asdict(self).items():
            out[name.upper()] = str(value).lower() if isinstance(value, bool) else str(value)
        return out


def _parse(raw: Any, kind: type) -> Any:
    if kind is bool:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def _validate(name: str, value: Any) -> Optional[str]:
    """Return a description of what is wrong with ``value`` or ``None``."""

    if isinstance(value, bool) or not isinstance(value, int):
        if name in _BOOL_FIELDS:
            return None if isinstance(value, bool) else "expected a boolean"
        return "expected an integer"
    if name in _BOOL_FIELDS:
        return "expected a boolean"
    if name == "lock_move_resets":
        return None if value >= UNLIMITED_RESETS else "must be -1 or non-negative"
    if name in ("piece_bag_amount", "start_level"):
        return None if value >= 1 else "must be at least 1"
    if name == "next_preview" and value > LOOKAHEAD:
        return f"must not exceed {LOOKAHEAD}"
    return None if value >= 0 else "must be non-negative"


_BOOL_FIELDS = frozenset(
    {
        "show_debug_info",
        "colored_board",
        "ghost_piece",
        "modern_piece_rng",
        "first_piece_no_overhang",
        "wall_kicks",
    }
)
