"""Falling-block puzzle engine: board, SRS pieces, 7-bag, lock delay, scoring."""

from .board import Board
from .tetromino import Tetromino, TetrominoType, shape_blocks
from .controller import LastAction, PieceController, TSpin
from .generator import PieceGenerator
from .scoring import ScoreState
from .config import EngineConfig
from .session import ActionResult, GameSession, LockEvent, SessionStatus, TurnState
from .utils import can_move, drop_distance, render_grid

__all__ = [
    "Board",
    "Tetromino",
    "TetrominoType",
    "PieceController",
    "LastAction",
    "TSpin",
    "PieceGenerator",
    "ScoreState",
    "EngineConfig",
    "GameSession",
    "ActionResult",
    "SessionStatus",
    "TurnState",
    "LockEvent",
    "can_move",
    "drop_distance",
    "render_grid",
    "shape_blocks",
]
