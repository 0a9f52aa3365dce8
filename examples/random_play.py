"""Drive :class:`blockfall.session.GameSession` with random inputs.

Run with::

    PYTHONPATH=src python examples/random_play.py

Pass ``--help`` to see options for running multiple games and for periodic
logging summaries.  Useful as a soak test: every game must end in a clean
game over without raising.
"""

from __future__ import annotations

import argparse
import logging
import random
from typing import Optional

from blockfall.config import EngineConfig
from blockfall.session import ActionResult, GameSession


LOGGER = logging.getLogger(__name__)

ACTIONS = (
    "move_left",
    "move_right",
    "rotate_cw",
    "rotate_ccw",
    "soft_drop_step",
    "hard_drop",
    "hold",
)
NUDGES = tuple(action for action in ACTIONS if action != "hard_drop")


def run_session(
    steps: int,
    *,
    seed: Optional[int] = None,
    config: Optional[EngineConfig] = None,
    hard_drop_weight: float = 0.05,
) -> GameSession:
    """Play up to ``steps`` ticks with random inputs and return the session."""

    rng = random.Random(seed)
    session = GameSession(config, seed=seed)
    for _ in range(steps):
        if rng.random() < 0.5:
            action = "hard_drop" if rng.random() < hard_drop_weight else rng.choice(NUDGES)
            getattr(session, action)()
        if session.tick() is ActionResult.GAME_OVER:
            break
    return session


def _format_summary(session: GameSession) -> str:
    stats = session.score
    return (
        f"score={stats.score}, lines={stats.lines}, level={stats.level}, "
        f"pieces={stats.pieces}, ticks={session.ticks}, status={session.status.value}"
    )


def log_summary(session: GameSession, *, index: int) -> dict[str, int | str]:
    stats = session.score
    LOGGER.info("Game %d: %s", index, _format_summary(session))
    return {
        "score": stats.score,
        "lines": stats.lines,
        "level": stats.level,
        "pieces": stats.pieces,
        "status": session.status.value,
    }


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--steps", type=int, default=20000, help="Maximum ticks per game.")
    parser.add_argument("--games", type=int, default=1, help="How many games to play.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the first game.")
    parser.add_argument(
        "--log-interval",
        type=int,
        default=10,
        help="Emit a summary every N games (0 logs only the last game).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    for game_idx in range(1, args.games + 1):
        seed = None if args.seed is None else args.seed + game_idx - 1
        session = run_session(args.steps, seed=seed)
        if (args.log_interval > 0 and game_idx % args.log_interval == 0) or game_idx == args.games:
            log_summary(session, index=game_idx)


if __name__ == "__main__":
    main()
