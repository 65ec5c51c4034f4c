"""Headless game simulation."""

from simulation.runner import (
    GameLog,
    GameResult,
    GameRunner,
    MoveRecord,
    run_batch,
)

__all__ = [
    "GameLog",
    "GameResult",
    "GameRunner",
    "MoveRecord",
    "run_batch",
]
