"""Game strategies for Crazy Eights."""

from strategies.base import Strategy
from strategies.first_playable import FirstPlayableStrategy
from strategies.random_strategy import RandomStrategy

__all__ = [
    "Strategy",
    "FirstPlayableStrategy",
    "RandomStrategy",
]
