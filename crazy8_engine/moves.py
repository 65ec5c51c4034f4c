"""Move types for Crazy Eights."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crazy8_engine.cards import Card, Suit


class MoveType(IntEnum):
    """Type of move."""

    PLAY_CARDS = auto()
    DRAW = auto()
    CHOOSE_SUIT = auto()  # Name the suit after playing an eight
    RESOLVE_SKIP = auto()  # Deferred toggle after a four or ace


@dataclass(frozen=True, slots=True)
class Move(ABC):
    """Base class for all moves."""

    @property
    @abstractmethod
    def move_type(self) -> MoveType:
        """The type of this move."""
        ...

    @abstractmethod
    def __str__(self) -> str:
        """Human-readable move description."""
        ...


@dataclass(frozen=True, slots=True)
class PlayCards(Move):
    """Play one or more cards from hand; the last one becomes active.

    ``suit`` names the wild suit up front when the last card is an eight.
    Without it the engine waits for a ChooseSuit.
    """

    cards: tuple[Card, ...]
    suit: Suit | None = None

    @property
    def move_type(self) -> MoveType:
        return MoveType.PLAY_CARDS

    def __str__(self) -> str:
        played = ", ".join(str(c) for c in self.cards)
        if self.suit is not None:
            return f"Play {played} (suit {self.suit.label})"
        return f"Play {played}"


@dataclass(frozen=True, slots=True)
class Draw(Move):
    """Draw the pending penalty, or one card if none is pending."""

    @property
    def move_type(self) -> MoveType:
        return MoveType.DRAW

    def __str__(self) -> str:
        return "Draw"


@dataclass(frozen=True, slots=True)
class ChooseSuit(Move):
    """Name the wild suit for an eight that was just played."""

    suit: Suit

    @property
    def move_type(self) -> MoveType:
        return MoveType.CHOOSE_SUIT

    def __str__(self) -> str:
        return f"Choose {self.suit.label}"


@dataclass(frozen=True, slots=True)
class ResolveSkip(Move):
    """Apply the skipped turn after a four or ace."""

    @property
    def move_type(self) -> MoveType:
        return MoveType.RESOLVE_SKIP

    def __str__(self) -> str:
        return "Skip turn"
