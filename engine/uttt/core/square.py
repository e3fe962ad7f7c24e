"""
Cell marks and game outcomes.

Square is the closed set of marks a cell can hold. Outcome is the tagged
result of a board (or of the whole game): ongoing, drawn, or decided in
favour of one player.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Square(Enum):
    """Mark held by a single cell."""
    NONE = 0
    X = 1
    O = 2

    @property
    def opponent(self) -> Square:
        """The other player. Only defined for X and O."""
        if self is Square.X:
            return Square.O
        if self is Square.O:
            return Square.X
        raise ValueError("Square.NONE has no opponent")

    @property
    def is_player(self) -> bool:
        return self is not Square.NONE

    def __str__(self) -> str:
        return " " if self is Square.NONE else self.name


class OutcomeKind(Enum):
    ONGOING = "ongoing"
    DRAW = "draw"
    DECIDED = "decided"


@dataclass(frozen=True)
class Outcome:
    """
    Result of a board or game.

    Exactly one of ongoing / draw / decided holds. A decided outcome always
    names the winning player (X or O).
    """
    kind: OutcomeKind
    winner: Optional[Square] = None

    def __post_init__(self):
        if self.kind is OutcomeKind.DECIDED:
            if self.winner is None or not self.winner.is_player:
                raise ValueError(f"Decided outcome needs X or O, got {self.winner!r}")
        elif self.winner is not None:
            raise ValueError(f"{self.kind.value} outcome cannot carry a winner")

    @classmethod
    def decided(cls, winner: Square) -> Outcome:
        if winner not in _DECIDED:
            raise ValueError(f"Decided outcome needs X or O, got {winner!r}")
        return _DECIDED[winner]

    @property
    def is_ongoing(self) -> bool:
        return self.kind is OutcomeKind.ONGOING

    @property
    def is_draw(self) -> bool:
        return self.kind is OutcomeKind.DRAW

    @property
    def is_decided(self) -> bool:
        return self.kind is OutcomeKind.DECIDED

    @property
    def is_terminal(self) -> bool:
        return self.kind is not OutcomeKind.ONGOING

    def __str__(self) -> str:
        if self.kind is OutcomeKind.DECIDED:
            return f"{self.winner} wins"
        return self.kind.value

    def __repr__(self) -> str:
        if self.kind is OutcomeKind.DECIDED:
            return f"Outcome.decided({self.winner.name})"
        return f"Outcome.{self.kind.name}"


Outcome.ONGOING = Outcome(OutcomeKind.ONGOING)
Outcome.DRAW = Outcome(OutcomeKind.DRAW)

_DECIDED = {
    Square.X: Outcome(OutcomeKind.DECIDED, Square.X),
    Square.O: Outcome(OutcomeKind.DECIDED, Square.O),
}
