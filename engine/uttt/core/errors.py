"""
Exceptions raised by the rules engine and the AIs.

Out-of-range board or cell indices raise the built-in IndexError.
"""

from __future__ import annotations
from typing import Optional


class UTTTError(Exception):
    """Base class for all engine errors."""


class MoveError(UTTTError):
    """A move was rejected. The game state is left unchanged."""

    message = "Illegal move"

    def __init__(self, board: Optional[int] = None, square: Optional[int] = None,
                 message: Optional[str] = None):
        self.board = board
        self.square = square
        text = message or self.message
        if board is not None:
            text = f"{text} (board {board}" + (f", square {square})" if square is not None else ")")
        super().__init__(text)


class InvalidMove(MoveError):
    """Move targets a board other than the active one."""
    message = "Wrong board"


class SquareOccupied(MoveError):
    message = "Square has already been played"


class BoardNotPlayable(MoveError):
    """Board is already decided or full."""
    message = "Board is not playable"


class GameOver(MoveError):
    message = "Game is already over"


class AIError(UTTTError):
    """An AI could not produce a move."""


class NoLegalMoves(AIError):
    def __init__(self, message: str = "No legal moves"):
        super().__init__(message)
