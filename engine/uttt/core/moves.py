"""
Move representation and legal move generation.

A move is a (board, square) pair, both indices in 0..8.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterator, NamedTuple

from .bitboard import NUM_CELLS, iter_bits

if TYPE_CHECKING:
    from .game import Game


class Move(NamedTuple):
    """A move: mark `square` of sub-board `board`."""
    board: int
    square: int

    def __str__(self) -> str:
        return f"({self.board}, {self.square})"


class MoveGenerator:
    """Generates legal moves for a game."""

    @staticmethod
    def target_boards(game: Game) -> list[int]:
        """
        Boards the player to move may target.

        The active board if there is one and it is still playable, otherwise
        every playable board. Empty once the game is over.
        """
        if not game.playable():
            return []
        active = game.current_board()
        if active is not None and game.board(active).playable():
            return [active]
        return [b for b in range(NUM_CELLS) if game.board(b).playable()]

    @staticmethod
    def iter_moves(game: Game) -> Iterator[Move]:
        """Yield legal moves in ascending (board, square) order."""
        for b in MoveGenerator.target_boards(game):
            for s in iter_bits(game.board(b).empty):
                yield Move(b, s)

    @staticmethod
    def get_legal_moves(game: Game) -> list[Move]:
        return list(MoveGenerator.iter_moves(game))


# Convenience functions
def get_legal_moves(game: Game) -> list[Move]:
    """Get all legal moves for the current player."""
    return MoveGenerator.get_legal_moves(game)
