"""
Uniform random move selection.

RandomAI is a baseline opponent, and random_move / playout are the rollout
policy used by the Monte Carlo evaluator. All randomness comes from an
injected random source so games can be reproduced with a fixed seed.
"""

from __future__ import annotations
from typing import Optional, Protocol, Sequence

import numpy as np

from ..core.errors import NoLegalMoves
from ..core.game import Game
from ..core.moves import Move, get_legal_moves
from ..core.square import Outcome


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in [0, high).

    numpy.random.Generator satisfies this protocol.
    """
    def integers(self, low: int, high: Optional[int] = None) -> int:
        ...


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random source. None seeds from OS entropy."""
    return np.random.default_rng(seed)


def spawn_rngs(seed: Optional[int], n: int) -> list[np.random.Generator]:
    """Create n independent random sources derived from one seed."""
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]


def pick(rng: RandomSource, items: Sequence):
    """Pick one element uniformly."""
    return items[int(rng.integers(len(items)))]


def random_move(game: Game, rng: RandomSource) -> Move:
    """
    Pick a legal move uniformly at random.

    Every legal (board, square) pair is equally likely, regardless of how
    many empty cells each board has.

    Raises:
        NoLegalMoves: the game is already over
    """
    moves = get_legal_moves(game)
    if not moves:
        raise NoLegalMoves(f"No legal moves: game is {game.winner()}")
    return pick(rng, moves)


def playout(game: Game, rng: RandomSource) -> Outcome:
    """
    Play random moves until the game ends. Mutates `game` in place.

    Returns the final outcome.
    """
    while game.playable():
        board_index, square_index = random_move(game, rng)
        game.play(board_index, square_index)
    return game.winner()


class RandomAI:
    """Picks the next move completely at random."""

    def __init__(self, rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else make_rng(seed)

    def choose(self, game: Game) -> Move:
        return random_move(game, self.rng)

    def __repr__(self) -> str:
        return "RandomAI()"
