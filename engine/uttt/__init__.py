"""
Ultimate Tic-Tac-Toe rules engine with a Monte Carlo move assistant.

Nine tic-tac-toe boards on a 3x3 meta-board; the square played decides
which board the opponent plays next. The Monte Carlo AI estimates, for every
legal move, how often random playouts starting with that move end in a win.
"""

from .core import (
    Square, Outcome, OutcomeKind, Board, Game, Move, get_legal_moves,
    UTTTError, MoveError, InvalidMove, SquareOccupied, BoardNotPlayable,
    GameOver, AIError, NoLegalMoves,
)
from .ai import RandomAI, MonteCarloAI, MonteCarloConfig, Estimate, Stats

__version__ = "0.1.0"
__all__ = [
    "Square",
    "Outcome",
    "OutcomeKind",
    "Board",
    "Game",
    "Move",
    "get_legal_moves",
    "UTTTError",
    "MoveError",
    "InvalidMove",
    "SquareOccupied",
    "BoardNotPlayable",
    "GameOver",
    "AIError",
    "NoLegalMoves",
    "RandomAI",
    "MonteCarloAI",
    "MonteCarloConfig",
    "Estimate",
    "Stats",
]
