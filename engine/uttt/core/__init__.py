"""Core game logic: marks, boards, game state and move generation."""

from .bitboard import *
from .square import Square, Outcome, OutcomeKind
from .errors import (
    UTTTError, MoveError, InvalidMove, SquareOccupied, BoardNotPlayable,
    GameOver, AIError, NoLegalMoves,
)
from .board import Board
from .game import Game
from .moves import Move, MoveGenerator, get_legal_moves
