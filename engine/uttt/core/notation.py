"""
Move notation for Ultimate Tic-Tac-Toe.

The 81 cells form a 9x9 grid. Algebraic notation names a cell by column
letter (a-i, left to right) and row number (1-9, top to bottom):

    a b c   d e f   g h i
  1 . . . | . . . | . . .
  2 . . . | . . . | . . .     board 0 | board 1 | board 2
  3 . . . | . . . | . . .
    ------+-------+------
  4 . . . | . . . | . . .
  ...                          board 3 | board 4 | board 5

So "a1" is board 0 square 0, "e5" is board 4 square 4 and "i9" is
board 8 square 8.

A move list is written as whitespace separated tokens, optionally with
move numbers counting full rounds (like chess):

    1. e5 d4 2. b2 e4 ...
"""

from __future__ import annotations
import re

from .game import Game
from .moves import Move

FILES = "abcdefghi"

_ALGEBRAIC_RE = re.compile(r"^([a-i])([1-9])$")
_NUMERIC_RE = re.compile(r"^(\d)\s*[,/ ]\s*(\d)$")
_MOVE_NUMBER_RE = re.compile(r"^\d+\.$")


def move_to_rowcol(move: Move) -> tuple[int, int]:
    """Global (row, col) of a move on the 9x9 grid."""
    board, square = move
    row = (board // 3) * 3 + square // 3
    col = (board % 3) * 3 + square % 3
    return row, col


def rowcol_to_move(row: int, col: int) -> Move:
    """Move for a global (row, col) on the 9x9 grid."""
    if not (0 <= row < 9 and 0 <= col < 9):
        raise IndexError(f"Cell out of range: ({row}, {col})")
    board = (row // 3) * 3 + col // 3
    square = (row % 3) * 3 + col % 3
    return Move(board, square)


def move_to_algebraic(move: Move) -> str:
    """Convert move to algebraic notation (e.g. Move(4, 4) -> 'e5')."""
    row, col = move_to_rowcol(move)
    return f"{FILES[col]}{row + 1}"


def algebraic_to_move(s: str) -> Move:
    """Parse algebraic notation to a move."""
    m = _ALGEBRAIC_RE.match(s.strip().lower())
    if not m:
        raise ValueError(f"Invalid move format: {s!r}")
    col = FILES.index(m.group(1))
    row = int(m.group(2)) - 1
    return rowcol_to_move(row, col)


def parse_move(s: str) -> Move:
    """
    Parse user input into a move.

    Accepts algebraic notation ("e5") or a board and square index pair
    ("4 4", "4,4", "4/4").
    """
    text = s.strip().lower()
    if _ALGEBRAIC_RE.match(text):
        return algebraic_to_move(text)
    m = _NUMERIC_RE.match(text)
    if m:
        board, square = int(m.group(1)), int(m.group(2))
        if board > 8 or square > 8:
            raise IndexError(f"Board and square must be 0-8: {s!r}")
        return Move(board, square)
    raise ValueError(f"Invalid move format: {s!r}. Use 'e5' or 'board,square'")


def moves_to_text(moves: list[Move]) -> str:
    """Format a move list with round numbers."""
    tokens = []
    for i, move in enumerate(moves):
        if i % 2 == 0:
            tokens.append(f"{i // 2 + 1}.")
        tokens.append(move_to_algebraic(move))
    return " ".join(tokens)


def text_to_moves(text: str) -> list[Move]:
    """Parse a move list. Round numbers are optional and ignored."""
    moves = []
    for token in text.split():
        if _MOVE_NUMBER_RE.match(token):
            continue
        moves.append(algebraic_to_move(token))
    return moves


def replay(text: str) -> Game:
    """Build a game by playing every move of a move list."""
    return Game.from_moves(text_to_moves(text))
