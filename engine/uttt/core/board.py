"""
A single 3x3 sub-board.

Marks are stored as one bitboard per player. The outcome is cached and
recomputed after every mutation; once decided or drawn it never changes.
"""

from __future__ import annotations
from typing import Iterator

from .bitboard import NUM_CELLS, FULL_MASK, bit, has_line, iter_bits, is_valid_cell
from .errors import BoardNotPlayable, SquareOccupied
from .square import Outcome, Square

# Rendering is 13 columns x 7 lines for every board, decided or not.
_BIG_MARKS = {
    Square.X: (
        "   \\   /   ",
        "    \\ /    ",
        "     X     ",
        "    / \\    ",
        "   /   \\   ",
    ),
    Square.O: (
        "   .---.   ",
        "  /     \\  ",
        " |       | ",
        "  \\     /  ",
        "   '---'   ",
    ),
}


def _check_index(cell: int) -> None:
    if not is_valid_cell(cell):
        raise IndexError(f"Square index out of range: {cell!r}")


class Board:
    """
    One tic-tac-toe grid of 9 cells (row-major, 0-8).

    Attributes:
        x_mask: Bitboard of cells holding X
        o_mask: Bitboard of cells holding O
    """

    __slots__ = ('x_mask', 'o_mask', '_outcome')

    def __init__(self, x_mask: int = 0, o_mask: int = 0):
        if x_mask & o_mask:
            raise ValueError("A cell cannot hold both X and O")
        if (x_mask | o_mask) & ~FULL_MASK:
            raise ValueError("Bitboard has bits outside the 3x3 grid")
        if has_line(x_mask) and has_line(o_mask):
            raise ValueError("X and O cannot both have a line")
        self.x_mask = x_mask
        self.o_mask = o_mask
        self._outcome = self._compute_outcome()

    @classmethod
    def from_squares(cls, squares) -> Board:
        """Build a board from 9 Squares in row-major order."""
        squares = list(squares)
        if len(squares) != NUM_CELLS:
            raise ValueError(f"Expected {NUM_CELLS} squares, got {len(squares)}")
        x_mask = o_mask = 0
        for cell, mark in enumerate(squares):
            if mark is Square.X:
                x_mask |= bit(cell)
            elif mark is Square.O:
                o_mask |= bit(cell)
        return cls(x_mask, o_mask)

    @property
    def occupied(self) -> int:
        """Bitboard of all marked cells."""
        return self.x_mask | self.o_mask

    @property
    def empty(self) -> int:
        """Bitboard of all empty cells."""
        return ~self.occupied & FULL_MASK

    def square(self, i: int) -> Square:
        """Mark at cell i."""
        _check_index(i)
        b = bit(i)
        if self.x_mask & b:
            return Square.X
        if self.o_mask & b:
            return Square.O
        return Square.NONE

    def set(self, i: int, mark: Square) -> None:
        """
        Place a mark. Used by Game; callers outside the engine should go
        through Game.play so the turn rules are enforced.
        """
        _check_index(i)
        if not mark.is_player:
            raise ValueError("Cannot place Square.NONE")
        if not self._outcome.is_ongoing:
            raise BoardNotPlayable(square=i)
        if self.occupied & bit(i):
            raise SquareOccupied(square=i)

        if mark is Square.X:
            self.x_mask |= bit(i)
        else:
            self.o_mask |= bit(i)
        self._outcome = self._compute_outcome()

    def playable(self) -> bool:
        """True while the board is undecided and has an empty cell."""
        return self._outcome.is_ongoing and self.empty != 0

    def winner(self) -> Outcome:
        return self._outcome

    def empty_squares(self) -> list[int]:
        """Empty cell indices, ascending."""
        return list(iter_bits(self.empty))

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b.x_mask = self.x_mask
        b.o_mask = self.o_mask
        b._outcome = self._outcome
        return b

    def _compute_outcome(self) -> Outcome:
        if has_line(self.x_mask):
            return Outcome.decided(Square.X)
        if has_line(self.o_mask):
            return Outcome.decided(Square.O)
        if self.occupied == FULL_MASK:
            return Outcome.DRAW
        return Outcome.ONGOING

    def __len__(self) -> int:
        return NUM_CELLS

    def __iter__(self) -> Iterator[Square]:
        for i in range(NUM_CELLS):
            yield self.square(i)

    def __getitem__(self, i: int) -> Square:
        return self.square(i)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.x_mask == other.x_mask and self.o_mask == other.o_mask

    def __hash__(self) -> int:
        return hash((self.x_mask, self.o_mask))

    def render_lines(self) -> list[str]:
        """Board as 7 lines of 13 characters."""
        lines = ["┌───────────┐"]
        outcome = self._outcome
        if outcome.is_decided:
            lines.extend(f"│{row}│" for row in _BIG_MARKS[outcome.winner])
        else:
            for row in range(3):
                cells = [self.square(3 * row + col) for col in range(3)]
                lines.append("│ {} │ {} │ {} │".format(*cells))
                if row < 2:
                    lines.append("│───┼───┼───│")
        lines.append("└───────────┘")
        return lines

    def __str__(self) -> str:
        return "\n".join(self.render_lines()) + "\n"

    def __repr__(self) -> str:
        cells = "".join(str(s) if s.is_player else "." for s in self)
        return f"Board({cells!r}, {self._outcome!r})"
