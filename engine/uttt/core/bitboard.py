"""
Bitboard utilities for a 3x3 tic-tac-toe grid.

Grid layout (9 cells, fits in 9 bits):

  0 | 1 | 2
  ---------
  3 | 4 | 5
  ---------
  6 | 7 | 8

Cell index = row * 3 + col (row 0 at the top). The same layout is used for
the meta-board, where each cell is one sub-board.
"""

from typing import Iterator

# Grid dimensions
ROWS = 3
COLS = 3
NUM_CELLS = ROWS * COLS  # 9

# All 9 cells set
FULL_MASK = (1 << NUM_CELLS) - 1

# Winning lines as cell triples
WIN_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

# Precomputed line masks (initialized at module load)
WIN_MASKS: list[int] = []


def is_valid_cell(cell: int) -> bool:
    """Check if cell index is on the grid."""
    return 0 <= cell < NUM_CELLS


def bit(cell: int) -> int:
    """Return bitboard with single bit set at cell."""
    return 1 << cell


def lsb(bb: int) -> int:
    """Return index of least significant bit (or -1 if empty)."""
    bb = int(bb)  # Handle numpy int64
    if bb == 0:
        return -1
    return (bb & -bb).bit_length() - 1


def iter_bits(bb: int) -> Iterator[int]:
    """Iterate over indices of set bits, lowest first."""
    bb = int(bb)  # Handle numpy int64
    while bb:
        cell = lsb(bb)
        yield cell
        bb &= bb - 1  # Clear LSB


def has_line(bb: int) -> bool:
    """True if the bitboard covers any complete winning line."""
    for mask in WIN_MASKS:
        if bb & mask == mask:
            return True
    return False


def _init_win_masks() -> None:
    """Precompute a bitboard for each winning line."""
    for a, b, c in WIN_LINES:
        WIN_MASKS.append(bit(a) | bit(b) | bit(c))


# Initialize lookup tables at module load
_init_win_masks()
