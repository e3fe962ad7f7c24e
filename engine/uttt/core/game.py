"""
Game state for Ultimate Tic-Tac-Toe.

Nine sub-boards arranged on a 3x3 meta-board. The square played in one
sub-board picks the sub-board the opponent must play in next, unless that
sub-board is no longer playable, in which case the opponent may play in any
playable sub-board. A sub-board won by a player counts as that player's mark
on the meta-board.
"""

from __future__ import annotations
from typing import Iterable, Optional, Sequence

from .bitboard import NUM_CELLS, bit, has_line, is_valid_cell
from .board import Board
from .errors import BoardNotPlayable, GameOver, InvalidMove, SquareOccupied
from .moves import Move, get_legal_moves
from .square import Outcome, Square


def _check_board_index(board_index: int) -> None:
    if not is_valid_cell(board_index):
        raise IndexError(f"Board index out of range: {board_index!r}")


def _check_square_index(square_index: int) -> None:
    if not is_valid_cell(square_index):
        raise IndexError(f"Square index out of range: {square_index!r}")


class Game:
    """
    The complete state of one game.

    Mutated only through play(). Every failed play() leaves the state
    untouched. Use copy() to get an independent game for simulation.
    """

    __slots__ = ('_boards', '_current_player', '_active_board', '_turns',
                 '_outcome', '_history')

    def __init__(self):
        self._boards: list[Board] = [Board() for _ in range(NUM_CELLS)]
        self._current_player = Square.X
        self._active_board: Optional[int] = None
        self._turns = 0
        self._outcome = Outcome.ONGOING
        self._history: list[Move] = []

    @classmethod
    def new_game(cls) -> Game:
        """Create a new game: empty boards, X to move, free choice."""
        return cls()

    @classmethod
    def from_moves(cls, moves: Iterable[tuple[int, int]]) -> Game:
        """Create a game by playing a sequence of (board, square) moves."""
        game = cls()
        for board_index, square_index in moves:
            game.play(board_index, square_index)
        return game

    @classmethod
    def from_position(
        cls,
        boards: Sequence[Board],
        current_player: Square = Square.X,
        active_board: Optional[int] = None,
        turns: int = 0,
    ) -> Game:
        """
        Set up an arbitrary position, e.g. for analysis or tests.

        The boards are rebuilt from their masks, so a board that no longer
        holds a reachable position raises ValueError. The game outcome is
        computed from them.
        """
        if len(boards) != NUM_CELLS:
            raise ValueError(f"Expected {NUM_CELLS} boards, got {len(boards)}")
        if not current_player.is_player:
            raise ValueError("current_player must be X or O")
        if turns < 0:
            raise ValueError(f"turns must be >= 0, got {turns}")
        rebuilt = [Board(b.x_mask, b.o_mask) for b in boards]
        if active_board is not None:
            _check_board_index(active_board)
            if not rebuilt[active_board].playable():
                raise ValueError(f"Active board {active_board} is not playable")

        game = cls()
        game._boards = rebuilt
        game._current_player = current_player
        game._active_board = active_board
        game._turns = turns
        game._outcome = game._compute_outcome()
        return game

    def play(self, board_index: int, square_index: int) -> None:
        """
        Play the current player's mark at (board_index, square_index).

        Raises:
            GameOver: the game already has a result
            IndexError: either index outside 0..8
            InvalidMove: board_index is not the active board
            BoardNotPlayable: the target board is decided or full
            SquareOccupied: the target cell already holds a mark
        """
        if not self._outcome.is_ongoing:
            raise GameOver(board_index, square_index)
        _check_board_index(board_index)
        _check_square_index(square_index)
        if self._active_board is not None and board_index != self._active_board:
            raise InvalidMove(board_index, square_index,
                              message=f"Must play on board {self._active_board}")

        board = self._boards[board_index]
        if not board.playable():
            raise BoardNotPlayable(board_index, square_index)
        if board.occupied & bit(square_index):
            raise SquareOccupied(board_index, square_index)

        # All checks passed; from here on nothing can fail
        board.set(square_index, self._current_player)
        if not board.winner().is_ongoing:
            self._outcome = self._compute_outcome()

        self._active_board = square_index if self._boards[square_index].playable() else None
        self._current_player = self._current_player.opponent
        self._turns += 1
        self._history.append(Move(board_index, square_index))

    def _compute_outcome(self) -> Outcome:
        """Apply the line + fill rule to the meta-board of sub-board outcomes."""
        x_mask = o_mask = 0
        ongoing = False
        for i, board in enumerate(self._boards):
            outcome = board.winner()
            if outcome.is_decided:
                if outcome.winner is Square.X:
                    x_mask |= bit(i)
                else:
                    o_mask |= bit(i)
            elif outcome.is_ongoing:
                ongoing = True

        if has_line(x_mask):
            return Outcome.decided(Square.X)
        if has_line(o_mask):
            return Outcome.decided(Square.O)
        if not ongoing:
            return Outcome.DRAW
        return Outcome.ONGOING

    def board(self, i: int) -> Board:
        """Sub-board i. Treat it as read-only."""
        _check_board_index(i)
        return self._boards[i]

    def square(self, board_index: int, square_index: int) -> Square:
        return self.board(board_index).square(square_index)

    def current_player(self) -> Square:
        """The player to move (X or O)."""
        return self._current_player

    def current_board(self) -> Optional[int]:
        """The board the next move must target, or None for free choice."""
        return self._active_board

    def playable(self) -> bool:
        """True while the game has no result."""
        return self._outcome.is_ongoing

    def winner(self) -> Outcome:
        return self._outcome

    def turns(self) -> int:
        """Number of successful moves so far."""
        return self._turns

    def history(self) -> tuple[Move, ...]:
        """Moves played so far, oldest first."""
        return tuple(self._history)

    def last_move(self) -> Optional[Move]:
        return self._history[-1] if self._history else None

    def legal_moves(self) -> list[Move]:
        return get_legal_moves(self)

    def copy(self) -> Game:
        """Independent copy. Mutating the copy never affects this game."""
        g = Game.__new__(Game)
        g._boards = [b.copy() for b in self._boards]
        g._current_player = self._current_player
        g._active_board = self._active_board
        g._turns = self._turns
        g._outcome = self._outcome
        g._history = list(self._history)
        return g

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Game):
            return NotImplemented
        return (
            self._boards == other._boards and
            self._current_player is other._current_player and
            self._active_board == other._active_board and
            self._turns == other._turns and
            self._outcome == other._outcome
        )

    def __hash__(self) -> int:
        return hash((tuple(self._boards), self._current_player,
                     self._active_board, self._turns))

    def __str__(self) -> str:
        """Pretty print the nine boards laid out 3x3."""
        rendered = [b.render_lines() for b in self._boards]
        lines = []
        for meta_row in range(3):
            row_boards = rendered[3 * meta_row:3 * meta_row + 3]
            for line in zip(*row_boards):
                lines.append(" ".join(line))

        if self._outcome.is_ongoing:
            target = "any board" if self._active_board is None else f"board {self._active_board}"
            lines.append(f"{self._current_player}'s turn ({target}, turn {self._turns})")
        elif self._outcome.is_draw:
            lines.append(f"Game drawn after {self._turns} turns")
        else:
            lines.append(f"{self._outcome.winner} wins after {self._turns} turns")
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (f"Game(turns={self._turns}, current_player={self._current_player.name}, "
                f"current_board={self._active_board}, outcome={self._outcome!r})")
