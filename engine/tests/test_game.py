"""Tests for game state and the move rules."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.board import Board
from uttt.core.errors import (
    BoardNotPlayable, GameOver, InvalidMove, MoveError, SquareOccupied,
)
from uttt.core.game import Game
from uttt.core.moves import Move
from uttt.core.square import Outcome, Square

X_WON = Board(x_mask=0b000000111, o_mask=0b000011000)
O_WON = Board(x_mask=0b000011000, o_mask=0b000000111)


def x_takes_top_row_of_board_0() -> Game:
    """X plays cells 0, 1, 2 of board 0; O is sent back to board 0 each time."""
    return Game.from_moves([(0, 1), (1, 0), (0, 2), (2, 0), (0, 0)])


class TestNewGame:
    def test_initial_state(self):
        game = Game.new_game()
        assert game.current_player() is Square.X
        assert game.current_board() is None
        assert game.turns() == 0
        assert game.playable()
        assert game.winner() == Outcome.ONGOING
        assert game.history() == ()
        assert game.last_move() is None

    def test_all_squares_empty(self):
        game = Game.new_game()
        for b in range(9):
            for s in range(9):
                assert game.square(b, s) is Square.NONE

    def test_repr(self):
        assert "turns=0" in repr(Game.new_game())


class TestPlay:
    def test_first_move(self):
        game = Game.new_game()
        game.play(0, 0)
        assert game.square(0, 0) is Square.X
        assert game.current_player() is Square.O
        assert game.current_board() == 0
        assert game.turns() == 1
        assert game.last_move() == Move(0, 0)

    def test_square_picks_next_board(self):
        game = Game.new_game()
        game.play(4, 7)
        assert game.current_board() == 7
        game.play(7, 2)
        assert game.current_board() == 2
        assert game.square(7, 2) is Square.O

    def test_players_alternate(self):
        game = Game.from_moves([(4, 4), (4, 0), (0, 4)])
        assert game.square(4, 4) is Square.X
        assert game.square(4, 0) is Square.O
        assert game.square(0, 4) is Square.X
        assert game.current_player() is Square.O

    def test_history(self):
        moves = [(4, 4), (4, 0), (0, 4)]
        game = Game.from_moves(moves)
        assert game.history() == tuple(Move(*m) for m in moves)

    def test_sub_board_win(self):
        game = x_takes_top_row_of_board_0()
        assert game.board(0).winner() == Outcome.decided(Square.X)
        assert not game.board(0).playable()
        assert game.playable()

    def test_sent_to_decided_board_gives_free_choice(self):
        game = x_takes_top_row_of_board_0()
        # Square 0 points at board 0, which X just won
        assert game.current_board() is None

        game.play(4, 0)
        assert game.current_board() is None
        game.play(8, 8)
        assert game.current_board() == 8

    def test_decided_board_rejects_moves_with_free_choice(self):
        game = x_takes_top_row_of_board_0()
        with pytest.raises(BoardNotPlayable):
            game.play(0, 5)

    def test_sent_to_drawn_board_gives_free_choice(self):
        # X O X / X O O / O X X
        drawn = Board(x_mask=0b110001101, o_mask=0b001110010)
        assert drawn.winner() == Outcome.DRAW
        boards = [Board() for _ in range(9)]
        boards[5] = drawn
        game = Game.from_position(boards)
        game.play(4, 5)
        assert game.current_board() is None

    def test_opponent_jumps_after_board_won(self):
        # O takes board 0 (cells 3, 4, 5); X is later sent to board 0
        moves = [
            (0, 0), (0, 5), (5, 0), (0, 2), (2, 0), (0, 3), (3, 0), (0, 4),
            (4, 8), (8, 7), (7, 8), (8, 2), (2, 8), (8, 4), (4, 4), (4, 0),
        ]
        game = Game.from_moves(moves)
        assert game.board(0).winner() == Outcome.decided(Square.O)
        assert game.current_board() is None
        assert game.current_player() is Square.X
        assert game.turns() == 16

    def test_win_and_send_to_self(self):
        # Winning move on board 4 at square 4 sends the opponent to board 4
        boards = [Board() for _ in range(9)]
        boards[4] = Board(x_mask=0b000101000, o_mask=0b000000011)
        game = Game.from_position(boards, Square.X, active_board=4)
        game.play(4, 4)
        assert game.board(4).winner() == Outcome.decided(Square.X)
        assert game.current_board() is None


class TestIllegalMoves:
    def _assert_rejected(self, game, board, square, error):
        before = game.copy()
        with pytest.raises(error):
            game.play(board, square)
        assert game == before
        assert game.history() == before.history()

    def test_wrong_board(self):
        game = Game.from_moves([(0, 0)])
        self._assert_rejected(game, 1, 0, InvalidMove)

    def test_occupied_square(self):
        game = Game.from_moves([(0, 0)])
        self._assert_rejected(game, 0, 0, SquareOccupied)

    @pytest.mark.parametrize("board,square", [(-1, 0), (9, 0), (0, -1), (0, 9)])
    def test_out_of_range(self, board, square):
        self._assert_rejected(Game.new_game(), board, square, IndexError)

    def test_decided_board(self):
        game = x_takes_top_row_of_board_0()
        self._assert_rejected(game, 0, 8, BoardNotPlayable)

    def test_errors_are_move_errors(self):
        for error in (InvalidMove, SquareOccupied, BoardNotPlayable, GameOver):
            assert issubclass(error, MoveError)

    def test_error_message_names_cell(self):
        game = Game.from_moves([(0, 0)])
        with pytest.raises(InvalidMove) as excinfo:
            game.play(1, 0)
        assert excinfo.value.board == 1
        assert excinfo.value.square == 0
        assert "board 0" in str(excinfo.value)

    def test_game_over_checked_first(self):
        boards = [X_WON, X_WON, X_WON] + [Board() for _ in range(6)]
        game = Game.from_position(boards, Square.O)
        assert not game.playable()
        # Even an out-of-range index reports the finished game
        self._assert_rejected(game, 9, 9, GameOver)
        self._assert_rejected(game, 4, 4, GameOver)

    def test_wrong_board_before_occupied(self):
        game = Game.from_moves([(0, 0), (0, 4)])
        # Active board is 4; (0, 0) is both wrong board and occupied
        self._assert_rejected(game, 0, 0, InvalidMove)


class TestCopy:
    def test_copy_equal(self):
        game = Game.from_moves([(4, 4), (4, 0)])
        copy = game.copy()
        assert copy == game
        assert hash(copy) == hash(game)

    def test_copy_is_independent(self):
        game = Game.from_moves([(4, 4)])
        copy = game.copy()
        copy.play(4, 0)
        assert game.square(4, 0) is Square.NONE
        assert game.turns() == 1
        assert copy.turns() == 2
        assert game != copy


class TestFromPosition:
    def test_outcome_computed(self):
        boards = [X_WON, X_WON, X_WON] + [Board() for _ in range(6)]
        game = Game.from_position(boards, Square.O)
        assert game.winner() == Outcome.decided(Square.X)

    def test_boards_are_copied(self):
        boards = [Board() for _ in range(9)]
        game = Game.from_position(boards)
        game.play(0, 0)
        assert boards[0].square(0) is Square.NONE

    def test_rejects_unplayable_active_board(self):
        boards = [X_WON] + [Board() for _ in range(8)]
        with pytest.raises(ValueError):
            Game.from_position(boards, Square.O, active_board=0)

    def test_rejects_bad_arguments(self):
        with pytest.raises(ValueError):
            Game.from_position([Board()] * 8)
        with pytest.raises(ValueError):
            Game.from_position([Board() for _ in range(9)], Square.NONE)
        with pytest.raises(IndexError):
            Game.from_position([Board() for _ in range(9)], active_board=9)

    def test_rejects_board_where_both_players_have_a_line(self):
        tampered = Board(x_mask=0b000000111)
        tampered.o_mask = 0b000111000
        boards = [tampered] + [Board() for _ in range(8)]
        with pytest.raises(ValueError):
            Game.from_position(boards)


class TestStr:
    def test_str_layout(self):
        text = str(Game.from_moves([(4, 4)]))
        lines = text.splitlines()
        # Three rows of boards, seven lines each, plus the status line
        assert len(lines) == 22
        assert "O's turn" in lines[-1]
        assert "board 4" in lines[-1]
