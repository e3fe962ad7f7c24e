"""Tests for moves and legal move generation."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.board import Board
from uttt.core.game import Game
from uttt.core.moves import Move, MoveGenerator, get_legal_moves


class TestMove:
    def test_move_unpacks(self):
        board, square = Move(3, 7)
        assert (board, square) == (3, 7)
        assert str(Move(3, 7)) == "(3, 7)"

    def test_orders_by_board_then_square(self):
        assert sorted([Move(1, 0), Move(0, 8), Move(0, 2)]) == [Move(0, 2), Move(0, 8), Move(1, 0)]


class TestLegalMoves:
    def test_opening_has_81_moves(self):
        game = Game.new_game()
        moves = get_legal_moves(game)
        assert len(moves) == 81
        assert moves == sorted(moves)
        assert moves[0] == Move(0, 0)
        assert moves[-1] == Move(8, 8)

    def test_active_board_restricts_moves(self):
        game = Game.from_moves([(0, 4)])
        moves = get_legal_moves(game)
        assert len(moves) == 9
        assert all(m.board == 4 for m in moves)

    def test_occupied_cells_excluded(self):
        game = Game.from_moves([(4, 4), (4, 0), (0, 4)])
        moves = get_legal_moves(game)
        assert [m.square for m in moves] == [1, 2, 3, 5, 6, 7, 8]

    def test_free_choice_skips_unplayable_boards(self):
        game = Game.from_moves([(0, 1), (1, 0), (0, 2), (2, 0), (0, 0)])
        moves = get_legal_moves(game)
        assert all(m.board != 0 for m in moves)
        assert MoveGenerator.target_boards(game) == [1, 2, 3, 4, 5, 6, 7, 8]

    def test_every_legal_move_plays(self):
        game = Game.from_moves([(4, 4), (4, 0)])
        for move in get_legal_moves(game):
            game.copy().play(move.board, move.square)

    def test_finished_game_has_no_moves(self):
        won = Board(x_mask=0b000000111, o_mask=0b000011000)
        game = Game.from_position([won, won, won] + [Board() for _ in range(6)])
        assert get_legal_moves(game) == []
        assert MoveGenerator.target_boards(game) == []

