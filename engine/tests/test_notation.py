"""Tests for algebraic move notation."""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.moves import Move
from uttt.core.notation import (
    algebraic_to_move, move_to_algebraic, move_to_rowcol, moves_to_text,
    parse_move, replay, rowcol_to_move, text_to_moves,
)
from uttt.core.square import Square


class TestAlgebraic:
    def test_corners_and_centre(self):
        assert move_to_algebraic(Move(0, 0)) == "a1"
        assert move_to_algebraic(Move(4, 4)) == "e5"
        assert move_to_algebraic(Move(8, 8)) == "i9"
        assert move_to_algebraic(Move(2, 2)) == "i1"
        assert move_to_algebraic(Move(6, 6)) == "a9"

    def test_parse(self):
        assert algebraic_to_move("e5") == Move(4, 4)
        assert algebraic_to_move("d4") == Move(4, 0)
        assert algebraic_to_move("b2") == Move(0, 4)
        assert algebraic_to_move(" E5 ") == Move(4, 4)

    def test_roundtrip_all_cells(self):
        for b in range(9):
            for s in range(9):
                move = Move(b, s)
                assert algebraic_to_move(move_to_algebraic(move)) == move

    @pytest.mark.parametrize("text", ["", "j1", "a0", "a10", "e", "55"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            algebraic_to_move(text)

    def test_rowcol(self):
        assert move_to_rowcol(Move(4, 0)) == (3, 3)
        assert rowcol_to_move(3, 3) == Move(4, 0)
        with pytest.raises(IndexError):
            rowcol_to_move(9, 0)


class TestParseMove:
    @pytest.mark.parametrize("text", ["e5", "4 4", "4,4", "4/4", " 4, 4 "])
    def test_formats(self, text):
        assert parse_move(text) == Move(4, 4)

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            parse_move("9,0")

    def test_garbage(self):
        with pytest.raises(ValueError):
            parse_move("hello")


class TestMoveLists:
    def test_moves_to_text(self):
        moves = [Move(4, 4), Move(4, 0), Move(0, 4)]
        assert moves_to_text(moves) == "1. e5 d4 2. b2"

    def test_text_to_moves(self):
        assert text_to_moves("1. e5 d4 2. b2") == [Move(4, 4), Move(4, 0), Move(0, 4)]
        assert text_to_moves("e5 d4") == [Move(4, 4), Move(4, 0)]
        assert text_to_moves("") == []

    def test_replay(self):
        game = replay("1. e5 d4 2. b2")
        assert game.turns() == 3
        assert game.square(4, 4) is Square.X
        assert game.square(4, 0) is Square.O
        assert game.current_board() == 4
