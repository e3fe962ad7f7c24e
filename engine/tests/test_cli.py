"""Tests for the terminal client's background assistant."""

import sys
from threading import Event
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cli.play import Assistant
from uttt.ai.monte_carlo import MonteCarloAI, MonteCarloConfig
from uttt.core.game import Game


def make_assistant() -> Assistant:
    return Assistant(MonteCarloAI(MonteCarloConfig(num_playouts=30, seed=0)))


class TestAssistant:
    def test_result_for_current_position(self):
        assistant = make_assistant()
        game = Game.from_moves([(4, 4)])
        try:
            assistant.request(game)
            estimate = assistant.result(game, timeout=30)
            assert estimate is not None
            assert estimate.turns == 1
            assert estimate.move in game.legal_moves()
        finally:
            assistant.shutdown()

    def test_stale_result_dropped(self):
        assistant = make_assistant()
        game = Game.new_game()
        try:
            assistant.request(game)
            game.play(4, 4)
            assert assistant.result(game, timeout=30) is None
        finally:
            assistant.shutdown()

    def test_no_request(self):
        assistant = make_assistant()
        try:
            assert assistant.result(Game.new_game()) is None
        finally:
            assistant.shutdown()

    def test_request_works_on_a_copy(self):
        assistant = make_assistant()
        game = Game.from_moves([(4, 4)])
        before = game.copy()
        try:
            assistant.request(game)
            assistant.result(game, timeout=30)
            assert game == before
        finally:
            assistant.shutdown()


class GatedAI:
    """Evaluates only after the test opens the gate."""

    def __init__(self):
        self.gate = Event()
        self.inner = MonteCarloAI(MonteCarloConfig(num_playouts=30, seed=0))

    def evaluate(self, game):
        self.gate.wait(timeout=30)
        return self.inner.evaluate(game)


class TestAssistantInBackground:
    def test_unfinished_estimate_does_not_block(self):
        ai = GatedAI()
        assistant = Assistant(ai)
        game = Game.from_moves([(4, 4)])
        try:
            assistant.request(game)
            assert not assistant.ready(game)
            assert assistant.result(game) is None
            ai.gate.set()
            estimate = assistant.result(game, timeout=30)
            assert estimate is not None
            assert assistant.ready(game)
        finally:
            ai.gate.set()
            assistant.shutdown()

    def test_move_played_while_thinking(self):
        ai = GatedAI()
        assistant = Assistant(ai)
        game = Game.new_game()
        try:
            assistant.request(game)
            game.play(4, 4)
            ai.gate.set()
            assert assistant.result(game, timeout=30) is None
            assert not assistant.ready(game)
        finally:
            ai.gate.set()
            assistant.shutdown()

    def test_new_request_replaces_old(self):
        ai = GatedAI()
        assistant = Assistant(ai)
        game = Game.new_game()
        try:
            assistant.request(game)
            game.play(4, 4)
            assistant.request(game)
            ai.gate.set()
            estimate = assistant.result(game, timeout=30)
            assert estimate is not None
            assert estimate.turns == 1
        finally:
            ai.gate.set()
            assistant.shutdown()
