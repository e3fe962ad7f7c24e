#!/usr/bin/env python3
"""
Terminal-based Ultimate Tic-Tac-Toe client.

Play against the Monte Carlo AI with its win estimates shown for every
legal move, or watch AI vs AI games.
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from threading import Lock
from typing import Optional

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.core.errors import MoveError
from uttt.core.game import Game
from uttt.core.moves import get_legal_moves
from uttt.core.notation import move_to_algebraic, parse_move
from uttt.core.square import Square
from uttt.ai.monte_carlo import Estimate, MonteCarloAI, MonteCarloConfig, format_estimate
from uttt.ai.random_ai import RandomAI


class Assistant:
    """
    Computes Monte Carlo estimates off the input loop.

    Each request records the game's turn counter. A finished estimate is
    only handed out while the game is still at that turn; anything older
    is dropped.
    """

    def __init__(self, ai: MonteCarloAI):
        self.ai = ai
        self.executor = ThreadPoolExecutor(max_workers=1)
        self.lock = Lock()
        self.pending: Optional[Future] = None
        self.requested_turn: Optional[int] = None

    def request(self, game: Game) -> None:
        """Start evaluating the current position in the background."""
        if not game.playable():
            return
        snapshot = game.copy()
        with self.lock:
            if self.pending is not None:
                self.pending.cancel()
            self.requested_turn = snapshot.turns()
            self.pending = self.executor.submit(self.ai.evaluate, snapshot)

    def _current(self, game: Game) -> Optional[Future]:
        with self.lock:
            future = self.pending
            turn = self.requested_turn
        if future is None or turn != game.turns():
            return None
        return future

    def ready(self, game: Game) -> bool:
        """True once the estimate for the current position is finished."""
        future = self._current(game)
        return future is not None and future.done()

    def result(self, game: Game, timeout: Optional[float] = 0) -> Optional[Estimate]:
        """
        Estimate for the current position.

        None if nothing was requested for this position, the estimate is
        stale, or it is not finished within `timeout` seconds. The default
        never blocks; timeout=None waits for it.
        """
        future = self._current(game)
        if future is None:
            return None
        try:
            estimate = future.result(timeout=timeout)
        except FuturesTimeoutError:
            return None
        if estimate.is_stale(game):
            return None
        return estimate

    def shutdown(self) -> None:
        self.executor.shutdown(wait=True)


def show_legal_moves(game: Game) -> None:
    """Display all legal moves."""
    moves = get_legal_moves(game)
    if not moves:
        print("No legal moves!")
        return
    print("Legal moves:", ", ".join(move_to_algebraic(m) for m in moves))


def show_analysis(estimate: Estimate, top_k: int = 3) -> None:
    print(format_estimate(estimate))
    for m in estimate.ranked(top_k):
        print(f"  {m['algebraic']} (board {m['move'].board}, square {m['move'].square}): "
              f"win {m['win_ratio'] * 100:.1f}%, {m['totals']} playouts")


def print_result(game: Game, human_player: Optional[Square] = None) -> None:
    outcome = game.winner()
    if outcome.is_draw:
        print("Game drawn.")
    elif human_player is None:
        print(f"{outcome.winner} wins.")
    elif outcome.winner is human_player:
        print("Congratulations! You win!")
    else:
        print("AI wins. Better luck next time!")


def play_human_vs_ai(
    config: MonteCarloConfig,
    human_player: Square = Square.X,
    assist: bool = True,
) -> None:
    """Play a game: human vs AI."""
    game = Game.new_game()
    ai = MonteCarloAI(config)
    assistant = Assistant(MonteCarloAI(config)) if assist else None

    print("\n=== Ultimate Tic-Tac-Toe ===")
    print(f"You are {human_player}")
    print("Commands: move (e.g. 'e5' or '4,4'), 'm' for moves, "
          + ("'a' for win estimates, " if assist else "") + "'q' quit")

    try:
        while game.playable():
            print(game)
            player = game.current_player()

            if player is human_player:
                if assistant is not None:
                    assistant.request(game)

                while True:
                    try:
                        user_input = input("> ").strip()
                    except EOFError:
                        return

                    if user_input in ('q', 'quit', 'exit'):
                        print("Thanks for playing!")
                        return
                    if user_input in ('m', 'moves'):
                        show_legal_moves(game)
                        continue
                    if user_input in ('a', 'assist') and assistant is not None:
                        estimate = assistant.result(game)
                        if estimate is None:
                            print("Still thinking, try again in a moment")
                        else:
                            show_analysis(estimate)
                        continue
                    if user_input in ('h', 'help', '?'):
                        print("Enter moves like 'e5' (column a-i, row 1-9) or 'board,square'")
                        print("'m' to see legal moves, 'a' for win estimates, 'q' to quit")
                        continue

                    try:
                        move = parse_move(user_input)
                        game.play(move.board, move.square)
                    except (MoveError, IndexError, ValueError) as e:
                        print(f"Illegal move: {e}")
                        continue
                    print(f"You played: {move_to_algebraic(move)}")
                    break
            else:
                print(f"AI thinking ({_budget_text(config)})...")
                estimate = ai.evaluate(game)
                show_analysis(estimate)
                game.play(estimate.move.board, estimate.move.square)
                print(f"AI plays: {move_to_algebraic(estimate.move)}")
    finally:
        if assistant is not None:
            assistant.shutdown()

    print(game)
    print_result(game, human_player)


def watch_ai_vs_ai(config: MonteCarloConfig, random_opponent: bool = False,
                   delay: float = 1.0) -> None:
    """Watch the Monte Carlo AI play itself (or a random player as O)."""
    game = Game.new_game()
    ai_x = MonteCarloAI(config)
    ai_o = RandomAI(seed=config.seed) if random_opponent else MonteCarloAI(config)

    print("\n=== AI vs AI ===")
    print(f"X: {ai_x!r}  O: {ai_o!r}")

    while game.playable():
        print(game)
        ai = ai_x if game.current_player() is Square.X else ai_o
        move = ai.choose(game)
        if isinstance(ai, MonteCarloAI):
            show_analysis(ai.last_estimate, top_k=3)
        game.play(move.board, move.square)
        print(f"Plays: {move_to_algebraic(move)}\n")
        time.sleep(delay)

    print(game)
    print_result(game)


def _budget_text(config: MonteCarloConfig) -> str:
    if config.time_limit is not None:
        return f"{config.time_limit:g}s"
    return f"{config.num_playouts} playouts"


def main():
    parser = argparse.ArgumentParser(description='Ultimate Tic-Tac-Toe Terminal Client')
    parser.add_argument('--playouts', type=int, default=1000, help='Monte Carlo playouts per move')
    parser.add_argument('--time', type=float, default=None,
                        help='Seconds per move (overrides --playouts)')
    parser.add_argument('--workers', type=int, default=1, help='Parallel playout workers')
    parser.add_argument('--processes', action='store_true',
                        help='Use worker processes instead of threads')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--watch', action='store_true', help='Watch AI vs AI')
    parser.add_argument('--vs-random', action='store_true',
                        help='In watch mode, O plays uniformly at random')
    parser.add_argument('--delay', type=float, default=1.0, help='Seconds between watched moves')
    parser.add_argument('--play-as', choices=['X', 'O'], default='X', help='Play as X (first) or O')
    parser.add_argument('--no-assist', action='store_true', help='Hide win estimates on your turn')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = MonteCarloConfig(
        num_playouts=None if args.time is not None else args.playouts,
        time_limit=args.time,
        workers=args.workers,
        executor='process' if args.processes else 'thread',
        seed=args.seed,
    )

    if args.watch:
        watch_ai_vs_ai(config, args.vs_random, args.delay)
    else:
        play_human_vs_ai(config, Square[args.play_as], assist=not args.no_assist)


if __name__ == '__main__':
    main()
