#!/usr/bin/env python3
"""
Performance benchmarks for the Ultimate Tic-Tac-Toe engine.

Measures:
- Move generation speed
- Game copy speed
- Random playout throughput and outcome distribution
- Monte Carlo evaluation throughput (single and multi worker)
"""

import argparse
import logging
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
from uttt.core.game import Game
from uttt.core.moves import get_legal_moves
from uttt.ai.monte_carlo import MonteCarloAI, MonteCarloConfig, format_estimate
from uttt.ai.random_ai import make_rng
from uttt.sim.arena import random_game_stats


def _midgame(rng) -> Game:
    """A position a few moves into the game (the same for a given rng)."""
    game = Game.new_game()
    for _ in range(6):
        moves = get_legal_moves(game)
        move = moves[int(rng.integers(len(moves)))]
        game.play(move.board, move.square)
    return game


def benchmark_move_generation(iterations: int = 10000) -> dict:
    """Benchmark move generation speed."""
    game = Game.new_game()

    start = time.perf_counter()
    for _ in range(iterations):
        moves = get_legal_moves(game)
    elapsed = time.perf_counter() - start

    return {
        "name": "Move Generation",
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "per_call_us": (elapsed / iterations) * 1_000_000,
        "calls_per_sec": iterations / elapsed,
    }


def benchmark_game_copy(iterations: int = 10000) -> dict:
    """Benchmark game copying speed."""
    game = _midgame(make_rng(0))

    start = time.perf_counter()
    for _ in range(iterations):
        copy = game.copy()
    elapsed = time.perf_counter() - start

    return {
        "name": "Game Copy",
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "per_call_us": (elapsed / iterations) * 1_000_000,
        "calls_per_sec": iterations / elapsed,
    }


def benchmark_random_games(duration: float = 5.0, seed: int = None) -> dict:
    """Play random games from the start position for `duration` seconds."""
    stats = random_game_stats(num_games=None, time_limit=duration, rng=make_rng(seed))
    print(stats.summary())
    return {
        "name": "Random Games",
        "games": stats.games,
        "games_per_sec": stats.games_per_second,
        "avg_game_length": stats.avg_game_length,
    }


def benchmark_monte_carlo(
    playouts: list[int] = [100, 500, 1000],
    workers: int = 1,
    executor: str = "thread",
    seed: int = None,
) -> list[dict]:
    """Benchmark Monte Carlo evaluation of a midgame position."""
    game = _midgame(make_rng(0))

    results = []
    for n in playouts:
        config = MonteCarloConfig(num_playouts=n, workers=workers, executor=executor, seed=seed)
        ai = MonteCarloAI(config)

        # Run multiple times for stability
        times = []
        for _ in range(3):
            estimate = ai.evaluate(game)
            times.append(estimate.elapsed)

        avg_time = np.mean(times)
        results.append({
            "name": f"Monte Carlo {n} playouts ({workers} {executor} workers)",
            "playouts": n,
            "avg_time_ms": avg_time * 1000,
            "playouts_per_sec": n / avg_time,
        })

    print(format_estimate(ai.last_estimate))
    return results


def print_result(result: dict) -> None:
    """Pretty print a benchmark result."""
    name = result.pop("name")
    print(f"\n{name}:")
    for key, value in result.items():
        if isinstance(value, float):
            print(f"  {key}: {value:.2f}")
        else:
            print(f"  {key}: {value}")


def main():
    parser = argparse.ArgumentParser(description='Ultimate Tic-Tac-Toe Engine Benchmarks')
    parser.add_argument('--all', action='store_true', help='Run all benchmarks')
    parser.add_argument('--core', action='store_true', help='Run core engine benchmarks')
    parser.add_argument('--games', action='store_true', help='Run random game benchmark')
    parser.add_argument('--mc', action='store_true', help='Run Monte Carlo benchmarks')
    parser.add_argument('--duration', type=float, default=5.0, help='Seconds of random games')
    parser.add_argument('--workers', type=int, default=1, help='Monte Carlo workers')
    parser.add_argument('--processes', action='store_true', help='Use worker processes')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    # Default to all if nothing specified
    if not any([args.all, args.core, args.games, args.mc]):
        args.all = True

    print("=" * 50)
    print("Ultimate Tic-Tac-Toe Engine Benchmarks")
    print("=" * 50)

    if args.all or args.core:
        print("\n### Core Engine ###")
        print_result(benchmark_move_generation())
        print_result(benchmark_game_copy())

    if args.all or args.games:
        print("\n### Random Games ###")
        print_result(benchmark_random_games(args.duration, args.seed))

    if args.all or args.mc:
        print("\n### Monte Carlo ###")
        executor = 'process' if args.processes else 'thread'
        for result in benchmark_monte_carlo(workers=args.workers, executor=executor, seed=args.seed):
            print_result(result)

    print("\n" + "=" * 50)
    print("Benchmarks complete")


if __name__ == '__main__':
    main()
