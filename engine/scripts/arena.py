#!/usr/bin/env python3
"""
Arena - measure the Monte Carlo AI against the random baseline.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from uttt.ai.monte_carlo import MonteCarloAI, MonteCarloConfig
from uttt.ai.random_ai import RandomAI, make_rng
from uttt.sim.arena import run_match


def main():
    parser = argparse.ArgumentParser(description='Monte Carlo AI vs random play')
    parser.add_argument('--games', type=int, default=20, help='Number of games to play (default: 20)')
    parser.add_argument('--playouts', type=int, default=200, help='Monte Carlo playouts per move (default: 200)')
    parser.add_argument('--opponent-playouts', type=int, default=None,
                        help='Pit against a second Monte Carlo AI with this many playouts instead of random')
    parser.add_argument('--workers', type=int, default=1, help='Playout workers per AI')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--verbose', action='store_true', help='Log every game')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rng = make_rng(args.seed)
    ai1 = MonteCarloAI(MonteCarloConfig(num_playouts=args.playouts, workers=args.workers), rng=rng)
    if args.opponent_playouts:
        ai2 = MonteCarloAI(MonteCarloConfig(num_playouts=args.opponent_playouts, workers=args.workers), rng=rng)
        ai2_name = f"Monte Carlo ({args.opponent_playouts} playouts)"
    else:
        ai2 = RandomAI(rng=rng)
        ai2_name = "Random"

    result = run_match(ai1, ai2, num_games=args.games, verbose=args.verbose)

    print("\n" + "=" * 50)
    print("MATCH RESULTS")
    print("=" * 50)
    print(f"AI 1: Monte Carlo ({args.playouts} playouts)")
    print(f"AI 2: {ai2_name}")
    print(f"Games played: {result.total}")
    print(f"AI 1 wins: {result.ai1_wins} ({result.ai1_win_rate()*100:.1f}%)")
    print(f"AI 2 wins: {result.ai2_wins} ({result.ai2_win_rate()*100:.1f}%)")
    print(f"Draws: {result.draws} ({result.draw_rate()*100:.1f}%)")
    print("=" * 50)


if __name__ == '__main__':
    main()
