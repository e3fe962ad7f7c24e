"""
Arena - play complete games between AIs and collect results.

Also measures plain random-vs-random games, which gives the baseline
outcome distribution and the raw playout speed of the engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Protocol
import logging
import time

from ..core.game import Game
from ..core.moves import Move
from ..core.notation import move_to_algebraic
from ..core.square import Square
from ..ai.monte_carlo import MonteCarloAI
from ..ai.random_ai import RandomSource, make_rng, playout
from ..ai.time_manager import TimeManager

logger = logging.getLogger(__name__)


class AI(Protocol):
    """Anything that can pick a move for the player to move."""
    def choose(self, game: Game) -> Move:
        ...


@dataclass
class MatchResult:
    ai1_wins: int = 0
    ai2_wins: int = 0
    draws: int = 0
    games: list[Game] = field(default_factory=list, repr=False)

    @property
    def total(self) -> int:
        return self.ai1_wins + self.ai2_wins + self.draws

    def ai1_win_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.ai1_wins / self.total

    def ai2_win_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.ai2_wins / self.total

    def draw_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.draws / self.total


def _choose(ai: AI, game: Game, clock: Optional[TimeManager]) -> Move:
    if clock is None or not isinstance(ai, MonteCarloAI):
        return ai.choose(game)
    estimate = ai.evaluate(game, time_limit=clock.get_move_time())
    clock.update(estimate.elapsed, estimate.runs)
    return estimate.move


def play_game(
    ai_x: AI,
    ai_o: AI,
    clocks: Optional[dict[Square, TimeManager]] = None,
    verbose: bool = False,
) -> Game:
    """
    Play a single game to the end.

    `clocks` optionally gives a TimeManager per side; Monte Carlo players
    with a clock get a per-move time limit from it.

    Returns the finished game.
    """
    game = Game.new_game()
    players = {Square.X: ai_x, Square.O: ai_o}
    clocks = clocks or {}

    while game.playable():
        player = game.current_player()
        move = _choose(players[player], game, clocks.get(player))
        game.play(move.board, move.square)
        if verbose:
            print(f"Move {game.turns()}: {player} plays {move_to_algebraic(move)}")

    return game


def run_match(ai1: AI, ai2: AI, num_games: int = 20, verbose: bool = False) -> MatchResult:
    """
    Run a match between two AIs.

    Colours alternate: ai1 plays X in even-numbered games, O in odd ones.
    """
    result = MatchResult()
    for i in range(num_games):
        ai1_side = Square.X if i % 2 == 0 else Square.O
        if ai1_side is Square.X:
            game = play_game(ai1, ai2)
        else:
            game = play_game(ai2, ai1)

        outcome = game.winner()
        if outcome.is_draw:
            result.draws += 1
        elif outcome.winner is ai1_side:
            result.ai1_wins += 1
        else:
            result.ai2_wins += 1
        result.games.append(game)

        logger.info(f"Game {i + 1}/{num_games}: {outcome} in {game.turns()} turns "
                    f"(ai1 as {ai1_side}) - score {result.ai1_wins}-{result.ai2_wins}-{result.draws}")
        if verbose:
            print(f"Game {i + 1}: {outcome} ({game.turns()} turns)")

    return result


@dataclass
class RandomGameStats:
    """Outcome distribution of random-vs-random games."""
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0
    total_turns: int = 0
    elapsed: float = 0.0

    @property
    def games(self) -> int:
        return self.x_wins + self.o_wins + self.draws

    @property
    def games_per_second(self) -> float:
        return self.games / self.elapsed if self.elapsed > 0 else 0.0

    @property
    def avg_game_length(self) -> float:
        return self.total_turns / self.games if self.games else 0.0

    def summary(self) -> str:
        n = max(1, self.games)
        return "\n".join([
            f"Games: {self.games} ({self.games_per_second:.0f}/s, "
            f"avg {self.avg_game_length:.1f} turns)",
            f"    X: {self.x_wins} {100 * self.x_wins / n:.1f}% (goes first)",
            f"    O: {self.o_wins} {100 * self.o_wins / n:.1f}% (goes second)",
            f"Draws: {self.draws} {100 * self.draws / n:.1f}%",
        ])


def random_game_stats(
    num_games: Optional[int] = 1000,
    time_limit: Optional[float] = None,
    rng: Optional[RandomSource] = None,
) -> RandomGameStats:
    """
    Play random games from the start position.

    Stops after `num_games` games or `time_limit` seconds, whichever comes
    first; a game in progress is always finished.
    """
    if num_games is None and time_limit is None:
        raise ValueError("Need num_games, time_limit, or both")
    rng = rng if rng is not None else make_rng()

    stats = RandomGameStats()
    start = time.perf_counter()
    while True:
        if num_games is not None and stats.games >= num_games:
            break
        if time_limit is not None and time.perf_counter() - start >= time_limit:
            break

        game = Game.new_game()
        outcome = playout(game, rng)
        if outcome.is_draw:
            stats.draws += 1
        elif outcome.winner is Square.X:
            stats.x_wins += 1
        else:
            stats.o_wins += 1
        stats.total_turns += game.turns()

    stats.elapsed = time.perf_counter() - start
    return stats
