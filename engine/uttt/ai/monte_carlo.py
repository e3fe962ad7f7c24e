"""
Monte Carlo move evaluation for Ultimate Tic-Tac-Toe.

For the player to move, every legal move is a candidate. Each playout picks
a candidate uniformly at random, plays it on a copy of the game, then plays
uniformly random moves for both sides until the game ends. The result is
scored from the point of view of the player who made the candidate move:

    candidate mover wins  -> win
    opponent wins         -> lose
    draw                  -> neither (counted in totals only)

The move with the best wins / totals ratio is chosen.
"""

from __future__ import annotations
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import time

import numpy as np

from ..core.bitboard import NUM_CELLS
from ..core.errors import NoLegalMoves
from ..core.game import Game
from ..core.moves import Move, get_legal_moves
from ..core.notation import move_to_algebraic
from ..core.square import Square
from .random_ai import RandomSource, make_rng, pick, playout, spawn_rngs
from .time_manager import PlayoutBudget, TimeConfig

logger = logging.getLogger(__name__)

# Counter layout along the last axis of a stats array
WINS, LOSES, TOTALS = 0, 1, 2

EXECUTORS = ("thread", "process")


@dataclass(frozen=True)
class Stats:
    """Win / lose / total playout counts. Draws are totals - wins - loses."""
    wins: int = 0
    loses: int = 0
    totals: int = 0

    @property
    def draws(self) -> int:
        return self.totals - self.wins - self.loses

    def win_ratio(self) -> Optional[float]:
        """wins / totals, or None when there is no data."""
        if self.totals == 0:
            return None
        return self.wins / self.totals

    def lose_ratio(self) -> Optional[float]:
        if self.totals == 0:
            return None
        return self.loses / self.totals

    def draw_ratio(self) -> Optional[float]:
        if self.totals == 0:
            return None
        return self.draws / self.totals

    def __add__(self, other: Stats) -> Stats:
        if not isinstance(other, Stats):
            return NotImplemented
        return Stats(self.wins + other.wins, self.loses + other.loses,
                     self.totals + other.totals)

    @classmethod
    def from_counts(cls, counts: np.ndarray) -> Stats:
        """Build from a length-3 (wins, loses, totals) array."""
        return cls(int(counts[WINS]), int(counts[LOSES]), int(counts[TOTALS]))


NO_STATS = Stats()


@dataclass
class MonteCarloConfig:
    """Configuration for the Monte Carlo evaluator."""
    num_playouts: Optional[int] = 1000  # None = limited by time_limit only
    time_limit: Optional[float] = None  # Seconds; None = limited by num_playouts only

    # Parallelism: playouts are split across workers, each with its own
    # random source and counters, merged once all workers finish.
    workers: int = 1
    executor: str = "thread"  # "thread" or "process"

    # Seed for the default random source (ignored if an rng is injected)
    seed: Optional[int] = None

    def __post_init__(self):
        if self.num_playouts is None and self.time_limit is None:
            raise ValueError("Need num_playouts, time_limit, or both")
        if self.num_playouts is not None and self.num_playouts < 1:
            raise ValueError(f"num_playouts must be >= 1, got {self.num_playouts}")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError(f"time_limit must be >= 0, got {self.time_limit}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.executor not in EXECUTORS:
            raise ValueError(f"executor must be one of {EXECUTORS}, got {self.executor!r}")

    def worker_budgets(self) -> list[TimeConfig]:
        """Split the playout budget across workers. Workers with no share are dropped."""
        if self.num_playouts is None:
            return [TimeConfig(max_playouts=None, time_limit=self.time_limit)
                    for _ in range(self.workers)]

        base, extra = divmod(self.num_playouts, self.workers)
        shares = [base + (1 if i < extra else 0) for i in range(self.workers)]
        # A worker given a share always finishes it unless a time limit is
        # set, in which case one playout per worker is guaranteed.
        return [
            TimeConfig(
                max_playouts=share,
                time_limit=self.time_limit,
                min_playouts=1 if self.time_limit is not None else share,
            )
            for share in shares if share > 0
        ]


@dataclass(frozen=True, eq=False)
class Estimate:
    """
    Immutable result of one evaluation.

    Attributes:
        move: The chosen move
        player: The player the statistics are relative to (the mover)
        turns: Game.turns() of the evaluated position
        runs: Number of completed playouts
        candidates: Legal moves at the evaluated position, ascending
        counts: Read-only int64 array (9, 9, 3) of (wins, loses, totals)
        elapsed: Wall clock seconds spent
    """
    move: Move
    player: Square
    turns: int
    runs: int
    candidates: tuple[Move, ...]
    counts: np.ndarray
    elapsed: float = 0.0

    def stats(self, board_index: int, square_index: int) -> Stats:
        """Counts for one cell; zeros if it was never a candidate."""
        if not (0 <= board_index < NUM_CELLS and 0 <= square_index < NUM_CELLS):
            raise IndexError(f"Cell out of range: ({board_index}, {square_index})")
        return Stats.from_counts(self.counts[board_index, square_index])

    def totals(self) -> Stats:
        """Aggregate over all candidates."""
        return Stats.from_counts(self.counts.sum(axis=(0, 1)))

    def win_ratios(self) -> np.ndarray:
        """(9, 9) float array of wins / totals, NaN where there is no data."""
        totals = self.counts[..., TOTALS].astype(np.float64)
        ratios = np.full(totals.shape, np.nan)
        np.divide(self.counts[..., WINS], totals, out=ratios, where=totals > 0)
        return ratios

    def is_stale(self, game: Game) -> bool:
        """True if `game` has moved on since this estimate was made."""
        return game.turns() != self.turns

    def ranked(self, top_k: Optional[int] = None) -> list[dict]:
        """
        Candidates ordered best first.

        Returns list of dicts with move statistics.
        """
        moves = []
        for move in self.candidates:
            s = self.stats(*move)
            if s.totals == 0:
                continue
            moves.append({
                'move': move,
                'algebraic': move_to_algebraic(move),
                'wins': s.wins,
                'loses': s.loses,
                'draws': s.draws,
                'totals': s.totals,
                'win_ratio': s.win_ratio(),
            })

        # Stable sort keeps ascending (board, square) order among equal ratios
        moves.sort(key=lambda m: m['win_ratio'], reverse=True)
        return moves if top_k is None else moves[:top_k]


def run_playouts(
    game: Game,
    candidates: Sequence[Move],
    rng: RandomSource,
    budget_config: TimeConfig,
) -> tuple[np.ndarray, int]:
    """
    Run random playouts from `game` until the budget runs out.

    Works on copies only. Returns (counts, runs) where counts is a fresh
    (9, 9, 3) array owned by the caller.
    """
    me = game.current_player()
    wins = [0] * (NUM_CELLS * NUM_CELLS)
    loses = [0] * (NUM_CELLS * NUM_CELLS)
    totals = [0] * (NUM_CELLS * NUM_CELLS)

    budget = PlayoutBudget(budget_config)
    budget.start()
    runs = 0
    while budget.should_continue(runs):
        board_index, square_index = pick(rng, candidates)
        g = game.copy()
        g.play(board_index, square_index)
        outcome = playout(g, rng)

        idx = board_index * NUM_CELLS + square_index
        if outcome.is_decided:
            if outcome.winner is me:
                wins[idx] += 1
            else:
                loses[idx] += 1
        totals[idx] += 1
        runs += 1

    counts = np.stack([wins, loses, totals], axis=-1).astype(np.int64)
    return counts.reshape(NUM_CELLS, NUM_CELLS, 3), runs


def best_move(counts: np.ndarray, candidates: Sequence[Move]) -> Move:
    """
    Candidate with the highest wins / totals among those with data.

    Ties go to the first candidate in ascending (board, square) order.
    """
    best: Optional[Move] = None
    best_ratio = -1.0
    for move in sorted(candidates):
        wins, _, totals = counts[move.board, move.square]
        if totals == 0:
            continue
        ratio = wins / totals
        if ratio > best_ratio:
            best_ratio = ratio
            best = move
    if best is None:
        raise NoLegalMoves("No candidate has any playouts")
    return best


class MonteCarloAI:
    """
    Picks moves by flat Monte Carlo simulation.

    The statistics of the most recent choose() call stay available through
    stats(), totals(), runs() and last_estimate until the next call replaces
    them in one step.
    """

    def __init__(
        self,
        config: Optional[MonteCarloConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.config = config or MonteCarloConfig()
        self.rng = rng if rng is not None else make_rng(self.config.seed)
        self.last_estimate: Optional[Estimate] = None

    def choose(self, game: Game) -> Move:
        """
        Evaluate every legal move and return the best one.

        Raises:
            NoLegalMoves: the game is already over
        """
        return self.evaluate(game).move

    def evaluate(self, game: Game, time_limit: Optional[float] = None) -> Estimate:
        """
        Run the configured playouts from `game` and return an Estimate.

        `time_limit` overrides the configured time limit for this call only.
        The caller's game is never modified.
        """
        candidates = tuple(get_legal_moves(game))
        if not candidates:
            raise NoLegalMoves(f"No legal moves: game is {game.winner()}")

        config = self.config
        if time_limit is not None:
            config = MonteCarloConfig(
                num_playouts=config.num_playouts,
                time_limit=time_limit,
                workers=config.workers,
                executor=config.executor,
                seed=config.seed,
            )

        snapshot = game.copy()
        start = time.perf_counter()
        counts, runs = self._run(snapshot, candidates, config)
        elapsed = time.perf_counter() - start

        move = best_move(counts, candidates)
        counts.setflags(write=False)
        estimate = Estimate(
            move=move,
            player=snapshot.current_player(),
            turns=snapshot.turns(),
            runs=runs,
            candidates=candidates,
            counts=counts,
            elapsed=elapsed,
        )
        self.last_estimate = estimate

        if logger.isEnabledFor(logging.DEBUG):
            s = estimate.stats(*move)
            logger.debug(
                f"{runs} playouts over {len(candidates)} candidates in {elapsed:.3f}s "
                f"({runs / elapsed if elapsed > 0 else 0:.0f}/s), best "
                f"{move_to_algebraic(move)} win={s.win_ratio():.3f} ({s.totals} playouts)"
            )
        return estimate

    def _run(
        self,
        game: Game,
        candidates: tuple[Move, ...],
        config: MonteCarloConfig,
    ) -> tuple[np.ndarray, int]:
        budgets = config.worker_budgets()

        if len(budgets) == 1:
            return run_playouts(game, candidates, self.rng, budgets[0])

        # Each worker gets its own game copy, random source and counters
        rngs = spawn_rngs(int(self.rng.integers(2**32)), len(budgets))
        with self._executor(config, len(budgets)) as executor:
            futures = [
                executor.submit(run_playouts, game.copy(), candidates, rng, budget)
                for rng, budget in zip(rngs, budgets)
            ]
            results = [f.result() for f in futures]

        counts = np.zeros((NUM_CELLS, NUM_CELLS, 3), dtype=np.int64)
        runs = 0
        for worker_counts, worker_runs in results:
            counts += worker_counts
            runs += worker_runs
        logger.debug(f"Merged {len(results)} workers ({config.executor}): {runs} playouts")
        return counts, runs

    @staticmethod
    def _executor(config: MonteCarloConfig, max_workers: int) -> Executor:
        if config.executor == "process":
            return ProcessPoolExecutor(max_workers=max_workers)
        return ThreadPoolExecutor(max_workers=max_workers)

    def stats(self, board_index: int, square_index: int) -> Stats:
        """Statistics of one cell from the last choose(); zeros if none."""
        if self.last_estimate is None:
            if not (0 <= board_index < NUM_CELLS and 0 <= square_index < NUM_CELLS):
                raise IndexError(f"Cell out of range: ({board_index}, {square_index})")
            return NO_STATS
        return self.last_estimate.stats(board_index, square_index)

    def totals(self) -> Stats:
        """Aggregate statistics of the last choose()."""
        if self.last_estimate is None:
            return NO_STATS
        return self.last_estimate.totals()

    def runs(self) -> int:
        """Playouts completed by the last choose()."""
        if self.last_estimate is None:
            return 0
        return self.last_estimate.runs

    def __repr__(self) -> str:
        return (f"MonteCarloAI(num_playouts={self.config.num_playouts}, "
                f"time_limit={self.config.time_limit}, workers={self.config.workers})")


def format_estimate(estimate: Estimate) -> str:
    """
    Render per-cell win percentages on the 9x9 grid.

    Candidates show their win percentage (0-100), other cells show '.'.
    The chosen move is marked with '*'.
    """
    ratios = estimate.win_ratios()
    lines = ["     a   b   c    d   e   f    g   h   i"]
    for row in range(9):
        if row in (3, 6):
            lines.append("    " + "+".join(["-" * 12] * 3))
        cells = []
        for col in range(9):
            board = (row // 3) * 3 + col // 3
            square = (row % 3) * 3 + col % 3
            ratio = ratios[board, square]
            if np.isnan(ratio):
                text = "  ."
            else:
                text = f"{int(round(ratio * 100)):3d}"
            marker = "*" if (board, square) == tuple(estimate.move) else " "
            cells.append(text + marker)
            if col in (2, 5):
                cells.append("|")
        lines.append(f"{row + 1:2d}  " + "".join(cells))

    totals = estimate.totals()
    player = estimate.player
    lines.append(
        f"{player} win {_pct(totals.win_ratio())}  "
        f"{player.opponent} win {_pct(totals.lose_ratio())}  "
        f"draw {_pct(totals.draw_ratio())}  ({estimate.runs} playouts)"
    )
    return "\n".join(lines)


def _pct(ratio: Optional[float]) -> str:
    return "n/a" if ratio is None else f"{ratio * 100:.1f}%"
