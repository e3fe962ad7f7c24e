"""
Playout budgets and time management for the Monte Carlo evaluator.

A search runs either a fixed number of playouts, a fixed amount of wall
clock time, or whichever of the two runs out first. Playouts are never
interrupted: the budget is only checked between playouts, so a time-boxed
search may overrun its limit by the length of one playout.

TimeManager spreads a total game clock over the moves of a game, handing
out a per-move time limit.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import time


@dataclass
class TimeConfig:
    """Configuration for one search budget."""

    # Stop after this many playouts (None = no playout cap)
    max_playouts: Optional[int] = 1000

    # Stop after this many seconds (None = no time limit)
    time_limit: Optional[float] = None

    # Always complete at least this many playouts, even past the time limit
    min_playouts: int = 1

    def __post_init__(self):
        if self.max_playouts is None and self.time_limit is None:
            raise ValueError("Budget needs max_playouts, time_limit, or both")
        if self.max_playouts is not None and self.max_playouts < 0:
            raise ValueError(f"max_playouts must be >= 0, got {self.max_playouts}")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError(f"time_limit must be >= 0, got {self.time_limit}")
        if self.min_playouts < 0:
            raise ValueError(f"min_playouts must be >= 0, got {self.min_playouts}")


class PlayoutBudget:
    """
    Decides when a search loop should stop.

    Usage:
        budget = PlayoutBudget(TimeConfig(time_limit=0.5))
        budget.start()
        while budget.should_continue(runs):
            ...  # one complete playout
            runs += 1
    """

    def __init__(self, config: TimeConfig, clock=time.perf_counter):
        self.config = config
        self._clock = clock
        self._start: Optional[float] = None

    def start(self) -> None:
        self._start = self._clock()

    @property
    def elapsed(self) -> float:
        """Seconds since start()."""
        if self._start is None:
            return 0.0
        return self._clock() - self._start

    def should_continue(self, runs: int) -> bool:
        """True if another playout should be started after `runs` complete ones."""
        cfg = self.config
        if cfg.max_playouts is not None and runs >= cfg.max_playouts:
            return False
        if runs < cfg.min_playouts:
            return True
        if cfg.time_limit is not None and self.elapsed >= cfg.time_limit:
            return False
        return True


@dataclass
class GameClockConfig:
    """Configuration for spreading a game clock over moves."""

    # Total thinking time for one player over the whole game (seconds)
    total_time: float = 60.0

    # Per-move limits
    min_move_time: float = 0.05
    max_move_time: float = 10.0

    # Reserve this much time at end of game
    time_buffer: float = 1.0

    # Estimated number of own moves, used for the first allocation.
    # A random game of ultimate tic-tac-toe lasts around 50-60 plies.
    estimated_moves: int = 30


@dataclass
class TimeManager:
    """
    Tracks one player's remaining clock and converts it into per-move
    time limits.
    """

    config: GameClockConfig = field(default_factory=GameClockConfig)

    remaining_time: float = field(init=False)
    estimated_moves_remaining: int = field(init=False)

    # Statistics for analysis
    total_playouts: int = 0
    total_time_used: float = 0.0
    move_count: int = 0

    def __post_init__(self):
        self.remaining_time = max(0.0, self.config.total_time - self.config.time_buffer)
        self.estimated_moves_remaining = self.config.estimated_moves

    def get_move_time(self) -> float:
        """Time limit for the next move (seconds)."""
        if self.estimated_moves_remaining <= 0:
            budget = self.remaining_time
        else:
            budget = self.remaining_time / self.estimated_moves_remaining
        return max(self.config.min_move_time, min(self.config.max_move_time, budget))

    def update(self, elapsed_time: float, playouts_run: int) -> None:
        """Record a finished move."""
        self.remaining_time = max(0.0, self.remaining_time - elapsed_time)
        self.estimated_moves_remaining = max(1, self.estimated_moves_remaining - 1)

        self.total_playouts += playouts_run
        self.total_time_used += elapsed_time
        self.move_count += 1

    @property
    def avg_playouts_per_move(self) -> float:
        if self.move_count == 0:
            return 0.0
        return self.total_playouts / self.move_count

    @property
    def avg_time_per_move(self) -> float:
        if self.move_count == 0:
            return 0.0
        return self.total_time_used / self.move_count

    def stats(self) -> dict:
        """Return statistics about time management."""
        return {
            'remaining_time': self.remaining_time,
            'estimated_moves_remaining': self.estimated_moves_remaining,
            'total_playouts': self.total_playouts,
            'total_time_used': self.total_time_used,
            'avg_playouts_per_move': self.avg_playouts_per_move,
            'avg_time_per_move': self.avg_time_per_move,
        }
