"""AI components: random rollout policy, Monte Carlo evaluator and budgets."""

from .random_ai import RandomAI, RandomSource, make_rng, random_move, playout
from .monte_carlo import MonteCarloAI, MonteCarloConfig, Estimate, Stats
from .time_manager import TimeConfig, PlayoutBudget, TimeManager, GameClockConfig
