"""Whole-game simulation: AI matches and random game statistics."""

from .arena import AI, MatchResult, RandomGameStats, play_game, run_match, random_game_stats
