"""Leaderboard module for agentboard."""

from agentboard.ranker.leaderboard import build_rows, query_leaderboard

__all__ = [
    "build_rows",
    "query_leaderboard",
]
