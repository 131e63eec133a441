"""Leaderboard: filter + stable sort over current agent metrics.

Stateless; recomputed on demand from the StateStore.
"""

from __future__ import annotations

from agentboard.contracts.models import LeaderboardRow, SortKey
from agentboard.sim.feed import pnl_fraction
from agentboard.sim.metrics import classify_status
from agentboard.sim.state import StateStore


def _sort_value(row: LeaderboardRow, key: SortKey) -> float:
    if key is SortKey.VALUE:
        return row.value
    if key is SortKey.PNL:
        return row.pnl
    if key is SortKey.DD:
        return row.drawdown
    return row.turnover


def build_rows(store: StateStore, start_capital: float = 10000.0) -> list[LeaderboardRow]:
    """One row per agent in roster order."""
    rows: list[LeaderboardRow] = []
    for _, entity, state in store.items():
        value = state.current
        rows.append(
            LeaderboardRow(
                id=entity.id,
                name=entity.name,
                style=entity.style,
                value=value,
                pnl=pnl_fraction(value, start_capital),
                drawdown=state.drawdown,
                turnover=state.turnover,
                status=classify_status(state.drawdown, state.turnover),
            )
        )
    return rows


def matches(query: str, entity_id: str, name: str) -> bool:
    """Case-insensitive substring match on name or id. Empty query matches."""
    q = query.strip().lower()
    return not q or q in name.lower() or q in entity_id.lower()


def query_leaderboard(
    store: StateStore,
    filter_text: str = "",
    sort_key: SortKey | str = SortKey.VALUE,
    *,
    start_capital: float = 10000.0,
) -> list[LeaderboardRow]:
    """
    Filter and rank agents.

    Value and P&L sort descending, drawdown and turnover ascending. Ties
    keep roster order.

    Args:
        store: Current state.
        filter_text: Substring to match against name or id.
        sort_key: SortKey or its string value.
        start_capital: Capital the P&L is measured against.

    Raises:
        ValueError: If sort_key is not a known key.
    """
    key = SortKey(sort_key)
    rows = [r for r in build_rows(store, start_capital) if matches(filter_text, r.id, r.name)]
    if key.descending:
        rows.sort(key=lambda r: -_sort_value(r, key))
    else:
        rows.sort(key=lambda r: _sort_value(r, key))
    return rows
