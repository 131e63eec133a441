"""Shared test doubles for agentboard tests."""

from tests.fixtures.agents.doubles import (
    ScriptedRng,
    StaticSource,
    make_snapshot,
    make_store,
)

__all__ = [
    "ScriptedRng",
    "StaticSource",
    "make_snapshot",
    "make_store",
]
