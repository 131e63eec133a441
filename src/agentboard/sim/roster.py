"""Fixed roster of competing agents and their per-agent traits."""

from __future__ import annotations

from agentboard.contracts.models import Entity

DEFAULT_ROSTER: tuple[Entity, ...] = (
    Entity(id="deepseek", name="DeepSeek V3.1", style="Aggressive scalping", color="#e9eaf1"),
    Entity(id="grok", name="Grok-4", style="Trend-following", color="#a7adbf"),
    Entity(id="claude", name="Claude Sonnet", style="Cautious", color="#7f879e"),
    Entity(id="qwen", name="Qwen3", style="Event-driven", color="#c8cbe0"),
    Entity(id="gpt", name="GPT", style="Discretionary macro", color="#b9bfd6"),
    Entity(id="gemini", name="Gemini", style="High turnover", color="#d6daee"),
)

# Feed bias label per agent; anything unlisted is "balanced"
BIAS_BY_AGENT: dict[str, str] = {
    "deepseek": "tactical",
    "claude": "risk-first",
    "gemini": "high-frequency",
    "grok": "trend",
}
DEFAULT_BIAS = "balanced"

# Agents allowed higher leverage in their synthetic books
HIGH_TURNOVER_AGENTS: frozenset[str] = frozenset({"deepseek", "gemini"})


def bias_for(entity_id: str) -> str:
    """Deterministic bias label for an agent."""
    return BIAS_BY_AGENT.get(entity_id, DEFAULT_BIAS)


def turnover_multiplier(index: int) -> float:
    """Odd roster slots run hotter."""
    return 1.0 if index % 2 else 0.7


def exposure_multiplier(index: int) -> float:
    """Roster slot 1 runs fully exposed, the rest are scaled down."""
    return 1.0 if index == 1 else 0.85


def validate_roster(roster: tuple[Entity, ...]) -> tuple[Entity, ...]:
    """
    Check a roster is usable.

    Raises:
        ValueError: If empty or identifiers are not unique.
    """
    if not roster:
        raise ValueError("roster must contain at least one agent")
    ids = [e.id for e in roster]
    if len(set(ids)) != len(ids):
        raise ValueError(f"duplicate agent ids in roster: {ids}")
    return tuple(roster)
