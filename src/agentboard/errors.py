"""Exception types for agentboard."""

from __future__ import annotations


class AgentboardError(Exception):
    """Base class for agentboard errors."""


class SourceUnavailable(AgentboardError):
    """Snapshot source could not produce a snapshot.

    Raised only by network-backed sources. The scheduler treats it as a
    skipped tick and keeps serving the previous snapshot.
    """

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class UnknownEntityError(AgentboardError, KeyError):
    """Agent identifier is not part of the roster."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(entity_id)
        self.entity_id = entity_id

    def __str__(self) -> str:
        return f"Unknown agent: {self.entity_id!r}"
