"""Snapshot sources for agentboard."""

from agentboard.errors import SourceUnavailable
from agentboard.source.base import SnapshotSource
from agentboard.source.http import HttpSnapshotSource
from agentboard.source.simulated import SimulatedSource

__all__ = [
    "HttpSnapshotSource",
    "SimulatedSource",
    "SnapshotSource",
    "SourceUnavailable",
]
