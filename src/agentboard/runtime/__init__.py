"""Scheduling and control state for agentboard."""

from agentboard.runtime.scheduler import (
    EngineUnavailableError,
    SchedulerMetrics,
    TickScheduler,
)
from agentboard.runtime.view import ViewState

__all__ = [
    "EngineUnavailableError",
    "SchedulerMetrics",
    "TickScheduler",
    "ViewState",
]
