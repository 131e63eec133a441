"""Rolling history buffers for agentboard."""

from agentboard.features.rolling_window import RollingWindow

__all__ = [
    "RollingWindow",
]
