"""agentboard: simulated live telemetry for competing trading agents."""

__version__ = "0.1.0"
