"""HTTP service and Prometheus export for agentboard."""

from agentboard.service.exporter import MetricsExporter
from agentboard.service.http_server import create_app, start_server, stop_server

__all__ = [
    "MetricsExporter",
    "create_app",
    "start_server",
    "stop_server",
]
