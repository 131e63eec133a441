"""
HTTP API for the dashboard front end.

Serves snapshots, leaderboard, value series, per-agent feed/positions/risk,
user notes, control commands, Prometheus /metrics and /healthz.

Uses aiohttp.web; bodies are encoded with orjson.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import orjson
from aiohttp import web
from prometheus_client import generate_latest

from agentboard.errors import UnknownEntityError
from agentboard.ranker.leaderboard import query_leaderboard
from agentboard.runtime.scheduler import EngineUnavailableError, TickScheduler
from agentboard.sim.config import TimeRange
from agentboard.sim.metrics import classify_status

if TYPE_CHECKING:
    from prometheus_client.registry import CollectorRegistry

logger = logging.getLogger(__name__)

SCHEDULER_KEY: web.AppKey[TickScheduler] = web.AppKey("scheduler", TickScheduler)

DEFAULT_FEED_LIMIT = 30

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _json(data: Any, *, status: int = 200) -> web.Response:
    return web.Response(
        body=orjson.dumps(data),
        status=status,
        content_type="application/json",
    )


def _error(status: int, message: str) -> web.Response:
    return _json({"error": message}, status=status)


@web.middleware
async def _error_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    """Map domain errors onto HTTP status codes."""
    try:
        return await handler(request)
    except UnknownEntityError as e:
        return _error(404, str(e))
    except EngineUnavailableError as e:
        return _error(503, str(e))


async def _read_json_object(request: web.Request) -> dict[str, Any]:
    try:
        data = orjson.loads(await request.read())
    except orjson.JSONDecodeError:
        raise _bad_request("body must be JSON") from None
    if not isinstance(data, dict):
        raise _bad_request("body must be a JSON object")
    return data


def _bad_request(message: str) -> web.HTTPBadRequest:
    return web.HTTPBadRequest(
        text=orjson.dumps({"error": message}).decode(),
        content_type="application/json",
    )


async def handle_snapshot(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    snapshot = scheduler.latest
    if snapshot is None:
        return _error(503, "no snapshot yet")
    return web.Response(body=snapshot.to_json(), content_type="application/json")


async def handle_leaderboard(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    engine = scheduler.require_engine()
    query = request.query.get("q", "")
    sort = request.query.get("sort", "value")
    try:
        rows = query_leaderboard(
            engine.store, query, sort, start_capital=engine.config.start_capital
        )
    except ValueError:
        return _error(400, f"unknown sort key: {sort!r}")
    return _json([row.model_dump(mode="json") for row in rows])


async def handle_series(request: web.Request) -> web.Response:
    """Value windows keyed by agent id, in roster order; ``tail`` keeps the newest N."""
    scheduler = request.app[SCHEDULER_KEY]
    engine = scheduler.require_engine()
    tail: int | None = None
    if "tail" in request.query:
        try:
            tail = int(request.query["tail"])
        except ValueError:
            return _error(400, "tail must be an integer")
        if tail <= 0:
            return _error(400, "tail must be > 0")
    return _json(
        {
            entity.id: state.values.values() if tail is None else state.values.tail(tail)
            for _, entity, state in engine.store.items()
        }
    )


async def handle_agents(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    engine = scheduler.require_engine()
    return _json([e.model_dump(mode="json") for e in engine.roster])


async def handle_feed(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    state = scheduler.require_engine().store.get(request.match_info["agent_id"])
    try:
        limit = int(request.query.get("limit", DEFAULT_FEED_LIMIT))
    except ValueError:
        return _error(400, "limit must be an integer")
    return _json([item.model_dump(mode="json") for item in state.feed.latest(limit)])


async def handle_positions(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    state = scheduler.require_engine().store.get(request.match_info["agent_id"])
    return _json([p.model_dump(mode="json") for p in state.positions])


async def handle_risk(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    state = scheduler.require_engine().store.get(request.match_info["agent_id"])
    return _json(
        {
            "exposure": state.exposure,
            "drawdown": state.drawdown,
            "turnover": state.turnover,
            "status": classify_status(state.drawdown, state.turnover).value,
        }
    )


async def handle_add_note(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    agent_id = request.match_info["agent_id"]
    body = await _read_json_object(request)
    text = body.get("text")
    if not isinstance(text, str):
        return _error(400, "text must be a string")
    note = scheduler.add_note(agent_id, text)
    if note is None:
        return web.Response(status=204)
    return _json(note.model_dump(mode="json"), status=201)


async def handle_get_control(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    return _json(scheduler.view.to_dict())


async def handle_post_control(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    body = await _read_json_object(request)

    # Validate everything before applying anything
    if "paused" in body and not isinstance(body["paused"], bool):
        return _error(400, "paused must be a boolean")
    new_range: TimeRange | None = None
    if "range" in body:
        try:
            new_range = TimeRange.parse(str(body["range"]))
        except ValueError:
            return _error(400, f"unknown range: {body['range']!r}")
    selected = body.get("selected_entity")
    if "selected_entity" in body and not isinstance(selected, str):
        return _error(400, "selected_entity must be a string")

    if selected is not None:
        scheduler.select(selected)
    if new_range is not None:
        scheduler.set_range(new_range)
    if "paused" in body:
        if body["paused"]:
            scheduler.pause()
        else:
            scheduler.resume()

    return _json(scheduler.view.to_dict())


def _make_metrics_handler(registry: CollectorRegistry) -> _Handler:
    """Create GET /metrics handler bound to a registry."""

    async def handler(request: web.Request) -> web.Response:
        return web.Response(
            body=generate_latest(registry),
            content_type="text/plain; version=0.0.4",
            charset="utf-8",
        )

    return handler


async def handle_healthz(request: web.Request) -> web.Response:
    scheduler = request.app[SCHEDULER_KEY]
    return _json(scheduler.health())


def create_app(
    scheduler: TickScheduler,
    registry: CollectorRegistry | None = None,
) -> web.Application:
    """
    Create the aiohttp Application.

    Args:
        scheduler: Scheduler owning the source, view state and latest snapshot.
        registry: Registry served on /metrics. Defaults to the scheduler
            exporter's registry; /metrics is omitted when neither exists.

    Returns:
        aiohttp.web.Application ready to be started.
    """
    app = web.Application(middlewares=[_error_middleware])
    app[SCHEDULER_KEY] = scheduler

    app.router.add_get("/api/snapshot", handle_snapshot)
    app.router.add_get("/api/leaderboard", handle_leaderboard)
    app.router.add_get("/api/series", handle_series)
    app.router.add_get("/api/agents", handle_agents)
    app.router.add_get("/api/agents/{agent_id}/feed", handle_feed)
    app.router.add_get("/api/agents/{agent_id}/positions", handle_positions)
    app.router.add_get("/api/agents/{agent_id}/risk", handle_risk)
    app.router.add_post("/api/agents/{agent_id}/notes", handle_add_note)
    app.router.add_get("/api/control", handle_get_control)
    app.router.add_post("/api/control", handle_post_control)
    app.router.add_get("/healthz", handle_healthz)

    if registry is None and scheduler.exporter is not None:
        registry = scheduler.exporter.registry
    if registry is not None:
        app.router.add_get("/metrics", _make_metrics_handler(registry))
    return app


async def start_server(
    app: web.Application,
    host: str = "127.0.0.1",
    port: int = 8080,
) -> web.AppRunner:
    """
    Start serving ``app``.

    Returns:
        AppRunner (call stop_server(runner) on shutdown).
    """
    runner = web.AppRunner(app, access_log=None)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("HTTP server started on http://%s:%d", host, port)
    return runner


async def stop_server(runner: web.AppRunner) -> None:
    """Stop the HTTP server."""
    await runner.cleanup()
    logger.info("HTTP server stopped")
