"""tasknotify - FastAPI application relaying task events to notification channels."""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import httpx
import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tasknotify.builders import PayloadBuilder
from tasknotify.channels.notify_service import NotifyServiceNotifier
from tasknotify.config import Settings, get_settings, load_filter_config
from tasknotify.filters import EventFilter
from tasknotify.models.outcome import DispatchOutcome, DispatchState
from tasknotify.models.routes import ChannelKind
from tasknotify.queue import QueueClient, TaskNotFoundError
from tasknotify.render import TemplateRenderer
from tasknotify.router import DispatchError, NotificationDispatcher
from tasknotify.sources.base import BaseSource
from tasknotify.sources.pulse import PulseSource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global dispatcher instance
dispatcher: NotificationDispatcher | None = None

# Source parsers registry
sources: dict[str, BaseSource] = {}


def build_dispatcher(settings: Settings) -> NotificationDispatcher:
    """Wire a dispatcher from settings."""
    try:
        filter_config = load_filter_config(settings.filter_config_path, settings.default_filter_config())
        logger.info(f"Loaded filter config from {settings.filter_config}")
    except FileNotFoundError:
        filter_config = settings.default_filter_config()
        logger.info(f"No filter config at {settings.filter_config}, using settings")

    return NotificationDispatcher(
        queue=QueueClient(settings.root_url, timeout=settings.http_timeout),
        notifier=NotifyServiceNotifier(settings.root_url, timeout=settings.http_timeout),
        builder=PayloadBuilder(TemplateRenderer(), settings.root_url),
        event_filter=EventFilter(filter_config),
        route_prefix=settings.route_prefix,
        route_namespace=settings.route_namespace,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    global dispatcher

    settings = get_settings()

    # Configure logging level
    logging.getLogger().setLevel(settings.log_level.upper())

    # Register source parsers
    sources["pulse"] = PulseSource(settings.route_prefix)
    logger.info(f"Registered {len(sources)} source parser(s): {list(sources.keys())}")

    try:
        dispatcher = build_dispatcher(settings)
    except Exception as e:
        logger.exception(f"Failed to configure dispatcher: {e}")
        dispatcher = None

    logger.info("tasknotify started")

    yield

    # Cleanup on shutdown
    dispatcher = None
    sources.clear()
    logger.info("tasknotify stopped")


app = FastAPI(
    title="tasknotify",
    description="Relays task completion events to irc, slack, pulse and email",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/channels")
async def list_channels() -> dict[str, list[str]]:
    """List channel kinds routing keys can address."""
    return {"channels": [kind.value for kind in ChannelKind if kind is not ChannelKind.UNRECOGNIZED]}


def _outcome_content(outcome: DispatchOutcome, message: str, result: str) -> dict[str, Any]:
    return {
        "status": result,
        "message": message,
        "taskId": outcome.task_id,
        "state": outcome.state.value,
        "deliveries": [d.model_dump(mode="json") for d in outcome.deliveries],
    }


async def _process_message(source_name: str, payload: dict[str, Any]) -> JSONResponse:
    """Process a bus message forwarded from a specific source."""
    if not dispatcher:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dispatcher not configured.",
        )

    source = sources.get(source_name)
    if not source:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown source: {source_name}",
        )

    try:
        event = source.parse(payload)
    except ValueError as e:
        logger.exception(f"Failed to parse {source_name} message: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid message: {e}",
        )

    logger.info(
        f"Received {source_name} event: task={event.task_id}, state={event.state.value}, "
        f"routes={len(event.routes)}"
    )

    started = time.monotonic()
    try:
        outcome = await dispatcher.dispatch(event)
    except DispatchError as e:
        logger.error(f"Dispatch failed in {time.monotonic() - started:.3f}s: {e}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=_outcome_content(e.outcome, "Failed to deliver to all matched channels", "error"),
        )
    except (TaskNotFoundError, httpx.HTTPError, ValidationError) as e:
        logger.error(f"Task lookup failed for {event.task_id}: {e}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "status": "error",
                "message": f"Task lookup failed: {e}",
                "taskId": event.task_id,
            },
        )

    logger.info(f"Event for task {event.task_id} handled in {time.monotonic() - started:.3f}s")

    if outcome.state is DispatchState.FILTERED_OUT:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=_outcome_content(outcome, "Event suppressed", "filtered"),
        )

    if not outcome.deliveries:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=_outcome_content(outcome, "No matching route found", "discarded"),
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=_outcome_content(outcome, "Event routed successfully", "ok"),
    )


@app.post("/webhook/{source_name}")
async def source_webhook(source_name: str, request: Request) -> JSONResponse:
    """Receive a bus message forwarded from any registered source."""
    payload = await request.json()
    return await _process_message(source_name, payload)


def run() -> None:
    """Run the application using uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "tasknotify.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
