"""Parser for task messages forwarded from pulse."""

from typing import Any

from tasknotify.models.event import TaskEvent, TaskStatus
from tasknotify.sources.base import BaseSource

# exchanges the queue publishes terminal task states on
TASK_EXCHANGES = {
    "exchange/taskcluster-queue/v1/task-completed": "completed",
    "exchange/taskcluster-queue/v1/task-failed": "failed",
    "exchange/taskcluster-queue/v1/task-exception": "exception",
}


class PulseSource(BaseSource):
    """Parser for queue task-completed/failed/exception messages.

    Pulse reports the CC'd routes of a message without their ``route.``
    prefix; they are restored here so routing keys always carry it.
    """

    def __init__(self, route_prefix: str = "route"):
        self._route_prefix = route_prefix

    @property
    def name(self) -> str:
        return "pulse"

    def parse(self, payload: dict[str, Any]) -> TaskEvent:
        exchange = payload.get("exchange")
        if exchange is not None and exchange not in TASK_EXCHANGES:
            raise ValueError(f"Unexpected exchange: {exchange}")

        body = payload.get("payload") or {}
        if "status" not in body:
            raise ValueError("Message payload has no task status")
        status = TaskStatus.model_validate(body["status"])

        expected = TASK_EXCHANGES.get(exchange) if exchange else None
        if expected and status.state.value != expected:
            raise ValueError(f"Status {status.state.value} published on {exchange}")

        routes = [self._qualify(route) for route in payload.get("routes", [])]
        return TaskEvent(status=status, routes=routes)

    def _qualify(self, route: str) -> str:
        if route.startswith(f"{self._route_prefix}."):
            return route
        return f"{self._route_prefix}.{route}"
