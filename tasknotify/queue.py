"""Task definition lookup against the queue service."""

import logging
from typing import Protocol

import httpx

from tasknotify import urls
from tasknotify.models.task import TaskDefinition

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """The queue does not know the task."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TaskLookup(Protocol):
    async def task(self, task_id: str) -> TaskDefinition:
        ...


class QueueClient:
    """Fetches task definitions from ``<rootUrl>/api/queue/v1``."""

    def __init__(
        self,
        root_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._root_url = root_url
        self._timeout = timeout
        self._transport = transport

    async def task(self, task_id: str) -> TaskDefinition:
        url = urls.api(self._root_url, "queue", "v1", f"task/{task_id}")
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(url)
            if response.status_code == httpx.codes.NOT_FOUND:
                raise TaskNotFoundError(task_id)
            response.raise_for_status()
            data = response.json()

        logger.debug(f"Loaded task definition for {task_id}")
        return TaskDefinition.model_validate(data)
