"""Suppression of events that should not notify anyone."""

import logging

from pydantic import BaseModel, ConfigDict, Field

from tasknotify.models.event import TaskEvent, TaskState

logger = logging.getLogger(__name__)


class FilterConfig(BaseModel):
    """Which resolution reasons of an exception silence notifications."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ignore_task_reason_resolved: frozenset[str] = Field(
        default=frozenset({"canceled"}),
        alias="ignoreTaskReasonResolved",
    )


class EventFilter:
    """Decides whether an event is suppressed before any routing."""

    def __init__(self, config: FilterConfig | None = None):
        self._config = config or FilterConfig()

    def suppress(self, event: TaskEvent) -> bool:
        if event.state is not TaskState.EXCEPTION:
            return False

        last_run = event.status.last_run
        reason = last_run.reason_resolved if last_run else None
        # e.g. a canceled task was a deliberate user action
        if reason in self._config.ignore_task_reason_resolved:
            logger.info(f"Suppressing notifications for task {event.task_id}: resolved as {reason}")
            return True
        return False
