"""Shared test fixtures for tasknotify."""

from __future__ import annotations

from typing import Any

import pytest

from tasknotify.builders import PayloadBuilder
from tasknotify.channels.base import BaseNotifier
from tasknotify.filters import EventFilter, FilterConfig
from tasknotify.models.event import TaskEvent, TaskStatus
from tasknotify.models.payloads import (
    ChannelPayload,
    EmailPayload,
    IrcPayload,
    PulsePayload,
    SlackPayload,
)
from tasknotify.models.task import TaskDefinition
from tasknotify.render import TemplateRenderer
from tasknotify.router import NotificationDispatcher

ROOT_URL = "https://tc.example.com"
TASK_ID = "fN1SbArXTPSVFNUvaOlinQ"
TASK_GROUP_ID = "Ds9ArHD4QHaxxXuW8BQWGQ"


class RecordingNotifier(BaseNotifier):
    """A notifier that records payloads and can fail selected channels."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.sent: list[ChannelPayload] = []
        self._fail_on = fail_on or set()

    @property
    def name(self) -> str:
        return "recording"

    async def _record(self, channel: str, payload: ChannelPayload) -> None:
        if channel in self._fail_on:
            raise RuntimeError(f"{channel} transport down")
        self.sent.append(payload)

    async def irc(self, payload: IrcPayload) -> None:
        await self._record("irc", payload)

    async def slack(self, payload: SlackPayload) -> None:
        await self._record("slack", payload)

    async def pulse(self, payload: PulsePayload) -> None:
        await self._record("pulse", payload)

    async def email(self, payload: EmailPayload) -> None:
        await self._record("email", payload)


class StaticQueue:
    """Task lookup returning a fixed definition."""

    def __init__(self, task: TaskDefinition) -> None:
        self.task_definition = task
        self.lookups: list[str] = []

    async def task(self, task_id: str) -> TaskDefinition:
        self.lookups.append(task_id)
        return self.task_definition


def make_status(state: str = "failed", reasons: list[str | None] | None = None) -> TaskStatus:
    reasons = reasons if reasons is not None else ["failed"]
    return TaskStatus.model_validate(
        {
            "taskId": TASK_ID,
            "taskGroupId": TASK_GROUP_ID,
            "state": state,
            "runs": [
                {"runId": i, "state": state, "reasonCreated": "scheduled", "reasonResolved": reason}
                for i, reason in enumerate(reasons)
            ],
        }
    )


def make_event(state: str = "failed", routes: list[str] | None = None, reasons: list[str | None] | None = None) -> TaskEvent:
    return TaskEvent(status=make_status(state, reasons), routes=routes or [])


def make_task(notify: dict[str, Any] | None = None) -> TaskDefinition:
    data: dict[str, Any] = {
        "taskGroupId": TASK_GROUP_ID,
        "metadata": {
            "name": "build-linux",
            "description": "Build the linux artifacts",
            "owner": "dev@example.com",
            "source": "https://github.com/example/repo",
        },
        "extra": {},
    }
    if notify is not None:
        data["extra"]["notify"] = notify
    return TaskDefinition.model_validate(data)


@pytest.fixture
def task() -> TaskDefinition:
    return make_task()


@pytest.fixture
def builder() -> PayloadBuilder:
    return PayloadBuilder(TemplateRenderer(), ROOT_URL)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def make_dispatcher(
    task: TaskDefinition,
    notifier: BaseNotifier,
    ignore: set[str] | None = None,
) -> tuple[NotificationDispatcher, StaticQueue]:
    queue = StaticQueue(task)
    config = FilterConfig(ignore_task_reason_resolved=frozenset(ignore if ignore is not None else {"canceled"}))
    dispatcher = NotificationDispatcher(
        queue=queue,
        notifier=notifier,
        builder=PayloadBuilder(TemplateRenderer(), ROOT_URL),
        event_filter=EventFilter(config),
    )
    return dispatcher, queue
