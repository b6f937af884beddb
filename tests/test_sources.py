"""Unit tests for PulseSource."""

from __future__ import annotations

import pytest
from conftest import TASK_ID

from tasknotify.models.event import TaskState
from tasknotify.sources.pulse import PulseSource


def _message(state: str = "failed", exchange: str | None = "exchange/taskcluster-queue/v1/task-failed") -> dict:
    message = {
        "routingKey": "primary.x",
        "routes": ["notify.irc-user.alice.on-failed", "route.notify.slack-user.U01.on-any"],
        "payload": {
            "status": {
                "taskId": TASK_ID,
                "state": state,
                "runs": [{"runId": 0, "state": state, "reasonResolved": state}],
                "deadline": "2026-10-20T00:00:00.000Z",
            },
            "runId": 0,
        },
    }
    if exchange is not None:
        message["exchange"] = exchange
    return message


class TestPulseSource:
    def test_parses_status_and_qualifies_routes(self):
        event = PulseSource().parse(_message())
        assert event.task_id == TASK_ID
        assert event.state is TaskState.FAILED
        assert event.routes == [
            "route.notify.irc-user.alice.on-failed",
            "route.notify.slack-user.U01.on-any",
        ]

    def test_keeps_unknown_status_fields(self):
        event = PulseSource().parse(_message())
        assert event.status.to_json()["deadline"] == "2026-10-20T00:00:00.000Z"

    def test_rejects_unknown_exchange(self):
        with pytest.raises(ValueError, match="Unexpected exchange"):
            PulseSource().parse(_message(exchange="exchange/taskcluster-queue/v1/task-pending"))

    def test_rejects_state_not_matching_exchange(self):
        with pytest.raises(ValueError):
            PulseSource().parse(_message(state="completed"))

    def test_rejects_non_terminal_state(self):
        with pytest.raises(ValueError):
            PulseSource().parse(_message(state="running", exchange=None))

    def test_rejects_missing_status(self):
        with pytest.raises(ValueError, match="no task status"):
            PulseSource().parse({"routes": [], "payload": {}})
