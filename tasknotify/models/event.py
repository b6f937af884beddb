"""Task lifecycle events consumed from the bus.

A task reaching a terminal state is published once with its full status
record and the routing keys the task author attached to it. The records here
keep every field the queue sends so the status can be republished verbatim.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskState(str, Enum):
    """Terminal task states that trigger notifications."""

    COMPLETED = "completed"
    FAILED = "failed"
    EXCEPTION = "exception"


class RunRecord(BaseModel):
    """A single run of a task."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    run_id: int = Field(default=0, alias="runId")
    state: str = Field(default="")
    reason_created: str | None = Field(default=None, alias="reasonCreated")
    reason_resolved: str | None = Field(default=None, alias="reasonResolved")


class TaskStatus(BaseModel):
    """Status record of a task in a terminal state."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    task_id: str = Field(alias="taskId")
    task_group_id: str | None = Field(default=None, alias="taskGroupId")
    state: TaskState
    runs: list[RunRecord] = Field(default_factory=list)

    @property
    def last_run(self) -> RunRecord | None:
        return self.runs[-1] if self.runs else None

    def to_json(self) -> dict[str, Any]:
        """Status as it arrived on the bus, camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class TaskEvent(BaseModel):
    """A terminal status together with the routing keys it was published on."""

    model_config = ConfigDict(frozen=True)

    status: TaskStatus
    routes: list[str] = Field(default_factory=list, description="Routing keys attached at publish time")

    @property
    def task_id(self) -> str:
        return self.status.task_id

    @property
    def state(self) -> TaskState:
        return self.status.state
