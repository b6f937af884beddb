"""Task definitions fetched from the queue."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskMetadata(BaseModel):
    """Display metadata of a task."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = ""
    description: str = ""
    owner: str = ""
    source: str = ""


class TaskDefinition(BaseModel):
    """Task definition as returned by the queue.

    Only the fields notifications need are typed; everything else is kept so
    user templates can reach the whole definition.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    task_group_id: str = Field(default="", alias="taskGroupId")
    metadata: TaskMetadata = Field(default_factory=TaskMetadata)
    extra: dict[str, Any] = Field(default_factory=dict)

    @property
    def notify(self) -> dict[str, Any]:
        """The ``extra.notify`` block, empty when the task defines none."""
        notify = self.extra.get("notify")
        return notify if isinstance(notify, dict) else {}

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
