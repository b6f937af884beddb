"""Channel payloads handed to the notifier."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChannelPayload(BaseModel):
    """Base class for a single delivery request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class IrcPayload(ChannelPayload):
    user: str | None = None
    channel: str | None = None
    message: str


class SlackPayload(ChannelPayload):
    user: str | None = None
    channel: str | None = None
    message: str


class PulsePayload(ChannelPayload):
    routing_key: str = Field(alias="routingKey")
    message: dict[str, Any]


class EmailPayload(ChannelPayload):
    address: str
    content: str
    subject: str
    link: Any = None
    template: Any = "simple"
