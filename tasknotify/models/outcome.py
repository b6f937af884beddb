"""Per-event dispatch outcome."""

from enum import Enum

from pydantic import BaseModel, Field

from tasknotify.models.routes import ChannelKind


class DispatchState(str, Enum):
    RECEIVED = "received"
    FILTERED_OUT = "filtered_out"
    ROUTES_MATCHED = "routes_matched"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"


class DeliveryResult(BaseModel):
    """Result of delivering one matching route."""

    routing_key: str
    kind: ChannelKind
    target: str
    delivered: bool = False
    error: str | None = None


class DispatchOutcome(BaseModel):
    task_id: str
    state: DispatchState = DispatchState.RECEIVED
    deliveries: list[DeliveryResult] = Field(default_factory=list)

    @property
    def failed(self) -> list[DeliveryResult]:
        return [d for d in self.deliveries if not d.delivered]
