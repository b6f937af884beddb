"""Dispatch of task events to the channels named by their routing keys."""

import asyncio
import logging

from tasknotify.builders import PayloadBuilder
from tasknotify.channels.base import BaseNotifier
from tasknotify.filters import EventFilter
from tasknotify.models.event import TaskEvent, TaskStatus
from tasknotify.models.outcome import DeliveryResult, DispatchOutcome, DispatchState
from tasknotify.models.routes import Route, parse_route
from tasknotify.models.task import TaskDefinition
from tasknotify.queue import TaskLookup

logger = logging.getLogger(__name__)


class DispatchError(RuntimeError):
    """One or more deliveries of an event failed.

    Deliveries that succeeded before the failure are not undone, so a
    redelivered event may notify those channels twice.
    """

    def __init__(self, outcome: DispatchOutcome):
        failed = outcome.failed
        super().__init__(
            f"{len(failed)}/{len(outcome.deliveries)} deliveries failed for task {outcome.task_id}: "
            + "; ".join(f"{d.routing_key}: {d.error}" for d in failed)
        )
        self.outcome = outcome


class NotificationDispatcher:
    """Routes a task event to every channel whose route matches it."""

    def __init__(
        self,
        queue: TaskLookup,
        notifier: BaseNotifier,
        builder: PayloadBuilder,
        event_filter: EventFilter | None = None,
        route_prefix: str = "route",
        route_namespace: str | None = None,
    ):
        self._queue = queue
        self._notifier = notifier
        self._builder = builder
        self._filter = event_filter or EventFilter()
        self._route_prefix = route_prefix
        self._route_namespace = route_namespace

    def match_routes(self, event: TaskEvent) -> list[tuple[str, Route]]:
        """Parse every routing key and keep the recognized routes that fire."""
        matched: list[tuple[str, Route]] = []
        for key in event.routes:
            route = parse_route(key, self._route_prefix, self._route_namespace)
            if route is None or not route.recognized:
                logger.debug(f"Ignoring routing key {key}")
                continue
            if route.fires(event.state):
                matched.append((key, route))
        return matched

    async def _deliver(self, task: TaskDefinition, status: TaskStatus, route: Route) -> None:
        payload = self._builder.build(task, status, route)
        if payload is None:
            return
        await self._notifier.deliver(payload)

    async def dispatch(self, event: TaskEvent) -> DispatchOutcome:
        """Deliver every matching route of event concurrently.

        Raises DispatchError if any delivery failed, after all of them have
        run. Task lookup errors propagate as they are.
        """
        outcome = DispatchOutcome(task_id=event.task_id)

        if self._filter.suppress(event):
            outcome.state = DispatchState.FILTERED_OUT
            return outcome

        matched = self.match_routes(event)
        outcome.state = DispatchState.ROUTES_MATCHED
        if not matched:
            logger.info(f"No matching routes for task {event.task_id} ({event.state.value})")
            outcome.state = DispatchState.DELIVERED
            return outcome

        task = await self._queue.task(event.task_id)

        results = await asyncio.gather(
            *(self._deliver(task, event.status, route) for _, route in matched),
            return_exceptions=True,
        )

        first_error: BaseException | None = None
        for (key, route), result in zip(matched, results):
            delivery = DeliveryResult(routing_key=key, kind=route.kind, target=route.target)
            if isinstance(result, BaseException):
                logger.error(f"Delivery to {route.kind.value} {route.target} failed for task {event.task_id}: {result!r}")
                delivery.error = str(result) or type(result).__name__
                first_error = first_error or result
            else:
                delivery.delivered = True
            outcome.deliveries.append(delivery)

        if first_error is not None:
            outcome.state = DispatchState.DELIVERY_FAILED
            raise DispatchError(outcome) from first_error

        outcome.state = DispatchState.DELIVERED
        logger.info(f"Delivered {len(outcome.deliveries)} notification(s) for task {event.task_id}")
        return outcome
