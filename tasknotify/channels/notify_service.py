"""Delivery through the notify service HTTP API."""

import logging
from typing import Any

import httpx

from tasknotify import urls
from tasknotify.channels.base import BaseNotifier
from tasknotify.models.payloads import EmailPayload, IrcPayload, PulsePayload, SlackPayload

logger = logging.getLogger(__name__)


class NotifyServiceNotifier(BaseNotifier):
    """Posts each payload to ``<rootUrl>/api/notify/v1/<channel>``."""

    def __init__(
        self,
        root_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._root_url = root_url
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "notify-service"

    async def _post(self, endpoint: str, body: dict[str, Any]) -> None:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(urls.api(self._root_url, "notify", "v1", endpoint), json=body)
            response.raise_for_status()
        logger.info(f"Notification sent via {endpoint}")

    async def irc(self, payload: IrcPayload) -> None:
        await self._post("irc", payload.to_json())

    async def slack(self, payload: SlackPayload) -> None:
        await self._post("slack", payload.to_json())

    async def pulse(self, payload: PulsePayload) -> None:
        await self._post("pulse", payload.to_json())

    async def email(self, payload: EmailPayload) -> None:
        await self._post("email", payload.to_json())
