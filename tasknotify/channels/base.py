"""Base class for notification delivery."""

import logging
from abc import ABC, abstractmethod

from tasknotify.models.payloads import (
    ChannelPayload,
    EmailPayload,
    IrcPayload,
    PulsePayload,
    SlackPayload,
)

logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    """Delivers channel payloads. Every method raises on failure."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Notifier name for logging."""
        ...

    @abstractmethod
    async def irc(self, payload: IrcPayload) -> None:
        ...

    @abstractmethod
    async def slack(self, payload: SlackPayload) -> None:
        ...

    @abstractmethod
    async def pulse(self, payload: PulsePayload) -> None:
        ...

    @abstractmethod
    async def email(self, payload: EmailPayload) -> None:
        ...

    async def deliver(self, payload: ChannelPayload) -> None:
        """Submit payload through the method for its channel."""
        if isinstance(payload, IrcPayload):
            await self.irc(payload)
        elif isinstance(payload, SlackPayload):
            await self.slack(payload)
        elif isinstance(payload, PulsePayload):
            await self.pulse(payload)
        elif isinstance(payload, EmailPayload):
            await self.email(payload)
        else:
            raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
        logger.debug(f"{self.name} delivered {type(payload).__name__}")
