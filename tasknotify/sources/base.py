"""Base class for bus message parsers."""

from abc import ABC, abstractmethod
from typing import Any

from tasknotify.models.event import TaskEvent


class BaseSource(ABC):
    """Abstract base class for bus message parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier."""
        ...

    @abstractmethod
    def parse(self, payload: dict[str, Any]) -> TaskEvent:
        """Parse a forwarded bus message into a TaskEvent."""
        ...
