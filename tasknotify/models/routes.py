"""Routing keys and the routes parsed from them.

A routing key looks like::

    route.notify.irc-channel.ops.on-failed
    route.notify.email.dev.example.com.on-any

The first segment is a fixed prefix, the second a namespace, the third the
channel kind and the last one the delivery condition. Everything in between
names the target.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from tasknotify.models.event import TaskState

CONDITION_MARKER = "on-"
ANY_STATE = "any"
MIN_SEGMENTS = 5


class ChannelKind(str, Enum):
    """Channel kinds a routing key can address."""

    IRC_USER = "irc-user"
    IRC_CHANNEL = "irc-channel"
    SLACK_USER = "slack-user"
    SLACK_CHANNEL = "slack-channel"
    PULSE = "pulse"
    EMAIL = "email"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_segment(cls, segment: str) -> "ChannelKind":
        if segment in _KIND_ALIASES:
            return _KIND_ALIASES[segment]
        try:
            kind = cls(segment)
        except ValueError:
            return cls.UNRECOGNIZED
        return kind

    @property
    def dotted_target(self) -> bool:
        """Whether the target may span several segments."""
        return self in (ChannelKind.PULSE, ChannelKind.EMAIL)


_KIND_ALIASES = {"pulse-republish": ChannelKind.PULSE}


class Route(BaseModel):
    """A channel target and the condition under which it is notified."""

    model_config = ConfigDict(frozen=True)

    kind: ChannelKind
    target: str
    condition: str

    @property
    def recognized(self) -> bool:
        return self.kind is not ChannelKind.UNRECOGNIZED

    def fires(self, state: TaskState) -> bool:
        return self.condition == ANY_STATE or self.condition == state.value


def parse_route(key: str, prefix: str = "route", namespace: str | None = None) -> Route | None:
    """Parse a routing key, returning None when it is not a notify route."""
    segments = key.split(".")
    if len(segments) < MIN_SEGMENTS or segments[0] != prefix:
        return None
    if namespace is not None and segments[1] != namespace:
        return None

    decider = segments[-1]
    if not decider.startswith(CONDITION_MARKER):
        return None

    kind = ChannelKind.from_segment(segments[2])
    if kind.dotted_target:
        target = ".".join(segments[3:-1])
    else:
        target = segments[3]

    return Route(kind=kind, target=target, condition=decider[len(CONDITION_MARKER):])
