"""Channel payload builders.

Each builder turns a task, its terminal status and a parsed route into the
request for one channel. Builders do no I/O.
"""

from typing import Any, Callable

from tasknotify import urls
from tasknotify.models.event import TaskStatus
from tasknotify.models.payloads import (
    ChannelPayload,
    EmailPayload,
    IrcPayload,
    PulsePayload,
    SlackPayload,
)
from tasknotify.models.routes import ChannelKind, Route
from tasknotify.models.task import TaskDefinition
from tasknotify.render import TemplateRenderer

DEFAULT_EMAIL_TEMPLATE = "simple"

EMAIL_CONTENT = """\
Task [`{task_id}`]({href}) in task-group [`{task_group_id}`]({group_href}) is complete.

**Status:** {state} (in {run_count} run{plural})
**Name:** {name}
**Description:** {description}
**Owner:** {owner}
**Source:** {source}"""

# template field in task.extra.notify for each chat kind
MESSAGE_TEMPLATE_FIELDS = {
    ChannelKind.IRC_USER: "ircUserMessage",
    ChannelKind.IRC_CHANNEL: "ircChannelMessage",
    ChannelKind.SLACK_USER: "slackUserMessage",
    ChannelKind.SLACK_CHANNEL: "slackChannelMessage",
}


class PayloadBuilder:
    """Builds the channel payload for a matching route."""

    def __init__(self, renderer: TemplateRenderer, root_url: str):
        self._renderer = renderer
        self._root_url = root_url
        self._builders: dict[ChannelKind, Callable[[TaskDefinition, TaskStatus, Route], ChannelPayload]] = {
            ChannelKind.IRC_USER: self._build_irc,
            ChannelKind.IRC_CHANNEL: self._build_irc,
            ChannelKind.SLACK_USER: self._build_slack,
            ChannelKind.SLACK_CHANNEL: self._build_slack,
            ChannelKind.PULSE: self._build_pulse,
            ChannelKind.EMAIL: self._build_email,
        }

    def build(self, task: TaskDefinition, status: TaskStatus, route: Route) -> ChannelPayload | None:
        """Build the payload for route, or None for unrecognized kinds."""
        builder = self._builders.get(route.kind)
        if builder is None:
            return None
        return builder(task, status, route)

    def _context(self, task: TaskDefinition, status: TaskStatus) -> dict[str, Any]:
        return {"task": task.to_json(), "status": status.to_json()}

    def _href(self, status: TaskStatus) -> str:
        return urls.task_url(self._root_url, status.task_id)

    def default_message(self, task: TaskDefinition, status: TaskStatus) -> str:
        return (
            f'Task "{task.metadata.name}" complete with status '
            f"'{status.state.value}'. Inspect: {self._href(status)}"
        )

    def _chat_message(self, task: TaskDefinition, status: TaskStatus, route: Route) -> str:
        field = MESSAGE_TEMPLATE_FIELDS[route.kind]
        if field in task.notify:
            return self._renderer.render_message(task.notify[field], self._context(task, status))
        return self.default_message(task, status)

    def _build_irc(self, task: TaskDefinition, status: TaskStatus, route: Route) -> IrcPayload:
        message = self._chat_message(task, status, route)
        if route.kind is ChannelKind.IRC_USER:
            return IrcPayload(user=route.target, message=message)
        return IrcPayload(channel=route.target, message=message)

    def _build_slack(self, task: TaskDefinition, status: TaskStatus, route: Route) -> SlackPayload:
        message = self._chat_message(task, status, route)
        if route.kind is ChannelKind.SLACK_USER:
            return SlackPayload(user=route.target, message=message)
        return SlackPayload(channel=route.target, message=message)

    def _build_pulse(self, task: TaskDefinition, status: TaskStatus, route: Route) -> PulsePayload:
        return PulsePayload(routing_key=route.target, message=status.to_json())

    def _build_email(self, task: TaskDefinition, status: TaskStatus, route: Route) -> EmailPayload:
        href = self._href(status)
        task_group_id = task.task_group_id or status.task_group_id or ""
        run_count = len(status.runs)
        content = EMAIL_CONTENT.format(
            task_id=status.task_id,
            href=href,
            task_group_id=task_group_id,
            group_href=urls.task_group_url(self._root_url, task_group_id),
            state=status.state.value,
            run_count=run_count,
            plural="" if run_count == 1 else "s",
            name=task.metadata.name,
            description=task.metadata.description,
            owner=task.metadata.owner,
            source=task.metadata.source,
        )
        subject = f"Task {status.state.value}: {task.metadata.name} - {status.task_id}"
        link: Any = {"text": "Inspect Task", "href": href}
        template: Any = DEFAULT_EMAIL_TEMPLATE

        extra = task.notify.get("email")
        if isinstance(extra, dict):
            context = self._context(task, status)
            if extra.get("content"):
                content = self._renderer.render_message(extra["content"], context)
            if extra.get("subject"):
                subject = self._renderer.render_message(extra["subject"], context)
            # malformed link or template definitions are not recovered
            if extra.get("link"):
                link = self._renderer.evaluate(extra["link"], context)
            if extra.get("template"):
                template = self._renderer.evaluate(extra["template"], context)

        return EmailPayload(
            address=route.target,
            content=content,
            subject=subject,
            link=link,
            template=template,
        )
