"""Rendering of user-supplied notification templates.

Task owners can customise messages with json-e templates in
``task.extra.notify``. A broken template must not take down the other
channels of the same event, so authoring mistakes are turned into a readable
message while anything else still propagates.
"""

import logging
from typing import Any, Protocol

import jsone

logger = logging.getLogger(__name__)

FALLBACK_PREFIX = "Error parsing custom message"

# json-e error classes caused by a malformed template rather than by us
AUTHORING_ERRORS = frozenset({"SyntaxError", "BuiltinError", "InterpreterError", "TemplateError"})


class TemplateAuthoringError(Exception):
    """A template could not be evaluated because it is malformed."""

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.message = message


class TemplateEngine(Protocol):
    def evaluate(self, template: Any, context: dict[str, Any]) -> Any:
        """Evaluate template against context.

        Raises TemplateAuthoringError for malformed templates.
        """
        ...


class JsoneEngine:
    """TemplateEngine backed by json-e."""

    def evaluate(self, template: Any, context: dict[str, Any]) -> Any:
        try:
            return jsone.render(template, context)
        except jsone.JSONTemplateError as e:
            kind = type(e).__name__
            if kind in AUTHORING_ERRORS:
                raise TemplateAuthoringError(kind, str(e)) from e
            raise


class TemplateRenderer:
    """Evaluates notification templates with a pluggable engine."""

    def __init__(self, engine: TemplateEngine | None = None):
        self._engine = engine or JsoneEngine()

    def evaluate(self, template: Any, context: dict[str, Any]) -> Any:
        """Evaluate without recovery; authoring errors propagate."""
        return self._engine.evaluate(template, context)

    def render_message(self, template: Any, context: dict[str, Any]) -> Any:
        """Evaluate a message template, degrading to an error message."""
        try:
            return self._engine.evaluate(template, context)
        except TemplateAuthoringError as e:
            logger.warning(f"Custom message template failed ({e.kind}): {e.message}")
            return f"{FALLBACK_PREFIX}: {e.message}"
