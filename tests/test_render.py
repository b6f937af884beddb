"""Unit tests for TemplateRenderer and the json-e engine."""

from __future__ import annotations

from typing import Any

import pytest

from tasknotify.render import JsoneEngine, TemplateAuthoringError, TemplateRenderer

CONTEXT = {
    "task": {"metadata": {"name": "build-linux"}},
    "status": {"state": "failed", "runs": [{"runId": 0}]},
}


class _RaisingEngine:
    def __init__(self, error: Exception) -> None:
        self._error = error

    def evaluate(self, template: Any, context: dict[str, Any]) -> Any:
        raise self._error


class TestTemplateRenderer:
    def test_renders_interpolation(self):
        renderer = TemplateRenderer()
        result = renderer.render_message("${task.metadata.name} is ${status.state}", CONTEXT)
        assert result == "build-linux is failed"

    def test_renders_structured_template(self):
        renderer = TemplateRenderer()
        result = renderer.evaluate({"text": "Logs", "href": {"$eval": "'https://x/' + status.state"}}, CONTEXT)
        assert result == {"text": "Logs", "href": "https://x/failed"}

    def test_syntax_error_is_recovered(self):
        renderer = TemplateRenderer()
        result = renderer.render_message({"$eval": "task.metadata.name +"}, CONTEXT)
        assert isinstance(result, str)
        assert result.startswith("Error parsing custom message:")

    def test_unknown_context_value_is_recovered(self):
        renderer = TemplateRenderer()
        result = renderer.render_message({"$eval": "nosuchthing.name"}, CONTEXT)
        assert result.startswith("Error parsing custom message:")

    def test_fallback_carries_error_detail(self):
        renderer = TemplateRenderer(_RaisingEngine(TemplateAuthoringError("SyntaxError", "unexpected EOF")))
        assert renderer.render_message("x", CONTEXT) == "Error parsing custom message: unexpected EOF"

    def test_internal_errors_propagate(self):
        renderer = TemplateRenderer(_RaisingEngine(RuntimeError("boom")))
        with pytest.raises(RuntimeError, match="boom"):
            renderer.render_message("x", CONTEXT)

    def test_evaluate_does_not_recover(self):
        renderer = TemplateRenderer()
        with pytest.raises(TemplateAuthoringError):
            renderer.evaluate({"$eval": "status.state +"}, CONTEXT)


class TestJsoneEngine:
    def test_authoring_error_keeps_kind(self):
        with pytest.raises(TemplateAuthoringError) as excinfo:
            JsoneEngine().evaluate({"$eval": "1 +"}, {})
        assert excinfo.value.kind in {"SyntaxError", "TemplateError", "InterpreterError", "BuiltinError"}
        assert excinfo.value.__cause__ is not None
