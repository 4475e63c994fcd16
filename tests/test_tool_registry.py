from __future__ import annotations

from typing import Optional

import pytest
from pydantic import BaseModel

from agentic_editor_prototype.messaging.content_blocks import ToolUseBlock
from agentic_editor_prototype.tool_registry import (
    ToolDefinition,
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistry,
)


class EchoInput(BaseModel):
    text: str
    repeat: Optional[int] = None


def _echo(arguments: EchoInput) -> str:
    return arguments.text * (arguments.repeat or 1)


def _explode(arguments: EchoInput) -> str:
    raise RuntimeError(f"cannot handle {arguments.text}")


def _registry() -> ToolRegistry:
    return ToolRegistry(
        [
            ToolDefinition(name="echo", description="Echo text", input_model=EchoInput, function=_echo),
            ToolDefinition(name="explode", description="Always fails", input_model=EchoInput, function=_explode),
        ]
    )


def test_duplicate_names_rejected() -> None:
    definition = ToolDefinition(name="echo", description="", input_model=EchoInput, function=_echo)
    with pytest.raises(ValueError, match="duplicate tool name: echo"):
        ToolRegistry([definition, definition])


def test_resolve_unknown_tool_raises() -> None:
    with pytest.raises(ToolNotFoundError):
        _registry().resolve("missing")


def test_execute_accepts_mapping_json_and_bytes() -> None:
    registry = _registry()

    assert registry.execute("echo", {"text": "ab", "repeat": 2}) == "abab"
    assert registry.execute("echo", '{"text": "x"}') == "x"
    assert registry.execute("echo", b'{"text": "y"}') == "y"


def test_execute_reports_invalid_input() -> None:
    registry = _registry()

    with pytest.raises(ToolExecutionError, match="invalid input"):
        registry.execute("echo", {"repeat": 2})
    with pytest.raises(ToolExecutionError):
        registry.execute("echo", "{not json")
    with pytest.raises(ToolExecutionError, match="JSON object"):
        registry.execute("echo", "[1, 2]")


def test_dispatch_converts_failures_into_error_results() -> None:
    registry = _registry()

    missing = registry.dispatch(ToolUseBlock(id="t1", name="missing", input={}))
    failed = registry.dispatch(ToolUseBlock(id="t2", name="explode", input={"text": "it"}))
    malformed = registry.dispatch(ToolUseBlock(id="t3", name="echo", input="{oops"))

    assert (missing.tool_use_id, missing.is_error, missing.content) == ("t1", True, "tool not found")
    assert failed.is_error is True
    assert failed.content == "RuntimeError: cannot handle it"
    assert malformed.is_error is True


def test_dispatch_success() -> None:
    result = _registry().dispatch(ToolUseBlock(id="t9", name="echo", input={"text": "ok"}))

    assert result.tool_use_id == "t9"
    assert result.is_error is False
    assert result.content == "ok"


def test_registry_iteration_preserves_order() -> None:
    registry = _registry()

    assert registry.names == ["echo", "explode"]
    assert [d.name for d in registry] == ["echo", "explode"]
    assert "echo" in registry and "nope" not in registry
    assert len(registry) == 2
