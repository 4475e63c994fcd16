import json
import types

import httpx
import pytest

from agentic_editor_prototype.logging.provider_dump import provider_dump_logger
from agentic_editor_prototype.messaging.content_blocks import Message, TextBlock, ToolUseBlock
from agentic_editor_prototype.provider_runtime import AnthropicMessagesRuntime, ProviderRuntimeError


def _tool_schema():
    return [
        {
            "name": "read_file",
            "description": "Read a file",
            "input_schema": {
                "type": "object",
                "properties": {"path": {"type": "string"}},
                "required": ["path"],
            },
        }
    ]


class FakeMessages:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def _client(messages):
    return types.SimpleNamespace(messages=messages)


def test_anthropic_runtime_normalizes_blocks():
    response = types.SimpleNamespace(
        content=[
            {"type": "text", "text": "Looking"},
            {"type": "tool_use", "id": "toolu_1", "name": "read_file", "input": {"path": "a.txt"}},
            types.SimpleNamespace(type="text", text="!"),
            {"type": "thinking", "thinking": "hmm"},
        ],
        stop_reason="tool_use",
        model="claude-test",
    )
    messages = FakeMessages(response=response)
    runtime = AnthropicMessagesRuntime(_client(messages), model="claude-test", max_tokens=256)

    message = runtime.invoke([Message.user_text("Hi")], _tool_schema())

    assert message.role == "assistant"
    assert message.stop_reason == "tool_use"
    assert message.content == (
        TextBlock("Looking"),
        ToolUseBlock(id="toolu_1", name="read_file", input={"path": "a.txt"}),
        TextBlock("!"),
    )
    request = messages.requests[0]
    assert request["model"] == "claude-test"
    assert request["max_tokens"] == 256
    assert request["tools"] == _tool_schema()
    assert request["messages"] == [{"role": "user", "content": [{"type": "text", "text": "Hi"}]}]
    assert "system" not in request


def test_anthropic_runtime_sends_system_prompt_and_skips_empty_messages():
    messages = FakeMessages(response=types.SimpleNamespace(content=[], stop_reason="end_turn"))
    runtime = AnthropicMessagesRuntime(_client(messages), system_prompt="Be brief.")

    runtime.invoke([Message.user_text("a"), Message(role="assistant", content=()), Message.user_text("b")], None)

    request = messages.requests[0]
    assert request["system"] == "Be brief."
    assert "tools" not in request
    assert [m["role"] for m in request["messages"]] == ["user", "user"]


def test_anthropic_runtime_wraps_errors():
    class FakeStatusError(Exception):
        status_code = 401

    messages = FakeMessages(error=FakeStatusError("invalid x-api-key"))
    runtime = AnthropicMessagesRuntime(_client(messages))

    with pytest.raises(ProviderRuntimeError) as exc_info:
        runtime.invoke([Message.user_text("Hi")], None)

    assert "invalid x-api-key" in str(exc_info.value)
    assert exc_info.value.details == {"error_type": "FakeStatusError", "status_code": 401}
    assert isinstance(exc_info.value.__cause__, FakeStatusError)


def test_create_client_sets_deadline_and_disables_retries(monkeypatch):
    captured = {}

    class FakeAnthropic:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    monkeypatch.setattr("agentic_editor_prototype.provider_runtime.Anthropic", FakeAnthropic)

    client = AnthropicMessagesRuntime.create_client("fake-key", base_url="http://localhost:9", timeout_seconds=30)

    assert isinstance(client, FakeAnthropic)
    assert captured["api_key"] == "fake-key"
    assert captured["base_url"] == "http://localhost:9"
    assert captured["max_retries"] == 0
    assert isinstance(captured["timeout"], httpx.Timeout)
    assert captured["timeout"].read == 30


def test_provider_dump_writes_request_and_response(monkeypatch, tmp_path):
    monkeypatch.setattr(provider_dump_logger, "log_dir", str(tmp_path))
    monkeypatch.setattr(provider_dump_logger, "enabled", True)
    response = types.SimpleNamespace(content=[{"type": "text", "text": "ok"}], stop_reason="end_turn")
    runtime = AnthropicMessagesRuntime(_client(FakeMessages(response=response)), model="claude-test")

    runtime.invoke([Message.user_text("Hi")], None)

    requests = sorted(tmp_path.glob("*_request.json"))
    responses = sorted(tmp_path.glob("*_response.json"))
    assert len(requests) == 1 and len(responses) == 1
    request_entry = json.loads(requests[0].read_text(encoding="utf-8"))
    assert request_entry["phase"] == "request"
    assert request_entry["body"]["json"]["model"] == "claude-test"
    response_entry = json.loads(responses[0].read_text(encoding="utf-8"))
    assert response_entry["requestId"] == request_entry["requestId"]
    assert response_entry["status"]["ok"] is True
