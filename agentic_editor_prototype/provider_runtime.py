"""Inference gateway: packages the conversation and tool declarations for the model service."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from anthropic import Anthropic

from .logging.provider_dump import provider_dump_logger
from .messaging.content_blocks import ContentBlock, Message, TextBlock, ToolUseBlock


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-7-sonnet-latest"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TIMEOUT_SECONDS = 600.0


class ProviderRuntimeError(RuntimeError):
    """Raised when a provider runtime encounters a fatal error."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


class ProviderRuntime:
    """Interface for provider runtimes."""

    provider_id = "unknown"

    def invoke(
        self,
        conversation: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Message:
        raise NotImplementedError


def _get_attr(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class AnthropicMessagesRuntime(ProviderRuntime):
    """Runtime for Anthropic Messages API."""

    provider_id = "anthropic"

    def __init__(
        self,
        client: Any,
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        system_prompt: Optional[str] = None,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    @staticmethod
    def create_client(
        api_key: str,
        *,
        base_url: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> Any:
        kwargs: Dict[str, Any] = {
            "api_key": api_key,
            "timeout": httpx.Timeout(float(timeout_seconds), connect=min(10.0, float(timeout_seconds))),
            "max_retries": 0,
        }
        if base_url:
            kwargs["base_url"] = base_url
        return Anthropic(**kwargs)

    def build_request(
        self,
        conversation: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": int(self.max_tokens),
            "messages": [message.to_param() for message in conversation if message.content],
        }
        if self.system_prompt:
            request["system"] = self.system_prompt
        if tools:
            request["tools"] = list(tools)
        return request

    def _normalize_response(self, response: Any) -> Message:
        blocks: List[ContentBlock] = []
        for block in _get_attr(response, "content", None) or []:
            block_type = _get_attr(block, "type")
            if block_type == "text":
                blocks.append(TextBlock(str(_get_attr(block, "text", "") or "")))
            elif block_type == "tool_use":
                blocks.append(
                    ToolUseBlock(
                        id=str(_get_attr(block, "id", "")),
                        name=str(_get_attr(block, "name", "")),
                        input=_get_attr(block, "input", {}),
                    )
                )
            else:
                logger.debug("ignoring %s block from provider", block_type)
        return Message(
            role="assistant",
            content=tuple(blocks),
            stop_reason=_get_attr(response, "stop_reason"),
        )

    def _dump_body(self, response: Any) -> Optional[str]:
        dump = getattr(response, "model_dump_json", None)
        if callable(dump):
            try:
                return dump()
            except (TypeError, ValueError):
                return None
        try:
            return json.dumps(response, default=str)
        except (TypeError, ValueError):
            return None

    def invoke(
        self,
        conversation: Sequence[Message],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> Message:
        request = self.build_request(conversation, tools)
        logger.debug("anthropic request model=%s messages=%d tools=%d", self.model, len(request["messages"]), len(tools or []))
        request_id = provider_dump_logger.log_request(
            provider=self.provider_id,
            model=self.model,
            payload=request,
        )
        try:
            response = self.client.messages.create(**request)
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            provider_dump_logger.log_response(
                provider=self.provider_id,
                model=self.model,
                request_id=request_id,
                status_code=status_code,
                body_text=str(exc),
                metadata={"error": True, "error_type": exc.__class__.__name__},
            )
            raise ProviderRuntimeError(
                str(exc) or exc.__class__.__name__,
                details={"error_type": exc.__class__.__name__, "status_code": status_code},
            ) from exc

        provider_dump_logger.log_response(
            provider=self.provider_id,
            model=self.model,
            request_id=request_id,
            status_code=200,
            body_text=self._dump_body(response),
            metadata={"stop_reason": _get_attr(response, "stop_reason")},
        )
        return self._normalize_response(response)
