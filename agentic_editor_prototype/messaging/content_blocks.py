"""Conversation content model: messages made of text / tool_use / tool_result blocks."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union


class ConversationError(ValueError):
    """Raised when a message would break conversation invariants."""


@dataclass(frozen=True)
class TextBlock:
    text: str
    type: str = field(default="text", init=False)

    def to_param(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ToolUseBlock:
    """A model request to run a named tool; `input` is the raw argument payload."""

    id: str
    name: str
    input: Any = None
    type: str = field(default="tool_use", init=False)

    @property
    def arguments(self) -> Dict[str, Any]:
        payload = self.input
        if isinstance(payload, (bytes, bytearray)):
            payload = bytes(payload).decode("utf-8", "replace")
        if isinstance(payload, str):
            try:
                payload = json.loads(payload) if payload.strip() else {}
            except ValueError:
                return {}
        return dict(payload) if isinstance(payload, dict) else {}

    def to_param(self) -> Dict[str, Any]:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.arguments}


@dataclass(frozen=True)
class ToolResultBlock:
    tool_use_id: str
    content: str
    is_error: bool = False
    type: str = field(default="tool_result", init=False)

    def to_param(self) -> Dict[str, Any]:
        param: Dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
        }
        if self.is_error:
            param["is_error"] = True
        return param


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock]


@dataclass(frozen=True)
class Message:
    role: str
    content: Tuple[ContentBlock, ...] = ()
    stop_reason: Optional[str] = None

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(role="user", content=(TextBlock(text),))

    @classmethod
    def tool_results(cls, results: Iterable[ToolResultBlock]) -> "Message":
        return cls(role="user", content=tuple(results))

    @property
    def text_blocks(self) -> List[TextBlock]:
        return [block for block in self.content if isinstance(block, TextBlock)]

    @property
    def tool_uses(self) -> List[ToolUseBlock]:
        return [block for block in self.content if isinstance(block, ToolUseBlock)]

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.text_blocks)

    def to_param(self) -> Dict[str, Any]:
        return {"role": self.role, "content": [block.to_param() for block in self.content]}


class Conversation:
    """Append-only message history for a single run."""

    def __init__(self, messages: Optional[Sequence[Message]] = None) -> None:
        self._messages: List[Message] = []
        self._tool_use_ids: Set[str] = set()
        for message in messages or []:
            self.append(message)

    def append(self, message: Message) -> None:
        for block in message.content:
            if isinstance(block, ToolResultBlock) and block.tool_use_id not in self._tool_use_ids:
                raise ConversationError(f"tool_result references unknown tool_use id {block.tool_use_id!r}")
        for block in message.content:
            if isinstance(block, ToolUseBlock):
                self._tool_use_ids.add(block.id)
        self._messages.append(message)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def to_params(self) -> List[Dict[str, Any]]:
        # Messages without blocks are rejected by the provider, so they stay local.
        return [message.to_param() for message in self._messages if message.content]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
