from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol


class ToolCallLike(Protocol):
    """
    Structural protocol for tool calls coming back from a provider.

    Anything with `.name` and `.input` (a mapping or a JSON string) qualifies,
    including `ToolUseBlock` and the raw SDK block objects.
    """

    name: str
    input: Any


@dataclass
class ToolCallIR:
    """
    Stable view of a tool call for display and logging:
    - function: tool name as requested by the model
    - arguments: decoded argument mapping
    - call_id: provider tool_use id, if present
    - raw: original object for debugging
    """

    function: str
    arguments: Dict[str, Any]
    call_id: Optional[str] = None
    raw: Optional[Any] = None

    def arguments_json(self) -> str:
        return json.dumps(self.arguments, ensure_ascii=False, sort_keys=False)

    def display(self) -> str:
        return f"{self.function}({self.arguments_json()})"


def to_tool_call_ir(obj: ToolCallLike) -> ToolCallIR:
    """Normalize a tool call object; tolerant of missing attributes."""

    fn = getattr(obj, "name", "") or ""
    args = getattr(obj, "input", None)
    if isinstance(args, (bytes, bytearray)):
        args = bytes(args).decode("utf-8", "replace")
    if isinstance(args, str):
        try:
            args = json.loads(args) if args.strip() else {}
        except ValueError:
            args = {"value": args}
    if args is None:
        args = {}
    if not isinstance(args, dict):
        args = {"value": args}

    call_id = getattr(obj, "id", None)
    return ToolCallIR(
        function=str(fn),
        arguments=dict(args),
        call_id=str(call_id) if call_id else None,
        raw=obj,
    )
