"""Ordered registry of local tools the model may invoke."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Type

from pydantic import BaseModel, ValidationError

from .error_handling.error_handler import ErrorHandler
from .messaging.content_blocks import ToolResultBlock, ToolUseBlock


logger = logging.getLogger(__name__)


class ToolNotFoundError(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__("tool not found")
        self.name = name


class ToolExecutionError(RuntimeError):
    """A tool failed; the message is what the model gets back."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


def _inline_refs(node: Any, defs: Dict[str, Any]) -> Any:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith("#/$defs/"):
            target = defs.get(ref.split("/")[-1], {})
            merged = {k: v for k, v in node.items() if k != "$ref"}
            return {**_inline_refs(copy.deepcopy(target), defs), **_inline_refs(merged, defs)}
        all_of = node.get("allOf")
        if isinstance(all_of, list) and len(all_of) == 1 and isinstance(all_of[0], dict):
            rest = {k: v for k, v in node.items() if k != "allOf"}
            return {**_inline_refs(all_of[0], defs), **_inline_refs(rest, defs)}
        return {k: _inline_refs(v, defs) for k, v in node.items() if k != "$defs"}
    if isinstance(node, list):
        return [_inline_refs(item, defs) for item in node]
    return node


def input_schema_for(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON schema of a pydantic input model with `$defs` references inlined."""
    schema = model.model_json_schema()
    defs = schema.get("$defs", {}) or {}
    properties = _inline_refs(schema.get("properties", {}) or {}, defs)
    result: Dict[str, Any] = {"type": "object", "properties": properties}
    required = schema.get("required")
    if required:
        result["required"] = list(required)
    if schema.get("additionalProperties") is False:
        result["additionalProperties"] = False
    return result


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_model: Type[BaseModel]
    function: Callable[[Any], str]

    @property
    def input_schema(self) -> Dict[str, Any]:
        return input_schema_for(self.input_model)

    def declaration(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


def _decode_raw_input(raw_input: Any) -> Dict[str, Any]:
    if raw_input is None:
        return {}
    if isinstance(raw_input, (bytes, bytearray)):
        raw_input = bytes(raw_input).decode("utf-8")
    if isinstance(raw_input, str):
        raw_input = json.loads(raw_input) if raw_input.strip() else {}
    if not isinstance(raw_input, dict):
        raise ValueError(f"tool input must be a JSON object, got {type(raw_input).__name__}")
    return raw_input


class ToolRegistry:
    """Tool name -> definition, fixed at construction."""

    def __init__(
        self,
        definitions: Iterable[ToolDefinition],
        *,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._tools: Dict[str, ToolDefinition] = {}
        for definition in definitions:
            if not definition.name:
                raise ValueError("tool name must not be empty")
            if definition.name in self._tools:
                raise ValueError(f"duplicate tool name: {definition.name}")
            self._tools[definition.name] = definition
        self.error_handler = error_handler or ErrorHandler()

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(list(self._tools.values()))

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def resolve(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def declarations(self) -> List[Dict[str, Any]]:
        return [definition.declaration() for definition in self._tools.values()]

    def execute(self, name: str, raw_input: Any) -> str:
        definition = self.resolve(name)
        try:
            arguments = definition.input_model.model_validate(_decode_raw_input(raw_input))
        except (ValueError, ValidationError) as exc:
            raise ToolExecutionError(name, self.error_handler.format_tool_error(exc)) from exc
        try:
            result = definition.function(arguments)
        except Exception as exc:
            raise ToolExecutionError(name, self.error_handler.format_tool_error(exc)) from exc
        if isinstance(result, str):
            return result
        return json.dumps(result)

    def dispatch(self, block: ToolUseBlock) -> ToolResultBlock:
        """Run one tool_use block; failures become error results, never exceptions."""
        try:
            output = self.execute(block.name, block.input)
        except ToolNotFoundError as exc:
            logger.warning("model requested unknown tool %r", block.name)
            return ToolResultBlock(tool_use_id=block.id, content=str(exc), is_error=True)
        except ToolExecutionError as exc:
            logger.warning("tool %s failed: %s", block.name, exc)
            return ToolResultBlock(tool_use_id=block.id, content=str(exc), is_error=True)
        logger.debug("tool %s succeeded (%d chars)", block.name, len(output))
        return ToolResultBlock(tool_use_id=block.id, content=output, is_error=False)
