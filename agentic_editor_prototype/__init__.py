"""
Agentic Editor Prototype

A command-line chat agent that relays user text to a model and lets the
model read, list and deterministically edit files in the working directory.
"""

from typing import TYPE_CHECKING

__all__ = [
    "ConversationLoop",
    "create_agent",
    "apply_edit",
    "EditRequest",
    "EditOutcome",
    "ToolRegistry",
]


if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from .agent import create_agent  # noqa: F401
    from .conductor_loop import ConversationLoop  # noqa: F401
    from .file_editor import EditOutcome, EditRequest, apply_edit  # noqa: F401
    from .tool_registry import ToolRegistry  # noqa: F401


def __getattr__(name: str):
    """Lazy-import so `file_editor` can be used without the provider SDK loaded."""
    if name == "create_agent":
        from .agent import create_agent

        return create_agent
    if name == "ConversationLoop":
        from .conductor_loop import ConversationLoop

        return ConversationLoop
    if name in {"apply_edit", "EditRequest", "EditOutcome"}:
        from . import file_editor

        return getattr(file_editor, name)
    if name == "ToolRegistry":
        from .tool_registry import ToolRegistry

        return ToolRegistry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
