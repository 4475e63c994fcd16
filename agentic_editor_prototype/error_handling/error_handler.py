from __future__ import annotations

from typing import Any, Dict

from pydantic import ValidationError


class ErrorHandler:
    """Turns tool and provider failures into text for the model or the operator."""

    def format_tool_error(self, exc: BaseException) -> str:
        if isinstance(exc, ValidationError):
            problems = []
            for error in exc.errors():
                location = ".".join(str(part) for part in error.get("loc", ())) or "input"
                problems.append(f"{location}: {error.get('msg', 'invalid value')}")
            return "invalid input: " + "; ".join(problems)
        if isinstance(exc, (ValueError, LookupError, OSError)):
            # KeyError wraps its message in quotes.
            if isinstance(exc, KeyError) and exc.args:
                return str(exc.args[0])
            return str(exc) or exc.__class__.__name__
        return f"{exc.__class__.__name__}: {exc}"

    def handle_provider_error(self, exc: Exception) -> Dict[str, Any]:
        return {
            "error": str(exc),
            "error_type": exc.__class__.__name__,
            "details": dict(getattr(exc, "details", None) or {}),
        }
