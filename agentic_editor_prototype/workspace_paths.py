from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import Optional, Union


class UnsafePathError(ValueError):
    """Raised when a tool path would escape the working directory."""

    def __init__(self, path: str, reason: str = "path must be inside working directory") -> None:
        super().__init__(reason)
        self.path = path
        self.reason = reason


def normalize_relative_path(path: Union[str, PurePath]) -> str:
    """
    Lexically normalize a user-supplied path and reject escapes.

    Nothing on disk is consulted: `.`/`..` segments are collapsed as text, so
    the check happens before any filesystem access. The normalized form must
    be relative and must not start with a `..` segment.
    """

    raw = os.fspath(path) if path is not None else ""
    if not raw or not raw.strip():
        raise UnsafePathError(raw, "path must not be empty")
    normalized = os.path.normpath(raw)
    if os.path.isabs(normalized) or PurePath(normalized).drive:
        raise UnsafePathError(raw)
    first_segment = normalized.replace(os.sep, "/").split("/", 1)[0]
    if first_segment == os.pardir:
        raise UnsafePathError(raw)
    return normalized


def resolve_safe_path(path: Union[str, PurePath], root: Optional[Union[str, Path]] = None) -> Path:
    normalized = normalize_relative_path(path)
    if root is None:
        return Path(normalized)
    return Path(root) / normalized
