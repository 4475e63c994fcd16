from __future__ import annotations

import os
from pathlib import Path

import pytest

from agentic_editor_prototype.workspace_paths import UnsafePathError, normalize_relative_path, resolve_safe_path


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("a/b.txt", "a/b.txt"),
        ("./a/./b.txt", "a/b.txt"),
        ("a/../b.txt", "b.txt"),
        ("a//b", "a/b"),
        (".", "."),
        ("..notes", "..notes"),
    ],
)
def test_normalize_relative_path_collapses_segments(raw: str, expected: str) -> None:
    assert normalize_relative_path(raw) == expected.replace("/", os.sep)


@pytest.mark.parametrize("raw", ["../x", "..", "a/../../x", "./../x", "/etc/passwd", ""])
def test_normalize_relative_path_rejects_escapes(raw: str) -> None:
    with pytest.raises(UnsafePathError):
        normalize_relative_path(raw)


def test_unsafe_path_error_is_value_error() -> None:
    with pytest.raises(ValueError, match="inside working directory"):
        normalize_relative_path("../../secret")


def test_resolve_safe_path_joins_root(tmp_path: Path) -> None:
    assert resolve_safe_path("sub/./f.txt", tmp_path) == tmp_path / "sub" / "f.txt"
    assert resolve_safe_path("sub/f.txt") == Path("sub") / "f.txt"
