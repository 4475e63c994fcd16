"""read_file / list_files / edit_file tools, scoped to a workspace root."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .file_editor import EditRequest, apply_edit
from .tool_registry import ToolDefinition
from .workspace_paths import resolve_safe_path


READ_FILE_DESCRIPTION = (
    "Read the contents of a given relative file path. Use this when you want to see what's inside a file. "
    "Do not use this with directory names."
)

LIST_FILES_DESCRIPTION = (
    "List files and directories at a given path. If no path is provided, lists files in the current directory."
)

EDIT_FILE_DESCRIPTION = """Edit a text file deterministically.
- mode=replace_once: replace old_str with new_str exactly expect_count times (default 1). If the match count differs, nothing is changed and message is match_count_mismatch.
- mode=write_full: write new_str as the entire file (use for creating or full rewrites).
- mode=append: append new_str to the end of the file. If ensure_trailing_newline=true, add a newline if missing.
- If expect_hash is set and does not match the file's current hash, nothing is changed and message is expect_hash_mismatch.
Returns JSON with changed, old_hash, new_hash, replacements and message.
If no change would occur, succeeds with changed=false (do NOT loop)."""


class ReadFileInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="The relative path of a file in the working directory.")


class ListFilesInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: Optional[str] = Field(
        default=None,
        description="Optional relative path to list files from. Defaults to current directory if not provided.",
    )


def read_file(arguments: ReadFileInput, root: Optional[Union[str, Path]] = None) -> str:
    target = resolve_safe_path(arguments.path, root)
    return target.read_text(encoding="utf-8", errors="replace")


def _walk(current: Path, prefix: str, entries: List[str]) -> None:
    for child in sorted(current.iterdir(), key=lambda p: p.name):
        rel = f"{prefix}{child.name}"
        # Symlinked directories are listed but not followed.
        if child.is_dir() and not child.is_symlink():
            entries.append(rel + "/")
            _walk(child, rel + "/", entries)
        else:
            entries.append(rel)


def list_files(arguments: ListFilesInput, root: Optional[Union[str, Path]] = None) -> str:
    target = resolve_safe_path(arguments.path or ".", root)
    if not target.exists():
        raise FileNotFoundError(f"no such file or directory: {arguments.path or '.'}")
    entries: List[str] = []
    if target.is_dir():
        _walk(target, "", entries)
    return json.dumps(entries)


def edit_file(arguments: EditRequest, root: Optional[Union[str, Path]] = None) -> str:
    return apply_edit(arguments, root).to_json()


def build_file_tools(root: Optional[Union[str, Path]] = None) -> List[ToolDefinition]:
    return [
        ToolDefinition(
            name="read_file",
            description=READ_FILE_DESCRIPTION,
            input_model=ReadFileInput,
            function=lambda arguments: read_file(arguments, root),
        ),
        ToolDefinition(
            name="list_files",
            description=LIST_FILES_DESCRIPTION,
            input_model=ListFilesInput,
            function=lambda arguments: list_files(arguments, root),
        ),
        ToolDefinition(
            name="edit_file",
            description=EDIT_FILE_DESCRIPTION,
            input_model=EditRequest,
            function=lambda arguments: edit_file(arguments, root),
        ),
    ]
