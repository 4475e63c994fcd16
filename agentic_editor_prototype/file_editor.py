"""
Deterministic file editing.

Every edit is computed in memory against the current file bytes and written
back as a single whole-file write only when the content fingerprint changes.
Outcomes that change nothing (`expect_hash_mismatch`, `match_count_mismatch`,
`no_change`) are successful results, never exceptions, so a caller can tell
"nothing to do" apart from "could not do it".
"""
from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .tools import content_hash
from .workspace_paths import resolve_safe_path


logger = logging.getLogger(__name__)

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class EditMode(str, enum.Enum):
    REPLACE_ONCE = "replace_once"
    WRITE_FULL = "write_full"
    APPEND = "append"


class EditRequestError(ValueError):
    """Raised for malformed edit requests (missing or inconsistent fields)."""


class EditRequest(BaseModel):
    """Input contract for the edit_file tool."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., description="Relative path to the file (inside the working directory)")
    mode: EditMode = Field(..., description="One of: replace_once | write_full | append")
    old_str: str = Field(default="", description="Exact text to replace (required for replace_once)")
    new_str: str = Field(default="", description="Text to write or replace with")
    expect_count: Optional[int] = Field(
        default=None,
        description="Expected number of matches for replace_once (default 1)",
    )
    expect_hash: Optional[str] = Field(
        default=None,
        description=(
            "Optional SHA-256 of the current file for idempotency; if provided and mismatched, "
            "nothing is changed"
        ),
    )
    ensure_trailing_newline: bool = Field(
        default=False,
        description="If true and mode=append, ensures a newline before appending",
    )


@dataclass
class EditOutcome:
    changed: bool
    old_hash: str
    new_hash: str
    replacements: int = 0
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def _validate(request: EditRequest) -> int:
    if not request.path:
        raise EditRequestError("path and mode are required")
    mode = EditMode(request.mode)
    if mode is EditMode.REPLACE_ONCE and not request.old_str:
        raise EditRequestError("old_str required for mode=replace_once")
    if mode is not EditMode.APPEND and not request.new_str:
        raise EditRequestError(f"new_str required for mode={mode.value}")
    expect_count = request.expect_count or 1
    if expect_count < 0:
        raise EditRequestError("expect_count must be a positive integer")
    return expect_count


def _read_current(target: Path) -> bytes:
    try:
        return target.read_bytes()
    except FileNotFoundError:
        return b""


def _unchanged(old_hash: str, message: str) -> EditOutcome:
    return EditOutcome(changed=False, old_hash=old_hash, new_hash=old_hash, replacements=0, message=message)


def apply_edit(request: EditRequest, root: Optional[Union[str, Path]] = None) -> EditOutcome:
    expect_count = _validate(request)
    mode = EditMode(request.mode)
    target = resolve_safe_path(request.path, root)

    current = _read_current(target)
    old_hash = content_hash(current)
    if request.expect_hash and request.expect_hash != old_hash:
        return _unchanged(old_hash, "expect_hash_mismatch")

    replacements = 0
    if mode is EditMode.WRITE_FULL:
        candidate = request.new_str.encode(_ENCODING, _ERRORS)
    elif mode is EditMode.APPEND:
        candidate = current
        if request.ensure_trailing_newline and current and not current.endswith(b"\n"):
            candidate += b"\n"
        candidate += request.new_str.encode(_ENCODING, _ERRORS)
    else:
        text = current.decode(_ENCODING, _ERRORS)
        # str.count is non-overlapping: "aa" occurs once in "aaa".
        count = text.count(request.old_str)
        if count != expect_count:
            return _unchanged(old_hash, f"match_count_mismatch: have={count} expect={expect_count}")
        updated = text.replace(request.old_str, request.new_str, expect_count)
        if updated == text:
            return _unchanged(old_hash, "no_change")
        candidate = updated.encode(_ENCODING, _ERRORS)
        replacements = expect_count

    new_hash = content_hash(candidate)
    if new_hash == old_hash:
        return _unchanged(old_hash, "no_change")

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(candidate)
    logger.debug("edit_file %s mode=%s %s -> %s", target, mode.value, old_hash[:12], new_hash[:12])

    messages = {
        EditMode.WRITE_FULL: "wrote_full",
        EditMode.APPEND: "appended",
        EditMode.REPLACE_ONCE: "replaced",
    }
    return EditOutcome(
        changed=True,
        old_hash=old_hash,
        new_hash=new_hash,
        replacements=replacements,
        message=messages[mode],
    )
