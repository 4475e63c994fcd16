from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List


def content_hash(data: bytes) -> str:
    """SHA-256 hex digest of file bytes; a missing file hashes as empty bytes."""
    return hashlib.sha256(bytes(data or b"")).hexdigest()


def build_tool_catalog_specs(tools: List[Any]) -> List[Dict[str, Any]]:
    specs: List[Dict[str, Any]] = []
    for tool in tools or []:
        if isinstance(tool, dict):
            tool_id = tool.get("name")
            schema = tool.get("input_schema") or {}
        else:
            tool_id = getattr(tool, "name", None)
            schema = getattr(tool, "input_schema", None) or {}
        if tool_id is None:
            tool_id = str(tool)
        specs.append({"tool_id": str(tool_id), "input_schema": schema})
    return specs


def tool_catalog_hash(specs: List[Dict[str, Any]]) -> str:
    payload = json.dumps(specs, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    return content_hash(payload.encode("utf-8"))
