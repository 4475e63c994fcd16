from __future__ import annotations

from agentic_editor_prototype.tools import build_tool_catalog_specs, content_hash, tool_catalog_hash


EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_content_hash_of_empty_bytes() -> None:
    assert content_hash(b"") == EMPTY_SHA256


def test_content_hash_is_deterministic_and_fixed_length() -> None:
    data = b"line one\nline two\n"
    first = content_hash(data)
    assert first == content_hash(bytes(data))
    assert len(first) == 64
    assert first == first.lower()
    assert content_hash(b"line one\nline two") != first


def test_tool_catalog_hash_tracks_input_schema() -> None:
    tools = [{"name": "read_file", "input_schema": {"type": "object", "properties": {"path": {"type": "string"}}}}]
    specs = build_tool_catalog_specs(tools)
    assert specs == [{"tool_id": "read_file", "input_schema": tools[0]["input_schema"]}]
    assert tool_catalog_hash(specs) == tool_catalog_hash(build_tool_catalog_specs(tools))

    changed = [{"name": "read_file", "input_schema": {"type": "object", "properties": {}}}]
    assert tool_catalog_hash(build_tool_catalog_specs(changed)) != tool_catalog_hash(specs)
