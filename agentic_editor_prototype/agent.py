"""
Assembly of the conversational agent.

Builds the tool registry, the provider runtime and the conversation loop
from a loaded config dict (see `config.load_config`).
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .conductor_loop import ConversationLoop
from .config import load_config, require_api_key
from .file_tools import build_file_tools
from .logging.provider_dump import provider_dump_logger
from .messaging.transcript import TranscriptPrinter
from .provider_runtime import AnthropicMessagesRuntime
from .tool_registry import ToolRegistry
from .tools import build_tool_catalog_specs, tool_catalog_hash


logger = logging.getLogger(__name__)


def build_tool_registry(workspace_root: Optional[str] = None) -> ToolRegistry:
    root = Path(workspace_root) if workspace_root else None
    registry = ToolRegistry(build_file_tools(root))
    catalog = build_tool_catalog_specs(registry.declarations())
    logger.info("tool catalog %s: %s", tool_catalog_hash(catalog)[:12], ", ".join(registry.names))
    return registry


def create_runtime(config: Dict[str, Any], client: Any = None) -> AnthropicMessagesRuntime:
    provider_cfg = config.get("provider") or {}
    agent_cfg = config.get("agent") or {}
    if client is None:
        client = AnthropicMessagesRuntime.create_client(
            require_api_key(),
            base_url=provider_cfg.get("base_url"),
            timeout_seconds=float(provider_cfg.get("timeout_seconds") or 600),
        )
    provider_dump_logger.configure((config.get("logging") or {}).get("provider_dump_dir"))
    return AnthropicMessagesRuntime(
        client,
        model=provider_cfg["model"],
        max_tokens=int(provider_cfg.get("max_tokens") or 1024),
        system_prompt=agent_cfg.get("system_prompt"),
    )


def create_agent(
    config: Optional[Dict[str, Any]] = None,
    *,
    read_user_input: Callable[[], Optional[str]],
    transcript: Optional[TranscriptPrinter] = None,
    client: Any = None,
) -> ConversationLoop:
    config = config if config is not None else load_config()
    runtime = create_runtime(config, client=client)
    registry = build_tool_registry((config.get("workspace") or {}).get("root"))
    return ConversationLoop(runtime, registry, read_user_input, transcript)
