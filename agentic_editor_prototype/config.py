from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml


CONFIG_ENV = "AGENTIC_EDITOR_CONFIG"
MODEL_ENV = "AGENTIC_EDITOR_MODEL"
LOG_LEVEL_ENV = "AGENTIC_EDITOR_LOG_LEVEL"
PROVIDER_LOG_DIR_ENV = "AGENTIC_EDITOR_PROVIDER_LOG_DIR"
API_KEY_ENV = "ANTHROPIC_API_KEY"

DEFAULT_CONFIG: Dict[str, Any] = {
    "provider": {
        "model": "claude-3-7-sonnet-latest",
        "max_tokens": 1024,
        "timeout_seconds": 600,
        "base_url": None,
    },
    "agent": {
        "system_prompt": None,
    },
    "workspace": {
        "root": ".",
    },
    "logging": {
        "level": "WARNING",
        "provider_dump_dir": None,
    },
}


class ConfigError(ValueError):
    pass


def _load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(doc, dict):
        raise ConfigError(f"config {path} must be a mapping at top level")
    return doc


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge two dicts recursively. Lists are replaced, not merged.
    Scalars replace.
    """
    out: Dict[str, Any] = dict(base)
    for k, v in (override or {}).items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _check_sections(doc: Dict[str, Any]) -> None:
    for section in ("provider", "agent", "workspace", "logging"):
        if not isinstance(doc.get(section), dict):
            raise ConfigError(f"{section} must be a mapping")


def _validate(doc: Dict[str, Any]) -> None:
    _check_sections(doc)
    provider = doc["provider"]
    model = provider.get("model")
    if not isinstance(model, str) or not model.strip():
        raise ConfigError("provider.model must be a non-empty string")

    max_tokens = provider.get("max_tokens")
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
        raise ConfigError("provider.max_tokens must be a positive integer")

    timeout = provider.get("timeout_seconds")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("provider.timeout_seconds must be a positive number")

    system_prompt = doc["agent"].get("system_prompt")
    if system_prompt is not None and not isinstance(system_prompt, str):
        raise ConfigError("agent.system_prompt must be a string when provided")

    root = doc["workspace"].get("root")
    if not isinstance(root, str) or not root:
        raise ConfigError("workspace.root must be a non-empty string")

    level = doc["logging"].get("level")
    if not isinstance(level, str) or level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigError("logging.level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Defaults, then the YAML file (explicit path or $AGENTIC_EDITOR_CONFIG), then env overrides."""
    env = os.environ if env is None else env
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = path or env.get(CONFIG_ENV)
    if config_path:
        config = _deep_merge(config, _load_yaml(config_path))
        _check_sections(config)

    if env.get(MODEL_ENV):
        config["provider"]["model"] = env[MODEL_ENV]
    if env.get(LOG_LEVEL_ENV):
        config["logging"]["level"] = env[LOG_LEVEL_ENV].upper()
    if env.get(PROVIDER_LOG_DIR_ENV):
        config["logging"]["provider_dump_dir"] = env[PROVIDER_LOG_DIR_ENV]

    _validate(config)
    return config


def require_api_key(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    api_key = env.get(API_KEY_ENV)
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} is not set")
    return api_key
