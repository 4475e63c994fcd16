from __future__ import annotations

import json
import os
import random
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional


LOG_DIR_ENV = "AGENTIC_EDITOR_PROVIDER_LOG_DIR"

SENSITIVE_KEYS = {
    "api_key",
    "apikey",
    "auth",
    "authorization",
    "x-api-key",
    "bearer",
}
MAX_TEXT_BYTES = 32768


def _scrub(value: Any) -> Any:
    if isinstance(value, dict):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            lowered = str(key).lower()
            if lowered in SENSITIVE_KEYS and isinstance(item, str):
                result[key] = "[redacted]"
            else:
                result[key] = _scrub(item)
        return result
    if isinstance(value, (list, tuple)):
        return [_scrub(item) for item in value]
    return value


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()) + f".{int(time.time() * 1e6) % 1_000_000:06d}Z"


def _ulid() -> str:
    millis = int(time.time() * 1000)
    rand = random.getrandbits(80)
    return f"{millis:012x}{rand:020x}".upper()


class ProviderDumpLogger:
    """Lightweight file logger for provider requests/responses."""

    def __init__(self, log_dir: Optional[str] = None) -> None:
        self.log_dir = log_dir or os.environ.get(LOG_DIR_ENV)
        self.enabled = bool(self.log_dir)
        self._lock = threading.Lock()

    def configure(self, log_dir: Optional[str]) -> None:
        self.log_dir = log_dir or None
        self.enabled = bool(self.log_dir)

    def _ensure_dir(self) -> Optional[Path]:
        if not self.enabled or not self.log_dir:
            return None
        path = Path(self.log_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _write_file(self, filename: str, payload: Dict[str, Any]) -> None:
        path = self._ensure_dir()
        if not path:
            return
        target = path / filename
        data = json.dumps(payload, indent=2, default=str)
        with self._lock:
            target.write_text(data, encoding="utf-8")

    def log_request(
        self,
        *,
        provider: str,
        model: Optional[str],
        payload: Dict[str, Any],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        if not self.enabled:
            return None
        request_id = _ulid()
        entry = {
            "logVersion": 1,
            "phase": "request",
            "timestamp": _now_iso(),
            "provider": provider,
            "model": model,
            "requestId": request_id,
            "workspacePath": os.getcwd(),
            "body": {
                "encoding": "json",
                "json": _scrub(payload),
            },
            "metadata": metadata or {},
        }
        self._write_file(f"{request_id}_request.json", entry)
        return request_id

    def log_response(
        self,
        *,
        provider: str,
        model: Optional[str],
        request_id: Optional[str],
        status_code: Optional[int],
        body_text: Optional[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self.enabled or not request_id:
            return
        body_payload: Dict[str, Any] = {"encoding": "unknown"}
        if body_text:
            body_payload["encoding"] = "utf8"
            body_payload["text"] = body_text[:MAX_TEXT_BYTES]

        entry = {
            "logVersion": 1,
            "phase": "response",
            "timestamp": _now_iso(),
            "provider": provider,
            "model": model,
            "requestId": request_id,
            "status": {
                "code": status_code,
                "ok": status_code is not None and 200 <= status_code < 300,
            },
            "body": body_payload,
            "metadata": metadata or {},
        }
        self._write_file(f"{request_id}_response.json", entry)


provider_dump_logger = ProviderDumpLogger()
