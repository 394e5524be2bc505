# uiauto_selenium/actionlogger.py
"""
@file actionlogger.py
@brief Per-operation event log for resilient element handles.

Every operation an ElementHandle performs can be reported as one event
(line or JSONL). Logging is off until enable() is called.
"""

from __future__ import annotations

import json
import threading
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .timinglogger import _append_line

_SENSITIVE_KEYS = {"password", "passwd", "secret", "token"}
_TEXT_ACTIONS = {"send_keys"}


class ActionLogger:
    """Thread-safe action logger with line/jsonl output."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._format = "line"
        self._max_traceback_chars = 4000
        self._sample_retry_events = 1

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        format: str = "line",
        max_traceback_chars: int = 4000,
        sample_retry_events: int = 1,
    ) -> None:
        """Configure logger settings."""
        fmt = (format or "line").lower()
        if fmt not in {"line", "jsonl"}:
            raise ValueError("ActionLogger format must be 'line' or 'jsonl'")

        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._format = fmt
            self._max_traceback_chars = max(256, int(max_traceback_chars))
            self._sample_retry_events = max(1, int(sample_retry_events))

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def should_log_retry_attempt(self, attempt: int) -> bool:
        """Sampling for retry attempt events; the first attempt is always logged."""
        if attempt <= 1:
            return True
        return attempt % self._sample_retry_events == 0

    def log(
        self,
        *,
        action: str,
        target: Optional[str] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        action_id: Optional[str] = None,
        phase: Optional[str] = None,
        attempt: Optional[int] = None,
        event: Optional[str] = None,
    ) -> None:
        """Emit a log event."""
        if not self._enabled:
            return

        event_obj: Dict[str, Any] = {
            "timestamp": time.strftime("%H:%M:%S"),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "event": event or "action",
            "action": action,
            "action_id": action_id,
            "target": target,
            "phase": phase,
            "status": status,
            "attempt": attempt,
            "duration_ms": duration_ms,
            "metadata": self._redact_metadata(action, dict(metadata or {})),
        }
        if exception is not None:
            event_obj["exception"] = self._format_exception(exception)

        line = self._format_output(event_obj)

        with self._lock:
            console = self._console
            file_path = self._file_path

        if console:
            print(line, flush=True)
        if file_path:
            _append_line(file_path, line)

    def _format_output(self, event: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(event, ensure_ascii=False, separators=(",", ":"), default=str)
        return self._format_line(event)

    def _format_line(self, event: Dict[str, Any]) -> str:
        parts = [event.get("timestamp", ""), event.get("action", "")]

        for key in ("event", "action_id", "phase", "attempt", "status", "duration_ms"):
            value = event.get(key)
            if value is not None:
                parts.append(f"{key}={value}")

        target = event.get("target")
        if target:
            parts.append(f"target='{target}'")

        for key, value in (event.get("metadata") or {}).items():
            parts.append(f"{key}={value}")

        exc = event.get("exception")
        if exc:
            parts.append(f"exc_type={exc.get('type')}")
            parts.append(f"exc_message={exc.get('message')}")
            if exc.get("cause_type"):
                parts.append(f"cause_type={exc.get('cause_type')}")

        return " | ".join(parts)

    def _redact_metadata(self, action: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        redacted = {}
        for key, value in metadata.items():
            if key.lower() in _SENSITIVE_KEYS:
                redacted[key] = "***"
            elif action in _TEXT_ACTIONS and key == "text":
                redacted[key] = self._mask_text(str(value))
            else:
                redacted[key] = value
        return redacted

    @staticmethod
    def _mask_text(text: str, max_visible: int = 3) -> str:
        if len(text) <= max_visible:
            return "*" * len(text)
        return f"{text[:max_visible]}...({len(text)} chars)"

    def _format_exception(self, exception: BaseException) -> Dict[str, Any]:
        tb = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
        if len(tb) > self._max_traceback_chars:
            tb = tb[: self._max_traceback_chars] + "...<truncated>"

        cause = getattr(exception, "__cause__", None)
        message = str(exception).strip()
        return {
            "type": type(exception).__name__,
            "message": message.splitlines()[0] if message else "",
            "traceback": tb.strip(),
            "cause_type": type(cause).__name__ if cause is not None else None,
            "cause_message": str(cause) if cause is not None else None,
        }


ACTION_LOGGER = ActionLogger()
