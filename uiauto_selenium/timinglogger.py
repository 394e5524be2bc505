# uiauto_selenium/timinglogger.py
"""
@file timinglogger.py
@brief Opt-in event log for readiness waits, index waits and stale retries.

Each line names the stage the event belongs to:

    precondition  readiness wait before an element operation
    index         wait for a list position to appear
    execute       stale retry around an operation or list query

Example:
    12:00:01 [warn] stage=execute retry_wait target='click on 'id=save'' attempt=1 sleep_s=0.5
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Dict, Optional

STAGES = ("precondition", "index", "execute")


class TimingLogger:
    """Thread-safe wait/retry event logger with console/file output."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._stages = frozenset(STAGES)

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        stages: Optional[tuple] = None,
    ) -> None:
        """
        @param console Print lines to stdout
        @param file_path Append lines to this file
        @param stages Only log these stages; all stages when omitted
        """
        selected = frozenset(stages or STAGES)
        unknown = selected - set(STAGES)
        if unknown:
            raise ValueError(f"Unknown timing stage(s): {', '.join(sorted(unknown))}")
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._stages = selected

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def log(
        self,
        *,
        event: str,
        target: Optional[str] = None,
        stage: Optional[str] = None,
        status: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Emit one event line.

        @param event wait_start, wait_success, wait_timeout, retry_start,
                     retry_wait, retry_success or retry_exhausted
        @param target What was waited for or retried
        @param stage One of STAGES; events of filtered-out stages are dropped
        """
        if not self._enabled:
            return
        if stage is not None and stage not in self._stages:
            return

        line = _format_line(event, target, stage, status, metadata or {})

        with self._lock:
            console = self._console
            file_path = self._file_path

        if console:
            print(line, flush=True)
        if file_path:
            _append_line(file_path, line)


def _format_line(
    event: str,
    target: Optional[str],
    stage: Optional[str],
    status: str,
    metadata: Dict[str, Any],
) -> str:
    parts = [time.strftime("%H:%M:%S"), f"[{status.lower()}]"]
    if stage:
        parts.append(f"stage={stage}")
    parts.append(event)
    if target:
        parts.append(f"target='{target}'")
    parts.extend(f"{key}={value}" for key, value in metadata.items() if value is not None)
    return " ".join(parts)


def _append_line(file_path: str, line: str) -> None:
    try:
        os.makedirs(os.path.dirname(os.path.abspath(file_path)) or ".", exist_ok=True)
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        # A broken log target must never fail the operation being logged
        pass


TIMING_LOGGER = TimingLogger()
