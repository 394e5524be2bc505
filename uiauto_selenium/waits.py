# uiauto_selenium/waits.py
"""
@file waits.py
@brief Bounded polling and stale-element retry for resilient handles.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from selenium.common.exceptions import StaleElementReferenceException

from .actionlogger import ACTION_LOGGER
from .config import RetryConfig
from .exceptions import ConfigError, RetryInterruptedError, TimeoutError
from .timinglogger import TIMING_LOGGER

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


def _set_timeout_metadata(
    error: TimeoutError,
    *,
    description: str,
    timeout: float,
    attempt_count: int,
    elapsed: float,
    stage: Optional[str],
) -> None:
    error.description = description
    error.timeout = timeout
    error.attempt_count = attempt_count
    error.elapsed_time = elapsed
    error.stage = stage


def _log_retry_attempt(description: str, attempt: int, stage: Optional[str]) -> None:
    """Emit sampled retry attempt events to the action logger if enabled."""
    if not ACTION_LOGGER.is_enabled():
        return
    if not ACTION_LOGGER.should_log_retry_attempt(attempt):
        return

    ACTION_LOGGER.log(
        action="retry_attempt",
        status="info",
        metadata={"description": description},
        attempt=attempt,
        phase=stage or "execute",
        event="retry_attempt",
    )


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
    stage: Optional[str] = None,
) -> T:
    """
    Repeatedly runs predicate until it returns a truthy value,
    or until timeout.

    Exceptions raised by the predicate count as "not yet"; the last one is
    kept on the TimeoutError as original_exception.
    """
    start_time = _now()
    last_exception: Optional[BaseException] = None
    attempt_count = 0

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="wait_start",
            target=description,
            stage=stage,
            metadata={"timeout_s": timeout, "interval_s": interval},
        )

    while True:
        attempt_count += 1
        elapsed = _now() - start_time

        if elapsed >= timeout:
            break

        try:
            result = predicate()
            if result:
                if TIMING_LOGGER.is_enabled():
                    TIMING_LOGGER.log(
                        event="wait_success",
                        target=description,
                        stage=stage,
                        status="success",
                        metadata={
                            "attempts": attempt_count,
                            "elapsed_s": round(_now() - start_time, 3),
                        },
                    )
                return result
        except Exception as e:
            last_exception = e

        time_left = timeout - (_now() - start_time)
        sleep_time = min(interval, time_left) if time_left > 0 else 0
        if sleep_time > 0:
            time.sleep(sleep_time)

    elapsed = _now() - start_time
    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="wait_timeout",
            target=description,
            stage=stage,
            status="error",
            metadata={
                "timeout_s": timeout,
                "attempts": attempt_count,
                "elapsed_s": round(elapsed, 3),
            },
        )

    if last_exception:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s: "
            f"{type(last_exception).__name__}: {last_exception}"
        )
        error.original_exception = last_exception
    else:
        error = TimeoutError(
            f"Timed out waiting for {description} after {timeout}s "
            f"(condition kept returning falsy)"
        )
        error.original_exception = None

    _set_timeout_metadata(
        error,
        description=description,
        timeout=timeout,
        attempt_count=attempt_count,
        elapsed=elapsed,
        stage=stage,
    )
    raise error


def _pause_before_retry(delay: float, description: str, attempt: int) -> None:
    try:
        time.sleep(delay)
    except KeyboardInterrupt as e:
        raise RetryInterruptedError(description, attempt) from e


def retry_on_stale(
    func: Callable[[], T],
    config: RetryConfig,
    description: str = "operation",
    stage: Optional[str] = "execute",
) -> T:
    """
    Run func, retrying only on StaleElementReferenceException.

    Makes at most config.max_attempts calls and sleeps config.delay between
    them. Any other exception propagates immediately. Once the budget is
    spent the last StaleElementReferenceException is re-raised unchanged.

    @throws RetryInterruptedError if the pause between attempts is interrupted
    """
    if config.max_attempts < 1:
        raise ConfigError(f"max_attempts must be >= 1, got {config.max_attempts}")

    start_time = _now()

    if TIMING_LOGGER.is_enabled():
        TIMING_LOGGER.log(
            event="retry_start",
            target=description,
            stage=stage,
            metadata={
                "max_attempts": config.max_attempts,
                "delay_s": config.delay,
            },
        )

    for attempt in range(1, config.max_attempts + 1):
        _log_retry_attempt(description, attempt, stage)
        try:
            result = func()
        except StaleElementReferenceException:
            if config.verbose:
                logger.warning(
                    "StaleElementReferenceException in '%s' - attempt %d of %d",
                    description, attempt, config.max_attempts,
                )
            if attempt >= config.max_attempts:
                if TIMING_LOGGER.is_enabled():
                    TIMING_LOGGER.log(
                        event="retry_exhausted",
                        target=description,
                        stage=stage,
                        status="error",
                        metadata={
                            "attempts": attempt,
                            "elapsed_s": round(_now() - start_time, 3),
                        },
                    )
                if config.verbose:
                    logger.error(
                        "StaleElementReferenceException - exhausted %d attempts for '%s'",
                        config.max_attempts, description,
                    )
                raise

            if TIMING_LOGGER.is_enabled():
                TIMING_LOGGER.log(
                    event="retry_wait",
                    target=description,
                    stage=stage,
                    status="warn",
                    metadata={"attempt": attempt, "sleep_s": config.delay},
                )
            _pause_before_retry(config.delay, description, attempt)
            continue

        if TIMING_LOGGER.is_enabled():
            TIMING_LOGGER.log(
                event="retry_success",
                target=description,
                stage=stage,
                status="success",
                metadata={
                    "attempts": attempt,
                    "elapsed_s": round(_now() - start_time, 3),
                },
            )
        return result

    raise AssertionError("unreachable: retry loop always returns or raises")
