# uiauto_selenium/exceptions.py
"""
@file exceptions.py
@brief Exception classes for the Selenium resilience layer.

Staleness and click obstruction are reported with Selenium's own exception
types (StaleElementReferenceException, ElementClickInterceptedException);
everything the layer itself decides to fail on is raised from here.
"""

from __future__ import annotations

import traceback
from typing import Optional


class UIAutoError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(UIAutoError):
    """Raised when retry settings or a settings file are invalid."""
    pass


class TimeoutError(UIAutoError):
    """
    Raised when a wait times out.

    The readiness wait catches this itself and proceeds with the operation,
    so callers normally only meet it when using wait_until directly.

    Attributes:
        original_exception: The last exception raised by the polled predicate
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of polls made
        elapsed_time: Actual elapsed time in seconds
        stage: Phase the wait belonged to ("precondition", "index", ...)
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None
        self.stage: Optional[str] = None

    def __str__(self) -> str:
        base_msg = super().__str__()

        details = []
        if self.original_exception is not None:
            details.append(f"Original exception: {type(self.original_exception).__name__}")
        if self.attempt_count is not None:
            details.append(f"Attempts: {self.attempt_count}")
        if self.elapsed_time is not None:
            details.append(f"Elapsed: {self.elapsed_time:.2f}s")
        if self.stage is not None:
            details.append(f"Stage: {self.stage}")

        if details:
            return f"{base_msg} [{', '.join(details)}]"
        return base_msg

    def get_root_cause(self) -> Optional[BaseException]:
        """
        Get the root cause exception by traversing the chain.

        @return The deepest original_exception in the chain, or None
        """
        current = self.original_exception
        while current is not None:
            nested = getattr(current, "original_exception", None)
            if nested is None:
                return current
            current = nested
        return None

    def get_traceback_str(self) -> str:
        """
        Get a formatted traceback string from the original exception.

        @return Formatted traceback string or empty string if no original exception
        """
        if self.original_exception is None:
            return ""
        return "".join(traceback.format_exception(
            type(self.original_exception),
            self.original_exception,
            self.original_exception.__traceback__
        ))


class ActionError(UIAutoError):
    """
    Raised when an element operation fails with anything other than staleness.

    Carries the operation name, the element description and the original
    cause; the cause is also chained as __cause__.
    """

    def __init__(
        self,
        action: str,
        element_name: Optional[str] = None,
        details: Optional[str] = None,
        cause: Optional[BaseException] = None,
        trace: Optional[str] = None,
    ):
        self.action = action
        self.element_name = element_name
        self.details = details
        self.cause = cause
        self.trace = trace
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"ActionError: action='{self.action}'"
        if self.element_name:
            base += f" element='{self.element_name}'"
        if self.details:
            base += f" details='{self.details}'"
        if self.cause:
            base += f" cause='{type(self.cause).__name__}: {_first_line(self.cause)}'"
        if self.trace:
            base += f"\n{self.trace}"
        return base

    def get_cause_traceback(self) -> str:
        """
        Get a formatted traceback string from the cause exception.

        @return Formatted traceback string or empty string if no cause
        """
        if self.cause is None:
            return ""
        return "".join(traceback.format_exception(
            type(self.cause),
            self.cause,
            self.cause.__traceback__
        ))


class ClickFallbackError(ActionError):
    """Raised when a click was intercepted and the script click failed too."""

    def __init__(
        self,
        element_name: Optional[str],
        cause: BaseException,
        fallback_error: BaseException,
    ):
        self.fallback_error = fallback_error
        super().__init__(
            action="click",
            element_name=element_name,
            details=(
                "native click was intercepted by another element and the script "
                f"click fallback failed: {type(fallback_error).__name__}: "
                f"{_first_line(fallback_error)}"
            ),
            cause=cause,
        )


class ElementIndexError(UIAutoError, IndexError):
    """Raised when a list index never became available within the wait window."""

    def __init__(self, index: int, size: int, collection: Optional[str] = None):
        self.index = index
        self.size = size
        self.collection = collection
        msg = f"Element at index {index} unavailable after waiting period (size={size})"
        if collection:
            msg += f" in '{collection}'"
        super().__init__(msg)


class UnsupportedMutationError(UIAutoError, TypeError):
    """Raised by every structural write on a read-only element list."""

    def __init__(self, operation: str, collection: Optional[str] = None):
        self.operation = operation
        self.collection = collection
        msg = f"LazyElementList is read-only: '{operation}' is not permitted"
        if collection:
            msg += f" on '{collection}'"
        super().__init__(msg)


class RetryInterruptedError(KeyboardInterrupt):
    """
    Raised when the pause between stale retries is interrupted.

    Subclasses KeyboardInterrupt so that broad `except Exception` handlers
    cannot swallow it.
    """

    def __init__(self, description: str, attempt: int):
        self.description = description
        self.attempt = attempt
        super().__init__(
            f"Interrupted while waiting to retry {description} after attempt {attempt}"
        )


def _first_line(exc: BaseException) -> str:
    # Selenium messages carry multi-line stacktraces from the remote end
    text = str(exc).strip()
    return text.splitlines()[0] if text else ""
