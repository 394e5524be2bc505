# uiauto_selenium/element.py
"""
@file element.py
@brief Resilient proxy for a single Selenium element.

An ElementHandle never keeps a resolved WebElement between operations. Every
operation re-resolves its element through the handle's ElementRef, waits for
the readiness condition that belongs to the operation and retries on
StaleElementReferenceException.
"""

from __future__ import annotations

import logging
import time
from hashlib import md5 as md5_hash
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from selenium.common.exceptions import (ElementClickInterceptedException,
                                        StaleElementReferenceException)
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

from .actionlogger import ACTION_LOGGER
from .conditions import await_condition, condition_for
from .config import DEFAULT_ELEMENT_RETRY, RetryConfig
from .context import ActionContext, ActionContextManager
from .exceptions import ActionError, ClickFallbackError, UIAutoError
from .waits import retry_on_stale

if TYPE_CHECKING:
    from .element_list import LazyElementList

logger = logging.getLogger(__name__)

ElementRef = Callable[[], WebElement]


def describe_locator(by: str, value: Any) -> str:
    """Human-readable form of a (by, value) locator, e.g. `css selector=#save`."""
    return f"{by}={value}"


def _current_trace() -> Optional[str]:
    ctx = ActionContextManager.current()
    return ctx.format_trace() if ctx else None


class ElementHandle(WebElement):
    """
    Drop-in replacement for WebElement that survives re-renders.

    Subclasses WebElement so isinstance checks and Selenium's script argument
    encoding accept it. WebElement.__init__ is deliberately not called: the
    handle has no fixed element id, `id` and `parent` are resolved on demand.
    """

    def __init__(
        self,
        element_ref: ElementRef,
        config: RetryConfig = DEFAULT_ELEMENT_RETRY,
        description: str = "element",
    ):
        """
        @param element_ref Zero-argument callable returning the live element
        @param config Stale retry budget, inherited by derived handles
        @param description Name used in logs and errors
        """
        self._element_ref = element_ref
        self._config = config
        self._description = description

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def description(self) -> str:
        return self._description

    def unwrap(self) -> WebElement:
        """Resolve the current raw element. No wait and no retry."""
        return self._element_ref()

    # --- Operation dispatch ---

    def _perform(
        self,
        operation: str,
        invoke: Callable[[WebElement], Any],
        **metadata: Any,
    ) -> Any:
        with ActionContextManager.action(operation, target=self._description, **metadata) as ctx:
            start = time.monotonic()
            try:
                result = retry_on_stale(
                    lambda: self._attempt(operation, invoke),
                    self._config,
                    description=f"{operation} on '{self._description}'",
                )
            except Exception as e:
                self._log_action(ctx, "error", start, metadata, e)
                raise
            self._log_action(ctx, "ok", start, metadata)
            return result

    def _attempt(self, operation: str, invoke: Callable[[WebElement], Any]) -> Any:
        """One attempt: readiness wait, resolve, invoke."""
        element = await_condition(
            self._element_ref,
            condition_for(operation),
            description=self._description,
            verbose=self._config.verbose,
        )
        try:
            if element is None:
                element = self._element_ref()
            return invoke(element)
        except StaleElementReferenceException:
            raise
        except UIAutoError:
            raise
        except ElementClickInterceptedException as e:
            if operation == "click" and element is not None:
                return self._click_fallback(element, e)
            raise ActionError(
                operation,
                self._description,
                details="operation was intercepted by another element",
                cause=e,
                trace=_current_trace(),
            ) from e
        except Exception as e:
            raise ActionError(
                operation,
                self._description,
                cause=e,
                trace=_current_trace(),
            ) from e

    def _click_fallback(self, element: WebElement, intercepted: ElementClickInterceptedException) -> None:
        from .scripts import js_click

        if self._config.verbose:
            logger.warning(
                "Click on '%s' intercepted - attempting script click", self._description
            )
        try:
            js_click(element)
        except Exception as fallback_error:
            if self._config.verbose:
                logger.error(
                    "Script click fallback failed for '%s': %s",
                    self._description, fallback_error,
                )
            raise ClickFallbackError(self._description, intercepted, fallback_error) from intercepted
        if self._config.verbose:
            logger.info("Script click on '%s' succeeded", self._description)
        return None

    def _log_action(
        self,
        ctx: ActionContext,
        status: str,
        start: float,
        metadata: Dict[str, Any],
        exception: Optional[BaseException] = None,
    ) -> None:
        if not ACTION_LOGGER.is_enabled():
            return
        ACTION_LOGGER.log(
            action=ctx.action_name,
            target=self._description,
            status=status,
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata=metadata,
            exception=exception,
            action_id=ctx.action_id,
            event="action_finish",
        )

    # --- Derived handles (no wait, no retry) ---

    @property
    def parent(self) -> Any:
        """The driver that owns the current element."""
        return self._element_ref().parent

    @property
    def session_id(self) -> str:
        return self._element_ref().parent.session_id

    def find_element(self, by: str = By.ID, value: Optional[str] = None) -> ElementHandle:
        """Locate a child lazily; the child re-runs this lookup on every operation."""
        element_ref = self._element_ref
        return ElementHandle(
            lambda: element_ref().find_element(by, value),
            self._config,
            f"{self._description} > {describe_locator(by, value)}",
        )

    def find_elements(self, by: str = By.ID, value: Optional[str] = None) -> LazyElementList:
        from .element_list import LazyElementList

        element_ref = self._element_ref
        return LazyElementList(
            lambda: element_ref().find_elements(by, value),
            self._config,
            f"{self._description} > {describe_locator(by, value)}",
        )

    # --- Actions ---

    def click(self) -> None:
        self._perform("click", lambda e: e.click())

    def submit(self) -> None:
        self._perform("submit", lambda e: e.submit())

    def clear(self) -> None:
        self._perform("clear", lambda e: e.clear())

    def send_keys(self, *value: Any) -> None:
        """Type into the element. The typed text is masked in action logs."""
        text = "".join(str(v) for v in value)
        self._perform("send_keys", lambda e: e.send_keys(*value), text=text)

    def screenshot(self, filename: str) -> bool:
        return self._perform("screenshot", lambda e: e.screenshot(filename), filename=filename)

    # --- Queries ---

    def get_attribute(self, name: str) -> Optional[str]:
        return self._perform("get_attribute", lambda e: e.get_attribute(name), name=name)

    def get_dom_attribute(self, name: str) -> Optional[str]:
        return self._perform("get_dom_attribute", lambda e: e.get_dom_attribute(name), name=name)

    def get_property(self, name: str) -> Any:
        return self._perform("get_property", lambda e: e.get_property(name), name=name)

    def is_displayed(self) -> bool:
        return self._perform("is_displayed", lambda e: e.is_displayed())

    def is_enabled(self) -> bool:
        return self._perform("is_enabled", lambda e: e.is_enabled())

    def is_selected(self) -> bool:
        return self._perform("is_selected", lambda e: e.is_selected())

    def value_of_css_property(self, property_name: str) -> str:
        return self._perform(
            "value_of_css_property",
            lambda e: e.value_of_css_property(property_name),
            property_name=property_name,
        )

    @property
    def text(self) -> str:
        return self._perform("text", lambda e: e.text)

    @property
    def tag_name(self) -> str:
        return self._perform("tag_name", lambda e: e.tag_name)

    @property
    def size(self) -> dict:
        return self._perform("size", lambda e: e.size)

    @property
    def location(self) -> dict:
        return self._perform("location", lambda e: e.location)

    @property
    def rect(self) -> dict:
        return self._perform("rect", lambda e: e.rect)

    @property
    def accessible_name(self) -> str:
        return self._perform("accessible_name", lambda e: e.accessible_name)

    @property
    def aria_role(self) -> str:
        return self._perform("aria_role", lambda e: e.aria_role)

    @property
    def location_once_scrolled_into_view(self) -> dict:
        return self._perform(
            "location_once_scrolled_into_view",
            lambda e: e.location_once_scrolled_into_view,
        )

    @property
    def screenshot_as_png(self) -> bytes:
        return self._perform("screenshot_as_png", lambda e: e.screenshot_as_png)

    @property
    def screenshot_as_base64(self) -> str:
        return self._perform("screenshot_as_base64", lambda e: e.screenshot_as_base64)

    @property
    def shadow_root(self) -> Any:
        return self._perform("shadow_root", lambda e: e.shadow_root)

    @property
    def id(self) -> str:
        """Id of the currently resolved element. No wait and no retry."""
        return self.unwrap().id

    # --- Identity ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WebElement):
            return NotImplemented
        return self.id == other.id

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return int(md5_hash(self.id.encode("utf-8")).hexdigest(), 16)

    def __repr__(self) -> str:
        return f"<{type(self).__module__}.{type(self).__name__} ({self._description})>"


def is_resilient_element(obj: Any) -> bool:
    return isinstance(obj, ElementHandle)


def unwrap_element(obj: Any) -> Any:
    """Return the raw WebElement behind a handle; anything else is returned as is."""
    if isinstance(obj, ElementHandle):
        return obj.unwrap()
    return obj


def resilient_element(
    element_ref: ElementRef,
    config: Optional[RetryConfig] = None,
    description: str = "element",
) -> ElementHandle:
    """
    Wrap a single-element resolution function.

    @param element_ref Zero-argument callable returning the live element
    @param config Retry budget; DEFAULT_ELEMENT_RETRY when omitted
    """
    if not callable(element_ref):
        raise TypeError(f"element_ref must be callable, got {type(element_ref).__name__}")
    return ElementHandle(element_ref, config or DEFAULT_ELEMENT_RETRY, description)
