# uiauto_selenium/scripts.py
"""
@file scripts.py
@brief JavaScript helpers that act on elements directly in the page.

js_click is the fallback used when a native click is intercepted. Handles are
unwrapped first, so the script always receives the raw element.
"""

from __future__ import annotations

from typing import Any

from .driver import unwrap_driver
from .element import unwrap_element
from .exceptions import ActionError


def _driver_of(element: Any, action: str) -> Any:
    driver = unwrap_driver(getattr(element, "parent", None))
    if driver is None or not hasattr(driver, "execute_script"):
        raise ActionError(
            action,
            details=f"cannot extract a WebDriver from {type(element).__name__}",
        )
    return driver


def _run(action: str, script: str, element: Any) -> Any:
    raw = unwrap_element(element)
    return _driver_of(raw, action).execute_script(script, raw)


def js_click(element: Any) -> None:
    """Click through script, bypassing overlays that intercept native clicks."""
    _run("js_click", "arguments[0].click();", element)


def js_text(element: Any) -> str:
    """Rendered text of the element, including text Selenium treats as hidden."""
    return _run("js_text", "return arguments[0].innerText;", element)


def scroll_to(element: Any) -> None:
    _run("scroll_to", "arguments[0].scrollIntoView(true);", element)


def scroll_element_to_bottom(element: Any) -> None:
    """Scroll a scrollable container to its end."""
    _run("scroll_element_to_bottom", "arguments[0].scrollTop = arguments[0].scrollHeight;", element)


def scroll_to_bottom(driver: Any) -> None:
    raw = unwrap_driver(driver)
    if raw is None:
        raise ActionError("scroll_to_bottom", details="no WebDriver given")
    raw.execute_script("window.scrollTo(0, document.body.scrollHeight);")
