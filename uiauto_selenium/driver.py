# uiauto_selenium/driver.py
"""
@file driver.py
@brief Resilient proxy for a Selenium WebDriver.

Only element lookup is intercepted: find_element returns an ElementHandle and
find_elements a LazyElementList. Everything else (navigation, scripts,
windows, cookies, quit, ...) goes straight to the wrapped driver.
"""

from __future__ import annotations

from typing import Any, List, Optional

from selenium.webdriver.common.by import By

from .config import DEFAULT_DRIVER_RETRY, RetryConfig
from .element import ElementHandle, describe_locator
from .element_list import LazyElementList

_OWN_ATTRIBUTES = frozenset({"_driver", "_config"})


class DriverHandle:
    """Wraps a WebDriver so that every element it hands out is resilient."""

    def __init__(self, driver: Any, config: RetryConfig = DEFAULT_DRIVER_RETRY):
        """
        @param driver The WebDriver to wrap; a DriverHandle is unwrapped first
        @param config Retry budget inherited by every element handle and list
        @throws ValueError if driver is None
        """
        if driver is None:
            raise ValueError("driver must not be None")
        if isinstance(driver, DriverHandle):
            driver = driver.unwrap()
        object.__setattr__(self, "_driver", driver)
        object.__setattr__(self, "_config", config)

    @property
    def config(self) -> RetryConfig:
        return self._config

    def unwrap(self) -> Any:
        return self._driver

    def find_element(self, by: str = By.ID, value: Optional[str] = None) -> ElementHandle:
        driver = self._driver
        return ElementHandle(
            lambda: driver.find_element(by, value),
            self._config,
            describe_locator(by, value),
        )

    def find_elements(self, by: str = By.ID, value: Optional[str] = None) -> LazyElementList:
        driver = self._driver
        return LazyElementList(
            lambda: driver.find_elements(by, value),
            self._config,
            describe_locator(by, value),
        )

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not found on the proxy itself
        if name in _OWN_ATTRIBUTES:
            raise AttributeError(name)
        return getattr(self._driver, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _OWN_ATTRIBUTES:
            object.__setattr__(self, name, value)
        else:
            setattr(self._driver, name, value)

    def __dir__(self) -> List[str]:
        return sorted(set(dir(type(self))) | set(dir(self._driver)))

    def __enter__(self) -> DriverHandle:
        self._driver.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> Any:
        return self._driver.__exit__(exc_type, exc, tb)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DriverHandle):
            return self._driver == other._driver
        return self._driver == other

    def __hash__(self) -> int:
        return hash(self._driver)

    def __repr__(self) -> str:
        return f"<DriverHandle wrapping {self._driver!r}>"


def is_resilient_driver(obj: Any) -> bool:
    return isinstance(obj, DriverHandle)


def unwrap_driver(obj: Any) -> Any:
    """Return the raw WebDriver behind a handle; anything else is returned as is."""
    if isinstance(obj, DriverHandle):
        return obj.unwrap()
    return obj


def wrap_driver(driver: Any, config: Optional[RetryConfig] = None) -> DriverHandle:
    """
    Wrap a WebDriver with resilience.

    @param driver WebDriver instance (an existing DriverHandle is re-wrapped, not nested)
    @param config Retry budget; DEFAULT_DRIVER_RETRY when omitted
    """
    return DriverHandle(driver, config or DEFAULT_DRIVER_RETRY)
