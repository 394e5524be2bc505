# uiauto_selenium/__init__.py
"""
Resilience layer for Selenium WebDriver.

Wrap a driver once and every element it hands out re-resolves itself, waits
for readiness and retries on staleness:

    from uiauto_selenium import wrap_driver

    driver = wrap_driver(webdriver.Chrome())
    rows = driver.find_elements(By.CSS_SELECTOR, "table tr")
    rows[3].click()      # waits for the fourth row to exist
"""

__version__ = "1.0.0"

from .actions import ResilientActionChains
from .conditions import ReadinessCondition, await_condition, condition_for
from .config import (DEFAULT_DRIVER_RETRY, DEFAULT_ELEMENT_RETRY, RetryConfig,
                     TimeConfig)
from .driver import DriverHandle, is_resilient_driver, unwrap_driver, wrap_driver
from .element import (ElementHandle, is_resilient_element, resilient_element,
                      unwrap_element)
from .element_list import LazyElementList
from .exceptions import (ActionError, ClickFallbackError, ConfigError,
                         ElementIndexError, RetryInterruptedError,
                         TimeoutError, UIAutoError, UnsupportedMutationError)
from .scripts import js_click, js_text, scroll_element_to_bottom, scroll_to, scroll_to_bottom
from .settings import Settings, load_settings
from .waits import retry_on_stale, wait_until

__all__ = [
    "ResilientActionChains",
    "ReadinessCondition", "await_condition", "condition_for",
    "DEFAULT_DRIVER_RETRY", "DEFAULT_ELEMENT_RETRY", "RetryConfig", "TimeConfig",
    "DriverHandle", "is_resilient_driver", "unwrap_driver", "wrap_driver",
    "ElementHandle", "is_resilient_element", "resilient_element", "unwrap_element",
    "LazyElementList",
    "ActionError", "ClickFallbackError", "ConfigError", "ElementIndexError",
    "RetryInterruptedError", "TimeoutError", "UIAutoError", "UnsupportedMutationError",
    "js_click", "js_text", "scroll_element_to_bottom", "scroll_to", "scroll_to_bottom",
    "Settings", "load_settings",
    "retry_on_stale", "wait_until",
]
