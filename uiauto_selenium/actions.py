# uiauto_selenium/actions.py
"""
@file actions.py
@brief ActionChains that accept resilient handles.

Selenium's ActionChains serializes elements by id at the time each step is
queued. The subclass unwraps DriverHandle and ElementHandle arguments to the
raw objects and otherwise leaves the gesture semantics to Selenium.
"""

from __future__ import annotations

from typing import Any, Optional

from selenium.webdriver.common.action_chains import ActionChains

from .driver import unwrap_driver
from .element import unwrap_element


class ResilientActionChains(ActionChains):
    """ActionChains taking DriverHandle / ElementHandle in place of raw objects."""

    def __init__(self, driver: Any, duration: int = 250, devices: Optional[list] = None):
        super().__init__(unwrap_driver(driver), duration=duration, devices=devices)

    def click(self, on_element: Any = None) -> ResilientActionChains:
        return super().click(unwrap_element(on_element))

    def click_and_hold(self, on_element: Any = None) -> ResilientActionChains:
        return super().click_and_hold(unwrap_element(on_element))

    def context_click(self, on_element: Any = None) -> ResilientActionChains:
        return super().context_click(unwrap_element(on_element))

    def double_click(self, on_element: Any = None) -> ResilientActionChains:
        return super().double_click(unwrap_element(on_element))

    def drag_and_drop(self, source: Any, target: Any) -> ResilientActionChains:
        return super().drag_and_drop(unwrap_element(source), unwrap_element(target))

    def drag_and_drop_by_offset(self, source: Any, xoffset: int, yoffset: int) -> ResilientActionChains:
        return super().drag_and_drop_by_offset(unwrap_element(source), xoffset, yoffset)

    def key_down(self, value: str, element: Any = None) -> ResilientActionChains:
        return super().key_down(value, unwrap_element(element))

    def key_up(self, value: str, element: Any = None) -> ResilientActionChains:
        return super().key_up(value, unwrap_element(element))

    def move_to_element(self, to_element: Any) -> ResilientActionChains:
        return super().move_to_element(unwrap_element(to_element))

    def move_to_element_with_offset(self, to_element: Any, xoffset: int, yoffset: int) -> ResilientActionChains:
        return super().move_to_element_with_offset(unwrap_element(to_element), xoffset, yoffset)

    def release(self, on_element: Any = None) -> ResilientActionChains:
        return super().release(unwrap_element(on_element))

    def send_keys_to_element(self, element: Any, *keys_to_send: str) -> ResilientActionChains:
        return super().send_keys_to_element(unwrap_element(element), *keys_to_send)

    def scroll_to_element(self, element: Any) -> ResilientActionChains:
        return super().scroll_to_element(unwrap_element(element))
