# tests/conftest.py
"""
Fake WebDriver / WebElement doubles so the resilience layer can be tested
without a browser.
"""

import itertools
from collections import Counter

import pytest
from selenium.common.exceptions import (ElementNotInteractableException,
                                        NoSuchElementException,
                                        StaleElementReferenceException)
from selenium.webdriver.remote.webelement import WebElement

from uiauto_selenium.actionlogger import ACTION_LOGGER
from uiauto_selenium.config import TimeConfig
from uiauto_selenium.context import ActionContextManager
from uiauto_selenium.timinglogger import TIMING_LOGGER

_ids = itertools.count(1)


class FakeElement(WebElement):
    """
    Scriptable stand-in for a WebElement.

    fail(op, exc, times) queues failures for one operation name; `stale`
    makes every call raise StaleElementReferenceException.
    """

    def __init__(self, driver=None, tag="div", text="", displayed=True,
                 enabled=True, selected=False, attributes=None, element_id=None):
        super().__init__(driver, element_id or f"el-{next(_ids)}")
        self.tag = tag
        self.label = text
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.attributes = dict(attributes or {})
        self.stale = False
        self.children = {}
        self.calls = Counter()
        self.clicks = 0
        self.js_clicks = 0
        self.typed = []
        self._failures = {}

    def fail(self, op, exc, times=1, then=None):
        """Make the next `times` calls of `op` raise exc; `then` runs before each raise."""
        self._failures.setdefault(op, []).extend([(exc, then)] * times)
        return self

    def _check(self, op):
        self.calls[op] += 1
        if self.stale:
            raise StaleElementReferenceException(f"{self.id} is stale")
        queue = self._failures.get(op)
        if queue:
            exc, then = queue.pop(0)
            if then is not None:
                then()
            raise exc(f"{op} failed") if isinstance(exc, type) else exc

    def click(self):
        self._check("click")
        if not self.displayed:
            raise ElementNotInteractableException("element not interactable")
        self.clicks += 1

    def submit(self):
        self._check("submit")

    def clear(self):
        self._check("clear")
        self.typed = []

    def send_keys(self, *value):
        self._check("send_keys")
        self.typed.append("".join(str(v) for v in value))

    def get_attribute(self, name):
        self._check("get_attribute")
        return self.attributes.get(name)

    def get_dom_attribute(self, name):
        self._check("get_dom_attribute")
        return self.attributes.get(name)

    def get_property(self, name):
        self._check("get_property")
        return self.attributes.get(name)

    def is_displayed(self):
        self._check("is_displayed")
        return self.displayed

    def is_enabled(self):
        self._check("is_enabled")
        return self.enabled

    def is_selected(self):
        self._check("is_selected")
        return self.selected

    def value_of_css_property(self, property_name):
        self._check("value_of_css_property")
        return self.attributes.get(f"css:{property_name}", "")

    @property
    def text(self):
        self._check("text")
        return self.label

    @property
    def tag_name(self):
        self._check("tag_name")
        return self.tag

    @property
    def rect(self):
        self._check("rect")
        return {"x": 0, "y": 0, "width": 10, "height": 10}

    def add_child(self, by, value, *elements):
        self.children.setdefault((by, value), []).extend(elements)
        return self

    def find_element(self, by="id", value=None):
        self._check("find_element")
        found = self.children.get((by, value)) or []
        if not found:
            raise NoSuchElementException(f"no child {by}={value}")
        return found[0]

    def find_elements(self, by="id", value=None):
        self._check("find_elements")
        return list(self.children.get((by, value)) or [])


class FakeDriver:
    """Minimal WebDriver: locator map, script recorder, context manager."""

    def __init__(self):
        self.session_id = "fake-session"
        self.elements = {}
        self.scripts = []
        self.script_error = None
        self.title = "Fake page"
        self.visited = []
        self.entered = False
        self.exited = False
        self.quit_called = False

    def element(self, by, value, **kwargs):
        """Create an element owned by this driver and register it under (by, value)."""
        el = FakeElement(self, **kwargs)
        self.elements.setdefault((by, value), []).append(el)
        return el

    def replace(self, by, value, *elements):
        self.elements[(by, value)] = list(elements)

    def find_element(self, by="id", value=None):
        found = self.elements.get((by, value)) or []
        if not found:
            raise NoSuchElementException(f"no element {by}={value}")
        return found[0]

    def find_elements(self, by="id", value=None):
        return list(self.elements.get((by, value)) or [])

    def execute_script(self, script, *args):
        self.scripts.append((script, args))
        if self.script_error is not None:
            raise self.script_error
        if "click()" in script:
            args[0].js_clicks += 1
        if "innerText" in script:
            return args[0].label
        return None

    def get(self, url):
        self.visited.append(url)

    def quit(self):
        self.quit_called = True

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True
        return False


@pytest.fixture(autouse=True)
def short_waits():
    """Shrink wait windows and reset global state around every test."""
    TimeConfig.reset_to_defaults()
    ACTION_LOGGER.disable()
    TIMING_LOGGER.disable()
    ActionContextManager.clear()
    with TimeConfig.override(
        element_wait={"timeout": 0.05, "interval": 0.01},
        index_wait={"timeout": 0.3, "interval": 0.02},
    ):
        yield
    TimeConfig.reset_to_defaults()
    ACTION_LOGGER.disable()
    ACTION_LOGGER.configure()
    TIMING_LOGGER.disable()
    TIMING_LOGGER.configure()
    ActionContextManager.clear()


@pytest.fixture
def driver():
    return FakeDriver()
