# tests/test_element.py
"""
Tests for ElementHandle.
"""

import time

import pytest
from selenium.common.exceptions import (ElementClickInterceptedException,
                                        ElementNotInteractableException,
                                        JavascriptException,
                                        NoSuchElementException,
                                        StaleElementReferenceException)
from selenium.webdriver.remote.webelement import WebElement

from conftest import FakeElement
from uiauto_selenium.config import DEFAULT_ELEMENT_RETRY, RetryConfig, TimeConfig
from uiauto_selenium.element import (ElementHandle, is_resilient_element,
                                     resilient_element, unwrap_element)
from uiauto_selenium.element_list import LazyElementList
from uiauto_selenium.exceptions import ActionError, ClickFallbackError

QUIET = RetryConfig(3, 0, False)


def handle_for(driver, by="id", value="save", config=QUIET):
    return ElementHandle(lambda: driver.find_element(by, value), config, f"{by}={value}")


class TestOperations:
    """Operations are forwarded to a freshly resolved element."""

    def test_click(self, driver):
        el = driver.element("id", "save")
        handle_for(driver).click()
        assert el.clicks == 1

    def test_send_keys_and_clear(self, driver):
        el = driver.element("id", "name")
        h = handle_for(driver, value="name")
        h.send_keys("Ada", " Lovelace")
        assert el.typed == ["Ada Lovelace"]
        h.clear()
        assert el.typed == []

    def test_reads(self, driver):
        driver.element("id", "title", tag="h1", text="Welcome",
                       attributes={"class": "big", "css:color": "red"}, selected=True)
        h = handle_for(driver, value="title")
        assert h.text == "Welcome"
        assert h.tag_name == "h1"
        assert h.get_attribute("class") == "big"
        assert h.get_dom_attribute("class") == "big"
        assert h.get_property("class") == "big"
        assert h.value_of_css_property("color") == "red"
        assert h.is_displayed() is True
        assert h.is_enabled() is True
        assert h.is_selected() is True
        assert h.rect["width"] == 10

    def test_resolves_on_every_operation(self, driver):
        """The handle follows the document: a re-rendered node is picked up."""
        driver.element("id", "status", text="loading")
        h = handle_for(driver, value="status")
        assert h.text == "loading"
        driver.replace("id", "status", FakeElement(driver, text="done"))
        assert h.text == "done"

    def test_is_a_web_element(self, driver):
        driver.element("id", "save")
        h = handle_for(driver)
        assert isinstance(h, WebElement)
        assert is_resilient_element(h)
        assert not is_resilient_element(driver.find_element("id", "save"))


class TestReadinessWait:
    """The readiness wait never fails an operation by itself."""

    def test_disabled_element_is_still_clicked(self, driver):
        el = driver.element("id", "save", enabled=False)
        start = time.monotonic()
        handle_for(driver).click()
        assert el.clicks == 1
        assert time.monotonic() - start >= TimeConfig.current().element_wait.timeout

    def test_element_that_appears_during_wait(self, driver):
        """An element rendered within the wait window is found without error."""
        late = FakeElement(driver, text="ready")
        calls = {"value": 0}

        def ref():
            calls["value"] += 1
            if calls["value"] < 3:
                raise NoSuchElementException("not yet")
            return late

        assert ElementHandle(ref, QUIET).text == "ready"

    def test_hidden_element_fails_after_wait(self, driver):
        """The operation runs after the timeout and its own failure is reported."""
        driver.element("id", "save", displayed=False)
        with pytest.raises(ActionError) as exc_info:
            handle_for(driver).click()
        assert isinstance(exc_info.value.cause, ElementNotInteractableException)


class TestStaleRecovery:
    """Staleness is retried against a re-resolved element."""

    def test_recovers_from_rerender(self, driver):
        old = driver.element("id", "save")
        new = FakeElement(driver)
        old.fail("click", StaleElementReferenceException,
                 then=lambda: driver.replace("id", "save", new))

        handle_for(driver).click()

        assert old.clicks == 0
        assert new.clicks == 1

    def test_exhaustion_reraises_stale(self, driver):
        """Three stale attempts with a 100 ms delay take at least 200 ms."""
        el = driver.element("id", "save")
        el.fail("click", StaleElementReferenceException, times=3)

        start = time.monotonic()
        with pytest.raises(StaleElementReferenceException):
            handle_for(driver, config=RetryConfig(3, 100, False)).click()

        assert el.calls["click"] == 3
        assert time.monotonic() - start >= 0.2

    def test_two_attempt_budget(self, driver):
        el = driver.element("id", "save")
        el.fail("text", StaleElementReferenceException, times=5)

        with pytest.raises(StaleElementReferenceException):
            handle_for(driver, config=RetryConfig(2, 0, False)).text

        assert el.calls["text"] == 2

    def test_succeeds_on_last_attempt(self, driver):
        """Stale on attempts 1 and 2, success on 3, with 100 ms between attempts."""
        el = driver.element("id", "save", text="third time")
        el.fail("text", StaleElementReferenceException, times=2)

        start = time.monotonic()
        assert handle_for(driver, config=RetryConfig(3, 100, False)).text == "third time"

        assert el.calls["text"] == 3
        assert time.monotonic() - start >= 0.2


class TestClickFallback:
    """Intercepted clicks fall back to a script click once."""

    def test_intercepted_click_uses_script(self, driver):
        el = driver.element("id", "save")
        el.fail("click", ElementClickInterceptedException)

        assert handle_for(driver).click() is None

        assert el.clicks == 0
        assert el.js_clicks == 1
        assert driver.scripts[0][1] == (el,)

    def test_failed_fallback_names_both_causes(self, driver):
        el = driver.element("id", "save")
        el.fail("click", ElementClickInterceptedException, times=5)
        driver.script_error = JavascriptException("script blocked")

        with pytest.raises(ClickFallbackError) as exc_info:
            handle_for(driver).click()

        error = exc_info.value
        assert isinstance(error, ActionError)
        assert isinstance(error.cause, ElementClickInterceptedException)
        assert isinstance(error.fallback_error, JavascriptException)
        assert "script blocked" in str(error)
        assert el.calls["click"] == 1

    def test_interception_outside_click_is_an_action_error(self, driver):
        el = driver.element("id", "form")
        el.fail("submit", ElementClickInterceptedException)

        with pytest.raises(ActionError) as exc_info:
            handle_for(driver, value="form").submit()

        assert not isinstance(exc_info.value, ClickFallbackError)
        assert exc_info.value.action == "submit"
        assert driver.scripts == []


class TestFailures:
    """Non-stale failures are reported with the operation name."""

    def test_missing_element(self, driver):
        with pytest.raises(ActionError) as exc_info:
            handle_for(driver, value="missing").click()

        error = exc_info.value
        assert error.action == "click"
        assert error.element_name == "id=missing"
        assert isinstance(error.cause, NoSuchElementException)
        assert error.__cause__ is error.cause

    def test_error_carries_action_trace(self, driver):
        with pytest.raises(ActionError) as exc_info:
            handle_for(driver, value="missing").text
        assert "Action trace" in str(exc_info.value)
        assert "text on 'id=missing'" in str(exc_info.value)


class TestDerivedHandles:
    """find_element / find_elements / parent need no wait and inherit config."""

    def test_child_handle(self, driver):
        form = driver.element("id", "form")
        button = FakeElement(driver)
        form.add_child("css selector", "button", button)
        config = RetryConfig(4, 0, False)

        child = handle_for(driver, value="form", config=config).find_element("css selector", "button")

        assert isinstance(child, ElementHandle)
        assert child.config is config
        assert child.description == "id=form > css selector=button"
        child.click()
        assert button.clicks == 1

    def test_child_is_lazy(self, driver):
        """Locating a child that does not exist yet is not an error."""
        driver.element("id", "form")
        child = handle_for(driver, value="form").find_element("id", "later")
        assert isinstance(child, ElementHandle)

    def test_child_list(self, driver):
        table = driver.element("id", "table")
        table.add_child("tag name", "tr", FakeElement(driver), FakeElement(driver))
        config = RetryConfig(2, 0, False)

        rows = handle_for(driver, value="table", config=config).find_elements("tag name", "tr")

        assert isinstance(rows, LazyElementList)
        assert rows.config is config
        assert len(rows) == 2

    def test_parent_is_the_driver(self, driver):
        driver.element("id", "save")
        assert handle_for(driver).parent is driver

    def test_session_id_of_the_driver(self, driver):
        """Reads the owning session like a plain WebElement would."""
        el = driver.element("id", "save")
        h = handle_for(driver)
        assert h.session_id == "fake-session"
        assert h.session_id == el.session_id

    def test_query_of_missing_parent_is_an_action_error(self, driver):
        """A child list under a parent that is not rendered fails as a query."""
        rows = handle_for(driver, value="table").find_elements("tag name", "tr")

        with pytest.raises(ActionError) as exc_info:
            len(rows)

        error = exc_info.value
        assert error.action == "query"
        assert error.element_name == "id=table > tag name=tr"
        assert isinstance(error.cause, NoSuchElementException)


class TestIdentity:
    """Unwrap hooks and equality."""

    def test_unwrap(self, driver):
        el = driver.element("id", "save")
        h = handle_for(driver)
        assert h.unwrap() is el
        assert unwrap_element(h) is el
        assert unwrap_element(el) is el

    def test_equality_by_resolved_id(self, driver):
        el = driver.element("id", "save")
        a = handle_for(driver)
        b = handle_for(driver)
        assert a == b
        assert a == el
        assert hash(a) == hash(b)
        assert a.id == el.id

    def test_different_elements_differ(self, driver):
        driver.element("id", "a")
        driver.element("id", "b")
        assert handle_for(driver, value="a") != handle_for(driver, value="b")


class TestResilientElement:
    """Construction entry point."""

    def test_default_config(self):
        el = FakeElement()
        h = resilient_element(lambda: el)
        assert h.config is DEFAULT_ELEMENT_RETRY
        assert h.unwrap() is el

    def test_explicit_config(self):
        config = RetryConfig(7, 10, False)
        assert resilient_element(lambda: FakeElement(), config).config is config

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            resilient_element(FakeElement())
