# tests/test_context.py
"""
Tests for the action context stack and error traces.
"""

import pytest
from selenium.common.exceptions import NoSuchElementException

from uiauto_selenium.context import ActionContextManager
from uiauto_selenium.exceptions import ActionError


class TestActionContextManager:
    """Tests for nested action tracking."""

    def test_nested_actions(self):
        with ActionContextManager.action("find", target="id=form") as outer:
            with ActionContextManager.action("click", target="id=save") as inner:
                assert ActionContextManager.current() is inner
                assert inner.parent_context is outer
                assert ActionContextManager.get_current_description() == "click on 'id=save'"
                trace = inner.format_trace()
            assert ActionContextManager.current() is outer
        assert ActionContextManager.current() is None
        assert ActionContextManager.get_current_description() == "operation"

        lines = trace.splitlines()
        assert lines[1].startswith("  X click on 'id=save'")
        assert lines[2].startswith("  -> find on 'id=form'")

    def test_context_popped_on_error(self):
        with pytest.raises(RuntimeError):
            with ActionContextManager.action("click"):
                raise RuntimeError("boom")
        assert ActionContextManager.current() is None

    def test_to_dict(self):
        with ActionContextManager.action("send_keys", target="id=q", length=3) as ctx:
            data = ctx.to_dict()
        assert data["action_name"] == "send_keys"
        assert data["target"] == "id=q"
        assert data["metadata"] == {"length": 3}
        assert len(data["action_id"]) == 8


class TestActionErrorDetails:
    """ActionError keeps its cause."""

    def test_cause_traceback(self):
        try:
            raise NoSuchElementException("no such element: id=save")
        except NoSuchElementException as e:
            error = ActionError("click", "id=save", cause=e)

        assert "NoSuchElementException" in error.get_cause_traceback()
        assert "action='click'" in str(error)
        assert "element='id=save'" in str(error)

    def test_without_cause(self):
        assert ActionError("click").get_cause_traceback() == ""
