# uiauto_selenium/conditions.py
"""
@file conditions.py
@brief Readiness conditions applied before element operations.

Every operation name maps to exactly one condition:

    click, send_keys, clear  -> CLICKABLE   (displayed and enabled)
    is_displayed             -> VISIBLE     (displayed)
    everything else          -> DOM_PRESENT (tag_name can be read)

The wait is advisory. When it times out the operation runs anyway and the
stale retry around it is what decides success.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from selenium.common.exceptions import (NoSuchElementException,
                                        StaleElementReferenceException)

from .config import TimeConfig
from .exceptions import TimeoutError
from .waits import wait_until

logger = logging.getLogger(__name__)

ElementRef = Callable[[], Any]


class ReadinessCondition(Enum):
    CLICKABLE = "clickable"
    VISIBLE = "visible"
    DOM_PRESENT = "present"


OPERATION_CONDITIONS: Dict[str, ReadinessCondition] = {
    "click": ReadinessCondition.CLICKABLE,
    "send_keys": ReadinessCondition.CLICKABLE,
    "clear": ReadinessCondition.CLICKABLE,
    "is_displayed": ReadinessCondition.VISIBLE,
}


def condition_for(operation: str) -> ReadinessCondition:
    """Look up the readiness condition for an operation name."""
    return OPERATION_CONDITIONS.get(operation, ReadinessCondition.DOM_PRESENT)


def _is_clickable(element: Any) -> bool:
    return bool(element.is_displayed() and element.is_enabled())


def _is_visible(element: Any) -> bool:
    return bool(element.is_displayed())


def _is_present(element: Any) -> bool:
    # Works on hidden elements too; raises once the node is detached
    element.tag_name
    return True


_CHECKS: Dict[ReadinessCondition, Callable[[Any], bool]] = {
    ReadinessCondition.CLICKABLE: _is_clickable,
    ReadinessCondition.VISIBLE: _is_visible,
    ReadinessCondition.DOM_PRESENT: _is_present,
}


def await_condition(
    element_ref: ElementRef,
    condition: ReadinessCondition,
    *,
    description: str = "element",
    verbose: bool = False,
) -> Optional[Any]:
    """
    Poll element_ref until the resolved element satisfies condition.

    An element that cannot be resolved yet, or that goes stale while being
    checked, simply counts as "not ready". The poll runs for the
    element_wait window of the current TimeConfig.

    @return The element that satisfied the condition, or None on timeout
    """
    check = _CHECKS[condition]
    settings = TimeConfig.current().element_wait

    def ready() -> Optional[Any]:
        try:
            element = element_ref()
            return element if check(element) else None
        except (StaleElementReferenceException, NoSuchElementException):
            return None

    try:
        element = wait_until(
            ready,
            timeout=settings.timeout,
            interval=settings.interval,
            description=f"'{description}' to be {condition.value}",
            stage="precondition",
        )
    except TimeoutError as e:
        if verbose:
            logger.warning(
                "Wait timeout for '%s' to be %s - proceeding with operation: %s",
                description, condition.value, e,
            )
        return None

    if verbose:
        logger.debug("'%s' is %s", description, condition.value)
    return element
