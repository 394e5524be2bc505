# uiauto_selenium/element_list.py
"""
@file element_list.py
@brief Read-only, index-waiting sequence of resilient elements.

The list owns a query callable, not elements. Every size or membership
question runs the query again, and every indexed access waits for the index
to exist before handing out an ElementHandle bound to that position.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from selenium.common.exceptions import (NoSuchElementException,
                                        StaleElementReferenceException)
from selenium.webdriver.remote.webelement import WebElement

from .config import DEFAULT_ELEMENT_RETRY, RetryConfig, TimeConfig
from .element import ElementHandle
from .exceptions import (ActionError, ElementIndexError, TimeoutError, UIAutoError,
                         UnsupportedMutationError)
from .waits import retry_on_stale, wait_until

logger = logging.getLogger(__name__)

ElementsQuery = Callable[[], List[WebElement]]


def _read_only(name: str) -> Callable[..., Any]:
    def refuse(self: LazyElementList, *args: Any, **kwargs: Any) -> Any:
        raise UnsupportedMutationError(name, self._description)
    refuse.__name__ = name
    refuse.__doc__ = f"Not supported: the list is read-only and '{name}' always raises."
    return refuse


class LazyElementList(Sequence):
    """
    Sequence view over a live element query.

    len(), `in`, index(), count(), == and snapshot() query afresh on each call.
    Indexing waits up to the index_wait window for the position to appear.
    Slicing returns a plain list of raw elements from a single query.
    """

    def __init__(
        self,
        query: ElementsQuery,
        config: RetryConfig = DEFAULT_ELEMENT_RETRY,
        description: str = "elements",
    ):
        """
        @param query Zero-argument callable returning the current raw elements
        @param config Retry budget inherited by every handle the list produces
        @param description Name used in logs and errors
        """
        self._query = query
        self._config = config
        self._description = description

    @property
    def config(self) -> RetryConfig:
        return self._config

    def _fetch(self) -> List[WebElement]:
        """Run the query under the stale retry; other failures become ActionError('query')."""
        try:
            return retry_on_stale(
                lambda: list(self._query()),
                self._config,
                description=f"query '{self._description}'",
            )
        except StaleElementReferenceException:
            raise
        except UIAutoError:
            raise
        except Exception as e:
            raise ActionError("query", self._description, cause=e) from e

    # --- Indexed access ---

    def get(self, index: int) -> ElementHandle:
        """
        Wait for position `index` and return a handle bound to it.

        @throws ElementIndexError if the position is still missing after the
                index_wait window
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"list indices must be integers, not {type(index).__name__}")
        if index < 0:
            size = len(self)
            if index + size < 0:
                raise ElementIndexError(index, size, self._description)
            index += size

        self._await_index(index)

        query = self._query
        description = self._description

        def element_at() -> WebElement:
            elements = query()
            if index >= len(elements):
                raise NoSuchElementException(
                    f"Element at index {index} of '{description}' is no longer present "
                    f"(size={len(elements)})"
                )
            return elements[index]

        return ElementHandle(element_at, self._config, f"{description}[{index}]")

    def _await_index(self, index: int) -> None:
        settings = TimeConfig.current().index_wait

        def index_ready() -> bool:
            elements = self._query()
            if len(elements) <= index:
                return False
            elements[index].tag_name
            return True

        try:
            wait_until(
                index_ready,
                timeout=settings.timeout,
                interval=settings.interval,
                description=f"index {index} of '{self._description}'",
                stage="index",
            )
        except TimeoutError as e:
            size = len(self._fetch())
            if size <= index:
                raise ElementIndexError(index, size, self._description) from e
            if self._config.verbose:
                logger.warning(
                    "Index %d of '%s' did not settle within %ss - proceeding",
                    index, self._description, settings.timeout,
                )

    def __getitem__(self, index: Union[int, slice]) -> Any:
        if isinstance(index, slice):
            return self._fetch()[index]
        return self.get(index)

    def __iter__(self) -> Iterator[ElementHandle]:
        # Size is re-read before every step so the walk follows the live list.
        i = 0
        while i < len(self):
            yield self.get(i)
            i += 1

    def __reversed__(self) -> Iterator[ElementHandle]:
        i = len(self) - 1
        while i >= 0:
            size = len(self)
            if i >= size:
                # Shrunk behind us: resume from the new last position.
                i = size - 1
                continue
            yield self.get(i)
            i -= 1

    # --- Fresh-query reads ---

    def __len__(self) -> int:
        return len(self._fetch())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __contains__(self, item: object) -> bool:
        return item in self._fetch()

    def contains_all(self, items: Iterable[Any]) -> bool:
        elements = self._fetch()
        return all(item in elements for item in items)

    def index(self, value: Any, start: int = 0, stop: Optional[int] = None) -> int:
        elements = self._fetch()
        if stop is None:
            return elements.index(value, start)
        return elements.index(value, start, stop)

    def count(self, value: Any) -> int:
        return self._fetch().count(value)

    def snapshot(self) -> List[WebElement]:
        """Raw elements of one fresh query, as a plain list."""
        return self._fetch()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LazyElementList):
            return self._fetch() == other._fetch()
        if isinstance(other, (list, tuple)):
            return self._fetch() == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<LazyElementList ({self._description})>"

    # --- Mutators ---

    append = _read_only("append")
    extend = _read_only("extend")
    insert = _read_only("insert")
    remove = _read_only("remove")
    pop = _read_only("pop")
    clear = _read_only("clear")
    sort = _read_only("sort")
    reverse = _read_only("reverse")
    __setitem__ = _read_only("__setitem__")
    __delitem__ = _read_only("__delitem__")
    __iadd__ = _read_only("__iadd__")
    __imul__ = _read_only("__imul__")
