"""
Ordered component registry.

The engine tries region parsers and variable replacers in registry order,
so position decides precedence. Callers place components with explicit
operations (insert_at, append_last) and remove them by predicate or kind;
there is no raw index assignment.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OrderedRegistry(Generic[T]):
    """
    Ordered sequence of pipeline components.

    Example:
        parsers = OrderedRegistry[HttpRegionParser]("http_region_parsers")
        parsers.append_last(NoteMetaHttpRegionParser(confirm))
        parsers.remove_kind(SettingsScriptHttpRegionParser)
    """

    def __init__(self, name: str, items: list[T] | None = None):
        self._name = name
        self._items: list[T] = list(items or [])

    @property
    def name(self) -> str:
        return self._name

    def insert_at(self, index: int, item: T) -> None:
        """Insert before position ``index`` (0 = tried first)."""
        self._items.insert(index, item)
        logger.debug(f"[{self._name}] Inserted {item!r} at {index}")

    def append_last(self, item: T) -> None:
        """Add an item that is tried after every existing one."""
        self._items.append(item)
        logger.debug(f"[{self._name}] Appended {item!r}")

    def remove_where(self, predicate: Callable[[T], bool]) -> list[T]:
        """
        Remove every matching item, keeping the order of the rest.

        Returns:
            Removed items in their former order
        """
        removed = [item for item in self._items if predicate(item)]
        if removed:
            self._items = [item for item in self._items if not predicate(item)]
            logger.debug(f"[{self._name}] Removed {len(removed)} item(s)")
        return removed

    def remove_kind(self, kind: type) -> list[T]:
        """Remove every instance of ``kind``."""
        return self.remove_where(lambda item: isinstance(item, kind))

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        return next((item for item in self._items if predicate(item)), None)

    def find_kind(self, kind: type) -> T | None:
        return self.find(lambda item: isinstance(item, kind))

    def index_of(self, item: T) -> int:
        """Position of ``item``, or -1."""
        for index, candidate in enumerate(self._items):
            if candidate is item:
                return index
        return -1

    def snapshot(self) -> tuple[T, ...]:
        """Immutable copy of the current order."""
        return tuple(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return any(candidate is item for candidate in self._items)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self._name}', size={len(self._items)})"
