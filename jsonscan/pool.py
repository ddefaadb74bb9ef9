"""A thread-safe pool of reusable iterators."""

from __future__ import annotations

import threading
from typing import Any, Callable

from .iterator import Iterator


class IteratorPool:
    """Hands out iterators made by one factory and takes them back for reuse."""

    def __init__(self, factory: Callable[[], Iterator] | None = None) -> None:
        self._factory = factory if factory is not None else Iterator
        self._idle: list[Iterator] = []
        self._lock = threading.Lock()

    def borrow(self, data: Any) -> Iterator:
        """Return an iterator reset to read ``data``."""
        with self._lock:
            iterator = self._idle.pop() if self._idle else None
        if iterator is None:
            iterator = self._factory()
        iterator.reset(data)
        return iterator

    def give_back(self, iterator: Iterator) -> None:
        """Return an iterator to the pool, dropping its attachment."""
        iterator.attachment = None
        with self._lock:
            self._idle.append(iterator)