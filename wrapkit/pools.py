"""Wrappers that spread calls over several implementations."""

from __future__ import annotations

import functools
import itertools
import queue
import threading
from typing import Any


class EmptyPoolError(ValueError):
    """Raised when a pool is built with no implementations."""

    def __init__(self, message: str = "empty pool") -> None:
        super().__init__(message)


class RoundRobinPool:
    """Delegates each call to the next implementation in turn."""

    def __init__(self, *args: Any) -> None:
        if not args:
            raise EmptyPoolError()
        self._pool = list(args)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def _next(self) -> Any:
        with self._lock:
            index = next(self._counter) % len(self._pool)
        return self._pool[index]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._pool[0], name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            return getattr(self._next(), name)(*args, **kwargs)

        return call


class SyncPool:
    """Lends each call an idle implementation, waiting while all are busy."""

    def __init__(self, *args: Any) -> None:
        if not args:
            raise EmptyPoolError()
        self._first = args[0]
        self._idle: queue.Queue[Any] = queue.Queue()
        for impl in args:
            self._idle.put(impl)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._first, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            impl = self._idle.get()
            try:
                return getattr(impl, name)(*args, **kwargs)
            finally:
                self._idle.put(impl)

        return call