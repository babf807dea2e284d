"""Wrapper that retries failing calls."""

from __future__ import annotations

import functools
import time
from typing import Any

from wrapkit.context import _context_of


class WithRetry:
    """Delegates to ``base`` and retries a call that raises.

    After a failure the call is repeated up to ``retry_count`` times, waiting
    ``retry_interval`` seconds before each attempt.  If the call carries a
    context that finishes while waiting, the last error is raised at once.
    """

    def __init__(self, base: Any, retry_count: int, retry_interval: float) -> None:
        self._base = base
        self._retry_count = retry_count
        self._retry_interval = retry_interval

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._base, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            try:
                return attr(*args, **kwargs)
            except Exception as exc:
                if self._retry_count < 1:
                    raise
                last_error = exc

            ctx = _context_of(args, kwargs)
            for _ in range(self._retry_count):
                if ctx is not None:
                    if ctx.wait(self._retry_interval):
                        raise last_error
                else:
                    time.sleep(self._retry_interval)
                try:
                    return attr(*args, **kwargs)
                except Exception as exc:
                    last_error = exc
            raise last_error

        return call