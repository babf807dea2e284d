"""Wrapper that limits the rate of calls with a token bucket."""

from __future__ import annotations

import functools
import threading
import time
from typing import Any, Optional

from wrapkit.context import Context, _context_of

_POLL_INTERVAL = 0.01


class WithRateLimit:
    """Delegates to ``base``, letting at most ``rps`` calls per second through.

    Up to ``burst`` calls may go through at once; further tokens arrive at a
    steady rate.  A call that carries a context gives up with the context's
    error if it finishes while waiting for a token.
    """

    def __init__(self, base: Any, burst: int, rps: float) -> None:
        if burst < 0:
            raise ValueError("burst must not be negative")
        if rps <= 0:
            raise ValueError("rps must be positive")
        self._base = base
        self._capacity = max(burst, 1)
        self._tokens = burst
        self._interval = 1.0 / rps
        self._cond = threading.Condition()
        self._closed = False
        self._ticker = threading.Thread(target=self._tick, name="ratelimit-ticker", daemon=True)
        self._ticker.start()

    def _tick(self) -> None:
        next_at = time.monotonic() + self._interval
        with self._cond:
            while not self._closed:
                remaining = next_at - time.monotonic()
                if remaining > 0:
                    self._cond.wait(remaining)
                    continue
                if self._tokens < self._capacity:
                    self._tokens += 1
                    self._cond.notify()
                next_at += self._interval

    def _acquire(self, ctx: Optional[Context]) -> None:
        with self._cond:
            while True:
                if self._closed:
                    raise RuntimeError("rate limiter is closed")
                if ctx is not None and ctx.done():
                    raise ctx.err()
                if self._tokens > 0:
                    self._tokens -= 1
                    return
                self._cond.wait(_POLL_INTERVAL if ctx is not None else None)

    def close(self) -> None:
        """Stop producing tokens; waiting and later calls raise RuntimeError."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        self._ticker.join()

    def __enter__(self) -> "WithRateLimit":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._base, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            self._acquire(_context_of(args, kwargs))
            return attr(*args, **kwargs)

        return call