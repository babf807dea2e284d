"""Cancellation contexts with optional deadlines.

A context is either a root (``background()``), which is never done, or a
child created by :func:`with_cancel` or :func:`with_timeout`.  Cancelling
a context cancels every context derived from it.  Deadlines are expressed
in ``time.monotonic()`` seconds.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

CancelFunc = Callable[[], None]


class CanceledError(Exception):
    """Raised or reported when a context was cancelled."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class DeadlineExceededError(TimeoutError):
    """Raised or reported when a context's deadline passed."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class Context:
    """Carries a cancellation signal and an optional deadline."""

    def __init__(
        self, parent: Optional["Context"] = None, deadline: Optional[float] = None
    ) -> None:
        self._parent = parent
        self._own_deadline = deadline
        self._finished = threading.Event()
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._children: set[Context] = set()
        self._timer: Optional[threading.Timer] = None
        self._cancelable = parent is not None
        if parent is not None:
            parent._attach(self)

    def done(self) -> bool:
        """Return True once the context has been cancelled or timed out."""
        return self._finished.is_set()

    def err(self) -> Optional[BaseException]:
        """Return why the context finished, or None while it is still live."""
        with self._lock:
            return self._error

    def deadline(self) -> Optional[float]:
        """Return the effective deadline in monotonic seconds, or None."""
        inherited = self._parent.deadline() if self._parent is not None else None
        candidates = [d for d in (self._own_deadline, inherited) if d is not None]
        return min(candidates) if candidates else None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context is done or ``timeout`` seconds pass.

        Returns True if the context is done.
        """
        return self._finished.wait(timeout)

    def _attach(self, child: "Context") -> None:
        if not self._cancelable:
            return
        with self._lock:
            error = self._error
            if error is None:
                self._children.add(child)
        if error is not None:
            child._cancel(error)

    def _detach(self, child: "Context") -> None:
        with self._lock:
            self._children.discard(child)

    def _start_timer(self, seconds: float) -> None:
        with self._lock:
            if self._error is not None:
                return
            timer = threading.Timer(seconds, self._cancel, args=(DeadlineExceededError(),))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def _cancel(self, error: BaseException) -> None:
        with self._lock:
            if self._error is not None:
                return
            self._error = error
            children = list(self._children)
            self._children.clear()
            timer, self._timer = self._timer, None
        self._finished.set()
        if timer is not None:
            timer.cancel()
        for child in children:
            child._cancel(error)
        if self._parent is not None:
            self._parent._detach(self)


_BACKGROUND = Context()


def background() -> Context:
    """Return the root context, which is never cancelled."""
    return _BACKGROUND


def with_cancel(parent: Context) -> Tuple[Context, CancelFunc]:
    """Derive a context that finishes when ``cancel`` is called or the parent finishes."""
    ctx = Context(parent)

    def cancel() -> None:
        ctx._cancel(CanceledError())

    return ctx, cancel


def with_timeout(parent: Context, timeout: float) -> Tuple[Context, CancelFunc]:
    """Derive a context that also finishes after ``timeout`` seconds."""
    ctx = Context(parent, deadline=time.monotonic() + timeout)
    if timeout <= 0:
        ctx._cancel(DeadlineExceededError())
    else:
        ctx._start_timer(timeout)

    def cancel() -> None:
        ctx._cancel(CanceledError())

    return ctx, cancel


def _context_of(args: Sequence[Any], kwargs: Mapping[str, Any]) -> Optional[Context]:
    """Find the context of a call: the first positional argument or ``ctx=``."""
    if args and isinstance(args[0], Context):
        return args[0]
    ctx = kwargs.get("ctx")
    return ctx if isinstance(ctx, Context) else None