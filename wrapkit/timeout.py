"""Wrapper that gives chosen methods a per-call timeout."""

from __future__ import annotations

import functools
from typing import Any, Mapping, Optional

from wrapkit.context import Context, with_timeout


class WithTimeout:
    """Delegates to ``base``; configured methods run under a timed-out context.

    ``timeouts`` maps method names to seconds.  A method is only affected
    when its timeout is positive and the call carries a context, either as
    the first positional argument or as ``ctx=``.
    """

    def __init__(self, base: Any, timeouts: Optional[Mapping[str, float]] = None) -> None:
        self._base = base
        self._timeouts = dict(timeouts or {})

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._base, name)
        timeout = self._timeouts.get(name)
        if not callable(attr) or not timeout or timeout <= 0:
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            if args and isinstance(args[0], Context):
                ctx, cancel = with_timeout(args[0], timeout)
                args = (ctx, *args[1:])
            elif isinstance(kwargs.get("ctx"), Context):
                ctx, cancel = with_timeout(kwargs["ctx"], timeout)
                kwargs = {**kwargs, "ctx": ctx}
            else:
                return attr(*args, **kwargs)
            try:
                return attr(*args, **kwargs)
            finally:
                cancel()

        return call