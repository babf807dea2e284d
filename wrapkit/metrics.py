"""Wrapper that records call durations and outcomes in a summary."""

from __future__ import annotations

import functools
import re
import threading
import time
from collections import defaultdict
from typing import Any, Optional

_METRIC_NAME = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")


class DurationSummary:
    """Collects durations labelled by instance name, method and result."""

    def __init__(self, name: str, help_text: str = "") -> None:
        if not _METRIC_NAME.match(name):
            raise ValueError(f"invalid metric name: {name!r}")
        self.name = name
        self.help_text = help_text
        self._lock = threading.Lock()
        self._samples: defaultdict[tuple[str, str, str], list[float]] = defaultdict(list)

    def observe(self, instance_name: str, method: str, result: str, seconds: float) -> None:
        """Record one duration for the given labels."""
        with self._lock:
            self._samples[(instance_name, method, result)].append(seconds)

    def samples(self, instance_name: str, method: str, result: str) -> list[float]:
        """Return the durations recorded for the given labels, oldest first."""
        with self._lock:
            return list(self._samples.get((instance_name, method, result), ()))


class WithMetrics:
    """Delegates to ``base`` and records each call's duration in ``summary``.

    A call that returns is recorded with result ``"ok"``, one that raises
    with ``"error"``.  Without a summary, one named after the base's type is made.
    """

    def __init__(
        self, base: Any, instance_name: str, summary: Optional[DurationSummary] = None
    ) -> None:
        self._base = base
        self._instance_name = instance_name
        if summary is None:
            prefix = type(base).__name__.lower()
            summary = DurationSummary(
                f"{prefix}_duration_seconds", f"{prefix} runtime duration and result"
            )
        self.summary = summary

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._base, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            result = "ok"
            try:
                return attr(*args, **kwargs)
            except Exception:
                result = "error"
                raise
            finally:
                self.summary.observe(
                    self._instance_name, name, result, time.perf_counter() - started
                )

        return call