"""Wrappers that validate call arguments before delegating."""

from __future__ import annotations

import functools
from typing import Any

from wrapkit.context import Context
from wrapkit.twirp import ErrorCode, new_error


def _validate_arguments(args: tuple, kwargs: dict) -> None:
    """Call ``validate()`` on every argument that has one; it raises when invalid."""
    for value in (*args, *kwargs.values()):
        if isinstance(value, Context):
            continue
        validate = getattr(value, "validate", None)
        if callable(validate):
            validate()


class WithValidation:
    """Delegates to ``base`` after validating the call's arguments.

    Arguments with a ``validate()`` method are validated first; the exception
    it raises propagates and the base method is not called.
    """

    def __init__(self, base: Any) -> None:
        self._base = base

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._base, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            _validate_arguments(args, kwargs)
            return attr(*args, **kwargs)

        return call


class WithTwirpValidation:
    """Like :class:`WithValidation`, but reports failures as invalid-argument TwirpErrors."""

    def __init__(self, base: Any) -> None:
        self._base = base

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        attr = getattr(self._base, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def call(*args: Any, **kwargs: Any) -> Any:
            try:
                _validate_arguments(args, kwargs)
            except Exception as exc:
                raise new_error(ErrorCode.INVALID_ARGUMENT, str(exc)) from exc
            return attr(*args, **kwargs)

        return call