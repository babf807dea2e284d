"""RPC-style errors with codes and metadata, and a wrapper that produces them."""

from __future__ import annotations

import dataclasses
import enum
import functools
import json
from typing import Any, Mapping, Optional

from wrapkit.context import Context


class ErrorCode(str, enum.Enum):
    """Error codes an RPC call can fail with."""

    CANCELED = "canceled"
    UNKNOWN = "unknown"
    INVALID_ARGUMENT = "invalid_argument"
    MALFORMED = "malformed"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    NOT_FOUND = "not_found"
    BAD_ROUTE = "bad_route"
    ALREADY_EXISTS = "already_exists"
    PERMISSION_DENIED = "permission_denied"
    UNAUTHENTICATED = "unauthenticated"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    FAILED_PRECONDITION = "failed_precondition"
    ABORTED = "aborted"
    OUT_OF_RANGE = "out_of_range"
    UNIMPLEMENTED = "unimplemented"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    DATA_LOSS = "data_loss"


class TwirpError(Exception):
    """An error carrying a code, a message and string metadata."""

    def __init__(
        self, code: ErrorCode, msg: str, meta: Optional[Mapping[str, str]] = None
    ) -> None:
        super().__init__(msg)
        self.code = ErrorCode(code)
        self.msg = msg
        self.meta: dict[str, str] = dict(meta or {})

    def with_meta(self, key: str, value: str) -> "TwirpError":
        """Return a copy of this error with ``key`` set to ``value`` in its metadata."""
        copy = TwirpError(self.code, self.msg, {**self.meta, key: value})
        copy.__cause__ = self.__cause__
        return copy

    def __str__(self) -> str:
        return f"twirp error {self.code.value}: {self.msg}"

    def __repr__(self) -> str:
        return f"TwirpError({self.code!r}, {self.msg!r}, {self.meta!r})"


def new_error(code: ErrorCode, msg: str) -> TwirpError:
    """Build an error with the given code and message."""
    return TwirpError(code, msg)


def internal_error_with(err: BaseException) -> TwirpError:
    """Wrap any exception as an internal error, noting its type as the cause."""
    twerr = TwirpError(ErrorCode.INTERNAL, str(err), {"cause": type(err).__name__})
    twerr.__cause__ = err
    return twerr


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    raise TypeError(f"cannot encode {type(value).__name__}")


def _encode_request(request: Any) -> str:
    try:
        return json.dumps(request, default=_json_default, separators=(",", ":"))
    except (TypeError, ValueError):
        return ""


def _request_of(args: tuple, kwargs: Mapping[str, Any]) -> Any:
    """Return the first argument of a call that is not a context."""
    for value in (*args, *kwargs.values()):
        if not isinstance(value, Context):
            return value
    return None


class WithTwirpError:
    """Delegates to ``base``; failures become TwirpErrors carrying the request.

    Any exception a method raises is turned into a :class:`TwirpError`
    (non-Twirp errors become internal errors) whose ``request`` metadata holds
    the call's request encoded as compact JSON.
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
            try:
                return attr(*args, **kwargs)
            except Exception as exc:
                twerr = exc if isinstance(exc, TwirpError) else internal_error_with(exc)
                encoded = _encode_request(_request_of(args, kwargs))
                raise twerr.with_meta("request", encoded) from exc

        return call