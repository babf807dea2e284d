from dataclasses import dataclass

import pytest

from wrapkit.context import background
from wrapkit.twirp import (
    ErrorCode,
    TwirpError,
    WithTwirpError,
    internal_error_with,
    new_error,
)


@dataclass
class MethodRequest:
    foo: str


class Service:
    def __init__(self):
        self.calls = 0

    def method(self, ctx, req):
        self.calls += 1
        if req.foo != "bar":
            raise RuntimeError("foo != bar")
        return "response"


class TwirpService:
    def method(self, ctx, req):
        raise new_error(ErrorCode.NOT_FOUND, "missing")


def test_success_passes_result_through():
    wrapped = WithTwirpError(Service())
    assert wrapped.method(background(), MethodRequest(foo="bar")) == "response"


def test_error_becomes_internal_with_request_meta():
    wrapped = WithTwirpError(Service())
    with pytest.raises(TwirpError) as info:
        wrapped.method(background(), MethodRequest(foo="invalid"))
    assert info.value.code is ErrorCode.INTERNAL
    assert info.value.meta["request"] == '{"foo":"invalid"}'
    assert info.value.msg == "foo != bar"


def test_twirp_error_keeps_its_code():
    wrapped = WithTwirpError(TwirpService())
    with pytest.raises(TwirpError) as info:
        wrapped.method(background(), {"id": 7})
    assert info.value.code is ErrorCode.NOT_FOUND
    assert info.value.meta["request"] == '{"id":7}'


def test_request_passed_by_keyword():
    wrapped = WithTwirpError(Service())
    with pytest.raises(TwirpError) as info:
        wrapped.method(ctx=background(), req=MethodRequest(foo="x"))
    assert info.value.meta["request"] == '{"foo":"x"}'


def test_with_meta_returns_copy():
    original = new_error(ErrorCode.INVALID_ARGUMENT, "bad")
    updated = original.with_meta("k", "v")
    assert updated.meta == {"k": "v"}
    assert original.meta == {}
    assert updated.code is ErrorCode.INVALID_ARGUMENT
    assert updated.msg == "bad"


def test_internal_error_with_records_cause():
    cause = KeyError("gone")
    twerr = internal_error_with(cause)
    assert twerr.code is ErrorCode.INTERNAL
    assert twerr.meta["cause"] == "KeyError"
    assert twerr.__cause__ is cause


def test_error_code_values():
    assert ErrorCode("internal") is ErrorCode.INTERNAL
    assert str(new_error(ErrorCode.INTERNAL, "boom")) == "twirp error internal: boom"