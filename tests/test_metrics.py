import pytest

from wrapkit.context import background
from wrapkit.metrics import DurationSummary, WithMetrics


class Impl:
    label = "impl"

    def __init__(self, r1, r2, err=None):
        self.r1 = r1
        self.r2 = r2
        self.err = err

    def f(self, ctx, a1, *a2):
        if self.err is not None:
            raise self.err
        return self.r1, self.r2


def test_no_error():
    summary = DurationSummary("custom_metric_name_seconds", "help")
    wrapped = WithMetrics(Impl("1", "2"), "test", summary)
    assert wrapped.f(background(), "a1", "a2") == ("1", "2")
    samples = summary.samples("test", "f", "ok")
    assert len(samples) == 1
    assert samples[0] >= 0
    assert summary.samples("test", "f", "error") == []


def test_with_error():
    summary = DurationSummary("custom_metric_name_seconds")
    err = RuntimeError("unexpected error")
    wrapped = WithMetrics(Impl("1", "2", err), "test", summary)
    with pytest.raises(RuntimeError) as info:
        wrapped.f(background(), "a1", "a2")
    assert info.value is err
    assert len(summary.samples("test", "f", "error")) == 1
    assert summary.samples("test", "f", "ok") == []


def test_default_summary_name():
    wrapped = WithMetrics(Impl("1", "2"), "inst")
    assert wrapped.summary.name == "impl_duration_seconds"
    assert wrapped.summary.help_text == "impl runtime duration and result"
    wrapped.f(background(), "a")
    assert len(wrapped.summary.samples("inst", "f", "ok")) == 1


def test_attribute_passthrough():
    wrapped = WithMetrics(Impl("1", "2"), "inst")
    assert wrapped.label == "impl"


def test_invalid_metric_name():
    with pytest.raises(ValueError):
        DurationSummary("bad name")


def test_summary_observe_and_samples_copy():
    summary = DurationSummary("x_seconds")
    summary.observe("a", "m", "ok", 0.5)
    summary.observe("a", "m", "ok", 0.25)
    samples = summary.samples("a", "m", "ok")
    assert samples == [0.5, 0.25]
    samples.append(9.0)
    assert summary.samples("a", "m", "ok") == [0.5, 0.25]