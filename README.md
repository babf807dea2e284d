# wrapkit

Small, composable wrappers that add behaviour around the methods of any
object without changing the object. Each wrapper forwards attribute access
to the object it wraps; callable attributes come back wrapped, everything
else is returned as is. Wrappers can be stacked on one another.

| Wrapper | Module | What it adds |
| --- | --- | --- |
| `WithTimeout` | `wrapkit.timeout` | per-method timeouts applied to the call's `Context` |
| `WithRetry` | `wrapkit.retry` | repeats a call that raises, a fixed number of times at a fixed interval |
| `WithRateLimit` | `wrapkit.ratelimit` | token-bucket rate limiting with an initial burst |
| `RoundRobinPool` | `wrapkit.pools` | sends each call to the next implementation in turn |
| `SyncPool` | `wrapkit.pools` | lends each call an idle implementation, waiting while all are busy |
| `WithTwirpError` | `wrapkit.twirp` | turns exceptions into `TwirpError`s carrying the request as JSON metadata |
| `WithValidation`, `WithTwirpValidation` | `wrapkit.validation` | calls `validate()` on arguments before the call |
| `WithMetrics` | `wrapkit.metrics` | records call durations in a `DurationSummary`, labelled `"ok"` or `"error"` |

## Contexts

`wrapkit.context` provides cancellation contexts. A call "carries" a
context when its first positional argument is a `Context`, or when it is
passed as `ctx=`.

```python
from wrapkit.context import background, with_cancel, with_timeout

ctx, cancel = with_timeout(background(), 0.5)
ctx.deadline()   # deadline in time.monotonic() seconds, or None
ctx.done()       # True once cancelled or timed out
ctx.err()        # None, CanceledError or DeadlineExceededError
ctx.wait(0.1)    # block up to 0.1 s; True if the context is done
cancel()

child, cancel_child = with_cancel(ctx)   # finishes when ctx finishes
```

`background()` is the root context and is never done. Cancelling a context
cancels every context derived from it.

## Wrappers

```python
from wrapkit.context import background
from wrapkit.timeout import WithTimeout
from wrapkit.retry import WithRetry
from wrapkit.ratelimit import WithRateLimit
from wrapkit.pools import RoundRobinPool, SyncPool, EmptyPoolError

# run `fetch` under a context that times out after 2 seconds
service = WithTimeout(MyService(), {"fetch": 2.0})

# after a failure, retry twice more, 0.1 s apart; if the call's context
# finishes while waiting, the last error is raised at once
service = WithRetry(MyService(), retry_count=2, retry_interval=0.1)
service.fetch(background(), "key")

# 3 calls at once, then 10 per second; a waiting call whose context
# finishes raises that context's error
with WithRateLimit(MyService(), burst=3, rps=10) as limited:
    limited.fetch(background(), "key")
# after close(), calls raise RuntimeError

pool = RoundRobinPool(MyService(), MyService())  # EmptyPoolError if none are given
pool.fetch(background(), "key")

pool = SyncPool(MyService(), MyService())        # EmptyPoolError if none are given
```

`WithRateLimit` raises `ValueError` for a negative `burst` or a `rps` that
is not positive.

## Errors and validation

`wrapkit.twirp` defines `ErrorCode`, `TwirpError(code, msg, meta)`,
`new_error(code, msg)` and `internal_error_with(err)`.
`TwirpError.with_meta(key, value)` returns a copy with one more metadata
entry.

`WithTwirpError` re-raises any exception as a `TwirpError`; other
exceptions become `ErrorCode.INTERNAL` errors. The `request` metadata holds
the first non-context argument encoded as compact JSON (dataclasses and
objects are encoded from their public attributes; an empty string if it
cannot be encoded).

```python
from wrapkit.twirp import WithTwirpError, TwirpError, ErrorCode

wrapped = WithTwirpError(MyService())
try:
    wrapped.method(background(), request)
except TwirpError as err:
    err.code            # ErrorCode.INTERNAL
    err.meta["request"] # e.g. '{"foo":"invalid"}'
```

`WithValidation` calls `validate()` on every non-context argument that has
one and lets its exception propagate; the wrapped method is then not
called. `WithTwirpValidation` does the same but raises a `TwirpError` with
`ErrorCode.INVALID_ARGUMENT`.

## Metrics

```python
from wrapkit.metrics import DurationSummary, WithMetrics

summary = DurationSummary("service_duration_seconds", "service runtime duration and result")
service = WithMetrics(MyService(), "primary", summary)
service.fetch(background(), "key")
summary.samples("primary", "fetch", "ok")   # list of durations in seconds
```

Without a summary, `WithMetrics` creates one named
`<lowercased type name>_duration_seconds`, available as `.summary`.
`DurationSummary` raises `ValueError` for an invalid metric name.

## What it does not do

`DurationSummary` only keeps raw durations in memory. It computes no
quantiles and does not export or serve metrics to any monitoring system.

## Tests

```
pip install -e .[test]
pytest
```