import threading
import time

import pytest

from wrapkit.context import background
from wrapkit.pools import EmptyPoolError, RoundRobinPool, SyncPool


class FakeService:
    active = 0
    peak = 0
    _shared_lock = threading.Lock()

    def __init__(self, r1="", r2="", delay=0.0, err=None):
        self.r1 = r1
        self.r2 = r2
        self.delay = delay
        self.err = err
        self.call_counter = 0
        self._lock = threading.Lock()

    def f(self, ctx, a1, *a2):
        with self._lock:
            self.call_counter += 1
        with FakeService._shared_lock:
            FakeService.active += 1
            FakeService.peak = max(FakeService.peak, FakeService.active)
        try:
            time.sleep(self.delay)
        finally:
            with FakeService._shared_lock:
                FakeService.active -= 1
        if self.err is not None:
            raise self.err
        return self.r1, self.r2


def test_round_robin_f():
    impl1 = FakeService(r1="11", r2="12")
    impl2 = FakeService(r1="21", r2="22")
    wrapped = RoundRobinPool(impl1, impl2)
    for i in range(8):
        result = wrapped.f(background(), "a1", "a2")
        if i % 2 == 0:
            assert result == ("21", "22")
        else:
            assert result == ("11", "12")
    assert impl1.call_counter == 4
    assert impl2.call_counter == 4


def test_round_robin_empty():
    with pytest.raises(EmptyPoolError):
        RoundRobinPool()


def test_round_robin_single():
    wrapped = RoundRobinPool(FakeService(r1="a", r2="b"))
    assert wrapped.f(background(), "a1") == ("a", "b")


def test_sync_pool_empty():
    with pytest.raises(EmptyPoolError):
        SyncPool()


def test_sync_pool_f():
    FakeService.active = 0
    FakeService.peak = 0
    delay = 0.01
    impl1 = FakeService(delay=delay)
    impl2 = FakeService(delay=delay)
    wrapped = SyncPool(impl1, impl2)
    start = time.monotonic()
    threads = [
        threading.Thread(target=wrapped.f, args=(background(), "a1", "a2"))
        for _ in range(3)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert time.monotonic() - start > delay * 2
    assert impl1.call_counter + impl2.call_counter == 3
    assert FakeService.peak <= 2


def test_sync_pool_returns_impl_after_error():
    impl = FakeService(err=ValueError("broken"))
    wrapped = SyncPool(impl)
    for _ in range(2):
        with pytest.raises(ValueError):
            wrapped.f(background(), "a1")
    assert impl.call_counter == 2