from __future__ import annotations

import threading

import pytest

from itunesSearch.errors import SearchCancelledError
from itunesSearch.utils.deadline import Deadline


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_unbounded_deadline():
    deadline = Deadline()
    assert deadline.remaining() is None
    assert deadline.bound(7.0) == 7.0
    assert deadline.bound(None) is None
    deadline.check()


def test_budget_runs_out():
    clock = FakeClock()
    deadline = Deadline(3.0, clock=clock)
    assert deadline.remaining() == 3.0
    clock.now = 2.5
    assert deadline.bound(10.0) == pytest.approx(0.5)
    assert deadline.bound(None) == pytest.approx(0.5)
    clock.now = 3.0
    assert deadline.expired
    assert deadline.remaining() == 0.0
    with pytest.raises(SearchCancelledError, match="deadline exceeded"):
        deadline.check()


def test_cancel_from_another_thread():
    deadline = Deadline.after(60)
    worker = threading.Thread(target=deadline.cancel, args=("shutdown",))
    worker.start()
    worker.join()
    assert deadline.cancelled
    with pytest.raises(SearchCancelledError, match="shutdown"):
        deadline.check()


def test_first_cancel_reason_wins():
    deadline = Deadline()
    deadline.cancel("first")
    deadline.cancel("second")
    with pytest.raises(SearchCancelledError, match="first"):
        deadline.check()


def test_negative_timeout_rejected():
    with pytest.raises(ValueError):
        Deadline(-1)


def test_callback_runs_on_cancel():
    deadline = Deadline()
    fired = threading.Event()
    deadline.add_callback(fired.set)
    deadline.cancel()
    assert fired.is_set()


def test_callback_runs_when_budget_expires():
    deadline = Deadline(0.05)
    fired = threading.Event()
    deadline.add_callback(fired.set)
    assert fired.wait(2.0)


def test_callback_runs_immediately_once_cancelled():
    deadline = Deadline()
    deadline.cancel()
    fired = threading.Event()
    assert deadline.add_callback(fired.set) is None
    assert fired.is_set()


def test_removed_callback_does_not_run():
    deadline = Deadline(0.05)
    fired = threading.Event()
    token = deadline.add_callback(fired.set)
    deadline.remove_callback(token)
    assert not fired.wait(0.2)
    deadline.cancel()
    assert not fired.is_set()
