"""Cancellation handle shared between a caller and an in-flight request."""
from __future__ import annotations

import time
from threading import Event, Lock, Timer
from typing import Callable, Dict

from itunesSearch.errors import SearchCancelledError


class Deadline:
    """Optional time budget plus an explicit ``cancel()`` switch.

    ``cancel()`` may be called from any thread. Callbacks registered with
    :meth:`add_callback` run once, either on ``cancel()`` or when the budget
    runs out (a timer is armed while at least one callback is registered).
    The client uses them to wake a caller blocked on a request.
    """

    def __init__(
        self,
        timeout: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be non-negative")
        self._clock = clock
        self._expires_at = None if timeout is None else clock() + timeout
        self._cancelled = Event()
        self._lock = Lock()
        self._reason = ""
        self._callbacks: Dict[int, Callable[[], None]] = {}
        self._next_token = 0
        self._timer: Timer | None = None

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(seconds)

    def cancel(self, reason: str = "cancelled") -> None:
        with self._lock:
            if self._cancelled.is_set():
                return
            self._reason = reason
            self._cancelled.set()
        self._fire()

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set() or self.expired

    def remaining(self) -> float | None:
        """Seconds left in the budget, ``None`` when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def check(self) -> None:
        if self._cancelled.is_set():
            raise SearchCancelledError(self._reason)
        if self.expired:
            raise SearchCancelledError("deadline exceeded")

    def bound(self, timeout: float | None) -> float | None:
        """Return ``timeout`` clamped to what is left of the budget."""
        left = self.remaining()
        if left is None:
            return timeout
        if timeout is None:
            return left
        return min(timeout, left)

    # Callbacks ----------------------------------------------------------
    def add_callback(self, fn: Callable[[], None]) -> int | None:
        """Run ``fn`` on cancellation or expiry; returns a token for removal.

        When the deadline has already fired, ``fn`` runs immediately and
        ``None`` is returned.
        """
        with self._lock:
            if not self._cancelled.is_set() and not self.expired:
                token = self._next_token
                self._next_token += 1
                self._callbacks[token] = fn
                self._arm()
                return token
        fn()
        return None

    def remove_callback(self, token: int | None) -> None:
        if token is None:
            return
        with self._lock:
            self._callbacks.pop(token, None)
            if self._callbacks or self._timer is None:
                return
            timer, self._timer = self._timer, None
        timer.cancel()

    def _arm(self) -> None:
        # Caller holds the lock.
        left = self.remaining()
        if left is None or self._timer is not None:
            return
        self._timer = Timer(left, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        for fn in callbacks:
            fn()


__all__ = ["Deadline"]
