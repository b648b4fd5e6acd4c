"""Leading-edge rate limiter for high-frequency signals (e.g. resize).

The first call in a quiet period runs immediately. Calls arriving within
``window_s`` of the last run are coalesced into a single trailing run at the
end of the window, made with the arguments of the most recent call.

Timers come from a ``schedule(delay_s, callback) -> handle`` callable whose
handle has ``cancel()``. ``asyncio``'s ``loop.call_later`` fits, as does the
Qt adapter in the native app. Everything runs on the caller's thread.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Schedule = Callable[[float, Callable[[], None]], TimerHandle]


class Throttle:
    def __init__(
        self,
        func: Callable[..., Any],
        window_s: float,
        schedule: Schedule,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_s < 0:
            raise ValueError("window_s must be >= 0")
        self._func = func
        self._window_s = float(window_s)
        self._schedule = schedule
        self._clock = clock

        self._last_ran: Optional[float] = None
        self._handle: Optional[TimerHandle] = None
        self._latest_args: Tuple[Any, ...] = ()

    @property
    def window_s(self) -> float:
        return self._window_s

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args: Any) -> None:
        now = self._clock()
        self._latest_args = args

        if self._last_ran is None or now - self._last_ran >= self._window_s:
            # Quiet long enough: run now, and a queued trailing run is stale.
            self.cancel()
            self._run(now)
            return

        if self._handle is None:
            delay = self._last_ran + self._window_s - now
            self._handle = self._schedule(max(0.0, delay), self._fire)

    def cancel(self) -> None:
        """Drop the pending trailing run, if any."""

        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._run(self._clock())

    def _run(self, now: float) -> None:
        self._last_ran = now
        args = self._latest_args
        self._latest_args = ()
        self._func(*args)
