"""Cancellable repeating tick loops.

The controller never sleeps or spawns threads.  It asks a
:class:`Scheduler` for a repeating callback and keeps the returned
:class:`LoopHandle`; ``start`` (``schedule_repeating``) and ``cancel``
are the only two transitions a handle has.  Cancelling is idempotent.

Two schedulers ship with the core:

- :class:`ManualScheduler` fires callbacks only when told to advance
  time.  Tests and the headless runner use it for fully deterministic
  runs.
- :class:`AsyncioScheduler` chains ``loop.call_later`` callbacks on a
  running asyncio event loop, for interactive front-ends.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Callable

TickCallback = Callable[[], None]

# Tolerance for accumulated float drift when deciding whether a whole
# interval has elapsed.
_EPSILON = 1e-9


class LoopHandle(ABC):
    """A scheduled repeating callback."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """``True`` until :meth:`cancel` is called."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the loop.  Safe to call any number of times."""


class Scheduler(ABC):
    """Creates repeating tick loops."""

    @abstractmethod
    def schedule_repeating(self, interval: float, callback: TickCallback) -> LoopHandle:
        """Invoke *callback* every *interval* seconds until cancelled."""


# ---------------------------------------------------------------------------
# Manual (deterministic)
# ---------------------------------------------------------------------------

class ManualLoopHandle(LoopHandle):
    def __init__(self, interval: float, callback: TickCallback) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.interval = interval
        self.callback = callback
        self.fired = 0
        self._pending = 0.0
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False

    def _advance(self, seconds: float) -> None:
        self._pending += seconds
        while self._active and self._pending + _EPSILON >= self.interval:
            self._pending -= self.interval
            self.fired += 1
            self.callback()


class ManualScheduler(Scheduler):
    """Scheduler driven explicitly by :meth:`advance`.

    Example::

        scheduler = ManualScheduler()
        controller = LevelController(registry, scheduler=scheduler)
        controller.start_run(Difficulty.NORMAL)
        ...
        scheduler.advance(1.0)   # ten 100 ms ticks
    """

    def __init__(self) -> None:
        self._loops: list[ManualLoopHandle] = []
        self.now = 0.0

    def schedule_repeating(self, interval: float, callback: TickCallback) -> ManualLoopHandle:
        handle = ManualLoopHandle(interval, callback)
        self._loops.append(handle)
        return handle

    @property
    def active_loops(self) -> list[ManualLoopHandle]:
        return [h for h in self._loops if h.active]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every whole interval that elapses."""
        if seconds <= 0:
            return
        self.now += seconds
        for handle in list(self._loops):
            if handle.active:
                handle._advance(seconds)
        self._loops = [h for h in self._loops if h.active]

    def step(self) -> None:
        """Fire every active loop exactly once."""
        for handle in self.active_loops:
            handle._advance(handle.interval)
        self._loops = [h for h in self._loops if h.active]

    def run_until(
        self,
        predicate: Callable[[], bool],
        max_seconds: float,
        step: float,
    ) -> bool:
        """Advance in *step* increments until *predicate* holds.

        Returns ``True`` if the predicate became true within
        *max_seconds*.
        """
        waited = 0.0
        while not predicate():
            if waited >= max_seconds:
                return False
            self.advance(step)
            waited += step
        return True


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------

class AsyncioLoopHandle(LoopHandle):
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: TickCallback,
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._active = True
        self._timer: asyncio.TimerHandle | None = loop.call_later(interval, self._fire)

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        if not self._active:
            return
        # Re-arm before running so a callback that cancels wins.
        self._timer = self._loop.call_later(self._interval, self._fire)
        self._callback()


class AsyncioScheduler(Scheduler):
    """Schedules loops on an asyncio event loop (the running one by default)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule_repeating(self, interval: float, callback: TickCallback) -> AsyncioLoopHandle:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        loop = self._loop or asyncio.get_running_loop()
        return AsyncioLoopHandle(loop, interval, callback)
