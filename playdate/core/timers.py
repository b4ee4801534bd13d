from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:  # pragma: no cover
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:  # pragma: no cover
        ...


class AsyncioScheduler:
    """Schedules callbacks on the running asyncio loop.

    The loop is looked up per call so one scheduler can be created before the
    server loop starts (at import/startup) and used from route handlers and
    timer callbacks alike.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class TimerSlot:
    """One cancellable timer.

    Arming always cancels the previous handle first. Every arm/cancel bumps a
    generation counter, and a callback whose generation is stale is dropped,
    so a late fire can never act on a state that has moved on.
    """

    def __init__(self, *, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay_s: float, callback: Callable[[], None]) -> None:
        self.cancel()
        generation = self._generation

        def _fire() -> None:
            if generation != self._generation:
                return
            self._handle = None
            callback()

        self._handle = self._scheduler.call_later(delay_s, _fire)

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
