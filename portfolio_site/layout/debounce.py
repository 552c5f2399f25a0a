"""Cancel-and-reschedule timer coalescing for layout triggers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerHandlePort(Protocol):
    """Handle for one scheduled timer."""

    def cancel(self) -> None:
        """Cancel the timer if it has not fired yet."""


class TimerSchedulerPort(Protocol):
    """Port scheduling callbacks after a delay."""

    def timer_schedule(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandlePort:
        """Schedule one callback.

        Args:
            delay_seconds: Delay before the callback runs.
            callback: Zero-argument callable.

        Returns:
            TimerHandlePort: Handle able to cancel the timer.
        """


class AsyncioTimerScheduler(TimerSchedulerPort):
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """Initialize scheduler.

        Args:
            loop: Optional loop; the running loop is used at schedule time when omitted.
        """

        self._loop = loop

    def timer_schedule(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandlePort:
        """Schedule one callback on the event loop.

        Args:
            delay_seconds: Delay before the callback runs.
            callback: Zero-argument callable.

        Returns:
            TimerHandlePort: asyncio timer handle.

        Raises:
            RuntimeError: Raised when no loop is given and none is running.
        """

        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_seconds, callback)


class Debouncer:
    """Coalesce bursts of triggers into one callback: the last trigger wins."""

    def __init__(self, delay_seconds: float, callback: Callable[[], None], scheduler: TimerSchedulerPort):
        """Initialize debouncer.

        Args:
            delay_seconds: Quiet period after the last trigger.
            callback: Callback run once the quiet period elapses.
            scheduler: Timer scheduler.

        Raises:
            ValueError: Raised when the delay is negative or dependencies are missing.
        """

        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        if callback is None or scheduler is None:
            raise ValueError("callback and scheduler must not be None")
        self._delay_seconds = delay_seconds
        self._callback = callback
        self._scheduler = scheduler
        self._pending_handle: TimerHandlePort | None = None

    @property
    def pending(self) -> bool:
        """Return whether a callback is scheduled and not yet fired."""

        return self._pending_handle is not None

    def trigger(self) -> None:
        """Cancel any pending timer and schedule a fresh one."""

        self.cancel()
        self._pending_handle = self._scheduler.timer_schedule(self._delay_seconds, self._fire)

    def cancel(self) -> None:
        """Cancel the pending timer, if any."""

        if self._pending_handle is not None:
            self._pending_handle.cancel()
            self._pending_handle = None

    def _fire(self) -> None:
        self._pending_handle = None
        self._callback()


__all__ = ["AsyncioTimerScheduler", "Debouncer", "TimerHandlePort", "TimerSchedulerPort"]
