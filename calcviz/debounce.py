"""Trailing-edge debouncing for bursts of UI events."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .config import DEBOUNCE_MS

logger = logging.getLogger(__name__)


@dataclass
class _PendingCall:
    args: Tuple[Any, ...]
    kwargs: dict


class Debouncer:
    """Run ``callback`` once, ``wait_ms`` after the last of a burst of calls.

    Each call cancels whatever is pending and reschedules with the newest
    arguments. The timer is ``loop.call_later`` when an asyncio loop is
    running in the calling thread, else a daemon ``threading.Timer``.
    """

    def __init__(self, callback: Callable[..., Any], wait_ms: int = DEBOUNCE_MS) -> None:
        if wait_ms <= 0:
            raise ValueError("wait_ms must be > 0")
        self._callback = callback
        self._wait_s = wait_ms / 1000.0

        self._lock = threading.Lock()
        self._pending: Optional[_PendingCall] = None
        self._timer: Optional[Any] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            self._cancel_timer_locked()
            self._pending = _PendingCall(args=args, kwargs=dict(kwargs))
            self._generation += 1
            self._schedule_locked(self._generation)

    def _schedule_locked(self, generation: int) -> None:
        fire = lambda: self._on_timer(generation)  # noqa: E731
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            timer = threading.Timer(self._wait_s, fire)
            timer.daemon = True
            self._timer = timer
            timer.start()
            return

        self._timer = loop.call_later(self._wait_s, fire)

    def _cancel_timer_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _take_pending(self, generation: Optional[int] = None) -> Optional[_PendingCall]:
        with self._lock:
            # a timer that lost the race to a newer call must not fire
            if generation is not None and generation != self._generation:
                return None
            call, self._pending = self._pending, None
            self._timer = None
            return call

    def _on_timer(self, generation: int) -> None:
        self._run(self._take_pending(generation))

    def _run(self, call: Optional[_PendingCall]) -> None:
        if call is None:
            return
        try:
            self._callback(*call.args, **call.kwargs)
        except Exception:
            logger.exception("debounced callback failed")

    def flush(self) -> None:
        """Run the pending call now, if there is one."""
        with self._lock:
            self._cancel_timer_locked()
        self._run(self._take_pending())

    def cancel(self) -> None:
        """Drop the pending call."""
        with self._lock:
            self._cancel_timer_locked()
            self._pending = None
