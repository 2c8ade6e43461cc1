# create_image/core/cancellation.py
# Cooperative cancellation token & wall-clock deadline threaded through retry, pacing & fallback loops

from __future__ import annotations

import threading
import time
from typing import Callable

from .exceptions import GenerationCancelledError


# * Cancellation token shared between a caller & a long sequential operation
class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason = ""

    # request cancellation (safe to call from any thread)
    def cancel(self, reason: str = "Cancelled by caller") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    # sleep up to `seconds`, waking early on cancel; returns True if cancelled
    def wait(self, seconds: float) -> bool:
        return self._event.wait(max(0.0, seconds))

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelledError(self.reason or "Cancelled by caller")


# * Absolute wall-clock budget for a unit of work
class Deadline:
    def __init__(self, budget: float | None, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.budget = budget
        self._expires_at = None if budget is None else clock() + budget

    # seconds left (None = unbounded)
    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    # true if sleeping `seconds` would overrun the budget
    def would_exceed(self, seconds: float) -> bool:
        remaining = self.remaining()
        return remaining is not None and seconds >= remaining
