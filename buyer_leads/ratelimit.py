"""Fixed-window rate limiting.

Counters live in a ``RateLimitBackend`` handed to the limiter, so the same
limiter works against an in-process dict or a shared store.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from buyer_leads.config import RateLimitRule


@dataclass
class Window:
    count: int
    reset_at: float


class RateLimitBackend(Protocol):
    """Storage for per-identifier windows."""

    def get(self, key: str) -> Window | None: ...

    def set(self, key: str, window: Window) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class InMemoryRateLimitBackend:
    """Process-local window storage."""

    def __init__(self) -> None:
        self._windows: dict[str, Window] = {}

    def get(self, key: str) -> Window | None:
        return self._windows.get(key)

    def set(self, key: str, window: Window) -> None:
        self._windows[key] = window

    def delete(self, key: str) -> None:
        self._windows.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._windows)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float

    def retry_after(self, now: float) -> int:
        """Whole seconds until the window resets (at least 1)."""
        return max(1, math.ceil(self.reset_at - now))


class RateLimiter:
    """Allow at most ``max_requests`` per identifier per window.

    Parameters
    ----------
    window_seconds : float
        Window length.
    max_requests : int
        Requests allowed per window.
    backend : RateLimitBackend | None
        Window storage (in-memory by default).
    clock : Callable[[], float]
        Time source in seconds.
    """

    def __init__(
        self,
        window_seconds: float,
        max_requests: int,
        backend: RateLimitBackend | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.backend = backend if backend is not None else InMemoryRateLimitBackend()
        self.clock = clock

    @classmethod
    def from_rule(
        cls,
        rule: RateLimitRule,
        backend: RateLimitBackend | None = None,
        clock: Callable[[], float] = time.time,
    ) -> "RateLimiter":
        return cls(rule.window_seconds, rule.max_requests, backend=backend, clock=clock)

    def check(self, identifier: str) -> RateLimitDecision:
        """Count one request for ``identifier`` and report whether it is allowed."""
        now = self.clock()
        window = self.backend.get(identifier)

        if window is None or now > window.reset_at:
            window = Window(count=1, reset_at=now + self.window_seconds)
            self.backend.set(identifier, window)
            return RateLimitDecision(True, self.max_requests - 1, window.reset_at)

        if window.count >= self.max_requests:
            return RateLimitDecision(False, 0, window.reset_at)

        window.count += 1
        self.backend.set(identifier, window)
        return RateLimitDecision(True, max(0, self.max_requests - window.count), window.reset_at)

    def cleanup(self) -> int:
        """Drop expired windows; returns how many were removed."""
        now = self.clock()
        removed = 0
        for key in self.backend.keys():
            window = self.backend.get(key)
            if window is not None and now > window.reset_at:
                self.backend.delete(key)
                removed += 1
        return removed


def client_identifier(forwarded_for: str | None, user_agent: str | None) -> str:
    """Build the limiter key from the first forwarded IP and the user agent."""
    ip = forwarded_for.split(",")[0].strip() if forwarded_for else "unknown"
    agent = user_agent or "unknown"
    return f"{ip}-{agent[:50]}"
