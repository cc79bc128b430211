"""Utilities for rate limiting calls to the external providers."""
from __future__ import annotations

import threading
import time
from typing import Optional

from .models import PhoneMetadata
from .prompt import ResearchPrompt


class RateLimiter:
    """Token bucket style rate limiter enforcing minimum interval between calls."""

    def __init__(self, calls_per_minute: Optional[float]) -> None:
        self._interval = 60.0 / float(calls_per_minute) if calls_per_minute else 0.0
        self._lock = threading.Lock()
        self._next_available = 0.0

    @property
    def interval(self) -> float:
        return self._interval

    def acquire(self) -> None:
        if self._interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            if now < self._next_available:
                time.sleep(self._next_available - now)
                now = time.monotonic()
            self._next_available = now + self._interval


class RateLimitedClient:
    """Wrapper that enforces a rate limit before delegating to a provider client."""

    def __init__(self, client, *, rate_limiter: Optional[RateLimiter] = None) -> None:
        self._client = client
        self._rate_limiter = rate_limiter or RateLimiter(None)

    @property
    def name(self) -> str:  # pragma: no cover - delegation
        return getattr(self._client, "name", self._client.__class__.__name__)

    @property
    def wrapped(self):
        return self._client

    def lookup(self, phone: str) -> PhoneMetadata:
        self._rate_limiter.acquire()
        return self._client.lookup(phone)

    def research(self, prompt: ResearchPrompt) -> str:
        self._rate_limiter.acquire()
        return self._client.research(prompt)

    def __getattr__(self, item):  # pragma: no cover - simple delegation
        return getattr(self._client, item)


__all__ = ["RateLimitedClient", "RateLimiter"]
