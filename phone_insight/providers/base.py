"""Interfaces and HTTP helpers shared by the external provider clients."""
from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional, Protocol

import requests

from ..models import PhoneMetadata
from ..prompt import ResearchPrompt

LOGGER = logging.getLogger(__name__)


class PhoneLookupClient(Protocol):
    """Resolves a phone number to provider metadata."""

    name: str

    def lookup(self, phone: str) -> PhoneMetadata:  # pragma: no cover - runtime protocol
        """Return metadata for ``phone`` or raise :class:`~phone_insight.errors.PhoneLookupError`."""


class ResearchClient(Protocol):
    """Runs a research brief against a generative provider."""

    name: str

    def research(self, prompt: ResearchPrompt) -> str:  # pragma: no cover - runtime protocol
        """Return the raw reply text or raise :class:`~phone_insight.errors.ResearchError`."""


class HttpProviderClient:
    """Base class holding the HTTP sessions and timeout used by provider clients.

    An injected ``session`` is used for every call. Otherwise each thread gets
    its own :class:`requests.Session`; all of them are closed by :meth:`close`.
    """

    name = "provider"

    def __init__(self, *, session: Optional[requests.Session] = None, timeout_seconds: float = 30.0) -> None:
        self._shared_session = session
        self._timeout = timeout_seconds
        self._local = threading.local()
        self._lock = threading.Lock()
        self._sessions: List[requests.Session] = []

    @property
    def _session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        if self._shared_session is not None:
            self._shared_session.close()
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def response_json(response: requests.Response) -> Optional[Any]:
    """Return the decoded body of ``response``, or ``None`` when it is not JSON."""

    try:
        return response.json()
    except ValueError:
        LOGGER.debug("Response body is not JSON: %s", response.text[:200])
        return None


__all__ = [
    "HttpProviderClient",
    "PhoneLookupClient",
    "ResearchClient",
    "is_success",
    "response_json",
]
