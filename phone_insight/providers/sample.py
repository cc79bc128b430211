"""Offline provider clients that replay canned responses."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

from ..errors import PhoneLookupError, ResearchError
from ..models import PhoneMetadata
from ..prompt import ResearchPrompt


class StaticPhoneLookupClient:
    """Lookup client returning the same metadata payload for every phone number."""

    name = "static-lookup"

    def __init__(
        self,
        payload: Optional[Dict[str, Any]] = None,
        *,
        status_code: int = 200,
        message: Optional[str] = None,
    ) -> None:
        self._payload = dict(payload or {})
        self._status_code = status_code
        self._message = message
        self.calls: List[str] = []

    def lookup(self, phone: str) -> PhoneMetadata:
        self.calls.append(phone)
        if not 200 <= self._status_code < 300:
            raise PhoneLookupError(self._message or str(self._status_code), status_code=self._status_code)
        payload = {"phone_number": phone, **self._payload}
        return PhoneMetadata.from_payload(payload)


class StaticResearchClient:
    """Research client answering every brief with a fixed reply.

    Mapping replies are serialised to JSON so configuration files can spell
    them out as objects.
    """

    name = "static-research"

    def __init__(self, reply: Union[str, Dict[str, Any], None] = None, *, error: Optional[str] = None) -> None:
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        self._reply = reply or ""
        self._error = error
        self.prompts: List[ResearchPrompt] = []

    def research(self, prompt: ResearchPrompt) -> str:
        self.prompts.append(prompt)
        if self._error:
            raise ResearchError(self._error)
        if not self._reply:
            raise ResearchError("Perplexity returned an empty response.")
        return self._reply


__all__ = ["StaticPhoneLookupClient", "StaticResearchClient"]
