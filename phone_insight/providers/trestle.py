"""Client for the Trestle caller-ID (phone metadata) API."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from ..errors import PhoneLookupError
from ..models import PhoneMetadata
from .base import HttpProviderClient, is_success, response_json

LOGGER = logging.getLogger(__name__)


class TrestleCallerIdClient(HttpProviderClient):
    """Look up caller-ID metadata for a phone number."""

    name = "Trestle"
    DEFAULT_BASE_URL = "https://api.trestleiq.com"
    CALLER_ID_PATH = "/3.1/caller_id"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(session=session, timeout_seconds=timeout_seconds)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {"x-api-key": self._api_key, "Accept": "application/json"}

    def lookup(self, phone: str) -> PhoneMetadata:
        url = f"{self._base_url}{self.CALLER_ID_PATH}"
        LOGGER.info("Calling Trestle caller ID endpoint %s", url)

        try:
            response = self._session.get(
                url,
                params={"phone": phone},
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as exc:
            LOGGER.error("Trestle request timed out after %s seconds", self._timeout)
            raise PhoneLookupError("Request timed out") from exc
        except requests.exceptions.RequestException as exc:
            LOGGER.error("Trestle request failed: %s", exc)
            raise PhoneLookupError(str(exc)) from exc

        LOGGER.info("Trestle status: %s", response.status_code)
        if not is_success(response):
            LOGGER.error("Trestle API error (%s): %s", response.status_code, response_json(response) or response.text)
            raise PhoneLookupError(
                response.reason or str(response.status_code),
                status_code=response.status_code,
            )

        payload = response_json(response)
        if not isinstance(payload, dict):
            raise PhoneLookupError("Trestle returned an unreadable response body.", status_code=response.status_code)

        LOGGER.info("Trestle data received")
        return PhoneMetadata.from_payload(payload)


__all__ = ["TrestleCallerIdClient"]
