"""Client for the Perplexity chat-completions research API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..errors import ResearchError
from ..prompt import ResearchPrompt
from .base import HttpProviderClient, is_success, response_json

LOGGER = logging.getLogger(__name__)


class PerplexityResearchClient(HttpProviderClient):
    """Send research briefs to an online Perplexity model and return the reply text."""

    name = "Perplexity"
    DEFAULT_BASE_URL = "https://api.perplexity.ai"
    COMPLETIONS_PATH = "/chat/completions"

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "sonar",
        temperature: float = 0.2,
        max_tokens: int = 2000,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        super().__init__(session=session, timeout_seconds=timeout_seconds)
        self._api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def build_payload(self, prompt: ResearchPrompt) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt.system_instruction},
                {"role": "user", "content": prompt.user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": False,
        }

    def research(self, prompt: ResearchPrompt) -> str:
        url = f"{self._base_url}{self.COMPLETIONS_PATH}"
        LOGGER.info("Calling Perplexity API with model %s", self.model)

        try:
            response = self._session.post(
                url,
                json=self.build_payload(prompt),
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as exc:
            LOGGER.error("Perplexity request timed out after %s seconds", self._timeout)
            raise ResearchError("Perplexity request timed out.") from exc
        except requests.exceptions.RequestException as exc:
            LOGGER.error("Perplexity request failed: %s", exc)
            raise ResearchError(str(exc)) from exc

        LOGGER.info("Perplexity status: %s", response.status_code)
        body = response_json(response)
        if not is_success(response):
            LOGGER.error("Perplexity API error: %s", body if body is not None else response.text)
            raise ResearchError(_error_message(body, response.status_code), status_code=response.status_code)

        content = _completion_content(body)
        if not content:
            LOGGER.error("Perplexity returned an empty response content: %s", body)
            raise ResearchError("Perplexity returned an empty response.", status_code=response.status_code)

        LOGGER.info("Perplexity response content received")
        return content


def _error_message(body: Any, status_code: int) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if body.get("message"):
            return str(body["message"])
    return f"Perplexity API Error: {status_code}"


def _completion_content(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


__all__ = ["PerplexityResearchClient"]
