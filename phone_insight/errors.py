"""Exception hierarchy shared by the enrichment pipeline and its providers."""
from __future__ import annotations

from typing import Optional


class PhoneInsightError(RuntimeError):
    """Base class for all errors raised by :mod:`phone_insight`."""


class ConfigurationError(PhoneInsightError):
    """Raised when configuration files or provider credentials are missing or malformed."""


class ProviderError(PhoneInsightError):
    """Raised when an external provider call does not yield a usable response."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PhoneLookupError(ProviderError):
    """The phone-metadata provider failed or returned a non-success status."""


class ResearchError(ProviderError):
    """The research provider failed, returned a non-success status, or replied with nothing."""


class ResponseFormatError(PhoneInsightError):
    """The research reply could not be turned into a JSON object."""


class ReportStateError(PhoneInsightError):
    """Raised when a report is moved into a terminal status more than once."""


class InvalidRequestError(PhoneInsightError):
    """Raised when an inbound enrichment request is malformed."""


__all__ = [
    "ConfigurationError",
    "InvalidRequestError",
    "PhoneInsightError",
    "PhoneLookupError",
    "ProviderError",
    "ReportStateError",
    "ResearchError",
    "ResponseFormatError",
]
