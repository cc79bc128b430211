"""Clients for the external phone-metadata and research providers."""

from .base import HttpProviderClient, PhoneLookupClient, ResearchClient  # noqa: F401
from .perplexity import PerplexityResearchClient  # noqa: F401
from .sample import StaticPhoneLookupClient, StaticResearchClient  # noqa: F401
from .trestle import TrestleCallerIdClient  # noqa: F401

__all__ = [
    "HttpProviderClient",
    "PerplexityResearchClient",
    "PhoneLookupClient",
    "ResearchClient",
    "StaticPhoneLookupClient",
    "StaticResearchClient",
    "TrestleCallerIdClient",
]
