"""Factory helpers for constructing provider clients and the orchestrator from configuration."""
from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Dict, Mapping, Optional

from .config import ConfigurationError, ProviderSettings
from .orchestrator import EnrichmentOrchestrator
from .providers.perplexity import PerplexityResearchClient
from .providers.trestle import TrestleCallerIdClient
from .rate_limit import RateLimitedClient, RateLimiter

LOGGER = logging.getLogger(__name__)


def _load_class(path: str):
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ConfigurationError(f"Invalid client class path '{path}'")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ConfigurationError(f"Module '{module_name}' does not define '{attr}'") from exc


def _default_phone_lookup(settings: ProviderSettings):
    return TrestleCallerIdClient(
        settings.require_trestle_key(),
        base_url=settings.trestle_base_url,
        timeout_seconds=settings.timeout_seconds,
    )


def _default_research(settings: ProviderSettings):
    return PerplexityResearchClient(
        settings.require_perplexity_key(),
        model=settings.research_model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        base_url=settings.perplexity_base_url,
        timeout_seconds=settings.timeout_seconds,
    )


def build_client(
    client_cfg: Optional[Mapping[str, Any]],
    settings: ProviderSettings,
    default: Callable[[ProviderSettings], Any],
):
    """Instantiate a client from its configuration section, or the default provider client."""

    client_cfg = client_cfg or {}
    if not isinstance(client_cfg, Mapping):
        raise ConfigurationError("Client configuration sections must be mappings")

    class_path = client_cfg.get("class")
    if class_path:
        options = client_cfg.get("options", {})
        client = _load_class(class_path)(**options)
        LOGGER.debug("Configured client %s from %s", getattr(client, "name", class_path), class_path)
    else:
        client = default(settings)

    calls_per_minute = client_cfg.get("rate_limit_per_minute", settings.rate_limit_per_minute)
    if calls_per_minute:
        return RateLimitedClient(client, rate_limiter=RateLimiter(float(calls_per_minute)))
    return client


def build_orchestrator(
    settings: ProviderSettings,
    config: Optional[Dict[str, Any]] = None,
) -> EnrichmentOrchestrator:
    """Build an orchestrator wired to the clients described by ``config``.

    Without a ``clients`` section the Trestle and Perplexity clients are used,
    which requires both API keys to be configured.
    """

    clients = (config or {}).get("clients") or {}
    phone_lookup = build_client(clients.get("phone_lookup"), settings, _default_phone_lookup)
    research = build_client(clients.get("research"), settings, _default_research)
    return EnrichmentOrchestrator(phone_lookup, research)


__all__ = ["build_client", "build_orchestrator"]
