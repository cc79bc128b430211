"""Configuration helpers for the phone enrichment pipeline."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}

_ENVIRONMENT_KEYS = {
    "trestle_api_key": "TRESTLE_API_KEY",
    "perplexity_api_key": "PERPLEXITY_API_KEY",
    "research_model": "PERPLEXITY_MODEL",
}


@dataclass(frozen=True)
class ProviderSettings:
    """Credentials and request parameters for the two external providers."""

    trestle_api_key: Optional[str] = None
    perplexity_api_key: Optional[str] = None
    trestle_base_url: str = "https://api.trestleiq.com"
    perplexity_base_url: str = "https://api.perplexity.ai"
    research_model: str = "sonar"
    temperature: float = 0.2
    max_tokens: int = 2000
    timeout_seconds: float = 30.0
    rate_limit_per_minute: Optional[float] = None

    def require_trestle_key(self) -> str:
        if not self.trestle_api_key:
            raise ConfigurationError("Missing Trestle API Key.")
        return self.trestle_api_key

    def require_perplexity_key(self) -> str:
        if not self.perplexity_api_key:
            raise ConfigurationError("Missing Perplexity API Key.")
        return self.perplexity_api_key

    def require_keys(self) -> None:
        self.require_trestle_key()
        self.require_perplexity_key()


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Configuration file '{file_path}' could not be parsed: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping at the top level")
    return data


def settings_from_mapping(values: Mapping[str, Any], base: Optional[ProviderSettings] = None) -> ProviderSettings:
    """Overlay known keys of ``values`` onto ``base`` (or the defaults)."""

    known = {item.name for item in fields(ProviderSettings)}
    unknown = sorted(set(values) - known)
    if unknown:
        LOGGER.warning("Ignoring unknown provider settings: %s", ", ".join(unknown))
    overrides = {key: value for key, value in values.items() if key in known and value is not None}
    return replace(base or ProviderSettings(), **overrides)


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> ProviderSettings:
    return _apply_environment(ProviderSettings(), os.environ if environ is None else environ)


def load_settings(
    config: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProviderSettings:
    """Build settings from a configuration's ``providers`` section and the environment.

    Environment variables take precedence over values from the configuration file.
    """

    providers = (config or {}).get("providers") or {}
    if not isinstance(providers, Mapping):
        raise ConfigurationError("The 'providers' configuration section must be a mapping")
    settings = settings_from_mapping(providers)
    return _apply_environment(settings, os.environ if environ is None else environ)


def _apply_environment(settings: ProviderSettings, environ: Mapping[str, str]) -> ProviderSettings:
    overrides = {
        attribute: environ[variable]
        for attribute, variable in _ENVIRONMENT_KEYS.items()
        if environ.get(variable)
    }
    return replace(settings, **overrides)


__all__ = [
    "ConfigurationError",
    "ProviderSettings",
    "load_configuration",
    "load_settings",
    "settings_from_env",
    "settings_from_mapping",
]
