"""Pipeline orchestration for phone lookup, business research, and report validation."""

from .service import EnrichmentOrchestrator

__all__ = ["EnrichmentOrchestrator"]
