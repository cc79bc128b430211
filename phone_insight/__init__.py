"""Top-level package for the phone number sales-intelligence enrichment toolkit."""

from . import models  # noqa: F401
from .errors import (
    ConfigurationError,
    PhoneInsightError,
    PhoneLookupError,
    ResearchError,
    ResponseFormatError,
)
from .extraction import extract_json_object
from .hints import classify_business, extract_area_code, extract_location_hint
from .models import (
    BusinessHint,
    CombinedResult,
    ConfidenceScore,
    KeyPersonnel,
    OwnerType,
    PhoneMetadata,
    ReportStatus,
    SalesInsightReport,
)
from .orchestrator import EnrichmentOrchestrator
from .prompt import build_research_prompt
from .validation import validate_report

__all__ = [
    "BusinessHint",
    "CombinedResult",
    "ConfidenceScore",
    "ConfigurationError",
    "EnrichmentOrchestrator",
    "KeyPersonnel",
    "OwnerType",
    "PhoneInsightError",
    "PhoneLookupError",
    "PhoneMetadata",
    "ReportStatus",
    "ResearchError",
    "ResponseFormatError",
    "SalesInsightReport",
    "build_research_prompt",
    "classify_business",
    "extract_area_code",
    "extract_json_object",
    "extract_location_hint",
    "validate_report",
    "api",
    "orchestrator",
    "providers",
]
