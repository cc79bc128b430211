"""Data models shared by the enrichment pipeline, its providers, and the API layer."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import ReportStateError


# --- Phone Metadata (caller-ID provider) ---

class OwnerType(str, Enum):
    """Discriminant of the polymorphic ``belongs_to`` owner record."""

    PERSON = "Person"
    BUSINESS = "Business"

    @classmethod
    def parse(cls, value: Any) -> Optional["OwnerType"]:
        for member in cls:
            if member.value == value:
                return member
        return None


@dataclass(frozen=True, slots=True)
class PhoneOwner:
    """Owner of a phone number, tagged by :class:`OwnerType`.

    ``industry`` is only ever populated for business owners.
    """

    type: Optional[OwnerType] = None
    name: Optional[str] = None
    industry: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["PhoneOwner"]:
        if not isinstance(payload, Mapping):
            return None
        owner_type = OwnerType.parse(payload.get("type"))
        industry = payload.get("industry") if owner_type is OwnerType.BUSINESS else None
        return cls(
            type=owner_type,
            name=_optional_str(payload.get("name")),
            industry=_optional_str(industry),
        )


@dataclass(frozen=True, slots=True)
class PhoneAddress:
    """Open mapping of locality fields for one of the owner's current addresses."""

    parts: Dict[str, str] = field(default_factory=dict)

    @property
    def city(self) -> Optional[str]:
        return self.parts.get("city") or None

    @property
    def state(self) -> Optional[str]:
        return self.parts.get("state") or None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["PhoneAddress"]:
        if not isinstance(payload, Mapping):
            return None
        return cls(parts={str(key): value for key, value in payload.items() if isinstance(value, str)})


@dataclass(frozen=True, slots=True)
class PhoneMetadata:
    """Facts returned by the phone-metadata provider for a single number."""

    id: Optional[str] = None
    phone_number: Optional[str] = None
    is_valid: Optional[bool] = None
    line_type: Optional[str] = None
    carrier: Optional[str] = None
    is_prepaid: Optional[bool] = None
    is_commercial: Optional[bool] = None
    belongs_to: Optional[PhoneOwner] = None
    current_addresses: List[PhoneAddress] = field(default_factory=list)
    emails: List[str] = field(default_factory=list)
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PhoneMetadata":
        """Build metadata from a provider body, ignoring missing or mistyped fields."""

        addresses = payload.get("current_addresses")
        if not isinstance(addresses, list):
            addresses = []
        emails = payload.get("emails")
        if isinstance(emails, str):
            emails = [emails]
        error = payload.get("error")
        warnings = payload.get("warnings") or []

        return cls(
            id=_optional_str(payload.get("id")),
            phone_number=_optional_str(payload.get("phone_number")),
            is_valid=_optional_bool(payload.get("is_valid")),
            line_type=_optional_str(payload.get("line_type")),
            carrier=_optional_str(payload.get("carrier")),
            is_prepaid=_optional_bool(payload.get("is_prepaid")),
            is_commercial=_optional_bool(payload.get("is_commercial")),
            belongs_to=PhoneOwner.from_payload(payload.get("belongs_to")),
            current_addresses=[
                address
                for address in (PhoneAddress.from_payload(item) for item in addresses)
                if address is not None
            ],
            emails=[str(email) for email in emails] if isinstance(emails, list) else [],
            error=_optional_str(error.get("message")) if isinstance(error, Mapping) else None,
            warnings=[str(warning) for warning in warnings] if isinstance(warnings, list) else [],
            raw=dict(payload),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the provider body this metadata was parsed from."""

        return dict(self.raw)


# --- Derived Hints ---

@dataclass(frozen=True, slots=True)
class BusinessHint:
    """Business identity derived from phone metadata and used to seed research."""

    business_name: Optional[str] = None
    industry_hint: Optional[str] = None
    location_hint: Optional[str] = None

    @property
    def is_business(self) -> bool:
        return bool(self.business_name)


# --- Sales Insight Report ---

class ReportStatus(str, Enum):
    NOT_ATTEMPTED = "not_attempted"
    SUCCESS = "success"
    NO_BUSINESS_FOUND = "no_business_found"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not ReportStatus.NOT_ATTEMPTED


class ConfidenceScore(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(slots=True)
class KeyPersonnel:
    """A person surfaced by research, with an optional professional profile."""

    name: str
    title: str
    linkedin_url: Optional[str] = None
    profile_summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "linkedInUrl": self.linkedin_url,
            "profileSummary": self.profile_summary,
        }


# Python attribute name -> wire (camelCase) name for report content fields.
WIRE_NAMES: Dict[str, str] = {
    "company_name": "companyName",
    "website": "website",
    "industry": "industry",
    "location": "location",
    "company_size": "companySize",
    "key_personnel": "keyPersonnel",
    "company_overview": "companyOverview",
    "products_services": "productsServices",
    "target_audience": "targetAudience",
    "recent_news_trigger": "recentNewsTrigger",
    "potential_pain_points": "potentialPainPoints",
    "tech_stack_hints": "techStackHints",
    "conversation_starters": "conversationStarters",
    "ai_confidence_score": "aiConfidenceScore",
    "research_timestamp": "researchTimestamp",
    "research_sources": "researchSources",
}

_OMITTED_WHEN_UNSET = {"research_sources", "error", "message"}


def _wire_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [item.to_dict() if isinstance(item, KeyPersonnel) else item for item in value]
    return value


@dataclass(slots=True)
class ValidatedInsights:
    """Research findings coerced into the report shape, ready to be applied to a report."""

    company_name: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    company_size: Optional[str] = None
    key_personnel: Optional[List[KeyPersonnel]] = None
    company_overview: Optional[str] = None
    products_services: Optional[str] = None
    target_audience: Optional[str] = None
    recent_news_trigger: Optional[str] = None
    potential_pain_points: Optional[List[str]] = None
    tech_stack_hints: Optional[List[str]] = None
    conversation_starters: Optional[List[str]] = None
    ai_confidence_score: Optional[ConfidenceScore] = None
    research_timestamp: Optional[str] = None
    research_sources: Optional[List[str]] = None

    def as_fields(self) -> Dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}

    def to_dict(self) -> Dict[str, Any]:
        return {WIRE_NAMES[name]: _wire_value(value) for name, value in self.as_fields().items()}


@dataclass(slots=True)
class SalesInsightReport:
    """Sales-intelligence report for one enrichment request.

    A report starts out as ``not_attempted`` and is moved into exactly one
    terminal status through :meth:`finalize`.
    """

    status: ReportStatus = ReportStatus.NOT_ATTEMPTED
    company_name: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    company_size: Optional[str] = None
    key_personnel: Optional[List[KeyPersonnel]] = None
    company_overview: Optional[str] = None
    products_services: Optional[str] = None
    target_audience: Optional[str] = None
    recent_news_trigger: Optional[str] = None
    potential_pain_points: Optional[List[str]] = None
    tech_stack_hints: Optional[List[str]] = None
    conversation_starters: Optional[List[str]] = None
    ai_confidence_score: Optional[ConfidenceScore] = None
    research_timestamp: Optional[str] = None
    research_sources: Optional[List[str]] = None
    error: Optional[str] = None
    message: Optional[str] = "Processing not started."

    def finalize(self, status: ReportStatus, **values: Any) -> "SalesInsightReport":
        """Move the report into its terminal ``status`` and apply ``values``."""

        if self.status.is_terminal:
            raise ReportStateError(f"Report already finalised with status '{self.status.value}'")
        if not status.is_terminal:
            raise ReportStateError("Reports can only be finalised into a terminal status")
        unknown = sorted(set(values) - set(WIRE_NAMES) - {"error", "message"})
        if unknown:
            raise TypeError(f"Unknown report fields: {', '.join(unknown)}")

        for name, value in values.items():
            setattr(self, name, value)
        self.status = status
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase representation consumed by presentation layers."""

        payload: Dict[str, Any] = {"status": self.status.value}
        for name in list(WIRE_NAMES) + ["error", "message"]:
            value = getattr(self, name)
            if value is None and name in _OMITTED_WHEN_UNSET:
                continue
            payload[WIRE_NAMES.get(name, name)] = _wire_value(value)
        return payload


@dataclass(slots=True)
class CombinedResult:
    """Phone metadata plus the sales-insight report produced for it."""

    phone_metadata: Optional[PhoneMetadata]
    sales_insight_report: SalesInsightReport

    @property
    def status(self) -> ReportStatus:
        return self.sales_insight_report.status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phoneMetadata": self.phone_metadata.to_dict() if self.phone_metadata else None,
            "salesInsightReport": self.sales_insight_report.to_dict(),
        }


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _optional_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


__all__ = [
    "BusinessHint",
    "CombinedResult",
    "ConfidenceScore",
    "KeyPersonnel",
    "OwnerType",
    "PhoneAddress",
    "PhoneMetadata",
    "PhoneOwner",
    "ReportStatus",
    "SalesInsightReport",
    "ValidatedInsights",
    "WIRE_NAMES",
]
