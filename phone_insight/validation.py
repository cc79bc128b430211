"""Field-by-field coercion of extracted research JSON into the report shape."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models import BusinessHint, ConfidenceScore, KeyPersonnel, ValidatedInsights

Clock = Callable[[], str]
Fallback = Callable[[BusinessHint, Clock], Any]

UNKNOWN_NAME = "Unknown Name"
UNKNOWN_TITLE = "Unknown Title"


def current_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --- Coercers ---
# Each coercer returns ``(accepted, value)``; ``accepted`` is False when the raw
# value does not match the expected shape and the field's fallback applies.

def _coerce_string(value: Any) -> Tuple[bool, Any]:
    return isinstance(value, str), value


def _coerce_string_list(value: Any) -> Tuple[bool, Any]:
    if not isinstance(value, list):
        return False, None
    return True, [item for item in value if isinstance(item, str)]


def _coerce_personnel(value: Any) -> Tuple[bool, Any]:
    if not isinstance(value, list):
        return False, None
    return True, [_coerce_person(entry) for entry in value]


def _coerce_person(entry: Any) -> KeyPersonnel:
    data: Mapping[str, Any] = entry if isinstance(entry, Mapping) else {}
    name = data.get("name")
    title = data.get("title")
    linkedin_url = data.get("linkedInUrl")
    profile_summary = data.get("profileSummary")
    return KeyPersonnel(
        name=name if isinstance(name, str) else UNKNOWN_NAME,
        title=title if isinstance(title, str) else UNKNOWN_TITLE,
        linkedin_url=linkedin_url if isinstance(linkedin_url, str) else None,
        profile_summary=profile_summary if isinstance(profile_summary, str) else None,
    )


def _coerce_confidence(value: Any) -> Tuple[bool, Any]:
    if value is None:
        return True, None
    for score in ConfidenceScore:
        if score.value == value:
            return True, score
    return False, None


# --- Fallbacks ---

def _absent(_hint: BusinessHint, _clock: Clock) -> Any:
    return None


def _business_name(hint: BusinessHint, _clock: Clock) -> Any:
    return hint.business_name


def _industry_hint(hint: BusinessHint, _clock: Clock) -> Any:
    return hint.industry_hint


def _location_hint(hint: BusinessHint, _clock: Clock) -> Any:
    return hint.location_hint


def _medium_confidence(_hint: BusinessHint, _clock: Clock) -> Any:
    return ConfidenceScore.MEDIUM


def _now(_hint: BusinessHint, clock: Clock) -> Any:
    return clock()


@dataclass(frozen=True)
class FieldRule:
    """How one report field is read from the research JSON."""

    key: str
    attribute: str
    coerce: Callable[[Any], Tuple[bool, Any]]
    fallback: Fallback = _absent


FIELD_RULES: List[FieldRule] = [
    FieldRule("companyName", "company_name", _coerce_string, _business_name),
    FieldRule("website", "website", _coerce_string),
    FieldRule("industry", "industry", _coerce_string, _industry_hint),
    FieldRule("location", "location", _coerce_string, _location_hint),
    FieldRule("companySize", "company_size", _coerce_string),
    FieldRule("keyPersonnel", "key_personnel", _coerce_personnel),
    FieldRule("companyOverview", "company_overview", _coerce_string),
    FieldRule("productsServices", "products_services", _coerce_string),
    FieldRule("targetAudience", "target_audience", _coerce_string),
    FieldRule("recentNewsTrigger", "recent_news_trigger", _coerce_string),
    FieldRule("potentialPainPoints", "potential_pain_points", _coerce_string_list),
    FieldRule("techStackHints", "tech_stack_hints", _coerce_string_list),
    FieldRule("conversationStarters", "conversation_starters", _coerce_string_list),
    FieldRule("aiConfidenceScore", "ai_confidence_score", _coerce_confidence, _medium_confidence),
    FieldRule("researchTimestamp", "research_timestamp", _coerce_string, _now),
    FieldRule("researchSources", "research_sources", _coerce_string_list),
]


def validate_report(
    data: Any,
    hint: Optional[BusinessHint] = None,
    *,
    clock: Clock = current_timestamp,
) -> ValidatedInsights:
    """Coerce ``data`` into :class:`ValidatedInsights` using :data:`FIELD_RULES`.

    Never raises: any value of the wrong shape is replaced by its field's
    fallback, and a non-mapping ``data`` is treated as an empty object.
    """

    hint = hint or BusinessHint()
    source: Mapping[str, Any] = data if isinstance(data, Mapping) else {}

    values: Dict[str, Any] = {}
    for rule in FIELD_RULES:
        accepted, value = rule.coerce(source.get(rule.key))
        values[rule.attribute] = value if accepted else rule.fallback(hint, clock)
    return ValidatedInsights(**values)


__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "UNKNOWN_NAME",
    "UNKNOWN_TITLE",
    "current_timestamp",
    "validate_report",
]
