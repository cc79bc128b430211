"""Tests for the report state machine and provider payload parsing."""
from __future__ import annotations

import pytest

from phone_insight.errors import ReportStateError
from phone_insight.models import (
    CombinedResult,
    ConfidenceScore,
    KeyPersonnel,
    OwnerType,
    PhoneMetadata,
    ReportStatus,
    SalesInsightReport,
)


def test_new_report_is_not_attempted() -> None:
    report = SalesInsightReport()

    assert report.status is ReportStatus.NOT_ATTEMPTED
    assert report.to_dict() == {
        "status": "not_attempted",
        "companyName": None,
        "website": None,
        "industry": None,
        "location": None,
        "companySize": None,
        "keyPersonnel": None,
        "companyOverview": None,
        "productsServices": None,
        "targetAudience": None,
        "recentNewsTrigger": None,
        "potentialPainPoints": None,
        "techStackHints": None,
        "conversationStarters": None,
        "aiConfidenceScore": None,
        "researchTimestamp": None,
        "message": "Processing not started.",
    }


def test_finalize_sets_terminal_status_once() -> None:
    report = SalesInsightReport()

    report.finalize(ReportStatus.NO_BUSINESS_FOUND, message="Nothing here.", research_timestamp="now")

    assert report.status is ReportStatus.NO_BUSINESS_FOUND
    assert report.message == "Nothing here."
    with pytest.raises(ReportStateError):
        report.finalize(ReportStatus.ERROR, error="late")
    assert report.status is ReportStatus.NO_BUSINESS_FOUND
    assert report.error is None


def test_finalize_rejects_non_terminal_status() -> None:
    with pytest.raises(ReportStateError):
        SalesInsightReport().finalize(ReportStatus.NOT_ATTEMPTED)


def test_finalize_rejects_unknown_fields() -> None:
    report = SalesInsightReport()

    with pytest.raises(TypeError):
        report.finalize(ReportStatus.ERROR, trestle_status=503)
    assert report.status is ReportStatus.NOT_ATTEMPTED


def test_success_report_serialises_nested_values() -> None:
    report = SalesInsightReport().finalize(
        ReportStatus.SUCCESS,
        message=None,
        company_name="Globex",
        key_personnel=[KeyPersonnel(name="Hank", title="CEO")],
        ai_confidence_score=ConfidenceScore.LOW,
        research_sources=["https://globex.example"],
    )

    payload = report.to_dict()

    assert payload["status"] == "success"
    assert payload["keyPersonnel"] == [
        {"name": "Hank", "title": "CEO", "linkedInUrl": None, "profileSummary": None}
    ]
    assert payload["aiConfidenceScore"] == "Low"
    assert payload["researchSources"] == ["https://globex.example"]
    assert "message" not in payload
    assert "error" not in payload


def test_phone_metadata_from_payload() -> None:
    payload = {
        "id": "Phone.abc",
        "phone_number": "2405551234",
        "is_valid": True,
        "line_type": "Landline",
        "carrier": "Verizon",
        "is_prepaid": False,
        "is_commercial": True,
        "belongs_to": {"type": "Business", "name": "Globex", "industry": "Manufacturing"},
        "current_addresses": [{"city": "Reno", "state": "NV", "lat_long": {"lat": 39.5}}],
        "emails": "info@globex.example",
        "error": None,
        "warnings": ["Invalid Input"],
    }

    metadata = PhoneMetadata.from_payload(payload)

    assert metadata.belongs_to is not None
    assert metadata.belongs_to.type is OwnerType.BUSINESS
    assert metadata.belongs_to.industry == "Manufacturing"
    assert metadata.current_addresses[0].city == "Reno"
    assert metadata.current_addresses[0].parts == {"city": "Reno", "state": "NV"}
    assert metadata.emails == ["info@globex.example"]
    assert metadata.warnings == ["Invalid Input"]
    assert metadata.is_commercial is True
    assert metadata.to_dict() == payload


def test_phone_metadata_tolerates_malformed_payload() -> None:
    metadata = PhoneMetadata.from_payload(
        {
            "is_commercial": "yes",
            "belongs_to": {"type": "Robot", "name": "R2"},
            "current_addresses": "Reno",
            "emails": 5,
            "error": {"message": "Partial result"},
        }
    )

    assert metadata.is_commercial is None
    assert metadata.belongs_to is not None
    assert metadata.belongs_to.type is None
    assert metadata.current_addresses == []
    assert metadata.emails == []
    assert metadata.error == "Partial result"


def test_person_owner_never_carries_industry() -> None:
    metadata = PhoneMetadata.from_payload({"belongs_to": {"type": "Person", "name": "Jane", "industry": "Retail"}})

    assert metadata.belongs_to.industry is None


def test_combined_result_without_metadata() -> None:
    report = SalesInsightReport().finalize(ReportStatus.ERROR, error="boom", message="Data source error: 503")

    payload = CombinedResult(phone_metadata=None, sales_insight_report=report).to_dict()

    assert payload["phoneMetadata"] is None
    assert payload["salesInsightReport"]["status"] == "error"
    assert payload["salesInsightReport"]["error"] == "boom"
