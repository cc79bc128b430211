"""End-to-end tests for :class:`phone_insight.orchestrator.EnrichmentOrchestrator`."""
from __future__ import annotations

import json
import threading
import time

import pytest

from phone_insight.errors import PhoneLookupError, ResearchError
from phone_insight.models import ConfidenceScore, PhoneMetadata, ReportStatus
from phone_insight.orchestrator import EnrichmentOrchestrator
from phone_insight.prompt import ResearchPrompt
from phone_insight.providers.sample import StaticPhoneLookupClient, StaticResearchClient

FIXED_TIME = "2024-05-01T12:00:00.000Z"

GLOBEX_LOOKUP = {
    "is_commercial": False,
    "belongs_to": {"type": "Business", "name": "Globex", "industry": "Manufacturing"},
    "current_addresses": [{"city": "Reno", "state": "NV"}],
}


def _clock() -> str:
    return FIXED_TIME


class ExplodingResearchClient:
    name = "exploding"

    def __init__(self, exc: Exception) -> None:
        self._exc = exc
        self.calls = 0

    def research(self, prompt: ResearchPrompt) -> str:
        self.calls += 1
        raise self._exc


def test_residential_number_is_no_business_found() -> None:
    lookup = StaticPhoneLookupClient(
        {"is_commercial": False, "belongs_to": {"type": "Person", "name": "Jane Doe"}}
    )
    research = StaticResearchClient(reply={"companyName": "unused"})
    orchestrator = EnrichmentOrchestrator(lookup, research, clock=_clock)

    result = orchestrator.enrich("3015551234")

    report = result.sales_insight_report
    assert report.status is ReportStatus.NO_BUSINESS_FOUND
    assert report.message == "Trestle data did not identify a business or business name for this number."
    assert report.research_timestamp == FIXED_TIME
    assert result.phone_metadata is not None
    assert result.phone_metadata.belongs_to.name == "Jane Doe"
    assert research.prompts == []
    assert lookup.calls == ["3015551234"]


def test_business_number_is_researched_successfully() -> None:
    lookup = StaticPhoneLookupClient(GLOBEX_LOOKUP)
    reply = {
        "companyName": "Globex Corporation",
        "website": "https://globex.example",
        "keyPersonnel": [{"name": "Hank Scorpio", "title": "CEO"}],
        "aiConfidenceScore": "High",
        "researchSources": ["https://globex.example/about"],
    }
    research = StaticResearchClient(reply="Here you go:\n" + json.dumps(reply))
    orchestrator = EnrichmentOrchestrator(lookup, research, clock=_clock)

    result = orchestrator.enrich("12405551234")

    assert len(research.prompts) == 1
    assert 'potentially located near "Reno, NV" (Area Code: 240)' in research.prompts[0].user_prompt
    assert 'in the industry "Manufacturing"' in research.prompts[0].user_prompt

    report = result.sales_insight_report
    assert report.status is ReportStatus.SUCCESS
    assert report.company_name == "Globex Corporation"
    assert report.location == "Reno, NV"
    assert report.industry == "Manufacturing"
    assert report.ai_confidence_score is ConfidenceScore.HIGH
    assert report.research_timestamp == FIXED_TIME
    assert report.key_personnel[0].title == "CEO"
    assert report.message is None
    assert report.error is None

    payload = result.to_dict()
    assert payload["phoneMetadata"]["belongs_to"]["name"] == "Globex"
    assert "message" not in payload["salesInsightReport"]


def test_lookup_failure_is_terminal_error() -> None:
    lookup = StaticPhoneLookupClient(status_code=503, message="Service Unavailable")
    research = StaticResearchClient(reply={"companyName": "unused"})
    orchestrator = EnrichmentOrchestrator(lookup, research, clock=_clock)

    result = orchestrator.enrich("3015551234")

    report = result.sales_insight_report
    assert result.phone_metadata is None
    assert report.status is ReportStatus.ERROR
    assert report.error == "Failed to retrieve initial data from Trestle."
    assert report.message == "Data source error: Service Unavailable"
    assert research.prompts == []
    assert result.to_dict()["phoneMetadata"] is None


def test_lookup_failure_without_reason_reports_status_code() -> None:
    class SilentFailureLookup:
        name = "silent"

        def lookup(self, phone: str) -> PhoneMetadata:
            raise PhoneLookupError("", status_code=503)

    orchestrator = EnrichmentOrchestrator(SilentFailureLookup(), StaticResearchClient(reply="{}"))

    report = orchestrator.enrich("3015551234").sales_insight_report

    assert report.message == "Data source error: 503"


def test_research_provider_failure_keeps_known_business_details() -> None:
    lookup = StaticPhoneLookupClient(GLOBEX_LOOKUP)
    research = StaticResearchClient(error="Rate limit exceeded")
    orchestrator = EnrichmentOrchestrator(lookup, research, clock=_clock)

    result = orchestrator.enrich("12405551234")

    report = result.sales_insight_report
    assert report.status is ReportStatus.ERROR
    assert report.company_name == "Globex"
    assert report.location == "Reno, NV"
    assert report.error == "Rate limit exceeded"
    assert report.message == "AI research failed (Source: Perplexity). Rate limit exceeded"
    assert report.research_timestamp == FIXED_TIME
    assert result.phone_metadata is not None


def test_unparsable_research_reply_is_format_error() -> None:
    lookup = StaticPhoneLookupClient(GLOBEX_LOOKUP)
    research = StaticResearchClient(reply="Sorry, I could not find anything.")
    orchestrator = EnrichmentOrchestrator(lookup, research, clock=_clock)

    report = orchestrator.enrich("12405551234").sales_insight_report

    assert report.status is ReportStatus.ERROR
    assert report.error == "AI response format error: No JSON object found."
    assert report.company_name == "Globex"


def test_unexpected_research_exception_becomes_error_report() -> None:
    lookup = StaticPhoneLookupClient(GLOBEX_LOOKUP)
    research = ExplodingResearchClient(RuntimeError("socket closed"))
    orchestrator = EnrichmentOrchestrator(lookup, research, clock=_clock)

    report = orchestrator.enrich("12405551234").sales_insight_report

    assert research.calls == 1
    assert report.status is ReportStatus.ERROR
    assert report.error == "socket closed"


def test_research_error_is_not_retried() -> None:
    lookup = StaticPhoneLookupClient(GLOBEX_LOOKUP)
    research = ExplodingResearchClient(ResearchError("Perplexity API Error: 500", status_code=500))
    orchestrator = EnrichmentOrchestrator(lookup, research)

    report = orchestrator.enrich("12405551234").sales_insight_report

    assert research.calls == 1
    assert report.error == "Perplexity API Error: 500"


class SlowLookup:
    name = "slow"

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def lookup(self, phone: str) -> PhoneMetadata:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
        time.sleep(0.05)
        with self._lock:
            self.active -= 1
        return PhoneMetadata.from_payload({"phone_number": phone, "is_commercial": False})


def test_enrich_many_preserves_input_order() -> None:
    lookup = SlowLookup()
    orchestrator = EnrichmentOrchestrator(lookup, StaticResearchClient(reply="{}"))
    phones = ["3015550001", "3015550002", "3015550003"]

    results = orchestrator.enrich_many(phones, concurrent=True, max_workers=3)

    assert [result.phone_metadata.phone_number for result in results] == phones
    assert all(result.status is ReportStatus.NO_BUSINESS_FOUND for result in results)
    assert lookup.peak > 1


def test_enrich_many_sequential_by_default() -> None:
    lookup = SlowLookup()
    orchestrator = EnrichmentOrchestrator(lookup, StaticResearchClient(reply="{}"))

    results = orchestrator.enrich_many(["3015550001", "3015550002"])

    assert len(results) == 2
    assert lookup.peak == 1


class FlakyLookup:
    name = "flaky"

    def lookup(self, phone: str) -> PhoneMetadata:
        if phone == "bad":
            raise ValueError("boom")
        return PhoneMetadata.from_payload({"phone_number": phone, "is_commercial": False})


@pytest.mark.parametrize("concurrent", [False, True])
def test_enrich_many_isolates_unexpected_failures(concurrent: bool) -> None:
    orchestrator = EnrichmentOrchestrator(FlakyLookup(), StaticResearchClient(reply="{}"))

    results = orchestrator.enrich_many(["3015551234", "bad", "3015551235"], concurrent=concurrent)

    assert [result.status for result in results] == [
        ReportStatus.NO_BUSINESS_FOUND,
        ReportStatus.ERROR,
        ReportStatus.NO_BUSINESS_FOUND,
    ]
    assert results[0].phone_metadata.phone_number == "3015551234"
    assert results[2].phone_metadata.phone_number == "3015551235"
    failed = results[1]
    assert failed.phone_metadata is None
    assert failed.sales_insight_report.error == "boom"
    assert failed.sales_insight_report.message == "Unexpected enrichment failure. boom"
