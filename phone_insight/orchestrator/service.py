"""Enrichment orchestrator chaining the phone lookup and research providers."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from ..errors import PhoneLookupError, ResearchError, ResponseFormatError
from ..extraction import extract_json_object
from ..hints import classify_business, extract_area_code
from ..models import (
    BusinessHint,
    CombinedResult,
    ReportStatus,
    SalesInsightReport,
)
from ..prompt import build_research_prompt
from ..providers.base import PhoneLookupClient, ResearchClient
from ..validation import Clock, current_timestamp, validate_report

LOGGER = logging.getLogger(__name__)

LOOKUP_FAILURE = "Failed to retrieve initial data from Trestle."
NO_BUSINESS_MESSAGE = "Trestle data did not identify a business or business name for this number."
RESEARCH_FAILURE_PREFIX = "AI research failed (Source: Perplexity)."
DEFAULT_RESEARCH_FAILURE = "Failed to get insights from AI."
UNEXPECTED_FAILURE = "Unexpected enrichment failure."


class EnrichmentOrchestrator:
    """Turns a phone number into phone metadata plus a sales-insight report.

    Provider failures never propagate: each one finalises the report with a
    terminal status. There are no retries.
    """

    def __init__(
        self,
        phone_lookup: PhoneLookupClient,
        research: ResearchClient,
        *,
        clock: Clock = current_timestamp,
    ) -> None:
        self._phone_lookup = phone_lookup
        self._research = research
        self._clock = clock

    def enrich(self, phone: str) -> CombinedResult:
        """Run the full pipeline for ``phone``."""

        report = SalesInsightReport()

        area_code = extract_area_code(phone)
        if area_code:
            LOGGER.info("Extracted area code hint: %s", area_code)
        else:
            LOGGER.warning("Could not extract standard area code from phone: %s", phone)

        try:
            metadata = self._phone_lookup.lookup(phone)
        except PhoneLookupError as exc:
            LOGGER.error("Phone lookup failed for %s: %s", phone, exc.message)
            report.finalize(
                ReportStatus.ERROR,
                error=LOOKUP_FAILURE,
                message=f"Data source error: {exc.message or exc.status_code}",
            )
            return CombinedResult(phone_metadata=None, sales_insight_report=report)

        hint = classify_business(metadata)
        if not hint.is_business:
            LOGGER.info("Phone metadata did not indicate a clear business name for research")
            report.finalize(
                ReportStatus.NO_BUSINESS_FOUND,
                message=NO_BUSINESS_MESSAGE,
                research_timestamp=self._clock(),
            )
            return CombinedResult(phone_metadata=metadata, sales_insight_report=report)

        LOGGER.info('Identified as business: "%s". Preparing research request.', hint.business_name)
        self._research_business(report, hint, area_code)
        return CombinedResult(phone_metadata=metadata, sales_insight_report=report)

    def enrich_many(
        self,
        phones: Iterable[str],
        *,
        concurrent: bool = False,
        max_workers: Optional[int] = None,
    ) -> List[CombinedResult]:
        """Enrich several independent phone numbers, preserving input order."""

        phone_list = list(phones)
        if not concurrent or len(phone_list) <= 1:
            return [self._enrich_safely(phone) for phone in phone_list]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self._enrich_safely, phone_list))

    def _enrich_safely(self, phone: str) -> CombinedResult:
        try:
            return self.enrich(phone)
        except Exception as exc:
            LOGGER.exception("Enrichment failed for %s", phone)
            report = SalesInsightReport().finalize(
                ReportStatus.ERROR,
                error=str(exc) or UNEXPECTED_FAILURE,
                message=f"{UNEXPECTED_FAILURE} {exc}".rstrip(),
            )
            return CombinedResult(phone_metadata=None, sales_insight_report=report)

    def _research_business(self, report: SalesInsightReport, hint: BusinessHint, area_code: Optional[str]) -> None:
        prompt = build_research_prompt(hint, area_code)
        try:
            reply = self._research.research(prompt)
            data = extract_json_object(reply)
            insights = validate_report(data, hint, clock=self._clock)
        except (ResearchError, ResponseFormatError) as exc:
            reason = str(exc)
            LOGGER.error("Research interaction error for %s: %s", hint.business_name, reason)
        except Exception as exc:
            LOGGER.exception("Unexpected research failure for %s", hint.business_name)
            reason = str(exc) or DEFAULT_RESEARCH_FAILURE
        else:
            report.finalize(ReportStatus.SUCCESS, message=None, **insights.as_fields())
            LOGGER.info("Formatted sales insight report for %s", hint.business_name)
            return

        report.finalize(
            ReportStatus.ERROR,
            company_name=hint.business_name,
            location=hint.location_hint,
            error=reason,
            message=f"{RESEARCH_FAILURE_PREFIX} {reason}",
            research_timestamp=self._clock(),
        )


__all__ = ["EnrichmentOrchestrator"]
