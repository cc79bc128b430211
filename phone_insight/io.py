"""Input/output helpers for phone number spreadsheets and enrichment results."""
from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from .models import CombinedResult

PathLike = Union[str, Path]

_CSV_SUFFIXES = {".csv", ".tsv"}
_EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
_JSON_SUFFIXES = {".json"}

_PHONE_COLUMN_SYNONYMS = ("phone", "phone_number", "phonenumber", "mobile", "number", "telephone")

RESULT_COLUMNS = [
    "phone",
    "status",
    "company_name",
    "website",
    "industry",
    "location",
    "company_size",
    "key_personnel",
    "company_overview",
    "products_services",
    "target_audience",
    "recent_news_trigger",
    "potential_pain_points",
    "tech_stack_hints",
    "conversation_starters",
    "ai_confidence_score",
    "research_timestamp",
    "research_sources",
    "line_type",
    "carrier",
    "error",
    "message",
]


class UnsupportedFileTypeError(ValueError):
    """Raised when an unsupported file format is passed to the loader or writer."""


def _normalise_key(value: Any) -> str:
    return str(value).strip().lower().replace(" ", "_")


def load_phones(path: PathLike, *, column: Optional[str] = None) -> List[str]:
    """Load phone numbers from a CSV/TSV/Excel spreadsheet.

    ``column`` selects the phone column by name; otherwise the first column
    whose normalised header matches a known phone synonym is used. Blank cells
    are skipped.
    """

    dataframe = _read_dataframe(path)
    phone_column = _resolve_phone_column(dataframe.columns, column)

    phones: List[str] = []
    for value in dataframe[phone_column].tolist():
        if value is None or pd.isna(value):
            continue
        text = str(value).strip()
        if text:
            phones.append(text)
    return phones


def _read_dataframe(path: PathLike) -> pd.DataFrame:
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix in _CSV_SUFFIXES:
        return pd.read_csv(file_path, dtype=str, sep="\t" if suffix == ".tsv" else ",")
    if suffix in _EXCEL_SUFFIXES:
        return pd.read_excel(file_path, dtype=str, engine="openpyxl")
    raise UnsupportedFileTypeError(f"Unsupported input format '{file_path.suffix}'. Use CSV or Excel spreadsheet")


def _resolve_phone_column(columns: Sequence[Any], requested: Optional[str]) -> Any:
    by_key = {_normalise_key(name): name for name in columns}
    if requested:
        match = by_key.get(_normalise_key(requested))
        if match is None:
            raise KeyError(f"Column '{requested}' was not found in the spreadsheet")
        return match
    for synonym in _PHONE_COLUMN_SYNONYMS:
        if synonym in by_key:
            return by_key[synonym]
    raise KeyError(f"No phone column found. Expected one of: {', '.join(_PHONE_COLUMN_SYNONYMS)}")


def _join(values: Optional[Sequence[str]]) -> str:
    return "; ".join(values or [])


def result_to_row(phone: str, result: CombinedResult) -> Dict[str, Any]:
    """Flatten a combined result into a single spreadsheet row."""

    report = result.sales_insight_report
    metadata = result.phone_metadata
    personnel = [f"{person.name} ({person.title})" for person in report.key_personnel or []]
    return {
        "phone": phone,
        "status": report.status.value,
        "company_name": report.company_name or "",
        "website": report.website or "",
        "industry": report.industry or "",
        "location": report.location or "",
        "company_size": report.company_size or "",
        "key_personnel": _join(personnel),
        "company_overview": report.company_overview or "",
        "products_services": report.products_services or "",
        "target_audience": report.target_audience or "",
        "recent_news_trigger": report.recent_news_trigger or "",
        "potential_pain_points": _join(report.potential_pain_points),
        "tech_stack_hints": _join(report.tech_stack_hints),
        "conversation_starters": _join(report.conversation_starters),
        "ai_confidence_score": report.ai_confidence_score.value if report.ai_confidence_score else "",
        "research_timestamp": report.research_timestamp or "",
        "research_sources": _join(report.research_sources),
        "line_type": (metadata.line_type if metadata else None) or "",
        "carrier": (metadata.carrier if metadata else None) or "",
        "error": report.error or "",
        "message": report.message or "",
    }


def write_results(path: PathLike, phones: Sequence[str], results: Sequence[CombinedResult]) -> Path:
    """Write enrichment results to CSV, Excel, or JSON depending on the file suffix."""

    if len(phones) != len(results):
        raise ValueError("Each result must be paired with the phone number it was produced for")

    destination = Path(path)
    suffix = destination.suffix.lower()
    if suffix not in _CSV_SUFFIXES | _EXCEL_SUFFIXES | _JSON_SUFFIXES:
        raise UnsupportedFileTypeError(
            f"Unsupported output format '{destination.suffix}'. Use CSV, Excel spreadsheet, or JSON"
        )
    destination.parent.mkdir(parents=True, exist_ok=True)

    if suffix in _JSON_SUFFIXES:
        payload = [{"phone": phone, **result.to_dict()} for phone, result in zip(phones, results)]
        destination.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return destination

    rows = [result_to_row(phone, result) for phone, result in zip(phones, results)]
    if suffix in _EXCEL_SUFFIXES:
        pd.DataFrame(rows, columns=RESULT_COLUMNS).to_excel(destination, index=False, engine="openpyxl")
        return destination

    with destination.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=RESULT_COLUMNS, delimiter="\t" if suffix == ".tsv" else ",")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return destination


__all__ = [
    "RESULT_COLUMNS",
    "UnsupportedFileTypeError",
    "load_phones",
    "result_to_row",
    "write_results",
]
