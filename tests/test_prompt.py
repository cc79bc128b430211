"""Unit tests for :mod:`phone_insight.prompt`."""
from __future__ import annotations

import pytest

from phone_insight.models import BusinessHint
from phone_insight.prompt import SYSTEM_INSTRUCTION, build_research_prompt, describe_location


@pytest.mark.parametrize(
    ("location_hint", "area_code", "expected"),
    [
        ("Reno, NV", "240", 'potentially located near "Reno, NV" (Area Code: 240)'),
        ("Reno, NV", None, 'potentially located near "Reno, NV"'),
        (None, "240", "potentially in Area Code 240"),
        (None, None, "with an unknown location"),
    ],
)
def test_describe_location_priority(location_hint, area_code, expected) -> None:
    assert describe_location(location_hint, area_code) == expected


def test_prompt_names_business_industry_and_location() -> None:
    hint = BusinessHint(business_name="Globex", industry_hint="Manufacturing", location_hint="Reno, NV")

    prompt = build_research_prompt(hint, "240")

    assert prompt.system_instruction == SYSTEM_INSTRUCTION
    assert (
        'Research the company named "Globex" in the industry "Manufacturing" '
        'potentially located near "Reno, NV" (Area Code: 240).'
    ) in prompt.user_prompt


def test_prompt_without_industry_or_location() -> None:
    prompt = build_research_prompt(BusinessHint(business_name="Bob's Shop"))

    assert 'Research the company named "Bob\'s Shop" with an unknown location.' in prompt.user_prompt
    assert "in the industry" not in prompt.user_prompt


def test_prompt_carries_output_instructions() -> None:
    prompt = build_research_prompt(BusinessHint(business_name="Globex")).user_prompt

    assert "Only return the valid JSON object" in prompt
    assert "mark the corresponding JSON field as null" in prompt
    assert "Max 3 relevant people" in prompt
    assert "ONE significant recent event" in prompt
    assert "Max 3-4 primary URLs" in prompt
    assert '"researchTimestamp": "string", // ISO 8601 timestamp NOW' in prompt
    assert ".gov" in prompt and ".edu" in prompt


def test_prompt_requires_business_name() -> None:
    with pytest.raises(ValueError):
        build_research_prompt(BusinessHint(location_hint="Reno, NV"), "775")
