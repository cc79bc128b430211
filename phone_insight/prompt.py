"""Construction of the research brief sent to the generative research provider."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import BusinessHint

SYSTEM_INSTRUCTION = (
    "You are an expert sales intelligence researcher outputting ONLY valid, structured JSON based on "
    "the user's request format. You access the web to find and summarize information, including "
    "LinkedIn profiles, paying close attention to location hints."
)

OUTPUT_SCHEMA = """{
  "companyName": "string | null",
  "website": "string | null",
  "industry": "string | null",
  "location": "string | null", // Should reflect the most likely location found
  "companySize": "string | null",
  "keyPersonnel": [{ "name": "string", "title": "string", "linkedInUrl": "string | null", "profileSummary": "string | null" }] | null, // Max 3 relevant people. Include LI profile URL and summary if found.
  "companyOverview": "string | null", // Concise description (1-2 sentences)
  "productsServices": "string | null", // Main offerings summary
  "targetAudience": "string | null", // Typical customer profile
  "recentNewsTrigger": "string | null", // ONE significant recent event (funding, launch, acquisition, key hire) - last 12-18 months
  "potentialPainPoints": ["string"] | null, // 2-3 potential challenges *relevant to common B2B solutions* based on their industry/size/news
  "techStackHints": ["string"] | null, // Any known tech used (if discoverable and relevant)
  "conversationStarters": ["string"] | null, // 2-3 specific opening lines referencing your research findings
  "aiConfidenceScore": "'High' | 'Medium' | 'Low' | null", // Your confidence in the accuracy and completeness of these findings
  "researchTimestamp": "string", // ISO 8601 timestamp NOW
  "researchSources": ["string"] | null // Max 3-4 primary URLs used for research
}"""

_GUIDELINES = """Provide your findings STRICTLY in the following JSON format.
- Prefer verified sources like the official company website, LinkedIn company pages, reputable news outlets, Crunchbase, government (.gov), or educational (.edu) sites when possible for facts like company size, key personnel, and recent news.
- For 'keyPersonnel', prioritize finding their official LinkedIn profile URL. If found, analyze the profile and provide a brief 1-2 sentence 'profileSummary' focusing on their recent experience, role focus, or key skills mentioned. If you cannot find a reliable LinkedIn profile URL or relevant summary information, set 'linkedInUrl' and/or 'profileSummary' to null respectively.
- You MUST NOT make up data. If you cannot verify something from a trustworthy source, mark the corresponding JSON field as null. Do not guess.
- Only return the valid JSON object as specified below. Output NO extra commentary, introduction, or explanation before or after the JSON block."""

UNKNOWN_LOCATION = "with an unknown location"


@dataclass(frozen=True)
class ResearchPrompt:
    """System instruction and user brief for a single research request."""

    system_instruction: str
    user_prompt: str


def describe_location(location_hint: Optional[str], area_code: Optional[str]) -> str:
    if location_hint and area_code:
        return f'potentially located near "{location_hint}" (Area Code: {area_code})'
    if location_hint:
        return f'potentially located near "{location_hint}"'
    if area_code:
        return f"potentially in Area Code {area_code}"
    return UNKNOWN_LOCATION


def build_research_prompt(hint: BusinessHint, area_code: Optional[str] = None) -> ResearchPrompt:
    """Compose the research brief for the business described by ``hint``."""

    if not hint.business_name:
        raise ValueError("Research prompts require a business name.")

    subject = f'Research the company named "{hint.business_name}"'
    if hint.industry_hint:
        subject += f' in the industry "{hint.industry_hint}"'
    subject += f" {describe_location(hint.location_hint, area_code)}."

    user_prompt = "\n".join(
        [
            "You are a sales intelligence researcher performing web searches to gather information.",
            subject,
            "",
            _GUIDELINES,
            "",
            "JSON Format:",
            OUTPUT_SCHEMA,
        ]
    )
    return ResearchPrompt(system_instruction=SYSTEM_INSTRUCTION, user_prompt=user_prompt)


__all__ = [
    "OUTPUT_SCHEMA",
    "ResearchPrompt",
    "SYSTEM_INSTRUCTION",
    "UNKNOWN_LOCATION",
    "build_research_prompt",
    "describe_location",
]
