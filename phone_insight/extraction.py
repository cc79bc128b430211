"""Recovery of the JSON object embedded in a generative research reply."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

from .errors import ResponseFormatError

LOGGER = logging.getLogger(__name__)

# Greedy: first "{" through the last "}".
_JSON_BLOCK = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_object(text: str) -> Dict[str, Any]:
    """Parse ``text`` as a JSON object, falling back to its outermost brace span.

    The whole reply is tried first. If that fails, the single greedy
    ``{...}`` span is parsed instead; nothing more lenient is attempted.
    """

    try:
        parsed = json.loads(text)
    except ValueError as exc:
        LOGGER.warning("Failed to parse entire AI response as JSON, extracting JSON block: %s", exc)
        match = _JSON_BLOCK.search(text)
        if match is None:
            LOGGER.error("AI response did not contain a recognizable JSON block")
            raise ResponseFormatError("AI response format error: No JSON object found.") from exc
        try:
            parsed = json.loads(match.group(0))
        except ValueError as block_exc:
            LOGGER.error("Failed to parse extracted JSON block")
            raise ResponseFormatError("AI response format error: Could not parse JSON content.") from block_exc
        LOGGER.info("Successfully extracted and parsed JSON block")

    if not isinstance(parsed, dict):
        raise ResponseFormatError("AI response JSON structure is invalid after parsing.")
    return parsed


__all__ = ["extract_json_object"]
