"""
Lenient normalization of model output into a TitleGenerationResponse.

Models are asked for a JSON object but frequently wrap it in code fences,
surround it with prose, or ignore the format altogether. Each step of the
fallback ladder is a separate function so it can be reused and tested alone.
"""

import re
import json
import logging
from typing import Any, Dict, List, Optional

from ..commit.conventional import CONVENTIONAL_TITLE_PATTERN
from ..models import TitleGenerationResponse

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION = "feat: improve PR title"
DEFAULT_REASONING = "AI generated suggestions based on PR content"
FALLBACK_REASONING = "AI response could not be parsed as JSON, extracted suggestions from text"
DEFAULT_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.5

# Longer lines are prose, not titles
MAX_TEXT_SUGGESTION_LENGTH = 100

_CODE_FENCE = re.compile(r"```(?:json)?\s*|\s*```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json ... ```) around a payload"""
    return _CODE_FENCE.sub("", text).strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the span from the first ``{`` to the last ``}``.

    Returns:
        Candidate JSON text, or None if the text holds no braces
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def extract_suggestions_from_text(text: str) -> List[str]:
    """
    Collect lines that already look like conventional titles.

    Args:
        text: Raw model output

    Returns:
        Matching lines, or the default suggestion if none match
    """
    suggestions = []
    for line in text.splitlines():
        candidate = line.strip()
        if (
            len(candidate) <= MAX_TEXT_SUGGESTION_LENGTH
            and CONVENTIONAL_TITLE_PATTERN.match(candidate)
        ):
            suggestions.append(candidate)

    return suggestions or [DEFAULT_SUGGESTION]


def _normalize_suggestions(value: Any) -> List[str]:
    if isinstance(value, list):
        return [s.strip() for s in value if isinstance(s, str) and s.strip()]
    if value is None or value == "":
        return [DEFAULT_SUGGESTION]
    return [str(value)]


def _normalize_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, float(value)))


def _from_json(data: Dict[str, Any]) -> TitleGenerationResponse:
    reasoning = data.get("reasoning")
    return TitleGenerationResponse(
        suggestions=_normalize_suggestions(data.get("suggestions")),
        reasoning=reasoning if isinstance(reasoning, str) and reasoning else DEFAULT_REASONING,
        confidence=_normalize_confidence(data.get("confidence"))
    )


def parse_title_response(text: Optional[str]) -> TitleGenerationResponse:
    """
    Normalize raw model output. Never raises.

    Args:
        text: Raw text returned by the provider

    Returns:
        TitleGenerationResponse built from the JSON payload, or from the
        title-like lines of the text when no JSON object can be decoded
    """
    raw = text or ""
    candidate = extract_json_object(strip_code_fences(raw))

    if candidate is not None:
        try:
            data = json.loads(candidate)
        except (ValueError, RecursionError) as e:
            # Deep nesting and oversized integers fail outside JSONDecodeError
            logger.debug(f"Model output is not valid JSON: {e}")
            data = None

        if isinstance(data, dict):
            return _from_json(data)

    logger.warning("Could not parse model output as JSON, extracting titles from text")

    return TitleGenerationResponse(
        suggestions=extract_suggestions_from_text(raw),
        reasoning=FALLBACK_REASONING,
        confidence=FALLBACK_CONFIDENCE
    )
