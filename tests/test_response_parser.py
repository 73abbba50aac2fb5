"""
Tests for normalizing model output.
"""

from conventional_pr_title.llm.response_parser import (
    DEFAULT_REASONING,
    DEFAULT_SUGGESTION,
    FALLBACK_CONFIDENCE,
    FALLBACK_REASONING,
    extract_json_object,
    extract_suggestions_from_text,
    parse_title_response,
    strip_code_fences
)

from .conftest import VALID_JSON


def test_plain_json():
    response = parse_title_response(VALID_JSON)

    assert response.suggestions == ["feat(auth): add login flow", "feat: add login"]
    assert response.reasoning == "describes the new feature"
    assert response.confidence == 0.9


def test_fenced_json():
    response = parse_title_response(f"```json\n{VALID_JSON}\n```")

    assert response.suggestions[0] == "feat(auth): add login flow"


def test_json_surrounded_by_prose():
    text = f"Sure! Here are some options:\n{VALID_JSON}\nHope this helps."

    assert parse_title_response(text).reasoning == "describes the new feature"


def test_missing_fields_get_defaults():
    response = parse_title_response("{}")

    assert response.suggestions == [DEFAULT_SUGGESTION]
    assert response.reasoning == DEFAULT_REASONING
    assert response.confidence == 0.8


def test_single_string_suggestion_is_wrapped():
    response = parse_title_response('{"suggestions": "fix: handle nulls"}')

    assert response.suggestions == ["fix: handle nulls"]


def test_non_string_entries_are_dropped():
    response = parse_title_response('{"suggestions": ["fix: a bug", 3, "", null]}')

    assert response.suggestions == ["fix: a bug"]


def test_confidence_is_clamped():
    assert parse_title_response('{"confidence": 7}').confidence == 1.0
    assert parse_title_response('{"confidence": -1}').confidence == 0.0
    assert parse_title_response('{"confidence": "high"}').confidence == 0.8


def test_text_fallback_collects_title_lines():
    text = "I suggest:\n- not a title\nfeat(ui): add dark mode\n  fix: correct padding  \n"
    response = parse_title_response(text)

    assert response.suggestions == ["feat(ui): add dark mode", "fix: correct padding"]
    assert response.reasoning == FALLBACK_REASONING
    assert response.confidence == FALLBACK_CONFIDENCE


def test_invalid_json_falls_back_to_text():
    response = parse_title_response('{"suggestions": [broken\nchore: bump deps')

    assert response.suggestions == ["chore: bump deps"]
    assert response.confidence == FALLBACK_CONFIDENCE


def test_unterminated_object_falls_back_to_text():
    response = parse_title_response('[1, 2] and {"a": 1')

    assert response.reasoning == FALLBACK_REASONING


def test_garbage_yields_default_suggestion():
    for text in ("", None, "no titles here at all"):
        response = parse_title_response(text)

        assert response.suggestions == [DEFAULT_SUGGESTION]
        assert response.confidence == FALLBACK_CONFIDENCE


def test_long_lines_are_not_titles():
    long_line = "feat: " + "x" * 120

    assert extract_suggestions_from_text(long_line) == [DEFAULT_SUGGESTION]


def test_helpers():
    assert strip_code_fences("```json\n{}\n```") == "{}"
    assert strip_code_fences("```\nabc\n```") == "abc"
    assert extract_json_object('x {"a": {"b": 1}} y') == '{"a": {"b": 1}}'
    assert extract_json_object("no braces") is None
    assert extract_json_object("} backwards {") is None


def test_deeply_nested_json_falls_back_to_text():
    text = '{"a":' + "[" * 100000 + "]" * 100000 + "}"

    response = parse_title_response(text)

    assert response.suggestions == [DEFAULT_SUGGESTION]
    assert response.confidence == FALLBACK_CONFIDENCE


def test_oversized_number_never_raises():
    text = '{"suggestions": ["feat: x"], "confidence": 1' + "0" * 5000 + "}"

    response = parse_title_response(text)

    # Interpreters without the integer digit limit decode it and clamp
    assert response.suggestions in ([DEFAULT_SUGGESTION], ["feat: x"])
    assert 0.0 <= response.confidence <= 1.0
