"""
Tests for title validation.
"""

from conventional_pr_title.commit.validator import (
    DEFAULT_OPTIONS,
    ValidationOptions,
    is_conventional_title,
    validate_title
)


def test_valid_title():
    result = validate_title("feat: add new feature")

    assert result.is_valid
    assert result.errors == []
    assert result.parsed.type == "feat"


def test_valid_title_with_scope():
    result = validate_title("fix(auth): resolve login issue")

    assert result.is_valid
    assert result.parsed.scope == "auth"


def test_empty_title_reports_single_error():
    for title in ("", "   "):
        result = validate_title(title)

        assert not result.is_valid
        assert result.errors == ["Title cannot be empty"]
        assert result.parsed is None


def test_too_long_title():
    title = "feat: " + "a" * 100
    result = validate_title(title, ValidationOptions(max_length=50))

    assert not result.is_valid
    assert "Title exceeds maximum length of 50 characters" in result.errors
    assert "Consider shortening the title to 50 characters or less" in result.suggestions
    assert result.parsed is None


def test_length_check_does_not_stop_format_check():
    result = validate_title("x" * 80)

    assert result.errors == [
        "Title exceeds maximum length of 72 characters",
        "Title does not follow Conventional Commits format",
    ]


def test_unparseable_title():
    result = validate_title("Add login page")

    assert result.errors == ["Title does not follow Conventional Commits format"]
    assert result.suggestions == [
        "Use format: type(scope): description",
        "Allowed types: " + ", ".join(DEFAULT_OPTIONS.allowed_types),
    ]


def test_invalid_type():
    result = validate_title("feature: add login")

    assert result.errors == ["Invalid commit type: feature"]
    assert result.suggestions[0].startswith("Use one of the allowed types: feat, fix")


def test_custom_allowed_types():
    options = ValidationOptions.create(allowed_types=["feat", "fix"])

    assert validate_title("fix: handle nulls", options).is_valid
    assert not validate_title("docs: update readme", options).is_valid


def test_required_scope():
    options = ValidationOptions(require_scope=True)
    result = validate_title("feat: add login", options)

    assert result.errors == ["Scope is required but missing"]
    assert validate_title("feat(auth): add login", options).is_valid


def test_short_description():
    result = validate_title("fix: ab")

    assert result.errors == ["Description is too short (minimum 3 characters)"]
    assert result.suggestions == ["Provide a more descriptive title"]


def test_trailing_period_and_uppercase_accumulate():
    result = validate_title("feat: Add login.")

    assert result.errors == [
        "Description should not end with a period",
        "Description should start with a lowercase letter",
    ]
    assert result.suggestions == [
        "Remove the trailing period from the description",
        "Start the description with a lowercase letter",
    ]


def test_non_letter_first_character_is_allowed():
    assert validate_title("chore: 2024 cleanup").is_valid


def test_limits_can_be_disabled():
    options = ValidationOptions(max_length=None, min_description_length=None)

    assert validate_title("feat: " + "a" * 300, options).is_valid
    assert validate_title("feat: a", options).is_valid


def test_validation_is_idempotent():
    for title in ("feat: add x", "Bad title.", "", "fix(a): B."):
        assert validate_title(title) == validate_title(title)


def test_tightening_options_never_removes_errors():
    loose = ValidationOptions()
    strict = ValidationOptions(
        allowed_types=("feat",),
        require_scope=True,
        max_length=20,
        min_description_length=10
    )

    for title in ("fix: ab", "feat: Add login.", "docs(readme): update install steps"):
        loose_errors = set(validate_title(title, loose).errors)
        strict_errors = set(validate_title(title, strict).errors)

        # Messages carrying the limit differ; compare by message prefix
        strict_prefixes = {e.split(" (")[0].split(" of ")[0] for e in strict_errors}
        for error in loose_errors:
            assert error.split(" (")[0].split(" of ")[0] in strict_prefixes


def test_is_conventional_title():
    assert is_conventional_title("feat: add new feature")
    assert not is_conventional_title("add new feature")
