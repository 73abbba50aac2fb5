"""
Title validation for conventional commits.

Checks a PR title against the Conventional Commits format and a configurable
set of team rules, reporting every violation with a remediation hint.
"""

from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from .conventional import (
    DEFAULT_TYPES,
    ConventionalCommit,
    parse_conventional_commit
)


@dataclass(frozen=True)
class ValidationOptions:
    """Rules controlling how strict title validation is."""

    allowed_types: Tuple[str, ...] = DEFAULT_TYPES
    require_scope: bool = False
    max_length: Optional[int] = 72
    min_description_length: Optional[int] = 3

    @classmethod
    def create(
        cls,
        allowed_types: Optional[Sequence[str]] = None,
        require_scope: bool = False,
        max_length: Optional[int] = 72,
        min_description_length: Optional[int] = 3
    ) -> "ValidationOptions":
        """Build options from any sequence of types."""
        return cls(
            allowed_types=tuple(allowed_types) if allowed_types is not None else DEFAULT_TYPES,
            require_scope=require_scope,
            max_length=max_length,
            min_description_length=min_description_length
        )


DEFAULT_OPTIONS = ValidationOptions()


@dataclass(frozen=True)
class ValidationResult:
    """Result of title validation."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    parsed: Optional[ConventionalCommit] = None


def validate_title(
    title: str,
    options: Optional[ValidationOptions] = None
) -> ValidationResult:
    """
    Validate a PR title against the Conventional Commits standard.

    Checks run in a fixed order and accumulate; only an empty title or a title
    that cannot be parsed stops validation early. ``parsed`` is attached only
    when the title is fully valid.

    Args:
        title: PR title to validate
        options: Validation rules (defaults to DEFAULT_OPTIONS)

    Returns:
        ValidationResult with errors, suggestions and the parsed title
    """
    opts = options or DEFAULT_OPTIONS
    errors: List[str] = []
    suggestions: List[str] = []

    if not title or not title.strip():
        errors.append("Title cannot be empty")
        return ValidationResult(is_valid=False, errors=errors, suggestions=suggestions)

    trimmed = title.strip()

    # Length is checked before parsing and does not stop validation
    if opts.max_length and len(trimmed) > opts.max_length:
        errors.append(f"Title exceeds maximum length of {opts.max_length} characters")
        suggestions.append(
            f"Consider shortening the title to {opts.max_length} characters or less"
        )

    parsed = parse_conventional_commit(trimmed)

    if not parsed:
        errors.append("Title does not follow Conventional Commits format")
        suggestions.append("Use format: type(scope): description")
        suggestions.append(f"Allowed types: {', '.join(opts.allowed_types)}")
        return ValidationResult(is_valid=False, errors=errors, suggestions=suggestions)

    if opts.allowed_types and parsed.type not in opts.allowed_types:
        errors.append(f"Invalid commit type: {parsed.type}")
        suggestions.append(f"Use one of the allowed types: {', '.join(opts.allowed_types)}")

    if opts.require_scope and not parsed.scope:
        errors.append("Scope is required but missing")
        suggestions.append("Add a scope in parentheses after the type: type(scope): description")

    description = parsed.description

    if opts.min_description_length and len(description) < opts.min_description_length:
        errors.append(
            f"Description is too short (minimum {opts.min_description_length} characters)"
        )
        suggestions.append("Provide a more descriptive title")

    if description.endswith("."):
        errors.append("Description should not end with a period")
        suggestions.append("Remove the trailing period from the description")

    if description[0] != description[0].lower():
        errors.append("Description should start with a lowercase letter")
        suggestions.append("Start the description with a lowercase letter")

    is_valid = not errors

    return ValidationResult(
        is_valid=is_valid,
        errors=errors,
        suggestions=suggestions,
        parsed=parsed if is_valid else None
    )


def is_conventional_title(
    title: str,
    options: Optional[ValidationOptions] = None
) -> bool:
    """
    Quick check if a title passes validation.

    Args:
        title: PR title to check
        options: Validation rules

    Returns:
        True if the title is valid
    """
    return validate_title(title, options).is_valid
