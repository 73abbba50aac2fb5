"""
Conventional commit grammar, validation and offline heuristics.
"""

from .conventional import (
    DEFAULT_TYPES,
    CommitType,
    ConventionalCommit,
    parse_conventional_commit
)
from .validator import (
    DEFAULT_OPTIONS,
    ValidationOptions,
    ValidationResult,
    is_conventional_title,
    validate_title
)
from .heuristics import generate_suggestions

__all__ = [
    "DEFAULT_TYPES",
    "CommitType",
    "ConventionalCommit",
    "parse_conventional_commit",
    "DEFAULT_OPTIONS",
    "ValidationOptions",
    "ValidationResult",
    "is_conventional_title",
    "validate_title",
    "generate_suggestions",
]
