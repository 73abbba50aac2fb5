"""
Conventional Commits grammar for pull request titles.

Parses single-line titles following the Conventional Commits specification
(https://www.conventionalcommits.org/).

Standard format: type(scope)!: description

where:
- type: The kind of change (feat, fix, docs, etc.)
- scope: Optional context (module/component affected)
- !: Optional breaking change marker
- description: Brief summary in imperative mood
"""

import re
from enum import Enum
from typing import Optional, Tuple
from dataclasses import dataclass


class CommitType(Enum):
    """Standard conventional commit types."""

    FEAT = "feat"        # New feature
    FIX = "fix"          # Bug fix
    DOCS = "docs"        # Documentation only changes
    STYLE = "style"      # Code style/formatting (no logic change)
    REFACTOR = "refactor"  # Code restructuring (no behavior change)
    PERF = "perf"        # Performance improvements
    TEST = "test"        # Adding or updating tests
    BUILD = "build"      # Build system or external dependencies
    CI = "ci"            # CI/CD configuration changes
    CHORE = "chore"      # Maintenance tasks, dependencies
    REVERT = "revert"    # Reverting previous commits


DEFAULT_TYPES: Tuple[str, ...] = tuple(t.value for t in CommitType)

# type(scope)!: description
CONVENTIONAL_TITLE_PATTERN = re.compile(
    r"^([a-z0-9-]+)(?:\(([^)]+)\))?(!)?: (.+)$",
    re.IGNORECASE
)


@dataclass(frozen=True)
class ConventionalCommit:
    """Represents a parsed conventional commit title."""

    type: str
    scope: Optional[str]
    description: str
    breaking: bool = False
    # Titles are single-line; kept for parity with full commit messages
    body: Optional[str] = None
    footer: Optional[str] = None

    def format(self) -> str:
        """Format back into a conventional commit header."""
        header = self.type
        if self.scope:
            header += f"({self.scope})"
        if self.breaking:
            header += "!"
        return f"{header}: {self.description}"


def parse_conventional_commit(title: str) -> Optional[ConventionalCommit]:
    """
    Parse a conventional commit title.

    Args:
        title: PR title or commit header

    Returns:
        ConventionalCommit object or None if not valid format
    """
    if not title:
        return None

    match = CONVENTIONAL_TITLE_PATTERN.match(title.strip())
    if not match:
        return None

    type_str, scope, breaking_marker, description = match.groups()

    return ConventionalCommit(
        type=type_str.lower(),
        scope=scope.strip() if scope is not None else None,
        description=description.strip(),
        breaking=bool(breaking_marker)
    )
