"""
Tests for the conventional commit title grammar.
"""

import pytest

from conventional_pr_title.commit.conventional import (
    DEFAULT_TYPES,
    ConventionalCommit,
    parse_conventional_commit
)


def test_parse_simple_title():
    parsed = parse_conventional_commit("feat: add new feature")

    assert parsed == ConventionalCommit(
        type="feat",
        scope=None,
        description="add new feature",
        breaking=False
    )


def test_parse_scope_and_breaking_marker():
    parsed = parse_conventional_commit("feat(api)!: drop v1 endpoints")

    assert parsed.type == "feat"
    assert parsed.scope == "api"
    assert parsed.breaking is True
    assert parsed.description == "drop v1 endpoints"


def test_parse_lowercases_type_and_trims_parts():
    parsed = parse_conventional_commit("  FIX( auth ): resolve login issue  ")

    assert parsed.type == "fix"
    assert parsed.scope == "auth"
    assert parsed.description == "resolve login issue"


def test_parse_accepts_digits_and_hyphens():
    parsed = parse_conventional_commit("build-deps(ui-kit2): bump react")

    assert parsed.type == "build-deps"
    assert parsed.scope == "ui-kit2"


@pytest.mark.parametrize("title", [
    "",
    "   ",
    "feat add x",
    "feat:",
    "feat: ",
    "feat:add x",
    "(scope): missing type",
    "Add login page",
])
def test_parse_rejects_non_conforming_titles(title):
    assert parse_conventional_commit(title) is None


@pytest.mark.parametrize("title", [
    "feat: add new feature",
    "fix(auth): resolve login issue",
    "refactor(core)!: split the parser",
])
def test_format_restores_the_header(title):
    assert parse_conventional_commit(title).format() == title


def test_default_types():
    assert DEFAULT_TYPES == (
        "feat", "fix", "docs", "style", "refactor", "perf",
        "test", "build", "ci", "chore", "revert",
    )
