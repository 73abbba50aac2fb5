"""
Tests for the pull request title processor.
"""

import asyncio

from conventional_pr_title.commit.validator import ValidationOptions
from conventional_pr_title.config import ActionConfig, Mode
from conventional_pr_title.errors import AIServiceError
from conventional_pr_title.github import GitHubAPIError, PRContext
from conventional_pr_title.models import TitleGenerationResponse
from conventional_pr_title.processor import ActionTaken, PRTitleProcessor

from .conftest import FakeAIService, FakeGitHub

RESPONSE = TitleGenerationResponse(
    suggestions=["feat(auth): add login flow", "feat: add login"],
    reasoning="describes the new feature",
    confidence=0.9
)


def _pr(title="Add login", **kwargs) -> PRContext:
    return PRContext(number=7, title=title, actor="alice", **kwargs)


def _process(pr, config=None, service=None, github=None):
    config = config or ActionConfig(github_token="t")
    service = service or FakeAIService(RESPONSE)
    github = github or FakeGitHub()
    result = asyncio.run(PRTitleProcessor(config, service, github).process(pr))
    return result, service, github


def test_suggest_mode_comments():
    result, service, github = _process(_pr())

    assert result.action_taken == ActionTaken.COMMENTED
    assert not result.is_conventional
    assert result.suggestions == RESPONSE.suggestions
    assert result.reasoning == RESPONSE.reasoning
    assert result.error_message is None
    assert github.comments[0][0] == 7
    assert "`feat(auth): add login flow` ⭐" in github.comments[0][1]
    assert github.updated_titles == []
    assert github.permission_checks == 0


def test_auto_mode_updates_title_and_announces():
    result, _, github = _process(_pr(), ActionConfig(github_token="t", mode=Mode.AUTO))

    assert result.action_taken == ActionTaken.UPDATED
    assert github.updated_titles == [(7, "feat(auth): add login flow")]
    assert "PR Title Auto-Updated" in github.comments[0][1]


def test_auto_mode_without_success_comment():
    config = ActionConfig(github_token="t", mode=Mode.AUTO, auto_comment=False)
    result, _, github = _process(_pr(), config)

    assert result.action_taken == ActionTaken.UPDATED
    assert github.comments == []


def test_success_comment_failure_is_not_an_error():
    github = FakeGitHub(comment_error=GitHubAPIError("Failed to create comment: 500"))
    config = ActionConfig(github_token="t", mode=Mode.AUTO)
    result, _, _ = _process(_pr(), config, github=github)

    assert result.action_taken == ActionTaken.UPDATED
    assert result.error_message is None


def test_auto_mode_falls_back_to_suggest_without_write_access():
    github = FakeGitHub(can_write=False)
    config = ActionConfig(github_token="t", mode=Mode.AUTO)
    result, _, _ = _process(_pr(), config, github=github)

    assert result.action_taken == ActionTaken.COMMENTED
    assert github.permission_checks == 1
    assert github.updated_titles == []
    assert len(github.comments) == 1


def test_update_failure_is_reported():
    github = FakeGitHub(update_error=GitHubAPIError("Failed to update PR title: 403"))
    config = ActionConfig(github_token="t", mode=Mode.AUTO)
    result, _, _ = _process(_pr(), config, github=github)

    assert result.action_taken == ActionTaken.ERROR
    assert result.error_message == "Failed to update PR title: 403"
    assert result.suggestions == RESPONSE.suggestions


def test_comment_failure_is_reported():
    github = FakeGitHub(comment_error=GitHubAPIError("Failed to create comment: 403"))
    result, _, _ = _process(_pr(), github=github)

    assert result.action_taken == ActionTaken.ERROR
    assert result.error_message == "Failed to create comment: 403"


def test_conventional_title_is_skipped():
    result, service, github = _process(_pr("feat: add login"))

    assert result.action_taken == ActionTaken.SKIPPED
    assert result.is_conventional
    assert result.reasoning == "Title is already conventional"
    assert service.requests == []
    assert github.comments == []


def test_conventional_title_processed_when_not_skipping():
    config = ActionConfig(github_token="t", skip_if_conventional=False)
    result, service, _ = _process(_pr("feat: add login"), config)

    assert result.is_conventional
    assert result.action_taken == ActionTaken.COMMENTED
    assert len(service.requests) == 1


def test_bot_events_are_skipped():
    pr = PRContext(number=7, title="Bump deps", actor="dependabot[bot]")
    result, service, github = _process(pr)

    assert result.action_taken == ActionTaken.SKIPPED
    assert result.reasoning == "Skipped bot-triggered event"
    assert service.requests == []
    assert github.comments == []


def test_ai_failure_returns_heuristic_advice():
    service = FakeAIService(error=AIServiceError("AI service failed after 3 retries: down"))
    result, _, github = _process(_pr("Fix crash on start"), service=service)

    assert result.action_taken == ActionTaken.ERROR
    assert result.error_message == "AI service failed after 3 retries: down"
    assert result.reasoning == 'Consider using "fix:" prefix for bug fixes'
    assert result.suggestions == []
    assert github.comments == []


def test_empty_suggestions_are_an_error():
    service = FakeAIService(TitleGenerationResponse(suggestions=[], reasoning="", confidence=0.5))
    result, _, github = _process(_pr(), service=service)

    assert result.action_taken == ActionTaken.ERROR
    assert result.error_message == "No title suggestions could be generated"
    assert github.comments == []


def test_request_carries_pr_context_and_options():
    config = ActionConfig(
        github_token="t",
        include_scope=True,
        match_language=False,
        custom_prompt="custom",
        validation_options=ValidationOptions(allowed_types=("feat", "fix"), max_length=60)
    )
    pr = _pr(
        body="Adds a login page",
        diff_content="--- a.py",
        changed_files=[f"f{i}.py" for i in range(30)]
    )
    _, service, _ = _process(pr, config)

    request = service.requests[0]
    assert request.original_title == "Add login"
    assert request.pr_body == "Adds a login page"
    assert request.diff_content == "--- a.py"
    assert len(request.changed_files) == 20
    assert request.options.include_scope
    assert request.options.preferred_types == ("feat", "fix")
    assert request.options.max_length == 60
    assert not request.options.match_language
    assert request.options.custom_prompt == "custom"


def test_comment_template_is_used():
    config = ActionConfig(github_token="t", comment_template="Try: ${suggestions}")
    _, _, github = _process(_pr(), config)

    assert github.comments[0][1] == "Try: 1. feat(auth): add login flow\n2. feat: add login"
