"""
GitHub API integration for the action.

Provides the pull request operations and workflow context the processor needs.
"""

from .client import (
    GitHubClient,
    GitHubConfig,
    PRInfo,
    PRComment,
    GitHubAPIError,
    GitHubNotFoundError
)
from .context import (
    GitHubEventContext,
    PRContext,
    extract_pr_context,
    is_bot_actor
)

__all__ = [
    "GitHubClient",
    "GitHubConfig",
    "PRInfo",
    "PRComment",
    "GitHubAPIError",
    "GitHubNotFoundError",
    "GitHubEventContext",
    "PRContext",
    "extract_pr_context",
    "is_bot_actor"
]
