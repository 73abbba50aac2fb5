"""
Workflow run context and pull request context extraction.

Reads the event that triggered the workflow from the runner environment and
gathers the pull request details the processor works on.
"""

import os
import json
import logging
from typing import Any, Dict, List, Mapping, Optional
from dataclasses import dataclass, field

from .client import GitHubAPIError, GitHubClient

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")

GITHUB_ACTIONS_BOT = "github-actions[bot]"


@dataclass
class GitHubEventContext:
    """The triggering workflow event"""
    event_name: str
    actor: str
    repository: str
    api_url: str = "https://api.github.com"
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GitHubEventContext":
        """
        Build the context from the runner environment.

        Args:
            env: Environment mapping (defaults to os.environ)

        Returns:
            Event context; the payload is empty if no event file exists
        """
        env = os.environ if env is None else env

        payload: Dict[str, Any] = {}
        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path and os.path.exists(event_path):
            with open(event_path, encoding="utf-8") as f:
                payload = json.load(f)

        return cls(
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            actor=env.get("GITHUB_ACTOR", ""),
            repository=env.get("GITHUB_REPOSITORY", ""),
            api_url=env.get("GITHUB_API_URL", "https://api.github.com"),
            payload=payload
        )

    @property
    def repo_owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo_name(self) -> str:
        return self.repository.partition("/")[2]

    @property
    def is_pull_request_event(self) -> bool:
        return self.event_name in PULL_REQUEST_EVENTS

    @property
    def pull_request(self) -> Optional[Dict[str, Any]]:
        return self.payload.get("pull_request")

    @property
    def sender_type(self) -> Optional[str]:
        return (self.payload.get("sender") or {}).get("type")


@dataclass
class PRContext:
    """Pull request data handed to the processor"""
    number: int
    title: str
    body: Optional[str] = None
    is_draft: bool = False
    changed_files: List[str] = field(default_factory=list)
    diff_content: str = ""
    author: Optional[str] = None
    actor: Optional[str] = None
    sender_type: Optional[str] = None


def is_bot_actor(actor: Optional[str], sender_type: Optional[str] = None) -> bool:
    """
    Whether the event was triggered by a bot.

    Covers the Actions bot itself, any ``[bot]`` app account and events whose
    sender is typed as a bot.
    """
    if sender_type == "Bot":
        return True
    if not actor:
        return False
    return actor == GITHUB_ACTIONS_BOT or actor.endswith("[bot]")


async def extract_pr_context(
    github: GitHubClient,
    event: GitHubEventContext
) -> PRContext:
    """
    Gather the pull request context for processing.

    Title and draft state come from the event payload. Body, changed files
    and a diff excerpt are fetched from the API; failures there only reduce
    the context and are logged as warnings.

    Args:
        github: Connected GitHub client
        event: Triggering event (must be a pull request event)

    Returns:
        PRContext for the pull request
    """
    pull_request = event.pull_request or {}
    number = pull_request["number"]

    body = pull_request.get("body")
    changed_files: List[str] = []
    diff_content = ""

    try:
        info = await github.get_pr_info(number)
        body = info.body or body

        changed_files = await github.get_changed_files(number)
        logger.debug(f"Found {len(changed_files)} changed files")

        base_sha = (pull_request.get("base") or {}).get("sha") or info.base_sha
        head_sha = (pull_request.get("head") or {}).get("sha") or info.head_sha

        if changed_files and base_sha and head_sha:
            try:
                diff_content = await github.get_diff(base_sha, head_sha)
            except GitHubAPIError as e:
                logger.debug(f"Failed to get diff: {e}")

    except GitHubAPIError as e:
        logger.warning(f"Failed to get PR context: {e}")

    return PRContext(
        number=number,
        title=pull_request.get("title", ""),
        body=body,
        is_draft=pull_request.get("draft", False),
        changed_files=changed_files,
        diff_content=diff_content,
        author=(pull_request.get("user") or {}).get("login"),
        actor=event.actor,
        sender_type=event.sender_type
    )
