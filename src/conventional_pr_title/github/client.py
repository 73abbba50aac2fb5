"""
GitHub API client for the action.

Provides async access to the pull request operations the processor needs.
"""

import httpx
import logging
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field

from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

# Limits applied when building diff context for the model
MAX_DIFF_FILES = 5
MAX_DIFF_SIZE = 3000

WRITE_PERMISSIONS = ("admin", "write")


@dataclass
class GitHubConfig:
    """GitHub API configuration"""
    token: str
    repo_owner: str
    repo_name: str
    api_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"


@dataclass
class PRInfo:
    """GitHub pull request details"""
    number: int
    title: str
    body: Optional[str]
    author: str
    head_ref: str
    base_ref: str
    head_sha: str = ""
    base_sha: str = ""
    labels: List[str] = field(default_factory=list)
    is_draft: bool = False


@dataclass
class PRComment:
    """A comment posted on a pull request"""
    id: int
    body: str
    author: str
    created_at: str


class GitHubAPIError(Exception):
    """Base exception for GitHub API errors"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class GitHubNotFoundError(GitHubAPIError):
    """Resource not found (404)"""
    pass


class GitHubClient:
    """
    Async GitHub API client.

    Implements the pull request operations used by the processor. Operation
    failures are re-raised as GitHubAPIError with a message naming the
    operation; ``check_permissions`` never raises.
    """

    def __init__(
        self,
        config: GitHubConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize GitHub client.

        Args:
            config: GitHub configuration
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self._headers = {
            "Authorization": f"token {config.token}",
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": config.api_version
        }

        self._repo_path = f"repos/{config.repo_owner}/{config.repo_name}"

    async def __aenter__(self):
        """Context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        await self.close()

    async def connect(self):
        """Initialize HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=30.0,
                follow_redirects=True,
                transport=self._transport
            )

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client, raising if not connected"""
        if self._client is None:
            raise RuntimeError("GitHubClient not connected. Use async with or call connect()")
        return self._client

    def _build_url(self, path: str, repo_scoped: bool = True) -> str:
        """Build full API URL"""
        if not repo_scoped:
            return f"{self.config.api_url}/{path}"
        if not path:
            return f"{self.config.api_url}/{self._repo_path}"
        return f"{self.config.api_url}/{self._repo_path}/{path}"

    @retry_with_backoff(max_retries=3)
    async def _request(
        self,
        method: str,
        path: str,
        repo_scoped: bool = True,
        **kwargs
    ) -> Any:
        """
        Make authenticated API request.

        Args:
            method: HTTP method
            path: API path (relative to the repo unless repo_scoped is False)
            repo_scoped: Whether the path is relative to the repository
            **kwargs: Additional request arguments

        Returns:
            Response JSON

        Raises:
            GitHubNotFoundError: Resource not found
            GitHubAPIError: Other API errors
        """
        client = self._get_client()
        url = self._build_url(path, repo_scoped)

        try:
            response = await client.request(
                method,
                url,
                headers=self._headers,
                **kwargs
            )
            response.raise_for_status()
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise GitHubAPIError(
                    f"Invalid JSON in response to {method} {path or self._repo_path}: {e}"
                ) from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise GitHubNotFoundError(f"Resource not found: {path or self._repo_path}", 404) from e
            raise GitHubAPIError(
                f"GitHub API error ({status}): {e.response.text}",
                status
            ) from e
        except httpx.RequestError as e:
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

    # ========================================================================
    # Pull Request Operations
    # ========================================================================

    async def get_pr_info(self, pr_number: int) -> PRInfo:
        """
        Get pull request details.

        Args:
            pr_number: Pull request number

        Returns:
            Pull request details
        """
        try:
            data = await self._request("GET", f"pulls/{pr_number}")
        except GitHubAPIError as e:
            raise GitHubAPIError(f"Failed to get PR info: {e}", e.status_code) from e

        labels = [
            label if isinstance(label, str) else label.get("name", "")
            for label in data.get("labels", [])
        ]

        return PRInfo(
            number=data["number"],
            title=data["title"],
            body=data.get("body"),
            author=(data.get("user") or {}).get("login", "unknown"),
            head_ref=data["head"]["ref"],
            base_ref=data["base"]["ref"],
            head_sha=data["head"].get("sha", ""),
            base_sha=data["base"].get("sha", ""),
            labels=labels,
            is_draft=data.get("draft", False)
        )

    async def update_pr_title(self, pr_number: int, title: str) -> None:
        """
        Update the title of a pull request.

        Args:
            pr_number: Pull request number
            title: New title
        """
        try:
            await self._request("PATCH", f"pulls/{pr_number}", json={"title": title})
        except GitHubAPIError as e:
            raise GitHubAPIError(f"Failed to update PR title: {e}", e.status_code) from e

        logger.info(f"Updated title of PR #{pr_number}")

    async def create_comment(self, pr_number: int, body: str) -> PRComment:
        """
        Post a comment on a pull request.

        Args:
            pr_number: Pull request number
            body: Comment text (Markdown)

        Returns:
            The created comment
        """
        try:
            data = await self._request(
                "POST",
                f"issues/{pr_number}/comments",
                json={"body": body}
            )
        except GitHubAPIError as e:
            raise GitHubAPIError(f"Failed to create comment: {e}", e.status_code) from e

        logger.info(f"Posted comment on PR #{pr_number}")

        return PRComment(
            id=data.get("id", 0),
            body=data.get("body") or "",
            author=(data.get("user") or {}).get("login", "unknown"),
            created_at=data.get("created_at", "")
        )

    async def get_changed_files(self, pr_number: int) -> List[str]:
        """
        List the files changed by a pull request.

        Args:
            pr_number: Pull request number

        Returns:
            File paths
        """
        try:
            data = await self._request(
                "GET",
                f"pulls/{pr_number}/files",
                params={"per_page": 100}
            )
        except GitHubAPIError as e:
            raise GitHubAPIError(f"Failed to get changed files: {e}", e.status_code) from e

        return [f["filename"] for f in data]

    async def get_diff(self, base_sha: str, head_sha: str) -> str:
        """
        Build a short diff excerpt between two commits.

        Only the first files are included and the result is truncated.

        Args:
            base_sha: Base commit SHA
            head_sha: Head commit SHA

        Returns:
            Diff excerpt (empty string if the comparison has no files)
        """
        data = await self._request("GET", f"compare/{base_sha}...{head_sha}")

        files = data.get("files") or []
        if not files:
            return ""

        diff = "\n\n".join(
            f"--- {f['filename']}\n{f.get('patch') or ''}"
            for f in files[:MAX_DIFF_FILES]
        )
        return diff[:MAX_DIFF_SIZE]

    # ========================================================================
    # Permission Operations
    # ========================================================================

    async def get_current_user(self) -> str:
        """
        Get the login of the authenticated user.

        Returns:
            User login
        """
        try:
            data = await self._request("GET", "user", repo_scoped=False)
        except GitHubAPIError as e:
            raise GitHubAPIError(f"Failed to get current user: {e}", e.status_code) from e

        return data["login"]

    async def check_permissions(self) -> bool:
        """
        Check whether the token can edit pull requests.

        Uses the permissions reported with the repository when present,
        otherwise the collaborator permission of the authenticated user.

        Returns:
            True if the token has write or admin access
        """
        try:
            repo = await self._request("GET", "")

            permissions = repo.get("permissions") or {}
            if permissions.get("admin") or permissions.get("push"):
                return True

            username = await self.get_current_user()
            data = await self._request("GET", f"collaborators/{username}/permission")

            return data.get("permission") in WRITE_PERMISSIONS

        except Exception as e:
            logger.warning(f"Permission check failed: {e}")
            return False
