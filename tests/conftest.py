"""
Shared fixtures and fakes for the test suite.
"""

import asyncio
from typing import List, Optional, Union

import pytest

from conventional_pr_title.llm.provider import AIProviderConfig, BaseAIProvider
from conventional_pr_title.models import TitleGenerationResponse

VALID_JSON = (
    '{"suggestions": ["feat(auth): add login flow", "feat: add login"], '
    '"reasoning": "describes the new feature", "confidence": 0.9}'
)


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping"""
    delays: List[float] = []

    async def fake_sleep(delay, *args, **kwargs):
        delays.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return delays


def scripted_provider(*outputs: Union[str, BaseException], api_key_optional: bool = True):
    """
    Build a provider class whose completions replay ``outputs`` in order.

    Exceptions in the script are raised, strings are returned. The last
    entry repeats once the script is exhausted. Calls are recorded on the
    class so tests can inspect them after the registry instantiated it.
    """

    class ScriptedProvider(BaseAIProvider):
        provider_name = "Scripted"
        api_key_env = "SCRIPTED_API_KEY"
        default_model = "scripted-1"
        calls: List[dict] = []
        instances: List["ScriptedProvider"] = []
        closed = 0

        def __init__(self, config: AIProviderConfig, transport=None):
            super().__init__(config, transport)
            type(self).instances.append(self)

        async def _complete(self, system, prompt, max_tokens, temperature):
            cls = type(self)
            index = min(len(cls.calls), len(outputs) - 1)
            cls.calls.append({
                "system": system,
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            })
            result = outputs[index]
            if isinstance(result, BaseException):
                raise result
            return result

        async def aclose(self):
            type(self).closed += 1

    ScriptedProvider.api_key_optional = api_key_optional
    ScriptedProvider.calls = []
    ScriptedProvider.instances = []
    return ScriptedProvider


class FakeAIService:
    """Stands in for AITitleService in processor tests"""

    def __init__(self, response: Optional[TitleGenerationResponse] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.requests = []

    async def generate_title(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


class FakeGitHub:
    """Stands in for GitHubClient in processor tests"""

    def __init__(
        self,
        can_write: bool = True,
        update_error: Optional[Exception] = None,
        comment_error: Optional[Exception] = None
    ):
        self.can_write = can_write
        self.update_error = update_error
        self.comment_error = comment_error
        self.updated_titles = []
        self.comments = []
        self.permission_checks = 0

    async def update_pr_title(self, pr_number, title):
        if self.update_error is not None:
            raise self.update_error
        self.updated_titles.append((pr_number, title))

    async def create_comment(self, pr_number, body):
        if self.comment_error is not None:
            raise self.comment_error
        self.comments.append((pr_number, body))

    async def check_permissions(self):
        self.permission_checks += 1
        return self.can_write
