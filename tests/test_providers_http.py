"""
Tests for the concrete providers against mocked HTTP endpoints.
"""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from conventional_pr_title.errors import ProviderError
from conventional_pr_title.llm.anthropic_provider import AnthropicProvider
from conventional_pr_title.llm.claude_code_provider import ClaudeCodeProvider
from conventional_pr_title.llm.cohere_provider import CohereProvider
from conventional_pr_title.llm.gemini_provider import GeminiProvider
from conventional_pr_title.llm.ollama_provider import OllamaProvider
from conventional_pr_title.llm.openai_compatible import (
    AzureOpenAIProvider,
    GroqProvider,
    OpenAIProvider
)
from conventional_pr_title.llm.provider import AIProviderConfig
from conventional_pr_title.models import TitleGenerationRequest

from .conftest import VALID_JSON

REQUEST = TitleGenerationRequest(original_title="Add login")


class Recorder:
    """MockTransport handler that records requests and replays responses"""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.responses)) - 1
        return self.responses[index]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


def _chat_completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5}
    })


def _generate(provider):
    async def scenario():
        try:
            return await provider.generate_title(REQUEST)
        finally:
            await provider.aclose()

    return asyncio.run(scenario())


def test_openai_request_shape(sleeps):
    recorder = Recorder(_chat_completion(VALID_JSON))
    provider = OpenAIProvider(
        AIProviderConfig(api_key="sk-test", max_tokens=300, temperature=0.2),
        transport=recorder.transport
    )

    response = _generate(provider)

    assert response.suggestions[0] == "feat(auth): add login flow"
    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = recorder.body()
    assert body["model"] == "gpt-4o-mini"
    assert body["max_tokens"] == 300
    assert body["temperature"] == 0.2
    assert [m["role"] for m in body["messages"]] == ["system", "user"]


def test_compatible_provider_uses_its_base_url(sleeps):
    recorder = Recorder(_chat_completion(VALID_JSON))
    provider = GroqProvider(AIProviderConfig(api_key="gsk"), transport=recorder.transport)

    _generate(provider)

    assert str(recorder.requests[0].url) == "https://api.groq.com/openai/v1/chat/completions"
    assert recorder.body()["model"] == "llama-3.3-70b-versatile"


def test_custom_base_url(sleeps):
    recorder = Recorder(_chat_completion(VALID_JSON))
    provider = OpenAIProvider(
        AIProviderConfig(api_key="k", base_url="https://proxy.internal/v1/"),
        transport=recorder.transport
    )

    _generate(provider)

    assert str(recorder.requests[0].url) == "https://proxy.internal/v1/chat/completions"


def test_empty_choices_fall_back_to_default_title(sleeps):
    recorder = Recorder(httpx.Response(200, json={"choices": []}))
    provider = OpenAIProvider(AIProviderConfig(api_key="k"), transport=recorder.transport)

    assert _generate(provider).suggestions == ["feat: improve PR title"]


def test_unauthorized_is_not_retried(sleeps):
    recorder = Recorder(httpx.Response(401, json={"error": {"message": "bad key"}}))
    provider = OpenAIProvider(AIProviderConfig(api_key="bad"), transport=recorder.transport)

    with pytest.raises(ProviderError) as excinfo:
        _generate(provider)

    assert len(recorder.requests) == 1
    assert excinfo.value.code == "401"
    assert not excinfo.value.retryable
    assert sleeps == []


def test_server_errors_are_retried(sleeps):
    recorder = Recorder(
        httpx.Response(503),
        httpx.Response(429),
        _chat_completion(VALID_JSON)
    )
    provider = OpenAIProvider(AIProviderConfig(api_key="k"), transport=recorder.transport)

    _generate(provider)

    assert len(recorder.requests) == 3
    assert sleeps == [1.0, 2.0]


def test_azure_request_shape(sleeps):
    recorder = Recorder(_chat_completion(VALID_JSON))
    provider = AzureOpenAIProvider(
        AIProviderConfig(
            api_key="az-key",
            base_url="https://myres.openai.azure.com",
            model="gpt-4o"
        ),
        transport=recorder.transport
    )

    _generate(provider)

    request = recorder.requests[0]
    assert request.url.path == "/openai/deployments/gpt-4o/chat/completions"
    assert request.url.params["api-version"] == "2024-10-21"
    assert request.headers["api-key"] == "az-key"
    assert "Authorization" not in request.headers
    assert "model" not in recorder.body()


def test_azure_requires_base_url():
    with pytest.raises(ValueError, match="AZURE_BASE_URL is required for Azure"):
        AzureOpenAIProvider(AIProviderConfig(api_key="az-key"))


def test_cohere_request_shape(sleeps):
    recorder = Recorder(httpx.Response(200, json={
        "message": {
            "role": "assistant",
            "content": [
                {"type": "text", "text": VALID_JSON[:20]},
                {"type": "text", "text": VALID_JSON[20:]},
            ]
        }
    }))
    provider = CohereProvider(AIProviderConfig(api_key="co"), transport=recorder.transport)

    response = _generate(provider)

    assert response.reasoning == "describes the new feature"
    assert str(recorder.requests[0].url) == "https://api.cohere.com/v2/chat"
    assert recorder.body()["model"] == "command-r-plus"


def test_ollama_request_shape(sleeps):
    recorder = Recorder(httpx.Response(200, json={
        "message": {"role": "assistant", "content": VALID_JSON},
        "prompt_eval_count": 12,
        "eval_count": 30
    }))
    provider = OllamaProvider(
        AIProviderConfig(max_tokens=256, temperature=0.4),
        transport=recorder.transport
    )

    response = _generate(provider)

    assert response.suggestions[1] == "feat: add login"
    request = recorder.requests[0]
    assert str(request.url) == "http://localhost:11434/api/chat"
    assert "Authorization" not in request.headers
    body = recorder.body()
    assert body["stream"] is False
    assert body["options"] == {"temperature": 0.4, "num_predict": 256}


def test_anthropic_request_shape(sleeps):
    recorder = Recorder(httpx.Response(200, json={
        "id": "msg_1",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-5-sonnet-20241022",
        "content": [{"type": "text", "text": VALID_JSON}],
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 20, "output_tokens": 40}
    }))
    provider = AnthropicProvider(
        AIProviderConfig(api_key="sk-ant"),
        transport=recorder.transport
    )

    response = _generate(provider)

    assert response.suggestions[0] == "feat(auth): add login flow"
    request = recorder.requests[0]
    assert request.url.path == "/v1/messages"
    assert request.headers["x-api-key"] == "sk-ant"
    body = recorder.body()
    assert body["model"] == "claude-3-5-sonnet-20241022"
    assert body["system"].startswith("You are an expert")
    assert body["messages"][0]["role"] == "user"


def test_claude_code_missing_executable(monkeypatch, sleeps):
    monkeypatch.setattr("shutil.which", lambda name: None)
    provider = ClaudeCodeProvider(AIProviderConfig())

    with pytest.raises(ProviderError) as excinfo:
        asyncio.run(provider.generate_title(REQUEST))

    assert excinfo.value.code == "ENOENT"
    assert not excinfo.value.retryable
    assert sleeps == []


class FakeProcess:
    def __init__(self, stdout: bytes, returncode: int = 0, stderr: bytes = b""):
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode

    async def communicate(self):
        return self.stdout, self.stderr


def _fake_cli(monkeypatch, process: FakeProcess):
    commands = []

    async def create_subprocess_exec(*args, **kwargs):
        commands.append((args, kwargs))
        return process

    monkeypatch.setattr("shutil.which", lambda name: f"/usr/local/bin/{name}")
    monkeypatch.setattr(asyncio, "create_subprocess_exec", create_subprocess_exec)
    return commands


def test_claude_code_reads_json_result(monkeypatch, sleeps):
    output = json.dumps({"type": "result", "is_error": False, "result": VALID_JSON})
    commands = _fake_cli(monkeypatch, FakeProcess(output.encode()))
    provider = ClaudeCodeProvider(AIProviderConfig(api_key="sk-ant", model="opus"))

    response = asyncio.run(provider.generate_title(REQUEST))

    assert response.suggestions[0] == "feat(auth): add login flow"
    args, kwargs = commands[0]
    assert args[0] == "claude"
    assert args[args.index("--model") + 1] == "opus"
    assert args[args.index("--output-format") + 1] == "json"
    assert kwargs["env"]["ANTHROPIC_API_KEY"] == "sk-ant"


def test_claude_code_plain_text_output(monkeypatch, sleeps):
    _fake_cli(monkeypatch, FakeProcess(b"fix(ui): correct padding\n"))
    provider = ClaudeCodeProvider(AIProviderConfig())

    response = asyncio.run(provider.generate_title(REQUEST))

    assert response.suggestions == ["fix(ui): correct padding"]


def test_claude_code_failure_exit(monkeypatch, sleeps):
    _fake_cli(monkeypatch, FakeProcess(b"", returncode=2, stderr=b"not logged in"))
    provider = ClaudeCodeProvider(AIProviderConfig())

    with pytest.raises(ProviderError, match="not logged in"):
        asyncio.run(provider.generate_title(REQUEST))

    assert sleeps == [1.0, 2.0, 4.0]


def test_gemini_passes_system_instruction(sleeps):
    calls = []

    class FakeModels:
        async def generate_content(self, model, contents, config):
            calls.append((model, contents, config))
            return SimpleNamespace(text=VALID_JSON, usage_metadata=None)

    provider = GeminiProvider(AIProviderConfig(api_key="g-key", max_tokens=200))
    provider.client = SimpleNamespace(aio=SimpleNamespace(models=FakeModels()))

    response = asyncio.run(provider.generate_title(REQUEST))

    assert response.suggestions[0] == "feat(auth): add login flow"
    model, contents, config = calls[0]
    assert model == "gemini-1.5-flash"
    assert contents.startswith('Original PR Title: "Add login"')
    assert config.system_instruction.startswith("You are an expert")
    assert config.max_output_tokens == 200


def test_anthropic_message_arguments(sleeps):
    calls = []

    class FakeMessages:
        async def create(self, **kwargs):
            calls.append(kwargs)
            return SimpleNamespace(
                content=[SimpleNamespace(type="text", text=VALID_JSON)],
                stop_reason="end_turn",
                usage=SimpleNamespace(input_tokens=20, output_tokens=40)
            )

    provider = AnthropicProvider(AIProviderConfig(api_key="sk-ant", max_tokens=321))
    provider.client = SimpleNamespace(messages=FakeMessages())

    response = asyncio.run(provider.generate_title(REQUEST))

    assert response.suggestions[0] == "feat(auth): add login flow"
    assert calls[0]["model"] == "claude-3-5-sonnet-20241022"
    assert calls[0]["max_tokens"] == 321
    assert calls[0]["system"].startswith("You are an expert")
    assert calls[0]["messages"][0]["role"] == "user"
    assert calls[0]["messages"][0]["content"].startswith('Original PR Title: "Add login"')
