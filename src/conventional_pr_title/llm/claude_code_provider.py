"""
Claude Code provider - runs the ``claude`` CLI in print mode.

The CLI handles its own authentication (subscription login or API key), so an
API key is optional. When one is configured it is passed to the child process
environment only.
"""

import os
import json
import shutil
import asyncio
import logging
from typing import Dict, List, Optional

import httpx

from ..errors import ProviderError
from .provider import AIProviderConfig, BaseAIProvider

logger = logging.getLogger(__name__)


class ClaudeCodeProvider(BaseAIProvider):
    """
    Provider backed by the Claude Code command line tool.

    Model aliases (``sonnet``, ``opus``) and full model names are forwarded
    to the CLI unchanged.
    """

    provider_name = "Claude Code"
    api_key_env = "CLAUDE_CODE_API_KEY"
    api_key_optional = True
    default_model = "sonnet"
    executable = "claude"

    def __init__(
        self,
        config: AIProviderConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(config, transport)
        logger.info(f"Claude Code provider initialized with model: {self.model}")

    def _command(self, system: str, prompt: str) -> List[str]:
        return [
            self.executable,
            "-p", prompt,
            "--output-format", "json",
            "--model", self.model,
            "--system-prompt", system,
        ]

    def _environment(self) -> Dict[str, str]:
        env = dict(os.environ)
        if self.config.api_key:
            env["ANTHROPIC_API_KEY"] = self.config.api_key
        return env

    async def _complete(
        self,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        # The CLI exposes no sampling controls; max_tokens and temperature are ignored
        if shutil.which(self.executable) is None:
            raise ProviderError(
                provider=self.provider_name,
                context="_complete",
                message=f"'{self.executable}' executable not found on PATH",
                code="ENOENT",
                retryable=False
            )

        process = await asyncio.create_subprocess_exec(
            *self._command(system, prompt),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self._environment()
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.config.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise

        if process.returncode != 0:
            detail = stderr.decode(errors="replace").strip() or stdout.decode(errors="replace").strip()
            raise ProviderError(
                provider=self.provider_name,
                context="_complete",
                message=f"CLI exited with status {process.returncode}: {detail[:500]}",
                code=str(process.returncode)
            )

        output = stdout.decode(errors="replace")

        try:
            payload = json.loads(output)
        except json.JSONDecodeError:
            # Plain text output, let the response parser deal with it
            return output

        if isinstance(payload, dict):
            if payload.get("is_error"):
                raise ProviderError(
                    provider=self.provider_name,
                    context="_complete",
                    message=str(payload.get("result") or "CLI reported an error"),
                    code=str(payload.get("subtype") or "UNKNOWN")
                )
            return str(payload.get("result") or "")

        return output
