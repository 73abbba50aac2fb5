"""
Action configuration - reads workflow inputs and writes step outputs.

Inputs arrive as ``INPUT_<NAME>`` environment variables, the way the Actions
runner passes them. Every problem is collected before failing so the user
sees all of them at once.
"""

import os
import sys
import json
import uuid
import logging
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field

from .commit.conventional import DEFAULT_TYPES
from .commit.validator import ValidationOptions
from .errors import ConfigError, ConfigurationError
from .llm.factory import ProviderRegistry
from .llm.service import AIServiceConfig
from .logging_config import ActionsFormatter

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


class Mode(Enum):
    """How the action reacts to a non-conforming title"""
    AUTO = "auto"        # Rewrite the PR title
    SUGGEST = "suggest"  # Comment with suggestions


@dataclass(frozen=True)
class ActionConfig:
    """Parsed and validated action inputs"""
    github_token: str
    ai_provider: str = "openai"
    model: Optional[str] = None
    api_key: str = ""
    base_url: Optional[str] = None
    temperature: float = 0.3
    max_tokens: int = 500
    mode: Mode = Mode.SUGGEST
    validation_options: ValidationOptions = field(default_factory=ValidationOptions)
    include_scope: bool = False
    skip_if_conventional: bool = True
    debug: bool = False
    match_language: bool = True
    auto_comment: bool = True
    custom_prompt: Optional[str] = None
    comment_template: Optional[str] = None
    max_retries: int = 3

    def to_service_config(self) -> AIServiceConfig:
        """Settings for the AI orchestration service"""
        return AIServiceConfig(
            provider=self.ai_provider,
            model=self.model,
            api_key=self.api_key,
            base_url=self.base_url,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            max_retries=self.max_retries,
            debug=self.debug
        )


class ConfigManager:
    """
    Parses action inputs and writes action outputs.
    """

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        registry: Optional[ProviderRegistry] = None
    ):
        """
        Args:
            env: Environment mapping (defaults to os.environ)
            registry: Provider registry used to validate the provider
        """
        self.env = os.environ if env is None else env
        self.registry = registry or ProviderRegistry()
        self.errors: List[ConfigError] = []
        self._config: Optional[ActionConfig] = None

    # ========================================================================
    # Input helpers
    # ========================================================================

    def get_input(self, name: str) -> str:
        """Read an input the way the runner exposes it (trimmed)"""
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        return self.env.get(key, "").strip()

    def _required(self, name: str) -> str:
        value = self.get_input(name)
        if not value:
            self.errors.append(ConfigError(
                field=name,
                message=f"{name} is required",
                suggestion=f"Set the '{name}' input in your workflow file"
            ))
        return value

    def _boolean(self, name: str, default: bool) -> bool:
        value = self.get_input(name)
        if not value:
            return default
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False

        self.errors.append(ConfigError(
            field=name,
            message=f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}",
            suggestion="Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        ))
        return default

    def _number(
        self,
        name: str,
        default: Any,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        integer: bool = False
    ) -> Any:
        raw = self.get_input(name)
        if not raw:
            return default

        try:
            value = int(raw) if integer else float(raw)
        except ValueError:
            range_hint = ""
            if minimum is not None and maximum is not None:
                range_hint = f" between {minimum} and {maximum}"
            self.errors.append(ConfigError(
                field=name,
                message=f"Invalid number: {raw}",
                suggestion=f"Use a numeric value{range_hint}"
            ))
            return default

        if minimum is not None and value < minimum:
            self.errors.append(ConfigError(
                field=name,
                message=f"Value {value} is below minimum {minimum}",
                suggestion=f"Use a value >= {minimum}"
            ))
            return default

        if maximum is not None and value > maximum:
            self.errors.append(ConfigError(
                field=name,
                message=f"Value {value} is above maximum {maximum}",
                suggestion=f"Use a value <= {maximum}"
            ))
            return default

        return value

    # ========================================================================
    # Parsing
    # ========================================================================

    def _provider(self) -> str:
        provider = self.get_input("ai-provider") or "openai"
        if not self.registry.is_provider_supported(provider):
            self.errors.append(ConfigError(
                field="ai-provider",
                message=f"Invalid AI provider: {provider}",
                suggestion=f"Use one of: {', '.join(self.registry.get_supported_providers())}"
            ))
        return provider

    def _mode(self) -> Mode:
        raw = self.get_input("mode") or Mode.SUGGEST.value
        try:
            return Mode(raw)
        except ValueError:
            self.errors.append(ConfigError(
                field="mode",
                message=f"Invalid operation mode: {raw}",
                suggestion='Use "auto" to update titles automatically or "suggest" to add comments'
            ))
            return Mode.SUGGEST

    def _validation_options(self) -> ValidationOptions:
        raw_types = self.get_input("allowed-types")
        allowed_types = DEFAULT_TYPES
        if raw_types:
            allowed_types = tuple(t.strip() for t in raw_types.split(",") if t.strip())
            if not allowed_types:
                self.errors.append(ConfigError(
                    field="allowed-types",
                    message="At least one commit type must be allowed",
                    suggestion="Include common types like: feat, fix, docs, refactor"
                ))

        return ValidationOptions(
            allowed_types=allowed_types,
            require_scope=self._boolean("require-scope", False),
            max_length=self._number("max-length", 72, 10, 200, integer=True),
            min_description_length=self._number("min-description-length", 3, 1, 50, integer=True)
        )

    def _credentials(self, provider: str) -> Tuple[str, Optional[str]]:
        api_key = self.get_input("api-key")
        base_url = self.get_input("base-url") or None

        if not self.registry.is_provider_supported(provider):
            return api_key, base_url

        info = self.registry.get_provider_info(provider)

        if not api_key:
            api_key = self.env.get(info.required_api_key, "")
        if not base_url and info.base_url_env:
            base_url = self.env.get(info.base_url_env) or None

        if not api_key and not info.api_key_optional:
            self.errors.append(ConfigError(
                field="api-key",
                message=f"API key is required for provider '{provider}'",
                suggestion=f"Set the 'api-key' input or the {info.required_api_key} environment variable"
            ))

        return api_key, base_url

    def parse_config(self) -> ActionConfig:
        """
        Parse all inputs into an ActionConfig.

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: With every problem found
        """
        self.errors = []

        github_token = self._required("github-token")
        provider = self._provider()
        api_key, base_url = self._credentials(provider)
        model = self.get_input("model") or None

        if (
            model
            and self.registry.is_provider_supported(provider)
            and not self.registry.is_model_supported(provider, model)
        ):
            logger.warning(f"Model '{model}' is not in the known model list for '{provider}'")

        config = ActionConfig(
            github_token=github_token,
            ai_provider=provider,
            model=model,
            api_key=api_key,
            base_url=base_url,
            temperature=self._number("temperature", 0.3, 0, 1),
            max_tokens=self._number("max-tokens", 500, 1, 4000, integer=True),
            mode=self._mode(),
            validation_options=self._validation_options(),
            include_scope=self._boolean("include-scope", False),
            skip_if_conventional=self._boolean("skip-if-conventional", True),
            debug=self._boolean("debug", False),
            match_language=self._boolean("match-language", True),
            auto_comment=self._boolean("auto-comment", True),
            custom_prompt=self.get_input("custom-prompt") or None,
            comment_template=self.get_input("comment-template") or None,
            max_retries=self._number("max-retries", 3, 0, 10, integer=True)
        )

        if self.errors:
            raise ConfigurationError(list(self.errors))

        self._config = config
        return config

    def get_config(self) -> ActionConfig:
        if self._config is None:
            raise RuntimeError("Configuration not initialized. Call parse_config() first.")
        return self._config

    # ========================================================================
    # Outputs
    # ========================================================================

    def set_output(self, name: str, value: str) -> None:
        """
        Write a step output.

        Uses the GITHUB_OUTPUT file when available, the legacy
        ``::set-output`` command otherwise.
        """
        output_path = self.env.get("GITHUB_OUTPUT")

        if output_path:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(output_path, "a", encoding="utf-8") as f:
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            sys.stdout.write(f"::set-output name={name}::{ActionsFormatter.escape(value)}\n")

    def set_outputs(
        self,
        is_conventional: bool,
        suggested_titles: List[str],
        original_title: str,
        action_taken: str,
        error_message: Optional[str] = None
    ) -> None:
        """Write the action outputs"""
        self.set_output("is-conventional", "true" if is_conventional else "false")
        self.set_output("suggested-titles", json.dumps(suggested_titles))
        self.set_output("original-title", original_title)
        self.set_output("action-taken", action_taken)
        if error_message:
            self.set_output("error-message", error_message)
