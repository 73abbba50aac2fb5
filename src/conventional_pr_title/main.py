"""
Main entry point for the Conventional PR Title action.

Reads the workflow inputs, gathers the pull request context, runs the
processor and reports the result through step outputs and the exit status.
"""

import sys
import asyncio
import logging
from typing import Mapping, Optional

import httpx

from .config import ConfigManager
from .errors import ConfigurationError, ErrorFormatter
from .github import GitHubClient, GitHubConfig, GitHubEventContext, extract_pr_context
from .llm import AITitleService, ProviderRegistry
from .logging_config import ActionsFormatter, configure_logging
from .processor import ActionTaken, PRTitleProcessor

logger = logging.getLogger(__name__)


def set_failed(message: str) -> None:
    """Emit a workflow error annotation"""
    sys.stdout.write(f"::error::{ActionsFormatter.escape(message)}\n")


async def run(
    env: Optional[Mapping[str, str]] = None,
    registry: Optional[ProviderRegistry] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> int:
    """
    Run the action once.

    Args:
        env: Environment mapping (defaults to os.environ)
        registry: Provider registry (a new one is created if omitted)
        transport: Optional httpx transport for the GitHub client

    Returns:
        Process exit status (0 on success, 1 on failure)
    """
    registry = registry or ProviderRegistry()
    manager = ConfigManager(env, registry)
    event = GitHubEventContext.from_env(env)
    pull_request = event.pull_request or {}
    original_title = pull_request.get("title") or "Unknown"

    logger.debug(f"Action triggered by: {event.event_name}")
    logger.debug(f"Repository: {event.repository}")
    logger.debug(f"Triggered by actor: {event.actor}")

    if not event.is_pull_request_event or not event.pull_request:
        reason = (
            f"Unsupported event: {event.event_name}. This action only works with pull_request events."
            if not event.is_pull_request_event
            else "No pull request found in the event payload."
        )
        logger.info(f"Skipping processing: {reason}")
        manager.set_outputs(True, [], original_title, ActionTaken.SKIPPED.value)
        return 0

    try:
        config = manager.parse_config()

        if config.debug:
            logging.getLogger().setLevel(logging.DEBUG)
            for handler in logging.getLogger().handlers:
                handler.setLevel(logging.DEBUG)
            logger.debug(
                f"Configuration loaded: provider={config.ai_provider}, model={config.model}, "
                f"mode={config.mode.value}, skip_if_conventional={config.skip_if_conventional}"
            )

        logger.info(f"Processing PR #{pull_request['number']}: \"{original_title}\"")

        github = GitHubClient(
            GitHubConfig(
                token=config.github_token,
                repo_owner=event.repo_owner,
                repo_name=event.repo_name,
                api_url=event.api_url
            ),
            transport=transport
        )
        service = AITitleService(config.to_service_config(), registry)

        try:
            async with github:
                pr = await extract_pr_context(github, event)
                processor = PRTitleProcessor(config, service, github)
                result = await processor.process(pr)
        finally:
            await service.aclose()

    except ConfigurationError as e:
        set_failed(ErrorFormatter.format_configuration_error(e))
        return 1

    except Exception as e:
        logger.debug(ErrorFormatter.format_error_concise(e), exc_info=True)
        set_failed(ErrorFormatter.format_action_failure(e))
        manager.set_outputs(
            False,
            [],
            original_title,
            ActionTaken.ERROR.value,
            str(e) or type(e).__name__
        )
        return 1

    manager.set_outputs(
        result.is_conventional,
        result.suggestions,
        pr.title,
        result.action_taken.value,
        result.error_message
    )

    if result.action_taken == ActionTaken.ERROR:
        set_failed(f"❌ Action failed: {result.error_message}")
        return 1

    logger.info(f"🎉 Action completed successfully ({result.action_taken.value})")
    return 0


def main() -> int:
    """Synchronous entry point for the console script"""
    configure_logging()
    return asyncio.run(run())
