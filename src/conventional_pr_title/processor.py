"""
PR title processor - decides what to do with a pull request title.

Flow:
1. Skip events triggered by bots
2. Validate the current title
3. Skip titles that already conform (when configured)
4. Ask the AI service for suggestions
5. Update the title (auto mode) or comment with suggestions (suggest mode)
"""

import dataclasses
import logging
from enum import Enum
from typing import List, Optional
from dataclasses import dataclass, field

from .comments import format_success_comment, format_suggestion_comment
from .commit.heuristics import generate_suggestions
from .commit.validator import validate_title
from .config import ActionConfig, Mode
from .github.client import GitHubClient
from .github.context import PRContext, is_bot_actor
from .llm.service import AITitleService
from .models import TitleGenerationOptions, TitleGenerationRequest, TitleGenerationResponse

logger = logging.getLogger(__name__)

# Upper bound on the files listed in the request
MAX_CHANGED_FILES = 20


class ActionTaken(Enum):
    """Outcome reported in the action-taken output"""
    UPDATED = "updated"
    COMMENTED = "commented"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class ProcessingResult:
    """Result of processing one pull request"""
    is_conventional: bool
    suggestions: List[str] = field(default_factory=list)
    reasoning: str = ""
    action_taken: ActionTaken = ActionTaken.SKIPPED
    error_message: Optional[str] = None


class PRTitleProcessor:
    """
    Runs the title check for a single pull request.
    """

    def __init__(
        self,
        config: ActionConfig,
        ai_service: AITitleService,
        github: GitHubClient
    ):
        self.config = config
        self.ai_service = ai_service
        self.github = github

    async def process(self, pr: PRContext) -> ProcessingResult:
        """
        Process a pull request.

        Args:
            pr: Pull request context

        Returns:
            ProcessingResult describing what was done
        """
        if is_bot_actor(pr.actor, pr.sender_type):
            logger.info(f"Skipping PR #{pr.number}: triggered by bot '{pr.actor}'")
            return ProcessingResult(
                is_conventional=True,
                reasoning="Skipped bot-triggered event",
                action_taken=ActionTaken.SKIPPED
            )

        validation = validate_title(pr.title, self.config.validation_options)
        is_conventional = validation.is_valid

        logger.info(
            f"Current title is {'conventional' if is_conventional else 'not conventional'}: "
            f"\"{pr.title}\""
        )
        if validation.errors:
            logger.debug(f"Validation errors: {', '.join(validation.errors)}")

        if self.config.skip_if_conventional and is_conventional:
            logger.info("Skipping: title is already conventional")
            return ProcessingResult(
                is_conventional=True,
                reasoning="Title is already conventional",
                action_taken=ActionTaken.SKIPPED
            )

        try:
            response = await self._generate_suggestions(pr)
        except Exception as e:
            logger.error(f"Failed to generate title suggestions: {e}")
            hints = generate_suggestions(pr.title, self.config.validation_options)
            return ProcessingResult(
                is_conventional=is_conventional,
                reasoning=" ".join(hints),
                action_taken=ActionTaken.ERROR,
                error_message=str(e)
            )

        if not response.suggestions:
            logger.warning("No title suggestions generated")
            return ProcessingResult(
                is_conventional=is_conventional,
                reasoning="No suggestions could be generated",
                action_taken=ActionTaken.ERROR,
                error_message="No title suggestions could be generated"
            )

        config = self.config
        if config.mode == Mode.AUTO and not await self.github.check_permissions():
            logger.warning(
                "Token lacks write access to the repository, "
                "falling back to suggest mode"
            )
            config = dataclasses.replace(config, mode=Mode.SUGGEST)

        if config.mode == Mode.AUTO:
            action, error = await self._update_title(pr, response, config)
        else:
            action, error = await self._comment_suggestions(pr, response, config)

        return ProcessingResult(
            is_conventional=is_conventional,
            suggestions=list(response.suggestions),
            reasoning=response.reasoning,
            action_taken=action,
            error_message=error
        )

    async def _generate_suggestions(self, pr: PRContext) -> TitleGenerationResponse:
        logger.info("Generating AI-powered title suggestions...")

        options = self.config.validation_options
        request = TitleGenerationRequest(
            original_title=pr.title,
            pr_description=pr.body or None,
            pr_body=pr.body or None,
            diff_content=pr.diff_content or None,
            changed_files=pr.changed_files[:MAX_CHANGED_FILES],
            options=TitleGenerationOptions(
                include_scope=self.config.include_scope,
                preferred_types=options.allowed_types,
                max_length=options.max_length,
                match_language=self.config.match_language,
                custom_prompt=self.config.custom_prompt
            )
        )

        return await self.ai_service.generate_title(request)

    async def _update_title(
        self,
        pr: PRContext,
        response: TitleGenerationResponse,
        config: ActionConfig
    ):
        best = response.suggestions[0]

        try:
            await self.github.update_pr_title(pr.number, best)
        except Exception as e:
            logger.warning(f"Title update failed: {e}")
            return ActionTaken.ERROR, str(e)

        logger.info(f"✅ Updated PR title to: \"{best}\"")

        if config.auto_comment:
            try:
                await self.github.create_comment(
                    pr.number,
                    format_success_comment(pr.title, best, response.reasoning)
                )
                logger.info("💬 Added success notification comment")
            except Exception as e:
                logger.warning(f"Failed to create success comment: {e}")

        return ActionTaken.UPDATED, None

    async def _comment_suggestions(
        self,
        pr: PRContext,
        response: TitleGenerationResponse,
        config: ActionConfig
    ):
        body = format_suggestion_comment(
            pr.title,
            response.suggestions,
            response.reasoning,
            template=config.comment_template
        )

        try:
            await self.github.create_comment(pr.number, body)
        except Exception as e:
            logger.warning(f"Suggestion comment failed: {e}")
            return ActionTaken.ERROR, str(e)

        logger.info(f"💬 Added comment with {len(response.suggestions)} title suggestions")
        return ActionTaken.COMMENTED, None
