"""
Prompt builder - Constructs the system and user prompts sent to providers.

The system message is assembled from template components with ``{{var}}``
placeholders. A custom prompt supplied by the user replaces the components
and receives the same variables.
"""

import re
from typing import Dict, List, Any, Optional
from dataclasses import dataclass

from ..models import TitleGenerationOptions, TitleGenerationRequest

DEFAULT_PREFERRED_TYPES = ("feat", "fix", "docs", "refactor", "test", "chore")
DEFAULT_MAX_LENGTH = 72

BODY_LIMIT = 1500
DIFF_LIMIT = 2000
MAX_CHANGED_FILES = 15

MATCH_LANGUAGE_INSTRUCTION = (
    "Detect the language used in the PR title and description, "
    "then respond in the same language."
)
ENGLISH_INSTRUCTION = "Always respond in English."


@dataclass
class PromptComponent:
    """Represents a reusable prompt component"""
    name: str
    content: str
    required: bool = True


class PromptBuilder:
    """
    Builds provider prompts from modular components.

    Components are:
    - Role and task description
    - Title rules
    - Response format
    """

    def __init__(self):
        self.components: Dict[str, PromptComponent] = {}
        self._register_default_components()

    def _register_default_components(self):
        """Register default prompt components"""

        self.register(PromptComponent(
            name="ROLE",
            content="""You are an expert at creating Conventional Commits titles for Pull Requests.

Your task is to analyze a PR title and content, then suggest 1-3 improved titles that follow the Conventional Commits standard."""
        ))

        self.register(PromptComponent(
            name="RULES",
            content="""RULES:
1. Format: type(scope): description
2. Allowed types: {{allowedTypes}}
3. Scope: {{scopeRule}} a scope in parentheses
4. Description: lowercase, no period, max {{maxLength}} chars total
5. Be specific and descriptive
6. Focus on WHAT changed, not HOW
7. IMPORTANT: {{languageInstruction}}"""
        ))

        self.register(PromptComponent(
            name="RESPONSE_FORMAT",
            content="""RESPONSE FORMAT:
Return a JSON object with:
{
  "suggestions": ["title1", "title2", "title3"],
  "reasoning": "explanation of why these titles are better",
  "confidence": 0.9
}

Only return valid JSON, no additional text."""
        ))

    def register(self, component: PromptComponent):
        """Register a prompt component"""
        self.components[component.name] = component

    def build(
        self,
        include: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Build a prompt from registered components.

        Args:
            include: Component names to include (None = all required)
            context: Variables substituted into ``{{name}}`` placeholders

        Returns:
            Prompt string
        """
        if include is None:
            components_to_use = [
                comp for comp in self.components.values()
                if comp.required
            ]
        else:
            components_to_use = [
                self.components[name]
                for name in include
                if name in self.components
            ]

        sections = []
        for component in components_to_use:
            content = component.content
            if context:
                content = self._apply_context(content, context)
            sections.append(content)

        return "\n\n".join(sections)

    def _apply_context(self, content: str, context: Dict[str, Any]) -> str:
        """Apply context variable substitutions to content"""

        # Unknown placeholders are left untouched
        def replace_var(match):
            var_name = match.group(1)
            return str(context.get(var_name, match.group(0)))

        return re.sub(r'\{\{(\w+)\}\}', replace_var, content)

    def system_context(self, options: Optional[TitleGenerationOptions]) -> Dict[str, Any]:
        """Variables available to the system message templates"""
        opts = options or TitleGenerationOptions()
        allowed_types = list(opts.preferred_types or DEFAULT_PREFERRED_TYPES)

        return {
            "allowedTypes": ", ".join(allowed_types),
            "scopeRule": "MUST include" if opts.include_scope else "MAY include",
            "maxLength": opts.max_length or DEFAULT_MAX_LENGTH,
            "languageInstruction": (
                MATCH_LANGUAGE_INSTRUCTION if opts.match_language else ENGLISH_INSTRUCTION
            ),
        }

    def build_system_message(self, options: Optional[TitleGenerationOptions] = None) -> str:
        """
        Build the system message for title generation.

        Args:
            options: Generation options from the request

        Returns:
            System message, or the rendered custom prompt when one is set
        """
        context = self.system_context(options)

        if options and options.custom_prompt and options.custom_prompt.strip():
            return self._apply_context(options.custom_prompt, context)

        return self.build(context=context)

    def build_user_prompt(self, request: TitleGenerationRequest) -> str:
        """
        Build the user prompt describing the pull request.

        Body and diff are truncated, and only the first changed files are
        listed, to keep the prompt small.

        Args:
            request: Title generation request

        Returns:
            User prompt string
        """
        prompt = f'Original PR Title: "{request.original_title}"\n\n'

        if request.pr_description and request.pr_description.strip():
            prompt += f"PR Description: {request.pr_description.strip()}\n\n"

        if request.pr_body and request.pr_body.strip():
            body = request.pr_body[:BODY_LIMIT]
            ellipsis = "..." if len(request.pr_body) > BODY_LIMIT else ""
            prompt += f"PR Body: {body}{ellipsis}\n\n"

        if request.diff_content and request.diff_content.strip():
            diff = request.diff_content[:DIFF_LIMIT]
            ellipsis = "..." if len(request.diff_content) > DIFF_LIMIT else ""
            prompt += f"Code Changes (diff):\n{diff}{ellipsis}\n\n"

        if request.changed_files:
            files = "\n".join(f"- {f}" for f in request.changed_files[:MAX_CHANGED_FILES])
            prompt += f"Changed Files:\n{files}\n\n"

        prompt += "Generate improved Conventional Commits titles for this PR."

        return prompt
