"""
Error message formatting for action failures.
"""

import logging

from .categories import ErrorCategory, categorize_error
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ErrorFormatter:
    """
    Formats errors into messages suitable for the workflow log.
    """

    # Emojis for each category
    EMOJIS = {
        ErrorCategory.CONFIGURATION: "⚙️",
        ErrorCategory.AUTH: "🔒",
        ErrorCategory.RATE_LIMIT: "🚦",
        ErrorCategory.TIMEOUT: "⏱️",
        ErrorCategory.NETWORK: "🌐",
        ErrorCategory.API: "🔌",
        ErrorCategory.INTERNAL: "⚠️"
    }

    @staticmethod
    def format_configuration_error(error: ConfigurationError) -> str:
        """
        Format a configuration error with the per-field suggestions.

        Args:
            error: The aggregated configuration error

        Returns:
            Multi-line failure message
        """
        lines = ["Configuration errors:"]
        lines.extend(f"- {e.field}: {e.message}" for e in error.errors)

        suggestions = [f"- {e.field}: {e.suggestion}" for e in error.errors if e.suggestion]
        if suggestions:
            lines.append("")
            lines.append("Suggestions:")
            lines.extend(suggestions)

        return "\n".join(lines)

    @staticmethod
    def format_action_failure(error: BaseException) -> str:
        """Format an unexpected error for setFailed-style reporting"""
        message = str(error) or type(error).__name__
        return f"❌ Action failed: {message}"

    @staticmethod
    def format_error_concise(error: BaseException) -> str:
        """
        Format an error concisely for logs.

        Args:
            error: The exception to format

        Returns:
            Concise error string
        """
        category, explanation = categorize_error(error)
        emoji = ErrorFormatter.EMOJIS.get(category, "❌")

        return f"{emoji} {category.value.upper()}: {explanation} - {str(error)[:200]}"
