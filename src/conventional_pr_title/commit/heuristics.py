"""
Keyword heuristics offering offline title advice.

Used when no AI suggestions are available so that the author still gets a
hint about which prefix to use.
"""

from typing import List, Optional

from .validator import DEFAULT_OPTIONS, ValidationOptions


# (keywords, advice) pairs, first match wins
KEYWORD_HINTS = [
    (("fix", "bug", "error"), 'Consider using "fix:" prefix for bug fixes'),
    (("test", "spec"), 'Consider using "test:" prefix for test-related changes'),
    (("doc", "readme"), 'Consider using "docs:" prefix for documentation changes'),
    (("add", "implement", "create"), 'Consider using "feat:" prefix for new features'),
    (
        ("update", "improve", "enhance"),
        'Consider using "feat:" for enhancements or "refactor:" for code improvements'
    ),
]


def generate_suggestions(
    title: str,
    options: Optional[ValidationOptions] = None
) -> List[str]:
    """
    Produce human-readable advice for a non-conforming title.

    Args:
        title: The current PR title
        options: Validation rules used for the type list and length hint

    Returns:
        List of advice strings (never empty)
    """
    opts = options or DEFAULT_OPTIONS

    if not title or not title.strip():
        return ["Please provide a meaningful title"]

    suggestions: List[str] = []
    lower_title = title.lower()

    for keywords, advice in KEYWORD_HINTS:
        if any(keyword in lower_title for keyword in keywords):
            suggestions.append(advice)
            break
    else:
        suggestions.append(
            f"Consider using one of these prefixes: {', '.join(opts.allowed_types[:5])}"
        )

    if opts.max_length and len(title) > opts.max_length:
        suggestions.append(f"Shorten title to {opts.max_length} characters or less")

    return suggestions
