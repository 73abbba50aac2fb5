"""
Markdown bodies for the comments posted on pull requests.
"""

from typing import List, Optional

FOOTER = "_Generated by the conventional-pr-title action_"


def render_template(
    template: str,
    current_title: str,
    suggestions: List[str],
    reasoning: Optional[str]
) -> str:
    """
    Fill a user-supplied comment template.

    ``${currentTitle}``, ``${suggestions}`` (a numbered list) and
    ``${reasoning}`` are replaced everywhere they occur.
    """
    numbered = "\n".join(f"{i}. {s}" for i, s in enumerate(suggestions, 1))

    return (
        template
        .replace("${currentTitle}", current_title)
        .replace("${suggestions}", numbered)
        .replace("${reasoning}", reasoning or "")
    )


def format_suggestion_comment(
    current_title: str,
    suggestions: List[str],
    reasoning: Optional[str] = None,
    template: Optional[str] = None
) -> str:
    """
    Build the comment listing title suggestions (suggest mode).

    Args:
        current_title: Title currently on the pull request
        suggestions: Suggested titles, best first
        reasoning: Model explanation
        template: Optional custom template replacing the default layout

    Returns:
        Markdown comment body
    """
    if template:
        return render_template(template, current_title, suggestions, reasoning)

    lines = [
        "## 🚀 AI-Powered PR Title Suggestions",
        "",
        f'> **Current title:** `"{current_title}"`',
        "> doesn't follow the [Conventional Commits](https://www.conventionalcommits.org/) standard",
        "",
        "### 💡 Suggested Titles",
        "",
    ]

    for i, suggestion in enumerate(suggestions, 1):
        marker = " ⭐ **(Recommended)**" if i == 1 else ""
        lines.append(f"**{i}.** `{suggestion}`{marker}")
    lines.append("")

    if reasoning:
        lines.extend([
            "### 🧠 AI Analysis",
            "",
            f"> {reasoning}",
            "",
        ])

    lines.extend([
        "---",
        "",
        "### 📝 How to Apply",
        "",
        '1. Click the **"Edit"** button next to the PR title',
        "2. Copy one of the suggested titles above",
        "3. Save the change",
        "",
        FOOTER,
    ])

    return "\n".join(lines)


def format_success_comment(
    original_title: str,
    new_title: str,
    reasoning: Optional[str] = None
) -> str:
    """
    Build the comment announcing an automatic title update (auto mode).

    Args:
        original_title: Title before the update
        new_title: Title applied by the action
        reasoning: Model explanation

    Returns:
        Markdown comment body
    """
    lines = [
        "## ✅ PR Title Auto-Updated",
        "> Rewritten to follow the Conventional Commits standard",
        "",
        "| | Title |",
        "|---|---|",
        f"| **Original** | `{original_title}` |",
        f"| **Updated** | `{new_title}` ✨ |",
        "",
    ]

    if reasoning:
        lines.extend([
            "### 🤖 AI Analysis",
            "",
            f"> {reasoning}",
            "",
        ])

    lines.extend([
        "---",
        "",
        FOOTER,
    ])

    return "\n".join(lines)
