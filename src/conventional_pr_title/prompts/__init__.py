"""
Prompts module - Prompt construction for title generation.
"""

from .builder import PromptBuilder, PromptComponent


__all__ = [
    "PromptBuilder",
    "PromptComponent",
]
