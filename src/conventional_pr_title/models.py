"""
Request and response types exchanged with AI providers.
"""

from typing import List, Optional, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TitleGenerationOptions:
    """Knobs that shape the prompt sent to the model"""
    include_scope: bool = False
    preferred_types: Optional[Sequence[str]] = None
    max_length: Optional[int] = None
    match_language: bool = True
    custom_prompt: Optional[str] = None


@dataclass(frozen=True)
class TitleGenerationRequest:
    """Everything the model is told about the pull request"""
    original_title: str
    pr_description: Optional[str] = None
    pr_body: Optional[str] = None
    diff_content: Optional[str] = None
    changed_files: Optional[List[str]] = None
    options: TitleGenerationOptions = field(default_factory=TitleGenerationOptions)


@dataclass
class TitleGenerationResponse:
    """Normalized model answer, suggestions ordered best-first"""
    suggestions: List[str]
    reasoning: str
    confidence: float
