"""
Prompt classification and input checks.

- classifier.py: rule-based category scorer (PromptClassifier)
- prompt_guard.py: caller-facing prompt validation
"""

from prompt_router.routing.classifier import CATEGORY_REASONS, PromptClassifier, normalize_prompt
from prompt_router.routing.prompt_guard import ensure_prompt_text, validate_prompt

__all__ = [
    "CATEGORY_REASONS",
    "PromptClassifier",
    "normalize_prompt",
    "ensure_prompt_text",
    "validate_prompt",
]
