"""
Caller-facing prompt checks run at the API boundary before classification.

The classifier itself only rejects structurally invalid input; this module
adds the length limit and the prompt-injection screen.
"""

import re
from typing import Any

import structlog

from prompt_router.providers.exceptions import PromptValidationError


logger = structlog.get_logger(__name__)

MAX_PROMPT_LENGTH = 10000

HARMFUL_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"system\s*prompt", re.IGNORECASE),
    re.compile(r"ignore\s*previous\s*instructions", re.IGNORECASE),
    re.compile(r"jailbreak", re.IGNORECASE),
    re.compile(r"override\s*safety", re.IGNORECASE),
)


def ensure_prompt_text(prompt: Any) -> str:
    """
    Reject non-string, empty and whitespace-only prompts.

    Returns:
        The prompt unchanged

    Raises:
        PromptValidationError: prompt is not usable text
    """
    if not isinstance(prompt, str):
        raise PromptValidationError(
            "Prompt must be a non-empty string",
            details={"received_type": type(prompt).__name__},
        )
    if not prompt.strip():
        raise PromptValidationError("Prompt cannot be empty or only whitespace")
    return prompt


def validate_prompt(prompt: Any) -> str:
    """
    Full prompt validation for caller input.

    Args:
        prompt: Raw prompt from the request

    Returns:
        Prompt with surrounding whitespace removed

    Raises:
        PromptValidationError: empty, too long, or matches a harmful pattern
    """
    ensure_prompt_text(prompt)

    if len(prompt) > MAX_PROMPT_LENGTH:
        raise PromptValidationError(
            f"Prompt cannot exceed {MAX_PROMPT_LENGTH:,} characters",
            details={"length": len(prompt), "max_length": MAX_PROMPT_LENGTH},
        )

    for pattern in HARMFUL_PATTERNS:
        if pattern.search(prompt):
            logger.warning("Prompt rejected by harmful content screen", pattern=pattern.pattern)
            raise PromptValidationError(
                "Prompt contains potentially harmful content",
                details={"pattern": pattern.pattern},
            )

    return prompt.strip()
