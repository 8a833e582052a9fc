"""
Enumerations for the prompt router data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class Category(str, Enum):
    """
    Routing bucket assigned to a prompt.

    DEFAULT is the no-signal sentinel: it never wins classification with a
    positive score and is only used when routing falls back to the default target.
    """

    CODING = "coding"
    REASONING = "reasoning"
    CREATIVE = "creative"
    FAST = "fast"
    DEFAULT = "default"

    @classmethod
    def scored(cls) -> list["Category"]:
        """Categories the classifier scores, in tie-break order."""
        return [cls.CODING, cls.REASONING, cls.CREATIVE, cls.FAST]


class ProviderId(str, Enum):
    """Upstream AI vendors with a registered provider handler."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    GROQ = "groq"


class ErrorKind(str, Enum):
    """
    Normalized error taxonomy.

    CONFIG_ERROR is startup-only; every other kind is per-request and
    recoverable by the caller.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    API_ERROR = "API_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
