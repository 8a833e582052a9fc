"""
Custom exceptions for the routing and dispatch layer.

Every failure that leaves the dispatcher is one of these exceptions, each
tied to exactly one ErrorKind. Callers can catch RouterError to handle any
of them, or convert one into the NormalizedError payload with to_normalized().
"""

from typing import Any, Optional

from prompt_router.models.enums import ErrorKind, ProviderId
from prompt_router.models.llm_models import NormalizedError


DEFAULT_RETRY_AFTER_SECONDS = 60


class RouterError(Exception):
    """
    Base exception for all routing and dispatch errors.

    All router-specific exceptions inherit from this to allow catching
    any of them with a single except clause.
    """

    kind: ErrorKind = ErrorKind.API_ERROR

    def __init__(
        self,
        message: str,
        provider: Optional[ProviderId] = None,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.details = details or {}

    @property
    def retry_after(self) -> Optional[int]:
        return None

    def to_normalized(self) -> NormalizedError:
        return NormalizedError(
            kind=self.kind,
            message=self.message,
            provider=self.provider,
            model=self.model,
            http_status=self.status_code,
            retry_after_seconds=self.retry_after,
            details=self.details,
        )


class PromptValidationError(RouterError):
    """
    Raised when caller input is malformed or out of range.

    Always detected before any network call is attempted.
    """

    kind = ErrorKind.VALIDATION_ERROR


class AuthenticationError(RouterError):
    """Upstream rejected the credentials (HTTP 401)."""

    kind = ErrorKind.AUTHENTICATION_ERROR


class RateLimitError(RouterError):
    """
    Upstream rate-limited the request (HTTP 429).

    Carries the Retry-After value reported by the provider, or 60 seconds
    when the header is missing or unparseable.
    """

    kind = ErrorKind.RATE_LIMIT_ERROR

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self._retry_after = retry_after if retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS

    @property
    def retry_after(self) -> int:
        return self._retry_after


class ModelNotFoundError(RouterError):
    """Upstream does not know the requested model (HTTP 404)."""

    kind = ErrorKind.MODEL_NOT_FOUND


class ProviderUnavailableError(RouterError):
    """
    Provider has no API key or base URL configured.

    Raised before any network attempt.
    """

    kind = ErrorKind.PROVIDER_UNAVAILABLE


class ProviderNetworkError(RouterError):
    """
    Raised when unable to reach the provider.

    Includes connection refused, DNS failures, protocol errors, etc.
    """

    kind = ErrorKind.NETWORK_ERROR


class ProviderTimeoutError(ProviderNetworkError):
    """
    Raised when the configured request timeout elapses.

    Separate from generic network errors so callers can tell an abandoned
    call apart from one that never connected.
    """

    kind = ErrorKind.TIMEOUT_ERROR


class ProviderAPIError(RouterError):
    """
    Catch-all for non-2xx upstream responses.

    Carries the upstream status and the provider-reported message verbatim.
    """

    kind = ErrorKind.API_ERROR


class ConfigError(RouterError):
    """
    Startup configuration is invalid.

    The only kind that aborts the process instead of being returned per request.
    """

    kind = ErrorKind.CONFIG_ERROR
