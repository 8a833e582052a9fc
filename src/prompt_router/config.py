"""
Configuration settings for the prompt router.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from prompt_router.models.enums import Category, ProviderId
from prompt_router.models.routing_models import ProviderConfig, ProviderTarget, RoutingPolicy
from prompt_router.providers.exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Prompt Router"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    ALLOWED_ORIGINS: str = "http://localhost:3000"  # comma-separated

    # === Providers ===
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_ORGANIZATION: Optional[str] = None
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    GOOGLE_API_KEY: Optional[str] = None
    GOOGLE_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GROQ_API_KEY: Optional[str] = None
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    API_TIMEOUT: float = 30.0  # seconds

    # === Default target ===
    DEFAULT_PROVIDER: str = "openai"
    DEFAULT_MODEL: str = "gpt-4o"

    # === Category keywords (comma-separated, matched case-insensitively) ===
    CODING_KEYWORDS: str = "code,coding,programming,debug,python,javascript,algorithm,sql,api,compile,script"
    REASONING_KEYWORDS: str = "explain,analyze,reason,logic,math,solve,compare,evaluate,calculate,prove"
    CREATIVE_KEYWORDS: str = "story,poem,poetry,novel,fiction,lyrics,brainstorm,song"
    FAST_KEYWORDS: str = "hi,hello,thanks,define,translate,summary,tldr"

    # === Category targets ===
    CODING_PROVIDER: str = "anthropic"
    CODING_MODEL: str = "claude-3.5-sonnet"
    REASONING_PROVIDER: str = "openai"
    REASONING_MODEL: str = "o3-mini"
    CREATIVE_PROVIDER: str = "openai"
    CREATIVE_MODEL: str = "gpt-4.5-preview"
    FAST_PROVIDER: str = "groq"
    FAST_MODEL: str = "llama-3.3-70b-versatile"

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


def parse_keywords(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated keyword list, trimming and lowercasing, dropping blanks."""
    if not raw:
        return ()
    return tuple(word.strip().lower() for word in raw.split(",") if word.strip())


def parse_list(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _target(provider: str, model: str, field: str) -> ProviderTarget:
    try:
        return ProviderTarget(provider=ProviderId(provider.strip().lower()), model=model.strip())
    except (ValueError, PydanticValidationError) as exc:
        raise ConfigError(
            f"Invalid target for {field}: {provider}/{model}",
            details={"field": field, "error": str(exc)},
        ) from exc


def build_routing_policy(settings: Settings) -> RoutingPolicy:
    """
    Build the immutable RoutingPolicy from settings.

    Raises:
        ConfigError: a target names an unknown provider or an empty model
    """
    keywords = {
        Category.CODING: parse_keywords(settings.CODING_KEYWORDS),
        Category.REASONING: parse_keywords(settings.REASONING_KEYWORDS),
        Category.CREATIVE: parse_keywords(settings.CREATIVE_KEYWORDS),
        Category.FAST: parse_keywords(settings.FAST_KEYWORDS),
    }
    targets = {
        Category.CODING: _target(settings.CODING_PROVIDER, settings.CODING_MODEL, "CODING"),
        Category.REASONING: _target(settings.REASONING_PROVIDER, settings.REASONING_MODEL, "REASONING"),
        Category.CREATIVE: _target(settings.CREATIVE_PROVIDER, settings.CREATIVE_MODEL, "CREATIVE"),
        Category.FAST: _target(settings.FAST_PROVIDER, settings.FAST_MODEL, "FAST"),
    }
    return RoutingPolicy(
        keywords=keywords,
        targets=targets,
        default_target=_target(settings.DEFAULT_PROVIDER, settings.DEFAULT_MODEL, "DEFAULT"),
    )


def build_provider_configs(settings: Settings) -> dict[ProviderId, ProviderConfig]:
    """Per-provider credentials and base URLs. Blank keys count as unset."""
    return {
        ProviderId.OPENAI: ProviderConfig(
            api_key=settings.OPENAI_API_KEY or None,
            base_url=settings.OPENAI_BASE_URL or None,
            organization=settings.OPENAI_ORGANIZATION or None,
        ),
        ProviderId.ANTHROPIC: ProviderConfig(
            api_key=settings.ANTHROPIC_API_KEY or None,
            base_url=settings.ANTHROPIC_BASE_URL or None,
        ),
        ProviderId.GOOGLE: ProviderConfig(
            api_key=settings.GOOGLE_API_KEY or None,
            base_url=settings.GOOGLE_BASE_URL or None,
        ),
        ProviderId.GROQ: ProviderConfig(
            api_key=settings.GROQ_API_KEY or None,
            base_url=settings.GROQ_BASE_URL or None,
        ),
    }


def validate_startup_config(settings: Settings) -> None:
    """
    Check settings that must hold before the service accepts traffic.

    Raises:
        ConfigError: no provider key configured, or an invalid default/category target
    """
    errors: list[str] = []

    configs = build_provider_configs(settings)
    if not any(config.api_key for config in configs.values()):
        errors.append("At least one AI provider API key must be configured")

    if not settings.DEFAULT_PROVIDER or not settings.DEFAULT_MODEL:
        errors.append("Default model and provider must be specified")

    if settings.API_TIMEOUT <= 0:
        errors.append("API_TIMEOUT must be positive")

    try:
        build_routing_policy(settings)
    except ConfigError as exc:
        errors.append(exc.message)

    if errors:
        raise ConfigError(
            "Configuration validation failed: " + "; ".join(errors),
            details={"errors": errors},
        )


# Global settings instance
settings = Settings()
