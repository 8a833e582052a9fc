"""Unit tests for settings parsing and startup validation."""

import pytest

from prompt_router.config import (
    Settings,
    build_provider_configs,
    build_routing_policy,
    parse_keywords,
    parse_list,
    validate_startup_config,
)
from prompt_router.models.enums import Category, ErrorKind, ProviderId
from prompt_router.models.routing_models import ProviderTarget
from prompt_router.providers.exceptions import ConfigError
from prompt_router.routing.classifier import PromptClassifier


def bare_settings(**overrides) -> Settings:
    values = {
        "OPENAI_API_KEY": None,
        "ANTHROPIC_API_KEY": None,
        "GOOGLE_API_KEY": None,
        "GROQ_API_KEY": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestParsing:
    def test_parse_keywords_trims_lowercases_and_drops_blanks(self):
        assert parse_keywords(" Code, PYTHON ,, debug ,") == ("code", "python", "debug")

    @pytest.mark.parametrize("raw", [None, "", " , ,"])
    def test_parse_keywords_empty(self, raw):
        assert parse_keywords(raw) == ()

    def test_parse_list_keeps_case(self):
        assert parse_list("http://a.test, http://B.test") == ["http://a.test", "http://B.test"]


class TestRoutingPolicy:
    def test_defaults_build_full_policy(self, test_settings):
        policy = build_routing_policy(test_settings)
        assert set(policy.targets) == set(Category.scored())
        assert policy.default_target == ProviderTarget(provider=ProviderId.OPENAI, model="gpt-4o")
        assert "python" in policy.keywords_for(Category.CODING)
        assert policy.total_keywords == sum(len(words) for words in policy.keywords.values())

    @pytest.mark.parametrize(
        "prompt,expected",
        [
            ("Write a function to sort an array", Category.CODING),
            ("Explain quantum physics", Category.REASONING),
            ("Write a creative story about dragons", Category.CREATIVE),
            ("Hi", Category.FAST),
        ],
    )
    def test_default_keywords_route_reference_prompts(self, test_settings, prompt, expected):
        classifier = PromptClassifier(build_routing_policy(test_settings))
        assert classifier.classify(prompt).category == expected

    def test_custom_keywords_and_targets(self):
        settings = bare_settings(
            CODING_KEYWORDS="rust,cargo",
            CODING_PROVIDER="Groq",
            CODING_MODEL=" mixtral-8x7b-32768 ",
        )
        policy = build_routing_policy(settings)
        assert policy.keywords_for(Category.CODING) == ("rust", "cargo")
        assert policy.target_for(Category.CODING) == ProviderTarget(
            provider=ProviderId.GROQ, model="mixtral-8x7b-32768"
        )

    def test_unknown_target_provider_is_config_error(self):
        with pytest.raises(ConfigError) as exc_info:
            build_routing_policy(bare_settings(FAST_PROVIDER="mistral"))
        assert exc_info.value.kind == ErrorKind.CONFIG_ERROR
        assert exc_info.value.details["field"] == "FAST"


class TestProviderConfigs:
    def test_blank_key_counts_as_unset(self):
        configs = build_provider_configs(bare_settings(OPENAI_API_KEY="", GROQ_API_KEY="gsk"))
        assert configs[ProviderId.OPENAI].api_key is None
        assert not configs[ProviderId.OPENAI].is_configured
        assert configs[ProviderId.GROQ].is_configured

    def test_organization_only_on_openai(self):
        configs = build_provider_configs(bare_settings(OPENAI_ORGANIZATION="org-1"))
        assert configs[ProviderId.OPENAI].organization == "org-1"
        assert configs[ProviderId.GROQ].organization is None


class TestStartupValidation:
    def test_valid_settings_pass(self, test_settings):
        validate_startup_config(test_settings)

    def test_no_keys_is_config_error(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_startup_config(bare_settings())
        assert "At least one AI provider API key must be configured" in exc_info.value.details["errors"]

    def test_missing_default_model(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_startup_config(bare_settings(GOOGLE_API_KEY="g", DEFAULT_MODEL=""))
        assert "Default model and provider must be specified" in exc_info.value.details["errors"]

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError):
            validate_startup_config(bare_settings(GOOGLE_API_KEY="g", API_TIMEOUT=0))

    def test_errors_are_collected(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_startup_config(bare_settings(REASONING_PROVIDER="nobody"))
        assert len(exc_info.value.details["errors"]) == 2
