"""Tests for settings, options and the bot factory."""

from __future__ import annotations

import pytest

from pr_reviewer.core.config import Credentials, ModelOptions, Options, Settings, settings
from pr_reviewer.llm import factory
from pr_reviewer.llm.errors import ConfigurationError
from pr_reviewer.llm.limits import get_token_limits


@pytest.fixture
def env(monkeypatch):
    for name in ["OPENAI_API_KEY", "ANTHROPIC_API_KEY", "AI_PROVIDER", "OPENAI_API_ORG"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def reset_factory():
    factory.reset_bots()
    yield
    factory.reset_bots()


class TestSettings:
    def test_reads_environment(self, env):
        env.setenv("AI_PROVIDER", "claude")
        env.setenv("ANTHROPIC_API_KEY", "sk-ant")
        env.setenv("RETRIES", "2")
        env.setenv("REVIEW_LANGUAGE", "ja-JP")

        loaded = Settings(_env_file=None)

        assert loaded.ai_provider == "claude"
        assert loaded.retries == 2
        assert loaded.review_language == "ja-JP"
        assert loaded.get_credentials() == Credentials(anthropic_api_key="sk-ant")

    def test_options_from_settings(self, env):
        env.setenv("AI_PROVIDER", "OpenAI")
        env.setenv("TIMEOUT_MS", "1500")
        env.setenv("MAX_CONVERSATIONS", "7")

        options = Options.from_settings(Settings(_env_file=None))

        assert options.ai_provider == "openai"
        assert options.timeout == 1.5
        assert options.max_conversations == 7
        assert options.api_base_url == "https://api.openai.com/v1"


class TestCredentials:
    def test_require_returns_matching_key(self):
        creds = Credentials(openai_api_key="sk", anthropic_api_key="sk-ant")

        assert creds.require("openai") == "sk"
        assert creds.require("Claude") == "sk-ant"

    @pytest.mark.parametrize("provider", ["openai", "claude", "zhipu"])
    def test_require_raises_configuration_error(self, provider):
        with pytest.raises(ConfigurationError):
            Credentials().require(provider)


class TestModelOptions:
    def test_limits_resolved_from_model(self):
        assert ModelOptions(model="o3").token_limits == get_token_limits("o3")

    def test_explicit_limits_kept(self):
        limits = get_token_limits("gpt-4")

        assert ModelOptions(model="custom", token_limits=limits).token_limits is limits


class TestFactory:
    def test_builds_and_caches_bots(self, monkeypatch, reset_factory):
        monkeypatch.setattr(settings, "ai_provider", "openai")
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        monkeypatch.setattr(settings, "light_model", "gpt-4.1-mini")
        monkeypatch.setattr(settings, "heavy_model", "o3")

        light = factory.get_bot("light")
        heavy = factory.get_bot("heavy")

        assert light.model_options.model == "gpt-4.1-mini"
        assert heavy.model_options.model == "o3"
        assert factory.get_bot("light") is light
        assert light.store is not heavy.store

    def test_missing_key_raises(self, monkeypatch, reset_factory):
        monkeypatch.setattr(settings, "ai_provider", "claude")
        monkeypatch.setattr(settings, "anthropic_api_key", "")

        with pytest.raises(ConfigurationError):
            factory.get_bot("heavy")

    def test_unknown_kind(self, reset_factory):
        with pytest.raises(ValueError):
            factory.get_bot("medium")

    async def test_closed_bot_is_rebuilt(self, monkeypatch, reset_factory):
        monkeypatch.setattr(settings, "ai_provider", "openai")
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")

        bot = factory.get_bot("light")
        await bot.aclose()
        rebuilt = factory.get_bot("light")

        assert bot.closed
        assert rebuilt is not bot
        assert not rebuilt.closed
        assert factory.get_bot("light") is rebuilt
        await rebuilt.aclose()
