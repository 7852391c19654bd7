"""Unit tests for settings and the LLM factory."""

import pytest
from pydantic import ValidationError

from llm2ui.llm import LLMClient, MockProvider, create_llm_client, get_available_providers
from llm2ui.protocols import LLMConfigError, ProviderName
from llm2ui.settings import (
    Settings,
    get_settings,
    reload_settings,
    reset_settings,
    set_settings,
)


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _clean_global_settings():
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    """Tests for Settings fields and validators."""

    def test_defaults(self):
        settings = _settings()
        assert settings.llm_provider == "openai"
        assert settings.retry_max_attempts == 3
        assert settings.retry_timeout == 30.0
        assert settings.connectivity_timeout == 15.0
        assert settings.style_compliance_as_errors is False
        assert settings.schema_auto_fix is False

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("LLM2UI_LLM_PROVIDER", "Anthropic")
        monkeypatch.setenv("LLM2UI_RETRY_MAX_ATTEMPTS", "5")
        settings = _settings()
        assert settings.llm_provider == "anthropic"
        assert settings.retry_max_attempts == 5

    def test_rejects_unknown_provider(self):
        with pytest.raises(ValidationError, match="Invalid LLM provider"):
            _settings(llm_provider="watson")

    def test_rejects_non_http_endpoint(self):
        with pytest.raises(ValidationError, match="Invalid URL format"):
            _settings(llm_endpoint="ftp://example.com")

    def test_custom_provider_needs_endpoint(self):
        with pytest.raises(ValidationError, match="LLM2UI_LLM_ENDPOINT"):
            _settings(llm_provider="custom")

    def test_retry_attempt_bounds(self):
        with pytest.raises(ValidationError):
            _settings(retry_max_attempts=0)

    def test_log_level_normalized(self):
        assert _settings(log_level="debug").log_level == "DEBUG"

    def test_to_provider_config_applies_defaults(self):
        config = _settings(llm_provider="iflow", llm_api_key="k").to_provider_config()
        assert config.provider == ProviderName.IFLOW
        assert config.endpoint == "https://apis.iflow.cn/v1/chat/completions"
        assert config.model == "glm-4.6"
        assert config.validate() == []

    def test_log_llm_config_hides_key(self, mock_logger):
        _settings(llm_api_key="sk-secret").log_llm_config(mock_logger)
        kwargs = mock_logger.info.call_args.kwargs
        assert kwargs["api_key_set"] is True
        assert "sk-secret" not in str(kwargs)


class TestGlobalSettings:
    """Tests for the global settings accessors."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_set_and_reset(self):
        custom = _settings(retry_max_attempts=7)
        set_settings(custom)
        assert get_settings() is custom
        reset_settings()
        assert get_settings() is not custom

    def test_reload_reads_environment(self, monkeypatch):
        get_settings()
        monkeypatch.setenv("LLM2UI_RETRY_TIMEOUT", "12.5")
        assert reload_settings().retry_timeout == 12.5


class TestFactory:
    """Tests for create_llm_client."""

    def test_mock_mode(self, mock_logger):
        generator = create_llm_client(_settings(mock_llm_enabled=True), mock_logger)
        assert isinstance(generator, MockProvider)

    def test_creates_client_for_valid_config(self, mock_logger):
        generator = create_llm_client(_settings(llm_api_key="k"), mock_logger)
        assert isinstance(generator, LLMClient)
        assert generator.config.model == "gpt-4"

    def test_missing_key_is_fatal(self, mock_logger):
        with pytest.raises(LLMConfigError, match="API key is required"):
            create_llm_client(_settings(), mock_logger)

    def test_available_providers(self):
        assert get_available_providers() == ["openai", "anthropic", "iflow", "custom"]
