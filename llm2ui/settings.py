"""Runtime settings for llm2ui.

Values come from the environment (prefix ``LLM2UI_``) or a ``.env`` file.
Durations are in seconds.

Example:
    LLM2UI_LLM_PROVIDER=anthropic
    LLM2UI_LLM_API_KEY=sk-ant-...
    LLM2UI_RETRY_MAX_ATTEMPTS=4
"""

import re
from typing import TYPE_CHECKING, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from llm2ui.config.constants import (
    CONNECTIVITY_TIMEOUT_CAP,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOKENS,
    DEFAULT_RETRY_TIMEOUT,
    DEFAULT_TEMPERATURE,
)
from llm2ui.protocols import ProviderName

# URL pattern for HTTP/HTTPS endpoints
_URL_PATTERN = re.compile(r'^https?://[^\s/$.?#].[^\s]*$', re.IGNORECASE)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

if TYPE_CHECKING:
    from llm2ui.llm.config import ProviderConfig
    from llm2ui.protocols import LoggerProtocol


class Settings(BaseSettings):
    """llm2ui settings."""

    # =========================================================================
    # LLM PROVIDER
    # =========================================================================
    # Supported providers: openai | anthropic | iflow | custom
    llm_provider: str = "openai"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None
    llm_endpoint: Optional[str] = None
    llm_max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1, le=200_000)
    llm_temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    llm_timeout: float = Field(default=DEFAULT_LLM_TIMEOUT, gt=0, le=600)
    llm_system_prompt: Optional[str] = None
    connectivity_timeout: float = Field(default=CONNECTIVITY_TIMEOUT_CAP, gt=0, le=120)

    # Canned responses instead of network calls
    mock_llm_enabled: bool = False

    # =========================================================================
    # RETRY
    # =========================================================================
    retry_max_attempts: int = Field(default=DEFAULT_MAX_RETRIES, ge=1, le=10)
    retry_timeout: float = Field(default=DEFAULT_RETRY_TIMEOUT, gt=0, le=600)
    retry_include_previous_output: bool = True

    # =========================================================================
    # VALIDATION
    # =========================================================================
    validate_style: bool = True
    style_compliance_as_errors: bool = False
    # Repair missing ids, aliases and casing before validating
    schema_auto_fix: bool = False

    # =========================================================================
    # LOGGING
    # =========================================================================
    log_level: str = "INFO"
    log_json: bool = True

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator('llm_provider', mode='after')
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Validate that the provider is one we can talk to."""
        v = v.lower()
        try:
            ProviderName(v)
        except ValueError:
            valid = ", ".join(p.value for p in ProviderName)
            raise ValueError(f"Invalid LLM provider: {v}. Must be one of: {valid}")
        return v

    @field_validator('llm_endpoint', mode='after')
    @classmethod
    def validate_http_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate that URL fields contain valid HTTP/HTTPS URLs."""
        if v is None:
            return v
        if not _URL_PATTERN.match(v):
            raise ValueError(f"Invalid URL format: {v}. Must be http:// or https://")
        return v

    @field_validator('log_level', mode='after')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return v

    @model_validator(mode='after')
    def validate_custom_endpoint(self) -> 'Settings':
        """A custom provider has no default endpoint."""
        if self.llm_provider == ProviderName.CUSTOM and not self.llm_endpoint:
            raise ValueError("LLM2UI_LLM_ENDPOINT must be set when llm_provider=custom")
        return self

    model_config = SettingsConfigDict(
        env_prefix="LLM2UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def to_provider_config(self) -> "ProviderConfig":
        """Build the provider config, with provider defaults applied."""
        from llm2ui.llm.config import ProviderConfig

        return ProviderConfig(
            provider=ProviderName(self.llm_provider),
            api_key=self.llm_api_key or "",
            model=self.llm_model or "",
            endpoint=self.llm_endpoint,
            max_tokens=self.llm_max_tokens,
            temperature=self.llm_temperature,
            timeout=self.llm_timeout,
            system_prompt=self.llm_system_prompt,
        ).with_defaults()

    def log_llm_config(self, logger: "LoggerProtocol") -> None:
        """Log current LLM configuration without the API key."""
        logger.info(
            "llm_config",
            provider=self.llm_provider,
            model=self.llm_model,
            endpoint=self.llm_endpoint,
            timeout=self.llm_timeout,
            api_key_set=bool(self.llm_api_key),
            mock_llm_enabled=self.mock_llm_enabled,
        )


# =============================================================================
# GLOBAL SETTINGS (Lazy Initialization)
# =============================================================================

_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings instance.

    Prefer passing Settings explicitly; this getter exists for entry points.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings_instance: Settings) -> None:
    """Set the global settings instance. Primarily for testing."""
    global _settings
    _settings = settings_instance


def reset_settings() -> None:
    """Reset the global settings instance.

    Forces re-creation on next get_settings() call.
    """
    global _settings
    _settings = None


def reload_settings() -> Settings:
    """Reload settings from the current environment."""
    global _settings
    _settings = Settings()
    return _settings
