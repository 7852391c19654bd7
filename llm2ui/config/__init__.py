"""Static configuration for llm2ui."""

from llm2ui.config.constants import (
    ANTHROPIC_API_VERSION,
    CONNECTIVITY_MAX_TOKENS,
    CONNECTIVITY_TIMEOUT_CAP,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOKENS,
    DEFAULT_RETRY_TIMEOUT,
    DEFAULT_SCHEMA_VERSION,
    DEFAULT_TEMPERATURE,
    PROVIDER_DEFAULTS,
    RETRY_ERRORS_HEADER,
    RETRY_PREVIOUS_OUTPUT_HEADER,
)

__all__ = [
    "ANTHROPIC_API_VERSION",
    "CONNECTIVITY_MAX_TOKENS",
    "CONNECTIVITY_TIMEOUT_CAP",
    "DEFAULT_LLM_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_RETRY_TIMEOUT",
    "DEFAULT_SCHEMA_VERSION",
    "DEFAULT_TEMPERATURE",
    "PROVIDER_DEFAULTS",
    "RETRY_ERRORS_HEADER",
    "RETRY_PREVIOUS_OUTPUT_HEADER",
]
