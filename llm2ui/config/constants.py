"""Defaults shared across the pipeline.

Durations are in seconds.
"""

from typing import Any, Dict

from llm2ui.protocols import ProviderName

# =============================================================================
# SCHEMA
# =============================================================================

DEFAULT_SCHEMA_VERSION = "1.0"

# =============================================================================
# LLM TRANSPORT
# =============================================================================

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.7
DEFAULT_LLM_TIMEOUT = 60.0

# Connectivity checks never wait longer than this
CONNECTIVITY_TIMEOUT_CAP = 15.0
CONNECTIVITY_MAX_TOKENS = 5

ANTHROPIC_API_VERSION = "2023-06-01"

PROVIDER_DEFAULTS: Dict[ProviderName, Dict[str, Any]] = {
    ProviderName.OPENAI: {
        "endpoint": "https://api.openai.com/v1/chat/completions",
        "model": "gpt-4",
    },
    ProviderName.ANTHROPIC: {
        "endpoint": "https://api.anthropic.com/v1/messages",
        "model": "claude-3-opus-20240229",
    },
    ProviderName.IFLOW: {
        "endpoint": "https://apis.iflow.cn/v1/chat/completions",
        "model": "glm-4.6",
    },
    ProviderName.CUSTOM: {},
}

# =============================================================================
# RETRY
# =============================================================================

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_TIMEOUT = 30.0

RETRY_ERRORS_HEADER = "## Previous Attempt Errors (MUST FIX)"
RETRY_PREVIOUS_OUTPUT_HEADER = "## Previous Output (for reference)"
