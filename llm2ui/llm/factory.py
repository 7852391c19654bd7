"""Factory for creating text generators from settings.

Config via environment (see llm2ui.settings):
    LLM2UI_LLM_PROVIDER: openai | anthropic | iflow | custom
    LLM2UI_LLM_MODEL: Model identifier (provider default if unset)
    LLM2UI_LLM_ENDPOINT: API endpoint (provider default if unset)
    LLM2UI_LLM_API_KEY: API key
    LLM2UI_MOCK_LLM_ENABLED: Use MockProvider instead of the network
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from llm2ui.logging import get_component_logger
from llm2ui.protocols import LoggerProtocol, ProviderName, TextGenerator

if TYPE_CHECKING:
    from llm2ui.settings import Settings


def create_llm_client(
    settings: Optional["Settings"] = None,
    logger: Optional[LoggerProtocol] = None,
) -> TextGenerator:
    """Create a text generator based on configuration.

    Priority:
    1. mock_llm_enabled -> MockProvider
    2. Otherwise an LLMClient for the configured provider

    Raises:
        LLMConfigError: If the provider configuration is invalid
    """
    from llm2ui.settings import get_settings

    settings = settings or get_settings()
    log = get_component_logger("LLMFactory", logger)

    if settings.mock_llm_enabled:
        from .providers.mock import MockProvider

        log.info("llm_factory_mock_mode")
        return MockProvider()

    from .client import LLMClient

    config = settings.to_provider_config()
    config.ensure_valid()

    log.info(
        "llm_factory_creating",
        provider=settings.llm_provider,
        model=config.model,
        endpoint=config.endpoint,
    )
    return LLMClient(
        config,
        logger=logger,
        connectivity_timeout=settings.connectivity_timeout,
    )


def get_available_providers() -> List[str]:
    """Return the provider names create_llm_client() accepts."""
    return [p.value for p in ProviderName]
