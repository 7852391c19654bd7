"""Provider strategies, selected by provider name."""

from typing import Dict, Union

from llm2ui.protocols import ProviderName

from .anthropic import AnthropicStrategy
from .base import ProviderStrategy
from .mock import MockProvider
from .openai import OpenAIStrategy

_STRATEGIES: Dict[ProviderName, ProviderStrategy] = {
    ProviderName.OPENAI: OpenAIStrategy(),
    ProviderName.ANTHROPIC: AnthropicStrategy(),
    ProviderName.IFLOW: OpenAIStrategy(),
    ProviderName.CUSTOM: OpenAIStrategy(),
}


def get_provider_strategy(provider: Union[ProviderName, str]) -> ProviderStrategy:
    """Return the strategy for ``provider``.

    Raises:
        ValueError: If the provider is not supported
    """
    return _STRATEGIES[ProviderName(provider)]


__all__ = [
    "ProviderStrategy",
    "OpenAIStrategy",
    "AnthropicStrategy",
    "MockProvider",
    "get_provider_strategy",
]
