"""LLM transport: provider config, streaming client and stream decoding."""

from llm2ui.llm.client import LLMClient, collect_stream_response, describe_http_error
from llm2ui.llm.config import ProviderConfig, inject_system_prompt
from llm2ui.llm.factory import create_llm_client, get_available_providers
from llm2ui.llm.providers import (
    AnthropicStrategy,
    MockProvider,
    OpenAIStrategy,
    ProviderStrategy,
    get_provider_strategy,
)
from llm2ui.llm.stream_decoder import ChunkChannel, SSEStreamDecoder, decode_stream

__all__ = [
    "LLMClient",
    "collect_stream_response",
    "describe_http_error",
    "ProviderConfig",
    "inject_system_prompt",
    "create_llm_client",
    "get_available_providers",
    "ProviderStrategy",
    "OpenAIStrategy",
    "AnthropicStrategy",
    "MockProvider",
    "get_provider_strategy",
    "SSEStreamDecoder",
    "ChunkChannel",
    "decode_stream",
]
