#!/usr/bin/env python3
"""
Check connectivity to the configured LLM provider.

Reads provider settings from LLM2UI_* environment variables (or .env) and
runs a tiny connectivity request, then optionally a short streamed
generation.

Usage:
    python scripts/check_llm_connection.py [--provider PROVIDER] [--model MODEL] [--stream]

Examples:
    # OpenAI
    LLM2UI_LLM_API_KEY=sk-... python scripts/check_llm_connection.py

    # Anthropic
    LLM2UI_LLM_PROVIDER=anthropic LLM2UI_LLM_API_KEY=sk-ant-... python scripts/check_llm_connection.py

    # Local OpenAI-compatible server
    python scripts/check_llm_connection.py --provider custom \
        --endpoint http://localhost:8080/v1/chat/completions --model llama --api-key none
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional


def print_header(text: str):
    """Print formatted header."""
    print("\n" + "=" * 60)
    print(text)
    print("=" * 60 + "\n")


def print_success(text: str):
    """Print success message."""
    print(f"✓ {text}")


def print_error(text: str):
    """Print error message."""
    print(f"✗ {text}")


def print_info(text: str):
    """Print info message."""
    print(f"  {text}")


async def check_provider(settings, stream: bool = False) -> bool:
    """Check the configured provider (diagnostic script, not a pytest test)."""
    from llm2ui.llm import LLMClient, collect_stream_response
    from llm2ui.protocols import ChatMessage, LLMConfigError, MessageRole

    config = settings.to_provider_config()
    print_header(f"Testing LLM Connection: {config.provider_name.value}")
    print_info(f"Model: {config.model or '(not set)'}")
    print_info(f"Endpoint: {config.endpoint or '(not set)'}")
    print_info(f"API Key: {'***' + config.api_key[-4:] if config.api_key else '(not set)'}")

    try:
        config.ensure_valid()
    except LLMConfigError as e:
        print_error(str(e))
        return False

    client = LLMClient(config, connectivity_timeout=settings.connectivity_timeout)

    print("\n[Test 1] Connectivity...")
    result = await client.test_connection()
    if not result.success:
        print_error(f"Connection failed: {result.error}")
        return False
    print_success(f"Connected in {result.latency:.2f}s")

    if stream:
        print("\n[Test 2] Streaming...")
        collection = await collect_stream_response(
            client.stream_chat([ChatMessage(role=MessageRole.USER, content="Count from 1 to 3")])
        )
        if not collection.ok:
            print_error(f"Streaming failed: {collection.error}")
            return False
        print_success("Streaming successful!")
        print_info(f"Response: {collection.content[:100]}")

    print_header("✓ All Tests Passed")
    return True


def main(argv: Optional[list] = None):
    parser = argparse.ArgumentParser(description="Check LLM provider connectivity")
    parser.add_argument("--provider", default=None, help="Provider (default: $LLM2UI_LLM_PROVIDER)")
    parser.add_argument("--model", default=None, help="Model (default: $LLM2UI_LLM_MODEL or provider default)")
    parser.add_argument("--endpoint", default=None, help="Endpoint URL (default: provider default)")
    parser.add_argument("--api-key", default=None, help="API key (default: $LLM2UI_LLM_API_KEY)")
    parser.add_argument("--stream", action="store_true", help="Also run a short streamed generation")
    args = parser.parse_args(argv)

    from llm2ui.logging import configure_logging
    from llm2ui.settings import get_settings

    settings = get_settings()
    overrides = {
        "llm_provider": args.provider,
        "llm_model": args.model,
        "llm_endpoint": args.endpoint,
        "llm_api_key": args.api_key,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        settings = type(settings).model_validate({**settings.model_dump(), **overrides})

    configure_logging(settings.log_level, json_output=settings.log_json)

    success = asyncio.run(check_provider(settings, stream=args.stream))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
