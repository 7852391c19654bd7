"""HTTP client for streaming chat completions.

Talks to OpenAI-compatible and Anthropic endpoints over httpx. Transport
failures never raise out of stream_chat(); they end the stream with a
terminal chunk carrying the error. generate() adapts the stream to the
``prompt -> text`` shape the retry controller drives.
"""

from __future__ import annotations

import asyncio
import json
import time
from dataclasses import replace
from typing import AsyncIterator, List, Optional

import httpx

from llm2ui.config.constants import CONNECTIVITY_MAX_TOKENS, CONNECTIVITY_TIMEOUT_CAP
from llm2ui.logging import get_component_logger
from llm2ui.protocols import (
    ChatMessage,
    ConnectionTestResult,
    LLMTransportError,
    LoggerProtocol,
    MessageRole,
    StreamChunk,
    StreamCollection,
)

from .config import ProviderConfig, inject_system_prompt
from .providers import get_provider_strategy
from .stream_decoder import decode_stream

_STATUS_MESSAGES = {
    401: "Invalid or expired API key",
    403: "Access denied, check the API key permissions",
    404: "API endpoint not found, check the endpoint URL",
    429: "Rate limit exceeded, try again later",
}


class LLMClient:
    """Streaming chat client for one provider configuration.

    Holds no per-request state; concurrent calls are independent.
    """

    def __init__(
        self,
        config: ProviderConfig,
        logger: Optional[LoggerProtocol] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        connectivity_timeout: float = CONNECTIVITY_TIMEOUT_CAP,
    ):
        self._config = config.with_defaults()
        self._logger = get_component_logger("LLMClient", logger)
        self._transport = transport
        self._connectivity_timeout = connectivity_timeout

        self._logger.info("llm_client_initialized", **self._config.to_log_dict())

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def _http_client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def stream_chat(self, messages: List[ChatMessage]) -> AsyncIterator[StreamChunk]:
        """Stream a chat completion as text deltas.

        The last chunk always has done=True; its ``error`` is set when the
        configuration is invalid, the request fails, or the overall
        timeout expires.
        """
        errors = self._config.validate()
        if errors:
            self._logger.error("llm_config_invalid", errors=errors)
            yield StreamChunk(done=True, error="Invalid configuration: " + ", ".join(errors))
            return

        config = self._config
        strategy = get_provider_strategy(config.provider)
        payload = strategy.build_request(
            inject_system_prompt(messages, config.system_prompt),
            config,
            stream=True,
        )
        headers = strategy.build_headers(config)
        deadline = asyncio.get_running_loop().time() + config.timeout

        self._logger.debug(
            "llm_stream_started",
            provider=strategy.name,
            model=config.model,
            message_count=len(messages),
        )

        try:
            async with self._http_client(config.timeout) as client:
                async with client.stream(
                    "POST",
                    config.endpoint,
                    json=payload,
                    headers=headers,
                ) as response:
                    if response.status_code >= 400:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        self._logger.warning(
                            "llm_stream_http_error",
                            status=response.status_code,
                        )
                        yield StreamChunk(
                            done=True,
                            error=f"API error: {response.status_code} - {body}",
                        )
                        return

                    async for chunk in decode_stream(
                        _read_until(response.aiter_bytes(), deadline),
                        strategy.extract_delta,
                        strategy.extract_error,
                        self._logger,
                    ):
                        yield chunk

        except (asyncio.TimeoutError, httpx.TimeoutException):
            self._logger.warning("llm_stream_timeout", timeout=config.timeout)
            yield StreamChunk(done=True, error="Request timeout")
        except httpx.HTTPError as e:
            self._logger.warning("llm_stream_connection_error", error=str(e))
            yield StreamChunk(done=True, error=str(e) or type(e).__name__)

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message and return the full text.

        Raises:
            LLMConfigError: If the configuration is invalid (no request is made)
            LLMTransportError: If the stream ends with an error
        """
        self._config.ensure_valid()

        collection = await collect_stream_response(
            self.stream_chat([ChatMessage(role=MessageRole.USER, content=prompt)])
        )
        if collection.error:
            raise LLMTransportError(collection.error)

        self._logger.info(
            "llm_generation_complete",
            model=self._config.model,
            response_length=len(collection.content),
        )
        return collection.content

    async def test_connection(self) -> ConnectionTestResult:
        """Check that the endpoint accepts the configured key and model.

        Sends a tiny non-streamed request with a timeout capped at the
        connectivity limit.
        """
        errors = self._config.validate()
        if errors:
            return ConnectionTestResult(success=False, error=", ".join(errors))

        timeout = min(self._config.timeout, self._connectivity_timeout)
        config = replace(self._config, max_tokens=CONNECTIVITY_MAX_TOKENS)
        strategy = get_provider_strategy(config.provider)
        payload = strategy.build_request(
            [ChatMessage(role=MessageRole.USER, content="Hi")],
            config,
            stream=False,
        )

        started = time.perf_counter()
        try:
            async with self._http_client(timeout) as client:
                response = await asyncio.wait_for(
                    client.post(
                        config.endpoint,
                        json=payload,
                        headers=strategy.build_headers(config),
                    ),
                    timeout,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return ConnectionTestResult(
                success=False,
                error=f"Connection timed out after {timeout:g}s",
            )
        except httpx.HTTPError as e:
            return ConnectionTestResult(
                success=False,
                error=f"Connection failed: {e}",
            )

        latency = time.perf_counter() - started
        if response.status_code < 400:
            reply = _reply_text(strategy, response)
            self._logger.info(
                "llm_connection_ok",
                latency=round(latency, 3),
                reply_length=len(reply) if reply is not None else None,
            )
            return ConnectionTestResult(success=True, latency=latency, reply=reply)

        message = describe_http_error(response.status_code, response.text)
        self._logger.warning(
            "llm_connection_failed",
            status=response.status_code,
            error=message,
        )
        return ConnectionTestResult(success=False, error=message, latency=latency)

    def __repr__(self) -> str:
        return f"LLMClient(provider={self._config.provider}, model={self._config.model})"


def describe_http_error(status_code: int, body: str) -> str:
    """Human-readable message for a failed provider response."""
    if status_code in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[status_code]
    if status_code >= 500:
        return f"Provider server error ({status_code}), try again later"

    message = f"API error: {status_code}"
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, ValueError):
        return f"{message} - {body[:200]}" if body else message

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])
    return message


def _reply_text(strategy, response: httpx.Response) -> Optional[str]:
    """Message text of a non-streamed response, None if the body is not a JSON object."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return strategy.extract_message(body)


async def collect_stream_response(stream: AsyncIterator[StreamChunk]) -> StreamCollection:
    """Concatenate a chunk stream; stops at the terminal chunk."""
    parts: List[str] = []
    try:
        async for chunk in stream:
            if chunk.error:
                return StreamCollection(content="".join(parts), error=chunk.error)
            if chunk.content:
                parts.append(chunk.content)
            if chunk.done:
                break
    finally:
        aclose = getattr(stream, "aclose", None)
        if aclose is not None:
            await aclose()
    return StreamCollection(content="".join(parts))


async def _read_until(chunks: AsyncIterator[bytes], deadline: float) -> AsyncIterator[bytes]:
    """Re-yield ``chunks``, raising asyncio.TimeoutError once ``deadline`` passes."""
    loop = asyncio.get_running_loop()
    iterator = chunks.__aiter__()
    while True:
        remaining = deadline - loop.time()
        if remaining <= 0:
            raise asyncio.TimeoutError()
        try:
            chunk = await asyncio.wait_for(iterator.__anext__(), remaining)
        except StopAsyncIteration:
            return
        yield chunk
