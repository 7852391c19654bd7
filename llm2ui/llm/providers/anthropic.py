"""Anthropic Messages API strategy.

System prompts travel in the top-level ``system`` field; text arrives in
``content_block_delta`` events.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from llm2ui.config.constants import ANTHROPIC_API_VERSION
from llm2ui.protocols import ChatMessage, MessageRole

from .base import ProviderStrategy

if TYPE_CHECKING:
    from llm2ui.llm.config import ProviderConfig


class AnthropicStrategy(ProviderStrategy):
    """Strategy for ``/v1/messages``."""

    name = "anthropic"

    def build_request(
        self,
        messages: List[ChatMessage],
        config: "ProviderConfig",
        *,
        stream: bool = True,
    ) -> Dict[str, Any]:
        system_parts = [m.content for m in messages if m.role == MessageRole.SYSTEM]
        conversation = [m.to_dict() for m in messages if m.role != MessageRole.SYSTEM]

        payload: Dict[str, Any] = {
            "model": config.model,
            "messages": conversation,
            "max_tokens": config.max_tokens,
            "stream": stream,
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)
        if config.temperature is not None:
            payload["temperature"] = config.temperature
        return payload

    def build_headers(self, config: "ProviderConfig") -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": config.api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
        }
        headers.update(config.headers)
        return headers

    def extract_delta(self, record: Dict[str, Any]) -> Optional[str]:
        if record.get("type") != "content_block_delta":
            return None
        delta = record.get("delta") or {}
        text = delta.get("text")
        return text if isinstance(text, str) else None

    def extract_message(self, body: Dict[str, Any]) -> Optional[str]:
        blocks = body.get("content") or []
        texts = [
            b.get("text", "")
            for b in blocks
            if isinstance(b, dict) and b.get("type") == "text"
        ]
        return "".join(texts) if texts else None

    def extract_error(self, record: Dict[str, Any]) -> Optional[str]:
        if record.get("type") == "error":
            error = record.get("error") or {}
            if isinstance(error, dict):
                return str(error.get("message") or error.get("type") or "Unknown error")
            return str(error)
        return None
