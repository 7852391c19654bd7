"""OpenAI-compatible chat completions strategy.

Also used for iFlow and custom endpoints, which speak the same API.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from llm2ui.protocols import ChatMessage

from .base import ProviderStrategy

if TYPE_CHECKING:
    from llm2ui.llm.config import ProviderConfig


class OpenAIStrategy(ProviderStrategy):
    """Strategy for ``/v1/chat/completions`` style endpoints."""

    name = "openai"

    def build_request(
        self,
        messages: List[ChatMessage],
        config: "ProviderConfig",
        *,
        stream: bool = True,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": config.model,
            "messages": [m.to_dict() for m in messages],
            "stream": stream,
        }
        if config.max_tokens is not None:
            payload["max_tokens"] = config.max_tokens
        if config.temperature is not None:
            payload["temperature"] = config.temperature
        return payload

    def build_headers(self, config: "ProviderConfig") -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
        }
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        headers.update(config.headers)
        return headers

    def extract_delta(self, record: Dict[str, Any]) -> Optional[str]:
        choices = record.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return None
        delta = choices[0].get("delta") or {}
        content = delta.get("content")
        return content if isinstance(content, str) else None

    def extract_message(self, body: Dict[str, Any]) -> Optional[str]:
        choices = body.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return None
        message = choices[0].get("message") or {}
        content = message.get("content")
        return content if isinstance(content, str) else None
