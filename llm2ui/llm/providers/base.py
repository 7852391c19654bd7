"""Provider strategy base class.

A strategy shapes the HTTP request for one provider and pulls text out of
its responses. Buffering and decoding are provider-agnostic and live in
llm2ui.llm.stream_decoder.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from llm2ui.protocols import ChatMessage

if TYPE_CHECKING:
    from llm2ui.llm.config import ProviderConfig


class ProviderStrategy(ABC):
    """Request/response shaping for one LLM provider."""

    name: str = ""

    @abstractmethod
    def build_request(
        self,
        messages: List[ChatMessage],
        config: "ProviderConfig",
        *,
        stream: bool = True,
    ) -> Dict[str, Any]:
        """Build the JSON request body.

        Args:
            messages: Conversation, system messages included
            config: Provider config with defaults applied
            stream: Whether to request a streamed response
        """

    @abstractmethod
    def build_headers(self, config: "ProviderConfig") -> Dict[str, str]:
        """Build request headers, caller-supplied headers merged last."""

    @abstractmethod
    def extract_delta(self, record: Dict[str, Any]) -> Optional[str]:
        """Text increment carried by one streamed record, if any."""

    @abstractmethod
    def extract_message(self, body: Dict[str, Any]) -> Optional[str]:
        """Full text of a non-streamed response body."""

    def extract_error(self, record: Dict[str, Any]) -> Optional[str]:
        """Error message carried by a streamed record, if any."""
        error = record.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error)
        if isinstance(error, str) and error:
            return error
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


__all__ = ["ProviderStrategy"]
