"""Provider configuration consumed by the LLM client."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from llm2ui.config.constants import (
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    PROVIDER_DEFAULTS,
)
from llm2ui.protocols import ChatMessage, LLMConfigError, MessageRole, ProviderName


@dataclass
class ProviderConfig:
    """Connection settings for one LLM provider.

    Timeout is in seconds. Unset optional fields are filled by
    with_defaults() from the provider's defaults.
    """
    provider: Optional[Union[ProviderName, str]]
    api_key: str = ""
    model: str = ""
    endpoint: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    timeout: Optional[float] = None
    headers: Dict[str, str] = field(default_factory=dict)
    system_prompt: Optional[str] = None

    @property
    def provider_name(self) -> ProviderName:
        return ProviderName(self.provider)

    def with_defaults(self) -> "ProviderConfig":
        """Return a copy with provider defaults applied to unset fields."""
        try:
            defaults = PROVIDER_DEFAULTS.get(ProviderName(self.provider), {})
        except ValueError:
            defaults = {}
        return replace(
            self,
            model=self.model or defaults.get("model", ""),
            endpoint=self.endpoint or defaults.get("endpoint"),
            max_tokens=DEFAULT_MAX_TOKENS if self.max_tokens is None else self.max_tokens,
            temperature=DEFAULT_TEMPERATURE if self.temperature is None else self.temperature,
            timeout=DEFAULT_LLM_TIMEOUT if self.timeout is None else self.timeout,
            headers=dict(self.headers),
        )

    def validate(self) -> List[str]:
        """Return human-readable problems; empty when the config is usable."""
        errors: List[str] = []

        if not self.provider:
            errors.append("Provider is required")
        else:
            try:
                ProviderName(self.provider)
            except ValueError:
                errors.append(f"Unsupported provider: {self.provider}")

        if not self.api_key or not self.api_key.strip():
            errors.append("API key is required")

        if not self.model or not self.model.strip():
            errors.append("Model is required")

        if self.provider == ProviderName.CUSTOM and not self.endpoint:
            errors.append("Endpoint is required for custom provider")

        if self.temperature is not None and not 0 <= self.temperature <= 1:
            errors.append("Temperature must be between 0 and 1")

        if self.max_tokens is not None and self.max_tokens <= 0:
            errors.append("Max tokens must be positive")

        if self.timeout is not None and self.timeout <= 0:
            errors.append("Timeout must be positive")

        return errors

    def ensure_valid(self) -> None:
        """Raise LLMConfigError if validate() reports any problem."""
        errors = self.validate()
        if errors:
            raise LLMConfigError(errors)

    def to_log_dict(self) -> Dict[str, Any]:
        """Loggable view of the config; the API key is never included."""
        return {
            "provider": getattr(self.provider, "value", self.provider),
            "model": self.model,
            "endpoint": self.endpoint,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "timeout": self.timeout,
            "api_key_set": bool(self.api_key),
        }


def inject_system_prompt(
    messages: List[ChatMessage],
    system_prompt: Optional[str],
) -> List[ChatMessage]:
    """Prepend a system message unless one is already present."""
    if not system_prompt:
        return list(messages)
    if any(m.role == MessageRole.SYSTEM for m in messages):
        return list(messages)
    return [ChatMessage(role=MessageRole.SYSTEM, content=system_prompt), *messages]
