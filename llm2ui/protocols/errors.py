"""Exception hierarchy for llm2ui.

Only configuration errors are fatal to a generation run. Transport and
timeout errors raised by a generator are folded into the retry loop.
"""

from typing import List, Optional, Sequence


class LLM2UIError(Exception):
    """Base class for all llm2ui errors."""


class LLMConfigError(LLM2UIError):
    """Provider configuration is invalid; raised before any network call."""

    def __init__(self, errors: Sequence[str]):
        self.errors: List[str] = list(errors)
        super().__init__("Invalid LLM configuration: " + "; ".join(self.errors))


class LLMTransportError(LLM2UIError):
    """The provider request failed or the stream ended with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class GenerationTimeoutError(LLM2UIError):
    """A generation attempt exceeded its deadline."""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Generation timed out after {timeout:g}s")
