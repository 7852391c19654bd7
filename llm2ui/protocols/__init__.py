"""Protocols and shared types for llm2ui."""

from llm2ui.protocols.errors import (
    GenerationTimeoutError,
    LLM2UIError,
    LLMConfigError,
    LLMTransportError,
)
from llm2ui.protocols.interfaces import (
    ComponentCatalog,
    LoggerProtocol,
    ProgressCallback,
    TextGenerator,
)
from llm2ui.protocols.types import (
    AttemptResult,
    BlockFormat,
    ChainValidationError,
    ChatMessage,
    ComplianceError,
    ComplianceIssueType,
    ComplianceResult,
    ConnectionTestResult,
    ErrorComparison,
    ErrorSeverity,
    ExtractedJSONBlock,
    JSONExtractionResult,
    LayerResult,
    MessageRole,
    ProviderName,
    RetryProgressEvent,
    RetryResult,
    RetryStatus,
    StreamChunk,
    StreamCollection,
    UISchema,
    ValidationChainResult,
    ValidationLayer,
)

__all__ = [
    # Errors
    "LLM2UIError",
    "LLMConfigError",
    "LLMTransportError",
    "GenerationTimeoutError",
    # Interfaces
    "LoggerProtocol",
    "ComponentCatalog",
    "TextGenerator",
    "ProgressCallback",
    # Enums
    "MessageRole",
    "ProviderName",
    "BlockFormat",
    "ValidationLayer",
    "ErrorSeverity",
    "RetryStatus",
    "ComplianceIssueType",
    # Types
    "UISchema",
    "ChatMessage",
    "StreamChunk",
    "StreamCollection",
    "ConnectionTestResult",
    "ExtractedJSONBlock",
    "JSONExtractionResult",
    "ChainValidationError",
    "LayerResult",
    "ValidationChainResult",
    "ComplianceError",
    "ComplianceResult",
    "ErrorComparison",
    "RetryProgressEvent",
    "AttemptResult",
    "RetryResult",
]
