"""Type definitions for the llm2ui pipeline.

Dataclasses and enums shared by the stream decoder, the extractors, the
validation chain and the retry controller. Enum values keep their wire
spelling so they compare equal to the plain strings callers log or render.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# A UI schema is the parsed JSON document: {"version", "root", "data"?}.
UISchema = Dict[str, Any]


# =============================================================================
# ENUMS
# =============================================================================

class MessageRole(str, Enum):
    """Chat message role."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ProviderName(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    IFLOW = "iflow"
    CUSTOM = "custom"


class BlockFormat(str, Enum):
    """How a JSON block was located in model output."""
    FENCED_JSON = "fenced-json"
    FENCED_GENERIC = "fenced-generic"
    RAW = "raw"


class ValidationLayer(str, Enum):
    """Validation chain layers, in execution order."""
    JSON_SYNTAX = "json-syntax"
    SCHEMA_STRUCTURE = "schema-structure"
    COMPONENT_EXISTENCE = "component-existence"
    PROPS_VALIDATION = "props-validation"
    STYLE_COMPLIANCE = "style-compliance"


class ErrorSeverity(str, Enum):
    """Severity of a validation finding."""
    ERROR = "error"
    WARNING = "warning"


class RetryStatus(str, Enum):
    """Retry controller states reported through progress events."""
    GENERATING = "generating"
    VALIDATING = "validating"
    RETRYING = "retrying"
    SUCCESS = "success"
    ERROR = "error"


class ComplianceIssueType(str, Enum):
    """Kinds of design-token compliance findings."""
    HARDCODED_COLOR = "hardcoded-color"
    HARDCODED_SPACING = "hardcoded-spacing"
    INVALID_TOKEN_USAGE = "invalid-token-usage"
    SUBOPTIMAL_TOKEN = "suboptimal-token"
    MISSING_TOKEN_OPPORTUNITY = "missing-token-opportunity"


# =============================================================================
# STREAMING
# =============================================================================

@dataclass(frozen=True)
class ChatMessage:
    """One message of a conversation sent to the model."""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": MessageRole(self.role).value, "content": self.content}


@dataclass(frozen=True)
class StreamChunk:
    """A decoded text delta. The terminal chunk has done=True."""
    content: str = ""
    done: bool = False
    error: Optional[str] = None


@dataclass
class StreamCollection:
    """Concatenated stream content plus the terminal error, if any."""
    content: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ConnectionTestResult:
    """Outcome of a provider connectivity check."""
    success: bool
    error: Optional[str] = None
    latency: Optional[float] = None
    reply: Optional[str] = None


# =============================================================================
# EXTRACTION
# =============================================================================

@dataclass(frozen=True)
class ExtractedJSONBlock:
    """A candidate JSON span located in free text."""
    content: str
    format: BlockFormat
    start_index: int
    end_index: int


@dataclass
class JSONExtractionResult:
    """Result of extract_json()."""
    success: bool
    json: Optional[str] = None
    parsed: Any = None
    error: Optional[str] = None


# =============================================================================
# VALIDATION
# =============================================================================

@dataclass(frozen=True)
class ChainValidationError:
    """A single finding of the validation chain.

    Two findings describe the same defect when their (layer, path, message)
    keys are equal. Suggestion, severity and source position are not part
    of the identity.
    """
    layer: ValidationLayer
    path: str
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    suggestion: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    @property
    def key(self) -> str:
        return f"{ValidationLayer(self.layer).value}:{self.path}:{self.message}"

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "layer": ValidationLayer(self.layer).value,
            "severity": ErrorSeverity(self.severity).value,
            "path": self.path,
            "message": self.message,
        }
        if self.suggestion is not None:
            result["suggestion"] = self.suggestion
        if self.line is not None:
            result["line"] = self.line
        if self.column is not None:
            result["column"] = self.column
        return result


@dataclass
class LayerResult:
    """Outcome and timing of one validation layer."""
    layer: ValidationLayer
    passed: bool
    errors: List[ChainValidationError] = field(default_factory=list)
    warnings: List[ChainValidationError] = field(default_factory=list)
    duration: float = 0.0


@dataclass
class ValidationChainResult:
    """Aggregated outcome of the validation chain.

    ``valid`` holds iff no layer produced an error-severity finding.
    ``schema`` is set only when the input parsed to an object.
    ``applied_fixes`` lists the repairs made when auto-fix is on.
    """
    valid: bool
    errors: List[ChainValidationError] = field(default_factory=list)
    warnings: List[ChainValidationError] = field(default_factory=list)
    schema: Optional[UISchema] = None
    layer_results: List[LayerResult] = field(default_factory=list)
    applied_fixes: List[str] = field(default_factory=list)

    def errors_by_layer(self) -> Dict[ValidationLayer, List[ChainValidationError]]:
        grouped: Dict[ValidationLayer, List[ChainValidationError]] = {
            layer: [] for layer in ValidationLayer
        }
        for error in self.errors:
            grouped[ValidationLayer(error.layer)].append(error)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "applied_fixes": list(self.applied_fixes),
        }


# =============================================================================
# TOKEN COMPLIANCE
# =============================================================================

@dataclass(frozen=True)
class ComplianceError:
    """A hardcoded style value found in the schema tree."""
    path: str
    type: ComplianceIssueType
    message: str
    suggestion: str
    detected_value: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "type": ComplianceIssueType(self.type).value,
            "message": self.message,
            "suggestion": self.suggestion,
            "detected_value": self.detected_value,
        }


@dataclass
class ComplianceResult:
    """Design-token compliance of a schema."""
    valid: bool
    compliance_score: int
    tokenized_values: int
    hardcoded_values: int
    errors: List[ComplianceError] = field(default_factory=list)
    warnings: List[ComplianceError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "compliance_score": self.compliance_score,
            "tokenized_values": self.tokenized_values,
            "hardcoded_values": self.hardcoded_values,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


# =============================================================================
# RETRY
# =============================================================================

@dataclass
class ErrorComparison:
    """Partition of two error lists by (layer, path, message) key."""
    fixed: List[ChainValidationError] = field(default_factory=list)
    remaining: List[ChainValidationError] = field(default_factory=list)
    new_errors: List[ChainValidationError] = field(default_factory=list)


@dataclass
class RetryProgressEvent:
    """Progress notification emitted by the retry controller.

    The counts are derived from the lists so they can never disagree.
    """
    status: RetryStatus
    attempt: int
    total_attempts: int
    fixed_errors: List[ChainValidationError] = field(default_factory=list)
    remaining_errors: List[ChainValidationError] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def errors_fixed(self) -> int:
        return len(self.fixed_errors)

    @property
    def errors_remaining(self) -> int:
        return len(self.remaining_errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": RetryStatus(self.status).value,
            "attempt": self.attempt,
            "total_attempts": self.total_attempts,
            "errors_fixed": self.errors_fixed,
            "errors_remaining": self.errors_remaining,
            "fixed_errors": [e.to_dict() for e in self.fixed_errors],
            "remaining_errors": [e.to_dict() for e in self.remaining_errors],
            "message": self.message,
        }


@dataclass
class AttemptResult:
    """Record of one generate -> validate cycle."""
    attempt: int
    raw_output: Optional[str]
    schema: Optional[UISchema]
    errors: List[ChainValidationError] = field(default_factory=list)
    warnings: List[ChainValidationError] = field(default_factory=list)
    duration: float = 0.0
    comparison: Optional[ErrorComparison] = None
    timed_out: bool = False


@dataclass
class RetryResult:
    """Final outcome of execute_with_retry()."""
    success: bool
    schema: Optional[UISchema]
    errors: List[ChainValidationError] = field(default_factory=list)
    warnings: List[ChainValidationError] = field(default_factory=list)
    attempts: List[AttemptResult] = field(default_factory=list)
    total_time: float = 0.0
    best_attempt: Optional[AttemptResult] = None
    timed_out: bool = False
    fix_rate_history: List[float] = field(default_factory=list)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)
