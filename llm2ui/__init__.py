"""llm2ui - turn LLM output into validated UI schemas.

Streams model output, extracts the JSON UI schema, validates it through a
five-layer chain and retries with the errors fed back to the model until
the schema is valid or attempts run out.
"""

from llm2ui.catalog import (
    ComponentDefinition,
    PropSchema,
    PropType,
    StaticComponentCatalog,
    create_default_catalog,
)
from llm2ui.design_tokens import DesignTokens, get_default_design_tokens
from llm2ui.extraction import JSONBlockExtractor, extract_json, extract_ui_schema
from llm2ui.protocols import (
    ChainValidationError,
    ComplianceResult,
    GenerationTimeoutError,
    LLM2UIError,
    LLMConfigError,
    LLMTransportError,
    RetryProgressEvent,
    RetryResult,
    RetryStatus,
    StreamChunk,
    UISchema,
    ValidationChainResult,
    ValidationLayer,
)
from llm2ui.retry import (
    RetryConfig,
    RetryController,
    build_retry_prompt,
    calculate_fix_rate,
    compare_errors,
    execute_with_retry,
)
from llm2ui.schema_fixer import SchemaFixOptions, SchemaFixResult, apply_schema_fixes, fix_ui_schema
from llm2ui.service import UIGenerationService
from llm2ui.validation import (
    ValidationChainConfig,
    calculate_compliance_score,
    run_validation_chain,
    validate_model_output,
    validate_token_compliance,
)

__version__ = "0.1.0"

__all__ = [
    # Catalog
    "PropType",
    "PropSchema",
    "ComponentDefinition",
    "StaticComponentCatalog",
    "create_default_catalog",
    # Design tokens
    "DesignTokens",
    "get_default_design_tokens",
    # Extraction
    "JSONBlockExtractor",
    "extract_json",
    "extract_ui_schema",
    # Validation
    "ValidationChainConfig",
    "run_validation_chain",
    "validate_model_output",
    "validate_token_compliance",
    "calculate_compliance_score",
    # Schema repair
    "SchemaFixOptions",
    "SchemaFixResult",
    "apply_schema_fixes",
    "fix_ui_schema",
    # Retry
    "RetryConfig",
    "RetryController",
    "execute_with_retry",
    "compare_errors",
    "calculate_fix_rate",
    "build_retry_prompt",
    # Service
    "UIGenerationService",
    # Types
    "UISchema",
    "StreamChunk",
    "ChainValidationError",
    "ValidationChainResult",
    "ValidationLayer",
    "ComplianceResult",
    "RetryStatus",
    "RetryProgressEvent",
    "RetryResult",
    # Errors
    "LLM2UIError",
    "LLMConfigError",
    "LLMTransportError",
    "GenerationTimeoutError",
]
