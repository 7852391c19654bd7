"""UI schema validation: structure, catalog, props and design-token checks."""

from llm2ui.validation.chain import (
    LAYER_LABELS,
    ValidationChainConfig,
    check_component_existence,
    check_props,
    check_style_compliance,
    format_errors_for_llm,
    get_layer_label,
    get_validation_layer_order,
    run_validation_chain,
    validate_json_syntax,
    validate_model_output,
)
from llm2ui.validation.structure import StructureValidator, iter_components, validate_schema_structure
from llm2ui.validation.token_compliance import (
    calculate_compliance_score,
    detect_hardcoded_colors,
    detect_hardcoded_spacing,
    format_compliance_errors_for_llm,
    is_tokenized_class,
    suggest_color_replacement,
    suggest_spacing_replacement,
    validate_token_compliance,
)

__all__ = [
    # Chain
    "ValidationChainConfig",
    "run_validation_chain",
    "validate_model_output",
    "validate_json_syntax",
    "check_component_existence",
    "check_props",
    "check_style_compliance",
    "format_errors_for_llm",
    "get_validation_layer_order",
    "get_layer_label",
    "LAYER_LABELS",
    # Structure
    "StructureValidator",
    "iter_components",
    "validate_schema_structure",
    # Token compliance
    "validate_token_compliance",
    "calculate_compliance_score",
    "detect_hardcoded_colors",
    "detect_hardcoded_spacing",
    "is_tokenized_class",
    "suggest_color_replacement",
    "suggest_spacing_replacement",
    "format_compliance_errors_for_llm",
]
