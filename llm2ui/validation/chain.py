"""Five-layer validation chain for UI schemas.

Layers run in a fixed order:

    json-syntax -> schema-structure -> component-existence
                -> props-validation -> style-compliance

Every layer runs so the caller sees the complete picture, except that a
JSON syntax failure, or a schema with no walkable root, leaves nothing for
the deeper layers to inspect. Style findings are warnings unless the
config promotes them to errors.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from llm2ui.catalog import ComponentDefinition, create_default_catalog, json_type_name, matches_prop_type
from llm2ui.config.constants import DEFAULT_SCHEMA_VERSION, RETRY_ERRORS_HEADER
from llm2ui.design_tokens import DesignTokens, get_default_design_tokens
from llm2ui.extraction import extract_json, extract_json_blocks, find_ui_schema
from llm2ui.logging import get_component_logger
from llm2ui.protocols import (
    ChainValidationError,
    ComponentCatalog,
    ErrorSeverity,
    LayerResult,
    LoggerProtocol,
    UISchema,
    ValidationChainResult,
    ValidationLayer,
)
from llm2ui.schema_fixer import SchemaFixOptions, apply_schema_fixes
from llm2ui.utils.text import closest_matches

from .structure import iter_components, validate_schema_structure
from .token_compliance import validate_token_compliance

LAYER_ORDER: Tuple[ValidationLayer, ...] = (
    ValidationLayer.JSON_SYNTAX,
    ValidationLayer.SCHEMA_STRUCTURE,
    ValidationLayer.COMPONENT_EXISTENCE,
    ValidationLayer.PROPS_VALIDATION,
    ValidationLayer.STYLE_COMPLIANCE,
)

LAYER_LABELS: Dict[ValidationLayer, str] = {
    ValidationLayer.JSON_SYNTAX: "JSON Syntax",
    ValidationLayer.SCHEMA_STRUCTURE: "Schema Structure",
    ValidationLayer.COMPONENT_EXISTENCE: "Component",
    ValidationLayer.PROPS_VALIDATION: "Props",
    ValidationLayer.STYLE_COMPLIANCE: "Style",
}

# Props every component accepts without declaring them
PASSTHROUGH_PROPS = frozenset({"className", "style", "children", "key", "id", "role", "title"})

NO_JSON_MESSAGE = "No JSON found in model output"
NO_JSON_SUGGESTION = "Respond with a single JSON object containing \"version\" and \"root\""


@dataclass
class ValidationChainConfig:
    """What the chain validates against.

    With ``auto_fix`` the schema is repaired by apply_schema_fixes() before
    the structure layer runs; the repairs are listed in the result.
    """
    catalog: Optional[ComponentCatalog] = field(default_factory=create_default_catalog)
    design_tokens: DesignTokens = field(default_factory=get_default_design_tokens)
    validate_style: bool = True
    style_compliance_as_errors: bool = False
    auto_fix: bool = False
    fix_options: SchemaFixOptions = field(default_factory=SchemaFixOptions)


def get_validation_layer_order() -> List[ValidationLayer]:
    return list(LAYER_ORDER)


def get_layer_label(layer: ValidationLayer) -> str:
    return LAYER_LABELS[ValidationLayer(layer)]


# =============================================================================
# LAYERS
# =============================================================================

def validate_json_syntax(raw: str) -> Tuple[Any, Optional[ChainValidationError]]:
    """Parse ``raw``; on failure return a json-syntax error with its position."""
    if not raw or not raw.strip():
        return None, ChainValidationError(
            layer=ValidationLayer.JSON_SYNTAX,
            path="",
            message="Empty input: JSON string is empty or contains only whitespace",
            suggestion="Return the UI schema as a JSON object",
        )
    try:
        return json.loads(raw), None
    except json.JSONDecodeError as e:
        return None, ChainValidationError(
            layer=ValidationLayer.JSON_SYNTAX,
            path="",
            message=f"Invalid JSON: {e.msg}",
            suggestion="Check for missing brackets, quotes, or commas",
            line=e.lineno,
            column=e.colno,
        )


def _canonical_name(catalog: ComponentCatalog, component_type: str) -> Optional[str]:
    canonical = getattr(catalog, "canonical_name", None)
    if callable(canonical):
        return canonical(component_type)
    definition = catalog.get_definition(component_type)
    return definition.name if definition is not None else None


def _suggest_types(catalog: ComponentCatalog, component_type: str) -> str:
    suggest = getattr(catalog, "suggest_types", None)
    if callable(suggest):
        matches = suggest(component_type)
    else:
        matches = closest_matches(component_type, catalog.valid_types())
    if matches:
        return f"Did you mean: {', '.join(matches)}?"
    valid = catalog.valid_types()
    more = "..." if len(valid) > 5 else ""
    return f"Valid types: {', '.join(valid[:5])}{more}"


def check_component_existence(
    schema: UISchema,
    catalog: ComponentCatalog,
) -> Tuple[List[ChainValidationError], List[ChainValidationError]]:
    """Every component type must resolve in the catalog."""
    errors: List[ChainValidationError] = []
    warnings: List[ChainValidationError] = []

    for path, node in iter_components(schema.get("root")):
        component_type = node.get("type")
        if not isinstance(component_type, str) or not component_type.strip():
            continue

        canonical = _canonical_name(catalog, component_type)
        if canonical is None:
            errors.append(ChainValidationError(
                layer=ValidationLayer.COMPONENT_EXISTENCE,
                path=f"{path}.type",
                message=f"Unknown component: {component_type}",
                suggestion=_suggest_types(catalog, component_type),
            ))
            continue

        if canonical != component_type:
            warnings.append(ChainValidationError(
                layer=ValidationLayer.COMPONENT_EXISTENCE,
                path=f"{path}.type",
                message=f'Component type "{component_type}" resolved to "{canonical}"',
                severity=ErrorSeverity.WARNING,
                suggestion=f'Use "{canonical}" as the type',
            ))

        definition: Optional[ComponentDefinition] = catalog.get_definition(component_type)
        if definition is not None and definition.deprecated:
            warnings.append(ChainValidationError(
                layer=ValidationLayer.COMPONENT_EXISTENCE,
                path=f"{path}.type",
                message=f'Component "{canonical}" is deprecated',
                severity=ErrorSeverity.WARNING,
                suggestion=definition.deprecation_message,
            ))

    return errors, warnings


def _is_passthrough(prop: str) -> bool:
    return prop in PASSTHROUGH_PROPS or prop.startswith(("aria-", "data-"))


def check_props(
    schema: UISchema,
    catalog: ComponentCatalog,
) -> Tuple[List[ChainValidationError], List[ChainValidationError]]:
    """Props must match their component's prop schema."""
    errors: List[ChainValidationError] = []
    warnings: List[ChainValidationError] = []

    def error(path: str, message: str, suggestion: Optional[str] = None) -> None:
        errors.append(ChainValidationError(
            layer=ValidationLayer.PROPS_VALIDATION,
            path=path,
            message=message,
            suggestion=suggestion,
        ))

    for path, node in iter_components(schema.get("root")):
        component_type = node.get("type")
        if not isinstance(component_type, str):
            continue
        prop_schemas = catalog.resolve(component_type)
        if prop_schemas is None:
            continue

        props = node.get("props")
        if not isinstance(props, dict):
            props = {}

        for name, prop_schema in prop_schemas.items():
            prop_path = f"{path}.props.{name}"
            value = props.get(name)

            if value is None:
                if prop_schema.required:
                    error(
                        prop_path,
                        f'Missing required property "{name}" at "{path}"',
                        f'Add "{name}" ({prop_schema.type.value}) to props',
                    )
                continue

            if not matches_prop_type(value, prop_schema.type):
                error(
                    prop_path,
                    f'Invalid type for property "{name}" at "{path}": '
                    f"expected {prop_schema.type.value}, got {json_type_name(value)}",
                )
                continue

            if prop_schema.enum is not None and value not in prop_schema.enum:
                error(
                    prop_path,
                    f'Invalid enum value "{value}" for property "{name}" at "{path}"',
                    "Valid values: " + ", ".join(str(v) for v in prop_schema.enum),
                )

        for name in props:
            if name in prop_schemas or _is_passthrough(name):
                continue
            matches = closest_matches(name, prop_schemas, limit=3) if prop_schemas else []
            warnings.append(ChainValidationError(
                layer=ValidationLayer.PROPS_VALIDATION,
                path=f"{path}.props.{name}",
                message=f'Unknown property "{name}" for component "{component_type}"',
                severity=ErrorSeverity.WARNING,
                suggestion=f"Did you mean: {', '.join(matches)}?" if matches else None,
            ))

    return errors, warnings


def check_style_compliance(
    schema: UISchema,
    tokens: DesignTokens,
    as_errors: bool = False,
) -> Tuple[List[ChainValidationError], List[ChainValidationError]]:
    """Hardcoded style values, as reported by the token compliance validator."""
    result = validate_token_compliance(schema, tokens)
    severity = ErrorSeverity.ERROR if as_errors else ErrorSeverity.WARNING

    findings = [
        ChainValidationError(
            layer=ValidationLayer.STYLE_COMPLIANCE,
            path=e.path,
            message=e.message,
            severity=severity,
            suggestion=e.suggestion,
        )
        for e in result.errors
    ]
    warnings = [
        ChainValidationError(
            layer=ValidationLayer.STYLE_COMPLIANCE,
            path=w.path,
            message=w.message,
            severity=ErrorSeverity.WARNING,
            suggestion=w.suggestion,
        )
        for w in result.warnings
    ]

    if as_errors:
        return findings, warnings
    return [], findings + warnings


# =============================================================================
# CHAIN
# =============================================================================

LayerCheck = Callable[[], Tuple[List[ChainValidationError], List[ChainValidationError]]]


def _unique(findings: List[ChainValidationError]) -> List[ChainValidationError]:
    """Drop findings whose key repeats an earlier one; first occurrence wins."""
    seen = set()
    unique = []
    for finding in findings:
        if finding.key not in seen:
            seen.add(finding.key)
            unique.append(finding)
    return unique


class _ChainRun:
    """Accumulates layer results for one chain execution."""

    def __init__(self) -> None:
        self.errors: List[ChainValidationError] = []
        self.warnings: List[ChainValidationError] = []
        self.layer_results: List[LayerResult] = []
        self.applied_fixes: List[str] = []

    def run(self, layer: ValidationLayer, check: LayerCheck) -> bool:
        started = time.perf_counter()
        errors, warnings = check()
        errors, warnings = _unique(errors), _unique(warnings)
        self.layer_results.append(LayerResult(
            layer=layer,
            passed=not errors,
            errors=errors,
            warnings=warnings,
            duration=time.perf_counter() - started,
        ))
        self.errors.extend(errors)
        self.warnings.extend(warnings)
        return not errors


def run_validation_chain(
    schema: Union[str, UISchema],
    catalog: Optional[ComponentCatalog] = None,
    config: Optional[ValidationChainConfig] = None,
    logger: Optional[LoggerProtocol] = None,
) -> ValidationChainResult:
    """Validate ``schema`` through all five layers.

    Args:
        schema: Raw JSON text or an already-parsed schema
        catalog: Component catalog (overrides ``config.catalog``); the
            component and props layers are skipped when both are None
        config: Chain configuration
        logger: Optional logger
    """
    config = config or ValidationChainConfig()
    catalog = catalog if catalog is not None else config.catalog
    log = get_component_logger("ValidationChain", logger)
    chain = _ChainRun()

    parsed: Any = schema
    if isinstance(schema, str):
        holder: Dict[str, Any] = {}

        def syntax() -> Tuple[List[ChainValidationError], List[ChainValidationError]]:
            holder["value"], error = validate_json_syntax(schema)
            return ([error] if error else []), []

        if not chain.run(ValidationLayer.JSON_SYNTAX, syntax):
            return _finish(chain, None, log)
        parsed = holder["value"]
    else:
        chain.run(ValidationLayer.JSON_SYNTAX, lambda: ([], []))

    if config.auto_fix and isinstance(parsed, dict):
        parsed, chain.applied_fixes = apply_schema_fixes(parsed, catalog, config.fix_options)
        if chain.applied_fixes:
            log.info("schema_fixes_applied", fixes=chain.applied_fixes)

    walkable = True

    def structure() -> Tuple[List[ChainValidationError], List[ChainValidationError]]:
        nonlocal walkable
        errors, walkable = validate_schema_structure(parsed)
        return errors, []

    chain.run(ValidationLayer.SCHEMA_STRUCTURE, structure)
    result_schema = parsed if isinstance(parsed, dict) else None
    if not walkable:
        return _finish(chain, result_schema, log)

    if catalog is not None:
        chain.run(ValidationLayer.COMPONENT_EXISTENCE, lambda: check_component_existence(parsed, catalog))
        chain.run(ValidationLayer.PROPS_VALIDATION, lambda: check_props(parsed, catalog))

    if config.validate_style:
        chain.run(
            ValidationLayer.STYLE_COMPLIANCE,
            lambda: check_style_compliance(parsed, config.design_tokens, config.style_compliance_as_errors),
        )

    return _finish(chain, result_schema, log)


def _finish(chain: _ChainRun, schema: Optional[UISchema], log: LoggerProtocol) -> ValidationChainResult:
    result = ValidationChainResult(
        valid=not chain.errors,
        errors=chain.errors,
        warnings=chain.warnings,
        schema=schema,
        layer_results=chain.layer_results,
        applied_fixes=chain.applied_fixes,
    )
    log.debug(
        "validation_chain_complete",
        valid=result.valid,
        error_count=len(result.errors),
        warning_count=len(result.warnings),
        layers=[ValidationLayer(r.layer).value for r in result.layer_results],
    )
    return result


def validate_model_output(
    raw_output: str,
    config: Optional[ValidationChainConfig] = None,
    logger: Optional[LoggerProtocol] = None,
) -> ValidationChainResult:
    """Extract the UI schema from raw model output and validate it.

    Extraction misses become ordinary json-syntax errors so the retry loop
    sees one error shape: no JSON at all yields a single synthetic error;
    JSON that never parses is validated as text to report its position;
    JSON that parses but is not a schema goes to the structure layer.
    With ``config.auto_fix`` a root without an id still counts as a schema.
    """
    config = config or ValidationChainConfig()
    schema = find_ui_schema(raw_output, require_id=not config.auto_fix)
    if schema is not None:
        if not config.auto_fix:
            schema.setdefault("version", DEFAULT_SCHEMA_VERSION)
        return run_validation_chain(schema, config=config, logger=logger)

    blocks = extract_json_blocks(raw_output or "")
    if not blocks:
        return ValidationChainResult(
            valid=False,
            errors=[ChainValidationError(
                layer=ValidationLayer.JSON_SYNTAX,
                path="",
                message=NO_JSON_MESSAGE,
                suggestion=NO_JSON_SUGGESTION,
            )],
        )

    extracted = extract_json(raw_output)
    if extracted.success:
        return run_validation_chain(extracted.parsed, config=config, logger=logger)
    return run_validation_chain(blocks[0], config=config, logger=logger)


def format_errors_for_llm(errors: List[ChainValidationError]) -> str:
    """Render errors as the numbered list embedded in retry prompts."""
    if not errors:
        return ""

    lines = [RETRY_ERRORS_HEADER, ""]
    for index, error in enumerate(errors, 1):
        line = f"{index}. [{get_layer_label(error.layer)}]"
        if error.line is not None:
            line += f" Line {error.line}"
            if error.column is not None:
                line += f":{error.column}"
            line += ":"
        elif error.path:
            line += f' at "{error.path}":'
        line += f" {error.message}"
        if error.suggestion:
            line += f" ({error.suggestion})"
        lines.append(line)

    return "\n".join(lines)
