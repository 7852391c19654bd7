"""Automatic repair of common UI schema mistakes.

Models often emit a schema that is right in substance but trips the
validator on details: no ``version``, a component without an ``id``, an
alias such as ``btn`` instead of ``Button``, or ``button`` in the wrong
case. apply_schema_fixes() repairs those on a copy and describes each
change; fix_ui_schema() also re-validates the result.

Usage:
    from llm2ui.schema_fixer import fix_ui_schema

    result = fix_ui_schema(parsed)
    if result.fixed:
        render(result.schema)
"""

from __future__ import annotations

import copy
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from llm2ui.catalog import create_default_catalog
from llm2ui.config.constants import DEFAULT_SCHEMA_VERSION
from llm2ui.logging import get_component_logger
from llm2ui.protocols import (
    ChainValidationError,
    ComponentCatalog,
    LoggerProtocol,
    UISchema,
    ValidationLayer,
)

_ID_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


@dataclass
class SchemaFixOptions:
    """Which repairs to apply. All are on by default."""
    fix_missing_version: bool = True
    fix_type_aliases: bool = True
    fix_missing_ids: bool = True
    fix_casing: bool = True


@dataclass
class SchemaFixResult:
    """Outcome of fix_ui_schema().

    ``fixed`` holds iff the repaired schema passes validation. ``schema`` is
    the repaired copy whenever the input was an object.
    """
    fixed: bool
    schema: Optional[UISchema] = None
    fixes: List[str] = field(default_factory=list)
    remaining_errors: List[ChainValidationError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fixed": self.fixed,
            "fixes": list(self.fixes),
            "remaining_errors": [e.to_dict() for e in self.remaining_errors],
        }


def generate_component_id(component_type: str, taken: Optional[Set[str]] = None) -> str:
    """``{type}-{8 hex chars}``, lowercased, unique within ``taken``."""
    prefix = _ID_UNSAFE.sub("", component_type).lower() or "component"
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
        if taken is None or candidate not in taken:
            return candidate


def _collect_ids(node: Any, ids: Set[str]) -> None:
    if not isinstance(node, dict):
        return
    if isinstance(node.get("id"), str):
        ids.add(node["id"])
    children = node.get("children")
    if isinstance(children, list):
        for child in children:
            _collect_ids(child, ids)


def _canonical(catalog: ComponentCatalog, component_type: str) -> Optional[str]:
    canonical_name = getattr(catalog, "canonical_name", None)
    if canonical_name is not None:
        return canonical_name(component_type)
    definition = catalog.get_definition(component_type)
    return definition.name if definition is not None else None


class _Fixer:
    def __init__(self, catalog: ComponentCatalog, options: SchemaFixOptions, taken: Set[str]):
        self.catalog = catalog
        self.options = options
        self.taken = taken
        self.fixes: List[str] = []

    def component(self, node: Any) -> None:
        if not isinstance(node, dict):
            return

        if self.options.fix_missing_ids and "id" not in node:
            component_type = node["type"] if isinstance(node.get("type"), str) else "component"
            new_id = generate_component_id(component_type, self.taken)
            self.taken.add(new_id)
            node["id"] = new_id
            self.fixes.append(f'Added missing id "{new_id}" to component of type "{component_type}"')

        if isinstance(node.get("type"), str):
            self.component_type(node)

        children = node.get("children")
        if isinstance(children, list):
            for child in children:
                self.component(child)

    def component_type(self, node: Dict[str, Any]) -> None:
        original = node["type"]
        canonical = _canonical(self.catalog, original)
        if canonical is None or canonical == original:
            return

        if canonical.lower() == original.lower():
            if self.options.fix_casing:
                node["type"] = canonical
                self.fixes.append(f'Normalized type casing from "{original}" to "{canonical}"')
        elif self.options.fix_type_aliases:
            node["type"] = canonical
            self.fixes.append(f'Replaced type alias "{original}" with canonical type "{canonical}"')


def apply_schema_fixes(
    schema: Any,
    catalog: Optional[ComponentCatalog] = None,
    options: Optional[SchemaFixOptions] = None,
) -> Tuple[Any, List[str]]:
    """Repair ``schema`` without validating it.

    Returns a repaired deep copy and the fixes applied, in tree order.
    Anything that is not an object comes back unchanged with no fixes.
    """
    if not isinstance(schema, dict):
        return schema, []

    catalog = catalog if catalog is not None else create_default_catalog()
    options = options or SchemaFixOptions()
    repaired = copy.deepcopy(schema)

    taken: Set[str] = set()
    _collect_ids(repaired.get("root"), taken)
    fixer = _Fixer(catalog, options, taken)

    if options.fix_missing_version and "version" not in repaired:
        repaired["version"] = DEFAULT_SCHEMA_VERSION
        fixer.fixes.append(f'Added missing version field with default value "{DEFAULT_SCHEMA_VERSION}"')

    fixer.component(repaired.get("root"))
    return repaired, fixer.fixes


def fix_ui_schema(
    schema: Any,
    catalog: Optional[ComponentCatalog] = None,
    options: Optional[SchemaFixOptions] = None,
    logger: Optional[LoggerProtocol] = None,
) -> SchemaFixResult:
    """Repair ``schema`` and validate the result.

    Style findings do not count against ``fixed``; the style layer is
    skipped.
    """
    # validation imports extraction, which imports this module
    from llm2ui.validation import ValidationChainConfig, run_validation_chain

    log = get_component_logger("SchemaFixer", logger)

    if not isinstance(schema, dict):
        return SchemaFixResult(
            fixed=False,
            remaining_errors=[ChainValidationError(
                layer=ValidationLayer.SCHEMA_STRUCTURE,
                path="",
                message="Schema must be an object",
            )],
        )

    catalog = catalog if catalog is not None else create_default_catalog()
    repaired, fixes = apply_schema_fixes(schema, catalog, options)
    validation = run_validation_chain(
        repaired,
        catalog,
        ValidationChainConfig(catalog=catalog, validate_style=False),
        logger=log,
    )

    log.info(
        "schema_fix_complete",
        fixed=validation.valid,
        fix_count=len(fixes),
        remaining_error_count=len(validation.errors),
    )
    return SchemaFixResult(
        fixed=validation.valid,
        schema=repaired,
        fixes=fixes,
        remaining_errors=validation.errors,
    )


__all__ = [
    "SchemaFixOptions",
    "SchemaFixResult",
    "generate_component_id",
    "apply_schema_fixes",
    "fix_ui_schema",
]
