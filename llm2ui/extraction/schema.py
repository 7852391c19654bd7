"""Pick the UI schema out of model output."""

import json
from typing import Any, Optional

from llm2ui.config.constants import DEFAULT_SCHEMA_VERSION
from llm2ui.protocols import ComponentCatalog, UISchema
from llm2ui.schema_fixer import SchemaFixOptions, apply_schema_fixes

from .blocks import extract_json_blocks


def looks_like_ui_schema(value: Any, require_id: bool = True) -> bool:
    """True if ``value`` has a root object with a string type and, unless
    ``require_id`` is False, a string id."""
    if not isinstance(value, dict):
        return False
    root = value.get("root")
    if not isinstance(root, dict) or not isinstance(root.get("type"), str):
        return False
    return not require_id or isinstance(root.get("id"), str)


def find_ui_schema(text: str, require_id: bool = True) -> Optional[UISchema]:
    """The first block that parses and looks like a UI schema, as parsed."""
    if not text:
        return None

    for content in extract_json_blocks(text):
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError:
            continue
        if looks_like_ui_schema(parsed, require_id):
            return parsed

    return None


def extract_ui_schema(
    text: str,
    auto_fix: bool = False,
    catalog: Optional[ComponentCatalog] = None,
    fix_options: Optional[SchemaFixOptions] = None,
) -> Optional[UISchema]:
    """Return the first block that parses and looks like a UI schema.

    A missing ``version`` is set to the default. With ``auto_fix`` a root
    without an id also qualifies, and the schema comes back with the
    repairs of apply_schema_fixes(). Returns None when no block qualifies;
    that means "no schema found", not "schema invalid".
    """
    parsed = find_ui_schema(text, require_id=not auto_fix)
    if parsed is None:
        return None

    if auto_fix:
        parsed, _ = apply_schema_fixes(parsed, catalog, fix_options)
    if "version" not in parsed:
        parsed["version"] = DEFAULT_SCHEMA_VERSION
    return parsed
