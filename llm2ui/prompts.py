"""Prompt construction for UI generation."""

import json
from typing import List, Optional

from llm2ui.catalog import ComponentDefinition
from llm2ui.design_tokens import DesignTokens, format_tokens_for_llm
from llm2ui.protocols import ComponentCatalog

SYSTEM_INTRO = (
    "You are a UI generator. Respond with a single UI schema as JSON inside a "
    "```json code block. Do not add explanations outside the code block."
)

SCHEMA_FORMAT_EXAMPLE = {
    "version": "1.0",
    "root": {
        "id": "root",
        "type": "Container",
        "props": {"className": "flex flex-col gap-4 p-6"},
        "children": [
            {"id": "title", "type": "Text", "props": {"content": "Hello"}},
            {"id": "submit", "type": "Button", "props": {"variant": "default"}, "children": []},
        ],
    },
}

SCHEMA_RULES = [
    'The top-level object has "version" ("1.0") and "root".',
    'Every component has a unique string "id" and a registered "type".',
    '"children" is always an array of component objects.',
    "Only use props listed for the component.",
    "Style with Tailwind classes built from the design tokens; never hardcode hex colors or pixel values.",
]


def _describe_component(definition: ComponentDefinition) -> str:
    if not definition.props:
        line = f"- {definition.name}"
    else:
        props = []
        for name, schema in definition.props.items():
            desc = f"{name}: {schema.type.value}"
            if schema.required:
                desc += " (required)"
            if schema.enum:
                desc += " = " + " | ".join(str(v) for v in schema.enum)
            props.append(desc)
        line = f"- {definition.name} {{{', '.join(props)}}}"
    if definition.description:
        line += f" - {definition.description}"
    return line


def format_catalog_for_llm(catalog: ComponentCatalog) -> str:
    """List the catalog's components and their props; deprecated ones are omitted."""
    lines = ["## Available Components", ""]
    for name in catalog.valid_types():
        definition = catalog.get_definition(name)
        if definition is None or definition.deprecated:
            continue
        lines.append(_describe_component(definition))
    return "\n".join(lines)


def build_system_prompt(
    catalog: Optional[ComponentCatalog] = None,
    tokens: Optional[DesignTokens] = None,
) -> str:
    """Instructions describing the schema format, components and tokens."""
    sections: List[str] = [SYSTEM_INTRO]

    sections.append(
        "## Schema Format\n\n```json\n"
        + json.dumps(SCHEMA_FORMAT_EXAMPLE, indent=2)
        + "\n```"
    )
    sections.append("## Rules\n\n" + "\n".join(f"{i}. {rule}" for i, rule in enumerate(SCHEMA_RULES, 1)))

    if catalog is not None:
        sections.append(format_catalog_for_llm(catalog))
    if tokens is not None:
        sections.append(format_tokens_for_llm(tokens))

    return "\n\n".join(sections)


def build_generation_prompt(request: str, system_prompt: str) -> str:
    """Combine the system instructions with the user's request."""
    return f"{system_prompt}\n\n## User Request\n\n{request.strip()}"


__all__ = [
    "build_system_prompt",
    "build_generation_prompt",
    "format_catalog_for_llm",
]
