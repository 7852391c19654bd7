"""Unit tests for the component catalog and design tokens."""

import pytest

from llm2ui.catalog import (
    ComponentDefinition,
    PropSchema,
    PropType,
    StaticComponentCatalog,
    json_type_name,
    matches_prop_type,
)
from llm2ui.design_tokens import (
    format_tokens_for_llm,
    nearest_color_token,
    nearest_spacing_token,
    parse_color,
    parse_px,
    spacing_scale,
    suggest_color_token,
)
from llm2ui.prompts import build_generation_prompt, build_system_prompt, format_catalog_for_llm
from llm2ui.protocols import ComponentCatalog


class TestStaticComponentCatalog:
    """Tests for catalog lookup."""

    def test_satisfies_protocol(self, catalog):
        assert isinstance(catalog, ComponentCatalog)

    def test_exact_case_and_alias_lookup(self, catalog):
        assert catalog.canonical_name("Button") == "Button"
        assert catalog.canonical_name("button") == "Button"
        assert catalog.canonical_name("btn") == "Button"
        assert catalog.canonical_name("div") == "Container"
        assert catalog.canonical_name("h1") == "Text"
        assert catalog.canonical_name("Foo") is None

    def test_resolve_returns_prop_schemas(self, catalog):
        props = catalog.resolve("Image")
        assert props["src"].required
        assert catalog.resolve("Unknown") is None

    def test_suggestions_ranked_by_distance(self, catalog):
        assert catalog.suggest_types("Buton")[0] == "Button"
        assert len(catalog.suggest_types("Tabel")) <= 3

    def test_register_and_contains(self):
        catalog = StaticComponentCatalog(aliases={})
        catalog.register(ComponentDefinition("Chart", {"data": PropSchema(PropType.ARRAY, required=True)}))
        assert "chart" in catalog
        assert 42 not in catalog
        assert len(catalog) == 1
        assert catalog.valid_types() == ["Chart"]

    def test_deprecated_component(self, catalog):
        definition = catalog.get_definition("Panel")
        assert definition.deprecated
        assert definition.deprecation_message == "Use Card instead"


class TestPropTypes:
    """Tests for JSON type matching."""

    @pytest.mark.parametrize("value,name", [
        (None, "null"),
        (True, "boolean"),
        (3, "number"),
        (1.5, "number"),
        ("x", "string"),
        ([], "array"),
        ({}, "object"),
    ])
    def test_json_type_name(self, value, name):
        assert json_type_name(value) == name

    def test_boolean_is_not_a_number(self):
        assert not matches_prop_type(True, PropType.NUMBER)

    def test_function_accepts_handler_name(self):
        assert matches_prop_type("handleClick", PropType.FUNCTION)
        assert not matches_prop_type(1, PropType.FUNCTION)


class TestDesignTokens:
    """Tests for colour parsing and nearest-token search."""

    @pytest.mark.parametrize("value,rgb", [
        ("#fff", (255, 255, 255)),
        ("#FF0000", (255, 0, 0)),
        ("#ff000080", (255, 0, 0)),
        ("rgb(0, 128, 255)", (0, 128, 255)),
        ("rgba(0 128 255 / 0.5)", (0, 128, 255)),
        ("hsl(0, 100%, 50%)", (255, 0, 0)),
    ])
    def test_parse_color(self, value, rgb):
        assert parse_color(value) == rgb

    def test_parse_color_rejects_other_text(self):
        assert parse_color("red") is None
        assert parse_color("#ggg") is None

    def test_parse_px(self):
        assert parse_px("16px") == 16.0
        assert parse_px("1rem") is None

    def test_exact_color_token(self, tokens):
        assert suggest_color_token("#3B82F6", tokens) == "primary-500"
        assert suggest_color_token("#123456", tokens) is None

    def test_nearest_color_token(self, tokens):
        match = nearest_color_token("#ff0000", tokens)
        assert match.name == "error"
        assert not match.exact
        assert nearest_color_token("#3b82f6", tokens).exact

    def test_spacing_scale_steps(self, tokens):
        steps = {m.name: m.step for m in spacing_scale(tokens)}
        assert steps["0"] == "0"
        assert steps["md"] == "4"
        assert steps["lg"] == "6"

    def test_nearest_spacing_token(self, tokens):
        assert nearest_spacing_token(15, tokens).name == "md"
        assert nearest_spacing_token(12, tokens).name == "sm"

    def test_tokens_are_copies(self, tokens):
        tokens.colors["primary"]["500"] = "#000000"
        from llm2ui.design_tokens import get_default_design_tokens

        assert get_default_design_tokens().colors["primary"]["500"] == "#3b82f6"

    def test_format_tokens_for_llm(self, tokens):
        text = format_tokens_for_llm(tokens)
        assert "## Design Tokens (MUST USE)" in text
        assert "primary: #3b82f6" in text
        assert "md=16px (gap-4, p-4)" in text


class TestPrompts:
    """Tests for system prompt construction."""

    def test_catalog_section_lists_props(self, catalog):
        text = format_catalog_for_llm(catalog)
        assert "- Image {src: string (required)" in text
        assert "Panel" not in text

    def test_system_prompt_includes_catalog_and_tokens(self, catalog, tokens):
        prompt = build_system_prompt(catalog, tokens)
        assert "## Available Components" in prompt
        assert "## Design Tokens (MUST USE)" in prompt
        assert '"version": "1.0"' in prompt

    def test_generation_prompt(self):
        prompt = build_generation_prompt("  a login form ", "SYSTEM")
        assert prompt == "SYSTEM\n\n## User Request\n\na login form"
