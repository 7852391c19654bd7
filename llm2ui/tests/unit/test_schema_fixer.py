"""Unit tests for automatic schema repair."""

import copy
import json
import re

from llm2ui.extraction import extract_ui_schema
from llm2ui.protocols import ValidationLayer
from llm2ui.schema_fixer import (
    SchemaFixOptions,
    apply_schema_fixes,
    fix_ui_schema,
    generate_component_id,
)
from llm2ui.validation import ValidationChainConfig, run_validation_chain, validate_model_output


SLOPPY = {
    "root": {
        "type": "div",
        "children": [
            {"id": "title", "type": "text", "props": {"content": "Hello"}},
            {"type": "btn", "props": {"variant": "default"}},
        ],
    },
}


class TestGenerateComponentId:
    """Tests for generate_component_id."""

    def test_shape(self):
        assert re.fullmatch(r"cardheader-[0-9a-f]{8}", generate_component_id("Card-Header"))

    def test_falls_back_for_unusable_type(self):
        assert generate_component_id("$$").startswith("component-")

    def test_avoids_taken_ids(self):
        taken = {generate_component_id("Button") for _ in range(20)}
        assert generate_component_id("Button", taken) not in taken


class TestApplySchemaFixes:
    """Tests for apply_schema_fixes."""

    def test_repairs_whole_tree(self, catalog):
        repaired, fixes = apply_schema_fixes(SLOPPY, catalog)

        root = repaired["root"]
        assert repaired["version"] == "1.0"
        assert root["type"] == "Container"
        assert root["children"][0]["type"] == "Text"
        assert root["children"][1]["type"] == "Button"
        assert root["id"].startswith("div-")
        assert root["children"][1]["id"].startswith("btn-")

        assert fixes[0] == 'Added missing version field with default value "1.0"'
        assert f'Added missing id "{root["id"]}" to component of type "div"' in fixes
        assert 'Replaced type alias "div" with canonical type "Container"' in fixes
        assert 'Normalized type casing from "text" to "Text"' in fixes
        assert 'Replaced type alias "btn" with canonical type "Button"' in fixes
        assert len(fixes) == 6

    def test_input_is_not_modified(self, catalog):
        original = copy.deepcopy(SLOPPY)
        apply_schema_fixes(SLOPPY, catalog)
        assert SLOPPY == original

    def test_valid_schema_needs_no_fixes(self, valid_schema, catalog):
        repaired, fixes = apply_schema_fixes(valid_schema, catalog)
        assert fixes == []
        assert repaired == valid_schema

    def test_options_disable_repairs(self, catalog):
        options = SchemaFixOptions(fix_missing_ids=False, fix_type_aliases=False)
        repaired, fixes = apply_schema_fixes(SLOPPY, catalog, options)

        assert "id" not in repaired["root"]
        assert repaired["root"]["type"] == "div"
        assert repaired["root"]["children"][0]["type"] == "Text"
        assert fixes == [
            'Added missing version field with default value "1.0"',
            'Normalized type casing from "text" to "Text"',
        ]

    def test_unknown_type_left_alone(self, catalog):
        schema = {"version": "1.0", "root": {"id": "root", "type": "Foo"}}
        repaired, fixes = apply_schema_fixes(schema, catalog)
        assert repaired["root"]["type"] == "Foo"
        assert fixes == []

    def test_non_object_unchanged(self):
        assert apply_schema_fixes([1, 2], None) == ([1, 2], [])


class TestFixUISchema:
    """Tests for fix_ui_schema."""

    def test_fixed_schema_validates(self, catalog, mock_logger):
        result = fix_ui_schema(SLOPPY, catalog, logger=mock_logger)
        assert result.fixed
        assert result.remaining_errors == []
        assert len(result.fixes) == 6
        assert run_validation_chain(result.schema, catalog).valid

    def test_unfixable_errors_remain(self, catalog):
        schema = {"root": {"id": "root", "type": "Foo"}}
        result = fix_ui_schema(schema, catalog)

        assert not result.fixed
        assert result.schema["version"] == "1.0"
        assert result.fixes == ['Added missing version field with default value "1.0"']
        assert [e.message for e in result.remaining_errors] == ["Unknown component: Foo"]

    def test_non_object(self):
        result = fix_ui_schema("not a schema")
        assert not result.fixed
        assert result.schema is None
        assert result.remaining_errors[0].message == "Schema must be an object"
        assert result.to_dict()["remaining_errors"][0]["layer"] == "schema-structure"

    def test_style_findings_do_not_block(self, catalog):
        schema = {"version": "1.0", "root": {"id": "root", "type": "box", "style": {"color": "#ff0000"}}}
        result = fix_ui_schema(schema, catalog)
        assert result.fixed
        assert result.schema["root"]["type"] == "Container"


class TestAutoFixIntegration:
    """Tests for auto-fix in extraction and in the validation chain."""

    def _output(self):
        return "Sure:\n```json\n" + json.dumps(SLOPPY) + "\n```"

    def test_extraction_requires_root_id_by_default(self):
        assert extract_ui_schema(self._output()) is None

    def test_extraction_with_auto_fix(self):
        schema = extract_ui_schema(self._output(), auto_fix=True)
        assert schema["version"] == "1.0"
        assert schema["root"]["type"] == "Container"
        assert isinstance(schema["root"]["id"], str)

    def test_chain_reports_applied_fixes(self, catalog):
        config = ValidationChainConfig(auto_fix=True)
        result = run_validation_chain(SLOPPY, catalog, config)

        assert result.valid
        assert result.schema["root"]["children"][1]["type"] == "Button"
        assert len(result.applied_fixes) == 6
        assert result.to_dict()["applied_fixes"] == result.applied_fixes

    def test_chain_without_auto_fix_reports_errors(self, catalog):
        result = run_validation_chain(SLOPPY, catalog)
        assert not result.valid
        assert result.applied_fixes == []
        assert ValidationLayer.SCHEMA_STRUCTURE in {e.layer for e in result.errors}

    def test_model_output_with_auto_fix(self):
        result = validate_model_output(self._output(), ValidationChainConfig(auto_fix=True))
        assert result.valid
        assert result.applied_fixes[0] == 'Added missing version field with default value "1.0"'
