"""Unit tests for schema structure checks and the validation chain."""

import copy
import json

from llm2ui.catalog import create_default_catalog
from llm2ui.protocols import ChainValidationError, ErrorSeverity, ValidationLayer
from llm2ui.validation import (
    ValidationChainConfig,
    format_errors_for_llm,
    get_layer_label,
    get_validation_layer_order,
    run_validation_chain,
    validate_json_syntax,
    validate_model_output,
    validate_schema_structure,
)


def _messages(errors):
    return [e.message for e in errors]


class TestLayerOrder:
    """Tests for layer ordering and labels."""

    def test_order(self):
        assert [layer.value for layer in get_validation_layer_order()] == [
            "json-syntax",
            "schema-structure",
            "component-existence",
            "props-validation",
            "style-compliance",
        ]

    def test_labels(self):
        assert get_layer_label(ValidationLayer.PROPS_VALIDATION) == "Props"
        assert get_layer_label("json-syntax") == "JSON Syntax"


class TestJsonSyntax:
    """Tests for the json-syntax layer."""

    def test_valid(self):
        parsed, error = validate_json_syntax('{"a": 1}')
        assert parsed == {"a": 1}
        assert error is None

    def test_reports_position(self):
        _, error = validate_json_syntax('{\n  "a": 1,\n}')
        assert error.layer == ValidationLayer.JSON_SYNTAX
        assert error.line == 3
        assert error.column == 1
        assert error.message.startswith("Invalid JSON: ")

    def test_empty_input(self):
        _, error = validate_json_syntax("   ")
        assert "Empty input" in error.message

    def test_syntax_failure_suppresses_later_layers(self):
        result = run_validation_chain('{"version": "1.0", "root": ')
        assert not result.valid
        assert [e.layer for e in result.errors] == [ValidationLayer.JSON_SYNTAX]
        assert [r.layer for r in result.layer_results] == [ValidationLayer.JSON_SYNTAX]
        assert result.schema is None


class TestSchemaStructure:
    """Tests for the schema-structure layer."""

    def test_valid_schema(self, valid_schema):
        errors, walkable = validate_schema_structure(valid_schema)
        assert errors == []
        assert walkable

    def test_missing_version_and_root(self):
        errors, walkable = validate_schema_structure({})
        assert _messages(errors) == ['Missing required field "version"', 'Missing required field "root"']
        assert not walkable

    def test_root_id_and_type_required(self):
        errors, _ = validate_schema_structure({"version": "1.0", "root": {}})
        assert [e.path for e in errors] == ["root.id", "root.type"]

    def test_duplicate_ids(self, valid_schema):
        valid_schema["root"]["children"][1]["id"] = "title"
        errors, _ = validate_schema_structure(valid_schema)
        assert _messages(errors) == ['Duplicate component id "title" at "root.children[1]"']
        assert errors[0].suggestion == "Each component must have a unique ID"

    def test_children_must_be_array_of_objects(self):
        schema = {"version": "1.0", "root": {"id": "r", "type": "Container", "children": "text"}}
        errors, _ = validate_schema_structure(schema)
        assert errors[0].path == "root.children"

        schema["root"]["children"] = ["text"]
        errors, _ = validate_schema_structure(schema)
        assert errors[0].path == "root.children[0]"

    def test_events_and_loop(self):
        schema = {
            "version": "1.0",
            "root": {
                "id": "r",
                "type": "Button",
                "events": [{"event": "click"}],
                "loop": {"items": "x"},
            },
        }
        errors, _ = validate_schema_structure(schema)
        assert [e.path for e in errors] == ["root.events[0].action", "root.loop"]

    def test_non_object_schema(self):
        errors, walkable = validate_schema_structure([1, 2])
        assert _messages(errors) == ["Schema must be a JSON object"]
        assert not walkable


class TestComponentExistence:
    """Tests for the component-existence layer."""

    def test_unknown_component(self):
        schema = {"version": "1.0", "root": {"id": "root", "type": "Foo"}}
        result = run_validation_chain(schema, create_default_catalog())

        assert not result.valid
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.layer == ValidationLayer.COMPONENT_EXISTENCE
        assert error.path == "root.type"
        assert error.message == "Unknown component: Foo"
        assert error.suggestion

    def test_did_you_mean(self, catalog):
        schema = {"version": "1.0", "root": {"id": "root", "type": "Buttn"}}
        error = run_validation_chain(schema, catalog).errors[0]
        assert error.suggestion.startswith("Did you mean: Button")

    def test_alias_resolves_with_warning(self, catalog):
        schema = {"version": "1.0", "root": {"id": "root", "type": "div"}}
        result = run_validation_chain(schema, catalog)
        assert result.valid
        assert result.warnings[0].message == 'Component type "div" resolved to "Container"'
        assert result.warnings[0].severity == ErrorSeverity.WARNING

    def test_deprecated_component_warns(self, catalog):
        schema = {"version": "1.0", "root": {"id": "root", "type": "Panel"}}
        result = run_validation_chain(schema, catalog)
        assert result.valid
        assert 'Component "Panel" is deprecated' in _messages(result.warnings)


class TestPropsValidation:
    """Tests for the props-validation layer."""

    def _run(self, component, catalog):
        return run_validation_chain({"version": "1.0", "root": {"id": "root", **component}}, catalog)

    def test_missing_required_prop(self, catalog):
        result = self._run({"type": "Image", "props": {"alt": "x"}}, catalog)
        assert _messages(result.errors) == ['Missing required property "src" at "root"']
        assert result.errors[0].path == "root.props.src"

    def test_null_required_prop_counts_as_missing(self, catalog):
        result = self._run({"type": "Link", "props": {"href": None}}, catalog)
        assert _messages(result.errors) == ['Missing required property "href" at "root"']

    def test_wrong_type(self, catalog):
        result = self._run({"type": "Button", "props": {"disabled": "yes"}}, catalog)
        assert _messages(result.errors) == [
            'Invalid type for property "disabled" at "root": expected boolean, got string'
        ]

    def test_invalid_enum(self, catalog):
        result = self._run({"type": "Button", "props": {"variant": "huge"}}, catalog)
        error = result.errors[0]
        assert error.message == 'Invalid enum value "huge" for property "variant" at "root"'
        assert error.suggestion.startswith("Valid values: default, destructive")

    def test_unknown_prop_is_warning(self, catalog):
        result = self._run({"type": "Button", "props": {"colour": "red", "aria-label": "x", "className": "p-2"}}, catalog)
        assert result.valid
        assert [w.path for w in result.warnings] == ["root.props.colour"]

    def test_unknown_component_props_skipped(self, catalog):
        result = self._run({"type": "Foo", "props": {"anything": 1}}, catalog)
        assert [e.layer for e in result.errors] == [ValidationLayer.COMPONENT_EXISTENCE]


class TestStyleCompliance:
    """Tests for the style-compliance layer."""

    def _schema(self):
        return {
            "version": "1.0",
            "root": {"id": "root", "type": "Container", "style": {"backgroundColor": "#ff0000"}},
        }

    def test_style_findings_are_warnings_by_default(self, catalog):
        result = run_validation_chain(self._schema(), catalog)
        assert result.valid
        assert result.warnings[0].layer == ValidationLayer.STYLE_COMPLIANCE
        assert result.warnings[0].path == "root.style.backgroundColor"

    def test_style_findings_as_errors(self, catalog):
        config = ValidationChainConfig(style_compliance_as_errors=True)
        result = run_validation_chain(self._schema(), catalog, config)
        assert not result.valid
        assert result.errors[0].layer == ValidationLayer.STYLE_COMPLIANCE

    def test_repeated_literal_reported_once(self, catalog):
        schema = {
            "version": "1.0",
            "root": {"id": "root", "type": "Container", "props": {"className": "bg-[#fff] text-[#fff]"}},
        }
        config = ValidationChainConfig(style_compliance_as_errors=True)
        result = run_validation_chain(schema, catalog, config)

        assert _messages(result.errors) == ['Hardcoded color value "#fff" found in className']
        assert len({e.key for e in result.errors}) == len(result.errors)
        style = [r for r in result.layer_results if r.layer == ValidationLayer.STYLE_COMPLIANCE][0]
        assert len(style.errors) == 1

    def test_style_layer_can_be_disabled(self, catalog):
        config = ValidationChainConfig(validate_style=False)
        result = run_validation_chain(self._schema(), catalog, config)
        assert result.warnings == []
        assert ValidationLayer.STYLE_COMPLIANCE not in [r.layer for r in result.layer_results]


class TestRunValidationChain:
    """Tests for the chain as a whole."""

    def test_valid_schema_passes_every_layer(self, valid_schema, catalog):
        result = run_validation_chain(valid_schema, catalog)
        assert result.valid
        assert result.errors == []
        assert result.schema == valid_schema
        assert [r.layer for r in result.layer_results] == get_validation_layer_order()
        assert all(r.passed for r in result.layer_results)

    def test_accepts_raw_json_text(self, valid_schema, catalog):
        result = run_validation_chain(json.dumps(valid_schema), catalog)
        assert result.valid
        assert result.schema == valid_schema

    def test_all_tree_layers_reported_together(self, valid_schema, catalog):
        schema = copy.deepcopy(valid_schema)
        schema["root"]["children"][0]["type"] = "Foo"
        schema["root"]["children"][1]["props"]["type"] = "colour"
        schema["root"]["children"][2]["id"] = "title"
        result = run_validation_chain(schema, catalog)

        grouped = result.errors_by_layer()
        assert len(grouped[ValidationLayer.SCHEMA_STRUCTURE]) == 1
        assert len(grouped[ValidationLayer.COMPONENT_EXISTENCE]) == 1
        assert len(grouped[ValidationLayer.PROPS_VALIDATION]) == 1

    def test_missing_root_skips_tree_layers(self, catalog):
        result = run_validation_chain({"version": "1.0"}, catalog)
        assert [r.layer for r in result.layer_results] == [
            ValidationLayer.JSON_SYNTAX,
            ValidationLayer.SCHEMA_STRUCTURE,
        ]

    def test_no_catalog_skips_catalog_layers(self, valid_schema):
        config = ValidationChainConfig(catalog=None)
        result = run_validation_chain(valid_schema, config=config)
        layers = [r.layer for r in result.layer_results]
        assert ValidationLayer.COMPONENT_EXISTENCE not in layers
        assert ValidationLayer.PROPS_VALIDATION not in layers

    def test_to_dict(self):
        result = run_validation_chain({"version": "1.0", "root": {"id": "root", "type": "Foo"}})
        data = result.to_dict()
        assert data["valid"] is False
        assert data["errors"][0]["layer"] == "component-existence"


class TestValidateModelOutput:
    """Tests for extraction + validation of raw model output."""

    def test_no_json_is_a_single_syntax_error(self):
        result = validate_model_output("Sorry, I cannot help with that.")
        assert not result.valid
        assert len(result.errors) == 1
        assert result.errors[0].layer == ValidationLayer.JSON_SYNTAX
        assert result.errors[0].message == "No JSON found in model output"

    def test_fenced_schema(self, valid_schema):
        result = validate_model_output("Here:\n```json\n" + json.dumps(valid_schema) + "\n```")
        assert result.valid
        assert result.schema == valid_schema

    def test_broken_json_reports_syntax_error(self):
        result = validate_model_output('```json\n{"version": "1.0", "root": {"id": "r",}}\n```')
        assert [e.layer for e in result.errors] == [ValidationLayer.JSON_SYNTAX]
        assert result.errors[0].line == 1

    def test_json_without_root_goes_to_structure_layer(self):
        result = validate_model_output('```json\n{"version": "1.0"}\n```')
        assert _messages(result.errors) == ['Missing required field "root"']


class TestFormatErrorsForLLM:
    """Tests for format_errors_for_llm."""

    def test_empty(self):
        assert format_errors_for_llm([]) == ""

    def test_path_and_position_forms(self):
        errors = [
            ChainValidationError(
                layer=ValidationLayer.JSON_SYNTAX,
                path="",
                message="Invalid JSON: Expecting value",
                line=3,
                column=7,
            ),
            ChainValidationError(
                layer=ValidationLayer.COMPONENT_EXISTENCE,
                path="root.type",
                message="Unknown component: Foo",
                suggestion="Did you mean: Form?",
            ),
        ]
        assert format_errors_for_llm(errors) == (
            "## Previous Attempt Errors (MUST FIX)\n"
            "\n"
            "1. [JSON Syntax] Line 3:7: Invalid JSON: Expecting value\n"
            '2. [Component] at "root.type": Unknown component: Foo (Did you mean: Form?)'
        )
