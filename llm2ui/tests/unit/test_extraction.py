"""Unit tests for JSON block and UI schema extraction."""

import json

from llm2ui.extraction import (
    JSONBlockExtractor,
    extract_all_json,
    extract_json,
    extract_json_blocks,
    extract_json_blocks_with_metadata,
    extract_ui_schema,
    looks_like_ui_schema,
)
from llm2ui.protocols import BlockFormat


SCHEMA = {"version": "1.0", "root": {"id": "root", "type": "Container"}}


class TestJSONBlockExtractor:
    """Tests for the three extraction tiers."""

    def test_fenced_json_block(self):
        text = "Here you go:\n```json\n" + json.dumps(SCHEMA) + "\n```\nEnjoy."
        blocks = JSONBlockExtractor().extract(text)
        assert len(blocks) == 1
        assert blocks[0].format == BlockFormat.FENCED_JSON
        assert json.loads(blocks[0].content) == SCHEMA
        assert text[blocks[0].start_index:blocks[0].end_index].startswith("```json")

    def test_generic_fence_with_bracket_content(self):
        text = "```\n[1, 2, 3]\n```\n```python\nprint('x')\n```"
        blocks = extract_json_blocks_with_metadata(text)
        assert [(b.content, b.format) for b in blocks] == [("[1, 2, 3]", BlockFormat.FENCED_GENERIC)]

    def test_fenced_blocks_ordered_by_position(self):
        text = "```\n{\"first\": 1}\n```\ntext\n```json\n{\"second\": 2}\n```"
        assert extract_json_blocks(text) == ['{"first": 1}', '{"second": 2}']

    def test_raw_spans_only_without_fences(self):
        text = 'The schema is {"a": 1} and also {not json} and [1, 2].'
        blocks = extract_json_blocks_with_metadata(text)
        assert [b.content for b in blocks] == ['{"a": 1}', "[1, 2]"]
        assert all(b.format == BlockFormat.RAW for b in blocks)

    def test_raw_tier_skipped_when_fences_found(self):
        text = '{"raw": true}\n```json\n{"fenced": true}\n```'
        assert extract_json_blocks(text) == ['{"fenced": true}']

    def test_code_fence_inside_json_string(self):
        value = {"content": "Use ```json\n{}\n``` blocks", "n": {"deep": [1, {"x": "}"}]}}
        text = "```json\n" + json.dumps(value) + "\n```"
        blocks = extract_json_blocks(text)
        assert len(blocks) == 1
        assert json.loads(blocks[0]) == value

    def test_nested_braces_in_strings_roundtrip(self):
        value = {"template": "if (a) { b(\"}\") }", "items": ["[", "{", "]"]}
        text = "Answer: " + json.dumps(value) + " done"
        blocks = extract_json_blocks(text)
        assert len(blocks) == 1
        assert json.loads(blocks[0]) == value

    def test_empty_text(self):
        assert JSONBlockExtractor().extract("") == []


class TestExtractJson:
    """Tests for extract_json."""

    def test_first_parseable_block_wins(self):
        text = "```json\n{broken: }\n```\n```json\n{\"ok\": true}\n```"
        result = extract_json(text)
        assert result.success
        assert result.parsed == {"ok": True}
        assert result.json == '{"ok": true}'

    def test_invalid_input(self):
        result = extract_json(None)
        assert not result.success
        assert result.error == "Invalid input: text is required"

    def test_no_blocks(self):
        assert extract_json("just prose").error == "No JSON blocks found in text"

    def test_all_blocks_fail(self):
        result = extract_json("```json\n{\"a\": }\n```")
        assert not result.success
        assert result.error.startswith("Failed to parse any JSON blocks. Errors: ")

    def test_extract_all_json(self):
        text = "```json\n{\"a\": 1}\n```\n```json\nnope\n```\n```\n[2]\n```"
        assert extract_all_json(text) == [{"a": 1}, [2]]


class TestExtractUISchema:
    """Tests for extract_ui_schema."""

    def test_picks_first_block_with_root(self):
        text = "```json\n{\"meta\": 1}\n```\n```json\n" + json.dumps(SCHEMA) + "\n```"
        assert extract_ui_schema(text) == SCHEMA

    def test_injects_default_version(self):
        text = '{"root": {"id": "r", "type": "Text"}}'
        assert extract_ui_schema(text)["version"] == "1.0"

    def test_keeps_existing_version(self):
        text = '{"version": "2.0", "root": {"id": "r", "type": "Text"}}'
        assert extract_ui_schema(text)["version"] == "2.0"

    def test_no_schema_returns_none(self):
        assert extract_ui_schema('{"root": {"id": 1, "type": "Text"}}') is None
        assert extract_ui_schema("no json here") is None
        assert extract_ui_schema("") is None

    def test_looks_like_ui_schema(self):
        assert looks_like_ui_schema(SCHEMA)
        assert not looks_like_ui_schema({"root": []})
        assert not looks_like_ui_schema([SCHEMA])
