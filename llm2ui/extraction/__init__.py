"""JSON and UI-schema extraction from model output."""

from llm2ui.extraction.blocks import (
    JSONBlockExtractor,
    extract_all_json,
    extract_json,
    extract_json_blocks,
    extract_json_blocks_with_metadata,
)
from llm2ui.extraction.schema import extract_ui_schema, find_ui_schema, looks_like_ui_schema

__all__ = [
    "JSONBlockExtractor",
    "extract_json_blocks_with_metadata",
    "extract_json_blocks",
    "extract_json",
    "extract_all_json",
    "extract_ui_schema",
    "find_ui_schema",
    "looks_like_ui_schema",
]
