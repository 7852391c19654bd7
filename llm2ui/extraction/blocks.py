"""Locate JSON in free-form model output.

Model replies mix prose, markdown fences and raw JSON. Blocks are found in
three tiers:

1. Fences tagged ``json``.
2. Other fences whose content starts with ``{`` or ``[``.
3. Only if tiers 1-2 found nothing: balanced raw spans that look like JSON.

Inside a fence whose content opens with a bracket, the end of the block is
found by bracket depth, so a ``` sequence inside a JSON string value does
not cut the block short.
"""

import json
import re
from typing import Any, Iterator, List, Optional, Tuple

from llm2ui.protocols import BlockFormat, ExtractedJSONBlock, JSONExtractionResult
from llm2ui.utils.json_scan import OPENERS, find_balanced_end, is_likely_json, iter_balanced_spans

FENCE = "```"

_FENCE_OPEN = re.compile(r"```([A-Za-z0-9_+.-]*)[^\S\n]*")


def _iter_fences(text: str) -> Iterator[Tuple[str, str, int, int]]:
    """Yield (language, content, start, end) for each closed code fence."""
    pos = 0
    while True:
        match = _FENCE_OPEN.search(text, pos)
        if match is None:
            return

        body_start = match.end()
        close = -1

        first = body_start
        while first < len(text) and text[first].isspace():
            first += 1
        if first < len(text) and text[first] in OPENERS:
            span_end = find_balanced_end(text, first)
            if span_end is not None:
                close = text.find(FENCE, span_end)

        if close == -1:
            close = text.find(FENCE, body_start)
        if close == -1:
            return

        yield match.group(1).lower(), text[body_start:close].strip(), match.start(), close + len(FENCE)
        pos = close + len(FENCE)


def _overlaps(start: int, end: int, blocks: List[ExtractedJSONBlock]) -> bool:
    return any(start < b.end_index and end > b.start_index for b in blocks)


class JSONBlockExtractor:
    """Finds candidate JSON blocks in text, ordered by position."""

    def extract(self, text: str) -> List[ExtractedJSONBlock]:
        if not text:
            return []

        fences = list(_iter_fences(text))

        tagged: List[ExtractedJSONBlock] = [
            ExtractedJSONBlock(content, BlockFormat.FENCED_JSON, start, end)
            for lang, content, start, end in fences
            if lang == "json" and content
        ]

        generic: List[ExtractedJSONBlock] = []
        for lang, content, start, end in fences:
            if lang == "json" or not content or content[0] not in OPENERS:
                continue
            if _overlaps(start, end, tagged):
                continue
            generic.append(ExtractedJSONBlock(content, BlockFormat.FENCED_GENERIC, start, end))

        blocks = tagged + generic
        if not blocks:
            blocks = [
                ExtractedJSONBlock(text[start:end], BlockFormat.RAW, start, end)
                for start, end in iter_balanced_spans(text)
                if is_likely_json(text[start:end])
            ]

        blocks.sort(key=lambda b: b.start_index)
        return blocks


_default_extractor = JSONBlockExtractor()


def extract_json_blocks_with_metadata(text: str) -> List[ExtractedJSONBlock]:
    """Candidate JSON blocks with format and source offsets."""
    return _default_extractor.extract(text)


def extract_json_blocks(text: str) -> List[str]:
    """Candidate JSON block contents, in order of appearance."""
    return [b.content for b in _default_extractor.extract(text)]


def extract_json(text: Optional[str]) -> JSONExtractionResult:
    """Return the first block that parses as JSON.

    Never raises; failures are described in ``error``.
    """
    if not text or not isinstance(text, str):
        return JSONExtractionResult(success=False, error="Invalid input: text is required")

    blocks = extract_json_blocks(text)
    if not blocks:
        return JSONExtractionResult(success=False, error="No JSON blocks found in text")

    parse_errors: List[str] = []
    for content in blocks:
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            parse_errors.append(e.msg)
            continue
        return JSONExtractionResult(success=True, json=content, parsed=parsed)

    return JSONExtractionResult(
        success=False,
        error="Failed to parse any JSON blocks. Errors: " + "; ".join(parse_errors),
    )


def extract_all_json(text: str) -> List[Any]:
    """Every block that parses as JSON, in order."""
    results: List[Any] = []
    for content in extract_json_blocks(text):
        try:
            results.append(json.loads(content))
        except json.JSONDecodeError:
            continue
    return results
