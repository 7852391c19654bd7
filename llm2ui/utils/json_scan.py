"""Balanced-bracket scanning for JSON embedded in free text.

Brackets inside quoted strings do not affect depth, and a backslash only
escapes within a string. Both the SSE stream decoder and the JSON block
extractor locate spans with these helpers.
"""

from typing import Iterator, Optional, Tuple

OPENERS = "{["
CLOSERS = "}]"


def find_balanced_end(text: str, start: int) -> Optional[int]:
    """Find the end of the bracketed span opening at ``start``.

    Args:
        text: Text to scan
        start: Index of an opening ``{`` or ``[``

    Returns:
        Index one past the matching closer, or None if the span is not
        closed within ``text``.
    """
    if start >= len(text) or text[start] not in OPENERS:
        raise ValueError(f"No opening bracket at index {start}")

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(text)):
        c = text[i]
        if in_string:
            if escape_next:
                escape_next = False
            elif c == "\\":
                escape_next = True
            elif c == '"':
                in_string = False
            continue
        if c == '"':
            in_string = True
        elif c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1
            if depth == 0:
                return i + 1

    return None


def iter_balanced_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield (start, end) of every top-level balanced span in ``text``.

    Nested spans are not reported separately. An opener that never closes
    is skipped and scanning resumes right after it.
    """
    i = 0
    length = len(text)
    while i < length:
        if text[i] not in OPENERS:
            i += 1
            continue
        end = find_balanced_end(text, i)
        if end is None:
            i += 1
            continue
        yield i, end
        i = end


def is_likely_json(candidate: str) -> bool:
    """Cheap filter for raw spans: objects need a colon, arrays a closing bracket."""
    trimmed = candidate.strip()
    if trimmed.startswith("{"):
        return ":" in trimmed
    if trimmed.startswith("["):
        return trimmed.endswith("]")
    return False
