"""Shared utilities."""

from llm2ui.utils.json_scan import find_balanced_end, is_likely_json, iter_balanced_spans
from llm2ui.utils.text import levenshtein_distance

__all__ = [
    "find_balanced_end",
    "iter_balanced_spans",
    "is_likely_json",
    "levenshtein_distance",
]
