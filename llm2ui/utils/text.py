"""Text helpers."""

from typing import Iterable, List


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            ))
        previous = current
    return previous[-1]


def closest_matches(word: str, candidates: Iterable[str], limit: int = 3) -> List[str]:
    """Candidates ranked by case-insensitive edit distance to ``word``.

    Only candidates within max(len(word), 3) edits are returned.
    """
    target = word.lower()
    max_distance = max(len(word), 3)
    scored = []
    for candidate in candidates:
        distance = levenshtein_distance(target, candidate.lower())
        if distance <= max_distance:
            scored.append((distance, candidate))
    scored.sort(key=lambda item: (item[0], item[1]))
    return [candidate for _, candidate in scored[:limit]]
