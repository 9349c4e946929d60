"""Fuzzy path matcher used as the default benchmark workload.

A query matches a path when its characters appear in the path, in
order, ignoring case.  Matches are scored so that characters landing
right after a separator, at a camelCase hump, or directly after the
previous matched character count for more.

With ``recurse=True`` every possible placement of the query is scored
and the best is kept; with ``recurse=False`` only the leftmost
placement is scored, which is much cheaper on long paths.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

_PATH_SEPARATORS = "/\\"
_WORD_SEPARATORS = "-_ 0123456789"


def _char_score(path: str, index: int, last: int) -> float:
    """Score for matching the character at *index*, given the previous
    match ended at *last* (-1 before the first match)."""
    if index == 0:
        return 0.9
    before = path[index - 1]
    if before in _PATH_SEPARATORS:
        return 0.9
    if before in _WORD_SEPARATORS:
        return 0.8
    if path[index].isupper() and before.islower():
        return 0.8
    if before == ".":
        return 0.7
    distance = index - last
    if distance <= 1:
        return 1.0
    return 0.75 / distance


def score_path(path: str, query: str, *, recurse: bool = True) -> float:
    """Score *path* against *query*; 0.0 means no match.

    Scores are normalized by path length, so among equal placements
    shorter paths rank higher.
    """
    if not query:
        return 1.0
    if len(query) > len(path):
        return 0.0

    lowered = path.lower()
    needle = query.lower()

    if not recurse:
        total = 0.0
        last = -1
        for ch in needle:
            index = lowered.find(ch, last + 1)
            if index < 0:
                return 0.0
            total += _char_score(path, index, last)
            last = index
        return total / len(path)

    memo: dict[tuple[int, int], float] = {}

    def best(qi: int, last: int) -> float:
        # Best total for needle[qi:] with the previous match at *last*;
        # negative means the rest cannot be placed.
        if qi == len(needle):
            return 0.0
        key = (qi, last)
        if key in memo:
            return memo[key]
        result = -1.0
        remaining = len(needle) - qi
        index = lowered.find(needle[qi], last + 1)
        while 0 <= index <= len(lowered) - remaining:
            rest = best(qi + 1, index)
            if rest >= 0:
                result = max(result, _char_score(path, index, last) + rest)
            index = lowered.find(needle[qi], index + 1)
        memo[key] = result
        return result

    total = best(0, -1)
    if total < 0:
        return 0.0
    return total / len(path)


class Matcher:
    """Ranks a fixed set of paths against successive queries."""

    def __init__(self, paths: Sequence[str]) -> None:
        self.paths = list(paths)

    def sorted_matches_for(
        self,
        query: str,
        *,
        threads: int = 1,
        recurse: bool = True,
        limit: int = 0,
    ) -> list[str]:
        """Return matching paths, best first.

        Args:
            query: The search string.
            threads: Number of worker threads to score with.
            recurse: Search every placement of the query (see module docs).
            limit: Return at most this many paths (0 for all).
        """
        if threads > 1 and len(self.paths) > 1:
            chunk = -(-len(self.paths) // threads)
            chunks = [self.paths[i : i + chunk] for i in range(0, len(self.paths), chunk)]
            with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
                parts = pool.map(lambda c: _score_all(c, query, recurse), chunks)
                scored = [item for part in parts for item in part]
        else:
            scored = _score_all(self.paths, query, recurse)

        scored.sort(key=lambda item: (-item[0], item[1]))
        matches = [path for _, path in scored]
        if limit > 0:
            matches = matches[:limit]
        return matches


def _score_all(paths: Sequence[str], query: str, recurse: bool) -> list[tuple[float, str]]:
    scored: list[tuple[float, str]] = []
    for path in paths:
        score = score_path(path, query, recurse=recurse)
        if score > 0:
            scored.append((score, path))
    return scored
