"""Glob-style name filter applied to every level of the listing tree."""

from __future__ import annotations

import re
from collections.abc import Callable

GLOB_METACHARACTERS = frozenset("*?")


def has_glob_metacharacters(pattern: str) -> bool:
    return any(char in GLOB_METACHARACTERS for char in pattern)


def glob_to_regex(pattern: str) -> str:
    """Translate ``*``/``?`` globs into an anchored regex source.

    Every other character is matched literally.
    """
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "\\A" + "".join(parts) + "\\Z"


def compile_search_predicate(query: str) -> Callable[[str], bool]:
    """Return a name predicate for the free-text search ``query``.

    Queries without metacharacters become ``*query*``. An empty query matches
    every name. If the pattern cannot be compiled the predicate falls back to
    case-insensitive substring containment.
    """
    if not query:
        return lambda _name: True

    pattern = query if has_glob_metacharacters(query) else f"*{query}*"
    try:
        compiled = re.compile(glob_to_regex(pattern), re.IGNORECASE | re.DOTALL)
    except re.error:
        folded = query.casefold()
        return lambda name: folded in name.casefold()
    return lambda name: compiled.match(name) is not None


class SearchFilter:
    """Compiled search query, recompiled only when the text changes."""

    def __init__(self, query: str = "") -> None:
        self._query = ""
        self._predicate: Callable[[str], bool] = compile_search_predicate("")
        self.update(query)

    @property
    def query(self) -> str:
        return self._query

    @property
    def is_active(self) -> bool:
        return bool(self._query)

    def update(self, query: str) -> bool:
        """Replace the query; return whether it changed."""
        if query == self._query:
            return False
        self._query = query
        self._predicate = compile_search_predicate(query)
        return True

    def matches(self, name: str) -> bool:
        return self._predicate(name)


__all__ = [
    "GLOB_METACHARACTERS",
    "has_glob_metacharacters",
    "glob_to_regex",
    "compile_search_predicate",
    "SearchFilter",
]
