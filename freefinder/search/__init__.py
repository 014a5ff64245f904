"""Search helpers: glob-style name filtering for listings."""

from __future__ import annotations

from .filter import SearchFilter, compile_search_predicate, glob_to_regex

__all__ = ["SearchFilter", "compile_search_predicate", "glob_to_regex"]
