"""JSONPath utilities for selecting nodes of specification documents."""

from __future__ import annotations

from typing import Any

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathParserError


class JSONPathMatcher:
    """Utility class for JSONPath selection."""

    # Cache for compiled JSONPath expressions
    _cache: dict = {}

    @classmethod
    def compile(cls, path: str):
        """Compile and cache a JSONPath expression."""
        if path not in cls._cache:
            try:
                cls._cache[path] = jsonpath_parse(path)
            except JsonPathParserError as e:
                raise ValueError(f"Invalid JSONPath expression '{path}': {e}")
        return cls._cache[path]

    @classmethod
    def find_parents(cls, data: Any, path: str) -> list[Any]:
        """
        Find the objects that hold each match.

        e.g. `$..discriminator` yields every schema object declaring a discriminator.
        """
        expr = cls.compile(path)
        parents = []
        for match in expr.find(data):
            if match.context is not None:
                parents.append(match.context.value)
        return parents
