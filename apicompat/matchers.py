"""Partial-match comparison of schema-shaped values against expected patterns."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .models import MatchResult
from .utils import get_type_name, values_equal


class Matcher:
    """
    A predicate over a single value, used as a node inside a pattern.

    Args:
        predicate: Callable returning True when the value is acceptable
        label: Short description shown in mismatch diagnostics
    """

    def __init__(self, predicate: Callable[[Any], bool], label: str = "custom matcher"):
        self.predicate = predicate
        self.label = label

    def __call__(self, value: Any) -> bool:
        return bool(self.predicate(value))

    def __repr__(self) -> str:
        return f"Matcher({self.label})"


class OptionalMatcher(Matcher):
    """Wraps a pattern node so that an absent value also matches."""

    def __init__(self, node: Any):
        super().__init__(lambda value: True, f"optional {_describe(node)}")
        self.node = node


def _describe(node: Any) -> str:
    if isinstance(node, Matcher):
        return node.label
    if isinstance(node, dict):
        return "object"
    if isinstance(node, list):
        return "array"
    return repr(node)


class Matchers:
    """Built-in matchers."""
    string = Matcher(lambda value: isinstance(value, str), "string")
    number = Matcher(
        lambda value: isinstance(value, (int, float)) and not isinstance(value, bool),
        "number"
    )
    boolean = Matcher(lambda value: isinstance(value, bool), "boolean")
    any = Matcher(lambda value: True, "any value")

    @staticmethod
    def one_of_values(*values: Any) -> Matcher:
        """Matches any of the given literal values."""
        return Matcher(
            lambda value: any(values_equal(value, v) for v in values),
            f"one of {', '.join(repr(v) for v in values)}"
        )

    @staticmethod
    def optional(node: Any) -> OptionalMatcher:
        return OptionalMatcher(node)


def _find_mismatch(
    actual: Any,
    pattern: Any,
    path: tuple[str, ...]
) -> Optional[tuple[tuple[str, ...], str]]:
    """
    Walk the pattern in lock-step with the actual value.

    Returns:
        None when the value matches, else (path, detail) of the first mismatch
    """
    if isinstance(pattern, OptionalMatcher):
        if actual is None:
            return None
        return _find_mismatch(actual, pattern.node, path)

    if actual is None:
        return path, f"expected {_describe(pattern)}, value is missing"

    if isinstance(pattern, Matcher):
        if pattern(actual):
            return None
        return path, f"expected {pattern.label}, found {get_type_name(actual)}"

    if isinstance(pattern, dict):
        if not isinstance(actual, dict):
            return path, f"expected an object, found {get_type_name(actual)}"
        for key, node in pattern.items():
            if key not in actual:
                if isinstance(node, OptionalMatcher):
                    continue
                return path + (str(key),), f"missing key '{key}'"
            mismatch = _find_mismatch(actual[key], node, path + (str(key),))
            if mismatch:
                return mismatch
        return None

    if isinstance(pattern, list):
        if len(pattern) != 1:
            raise ValueError("array patterns take exactly one element pattern")
        if not isinstance(actual, (list, tuple)):
            return path, f"expected an array, found {get_type_name(actual)}"
        if not actual:
            return path, "expected at least one element"
        for index, item in enumerate(actual):
            mismatch = _find_mismatch(item, pattern[0], path + (str(index),))
            if mismatch:
                return mismatch
        return None

    if values_equal(actual, pattern):
        return None
    return path, f"expected {pattern!r}, found {actual!r}"


def _format_path(path: tuple[str, ...]) -> str:
    return "/".join(path) if path else "(root)"


def matches(actual: Any, pattern: Any) -> MatchResult:
    """
    Check that `actual` contains at least the shape described by `pattern`.

    Keys present in `actual` but not in `pattern` are ignored. A list pattern
    `[M]` needs at least one element; an empty list does not match.
    """
    mismatch = _find_mismatch(actual, pattern, ())
    if mismatch is None:
        return MatchResult(ok=True)
    path, detail = mismatch
    return MatchResult(
        ok=False,
        mismatch_path=path,
        reason=f"expected a partial match: {detail} at {_format_path(path)}"
    )


def matches_one_of(actual: Any, patterns: list) -> MatchResult:
    """Succeeds if any alternative pattern fully partial-matches."""
    for pattern in patterns:
        if _find_mismatch(actual, pattern, ()) is None:
            return MatchResult(ok=True)
    return MatchResult(ok=False, reason="expected at least one partial match")


def not_matches(actual: Any, pattern: Any) -> MatchResult:
    """Succeeds when `actual` does not partially match `pattern`."""
    if _find_mismatch(actual, pattern, ()) is None:
        return MatchResult(ok=False, reason="expected not to partially match")
    return MatchResult(ok=True)
