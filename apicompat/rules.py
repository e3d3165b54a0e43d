"""Declarative rules, rulesets and the assertion views handed to rule bodies."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from .exceptions import RuleError
from . import matchers as match_engine
from .models import ChangeKind, Fact, FactKind, RuleContext

ALL_KINDS = tuple(FactKind)

ADDED = "added"
CHANGED = "changed"
REMOVED = "removed"
REQUIREMENT = "requirement"
ADDED_OR_CHANGED = "added_or_changed"


@dataclass(frozen=True)
class Rule:
    """
    A named assertion over facts of the given kinds.

    `body` receives an `Assertions` object and registers callbacks on its
    views; it must not keep state between calls.
    """
    name: str
    body: Callable[['Assertions'], Any]
    kinds: tuple[FactKind, ...] = ALL_KINDS
    matches: Optional[Callable[[Fact, RuleContext], bool]] = None
    docs_link: Optional[str] = None

    def applies_to(self, fact: Fact, context: RuleContext) -> bool:
        if fact.kind not in self.kinds:
            return False
        return self.matches is None or bool(self.matches(fact, context))

    def evolve(self, **changes) -> 'Rule':
        """Copy of this rule with some fields replaced."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Ruleset:
    """A named group of rules (or nested rulesets) behind a shared gate."""
    name: str
    rules: tuple[Union[Rule, 'Ruleset'], ...] = ()
    matches: Optional[Callable[[RuleContext], bool]] = None
    docs_link: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'rules', tuple(self.rules))

    def applies_to(self, context: RuleContext) -> bool:
        return self.matches is None or bool(self.matches(context))


@dataclass
class Check:
    """A callback registered by a rule body for one change kind."""
    view: str
    condition: str
    callback: Callable[..., Any]

    def arguments(self, fact: Fact) -> Optional[tuple]:
        """Arguments for the callback, or None when it does not apply to this fact."""
        change = fact.change
        if self.view == REQUIREMENT:
            return (fact.current,)
        if self.view == ADDED and change == ChangeKind.ADDED:
            return (fact.after,)
        if self.view == CHANGED and change == ChangeKind.CHANGED:
            return (fact.before, fact.after)
        if self.view == REMOVED and change == ChangeKind.REMOVED:
            return (fact.before,)
        if self.view == ADDED_OR_CHANGED and change in (ChangeKind.ADDED, ChangeKind.CHANGED):
            return (fact.after,)
        return None


class AssertionView:
    """
    Registers callbacks for one change kind.

    Calling the view registers a plain callback; the helper methods register
    pattern checks against the current value (the after value for changes).
    """

    def __init__(self, assertions: 'Assertions', view: str):
        self._assertions = assertions
        self._view = view

    def __call__(self, condition: str, callback: Callable[..., Any]):
        self._assertions.checks.append(Check(self._view, condition, callback))

    def _value_check(self, condition: str, check: Callable[[Any], None]):
        if self._view == CHANGED:
            self(condition, lambda before, after: check(after))
        else:
            self(condition, check)

    def matches(self, pattern: Any, error_message: Optional[str] = None,
                condition: str = "match the expected shape"):
        def check(value):
            result = match_engine.matches(value, pattern)
            if not result.ok:
                raise RuleError(error_message or result.reason)
        self._value_check(condition, check)

    def matches_one_of(self, patterns: list, error_message: Optional[str] = None,
                       condition: str = "match one of the expected shapes"):
        def check(value):
            result = match_engine.matches_one_of(value, patterns)
            if not result.ok:
                raise RuleError(error_message or result.reason)
        self._value_check(condition, check)

    def not_matches(self, pattern: Any, error_message: Optional[str] = None,
                    condition: str = "not match the disallowed shape"):
        def check(value):
            result = match_engine.not_matches(value, pattern)
            if not result.ok:
                raise RuleError(error_message or result.reason)
        self._value_check(condition, check)

    def has_query_parameter_matching(self, pattern: dict):
        """The operation declares a query parameter partially matching `pattern`."""
        description = pattern.get('name', 'the expected shape')

        def check(operation):
            for parameter in (operation or {}).get('parameters') or []:
                if parameter.get('in') != 'query':
                    continue
                if match_engine.matches(parameter, pattern).ok:
                    return
            raise RuleError(f"expected operation to have a query parameter matching {description}")

        self._value_check(f"have query parameter {description}", check)

    def has_response_header_matching(self, name: str, pattern: Any):
        """The response declares header `name` (case-insensitive) matching `pattern`."""
        def check(response):
            headers = (response or {}).get('headers') or {}
            for header_name, header in headers.items():
                if header_name.lower() != name.lower():
                    continue
                result = match_engine.matches(header, pattern)
                if not result.ok:
                    raise RuleError(f"header {name}: {result.reason}")
                return
            raise RuleError(f"expected response to have header {name}")

        self._value_check(f"have response header {name}", check)


@dataclass
class Assertions:
    """The views a rule body registers its callbacks on, bound to one fact."""
    fact: Fact
    context: RuleContext
    checks: list[Check] = field(default_factory=list)

    def __post_init__(self):
        self.added = AssertionView(self, ADDED)
        self.changed = AssertionView(self, CHANGED)
        self.removed = AssertionView(self, REMOVED)
        self.requirement = AssertionView(self, REQUIREMENT)
        self.added_or_changed = AssertionView(self, ADDED_OR_CHANGED)
