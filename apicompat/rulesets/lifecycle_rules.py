"""Resource lifecycle rules: stability declaration, promotion and sunset."""

from __future__ import annotations

from ..docs import Versioning
from ..exceptions import RuleError
from ..lifecycle import (
    STABILITIES,
    STABILITY_KEY,
    check_sunset,
    is_allowed_transition,
    is_valid_stability,
)
from ..models import ChangeKind, FactKind
from ..rules import Rule, Ruleset


def _stability_requirement(assertions):
    def check(specification):
        stability = specification.get(STABILITY_KEY)
        if not is_valid_stability(stability):
            raise RuleError(
                f"{stability} must be one of allowed values {', '.join(STABILITIES)}"
            )

    assertions.requirement("be provided for every resource document", check)


stability_requirement = Rule(
    name="resource stability",
    docs_link=Versioning.stability_levels,
    kinds=(FactKind.SPECIFICATION,),
    matches=lambda fact, context: fact.change != ChangeKind.REMOVED,
    body=_stability_requirement,
)


def _stability_transitions(assertions):
    def check(before, after):
        before_stability = before.get(STABILITY_KEY)
        after_stability = after.get(STABILITY_KEY)
        if not is_allowed_transition(before_stability, after_stability):
            raise RuleError(
                f"stability transition from '{before_stability}' to "
                f"'{after_stability}' not allowed"
            )

    assertions.changed("not change unless it was wip", check)


stability_transitions = Rule(
    name="resource stability transitions",
    docs_link=Versioning.promoting_stability,
    kinds=(FactKind.SPECIFICATION,),
    body=_stability_transitions,
)


def _follow_sunset_rules(assertions):
    def check(value):
        result = check_sunset(assertions.context.custom)
        if not result.passed:
            raise RuleError(result.error)

    assertions.removed("follow sunset rules", check)


specification_sunset = Rule(
    name="sunset rules",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.SPECIFICATION,),
    matches=lambda fact, context: (
        fact.change == ChangeKind.REMOVED
        and fact.before.get(STABILITY_KEY) != "wip"
    ),
    body=_follow_sunset_rules,
)

operation_sunset = Rule(
    name="operation sunset rules",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.OPERATION,),
    matches=lambda fact, context: (
        fact.change == ChangeKind.REMOVED
        and context.custom.change_version.stability != "wip"
    ),
    body=_follow_sunset_rules,
)

lifecycle_ruleset = Ruleset(
    name="api lifecycle ruleset",
    rules=(
        stability_requirement,
        stability_transitions,
        specification_sunset,
        operation_sunset,
    ),
)
