"""
Lifecycle policy: stability transitions and sunset scheduling.

Stability of a resource version moves through these states:

    wip -> experimental | beta | ga
    experimental | beta | ga -> removed   (only once the sunset period has passed)

Every state may also stay where it is. Any other transition is forbidden;
`removed` is terminal for that version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .exceptions import UnexpectedStabilityError, ValidationError
from .models import CustomContext, normalize_resource_versions, parse_date
from .utils import days_between

logger = logging.getLogger(__name__)

STABILITIES = ("wip", "experimental", "beta", "ga")

STABILITY_KEY = "x-snyk-api-stability"
SUNSET_ELIGIBLE_KEY = "x-snyk-sunset-eligible"


@dataclass(frozen=True)
class SunsetPolicy:
    """Days of deprecation notice required before removal, by stability."""
    required_days: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({
            "experimental": 30,
            "beta": 90,
            "ga": 180,
        })
    )


DEFAULT_SUNSET_POLICY = SunsetPolicy()


@dataclass(frozen=True)
class PolicyResult:
    passed: bool
    error: Optional[str] = None


def is_valid_stability(stability: Any) -> bool:
    return stability in STABILITIES


def is_allowed_transition(before: Optional[str], after: Optional[str]) -> bool:
    """
    Whether a resource may move from `before` to `after` stability.

    A missing `before` is a new resource; a missing `after` is a removal,
    which the sunset policy governs instead.
    """
    if not before or not after:
        return True
    if before == after:
        return True
    return before == "wip"


def is_breaking_change_allowed(stability: Optional[str]) -> bool:
    return stability in ("wip", "experimental")


def sunset_required_days(
    stability: str,
    policy: SunsetPolicy = DEFAULT_SUNSET_POLICY
) -> int:
    """
    Days a version must be deprecated before it can be removed.

    Raises:
        UnexpectedStabilityError: if the stability has no sunset entry (wip included)
    """
    try:
        return policy.required_days[stability]
    except KeyError:
        raise UnexpectedStabilityError(stability)


def is_sunset_satisfied(
    resource_versions: Mapping,
    resource: str,
    version_date: date,
    stability: str,
    change_date: date,
    policy: SunsetPolicy = DEFAULT_SUNSET_POLICY
) -> PolicyResult:
    """
    Check that a resource version was deprecated long enough ago to be removed.

    Args:
        resource_versions: resource -> ISO date -> stability -> {"deprecatedBy": ...}
        resource: Resource name being removed
        version_date: Release date of the version being removed
        stability: Stability of the version being removed
        change_date: Date the removal takes effect

    Returns:
        PolicyResult describing whether the removal is allowed
    """
    versions = normalize_resource_versions(resource_versions).get(resource) or {}
    entry = (versions.get(version_date.isoformat()) or {}).get(stability) or {}
    if not entry.get('deprecatedBy'):
        return PolicyResult(
            passed=False,
            error=f"expected {resource} to be deprecated before removing"
        )

    try:
        required_days = sunset_required_days(stability, policy)
    except UnexpectedStabilityError:
        return PolicyResult(
            passed=False,
            error=f"unexpected stability {stability} in {resource}"
        )

    elapsed = days_between(version_date, change_date)
    if elapsed < required_days:
        return PolicyResult(
            passed=False,
            error=(
                f"expected {stability} resource {resource} to be deprecated "
                f"{required_days} days, {required_days - elapsed} days remaining"
            )
        )
    return PolicyResult(passed=True)


def check_sunset(custom: CustomContext, policy: SunsetPolicy = DEFAULT_SUNSET_POLICY) -> PolicyResult:
    """Apply the sunset policy to the version described by the custom context."""
    return is_sunset_satisfied(
        custom.resource_versions,
        custom.change_resource,
        custom.change_version.date,
        custom.change_version.stability,
        custom.change_date,
        policy,
    )


def is_compiled_sunset_allowed(custom: CustomContext, operation: Optional[dict]) -> bool:
    """
    For compiled documents, whether an operation has reached its sunset date.

    Compiled documents carry `x-snyk-sunset-eligible` on each operation; the
    operation may go once the change date is on or after that date. An
    unparseable date counts as not yet eligible.
    """
    stability = custom.change_version.stability
    if not stability:
        return False
    if is_breaking_change_allowed(stability):
        return True
    sunset_eligible = (operation or {}).get(SUNSET_ELIGIBLE_KEY)
    if not sunset_eligible:
        return False
    try:
        eligible_date = parse_date(sunset_eligible, SUNSET_ELIGIBLE_KEY)
    except ValidationError as e:
        logger.warning("Ignoring %s: %s", SUNSET_ELIGIBLE_KEY, e.message)
        return False
    return custom.change_date >= eligible_date
