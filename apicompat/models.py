"""Data models for the apicompat rule engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from .exceptions import ConfigError, ValidationError


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class FactKind(Enum):
    SPECIFICATION = "specification"
    OPERATION = "operation"
    REQUEST = "request"
    RESPONSE = "response"
    RESPONSE_HEADER = "response-header"
    RESPONSE_BODY = "response-body"
    QUERY_PARAMETER = "query-parameter"
    PATH_PARAMETER = "path-parameter"
    HEADER_PARAMETER = "header-parameter"
    PROPERTY = "property"


class ChangeKind(Enum):
    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


# Locations: one shape per fact kind.

@dataclass(frozen=True)
class SpecificationLocation:
    """Location of the document itself."""

    @property
    def where(self) -> str:
        return "this specification"


@dataclass(frozen=True)
class OperationLocation:
    path: str
    method: str

    @property
    def where(self) -> str:
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True)
class ParameterLocation:
    """Query, path or header parameter of an operation."""
    path: str
    method: str
    name: str
    placement: str = "query"

    @property
    def where(self) -> str:
        return f"{self.method.upper()} {self.path} {self.placement} parameter: {self.name}"


@dataclass(frozen=True)
class RequestLocation:
    path: str
    method: str
    content_type: str

    @property
    def where(self) -> str:
        return f"{self.method.upper()} {self.path} request body: {self.content_type}"


@dataclass(frozen=True)
class ResponseLocation:
    path: str
    method: str
    status_code: str

    @property
    def where(self) -> str:
        return f"{self.method.upper()} {self.path} response {self.status_code}"


@dataclass(frozen=True)
class ResponseHeaderLocation:
    path: str
    method: str
    status_code: str
    name: str

    @property
    def where(self) -> str:
        return (
            f"{self.method.upper()} {self.path} response {self.status_code} "
            f"response header: {self.name}"
        )


@dataclass(frozen=True)
class ResponseBodyLocation:
    path: str
    method: str
    status_code: str
    content_type: str

    @property
    def where(self) -> str:
        return (
            f"{self.method.upper()} {self.path} response {self.status_code} "
            f"response body: {self.content_type}"
        )


@dataclass(frozen=True)
class PropertyLocation:
    """
    A body property, addressed by its trail of property keys.

    `status_code` is None for properties of a request body.
    """
    path: str
    method: str
    content_type: str
    trail: tuple[str, ...] = ()
    status_code: Optional[str] = None

    @property
    def in_request(self) -> bool:
        return self.status_code is None

    @property
    def where(self) -> str:
        prefix = f"{self.method.upper()} {self.path}"
        if self.in_request:
            body = f"{prefix} request body: {self.content_type}"
        else:
            body = f"{prefix} response {self.status_code} response body: {self.content_type}"
        return f"{body} property {'/'.join(self.trail)}"


Location = (
    SpecificationLocation
    | OperationLocation
    | ParameterLocation
    | RequestLocation
    | ResponseLocation
    | ResponseHeaderLocation
    | ResponseBodyLocation
    | PropertyLocation
)

LOCATION_TYPES: dict[FactKind, type] = {
    FactKind.SPECIFICATION: SpecificationLocation,
    FactKind.OPERATION: OperationLocation,
    FactKind.REQUEST: RequestLocation,
    FactKind.RESPONSE: ResponseLocation,
    FactKind.RESPONSE_HEADER: ResponseHeaderLocation,
    FactKind.RESPONSE_BODY: ResponseBodyLocation,
    FactKind.QUERY_PARAMETER: ParameterLocation,
    FactKind.PATH_PARAMETER: ParameterLocation,
    FactKind.HEADER_PARAMETER: ParameterLocation,
    FactKind.PROPERTY: PropertyLocation,
}


@dataclass(frozen=True)
class Fact:
    """One versioned element of an API description with its before/after pair."""
    kind: FactKind
    change: ChangeKind
    location: Location
    before: Any = None
    after: Any = None

    def __post_init__(self):
        expected = LOCATION_TYPES[self.kind]
        if not isinstance(self.location, expected):
            raise ValidationError(
                f"{self.kind.value} fact requires a {expected.__name__}",
                {"location": type(self.location).__name__}
            )

        has_before = self.before is not None
        has_after = self.after is not None
        if self.change == ChangeKind.ADDED:
            valid = has_after and not has_before
        elif self.change == ChangeKind.REMOVED:
            valid = has_before and not has_after
        else:
            valid = has_before and has_after
        if not valid:
            raise ValidationError(
                f"{self.change.value} fact at {self.location.where} has an invalid before/after pair",
                {"before": has_before, "after": has_after}
            )

    @property
    def key(self) -> str:
        return self.location.where

    @property
    def current(self) -> Any:
        """The after value when present, else the before value."""
        return self.after if self.after is not None else self.before


@dataclass(frozen=True)
class ChangeVersion:
    date: date
    stability: str


def parse_date(value: Any, field_name: str) -> date:
    """Parse an ISO calendar date, accepting values already decoded by YAML."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(
            f"{field_name} must be an ISO date (YYYY-MM-DD)",
            {"value": value}
        )


def _date_key(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return parse_date(value, "resourceVersions").isoformat()
    return str(value)


def normalize_resource_versions(resource_versions: Optional[dict]) -> dict:
    """Key each resource's versions by ISO date string, whatever date type they came in as."""
    return {
        resource: {
            _date_key(version_date): stabilities
            for version_date, stabilities in (dates or {}).items()
        }
        for resource, dates in (resource_versions or {}).items()
    }


@dataclass(frozen=True)
class CustomContext:
    """Caller-supplied metadata about the change under evaluation."""
    change_date: date
    change_resource: str
    change_version: ChangeVersion
    resource_versions: dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, 'resource_versions', normalize_resource_versions(self.resource_versions)
        )

    @classmethod
    def from_dict(cls, data: dict) -> 'CustomContext':
        """Build from the camelCase wire form."""
        if not isinstance(data, dict):
            raise ValidationError("context must be an object")

        version = data.get('changeVersion') or {}
        return cls(
            change_date=parse_date(data.get('changeDate'), 'changeDate'),
            change_resource=str(data.get('changeResource', '')),
            change_version=ChangeVersion(
                date=parse_date(version.get('date'), 'changeVersion.date'),
                stability=str(version.get('stability', '')),
            ),
            resource_versions=data.get('resourceVersions') or {},
        )


@dataclass(frozen=True)
class OperationContext:
    """The operation enclosing a fact, as seen in this run."""
    path: str
    method: str
    change: Optional[ChangeKind] = None
    value: Optional[dict] = None
    is_singleton: bool = False

    @property
    def responses(self) -> dict:
        return (self.value or {}).get('responses') or {}

    @property
    def request_bodies(self) -> dict:
        """Request body media types keyed by content type."""
        request_body = (self.value or {}).get('requestBody') or {}
        return request_body.get('content') or {}


@dataclass(frozen=True)
class SpecificationContext:
    change: Optional[ChangeKind] = None
    value: Optional[dict] = None


@dataclass(frozen=True)
class RuleContext:
    """Read-only view handed to rule and ruleset match predicates."""
    location: Location
    custom: CustomContext
    operation: Optional[OperationContext] = None
    specification: SpecificationContext = field(default_factory=SpecificationContext)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a partial match."""
    ok: bool
    mismatch_path: tuple[str, ...] = ()
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class Result:
    """Outcome of one assertion callback for one fact."""
    rule_name: str
    where: str
    passed: bool
    condition: str = ""
    change: Optional[ChangeKind] = None
    error: Optional[str] = None
    docs_link: Optional[str] = None
    exempted: bool = False

    def to_dict(self) -> dict:
        result = {
            "rule_name": self.rule_name,
            "where": self.where,
            "condition": self.condition,
            "passed": self.passed,
            "exempted": self.exempted,
        }
        if self.change:
            result["change"] = self.change.value
        if self.error is not None:
            result["error"] = self.error
        if self.docs_link:
            result["docs_link"] = self.docs_link
        return result


@dataclass
class Summary:
    """Summary statistics of a run."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    exempted: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "exempted": self.exempted,
        }


@dataclass
class RunReport:
    """Ordered results of a run with summary statistics."""
    results: list[Result] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    cancelled: bool = False

    @classmethod
    def from_results(cls, results: list[Result], cancelled: bool = False) -> 'RunReport':
        summary = Summary(total=len(results))
        for result in results:
            if result.exempted:
                summary.exempted += 1
            elif result.passed:
                summary.passed += 1
            else:
                summary.failed += 1
        return cls(results=list(results), summary=summary, cancelled=cancelled)

    @property
    def failures(self) -> list[Result]:
        return [r for r in self.results if not r.passed and not r.exempted]

    @property
    def passed(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "cancelled": self.cancelled,
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }

    def print_summary(self):
        print(f"\nRule Results: {self.summary.passed}/{self.summary.total} passed")
        if self.summary.exempted:
            print(f"  Exempted: {self.summary.exempted}")
        if self.cancelled:
            print("  Run was cancelled before all facts were evaluated")
        for result in self.failures:
            print(f"  - [{result.rule_name}] {result.where}: {result.error}")


RULESET_TOGGLES = (
    "headers",
    "lifecycle",
    "operations",
    "properties",
    "specification",
    "status_codes",
    "content_type",
    "resource_objects",
    "pagination",
    "singletons",
    "compound_documents",
)

VARIANTS = ("resource", "compiled")


@dataclass
class EngineConfig:
    """Global configuration for the rule engine."""
    variant: str = "resource"
    rulesets: tuple[str, ...] = RULESET_TOGGLES
    log_level: LogLevel = LogLevel.INFO

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'EngineConfig':
        data = data or {}
        log_level = data.get('log_level', LogLevel.INFO.value)
        try:
            log_level = LogLevel(str(log_level).upper())
        except ValueError:
            raise ConfigError('log_level', f"unknown level {log_level}")
        return cls(
            variant=data.get('variant', 'resource'),
            rulesets=tuple(data.get('rulesets', RULESET_TOGGLES)),
            log_level=log_level,
        )
