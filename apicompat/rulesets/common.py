"""Match predicates shared by the bundled rulesets."""

from __future__ import annotations

from ..lifecycle import is_breaking_change_allowed, is_compiled_sunset_allowed
from ..models import ChangeKind, Fact, FactKind, RuleContext
from ..utils import JSON_API_CONTENT_TYPE, is_openapi_path

PARAMETER_KINDS = (
    FactKind.QUERY_PARAMETER,
    FactKind.PATH_PARAMETER,
    FactKind.HEADER_PARAMETER,
)


def operation_path(context: RuleContext) -> str:
    return getattr(context.location, 'path', '')


def operation_method(context: RuleContext) -> str:
    return getattr(context.location, 'method', '').lower()


def status_code(context: RuleContext) -> str:
    return str(getattr(context.location, 'status_code', '') or '')


def content_type(context: RuleContext) -> str:
    return getattr(context.location, 'content_type', '') or ''


def outside_openapi(context: RuleContext) -> bool:
    """Gate excluding the `/openapi` introspection routes."""
    return not is_openapi_path(operation_path(context))


def breaking_changes_forbidden(fact: Fact, context: RuleContext) -> bool:
    return not is_breaking_change_allowed(context.custom.change_version.stability)


def existing_operation(fact: Fact, context: RuleContext) -> bool:
    """The enclosing operation was not introduced by this change."""
    return context.operation is None or context.operation.change != ChangeKind.ADDED


def compiled_sunset_pending(fact: Fact, context: RuleContext) -> bool:
    """For compiled documents: the operation has not reached its sunset date."""
    operation = context.operation.value if context.operation else None
    return not is_compiled_sunset_allowed(context.custom, operation)


def is_singleton(context: RuleContext) -> bool:
    return bool(context.operation and context.operation.is_singleton)


def json_api_body(fact: Fact, context: RuleContext) -> bool:
    return content_type(context) == JSON_API_CONTENT_TYPE


def response_bodies(response: dict) -> dict:
    """Media types of a raw response object, keyed by content type."""
    return (response or {}).get('content') or {}
