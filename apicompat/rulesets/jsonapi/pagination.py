"""Cursor pagination for collection GET operations."""

from __future__ import annotations

from ...docs import JsonApi
from ...exceptions import RuleError
from ...models import FactKind
from ...rules import Rule, Ruleset
from ...utils import is_item_operation
from ..common import (
    is_singleton,
    json_api_body,
    operation_method,
    operation_path,
    outside_openapi,
    status_code,
)

PAGINATION_PARAMETERS = ("starting_after", "ending_before", "limit")


def _collection_get(fact, context) -> bool:
    return operation_method(context) == "get" and not is_singleton(context)


def _query_parameter_names(operation: dict) -> set:
    return {
        parameter.get('name')
        for parameter in (operation or {}).get('parameters') or []
        if parameter.get('in') == 'query'
    }


def _pagination_parameters(assertions):
    for name in PAGINATION_PARAMETERS:
        assertions.added_or_changed.has_query_parameter_matching({"name": name})


pagination_parameters = Rule(
    name="pagination parameters",
    kinds=(FactKind.OPERATION,),
    matches=_collection_get,
    body=_pagination_parameters,
)


def _unsupported_pagination_parameters(assertions):
    for name in PAGINATION_PARAMETERS:
        def check(operation, name=name):
            if name in _query_parameter_names(operation):
                raise RuleError(
                    f"expected operation to not support pagination parameter {name}"
                )

        assertions.added_or_changed(
            "not use pagination parameters for non-GET operations", check
        )


unsupported_pagination_parameters = Rule(
    name="unsupported pagination parameters",
    kinds=(FactKind.OPERATION,),
    matches=lambda fact, context: not _collection_get(fact, context),
    body=_unsupported_pagination_parameters,
)

pagination_links = Rule(
    name="pagination links",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        _collection_get(fact, context)
        and status_code(context) == "200"
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(
        {"schema": {"properties": {"links": {}}}}
    ),
)

pagination_rules = Ruleset(
    name="pagination",
    docs_link=JsonApi.pagination,
    matches=lambda context: (
        outside_openapi(context) and not is_item_operation(operation_path(context))
    ),
    rules=(
        pagination_parameters,
        unsupported_pagination_parameters,
        pagination_links,
    ),
)
