"""Top-level document restrictions: singleton resources and compound documents."""

from __future__ import annotations

from ...docs import JsonApi
from ...exceptions import RuleError
from ...models import FactKind
from ...rules import Rule
from ..common import is_singleton, json_api_body, outside_openapi, status_code


def _no_delete_or_post(assertions):
    method = assertions.fact.location.method.lower()

    def check(operation):
        if method in ("delete", "post"):
            raise RuleError(f"{method} is not allowed in JSON:API singletons")

    assertions.requirement("delete and post are not allowed for singletons", check)


disallow_singleton_delete_or_post = Rule(
    name="disallow singletons for delete or post",
    kinds=(FactKind.OPERATION,),
    matches=lambda fact, context: is_singleton(context),
    body=_no_delete_or_post,
)

compound_documents = Rule(
    name="disallow compound documents",
    docs_link=JsonApi.compound_documents,
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        outside_openapi(context)
        and status_code(context) in ("200", "201")
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.not_matches(
        {"schema": {"properties": {"included": {}}}}
    ),
)
