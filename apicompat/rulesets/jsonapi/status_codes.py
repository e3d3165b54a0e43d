"""Allowed response status codes per HTTP method."""

from __future__ import annotations

from ...docs import Standards
from ...exceptions import RuleError
from ...models import FactKind
from ...rules import Rule, Ruleset
from ...utils import is_batch_post_operation, is_relationship_path
from ..common import operation_method, operation_path, outside_openapi, status_code

VALID_4XX = ("400", "401", "403", "404", "409", "410", "429")
VALID_DELETE_2XX = ("200", "204")
VALID_POST_2XX = ("201", "202", "204")
VALID_BATCH_POST_2XX = ("204",)
VALID_GET_2XX = ("200",)


def _is_batch_post(context) -> bool:
    return context.operation is not None and is_batch_post_operation(
        context.operation.request_bodies
    )


def _success_response(method: str):
    def gate(fact, context) -> bool:
        return status_code(context).startswith("2") and operation_method(context) == method
    return gate


def _allow_status_codes(allowed: tuple[str, ...], message: str):
    """Body failing with `message` when the response's status code is not allowed."""
    def body(assertions):
        code = status_code(assertions.context)

        def check(response):
            if code not in allowed:
                raise RuleError(message.format(allowed=",".join(allowed), code=code))

        assertions.added_or_changed("support the correct status codes", check)

    return body


valid_4xx_codes = Rule(
    name="valid 4xx status codes",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: status_code(context).startswith("4"),
    body=_allow_status_codes(VALID_4XX, "expected response to not support status code {code}"),
)

delete_2xx_codes = Rule(
    name="valid 2xx status codes for delete",
    kinds=(FactKind.RESPONSE,),
    matches=_success_response("delete"),
    body=_allow_status_codes(
        VALID_DELETE_2XX, "expected response to not support status code {code}"
    ),
)

post_2xx_codes = Rule(
    name="valid 2xx status codes for post",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        _success_response("post")(fact, context)
        and not _is_batch_post(context)
        and not is_relationship_path(operation_path(context))
    ),
    body=_allow_status_codes(
        VALID_POST_2XX,
        "expected POST response to only support status code(s) {{{allowed}}}, not {code}",
    ),
)

relationship_post_2xx_codes = Rule(
    name="valid 2xx status codes for relationship post",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        _success_response("post")(fact, context)
        and _is_batch_post(context)
        and is_relationship_path(operation_path(context))
    ),
    body=_allow_status_codes(
        VALID_POST_2XX,
        "expected relationship POST response to only support status code(s) "
        "{{{allowed}}}, not {code}",
    ),
)

get_2xx_codes = Rule(
    name="valid 2xx status codes for get",
    kinds=(FactKind.RESPONSE,),
    matches=_success_response("get"),
    body=_allow_status_codes(
        VALID_GET_2XX, "expected GET response to only support 200, not {code}"
    ),
)

batch_post_2xx_codes = Rule(
    name="valid 2xx status codes for batch post",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        _success_response("post")(fact, context)
        and _is_batch_post(context)
        and not is_relationship_path(operation_path(context))
    ),
    body=_allow_status_codes(
        VALID_BATCH_POST_2XX,
        "expected POST response for batches to only support 204, not {code}",
    ),
)

status_code_rules = Ruleset(
    name="JSON:API status codes",
    docs_link=Standards.status_codes,
    matches=outside_openapi,
    rules=(
        valid_4xx_codes,
        delete_2xx_codes,
        post_2xx_codes,
        relationship_post_2xx_codes,
        get_2xx_codes,
        batch_post_2xx_codes,
    ),
)
