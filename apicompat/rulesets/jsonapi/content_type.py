"""Responses with content must offer the JSON:API media type."""

from __future__ import annotations

from ...docs import JsonApi
from ...exceptions import RuleError
from ...models import FactKind
from ...rules import Rule
from ...utils import JSON_API_CONTENT_TYPE
from ..common import outside_openapi, response_bodies, status_code


def _json_api_content_type(assertions):
    def check(response):
        if JSON_API_CONTENT_TYPE not in response_bodies(response):
            raise RuleError(f"expected response to support {JSON_API_CONTENT_TYPE}")

    assertions.added_or_changed("use the JSON:API content type", check)


json_api_content_type = Rule(
    name="JSON:API content type",
    docs_link=JsonApi.content_type,
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        outside_openapi(context) and status_code(context) != "204"
    ),
    body=_json_api_content_type,
)
