"""
JSON:API resource object shapes for request and response bodies.

Body facts carry `{"contentType": ..., "schema": {...}}`, so every pattern
here is rooted at `schema` and describes the JSON schema of the document,
not the document itself.
"""

from __future__ import annotations

from ...docs import JsonApi
from ...exceptions import RuleError
from ...matchers import Matcher, Matchers
from ...models import FactKind
from ...rules import Rule, Ruleset
from ...utils import is_relationship_path
from ..common import (
    is_singleton,
    json_api_body,
    operation_method,
    operation_path,
    outside_openapi,
    response_bodies,
    status_code,
)
from .status_codes import VALID_POST_2XX

resource_id_format = Matcher(
    lambda value: value in ("uuid", "uri", "ulid"),
    "resource id format (uuid, uri or ulid)"
)

RESOURCE_ID = {"type": "string", "format": resource_id_format}


def _body_schema(properties: dict, **schema) -> dict:
    return {"schema": dict(schema, properties=properties)}


def _resource(properties: dict) -> dict:
    return {"type": "object", "properties": properties}


PATCH_REQUEST = _body_schema(
    {"data": _resource({
        "id": RESOURCE_ID,
        "type": {"type": Matchers.string},
        "attributes": {"type": "object"},
    })},
    type="object",
)

BULK_PATCH_REQUEST = _body_schema(
    {"data": {"type": "array", "items": _resource({
        "id": RESOURCE_ID,
        "type": {"type": Matchers.string},
        "attributes": {"type": "object"},
    })}},
    type="object",
)

POST_REQUEST = _body_schema(
    {"data": _resource({"type": {"type": Matchers.string}})},
    type="object",
)

BULK_POST_REQUEST = _body_schema(
    {"data": {"type": "array", "items": _resource({"type": {"type": Matchers.string}})}},
    type="object",
)

RELATIONSHIP_ARRAY_REQUEST = _body_schema(
    {"data": {"type": "array", "items": _resource({
        "type": {"type": Matchers.string},
        "id": RESOURCE_ID,
    })}},
    type="object",
)

RELATIONSHIP_SINGLE_REQUEST = _body_schema(
    {"data": _resource({"type": {"type": Matchers.string}, "id": RESOURCE_ID})},
    type="object",
)

RESOURCE_COLLECTION_RESPONSE = _body_schema({
    "data": {
        "type": "array",
        "items": {"properties": {"id": RESOURCE_ID, "type": {"type": "string"}}},
    },
})

RESOURCE_RESPONSE = _body_schema({
    "data": {"properties": {"id": RESOURCE_ID, "type": {"type": "string"}}},
})

SINGLETON_RESPONSE = _body_schema({
    "data": {"properties": {"type": {"type": "string"}}},
})

META_ONLY_RESPONSE = _body_schema({"meta": {}, "links": {}})


def _responds_with(*codes: str):
    return lambda fact, context: status_code(context) in codes


def _method_in(context, *methods: str) -> bool:
    return operation_method(context) in methods


def _has_204_response(context) -> bool:
    return context.operation is not None and "204" in context.operation.responses


# Request bodies

def _request_data_for_patch(assertions):
    assertions.added_or_changed.matches_one_of([PATCH_REQUEST, BULK_PATCH_REQUEST])


request_data_for_patch = Rule(
    name="request body for patch",
    docs_link=JsonApi.patch_requests,
    kinds=(FactKind.REQUEST,),
    matches=lambda fact, context: (
        not is_relationship_path(operation_path(context))
        and _method_in(context, "patch")
        and json_api_body(fact, context)
    ),
    body=_request_data_for_patch,
)

request_data_for_post = Rule(
    name="request body for post",
    docs_link=JsonApi.post_requests,
    kinds=(FactKind.REQUEST,),
    matches=lambda fact, context: (
        not is_relationship_path(operation_path(context))
        and _method_in(context, "post")
        and json_api_body(fact, context)
        and not _has_204_response(context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(POST_REQUEST),
)

request_data_for_relationship_modification = Rule(
    name="request body for relationship post/patch/delete",
    docs_link=JsonApi.post_requests,
    kinds=(FactKind.REQUEST,),
    matches=lambda fact, context: (
        is_relationship_path(operation_path(context))
        and _method_in(context, "patch", "delete", "post")
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches_one_of(
        [RELATIONSHIP_ARRAY_REQUEST, RELATIONSHIP_SINGLE_REQUEST]
    ),
)

request_data_for_bulk_post = Rule(
    name="request body for bulk post",
    docs_link=JsonApi.patch_requests,
    kinds=(FactKind.REQUEST,),
    matches=lambda fact, context: (
        not is_relationship_path(operation_path(context))
        and _method_in(context, "post")
        and _has_204_response(context)
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(BULK_POST_REQUEST),
)


# Responses

def _empty_204_content(assertions):
    def check(response):
        if response_bodies(response):
            raise RuleError("expected response to not have content")

    assertions.added_or_changed("not include content for 204 status codes", check)


empty_204_content = Rule(
    name="empty content for 204 status codes",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        status_code(context) == "204" and _method_in(context, "delete", "patch")
    ),
    body=_empty_204_content,
)


def _content_required(assertions):
    def check(response):
        if not response_bodies(response):
            raise RuleError("expected response to have content")

    assertions.added_or_changed(
        "include content for status codes other than 202, 204, 303", check
    )


content_required_status_codes = Rule(
    name="body is required for status!=[202,204,303]",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: status_code(context) not in ("202", "204", "303"),
    body=_content_required,
)

location_header = Rule(
    name="location header",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        _method_in(context, "post")
        and status_code(context) in VALID_POST_2XX
        and status_code(context) not in ("202", "204")
    ),
    body=lambda assertions: assertions.added_or_changed.has_response_header_matching(
        "location", {}
    ),
)

content_location_header_for_202 = Rule(
    name="content-location header for 202",
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: (
        _method_in(context, "post", "patch", "delete") and status_code(context) == "202"
    ),
    body=lambda assertions: assertions.added_or_changed.has_response_header_matching(
        "content-location", {}
    ),
)

location_header_for_303 = Rule(
    name="location header for 303",
    kinds=(FactKind.RESPONSE,),
    matches=_responds_with("303"),
    body=lambda assertions: assertions.added_or_changed.has_response_header_matching(
        "location", {}
    ),
)


# Response bodies

response_data_for_patch = Rule(
    name="response data for patch",
    docs_link=JsonApi.patch_responses,
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        _method_in(context, "patch")
        and status_code(context) == "200"
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(
        _body_schema({}, type="object")
    ),
)

data_property = Rule(
    name="include JSON:API data property for 2xx status codes",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        status_code(context) in ("200", "201")
        and _method_in(context, "get", "post")
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(
        _body_schema({"data": {"type": Matchers.string}})
    ),
)

json_api_property = Rule(
    name="include JSON:API type property for 2xx status codes",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        status_code(context) in ("200", "201")
        and _method_in(context, "patch", "delete")
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(
        _body_schema({"jsonapi": {"type": Matchers.string}})
    ),
)


def _self_link_expected(fact, context) -> bool:
    if _method_in(context, "get", "patch"):
        return status_code(context) == "200"
    if _method_in(context, "post"):
        return status_code(context) == "201"
    return False


self_links = Rule(
    name="self links",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=_self_link_expected,
    body=lambda assertions: assertions.added.matches(
        _body_schema({"links": {"properties": {"self": {}}}})
    ),
)

get_post_response_data_schema = Rule(
    name="valid get / post response data schema",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        not is_singleton(context)
        and _method_in(context, "get", "post")
        and status_code(context) in ("200", "201")
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches_one_of(
        [RESOURCE_COLLECTION_RESPONSE, RESOURCE_RESPONSE]
    ),
)

get_singleton_response_data_schema = Rule(
    name="valid get singleton response data schema",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        is_singleton(context)
        and _method_in(context, "get")
        and status_code(context) == "200"
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added.matches(SINGLETON_RESPONSE),
)

patch_response_data_schema = Rule(
    name="valid patch response data schema",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        not is_singleton(context)
        and _method_in(context, "patch")
        and status_code(context) == "200"
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches_one_of([
        META_ONLY_RESPONSE,
        _body_schema({
            "data": {"properties": {"id": RESOURCE_ID, "type": {"type": "string"}}},
            "jsonapi": {},
            "links": {},
        }),
    ]),
)

patch_singleton_response_data_schema = Rule(
    name="valid patch singleton response data schema",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        is_singleton(context)
        and _method_in(context, "patch")
        and status_code(context) == "200"
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches_one_of([
        META_ONLY_RESPONSE,
        _body_schema({
            "data": {"properties": {"type": {"type": "string"}}},
            "jsonapi": {},
            "links": {},
        }),
    ]),
)

delete_response_data_schema = Rule(
    name="valid delete response data schema",
    kinds=(FactKind.RESPONSE_BODY,),
    matches=lambda fact, context: (
        not is_singleton(context)
        and _method_in(context, "delete")
        and status_code(context) == "200"
        and json_api_body(fact, context)
    ),
    body=lambda assertions: assertions.added_or_changed.matches(
        _body_schema({"meta": {}})
    ),
)

resource_object_rules = Ruleset(
    name="resource objects",
    docs_link=JsonApi.resource_objects,
    matches=outside_openapi,
    rules=(
        request_data_for_patch,
        request_data_for_post,
        request_data_for_relationship_modification,
        request_data_for_bulk_post,
        response_data_for_patch,
        empty_204_content,
        content_required_status_codes,
        data_property,
        json_api_property,
        location_header,
        content_location_header_for_202,
        location_header_for_303,
        self_links,
        get_post_response_data_schema,
        get_singleton_response_data_schema,
        patch_response_data_schema,
        patch_singleton_response_data_schema,
        delete_response_data_schema,
    ),
)
