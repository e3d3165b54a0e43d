"""Request and response body property rules."""

from __future__ import annotations

from ..docs import Standards, Versioning
from ..exceptions import RuleError
from ..models import ChangeKind, FactKind
from ..naming import DEFAULT_NAMING
from ..rules import Rule, Ruleset
from ..utils import (
    find_undeclared_required_property,
    is_fully_typed_array,
    is_resource_meta_property,
    is_within_attributes,
)
from .common import breaking_changes_forbidden, compiled_sunset_pending, existing_operation


def _in_request(fact, context) -> bool:
    return fact.location.in_request


def _in_response(fact, context) -> bool:
    return not fact.location.in_request


def _schema(value) -> dict:
    return (value or {}).get('schema') or {}


def _both_sides(name_template: str, matches, **fields) -> tuple[Rule, Rule]:
    """The request and response flavours of one property rule."""
    def combined(side):
        def gate(fact, context):
            return side(fact, context) and (matches is None or matches(fact, context))
        return gate

    return (
        Rule(name=name_template.format("request"), kinds=(FactKind.PROPERTY,),
             matches=combined(_in_request), **fields),
        Rule(name=name_template.format("response"), kinds=(FactKind.PROPERTY,),
             matches=combined(_in_response), **fields),
    )


def _property_casing(assertions):
    trail = assertions.fact.location.trail

    def check(prop):
        if is_resource_meta_property(trail):
            return
        key = prop.get('key')
        if not DEFAULT_NAMING.is_snake_case(key):
            raise RuleError(f"expected {key} to be snake case")

    assertions.added("have snake case keys", check)


request_property_casing, response_property_casing = _both_sides(
    "{} property casing", None, body=_property_casing,
)


def _removal_allowed_gate(fact, context) -> bool:
    specification_removed = context.specification.change == ChangeKind.REMOVED
    return (
        existing_operation(fact, context)
        and not specification_removed
        and breaking_changes_forbidden(fact, context)
    )


def _compiled_removal_gate(fact, context) -> bool:
    return _removal_allowed_gate(fact, context) and compiled_sunset_pending(fact, context)


def _property_removal(assertions):
    def check(prop):
        raise RuleError(f"Expected property {prop.get('key')} to not be removed")

    assertions.removed("not be removed", check)


request_property_removal, response_property_removal = _both_sides(
    "{} property removal", _removal_allowed_gate,
    docs_link=Versioning.breaking_changes, body=_property_removal,
)

request_property_removal_compiled, response_property_removal_compiled = _both_sides(
    "{} property removal", _compiled_removal_gate,
    docs_link=Versioning.breaking_changes, body=_property_removal,
)


def _required_request_properties(assertions):
    def added(prop):
        if prop.get('required'):
            raise RuleError("cannot add a required request property to an existing operation")

    def changed(before, after):
        if not before.get('required') and after.get('required'):
            raise RuleError("cannot make a request property required")

    assertions.added("not add required request property", added)
    assertions.changed("not make an optional request property required", changed)


required_request_properties = Rule(
    name="prevent adding a required request property",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.PROPERTY,),
    matches=lambda fact, context: (
        _in_request(fact, context)
        and existing_operation(fact, context)
        and breaking_changes_forbidden(fact, context)
    ),
    body=_required_request_properties,
)


def _enum_or_example(assertions):
    trail = assertions.fact.location.trail

    def check(prop):
        schema = _schema(prop)
        if not is_within_attributes(trail):
            return
        if schema.get('type') in ("object", "boolean"):
            return
        if "enum" not in schema and "example" not in schema:
            raise RuleError("expect property to have an enum or example")

    assertions.added("have enum or example", check)


enum_or_example = Rule(
    name="request property enum or example",
    docs_link=Standards.formats,
    kinds=(FactKind.PROPERTY,),
    matches=_in_request,
    body=_enum_or_example,
)


def _date_formatting(message: str):
    def body(assertions):
        def check(prop):
            if (prop.get('key') or '').endswith("_at"):
                if _schema(prop).get('format') != "date-time":
                    raise RuleError(message)

        assertions.added("use date-time for dates", check)

    return body


request_date_formatting = Rule(
    name="request property date formatting",
    docs_link=Standards.timestamp_properties,
    kinds=(FactKind.PROPERTY,),
    matches=_in_request,
    body=_date_formatting("expected property name ending in '_at' to have format date-time"),
)

response_date_formatting = Rule(
    name="response property date formatting",
    docs_link=Standards.formats,
    kinds=(FactKind.PROPERTY,),
    matches=_in_response,
    body=_date_formatting("expected property to have format date-time"),
)


def _array_with_items(assertions):
    def check(prop):
        schema = _schema(prop)
        if schema.get('type') == "array" and not is_fully_typed_array(schema):
            raise RuleError("type was not found array items")

    assertions.requirement("have type for array items", check)


array_with_items_in_request, array_with_items_in_response = _both_sides(
    "{} array with items", None, body=_array_with_items,
)


def _schema_keyword_unchanged(keyword: str):
    """Body asserting that a property's schema `keyword` does not change."""
    def body(assertions):
        def check(before, after):
            before_value = _schema(before).get(keyword)
            after_value = _schema(after).get(keyword)
            if not before_value and not after_value:
                return
            if before_value != after_value:
                raise RuleError(f"expected {keyword} to not change")

        assertions.changed(f"not change the property {keyword}", check)

    return body


prevent_changing_request_format, prevent_changing_response_format = _both_sides(
    "prevent changing format in {} property", breaking_changes_forbidden,
    body=_schema_keyword_unchanged("format"),
)

prevent_changing_request_pattern, prevent_changing_response_pattern = _both_sides(
    "prevent changing pattern in {} property", breaking_changes_forbidden,
    body=_schema_keyword_unchanged("pattern"),
)

prevent_changing_request_type, prevent_changing_response_type = _both_sides(
    "prevent changing type in {} property", breaking_changes_forbidden,
    body=_schema_keyword_unchanged("type"),
)


def _collection_type_valid(assertions):
    def check(prop):
        schema = _schema(prop)
        if schema.get('type') != "array":
            return
        if not schema.get('items'):
            raise RuleError("array schema is missing 'items'")
        if schema.get('properties'):
            raise RuleError("array schema can not have 'properties'")

    assertions.added_or_changed("be a valid collection type", check)


collection_type_valid_request, collection_type_valid_response = _both_sides(
    "valid collection type in {} property", None, body=_collection_type_valid,
)


def _required_properties_declared(assertions):
    def check(body):
        missing = find_undeclared_required_property(_schema(body))
        if missing is not None:
            raise RuleError(f"missing required property {missing}")

    assertions.requirement("declare required properties in objects", check)


required_properties_declared_in_request = Rule(
    name="request schema properties",
    kinds=(FactKind.REQUEST,),
    body=_required_properties_declared,
)

required_properties_declared_in_response = Rule(
    name="response schema properties",
    kinds=(FactKind.RESPONSE_BODY,),
    body=_required_properties_declared,
)


def _property_rules(request_removal: Rule, response_removal: Rule) -> tuple:
    return (
        request_property_casing,
        response_property_casing,
        request_removal,
        response_removal,
        required_request_properties,
        enum_or_example,
        request_date_formatting,
        response_date_formatting,
        array_with_items_in_request,
        array_with_items_in_response,
        prevent_changing_request_format,
        prevent_changing_response_format,
        prevent_changing_request_pattern,
        prevent_changing_response_pattern,
        prevent_changing_request_type,
        prevent_changing_response_type,
        collection_type_valid_request,
        collection_type_valid_response,
        required_properties_declared_in_request,
        required_properties_declared_in_response,
    )


property_rules_resource = Ruleset(
    name="property rules",
    rules=_property_rules(request_property_removal, response_property_removal),
)

property_rules_compiled = Ruleset(
    name="property rules",
    rules=_property_rules(
        request_property_removal_compiled,
        response_property_removal_compiled,
    ),
)
