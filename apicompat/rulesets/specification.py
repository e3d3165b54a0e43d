"""Document-level rules: component naming, tags, introspection routes, polymorphism."""

from __future__ import annotations

from typing import NamedTuple, Optional

from ..docs import Standards
from ..exceptions import RuleError
from ..jsonpath_utils import JSONPathMatcher
from ..lifecycle import STABILITY_KEY
from ..models import FactKind
from ..naming import DEFAULT_NAMING
from ..rules import Rule, Ruleset

SCHEMA_REF_PREFIX = "#/components/schemas/"

NESTED_DISCRIMINATOR_ERROR = (
    "Nested discriminators are not permitted (discriminator within a discriminated struct)"
)


class ComponentName(NamedTuple):
    local_name: str
    local_property: Optional[str] = None
    namespace: Optional[str] = None


def decode_component_name(name: str) -> ComponentName:
    """
    Split a possibly namespaced component name.

    `ns.Model` names a model in namespace `ns`; `ns.Model.some_field` names a
    model property, as generated for shared parameter and header components.
    """
    parts = name.split('.')
    if len(parts) == 1:
        return ComponentName(name)
    last = parts[-1]
    if DEFAULT_NAMING.is_snake_case(last):
        return ComponentName(parts[-2], last, '.'.join(parts[:-2]))
    return ComponentName(last, None, '.'.join(parts[:-1]))


def _component_names(assertions):
    def check(specification):
        components = specification.get('components') or {}
        for component_type, entries in components.items():
            if component_type.startswith("x-") or component_type == "securitySchemes":
                continue
            for component_name in entries or {}:
                decoded = decode_component_name(component_name)
                if not DEFAULT_NAMING.is_pascal_case(decoded.local_name):
                    raise RuleError(
                        f"Expected {decoded.local_name} to be pascal case in component {component_name}"
                    )
                if decoded.local_property and not DEFAULT_NAMING.is_snake_case(decoded.local_property):
                    raise RuleError(
                        f"Expected {decoded.local_property} to be snake case in component {component_name}"
                    )
                if decoded.namespace and not DEFAULT_NAMING.is_dot_case(decoded.namespace):
                    raise RuleError(
                        f"Expected {decoded.namespace} to be dot case in component {component_name}"
                    )

    assertions.requirement("use pascal case for component names", check)


component_name_case = Rule(
    name="component names",
    docs_link=Standards.component_naming,
    kinds=(FactKind.SPECIFICATION,),
    body=_component_names,
)


def _is_compiled_document(fact, context) -> bool:
    """Merged documents carry no stability of their own."""
    return STABILITY_KEY not in (fact.current or {})


def _requires_route(route: str, condition: str):
    def body(assertions):
        def check(specification):
            if route not in (specification.get('paths') or {}):
                raise RuleError(f"Expected route {route} to be included")

        assertions.requirement(condition, check)

    return body


list_openapi_versions = Rule(
    name="list open api version",
    docs_link=Standards.open_api_versions,
    kinds=(FactKind.SPECIFICATION,),
    matches=_is_compiled_document,
    body=_requires_route("/openapi", "list the available versioned OpenAPI specifications"),
)

get_openapi_versions = Rule(
    name="get open api versions",
    docs_link=Standards.open_api_versions,
    kinds=(FactKind.SPECIFICATION,),
    matches=_is_compiled_document,
    body=_requires_route("/openapi/{version}", "provide versioned OpenAPI specifications"),
)


def _tags(assertions):
    def check(specification):
        for tag in specification.get('tags') or []:
            if "name" not in tag:
                raise RuleError("name is not in tag")
            if "description" not in tag:
                raise RuleError("description is not in tag")

    assertions.requirement("have name and description for tags", check)


tags = Rule(
    name="open api version names",
    docs_link=Standards.tags,
    kinds=(FactKind.SPECIFICATION,),
    body=_tags,
)


def _discriminator_usage(assertions):
    def check(specification):
        for schema in JSONPathMatcher.find_parents(specification, "$..discriminator"):
            discriminator = schema.get('discriminator')
            if not isinstance(discriminator, dict):
                continue
            if isinstance(discriminator.get('mapping'), dict) and not schema.get('oneOf'):
                raise RuleError(
                    "Discriminator with mapping is only permitted when used with oneOf"
                )

    assertions.added_or_changed("discriminator usage rules", check)


discriminator_rules = Rule(
    name="discriminator usage rules",
    docs_link=Standards.polymorphic_objects,
    kinds=(FactKind.SPECIFICATION,),
    body=_discriminator_usage,
)


def _no_nested_discriminators(assertions):
    def check(specification):
        schemas = (specification.get('components') or {}).get('schemas')
        if not isinstance(schemas, dict):
            return

        discriminated = {
            name for name, schema in schemas.items()
            if isinstance(schema, dict) and "discriminator" in schema
        }
        for name in discriminated:
            for branch in schemas[name].get('oneOf') or []:
                ref = str(branch.get('$ref', '')) if isinstance(branch, dict) else ''
                if not ref.startswith(SCHEMA_REF_PREFIX):
                    continue
                if ref[len(SCHEMA_REF_PREFIX):] in discriminated:
                    raise RuleError(NESTED_DISCRIMINATOR_ERROR)

    assertions.added_or_changed("no nested discriminators", check)


no_nested_discriminators = Rule(
    name="no nested discriminators",
    docs_link=Standards.polymorphic_objects,
    kinds=(FactKind.SPECIFICATION,),
    body=_no_nested_discriminators,
)

specification_rules = Ruleset(
    name="specification rules",
    rules=(
        component_name_case,
        tags,
        get_openapi_versions,
        list_openapi_versions,
        discriminator_rules,
        no_nested_discriminators,
    ),
)
