"""Operation and parameter rules."""

from __future__ import annotations

import re
from datetime import date

from ..docs import Standards, Versioning
from ..exceptions import RuleError
from ..matchers import Matcher, Matchers
from ..models import FactKind
from ..naming import DEFAULT_NAMING
from ..rules import Rule, Ruleset
from .common import (
    PARAMETER_KINDS,
    breaking_changes_forbidden,
    compiled_sunset_pending,
    existing_operation,
    operation_path,
)

OPERATION_ID_EFFECTIVE_DATE = date(2021, 7, 1)

_PATH_PARAMETER_SEGMENT = re.compile(r'^\{.*\}')

operation_id_matcher = Matcher(
    DEFAULT_NAMING.is_operation_id,
    "camel case and starts with get|create|list|update|delete matcher"
)

_OPERATION_ID_ERROR = "operationId must be camelCase and start with get|create|list|update|delete"


def _outside_openapi(fact, context) -> bool:
    return not operation_path(context).startswith("/openapi")


def _operation_id(assertions):
    pattern = {"operationId": operation_id_matcher}
    assertions.added.matches(pattern, error_message=_OPERATION_ID_ERROR)
    assertions.changed.matches(pattern, error_message=_OPERATION_ID_ERROR)


operation_id = Rule(
    name="operation id",
    docs_link=Standards.operation_ids,
    kinds=(FactKind.OPERATION,),
    matches=lambda fact, context: (
        _outside_openapi(fact, context)
        and context.custom.change_version.date > OPERATION_ID_EFFECTIVE_DATE
    ),
    body=_operation_id,
)

operation_id_set = Rule(
    name="operation id set",
    docs_link=Standards.operation_ids,
    kinds=(FactKind.OPERATION,),
    body=lambda assertions: assertions.requirement.matches(
        {"operationId": Matchers.string},
        error_message="operationId must be set and a string",
    ),
)

tags = Rule(
    name="operation tags",
    docs_link=Standards.tags,
    kinds=(FactKind.OPERATION,),
    body=lambda assertions: assertions.requirement.matches(
        {"tags": [Matchers.string]},
        error_message="tags must exist and have at least one tag",
    ),
)

summary = Rule(
    name="operation summary",
    docs_link=Standards.operation_summary,
    kinds=(FactKind.OPERATION,),
    matches=_outside_openapi,
    body=lambda assertions: assertions.requirement.matches(
        {"summary": Matchers.string},
        error_message="must have a summary",
    ),
)


def _consistent_operation_ids(assertions):
    def check(before, after):
        if before.get('operationId') != after.get('operationId'):
            raise RuleError("operationIds was changed")

    assertions.changed("have consistent operation IDs", check)


consistent_operation_ids = Rule(
    name="consistent operation ids",
    docs_link=Standards.operation_ids,
    kinds=(FactKind.OPERATION,),
    matches=breaking_changes_forbidden,
    body=_consistent_operation_ids,
)


def _parameter_case(assertions):
    fact = assertions.fact
    name = fact.location.name
    if fact.kind == FactKind.PATH_PARAMETER:
        valid = DEFAULT_NAMING.is_snake_case(name)
    else:
        valid = DEFAULT_NAMING.is_valid_dotted_name(name)

    def check(parameter):
        if not valid:
            raise RuleError(f"expected parameter name {name} to be snake case")

    assertions.added("use the correct case", check)


parameter_case = Rule(
    name="operation parameters snake case",
    docs_link=Standards.parameter_names,
    kinds=(FactKind.PATH_PARAMETER, FactKind.QUERY_PARAMETER),
    body=_parameter_case,
)


def _no_put_method(assertions):
    method = assertions.fact.location.method.lower()

    def check(operation):
        if method == "put":
            raise RuleError("put is not allowed in JSON:API")

    assertions.added("not use put method", check)


no_put_method = Rule(
    name="no put method",
    kinds=(FactKind.OPERATION,),
    body=_no_put_method,
)


def _prevent_operation_removal(assertions):
    def check(operation):
        raise RuleError("expected operation to be present")

    assertions.removed("not be allowed", check)


prevent_operation_removal = Rule(
    name="prevent operation removal",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.OPERATION,),
    matches=breaking_changes_forbidden,
    body=_prevent_operation_removal,
)

prevent_operation_removal_compiled = prevent_operation_removal.evolve(
    matches=lambda fact, context: (
        breaking_changes_forbidden(fact, context)
        and compiled_sunset_pending(fact, context)
    ),
)

require_version_parameter = Rule(
    name="require version parameter",
    docs_link=Versioning.version_parameter,
    kinds=(FactKind.OPERATION,),
    matches=_outside_openapi,
    body=lambda assertions: assertions.requirement.has_query_parameter_matching(
        {"name": "version"}
    ),
)


def _tenant_formatting(assertions):
    def check(parameter):
        name = parameter.get('name')
        if name not in ("group_id", "org_id"):
            return
        schema = parameter.get('schema')
        if not schema:
            raise RuleError("expected parameter to have a schema")
        if "$ref" not in schema and schema.get('format') != "uuid":
            raise RuleError("expected parameter to use format uuid")

    assertions.requirement("use UUID for org_id or group_id", check)


tenant_formatting = Rule(
    name="tenant formatting",
    docs_link=Standards.org_and_group_tenants,
    kinds=(FactKind.PATH_PARAMETER,),
    body=_tenant_formatting,
)


def _path_element_casing(assertions):
    path = assertions.fact.location.path

    def check(operation):
        parts = path.split('?', 1)[0].split('/')
        invalid = [
            part for part in parts
            if part and not _PATH_PARAMETER_SEGMENT.match(part)
            and not DEFAULT_NAMING.is_snake_case(part)
        ]
        if invalid:
            raise RuleError(f"expected {path} to support the correct casing")

    assertions.requirement("use the right casing for path elements", check)


path_element_casing = Rule(
    name="path element casing",
    docs_link=Standards.parameter_names,
    kinds=(FactKind.OPERATION,),
    body=_path_element_casing,
)


def _resource_root_parameter(assertions):
    path = assertions.fact.location.path

    def check(operation):
        if path.startswith("/{"):
            raise RuleError(
                f"expected {path} to begin with a resource name, not a parameter"
            )

    assertions.requirement("declare a resource name at the path root", check)


resource_root_parameter = Rule(
    name="resource path cannot begin with a parameter",
    kinds=(FactKind.OPERATION,),
    body=_resource_root_parameter,
)


def _prevent_adding_required_query_parameters(assertions):
    def check(parameter):
        if parameter.get('required'):
            raise RuleError(
                f"expected request query parameter {parameter.get('name')} to not be required"
            )

    assertions.added("not be required", check)


prevent_adding_required_query_parameters = Rule(
    name="prevent adding required query parameter",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.QUERY_PARAMETER,),
    matches=lambda fact, context: (
        breaking_changes_forbidden(fact, context)
        and existing_operation(fact, context)
    ),
    body=_prevent_adding_required_query_parameters,
)


def _prevent_optional_to_required(assertions):
    def check(before, after):
        if not before.get('required') and after.get('required'):
            raise RuleError(
                f"expected request query parameter {after.get('name')} "
                "to not change from optional to required"
            )

    assertions.changed("not be required", check)


prevent_changing_optional_to_required_query_parameters = Rule(
    name="prevent changing optional query parameter to required",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.QUERY_PARAMETER,),
    matches=breaking_changes_forbidden,
    body=_prevent_optional_to_required,
)


def _prevent_removing_status_codes(assertions):
    def check(response):
        raise RuleError("must not remove response status code")

    assertions.removed("not be removed", check)


prevent_removing_status_codes = Rule(
    name="prevent removing status codes",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.RESPONSE,),
    matches=breaking_changes_forbidden,
    body=_prevent_removing_status_codes,
)

prevent_removing_status_codes_compiled = prevent_removing_status_codes.evolve(
    matches=lambda fact, context: (
        breaking_changes_forbidden(fact, context)
        and compiled_sunset_pending(fact, context)
    ),
)


def _schema_attribute_unchanged(attribute: str, condition: str):
    """Body asserting that a parameter's schema `attribute` does not change."""
    def body(assertions):
        def check(before, after):
            before_value = (before.get('schema') or {}).get(attribute)
            after_value = (after.get('schema') or {}).get(attribute)
            if before_value != after_value:
                raise RuleError(
                    f"{_ATTRIBUTE_LABELS[attribute]} was changed from {before_value} to {after_value}"
                )

        assertions.changed(condition, check)

    return body


_ATTRIBUTE_LABELS = {
    "default": "default schema",
    "format": "schema format",
    "pattern": "schema pattern",
    "type": "schema type",
}

prevent_changing_parameter_default_value = Rule(
    name="prevent changing parameter default value",
    docs_link=Versioning.breaking_changes,
    kinds=(FactKind.QUERY_PARAMETER,),
    matches=breaking_changes_forbidden,
    body=_schema_attribute_unchanged("default", "not change the default value"),
)

prevent_changing_parameter_schema_format = Rule(
    name="prevent changing parameter schema format",
    docs_link=Versioning.breaking_changes,
    kinds=PARAMETER_KINDS,
    matches=breaking_changes_forbidden,
    body=_schema_attribute_unchanged("format", "not change the schema format"),
)

prevent_changing_parameter_schema_pattern = Rule(
    name="prevent changing parameter schema pattern",
    docs_link=Versioning.breaking_changes,
    kinds=PARAMETER_KINDS,
    matches=breaking_changes_forbidden,
    body=_schema_attribute_unchanged("pattern", "not change the schema pattern"),
)

prevent_changing_parameter_schema_type = Rule(
    name="prevent changing parameter schema type",
    docs_link=Versioning.breaking_changes,
    kinds=PARAMETER_KINDS,
    matches=breaking_changes_forbidden,
    body=_schema_attribute_unchanged("type", "not change the schema type"),
)


def _operation_rules(removal_rule: Rule, status_code_rule: Rule) -> tuple:
    return (
        operation_id,
        operation_id_set,
        tags,
        summary,
        consistent_operation_ids,
        parameter_case,
        no_put_method,
        removal_rule,
        require_version_parameter,
        tenant_formatting,
        path_element_casing,
        prevent_adding_required_query_parameters,
        prevent_changing_optional_to_required_query_parameters,
        status_code_rule,
        prevent_changing_parameter_default_value,
        prevent_changing_parameter_schema_format,
        prevent_changing_parameter_schema_pattern,
        prevent_changing_parameter_schema_type,
        resource_root_parameter,
    )


operation_rules_resource = Ruleset(
    name="operation rules",
    rules=_operation_rules(prevent_operation_removal, prevent_removing_status_codes),
)

operation_rules_compiled = Ruleset(
    name="operation rules",
    rules=_operation_rules(
        prevent_operation_removal_compiled,
        prevent_removing_status_codes_compiled,
    ),
)
