"""Tests for the bundled REST API rulesets."""

from datetime import date

import pytest
from apicompat import (
    ChangeKind,
    ChangeVersion,
    ConfigError,
    CustomContext,
    EngineConfig,
    Fact,
    FactKind,
    RuleRunner,
    build_active_ruleset,
)
from apicompat.engine import run_rules
from apicompat.models import (
    OperationLocation,
    ParameterLocation,
    PropertyLocation,
    RequestLocation,
    ResponseBodyLocation,
    ResponseHeaderLocation,
    ResponseLocation,
    SpecificationLocation,
)
from apicompat.rulesets.headers import response_header_rules
from apicompat.rulesets.jsonapi import (
    compound_documents,
    disallow_singleton_delete_or_post,
    json_api_content_type,
    pagination_rules,
    resource_object_rules,
    status_code_rules,
)
from apicompat.rulesets.lifecycle_rules import lifecycle_ruleset
from apicompat.rulesets.operations import operation_rules_resource
from apicompat.rulesets.properties import property_rules_resource
from apicompat.rulesets.specification import decode_component_name, specification_rules

JSON_API = "application/vnd.api+json"


def custom(stability="ga", change_date=date(2022, 6, 1), resource_versions=None):
    return CustomContext(
        change_date=change_date,
        change_resource="thing",
        change_version=ChangeVersion(date=date(2021, 9, 6), stability=stability),
        resource_versions=resource_versions or {},
    )


def run(rules, facts, context=None):
    return RuleRunner(rules).run(facts, context or custom())


def named(results, rule_name):
    return [r for r in results if r.rule_name == rule_name]


def failures(results, rule_name=None):
    return [r for r in results if not r.passed and (rule_name is None or r.rule_name == rule_name)]


def operation(change, path="/things", method="get", value=None):
    value = {"operationId": "listThings"} if value is None else value
    before = value if change != ChangeKind.ADDED else None
    after = value if change != ChangeKind.REMOVED else None
    return Fact(FactKind.OPERATION, change, OperationLocation(path, method), before, after)


def response(status, value, path="/things", method="get", change=ChangeKind.ADDED):
    return Fact(FactKind.RESPONSE, change, ResponseLocation(path, method, status), after=value)


def response_body(status, schema, path="/things", method="get", content_type=JSON_API):
    return Fact(
        FactKind.RESPONSE_BODY, ChangeKind.ADDED,
        ResponseBodyLocation(path, method, status, content_type),
        after={"contentType": content_type, "schema": schema},
    )


def specification(value, change=ChangeKind.ADDED, before=None):
    if change == ChangeKind.ADDED:
        return Fact(FactKind.SPECIFICATION, change, SpecificationLocation(), after=value)
    if change == ChangeKind.REMOVED:
        return Fact(FactKind.SPECIFICATION, change, SpecificationLocation(), before=value)
    return Fact(FactKind.SPECIFICATION, change, SpecificationLocation(), before=before, after=value)


class TestLifecycleRules:
    """Test stability and sunset rules."""

    def test_removed_operation_without_deprecation(self):
        """Test that a GA operation cannot be removed without deprecation."""
        fact = operation(ChangeKind.REMOVED, path="/things/{id}", method="delete",
                         value={"operationId": "deleteThing"})
        results = run([lifecycle_ruleset], [fact], custom("ga"))
        failed = failures(results, "operation sunset rules")
        assert len(failed) == 1
        assert "deprecated before removing" in failed[0].error
        assert failed[0].where == "DELETE /things/{id}"

    def test_removed_operation_after_sunset(self):
        versions = {"thing": {"2021-09-06": {"ga": {"deprecatedBy": {"date": "2021-10-01", "stability": "ga"}}}}}
        fact = operation(ChangeKind.REMOVED, method="delete")
        results = run([lifecycle_ruleset], [fact], custom("ga", date(2022, 6, 1), versions))
        assert named(results, "operation sunset rules")[0].passed is True

    def test_removed_wip_operation_needs_no_notice(self):
        results = run([lifecycle_ruleset], [operation(ChangeKind.REMOVED)], custom("wip"))
        assert results == []

    def test_removed_specification_sunset(self):
        fact = specification({"x-snyk-api-stability": "beta"}, ChangeKind.REMOVED)
        results = run([lifecycle_ruleset], [fact], custom("beta", date(2021, 12, 4)))
        failed = failures(results, "sunset rules")
        assert len(failed) == 1
        assert "deprecated before removing" in failed[0].error

    def test_invalid_stability(self):
        results = run([lifecycle_ruleset], [specification({"x-snyk-api-stability": "alpha"})])
        failed = failures(results, "resource stability")
        assert failed[0].error == "alpha must be one of allowed values wip, experimental, beta, ga"

    @pytest.mark.parametrize("before,after,passed", [
        ("wip", "ga", True),
        ("beta", "beta", True),
        ("beta", "ga", False),
        ("ga", "experimental", False),
    ])
    def test_stability_transitions(self, before, after, passed):
        fact = specification(
            {"x-snyk-api-stability": after}, ChangeKind.CHANGED,
            before={"x-snyk-api-stability": before},
        )
        results = named(run([lifecycle_ruleset], [fact]), "resource stability transitions")
        assert len(results) == 1
        assert results[0].passed is passed


class TestOperationRules:
    """Test operation and parameter rules."""

    def test_required_query_parameter_on_existing_operation(self):
        facts = [
            operation(ChangeKind.UNCHANGED),
            Fact(FactKind.QUERY_PARAMETER, ChangeKind.ADDED, ParameterLocation("/things", "get", "limit"),
                 after={"name": "limit", "in": "query", "required": True}),
        ]
        results = named(run([operation_rules_resource], facts), "prevent adding required query parameter")
        assert len(results) == 1
        assert results[0].passed is False
        assert results[0].condition == "not be required"
        assert results[0].error == "expected request query parameter limit to not be required"

    def test_required_query_parameter_on_new_operation(self):
        facts = [
            operation(ChangeKind.ADDED),
            Fact(FactKind.QUERY_PARAMETER, ChangeKind.ADDED, ParameterLocation("/things", "get", "limit"),
                 after={"name": "limit", "in": "query", "required": True}),
        ]
        results = run([operation_rules_resource], facts)
        assert failures(results, "prevent adding required query parameter") == []

    def test_required_query_parameter_allowed_when_experimental(self):
        facts = [
            operation(ChangeKind.UNCHANGED),
            Fact(FactKind.QUERY_PARAMETER, ChangeKind.ADDED, ParameterLocation("/things", "get", "limit"),
                 after={"name": "limit", "in": "query", "required": True}),
        ]
        results = run([operation_rules_resource], facts, custom("experimental"))
        assert named(results, "prevent adding required query parameter") == []

    @pytest.mark.parametrize("operation_id,passed", [
        ("listThings", True),
        ("getThing", True),
        ("fetchThing", False),
        ("list_things", False),
    ])
    def test_operation_id(self, operation_id, passed):
        fact = operation(ChangeKind.ADDED, value={"operationId": operation_id})
        results = named(run([operation_rules_resource], [fact]), "operation id")
        assert [r.passed for r in results] == [passed]

    def test_operation_requirements(self):
        fact = operation(ChangeKind.ADDED, path="/things", value={"operationId": "listThings"})
        results = run([operation_rules_resource], [fact])
        assert failures(results, "operation tags")[0].error == "tags must exist and have at least one tag"
        assert failures(results, "operation summary")[0].error == "must have a summary"
        assert "version" in failures(results, "require version parameter")[0].error

    def test_complete_operation_passes_requirements(self):
        value = {
            "operationId": "listThings",
            "tags": ["Things"],
            "summary": "List things",
            "parameters": [{"name": "version", "in": "query", "required": True}],
        }
        results = run([operation_rules_resource], [operation(ChangeKind.ADDED, value=value)])
        assert failures(results) == []

    def test_no_put(self):
        results = run([operation_rules_resource], [operation(ChangeKind.ADDED, method="put")])
        assert failures(results, "no put method")[0].error == "put is not allowed in JSON:API"

    def test_path_casing(self):
        results = run([operation_rules_resource], [operation(ChangeKind.ADDED, path="/orgs/{org_id}/someThings")])
        assert failures(results, "path element casing")[0].error == (
            "expected /orgs/{org_id}/someThings to support the correct casing"
        )

    def test_path_cannot_begin_with_parameter(self):
        results = run([operation_rules_resource], [operation(ChangeKind.ADDED, path="/{org_id}/things")])
        assert len(failures(results, "resource path cannot begin with a parameter")) == 1

    def test_changed_operation_id(self):
        fact = Fact(FactKind.OPERATION, ChangeKind.CHANGED, OperationLocation("/things", "get"),
                    before={"operationId": "listThings"}, after={"operationId": "listAllThings"})
        results = run([operation_rules_resource], [fact])
        assert failures(results, "consistent operation ids")[0].error == "operationIds was changed"

    def test_parameter_schema_type_change(self):
        fact = Fact(FactKind.PATH_PARAMETER, ChangeKind.CHANGED,
                    ParameterLocation("/things/{thing_id}", "get", "thing_id", "path"),
                    before={"name": "thing_id", "schema": {"type": "string"}},
                    after={"name": "thing_id", "schema": {"type": "integer"}})
        results = run([operation_rules_resource], [fact])
        failed = failures(results, "prevent changing parameter schema type")
        assert failed[0].error == "schema type was changed from string to integer"

    def test_tenant_parameter_format(self):
        fact = Fact(FactKind.PATH_PARAMETER, ChangeKind.ADDED,
                    ParameterLocation("/orgs/{org_id}", "get", "org_id", "path"),
                    after={"name": "org_id", "schema": {"type": "string"}})
        results = run([operation_rules_resource], [fact])
        assert failures(results, "tenant formatting")[0].error == "expected parameter to use format uuid"

    def test_dotted_query_parameter_names(self):
        facts = [
            Fact(FactKind.QUERY_PARAMETER, ChangeKind.ADDED, ParameterLocation("/things", "get", name),
                 after={"name": name, "in": "query"})
            for name in ("filter.created_at", "filterBy")
        ]
        results = named(run([operation_rules_resource], facts), "operation parameters snake case")
        assert [r.passed for r in results] == [True, False]

    def test_status_code_removal(self):
        fact = Fact(FactKind.RESPONSE, ChangeKind.REMOVED, ResponseLocation("/things", "get", "200"),
                    before={"description": "ok"})
        results = run([operation_rules_resource], [fact])
        assert failures(results, "prevent removing status codes")[0].error == "must not remove response status code"


class TestCompiledVariant:
    """Test removal rules relaxed by compiled sunset dates."""

    def setup_method(self):
        self.ruleset = build_active_ruleset(EngineConfig(variant="compiled", rulesets=("operations",)))
        self.removed = operation(
            ChangeKind.REMOVED, method="delete",
            value={"operationId": "deleteThing", "x-snyk-sunset-eligible": "2022-01-01"},
        )

    def test_removal_before_sunset_date(self):
        results = run([self.ruleset], [self.removed], custom("ga", date(2021, 12, 31)))
        assert failures(results, "prevent operation removal")[0].error == "expected operation to be present"

    def test_removal_after_sunset_date(self):
        results = run([self.ruleset], [self.removed], custom("ga", date(2022, 1, 1)))
        assert named(results, "prevent operation removal") == []

    def test_unparseable_sunset_date_keeps_removal_forbidden(self):
        """Test that a bad sunset date fails the rule without stopping the run."""
        removed = operation(
            ChangeKind.REMOVED, path="/things/{thing_id}", method="delete",
            value={"operationId": "deleteThing", "x-snyk-sunset-eligible": "next week"},
        )
        added = operation(ChangeKind.ADDED, value={"operationId": "listThings"})
        results = run([self.ruleset], [removed, added], custom("ga", date(2022, 1, 1)))
        assert failures(results, "prevent operation removal")[0].error == "expected operation to be present"
        assert any(r.where == "GET /things" for r in results)

    def test_resource_variant_always_forbids_removal(self):
        ruleset = build_active_ruleset(EngineConfig(rulesets=("operations",)))
        results = run([ruleset], [self.removed], custom("ga", date(2022, 1, 1)))
        assert len(failures(results, "prevent operation removal")) == 1


class TestHeaderRules:
    """Test response header rules."""

    def test_header_case(self):
        facts = [
            Fact(FactKind.RESPONSE_HEADER, ChangeKind.ADDED, ResponseHeaderLocation("/things", "get", "200", name),
                 after={"name": name})
            for name in ("snyk-request-id", "X_Request_Id")
        ]
        results = named(run([response_header_rules], facts), "header case")
        assert [r.passed for r in results] == [True, False]
        assert results[1].error == "X_Request_Id is not kebab-case"

    def test_standard_headers(self):
        headers = {
            "snyk-request-id": {}, "deprecation": {}, "snyk-version-lifecycle-stage": {},
            "snyk-version-requested": {}, "Snyk-Version-Served": {},
        }
        results = named(run([response_header_rules], [response("200", {"headers": headers})]), "standard headers")
        assert len(results) == 6
        assert [r.error for r in failures(results)] == ["expected response to have header sunset"]

    def test_openapi_routes_exempt(self):
        results = run([response_header_rules], [response("200", {}, path="/openapi")])
        assert named(results, "standard headers") == []


class TestPropertyRules:
    """Test body property rules."""

    def test_request_property_casing(self):
        fact = Fact(FactKind.PROPERTY, ChangeKind.ADDED,
                    PropertyLocation("/things", "post", JSON_API, ("data", "attributes", "createdAt")),
                    after={"key": "createdAt", "schema": {"type": "string", "format": "date-time"}})
        results = run([property_rules_resource], [fact])
        assert failures(results, "request property casing")[0].error == "expected createdAt to be snake case"
        assert named(results, "response property casing") == []

    def test_meta_properties_exempt_from_casing(self):
        fact = Fact(FactKind.PROPERTY, ChangeKind.ADDED,
                    PropertyLocation("/things", "get", JSON_API, ("data", "meta", "build_info", "commitSha"), "200"),
                    after={"key": "commitSha", "schema": {"type": "string"}})
        results = run([property_rules_resource], [fact])
        assert named(results, "response property casing")[0].passed is True

    def test_response_property_removal(self):
        facts = [
            operation(ChangeKind.UNCHANGED),
            Fact(FactKind.PROPERTY, ChangeKind.REMOVED,
                 PropertyLocation("/things", "get", JSON_API, ("data", "attributes", "name"), "200"),
                 before={"key": "name", "schema": {"type": "string"}}),
        ]
        results = run([property_rules_resource], facts)
        assert failures(results, "response property removal")[0].error == "Expected property name to not be removed"
        assert named(run([property_rules_resource], facts, custom("experimental")), "response property removal") == []

    def test_date_properties(self):
        fact = Fact(FactKind.PROPERTY, ChangeKind.ADDED,
                    PropertyLocation("/things", "get", JSON_API, ("data", "attributes", "created_at"), "200"),
                    after={"key": "created_at", "schema": {"type": "string"}})
        results = run([property_rules_resource], [fact])
        assert failures(results, "response property date formatting")[0].error == (
            "expected property to have format date-time"
        )

    def test_enum_or_example_for_attributes(self):
        fact = Fact(FactKind.PROPERTY, ChangeKind.ADDED,
                    PropertyLocation("/things", "post", JSON_API, ("data", "attributes", "color")),
                    after={"key": "color", "schema": {"type": "string"}})
        results = run([property_rules_resource], [fact])
        assert len(failures(results, "request property enum or example")) == 1

    def test_array_items(self):
        fact = Fact(FactKind.PROPERTY, ChangeKind.ADDED,
                    PropertyLocation("/things", "get", JSON_API, ("data", "attributes", "tags"), "200"),
                    after={"key": "tags", "schema": {"type": "array", "items": {"oneOf": []}}})
        results = run([property_rules_resource], [fact])
        assert failures(results, "response array with items")[0].error == "type was not found array items"

    def test_required_properties_declared(self):
        fact = Fact(FactKind.REQUEST, ChangeKind.ADDED, RequestLocation("/things", "post", JSON_API),
                    after={"contentType": JSON_API, "schema": {
                        "type": "object",
                        "properties": {"data": {"type": "object", "required": ["id"], "properties": {"type": {}}}},
                    }})
        results = run([property_rules_resource], [fact])
        assert failures(results, "request schema properties")[0].error == "missing required property data.id"


class TestSpecificationRules:
    """Test document-level rules."""

    def test_decode_component_name(self):
        assert decode_component_name("Thing") == ("Thing", None, None)
        assert decode_component_name("common.v1.Thing") == ("Thing", None, "common.v1")
        assert decode_component_name("common.Thing.thing_id") == ("Thing", "thing_id", "common")

    @pytest.mark.parametrize("name,passed", [
        ("ThingAttributes", True),
        ("common.v1.ThingAttributes", True),
        ("common.ThingParams.thing_id", True),
        ("thing_attributes", False),
        ("Common.Thing", False),
    ])
    def test_component_names(self, name, passed):
        fact = specification({"x-snyk-api-stability": "ga", "components": {"schemas": {name: {}}}})
        results = named(run([specification_rules], [fact]), "component names")
        assert results[0].passed is passed

    def test_security_schemes_ignored(self):
        fact = specification({"x-snyk-api-stability": "ga", "components": {"securitySchemes": {"api_key": {}}}})
        assert failures(run([specification_rules], [fact])) == []

    def test_compiled_documents_list_versions(self):
        results = run([specification_rules], [specification({"paths": {"/openapi": {}}})])
        assert [r.error for r in failures(results)] == ["Expected route /openapi/{version} to be included"]

    def test_tags(self):
        fact = specification({"x-snyk-api-stability": "ga", "tags": [{"name": "Things"}]})
        assert failures(run([specification_rules], [fact]))[0].error == "description is not in tag"

    def test_discriminator_mapping_requires_one_of(self):
        schemas = {"Pet": {"discriminator": {"propertyName": "kind", "mapping": {"cat": "#/components/schemas/Cat"}}}}
        fact = specification({"x-snyk-api-stability": "ga", "components": {"schemas": schemas}})
        failed = failures(run([specification_rules], [fact]), "discriminator usage rules")
        assert failed[0].error == "Discriminator with mapping is only permitted when used with oneOf"

        schemas["Pet"]["oneOf"] = [{"$ref": "#/components/schemas/Cat"}]
        assert failures(run([specification_rules], [fact]), "discriminator usage rules") == []

    def test_nested_discriminators(self):
        schemas = {
            "Parent": {"discriminator": {"propertyName": "kind"}, "oneOf": [{"$ref": "#/components/schemas/Child"}]},
            "Child": {"discriminator": {"propertyName": "sub_kind"}, "oneOf": []},
        }
        fact = specification({"x-snyk-api-stability": "ga", "components": {"schemas": schemas}})
        failed = failures(run([specification_rules], [fact]), "no nested discriminators")
        assert "Nested discriminators are not permitted" in failed[0].error


class TestJsonApiRules:
    """Test JSON:API status code, content and resource object rules."""

    @pytest.mark.parametrize("method,status,passed", [
        ("get", "200", True),
        ("get", "201", False),
        ("delete", "204", True),
        ("delete", "201", False),
        ("post", "201", True),
        ("post", "200", False),
        ("get", "404", True),
        ("get", "418", False),
    ])
    def test_status_codes(self, method, status, passed):
        results = run([status_code_rules], [response(status, {}, method=method)])
        assert [r.passed for r in results] == [passed]

    def test_batch_post_only_204(self):
        batch = {"requestBody": {"content": {JSON_API: {"schema": {
            "type": "object", "properties": {"data": {"type": "array"}},
        }}}}}
        facts = [operation(ChangeKind.UNCHANGED, method="post", value=batch), response("201", {}, method="post")]
        failed = failures(run([status_code_rules], facts))
        assert failed[0].rule_name == "valid 2xx status codes for batch post"
        assert failed[0].error == "expected POST response for batches to only support 204, not 201"

    def test_openapi_routes_pruned(self):
        assert run([status_code_rules], [response("418", {}, path="/openapi/{version}")]) == []

    def test_content_type(self):
        results = run([json_api_content_type], [response("200", {"content": {"application/json": {}}})])
        assert failures(results)[0].error == "expected response to support application/vnd.api+json"
        assert run([json_api_content_type], [response("204", {})]) == []

    def test_get_response_data_schema(self):
        collection = {
            "type": "object",
            "properties": {
                "data": {
                    "type": "array",
                    "items": {"properties": {"id": {"type": "string", "format": "uuid"}, "type": {"type": "string"}}},
                },
                "links": {"properties": {"self": {}}},
            },
        }
        results = named(run([resource_object_rules], [response_body("200", collection)]),
                        "valid get / post response data schema")
        assert [r.passed for r in results] == [True]

        bare = {"type": "object", "properties": {"data": {"type": "object"}}}
        results = named(run([resource_object_rules], [response_body("200", bare)]),
                        "valid get / post response data schema")
        assert results[0].error == "expected at least one partial match"

    def test_location_header_for_created(self):
        results = run([resource_object_rules], [response("201", {"content": {JSON_API: {}}}, method="post")])
        assert failures(results, "location header")[0].error == "expected response to have header location"

    def test_empty_204(self):
        results = run([resource_object_rules], [response("204", {"content": {JSON_API: {}}}, method="delete")])
        assert failures(results, "empty content for 204 status codes")[0].error == (
            "expected response to not have content"
        )

    def test_error_response_requires_content(self):
        """Test that non-2xx responses also need a body."""
        results = named(run([resource_object_rules], [response("400", {"description": "bad"})]),
                        "body is required for status!=[202,204,303]")
        assert [r.passed for r in results] == [False]
        assert results[0].error == "expected response to have content"

    @pytest.mark.parametrize("status", ["202", "303"])
    def test_content_not_required(self, status):
        results = run([resource_object_rules], [response(status, {"description": "ok"}, method="post")])
        assert named(results, "body is required for status!=[202,204,303]") == []

    def test_post_request_body(self):
        fact = Fact(FactKind.REQUEST, ChangeKind.ADDED, RequestLocation("/things", "post", JSON_API),
                    after={"contentType": JSON_API, "schema": {"type": "object", "properties": {"data": {"type": "object"}}}})
        results = run([resource_object_rules], [fact])
        assert failures(results, "request body for post")[0].error.startswith("expected a partial match")


class TestPaginationRules:
    """Test pagination rules for collection operations."""

    def test_collection_get_requires_parameters(self):
        value = {"parameters": [{"name": "limit", "in": "query"}]}
        results = run([pagination_rules], [operation(ChangeKind.ADDED, value=value)])
        assert [r.error for r in failures(results)] == [
            "expected operation to have a query parameter matching starting_after",
            "expected operation to have a query parameter matching ending_before",
        ]

    def test_non_get_rejects_parameters(self):
        value = {"parameters": [{"name": "limit", "in": "query"}]}
        results = run([pagination_rules], [operation(ChangeKind.ADDED, method="post", value=value)])
        assert [r.error for r in failures(results)] == [
            "expected operation to not support pagination parameter limit"
        ]

    def test_item_paths_pruned(self):
        assert run([pagination_rules], [operation(ChangeKind.ADDED, path="/things/{thing_id}")]) == []


class TestDocumentRules:
    """Test singleton and compound document rules."""

    def test_singleton_delete(self):
        facts = [
            specification({"paths": {"/self": {"x-snyk-resource-singleton": True}}}),
            operation(ChangeKind.ADDED, path="/self", method="delete"),
            operation(ChangeKind.ADDED, path="/self", method="get"),
        ]
        results = run([disallow_singleton_delete_or_post], facts)
        assert [(r.where, r.passed) for r in results] == [("DELETE /self", False), ("GET /self", True)]
        assert results[0].error == "delete is not allowed in JSON:API singletons"

    def test_compound_documents(self):
        schema = {"properties": {"data": {}, "included": {"type": "array"}}}
        results = run([compound_documents], [response_body("200", schema)])
        assert failures(results)[0].error == "expected not to partially match"


class TestActiveRuleset:
    """Test composition of the bundled rulesets."""

    def test_default_toggles(self):
        ruleset = build_active_ruleset(EngineConfig())
        assert [r.name for r in ruleset.rules][:3] == [
            "response header rules", "api lifecycle ruleset", "operation rules",
        ]
        assert len(ruleset.rules) == 11

    def test_compiled_has_no_lifecycle_rules(self):
        ruleset = build_active_ruleset(EngineConfig(variant="compiled"))
        assert "api lifecycle ruleset" not in [r.name for r in ruleset.rules]
        assert len(ruleset.rules) == 10

    def test_canonical_order(self):
        ruleset = build_active_ruleset(EngineConfig(rulesets=("pagination", "headers")))
        assert [r.name for r in ruleset.rules] == ["response header rules", "pagination"]

    def test_unknown_variant(self):
        with pytest.raises(ConfigError):
            build_active_ruleset(EngineConfig(variant="merged"))

    def test_unknown_toggle(self):
        with pytest.raises(ConfigError) as excinfo:
            build_active_ruleset(EngineConfig(rulesets=("headers", "graphql")))
        assert "graphql" in str(excinfo.value)

    def test_full_run(self):
        facts = [
            specification({"x-snyk-api-stability": "ga", "paths": {"/things": {}}}),
            operation(ChangeKind.ADDED, value={
                "operationId": "listThings",
                "tags": ["Things"],
                "summary": "List things",
                "parameters": [
                    {"name": name, "in": "query"}
                    for name in ("version", "starting_after", "ending_before", "limit")
                ],
            }),
            response("200", {"content": {JSON_API: {}}, "headers": {}}),
        ]
        report = run_rules(facts, custom())
        assert report.summary.total == len(report.results)
        assert {r.rule_name for r in report.failures} == {"standard headers"}
