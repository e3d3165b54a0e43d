"""Example usage of the apicompat rule engine."""

import json
from datetime import date

from apicompat import (
    ChangeKind,
    ChangeVersion,
    CustomContext,
    EngineConfig,
    Fact,
    FactKind,
    run_rules,
)
from apicompat.models import (
    OperationLocation,
    ParameterLocation,
    ResponseLocation,
    SpecificationLocation,
)

# Change metadata supplied by the caller
custom = CustomContext(
    change_date=date(2022, 3, 1),
    change_resource="invoices",
    change_version=ChangeVersion(date=date(2021, 11, 8), stability="beta"),
    resource_versions={
        "invoices": {
            "2021-11-08": {
                "beta": {"deprecatedBy": {"date": "2021-12-01", "stability": "beta"}}
            }
        }
    },
)

list_invoices = {
    "operationId": "listInvoices",
    "summary": "List invoices",
    "tags": ["Invoices"],
    "parameters": [
        {"name": "version", "in": "query", "required": True, "schema": {"type": "string"}},
        {"name": "org_id", "in": "path", "required": True, "schema": {"type": "string"}},
    ],
    "responses": {"200": {"description": "Invoices"}},
}

# Facts extracted from two versions of an OpenAPI document
facts = [
    Fact(
        kind=FactKind.SPECIFICATION,
        change=ChangeKind.CHANGED,
        location=SpecificationLocation(),
        before={"x-snyk-api-stability": "beta"},
        after={"x-snyk-api-stability": "ga"},  # Not an allowed promotion
    ),
    Fact(
        kind=FactKind.OPERATION,
        change=ChangeKind.ADDED,
        location=OperationLocation("/orgs/{org_id}/invoices", "get"),
        after=list_invoices,
    ),
    Fact(
        kind=FactKind.PATH_PARAMETER,
        change=ChangeKind.ADDED,
        location=ParameterLocation("/orgs/{org_id}/invoices", "get", "org_id", "path"),
        after=list_invoices["parameters"][1],  # Tenant ids must be uuids
    ),
    Fact(
        kind=FactKind.RESPONSE,
        change=ChangeKind.REMOVED,
        location=ResponseLocation("/orgs/{org_id}/invoices", "get", "404"),
        before={"description": "Not found"},  # Breaking for a beta version
    ),
]


def main():
    print("=" * 60)
    print("apicompat Rule Engine - Example")
    print("=" * 60)

    report = run_rules(facts, custom)
    report.print_summary()

    print("\n" + "-" * 60)
    print("Full JSON Report:")
    print(json.dumps(report.to_dict(), indent=2))


def example_with_selected_rulesets():
    """Example that enables only some rulesets."""
    print("\n" + "=" * 60)
    print("Example with Selected Rulesets")
    print("=" * 60)

    config = EngineConfig(rulesets=("lifecycle", "operations"))
    report = run_rules(facts, custom, config)

    print(f"\nPassed: {report.passed}")
    for result in report.failures:
        print(f"  - [{result.rule_name}] {result.where}")
        print(f"    {result.error}")
        if result.docs_link:
            print(f"    See: {result.docs_link}")


def example_compiled_document():
    """Example evaluating a compiled document, where lifecycle rules do not apply."""
    print("\n" + "=" * 60)
    print("Example with a Compiled Document")
    print("=" * 60)

    config = EngineConfig(variant="compiled")
    report = run_rules(facts, custom, config)
    print(f"\nResults: {report.summary.total}, failed: {report.summary.failed}")


if __name__ == "__main__":
    main()
    example_with_selected_rulesets()
    example_compiled_document()
