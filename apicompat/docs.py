"""Documentation links attached to rule results."""

_STANDARDS = "https://github.com/snyk/sweater-comb/blob/main/docs/standards/rest.md"
_VERSIONING = "https://github.com/snyk/sweater-comb/blob/main/docs/principles/version.md"
_JSONAPI_PRINCIPLES = "https://github.com/snyk/sweater-comb/blob/main/docs/principles/jsonapi.md"


class Versioning:
    main = _VERSIONING
    promoting_stability = f"{_VERSIONING}#promoting-stability-of-a-resource-over-time"
    stability_levels = f"{_VERSIONING}#stability-levels"
    response_headers = f"{_VERSIONING}#versioning-response-headers"
    breaking_changes = f"{_VERSIONING}#breaking-changes"
    version_parameter = f"{_VERSIONING}#how-are-versions-accessed-and-resolved-by-consumers"


class Standards:
    status_codes = f"{_STANDARDS}#status-codes"
    header_case = f"{_STANDARDS}#header-field-names"
    open_api_versions = f"{_STANDARDS}#making-the-openapi-specification-available"
    org_and_group_tenants = f"{_STANDARDS}#organization-and-group-tenants-for-resources"
    tags = f"{_STANDARDS}#tags"
    formats = f"{_STANDARDS}#formats"
    operation_ids = f"{_STANDARDS}#operation-ids"
    operation_summary = f"{_STANDARDS}#operation-summary"
    parameter_names = f"{_STANDARDS}#parameter-names-and-path-components"
    timestamp_properties = f"{_STANDARDS}#timestamp-properties"
    component_naming = f"{_STANDARDS}#component-naming"
    polymorphic_objects = f"{_STANDARDS}#polymorphic-objects"


class JsonApi:
    content_type = "https://jsonapi.org/format/#content-negotiation-clients"
    resource_objects = "https://jsonapi.org/format/#document-resource-objects"
    pagination = f"{_JSONAPI_PRINCIPLES}#pagination-parameters"
    compound_documents = f"{_JSONAPI_PRINCIPLES}#compound-documents"
    post_requests = "https://jsonapi.org/format/#crud-creating"
    patch_requests = "https://jsonapi.org/format/#crud-updating"
    patch_responses = "https://jsonapi.org/format/#crud-updating-responses"
