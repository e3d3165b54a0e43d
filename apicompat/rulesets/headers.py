"""Response header rules."""

from __future__ import annotations

from ..docs import Standards, Versioning
from ..exceptions import RuleError
from ..models import FactKind
from ..naming import DEFAULT_NAMING
from ..rules import Rule, Ruleset
from .common import operation_path

STANDARD_RESPONSE_HEADERS = (
    "snyk-request-id",
    "deprecation",
    "snyk-version-lifecycle-stage",
    "snyk-version-requested",
    "snyk-version-served",
    "sunset",
)


def _header_name_case(assertions):
    name = assertions.fact.location.name

    def check(header):
        if not DEFAULT_NAMING.is_kebab_case(name):
            raise RuleError(f"{name} is not kebab-case")

    assertions.added("be kebab-case", check)
    assertions.changed("be kebab-case", lambda before, after: check(after))


header_name_case = Rule(
    name="header case",
    docs_link=Standards.header_case,
    kinds=(FactKind.RESPONSE_HEADER,),
    body=_header_name_case,
)


def _standard_headers(assertions):
    for header_name in STANDARD_RESPONSE_HEADERS:
        assertions.requirement.has_response_header_matching(header_name, {})


standard_headers = Rule(
    name="standard headers",
    docs_link=Versioning.response_headers,
    kinds=(FactKind.RESPONSE,),
    matches=lambda fact, context: not operation_path(context).startswith("/openapi"),
    body=_standard_headers,
)

response_header_rules = Ruleset(
    name="response header rules",
    rules=(header_name_case, standard_headers),
)
