"""
Bundled REST API rulesets and their composition.

Two variants are provided. `resource` checks a single resource version
document and includes the lifecycle rules. `compiled` checks merged
documents; its removal rules relax once an operation's sunset date passes.
"""

from __future__ import annotations

import logging

from ..exceptions import ConfigError
from ..models import RULESET_TOGGLES, VARIANTS, EngineConfig
from ..rules import Rule, Ruleset
from .headers import response_header_rules
from .jsonapi import (
    compound_documents,
    disallow_singleton_delete_or_post,
    json_api_content_type,
    pagination_rules,
    resource_object_rules,
    status_code_rules,
)
from .lifecycle_rules import lifecycle_ruleset
from .operations import operation_rules_compiled, operation_rules_resource
from .properties import property_rules_compiled, property_rules_resource
from .specification import specification_rules

logger = logging.getLogger(__name__)

_SHARED = {
    "headers": response_header_rules,
    "specification": specification_rules,
    "status_codes": status_code_rules,
    "content_type": json_api_content_type,
    "resource_objects": resource_object_rules,
    "pagination": pagination_rules,
    "singletons": disallow_singleton_delete_or_post,
    "compound_documents": compound_documents,
}

VARIANT_RULESETS: dict[str, dict[str, Rule | Ruleset]] = {
    "resource": dict(
        _SHARED,
        lifecycle=lifecycle_ruleset,
        operations=operation_rules_resource,
        properties=property_rules_resource,
    ),
    "compiled": dict(
        _SHARED,
        operations=operation_rules_compiled,
        properties=property_rules_compiled,
    ),
}


def build_active_ruleset(config: EngineConfig) -> Ruleset:
    """
    Compose the rulesets enabled by `config` into one top-level Ruleset.

    Toggles are applied in their canonical order regardless of the order
    given in the configuration. A toggle with no ruleset in the selected
    variant (e.g. `lifecycle` for compiled documents) contributes nothing.

    Raises:
        ConfigError: For an unknown variant or toggle
    """
    if config.variant not in VARIANTS:
        raise ConfigError('variant', f"unknown variant {config.variant}")
    unknown = [name for name in config.rulesets if name not in RULESET_TOGGLES]
    if unknown:
        raise ConfigError('rulesets', f"unknown rulesets {', '.join(unknown)}")

    available = VARIANT_RULESETS[config.variant]
    enabled = set(config.rulesets)
    rules = tuple(
        available[name] for name in RULESET_TOGGLES
        if name in enabled and name in available
    )
    logger.debug(
        "Active %s rulesets: %s", config.variant,
        ", ".join(name for name in RULESET_TOGGLES if name in enabled and name in available)
    )
    return Ruleset(name=f"{config.variant} rules", rules=rules)


__all__ = [
    'VARIANT_RULESETS',
    'build_active_ruleset',
]
