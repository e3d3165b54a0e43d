"""
apicompat - Compatibility Rule Engine for Versioned REST APIs

Evaluates declarative rulesets against the facts extracted from two
versions of an OpenAPI document and reports which changes break the
API's compatibility, naming and lifecycle standards.
"""

from .engine import RuleRunner, run_rules
from .exceptions import (
    ApiCompatError,
    ConfigError,
    RuleError,
    UnexpectedStabilityError,
    ValidationError,
)
from .lifecycle import (
    SunsetPolicy,
    is_allowed_transition,
    is_sunset_satisfied,
    is_valid_stability,
    sunset_required_days,
)
from .loader import (
    FactsRunner,
    load_config,
    load_input,
)
from .matchers import (
    Matcher,
    Matchers,
    matches,
    matches_one_of,
    not_matches,
)
from .models import (
    ChangeKind,
    ChangeVersion,
    CustomContext,
    EngineConfig,
    Fact,
    FactKind,
    Result,
    RuleContext,
    RunReport,
)
from .rules import Assertions, Rule, Ruleset
from .rulesets import build_active_ruleset

__version__ = "1.0.0"
__all__ = [
    # Engine
    "RuleRunner",
    "run_rules",
    "EngineConfig",
    # Rules
    "Rule",
    "Ruleset",
    "Assertions",
    "build_active_ruleset",
    # Matching
    "Matcher",
    "Matchers",
    "matches",
    "matches_one_of",
    "not_matches",
    # Facts and context
    "Fact",
    "FactKind",
    "ChangeKind",
    "ChangeVersion",
    "CustomContext",
    "RuleContext",
    # Reports
    "Result",
    "RunReport",
    # Lifecycle
    "SunsetPolicy",
    "is_allowed_transition",
    "is_sunset_satisfied",
    "is_valid_stability",
    "sunset_required_days",
    # Loading
    "FactsRunner",
    "load_config",
    "load_input",
    # Errors
    "ApiCompatError",
    "ConfigError",
    "RuleError",
    "UnexpectedStabilityError",
    "ValidationError",
]
