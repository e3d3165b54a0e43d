"""Load facts, change context and engine configuration from YAML or JSON files."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from .engine import RuleRunner, configure_logging
from .exceptions import ConfigError, ValidationError
from .models import (
    LOCATION_TYPES,
    ChangeKind,
    CustomContext,
    EngineConfig,
    Fact,
    FactKind,
    RunReport,
)
from .rulesets import build_active_ruleset

logger = logging.getLogger(__name__)


def _read_yaml(path: Path, what: str):
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path}")

    with open(path, 'r') as f:
        content = f.read()

    # JSON is valid YAML
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {what} file: {e}")


def _enum_value(enum_type, value, field_name: str):
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(f"unknown {field_name} {value!r}", {field_name: value})


def decode_location(kind: FactKind, data: Optional[dict]):
    """Build the location object a fact of `kind` requires."""
    location_type = LOCATION_TYPES[kind]
    fields = dict(data or {})
    if 'status_code' in fields and fields['status_code'] is not None:
        fields['status_code'] = str(fields['status_code'])
    if 'trail' in fields:
        fields['trail'] = tuple(str(part) for part in fields['trail'] or ())

    known = {f.name for f in dataclasses.fields(location_type)}
    unknown = sorted(set(fields) - known)
    if unknown:
        raise ValidationError(
            f"unexpected location fields for {kind.value}: {', '.join(unknown)}",
            {"fields": unknown}
        )
    try:
        return location_type(**fields)
    except TypeError as e:
        raise ValidationError(f"incomplete location for {kind.value}: {e}")


def decode_fact(data: dict) -> Fact:
    """Decode one `{kind, change, location, before, after}` mapping."""
    if not isinstance(data, dict):
        raise ValidationError("fact must be an object")
    kind = _enum_value(FactKind, data.get('kind'), 'kind')
    return Fact(
        kind=kind,
        change=_enum_value(ChangeKind, data.get('change'), 'change'),
        location=decode_location(kind, data.get('location')),
        before=data.get('before'),
        after=data.get('after'),
    )


def decode_input(data: dict) -> tuple[list[Fact], CustomContext]:
    """Decode a `{context, facts}` document."""
    if not isinstance(data, dict):
        raise ValidationError("input must be an object with 'context' and 'facts'")
    facts = [decode_fact(fact) for fact in data.get('facts') or []]
    custom = CustomContext.from_dict(data.get('context'))
    return facts, custom


def load_input(path: Union[str, Path]) -> tuple[list[Fact], CustomContext]:
    """Load and decode facts and change context from a YAML or JSON file."""
    facts, custom = decode_input(_read_yaml(Path(path), "Input"))
    logger.debug("Loaded %d facts from %s", len(facts), path)
    return facts, custom


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an EngineConfig from a YAML file."""
    data = _read_yaml(Path(path), "Config")
    if data is not None and not isinstance(data, dict):
        raise ConfigError('config', "expected a mapping")
    return EngineConfig.from_dict(data)


class FactsRunner:
    """
    Evaluates the configured rulesets against facts loaded from a file.

    Usage:
        runner = FactsRunner("changes.yaml")
        report = runner.run()
        report.print_summary()

    Or as a one-liner:
        report = FactsRunner.run_file("changes.yaml", print_report=True)
    """

    def __init__(
        self,
        input_path: Union[str, Path],
        config: Optional[EngineConfig] = None
    ):
        """
        Initialize the runner.

        Args:
            input_path: Path to a YAML/JSON document with `context` and `facts`
            config: Optional engine configuration
        """
        self.input_path = Path(input_path)
        self.config = config or EngineConfig()

    def run(self, print_report: bool = False) -> RunReport:
        """
        Load the input and evaluate it.

        Args:
            print_report: Whether to print the summary report

        Returns:
            RunReport with ordered results
        """
        configure_logging(self.config)
        facts, custom = load_input(self.input_path)
        runner = RuleRunner([build_active_ruleset(self.config)], self.config)
        report = runner.report(facts, custom)
        if print_report:
            report.print_summary()
        return report

    @classmethod
    def run_file(
        cls,
        input_path: Union[str, Path],
        config: Optional[EngineConfig] = None,
        print_report: bool = False
    ) -> RunReport:
        """Convenience class method to load and evaluate in one call."""
        return cls(input_path, config).run(print_report=print_report)
