"""Rule runner: evaluates a ruleset tree against an ordered list of facts."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Optional, Sequence, Union

from .exceptions import RuleError
from .models import (
    CustomContext,
    EngineConfig,
    Fact,
    FactKind,
    LogLevel,
    OperationContext,
    Result,
    RuleContext,
    RunReport,
    SpecificationContext,
)
from .rules import Assertions, Rule, Ruleset
from .rulesets import build_active_ruleset
from .utils import is_singleton_path

logger = logging.getLogger(__name__)

Linter = Callable[[Sequence[Fact], CustomContext], Iterable[Result]]

_LOG_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

EXEMPTIONS_KEY = "x-optic-exemptions"


def configure_logging(config: EngineConfig):
    """Apply the configured level to the package logger."""
    logging.getLogger("apicompat").setLevel(_LOG_LEVELS[config.log_level])


class _FactIndex:
    """Operation and specification facts of one run, for building rule contexts."""

    def __init__(self, facts: Sequence[Fact]):
        self.operations: dict[tuple[str, str], Fact] = {}
        self.specification: Optional[Fact] = None

        for fact in facts:
            if fact.kind == FactKind.OPERATION:
                location = fact.location
                self.operations[(location.method.lower(), location.path)] = fact
            elif fact.kind == FactKind.SPECIFICATION and self.specification is None:
                self.specification = fact

    def specification_context(self) -> SpecificationContext:
        if self.specification is None:
            return SpecificationContext()
        return SpecificationContext(
            change=self.specification.change,
            value=self.specification.current,
        )

    def operation_context(
        self,
        fact: Fact,
        specification: SpecificationContext
    ) -> Optional[OperationContext]:
        location = fact.location
        if fact.kind == FactKind.SPECIFICATION:
            return None

        operation = self.operations.get((location.method.lower(), location.path))
        return OperationContext(
            path=location.path,
            method=location.method.lower(),
            change=operation.change if operation else None,
            value=operation.current if operation else None,
            is_singleton=is_singleton_path(specification.value, location.path),
        )


class RuleRunner:
    """
    Evaluates rulesets against facts.

    For each fact, in input order, the ruleset tree is walked depth-first. A
    ruleset whose gate is false prunes its whole subtree. Each callback that a
    matching rule registers and that applies to the fact's change kind yields
    one Result.
    """

    def __init__(
        self,
        rulesets: Sequence[Union[Rule, Ruleset]],
        config: Optional[EngineConfig] = None
    ):
        """
        Initialize the runner.

        Args:
            rulesets: Top-level rules or rulesets, evaluated in order
            config: Engine configuration (uses defaults if not provided)
        """
        self.rulesets = tuple(rulesets)
        self.config = config or EngineConfig()

    def run(
        self,
        facts: Sequence[Fact],
        custom: CustomContext,
        should_cancel: Optional[Callable[[], bool]] = None,
        linters: Sequence[Linter] = ()
    ) -> list[Result]:
        """
        Evaluate every applicable rule against every fact.

        Args:
            facts: Ordered facts from the fact extractor
            custom: Caller-supplied change metadata
            should_cancel: Checked between facts; when it returns True the run
                stops and the results gathered so far are returned
            linters: Opaque checkers whose results are appended after rule results

        Returns:
            Results in fact order, then rule order
        """
        return self.report(facts, custom, should_cancel, linters).results

    def report(
        self,
        facts: Sequence[Fact],
        custom: CustomContext,
        should_cancel: Optional[Callable[[], bool]] = None,
        linters: Sequence[Linter] = ()
    ) -> RunReport:
        """Like `run`, wrapped in a RunReport with summary statistics."""
        results: list[Result] = []
        index = _FactIndex(facts)
        specification = index.specification_context()
        cancelled = False

        for fact in facts:
            if should_cancel is not None and should_cancel():
                logger.warning("Run cancelled before %s", fact.key)
                cancelled = True
                break
            context = RuleContext(
                location=fact.location,
                custom=custom,
                operation=index.operation_context(fact, specification),
                specification=specification,
            )
            results.extend(self.evaluate_fact(fact, context))

        if not cancelled:
            for linter in linters:
                results.extend(linter(facts, custom))

        report = RunReport.from_results(results, cancelled=cancelled)
        logger.info(
            "Evaluated %d facts: %d results, %d failed",
            len(facts), report.summary.total, report.summary.failed
        )
        return report

    def evaluate_fact(self, fact: Fact, context: RuleContext) -> Iterator[Result]:
        """Yield the results of every applicable rule for a single fact."""
        logger.debug("Evaluating %s fact %s", fact.change.value, fact.key)
        for rule, docs_link in self._applicable_rules(self.rulesets, fact, context, None):
            assertions = Assertions(fact, context)
            rule.body(assertions)
            exempted = rule.name in _exemptions(fact)

            for check in assertions.checks:
                arguments = check.arguments(fact)
                if arguments is None:
                    continue
                error = None
                try:
                    check.callback(*arguments)
                except RuleError as e:
                    error = e.message
                yield Result(
                    rule_name=rule.name,
                    where=fact.location.where,
                    passed=error is None,
                    condition=check.condition,
                    change=fact.change,
                    error=error,
                    docs_link=docs_link,
                    exempted=exempted,
                )

    def _applicable_rules(
        self,
        nodes: Sequence[Union[Rule, Ruleset]],
        fact: Fact,
        context: RuleContext,
        docs_link: Optional[str]
    ) -> Iterator[tuple[Rule, Optional[str]]]:
        """Depth-first walk yielding (rule, docs link) for rules that apply."""
        for node in nodes:
            if isinstance(node, Ruleset):
                if not node.applies_to(context):
                    logger.debug("Ruleset '%s' skipped for %s", node.name, fact.key)
                    continue
                yield from self._applicable_rules(
                    node.rules, fact, context, node.docs_link or docs_link
                )
            elif node.applies_to(fact, context):
                yield node, node.docs_link or docs_link


def _exemptions(fact: Fact) -> list:
    value = fact.current
    if not isinstance(value, dict):
        return []
    exemptions = value.get(EXEMPTIONS_KEY)
    if isinstance(exemptions, (list, tuple)):
        return list(exemptions)
    return []


def run_rules(
    facts: Sequence[Fact],
    custom: CustomContext,
    config: Optional[EngineConfig] = None
) -> RunReport:
    """
    Convenience function to evaluate the configured rulesets.

    Args:
        facts: Ordered facts
        custom: Caller-supplied change metadata
        config: Optional engine configuration selecting the active rulesets

    Returns:
        RunReport with ordered results
    """
    config = config or EngineConfig()
    configure_logging(config)
    runner = RuleRunner([build_active_ruleset(config)], config)
    return runner.report(facts, custom)
