from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .config import RulesConfig
from .context import RuleContext
from .models import (
    Grant,
    Researcher,
    TimesheetPeriod,
    ValidationReport,
    ValidationResult,
    ValidationSeverity,
)
from .registry import registry

# Ensure built-in rules are imported/registered before the registry is read.
from . import rules as _builtin_rules  # noqa: F401

logger = logging.getLogger(__name__)


class ValidationRunner:
    def __init__(self, rules: Optional[Iterable] = None):
        self._rules = list(rules) if rules is not None else registry.create_all()

    def evaluate(self, ctx: RuleContext, *, rule_ids: Optional[set[str]] = None) -> List[ValidationResult]:
        results = []
        for rule in self._rules:
            if rule_ids is not None and rule.rule_id not in rule_ids:
                continue
            result = rule.evaluate(ctx)
            logger.debug(
                "%s period=%04d-%02d researcher=%s passed=%s severity=%s",
                rule.rule_id,
                ctx.period.year,
                ctx.period.month,
                ctx.researcher.id,
                result.passed,
                result.severity.value,
            )
            results.append(result)
        return results

    def run(self, ctx: RuleContext, *, rule_ids: Optional[set[str]] = None) -> ValidationReport:
        results = self.evaluate(ctx, rule_ids=rule_ids)

        totals: dict[ValidationSeverity, int] = {}
        for res in results:
            if not res.passed:
                totals[res.severity] = totals.get(res.severity, 0) + 1

        return ValidationReport(
            run_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            researcher_id=ctx.researcher.id,
            period_year=ctx.period.year,
            period_month=ctx.period.month,
            results=results,
            totals=totals,
            compliant=_errors_pass(results),
        )


def _errors_pass(results: Iterable[ValidationResult]) -> bool:
    return all(r.passed for r in results if r.severity == ValidationSeverity.ERROR)


def validate_timesheet_period(
    period: TimesheetPeriod,
    researcher: Researcher,
    grants: Iterable[Grant],
    all_periods: Optional[Iterable[TimesheetPeriod]] = None,
    rules_config: Optional[RulesConfig] = None,
) -> List[ValidationResult]:
    """Run every rule against a period, in rule table order."""
    ctx = RuleContext.build(period, researcher, grants, all_periods, rules_config)
    return ValidationRunner().evaluate(ctx)


def get_validation_errors(
    period: TimesheetPeriod,
    researcher: Researcher,
    grants: Iterable[Grant],
    all_periods: Optional[Iterable[TimesheetPeriod]] = None,
    rules_config: Optional[RulesConfig] = None,
) -> List[ValidationResult]:
    """Failed results only, any severity."""
    results = validate_timesheet_period(period, researcher, grants, all_periods, rules_config)
    return [r for r in results if not r.passed]


def is_compliant(
    period: TimesheetPeriod,
    researcher: Researcher,
    grants: Iterable[Grant],
    all_periods: Optional[Iterable[TimesheetPeriod]] = None,
    rules_config: Optional[RulesConfig] = None,
) -> bool:
    """True when every error-severity rule passes; warnings and info never block."""
    return _errors_pass(validate_timesheet_period(period, researcher, grants, all_periods, rules_config))
