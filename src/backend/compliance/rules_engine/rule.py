from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel

from .config import RuleConfigBase, RulesConfig
from .context import RuleContext
from .models import Grant, Researcher, TimesheetPeriod, ValidationResult, ValidationSeverity


class Rule(ABC):
    rule_id: str
    rule_name: str
    funder_clause: str
    severity: ValidationSeverity
    config_model: Type[BaseModel] = RuleConfigBase

    def __init__(self):
        if not getattr(self, "rule_id", None):
            raise ValueError("Rule must define rule_id")

    @abstractmethod
    def evaluate(self, ctx: RuleContext) -> ValidationResult:  # pragma: no cover
        raise NotImplementedError

    def check(
        self,
        period: TimesheetPeriod,
        researcher: Researcher,
        grants: Iterable[Grant] = (),
        all_periods: Optional[Iterable[TimesheetPeriod]] = None,
        rules_config: Optional[RulesConfig] = None,
    ) -> ValidationResult:
        ctx = RuleContext.build(period, researcher, grants, all_periods, rules_config)
        return self.evaluate(ctx)

    def config(self, ctx: RuleContext):
        return ctx.rules_config.get_rule_config(self.rule_id, self.config_model)

    def result(
        self,
        *,
        passed: bool,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ValidationSeverity] = None,
    ) -> ValidationResult:
        return ValidationResult(
            rule_id=self.rule_id,
            rule_name=self.rule_name,
            funder_clause=self.funder_clause,
            severity=severity or self.severity,
            passed=passed,
            message=message,
            details=details or {},
        )

    def disabled(self) -> ValidationResult:
        return self.result(
            passed=True,
            message="Rule disabled by configuration.",
            severity=ValidationSeverity.INFO,
            details={"enabled": False},
        )
