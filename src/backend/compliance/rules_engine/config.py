from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, Field

T = TypeVar("T", bound=BaseModel)


class RuleConfigBase(BaseModel):
    enabled: bool = True


class TimelinessRuleConfig(RuleConfigBase):
    # Used when the period's first grant has no registered funder profile.
    default_funder_profile_id: str = "ukri"
    default_deadline_days: int = 10
    # Strictly more than this many days late escalates from warning to error.
    very_late_days: int = 30


class HoursPlausibilityRuleConfig(RuleConfigBase):
    # Total recorded hours must fall within contracted monthly hours ± tolerance.
    tolerance: Decimal = Decimal("0.20")


class FTEConsistencyRuleConfig(RuleConfigBase):
    # Trailing window counted in calendar months, current month inclusive.
    window_months: int = 6
    min_periods: int = 3
    tolerance: Decimal = Decimal("0.25")


class CombinedFTECapRuleConfig(RuleConfigBase):
    epsilon: Decimal = Decimal("0.001")


class RulesConfig(BaseModel):
    """Per-deployment configuration for the validation rules.

    Keys are rule ids (e.g. ``UKRI-TS-004``); rules pull their typed config via
    `get_rule_config`. Absent keys fall back to the rule's defaults.
    """

    rules: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    def get_rule_config(
        self,
        rule_id: str,
        model: Type[T],
        default: Optional[T] = None,
    ) -> T:
        if rule_id not in self.rules:
            if default is not None:
                return default
            return model()  # type: ignore[call-arg]
        raw = self.rules.get(rule_id, {})
        return model.model_validate(raw)

    @classmethod
    def from_file(cls, path: Path) -> "RulesConfig":
        text = path.read_text()
        if path.suffix.lower() in (".yaml", ".yml"):
            raw = yaml.safe_load(text) or {}
        else:
            raw = json.loads(text)
        if "rules" not in raw:
            raw = {"rules": raw}
        return cls.model_validate(raw)
