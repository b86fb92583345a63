from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from .config import RulesConfig
from .models import Grant, Researcher, TimesheetPeriod
from .rounding import contracted_monthly_hours


@dataclass(frozen=True)
class RuleContext:
    period: TimesheetPeriod
    researcher: Researcher
    grants: tuple[Grant, ...] = ()
    all_periods: tuple[TimesheetPeriod, ...] = ()
    rules_config: RulesConfig = field(default_factory=RulesConfig)

    @classmethod
    def build(
        cls,
        period: TimesheetPeriod,
        researcher: Researcher,
        grants: Iterable[Grant] = (),
        all_periods: Optional[Iterable[TimesheetPeriod]] = None,
        rules_config: Optional[RulesConfig] = None,
    ) -> "RuleContext":
        return cls(
            period=period,
            researcher=researcher,
            grants=tuple(grants),
            all_periods=tuple(all_periods or ()),
            rules_config=rules_config or RulesConfig(),
        )

    @property
    def contracted_monthly_hours(self) -> Decimal:
        return contracted_monthly_hours(self.researcher.contracted_hours_weekly)

    def active_grants(self) -> list[Grant]:
        """Grants whose [start, end] overlaps the period's calendar month."""
        start, end = self.period.period_start, self.period.period_end
        return [g for g in self.grants if g.overlaps(start, end)]

    def grant_by_id(self, grant_id: str) -> Optional[Grant]:
        for grant in self.grants:
            if grant.id == grant_id:
                return grant
        return None
