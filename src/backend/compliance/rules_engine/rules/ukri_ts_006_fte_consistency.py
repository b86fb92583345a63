from __future__ import annotations

from decimal import Decimal

from ..config import FTEConsistencyRuleConfig
from ..context import RuleContext
from ..models import TimesheetPeriod, ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rounding import ZERO, round2, round3
from ..rule import Rule


def periods_in_window(
    current: TimesheetPeriod,
    all_periods: tuple[TimesheetPeriod, ...],
    grant_id: str,
    window_months: int,
) -> list[TimesheetPeriod]:
    """Periods from the trailing window (current month inclusive) that carry an entry for the grant."""
    newest = current.month_index
    oldest = newest - (window_months - 1)
    return [
        p
        for p in all_periods
        if oldest <= p.month_index <= newest and p.entry_for(grant_id) is not None
    ]


@register_rule
class UKRI_TS_006_FTE_CONSISTENCY(Rule):
    """Average monthly allocation to each grant should track its funded FTE.

    Grants with fewer than ``min_periods`` periods in the window are skipped.
    """

    rule_id = "UKRI-TS-006"
    rule_name = "FTE consistency"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Expenditure — effort charged to the grant should be "
        "consistent with the funded FTE allocation"
    )
    severity = ValidationSeverity.WARNING
    config_model = FTEConsistencyRuleConfig

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        cfg: FTEConsistencyRuleConfig = self.config(ctx)
        if not cfg.enabled:
            return self.disabled()

        contracted = ctx.contracted_monthly_hours
        if contracted <= 0:
            return self.result(
                passed=True,
                message="Researcher has no contracted hours recorded — FTE consistency check not applicable.",
                details={"warnings": [], "contracted_monthly_hours": ZERO, "window_months": cfg.window_months},
            )

        warnings = []
        labels = []
        skipped = []
        for grant in ctx.grants:
            relevant = periods_in_window(ctx.period, ctx.all_periods, grant.id, cfg.window_months)
            if len(relevant) < cfg.min_periods:
                skipped.append(grant.id)
                continue

            total_hours = sum((p.hours_for(grant.id) for p in relevant), ZERO)
            average_fte = total_hours / len(relevant) / contracted

            lower = grant.funded_fte * (1 - cfg.tolerance)
            upper = grant.funded_fte * (1 + cfg.tolerance)
            if lower <= average_fte <= upper:
                continue
            labels.append(grant.label)
            warnings.append(
                {
                    "grant_id": grant.id,
                    "grant_reference": grant.reference,
                    "funded_fte": grant.funded_fte,
                    "average_fte": round3(average_fte),
                    "periods_counted": len(relevant),
                    "deviation": "under-allocated" if average_fte < lower else "over-allocated",
                }
            )

        if not warnings:
            message = "Grant allocations are consistent with funded FTE over the rolling window."
        else:
            listed = "; ".join(
                f"{label} (funded {w['funded_fte']} FTE, actual {w['average_fte']} FTE — "
                f"{w['deviation']})"
                for label, w in zip(labels, warnings)
            )
            message = f"{len(warnings)} grant(s) show inconsistent FTE allocation: {listed}."

        return self.result(
            passed=not warnings,
            message=message,
            details={
                "warnings": warnings,
                "skipped_grants": skipped,
                "contracted_monthly_hours": round2(contracted),
                "window_months": cfg.window_months,
            },
        )
