from __future__ import annotations

from ..config import CombinedFTECapRuleConfig
from ..context import RuleContext
from ..models import ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rounding import ZERO, round2, round3
from ..rule import Rule


@register_rule
class UKRI_TS_007_COMBINED_FTE_CAP(Rule):
    """Total grant FTE in the month must not exceed the researcher's employment fraction.

    Someone employed at 0.8 FTE cannot be charged 0.5 FTE to each of two grants.
    """

    rule_id = "UKRI-TS-007"
    rule_name = "Combined FTE cap"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Eligible Expenditure — total effort charged across all "
        "grants must not exceed the researcher's employment fraction"
    )
    severity = ValidationSeverity.ERROR
    config_model = CombinedFTECapRuleConfig

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        cfg: CombinedFTECapRuleConfig = self.config(ctx)
        if not cfg.enabled:
            return self.disabled()

        researcher = ctx.researcher
        period = ctx.period
        contracted = ctx.contracted_monthly_hours

        if contracted <= 0:
            total_hours = sum((period.hours_for(g.id) for g in ctx.grants), ZERO)
            if total_hours == 0:
                message = "No hours recorded and no contracted hours — check not applicable."
            else:
                message = (
                    "Cannot calculate FTE — researcher has no contracted hours recorded, but hours have been "
                    "charged to grants."
                )
            return self.result(
                passed=total_hours == 0,
                message=message,
                details={
                    "contracted_monthly_hours": ZERO,
                    "total_grant_hours": total_hours,
                    "employment_fraction": researcher.employment_fraction,
                },
            )

        allocations = []
        for grant in ctx.grants:
            hours = period.hours_for(grant.id)
            allocations.append(
                {
                    "grant_id": grant.id,
                    "grant_reference": grant.reference,
                    "hours": hours,
                    "fte": round3(hours / contracted),
                }
            )

        total_fte = round3(sum((a["fte"] for a in allocations), ZERO))
        fraction = researcher.employment_fraction
        passed = total_fte <= fraction + cfg.epsilon

        if passed:
            message = f"Combined grant FTE ({total_fte}) is within employment fraction ({fraction})."
        else:
            message = (
                f"Combined grant FTE ({total_fte}) exceeds employment fraction ({fraction}). Excess effort of "
                f"{round3(total_fte - fraction)} FTE cannot be charged to grants."
            )

        return self.result(
            passed=passed,
            message=message,
            details={
                "grant_allocations": allocations,
                "total_grant_fte": total_fte,
                "employment_fraction": fraction,
                "contracted_monthly_hours": round2(contracted),
            },
        )
