from __future__ import annotations

from ..config import HoursPlausibilityRuleConfig
from ..context import RuleContext
from ..models import ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rounding import round2
from ..rule import Rule


@register_rule
class UKRI_TS_004_HOURS_PLAUSIBILITY(Rule):
    """Grant plus non-grant hours should sit near contracted monthly hours."""

    rule_id = "UKRI-TS-004"
    rule_name = "Total hours plausibility"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Expenditure — time records must accurately reflect "
        "actual effort"
    )
    severity = ValidationSeverity.WARNING
    config_model = HoursPlausibilityRuleConfig

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        cfg: HoursPlausibilityRuleConfig = self.config(ctx)
        if not cfg.enabled:
            return self.disabled()

        researcher = ctx.researcher
        if researcher.contracted_hours_weekly <= 0:
            return self.result(
                passed=False,
                message="Cannot assess hours plausibility — researcher has no contracted hours recorded.",
                details={"contracted_hours_weekly": researcher.contracted_hours_weekly},
            )

        contracted = ctx.contracted_monthly_hours
        grant_hours = ctx.period.grant_hours
        non_grant_hours = ctx.period.non_grant_hours
        total_hours = grant_hours + non_grant_hours

        lower = contracted * (1 - cfg.tolerance)
        upper = contracted * (1 + cfg.tolerance)
        plausible = lower <= total_hours <= upper
        band = f"{cfg.tolerance * 100:.0f}%"

        if plausible:
            message = (
                f"Total hours ({total_hours:.1f}) are within plausible range of contracted hours "
                f"({contracted:.1f} ±{band})."
            )
        elif total_hours < lower:
            message = (
                f"Total hours ({total_hours:.1f}) are significantly below contracted hours ({contracted:.1f}). "
                f"Expected at least {lower:.1f} hours. Researcher may be under-reporting or on leave."
            )
        else:
            message = (
                f"Total hours ({total_hours:.1f}) significantly exceed contracted hours ({contracted:.1f}). "
                f"Expected at most {upper:.1f} hours. Review for accuracy."
            )

        return self.result(
            passed=plausible,
            message=message,
            details={
                "total_hours": total_hours,
                "grant_hours": grant_hours,
                "non_grant_hours": non_grant_hours,
                "contracted_monthly_hours": round2(contracted),
                "lower_bound": round2(lower),
                "upper_bound": round2(upper),
                "contracted_hours_weekly": researcher.contracted_hours_weekly,
            },
        )
