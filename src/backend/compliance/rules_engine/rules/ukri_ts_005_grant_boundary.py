from __future__ import annotations

from ..context import RuleContext
from ..models import ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class UKRI_TS_005_GRANT_BOUNDARY(Rule):
    """No hours may be charged to a grant outside its start/end dates."""

    rule_id = "UKRI-TS-005"
    rule_name = "Grant period boundary"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Eligible Expenditure — costs must fall within the "
        "grant period"
    )
    severity = ValidationSeverity.ERROR

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        if not self.config(ctx).enabled:
            return self.disabled()

        period_start = ctx.period.period_start
        period_end = ctx.period.period_end
        violations = []
        labels = []

        for entry in ctx.period.entries:
            if entry.hours == 0:
                continue
            grant = ctx.grant_by_id(entry.grant_id)
            if grant is None:
                continue

            if grant.end_date < period_start:
                reason = f"Grant ended on {grant.end_date.isoformat()}, before this period."
            elif grant.start_date > period_end:
                reason = f"Grant starts on {grant.start_date.isoformat()}, after this period."
            else:
                continue
            labels.append(grant.label)
            violations.append(
                {
                    "grant_id": entry.grant_id,
                    "grant_reference": grant.reference,
                    "hours": entry.hours,
                    "reason": reason,
                }
            )

        if not violations:
            message = "All timesheet entries fall within their respective grant periods."
        else:
            message = (
                f"{len(violations)} entry/entries allocate hours to grants outside their active period: "
                f"{', '.join(labels)}."
            )

        return self.result(passed=not violations, message=message, details={"violations": violations})
