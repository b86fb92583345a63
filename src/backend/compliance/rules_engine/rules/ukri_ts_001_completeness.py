from __future__ import annotations

from ..context import RuleContext
from ..models import ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class UKRI_TS_001_COMPLETENESS(Rule):
    """Every active grant needs an entry for the month, even a zero-hour one.

    A grant with no timesheet entry for a month is missing evidence, which an
    auditor will flag as a gap.
    """

    rule_id = "UKRI-TS-001"
    rule_name = "Timesheet completeness"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Expenditure — staff costs must be evidenced by "
        "contemporaneous time records for all active grants"
    )
    severity = ValidationSeverity.ERROR

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        if not self.config(ctx).enabled:
            return self.disabled()

        active_grants = ctx.active_grants()
        entry_grant_ids = {e.grant_id for e in ctx.period.entries}
        missing = [g for g in active_grants if g.id not in entry_grant_ids]

        if not missing:
            message = "All active grants have timesheet entries for this period."
        else:
            message = (
                f"Missing timesheet entries for {len(missing)} active grant(s): "
                f"{', '.join(g.label for g in missing)}."
            )

        return self.result(
            passed=not missing,
            message=message,
            details={
                "active_grant_count": len(active_grants),
                "entry_count": len(ctx.period.entries),
                "missing_grants": [{"id": g.id, "reference": g.reference, "title": g.title} for g in missing],
            },
        )
