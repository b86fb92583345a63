from __future__ import annotations

from ..context import RuleContext
from ..models import ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class UKRI_TS_002_SIGNATURE(Rule):
    """Researcher signature and PI countersignature; unsigned timesheets mean disallowed costs."""

    rule_id = "UKRI-TS-002"
    rule_name = "Signature present"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Expenditure — time records must be signed by the "
        "researcher and countersigned by the Principal Investigator"
    )
    severity = ValidationSeverity.ERROR

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        if not self.config(ctx).enabled:
            return self.disabled()

        period = ctx.period
        has_signature = period.signed_at is not None
        has_countersignature = period.countersigned_at is not None
        passed = has_signature and has_countersignature

        if passed:
            message = "Timesheet is signed by researcher and countersigned by PI."
        elif not has_signature and not has_countersignature:
            message = "Timesheet is missing both researcher signature and PI countersignature."
        elif not has_signature:
            message = "Timesheet is missing researcher signature."
        else:
            message = "Timesheet is missing PI countersignature."

        return self.result(
            passed=passed,
            message=message,
            details={
                "has_researcher_signature": has_signature,
                "has_pi_countersignature": has_countersignature,
                "signed_at": period.signed_at,
                "countersigned_at": period.countersigned_at,
            },
        )
