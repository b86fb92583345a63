from __future__ import annotations

from ..context import RuleContext
from ..models import TimesheetStatus, ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class UKRI_TS_008_IMMUTABILITY(Rule):
    """Locked periods must carry a consistent set of milestone timestamps.

    Locking itself is enforced by the persistence layer; this rule only checks
    that a locked record is internally consistent.
    """

    rule_id = "UKRI-TS-008"
    rule_name = "Immutability verification"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Record Keeping — approved time records must be retained "
        "unmodified as audit evidence"
    )
    severity = ValidationSeverity.ERROR

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        if not self.config(ctx).enabled:
            return self.disabled()

        period = ctx.period
        if period.status != TimesheetStatus.LOCKED:
            return self.result(
                passed=True,
                message="Period is not locked — immutability check not applicable.",
                details={"status": period.status.value, "is_locked": False},
            )

        has_lock_timestamp = period.locked_at is not None
        has_signatures = period.signed_at is not None and period.countersigned_at is not None
        has_submission = period.submitted_at is not None

        issues = []
        if not has_lock_timestamp:
            issues.append("Period is marked as locked but has no lockedAt timestamp.")
        if not has_signatures:
            issues.append("Period is locked but is missing required signatures — this should not be possible.")
        if not has_submission:
            issues.append("Period is locked but has no submission timestamp — state integrity violated.")
        if period.locked_at and period.signed_at and period.locked_at < period.signed_at:
            issues.append("Period was locked before it was signed — state transition order violated.")
        if period.locked_at and period.countersigned_at and period.locked_at < period.countersigned_at:
            issues.append("Period was locked before it was countersigned — state transition order violated.")

        if not issues:
            message = "Locked period integrity verified — all timestamps and signatures are consistent."
        else:
            message = f"Locked period integrity issues: {' '.join(issues)}"

        return self.result(
            passed=not issues,
            message=message,
            details={
                "status": period.status.value,
                "is_locked": True,
                "has_lock_timestamp": has_lock_timestamp,
                "has_required_signatures": has_signatures,
                "has_submission": has_submission,
                "locked_at": period.locked_at,
                "signed_at": period.signed_at,
                "countersigned_at": period.countersigned_at,
                "submitted_at": period.submitted_at,
                "issues": issues,
            },
        )
