from __future__ import annotations

from datetime import datetime, time, timedelta

from ..config import TimelinessRuleConfig
from ..context import RuleContext
from ..funder_profiles import get_funder_profile
from ..models import ValidationResult, ValidationSeverity
from ..registry import register_rule
from ..rule import Rule


@register_rule
class UKRI_TS_003_TIMELINESS(Rule):
    """Submission within the funder's deadline after period end.

    Late by up to ``very_late_days`` is a warning; later than that, or never
    submitted, is an error. The deadline comes from the funder profile of the
    first grant supplied, so callers with multi-funder researchers control
    which funder's deadline applies through grant ordering.
    """

    rule_id = "UKRI-TS-003"
    rule_name = "Timeliness of submission"
    funder_clause = (
        "UKRI Terms and Conditions of Grant, Section: Expenditure — time records must be completed "
        "contemporaneously"
    )
    severity = ValidationSeverity.ERROR
    config_model = TimelinessRuleConfig

    def evaluate(self, ctx: RuleContext) -> ValidationResult:
        cfg: TimelinessRuleConfig = self.config(ctx)
        if not cfg.enabled:
            return self.disabled()

        period = ctx.period
        if period.submitted_at is None:
            return self.result(
                passed=False,
                message="Timesheet has not been submitted.",
                severity=ValidationSeverity.ERROR,
                details={"submitted_at": None, "period_end": None, "days_late": None},
            )

        funder_profile_id = ctx.grants[0].funder_profile_id if ctx.grants else cfg.default_funder_profile_id
        profile = get_funder_profile(funder_profile_id)
        deadline_days = profile.submission_deadline_days if profile is not None else cfg.default_deadline_days

        period_end = period.period_end
        submitted_at = period.submitted_at
        deadline = datetime.combine(period_end + timedelta(days=deadline_days), time.min, tzinfo=submitted_at.tzinfo)
        days_late = max(0, (submitted_at - deadline) // timedelta(days=1))

        if days_late == 0:
            severity = ValidationSeverity.INFO
            message = "Timesheet was submitted on time."
        elif days_late > cfg.very_late_days:
            severity = ValidationSeverity.ERROR
            message = (
                f"Timesheet was submitted {days_late} days after the deadline (more than {cfg.very_late_days} "
                "days late). This raises serious concerns about contemporaneous completion."
            )
        else:
            severity = ValidationSeverity.WARNING
            message = (
                f"Timesheet was submitted {days_late} day(s) after the deadline. Consider submitting within "
                f"{deadline_days} days of period end."
            )

        return self.result(
            passed=days_late == 0,
            message=message,
            severity=severity,
            details={
                "submitted_at": submitted_at,
                "period_end": period_end.isoformat(),
                "funder_profile_id": funder_profile_id,
                "deadline_days": deadline_days,
                "deadline": deadline.isoformat(),
                "days_late": days_late,
            },
        )
