from __future__ import annotations

import calendar
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CaseInsensitiveEnum(str, Enum):
    # Storage layers persist statuses/categories upper-case ("LOCKED").
    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class TimesheetStatus(_CaseInsensitiveEnum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    SIGNED = "signed"
    COUNTERSIGNED = "countersigned"
    LOCKED = "locked"


class NonGrantCategory(_CaseInsensitiveEnum):
    TEACHING = "teaching"
    ADMIN = "admin"
    OTHER_RESEARCH = "other_research"
    LEAVE = "leave"
    OTHER = "other"


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class BurnRateStatus(str, Enum):
    ON_TRACK = "on_track"
    UNDERSPENDING = "underspending"
    OVERSPENDING = "overspending"


FunderMethodology = Literal["percentage_of_salary", "half_day_rate", "quarterly_total"]


class Researcher(BaseModel):
    id: str
    name: str = ""
    email: str = ""
    department: str = ""
    contracted_hours_weekly: Decimal
    # Already reflects part-time pro-rating.
    employment_fraction: Decimal = Decimal("1")
    annual_salary: Decimal
    salary_effective_date: Optional[date] = None
    institution_id: str = ""


class Grant(BaseModel):
    id: str
    funder_profile_id: str = "ukri"
    title: str = ""
    reference: str = ""
    start_date: date
    end_date: date
    funded_fte: Decimal
    total_staff_budget: Decimal = Decimal("0")
    principal_investigator_id: str = ""
    institution_id: str = ""

    @property
    def label(self) -> str:
        """Reference for messages; falls back to the id when no reference is recorded."""
        return self.reference or self.id

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


class TimesheetEntry(BaseModel):
    id: str = ""
    timesheet_period_id: str = ""
    grant_id: str
    hours: Decimal
    notes: Optional[str] = None


class NonGrantEntry(BaseModel):
    id: str = ""
    timesheet_period_id: str = ""
    category: NonGrantCategory
    hours: Decimal
    description: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value


class TimesheetPeriod(BaseModel):
    """One calendar month of effort for one researcher."""

    id: str = ""
    researcher_id: str = ""
    year: int
    month: int = Field(ge=1, le=12)
    status: TimesheetStatus = TimesheetStatus.DRAFT

    submitted_at: Optional[datetime] = None
    signed_at: Optional[datetime] = None
    countersigned_at: Optional[datetime] = None
    locked_at: Optional[datetime] = None

    entries: List[TimesheetEntry] = Field(default_factory=list)
    non_grant_entries: List[NonGrantEntry] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("non_grant_entries", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("submitted_at", "signed_at", "countersigned_at", "locked_at")
    @classmethod
    def _naive_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Milestones are compared with each other, so all must be timezone-aware.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def period_start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def period_end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def month_index(self) -> int:
        return self.year * 12 + (self.month - 1)

    def entry_for(self, grant_id: str) -> Optional[TimesheetEntry]:
        for entry in self.entries:
            if entry.grant_id == grant_id:
                return entry
        return None

    def hours_for(self, grant_id: str) -> Decimal:
        entry = self.entry_for(grant_id)
        return entry.hours if entry is not None else Decimal("0")

    @property
    def grant_hours(self) -> Decimal:
        return sum((e.hours for e in self.entries), Decimal("0"))

    @property
    def non_grant_hours(self) -> Decimal:
        return sum((e.hours for e in self.non_grant_entries), Decimal("0"))


class FunderProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    # Fraction of full Economic Cost funded; None when the funder applies no fEC adjustment.
    fec_rate: Optional[Decimal] = None
    calculation_method: FunderMethodology = "percentage_of_salary"
    time_capture: Literal["project_only", "all_working_time"] = "all_working_time"
    period_granularity: Literal["daily", "weekly", "monthly"] = "monthly"
    requires_pi_signature: bool = True
    submission_deadline_days: int = 10
    working_days_per_year: Optional[int] = None
    notes: str = ""


class CalculationWorkings(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: str
    formula: str
    result: Decimal
    notes: Optional[str] = None


class CalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    grant_id: str
    researcher_id: str
    period_year: int
    period_month: int
    project_hours: Decimal
    contracted_monthly_hours: Decimal
    effort_percentage: Decimal
    monthly_salary: Decimal
    salary_cost_charged: Decimal
    fec_rate: Optional[Decimal] = None
    claimable_cost: Decimal
    workings: List[CalculationWorkings] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ResearcherGrantTotal(BaseModel):
    model_config = ConfigDict(frozen=True)

    researcher_id: str
    researcher_name: str = ""
    total_claimable: Decimal
    monthly_breakdown: List[CalculationResult] = Field(default_factory=list)


class GrantTotalResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    grant_id: str
    grant_reference: str = ""
    total_claimable_cost: Decimal
    total_staff_budget: Decimal
    percent_budget_used: Decimal
    by_researcher: List[ResearcherGrantTotal] = Field(default_factory=list)
    workings: List[CalculationWorkings] = Field(default_factory=list)


class BurnRateResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    grant_id: str
    grant_reference: str = ""
    total_staff_budget: Decimal
    total_claimed_to_date: Decimal
    months_elapsed: int
    months_remaining: int
    average_monthly_burn: Decimal
    projected_total_cost: Decimal
    projected_over_under_spend: Decimal
    burn_rate_status: BurnRateStatus
    workings: List[CalculationWorkings] = Field(default_factory=list)


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str
    rule_name: str
    funder_clause: str = ""
    severity: ValidationSeverity
    passed: bool
    message: str = ""
    details: Dict[str, Any] = Field(default_factory=dict)


class ValidationReport(BaseModel):
    run_id: str
    generated_at: datetime
    researcher_id: str
    period_year: int
    period_month: int

    results: List[ValidationResult] = Field(default_factory=list)
    totals: Dict[ValidationSeverity, int] = Field(default_factory=dict)
    compliant: bool = True

    @property
    def failures(self) -> List[ValidationResult]:
        return [r for r in self.results if not r.passed]
