"""UKRI salary cost calculation.

Methodology:

1. Contracted monthly hours = contracted hours per week x 52 / 12
2. Effort percentage = project hours for the month / contracted monthly hours
3. Monthly salary = annual salary / 12
4. Salary cost charged to grant = effort percentage x monthly salary
5. Claimable cost = salary cost x fEC rate (0.80 for UKRI)

Effort is measured against contracted hours, not hours actually worked
(apportionment). Part-time contracted hours and salary arrive already
pro-rated. Each step's displayed figure is rounded, and the rounded figure is
what later steps show in their formulas, so the working trail always reads
as arithmetic a reviewer can reproduce by hand.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from ..models import (
    CalculationResult,
    CalculationWorkings,
    FunderProfile,
    Grant,
    Researcher,
    TimesheetPeriod,
)
from ..rounding import (
    MONTHS_PER_YEAR,
    ZERO,
    contracted_monthly_hours,
    format_gbp,
    format_plain,
    round2,
    round4,
)

logger = logging.getLogger(__name__)

NO_HOURS_WARNING = "No hours recorded for this grant in this period. Claimable cost is £0."
# Effort above funded FTE x this factor is flagged for review.
OVER_ALLOCATION_FACTOR = Decimal("1.25")

APPORTIONMENT_NOTE = (
    "Uses contracted hours, not actual hours worked. This is the UKRI apportionment methodology — "
    "effort is measured against contractual obligation, not total hours physically worked."
)


def _percent(fraction: Decimal, places: int) -> str:
    return f"{fraction * 100:.{places}f}"


def calculate_ukri_salary_cost(
    period: TimesheetPeriod,
    researcher: Researcher,
    grant: Grant,
    funder_profile: FunderProfile,
) -> CalculationResult:
    warnings: List[str] = []
    workings: List[CalculationWorkings] = []

    project_hours = period.hours_for(grant.id)
    if project_hours == 0:
        warnings.append(NO_HOURS_WARNING)

    # Step 1
    monthly_hours = contracted_monthly_hours(researcher.contracted_hours_weekly)
    rounded_monthly_hours = round2(monthly_hours)
    workings.append(
        CalculationWorkings(
            step="Calculate contracted monthly hours",
            formula=(
                f"{format_plain(researcher.contracted_hours_weekly)} hours/week × 52 weeks ÷ 12 months"
                f" = {format_plain(rounded_monthly_hours)} hours/month"
            ),
            result=rounded_monthly_hours,
            notes=APPORTIONMENT_NOTE,
        )
    )

    # Step 2
    effort = project_hours / monthly_hours if monthly_hours > 0 else ZERO
    rounded_effort = round4(effort)
    effort_display = _percent(rounded_effort, 2)
    workings.append(
        CalculationWorkings(
            step="Calculate effort percentage",
            formula=(
                f"{format_plain(project_hours)} project hours ÷ {format_plain(rounded_monthly_hours)}"
                f" contracted hours = {effort_display}%"
            ),
            result=rounded_effort,
        )
    )

    # Step 3
    monthly_salary = researcher.annual_salary / MONTHS_PER_YEAR
    rounded_monthly_salary = round2(monthly_salary)
    salary_note = None
    if researcher.employment_fraction < 1:
        salary_note = (
            f"Researcher is {format_plain(researcher.employment_fraction)} FTE — "
            "salary is already pro-rated for part-time employment."
        )
    workings.append(
        CalculationWorkings(
            step="Calculate monthly salary",
            formula=f"{format_gbp(researcher.annual_salary)} ÷ 12 = {format_gbp(rounded_monthly_salary)}",
            result=rounded_monthly_salary,
            notes=salary_note,
        )
    )

    # Step 4
    rounded_salary_cost = round2(effort * monthly_salary)
    workings.append(
        CalculationWorkings(
            step="Calculate salary cost charged to grant",
            formula=(
                f"{effort_display}% × {format_gbp(rounded_monthly_salary)} = {format_gbp(rounded_salary_cost)}"
            ),
            result=rounded_salary_cost,
        )
    )

    # Step 5
    fec_rate = funder_profile.fec_rate
    if fec_rate is not None:
        claimable_cost = round2(rounded_salary_cost * fec_rate)
        fec_display = _percent(fec_rate, 0)
        workings.append(
            CalculationWorkings(
                step=f"Apply fEC rate ({funder_profile.name} {fec_display}%)",
                formula=(
                    f"{format_gbp(rounded_salary_cost)} × {format_plain(fec_rate)} = {format_gbp(claimable_cost)}"
                ),
                result=claimable_cost,
                notes=f"{funder_profile.name} funds at {fec_display}% of full Economic Cost.",
            )
        )
    else:
        claimable_cost = rounded_salary_cost
        workings.append(
            CalculationWorkings(
                step="No fEC rate applicable",
                formula=f"Claimable cost = salary cost = {format_gbp(rounded_salary_cost)}",
                result=rounded_salary_cost,
                notes="This funder does not apply a fEC rate adjustment.",
            )
        )

    if effort > grant.funded_fte * OVER_ALLOCATION_FACTOR:
        warnings.append(
            f"Effort this month ({effort_display}%) exceeds funded FTE ({_percent(grant.funded_fte, 0)}%)"
            " by more than 25%. Review for consistency."
        )

    logger.debug(
        "Salary cost for researcher=%s grant=%s %04d-%02d: hours=%s claimable=%s warnings=%d",
        researcher.id,
        grant.id,
        period.year,
        period.month,
        project_hours,
        claimable_cost,
        len(warnings),
    )

    return CalculationResult(
        grant_id=grant.id,
        researcher_id=researcher.id,
        period_year=period.year,
        period_month=period.month,
        project_hours=project_hours,
        contracted_monthly_hours=rounded_monthly_hours,
        effort_percentage=rounded_effort,
        monthly_salary=rounded_monthly_salary,
        salary_cost_charged=rounded_salary_cost,
        fec_rate=fec_rate,
        claimable_cost=claimable_cost,
        workings=workings,
        warnings=warnings,
    )
