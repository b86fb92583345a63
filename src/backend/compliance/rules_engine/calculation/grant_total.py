from __future__ import annotations

import logging
from typing import Iterable, List

from ..models import (
    CalculationResult,
    CalculationWorkings,
    FunderProfile,
    Grant,
    GrantTotalResult,
    Researcher,
    ResearcherGrantTotal,
    TimesheetPeriod,
)
from ..rounding import ZERO, format_gbp, round2
from .ukri_salary_cost import calculate_ukri_salary_cost

logger = logging.getLogger(__name__)


def calculate_grant_total(
    grant: Grant,
    all_periods: Iterable[TimesheetPeriod],
    researchers: Iterable[Researcher],
    funder_profile: FunderProfile,
) -> GrantTotalResult:
    """Total claimable cost for a grant across all researchers and all months.

    Per-researcher totals are rounded before they are summed into the grant
    total, matching the figures shown in the per-researcher working steps.
    """
    periods = list(all_periods)
    workings: List[CalculationWorkings] = []
    by_researcher: List[ResearcherGrantTotal] = []
    total_claimable = ZERO

    for researcher in researchers:
        monthly_breakdown: List[CalculationResult] = []
        researcher_total = ZERO

        for period in periods:
            if period.researcher_id != researcher.id:
                continue
            if period.entry_for(grant.id) is None:
                continue
            result = calculate_ukri_salary_cost(period, researcher, grant, funder_profile)
            monthly_breakdown.append(result)
            researcher_total += result.claimable_cost

        if not monthly_breakdown:
            continue

        rounded_researcher_total = round2(researcher_total)
        by_researcher.append(
            ResearcherGrantTotal(
                researcher_id=researcher.id,
                researcher_name=researcher.name,
                total_claimable=rounded_researcher_total,
                monthly_breakdown=monthly_breakdown,
            )
        )
        workings.append(
            CalculationWorkings(
                step=f"Total for {researcher.name or researcher.id}",
                formula=(
                    f"Sum of {len(monthly_breakdown)} monthly calculations = {format_gbp(rounded_researcher_total)}"
                ),
                result=rounded_researcher_total,
            )
        )
        total_claimable += rounded_researcher_total

    rounded_total = round2(total_claimable)
    budget = grant.total_staff_budget
    percent_used = round2(rounded_total / budget * 100) if budget > 0 else round2(ZERO)

    workings.append(
        CalculationWorkings(
            step="Grant total claimable cost",
            formula=f"Sum across {len(by_researcher)} researcher(s) = {format_gbp(rounded_total)}",
            result=rounded_total,
        )
    )
    workings.append(
        CalculationWorkings(
            step="Budget utilisation",
            formula=f"{format_gbp(rounded_total)} ÷ {format_gbp(budget)} = {percent_used}%",
            result=percent_used,
        )
    )

    logger.debug(
        "Grant total for grant=%s: researchers=%d total=%s budget_used=%s%%",
        grant.id,
        len(by_researcher),
        rounded_total,
        percent_used,
    )

    return GrantTotalResult(
        grant_id=grant.id,
        grant_reference=grant.reference,
        total_claimable_cost=rounded_total,
        total_staff_budget=budget,
        percent_budget_used=percent_used,
        by_researcher=by_researcher,
        workings=workings,
    )
