from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from ..models import BurnRateResult, BurnRateStatus, CalculationResult, CalculationWorkings, Grant
from ..rounding import ZERO, format_gbp, round2

logger = logging.getLogger(__name__)

# Projected over/under spend within ± this fraction of budget counts as on track.
BURN_RATE_TOLERANCE = Decimal("0.1")


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end; day of month is ignored."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def calculate_burn_rate(
    grant: Grant,
    calculation_results: Iterable[CalculationResult],
    *,
    as_of: Optional[date] = None,
) -> BurnRateResult:
    """Project a grant's lifetime staff spend from what has been claimed so far.

    Answers "at the current pace, will we spend the budget?". ``as_of`` is the
    date treated as now; it defaults to today.
    """
    today = as_of or date.today()
    results = list(calculation_results)
    workings: List[CalculationWorkings] = []

    total_claimed = round2(sum((r.claimable_cost for r in results), ZERO))
    months_elapsed = max(1, months_between(grant.start_date, today))
    total_grant_months = max(1, months_between(grant.start_date, grant.end_date))
    months_remaining = max(0, total_grant_months - months_elapsed)

    workings.append(
        CalculationWorkings(
            step="Total claimed to date",
            formula=f"Sum of {len(results)} monthly calculation(s) = {format_gbp(total_claimed)}",
            result=total_claimed,
        )
    )

    average_monthly_burn = round2(total_claimed / months_elapsed)
    workings.append(
        CalculationWorkings(
            step="Average monthly burn rate",
            formula=(
                f"{format_gbp(total_claimed)} ÷ {months_elapsed} months = {format_gbp(average_monthly_burn)}/month"
            ),
            result=average_monthly_burn,
        )
    )

    projected_total = round2(average_monthly_burn * total_grant_months)
    workings.append(
        CalculationWorkings(
            step="Projected total cost at current burn rate",
            formula=(
                f"{format_gbp(average_monthly_burn)}/month × {total_grant_months} total months"
                f" = {format_gbp(projected_total)}"
            ),
            result=projected_total,
        )
    )

    budget = grant.total_staff_budget
    over_under = round2(projected_total - budget)
    if over_under > 0:
        over_under_note = "Projected to overspend staff budget at current rate."
    elif over_under < 0:
        over_under_note = "Projected to underspend staff budget at current rate."
    else:
        over_under_note = "Projected to spend exactly on budget."
    workings.append(
        CalculationWorkings(
            step="Projected over/under spend",
            formula=f"{format_gbp(projected_total)} - {format_gbp(budget)} = {format_gbp(over_under)}",
            result=over_under,
            notes=over_under_note,
        )
    )

    tolerance = budget * BURN_RATE_TOLERANCE
    if over_under > tolerance:
        status = BurnRateStatus.OVERSPENDING
    elif over_under < -tolerance:
        status = BurnRateStatus.UNDERSPENDING
    else:
        status = BurnRateStatus.ON_TRACK

    logger.debug(
        "Burn rate for grant=%s as of %s: elapsed=%d/%d monthly=%s projected=%s status=%s",
        grant.id,
        today.isoformat(),
        months_elapsed,
        total_grant_months,
        average_monthly_burn,
        projected_total,
        status.value,
    )

    return BurnRateResult(
        grant_id=grant.id,
        grant_reference=grant.reference,
        total_staff_budget=budget,
        total_claimed_to_date=total_claimed,
        months_elapsed=months_elapsed,
        months_remaining=months_remaining,
        average_monthly_burn=average_monthly_burn,
        projected_total_cost=projected_total,
        projected_over_under_spend=over_under,
        burn_rate_status=status,
        workings=workings,
    )
