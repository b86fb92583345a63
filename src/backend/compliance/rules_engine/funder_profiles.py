from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import List, Mapping, Optional

from .models import FunderProfile

DEFAULT_FUNDER_PROFILE_ID = "ukri"
DEFAULT_SUBMISSION_DEADLINE_DAYS = 10


UKRI_PROFILE = FunderProfile(
    id="ukri",
    name="UK Research & Innovation",
    fec_rate=Decimal("0.8"),
    calculation_method="percentage_of_salary",
    time_capture="all_working_time",
    period_granularity="monthly",
    requires_pi_signature=True,
    submission_deadline_days=10,
    notes=(
        "UKRI funds at 80% of full Economic Cost (fEC). Researchers must record all working time, "
        "not just project time. Monthly timesheets require researcher signature and PI countersignature. "
        "Salary costs are calculated as a percentage of contracted hours apportioned to the grant."
    ),
)

_FUNDER_PROFILES: Mapping[str, FunderProfile] = MappingProxyType(
    {
        UKRI_PROFILE.id: UKRI_PROFILE,
    }
)


def get_funder_profile(funder_profile_id: str) -> Optional[FunderProfile]:
    return _FUNDER_PROFILES.get(funder_profile_id)


def list_funder_profiles() -> List[FunderProfile]:
    return list(_FUNDER_PROFILES.values())
