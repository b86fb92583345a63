from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from compliance.rules_engine.calculation import (
    calculate_burn_rate,
    calculate_grant_total,
    calculate_ukri_salary_cost,
)
from compliance.rules_engine.config import RulesConfig
from compliance.rules_engine.context import RuleContext
from compliance.rules_engine.funder_profiles import get_funder_profile, list_funder_profiles
from compliance.rules_engine.models import (
    BurnRateResult,
    CalculationResult,
    FunderProfile,
    Grant,
    GrantTotalResult,
    Researcher,
    TimesheetPeriod,
    TimesheetStatus,
    ValidationReport,
)
from compliance.rules_engine.runner import ValidationRunner
from compliance.rules_engine.state_machine import transition_status


router = APIRouter(prefix="/timesheets", tags=["timesheets"])


class ReviewRequest(BaseModel):
    period: TimesheetPeriod
    researcher: Researcher
    grants: List[Grant] = Field(default_factory=list)
    all_periods: List[TimesheetPeriod] = Field(default_factory=list)
    rules: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class CalculateRequest(BaseModel):
    period: TimesheetPeriod
    researcher: Researcher
    grant: Grant


class GrantTotalRequest(BaseModel):
    grant: Grant
    periods: List[TimesheetPeriod] = Field(default_factory=list)
    researchers: List[Researcher] = Field(default_factory=list)


class BurnRateRequest(BaseModel):
    grant: Grant
    calculation_results: List[CalculationResult] = Field(default_factory=list)
    as_of: Optional[date] = None


class TransitionRequest(BaseModel):
    current_status: TimesheetStatus
    target_status: TimesheetStatus


class TransitionResponse(BaseModel):
    status: TimesheetStatus
    timestamp_field: str
    stamped_at: datetime
    message: str


def _require_funder_profile(funder_profile_id: str) -> FunderProfile:
    profile = get_funder_profile(funder_profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Unknown funder profile: {funder_profile_id}")
    return profile


@router.get("/funder-profiles", response_model=List[FunderProfile])
def funder_profiles():
    return list_funder_profiles()


@router.post("/review", response_model=ValidationReport)
def review_period(body: ReviewRequest):
    ctx = RuleContext.build(
        body.period,
        body.researcher,
        body.grants,
        body.all_periods,
        RulesConfig(rules=body.rules),
    )
    return ValidationRunner().run(ctx)


@router.post("/calculate", response_model=CalculationResult)
def calculate(body: CalculateRequest):
    profile = _require_funder_profile(body.grant.funder_profile_id)
    return calculate_ukri_salary_cost(body.period, body.researcher, body.grant, profile)


@router.post("/grant-total", response_model=GrantTotalResult)
def grant_total(body: GrantTotalRequest):
    profile = _require_funder_profile(body.grant.funder_profile_id)
    return calculate_grant_total(body.grant, body.periods, body.researchers, profile)


@router.post("/burn-rate", response_model=BurnRateResult)
def burn_rate(body: BurnRateRequest):
    return calculate_burn_rate(body.grant, body.calculation_results, as_of=body.as_of)


@router.post("/transition", response_model=TransitionResponse)
def transition(body: TransitionRequest):
    decision = transition_status(body.current_status, body.target_status)
    if not decision.valid:
        raise HTTPException(status_code=409, detail=decision.message)
    return TransitionResponse(
        status=body.target_status,
        timestamp_field=decision.timestamp_field,
        stamped_at=decision.update_data[decision.timestamp_field],
        message=decision.message,
    )
