import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import compliance...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import date, datetime

import pytest

from compliance.rules_engine.config import RulesConfig
from compliance.rules_engine.context import RuleContext
from compliance.rules_engine.models import (
    Grant,
    NonGrantEntry,
    Researcher,
    TimesheetEntry,
    TimesheetPeriod,
)


@pytest.fixture
def make_researcher():
    def _make(**overrides) -> Researcher:
        data = {
            "id": "r1",
            "name": "Dr Test",
            "email": "test@test.ac.uk",
            "department": "Testing",
            "contracted_hours_weekly": "35",
            "employment_fraction": "1.0",
            "annual_salary": "50000",
            "salary_effective_date": date(2024, 1, 1),
            "institution_id": "inst1",
        }
        data.update(overrides)
        return Researcher(**data)

    return _make


@pytest.fixture
def make_grant():
    def _make(**overrides) -> Grant:
        data = {
            "id": "g1",
            "funder_profile_id": "ukri",
            "title": "Test Grant",
            "reference": "UKRI-001",
            "start_date": date(2024, 1, 1),
            "end_date": date(2024, 12, 31),
            "funded_fte": "0.5",
            "total_staff_budget": "25000",
            "principal_investigator_id": "pi1",
            "institution_id": "inst1",
        }
        data.update(overrides)
        return Grant(**data)

    return _make


@pytest.fixture
def make_entry():
    def _make(*, grant_id: str = "g1", hours="75", entry_id: str = "e1", notes=None) -> TimesheetEntry:
        return TimesheetEntry(id=entry_id, timesheet_period_id="tp1", grant_id=grant_id, hours=hours, notes=notes)

    return _make


@pytest.fixture
def make_non_grant_entry():
    def _make(*, category: str = "teaching", hours="40", description=None) -> NonGrantEntry:
        return NonGrantEntry(timesheet_period_id="tp1", category=category, hours=hours, description=description)

    return _make


@pytest.fixture
def make_period():
    def _make(**overrides) -> TimesheetPeriod:
        data = {
            "id": "tp1",
            "researcher_id": "r1",
            "year": 2024,
            "month": 6,
            "status": "submitted",
            "submitted_at": datetime(2024, 7, 5),
            "signed_at": datetime(2024, 7, 6),
            "countersigned_at": datetime(2024, 7, 7),
            "locked_at": None,
            "entries": [],
        }
        data.update(overrides)
        return TimesheetPeriod(**data)

    return _make


@pytest.fixture
def make_ctx(make_researcher):
    def _make(
        *,
        period: TimesheetPeriod,
        researcher: Researcher | None = None,
        grants=(),
        all_periods=(),
        client_rules: dict | None = None,
    ) -> RuleContext:
        return RuleContext(
            period=period,
            researcher=researcher or make_researcher(),
            grants=tuple(grants),
            all_periods=tuple(all_periods),
            rules_config=RulesConfig(rules=client_rules or {}),
        )

    return _make
