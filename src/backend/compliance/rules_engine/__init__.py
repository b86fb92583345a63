"""UKRI staff-cost rules engine.

This package intentionally contains only domain logic:
- Inputs are researcher, grant and timesheet period records + rules config.
- Outputs are calculation results, validation results and transition decisions.
- No database, HTTP or filesystem access lives here.
"""

from .calculation import calculate_burn_rate, calculate_grant_total, calculate_ukri_salary_cost
from .config import RulesConfig
from .context import RuleContext
from .funder_profiles import (
    DEFAULT_FUNDER_PROFILE_ID,
    DEFAULT_SUBMISSION_DEADLINE_DAYS,
    UKRI_PROFILE,
    get_funder_profile,
    list_funder_profiles,
)
from .models import (
    BurnRateResult,
    BurnRateStatus,
    CalculationResult,
    CalculationWorkings,
    FunderProfile,
    Grant,
    GrantTotalResult,
    NonGrantCategory,
    NonGrantEntry,
    Researcher,
    TimesheetEntry,
    TimesheetPeriod,
    TimesheetStatus,
    ValidationReport,
    ValidationResult,
    ValidationSeverity,
)
from .registry import register_rule, registry
from .rule import Rule
from .runner import ValidationRunner, get_validation_errors, is_compliant, validate_timesheet_period
from .state_machine import (
    MILESTONE_FIELDS,
    STATUS_ORDER,
    STATUS_TRANSITIONS,
    StatusTransition,
    can_transition_to,
    get_next_status,
    transition_status,
    validate_status_transition,
)

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
from .rules import UKRI_VALIDATION_RULES
