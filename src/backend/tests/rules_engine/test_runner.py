from datetime import date, datetime

import pytest

from compliance.rules_engine.config import RulesConfig
from compliance.rules_engine.models import ValidationSeverity
from compliance.rules_engine.registry import RuleRegistry, registry
from compliance.rules_engine.rules import UKRI_VALIDATION_RULES
from compliance.rules_engine.runner import (
    ValidationRunner,
    get_validation_errors,
    is_compliant,
    validate_timesheet_period,
)

EXPECTED_ORDER = [f"UKRI-TS-00{i}" for i in range(1, 9)]


def _compliant_inputs(make_researcher, make_grant, make_period, make_entry, make_non_grant_entry):
    researcher = make_researcher()
    grant = make_grant()
    period = make_period(
        entries=[make_entry(grant_id="g1", hours="75")],
        non_grant_entries=[make_non_grant_entry(category="teaching", hours="70")],
    )
    return period, researcher, [grant]


def test_registry_order_matches_rule_table():
    assert registry.ids() == EXPECTED_ORDER
    assert [r.rule_id for r in UKRI_VALIDATION_RULES] == EXPECTED_ORDER


def test_all_rules_run_in_order(make_researcher, make_grant, make_period, make_entry, make_non_grant_entry):
    period, researcher, grants = _compliant_inputs(
        make_researcher, make_grant, make_period, make_entry, make_non_grant_entry
    )
    results = validate_timesheet_period(period, researcher, grants)
    assert [r.rule_id for r in results] == EXPECTED_ORDER
    assert all(r.passed for r in results)
    assert is_compliant(period, researcher, grants) is True
    assert get_validation_errors(period, researcher, grants) == []


def test_warnings_do_not_block_compliance(make_researcher, make_grant, make_period, make_entry):
    # 75 grant hours alone is below the plausible band: warning only.
    period = make_period(entries=[make_entry(grant_id="g1", hours="75")])
    errors = get_validation_errors(period, make_researcher(), [make_grant()])
    assert [e.rule_id for e in errors] == ["UKRI-TS-004"]
    assert errors[0].severity == ValidationSeverity.WARNING
    assert is_compliant(period, make_researcher(), [make_grant()]) is True


def test_missing_entry_and_signature_are_not_compliant(make_researcher, make_grant, make_period):
    period = make_period(entries=[], signed_at=None)
    errors = get_validation_errors(period, make_researcher(), [make_grant()])
    rule_ids = {e.rule_id for e in errors}
    assert {"UKRI-TS-001", "UKRI-TS-002"} <= rule_ids
    assert is_compliant(period, make_researcher(), [make_grant()]) is False


def test_late_info_only_results_are_reported(make_researcher, make_grant, make_period, make_entry):
    period = make_period(entries=[make_entry()], submitted_at=datetime(2024, 7, 2))
    results = validate_timesheet_period(period, make_researcher(), [make_grant()])
    timeliness = next(r for r in results if r.rule_id == "UKRI-TS-003")
    assert timeliness.severity == ValidationSeverity.INFO
    assert timeliness.passed is True


def test_disabled_rule_reports_info_pass(make_researcher, make_grant, make_period):
    period = make_period(entries=[])
    cfg = RulesConfig(rules={"UKRI-TS-001": {"enabled": False}})
    results = validate_timesheet_period(period, make_researcher(), [make_grant()], rules_config=cfg)
    completeness = results[0]
    assert completeness.passed is True
    assert completeness.severity == ValidationSeverity.INFO
    assert completeness.message == "Rule disabled by configuration."


def test_run_builds_report_totals(make_researcher, make_grant, make_period, make_ctx):
    period = make_period(entries=[], signed_at=None, countersigned_at=None)
    grant = make_grant(start_date=date(2024, 1, 1))
    report = ValidationRunner().run(make_ctx(period=period, grants=[grant]))
    assert report.researcher_id == "r1"
    assert (report.period_year, report.period_month) == (2024, 6)
    assert report.compliant is False
    assert report.totals[ValidationSeverity.ERROR] == 2
    assert report.totals[ValidationSeverity.WARNING] == 1
    assert {r.rule_id for r in report.failures} == {"UKRI-TS-001", "UKRI-TS-002", "UKRI-TS-004"}


def test_rule_ids_filter(make_period, make_ctx):
    results = ValidationRunner().evaluate(make_ctx(period=make_period()), rule_ids={"UKRI-TS-002"})
    assert [r.rule_id for r in results] == ["UKRI-TS-002"]


def test_explicit_rule_list(make_period, make_ctx):
    runner = ValidationRunner(rules=[cls() for cls in UKRI_VALIDATION_RULES[:2]])
    results = runner.evaluate(make_ctx(period=make_period()))
    assert [r.rule_id for r in results] == ["UKRI-TS-001", "UKRI-TS-002"]


def test_registry_create_all_filters_by_id():
    rules = registry.create_all(["UKRI-TS-007", "UKRI-TS-002"])
    assert [r.rule_id for r in rules] == ["UKRI-TS-002", "UKRI-TS-007"]
    assert len(registry) == 8
    assert "UKRI-TS-005" in registry


def test_registry_rejects_a_second_class_for_an_id():
    class Clash(UKRI_VALIDATION_RULES[0]):
        pass

    local = RuleRegistry()
    local.register(UKRI_VALIDATION_RULES[0])
    local.register(UKRI_VALIDATION_RULES[0])
    with pytest.raises(ValueError):
        local.register(Clash)
    with pytest.raises(KeyError):
        local.get("UKRI-TS-999")
