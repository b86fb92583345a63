from decimal import Decimal

from compliance.rules_engine.models import ValidationSeverity
from compliance.rules_engine.rules.ukri_ts_007_combined_fte_cap import UKRI_TS_007_COMBINED_FTE_CAP


def _grants(make_grant):
    return [make_grant(id="g1"), make_grant(id="g2", reference="UKRI-002")]


def test_within_employment_fraction(make_grant, make_period, make_entry, make_ctx):
    period = make_period(entries=[make_entry(grant_id="g1", hours="75"), make_entry(grant_id="g2", hours="75", entry_id="e2")])
    res = UKRI_TS_007_COMBINED_FTE_CAP().evaluate(make_ctx(period=period, grants=_grants(make_grant)))
    assert res.passed is True
    assert res.severity == ValidationSeverity.ERROR
    assert res.details["total_grant_fte"] == Decimal("0.990")


def test_exceeds_employment_fraction(make_grant, make_period, make_entry, make_ctx):
    # 100 / 151.67 -> 0.659, 80 / 151.67 -> 0.527
    period = make_period(entries=[make_entry(grant_id="g1", hours="100"), make_entry(grant_id="g2", hours="80", entry_id="e2")])
    res = UKRI_TS_007_COMBINED_FTE_CAP().evaluate(make_ctx(period=period, grants=_grants(make_grant)))
    assert res.passed is False
    assert [a["fte"] for a in res.details["grant_allocations"]] == [Decimal("0.659"), Decimal("0.527")]
    assert res.details["total_grant_fte"] == Decimal("1.186")
    assert res.message.startswith("Combined grant FTE (1.186) exceeds employment fraction (1.0).")
    assert "0.186 FTE" in res.message


def test_part_time_researcher_cap(make_researcher, make_grant, make_period, make_entry, make_ctx):
    researcher = make_researcher(employment_fraction="0.8")
    period = make_period(entries=[make_entry(grant_id="g1", hours="75"), make_entry(grant_id="g2", hours="60", entry_id="e2")])
    res = UKRI_TS_007_COMBINED_FTE_CAP().evaluate(
        make_ctx(period=period, researcher=researcher, grants=_grants(make_grant))
    )
    assert res.passed is False


def test_grant_without_entry_counts_as_zero(make_grant, make_period, make_entry, make_ctx):
    period = make_period(entries=[make_entry(grant_id="g1", hours="100")])
    res = UKRI_TS_007_COMBINED_FTE_CAP().evaluate(make_ctx(period=period, grants=_grants(make_grant)))
    assert res.passed is True
    assert res.details["grant_allocations"][1]["hours"] == 0


def test_zero_contracted_hours_with_grant_hours_fails(make_researcher, make_grant, make_period, make_entry, make_ctx):
    researcher = make_researcher(contracted_hours_weekly="0")
    period = make_period(entries=[make_entry(grant_id="g1", hours="10")])
    res = UKRI_TS_007_COMBINED_FTE_CAP().evaluate(
        make_ctx(period=period, researcher=researcher, grants=[make_grant()])
    )
    assert res.passed is False
    assert "Cannot calculate FTE" in res.message


def test_zero_contracted_hours_without_grant_hours_passes(make_researcher, make_grant, make_period, make_ctx):
    researcher = make_researcher(contracted_hours_weekly="0")
    res = UKRI_TS_007_COMBINED_FTE_CAP().evaluate(
        make_ctx(period=make_period(entries=[]), researcher=researcher, grants=[make_grant()])
    )
    assert res.passed is True
