from datetime import date

from compliance.rules_engine.rules.ukri_ts_005_grant_boundary import UKRI_TS_005_GRANT_BOUNDARY


def test_passes_when_entries_inside_grant_period(make_grant, make_period, make_entry, make_ctx):
    period = make_period(entries=[make_entry(grant_id="g1", hours="40")])
    res = UKRI_TS_005_GRANT_BOUNDARY().evaluate(make_ctx(period=period, grants=[make_grant()]))
    assert res.passed is True
    assert res.details["violations"] == []


def test_fails_for_hours_after_grant_end(make_grant, make_period, make_entry, make_ctx):
    grant = make_grant(start_date=date(2023, 1, 1), end_date=date(2024, 3, 31))
    period = make_period(entries=[make_entry(grant_id="g1", hours="40")])
    res = UKRI_TS_005_GRANT_BOUNDARY().evaluate(make_ctx(period=period, grants=[grant]))
    assert res.passed is False
    assert res.details["violations"][0]["reason"] == "Grant ended on 2024-03-31, before this period."
    assert "UKRI-001" in res.message


def test_fails_for_hours_before_grant_start(make_grant, make_period, make_entry, make_ctx):
    grant = make_grant(start_date=date(2024, 9, 1), end_date=date(2025, 8, 31))
    period = make_period(entries=[make_entry(grant_id="g1", hours="10")])
    res = UKRI_TS_005_GRANT_BOUNDARY().evaluate(make_ctx(period=period, grants=[grant]))
    assert res.passed is False
    assert "after this period" in res.details["violations"][0]["reason"]


def test_zero_hour_entries_outside_period_are_ignored(make_grant, make_period, make_entry, make_ctx):
    grant = make_grant(start_date=date(2023, 1, 1), end_date=date(2024, 3, 31))
    period = make_period(entries=[make_entry(grant_id="g1", hours="0")])
    res = UKRI_TS_005_GRANT_BOUNDARY().evaluate(make_ctx(period=period, grants=[grant]))
    assert res.passed is True


def test_entries_for_unknown_grants_are_ignored(make_grant, make_period, make_entry, make_ctx):
    period = make_period(entries=[make_entry(grant_id="not-supplied", hours="20")])
    res = UKRI_TS_005_GRANT_BOUNDARY().evaluate(make_ctx(period=period, grants=[make_grant()]))
    assert res.passed is True


def test_message_falls_back_to_grant_id_without_reference(make_grant, make_period, make_entry, make_ctx):
    grant = make_grant(id="g-untitled", reference="", start_date=date(2023, 1, 1), end_date=date(2024, 3, 31))
    period = make_period(entries=[make_entry(grant_id="g-untitled", hours="40")])
    res = UKRI_TS_005_GRANT_BOUNDARY().evaluate(make_ctx(period=period, grants=[grant]))
    assert res.message.endswith("outside their active period: g-untitled.")
