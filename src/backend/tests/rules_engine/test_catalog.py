import json

import yaml

from compliance.rules_engine.catalog import _dump_json, _dump_markdown, _dump_yaml, build_catalog, main


def test_catalog_lists_every_rule_in_table_order():
    catalog = build_catalog()
    assert [e.rule_id for e in catalog] == [f"UKRI-TS-00{i}" for i in range(1, 9)]
    assert [e.position for e in catalog] == list(range(1, 9))
    timeliness = catalog[2]
    assert timeliness.class_name == "UKRI_TS_003_TIMELINESS"
    assert timeliness.severity == "error"
    assert timeliness.config_model == "TimelinessRuleConfig"
    assert timeliness.config_defaults["very_late_days"] == 30
    assert "very_late_days" in timeliness.config_schema["properties"]


def test_rules_without_settings_only_expose_enabled():
    signature = build_catalog()[1]
    assert signature.config_model == "RuleConfigBase"
    assert signature.config_defaults == {"enabled": True}


def test_catalog_dumps():
    catalog = [e.model_dump() for e in build_catalog()]
    assert json.loads(_dump_json(catalog))[0]["rule_id"] == "UKRI-TS-001"
    loaded = yaml.safe_load(_dump_yaml(catalog))
    assert loaded[3]["severity"] == "warning"
    assert loaded[3]["config_defaults"]["tolerance"] == "0.20"


def test_markdown_table():
    text = _dump_markdown([e.model_dump() for e in build_catalog()])
    assert "| 6 | UKRI-TS-006 | FTE consistency | warning |" in text
    assert "`window_months=6`" in text
    assert "## UKRI-TS-008 Immutability verification" in text


def test_main_prints_json(capsys):
    main(["--format", "json"])
    out = json.loads(capsys.readouterr().out)
    assert len(out) == 8


def test_main_writes_output_file(tmp_path):
    target = tmp_path / "RULES.md"
    main(["--format", "markdown", "--output", str(target)])
    assert target.read_text(encoding="utf-8").startswith("# UKRI timesheet validation rules")
