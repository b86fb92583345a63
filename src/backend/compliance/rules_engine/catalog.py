"""Rule catalog for compliance officers and auditors.

Lists every registered validation rule with the funder clause it enforces,
its severity and the settings a deployment can override in a rules config
file (with their defaults).

    python -m compliance.rules_engine.catalog --format markdown --output RULES.md
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel

from .registry import registry

# Ensure built-in rules are imported/registered when generating a catalog.
from . import rules as _builtin_rules  # noqa: F401


class RuleCatalogEntry(BaseModel):
    position: int
    rule_id: str
    rule_name: str
    severity: str
    funder_clause: str = ""

    module: str
    class_name: str

    config_model: str
    config_defaults: Dict[str, Any]
    config_schema: Dict[str, Any]


def build_catalog() -> List[RuleCatalogEntry]:
    entries: List[RuleCatalogEntry] = []
    for position, rule_cls in enumerate(registry.classes(), start=1):
        cfg_model = rule_cls.config_model
        entries.append(
            RuleCatalogEntry(
                position=position,
                rule_id=rule_cls.rule_id,
                rule_name=rule_cls.rule_name,
                severity=rule_cls.severity.value,
                funder_clause=rule_cls.funder_clause,
                module=rule_cls.__module__,
                class_name=rule_cls.__name__,
                config_model=cfg_model.__name__,
                config_defaults=cfg_model().model_dump(mode="json"),
                config_schema=cfg_model.model_json_schema(),
            )
        )
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True, ensure_ascii=False)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    return yaml.safe_dump(catalog, sort_keys=True, allow_unicode=True)


def _dump_markdown(catalog: list[dict[str, Any]]) -> str:
    lines = [
        "# UKRI timesheet validation rules",
        "",
        "| # | Rule | Name | Severity | Configurable settings |",
        "|---|---|---|---|---|",
    ]
    for entry in catalog:
        settings = ", ".join(f"`{k}={v}`" for k, v in sorted(entry["config_defaults"].items()))
        lines.append(
            f"| {entry['position']} | {entry['rule_id']} | {entry['rule_name']} | {entry['severity']} | {settings} |"
        )
    lines.append("")
    for entry in catalog:
        lines.append(f"## {entry['rule_id']} {entry['rule_name']}")
        lines.append("")
        lines.append(entry["funder_clause"])
        lines.append("")
    return "\n".join(lines)


_DUMPERS = {
    "yaml": _dump_yaml,
    "json": _dump_json,
    "markdown": _dump_markdown,
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a validation rules catalog from the registry.")
    parser.add_argument(
        "--format",
        choices=tuple(_DUMPERS),
        default="yaml",
        help="Output format (default: yaml).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write to this file instead of stdout.",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump() for e in build_catalog()]
    text = _DUMPERS[args.format](catalog)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
    else:
        print(text)


if __name__ == "__main__":
    main()
