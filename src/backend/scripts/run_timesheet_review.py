from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


_ensure_backend_on_path()

from compliance.rules_engine.calculation import calculate_ukri_salary_cost  # noqa: E402
from compliance.rules_engine.config import RulesConfig  # noqa: E402
from compliance.rules_engine.context import RuleContext  # noqa: E402
from compliance.rules_engine.funder_profiles import (  # noqa: E402
    DEFAULT_FUNDER_PROFILE_ID,
    get_funder_profile,
)
from compliance.rules_engine.models import CalculationResult, ValidationReport  # noqa: E402
from compliance.rules_engine.runner import ValidationRunner  # noqa: E402
from pipelines.data_source import ReviewInputs, load_review_bundle  # noqa: E402

logger = logging.getLogger("scripts.run_timesheet_review")


@dataclass(frozen=True)
class TimesheetReview:
    report: ValidationReport
    calculations: list[CalculationResult] = field(default_factory=list)


def _parse_period(value: str) -> tuple[int, int]:
    try:
        year_text, month_text = value.strip().split("-", 1)
        year, month = int(year_text), int(month_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Period must look like YYYY-MM, got '{value}'.") from exc
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Month out of range in '{value}'.")
    return year, month


def run_timesheet_review_from_inputs(inputs: ReviewInputs, *, year: int, month: int) -> TimesheetReview:
    period = inputs.period_for(year, month)
    if period is None:
        raise SystemExit(f"No timesheet period {year:04d}-{month:02d} for researcher {inputs.researcher.id}.")

    ctx = RuleContext.build(period, inputs.researcher, inputs.grants, inputs.periods, inputs.rules_config)
    report = ValidationRunner().run(ctx)

    calculations = []
    for grant in inputs.grants:
        if period.entry_for(grant.id) is None:
            continue
        profile = get_funder_profile(grant.funder_profile_id)
        if profile is None:
            logger.warning(
                "Unknown funder profile '%s' on grant %s; using '%s'.",
                grant.funder_profile_id,
                grant.id,
                DEFAULT_FUNDER_PROFILE_ID,
            )
            profile = get_funder_profile(DEFAULT_FUNDER_PROFILE_ID)
        calculations.append(calculate_ukri_salary_cost(period, inputs.researcher, grant, profile))

    return TimesheetReview(report=report, calculations=calculations)


def _write_markdown(review: TimesheetReview, out_path: Path) -> None:
    report = review.report
    lines = [
        f"# Timesheet Review {report.researcher_id} {report.period_year:04d}-{report.period_month:02d}",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Compliant: {'yes' if report.compliant else 'no'}",
        "",
        "## Validation",
    ]
    for res in report.results:
        mark = "PASS" if res.passed else "FAIL"
        lines.append("")
        lines.append(f"### {res.rule_id} {res.rule_name}: {mark} ({res.severity.value})")
        lines.append(f"- {res.message}")
        if res.funder_clause:
            lines.append(f"- Clause: {res.funder_clause}")
    lines.append("")
    lines.append("## Salary cost calculations")
    for calc in review.calculations:
        lines.append("")
        lines.append(f"### Grant {calc.grant_id}: £{calc.claimable_cost:,.2f} claimable")
        for working in calc.workings:
            lines.append(f"- {working.step}: {working.formula}")
        for warning in calc.warnings:
            lines.append(f"- Warning: {warning}")
    out_path.write_text("\n".join(lines))


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Run UKRI timesheet validation and salary cost calculation for one researcher period."
    )
    parser.add_argument(
        "--bundle",
        required=True,
        help="Path to a JSON bundle with `researcher`, `grants` and `periods`.",
    )
    parser.add_argument(
        "--period",
        required=True,
        type=_parse_period,
        help="Timesheet period to review, as YYYY-MM.",
    )
    parser.add_argument(
        "--rules-config",
        default=os.getenv("UKRI_RULES_CONFIG"),
        help="Optional JSON/YAML rules config (defaults to $UKRI_RULES_CONFIG).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for review files (defaults to the bundle's directory).",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    bundle = Path(args.bundle).resolve()
    if not bundle.exists():
        raise SystemExit(f"Bundle not found: {bundle}")
    rules_config = RulesConfig.from_file(Path(args.rules_config)) if args.rules_config else None

    inputs = load_review_bundle(bundle, rules_config=rules_config)
    year, month = args.period
    review = run_timesheet_review_from_inputs(inputs, year=year, month=month)

    output_dir = Path(args.output_dir).resolve() if args.output_dir else bundle.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    base_name = f"timesheet_review_{inputs.researcher.id}_{year:04d}-{month:02d}"
    out_json = output_dir / f"{base_name}.json"
    out_md = output_dir / f"{base_name}.md"

    out_json.write_text(
        json.dumps(
            {
                "report": review.report.model_dump(mode="json"),
                "calculations": [c.model_dump(mode="json") for c in review.calculations],
            },
            indent=2,
        )
    )
    _write_markdown(review, out_md)

    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")
    return 0 if review.report.compliant else 1


if __name__ == "__main__":
    raise SystemExit(main())
