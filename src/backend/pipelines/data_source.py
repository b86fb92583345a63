from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from compliance.rules_engine.config import RulesConfig
from compliance.rules_engine.models import Grant, Researcher, TimesheetPeriod


@dataclass(frozen=True)
class ReviewInputs:
    researcher: Researcher
    grants: tuple[Grant, ...] = ()
    periods: tuple[TimesheetPeriod, ...] = ()
    rules_config: RulesConfig = field(default_factory=RulesConfig)

    def period_for(self, year: int, month: int) -> TimesheetPeriod | None:
        for period in self.periods:
            if period.year == year and period.month == month:
                return period
        return None


class DataSource(Protocol):
    def build_review_inputs(self, *, researcher_id: str) -> ReviewInputs:
        """Return canonical inputs for the rules engine."""
        ...


def get_data_source(name: str, **kwargs: Any) -> DataSource:
    """Resolve a data source implementation by name (fixtures)."""
    source = (name or "").strip().lower()
    if source in ("fixtures", ""):
        return FixturesDataSource(**kwargs)
    raise ValueError(f"Unknown data source '{name}' (expected 'fixtures').")


def load_review_bundle(path: Path, *, rules_config: RulesConfig | None = None) -> ReviewInputs:
    """Parse a JSON bundle of one researcher, their grants and their periods."""
    with path.open() as handle:
        raw = json.load(handle)
    researcher = Researcher.model_validate(raw["researcher"])
    return ReviewInputs(
        researcher=researcher,
        grants=tuple(Grant.model_validate(g) for g in raw.get("grants", [])),
        periods=tuple(
            TimesheetPeriod.model_validate({"researcher_id": researcher.id, **p}) for p in raw.get("periods", [])
        ),
        rules_config=rules_config or RulesConfig(),
    )


class FixturesDataSource:
    def __init__(self, *, fixtures_root: Path | None = None, rules_config: RulesConfig | None = None) -> None:
        self._fixtures_root = fixtures_root or _default_fixtures_root()
        self._rules_config = rules_config

    def build_review_inputs(self, *, researcher_id: str) -> ReviewInputs:
        return load_review_bundle(self._fixtures_root / f"{researcher_id}.json", rules_config=self._rules_config)


def _default_fixtures_root() -> Path:
    return Path(__file__).resolve().parents[1] / "tests" / "rules_engine" / "fixtures"
