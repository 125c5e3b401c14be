from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import pandas as pd

from .exceptions import InvalidParameter

# Column order consumed by tables and plots
FRAME_COLUMNS = [
    "period_index",
    "scenario_label",
    "case_count",
    "death_count",
    "survivor_count",
    "estimated_ratio",
    "scenario_index",
    "cfr",
]


@dataclass(frozen=True)
class OutcomeRecord:
    """One simulated period outcome."""

    case_count: int
    death_count: int
    survivor_count: int = field(init=False)
    estimated_ratio: float = field(init=False)

    def __post_init__(self) -> None:
        if self.case_count <= 0:
            raise InvalidParameter(
                f"OutcomeRecord.case_count must be positive, got {self.case_count}"
            )
        if not (0 <= self.death_count <= self.case_count):
            raise InvalidParameter(
                f"OutcomeRecord.death_count must be in [0, {self.case_count}], "
                f"got {self.death_count}"
            )
        object.__setattr__(self, "survivor_count", self.case_count - self.death_count)
        object.__setattr__(self, "estimated_ratio", self.death_count / self.case_count)


@dataclass(frozen=True)
class SeriesRecord:
    """OutcomeRecord tagged with its scenario and period."""

    period_index: int  # 1-based within the scenario
    scenario_label: int  # the scenario's case count
    case_count: int
    death_count: int
    survivor_count: int
    estimated_ratio: float
    scenario_index: int  # position in the case_counts argument
    cfr: float


@dataclass(frozen=True)
class ScenarioSeries:
    """Ordered outcomes of one case-count scenario."""

    scenario_index: int
    case_count: int
    cfr: float
    outcomes: tuple[OutcomeRecord, ...]

    @property
    def label(self) -> int:
        return self.case_count

    @property
    def period_count(self) -> int:
        return len(self.outcomes)

    def records(self) -> list[SeriesRecord]:
        """Tag outcomes with period_index 1..n in generation order."""
        return [
            SeriesRecord(
                period_index=i,
                scenario_label=self.case_count,
                case_count=o.case_count,
                death_count=o.death_count,
                survivor_count=o.survivor_count,
                estimated_ratio=o.estimated_ratio,
                scenario_index=self.scenario_index,
                cfr=self.cfr,
            )
            for i, o in enumerate(self.outcomes, start=1)
        ]


@dataclass
class SimulationSet:
    """
    Concatenation of scenario series in the order the scenarios were given.

    Records from different scenarios share a label when the same case count was
    requested twice; scenario_index tells them apart.
    """

    series: list[ScenarioSeries] = field(default_factory=list)
    _records: list[SeriesRecord] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._records = [r for s in self.series for r in s.records()]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SeriesRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> SeriesRecord:
        return self._records[index]

    @property
    def records(self) -> list[SeriesRecord]:
        return list(self._records)

    @property
    def labels(self) -> list[int]:
        """Distinct scenario labels in first-seen order."""
        seen: list[int] = []
        for s in self.series:
            if s.label not in seen:
                seen.append(s.label)
        return seen

    def group(self, label: int) -> list[SeriesRecord]:
        """All records carrying scenario_label == label, in sequence order."""
        return [r for r in self._records if r.scenario_label == label]

    def to_frame(self) -> pd.DataFrame:
        """Tabular view with one row per record, columns in FRAME_COLUMNS order."""
        rows = [
            {col: getattr(r, col) for col in FRAME_COLUMNS} for r in self._records
        ]
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)
