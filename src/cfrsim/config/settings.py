"""
Run settings for the CFR sampling-variability simulation.

This module holds the runtime settings that change between runs: which daily
case counts to simulate, for how many periods, the true CFR, the seed and the
output location.

Tutorial values live in config/defaults.yaml.

STRICT VALIDATION: every field is checked in __post_init__ and an invalid value
raises InvalidParameter before anything is sampled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..validation import (
    validate_case_counts,
    validate_cfr_values,
    validate_integer,
)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


@dataclass
class SimulationSettings:
    """
    Runtime configuration for a single simulation run.

    case_counts, period_count and cfr are REQUIRED. cfr is either one value
    shared by every scenario or a list with one value per case count.
    """

    case_counts: list[int]
    period_count: int
    cfr: float | list[float]
    seed: int | None = None
    max_workers: int = 1
    output_dir: Path | None = None
    cfr_by_scenario: list[float] = field(init=False, repr=False)

    def __post_init__(self):
        name = self.__class__.__name__
        self.case_counts = validate_case_counts(f"{name}.case_counts", self.case_counts)
        self.period_count = validate_integer(f"{name}.period_count", self.period_count, 1)
        self.cfr_by_scenario = validate_cfr_values(
            f"{name}.cfr", self.cfr, len(self.case_counts)
        )
        if self.seed is not None:
            self.seed = validate_integer(f"{name}.seed", self.seed, 0)
        self.max_workers = validate_integer(f"{name}.max_workers", self.max_workers, 1)

        # Coerce output_dir to Path if string
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

    @property
    def shared_cfr(self) -> bool:
        return len(set(self.cfr_by_scenario)) == 1

    def describe(self) -> dict[str, Any]:
        """Plain-dict view of the settings for reports."""
        return {
            "case_counts": list(self.case_counts),
            "period_count": self.period_count,
            "cfr": list(self.cfr_by_scenario),
            "seed": self.seed,
            "max_workers": self.max_workers,
            "output_dir": str(self.output_dir) if self.output_dir is not None else None,
        }
