"""Scenario series runner for the CFR simulation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import numpy as np

from ..entities import ScenarioSeries, SimulationSet
from ..exceptions import UpstreamFailure
from ..validation import validate_case_counts, validate_cfr_values, validate_integer
from .stochastics import OutcomeSampler


class SeriesRunner:
    """Runs one outcome series per case-count scenario.

    Every scenario draws from its own generator, spawned either from the
    caller's generator or from SeedSequence(seed). A given seed therefore
    produces the same SimulationSet whether scenarios run serially or on a
    thread pool.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        max_workers: int = 1,
    ):
        """
        Args:
            rng: Parent generator; scenario streams are spawned from it, so
                it must provide Generator.spawn (UpstreamFailure otherwise).
            seed: Seed for the root SeedSequence, used when rng is None.
            max_workers: Threads used to run scenarios (1 runs serially).
        """
        self.rng = rng
        self.seed = seed
        self.max_workers = validate_integer("max_workers", max_workers, 1)

    def run(
        self,
        case_counts: Sequence[int],
        period_count: int,
        cfr: float | Sequence[float],
    ) -> SimulationSet:
        """Simulate period_count periods for every case count.

        Args:
            case_counts: Daily case count per scenario; order is kept and
                duplicates are independent scenarios.
            period_count: Number of periods in every scenario.
            cfr: True CFR shared by all scenarios, or one value per scenario.

        Returns:
            SimulationSet with the scenarios concatenated in case_counts order.
        """
        # Validate everything before the first draw
        counts = validate_case_counts("case_counts", case_counts)
        period_count = validate_integer("period_count", period_count, 1)
        cfrs = validate_cfr_values("cfr", cfr, len(counts))

        streams = self._spawn_streams(len(counts))
        jobs = list(zip(range(len(counts)), counts, cfrs, streams))

        if self.max_workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                # map() yields in submission order and re-raises the first failure
                series = list(
                    pool.map(lambda job: self._run_scenario(period_count, *job), jobs)
                )
        else:
            series = [self._run_scenario(period_count, *job) for job in jobs]

        return SimulationSet(series=series)

    def _spawn_streams(self, n: int) -> list[np.random.Generator]:
        if self.rng is not None:
            try:
                return self.rng.spawn(n)
            except AttributeError as exc:
                raise UpstreamFailure(
                    f"random source {type(self.rng).__name__} cannot spawn "
                    f"per-scenario streams; pass a numpy Generator or a seed"
                ) from exc
        children = np.random.SeedSequence(self.seed).spawn(n)
        return [np.random.default_rng(s) for s in children]

    @staticmethod
    def _run_scenario(
        period_count: int,
        scenario_index: int,
        case_count: int,
        cfr: float,
        rng: np.random.Generator,
    ) -> ScenarioSeries:
        outcomes = OutcomeSampler(rng=rng).sample(period_count, case_count, cfr)
        return ScenarioSeries(
            scenario_index=scenario_index,
            case_count=case_count,
            cfr=cfr,
            outcomes=tuple(outcomes),
        )


def run_series(
    case_counts: Sequence[int],
    period_count: int,
    cfr: float | Sequence[float],
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    max_workers: int = 1,
) -> SimulationSet:
    """Run one series per case count and return the merged SimulationSet.

    rng must support Generator.spawn; a legacy RandomState raises UpstreamFailure.
    """
    runner = SeriesRunner(rng=rng, seed=seed, max_workers=max_workers)
    return runner.run(case_counts, period_count, cfr)
