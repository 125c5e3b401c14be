"""Random generators for the CFR outcome simulation."""

from __future__ import annotations

import numpy as np

from ..entities import OutcomeRecord
from ..exceptions import UpstreamFailure
from ..validation import validate_integer, validate_probability


class OutcomeSampler:
    """Draws binomial death counts from a caller-supplied generator."""

    def __init__(self, rng: np.random.Generator | None = None, seed: int | None = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def sample_deaths(self, trial_count: int, case_count: int, cfr: float) -> np.ndarray:
        """Draw death counts from Binomial(case_count, cfr).

        Args:
            trial_count: Number of independent draws (>= 0).
            case_count: Individuals at risk in each draw (> 0).
            cfr: True per-individual probability of death.

        Returns:
            Integer array of length trial_count, in draw order.
        """
        trial_count = validate_integer("trial_count", trial_count, 0)
        case_count = validate_integer("case_count", case_count, 1)
        cfr = validate_probability("cfr", cfr)

        if trial_count == 0:
            return np.zeros(0, dtype=np.int64)
        # Degenerate probabilities need no entropy
        if cfr == 0.0:
            return np.zeros(trial_count, dtype=np.int64)
        if cfr == 1.0:
            return np.full(trial_count, case_count, dtype=np.int64)

        try:
            deaths = np.asarray(
                self.rng.binomial(case_count, cfr, size=trial_count), dtype=np.int64
            )
        except Exception as exc:
            raise UpstreamFailure(
                f"random source failed drawing {trial_count} "
                f"Binomial({case_count}, {cfr}) variates: {exc}"
            ) from exc

        if deaths.shape != (trial_count,):
            raise UpstreamFailure(
                f"random source returned shape {deaths.shape}, expected ({trial_count},)"
            )
        if deaths.size and (deaths.min() < 0 or deaths.max() > case_count):
            raise UpstreamFailure(
                f"random source returned death counts outside [0, {case_count}]"
            )
        return deaths

    def sample(self, trial_count: int, case_count: int, cfr: float) -> list[OutcomeRecord]:
        """Draw trial_count outcomes and wrap each one in an OutcomeRecord."""
        deaths = self.sample_deaths(trial_count, case_count, cfr)
        case_count = int(case_count)
        return [OutcomeRecord(case_count=case_count, death_count=int(d)) for d in deaths]


def simulate_outcome(
    trial_count: int = 1,
    case_count: int | None = None,
    cfr: float | None = None,
    rng: np.random.Generator | None = None,
) -> list[OutcomeRecord]:
    """Simulate trial_count outcomes for a fixed case count and true CFR.

    Pure apart from consuming entropy from rng; an unseeded generator is used
    when rng is None.
    """
    return OutcomeSampler(rng=rng).sample(trial_count, case_count, cfr)
