"""Tests for the binomial outcome sampler."""

import numpy as np
import pytest

from cfrsim import InvalidParameter, OutcomeRecord, UpstreamFailure
from cfrsim.simulation import OutcomeSampler, simulate_outcome


class TestSimulateOutcome:
    """Contract of simulate_outcome."""

    def test_default_trial_count_is_one(self, rng):
        records = simulate_outcome(case_count=10, cfr=0.2, rng=rng)
        assert len(records) == 1
        assert isinstance(records[0], OutcomeRecord)

    @pytest.mark.parametrize("case_count,cfr", [(1, 0.5), (5, 0.2), (100, 0.2), (37, 0.9)])
    def test_record_identities(self, rng, case_count, cfr):
        records = simulate_outcome(500, case_count, cfr, rng=rng)
        assert len(records) == 500
        for r in records:
            assert r.case_count == case_count
            assert 0 <= r.death_count <= case_count
            assert r.survivor_count == case_count - r.death_count
            assert r.estimated_ratio == pytest.approx(r.death_count / case_count)
            assert 0.0 <= r.estimated_ratio <= 1.0

    @pytest.mark.parametrize("trials", [1, 2, 50])
    def test_zero_cfr_never_kills(self, rng, trials):
        records = simulate_outcome(trials, 25, 0.0, rng=rng)
        assert [r.death_count for r in records] == [0] * trials
        assert all(r.estimated_ratio == 0.0 for r in records)

    @pytest.mark.parametrize("trials", [1, 2, 50])
    def test_unit_cfr_always_kills(self, rng, trials):
        records = simulate_outcome(trials, 25, 1.0, rng=rng)
        assert [r.death_count for r in records] == [25] * trials
        assert all(r.survivor_count == 0 for r in records)

    def test_zero_trials_is_empty(self, rng):
        assert simulate_outcome(0, 10, 0.2, rng=rng) == []

    @pytest.mark.parametrize(
        "args",
        [
            (1, 0, 0.2),
            (1, -3, 0.2),
            (1, 10, 1.5),
            (1, 10, -0.1),
            (1, 10, float("nan")),
            (-1, 10, 0.2),
            (1.5, 10, 0.2),
            (1, 10.0, 0.2),
            (True, 10, 0.2),
            (1, 10, "0.2"),
            (1, None, 0.2),
            (1, 10, None),
        ],
    )
    def test_invalid_parameters(self, failing_rng, args):
        with pytest.raises(InvalidParameter):
            simulate_outcome(*args, rng=failing_rng)
        # Validation happens before any draw
        assert failing_rng.calls == 0

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            simulate_outcome(1, 0, 0.2)

    def test_reproducible_with_seeded_generator(self):
        a = simulate_outcome(30, 10, 0.2, rng=np.random.default_rng(7))
        b = simulate_outcome(30, 10, 0.2, rng=np.random.default_rng(7))
        assert a == b

    def test_numpy_integer_arguments(self, rng):
        records = simulate_outcome(np.int64(3), np.int32(8), np.float64(0.5), rng=rng)
        assert len(records) == 3
        assert all(r.case_count == 8 for r in records)

    def test_large_sample_mean_is_unbiased(self):
        records = simulate_outcome(
            1_000_000, case_count=12, cfr=0.4, rng=np.random.default_rng(2024)
        )
        mean = np.mean([r.estimated_ratio for r in records])
        assert mean == pytest.approx(0.4, abs=0.01)


class TestOutcomeSampler:
    """Random source handling of OutcomeSampler."""

    def test_sample_deaths_returns_array(self, rng):
        deaths = OutcomeSampler(rng=rng).sample_deaths(20, 10, 0.3)
        assert isinstance(deaths, np.ndarray)
        assert deaths.shape == (20,)
        assert deaths.min() >= 0
        assert deaths.max() <= 10

    def test_seed_builds_generator(self):
        a = OutcomeSampler(seed=3).sample_deaths(15, 40, 0.25)
        b = OutcomeSampler(seed=3).sample_deaths(15, 40, 0.25)
        np.testing.assert_array_equal(a, b)

    def test_source_failure_is_upstream_failure(self, failing_rng):
        sampler = OutcomeSampler(rng=failing_rng)
        with pytest.raises(UpstreamFailure) as info:
            sampler.sample(3, 10, 0.2)
        assert isinstance(info.value.__cause__, MemoryError)

    def test_out_of_range_draws_are_rejected(self, out_of_range_rng):
        with pytest.raises(UpstreamFailure):
            OutcomeSampler(rng=out_of_range_rng).sample(3, 10, 0.2)

    def test_degenerate_cfr_consumes_no_entropy(self, failing_rng):
        sampler = OutcomeSampler(rng=failing_rng)
        assert len(sampler.sample(4, 10, 0.0)) == 4
        assert len(sampler.sample(4, 10, 1.0)) == 4
        assert failing_rng.calls == 0
