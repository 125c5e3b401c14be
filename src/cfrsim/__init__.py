"""Simulate how sampling variability affects case fatality ratio estimates."""

from .entities import OutcomeRecord, ScenarioSeries, SeriesRecord, SimulationSet
from .exceptions import InvalidParameter, UpstreamFailure
from .simulation import OutcomeSampler, SeriesRunner, run_series, simulate_outcome

__version__ = "0.1.0"

__all__ = [
    "InvalidParameter",
    "OutcomeRecord",
    "OutcomeSampler",
    "ScenarioSeries",
    "SeriesRecord",
    "SeriesRunner",
    "SimulationSet",
    "UpstreamFailure",
    "run_series",
    "simulate_outcome",
]
