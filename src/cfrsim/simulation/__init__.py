"""Stochastic simulation package for CFR sampling variability."""

from .stochastics import OutcomeSampler, simulate_outcome
from .engine import SeriesRunner, run_series

__all__ = ["OutcomeSampler", "simulate_outcome", "SeriesRunner", "run_series"]
