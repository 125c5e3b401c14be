"""Configuration package for the CFR simulator."""

from .settings import DEFAULTS_PATH, SimulationSettings

__all__ = [
    "DEFAULTS_PATH",
    "SimulationSettings",
]
