"""
Argument validation shared by the samplers and the settings dataclass.

All checks raise InvalidParameter and never touch a random source, so callers
can validate every input before the first draw.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Sequence

from .exceptions import InvalidParameter


def validate_integer(name: str, value: Any, minimum: int) -> int:
    """Validate that value is an integer >= minimum and return it as int."""
    if value is None:
        raise InvalidParameter(f"{name} is REQUIRED and was not provided")
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameter(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    if value < minimum:
        raise InvalidParameter(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def validate_probability(name: str, value: Any) -> float:
    """Validate that value is a real number in [0, 1] and return it as float."""
    if value is None:
        raise InvalidParameter(f"{name} is REQUIRED and was not provided")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameter(
            f"{name} must be a real number, got {type(value).__name__}"
        )
    value = float(value)
    if math.isnan(value) or not (0.0 <= value <= 1.0):
        raise InvalidParameter(f"{name} must be in [0.0, 1.0], got {value}")
    return value


def validate_case_counts(name: str, values: Any) -> list[int]:
    """Validate a non-empty sequence of positive case counts."""
    if values is None:
        raise InvalidParameter(f"{name} is REQUIRED and was not provided")
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        try:
            values = list(values)
        except TypeError:
            raise InvalidParameter(
                f"{name} must be a sequence of positive integers, "
                f"got {type(values).__name__}"
            ) from None
    if len(values) == 0:
        raise InvalidParameter(f"{name} cannot be empty")
    return [validate_integer(f"{name}[{i}]", v, 1) for i, v in enumerate(values)]


def validate_cfr_values(name: str, value: Any, n_scenarios: int) -> list[float]:
    """
    Expand a shared CFR or a per-scenario CFR sequence to one value per scenario.

    A single real applies to every scenario; a sequence must match n_scenarios.
    """
    if isinstance(value, numbers.Real) or value is None:
        return [validate_probability(name, value)] * n_scenarios
    if isinstance(value, (str, bytes)):
        raise InvalidParameter(
            f"{name} must be a real number or a sequence of reals, got str"
        )
    try:
        values = list(value)
    except TypeError:
        raise InvalidParameter(
            f"{name} must be a real number or a sequence of reals, "
            f"got {type(value).__name__}"
        ) from None
    if len(values) != n_scenarios:
        raise InvalidParameter(
            f"{name} has {len(values)} values but there are {n_scenarios} scenarios"
        )
    return [validate_probability(f"{name}[{i}]", v) for i, v in enumerate(values)]
