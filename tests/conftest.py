from __future__ import annotations

import numpy as np
import pytest


class FailingGenerator:
    """Random source whose binomial draws always fail."""

    def __init__(self, exc: BaseException | None = None):
        self.exc = exc if exc is not None else MemoryError("out of entropy")
        self.calls = 0

    def binomial(self, n, p, size=None):
        self.calls += 1
        raise self.exc

    def spawn(self, n):
        return [self for _ in range(n)]


class OutOfRangeGenerator:
    """Random source returning more deaths than cases."""

    def binomial(self, n, p, size=None):
        return np.full(size, n + 1)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def failing_rng():
    return FailingGenerator()


@pytest.fixture
def out_of_range_rng():
    return OutOfRangeGenerator()


@pytest.fixture
def run_file(tmp_path):
    """Write a small run file and return its path."""

    def _write(text: str):
        path = tmp_path / "run.yaml"
        path.write_text(text)
        return path

    return _write
