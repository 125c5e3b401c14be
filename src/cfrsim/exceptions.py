"""Exception types raised by the CFR simulator."""

from __future__ import annotations


class InvalidParameter(ValueError):
    """A count, probability or setting is outside its allowed domain."""


class UpstreamFailure(RuntimeError):
    """The random source failed while drawing variates."""
