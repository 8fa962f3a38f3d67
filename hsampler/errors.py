"""Exceptions raised while building or sampling a histogram index."""

from __future__ import annotations


class HistogramError(ValueError):
    """Base class for histogram sampler failures."""


class InvalidHistogramError(HistogramError):
    """The bins or bin width cannot describe a histogram."""


class EmptyDistributionError(HistogramError):
    """The index has no weight, so there is no valid draw to sample."""

    def __init__(self, value_count: int = 0) -> None:
        self.value_count = value_count
        if value_count:
            message = (
                f"empty distribution: all {value_count} ids have zero weight"
            )
        else:
            message = "empty distribution: no non-empty bins"
        super().__init__(message)


class DrawOutOfRangeError(HistogramError):
    """A draw fell outside ``[0, total_weight)``."""

    def __init__(self, draw: object, total_weight: int) -> None:
        self.draw = draw
        self.total_weight = total_weight
        super().__init__(
            f"draw {draw!r} outside valid range [0, {total_weight})"
        )
