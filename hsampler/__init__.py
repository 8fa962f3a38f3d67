"""
Histogram sampler (hsampler) package.

This package rebuilds an unbounded stream of value ids whose bucketed
distribution matches a histogram of ``(center, count)`` bins, using only the
bins and the bin width they were produced with.
"""

from .errors import (
    DrawOutOfRangeError,
    EmptyDistributionError,
    HistogramError,
    InvalidHistogramError,
)
from .index import CumulativeInterval, Fidelity, HistogramBin, Index, build_index
from .sampler import Sampler, sample, sample_many

__all__ = [
    "build_index",
    "sample",
    "sample_many",
    "Sampler",
    "Index",
    "Fidelity",
    "HistogramBin",
    "CumulativeInterval",
    "HistogramError",
    "InvalidHistogramError",
    "EmptyDistributionError",
    "DrawOutOfRangeError",
]
