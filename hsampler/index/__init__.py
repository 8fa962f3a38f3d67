"""Cumulative index construction from histogram bins."""

from .bins import HistogramBin, normalize_bins
from .builder import CumulativeInterval, Fidelity, Index, build_index

__all__ = [
    "HistogramBin",
    "normalize_bins",
    "CumulativeInterval",
    "Fidelity",
    "Index",
    "build_index",
]
