"""Re-histogramming helpers for checking sampled streams."""

from .rebin import (
    FidelityReport,
    compare_histograms,
    implied_value_total,
    rebin_counts,
)

__all__ = [
    "FidelityReport",
    "compare_histograms",
    "implied_value_total",
    "rebin_counts",
]
