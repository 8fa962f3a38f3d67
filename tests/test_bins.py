"""Tests for histogram bin validation."""

from __future__ import annotations

import numpy as np
import pytest

from hsampler.errors import HistogramError, InvalidHistogramError
from hsampler.index.bins import HistogramBin, check_bin_width, normalize_bins


def test_pairs_and_bins_are_accepted():
    bins = normalize_bins([(0, 3), HistogramBin(10, 0), (np.int64(20), np.int32(5))])
    assert bins == [HistogramBin(0, 3), HistogramBin(10, 0), HistogramBin(20, 5)]
    assert all(type(b.center) is int and type(b.count) is int for b in bins)


def test_mapping_is_read_in_center_order():
    bins = normalize_bins({20: 1, 0: 2, 10: 7})
    assert [b.center for b in bins] == [0, 10, 20]
    assert [b.count for b in bins] == [2, 7, 1]


@pytest.mark.parametrize(
    "bins",
    [
        [(0, 1), (10, 2), (10, 3)],
        [(10, 1), (0, 2)],
        [(10, 0), (10, 2)],
        [(0, 1), (-10, 2)],
        [(-5, 1)],
        [(0, -1)],
        [(0.5, 1)],
        [(0, 1.0)],
        [(True, 1)],
        [(0, 1, 2)],
        [5],
    ],
)
def test_invalid_bins_are_rejected(bins):
    with pytest.raises(InvalidHistogramError):
        normalize_bins(bins)


@pytest.mark.parametrize("width", [0, -10, 2.5, "10", True, None])
def test_invalid_bin_width(width):
    with pytest.raises(InvalidHistogramError):
        check_bin_width(width)


def test_bin_width_accepts_numpy_integers():
    assert check_bin_width(np.int64(10)) == 10


def test_errors_are_value_errors():
    assert issubclass(InvalidHistogramError, HistogramError)
    assert issubclass(HistogramError, ValueError)


def test_bin_dict_round_trip():
    hbin = HistogramBin(center=30, count=4)
    assert hbin.to_dict() == {"center": 30, "count": 4}
    assert HistogramBin.from_dict(hbin.to_dict()) == hbin
    with pytest.raises(InvalidHistogramError):
        HistogramBin.from_dict({"center": -1, "count": 1})
