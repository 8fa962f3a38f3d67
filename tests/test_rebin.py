"""Tests for re-histogramming sampled id streams."""

from __future__ import annotations

import itertools
import random

import numpy as np
import pytest

from hsampler import Sampler, build_index
from hsampler.errors import InvalidHistogramError
from hsampler.profiler import compare_histograms, implied_value_total, rebin_counts


def test_rebin_rounds_to_nearest_center():
    counts = rebin_counts([0, 1, 4, 5, 14, 15, 26], 10)
    assert counts.to_dict() == {0: 2, 10: 2, 20: 1, 30: 1}
    assert counts.index.name == "center"


def test_rebin_accepts_arrays():
    counts = rebin_counts(np.array([3, 0, 3, 9]), 4)
    assert counts.to_dict() == {4: 2, 8: 1}


def test_rebin_rejects_bad_width():
    with pytest.raises(InvalidHistogramError):
        rebin_counts([1, 2], 0)


def test_implied_value_total(votes_per_story):
    assert implied_value_total([(0, 5), (10, 2), (20, 1)]) == 41
    assert implied_value_total([(10, 2), (20, 1)]) == 40
    assert implied_value_total(votes_per_story) == 372_071


def test_compare_matching_histograms():
    # id 0 hit twice, id 1 hit ten times
    ids = [0, 0] + [1] * 10
    report = compare_histograms([(0, 1), (10, 1)], ids, 10)

    assert report.draws == 12
    assert report.ids_seen == 2
    # rebinned as one id at 0 and one at 10
    assert report.observed_values == 10
    assert report.frame["expected"].tolist() == [0.5, 0.5]
    assert report.frame["observed"].tolist() == [0.5, 0.5]
    assert report.worst_diff() == 0.0


def test_compare_reports_unexpected_centers():
    ids = [0] * 20 + [1] * 10 + [2]
    report = compare_histograms([(0, 2), (10, 2)], ids, 10)

    frame = report.frame
    assert frame.index.tolist() == [0, 10, 20]
    assert frame.loc[20, "expected"] == 0.0
    assert frame.loc[20, "observed"] == pytest.approx(1 / 3)
    assert frame.loc[0, "diff"] == pytest.approx(1 / 3 - 0.5)
    assert report.worst_diff() == pytest.approx(0.5 - 1 / 3)

    payload = report.to_dict()
    assert payload["draws"] == 31
    assert payload["ids_seen"] == 3
    assert payload["observed_values"] == 30
    assert [row["center"] for row in payload["bins"]] == [0, 10, 20]


def test_compare_with_no_samples():
    report = compare_histograms([(0, 1), (10, 3)], [], 10)
    assert report.ids_seen == 0
    assert report.frame["observed"].tolist() == [0.0, 0.0]
    assert report.worst_diff() == pytest.approx(0.75)


def test_compare_rejects_negative_ids():
    with pytest.raises(ValueError):
        compare_histograms([(0, 1)], [-1, 0], 10)


def test_compare_accepts_id_generators(votes_per_story):
    index = build_index(votes_per_story, 10)
    stream = Sampler(index).stream(random.Random(5))
    report = compare_histograms(votes_per_story, itertools.islice(stream, 1000), 10)

    assert report.draws == 1000
    assert 0 < report.ids_seen <= 1000


def test_compare_accepts_id_lists_and_arrays():
    as_list = compare_histograms([(0, 1), (10, 1)], [0, 0, 1], 10)
    as_array = compare_histograms([(0, 1), (10, 1)], np.array([[0, 0], [1, 1]]), 10)
    assert as_list.draws == 3
    assert as_array.draws == 4
