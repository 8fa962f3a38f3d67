"""Shared fixtures for histogram sampler tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def votes_per_story():
    """Stories per vote count on a link aggregator, bucketed to tens."""
    return [
        (0, 16724), (10, 16393), (20, 4601), (30, 1707),
        (40, 680), (50, 281), (60, 128), (70, 60), (80, 35),
        (90, 16), (100, 4), (110, 4), (120, 10), (130, 1),
        (140, 2), (160, 1), (210, 1), (250, 1), (290, 1),
    ]


@pytest.fixture
def small_bins():
    return [(0, 4), (10, 2), (20, 1)]
