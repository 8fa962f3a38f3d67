"""Re-histogram a sampled id stream and compare it with its source bins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Union

import numpy as np
import pandas as pd

from hsampler.index.bins import BinLike, check_bin_width, normalize_bins


def rebin_counts(per_id_counts: Iterable[int], bin_width: int) -> pd.Series:
    """
    Bucket per-id hit counts to the nearest multiple of ``bin_width``.

    Ids with no hits are dropped, as they would never show up in a recorded
    dataset. The result maps bucket center to number of ids, sorted by center.
    """

    bin_width = check_bin_width(bin_width)
    if isinstance(per_id_counts, np.ndarray):
        hits = per_id_counts.astype(np.int64, copy=False)
    else:
        hits = np.asarray(list(per_id_counts), dtype=np.int64)
    hits = hits[hits > 0]
    centers = bin_width * ((hits + bin_width // 2) // bin_width)
    counts = pd.Series(centers, dtype="int64").value_counts().sort_index()
    counts.index.name = "center"
    counts.name = "count"
    return counts


def implied_value_total(bins: Union[Iterable[BinLike], Mapping[int, int]]) -> int:
    """
    Number of values the histogram accounts for.

    This is ``sum(center * count)`` with each item of the zero-centred bin
    counted as a quarter of a value. Drawing this many samples and
    re-histogramming the per-id counts lines the result up with the input bins.
    """

    normalized = normalize_bins(bins)
    total = sum(hbin.center * hbin.count for hbin in normalized)
    zero_items = sum(hbin.count for hbin in normalized if hbin.center == 0)
    return total + zero_items // 4


@dataclass
class FidelityReport:
    """Per-bin share of ids in the source histogram versus a sampled stream."""

    frame: pd.DataFrame
    draws: int
    ids_seen: int
    observed_values: int

    def worst_diff(self, min_share: float = 0.005) -> float:
        """Largest absolute share difference among bins holding ``min_share``."""

        mask = self.frame["expected"] >= min_share
        if not mask.any():
            return 0.0
        return float(self.frame.loc[mask, "diff"].abs().max())

    def to_dict(self) -> Dict[str, object]:
        """Serialize the report into built-in Python types."""

        rows: List[Dict[str, float]] = [
            {
                "center": int(center),
                "expected": float(row["expected"]),
                "observed": float(row["observed"]),
                "diff": float(row["diff"]),
            }
            for center, row in self.frame.iterrows()
        ]
        return {
            "draws": int(self.draws),
            "ids_seen": int(self.ids_seen),
            "observed_values": int(self.observed_values),
            "bins": rows,
        }


def compare_histograms(
    expected_bins: Union[Iterable[BinLike], Mapping[int, int]],
    sampled_ids: Iterable[int],
    bin_width: int,
) -> FidelityReport:
    """
    Re-histogram ``sampled_ids`` and line it up against ``expected_bins``.

    Shares are fractions of ids: for the source, of all ids in the histogram;
    for the sample, of ids drawn at least once. Centers present on only one
    side get a zero share on the other.
    """

    bin_width = check_bin_width(bin_width)
    source = [hbin for hbin in normalize_bins(expected_bins) if hbin.count > 0]
    expected = pd.Series(
        [hbin.count for hbin in source],
        index=pd.Index([hbin.center for hbin in source], name="center"),
        dtype="float64",
    )
    if expected.sum() > 0:
        expected = expected / expected.sum()

    if isinstance(sampled_ids, np.ndarray):
        ids = sampled_ids.astype(np.int64, copy=False).ravel()
    else:
        ids = np.fromiter(sampled_ids, dtype=np.int64)
    if ids.size and ids.min() < 0:
        raise ValueError("sampled ids must be non-negative")
    per_id = np.bincount(ids) if ids.size else np.zeros(0, dtype=np.int64)
    rebinned = rebin_counts(per_id, bin_width)
    observed_values = implied_value_total(
        [(int(center), int(count)) for center, count in rebinned.items()]
    )
    observed = rebinned.astype("float64")
    ids_seen = int(observed.sum())
    if ids_seen > 0:
        observed = observed / ids_seen

    frame = pd.concat(
        {"expected": expected, "observed": observed}, axis=1
    ).fillna(0.0).sort_index()
    frame.index.name = "center"
    frame["diff"] = frame["observed"] - frame["expected"]
    return FidelityReport(
        frame=frame,
        draws=int(ids.size),
        ids_seen=ids_seen,
        observed_values=observed_values,
    )
