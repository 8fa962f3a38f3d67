"""Cumulative weight index built from histogram bins."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Mapping, NamedTuple, Optional, Union

import numpy as np

from hsampler.errors import InvalidHistogramError

from .bins import BinLike, HistogramBin, check_bin_width, normalize_bins

logger = logging.getLogger(__name__)

MAX_WEIGHT = int(np.iinfo(np.int64).max)


class Fidelity(str, enum.Enum):
    """How finely the index resolves the weight of the zero-center bin."""

    AGGREGATED = "aggregated"
    PER_ID = "per_id"


class CumulativeInterval(NamedTuple):
    """One contiguous slice ``[start_offset, end_offset)`` of weight space."""

    start_offset: int
    end_offset: int
    first_id: int
    count: int


@dataclass(frozen=True, eq=False)
class Index:
    """
    Immutable cumulative-weight table over value ids.

    ``offsets`` holds the strictly increasing start of every interval. In the
    aggregated form each interval covers a whole bin, ``first_ids`` holds the
    bin's first id and ``counts`` its number of ids. In the per-id form each
    interval covers one id, ``first_ids`` holds that id and ``counts`` is
    ``None``.
    """

    fidelity: Fidelity
    bin_width: int
    total_weight: int
    value_count: int
    offsets: np.ndarray = field(repr=False)
    first_ids: np.ndarray = field(repr=False)
    counts: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for array in (self.offsets, self.first_ids, self.counts):
            if array is not None:
                array.setflags(write=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Index):
            return NotImplemented
        if (self.fidelity, self.bin_width, self.total_weight, self.value_count) != (
            other.fidelity,
            other.bin_width,
            other.total_weight,
            other.value_count,
        ):
            return False
        if (self.counts is None) != (other.counts is None):
            return False
        return (
            np.array_equal(self.offsets, other.offsets)
            and np.array_equal(self.first_ids, other.first_ids)
            and (self.counts is None or np.array_equal(self.counts, other.counts))
        )

    def __hash__(self) -> int:
        return hash((self.fidelity, self.bin_width, self.total_weight, self.value_count))

    @property
    def is_empty(self) -> bool:
        """True when there is no valid draw, so sampling must fail."""

        return self.total_weight == 0

    @property
    def num_intervals(self) -> int:
        return int(self.offsets.size)

    def intervals(self) -> Iterator[CumulativeInterval]:
        """Yield the intervals in offset order."""

        ends = np.append(self.offsets[1:], self.total_weight)
        for pos in range(self.num_intervals):
            count = 1 if self.counts is None else int(self.counts[pos])
            yield CumulativeInterval(
                start_offset=int(self.offsets[pos]),
                end_offset=int(ends[pos]),
                first_id=int(self.first_ids[pos]),
                count=count,
            )


def bin_weight(center: int, bin_width: int) -> int:
    """
    Average value represented by one item of the bin centred on ``center``.

    A bin centred on zero only holds values in ``[0, bin_width / 2)``, because
    anything larger rounds up to the next bin, so its average is
    ``bin_width / 4``. The division truncates; ``zero_bin_weights`` spreads the
    remainder over the bin's items.
    """

    if center > 0:
        return center
    return bin_width // 4


def zero_bin_weights(count: int, bin_width: int) -> np.ndarray:
    """
    Per-item weights for the zero-center bin, summing exactly to
    ``count * bin_width / 4`` rounded down.

    The remainder ``r = bin_width % 4`` quarters is handed out round-robin:
    item ``i`` gets an extra unit when ``(i + 1) * r // 4`` steps past
    ``i * r // 4``, i.e. every fourth item for ``r == 1``, every other item for
    ``r == 2`` and three of every four for ``r == 3``.
    """

    base, remainder = divmod(bin_width, 4)
    position = np.arange(count, dtype=np.int64)
    extra = ((position + 1) * remainder) // 4 - (position * remainder) // 4
    return base + extra


def build_index(
    bins: Union[Iterable[BinLike], Mapping[int, int]],
    bin_width: int,
    fidelity: Fidelity | str = Fidelity.PER_ID,
) -> Index:
    """
    Build the cumulative index for ``bins`` quantized with ``bin_width``.

    Ids are assigned contiguously in bin order, so the ids of the ``k``-th
    non-empty bin start right after those of the previous bins. Each id is
    chosen with probability proportional to the average value of its bin.
    """

    bin_width = check_bin_width(bin_width)
    fidelity = Fidelity(fidelity)
    normalized = normalize_bins(bins)

    if fidelity is Fidelity.AGGREGATED:
        index = _build_aggregated(normalized, bin_width)
    else:
        index = _build_per_id(normalized, bin_width)

    logger.debug(
        "Built %s index: %d bins, %d ids, %d intervals, total weight %d",
        index.fidelity.value,
        len(normalized),
        index.value_count,
        index.num_intervals,
        index.total_weight,
    )
    return index


def _build_aggregated(bins: List[HistogramBin], bin_width: int) -> Index:
    offsets: List[int] = []
    first_ids: List[int] = []
    counts: List[int] = []
    start = 0
    next_id = 0

    for hbin in bins:
        if hbin.count == 0:
            continue
        span = hbin.count * bin_weight(hbin.center, bin_width)
        _check_total(start, span, hbin.center)
        if span > 0:
            offsets.append(start)
            first_ids.append(next_id)
            counts.append(hbin.count)
        else:
            logger.warning(
                "Bin %d has zero weight with bin_width=%d; ids [%d, %d) are never sampled",
                hbin.center,
                bin_width,
                next_id,
                next_id + hbin.count,
            )
        start += span
        next_id += hbin.count

    return Index(
        fidelity=Fidelity.AGGREGATED,
        bin_width=bin_width,
        total_weight=start,
        value_count=next_id,
        offsets=np.asarray(offsets, dtype=np.int64),
        first_ids=np.asarray(first_ids, dtype=np.int64),
        counts=np.asarray(counts, dtype=np.int64),
    )


def _build_per_id(bins: List[HistogramBin], bin_width: int) -> Index:
    offset_chunks: List[np.ndarray] = []
    id_chunks: List[np.ndarray] = []
    start = 0
    next_id = 0

    for hbin in bins:
        if hbin.count == 0:
            continue
        if hbin.center > 0:
            _check_total(start, hbin.count * hbin.center, hbin.center)
            weights = np.full(hbin.count, hbin.center, dtype=np.int64)
        else:
            _check_total(start, hbin.count * bin_width // 4, hbin.center)
            weights = zero_bin_weights(hbin.count, bin_width)
        ends = start + np.cumsum(weights)
        starts = ends - weights
        ids = np.arange(next_id, next_id + hbin.count, dtype=np.int64)

        reachable = weights > 0
        skipped = hbin.count - int(np.count_nonzero(reachable))
        if skipped:
            logger.warning(
                "%d of %d ids in bin %d have zero weight with bin_width=%d and are never sampled",
                skipped,
                hbin.count,
                hbin.center,
                bin_width,
            )
        offset_chunks.append(starts[reachable])
        id_chunks.append(ids[reachable])

        start = int(ends[-1])
        next_id += hbin.count

    if offset_chunks:
        offsets = np.concatenate(offset_chunks)
        ids = np.concatenate(id_chunks)
    else:
        offsets = np.empty(0, dtype=np.int64)
        ids = np.empty(0, dtype=np.int64)

    return Index(
        fidelity=Fidelity.PER_ID,
        bin_width=bin_width,
        total_weight=start,
        value_count=next_id,
        offsets=offsets,
        first_ids=ids,
    )


def _check_total(start: int, span: int, center: int) -> None:
    """Offsets are int64; refuse a histogram whose total weight would overflow."""

    if start + span > MAX_WEIGHT:
        raise InvalidHistogramError(
            f"total weight exceeds {MAX_WEIGHT} at bin {center}"
        )
