"""Map uniform draws onto value ids through a cumulative index."""

from __future__ import annotations

import numbers
from typing import Iterator

import numpy as np

from hsampler.errors import DrawOutOfRangeError, EmptyDistributionError
from hsampler.index.builder import Index


def sample(index: Index, draw: int) -> int:
    """
    Return the value id that ``draw`` selects.

    ``draw`` must be an integer in ``[0, index.total_weight)``, normally taken
    uniformly from that range. The interval holding it is the one with the
    greatest start offset not above ``draw``.
    """

    _require_weight(index)
    if isinstance(draw, bool) or not isinstance(draw, numbers.Integral):
        raise DrawOutOfRangeError(draw, index.total_weight)
    if not 0 <= draw < index.total_weight:
        raise DrawOutOfRangeError(draw, index.total_weight)

    pos = int(np.searchsorted(index.offsets, draw, side="right")) - 1
    first_id = int(index.first_ids[pos])
    if index.counts is None:
        return first_id
    return first_id + (int(draw) - int(index.offsets[pos])) % int(index.counts[pos])


def sample_many(index: Index, draws) -> np.ndarray:
    """Vectorised ``sample`` over an integer array of draws."""

    _require_weight(index)
    values = np.asarray(draws)
    if values.size == 0:
        return np.empty(values.shape, dtype=np.int64)
    if values.dtype.kind not in "iu":
        raise DrawOutOfRangeError(f"array of dtype {values.dtype}", index.total_weight)
    values = values.astype(np.int64, copy=False)
    low = int(values.min())
    high = int(values.max())
    if low < 0:
        raise DrawOutOfRangeError(low, index.total_weight)
    if high >= index.total_weight:
        raise DrawOutOfRangeError(high, index.total_weight)

    pos = np.searchsorted(index.offsets, values, side="right") - 1
    ids = index.first_ids[pos]
    if index.counts is not None:
        ids = ids + (values - index.offsets[pos]) % index.counts[pos]
    return ids.astype(np.int64, copy=False)


class Sampler:
    """
    Independent value-id sampler over a read-only ``Index``.

    The random source is supplied per call and may be a ``random.Random``
    (anything with ``randrange``) or a ``numpy.random.Generator`` (anything
    with ``integers``). Sharing a source across threads is the caller's
    concern; the sampler itself holds no mutable state.
    """

    def __init__(self, index: Index) -> None:
        self._index = index

    @property
    def index(self) -> Index:
        return self._index

    @property
    def value_count(self) -> int:
        """Sampled ids are always in ``range(value_count)``."""

        return self._index.value_count

    @property
    def total_weight(self) -> int:
        return self._index.total_weight

    def __call__(self, draw: int) -> int:
        return sample(self._index, draw)

    def draw(self, rng) -> int:
        """Take one uniform draw from ``rng`` and return the id it selects."""

        _require_weight(self._index)
        return sample(self._index, _uniform(rng, self._index.total_weight))

    def draw_many(self, rng, size: int) -> np.ndarray:
        """Take ``size`` draws from ``rng`` and return the selected ids."""

        _require_weight(self._index)
        if size < 0:
            raise ValueError("size must be non-negative")
        draws = _uniform_many(rng, self._index.total_weight, size)
        return sample_many(self._index, draws)

    def stream(self, rng) -> Iterator[int]:
        """Yield ids forever."""

        _require_weight(self._index)
        while True:
            yield self.draw(rng)


def _require_weight(index: Index) -> None:
    if index.is_empty:
        raise EmptyDistributionError(index.value_count)


def _uniform(rng, bound: int) -> int:
    """Uniform integer in ``[0, bound)`` from a stdlib or numpy source."""

    if hasattr(rng, "integers"):
        return int(rng.integers(0, bound))
    if hasattr(rng, "randrange"):
        return int(rng.randrange(bound))
    raise TypeError(
        f"random source {type(rng).__name__} provides neither integers() nor randrange()"
    )


def _uniform_many(rng, bound: int, size: int) -> np.ndarray:
    if hasattr(rng, "integers"):
        return rng.integers(0, bound, size=size, dtype=np.int64)
    if hasattr(rng, "randrange"):
        return np.fromiter(
            (rng.randrange(bound) for _ in range(size)),
            dtype=np.int64,
            count=size,
        )
    raise TypeError(
        f"random source {type(rng).__name__} provides neither integers() nor randrange()"
    )
