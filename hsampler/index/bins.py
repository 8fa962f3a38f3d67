"""Histogram bin model and input normalisation."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from hsampler.errors import InvalidHistogramError

BinLike = Union["HistogramBin", Tuple[int, int]]


@dataclass(frozen=True)
class HistogramBin:
    """All original values that rounded to ``center`` under the bin width."""

    center: int
    count: int

    def to_dict(self) -> Dict[str, int]:
        """Serialize the bin into built-in Python types."""

        return {"center": int(self.center), "count": int(self.count)}

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "HistogramBin":
        """Rehydrate a ``HistogramBin`` from serialized content."""

        return cls(
            center=_non_negative_int(payload.get("center"), "center"),
            count=_non_negative_int(payload.get("count", 0), "count"),
        )


def check_bin_width(bin_width: object) -> int:
    """Return ``bin_width`` as an ``int`` or raise if it is not positive."""

    if isinstance(bin_width, bool) or not isinstance(bin_width, numbers.Integral):
        raise InvalidHistogramError(
            f"bin_width must be a positive integer, got {bin_width!r}"
        )
    if bin_width <= 0:
        raise InvalidHistogramError(
            f"bin_width must be a positive integer, got {bin_width}"
        )
    return int(bin_width)


def normalize_bins(
    bins: Union[Iterable[BinLike], Mapping[int, int]],
) -> List[HistogramBin]:
    """
    Validate input bins and return them as ``HistogramBin`` objects.

    ``bins`` may be a sequence of ``HistogramBin`` or ``(center, count)``
    pairs, or a ``center -> count`` mapping, which is read in sorted key
    order. Centers must be strictly increasing across the whole input,
    zero-count bins included; duplicates are rejected rather than merged.
    Zero-count bins are kept here and skipped by the builder.
    """

    if isinstance(bins, Mapping):
        items: Iterable[object] = sorted(bins.items())
    else:
        items = bins

    result: List[HistogramBin] = []
    previous: int | None = None
    for position, item in enumerate(items):
        if isinstance(item, HistogramBin):
            raw_center, raw_count = item.center, item.count
        else:
            try:
                raw_center, raw_count = item  # type: ignore[misc]
            except (TypeError, ValueError) as exc:
                raise InvalidHistogramError(
                    f"bin #{position} must be a (center, count) pair, got {item!r}"
                ) from exc
        center = _non_negative_int(raw_center, f"center of bin #{position}")
        count = _non_negative_int(raw_count, f"count of bin #{position}")
        if previous is not None and center <= previous:
            raise InvalidHistogramError(
                f"bin centers must be strictly increasing: {center} follows {previous}"
            )
        previous = center
        result.append(HistogramBin(center=center, count=count))
    return result


def _non_negative_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidHistogramError(f"{label} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidHistogramError(f"{label} must be non-negative, got {value}")
    return int(value)
