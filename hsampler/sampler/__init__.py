"""Value id sampling over a cumulative index."""

from .draws import (
    Sampler,
    sample,
    sample_many,
)

__all__ = [
    "Sampler",
    "sample",
    "sample_many",
]
