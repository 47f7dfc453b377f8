from __future__ import annotations
from typing import NamedTuple, Sequence, Tuple
import numpy as np


class SpanFactor(NamedTuple):
    total: int    # block size over which the label at this level stays constant
    sub: int      # block size over which the next level's label stays constant


def product(dims: Sequence[int]) -> int:
    """Product of the sizes, 1 for an empty sequence."""
    if len(dims) == 0:
        return 1
    return int(np.prod(np.asarray(dims, dtype=np.int64)))


def span_factor(dims: Sequence[int], i: int) -> SpanFactor:
    """
    Return (total, sub) for position i of dims:
      total = product(dims[i:]), sub = product(dims[i+1:])
    Shared by the header (colspan) and the body (rowspan) traversal.
    """
    if i < 0 or i >= len(dims):
        raise IndexError(f"span position {i} out of range for {len(dims)} dims")
    sub = product(dims[i + 1:])
    return SpanFactor(int(dims[i]) * sub, sub)


def category_index(position: int, f: SpanFactor) -> int:
    return (position % f.total) // f.sub


def starts_span(position: int, f: SpanFactor) -> bool:
    return position % f.sub == 0


def is_group_first(position: int, f: SpanFactor) -> bool:
    return position % f.total == 0


def is_group_last(position: int, f: SpanFactor) -> bool:
    return position % f.total == f.total - f.sub


def unravel(offset: int, shape: Sequence[int]) -> Tuple[int, ...]:
    """Coordinates of a flat offset in a row-major array of the given shape."""
    if len(shape) == 0:
        return ()
    return tuple(int(c) for c in np.unravel_index(offset, tuple(int(s) for s in shape)))
