from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
import logging
import operator

from .constants import AUTO_NUM_COL_DIMS
from .errors import ConfigError
from .strides import product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableConfig:
    split_point: Optional[int] = None      # number of row dimensions, None = auto
    exclude_one_dim: bool = False
    no_label_last_dim: bool = False
    use_row_spans: bool = True


@dataclass(frozen=True)
class DimensionSplit:
    row_dims: Tuple[int, ...]
    col_dims: Tuple[int, ...]
    num_one_dim: int

    @property
    def num_label_cols(self) -> int:
        return len(self.row_dims)

    @property
    def num_value_cols(self) -> int:
        return product(self.col_dims) if self.col_dims else 1


@dataclass(frozen=True)
class LayoutPlan:
    """Everything a single render pass needs, computed once up front."""
    shape: Tuple[int, ...]          # effective shape (leading size-one dims removed if requested)
    full_shape: Tuple[int, ...]
    split_point: int
    row_dims: Tuple[int, ...]
    col_dims: Tuple[int, ...]
    num_one_dim: int
    num_label_cols: int
    num_value_cols: int
    num_header_rows: int
    total_values: int
    no_label_last_dim: bool = False
    use_row_spans: bool = True

    @property
    def num_body_rows(self) -> int:
        return self.total_values // self.num_value_cols


def validate_shape(shape: Sequence[int]) -> Tuple[int, ...]:
    if shape is None or len(shape) == 0:
        raise ConfigError("shape must contain at least one dimension")
    out = []
    for i, s in enumerate(shape):
        if isinstance(s, bool):
            raise ConfigError(f"size of dimension {i} is not an integer: {s!r}")
        try:
            s = operator.index(s)
        except TypeError:
            raise ConfigError(f"size of dimension {i} is not an integer: {s!r}") from None
        if s < 1:
            raise ConfigError(f"size of dimension {i} must be positive, got {s}")
        out.append(s)
    return tuple(out)


def effective_shape(shape: Sequence[int], exclude_one_dim: bool = False) -> Tuple[int, ...]:
    """
    Drop the continuous leading run of size-one dimensions when exclude_one_dim is set.
    A size-one dimension after a larger one is kept.
    """
    dims = tuple(int(s) for s in shape)
    if not exclude_one_dim:
        return dims
    start = 0
    while start < len(dims) and dims[start] == 1:
        start += 1
    return dims[start:]


def auto_split_point(shape: Sequence[int]) -> int:
    """
    All dimensions are used for rows except the last two, which are used for columns.
    With fewer than three dimensions only the first one is used for rows.
    """
    if len(shape) < AUTO_NUM_COL_DIMS + 1:
        return min(1, len(shape))
    return len(shape) - AUTO_NUM_COL_DIMS


def split_dimensions(shape: Sequence[int], split_point: Optional[int] = None,
                     exclude_one_dim: bool = False) -> DimensionSplit:
    full = validate_shape(shape)
    dims = effective_shape(full, exclude_one_dim)
    if split_point is None:
        split_point = auto_split_point(dims)
    if isinstance(split_point, bool) or not isinstance(split_point, int):
        raise ConfigError(f"split point must be an integer, got {split_point!r}")
    if split_point < 0 or split_point > len(dims):
        raise ConfigError(
            f"split point {split_point} out of range [0, {len(dims)}] for shape {list(dims)}"
            + (f" (full shape {list(full)})" if exclude_one_dim else ""))
    row_dims = dims[:split_point]
    col_dims = dims[split_point:]
    return DimensionSplit(row_dims=row_dims, col_dims=col_dims,
                          num_one_dim=len(full) - len(row_dims) - len(col_dims))


def count_header_rows(col_dims: Sequence[int], no_label_last_dim: bool = False) -> int:
    if len(col_dims) == 0:
        return 1
    # one row for the dimension label and one for the category labels
    num = len(col_dims) * 2
    if no_label_last_dim:
        num -= 1
    return num


def build_plan(shape: Sequence[int], config: Optional[TableConfig] = None) -> LayoutPlan:
    cfg = config or TableConfig()
    split = split_dimensions(shape, cfg.split_point, cfg.exclude_one_dim)
    full = tuple(int(s) for s in shape)
    plan = LayoutPlan(
        shape=split.row_dims + split.col_dims,
        full_shape=full,
        split_point=len(split.row_dims),
        row_dims=split.row_dims,
        col_dims=split.col_dims,
        num_one_dim=split.num_one_dim,
        num_label_cols=split.num_label_cols,
        num_value_cols=split.num_value_cols,
        num_header_rows=count_header_rows(split.col_dims, cfg.no_label_last_dim),
        total_values=product(full),
        no_label_last_dim=cfg.no_label_last_dim,
        use_row_spans=cfg.use_row_spans,
    )
    logger.debug("layout plan: rows=%s cols=%s one_dims=%d header_rows=%d values=%d",
                 list(plan.row_dims), list(plan.col_dims), plan.num_one_dim,
                 plan.num_header_rows, plan.total_values)
    return plan
