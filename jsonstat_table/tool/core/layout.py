from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Union
import logging

from .constants import SCOPE_COL, SCOPE_COLGROUP, SCOPE_ROW, SCOPE_ROWGROUP
from .dimension_index import LayoutPlan, TableConfig, build_plan
from .errors import ShapeMismatchError
from .strides import (span_factor, category_index, starts_span,
                      is_group_first, is_group_last)

logger = logging.getLogger(__name__)


# ---------------- Layout events ----------------
@dataclass(frozen=True)
class Caption:
    text: str


@dataclass(frozen=True)
class HeaderRowStart:
    row: int


@dataclass(frozen=True)
class HeaderCell:
    row: int
    col: int
    label: Optional[str] = None
    scope: Optional[str] = None
    colspan: Optional[int] = None


@dataclass(frozen=True)
class BodyRowStart:
    row_index: int


@dataclass(frozen=True)
class LabelCell:
    row: int
    col: int
    label: Optional[str] = None
    rowspan: Optional[int] = None
    scope: str = SCOPE_ROW
    is_first_of_group: bool = False
    is_last_of_group: bool = False
    starts_span: bool = False


@dataclass(frozen=True)
class ValueCell:
    row: int
    col: int
    offset: int
    raw_value: Any = None


LayoutEvent = Union[Caption, HeaderRowStart, HeaderCell, BodyRowStart, LabelCell, ValueCell]


def check_values(plan: LayoutPlan, values: Sequence[Any]) -> None:
    if len(values) != plan.total_values:
        raise ShapeMismatchError(
            f"value array holds {len(values)} values, shape {list(plan.full_shape)} "
            f"requires {plan.total_values}")


class LayoutEngine:
    """
    Walks the header rows and the flat value array of a reader and yields the
    layout of a two-dimensional table as a sequence of events.

    Row dimensions become label columns, column dimensions are nested in the
    header: per column dimension one row with the dimension label and one row
    with its category labels. The engine keeps no state between passes, every
    call to events() reads the reader again.
    """

    def __init__(self, reader, config: Optional[TableConfig] = None):
        self.reader = reader
        self.config = config or TableConfig()

    def plan(self) -> LayoutPlan:
        return build_plan(self.reader.dimension_sizes(False), self.config)

    def events(self, plan: Optional[LayoutPlan] = None) -> Iterator[LayoutEvent]:
        plan = plan or self.plan()
        values = self.reader.values()
        check_values(plan, values)
        caption = self.reader.document_label()
        if caption:
            yield Caption(caption)
        yield from self.header_events(plan)
        yield from self.body_events(plan, values)
        logger.debug("layout complete: %d header rows, %d body rows",
                     plan.num_header_rows, plan.num_body_rows)

    # ---------------- Header ----------------
    def header_levels(self, plan: LayoutPlan) -> List[int]:
        """
        Level of each rendered header row: 2k is the label row of column
        dimension k, 2k+1 its category row. With no_label_last_dim the label row
        of the last column dimension is left out, a single column dimension then
        keeps only its label row.
        """
        levels = list(range(2 * len(plan.col_dims)))
        if plan.no_label_last_dim and len(plan.col_dims) > 1:
            del levels[-2]
        return levels[:plan.num_header_rows] or [0]

    def header_events(self, plan: LayoutPlan) -> Iterator[LayoutEvent]:
        for row, level in enumerate(self.header_levels(plan)):
            yield HeaderRowStart(row)
            yield from self._header_label_cells(plan, row)
            yield from self._header_value_cells(plan, row, level)

    def _header_label_cells(self, plan: LayoutPlan, row: int) -> Iterator[HeaderCell]:
        last_row = row == plan.num_header_rows - 1
        for k in range(plan.num_label_cols):
            if not last_row:
                yield HeaderCell(row=row, col=k)
                continue
            dim_id = self.reader.dimension_id(plan.num_one_dim + k)
            yield HeaderCell(row=row, col=k, label=self.reader.dimension_label(dim_id), scope=SCOPE_COL)

    def _header_value_cells(self, plan: LayoutPlan, row: int, level: int) -> Iterator[HeaderCell]:
        if not plan.col_dims:
            yield HeaderCell(row=row, col=plan.num_label_cols)
            return

        pair_idx = level // 2   # 0,1,2,3,... -> 0,0,1,1,...
        z = level % 2           # 0: dimension label, 1: category label
        dim_id = self.reader.dimension_id(plan.num_one_dim + plan.num_label_cols + pair_idx)
        f = span_factor(plan.col_dims, pair_idx)
        i = 0
        while i < plan.num_value_cols:
            if z == 0:
                label = self.reader.dimension_label(dim_id)
                span = f.total
            else:
                cat_id = self.reader.category_id(dim_id, category_index(i, f))
                label = self.reader.category_label(dim_id, cat_id)
                span = f.sub
            colspan = span if span > 1 else None
            yield HeaderCell(row=row, col=plan.num_label_cols + i, label=label,
                             scope=SCOPE_COLGROUP if colspan else SCOPE_COL, colspan=colspan)
            i += span

    # ---------------- Body ----------------
    def body_events(self, plan: LayoutPlan, values: Sequence[Any]) -> Iterator[LayoutEvent]:
        # body row indices start at zero, backends shift them below the header
        for offset in range(plan.total_values):
            col = offset % plan.num_value_cols
            row = offset // plan.num_value_cols
            if col == 0:
                yield BodyRowStart(row)
                yield from self._label_cells(plan, row)
            yield ValueCell(row=row, col=plan.num_label_cols + col, offset=offset, raw_value=values[offset])

    def _label_cells(self, plan: LayoutPlan, row: int) -> Iterator[LabelCell]:
        for i in range(plan.num_label_cols):
            f = span_factor(plan.row_dims, i)
            has_label = starts_span(row, f)
            if not has_label and plan.use_row_spans:
                continue    # covered by the rowspan of a previous row
            label = None
            if has_label:
                dim_id = self.reader.dimension_id(plan.num_one_dim + i)
                cat_id = self.reader.category_id(dim_id, category_index(row, f))
                label = self.reader.category_label(dim_id, cat_id)
            rowspan = None
            scope = SCOPE_ROW
            if plan.use_row_spans and f.sub > 1:
                rowspan = f.sub
                scope = SCOPE_ROWGROUP
            yield LabelCell(row=row, col=i, label=label, rowspan=rowspan, scope=scope,
                            is_first_of_group=is_group_first(row, f),
                            is_last_of_group=is_group_last(row, f),
                            starts_span=has_label)
