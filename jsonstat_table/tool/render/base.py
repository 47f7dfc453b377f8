from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional
import logging

from ..core.dimension_index import LayoutPlan, TableConfig
from ..core.layout import (LayoutEngine, Caption, HeaderRowStart, HeaderCell,
                           BodyRowStart, LabelCell, ValueCell)

logger = logging.getLogger(__name__)


class RenderBackend:
    """Turns the layout events of one render pass into output."""

    _handlers = {
        Caption: 'caption',
        HeaderRowStart: 'header_row_start',
        HeaderCell: 'header_cell',
        BodyRowStart: 'body_row_start',
        LabelCell: 'label_cell',
        ValueCell: 'value_cell',
    }

    def begin(self, plan: LayoutPlan) -> None:
        self.plan = plan

    def handle(self, event) -> None:
        name = self._handlers.get(type(event))
        if name is None:
            raise TypeError(f"unknown layout event {event!r}")
        getattr(self, name)(event)

    def caption(self, e: Caption) -> None:
        pass

    def header_row_start(self, e: HeaderRowStart) -> None:
        pass

    def header_cell(self, e: HeaderCell) -> None:
        raise NotImplementedError

    def body_row_start(self, e: BodyRowStart) -> None:
        pass

    def label_cell(self, e: LabelCell) -> None:
        raise NotImplementedError

    def value_cell(self, e: ValueCell) -> None:
        raise NotImplementedError

    def finalize(self) -> Any:
        raise NotImplementedError


@dataclass
class PlacedCell:
    row: int
    col: int
    value: Any
    kind: str                   # 'caption' | 'header' | 'label' | 'value'
    rowspan: int = 1
    colspan: int = 1
    offset: Optional[int] = None


class GridBackend(RenderBackend):
    """
    Places every cell on an absolute grid: the caption (if any) in row 0, then
    the rendered header rows, then the body rows. Spans are kept on the anchor
    cell, covered positions stay empty.
    """

    def begin(self, plan: LayoutPlan) -> None:
        super().begin(plan)
        self.cells: List[PlacedCell] = []
        self.num_header_rows = 0
        self._row = -1

    def caption(self, e: Caption) -> None:
        self._row += 1
        # width is resolved once all cells are placed
        self.cells.append(PlacedCell(self._row, 0, e.text, 'caption'))

    def header_row_start(self, e: HeaderRowStart) -> None:
        self._row += 1
        self.num_header_rows += 1

    def header_cell(self, e: HeaderCell) -> None:
        self.cells.append(PlacedCell(self._row, e.col, e.label, 'header', colspan=e.colspan or 1))

    def body_row_start(self, e: BodyRowStart) -> None:
        self._row += 1

    def label_cell(self, e: LabelCell) -> None:
        self.cells.append(PlacedCell(self._row, e.col, e.label, 'label', rowspan=e.rowspan or 1))

    def value_cell(self, e: ValueCell) -> None:
        self.cells.append(PlacedCell(self._row, e.col, e.raw_value, 'value', offset=e.offset))

    @property
    def num_cols(self) -> int:
        return max((c.col + c.colspan for c in self.cells if c.kind != 'caption'), default=1)

    @property
    def num_rows(self) -> int:
        return max((c.row + c.rowspan for c in self.cells), default=0)

    def placed_cells(self) -> List[PlacedCell]:
        width = self.num_cols
        for c in self.cells:
            if c.kind == 'caption':
                c.colspan = width
        return self.cells

    def grid(self) -> List[List[Any]]:
        """Dense rows x cols matrix of cell values, None where a span covers a position."""
        out: List[List[Any]] = [[None] * self.num_cols for _ in range(self.num_rows)]
        for c in self.placed_cells():
            out[c.row][c.col] = c.value
        return out

    def finalize(self) -> List[List[Any]]:
        return self.grid()


def render_table(reader, backend: RenderBackend, config: Optional[TableConfig] = None) -> Any:
    """
    Lay out the reader's data and hand the complete layout to the backend.
    All events are produced before the backend sees the first one, a layout
    error therefore never leaves partial output behind.
    """
    engine = LayoutEngine(reader, config)
    plan = engine.plan()
    events = list(engine.events(plan))
    backend.begin(plan)
    for e in events:
        backend.handle(e)
    logger.debug("rendered %d layout events with %s", len(events), type(backend).__name__)
    return backend.finalize()
