from __future__ import annotations
from typing import Dict, Optional
import io
import logging

import pandas as pd
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from ..core.constants import DEFAULT_SHEET_NAME, MAX_COLUMN_WIDTH, MIN_COLUMN_WIDTH
from ..core.formatter import CellFormatter
from ..core.layout import ValueCell
from .base import GridBackend, PlacedCell

logger = logging.getLogger(__name__)


class ExcelStyler:
    """Optional styling applied after the sheet has been filled."""

    def __init__(self, bold_headers: bool = True, freeze_panes: bool = True):
        self.bold_headers = bold_headers
        self.freeze_panes = freeze_panes

    def style(self, ws, table: "ExcelTable") -> None:
        if self.bold_headers:
            bold = Font(bold=True)
            for c in table.cells:
                if c.kind in ('caption', 'header', 'label'):
                    cell = ws.cell(row=c.row + 1, column=c.col + 1)
                    cell.font = bold
                    cell.alignment = Alignment(vertical='top', horizontal='left' if c.kind == 'label' else 'center')
        if self.freeze_panes:
            first_body_row = table.first_body_row + 1
            first_value_col = table.plan.num_label_cols + 1
            ws.freeze_panes = ws.cell(row=first_body_row, column=first_value_col)


class ExcelTable(GridBackend):
    """
    Renders the layout into an xlsx workbook and returns it as bytes.
    Cells are written with pandas/openpyxl, spans become merged ranges.
    """

    def __init__(self, formatter: Optional[CellFormatter] = None, styler: Optional[ExcelStyler] = None,
                 sheet_name: str = DEFAULT_SHEET_NAME):
        self.formatter = formatter
        self.styler = styler
        self.sheet_name = sheet_name

    def value_cell(self, e: ValueCell) -> None:
        value = e.raw_value
        if value is None and self.formatter is not None:
            value = self.formatter.format(e.offset, None) or None
        self.cells.append(PlacedCell(self._row, e.col, value, 'value', offset=e.offset))

    @property
    def first_body_row(self) -> int:
        has_caption = any(c.kind == 'caption' for c in self.cells)
        return int(has_caption) + self.num_header_rows

    def _column_widths(self) -> Dict[int, int]:
        widths: Dict[int, int] = {}
        for c in self.cells:
            if c.kind == 'caption' or c.colspan > 1 or c.value is None:
                continue
            widths[c.col] = max(widths.get(c.col, 0), len(str(c.value)))
        return {col: max(MIN_COLUMN_WIDTH, min(w + 2, MAX_COLUMN_WIDTH)) for col, w in widths.items()}

    def finalize(self) -> bytes:
        cells = self.placed_cells()
        df = pd.DataFrame(self.grid(), dtype=object)
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=self.sheet_name, header=False, index=False)
            ws = writer.book[self.sheet_name]
            for c in cells:
                if c.rowspan > 1 or c.colspan > 1:
                    ws.merge_cells(start_row=c.row + 1, start_column=c.col + 1,
                                   end_row=c.row + c.rowspan, end_column=c.col + c.colspan)
                if c.kind == 'value' and self.formatter is not None and isinstance(c.value, (int, float)):
                    fmt = self.formatter.number_format(c.offset)
                    if fmt is not None:
                        ws.cell(row=c.row + 1, column=c.col + 1).number_format = fmt
            for col, width in self._column_widths().items():
                ws.column_dimensions[get_column_letter(col + 1)].width = width
            if self.styler is not None:
                self.styler.style(ws, self)
        logger.debug("xlsx sheet '%s': %d rows x %d cols", self.sheet_name, self.num_rows, self.num_cols)
        return buf.getvalue()
