from __future__ import annotations
from html import escape
from typing import List, Optional

from ..core.constants import (CSS_TABLE, CSS_NUM_ROW_DIMS, CSS_LAST_DIM_SIZE,
                              CSS_ROW_DIM, CSS_FIRST, CSS_LAST)
from ..core.dimension_index import LayoutPlan
from ..core.formatter import CellFormatter
from ..core.layout import Caption, HeaderRowStart, HeaderCell, BodyRowStart, LabelCell, ValueCell
from .base import RenderBackend


def _attrs(**kw) -> str:
    parts = []
    for k, v in kw.items():
        if v is None or v == '':
            continue
        parts.append(f' {k.rstrip("_")}="{escape(str(v))}"')
    return ''.join(parts)


class HtmlTable(RenderBackend):
    """
    Renders the layout as an html <table>.

    Label cells of a body row are <th> elements with scope row/rowgroup and the
    css classes rowdimN plus first/last at the borders of the enclosing group.
    Note: with rowspans the number of cells per row is irregular, which makes
    styling by column harder.
    """

    def __init__(self, formatter: Optional[CellFormatter] = None):
        self.formatter = formatter

    def begin(self, plan: LayoutPlan) -> None:
        super().begin(plan)
        self._parts: List[str] = []
        self._caption: Optional[str] = None
        self._section: Optional[str] = None
        self._row_open = False

    def _close_row(self):
        if self._row_open:
            self._parts.append('</tr>')
            self._row_open = False

    def _open_row(self, section: str):
        self._close_row()
        if self._section != section:
            if self._section is not None:
                self._parts.append(f'</{self._section}>')
            self._parts.append(f'<{section}>')
            self._section = section
        self._parts.append('<tr>')
        self._row_open = True

    def caption(self, e: Caption) -> None:
        self._caption = f'<caption>{escape(e.text)}</caption>'

    def header_row_start(self, e: HeaderRowStart) -> None:
        self._open_row('thead')

    def header_cell(self, e: HeaderCell) -> None:
        text = '' if e.label is None else escape(e.label)
        self._parts.append(f'<th{_attrs(scope=e.scope, colspan=e.colspan)}>{text}</th>')

    def body_row_start(self, e: BodyRowStart) -> None:
        self._open_row('tbody')

    def label_cell(self, e: LabelCell) -> None:
        css = []
        if e.starts_span or e.is_first_of_group or e.is_last_of_group:
            css.append(f'{CSS_ROW_DIM}{e.col + 1}')
        if e.is_first_of_group:
            css.append(CSS_FIRST)
        elif e.is_last_of_group:
            css.append(CSS_LAST)
        text = '' if e.label is None else escape(e.label)
        self._parts.append(
            f'<th{_attrs(scope=e.scope, rowspan=e.rowspan, class_=" ".join(css))}>{text}</th>')

    def value_cell(self, e: ValueCell) -> None:
        if self.formatter is not None:
            text = self.formatter.format(e.offset, e.raw_value)
        else:
            text = '' if e.raw_value is None else str(e.raw_value)
        self._parts.append(f'<td>{escape(text)}</td>')

    def table_classes(self) -> List[str]:
        css = [CSS_TABLE, f'{CSS_NUM_ROW_DIMS}{len(self.plan.row_dims)}']
        if self.plan.shape:
            css.append(f'{CSS_LAST_DIM_SIZE}{self.plan.shape[-1]}')
        return css

    def finalize(self) -> str:
        self._close_row()
        if self._section is not None:
            self._parts.append(f'</{self._section}>')
            self._section = None
        head = f'<table class="{" ".join(self.table_classes())}">'
        body = ''.join(self._parts)
        return head + (self._caption or '') + body + '</table>'
