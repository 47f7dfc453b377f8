from __future__ import annotations
from pathlib import Path
from typing import Optional
import io

import matplotlib.pyplot as plt
from matplotlib.collections import PatchCollection
from matplotlib.patches import Rectangle

from ..core.formatter import CellFormatter
from ..render.base import GridBackend

KIND_COLORS = {
    'caption': '#ffffff',
    'header': '#d9d9e0',
    'label': '#f6f7f9',
    'value': '#ffffff',
}


class FigureTable(GridBackend):
    """
    Draws the placed table as a PNG preview: one rectangle per (merged) cell,
    labels and values as text. Returns the PNG bytes, writes them to out_path if given.
    """

    def __init__(self, out_path: Optional[str | Path] = None, formatter: Optional[CellFormatter] = None,
                 cell_width: float = 1.2, cell_height: float = 0.3, dpi: int = 100, fontsize: int = 8):
        self.out_path = out_path
        self.formatter = formatter
        self.cell_width = cell_width
        self.cell_height = cell_height
        self.dpi = dpi
        self.fontsize = fontsize

    def _text(self, c) -> str:
        if c.kind == 'value' and self.formatter is not None:
            return self.formatter.format(c.offset, c.value)
        return '' if c.value is None else str(c.value)

    def finalize(self) -> bytes:
        cells = self.placed_cells()
        n_rows, n_cols = max(self.num_rows, 1), self.num_cols
        fig = plt.figure(figsize=(n_cols * self.cell_width, n_rows * self.cell_height), dpi=self.dpi)
        try:
            ax = fig.add_axes([0, 0, 1, 1])
            ax.set_xticks([])
            ax.set_yticks([])
            ax.axis('off')
            ax.set_xlim(0, n_cols)
            ax.set_ylim(n_rows, 0)
            patches = [Rectangle((c.col, c.row), c.colspan, c.rowspan) for c in cells]
            colors = [KIND_COLORS[c.kind] for c in cells]
            ax.add_collection(PatchCollection(patches, facecolor=colors, edgecolor='#999999', linewidth=0.5))
            for c in cells:
                text = self._text(c)
                if not text:
                    continue
                if c.kind == 'value':
                    x, ha = c.col + c.colspan - 0.05, 'right'
                elif c.kind == 'label':
                    x, ha = c.col + 0.05, 'left'
                else:
                    x, ha = c.col + c.colspan / 2, 'center'
                y = c.row + 0.5
                weight = 'bold' if c.kind in ('caption', 'header') else 'normal'
                ax.text(x, y, text, ha=ha, va='center', fontsize=self.fontsize, weight=weight, clip_on=True)
            buf = io.BytesIO()
            fig.savefig(buf, format='png', dpi=self.dpi)
        finally:
            plt.close(fig)
        png = buf.getvalue()
        if self.out_path is not None:
            Path(self.out_path).write_bytes(png)
        return png
