from __future__ import annotations
from typing import Any, Optional
import numbers

from .strides import unravel


class CellFormatter:
    """
    Formats raw values for display. The number of decimals is taken from the
    'unit' of the category a value belongs to (usually the concept/metric dimension).
    Missing values are rendered as their status symbol, or as empty text.
    """

    def __init__(self, reader, null_text: str = ''):
        self.reader = reader
        self.null_text = null_text
        self._shape = tuple(reader.dimension_sizes(False))
        self._unit_dim = self._find_unit_dimension()

    def _find_unit_dimension(self) -> Optional[int]:
        category_unit = getattr(self.reader, 'category_unit', None)
        if category_unit is None:
            return None
        for idx in range(len(self._shape)):
            dim_id = self.reader.dimension_id(idx)
            for cat_idx in range(self._shape[idx]):
                if category_unit(dim_id, self.reader.category_id(dim_id, cat_idx)):
                    return idx
        return None

    def decimals(self, offset: int) -> Optional[int]:
        if self._unit_dim is None:
            return None
        dim_id = self.reader.dimension_id(self._unit_dim)
        coords = unravel(offset, self._shape)
        unit = self.reader.category_unit(dim_id, self.reader.category_id(dim_id, coords[self._unit_dim]))
        if not unit or unit.get('decimals') is None:
            return None
        return int(unit['decimals'])

    def format(self, offset: int, value: Any) -> str:
        if value is None:
            status = getattr(self.reader, 'status', None)
            symbol = status(offset) if status else None
            return self.null_text if symbol is None else str(symbol)
        if isinstance(value, numbers.Number) and not isinstance(value, bool):
            dec = self.decimals(offset)
            if dec is not None:
                return f"{value:.{dec}f}"
        return str(value)

    def number_format(self, offset: int) -> Optional[str]:
        """Excel number format for the value at offset, None for the default."""
        dec = self.decimals(offset)
        if dec is None:
            return None
        return '0' if dec == 0 else '0.' + '0' * dec
