from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple
import json
import logging

from .dimension_index import effective_shape
from .errors import LabelLookupError, ReaderError

logger = logging.getLogger(__name__)


class Reader(Protocol):
    """What the layout engine needs from a data source."""

    def dimension_sizes(self, exclude_one_dim: bool = False) -> Sequence[int]: ...
    def dimension_id(self, index: int) -> str: ...
    def dimension_label(self, dim_id: str) -> str: ...
    def category_id(self, dim_id: str, category_index: int) -> str: ...
    def category_label(self, dim_id: str, category_id: str) -> str: ...
    def values(self) -> Sequence[Any]: ...
    def value_count(self) -> int: ...
    def document_label(self) -> Optional[str]: ...


def load_json_bom_safe(path: str | Path) -> Dict[str, Any]:
    text = Path(path).read_text(encoding="utf-8-sig")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ReaderError(f"'{path}' is not valid JSON: {e}") from e


def _category_ids(dim_id: str, category: Dict[str, Any]) -> Tuple[str, ...]:
    index = category.get('index')
    if isinstance(index, list):
        return tuple(str(c) for c in index)
    if isinstance(index, dict):
        # {id: position}
        return tuple(str(c) for c, _pos in sorted(index.items(), key=lambda kv: int(kv[1])))
    label = category.get('label')
    if isinstance(label, dict) and len(label) > 0:
        # index may be omitted when there is a single category
        return tuple(str(c) for c in label.keys())
    raise ReaderError(f"dimension '{dim_id}' has neither a category index nor category labels")


def _densify(raw: Any, total: int, name: str) -> List[Any]:
    if isinstance(raw, list):
        return list(raw)
    if isinstance(raw, dict):
        dense: List[Any] = [None] * total
        for k, v in raw.items():
            try:
                pos = int(k)
            except (TypeError, ValueError):
                raise ReaderError(f"'{name}' key {k!r} is not an offset") from None
            if pos < 0 or pos >= total:
                raise ReaderError(f"'{name}' offset {pos} out of range [0, {total})")
            dense[pos] = v
        return dense
    raise ReaderError(f"'{name}' must be an array or an object, got {type(raw).__name__}")


class JsonStatReader:
    """
    Reads a json-stat dataset (version 2.0, the 1.x dataset layout with id/size
    inside 'dimension' is accepted too) and answers the lookups of the layout engine.
    Sparse 'value' and 'status' objects are expanded to dense arrays.
    """

    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise ReaderError(f"json-stat document must be an object, got {type(data).__name__}")
        if data.get('class') == 'bundle' or ('dimension' not in data and len(data) == 1):
            # 1.x bundle: use its first dataset
            inner = next(iter(v for k, v in data.items() if k != 'class' and isinstance(v, dict)), None)
            if inner is None:
                raise ReaderError("json-stat bundle does not contain a dataset")
            data = inner
        dimension = data.get('dimension')
        if not isinstance(dimension, dict):
            raise ReaderError("json-stat dataset has no 'dimension' object")
        ids = data.get('id', dimension.get('id'))
        sizes = data.get('size', dimension.get('size'))
        if not isinstance(ids, list) or not isinstance(sizes, list):
            raise ReaderError("json-stat dataset requires 'id' and 'size' arrays")
        if len(ids) != len(sizes):
            raise ReaderError(f"'id' has {len(ids)} entries but 'size' has {len(sizes)}")
        if 'value' not in data:
            raise ReaderError("json-stat dataset has no 'value'")

        self.data = data
        self._ids: Tuple[str, ...] = tuple(str(i) for i in ids)
        try:
            self._sizes: Tuple[int, ...] = tuple(int(s) for s in sizes)
        except (TypeError, ValueError) as e:
            raise ReaderError(f"'size' must hold integers: {e}") from e
        self._categories: Dict[str, Tuple[str, ...]] = {}
        for dim_id in self._ids:
            dim = dimension.get(dim_id)
            if not isinstance(dim, dict):
                raise ReaderError(f"dimension '{dim_id}' listed in 'id' is missing in 'dimension'")
            self._categories[dim_id] = _category_ids(dim_id, dim.get('category') or {})

        total = 1
        for s in self._sizes:
            total *= s
        self._values = _densify(data['value'], total, 'value')
        status = data.get('status')
        if status is None or isinstance(status, str):
            self._status = status
        else:
            self._status = _densify(status, total, 'status')
        logger.debug("read json-stat dataset: ids=%s size=%s values=%d",
                     list(self._ids), list(self._sizes), len(self._values))

    @classmethod
    def from_file(cls, path: str | Path) -> "JsonStatReader":
        return cls(load_json_bom_safe(path))

    @classmethod
    def from_string(cls, text: str) -> "JsonStatReader":
        try:
            return cls(json.loads(text))
        except json.JSONDecodeError as e:
            raise ReaderError(f"not valid JSON: {e}") from e

    # ---------------- Dimensions ----------------
    def dimension_sizes(self, exclude_one_dim: bool = False) -> Tuple[int, ...]:
        return effective_shape(self._sizes, exclude_one_dim)

    def dimension_id(self, index: int) -> str:
        if index < 0 or index >= len(self._ids):
            raise LabelLookupError(f"no dimension at index {index}, dataset has {len(self._ids)}")
        return self._ids[index]

    def _dimension(self, dim_id: str) -> Dict[str, Any]:
        if dim_id not in self._categories:
            raise LabelLookupError(f"unknown dimension '{dim_id}'")
        return self.data['dimension'][dim_id]

    def dimension_label(self, dim_id: str) -> str:
        label = self._dimension(dim_id).get('label')
        return '' if label is None else str(label)

    # ---------------- Categories ----------------
    def category_id(self, dim_id: str, category_index: int) -> str:
        self._dimension(dim_id)
        cats = self._categories[dim_id]
        if category_index < 0 or category_index >= len(cats):
            raise LabelLookupError(f"dimension '{dim_id}' has no category at index {category_index}")
        return cats[category_index]

    def category_label(self, dim_id: str, category_id: str) -> str:
        dim = self._dimension(dim_id)
        if category_id not in self._categories[dim_id]:
            raise LabelLookupError(f"dimension '{dim_id}' has no category '{category_id}'")
        labels = (dim.get('category') or {}).get('label') or {}
        label = labels.get(category_id)
        return category_id if label is None else str(label)

    def category_unit(self, dim_id: str, category_id: str) -> Optional[Dict[str, Any]]:
        dim = self._dimension(dim_id)
        units = (dim.get('category') or {}).get('unit') or {}
        return units.get(category_id)

    # ---------------- Values ----------------
    def values(self) -> List[Any]:
        return self._values

    def value_count(self) -> int:
        return len(self._values)

    def status(self, offset: int) -> Optional[str]:
        if self._status is None or isinstance(self._status, str):
            return self._status
        return self._status[offset] if offset < len(self._status) else None

    def document_label(self) -> Optional[str]:
        label = self.data.get('label')
        return None if label is None else str(label)
