"""
Layer data parser.

The table has one row per item (leaf) and one column per layer:

    item      __parent__   taxa!A;B;C    gc_content   habitat
    leaf_1    p1           1;2;3         0.41         soil
    leaf_2    p1           0;5;1         0.52         marine

- Column 0 holds the item labels matching the tree leaves.
- ``__parent__`` is a parent layer.
- A header with ``;`` is a stack bar; ``title!seg1;seg2`` names its segments.
- Columns whose values are all numbers are numerical, the rest categorical.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from ..exceptions import LayoutError
from ..settings import LayerKind
from ..utils import is_number

PARENT_COLUMN = "__parent__"


def pretty_title(header: str) -> str:
    return str(header).split("!")[0]


def infer_kind(header: str, values) -> LayerKind:
    if header == PARENT_COLUMN:
        return LayerKind.PARENT
    if ";" in header:
        return LayerKind.STACKBAR
    present = [v for v in values if v is not None and str(v) != ""]
    if present and all(is_number(v) for v in present):
        return LayerKind.NUMERICAL
    return LayerKind.CATEGORICAL


@dataclass
class LayerData:
    """
    Parsed layer table.

    Attributes
    ----------
    titles
        Display title per column (column 0 is the item column).
    headers
        Raw header per column.
    kinds
        Column index -> LayerKind (columns >= 1).
    segments
        Stack-bar column index -> segment names.
    rows
        Item label -> full row (``row[0]`` is the label).
    """

    titles: List[str]
    headers: List[str] = field(default_factory=list)
    kinds: Dict[int, LayerKind] = field(default_factory=dict)
    segments: Dict[int, List[str]] = field(default_factory=dict)
    rows: Dict[str, List[Any]] = field(default_factory=dict)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "LayerData":
        if df.shape[1] < 1:
            raise LayoutError("Layer table has no columns")
        headers = [str(c) for c in df.columns]

        rows: Dict[str, List[Any]] = {}
        for record in df.itertuples(index=False, name=None):
            label = str(record[0])
            if label in rows:
                raise LayoutError(f"Duplicate item in layer table: {label!r}")
            rows[label] = [label] + list(record[1:])

        kinds = {}
        segments = {}
        for j, header in enumerate(headers[1:], start=1):
            kinds[j] = infer_kind(header, df.iloc[:, j].tolist())
            if kinds[j] == LayerKind.STACKBAR:
                segments[j] = header.split("!")[-1].split(";")

        return cls(
            titles=[pretty_title(h) for h in headers],
            headers=headers,
            kinds=kinds,
            segments=segments,
            rows=rows,
        )


def load_layer_data(source) -> LayerData:
    """Read a tab separated layer table (path or buffer) or wrap a DataFrame."""
    if isinstance(source, LayerData):
        return source
    if isinstance(source, pd.DataFrame):
        frame = source
    else:
        frame = pd.read_csv(source, sep="\t", dtype=str, keep_default_na=False)
    return LayerData.from_frame(frame)


def as_rows(data) -> Dict[str, List[Any]]:
    """
    Working copy of the rows for one layout pass.

    Mappings are read as ``label -> values of columns 1..n``.
    """
    if data is None:
        return {}
    if isinstance(data, pd.DataFrame):
        data = LayerData.from_frame(data)
    if isinstance(data, LayerData):
        return {label: list(row) for label, row in data.rows.items()}
    if isinstance(data, Mapping):
        return {str(label): [str(label)] + list(values) for label, values in data.items()}
    raise TypeError(f"Unsupported layer data: {type(data).__name__}")
