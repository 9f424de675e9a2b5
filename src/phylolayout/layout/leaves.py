"""Leaf spacing along the leaf axis."""
from __future__ import annotations

from typing import List


def triangular_leaf_sizes(count: int, span: float) -> List[float]:
    """
    Leaf i gets weight i + 1, so later leaves are drawn larger. The weights are
    scaled so that the sizes add up to `span`.
    """
    if count <= 0:
        return []
    total = count * (count + 1) / 2
    return [(i + 1) * (span / total) for i in range(count)]
