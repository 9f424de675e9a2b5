"""
Per-leaf layer values: synthetic rows for collapsed nodes, normalization and
bar scaling. The context table is rewritten in place at every step.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, List

import numpy as np

from .utils import is_number, to_float

if TYPE_CHECKING:
    from .context import LayoutContext
    from .layers import LayerDescriptor

logger = logging.getLogger(__name__)

NONE_TOKEN = "None"


def split_segments(value: Any) -> np.ndarray:
    """Stack-bar cell ('1;2;3' or a sequence) -> float array, NaN for bad items."""
    if value is None:
        return np.zeros(0)
    if isinstance(value, str):
        items = value.split(";")
    else:
        items = list(value)
    return np.array([to_float(v) for v in items], dtype=float)


def normalize(values, mode: str):
    """Apply a normalization mode elementwise. Invalid input becomes NaN, never an error."""
    arr = np.asarray(values, dtype=float)
    with np.errstate(invalid="ignore", divide="ignore"):
        if mode == "sqrt":
            return np.sqrt(arr)
        if mode == "log":
            return np.log10(arr + 1)
    return arr


def add_collapsed_rows(ctx: "LayoutContext") -> None:
    """
    Give every collapsed node a row of neutral values so layers can treat it
    like any other leaf.
    """
    if ctx.arena is None:
        return
    collapsed = [n for n in ctx.arena if n.collapsed and not n.hidden]
    if not collapsed or not ctx.table:
        return

    sample = next(iter(ctx.table.values()))
    kinds = {layer.index: layer for layer in ctx.layers}

    for q in collapsed:
        row: List[Any] = [q.label]
        for j in range(1, len(sample)):
            layer = kinds.get(j)
            value = sample[j]
            if layer is not None:
                if layer.is_stackbar:
                    row.append(";".join(["0"] * len(split_segments(value))))
                elif layer.is_numerical:
                    row.append(0)
                else:
                    row.append(NONE_TOKEN)
            elif isinstance(value, str) and ";" in value:
                row.append(";".join(["0"] * len(value.split(";"))))
            elif is_number(value):
                row.append(0)
            else:
                row.append(NONE_TOKEN)
        ctx.table[q.label] = row
        ctx.synthetic_rows.add(q.label)
    logger.debug("Added %d rows for collapsed nodes", len(collapsed))


def normalize_values(ctx: "LayoutContext") -> None:
    """
    Normalize numerical and stack-bar columns and record the per-layer maximum
    of the normalized numerical values in ``ctx.param_max``.
    """
    param_max = {}
    for row in ctx.table.values():
        for layer in ctx.layers:
            if layer.is_categorical or layer.is_parent:
                continue

            if layer.is_stackbar:
                row[layer.index] = normalize(split_segments(row[layer.index]), layer.normalization).tolist()
                continue

            value = float(normalize(to_float(row[layer.index]), layer.normalization))
            row[layer.index] = value

            # NaN does not take part in the maximum
            tracked = 0.0 if math.isnan(value) else value
            if layer.index not in param_max or tracked > param_max[layer.index]:
                param_max[layer.index] = tracked

    ctx.param_max = param_max


def scale_stack_bar(segments, height: float) -> List[float]:
    arr = np.asarray(segments, dtype=float)
    total = float(arr.sum()) if arr.size else 0.0
    if total == 0 or not math.isfinite(total):
        return [0.0] * int(arr.size)
    return (arr * (height / total)).tolist()


def scale_clamped(value: float, vmin: float, vmax: float, height: float) -> float:
    if math.isnan(value) or vmax == vmin:
        return 0.0
    if value > vmax:
        bar_size = vmax - vmin
    elif value < vmin:
        bar_size = 0.0
    else:
        bar_size = value - vmin
    if bar_size == 0:
        return 0.0
    return bar_size * height / (vmax - vmin)


def scale_auto(value: float, param_max: float, height: float) -> float:
    if math.isnan(value) or value == 0:
        return 0.0
    if not math.isfinite(param_max) or param_max <= 0:
        return 0.0
    return max(0.0, value * height / param_max)


def _scale_layer(ctx: "LayoutContext", layer: "LayerDescriptor") -> None:
    height = ctx.layer_height(layer)
    index = layer.index

    if layer.is_stackbar:
        for row in ctx.table.values():
            row[index] = scale_stack_bar(row[index], height)
        return

    min_new = max_new = None
    for row in ctx.table.values():
        value = row[index]
        if not layer.min_max_disabled:
            row[index] = scale_clamped(value, layer.min_value, layer.max_value, height)
            continue

        if not math.isnan(value):
            if min_new is None or value < min_new:
                min_new = value
            if max_new is None or value > max_new:
                max_new = value
        row[index] = scale_auto(value, ctx.param_max.get(index, 0.0), height)

    if min_new is not None:
        ctx.observed_ranges[index] = (min_new, max_new)


def calculate_bar_sizes(ctx: "LayoutContext") -> None:
    """Turn normalized values into pixel extents bounded by each layer's height."""
    for layer in ctx.layers:
        if layer.is_parent or layer.is_categorical:
            continue
        _scale_layer(ctx, layer)
