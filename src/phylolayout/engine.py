"""
One full layout pass.

    ctx = compute_layout("((A:1,B:1):1,C:2);", data, settings)

Layer descriptors and the tree are resolved before the working table is
built, so configuration and tree errors leave nothing behind.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from .boundaries import LayerBoundaryStack
from .context import LayoutContext
from .exceptions import LayoutError
from .layers import LayerAttributeResolver
from .layout import RadialTreeLayout, RectangularTreeLayout
from .parsers import as_rows, load_tree
from .settings import LayerSettings, LayoutStyle
from .values import add_collapsed_rows, calculate_bar_sizes, normalize_values

logger = logging.getLogger(__name__)


def _check_columns(table, layers) -> None:
    if not layers:
        return
    needed = max(layer.index for layer in layers)
    for label, row in table.items():
        if len(row) <= needed:
            raise LayoutError(f"Row {label!r} has no column {needed} ({len(row) - 1} data columns)")


def compute_layout(
    tree,
    data,
    layers: LayerSettings,
    style: Optional[LayoutStyle] = None,
    collapsed: Iterable[Union[int, str]] = (),
    rooted: Optional[bool] = None,
) -> LayoutContext:
    """
    Compute the geometric model of a tree and its layers.

    Parameters
    ----------
    tree
        Newick string or path, ete3 tree, TreeArena, or None for layers only.
    data
        LayerData, DataFrame, or a mapping label -> values of columns 1..n.
    layers
        Layer order, kinds and attributes.
    style
        Tree type, canvas and font settings.
    collapsed
        Labels (``Int_<k>`` for internal nodes) or ids of nodes to collapse.
    rooted
        Overrides the rooted flag inferred from the tree.
    """
    style = style if style is not None else LayoutStyle()

    # 1. Everything that can fail on bad input
    descriptors = LayerAttributeResolver(layers).resolve()
    collapsed = list(collapsed)
    if tree is None and collapsed:
        raise LayoutError(f"Cannot collapse {collapsed!r} without a tree")
    arena = None
    if tree is not None:
        arena = load_tree(tree, rooted=rooted)
        for key in collapsed:
            arena.collapse(key)
    table = as_rows(data)
    _check_columns(table, descriptors)

    width, height, radius = style.resolve_screen()
    ctx = LayoutContext(
        style=style,
        layers=descriptors,
        table=table,
        arena=arena,
        width=width,
        height=height,
        radius=radius,
        top=float(style.top),
        left=float(style.left),
    )

    # 2. Values
    add_collapsed_rows(ctx)
    normalize_values(ctx)
    calculate_bar_sizes(ctx)

    # 3. Tree
    if arena is not None:
        layout_cls = RadialTreeLayout if style.is_radial else RectangularTreeLayout
        layout_cls(ctx).calculate()

    # 4. Layers
    LayerBoundaryStack(ctx).calculate()

    logger.debug(
        "Layout (%s): %d leaves, %d layers, outer boundary %.2f",
        style.tree_type, ctx.num_leaves, len(descriptors), ctx.total_radius,
    )
    return ctx
