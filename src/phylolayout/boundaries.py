"""
Ring (radial) / band (rectangular) extents of the tree body and every layer.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from .context import LayoutContext
    from .layers import LayerDescriptor

logger = logging.getLogger(__name__)


def longest_text_length(ctx: "LayoutContext", index: int) -> int:
    """Longest item of a column, synthetic rows of collapsed nodes excluded."""
    longest = 0
    for label, row in ctx.table.items():
        if label in ctx.synthetic_rows:
            continue
        value = row[index]
        if value is not None and len(str(value)) > longest:
            longest = len(str(value))
    return longest


class LayerBoundaryStack:
    def __init__(self, context: "LayoutContext"):
        self.ctx = context
        self.style = context.style

    def _seed(self) -> Tuple[float, float]:
        if self.ctx.is_radial:
            return 0.0, float(self.ctx.radius)
        if self.ctx.has_tree:
            return 0.0, float(self.ctx.width)
        return 0.0, 0.0

    def font_size(self, layer: "LayerDescriptor", previous_end: float) -> float:
        """
        Font for a text layer, bounded by the room the smallest leaf has at the
        layer's position and by the configured maximum.
        """
        max_font = float(self.style.max_font_size)
        smallest = self.ctx.smallest_leaf_size
        if smallest is None:
            return max_font
        if self.ctx.is_radial:
            # Arc length of the smallest leaf at the inner edge of this layer
            leaf_perimeter = smallest * (previous_end + layer.margin)
        else:
            leaf_perimeter = smallest
        return min(leaf_perimeter, max_font)

    def text_layer_height(self, layer: "LayerDescriptor", font: float) -> float:
        # Room for two more characters than the longest item
        longest = longest_text_length(self.ctx, layer.index) + 2
        return math.ceil(longest * float(self.style.font_aspect_ratio) * font) + 1

    def calculate(self) -> List[Tuple[float, float]]:
        boundaries = [self._seed()]

        for layer in self.ctx.layers:
            previous_end = boundaries[layer.order - 1][1]
            height = layer.height

            if layer.is_text:
                font = self.font_size(layer, previous_end)
                self.ctx.layer_fonts[layer.order] = font
                if layer.auto_height:
                    height = self.text_layer_height(layer, font)
                    self.ctx.layer_heights[layer.index] = height
                    logger.debug("Layer %d: font %.2f, height %d", layer.index, font, height)

            layer_start = previous_end + layer.margin
            boundaries.append((layer_start, layer_start + height))

        self.ctx.boundaries = boundaries
        return boundaries
