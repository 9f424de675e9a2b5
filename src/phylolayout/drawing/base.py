import drawsvg as draw
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..utils import lerp_color

PALETTE = [
    "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
]

NONE_CATEGORY = "None"


def categorical_runs(items: List) -> List[Tuple[int, int, object]]:
    """
    Collapse consecutive equal items into (first, last, value) runs.

    A sentinel that differs from the last item is appended so the last run is
    closed like every other one.
    """
    if not items:
        return []
    items = list(items) + [-1 if items[-1] is None else None]

    runs = []
    prev_value = items[0]
    prev_start = 0
    for j in range(1, len(items)):
        if prev_value != items[j]:
            runs.append((prev_start, j - 1, prev_value))
            prev_start = j
        prev_value = items[j]
    return runs


class BaseLayoutDrawer:
    """
    Draws a finished LayoutContext with drawsvg.

    Subclasses place the primitives: a "cell" spans a run of leaves on the leaf
    axis and a [start, end] interval on the layer axis (radius or x).
    """

    def __init__(
        self,
        context,
        categorical_colors: Optional[Dict[int, Dict[str, str]]] = None,
        stack_bar_colors: Optional[Dict[int, List[str]]] = None,
        padding: float = 20,
    ):
        if not context.has_tree:
            raise ValueError("Nothing to draw: the layout has no tree")
        self.ctx = context
        self.style = context.style
        self.categorical_colors = {k: dict(v) for k, v in (categorical_colors or {}).items()}
        self.stack_bar_colors = dict(stack_bar_colors or {})
        self.padding = float(padding)

        w, h, origin = self._canvas()
        self.d = draw.Drawing(w, h, origin=origin)
        x0 = -w / 2 if origin == "center" else origin[0]
        y0 = -h / 2 if origin == "center" else origin[1]
        self.d.append(draw.Rectangle(x0, y0, w, h, fill="white"))

    # --- Subclass hooks ---

    def _canvas(self):
        """Return (width, height, origin) of the drawing."""
        raise NotImplementedError

    def _cell(self, first, last, start: float, end: float, fill: str, opacity: float = 1.0) -> None:
        raise NotImplementedError

    def _leaf_text(self, layer, leaf, text: str, font_size: float) -> None:
        raise NotImplementedError

    def draw_tree(self) -> None:
        raise NotImplementedError

    def draw_guide_lines(self) -> None:
        raise NotImplementedError

    def draw_layer_names(self) -> None:
        raise NotImplementedError

    # --- Shared drawing ---

    def draw(self):
        """Standard drawing loop: backgrounds, guide lines, tree, layers, titles."""
        self.draw_layer_backgrounds()
        self.draw_guide_lines()
        self.draw_tree()
        self.draw_layers()
        self.draw_layer_names()
        return self.d

    def _value(self, leaf, index):
        row = self.ctx.table.get(leaf.label)
        return None if row is None else row[index]

    def category_color(self, layer, value) -> str:
        name = NONE_CATEGORY if value in (None, "", "null") else str(value)
        colors = self.categorical_colors.setdefault(layer.index, {})
        if name not in colors:
            colors[name] = "#ffffff" if name == NONE_CATEGORY else PALETTE[len(colors) % len(PALETTE)]
        return colors[name]

    def stack_color(self, layer, j: int) -> str:
        colors = self.stack_bar_colors.get(layer.index)
        if colors and j < len(colors):
            return colors[j]
        return PALETTE[j % len(PALETTE)]

    def draw_layer_backgrounds(self):
        leaves = self.ctx.leaves()
        first, last = leaves[0], leaves[-1]
        for layer in self.ctx.layers:
            start, end = self.ctx.boundaries[layer.order]
            if not ((layer.is_numerical and layer.type == "bar") or layer.is_text):
                continue
            if layer.is_text:
                fill, opacity = layer.color_start or "#ffffff", 1.0
            else:
                fill, opacity = layer.color or "#000000", float(self.style.background_opacity)
            self._cell(first, last, start, end, fill, opacity)

    def draw_layers(self):
        for layer in self.ctx.layers:
            if self.ctx.layer_height(layer) == 0:
                continue
            if layer.is_text:
                self._draw_text_layer(layer)
            elif layer.is_categorical or layer.is_parent:
                self._draw_categorical_layer(layer)
            elif layer.is_numerical:
                self._draw_numerical_layer(layer)
            elif layer.is_stackbar:
                self._draw_stack_bar_layer(layer)

    def _draw_text_layer(self, layer):
        font = self.ctx.layer_fonts.get(layer.order, float(self.style.max_font_size))
        for leaf in self.ctx.leaves():
            value = self._value(leaf, layer.index)
            if value is None or str(value) == "":
                continue
            self._leaf_text(layer, leaf, str(value), font)

    def _draw_categorical_layer(self, layer):
        start, end = self.ctx.boundaries[layer.order]
        leaves = self.ctx.leaves()
        runs = categorical_runs([self._value(leaf, layer.index) for leaf in leaves])
        if layer.is_parent:
            # Items without a parent are left blank
            runs = [r for r in runs if r[2] not in ("", None)]

        for j, (first, last, value) in enumerate(runs):
            if layer.is_categorical:
                color = self.category_color(layer, value)
            elif j % 2 == 1 and j == len(runs) - 1:
                color = "#AAAAAA"
            elif j % 2 == 1:
                color = "#888888"
            else:
                color = "#666666"
            self._cell(leaves[first], leaves[last], start, end, color)

    def _draw_numerical_layer(self, layer):
        start, end = self.ctx.boundaries[layer.order]
        height = self.ctx.layer_height(layer)
        color = layer.color or "#000000"
        for leaf in self.ctx.leaves():
            value = self._value(leaf, layer.index)
            if value is None:
                continue
            if layer.type == "intensity":
                fill = lerp_color(layer.color_start or "#ffffff", color, value / height)
                self._cell(leaf, leaf, start, end, fill)
            elif value > 0:
                self._cell(leaf, leaf, start, start + value, color)

    def _draw_stack_bar_layer(self, layer):
        start, _ = self.ctx.boundaries[layer.order]
        for leaf in self.ctx.leaves():
            offset = 0.0
            for j, value in enumerate(self._value(leaf, layer.index) or []):
                if value > 0:
                    self._cell(leaf, leaf, start + offset, start + offset + value, self.stack_color(layer, j))
                offset += value

    def as_svg(self) -> str:
        return self.d.as_svg()

    def save_svg(self, outpath) -> None:
        outpath = Path(outpath)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        self.d.save_svg(str(outpath))

    def save_png(self, outpath, scale: float = 1.0) -> None:
        """
        Export PNG using CairoSVG (optional dependency).
        scale>1 increases resolution while keeping same logical size.
        """
        try:
            import cairosvg
        except ImportError as e:
            raise ImportError(
                "PNG export requires cairosvg. Install with: pip install 'phylolayout[export]'"
            ) from e

        outpath = Path(outpath)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        cairosvg.svg2png(
            bytestring=self.d.as_svg().encode("utf-8"),
            write_to=str(outpath),
            scale=scale,
        )
