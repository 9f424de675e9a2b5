import drawsvg as draw

from .base import BaseLayoutDrawer


class RectangularLayoutDrawer(BaseLayoutDrawer):
    """
    Draws a phylogram layout: the tree grows to the right and every layer is a
    vertical band after it.
    """

    title_space = 120

    def __init__(self, context, **kwargs):
        if context.is_radial:
            raise ValueError("RectangularLayoutDrawer needs a phylogram layout")
        super().__init__(context, **kwargs)

    def _canvas(self):
        ctx = self.ctx
        x0 = min(0.0, ctx.left) - self.padding
        y0 = ctx.top - self.padding - self.title_space
        w = max(ctx.total_radius, ctx.left + ctx.width) - x0 + self.padding
        h = ctx.height + 2 * self.padding + self.title_space + self._leaf_extent()
        return w, h, (x0, y0)

    def _leaf_extent(self) -> float:
        leaves = self.ctx.leaves()
        return max(leaf.size for leaf in leaves) if leaves else 0.0

    def _cell(self, first, last, start, end, fill, opacity=1.0):
        y_top = first.y - first.size / 2
        y_bottom = last.y + last.size / 2
        self.d.append(draw.Rectangle(
            start, y_top, end - start, y_bottom - y_top,
            fill=fill, fill_opacity=opacity, stroke="none",
        ))

    def _leaf_text(self, layer, leaf, text, font_size):
        x = self.ctx.boundaries[layer.order][0] + font_size * float(self.style.font_aspect_ratio)
        self.d.append(draw.Text(
            text, font_size, x, leaf.y + font_size / 3,
            font_family=self.style.font_family,
            fill=layer.color or "black",
        ))

    def draw_tree(self):
        t = self.ctx.arena
        stroke = dict(stroke=self.style.branch_color, stroke_width=self.style.branch_size)

        # Root "handle" over the reserved node gap
        root = t.root
        self.d.append(draw.Line(self.ctx.left, root.y, root.x, root.y, **stroke))

        for p in t.preorder():
            # 1. Horizontal branch
            parent = t.ancestor(p)
            if parent is not None:
                self.d.append(draw.Line(parent.x, p.y, p.x, p.y, **stroke))

            # 2. Vertical connector
            if not p.is_leaf:
                top, bottom = t.first_child(p), t.rightmost_child(p)
                self.d.append(draw.Line(p.x, top.y, p.x, bottom.y, stroke_linecap="round", **stroke))

            if p.collapsed:
                half = self.ctx.leaf_gap / 2
                self.d.append(draw.Lines(
                    p.x, p.y, p.max_child_x, p.y - half, p.max_child_x, p.y + half, close=True,
                    fill="none", stroke=self.style.branch_color, stroke_width=1,
                ))

    def draw_guide_lines(self):
        beginning_of_layers = self.ctx.beginning_of_layers
        for leaf in self.ctx.leaves()[::2]:
            self.d.append(draw.Line(leaf.x, leaf.y, beginning_of_layers, leaf.y,
                                    stroke="#cccccc", stroke_width=0.5))

    def draw_layer_names(self):
        for layer in self.ctx.layers:
            height = self.ctx.layer_height(layer)
            if height == 0:
                continue
            start, end = self.ctx.boundaries[layer.order]
            font_size = min(height, float(self.style.max_font_size_label))
            x = end - height / 2 + font_size / 3
            y = self.ctx.top - self.padding
            self.d.append(draw.Text(
                layer.title, font_size, x, y,
                transform=f"rotate(-90,{x},{y})",
                font_family="sans-serif",
                fill=layer.color or "black",
            ))
