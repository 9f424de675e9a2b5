import math

import drawsvg as draw

from ..utils import arc_point, polar_to_cartesian
from .base import BaseLayoutDrawer


class RadialLayoutDrawer(BaseLayoutDrawer):
    """Draws a circlephylogram layout. Angles in the model are radians."""

    def __init__(self, context, **kwargs):
        if not context.is_radial:
            raise ValueError("RadialLayoutDrawer needs a circlephylogram layout")
        super().__init__(context, **kwargs)

    def _canvas(self):
        size = 2 * (self.ctx.total_radius + self.padding)
        return size, size, "center"

    def _pie(self, a1, a2, r_in, r_out, fill, opacity=1.0):
        large = 1 if (a2 - a1) > math.pi else 0
        s_o_x, s_o_y = arc_point(a1, r_out)
        e_o_x, e_o_y = arc_point(a2, r_out)
        e_i_x, e_i_y = arc_point(a2, r_in)
        s_i_x, s_i_y = arc_point(a1, r_in)
        p = draw.Path(fill=fill, fill_opacity=opacity, stroke="none")
        p.M(s_o_x, s_o_y).A(r_out, r_out, 0, large, 1, e_o_x, e_o_y).L(e_i_x, e_i_y)
        p.A(r_in, r_in, 0, large, 0, s_i_x, s_i_y).Z()
        self.d.append(p)

    def _cell(self, first, last, start, end, fill, opacity=1.0):
        self._pie(first.angle - first.size / 2, last.angle + last.size / 2, start, end, fill, opacity)

    def _leaf_text(self, layer, leaf, text, font_size):
        radius = self.ctx.boundaries[layer.order][0] + font_size * float(self.style.font_aspect_ratio)
        font_gap = math.atan(font_size / radius) / 3 if radius else 0.0
        degrees = math.degrees(leaf.angle)

        # Text on the left half is flipped to stay readable
        if math.pi / 2 < (leaf.angle % (2 * math.pi)) < 1.5 * math.pi:
            anchor = "end"
            degrees += 180.0
            x, y = arc_point(leaf.angle - font_gap, radius)
        else:
            anchor = "start"
            x, y = arc_point(leaf.angle + font_gap, radius)

        self.d.append(draw.Text(
            text, font_size, x, y,
            transform=f"rotate({degrees},{x},{y})",
            text_anchor=anchor,
            font_family=self.style.font_family,
            fill=layer.color or "black",
        ))

    def draw_tree(self):
        t = self.ctx.arena
        stroke = dict(stroke=self.style.branch_color, stroke_width=self.style.branch_size, fill="none")

        # Root edge
        root = t.root
        self.d.append(draw.Line(0, 0, *root.xy, **stroke))

        for p in t.preorder():
            # 1. Radial line down to the parent's arc
            if p.backarc is not None:
                bx, by = p.backarc
                self.d.append(draw.Line(bx, by, p.x, p.y, **stroke))

            # 2. Arc joining the children
            if not p.is_leaf:
                left, right = t.first_child(p), t.rightmost_child(p)
                large = 1 if abs(right.angle - left.angle) > math.pi else 0
                path = draw.Path(**stroke)
                path.M(*left.backarc).A(p.radius, p.radius, 0, large, 1, *right.backarc)
                self.d.append(path)

            if p.collapsed:
                self._draw_collapsed(p)

    def _draw_collapsed(self, p):
        half = self.ctx.leaf_angle / 2
        x1, y1 = arc_point(p.angle + half, p.max_child_radius)
        x2, y2 = arc_point(p.angle - half, p.max_child_radius)
        self.d.append(draw.Lines(
            p.x, p.y, x1, y1, x2, y2, close=True,
            fill="none", stroke=self.style.branch_color, stroke_width=1,
        ))

    def draw_guide_lines(self):
        beginning_of_layers = self.ctx.beginning_of_layers
        for leaf in self.ctx.leaves()[::2]:
            x0, y0 = arc_point(leaf.angle, leaf.radius)
            x1, y1 = arc_point(leaf.angle, beginning_of_layers)
            self.d.append(draw.Line(x0, y0, x1, y1, stroke="#cccccc", stroke_width=0.5))

    def draw_layer_names(self):
        angle_max = float(self.style.angle_max)
        for layer in self.ctx.layers:
            height = self.ctx.layer_height(layer)
            if height == 0:
                continue
            font_size = min(height, float(self.style.max_font_size_label))
            distance = self.ctx.boundaries[layer.order][0] + height / 2 - font_size / 3
            cx, cy = polar_to_cartesian(angle_max, distance)
            rot = angle_max + 90
            self.d.append(draw.Text(
                " " + layer.title, font_size, cx, cy,
                transform=f"rotate({rot},{cx},{cy})",
                font_family="sans-serif",
                fill=layer.color or "black",
            ))
