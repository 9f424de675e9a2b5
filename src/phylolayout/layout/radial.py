import math

from ..utils import arc_point
from .base import BaseTreeLayout
from .leaves import triangular_leaf_sizes


class RadialTreeLayout(BaseTreeLayout):
    """Circlephylogram: leaf order maps to angle, path length to radius."""

    def _radius(self, node) -> float:
        R = float(self.ctx.radius)
        return R - (float(self.style.root_length) + self.depth_fraction(node) * (R / 2))

    def _span(self) -> float:
        return math.radians(float(self.style.angle_max) - float(self.style.angle_min))

    def calculate_leaf_sizes(self):
        self._set_sizes(triangular_leaf_sizes(self.ctx.num_leaves, self._span()))

    def _prepare(self):
        n = self.ctx.num_leaves
        self.ctx.leaf_angle = self._span() / n if n else 0.0

    def _leaf_coordinate(self, p):
        # Leaves are packed one after another by half sizes
        if p.order == 0:
            p.angle = p.size / 2
        else:
            prev_leaf = self.ctx.leaf(p.order - 1)
            p.angle = prev_leaf.angle + prev_leaf.size / 2 + p.size / 2

        p.radius = self._radius(p)
        p.x, p.y = arc_point(p.angle, p.radius)

    def _internal_coordinate(self, p):
        left_angle = self.t.first_child(p).angle
        right_angle = self.t.rightmost_child(p).angle

        p.angle = left_angle + (right_angle - left_angle) / 2
        p.radius = self._radius(p)
        p.x, p.y = arc_point(p.angle, p.radius)

        # Where each child's radial line meets this node's arc
        for child_id in p.children:
            q = self.t[child_id]
            q.backarc = arc_point(q.angle, p.radius)

    def _set_depth(self, node):
        node.radius = self._radius(node)

    def _depth(self, node):
        return node.radius

    def _recorded_max(self, node):
        return node.max_child_radius

    def _set_recorded_max(self, node, value):
        node.max_child_radius = value
