import logging

from .base import BaseTreeLayout

logger = logging.getLogger(__name__)


class RectangularTreeLayout(BaseTreeLayout):
    """Phylogram: path length maps to x, leaf order to y."""

    def _x(self, node) -> float:
        return self.ctx.tree_left + self.depth_fraction(node) * self.ctx.tree_width

    def calculate_leaf_sizes(self):
        """Every leaf gets the same share of the axis: the gap between two leaves."""
        n = self.ctx.num_leaves
        gap = self.ctx.height / (n - 1) if n > 1 else float(self.ctx.height)
        self._set_sizes([gap] * n)

    def _prepare(self):
        ctx = self.ctx
        n = ctx.num_leaves
        ctx.tree_left = float(ctx.left)
        ctx.tree_width = float(ctx.width)

        if n > 1:
            ctx.leaf_gap = ctx.height / (n - 1)
        else:
            logger.debug("Single leaf, leaf gap set to 0")
            ctx.leaf_gap = 0.0

        # A rooted tree keeps one node gap in front of the root for its edge
        if self.t.rooted:
            ctx.node_gap = ctx.width / n
            ctx.tree_left += ctx.node_gap
            ctx.tree_width -= ctx.node_gap
        else:
            ctx.node_gap = ctx.width / (n - 1) if n > 1 else 0.0

    def _leaf_coordinate(self, p):
        p.x = self._x(p)
        p.y = self.ctx.top + p.order * self.ctx.leaf_gap

    def _internal_coordinate(self, p):
        pl = self.t.first_child(p)
        pr = self.t.rightmost_child(p)
        p.x = self._x(p)
        p.y = pl.y + (pr.y - pl.y) / 2

    def _set_depth(self, node):
        node.x = self._x(node)

    def _depth(self, node):
        return node.x

    def _recorded_max(self, node):
        return node.max_child_x

    def _set_recorded_max(self, node, value):
        node.max_child_x = value
