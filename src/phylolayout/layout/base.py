from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..context import LayoutContext
    from ..tree import Node

logger = logging.getLogger(__name__)

# Edge lengths below this are float noise
EDGE_EPSILON = 0.00001


class BaseTreeLayout:
    """
    Shared coordinate pass. Subclasses supply the leaf sizing and the
    projection of a node onto the drawing plane.
    """

    def __init__(self, context: "LayoutContext"):
        if context.arena is None:
            raise ValueError("Tree layout needs a tree")
        self.ctx = context
        self.t = context.arena
        self.style = context.style

    def calculate(self) -> None:
        # 1. Leaf order and path lengths
        self._assign_leaf_order()
        self._calculate_path_lengths()

        # 2. Leaf sizes must exist before any coordinate
        self.calculate_leaf_sizes()
        self._prepare()

        # 3. Children before parents
        for n in self.t.postorder():
            if n.is_leaf:
                self._leaf_coordinate(n)
            else:
                self._internal_coordinate(n)

        # 4. Envelopes of collapsed subtrees
        self._calculate_collapsed_envelopes()
        logger.debug(
            "%s: %d leaves, max path length %g",
            type(self).__name__, self.ctx.num_leaves, self.ctx.max_path_length,
        )

    def _assign_leaf_order(self) -> None:
        leaves = self.t.leaves()
        for i, leaf in enumerate(leaves):
            leaf.order = i
        self.ctx.leaf_order = [leaf.id for leaf in leaves]

    def _calculate_path_lengths(self) -> None:
        root = self.t.root
        root.path_length = root.edge_length
        max_path_length = root.path_length

        for n in self.t.preorder(include_hidden=True):
            if n.is_root:
                continue
            d = n.edge_length
            if d < EDGE_EPSILON:
                d = 0.0
            n.path_length = self.t[n.parent].path_length + d
            max_path_length = max(max_path_length, n.path_length)

        if self.style.max_path_length is not None:
            max_path_length = float(self.style.max_path_length)
        if max_path_length <= 0:
            logger.debug("Tree has no length, every node is placed at depth 0")
        self.ctx.max_path_length = max_path_length

    def depth_fraction(self, node: "Node") -> float:
        """Path length scaled to [0, 1]; a tree without length puts everything at 0."""
        if self.ctx.max_path_length <= 0:
            return 0.0
        return node.path_length / self.ctx.max_path_length

    def _set_sizes(self, sizes: List[float]) -> None:
        leaves = self.ctx.leaves()
        for leaf, size in zip(leaves, sizes):
            leaf.size = size
        self.ctx.smallest_leaf_size = min(sizes) if sizes else None

    def _calculate_collapsed_envelopes(self) -> None:
        if not any(n.collapsed for n in self.t):
            return

        # Hidden nodes only get their depth coordinate
        for n in self.t.preorder(include_hidden=True):
            if n.hidden:
                self._set_depth(n)

        for q in self.t.postorder(include_hidden=True):
            if not q.collapsed:
                continue
            extent = None
            for d in self.t.descendants(q):
                value = self._depth(d)
                if d.collapsed:
                    value = max(value, self._recorded_max(d))
                extent = value if extent is None else max(extent, value)
            self._set_recorded_max(q, extent if extent is not None else self._depth(q))

    def calculate_leaf_sizes(self) -> None:
        raise NotImplementedError

    def _prepare(self) -> None:
        pass

    def _leaf_coordinate(self, node: "Node") -> None:
        raise NotImplementedError

    def _internal_coordinate(self, node: "Node") -> None:
        raise NotImplementedError

    def _set_depth(self, node: "Node") -> None:
        raise NotImplementedError

    def _depth(self, node: "Node") -> float:
        raise NotImplementedError

    def _recorded_max(self, node: "Node") -> float:
        raise NotImplementedError

    def _set_recorded_max(self, node: "Node", value: float) -> None:
        raise NotImplementedError
