from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .layers import LayerDescriptor
from .settings import LayoutStyle
from .tree import Node, TreeArena


@dataclass
class LayoutContext:
    """
    State of one layout pass.

    Built fresh by ``compute_layout`` and populated step by step; the finished
    context is what a renderer consumes. Nothing here outlives the pass.
    """

    style: LayoutStyle
    layers: List[LayerDescriptor]
    table: Dict[str, List[Any]]
    arena: Optional[TreeArena] = None

    # Resolved screen
    width: float = 0.0
    height: float = 0.0
    radius: float = 0.0
    top: float = 0.0
    left: float = 0.0

    # Values
    param_max: Dict[int, float] = field(default_factory=dict)
    observed_ranges: Dict[int, Tuple[float, float]] = field(default_factory=dict)
    synthetic_rows: Set[str] = field(default_factory=set)

    # Tree
    leaf_order: List[int] = field(default_factory=list)
    smallest_leaf_size: Optional[float] = None
    max_path_length: float = 0.0
    leaf_gap: float = 0.0
    node_gap: float = 0.0
    leaf_angle: float = 0.0
    tree_left: float = 0.0
    tree_width: float = 0.0

    # Layers
    boundaries: List[Tuple[float, float]] = field(default_factory=list)
    layer_fonts: Dict[int, float] = field(default_factory=dict)
    layer_heights: Dict[int, float] = field(default_factory=dict)

    @property
    def has_tree(self) -> bool:
        return self.arena is not None

    @property
    def is_radial(self) -> bool:
        return self.style.is_radial

    @property
    def num_leaves(self) -> int:
        return len(self.leaf_order)

    def leaf(self, order: int) -> Node:
        return self.arena[self.leaf_order[order]]

    def leaves(self) -> List[Node]:
        return [self.arena[i] for i in self.leaf_order]

    def node(self, label: str) -> Node:
        return self.arena.find(label)

    def layer_height(self, layer: LayerDescriptor) -> float:
        return self.layer_heights.get(layer.index, layer.height)

    @property
    def total_radius(self) -> float:
        """Outer end of the last boundary."""
        return self.boundaries[-1][1] if self.boundaries else 0.0

    @property
    def beginning_of_layers(self) -> float:
        return self.boundaries[1][0] if len(self.boundaries) > 1 else self.total_radius
