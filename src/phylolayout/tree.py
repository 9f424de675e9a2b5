"""
Node arena used by the layout passes.

Nodes live in a flat list indexed by their integer id. Parent, child and
sibling links are ids, so collapsing a subtree only edits child-id lists.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .exceptions import LayoutError, MalformedTreeError

logger = logging.getLogger(__name__)


@dataclass
class Node:
    id: int
    label: str
    edge_length: float = 0.0
    name: str = ""
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    sibling: Optional[int] = None

    # Collapsing
    collapsed: bool = False
    hidden: bool = False
    hidden_children: List[int] = field(default_factory=list)
    max_child_radius: float = 0.0
    max_child_x: float = 0.0

    # Filled in by the layout passes
    order: int = -1
    size: float = 0.0
    path_length: float = 0.0
    angle: float = 0.0
    radius: float = 0.0
    x: float = 0.0
    y: float = 0.0
    backarc: Optional[Tuple[float, float]] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def xy(self) -> Tuple[float, float]:
        return self.x, self.y


class TreeArena:
    def __init__(self, nodes: List[Node], rooted: bool = True):
        if not nodes:
            raise MalformedTreeError("Tree has no nodes")
        self.nodes = nodes
        self.rooted = rooted
        self._by_label: Dict[str, int] = {}
        for n in nodes:
            if n.label in self._by_label:
                raise MalformedTreeError(f"Duplicate node label: {n.label!r}")
            self._by_label[n.label] = n.id

    @classmethod
    def from_ete(cls, tree, rooted: Optional[bool] = None) -> "TreeArena":
        """Build an arena from an ete3 tree (or anything with .children/.name/.dist)."""
        nodes: List[Node] = []
        internal_counter = 0
        # (ete node, parent id) in pre-order
        stack = [(tree, None)]
        while stack:
            ete_node, parent_id = stack.pop()
            nid = len(nodes)
            name = str(ete_node.name or "")
            if ete_node.children:
                label = f"Int_{internal_counter}"
                internal_counter += 1
            else:
                if not name:
                    raise MalformedTreeError("Every leaf needs a name to be matched with layer data")
                label = name
            dist = ete_node.dist
            nodes.append(Node(id=nid, label=label, name=name,
                              edge_length=float(dist) if dist is not None else 0.0,
                              parent=parent_id))
            if parent_id is not None:
                nodes[parent_id].children.append(nid)
            for child in reversed(ete_node.children):
                stack.append((child, nid))

        for n in nodes:
            for left, right in zip(n.children, n.children[1:]):
                nodes[left].sibling = right

        if rooted is None:
            rooted = len(nodes[0].children) == 2
        logger.debug("Built arena with %d nodes (rooted=%s)", len(nodes), rooted)
        return cls(nodes, rooted=rooted)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, node_id: int) -> Node:
        return self.nodes[node_id]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    @property
    def root(self) -> Node:
        return self.nodes[0]

    def find(self, key: Union[int, str]) -> Node:
        if isinstance(key, int):
            if 0 <= key < len(self.nodes):
                return self.nodes[key]
        elif key in self._by_label:
            return self.nodes[self._by_label[key]]
        raise LayoutError(f"No node {key!r} in tree")

    def ancestor(self, node: Node) -> Optional[Node]:
        return None if node.parent is None else self.nodes[node.parent]

    def first_child(self, node: Node) -> Node:
        return self.nodes[node.children[0]]

    def rightmost_child(self, node: Node) -> Node:
        """Right-most sibling of the first child."""
        q = self.first_child(node)
        while q.sibling is not None:
            q = self.nodes[q.sibling]
        return q

    def _child_ids(self, node: Node, include_hidden: bool) -> List[int]:
        if include_hidden and node.hidden_children:
            return node.children + node.hidden_children
        return node.children

    def preorder(self, start: Optional[int] = None, include_hidden: bool = False) -> Iterator[Node]:
        stack = [self.root.id if start is None else start]
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(self._child_ids(node, include_hidden)))

    def postorder(self, start: Optional[int] = None, include_hidden: bool = False) -> Iterator[Node]:
        stack = [(self.root.id if start is None else start, False)]
        while stack:
            nid, expanded = stack.pop()
            node = self.nodes[nid]
            if expanded:
                yield node
                continue
            stack.append((nid, True))
            for child in reversed(self._child_ids(node, include_hidden)):
                stack.append((child, False))

    def leaves(self) -> List[Node]:
        """Visible leaves (collapsed nodes included) in traversal order."""
        return [n for n in self.preorder() if n.is_leaf]

    def descendants(self, node: Node) -> List[Node]:
        """All nodes below `node` in the full tree, hidden ones included."""
        return [n for n in self.preorder(node.id, include_hidden=True) if n.id != node.id]

    def collapse(self, key: Union[int, str]) -> Node:
        """
        Hide everything below a node. Its former children are kept in
        `hidden_children` so the envelope of the subtree can be computed later.
        """
        node = self.find(key)
        if node.collapsed or node.is_leaf:
            return node
        below = self.descendants(node)
        node.hidden_children = node.children
        node.children = []
        node.collapsed = True
        for d in below:
            d.hidden = True
        logger.debug("Collapsed %s (%d hidden nodes)", node.label, len(below))
        return node
