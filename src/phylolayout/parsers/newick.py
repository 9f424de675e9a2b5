from __future__ import annotations

import copy
from typing import Optional

import ete3
from ete3.parser.newick import NewickError

from ..exceptions import MalformedTreeError
from ..tree import TreeArena


def load_tree(source, rooted: Optional[bool] = None) -> TreeArena:
    """
    Build a fresh node arena.

    `source` can be a Newick string, a path to a Newick file, an ete3 tree or
    an existing TreeArena (which is copied, never modified).
    """
    if isinstance(source, TreeArena):
        arena = copy.deepcopy(source)
        if rooted is not None:
            arena.rooted = rooted
        return arena

    if isinstance(source, ete3.TreeNode):
        tree = source
    else:
        text = str(source).strip()
        if not text:
            raise MalformedTreeError("Error while parsing tree data: empty tree")
        try:
            tree = ete3.Tree(text, format=1)
        except NewickError as e:
            raise MalformedTreeError(f"Error while parsing tree data: {e}") from e

    return TreeArena.from_ete(tree, rooted=rooted)
