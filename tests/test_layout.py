import math

import ete3
import pytest

from phylolayout import LayoutStyle, compute_layout
from phylolayout.layout.leaves import triangular_leaf_sizes


def _tree(newick):
    """ete3 tree with a zero-length root edge."""
    t = ete3.Tree(newick, format=1)
    t.dist = 0.0
    return t


def _radial(newick, make_settings, **style):
    style = LayoutStyle(tree_type="circlephylogram", **style)
    return compute_layout(_tree(newick), {}, make_settings({}), style)


def _rect(newick, make_settings, **style):
    style = LayoutStyle(tree_type="phylogram", **style)
    return compute_layout(_tree(newick), {}, make_settings({}), style)


# ----------------------------
# Leaf sizes
# ----------------------------

def test_three_leaves_full_circle(make_settings):
    ctx = _radial("(A:1,B:1,C:1);", make_settings, angle_min=0, angle_max=360, radius=100)
    a, b, c = ctx.leaves()

    assert [a.size, b.size, c.size] == pytest.approx([2 * math.pi * k / 6 for k in (1, 2, 3)])
    assert [a.angle, b.angle, c.angle] == pytest.approx([math.pi / 6, 2 * math.pi / 3, 3 * math.pi / 2])
    assert ctx.smallest_leaf_size == pytest.approx(math.pi / 3)
    assert ctx.leaf_angle == pytest.approx(2 * math.pi / 3)


@pytest.mark.parametrize("count", [1, 2, 5, 17])
def test_triangular_sizes_fill_the_span(count):
    span = math.radians(270)
    sizes = triangular_leaf_sizes(count, span)
    assert len(sizes) == count
    assert sum(sizes) == pytest.approx(span)
    assert sizes == sorted(sizes)


def test_triangular_sizes_empty():
    assert triangular_leaf_sizes(0, 1.0) == []


def test_radial_leaf_angles_are_packed(make_settings):
    ctx = _radial("((A:1,B:2):1,(C:1,(D:1,E:1):1):1);", make_settings, radius=200)
    leaves = ctx.leaves()
    assert [leaf.label for leaf in leaves] == ["A", "B", "C", "D", "E"]
    assert leaves[0].angle == pytest.approx(leaves[0].size / 2)
    for prev, leaf in zip(leaves, leaves[1:]):
        assert leaf.angle == pytest.approx(prev.angle + prev.size / 2 + leaf.size / 2)
    assert leaves[-1].angle + leaves[-1].size / 2 == pytest.approx(math.radians(270))


# ----------------------------
# Path lengths
# ----------------------------

def test_path_lengths_follow_edges(make_settings):
    ctx = _rect("((A:1,B:2):0.5,C:3);", make_settings, width=100, height=100)
    assert ctx.node("Int_0").path_length == 0.0
    assert ctx.node("Int_1").path_length == pytest.approx(0.5)
    assert ctx.node("A").path_length == pytest.approx(1.5)
    assert ctx.node("B").path_length == pytest.approx(2.5)
    assert ctx.node("C").path_length == pytest.approx(3.0)
    assert ctx.max_path_length == pytest.approx(3.0)


def test_tiny_edges_snap_to_zero(make_settings):
    ctx = _rect("((A:0.000001,B:1):0.000005,C:1);", make_settings, width=100, height=100)
    assert ctx.node("Int_1").path_length == 0.0
    assert ctx.node("A").path_length == 0.0
    assert ctx.node("B").path_length == pytest.approx(1.0)


def test_max_path_length_override(make_settings):
    ctx = _rect("(A:1,B:2);", make_settings, width=100, height=100, max_path_length=4)
    assert ctx.max_path_length == 4.0
    assert ctx.node("B").x == pytest.approx(ctx.tree_left + 0.5 * ctx.tree_width)


def test_zero_length_tree_has_no_nan(make_settings):
    ctx = _rect("(A:0,B:0,C:0);", make_settings, width=100, height=100)
    assert ctx.max_path_length == 0.0
    for node in ctx.arena:
        assert not math.isnan(node.x)
        assert not math.isnan(node.y)
        assert node.x == pytest.approx(ctx.tree_left)


# ----------------------------
# Radial coordinates
# ----------------------------

def test_radius_formula(make_settings):
    ctx = _radial("((A:1,B:2):1,C:1);", make_settings, radius=100, root_length=0.1)
    R = 100.0
    for node in ctx.arena:
        expected = R - (0.1 + node.path_length / ctx.max_path_length * (R / 2))
        assert node.radius == pytest.approx(expected)
        assert node.x == pytest.approx(node.radius * math.cos(node.angle))
        assert node.y == pytest.approx(node.radius * math.sin(node.angle))


def test_internal_angle_and_backarc(make_settings):
    ctx = _radial("((A:1,B:2):1,C:1);", make_settings, radius=100)
    inner = ctx.node("Int_1")
    a, b = ctx.node("A"), ctx.node("B")

    assert inner.angle == pytest.approx((a.angle + b.angle) / 2)
    for child in (a, b):
        bx, by = child.backarc
        assert bx == pytest.approx(inner.radius * math.cos(child.angle))
        assert by == pytest.approx(inner.radius * math.sin(child.angle))
    assert ctx.arena.root.backarc is None


# ----------------------------
# Rectangular coordinates
# ----------------------------

def test_unrooted_star_is_evenly_spaced(make_settings):
    ctx = _rect("(A:1,B:1,C:1,D:1);", make_settings, width=100, height=300)
    leaves = ctx.leaves()

    assert not ctx.arena.rooted
    assert len({leaf.x for leaf in leaves}) == 1
    assert [leaf.y for leaf in leaves] == pytest.approx([0, 100, 200, 300])
    assert ctx.leaf_gap == pytest.approx(100)
    assert [leaf.size for leaf in leaves] == pytest.approx([100] * 4)


def test_rooted_tree_reserves_node_gap(make_settings):
    ctx = _rect("((A:1,B:1):1,C:2);", make_settings, width=90, height=100)

    assert ctx.arena.rooted
    assert ctx.node_gap == pytest.approx(30)
    assert ctx.tree_left == pytest.approx(30)
    assert ctx.tree_width == pytest.approx(60)
    assert [leaf.y for leaf in ctx.leaves()] == pytest.approx([0, 50, 100])
    assert ctx.node("Int_1").y == pytest.approx(25)
    assert ctx.arena.root.y == pytest.approx(62.5)
    assert ctx.arena.root.x == pytest.approx(30)
    assert ctx.node("C").x == pytest.approx(90)


def test_top_offsets_leaves(make_settings):
    ctx = _rect("(A:1,B:1,C:1);", make_settings, width=100, height=100, top=40)
    assert [leaf.y for leaf in ctx.leaves()] == pytest.approx([40, 90, 140])


def test_single_leaf(make_settings):
    ctx = _rect("(A:1);", make_settings, width=100, height=80, top=5)
    (leaf,) = ctx.leaves()
    assert ctx.leaf_gap == 0.0
    assert leaf.y == 5
    assert not math.isnan(leaf.x)
    assert leaf.size == pytest.approx(80)


def test_rooted_override(make_settings):
    style = LayoutStyle(tree_type="phylogram", width=90, height=100)
    ctx = compute_layout(_tree("((A:1,B:1):1,C:2);"), {}, make_settings({}), style, rooted=False)
    assert ctx.node_gap == pytest.approx(45)
    assert ctx.tree_left == 0.0


# ----------------------------
# Collapsing
# ----------------------------

COLLAPSE_TREE = "((A:1,(B:2,C:3):1):1,D:1);"


@pytest.mark.parametrize("tree_type", ["circlephylogram", "phylogram"])
def test_collapsed_node_becomes_a_leaf(make_settings, tree_type):
    style = LayoutStyle(tree_type=tree_type, width=100, height=100, radius=100)
    ctx = compute_layout(_tree(COLLAPSE_TREE), {}, make_settings({}), style, collapsed=["Int_2"])

    assert [leaf.label for leaf in ctx.leaves()] == ["A", "Int_2", "D"]
    q = ctx.node("Int_2")
    assert q.collapsed and q.is_leaf
    assert ctx.node("B").hidden and ctx.node("C").hidden


def test_collapsed_envelope_radial(make_settings):
    style = LayoutStyle(radius=100)
    ctx = compute_layout(_tree(COLLAPSE_TREE), {}, make_settings({}), style, collapsed=["Int_2"])
    q = ctx.node("Int_2")
    hidden = [ctx.node("B"), ctx.node("C")]
    assert q.max_child_radius == pytest.approx(max(n.radius for n in hidden))


def test_collapsed_envelope_rectangular(make_settings):
    style = LayoutStyle(tree_type="phylogram", width=100, height=100)
    ctx = compute_layout(_tree(COLLAPSE_TREE), {}, make_settings({}), style, collapsed=["Int_2"])
    q = ctx.node("Int_2")
    # C is the deepest hidden node
    assert q.max_child_x == pytest.approx(ctx.node("C").x)
    assert q.max_child_x == pytest.approx(ctx.tree_left + ctx.tree_width)


def test_nested_collapse_records_deepest(make_settings):
    style = LayoutStyle(tree_type="phylogram", width=100, height=100)
    ctx = compute_layout(
        _tree(COLLAPSE_TREE), {}, make_settings({}), style, collapsed=["Int_2", "Int_1"],
    )
    outer = ctx.node("Int_1")
    assert [leaf.label for leaf in ctx.leaves()] == ["Int_1", "D"]
    assert outer.max_child_x == pytest.approx(ctx.node("C").x)


def test_collapsing_keeps_radial_depth(make_settings):
    style = LayoutStyle(radius=100)
    full = compute_layout(_tree(COLLAPSE_TREE), {}, make_settings({}), style)
    folded = compute_layout(_tree(COLLAPSE_TREE), {}, make_settings({}), style, collapsed=["Int_2"])

    assert folded.max_path_length == full.max_path_length
    for label in ("Int_0", "Int_1", "A", "D"):
        assert folded.node(label).radius == pytest.approx(full.node(label).radius)


def test_collapse_leaf_is_noop(make_settings):
    style = LayoutStyle(radius=100)
    ctx = compute_layout(_tree(COLLAPSE_TREE), {}, make_settings({}), style, collapsed=["A"])
    assert not ctx.node("A").collapsed
    assert ctx.num_leaves == 4


@pytest.mark.parametrize("newick, collapsed", [
    ("(A:1);", ()),
    ("(A:1,B:1);", ()),
    ("((A:1,B:2):1,(C:1,(D:1,E:1):1):1);", ()),
    (COLLAPSE_TREE, ()),
    (COLLAPSE_TREE, ("Int_2",)),
])
@pytest.mark.parametrize("tree_type", ["circlephylogram", "phylogram"])
def test_leaf_order_is_a_permutation(make_settings, newick, collapsed, tree_type):
    style = LayoutStyle(tree_type=tree_type, width=100, height=100, radius=100)
    ctx = compute_layout(_tree(newick), {}, make_settings({}), style, collapsed=collapsed)

    leaves = ctx.leaves()
    assert sorted(leaf.order for leaf in leaves) == list(range(ctx.num_leaves))
    for position, node_id in enumerate(ctx.leaf_order):
        assert ctx.arena[node_id].order == position
    assert all(n.order == -1 for n in ctx.arena if not n.is_leaf or n.hidden)
