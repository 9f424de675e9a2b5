import ete3
import pandas as pd
import pytest

from phylolayout import LayerKind, LayerSettings, LayoutError, MalformedTreeError, compute_layout, load_tree
from phylolayout.parsers import as_rows, infer_kind, load_layer_data, pretty_title
from phylolayout.tree import TreeArena

TABLE = (
    "item\t__parent__\ttaxa!A;B;C\tgc_content\thabitat\n"
    "leaf_1\tp1\t1;2;3\t0.41\tsoil\n"
    "leaf_2\tp1\t0;5;1\t0.52\tmarine\n"
    "leaf_3\t\t2;2;2\t0.60\tsoil\n"
)


@pytest.fixture
def table_path(tmp_path):
    path = tmp_path / "layers.tsv"
    path.write_text(TABLE)
    return path


def test_load_layer_data_from_tsv(table_path):
    data = load_layer_data(table_path)

    assert data.titles == ["item", "__parent__", "taxa", "gc_content", "habitat"]
    assert data.kinds == {
        1: LayerKind.PARENT,
        2: LayerKind.STACKBAR,
        3: LayerKind.NUMERICAL,
        4: LayerKind.CATEGORICAL,
    }
    assert data.segments == {2: ["A", "B", "C"]}
    assert data.rows["leaf_2"] == ["leaf_2", "p1", "0;5;1", "0.52", "marine"]
    assert data.rows["leaf_3"][1] == ""


def test_load_layer_data_from_frame():
    df = pd.DataFrame({"item": ["a", "b"], "depth": [1.5, 2.0], "label": ["x", "y"]})
    data = load_layer_data(df)
    assert data.kinds == {1: LayerKind.NUMERICAL, 2: LayerKind.CATEGORICAL}
    assert data.rows["a"] == ["a", 1.5, "x"]
    assert load_layer_data(data) is data


def test_duplicate_items_are_rejected():
    df = pd.DataFrame({"item": ["a", "a"], "depth": [1, 2]})
    with pytest.raises(LayoutError, match="Duplicate"):
        load_layer_data(df)


def test_infer_kind():
    assert infer_kind("__parent__", ["x"]) == LayerKind.PARENT
    assert infer_kind("a;b", ["1;2"]) == LayerKind.STACKBAR
    assert infer_kind("n", ["1", "", "2.5"]) == LayerKind.NUMERICAL
    assert infer_kind("c", ["1", "soil"]) == LayerKind.CATEGORICAL
    assert infer_kind("e", ["", ""]) == LayerKind.CATEGORICAL


def test_pretty_title():
    assert pretty_title("taxa!A;B") == "taxa"
    assert pretty_title("plain") == "plain"


def test_as_rows_copies():
    rows = {"a": [1, 2]}
    out = as_rows(rows)
    assert out == {"a": ["a", 1, 2]}
    out["a"][1] = 99
    assert rows["a"][0] == 1

    assert as_rows(None) == {}
    with pytest.raises(TypeError):
        as_rows([1, 2, 3])


def test_settings_from_layer_data(table_path):
    data = load_layer_data(table_path)
    settings = LayerSettings.from_layer_data(data)

    assert settings.layer_order == [1, 2, 3, 4]
    assert settings.titles[2] == "taxa"
    assert settings.layers[3]["height"] == 180
    assert settings.views["single"][3]["min"]["disabled"] is True


def test_layout_from_table(table_path):
    data = load_layer_data(table_path)
    settings = LayerSettings.from_layer_data(data)
    ctx = compute_layout("((leaf_1:1,leaf_2:1):1,leaf_3:2);", data, settings)

    assert ctx.table["leaf_3"][3] == pytest.approx(180)
    assert sum(ctx.table["leaf_1"][2]) == pytest.approx(180)
    assert ctx.table["leaf_1"][4] == "soil"
    # The parsed table itself is left alone
    assert data.rows["leaf_1"][3] == "0.41"


def test_load_tree_labels_internal_nodes():
    arena = load_tree("((A:1,B:2)x:1,C:3);")
    assert [n.label for n in arena.preorder()] == ["Int_0", "Int_1", "A", "B", "C"]
    assert arena.find("Int_1").name == "x"
    assert arena.find("B").edge_length == 2.0
    assert arena.rooted


def test_load_tree_siblings():
    arena = load_tree("(A:1,B:1,C:1);")
    a, b, c = (arena.find(k) for k in "ABC")
    assert a.sibling == b.id and b.sibling == c.id and c.sibling is None
    assert arena.rightmost_child(arena.root) is c
    assert not arena.rooted


def test_load_tree_from_file_and_ete(tmp_path):
    path = tmp_path / "tree.nwk"
    path.write_text("((A:1,B:1):1,C:1);")
    assert len(load_tree(str(path))) == 5

    t = ete3.Tree("(A:1,B:1);", format=1)
    assert [n.label for n in load_tree(t).leaves()] == ["A", "B"]


def test_load_tree_copies_arena():
    arena = load_tree("(A:1,B:1);")
    copy = load_tree(arena, rooted=False)
    assert copy is not arena
    assert arena.rooted and not copy.rooted


def test_unnamed_leaf():
    with pytest.raises(MalformedTreeError):
        load_tree("(A:1,:1);")


def test_empty_arena():
    with pytest.raises(MalformedTreeError):
        TreeArena([])


def test_find():
    arena = load_tree("(A:1,B:1);")
    assert arena.find(0) is arena.root
    assert arena.find("B").label == "B"
    with pytest.raises(LayoutError):
        arena.find(17)
