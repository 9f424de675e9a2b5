from .newick import load_tree
from .layer_data import LayerData, load_layer_data, as_rows, infer_kind, pretty_title
