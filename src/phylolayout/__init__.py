from .settings import LayoutStyle, LayerSettings, LayerKind, PHYLOGRAM, CIRCLEPHYLOGRAM
from .exceptions import LayoutError, MalformedTreeError, MissingAttributeError
from .layers import LayerAttributeResolver, LayerDescriptor
from .tree import Node, TreeArena
from .context import LayoutContext
from .engine import compute_layout
from .boundaries import LayerBoundaryStack
from .parsers import LayerData, load_layer_data, load_tree
from .drawing import RadialLayoutDrawer, RectangularLayoutDrawer, drawer_for
from .logging_config import setup_logging

__version__ = "0.1.0"
