from .base import BaseTreeLayout
from .radial import RadialTreeLayout
from .rectangular import RectangularTreeLayout
from .leaves import triangular_leaf_sizes

__all__ = [
    "BaseTreeLayout",
    "RadialTreeLayout",
    "RectangularTreeLayout",
    "triangular_leaf_sizes",
]
