from .base import BaseLayoutDrawer, categorical_runs
from .radial import RadialLayoutDrawer
from .rectangular import RectangularLayoutDrawer


def drawer_for(context, **kwargs) -> BaseLayoutDrawer:
    """Pick the drawer matching the layout's tree type."""
    cls = RadialLayoutDrawer if context.is_radial else RectangularLayoutDrawer
    return cls(context, **kwargs)


__all__ = ["BaseLayoutDrawer", "RadialLayoutDrawer", "RectangularLayoutDrawer", "categorical_runs", "drawer_for"]
