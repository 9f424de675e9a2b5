from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .parsers.layer_data import LayerData

PHYLOGRAM = "phylogram"
CIRCLEPHYLOGRAM = "circlephylogram"

NORMALIZATIONS = ("none", "sqrt", "log")


class LayerKind(IntEnum):
    PARENT = 0
    STACKBAR = 1
    CATEGORICAL = 2
    NUMERICAL = 3


@dataclass
class LayoutStyle:
    # Tree
    tree_type: str = CIRCLEPHYLOGRAM
    width: float = 0
    height: float = 0
    radius: float = 0
    angle_min: float = 0
    angle_max: float = 270
    top: float = 0
    left: float = 0
    root_length: float = 0.1
    max_path_length: Optional[float] = None

    # Fallback canvas when width/height are 0
    viewer_width: float = 1000
    viewer_height: float = 1000

    # Text layers
    max_font_size: float = 60
    max_font_size_label: float = 60
    font_aspect_ratio: float = 0.6

    # Visuals
    branch_size: float = 1
    branch_color: str = "black"
    background_opacity: float = 0.2
    font_family: str = "monospace"

    def __post_init__(self):
        if self.tree_type not in (PHYLOGRAM, CIRCLEPHYLOGRAM):
            raise ValueError(
                f"Unknown tree_type: {self.tree_type!r}. Use {PHYLOGRAM!r} or {CIRCLEPHYLOGRAM!r}."
            )
        if float(self.angle_max) < float(self.angle_min):
            raise ValueError(
                f"angle_max ({self.angle_max}) must not be smaller than angle_min ({self.angle_min})"
            )

    @property
    def is_radial(self) -> bool:
        return self.tree_type == CIRCLEPHYLOGRAM

    def resolve_screen(self) -> tuple[float, float, float]:
        """Return (width, height, radius) with 0 replaced by the viewer defaults."""
        width = float(self.width) or float(self.viewer_width)
        height = float(self.height) or float(self.viewer_height)
        radius = float(self.radius) or max(width, height)
        return width, height, radius


_DEFAULT_VISUALS = {
    LayerKind.PARENT: {"height": 20, "color": "#000000", "margin": 15, "type": "color"},
    LayerKind.STACKBAR: {"height": 180, "color": "#000000", "margin": 15, "type": "bar"},
    LayerKind.CATEGORICAL: {"height": 20, "color": "#000000", "color-start": "#FFFFFF",
                            "margin": 15, "type": "color"},
    LayerKind.NUMERICAL: {"height": 180, "color": "#000000", "color-start": "#FFFFFF",
                          "margin": 15, "type": "bar"},
}


@dataclass
class LayerSettings:
    """
    Layer configuration for one layout pass.

    Attributes
    ----------
    layer_order
        Layer indices (table columns) in drawing order. Order 0 is the tree, so
        ``layer_order[i]`` is drawn with order ``i + 1``.
    layer_types
        Layer index -> LayerKind.
    layers
        Layer index -> visual attributes (height, color, color-start, margin, type).
    views
        View name -> layer index -> view attributes (normalization, min, max).
        ``min`` and ``max`` are ``{"value": float, "disabled": bool}``.
    """

    layer_order: List[int] = field(default_factory=list)
    layer_types: Dict[int, LayerKind] = field(default_factory=dict)
    layers: Dict[int, Dict[str, Any]] = field(default_factory=dict)
    views: Dict[str, Dict[int, Dict[str, Any]]] = field(default_factory=dict)
    current_view: str = "single"
    titles: Dict[int, str] = field(default_factory=dict)
    layer_margin: float = 15
    custom_layer_margin: bool = False

    @classmethod
    def from_layer_data(cls, data: "LayerData", view: str = "single", **kwargs) -> "LayerSettings":
        """Default settings for every column of a parsed layer table, in column order."""
        order = list(range(1, len(data.titles)))
        layer_types = {i: data.kinds[i] for i in order}
        layers = {i: dict(_DEFAULT_VISUALS[layer_types[i]]) for i in order}
        view_attrs = {
            i: {
                "normalization": "none",
                "min": {"value": 0.0, "disabled": True},
                "max": {"value": 0.0, "disabled": True},
            }
            for i in order
        }
        return cls(
            layer_order=order,
            layer_types=layer_types,
            layers=layers,
            views={view: view_attrs},
            current_view=view,
            titles={i: data.titles[i] for i in order},
            **kwargs,
        )
