"""
Per-layer attribute resolution.

Every visible layer is turned into a LayerDescriptor up front, so a missing
attribute fails the pass before any data is touched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from .exceptions import LayoutError, MissingAttributeError
from .settings import NORMALIZATIONS, LayerKind, LayerSettings

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class LayerDescriptor:
    order: int
    index: int
    kind: LayerKind
    title: str
    height: float
    margin: float
    type: Optional[str] = None
    color: Optional[str] = None
    color_start: Optional[str] = None
    normalization: str = "none"
    min_value: float = 0.0
    max_value: float = 0.0
    min_max_disabled: bool = True

    @property
    def is_parent(self) -> bool:
        return self.kind == LayerKind.PARENT

    @property
    def is_stackbar(self) -> bool:
        return self.kind == LayerKind.STACKBAR

    @property
    def is_categorical(self) -> bool:
        return self.kind == LayerKind.CATEGORICAL

    @property
    def is_numerical(self) -> bool:
        return self.kind == LayerKind.NUMERICAL

    @property
    def is_text(self) -> bool:
        return self.is_categorical and self.type == "text"

    @property
    def auto_height(self) -> bool:
        """Text layers with height 0 get a height derived from their font."""
        return self.is_text and self.height == 0


class LayerAttributeResolver:
    """Thin accessor over LayerSettings for one view."""

    def __init__(self, settings: LayerSettings):
        self.settings = settings

    def kind(self, index: int) -> LayerKind:
        try:
            value = self.settings.layer_types[index]
        except KeyError as e:
            raise MissingAttributeError(index) from e
        try:
            return LayerKind(value)
        except ValueError as e:
            raise LayoutError(f"Layer {index}: unknown layer kind {value!r}") from e

    def visual(self, index: int, key: str, default: Any = _MISSING) -> Any:
        attrs = self.settings.layers.get(index)
        if attrs is None:
            raise MissingAttributeError(index)
        if key not in attrs:
            if default is _MISSING:
                raise MissingAttributeError(index, key, "visual")
            return default
        return attrs[key]

    def view(self, index: int, key: str) -> Any:
        view = self.settings.views.get(self.settings.current_view)
        if view is None:
            raise MissingAttributeError(
                index, key, "view", message=f"No view {self.settings.current_view!r} in layer settings"
            )
        attrs = view.get(index)
        if attrs is None or key not in attrs:
            raise MissingAttributeError(index, key, "view")
        return attrs[key]

    def describe(self, order: int, index: int) -> LayerDescriptor:
        kind = self.kind(index)

        if self.settings.custom_layer_margin:
            margin = float(self.visual(index, "margin"))
        else:
            margin = float(self.settings.layer_margin)

        fields = dict(
            order=order,
            index=index,
            kind=kind,
            title=self.settings.titles.get(index, str(index)),
            height=float(self.visual(index, "height")),
            margin=margin,
            color=self.visual(index, "color", None),
            color_start=self.visual(index, "color-start", None),
        )

        if kind in (LayerKind.CATEGORICAL, LayerKind.NUMERICAL):
            fields["type"] = self.visual(index, "type")
        else:
            fields["type"] = self.visual(index, "type", None)

        if kind in (LayerKind.NUMERICAL, LayerKind.STACKBAR):
            normalization = self.view(index, "normalization") or "none"
            if normalization not in NORMALIZATIONS:
                raise LayoutError(
                    f"Layer {index}: unknown normalization {normalization!r}, use one of {NORMALIZATIONS}"
                )
            fields["normalization"] = normalization

        if kind == LayerKind.NUMERICAL:
            vmin = self.view(index, "min")
            vmax = self.view(index, "max")
            fields["min_max_disabled"] = bool(vmin.get("disabled", False))
            fields["min_value"] = float(vmin.get("value") or 0.0)
            fields["max_value"] = float(vmax.get("value") or 0.0)

        return LayerDescriptor(**fields)

    def resolve(self) -> List[LayerDescriptor]:
        order = [int(i) for i in self.settings.layer_order]
        if len(set(order)) != len(order):
            raise LayoutError(f"layer_order contains duplicate layer indices: {order}")
        if any(i < 1 for i in order):
            raise LayoutError("layer indices start at 1, column 0 holds the item labels")
        descriptors = [self.describe(i + 1, index) for i, index in enumerate(order)]
        logger.debug("Resolved %d layers for view %r", len(descriptors), self.settings.current_view)
        return descriptors
