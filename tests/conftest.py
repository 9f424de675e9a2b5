import pytest

from phylolayout import LayerKind, LayerSettings


def layer_settings(
    kinds,
    heights=None,
    types=None,
    normalization=None,
    min_max=None,
    margins=None,
    layer_margin=15,
    order=None,
):
    """
    Small LayerSettings factory.

    kinds: {index: LayerKind}; min_max: {index: (min, max)} enables clamping.
    """
    heights = heights or {}
    types = types or {}
    normalization = normalization or {}
    min_max = min_max or {}
    layers = {}
    view = {}
    for index, kind in kinds.items():
        layers[index] = {
            "height": heights.get(index, 20),
            "color": "#ff0000",
            "color-start": "#ffffff",
            "margin": (margins or {}).get(index, layer_margin),
            "type": types.get(index, "text" if kind == LayerKind.CATEGORICAL else "bar"),
        }
        if index in min_max:
            lo, hi = min_max[index]
            bounds = {"min": {"value": lo, "disabled": False}, "max": {"value": hi, "disabled": False}}
        else:
            bounds = {"min": {"value": 0, "disabled": True}, "max": {"value": 0, "disabled": True}}
        view[index] = {"normalization": normalization.get(index, "none"), **bounds}

    return LayerSettings(
        layer_order=list(order if order is not None else kinds),
        layer_types=dict(kinds),
        layers=layers,
        views={"single": view},
        layer_margin=layer_margin,
        custom_layer_margin=margins is not None,
    )


@pytest.fixture
def make_settings():
    return layer_settings
