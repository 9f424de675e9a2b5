from __future__ import annotations

import math

_NAMED_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
}


def polar_to_cartesian(degree: float, radius: float, rotation: float = 0.0) -> tuple[float, float]:
    """
    Polar -> Cartesian converter for angles given in degrees.
    In SVG (y is down) 0 deg is 3 o'clock and positive angles rotate clockwise.
    """
    theta = math.radians(degree + rotation)
    return radius * math.cos(theta), radius * math.sin(theta)


def arc_point(angle: float, radius: float) -> tuple[float, float]:
    """Same as polar_to_cartesian but for an angle already in radians."""
    return radius * math.cos(angle), radius * math.sin(angle)


def to_float(value) -> float:
    """Parse a table cell into a float, NaN when it is not a number."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def is_number(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value).strip())
    except ValueError:
        return False
    return str(value).strip() != ""


def to_rgb(color: str) -> tuple[int, int, int]:
    """Hex ('#rrggbb' or '#rgb') or a basic color name -> (r, g, b). Unknown -> black."""
    c = str(color).strip().lower()
    if c in _NAMED_COLORS:
        return _NAMED_COLORS[c]
    if c.startswith("#"):
        h = c[1:]
        if len(h) == 3:
            h = "".join(ch * 2 for ch in h)
        if len(h) == 6:
            try:
                return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
            except ValueError:
                pass
    return 0, 0, 0


def to_hex(rgb) -> str:
    r, g, b = (max(0, min(255, int(v))) for v in rgb)
    return "#{:02x}{:02x}{:02x}".format(r, g, b)


def lerp_color(start: str, end: str, t: float) -> str:
    """Linear interpolation between two colors, t clipped to [0, 1]."""
    if t != t:  # NaN
        t = 0.0
    t = 0.0 if t < 0.0 else (1.0 if t > 1.0 else t)
    c0, c1 = to_rgb(start), to_rgb(end)
    return to_hex(tuple(int(a + (b - a) * t) for a, b in zip(c0, c1)))
