"""
Color scheme definitions for Mandelbrot visualization.

Every scheme is a pure function of the normalized iteration value
t = iterations / max_iter in [0, 1]. The mapper works on numpy arrays
of any shape and returns the raw channel values (0..255, before
truncation) stacked along a trailing axis of size 3, so the same
formula serves a single cell and a whole render buffer.

Points whose truncated iteration count equals max_iter are inside the
set and are always black, whatever the scheme.

To add a new scheme:
1. Define a _scheme_xxx(t) function returning the channel array
2. Add it to _SCHEME_TABLE at the bottom of this file
"""

import math
from typing import Callable, NamedTuple

import numpy as np


class RGBA(NamedTuple):
    """An opaque 8-bit color."""

    r: int
    g: int
    b: int
    a: int = 255


BLACK = RGBA(0, 0, 0)


class ColorScheme(NamedTuple):
    """One entry of the scheme table: ordinal, display name and mapper."""

    ordinal: int
    name: str
    mapper: Callable


def hsv_to_rgb(h, s, v):
    """
    Convert HSV to RGB channel values in 0..255 (not yet truncated).

    Standard six-sector conversion. Hue is in degrees and wraps modulo
    360; saturation and value are in [0, 1]. Accepts scalars or arrays,
    which are broadcast against each other.

    Returns:
        Array of shape broadcast(h, s, v).shape + (3,)
    """
    h, s, v = np.broadcast_arrays(
        np.asarray(h, dtype=np.float64),
        np.asarray(s, dtype=np.float64),
        np.asarray(v, dtype=np.float64),
    )
    h = np.mod(h, 360.0)
    c = v * s
    x = c * (1 - np.abs(np.mod(h / 60.0, 2) - 1))
    m = v - c
    zero = np.zeros_like(c)

    sector = np.clip(np.floor(h / 60.0).astype(np.int64), 0, 5)
    r = np.choose(sector, [c, x, zero, zero, x, c])
    g = np.choose(sector, [x, c, c, x, zero, zero])
    b = np.choose(sector, [zero, zero, x, c, c, x])

    return np.stack([(r + m) * 255, (g + m) * 255, (b + m) * 255], axis=-1)


def _stack(t, r, g, b):
    r, g, b, _ = np.broadcast_arrays(r, g, b, t)
    return np.stack([r, g, b], axis=-1).astype(np.float64)


def _scheme_grayscale(t):
    gray = (1.0 - t) * 255
    return _stack(t, gray, gray, gray)


def _scheme_nebula(t):
    hue = 240 + 120 * np.sin(t * 4 * math.pi)
    return hsv_to_rgb(hue, 0.6 + 0.4 * t, 0.8)


def _scheme_rainbow(t):
    return hsv_to_rgb(360.0 * t, 1.0, 1.0)


def _scheme_fire(t):
    r = np.minimum(1.0, t * 3)
    g = np.clip(t * 3 - 1, 0.0, 1.0)
    b = np.clip(t * 3 - 2, 0.0, 1.0)
    return _stack(t, r * 255, g * 255, b * 255)


def _scheme_ocean(t):
    r = np.clip(t * 3 - 2, 0.0, 1.0)
    g = np.clip(t * 2 - 1, 0.0, 1.0)
    b = np.minimum(1.0, t + 0.2)
    return _stack(t, r * 255, g * 255, b * 255)


def _scheme_psychedelic(t):
    # Five hue turns over the iteration range
    return hsv_to_rgb(np.mod(t * 360 * 5, 360), 1.0, 1.0)


def _scheme_ice(t):
    return _stack(t, 0.0, t * 200, 100 + t * 155)


def _scheme_inferno(t):
    r = np.minimum(1.0, t * 4) * 255
    g = np.power(t, 1.5) * 100
    b = np.power(1 - t, 3) * 255
    return _stack(t, r, g, b)


def _scheme_desert(t):
    return _stack(t, 255 * t, 200 * (1 - t), 100 + 100 * t)


def _scheme_forest(t):
    return _stack(t, 30 + 50 * (1 - t), 100 + 155 * t, 30 + 20 * t)


# Ordered registry of all schemes. Position is the ordinal used by
# ViewportParams.color_mode; cycling walks this tuple in order.
_SCHEME_TABLE = (
    ('Grayscale', _scheme_grayscale),
    ('Nebula', _scheme_nebula),
    ('Rainbow', _scheme_rainbow),
    ('Fire', _scheme_fire),
    ('Ocean', _scheme_ocean),
    ('Psychedelic', _scheme_psychedelic),
    ('Ice', _scheme_ice),
    ('Inferno', _scheme_inferno),
    ('Desert', _scheme_desert),
    ('Forest', _scheme_forest),
)

COLOR_SCHEMES = tuple(
    ColorScheme(ordinal, name, mapper)
    for ordinal, (name, mapper) in enumerate(_SCHEME_TABLE)
)


def get_scheme(scheme):
    """
    Resolve an ordinal (or an existing ColorScheme) to its table entry.

    Raises:
        ValueError if the ordinal is outside the table
    """
    if isinstance(scheme, ColorScheme):
        return scheme
    ordinal = int(scheme)
    if not 0 <= ordinal < len(COLOR_SCHEMES):
        raise ValueError(f"color mode {ordinal} out of range 0..{len(COLOR_SCHEMES) - 1}")
    return COLOR_SCHEMES[ordinal]


def scheme_by_name(name):
    """
    Find a scheme by display name (case-insensitive).

    Raises:
        KeyError if name not found
    """
    for scheme in COLOR_SCHEMES:
        if scheme.name.lower() == name.lower():
            return scheme
    raise KeyError(name)


def next_scheme(scheme):
    """The scheme after this one, wrapping back to the first."""
    return COLOR_SCHEMES[(get_scheme(scheme).ordinal + 1) % len(COLOR_SCHEMES)]


def list_scheme_names():
    """Get list of available scheme names in ordinal order."""
    return [scheme.name for scheme in COLOR_SCHEMES]


def colorize(values, max_iter, scheme):
    """
    Map an array of iteration values to 8-bit RGB.

    Args:
        values: Iteration values of any shape (float, possibly fractional)
        max_iter: Maximum iteration count of the render
        scheme: Scheme ordinal or ColorScheme

    Returns:
        uint8 array of shape values.shape + (3,)
    """
    scheme = get_scheme(scheme)
    values = np.asarray(values, dtype=np.float64)

    t = np.clip(values / max_iter, 0.0, 1.0)
    channels = scheme.mapper(t)
    rgb = np.clip(np.floor(channels), 0, 255).astype(np.uint8)

    # Set membership wins over any scheme
    in_set = np.trunc(values) == max_iter
    rgb[in_set] = 0
    return rgb


def map_color(scheme, iterations, max_iter):
    """
    Color of a single iteration value.

    Args:
        scheme: Scheme ordinal or ColorScheme
        iterations: Iteration value from the escape engine
        max_iter: Maximum iteration count

    Returns:
        RGBA with alpha 255
    """
    r, g, b = colorize(np.array([iterations], dtype=np.float64), max_iter, scheme)[0]
    return RGBA(int(r), int(g), int(b))
