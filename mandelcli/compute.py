"""
Mandelbrot escape-time computation using Numba JIT compilation.

This module contains the performance-critical kernels:
- escape_iterations: the per-point escape-time iteration (plain or smooth)
- compute_rows: parallel fill of an iteration buffer, one task per row
- complex_window: mapping of a viewport onto a rectangle of the complex plane

All arithmetic is float64. Very deep zooms (zoom factors near 1e-15)
run out of double precision and show blocky artifacts; that is a known
limitation, not something this module tries to fix.
"""

import math
from typing import NamedTuple

import numpy as np
from numba import jit, prange


# |z|^2 above this value means the orbit escapes
BAILOUT_SQUARED = 4.0

# Width of the complex-plane window at zoom factor 1.0
BASE_SPAN = 3.25

LOG2 = math.log(2.0)


class Window(NamedTuple):
    """Rectangle of the complex plane covered by a render."""

    min_re: float
    max_re: float
    min_im: float
    max_im: float

    @property
    def span_re(self):
        return self.max_re - self.min_re

    @property
    def span_im(self):
        return self.max_im - self.min_im


def complex_window(center_re, center_im, zoom_factor, width, height):
    """
    Compute the complex-plane window for a render of width x height cells.

    The horizontal span is 3.25 * zoom_factor; the vertical span follows
    the aspect ratio (height / width) of the target grid.
    """
    scale = BASE_SPAN * zoom_factor
    aspect = height / width
    return Window(
        center_re - scale / 2,
        center_re + scale / 2,
        center_im - scale * aspect / 2,
        center_im + scale * aspect / 2,
    )


@jit(nopython=True, cache=True)
def escape_iterations(cr, ci, max_iter, smooth):
    """
    Iterate z -> z^2 + c from z = 0 until |z|^2 > 4 or max_iter steps.

    Args:
        cr, ci: Real and imaginary parts of c
        max_iter: Maximum iteration count
        smooth: Whether to return a continuous (fractional) value

    Returns:
        max_iter if the point never escapes. Otherwise the 0-indexed
        iteration at which it escaped, or with smoothing the continuous
        count i - log2(log|z|) reduced modulo max_iter into [0, max_iter).
    """
    zr = 0.0
    zi = 0.0
    for i in range(max_iter):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > BAILOUT_SQUARED:
            if not smooth:
                return float(i)
            value = i - math.log(math.log(math.hypot(zr, zi))) / LOG2
            # Floored modulo into [0, max_iter)
            value = value - math.floor(value / max_iter) * max_iter
            if value >= max_iter or value < 0.0:
                value = 0.0
            return value
    return float(max_iter)


def escape_time(c, max_iter, smooth=False):
    """
    Escape-time value of a single complex point.

    Returns an int when smoothing is off and a float when it is on.
    """
    value = escape_iterations(float(c.real), float(c.imag), int(max_iter), bool(smooth))
    if smooth:
        return value
    return int(value)


@jit(nopython=True, parallel=True, cache=True)
def compute_rows(min_re, max_re, min_im, max_im, width, height, max_iter, smooth, out):
    """
    Fill an iteration buffer, one parallel task per output row.

    Each row task writes only out[py, :], so rows never share state and
    no locking is needed. The function returns once every row is done.

    Args:
        min_re, max_re: Real axis bounds in the complex plane
        min_im, max_im: Imaginary axis bounds in the complex plane
        width, height: Output grid dimensions
        max_iter: Maximum iteration count
        smooth: Continuous iteration values instead of integer counts
        out: float64 array of shape (height, width), modified in place
    """
    dx = np.float64(max_re - min_re) / width
    dy = np.float64(max_im - min_im) / height

    for py in prange(height):
        y0 = np.float64(min_im) + dy * py
        for px in range(width):
            x0 = np.float64(min_re) + dx * px
            out[py, px] = escape_iterations(x0, y0, max_iter, smooth)


def compute_escape_grid(window, width, height, max_iter, smooth):
    """
    Allocate an iteration buffer and fill it for the given window.

    Returns:
        float64 array of shape (height, width)
    """
    out = np.empty((height, width), dtype=np.float64)
    compute_rows(
        window.min_re, window.max_re, window.min_im, window.max_im,
        width, height, max_iter, smooth, out
    )
    return out


def warmup_jit():
    """
    Warm up JIT compilation with a tiny render.

    Call this once at startup so the first real frame does not pay
    the compilation cost.
    """
    window = complex_window(-0.5, 0.0, 1.0, 10, 10)
    compute_escape_grid(window, 10, 10, 10, False)
    compute_escape_grid(window, 10, 10, 10, True)
