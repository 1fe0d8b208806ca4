"""
Rendering entry points: viewport -> color buffer -> text or PNG.

One renderer serves both call shapes:
- viewport resolution (width/height taken from the params), used for
  the text display in the terminal
- fixed resolution (explicit width/height), used for the image preview
  and for exporting to a file

Both keep the same center and zoom and recompute the vertical extent
of the complex-plane window from the aspect ratio of the target grid.
"""

import io
import logging
import time

import numpy as np
from PIL import Image

from . import settings
from .colormaps import colorize
from .compute import complex_window, compute_escape_grid
from .errors import EncodeFailure, ExportIOFailure, RenderFailure

logger = logging.getLogger(__name__)

RESET = "\033[0m"


def render_grid(params, width=None, height=None):
    """
    Render the view into a fresh RGB buffer.

    Args:
        params: ViewportParams describing center, zoom, iterations and colors
        width, height: Explicit output size; defaults to params.width/height

    Returns:
        Read-only uint8 array of shape (height, width, 3)
    """
    params.validate()
    width = params.width if width is None else int(width)
    height = params.height if height is None else int(height)
    if width <= 0 or height <= 0:
        raise ValueError(f"grid size must be positive, got {width}x{height}")

    window = complex_window(params.center_re, params.center_im, params.zoom_factor, width, height)

    start = time.perf_counter()
    data = compute_escape_grid(window, width, height, params.max_iter, params.smooth)
    buffer = colorize(data, params.max_iter, params.color_mode)
    logger.debug("Rendered %dx%d (max_iter=%d, smooth=%s) in %.3fs",
                 width, height, params.max_iter, params.smooth, time.perf_counter() - start)

    if buffer.shape != (height, width, 3):
        raise RenderFailure(f"buffer shape {buffer.shape} does not match {width}x{height}")
    buffer.flags.writeable = False
    return buffer


def color_block(r, g, b):
    """A two-character cell painted with a 24-bit background color."""
    return f"\033[48;2;{r};{g};{b}m  {RESET}"


def buffer_to_string(buffer):
    """
    Compose a color buffer into a printable string.

    Each cell becomes a two-space block with a 24-bit background color,
    immediately reset. Rows are joined with newlines; there is no
    trailing newline.
    """
    return "\n".join(
        "".join(color_block(r, g, b) for r, g, b in row.tolist())
        for row in buffer
    )


def render_text(params):
    """Render the view at its own grid size as a text block."""
    return buffer_to_string(render_grid(params))


def encode_png(buffer):
    """
    Encode an RGB buffer as PNG bytes at the buffer's own resolution.

    Raises:
        EncodeFailure if Pillow rejects the buffer
    """
    try:
        image = Image.fromarray(np.ascontiguousarray(buffer, dtype=np.uint8))
        out = io.BytesIO()
        image.save(out, format="PNG")
    except (ValueError, TypeError, OSError) as e:
        raise EncodeFailure(f"PNG encoding failed: {e}") from e
    return out.getvalue()


def preview_size(params):
    """Size of the image preview: fixed width, aspect of the text viewport."""
    width = settings.PREVIEW_WIDTH
    height = max(1, int(width * params.height / params.width))
    return width, height


def render_preview_png(params):
    """Render the view at preview resolution as PNG bytes."""
    width, height = preview_size(params)
    return encode_png(render_grid(params, width, height))


def export_image(params, width, height):
    """
    Render the view at an explicit resolution as PNG bytes.

    Raises:
        EncodeFailure if the image cannot be encoded
    """
    logger.info("Exporting %dx%d image", width, height)
    return encode_png(render_grid(params, width, height))


def save_image(data, path):
    """
    Write encoded image bytes to path.

    Raises:
        ExportIOFailure on any OS-level write error
    """
    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        logger.warning("Saving %s failed: %s", path, e)
        raise ExportIOFailure(path, e.strerror or str(e)) from e
    logger.info("Image saved to %s", path)
