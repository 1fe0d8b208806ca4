"""
Terminal Mandelbrot Explorer Package

An interactive Mandelbrot set explorer for the terminal. Frames are
drawn either as colored text blocks (24-bit ANSI backgrounds) or as
inline PNG images through the kitty graphics protocol. Escape-time
computation is JIT-compiled with Numba and runs one parallel task per
row.

Quick Start:
    from mandelcli import run
    run()

Or from command line:
    python -m mandelcli
    mandelcli export --preset "Seahorse Valley" --resolution 4K out.png

Package Structure:
    - compute.py: JIT-compiled escape-time kernels and viewport mapping
    - colormaps.py: Color scheme table (Grayscale, Nebula, Rainbow, ...)
    - renderer.py: Render entry points, text compositing and PNG encoding
    - kitty.py: Kitty graphics protocol encoder and clear command
    - params.py: ViewportParams and navigation operations
    - settings.py: Defaults, presets and export resolutions (settings.json)
    - menu.py: Side panel, preset picker and save dialog
    - app.py: Interactive explorer and terminal loop
    - cli.py: Command-line entry point

Controls:
    - h/j/k/l or arrows: Move
    - +/-: Zoom in/out
    - c: Cycle color scheme, s: Toggle smooth coloring
    - i/d: +/- max iterations, r: Reset
    - p: Presets, ctrl+s: Save image
    - t: Toggle image/text, m: Hide menu, q: Quit
"""

__version__ = "1.0.0"

from .app import ExplorerApp, run
from .colormaps import COLOR_SCHEMES, ColorScheme, RGBA, colorize, list_scheme_names, map_color
from .compute import complex_window, escape_time
from .errors import EncodeFailure, ExportIOFailure, MandelError, RenderFailure
from .kitty import CLEAR_IMAGES, encode_kitty
from .params import ViewportParams, initial_params
from .renderer import (
    buffer_to_string,
    encode_png,
    export_image,
    render_grid,
    render_preview_png,
    render_text,
    save_image,
)

__all__ = [
    "run",
    "ExplorerApp",
    "COLOR_SCHEMES",
    "ColorScheme",
    "RGBA",
    "colorize",
    "list_scheme_names",
    "map_color",
    "complex_window",
    "escape_time",
    "MandelError",
    "RenderFailure",
    "EncodeFailure",
    "ExportIOFailure",
    "CLEAR_IMAGES",
    "encode_kitty",
    "ViewportParams",
    "initial_params",
    "buffer_to_string",
    "encode_png",
    "export_image",
    "render_grid",
    "render_preview_png",
    "render_text",
    "save_image",
]
