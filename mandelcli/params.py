"""
Viewport parameters and the navigation operations applied to them.

ViewportParams is owned by the UI layer. It is mutated between renders
and only read while a render is in progress.
"""

from dataclasses import dataclass, replace

from . import settings
from .colormaps import COLOR_SCHEMES, get_scheme, next_scheme, scheme_by_name

MIN_ITERATIONS = 10
ITERATION_STEP = 10


@dataclass
class ViewportParams:
    """Everything a render call needs to know about the current view."""

    center_re: float
    center_im: float
    zoom_factor: float
    max_iter: int
    width: int = 80
    height: int = 40
    color_mode: int = 0
    smooth: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        """
        Check the invariants every render relies on.

        Raises:
            ValueError describing the first violated constraint
        """
        if not self.zoom_factor > 0:
            raise ValueError(f"zoom factor must be positive, got {self.zoom_factor}")
        if self.max_iter < MIN_ITERATIONS:
            raise ValueError(f"max iterations must be at least {MIN_ITERATIONS}, got {self.max_iter}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid size must be positive, got {self.width}x{self.height}")
        if not 0 <= self.color_mode < len(COLOR_SCHEMES):
            raise ValueError(f"color mode {self.color_mode} out of range")

    @property
    def scheme(self):
        return get_scheme(self.color_mode)

    def move(self, dx, dy):
        """Shift the center by (dx, dy) screen fractions of the current zoom."""
        self.center_re += dx * self.zoom_factor
        self.center_im += dy * self.zoom_factor

    def zoom_in(self):
        self.zoom_factor *= settings.ZOOM_IN_FACTOR

    def zoom_out(self):
        self.zoom_factor /= settings.ZOOM_OUT_FACTOR

    def cycle_color(self):
        self.color_mode = next_scheme(self.color_mode).ordinal

    def toggle_smooth(self):
        self.smooth = not self.smooth

    def increase_iterations(self):
        self.max_iter += ITERATION_STEP

    def decrease_iterations(self):
        if self.max_iter > MIN_ITERATIONS:
            self.max_iter = max(MIN_ITERATIONS, self.max_iter - ITERATION_STEP)

    def overwrite(self, preset):
        """Take center, zoom and iteration depth from a preset (or other params)."""
        self.center_re = preset.center_re
        self.center_im = preset.center_im
        self.zoom_factor = preset.zoom_factor
        self.max_iter = preset.max_iter

    def reset(self):
        """Back to the default view; size, color and smoothing are kept."""
        self.overwrite(initial_params())

    def resized(self, width, height):
        """A copy with a different grid size and everything else unchanged."""
        return replace(self, width=width, height=height)


def initial_params(width=80, height=40):
    """The default view as configured in settings.json."""
    defaults = settings.DEFAULTS
    return ViewportParams(
        center_re=float(defaults['center_re']),
        center_im=float(defaults['center_im']),
        zoom_factor=float(defaults['zoom_factor']),
        max_iter=int(defaults['max_iter']),
        width=width,
        height=height,
        color_mode=scheme_by_name(defaults['color']).ordinal,
        smooth=bool(defaults['smooth']),
    )
