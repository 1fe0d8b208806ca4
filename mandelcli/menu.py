"""
Side panel, preset picker and save dialog for the terminal explorer.

The panel shows the current parameters and the key controls. While an
image is displayed, navigation is disabled and the matching controls are
drawn struck through. The preset picker and the save dialog are plain
prompts shown while the explorer temporarily leaves cbreak mode.
"""

from dataclasses import dataclass

import click

from . import settings
from .colormaps import COLOR_SCHEMES, get_scheme, scheme_by_name

# Controls that stay usable while an image is on screen
IMAGE_MODE_KEYS = ("t", "m", "q")

HELP_TEXT = (
    "h/j/k/l or arrows: Move",
    "+/-: Zoom in/out",
    "c: Cycle color scheme",
    "s: Toggle smooth coloring",
    "i/d: +/- max iterations",
    "r: Reset to default",
    "p: Select preset",
    "ctrl+s: Save image",
    "m: Hide menu",
    "t: Toggle image/text",
    "q: Quit",
)


def visible_len(text):
    """Printed width of a string that may contain style escapes."""
    return len(click.unstyle(text))


def pad_visible(text, width):
    return text + " " * max(0, width - visible_len(text))


def style_control_line(line, disabled):
    """Style one 'key: description' help line."""
    key, sep, description = line.partition(": ")
    if not sep:
        return click.style(line, fg="bright_black")
    if disabled:
        return click.style(line, fg="bright_black", dim=True, strikethrough=True)
    return click.style(key + ": ", fg="white", bold=True) + click.style(description, fg="bright_black")


class Menu:
    """
    Text side panel with parameters, controls and the last error.

    Also owns the preset picker and the save dialog so the explorer can
    swap them for fakes in tests.
    """

    def __init__(self, width=None):
        self.width = width or settings.MENU_WIDTH

    @property
    def inner_width(self):
        # Border plus one column of padding on each side
        return self.width - 4

    def parameter_lines(self, params):
        values = (
            ("Center Re", f"{params.center_re:.9f}"),
            ("Center Im", f"{params.center_im:.9f}"),
            ("Zoom", f"{params.zoom_factor:.9f}"),
            ("Iterations", str(params.max_iter)),
            ("Color", get_scheme(params.color_mode).name),
            ("Smooth", "true" if params.smooth else "false"),
        )
        return [
            click.style(f"{label}: ", fg="white", bold=True) + click.style(value, fg="bright_black")
            for label, value in values
        ]

    def control_lines(self, image_mode):
        lines = []
        for line in HELP_TEXT:
            key = line.partition(":")[0]
            disabled = image_mode and key not in IMAGE_MODE_KEYS
            lines.append(style_control_line(line, disabled))
        return lines

    def header(self, title):
        return click.style(title, fg="cyan", bold=True)

    def render(self, params, image_mode=False, error_message=""):
        """
        Build the panel as a list of lines, each exactly self.width columns wide.
        """
        content = [self.header("Parameters")]
        content += self.parameter_lines(params)
        content.append("")
        content.append(self.header("Controls"))
        content += self.control_lines(image_mode)
        if error_message:
            content.append("")
            for chunk in _wrap(f"Error: {error_message}", self.inner_width):
                content.append(click.style(chunk, fg="red"))

        border = "─" * (self.width - 2)
        lines = [click.style(f"╭{border}╮", fg="blue")]
        for line in content:
            side = click.style("│", fg="blue")
            lines.append(f"{side} {pad_visible(line, self.inner_width)} {side}")
        lines.append(click.style(f"╰{border}╯", fg="blue"))
        return lines

    def choose_preset(self, presets=None):
        """
        Ask the user to pick a preset.

        Returns:
            The chosen Preset, or None if the picker was cancelled
        """
        presets = settings.PRESETS if presets is None else presets
        if not presets:
            click.echo("No presets configured.")
            return None

        click.echo(click.style("Select Preset:", fg="cyan", bold=True))
        for index, preset in enumerate(presets, start=1):
            click.echo(f"  {index}. {preset.name}  "
                       + click.style(f"Real: {preset.center_re}, Imaginary: {preset.center_im}",
                                     fg="bright_black"))
        choice = click.prompt("Preset number (0 to cancel)",
                              type=click.IntRange(0, len(presets)), default=0)
        if choice == 0:
            return None
        return presets[choice - 1]

    def save_dialog(self, params):
        """
        Ask for resolution, color scheme and file path.

        Returns:
            SaveRequest, or None if the dialog was cancelled
        """
        resolution_names = [r.name for r in settings.RESOLUTIONS]
        resolution_name = click.prompt(
            "Resolution",
            type=click.Choice(resolution_names),
            default=default_resolution(params).name,
        )
        color_name = click.prompt(
            "Color Scheme",
            type=click.Choice([s.name for s in COLOR_SCHEMES], case_sensitive=False),
            default=get_scheme(params.color_mode).name,
        )
        path = click.prompt("File Path", default="mandelbrot.png", value_proc=validate_png_path)
        if not click.confirm(f"Save {resolution_name} image to {path}?", default=True):
            return None
        return SaveRequest(
            resolution=settings.get_resolution(resolution_name),
            color_mode=scheme_by_name(color_name).ordinal,
            path=path,
        )


@dataclass(frozen=True)
class SaveRequest:
    """What the save dialog collected."""

    resolution: settings.Resolution
    color_mode: int
    path: str


def default_resolution(params):
    """The resolution matching the current grid, else 1080p (else the first one)."""
    for resolution in settings.RESOLUTIONS:
        if resolution.width // 2 == params.width and resolution.height == params.height:
            return resolution
    try:
        return settings.get_resolution("1080p")
    except KeyError:
        return settings.RESOLUTIONS[0]


def validate_png_path(value):
    """
    Check an export path entered in the save dialog.

    Raises:
        click.BadParameter if the path is empty or not a .png file
    """
    value = value.strip()
    if not value:
        raise click.BadParameter("file path cannot be empty")
    if not value.lower().endswith(".png"):
        raise click.BadParameter("file path must end with .png")
    return value


def _wrap(text, width):
    return [text[i:i + width] for i in range(0, len(text), width)] or [""]
