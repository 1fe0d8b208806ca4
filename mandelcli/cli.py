"""
Command-line interface for the Mandelbrot explorer.

    mandelcli                  start the interactive explorer
    mandelcli render           print a single frame (text or kitty image)
    mandelcli export OUT.png   write a PNG at an export resolution
    mandelcli presets          list preset viewports
"""

import functools
import logging
import shutil
import sys

import click

from . import __version__, settings
from .colormaps import list_scheme_names, scheme_by_name
from .errors import EncodeFailure, ExportIOFailure
from .kitty import encode_kitty
from .params import initial_params
from .renderer import export_image, render_preview_png, render_text, save_image

logger = logging.getLogger(__name__)


def view_options(func):
    """Options shared by every command that renders a view."""
    options = [
        click.option('--preset', type=click.Choice([p.name for p in settings.PRESETS]),
                     help='Start from a preset viewport'),
        click.option('--center-re', type=float, help='Real part of the view center'),
        click.option('--center-im', type=float, help='Imaginary part of the view center'),
        click.option('--zoom', type=click.FloatRange(min=0, min_open=True),
                     help='Zoom factor (smaller is deeper)'),
        click.option('--max-iter', type=click.IntRange(min=10), help='Maximum iterations'),
        click.option('--color', type=click.Choice(list_scheme_names(), case_sensitive=False),
                     help='Color scheme'),
        click.option('--smooth/--no-smooth', default=None, help='Continuous coloring'),
    ]
    for option in reversed(options):
        func = option(func)

    @functools.wraps(func)
    def wrapper(preset, center_re, center_im, zoom, max_iter, color, smooth, **kwargs):
        params = initial_params()
        if preset:
            params.overwrite(settings.get_preset(preset))
        if center_re is not None:
            params.center_re = center_re
        if center_im is not None:
            params.center_im = center_im
        if zoom is not None:
            params.zoom_factor = zoom
        if max_iter is not None:
            params.max_iter = max_iter
        if color is not None:
            params.color_mode = scheme_by_name(color).ordinal
        if smooth is not None:
            params.smooth = smooth
        params.validate()
        return func(params=params, **kwargs)

    return wrapper


@click.group(invoke_without_command=True)
@click.version_option(__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--log-file', type=click.Path(dir_okay=False),
              help='Write log output to a file instead of stderr')
@click.pass_context
def main(ctx, verbose, log_file):
    """
    Terminal Mandelbrot explorer.

    Without a command, starts the interactive explorer.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        filename=log_file,
    )
    if ctx.invoked_subcommand is None:
        ctx.invoke(explore)


@main.command()
@click.option('--image/--text', 'start_with_image', default=False,
              help='Start in kitty image mode')
@view_options
def explore(params, start_with_image):
    """Explore the Mandelbrot set interactively."""
    from .app import ExplorerApp

    if not sys.stdin.isatty():
        raise click.UsageError("the explorer needs an interactive terminal")
    ExplorerApp(params).run(start_with_image=start_with_image)


@main.command()
@view_options
@click.option('--width', type=click.IntRange(min=1), help='Grid width in cells (two columns each)')
@click.option('--height', type=click.IntRange(min=1), help='Grid height in rows')
@click.option('--image', is_flag=True, help='Emit a kitty graphics image instead of text')
def render(params, width, height, image):
    """Print a single frame of the current view."""
    cols, rows = shutil.get_terminal_size()
    params.width = width or max(1, cols // 2)
    params.height = height or max(1, rows - 1)

    if image:
        try:
            png = render_preview_png(params)
        except EncodeFailure as e:
            raise click.ClickException(str(e)) from e
        click.echo(encode_kitty(png, params.width * 2, params.height), color=True)
    else:
        # Keep the cell colors when piped or redirected
        click.echo(render_text(params), color=True)


@main.command()
@view_options
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('--resolution', type=click.Choice([r.name for r in settings.RESOLUTIONS]),
              help='Named export resolution')
@click.option('--width', type=click.IntRange(min=1), help='Image width in pixels')
@click.option('--height', type=click.IntRange(min=1), help='Image height in pixels')
def export(params, output, resolution, width, height):
    """Render the view to a PNG file."""
    if resolution and (width or height):
        raise click.UsageError("use either --resolution or --width/--height")
    if resolution:
        chosen = settings.get_resolution(resolution)
        width, height = chosen.width, chosen.height
    elif not (width and height):
        raise click.UsageError("give --resolution, or both --width and --height")

    try:
        data = export_image(params, width, height)
        save_image(data, output)
    except (EncodeFailure, ExportIOFailure) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Saved {width}x{height} image to {output}")


@main.command()
def presets():
    """List the preset viewports."""
    for preset in settings.PRESETS:
        click.echo(f"{preset.name}: center=({preset.center_re}, {preset.center_im}) "
                   f"zoom={preset.zoom_factor} max_iter={preset.max_iter}")


if __name__ == '__main__':
    main()
