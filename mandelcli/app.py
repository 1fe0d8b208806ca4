"""
Main application module for the terminal Mandelbrot explorer.

Contains the ExplorerApp class which handles:
- Terminal setup (alternate screen, cbreak mode) and the main loop
- Keyboard input and the key -> action bindings
- Switching between text display and inline kitty images
- Preset selection and saving images through the side menu
"""

import contextlib
import logging
import os
import select
import shutil
import sys
import termios
import tty
from dataclasses import replace
from types import MappingProxyType

import click

from . import settings
from .compute import warmup_jit
from .errors import EncodeFailure, ExportIOFailure
from .kitty import CLEAR_IMAGES, encode_kitty
from .menu import Menu
from .params import initial_params
from .renderer import export_image, render_preview_png, render_text, save_image

logger = logging.getLogger(__name__)

ALT_SCREEN_ON = "\x1b[?1049h"
ALT_SCREEN_OFF = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_SCREEN = "\x1b[2J"
CLEAR_TO_END = "\x1b[J"

# Columns kept free between the fractal and the menu
WIDTH_ADJUSTMENT = 2

# Action -> keys. Order is the order actions are documented in.
KEY_BINDINGS = (
    ("move_left", ("h", "left")),
    ("move_right", ("l", "right")),
    ("move_up", ("k", "up")),
    ("move_down", ("j", "down")),
    ("zoom_in", ("+",)),
    ("zoom_out", ("-",)),
    ("cycle_color", ("c",)),
    ("toggle_smooth", ("s",)),
    ("increase_iter", ("i",)),
    ("decrease_iter", ("d",)),
    ("reset", ("r",)),
    ("toggle_img", ("t",)),
    ("hide", ("m",)),
    ("select_preset", ("p",)),
    ("save", ("ctrl+s",)),
    ("quit", ("q", "ctrl+c")),
)

KEY_ACTIONS = MappingProxyType({
    key: action for action, keys in KEY_BINDINGS for key in keys
})

# Actions still handled while an image is displayed
IMAGE_MODE_ACTIONS = frozenset({"toggle_img", "hide", "quit"})

_ESCAPE_KEYS = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
}

_CONTROL_KEYS = {
    "\x03": "ctrl+c",
    "\x13": "ctrl+s",
}


def read_key(fd, timeout=0.05):
    """
    Read one key press from a terminal in cbreak mode.

    Arrow keys arrive as multi-byte escape sequences; a lone ESC (no
    follow-up bytes within the timeout) is returned as 'esc'.
    """
    ch = os.read(fd, 1).decode(errors="replace")
    if ch == "\x1b":
        seq = ch
        while select.select([fd], [], [], timeout)[0] and len(seq) < 3:
            seq += os.read(fd, 1).decode(errors="replace")
        return _ESCAPE_KEYS.get(seq, "esc")
    return _CONTROL_KEYS.get(ch, ch)


class ExplorerApp:
    """
    Interactive explorer: owns the view parameters and the display state.

    Rendering happens synchronously inside key handling, so a render is
    never started while another one is still running.
    """

    def __init__(self, params=None, out=None, menu=None, terminal_size=None):
        """
        Initialize the application.

        Args:
            params: Initial ViewportParams (default view from settings.json)
            out: Text stream the UI is written to (default sys.stdout)
            menu: Menu used for the side panel and dialogs
            terminal_size: (columns, rows); queried from the terminal if None
        """
        self.params = params or initial_params()
        self.out = out or sys.stdout
        self.menu = menu or Menu()

        self.text = ""
        self.image = ""
        self.display_image = False
        self.hide_menu = False
        self.params_changed = True
        self.error_message = ""
        self.running = False

        self._fd = None
        self._saved_attrs = None

        cols, rows = terminal_size or shutil.get_terminal_size()
        self.resize(cols, rows)

        self._handlers = {
            "move_left": lambda: self._navigate(self.params.move, -settings.MOVE_STEP, 0),
            "move_right": lambda: self._navigate(self.params.move, settings.MOVE_STEP, 0),
            "move_up": lambda: self._navigate(self.params.move, 0, -settings.MOVE_STEP),
            "move_down": lambda: self._navigate(self.params.move, 0, settings.MOVE_STEP),
            "zoom_in": lambda: self._navigate(self.params.zoom_in),
            "zoom_out": lambda: self._navigate(self.params.zoom_out),
            "cycle_color": lambda: self._navigate(self.params.cycle_color),
            "toggle_smooth": lambda: self._navigate(self.params.toggle_smooth),
            "increase_iter": lambda: self._navigate(self.params.increase_iterations),
            "decrease_iter": lambda: self._navigate(self.params.decrease_iterations),
            "reset": self.reset,
            "toggle_img": self.toggle_display_image,
            "hide": self.toggle_hide_menu,
            "select_preset": self.select_preset,
            "save": self.save,
            "quit": self.quit,
        }

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------

    def resize(self, cols, rows):
        """Fit the fractal grid to a terminal of cols x rows cells."""
        self.cols = cols
        self.rows = rows
        self._update_grid_size()

    def _update_grid_size(self):
        if self.hide_menu:
            width = self.cols // 2
        else:
            width = (self.cols - self.menu.width) // 2 - WIDTH_ADJUSTMENT
        width = max(1, width)
        height = max(1, self.rows)
        if (width, height) != (self.params.width, self.params.height):
            self.params.width = width
            self.params.height = height
            self.params_changed = True

    def _navigate(self, operation, *args):
        operation(*args)
        self.params_changed = True

    def reset(self):
        """Back to the default view, keeping the grid size."""
        self.params.reset()
        self.error_message = ""
        self.params_changed = True

    def quit(self):
        self.running = False

    def handle_key(self, key):
        """
        Dispatch one key press.

        While an image is displayed only the toggle, hide and quit actions
        are honoured.

        Returns:
            False once the user asked to quit
        """
        action = KEY_ACTIONS.get(key)
        if action == "quit":
            self.quit()
            return False
        if action is not None and (not self.display_image or action in IMAGE_MODE_ACTIONS):
            logger.debug("Key %r -> %s", key, action)
            self._handlers[action]()
        self.redraw()
        return True

    def toggle_display_image(self):
        """Switch between text rendering and an inline kitty image."""
        self.display_image = not self.display_image
        self.error_message = ""
        if self.display_image:
            try:
                png = render_preview_png(self.params)
                self.image = encode_kitty(png, self.params.width * 2, self.params.height)
            except EncodeFailure as e:
                logger.warning("Image preview failed: %s", e)
                self.error_message = f"Error generating image: {e}"
                self.display_image = False
                return
            self.text = ""
        else:
            # Stale images would otherwise stay on top of the text
            self.out.write(CLEAR_IMAGES)
            self.out.flush()
            self.image = ""
            self.params_changed = True

    def toggle_hide_menu(self):
        self.hide_menu = not self.hide_menu
        self._update_grid_size()
        self.params_changed = True

    def select_preset(self):
        """Let the user pick a preset and jump to it."""
        with self._cooked():
            preset = self.menu.choose_preset(settings.PRESETS)
        if preset is not None:
            logger.info("Preset selected: %s", preset.name)
            self.params.overwrite(preset)
            self.params_changed = True

    def save(self):
        """Run the save dialog and export the current view to a PNG file."""
        with self._cooked():
            request = self.menu.save_dialog(self.params)
        if request is None:
            return
        self.save_view(request)

    def save_view(self, request):
        """
        Export the current view as described by a SaveRequest.

        Failures end up in error_message; the session carries on.

        Returns:
            True if the file was written
        """
        export_params = replace(self.params, color_mode=request.color_mode)
        resolution = request.resolution
        try:
            data = export_image(export_params, resolution.width, resolution.height)
        except EncodeFailure as e:
            self.error_message = f"Error generating image: {e}"
            return False
        try:
            save_image(data, request.path)
        except ExportIOFailure as e:
            self.error_message = f"Error saving image: {e.reason}"
            return False
        self.error_message = ""
        return True

    def redraw(self):
        """Re-render the text view if anything it depends on changed."""
        if not self.display_image and self.params_changed:
            self.text = render_text(self.params)
            self.params_changed = False

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def view(self):
        """
        Compose the full screen as a string.

        In text mode the fractal rows and the menu lines are joined side by
        side. In image mode the image stream is written first and the menu
        is placed to its right with cursor positioning.
        """
        if self.display_image:
            return self._view_image()

        lines = self.text.split("\n") if self.text else []
        if self.hide_menu:
            return "\n".join(lines)

        panel = self.menu.render(self.params, False, self.error_message)
        fractal_width = self.params.width * 2
        rows = max(len(lines), len(panel))
        out = []
        for index in range(rows):
            left = lines[index] if index < len(lines) else " " * fractal_width
            right = panel[index] if index < len(panel) else ""
            out.append(f"{left} {right}".rstrip(" "))
        return "\n".join(out)

    def _view_image(self):
        if self.hide_menu:
            return self.image
        column = self.params.width * 2 + 2
        panel = self.menu.render(self.params, True, self.error_message)
        placed = "".join(
            f"\x1b[{row};{column}H{line}" for row, line in enumerate(panel, start=1)
        )
        return self.image + placed

    def draw(self):
        self.out.write(CURSOR_HOME + self.view() + CLEAR_TO_END)
        self.out.flush()

    # ------------------------------------------------------------------
    # Terminal loop
    # ------------------------------------------------------------------

    @contextlib.contextmanager
    def _cooked(self):
        """Temporarily restore normal terminal input for prompts."""
        if self._fd is None:
            yield
            return
        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
        self.out.write(CLEAR_SCREEN + CURSOR_HOME + SHOW_CURSOR)
        self.out.flush()
        try:
            yield
        except (click.Abort, EOFError, KeyboardInterrupt) as e:
            logger.debug("Dialog cancelled: %r", e)
        finally:
            self._enter_cbreak()
            self.out.write(HIDE_CURSOR + CLEAR_SCREEN)
            self.out.flush()
            self.params_changed = True

    def _enter_cbreak(self):
        tty.setcbreak(self._fd)
        # Let ctrl+s reach us instead of pausing output
        attrs = termios.tcgetattr(self._fd)
        attrs[0] &= ~termios.IXON
        termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)

    def _sync_size(self):
        cols, rows = shutil.get_terminal_size()
        if (cols, rows) != (self.cols, self.rows):
            self.resize(cols, rows)

    def run(self, start_with_image=False):
        """Run the explorer until the user quits."""
        self._fd = sys.stdin.fileno()
        self._saved_attrs = termios.tcgetattr(self._fd)

        logger.info("Compiling kernels (first run only)...")
        warmup_jit()

        self.out.write(ALT_SCREEN_ON + HIDE_CURSOR)
        self.out.flush()
        try:
            self._enter_cbreak()
            self.running = True
            self._sync_size()
            self.redraw()
            if start_with_image:
                self.toggle_display_image()
            self.draw()
            while self.running:
                try:
                    key = read_key(self._fd)
                except KeyboardInterrupt:
                    key = "ctrl+c"
                self._sync_size()
                self.handle_key(key)
                if self.running:
                    self.draw()
        finally:
            if self.display_image:
                self.out.write(CLEAR_IMAGES)
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
            self.out.write(SHOW_CURSOR + ALT_SCREEN_OFF)
            self.out.flush()
            self._fd = None


def run(params=None, start_with_image=False):
    """
    Run the Mandelbrot explorer.

    Args:
        params: Initial ViewportParams (default view from settings.json)
        start_with_image: Start in kitty image mode instead of text mode
    """
    app = ExplorerApp(params)
    app.run(start_with_image=start_with_image)
