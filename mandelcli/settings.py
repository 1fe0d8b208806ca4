"""
Settings for the explorer, loaded once from settings.json.

The JSON file ships next to this module. Any key missing from it (or the
whole file, if it cannot be read) falls back to the built-in defaults
below. Everything exported here is immutable: presets and resolutions
are tuples of frozen records, and DEFAULTS is a read-only mapping.
"""

import json
import logging
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple

logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')

_BUILTIN = {
    'defaults': {
        'center_re': -0.5,
        'center_im': 0.0,
        'zoom_factor': 1.0,
        'max_iter': 100,
        'color': 'Nebula',
        'smooth': True,
    },
    'presets': [],
    'resolutions': [
        {'name': '1080p', 'width': 1920, 'height': 1080},
    ],
    'preview_width': 1920,
    'menu_width': 30,
    'move_step': 0.1,
    'zoom_in_factor': 0.75,
    'zoom_out_factor': 0.74,
}


@dataclass(frozen=True)
class Preset:
    """A named viewport: center, zoom and iteration depth."""

    name: str
    center_re: float
    center_im: float
    zoom_factor: float
    max_iter: int


class Resolution(NamedTuple):
    """An export resolution offered by the save dialog."""

    name: str
    width: int
    height: int


def load_settings(path=SETTINGS_PATH):
    """
    Load settings from a JSON file, merged over the built-in defaults.

    Args:
        path: Location of the settings file

    Returns:
        dict with every key of the built-in settings present
    """
    settings = dict(_BUILTIN)
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s, using built-in settings: %s", path, e)
        return settings
    if not isinstance(loaded, dict):
        logger.warning("Could not load %s, using built-in settings: top level is not an object", path)
        return settings

    for key, value in loaded.items():
        if key not in _BUILTIN:
            logger.warning("Ignoring unknown settings key %r", key)
            continue
        if key == 'defaults':
            if not isinstance(value, dict):
                logger.warning("Ignoring settings key 'defaults': not an object")
                continue
            settings[key] = {**_BUILTIN['defaults'], **value}
        else:
            settings[key] = value
    return settings


def parse_presets(entries):
    """Build an ordered tuple of Preset records from settings entries."""
    return tuple(
        Preset(
            name=str(entry['name']),
            center_re=float(entry['center_re']),
            center_im=float(entry['center_im']),
            zoom_factor=float(entry['zoom_factor']),
            max_iter=int(entry['max_iter']),
        )
        for entry in entries
    )


def parse_resolutions(entries):
    """Build an ordered tuple of Resolution records from settings entries."""
    return tuple(
        Resolution(str(entry['name']), int(entry['width']), int(entry['height']))
        for entry in entries
    )


def parse_setting(settings, key, parser):
    """
    Parse one settings value, falling back to the built-in value if it is malformed.

    Args:
        settings: dict returned by load_settings
        key: Top-level settings key
        parser: Callable turning the raw JSON value into its final form

    Returns:
        The parsed value
    """
    try:
        return parser(settings[key])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Invalid settings value for %r, using built-in: %r", key, e)
        return parser(_BUILTIN[key])


_SETTINGS = load_settings()

DEFAULTS = MappingProxyType(dict(_SETTINGS['defaults']))
PRESETS = parse_setting(_SETTINGS, 'presets', parse_presets)
RESOLUTIONS = parse_setting(_SETTINGS, 'resolutions', parse_resolutions)
PREVIEW_WIDTH = parse_setting(_SETTINGS, 'preview_width', int)
MENU_WIDTH = parse_setting(_SETTINGS, 'menu_width', int)
MOVE_STEP = parse_setting(_SETTINGS, 'move_step', float)
ZOOM_IN_FACTOR = parse_setting(_SETTINGS, 'zoom_in_factor', float)
ZOOM_OUT_FACTOR = parse_setting(_SETTINGS, 'zoom_out_factor', float)


def get_preset(name):
    """
    Look up a preset by name.

    Raises:
        KeyError if no preset has that name
    """
    for preset in PRESETS:
        if preset.name == name:
            return preset
    raise KeyError(name)


def get_resolution(name):
    """
    Look up an export resolution by name.

    Raises:
        KeyError if no resolution has that name
    """
    for resolution in RESOLUTIONS:
        if resolution.name == name:
            return resolution
    raise KeyError(name)
