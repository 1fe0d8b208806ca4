"""
Exception types raised by the rendering core.

Render failures are internal invariant violations and are never caught
by the UI. Encode and export failures are caught by the explorer and the
CLI and shown as a short diagnostic.
"""


class MandelError(Exception):
    """Base class for all mandelcli errors."""


class RenderFailure(MandelError):
    """The numeric kernel produced something it never should have."""


class EncodeFailure(MandelError):
    """Raster or transport encoding rejected its input."""


class ExportIOFailure(MandelError):
    """Writing an exported image to disk failed."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"could not write {path}: {reason}")
