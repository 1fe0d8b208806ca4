import pytest

from mandelcli import settings
from mandelcli.params import ViewportParams


@pytest.fixture
def small_params():
    """A cheap overview of the whole set."""
    return ViewportParams(
        center_re=-0.5,
        center_im=0.0,
        zoom_factor=1.0,
        max_iter=30,
        width=12,
        height=6,
        color_mode=0,
        smooth=False,
    )


@pytest.fixture
def small_preview(monkeypatch):
    """Keep image previews tiny so tests stay fast."""
    monkeypatch.setattr(settings, "PREVIEW_WIDTH", 48)
