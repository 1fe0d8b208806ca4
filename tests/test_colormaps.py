import numpy as np
import pytest

from mandelcli.colormaps import (
    BLACK,
    COLOR_SCHEMES,
    RGBA,
    colorize,
    get_scheme,
    hsv_to_rgb,
    list_scheme_names,
    map_color,
    next_scheme,
    scheme_by_name,
)


def rgb(scheme_name, iterations, max_iter=100):
    return tuple(map_color(scheme_by_name(scheme_name), iterations, max_iter))[:3]


@pytest.mark.parametrize("scheme", COLOR_SCHEMES, ids=lambda s: s.name)
@pytest.mark.parametrize("max_iter", [1, 10, 100, 1000])
def test_points_in_the_set_are_black(scheme, max_iter):
    assert map_color(scheme, max_iter, max_iter) == BLACK
    # Truncation decides membership, so a fractional value above N counts too
    assert map_color(scheme, max_iter + 0.5, max_iter) == BLACK


@pytest.mark.parametrize("hue, expected", [
    (0, [255, 0, 0]),
    (120, [0, 255, 0]),
    (240, [0, 0, 255]),
    (360, [255, 0, 0]),
])
def test_hsv_primaries(hue, expected):
    assert np.floor(hsv_to_rgb(hue, 1.0, 1.0)).astype(int).tolist() == expected


def test_hsv_secondaries():
    assert np.floor(hsv_to_rgb(60, 1.0, 1.0)).astype(int).tolist() == [255, 255, 0]
    assert np.floor(hsv_to_rgb(180, 1.0, 1.0)).astype(int).tolist() == [0, 255, 255]
    assert np.floor(hsv_to_rgb(300, 1.0, 1.0)).astype(int).tolist() == [255, 0, 255]


def test_hsv_broadcasts_over_arrays():
    out = hsv_to_rgb(np.array([[0.0, 120.0], [240.0, 60.0]]), 1.0, 1.0)
    assert out.shape == (2, 2, 3)


def test_scheme_formulas():
    assert rgb("Grayscale", 0) == (255, 255, 255)
    assert rgb("Grayscale", 50) == (127, 127, 127)
    assert rgb("Rainbow", 0) == (255, 0, 0)
    assert rgb("Fire", 50) == (255, 127, 0)
    assert rgb("Ocean", 0) == (0, 0, 51)
    assert rgb("Ice", 0) == (0, 0, 100)
    assert rgb("Ice", 50) == (0, 100, 177)
    assert rgb("Inferno", 0) == (0, 0, 255)
    assert rgb("Desert", 50) == (127, 100, 150)
    assert rgb("Forest", 0) == (80, 100, 30)
    assert rgb("Psychedelic", 0) == (255, 0, 0)


def test_nebula_starts_blue():
    r, g, b = rgb("Nebula", 0)
    assert b > r and b > g
    assert abs(r - g) <= 1


def test_alpha_is_always_opaque():
    for scheme in COLOR_SCHEMES:
        for iterations in (0, 3.7, 42, 99.9, 100):
            assert map_color(scheme, iterations, 100).a == 255


@pytest.mark.parametrize("scheme", COLOR_SCHEMES, ids=lambda s: s.name)
def test_buffer_matches_single_cells(scheme):
    max_iter = 64
    values = np.array([[0, 1.5, 7, 13.25], [31, 47.9, 63.99, 64]], dtype=np.float64)
    buffer = colorize(values, max_iter, scheme)
    assert buffer.shape == (2, 4, 3)
    assert buffer.dtype == np.uint8
    for (y, x), value in np.ndenumerate(values):
        assert tuple(buffer[y, x]) == tuple(map_color(scheme, value, max_iter))[:3]


def test_table_ordinals_match_positions():
    assert [s.ordinal for s in COLOR_SCHEMES] == list(range(len(COLOR_SCHEMES)))
    names = list_scheme_names()
    assert len(names) == 10
    assert len(set(names)) == len(names)
    assert names[:3] == ["Grayscale", "Nebula", "Rainbow"]
    for scheme in COLOR_SCHEMES:
        assert get_scheme(scheme.ordinal) is scheme
        assert scheme_by_name(scheme.name.upper()) is scheme


def test_cycling_wraps_around():
    last = COLOR_SCHEMES[-1]
    assert next_scheme(last) is COLOR_SCHEMES[0]
    assert next_scheme(0) is COLOR_SCHEMES[1]


def test_unknown_schemes_are_rejected():
    with pytest.raises(ValueError):
        get_scheme(len(COLOR_SCHEMES))
    with pytest.raises(ValueError):
        get_scheme(-1)
    with pytest.raises(KeyError):
        scheme_by_name("Plaid")


def test_rgba_defaults_to_opaque():
    assert RGBA(1, 2, 3) == (1, 2, 3, 255)
