import dataclasses
import json
import logging

import pytest

from mandelcli import settings


def test_missing_file_falls_back_to_builtin(tmp_path, caplog):
    with caplog.at_level(logging.WARNING, logger="mandelcli.settings"):
        loaded = settings.load_settings(str(tmp_path / "nope.json"))
    assert loaded["defaults"]["max_iter"] == 100
    assert loaded["zoom_in_factor"] == 0.75
    assert "Could not load" in caplog.text


def test_broken_json_falls_back_to_builtin(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert settings.load_settings(str(path))["menu_width"] == 30


def test_partial_file_is_merged(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "defaults": {"max_iter": 250},
        "move_step": 0.2,
        "bogus": 1,
    }))
    with caplog.at_level(logging.WARNING, logger="mandelcli.settings"):
        loaded = settings.load_settings(str(path))
    assert loaded["defaults"]["max_iter"] == 250
    assert loaded["defaults"]["color"] == "Nebula"
    assert loaded["move_step"] == 0.2
    assert "bogus" not in loaded
    assert "unknown settings key" in caplog.text


def test_shipped_presets():
    names = [p.name for p in settings.PRESETS]
    assert names == ["Julia Island", "Seahorse Valley"]
    julia = settings.get_preset("Julia Island")
    assert julia.zoom_factor == pytest.approx(3.4e-7)
    assert julia.max_iter == 400


def test_presets_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.PRESETS[0].max_iter = 5
    with pytest.raises(TypeError):
        settings.DEFAULTS["max_iter"] = 5


def test_resolutions():
    assert settings.get_resolution("4K") == ("4K", 3840, 2160)
    assert [r.name for r in settings.RESOLUTIONS] == ["720p", "1080p", "WQHD (1440p)", "4K"]
    with pytest.raises(KeyError):
        settings.get_resolution("8K")
    with pytest.raises(KeyError):
        settings.get_preset("Nowhere")


@pytest.mark.parametrize("content", ["[1, 2]", "42", '"text"', "null"])
def test_non_object_file_falls_back_to_builtin(tmp_path, caplog, content):
    path = tmp_path / "settings.json"
    path.write_text(content)
    with caplog.at_level(logging.WARNING, logger="mandelcli.settings"):
        loaded = settings.load_settings(str(path))
    assert loaded["defaults"]["max_iter"] == 100
    assert loaded["menu_width"] == 30
    assert "top level is not an object" in caplog.text


def test_malformed_defaults_are_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"defaults": [1], "move_step": 0.3}))
    loaded = settings.load_settings(str(path))
    assert loaded["defaults"]["color"] == "Nebula"
    assert loaded["move_step"] == 0.3


def test_malformed_values_fall_back_to_builtin(caplog):
    loaded = {
        "presets": [{"name": "No center"}],
        "resolutions": "4K",
        "preview_width": "wide",
    }
    with caplog.at_level(logging.WARNING, logger="mandelcli.settings"):
        assert settings.parse_setting(loaded, "presets", settings.parse_presets) == ()
        resolutions = settings.parse_setting(loaded, "resolutions", settings.parse_resolutions)
        assert settings.parse_setting(loaded, "preview_width", int) == 1920
    assert resolutions == (("1080p", 1920, 1080),)
    assert "Invalid settings value for 'presets'" in caplog.text


def test_well_formed_values_are_parsed():
    loaded = {"presets": [{"name": "Origin", "center_re": 0, "center_im": 0,
                           "zoom_factor": 2, "max_iter": "50"}]}
    [preset] = settings.parse_setting(loaded, "presets", settings.parse_presets)
    assert preset == settings.Preset("Origin", 0.0, 0.0, 2.0, 50)
