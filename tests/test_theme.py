from __future__ import annotations

import logging

import pytest

from calcviz.theme import DARK, LIGHT, PreferenceStore, palette_for


def test_palettes() -> None:
    assert palette_for(True) is DARK
    assert palette_for(False) is LIGHT
    assert DARK.surface_colorscale == "Viridis"
    assert LIGHT.tangent_colorscale == "Reds"
    assert DARK.point_color == LIGHT.point_color == "#ef4444"


def test_round_trip_creates_parent_directories(tmp_path) -> None:
    store = PreferenceStore(tmp_path / "nested" / "prefs.json")
    assert store.load_theme() is None

    store.save_theme("dark")
    assert store.load_theme() == "dark"

    store.save_theme("light")
    assert PreferenceStore(store.path).load_theme() == "light"


@pytest.mark.parametrize("content", ["", "{not json", "[1, 2]", '{"theme": "sepia"}'])
def test_bad_files_read_as_no_preference(tmp_path, content, caplog) -> None:
    path = tmp_path / "prefs.json"
    path.write_text(content, encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="calcviz.theme"):
        assert PreferenceStore(path).load_theme() is None


def test_corrupt_file_is_logged(tmp_path, caplog) -> None:
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="calcviz.theme"):
        PreferenceStore(path).load_theme()

    assert "failed to read" in caplog.text


def test_save_rejects_unknown_theme(tmp_path) -> None:
    with pytest.raises(ValueError):
        PreferenceStore(tmp_path / "prefs.json").save_theme("sepia")
