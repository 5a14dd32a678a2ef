from __future__ import annotations

import logging
from pathlib import Path

import pytest

from calcviz.config import PRESETS, Settings, setup_logging


def test_defaults() -> None:
    s = Settings.from_env({})
    assert s.preferences_path == Path.home() / ".calcviz" / "preferences.json"
    assert s.cache_max_entries is None
    assert s.log_level == "INFO"


def test_environment_overrides(tmp_path) -> None:
    s = Settings.from_env({
        "CALCVIZ_PREFERENCES": str(tmp_path / "p.json"),
        "CALCVIZ_CACHE_MAX_ENTRIES": "64",
        "CALCVIZ_LOG_LEVEL": "debug",
    })
    assert s.preferences_path == tmp_path / "p.json"
    assert s.cache_max_entries == 64
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["lots", "0", "-3"])
def test_bad_cache_bound(raw: str) -> None:
    with pytest.raises(ValueError, match="CALCVIZ_CACHE_MAX_ENTRIES"):
        Settings.from_env({"CALCVIZ_CACHE_MAX_ENTRIES": raw})


def test_setup_logging_sets_package_level() -> None:
    setup_logging("WARNING")
    assert logging.getLogger("calcviz").level == logging.WARNING
    setup_logging("INFO")


def test_presets_include_the_classic_four() -> None:
    values = set(PRESETS.values())
    assert {"x^2 + y^2", "sin(x) + cos(y)", "x*y", "exp(-(x^2 + y^2))"} <= values
