from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

# Sampling domain (end-exclusive, like a range)
DOMAIN_MIN = -5.0
DOMAIN_MAX = 5.0
SURFACE_STEP = 0.25
FIELD_STEP = 0.5

# Vector field / gradient indicator scaling
VECTOR_SCALE = 0.2
GRADIENT_SCALE = 0.5

# Validation
TEST_POINT = (1.0, 1.0)

# Evaluation point defaults and slider range
DEFAULT_EXPRESSION = "x^2 + y^2"
DEFAULT_POINT = (1.0, 2.0)
POINT_BOUNDS = {"min": -5.0, "max": 5.0, "step": 0.1}

# Display
DISPLAY_DECIMALS = 2
ZERO_CLAMP = 1e-3

# Event coalescing window
DEBOUNCE_MS = 300

# Image export
EXPORT_WIDTH = 800
EXPORT_HEIGHT = 600
EXPORT_FORMAT = "png"

PRESETS: Dict[str, str] = {
    "Paraboloid (default)": "x^2 + y^2",
    "Sine-cosine surface": "sin(x) + cos(y)",
    "Hyperbolic paraboloid": "x*y",
    "Gaussian": "exp(-(x^2 + y^2))",
    "Saddle": "x^2 - y^2",
    "Ripple": "sin(x)*cos(y)",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _default_preferences_path() -> Path:
    return Path.home() / ".calcviz" / "preferences.json"


@dataclass(frozen=True)
class Settings:
    preferences_path: Path
    cache_max_entries: Optional[int] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        prefs = env.get("CALCVIZ_PREFERENCES")
        path = Path(prefs).expanduser() if prefs else _default_preferences_path()

        max_entries: Optional[int] = None
        raw = env.get("CALCVIZ_CACHE_MAX_ENTRIES", "").strip()
        if raw:
            try:
                max_entries = int(raw)
            except ValueError:
                raise ValueError(f"CALCVIZ_CACHE_MAX_ENTRIES must be an integer, got {raw!r}") from None
            if max_entries <= 0:
                raise ValueError("CALCVIZ_CACHE_MAX_ENTRIES must be > 0")

        level = env.get("CALCVIZ_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        return cls(preferences_path=path, cache_max_entries=max_entries, log_level=level)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("calcviz").setLevel(level)
