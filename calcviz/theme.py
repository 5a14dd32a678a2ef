from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")


@dataclass(frozen=True)
class Palette:
    name: str
    surface_colorscale: str
    tangent_colorscale: str
    point_color: str
    gradient_color: str
    vector_color: str
    font_color: str
    background: str
    grid_color: str
    plotly_template: str

    # page chrome (CSS)
    card_background: str
    card_border: str
    muted_text: str


LIGHT = Palette(
    name="light",
    surface_colorscale="Blues",
    tangent_colorscale="Reds",
    point_color="#ef4444",
    gradient_color="#ef4444",
    vector_color="#1e293b",
    font_color="#1e293b",
    background="#ffffff",
    grid_color="#e2e8f0",
    plotly_template="plotly_white",
    card_background="rgba(15,23,42,0.04)",
    card_border="rgba(15,23,42,0.10)",
    muted_text="rgba(15,23,42,0.65)",
)

DARK = Palette(
    name="dark",
    surface_colorscale="Viridis",
    tangent_colorscale="YlOrRd",
    point_color="#ef4444",
    gradient_color="#ef4444",
    vector_color="#e2e8f0",
    font_color="#f8fafc",
    background="#0f172a",
    grid_color="#334155",
    plotly_template="plotly_dark",
    card_background="rgba(255,255,255,0.04)",
    card_border="rgba(255,255,255,0.10)",
    muted_text="rgba(255,255,255,0.70)",
)


def palette_for(dark: bool) -> Palette:
    return DARK if dark else LIGHT


class PreferenceStore:
    """The single persisted preference: ``{"theme": "light" | "dark"}`` in a JSON file.

    A missing, empty, corrupt or unreadable file reads as "no preference".
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load_theme(self) -> Optional[str]:
        if not self.path.exists():
            logger.debug("no preference file at %s", self.path)
            return None
        try:
            content = self.path.read_text(encoding="utf-8").strip()
            if not content:
                return None
            data = json.loads(content)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("failed to read %s (%s); ignoring stored theme", self.path, e)
            return None

        theme = data.get("theme") if isinstance(data, dict) else None
        if theme not in THEMES:
            logger.warning("ignoring unknown theme %r in %s", theme, self.path)
            return None
        return theme

    def save_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got {theme!r}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"theme": theme}, f, indent=4)
        logger.debug("saved theme %r to %s", theme, self.path)
