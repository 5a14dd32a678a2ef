"""Plotly figure construction and the drawing seam used by the controller."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional, Protocol

import plotly.graph_objects as go

from .assembler import PlotSeriesSet
from .config import EXPORT_FORMAT, EXPORT_HEIGHT, EXPORT_WIDTH
from .errors import RenderError
from .theme import palette_for

logger = logging.getLogger(__name__)

TITLE_2D = "2D Contour & Gradient Field"


def build_figure_3d(series_set: PlotSeriesSet) -> go.Figure:
    pal = palette_for(series_set.dark)
    fig = go.Figure(data=[s.to_trace() for s in series_set.series_3d])

    axis = dict(color=pal.font_color, gridcolor=pal.grid_color, showgrid=True)
    fig.update_layout(
        template=pal.plotly_template,
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=pal.font_color),
        scene=dict(
            xaxis=dict(title="x", **axis),
            yaxis=dict(title="y", **axis),
            zaxis=dict(title="z", **axis),
            bgcolor=pal.background,
        ),
        legend=dict(orientation="h", yanchor="bottom", y=0.0, xanchor="left", x=0.0),
    )
    return fig


def build_figure_2d(series_set: PlotSeriesSet) -> go.Figure:
    pal = palette_for(series_set.dark)
    fig = go.Figure(data=[s.to_trace() for s in series_set.series_2d])

    fig.update_layout(
        template=pal.plotly_template,
        margin=dict(l=40, r=40, t=40, b=40),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color=pal.font_color),
        title=dict(text=TITLE_2D, font=dict(size=16, color=pal.font_color)),
        xaxis_title="x",
        yaxis_title="y",
    )
    fig.update_xaxes(color=pal.font_color, gridcolor=pal.grid_color)
    fig.update_yaxes(color=pal.font_color, gridcolor=pal.grid_color)
    return fig


def image_export_options(
    view: str,
    width: int = EXPORT_WIDTH,
    height: int = EXPORT_HEIGHT,
    fmt: str = EXPORT_FORMAT,
    timestamp_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """Plotly chart config whose camera button downloads ``calculus_<view>_<ms>.<fmt>``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return {
        "responsive": True,
        "displaylogo": False,
        "toImageButtonOptions": {
            "format": fmt,
            "width": width,
            "height": height,
            "filename": f"calculus_{view}_{timestamp_ms}",
        },
    }


def figure_html(figure: go.Figure) -> bytes:
    """Standalone HTML page (Plotly JS from the CDN) for a download button."""
    return figure.to_html(full_html=True, include_plotlyjs="cdn").encode("utf-8")


class Renderer(Protocol):
    def draw(self, container_id: str, figure: go.Figure) -> None:
        ...


class StreamlitRenderer:
    """Draws into Streamlit containers keyed by id (``plot3d``, ``plot2d``)."""

    VIEWS = {"plot3d": "3d", "plot2d": "2d"}

    def __init__(self, containers: Mapping[str, Any]) -> None:
        self.containers = dict(containers)

    def draw(self, container_id: str, figure: go.Figure) -> None:
        try:
            target = self.containers[container_id]
        except KeyError:
            raise RenderError(f"no container named {container_id!r}") from None

        view = self.VIEWS.get(container_id, container_id)
        try:
            target.plotly_chart(
                figure,
                use_container_width=True,
                theme=None,
                config=image_export_options(view),
            )
        except Exception as exc:
            logger.exception("drawing %s failed", container_id)
            raise RenderError(f"could not draw the {view.upper()} view: {exc}") from exc
