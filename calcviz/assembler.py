"""Turn a :class:`SampleResult` into named, typed, visibility-tagged Plotly traces.

Every series is always built; the visibility flags only set each trace's
``visible`` attribute, so toggling a checkbox never resamples.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields, replace
from typing import Tuple

import plotly.graph_objects as go

from .config import DISPLAY_DECIMALS, ZERO_CLAMP
from .sampler import SampleResult
from .theme import palette_for


def format_number(value: float) -> str:
    """Two decimals; anything with magnitude below 0.001 is shown as ``0``."""
    if abs(value) < ZERO_CLAMP:
        return "0"
    return f"{value:.{DISPLAY_DECIMALS}f}"


class SeriesKind(enum.Enum):
    SURFACE = "surface"
    TANGENT = "tangent"
    POINT = "point"
    GRADIENT = "gradient"
    CONTOUR = "contour"
    VECTOR = "vector"


@dataclass(frozen=True)
class Visibility:
    surface: bool = True
    tangent_plane: bool = True
    gradient: bool = True
    contour: bool = True
    vectors: bool = True

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def toggled(self, name: str) -> "Visibility":
        if name not in self.names():
            raise KeyError(f"unknown series {name!r}; expected one of {self.names()}")
        return replace(self, **{name: not getattr(self, name)})

    def flag_for(self, kind: SeriesKind) -> bool:
        # the point marker has no toggle
        if kind is SeriesKind.POINT:
            return True
        return getattr(self, _TOGGLE_FOR_KIND[kind])


_TOGGLE_FOR_KIND = {
    SeriesKind.SURFACE: "surface",
    SeriesKind.TANGENT: "tangent_plane",
    SeriesKind.GRADIENT: "gradient",
    SeriesKind.CONTOUR: "contour",
    SeriesKind.VECTOR: "vectors",
}


@dataclass(frozen=True, eq=False)
class PlotSeries:
    name: str
    kind: SeriesKind
    trace: go.BaseTraceType
    visible: bool = True

    def with_visibility(self, visibility: Visibility) -> "PlotSeries":
        flag = visibility.flag_for(self.kind)
        if flag == self.visible:
            return self
        return replace(self, visible=flag)

    def to_trace(self) -> go.BaseTraceType:
        """A fresh copy of the trace carrying this series' ``visible`` flag."""
        return type(self.trace)(self.trace, visible=self.visible)


@dataclass(frozen=True, eq=False)
class PlotSeriesSet:
    series_3d: Tuple[PlotSeries, ...]
    series_2d: Tuple[PlotSeries, ...]
    dark: bool
    sample: SampleResult

    @property
    def all_series(self) -> Tuple[PlotSeries, ...]:
        return self.series_3d + self.series_2d

    def by_kind(self, kind: SeriesKind) -> PlotSeries:
        for s in self.all_series:
            if s.kind is kind:
                return s
        raise KeyError(kind)


# ----------------------------
# 3D SERIES
# ----------------------------
def _surface_series(sample: SampleResult, dark: bool):
    pal = palette_for(dark)
    surface = go.Surface(
        x=sample.xs, y=sample.ys, z=sample.z,
        name="f(x,y)",
        colorscale=pal.surface_colorscale,
        hovertemplate="x=%{x:.4f}<br>y=%{y:.4f}<br>z=%{z:.4f}<extra></extra>",
    )
    tangent = go.Surface(
        x=sample.xs, y=sample.ys, z=sample.tangent_z,
        name="Tangent Plane",
        opacity=0.6,
        colorscale=pal.tangent_colorscale,
        showscale=False,
        hovertemplate="x=%{x:.4f}<br>y=%{y:.4f}<br>T=%{z:.4f}<extra></extra>",
    )
    return (
        PlotSeries("f(x,y)", SeriesKind.SURFACE, surface),
        PlotSeries("Tangent Plane", SeriesKind.TANGENT, tangent),
    )


def _point_series(sample: SampleResult, dark: bool) -> PlotSeries:
    pal = palette_for(dark)
    d = sample.derivatives
    label = f"({format_number(sample.x0)}, {format_number(sample.y0)})"
    point = go.Scatter3d(
        x=[sample.x0], y=[sample.y0], z=[d.f0],
        mode="markers",
        name=label,
        marker=dict(size=8, color=pal.point_color),
        hovertemplate="x=%{x:.4f}<br>y=%{y:.4f}<br>f=%{z:.4f}<extra></extra>",
    )
    return PlotSeries(label, SeriesKind.POINT, point)


def _gradient_series(sample: SampleResult, dark: bool) -> PlotSeries:
    pal = palette_for(dark)
    (x0, y0, z0), (x1, y1, z1) = sample.gradient
    line = go.Scatter3d(
        x=[x0, x1], y=[y0, y1], z=[z0, z1],
        mode="lines",
        name="Gradient",
        line=dict(width=6, color=pal.gradient_color),
    )
    return PlotSeries("Gradient", SeriesKind.GRADIENT, line)


# ----------------------------
# 2D SERIES
# ----------------------------
def _contour_series(sample: SampleResult) -> PlotSeries:
    contour = go.Contour(
        x=sample.field_xs, y=sample.field_ys, z=sample.contour_z,
        name="Contour",
        contours=dict(coloring="heatmap"),
        showscale=False,
        hovertemplate="x=%{x:.4f}<br>y=%{y:.4f}<br>f=%{z:.4f}<extra></extra>",
    )
    return PlotSeries("Contour", SeriesKind.CONTOUR, contour)


def _vector_series(sample: SampleResult, dark: bool) -> PlotSeries:
    pal = palette_for(dark)

    # one polyline: x0, x1, None, x0, x1, None, ...
    xs, ys = [], []
    for (sx, sy), (ex, ey) in zip(sample.vector_start.tolist(), sample.vector_end.tolist()):
        xs += [sx, ex, None]
        ys += [sy, ey, None]

    vectors = go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name="Gradient field",
        line=dict(color=pal.vector_color, width=1),
        showlegend=False,
        hoverinfo="skip",
    )
    return PlotSeries("Gradient field", SeriesKind.VECTOR, vectors)


def assemble(sample: SampleResult, visibility: Visibility, dark: bool) -> PlotSeriesSet:
    """Build the 3D and 2D series for ``sample`` in the given theme."""
    surface, tangent = _surface_series(sample, dark)
    series_3d = (surface, tangent, _point_series(sample, dark), _gradient_series(sample, dark))
    series_2d = (_contour_series(sample), _vector_series(sample, dark))

    result = PlotSeriesSet(series_3d=series_3d, series_2d=series_2d, dark=dark, sample=sample)
    return apply_visibility(result, visibility)


def apply_visibility(series_set: PlotSeriesSet, visibility: Visibility) -> PlotSeriesSet:
    """Same series with ``visible`` flags taken from ``visibility``. No resampling."""
    return replace(
        series_set,
        series_3d=tuple(s.with_visibility(visibility) for s in series_set.series_3d),
        series_2d=tuple(s.with_visibility(visibility) for s in series_set.series_2d),
    )
