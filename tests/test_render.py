from __future__ import annotations

import pytest

from calcviz.assembler import Visibility, assemble
from calcviz.errors import RenderError
from calcviz.render import (
    StreamlitRenderer,
    build_figure_2d,
    build_figure_3d,
    figure_html,
    image_export_options,
)
from calcviz.sampler import sample


@pytest.fixture(scope="module")
def series_dark(paraboloid):
    return assemble(sample(paraboloid, 1.0, 2.0), Visibility(contour=False), dark=True)


class _Slot:
    def __init__(self, fail: bool = False) -> None:
        self.charts = []
        self.fail = fail

    def plotly_chart(self, figure, **kwargs) -> None:
        if self.fail:
            raise RuntimeError("frontend went away")
        self.charts.append((figure, kwargs))


def test_3d_figure_layout(series_dark) -> None:
    fig = build_figure_3d(series_dark)
    assert len(fig.data) == 4
    assert fig.layout.scene.bgcolor == "#0f172a"
    assert fig.layout.scene.xaxis.title.text == "x"
    assert fig.layout.font.color == "#f8fafc"


def test_2d_figure_title_and_visibility(series_dark) -> None:
    fig = build_figure_2d(series_dark)
    assert fig.layout.title.text == "2D Contour & Gradient Field"
    assert fig.data[0].visible is False
    assert fig.data[1].visible is True
    assert fig.layout.xaxis.gridcolor == "#334155"


def test_image_export_options() -> None:
    opts = image_export_options("3d", timestamp_ms=1234)
    assert opts["toImageButtonOptions"] == {
        "format": "png",
        "width": 800,
        "height": 600,
        "filename": "calculus_3d_1234",
    }


def test_figure_html(series_dark) -> None:
    data = figure_html(build_figure_2d(series_dark))
    assert isinstance(data, bytes)
    assert b"<html>" in data
    assert b"2D Contour" in data


def test_streamlit_renderer_draws_into_named_slot(series_dark) -> None:
    slot = _Slot()
    StreamlitRenderer({"plot3d": slot}).draw("plot3d", build_figure_3d(series_dark))

    (figure, kwargs), = slot.charts
    assert kwargs["use_container_width"] is True
    assert kwargs["config"]["toImageButtonOptions"]["filename"].startswith("calculus_3d_")


def test_streamlit_renderer_errors_are_render_errors(series_dark) -> None:
    renderer = StreamlitRenderer({"plot2d": _Slot(fail=True)})
    with pytest.raises(RenderError):
        renderer.draw("plot2d", build_figure_2d(series_dark))
    with pytest.raises(RenderError):
        renderer.draw("plot3d", build_figure_3d(series_dark))
