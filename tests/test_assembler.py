from __future__ import annotations

import pytest

from calcviz.assembler import SeriesKind, Visibility, apply_visibility, assemble, format_number
from calcviz.sampler import sample


@pytest.fixture(scope="module")
def paraboloid_sample(paraboloid):
    return sample(paraboloid, 1.0, 2.0)


@pytest.mark.parametrize(
    "value,expected",
    [(0.0005, "0"), (-0.0009, "0"), (0.001, "0.00"), (1.234, "1.23"), (5, "5.00"), (-2.5, "-2.50")],
)
def test_format_number(value, expected) -> None:
    assert format_number(value) == expected


def test_series_names_and_kinds(paraboloid_sample) -> None:
    s = assemble(paraboloid_sample, Visibility(), dark=False)

    assert [x.name for x in s.series_3d] == ["f(x,y)", "Tangent Plane", "(1.00, 2.00)", "Gradient"]
    assert [x.kind for x in s.series_3d] == [
        SeriesKind.SURFACE, SeriesKind.TANGENT, SeriesKind.POINT, SeriesKind.GRADIENT,
    ]
    assert [x.kind for x in s.series_2d] == [SeriesKind.CONTOUR, SeriesKind.VECTOR]


def test_tangent_plane_trace(paraboloid_sample) -> None:
    tangent = assemble(paraboloid_sample, Visibility(), dark=False).by_kind(SeriesKind.TANGENT).trace
    assert tangent.opacity == 0.6
    assert tangent.showscale is False


def test_gradient_and_point_traces(paraboloid_sample) -> None:
    s = assemble(paraboloid_sample, Visibility(), dark=True)

    grad = s.by_kind(SeriesKind.GRADIENT).trace
    assert tuple(grad.x) == (1.0, 2.0)
    assert tuple(grad.z) == (5.0, 8.0)
    assert grad.line.color == "#ef4444"

    point = s.by_kind(SeriesKind.POINT).trace
    assert tuple(point.z) == (5.0,)


def test_vector_field_is_one_trace_with_gaps(paraboloid_sample) -> None:
    vec = assemble(paraboloid_sample, Visibility(), dark=False).by_kind(SeriesKind.VECTOR).trace
    assert len(vec.x) == 3 * 400
    assert vec.x[2] is None and vec.y[2] is None
    assert vec.x[0] == -5.0


def test_contour_uses_heatmap_coloring(paraboloid_sample) -> None:
    contour = assemble(paraboloid_sample, Visibility(), dark=False).by_kind(SeriesKind.CONTOUR).trace
    assert contour.contours.coloring == "heatmap"
    assert contour.showscale is False


def test_theme_changes_colors_only(paraboloid_sample) -> None:
    light = assemble(paraboloid_sample, Visibility(), dark=False)
    dark = assemble(paraboloid_sample, Visibility(), dark=True)

    assert light.by_kind(SeriesKind.VECTOR).trace.line.color == "#1e293b"
    assert dark.by_kind(SeriesKind.VECTOR).trace.line.color == "#e2e8f0"
    assert light.by_kind(SeriesKind.SURFACE).trace.colorscale != dark.by_kind(SeriesKind.SURFACE).trace.colorscale
    assert light.by_kind(SeriesKind.VECTOR).trace.x == dark.by_kind(SeriesKind.VECTOR).trace.x


def test_point_marker_ignores_visibility(paraboloid_sample) -> None:
    hidden = Visibility(surface=False, tangent_plane=False, gradient=False, contour=False, vectors=False)
    s = assemble(paraboloid_sample, hidden, dark=False)
    assert [x.visible for x in s.all_series] == [False, False, True, False, False, False]


def test_apply_visibility_does_not_resample(paraboloid_sample) -> None:
    full = assemble(paraboloid_sample, Visibility(), dark=False)
    hidden = apply_visibility(full, Visibility().toggled("vectors"))

    assert hidden.sample is full.sample
    assert hidden.by_kind(SeriesKind.VECTOR).visible is False
    assert hidden.by_kind(SeriesKind.VECTOR).trace is full.by_kind(SeriesKind.VECTOR).trace
    assert hidden.by_kind(SeriesKind.SURFACE) is full.by_kind(SeriesKind.SURFACE)


def test_to_trace_copies_visible_flag(paraboloid_sample) -> None:
    s = assemble(paraboloid_sample, Visibility(surface=False), dark=False)
    series = s.by_kind(SeriesKind.SURFACE)

    trace = series.to_trace()
    assert trace.visible is False
    assert series.trace.visible is None


def test_unknown_toggle_name() -> None:
    with pytest.raises(KeyError):
        Visibility().toggled("axes")
