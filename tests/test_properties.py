"""Property-based checks for the sampling, assembly and caching pipeline."""

from __future__ import annotations

from functools import lru_cache

from hypothesis import given, settings
from hypothesis import strategies as st

from calcviz.assembler import Visibility, apply_visibility, assemble
from calcviz.cache import CacheKey, PlotCache
from calcviz.config import PRESETS
from calcviz.expression import compile_expression
from calcviz.render import build_figure_2d, build_figure_3d
from calcviz.sampler import sample, tangent_plane

POINT = st.floats(min_value=-5.0, max_value=5.0, allow_nan=False, allow_infinity=False)
PRESET = st.sampled_from(sorted(PRESETS.values()))
VISIBILITY = st.builds(Visibility, *(st.booleans() for _ in Visibility.names()))


@lru_cache(maxsize=None)
def _compiled(text: str):
    return compile_expression(text)


@lru_cache(maxsize=None)
def _reference_set():
    return assemble(sample(_compiled("sin(x) + cos(y)"), 0.5, -1.0), Visibility(), dark=False)


@settings(max_examples=25, deadline=None)
@given(text=PRESET, x0=POINT, y0=POINT)
def test_tangent_plane_touches_surface(text: str, x0: float, y0: float) -> None:
    d = sample(_compiled(text), x0, y0).derivatives
    assert tangent_plane(d, x0, y0) == d.f0


@settings(max_examples=10, deadline=None)
@given(text=PRESET, x0=POINT, y0=POINT, dark=st.booleans(), vis=VISIBILITY)
def test_assembly_is_deterministic(text, x0, y0, dark, vis) -> None:
    parsed = _compiled(text)
    a = assemble(sample(parsed, x0, y0), vis, dark)
    b = assemble(sample(parsed, x0, y0), vis, dark)

    assert build_figure_3d(a).to_json() == build_figure_3d(b).to_json()
    assert build_figure_2d(a).to_json() == build_figure_2d(b).to_json()


@given(expression=st.text(max_size=30), x0=POINT, y0=POINT, dark=st.booleans())
def test_cache_returns_what_was_put(expression, x0, y0, dark) -> None:
    cache = PlotCache()
    key = CacheKey(expression, x0, y0, dark)
    value = object()

    assert cache.get(key) is None
    cache.put(key, value)
    assert cache.get(key) is value


@given(vis=VISIBILITY, name=st.sampled_from(Visibility.names()))
def test_toggling_one_flag_changes_only_that_series(vis: Visibility, name: str) -> None:
    base = apply_visibility(_reference_set(), vis)
    toggled = apply_visibility(base, vis.toggled(name))

    changed = [
        after.kind
        for before, after in zip(base.all_series, toggled.all_series)
        if before.visible != after.visible
    ]
    assert len(changed) == 1
    assert vis.flag_for(changed[0]) != vis.toggled(name).flag_for(changed[0])
    assert toggled.sample is base.sample
