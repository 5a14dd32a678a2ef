"""Request orchestration: validate, sample, assemble, cache, render.

One :class:`VisualizerSession` holds everything mutable. The controller is
the only thing that writes to it, and it commits a request's state only after
sampling and assembly succeeded, so a bad expression never disturbs the plot
already on screen.
"""

from __future__ import annotations

import itertools
import logging
import math
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterator, Optional

from .assembler import PlotSeriesSet, Visibility, apply_visibility, assemble, format_number
from .cache import CacheKey, PlotCache
from .config import DEBOUNCE_MS, DEFAULT_EXPRESSION, DEFAULT_POINT, PRESETS
from .debounce import Debouncer
from .errors import CalcVizError, EvaluationError, Notice, RenderError, ValidationError
from .expression import ParsedExpression, compile_expression
from .render import Renderer, build_figure_2d, build_figure_3d
from .sampler import DerivativeResult, sample
from .theme import PreferenceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlotRequest:
    expression: str
    x0: float
    y0: float
    dark: bool = False
    visibility: Visibility = field(default_factory=Visibility)


@dataclass(frozen=True)
class DerivedValues:
    f0: float
    fx0: float
    fy0: float
    gradient_magnitude: float
    fx_text: str
    fy_text: str
    fx_latex: str
    fy_latex: str

    @classmethod
    def build(cls, parsed: ParsedExpression, d: DerivativeResult) -> "DerivedValues":
        text = parsed.partials_display()
        tex = parsed.partials_latex()
        return cls(
            f0=d.f0, fx0=d.fx0, fy0=d.fy0,
            gradient_magnitude=d.gradient_magnitude,
            fx_text=text["fx"], fy_text=text["fy"],
            fx_latex=tex["fx"], fy_latex=tex["fy"],
        )

    def formatted(self) -> Dict[str, str]:
        return {
            "f(x0, y0)": format_number(self.f0),
            "∂f/∂x": format_number(self.fx0),
            "∂f/∂y": format_number(self.fy0),
            "|∇f|": format_number(self.gradient_magnitude),
        }


@dataclass
class VisualizerSession:
    expression: str = DEFAULT_EXPRESSION
    x0: float = DEFAULT_POINT[0]
    y0: float = DEFAULT_POINT[1]
    dark: bool = False
    visibility: Visibility = field(default_factory=Visibility)
    cache: PlotCache = field(default_factory=PlotCache)
    last_good: Optional[PlotSeriesSet] = None
    last_derived: Optional[DerivedValues] = None


@dataclass(frozen=True)
class PlotOutcome:
    sequence: int
    ok: bool
    stale: bool = False
    cache_hit: bool = False
    notice: Optional[Notice] = None
    series: Optional[PlotSeriesSet] = None
    derived: Optional[DerivedValues] = None


class PlotController:
    def __init__(
        self,
        session: VisualizerSession,
        renderer: Renderer,
        compile: Callable[[str], ParsedExpression] = compile_expression,
        store: Optional[PreferenceStore] = None,
        on_outcome: Optional[Callable[[PlotOutcome], None]] = None,
        debounce_ms: int = DEBOUNCE_MS,
    ) -> None:
        self.session = session
        self.renderer = renderer
        self._compile = compile
        self._store = store
        self._on_outcome = on_outcome

        self._sequence = itertools.count(1)
        self._latest = 0
        self._seq_lock = threading.Lock()
        self._render_lock = threading.Lock()
        self._debouncer = Debouncer(self._run_submitted, wait_ms=debounce_ms)
        self.last_outcome: Optional[PlotOutcome] = None

    # ----------------------------
    # SEQUENCING
    # ----------------------------
    def _next_sequence(self) -> int:
        with self._seq_lock:
            seq = next(self._sequence)
            self._latest = seq
            return seq

    def _is_stale(self, seq: int) -> bool:
        with self._seq_lock:
            return seq != self._latest

    # ----------------------------
    # PIPELINE
    # ----------------------------
    def _compute(self, request: PlotRequest, expression: str):
        x0, y0 = float(request.x0), float(request.y0)
        if not (math.isfinite(x0) and math.isfinite(y0)):
            raise ValidationError(f"evaluation point must be finite, got ({x0}, {y0})")

        parsed = self._compile(expression)

        key = CacheKey(expression, x0, y0, bool(request.dark))
        cached = self.session.cache.get(key)
        hit = cached is not None
        if cached is None:
            cached = assemble(sample(parsed, x0, y0), request.visibility, bool(request.dark))
            self.session.cache.put(key, cached)

        return parsed, apply_visibility(cached, request.visibility), hit

    def _draw(self, series: PlotSeriesSet) -> None:
        try:
            self.renderer.draw("plot3d", build_figure_3d(series))
            self.renderer.draw("plot2d", build_figure_2d(series))
        except RenderError:
            raise
        except Exception as exc:
            logger.exception("renderer failed")
            raise RenderError(str(exc)) from exc

    def _redraw_last_good(self) -> None:
        last = self.session.last_good
        if last is None:
            return
        with self._render_lock:
            try:
                self._draw(last)
            except RenderError as exc:
                logger.warning("could not redraw the last good plot: %s", exc)

    def plot(self, request: PlotRequest) -> PlotOutcome:
        """Run one request end to end.

        Typed failures come back as a :class:`Notice` on the outcome and leave
        the session as it was; anything else propagates to the caller.
        """
        seq = self._next_sequence()
        expression = request.expression.strip()

        try:
            parsed, series, hit = self._compute(request, expression)
        except (ValidationError, EvaluationError) as exc:
            notice = Notice.from_exception(exc)
            logger.info("request %d rejected (%s): %s", seq, notice.kind.value, exc)
            self._redraw_last_good()
            return self._finish(PlotOutcome(sequence=seq, ok=False, notice=notice))

        derived = DerivedValues.build(parsed, series.sample.derivatives)

        notice = None
        # staleness check, commit and draw happen as one step
        with self._render_lock:
            if self._is_stale(seq):
                logger.debug("request %d superseded before commit", seq)
                return self._finish(PlotOutcome(sequence=seq, ok=False, stale=True))

            s = self.session
            s.expression = expression
            s.x0, s.y0 = series.sample.x0, series.sample.y0
            s.dark = bool(request.dark)
            s.visibility = request.visibility
            s.last_good = series
            s.last_derived = derived

            try:
                self._draw(series)
            except RenderError as exc:
                notice = Notice.from_exception(exc)

        return self._finish(PlotOutcome(
            sequence=seq,
            ok=notice is None,
            cache_hit=hit,
            notice=notice,
            series=series,
            derived=derived,
        ))

    def _finish(self, outcome: PlotOutcome) -> PlotOutcome:
        self.last_outcome = outcome
        return outcome

    # ----------------------------
    # DEBOUNCED ENTRY POINT
    # ----------------------------
    def submit(self, request: PlotRequest) -> None:
        """Debounced :meth:`plot`; a burst of requests yields one trailing call."""
        self._debouncer(request)

    def flush(self) -> None:
        self._debouncer.flush()

    def _run_submitted(self, request: PlotRequest) -> None:
        outcome = self.plot(request)
        if self._on_outcome is not None:
            self._on_outcome(outcome)

    # ----------------------------
    # SESSION MUTATIONS
    # ----------------------------
    def current_request(self) -> PlotRequest:
        s = self.session
        return PlotRequest(expression=s.expression, x0=s.x0, y0=s.y0, dark=s.dark, visibility=s.visibility)

    def toggle(self, name: str) -> PlotRequest:
        self.session.visibility = self.session.visibility.toggled(name)
        return self.current_request()

    def reset(self) -> PlotRequest:
        """Back to the default point with every series visible."""
        self.session.x0, self.session.y0 = DEFAULT_POINT
        self.session.visibility = Visibility()
        return self.current_request()

    def select_preset(self, label: str) -> PlotRequest:
        try:
            expression = PRESETS[label]
        except KeyError:
            raise ValidationError(f"unknown preset {label!r}") from None
        return replace(self.current_request(), expression=expression)

    def set_theme(self, dark: bool) -> PlotRequest:
        self.session.dark = bool(dark)
        if self._store is not None:
            try:
                self._store.save_theme("dark" if dark else "light")
            except OSError as exc:
                logger.warning("could not save theme preference: %s", exc)
        return self.current_request()


def notice_for(exc: BaseException) -> Notice:
    """Notice for an exception caught outside :meth:`PlotController.plot`."""
    if not isinstance(exc, CalcVizError):
        logger.error("unhandled error", exc_info=exc)
    return Notice.from_exception(exc)


@contextmanager
def error_boundary(report: Callable[[Notice], None]) -> Iterator[None]:
    """Turn anything raised in the block into a reported :class:`Notice`.

    Wraps independent page sections so one failing section does not take the
    rest of the page down with it.
    """
    try:
        yield
    except Exception as exc:
        report(notice_for(exc))
