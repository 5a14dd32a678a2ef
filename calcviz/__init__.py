"""Multivariable calculus visualizer: surfaces, tangent planes, gradients and contours."""

from .assembler import PlotSeries, PlotSeriesSet, SeriesKind, Visibility, apply_visibility, assemble
from .cache import CacheKey, PlotCache
from .controller import PlotController, PlotOutcome, PlotRequest, VisualizerSession
from .errors import (
    CalcVizError,
    ErrorKind,
    EvaluationError,
    Notice,
    RenderError,
    SamplingError,
    ValidationError,
)
from .expression import ParsedExpression, compile_expression
from .sampler import DerivativeResult, SampleResult, sample, tangent_plane

__version__ = "1.0.0"

__all__ = [
    "CacheKey",
    "CalcVizError",
    "DerivativeResult",
    "ErrorKind",
    "EvaluationError",
    "Notice",
    "ParsedExpression",
    "PlotCache",
    "PlotController",
    "PlotOutcome",
    "PlotRequest",
    "PlotSeries",
    "PlotSeriesSet",
    "RenderError",
    "SampleResult",
    "SamplingError",
    "SeriesKind",
    "ValidationError",
    "Visibility",
    "VisualizerSession",
    "apply_visibility",
    "assemble",
    "compile_expression",
    "sample",
    "tangent_plane",
]
