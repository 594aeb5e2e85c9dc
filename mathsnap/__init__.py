"""Top-level public API for the ``mathsnap`` package.

This module re-exports the pieces a client needs after a math expression has
been recognized, so everything can be imported from a single namespace:

>>> from mathsnap import CurveSampler, classify, to_display_notation  # doctest: +SKIP

It exposes both the high-level helpers (classification, display notation,
curve sampling, the interactive view controller) and lower-level building
blocks (the evaluator protocol and the ``numpify`` compiler) for custom
integrations.
"""

from .classifier import ClassificationResult, classify
from .coordinate_view import CoordinateViewController, GuideLines, HitResult, hit_test
from .curve_sampler import (
    CurveSampler,
    PathSegment,
    PlotCache,
    PlotPoint,
    PlotResult,
    SampleConfig,
    solve_for_y,
    split_graphable,
)
from .evaluator import EvaluationError, ExpressionEvaluator, SympyEvaluator
from .InputConvert import InputConvert
from .notation import to_display_notation
from .numpify import NumpifiedFunction, numpify, numpify_cached
from .ParseExpression import ExpressionParseError, normalize_expression, parse_formula
from .plotly_render import plot_result_figure
from .presets import BASIC_FUNCTIONS, COMPLEX_FUNCTIONS, all_presets
from .recognition import (
    RecognitionPayloadError,
    RecognitionResult,
    format_solution,
    graphable_expression,
    needs_limit_fallback,
    solution_lines,
)
from .view_transform import ViewConfig, ViewTransform
