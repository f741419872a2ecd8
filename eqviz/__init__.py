"""Top-level public API for the ``eqviz`` package.

Trace the zero set of ``f(x, y)`` over a viewport and draw it:

>>> from eqviz import DEFAULT_DOMAIN, Resolution, compile_equation, trace_equation
>>> result = trace_equation(compile_equation("x = sin(y)"), DEFAULT_DOMAIN, Resolution(200, 200))
>>> result.strategy.value
'sweep_y_solve_x'

The notebook panel lives in :class:`EquationExplorer`; the headless pipeline
is :func:`plot_pass` followed by :func:`build_figure`.
"""

from .classifier import Classification, classify
from .clipper import CanvasTransform, clip
from .compiler import (
    ParsedInput,
    SymbolicScalarFunction,
    compile_equation,
    compile_expression,
    parse_input,
    split_equation,
)
from .config import DEFAULT_CONFIG, TraceConfig
from .continuation import newton_solve, trace_points
from .errors import ClassificationFailure, EquationParseError, EvaluationError
from .figure import build_figure
from .input_convert import InputConvert
from .notebook import EquationExplorer
from .numpify import NumpifiedFunction, numpify, numpify_cached
from .roots import find_roots
from .segmentation import order_single_branch, segment_branches
from .single_variable import solve_single_variable
from .tracer import TraceResult, TraceStrategy, trace_equation, trace_explicit
from .types import (
    DEFAULT_DOMAIN,
    Curve,
    CurveKind,
    DependencyClass,
    Domain,
    Resolution,
    SolutionPoint,
)
from .workspace import Equation, EquationSet, PlottedEquation, plot_pass

__all__ = [
    "CanvasTransform",
    "Classification",
    "ClassificationFailure",
    "Curve",
    "CurveKind",
    "DEFAULT_CONFIG",
    "DEFAULT_DOMAIN",
    "DependencyClass",
    "Domain",
    "Equation",
    "EquationExplorer",
    "EquationParseError",
    "EquationSet",
    "EvaluationError",
    "InputConvert",
    "NumpifiedFunction",
    "ParsedInput",
    "PlottedEquation",
    "Resolution",
    "SolutionPoint",
    "SymbolicScalarFunction",
    "TraceConfig",
    "TraceResult",
    "TraceStrategy",
    "build_figure",
    "classify",
    "clip",
    "compile_equation",
    "compile_expression",
    "find_roots",
    "newton_solve",
    "numpify",
    "numpify_cached",
    "order_single_branch",
    "parse_input",
    "plot_pass",
    "segment_branches",
    "solve_single_variable",
    "split_equation",
    "trace_equation",
    "trace_explicit",
    "trace_points",
]
