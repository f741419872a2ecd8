"""Top-level curve tracing for one equation.

Purpose
-------
Turn a scalar function ``f(x, y)`` (the zero-seeking form of an equation)
into drawable curves over a domain at a given pixel resolution.

Concepts and structure
----------------------
``trace_equation`` is a small coordinator:

1. wrap ``f`` in a fresh :class:`~eqviz.scalar_function.CountingFunction`,
2. classify it (:mod:`eqviz.classifier`),
3. dispatch: constant equations produce nothing, single-variable equations
   go to :mod:`eqviz.single_variable`, bivariate ones to
   :mod:`eqviz.continuation` and then :mod:`eqviz.segmentation`,
4. return an immutable :class:`TraceResult`.

``trace_explicit`` handles bare expressions ``y = g(x)`` by direct sampling.

Important gotchas
-----------------
- Nothing here raises for a well-formed function. Undefined samples are
  skipped; an empty result is a legitimate answer.
- Results are deterministic. Tracing the same function twice gives identical
  curves.

Examples
--------
>>> from eqviz.types import DEFAULT_DOMAIN, Resolution
>>> result = trace_equation(lambda x, y: x * x + y * y - 25, DEFAULT_DOMAIN, Resolution(100, 100))
>>> result.strategy, len(result.curves)
(<TraceStrategy.SWEEP_X_SOLVE_Y: 'sweep_x_solve_y'>, 2)

Discoverability
---------------
See :mod:`eqviz.clipper` for canvas mapping and :mod:`eqviz.workspace` for
the multi-equation plot pass.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .classifier import Classification, classify
from .config import DEFAULT_CONFIG, TraceConfig
from .continuation import sample_count_for, trace_points
from .roots import evaluate_slice
from .scalar_function import CountingFunction
from .segmentation import order_single_branch, segment_branches
from .single_variable import solve_single_variable
from .types import Curve, CurveKind, DependencyClass, Domain, Resolution, SolutionPoint

__all__ = ["TraceResult", "TraceStrategy", "trace_equation", "trace_explicit"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class TraceStrategy(enum.Enum):
    """Which algorithm produced a :class:`TraceResult`."""

    NONE = "none"
    SINGLE_VARIABLE = "single_variable"
    SWEEP_Y_SOLVE_X = "sweep_y_solve_x"
    SWEEP_X_SOLVE_Y = "sweep_x_solve_y"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class TraceResult:
    """Curves traced for one equation.

    Parameters
    ----------
    classification : Classification or None
        Dependency classification; ``None`` for explicit curves.
    curves : tuple[Curve, ...]
        Ordered drawable branches.
    markers : tuple[SolutionPoint, ...]
        Marker points for single-variable solutions.
    strategy : TraceStrategy
        Algorithm used.
    evaluations : int
        Number of function evaluations spent.
    """

    classification: Optional[Classification]
    curves: tuple[Curve, ...]
    markers: tuple[SolutionPoint, ...]
    strategy: TraceStrategy
    evaluations: int

    @property
    def is_empty(self) -> bool:
        return not self.curves and not self.markers

    def points(self) -> list[SolutionPoint]:
        """All curve points, curve after curve."""
        return [p for curve in self.curves for p in curve]


def trace_equation(
    f: Callable[[float, float], object],
    domain: Domain,
    resolution: Resolution,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> TraceResult:
    """Trace the zero set of ``f`` inside ``domain``.

    Parameters
    ----------
    f : callable
        Scalar function ``f(x, y)``; see :mod:`eqviz.scalar_function`.
    domain : Domain
        Plotting rectangle.
    resolution : Resolution
        Pixel size of the target viewport.
    config : TraceConfig, optional
        Tolerances and caps.

    Returns
    -------
    TraceResult
    """
    log_debug = logger.isEnabledFor(logging.DEBUG)
    t0 = time.perf_counter() if log_debug else None

    counted = CountingFunction(f)
    classification = classify(counted, domain, config)
    dependency = classification.dependency

    curves: list[Curve] = []
    markers: list[SolutionPoint] = []
    if dependency is DependencyClass.CONSTANT:
        strategy = TraceStrategy.NONE
    elif dependency in (DependencyClass.X_ONLY, DependencyClass.Y_ONLY):
        strategy = TraceStrategy.SINGLE_VARIABLE
        curves, markers = solve_single_variable(
            counted, domain, resolution, dependency, config=config
        )
    else:
        prefer_x = classification.prefer_solving_for_x
        samples = sample_count_for(resolution, prefer_x, config)
        points = trace_points(counted, domain, prefer_x, samples, config=config)
        if prefer_x:
            strategy = TraceStrategy.SWEEP_Y_SOLVE_X
            curves = order_single_branch(points, config)
        else:
            strategy = TraceStrategy.SWEEP_X_SOLVE_Y
            curves = segment_branches(points, config)

    result = TraceResult(
        classification=classification,
        curves=tuple(curves),
        markers=tuple(markers),
        strategy=strategy,
        evaluations=counted.calls,
    )
    if t0 is not None:
        logger.debug(
            "trace_equation: strategy=%s curves=%d evaluations=%d elapsed=%.2fms",
            strategy.value,
            len(result.curves),
            result.evaluations,
            1000.0 * (time.perf_counter() - t0),
        )
    return result


def trace_explicit(
    g: Callable[[float], object],
    domain: Domain,
    resolution: Resolution,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> TraceResult:
    """Sample the graph of ``y = g(x)`` across the domain's ``x`` range.

    The step is ``domain.width / (width_px * config.explicit_oversampling)``.
    Undefined samples break the graph into separate curves, so ``1/x`` comes
    out as two branches.
    """
    counted = CountingFunction(lambda x, _y: g(x))
    count = int(resolution.width_px * config.explicit_oversampling) + 1

    curves: list[Curve] = []
    run: list[SolutionPoint] = []
    for x in np.linspace(domain.x_min, domain.x_max, count):
        xv = float(x)
        y = evaluate_slice(lambda t: counted(t, 0.0), xv)
        if y is None:
            if run:
                curves.append(Curve(tuple(run), CurveKind.EXPLICIT))
                run = []
            continue
        run.append(SolutionPoint(xv, y))
    if run:
        curves.append(Curve(tuple(run), CurveKind.EXPLICIT))

    logger.debug("trace_explicit: samples=%d curves=%d", count, len(curves))
    return TraceResult(
        classification=None,
        curves=tuple(curves),
        markers=(),
        strategy=TraceStrategy.EXPLICIT,
        evaluations=counted.calls,
    )
