"""Point sampling of a bivariate zero set by sweeping one variable.

Two sweep directions are supported:

- **sweep y, solve x**: the relation is expected to be roughly single valued
  in ``x``, so each ``y`` sample runs a Newton iteration on ``x -> f(x, y)``.
- **sweep x, solve y**: several ``y`` roots per ``x`` are expected (circles,
  sideways parabolas), so each ``x`` sample runs the exhaustive sign-change
  search of :func:`eqviz.roots.find_roots`.

Both return unordered :class:`~eqviz.types.SolutionPoint` lists; ordering into
curves is the job of :mod:`eqviz.segmentation`.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import numpy as np

from .config import DEFAULT_CONFIG, TraceConfig
from .roots import Slice, evaluate_slice, find_roots
from .scalar_function import partial_of
from .types import Domain, Resolution, SolutionPoint

__all__ = ["newton_solve", "sample_count_for", "trace_points"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Function2D = Callable[[float, float], object]


def sample_count_for(
    resolution: Resolution,
    prefer_solving_for_x: bool,
    config: TraceConfig = DEFAULT_CONFIG,
) -> int:
    """Number of sweep samples: ``min(max_samples, pixels * samples_per_pixel)``.

    ``pixels`` is the pixel size of the swept axis: height when sweeping
    ``y``, width when sweeping ``x``.
    """
    pixels = resolution.height_px if prefer_solving_for_x else resolution.width_px
    return max(2, min(config.max_samples, pixels * config.samples_per_pixel))


def _derivative_at(
    slice_fn: Slice,
    derivative: Optional[Slice],
    t: float,
    ft: float,
    config: TraceConfig,
) -> Optional[float]:
    if derivative is not None:
        analytic = evaluate_slice(derivative, t)
        if analytic is not None:
            return analytic
    forward = evaluate_slice(slice_fn, t + config.newton_derivative_step)
    if forward is None:
        return None
    return (forward - ft) / config.newton_derivative_step


def newton_solve(
    slice_fn: Slice,
    start: float,
    lo: float,
    hi: float,
    *,
    derivative: Optional[Slice] = None,
    config: TraceConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    """Solve ``slice_fn(t) = 0`` by Newton's method starting at ``start``.

    Parameters
    ----------
    slice_fn : callable
        One-dimensional function.
    start : float
        Initial guess.
    lo, hi : float
        Accepted interval for the result.
    derivative : callable, optional
        Analytic derivative of ``slice_fn``. Where it is missing or undefined
        a forward difference with step ``config.newton_derivative_step`` is
        used.

    Returns
    -------
    float or None
        The root, or ``None`` if the iteration hit a flat derivative, left
        ``[lo - margin, hi + margin]``, failed to evaluate, or the result does
        not pass a fresh residual check inside ``[lo, hi]``.
    """
    t = float(start)
    escape_lo = lo - config.newton_escape_margin
    escape_hi = hi + config.newton_escape_margin

    for _ in range(config.newton_max_iterations):
        ft = evaluate_slice(slice_fn, t)
        if ft is None:
            return None
        if abs(ft) < config.newton_tolerance:
            break
        slope = _derivative_at(slice_fn, derivative, t, ft, config)
        if slope is None or abs(slope) < config.newton_min_derivative:
            return None
        step = ft / slope
        t -= step
        if not np.isfinite(t) or t < escape_lo or t > escape_hi:
            return None
        if abs(step) < config.newton_tolerance:
            break

    residual = evaluate_slice(slice_fn, t)
    if residual is None or abs(residual) >= config.acceptance_tolerance:
        return None
    if not lo <= t <= hi:
        return None
    return t


def _sweep_y_solve_x(
    f: Function2D, domain: Domain, sample_count: int, config: TraceConfig
) -> list[SolutionPoint]:
    """Newton-solve ``x`` on each horizontal slice, starting from ``x = 0``.

    Slices where ``df/dx`` vanishes or ``f`` is undefined at the start point
    give no root, so ``y = x^2`` and ``log(x) = y`` trace as empty. Multiple
    ``x`` per ``y`` are not found here; see ``order_single_branch``.
    """
    dfdx = partial_of(f, "x")
    points: list[SolutionPoint] = []
    for y in np.linspace(domain.y_min, domain.y_max, sample_count):
        yv = float(y)
        derivative = (lambda t, _y=yv: dfdx(t, _y)) if dfdx is not None else None
        x = newton_solve(
            lambda t, _y=yv: f(t, _y),
            0.0,
            domain.x_min,
            domain.x_max,
            derivative=derivative,
            config=config,
        )
        if x is not None:
            points.append(SolutionPoint(x, yv))
    return points


def _sweep_x_solve_y(
    f: Function2D, domain: Domain, sample_count: int, config: TraceConfig
) -> list[SolutionPoint]:
    points: list[SolutionPoint] = []
    for x in np.linspace(domain.x_min, domain.x_max, sample_count):
        xv = float(x)
        for y in find_roots(
            lambda t, _x=xv: f(_x, t), domain.y_min, domain.y_max, config=config
        ):
            points.append(SolutionPoint(xv, y))
    return points


def trace_points(
    f: Function2D,
    domain: Domain,
    prefer_solving_for_x: bool,
    sample_count: int,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> list[SolutionPoint]:
    """Sample points of the zero set of ``f`` inside ``domain``.

    Parameters
    ----------
    f : callable
        Scalar function ``f(x, y)``.
    domain : Domain
        Plotting rectangle.
    prefer_solving_for_x : bool
        ``True`` sweeps ``y`` and solves ``x`` by Newton; ``False`` sweeps
        ``x`` and isolates every ``y`` root.
    sample_count : int
        Number of evenly spaced sweep samples, at least 2.

    Returns
    -------
    list of SolutionPoint
        Unordered points. Samples where nothing converges are skipped.
    """
    if sample_count < 2:
        raise ValueError(f"sample_count must be >= 2, got {sample_count!r}")

    log_debug = logger.isEnabledFor(logging.DEBUG)
    t0 = time.perf_counter() if log_debug else None

    if prefer_solving_for_x:
        points = _sweep_y_solve_x(f, domain, int(sample_count), config)
    else:
        points = _sweep_x_solve_y(f, domain, int(sample_count), config)

    if t0 is not None:
        logger.debug(
            "trace_points: %s samples=%d points=%d elapsed=%.2fms",
            "sweep-y/solve-x" if prefer_solving_for_x else "sweep-x/solve-y",
            sample_count,
            len(points),
            1000.0 * (time.perf_counter() - t0),
        )
    return points
