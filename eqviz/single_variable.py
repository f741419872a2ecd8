"""Equations that involve only ``x`` or only ``y``.

``x - 5 = 0`` is a vertical line and ``y^2 - 9 = 0`` a pair of horizontal
lines. The relevant axis is scanned densely; each solution becomes a full
width (or height) line curve plus a marker on the domain's midline.
"""

from __future__ import annotations

import logging

import numpy as np

from .config import DEFAULT_CONFIG, TraceConfig
from .roots import Slice, bisect_root, evaluate_slice
from .types import Curve, CurveKind, DependencyClass, Domain, Resolution, SolutionPoint

__all__ = ["scan_axis", "solve_single_variable"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def scan_axis(
    slice_fn: Slice,
    lo: float,
    hi: float,
    samples: int,
    config: TraceConfig = DEFAULT_CONFIG,
) -> list[float]:
    """Return the distinct solutions of ``slice_fn(t) = 0`` on ``[lo, hi]``.

    Candidates are samples with ``|slice_fn| < config.single_variable_tolerance``
    and sign changes between neighbouring samples, refined by bisection.
    Candidates closer than two sample steps form one cluster represented by
    its smallest residual; the survivors are rounded to
    ``config.single_variable_decimals`` and deduplicated.
    """
    grid = np.linspace(lo, hi, max(2, int(samples)))
    step = float(grid[1] - grid[0])
    values = [evaluate_slice(slice_fn, float(t)) for t in grid]

    candidates: list[tuple[float, float]] = []
    for t, v in zip(grid, values):
        if v is not None and abs(v) < config.single_variable_tolerance:
            candidates.append((float(t), abs(v)))
    for i in range(len(grid) - 1):
        fa, fb = values[i], values[i + 1]
        if fa is None or fb is None or fa * fb >= 0.0:
            continue
        root = bisect_root(slice_fn, float(grid[i]), float(grid[i + 1]), fa, fb, config=config)
        if root is None:
            continue
        residual = evaluate_slice(slice_fn, root)
        if residual is not None:
            candidates.append((root, abs(residual)))

    candidates.sort()
    clusters: list[list[tuple[float, float]]] = []
    for cand in candidates:
        if clusters and cand[0] - clusters[-1][-1][0] < 2.0 * step:
            clusters[-1].append(cand)
        else:
            clusters.append([cand])

    solutions: list[float] = []
    for cluster in clusters:
        best = min(cluster, key=lambda c: c[1])[0]
        value = round(best, config.single_variable_decimals)
        if value not in solutions:
            solutions.append(value)
    return solutions


def solve_single_variable(
    f,
    domain: Domain,
    resolution: Resolution,
    dependency: DependencyClass,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> tuple[list[Curve], list[SolutionPoint]]:
    """Render an x-only or y-only equation as constant lines.

    Parameters
    ----------
    f : callable
        Scalar function ``f(x, y)`` involving one variable.
    domain : Domain
        Plotting rectangle.
    resolution : Resolution
        The scanned axis gets ``config.single_variable_oversampling`` samples
        per pixel.
    dependency : DependencyClass
        ``X_ONLY`` or ``Y_ONLY``; ``CONSTANT`` and ``BIVARIATE`` produce
        nothing.

    Returns
    -------
    tuple
        ``(curves, markers)``: one two-point ``LINE`` curve and one midline
        marker per solution.
    """
    x_mid, y_mid = domain.center
    oversampling = config.single_variable_oversampling

    curves: list[Curve] = []
    markers: list[SolutionPoint] = []
    if dependency is DependencyClass.X_ONLY:
        xs = scan_axis(
            lambda t: f(t, y_mid),
            domain.x_min,
            domain.x_max,
            resolution.width_px * oversampling,
            config,
        )
        for x in xs:
            curves.append(
                Curve((SolutionPoint(x, domain.y_min), SolutionPoint(x, domain.y_max)), CurveKind.LINE)
            )
            markers.append(SolutionPoint(x, y_mid))
    elif dependency is DependencyClass.Y_ONLY:
        ys = scan_axis(
            lambda t: f(x_mid, t),
            domain.y_min,
            domain.y_max,
            resolution.height_px * oversampling,
            config,
        )
        for y in ys:
            curves.append(
                Curve((SolutionPoint(domain.x_min, y), SolutionPoint(domain.x_max, y)), CurveKind.LINE)
            )
            markers.append(SolutionPoint(x_mid, y))

    logger.debug("solve_single_variable: %s lines=%d", dependency.value, len(curves))
    return curves, markers
