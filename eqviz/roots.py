"""Root isolation on one-dimensional slices of a scalar function.

A slice is any ``g(t) -> float`` (typically ``t -> f(x0, t)``). The isolator
samples the slice on an even grid, flags every sub-interval whose endpoint
values change sign, and refines each one by bisection. It is used for
single-variable equations and for the sweep-x / solve-y continuation path,
where several roots per slice are expected.

Evaluation failures never escape: a sub-interval touching a failing sample is
skipped.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from .config import DEFAULT_CONFIG, TraceConfig
from .errors import EvaluationError
from .scalar_function import evaluate

__all__ = ["Slice", "bisect_root", "evaluate_slice", "find_roots"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Slice = Callable[[float], object]


def evaluate_slice(slice_fn: Slice, t: float) -> Optional[float]:
    """Return ``slice_fn(t)`` as a finite float, or ``None`` when undefined."""
    try:
        return evaluate(lambda u, _unused: slice_fn(u), t, 0.0)
    except EvaluationError:
        return None


def bisect_root(
    slice_fn: Slice,
    a: float,
    b: float,
    fa: float,
    fb: float,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    """Refine a sign-change interval ``[a, b]`` to a single root.

    Parameters
    ----------
    slice_fn : callable
        One-dimensional function.
    a, b : float
        Interval bounds with ``fa * fb <= 0``.
    fa, fb : float
        Slice values already computed at ``a`` and ``b``.

    Returns
    -------
    float or None
        The midpoint of the final bracket, an endpoint when it is an exact
        zero, or ``None`` if a midpoint evaluation failed.
    """
    if fa == 0.0:
        return a
    if fb == 0.0:
        return b

    tol = config.bisection_tolerance
    mid = 0.5 * (a + b)
    for _ in range(config.bisection_max_iterations):
        mid = 0.5 * (a + b)
        fm = evaluate_slice(slice_fn, mid)
        if fm is None:
            return None
        if abs(fm) < tol or (b - a) < tol:
            return mid
        if fa * fm <= 0.0:
            b, fb = mid, fm
        else:
            a, fa = mid, fm
    return mid


def find_roots(
    slice_fn: Slice,
    lo: float,
    hi: float,
    segments: Optional[int] = None,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> list[float]:
    """Find every root of ``slice_fn`` that a sign-change scan of ``[lo, hi]`` reveals.

    Parameters
    ----------
    slice_fn : callable
        One-dimensional function ``t -> float``.
    lo, hi : float
        Search interval, ``lo < hi``.
    segments : int, optional
        Number of equal sub-intervals; defaults to ``config.root_segments``
        (50).

    Returns
    -------
    list of float
        Roots in ascending order. Roots closer than twice the bisection
        tolerance to the previous one are reported once.

    Examples
    --------
    >>> [round(r, 2) for r in find_roots(lambda t: t * t - 4.0, -5.0, 5.0)]
    [-2.0, 2.0]
    """
    n = config.root_segments if segments is None else int(segments)
    if n < 1:
        raise ValueError(f"segments must be >= 1, got {segments!r}")
    if not lo < hi:
        raise ValueError(f"find_roots expects lo < hi, got ({lo}, {hi})")

    grid = np.linspace(lo, hi, n + 1)
    values = [evaluate_slice(slice_fn, float(t)) for t in grid]

    merge_distance = 2.0 * config.bisection_tolerance
    roots: list[float] = []
    for i in range(n):
        fa, fb = values[i], values[i + 1]
        if fa is None or fb is None:
            continue
        if fa * fb > 0.0:
            continue
        root = bisect_root(
            slice_fn, float(grid[i]), float(grid[i + 1]), fa, fb, config=config
        )
        if root is None:
            continue
        if roots and abs(root - roots[-1]) < merge_distance:
            continue
        roots.append(root)

    if logger.isEnabledFor(logging.DEBUG):
        skipped = sum(v is None for v in values)
        logger.debug(
            "find_roots: [%g, %g] segments=%d roots=%d undefined_samples=%d",
            lo,
            hi,
            n,
            len(roots),
            skipped,
        )
    return roots
