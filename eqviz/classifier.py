"""Dependency classification of an opaque scalar function.

Purpose
-------
Decide, from samples alone, whether ``f(x, y)`` is constant, depends on one
variable only, or is a genuine relation between both, and in the last case
which variable is better treated as the dependent one.

Concepts and structure
----------------------
Involvement is detected by comparing outputs at probe points that differ in
a single coordinate. For bivariate functions three signals, each mapped to
``[0, 1]`` with ``0.5`` meaning "no preference", are blended into one score:

- ratio: mean ``|df/dx|`` against mean ``|df/dy|`` (central differences),
- tally: how many sample points are clearly dominated by either partial,
- spread: how much ``f`` varies along ``x`` versus along ``y`` through the
  domain center.

A score above ``config.prefer_x_threshold`` means ``x`` should be solved for
while ``y`` is swept.

Important gotchas
-----------------
This is a heuristic. True dependency classification is undecidable from
samples; strongly anisotropic relations may get the less natural
parametrization. The result is deterministic for a given function, domain and
config, which is the only guarantee.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np

from .config import DEFAULT_CONFIG, TraceConfig
from .errors import ClassificationFailure, EvaluationError
from .scalar_function import evaluate
from .types import DependencyClass, Domain

__all__ = [
    "Classification",
    "GradientSample",
    "classify",
    "detect_dependency",
    "preference_score",
    "sample_gradients",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

Function2D = Callable[[float, float], object]


@dataclass(frozen=True)
class Classification:
    """Outcome of :func:`classify`.

    Parameters
    ----------
    dependency : DependencyClass
        Which variables ``f`` involves.
    prefer_solving_for_x : bool
        Only meaningful for ``BIVARIATE``: trace by sweeping ``y`` and solving
        for ``x``.
    score : float or None
        Blended heuristic score, ``None`` unless bivariate.
    """

    dependency: DependencyClass
    prefer_solving_for_x: bool = False
    score: Optional[float] = None


@dataclass(frozen=True)
class GradientSample:
    """Finite central-difference partials at one point."""

    x: float
    y: float
    dfdx: float
    dfdy: float


def _probe_points(domain: Domain, config: TraceConfig) -> list[tuple[float, float]]:
    points = [(float(px), float(py)) for px, py in config.involvement_probes]
    for u, v in config.involvement_domain_probes:
        points.append((domain.x_min + u * domain.width, domain.y_min + v * domain.height))
    return points


def _involves(
    f: Function2D,
    pairs: Iterable[tuple[tuple[float, float], tuple[float, float]]],
    tolerance: float,
) -> bool:
    evaluated = False
    for (xa, ya), (xb, yb) in pairs:
        try:
            fa = evaluate(f, xa, ya)
            fb = evaluate(f, xb, yb)
        except EvaluationError:
            continue
        evaluated = True
        if abs(fa - fb) > tolerance:
            return True
    # A variable that could never be probed is assumed to matter.
    return not evaluated


def detect_dependency(
    f: Function2D, domain: Domain, config: TraceConfig = DEFAULT_CONFIG
) -> DependencyClass:
    """Classify ``f`` as constant, x-only, y-only or bivariate.

    Each probe point ``(px, py)`` is compared with ``(px + 1, py)`` for ``x``
    and ``(px, py + 1)`` for ``y``; the first probe is ``(1, 1)``.
    """
    points = _probe_points(domain, config)
    tol = config.involvement_tolerance
    uses_x = _involves(f, (((px, py), (px + 1.0, py)) for px, py in points), tol)
    uses_y = _involves(f, (((px, py), (px, py + 1.0)) for px, py in points), tol)

    if uses_x and uses_y:
        return DependencyClass.BIVARIATE
    if uses_x:
        return DependencyClass.X_ONLY
    if uses_y:
        return DependencyClass.Y_ONLY
    return DependencyClass.CONSTANT


def sample_gradients(
    f: Function2D, domain: Domain, config: TraceConfig = DEFAULT_CONFIG
) -> list[GradientSample]:
    """Central-difference partials at the configured offsets from the domain center.

    Raises
    ------
    ClassificationFailure
        If no sample point yields finite partials.
    """
    cx, cy = domain.center
    h = config.gradient_step
    samples: list[GradientSample] = []
    for dx, dy in config.gradient_offsets:
        x, y = cx + dx, cy + dy
        try:
            dfdx = (evaluate(f, x + h, y) - evaluate(f, x - h, y)) / (2.0 * h)
            dfdy = (evaluate(f, x, y + h) - evaluate(f, x, y - h)) / (2.0 * h)
        except EvaluationError:
            continue
        if np.isfinite(dfdx) and np.isfinite(dfdy):
            samples.append(GradientSample(x, y, float(dfdx), float(dfdy)))
    if not samples:
        raise ClassificationFailure(
            f"No finite gradient among {len(config.gradient_offsets)} samples around {domain.center}"
        )
    return samples


def _axis_spread(values: Iterable[Optional[float]]) -> Optional[float]:
    finite = [v for v in values if v is not None]
    if len(finite) < 2:
        return None
    return float(np.std(np.asarray(finite, dtype=float)))


def _try_evaluate(f: Function2D, x: float, y: float) -> Optional[float]:
    try:
        return evaluate(f, x, y)
    except EvaluationError:
        return None


def _spread_signal(f: Function2D, domain: Domain, config: TraceConfig) -> float:
    cx, cy = domain.center
    xs = np.linspace(domain.x_min, domain.x_max, config.spread_samples)
    ys = np.linspace(domain.y_min, domain.y_max, config.spread_samples)
    spread_x = _axis_spread(_try_evaluate(f, float(x), cy) for x in xs)
    spread_y = _axis_spread(_try_evaluate(f, cx, float(y)) for y in ys)
    if spread_x is None or spread_y is None or spread_x + spread_y == 0.0:
        return 0.5
    return spread_x / (spread_x + spread_y)


def preference_score(
    samples: list[GradientSample],
    spread_signal: float,
    config: TraceConfig = DEFAULT_CONFIG,
) -> float:
    """Blend the ratio, tally and spread signals into one score in ``[0, 1]``."""
    gx = np.abs(np.array([s.dfdx for s in samples], dtype=float))
    gy = np.abs(np.array([s.dfdy for s in samples], dtype=float))

    ratio = float(gx.mean() / (gy.mean() + config.gradient_epsilon))
    ratio_signal = ratio / (1.0 + ratio)

    factor = config.dominance_factor
    x_dominant = int(np.count_nonzero(gx >= factor * gy))
    y_dominant = int(np.count_nonzero(gy >= factor * gx))
    # Points where both partials vanish satisfy both tests and cancel out.
    tally_signal = 0.5 + 0.5 * (x_dominant - y_dominant) / len(samples)

    w_ratio, w_tally, w_spread = config.score_weights
    total = w_ratio + w_tally + w_spread
    return (w_ratio * ratio_signal + w_tally * tally_signal + w_spread * spread_signal) / total


def classify(
    f: Function2D, domain: Domain, config: TraceConfig = DEFAULT_CONFIG
) -> Classification:
    """Classify ``f`` over ``domain`` and pick a sweep direction.

    Parameters
    ----------
    f : callable
        Scalar function ``f(x, y)``.
    domain : Domain
        Plotting rectangle.
    config : TraceConfig, optional
        Tolerances, weights and threshold.

    Returns
    -------
    Classification
        ``prefer_solving_for_x`` is ``False`` (sweep ``x``) whenever gradients
        cannot be estimated anywhere.

    Examples
    --------
    >>> from eqviz.types import DEFAULT_DOMAIN
    >>> classify(lambda x, y: x - 5, DEFAULT_DOMAIN).dependency
    <DependencyClass.X_ONLY: 'x_only'>
    """
    dependency = detect_dependency(f, domain, config)
    if dependency is not DependencyClass.BIVARIATE:
        logger.debug("classify: %s", dependency.value)
        return Classification(dependency)

    try:
        samples = sample_gradients(f, domain, config)
    except ClassificationFailure as exc:
        logger.info("classify: %s; falling back to sweeping x", exc)
        return Classification(dependency, prefer_solving_for_x=False)

    score = preference_score(samples, _spread_signal(f, domain, config), config)
    prefer_x = score > config.prefer_x_threshold
    logger.debug(
        "classify: bivariate score=%.4f threshold=%.4f prefer_solving_for_x=%s samples=%d",
        score,
        config.prefer_x_threshold,
        prefer_x,
        len(samples),
    )
    return Classification(dependency, prefer_solving_for_x=prefer_x, score=score)
