"""Tunable constants of the curve tracer.

Purpose
-------
Every tolerance, iteration cap, sample cap and heuristic weight used while
tracing lives on one immutable :class:`TraceConfig`. Operations receive the
config explicitly, so two traces with different settings can run side by side
and tests can pin exact behavior.

Examples
--------
>>> from dataclasses import replace
>>> from eqviz.config import DEFAULT_CONFIG
>>> strict = replace(DEFAULT_CONFIG, prefer_x_threshold=0.7)
>>> strict.prefer_x_threshold
0.7

Notes
-----
The classifier weights and threshold are empirically tuned. They decide which
variable is solved for, and a different choice only changes curve quality,
never correctness of the reported points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .types import CurveKind

__all__ = ["DEFAULT_CONFIG", "TraceConfig"]


def _default_clip_margins() -> Mapping[CurveKind, float]:
    return MappingProxyType(
        {
            CurveKind.EXPLICIT: 10.0,
            CurveKind.LINE: 30.0,
            CurveKind.BRANCH: 100.0,
            CurveKind.CONTINUATION: 200.0,
        }
    )


_GRADIENT_OFFSETS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0),
    (1.0, 1.0),
    (-1.0, 1.0),
    (1.0, -1.0),
    (-1.0, -1.0),
    (0.5, 0.5),
    (-0.5, 0.5),
    (0.5, -0.5),
    (-0.5, -0.5),
)


@dataclass(frozen=True)
class TraceConfig:
    """Immutable settings for one trace.

    Parameters
    ----------
    involvement_tolerance : float
        Output difference above which a variable counts as involved.
    involvement_probes : tuple of (x, y)
        Absolute probe points; each is compared with the point shifted by one
        unit along the probed variable.
    involvement_domain_probes : tuple of (u, v)
        Extra probe points given as fractions of the domain.
    gradient_step : float
        Central-difference step for the classifier's partial derivatives.
    gradient_offsets : tuple of (dx, dy)
        Offsets from the domain center where gradients are sampled.
    gradient_epsilon : float
        Guard added to the denominator of the gradient ratio.
    dominance_factor : float
        A sample counts as dominated by one variable when its gradient
        magnitude is at least this many times the other's.
    spread_samples : int
        Samples per axis for the spread (variance) signal.
    score_weights : tuple of three floats
        Weights of the ratio, tally and spread signals.
    prefer_x_threshold : float
        Score above which ``x`` is solved for while sweeping ``y``.
    root_segments : int
        Sub-intervals per root-isolation slice.
    bisection_max_iterations, bisection_tolerance
        Bisection limits (interval width and residual).
    newton_max_iterations, newton_tolerance, newton_derivative_step,
    newton_min_derivative, newton_escape_margin
        Newton iteration limits.
    acceptance_tolerance : float
        Residual a Newton result must reach on a fresh evaluation.
    max_samples, samples_per_pixel : int
        Sweep sample count is ``min(max_samples, pixels * samples_per_pixel)``.
        ``max_samples`` must be at least 2.
    single_variable_oversampling, single_variable_tolerance,
    single_variable_decimals
        Scan density, residual tolerance and rounding for single-variable
        equations.
    segmentation_decimals : int
        Rounding used to group sweep-x samples by ``x``.
    duplicate_tolerance : float
        Minimum ``y`` distance between kept sweep-y samples.
    explicit_oversampling : int
        Samples per pixel for explicit ``y = g(x)`` curves.
    clip_margins : mapping of CurveKind to float
        Canvas margin, in pixels, per curve kind.
    """

    involvement_tolerance: float = 1e-4
    involvement_probes: tuple[tuple[float, float], ...] = ((1.0, 1.0),)
    involvement_domain_probes: tuple[tuple[float, float], ...] = (
        (0.3183, 0.5772),
        (0.7071, 0.2361),
    )
    gradient_step: float = 1e-3
    gradient_offsets: tuple[tuple[float, float], ...] = _GRADIENT_OFFSETS
    gradient_epsilon: float = 1e-9
    dominance_factor: float = 1.5
    spread_samples: int = 21
    score_weights: tuple[float, float, float] = (0.4, 0.3, 0.3)
    prefer_x_threshold: float = 0.55
    root_segments: int = 50
    bisection_max_iterations: int = 40
    bisection_tolerance: float = 1e-3
    newton_max_iterations: int = 20
    newton_tolerance: float = 1e-6
    newton_derivative_step: float = 1e-8
    newton_min_derivative: float = 1e-12
    newton_escape_margin: float = 1.0
    acceptance_tolerance: float = 0.01
    max_samples: int = 1000
    samples_per_pixel: int = 3
    single_variable_oversampling: int = 4
    single_variable_tolerance: float = 0.02
    single_variable_decimals: int = 2
    segmentation_decimals: int = 3
    duplicate_tolerance: float = 1e-3
    explicit_oversampling: int = 2
    clip_margins: Mapping[CurveKind, float] = field(default_factory=_default_clip_margins)

    def __post_init__(self) -> None:
        positive = (
            "involvement_tolerance",
            "gradient_step",
            "gradient_epsilon",
            "bisection_tolerance",
            "newton_tolerance",
            "newton_derivative_step",
            "newton_min_derivative",
            "acceptance_tolerance",
            "single_variable_tolerance",
            "duplicate_tolerance",
        )
        for name in positive:
            if not getattr(self, name) > 0:
                raise ValueError(f"TraceConfig.{name} must be > 0, got {getattr(self, name)!r}")

        counts = (
            "spread_samples",
            "root_segments",
            "bisection_max_iterations",
            "newton_max_iterations",
            "max_samples",
            "samples_per_pixel",
            "single_variable_oversampling",
            "explicit_oversampling",
        )
        for name in counts:
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"TraceConfig.{name} must be a positive int, got {value!r}")

        if self.spread_samples < 2:
            raise ValueError("TraceConfig.spread_samples must be >= 2")
        if self.max_samples < 2:
            raise ValueError("TraceConfig.max_samples must be >= 2")
        if self.dominance_factor < 1:
            raise ValueError("TraceConfig.dominance_factor must be >= 1")
        if self.newton_escape_margin < 0:
            raise ValueError("TraceConfig.newton_escape_margin must be >= 0")
        if not self.gradient_offsets:
            raise ValueError("TraceConfig.gradient_offsets must not be empty")
        if len(self.score_weights) != 3 or any(w < 0 for w in self.score_weights):
            raise ValueError("TraceConfig.score_weights must be three non-negative floats")
        if sum(self.score_weights) <= 0:
            raise ValueError("TraceConfig.score_weights must not all be zero")

        missing = [kind.value for kind in CurveKind if kind not in self.clip_margins]
        if missing:
            raise ValueError(f"TraceConfig.clip_margins is missing curve kinds: {', '.join(missing)}")
        object.__setattr__(self, "clip_margins", MappingProxyType(dict(self.clip_margins)))

    def margin_for(self, kind: CurveKind) -> float:
        """Return the clip margin in pixels for curves of ``kind``."""
        return float(self.clip_margins[kind])


DEFAULT_CONFIG = TraceConfig()
