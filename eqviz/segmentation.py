"""Group scattered solution points into ordered, drawable curves."""

from __future__ import annotations

from typing import Iterable

from .config import DEFAULT_CONFIG, TraceConfig
from .types import Curve, CurveKind, SolutionPoint

__all__ = ["order_single_branch", "segment_branches"]


def segment_branches(
    points: Iterable[SolutionPoint], config: TraceConfig = DEFAULT_CONFIG
) -> list[Curve]:
    """Split sweep-x points into an upper and a lower curve.

    Points are grouped by ``x`` rounded to ``config.segmentation_decimals``.
    The largest ``y`` of each group goes to the upper curve, the smallest to
    the lower one; single-valued groups feed both. The upper curve runs in
    ascending ``x`` and the lower one in descending ``x``, so a circle comes
    out as two arcs sharing their end points.

    When no group holds more than one value the lower curve would repeat the
    upper one, and only the upper curve is returned.

    Examples
    --------
    >>> pts = [SolutionPoint(0.0, 1.0), SolutionPoint(0.0, -1.0), SolutionPoint(1.0, 0.0)]
    >>> [[(p.x, p.y) for p in c] for c in segment_branches(pts)]
    [[(0.0, 1.0), (1.0, 0.0)], [(1.0, 0.0), (0.0, -1.0)]]
    """
    groups: dict[float, list[SolutionPoint]] = {}
    for point in sorted(points, key=lambda p: (p.x, p.y)):
        groups.setdefault(round(point.x, config.segmentation_decimals), []).append(point)

    if not groups:
        return []

    upper: list[SolutionPoint] = []
    lower: list[SolutionPoint] = []
    branched = False
    for key in sorted(groups):
        members = groups[key]
        top = max(members, key=lambda p: p.y)
        bottom = min(members, key=lambda p: p.y)
        upper.append(top)
        lower.append(bottom)
        if len(members) >= 2:
            branched = True

    curves = [Curve(tuple(upper), CurveKind.BRANCH)]
    if branched:
        curves.append(Curve(tuple(reversed(lower)), CurveKind.BRANCH))
    return curves


def order_single_branch(
    points: Iterable[SolutionPoint], config: TraceConfig = DEFAULT_CONFIG
) -> list[Curve]:
    """Order sweep-y points into a single curve by ascending ``y``.

    A point whose ``y`` is within ``config.duplicate_tolerance`` of the last
    kept point is dropped. Distinct branches sharing a ``y`` range are not
    separated in this mode.

    Sweep-y samples come from a Newton solve started at ``x = 0``, so a
    relation whose slice is flat or undefined there (``y = x^2``,
    ``log(x) = y``) yields no points and no curve.
    """
    kept: list[SolutionPoint] = []
    for point in sorted(points, key=lambda p: (p.y, p.x)):
        if kept and abs(point.y - kept[-1].y) < config.duplicate_tolerance:
            continue
        kept.append(point)
    if not kept:
        return []
    return [Curve(tuple(kept), CurveKind.CONTINUATION)]
