from __future__ import annotations

from eqviz.config import TraceConfig
from eqviz.segmentation import order_single_branch, segment_branches
from eqviz.types import CurveKind, SolutionPoint


def _xy(curve) -> list[tuple[float, float]]:
    return [(p.x, p.y) for p in curve]


def test_circle_like_points_split_into_upper_and_lower() -> None:
    pts = [
        SolutionPoint(-1.0, 0.0),
        SolutionPoint(0.0, 1.0),
        SolutionPoint(0.0, -1.0),
        SolutionPoint(1.0, 0.0),
    ]
    upper, lower = segment_branches(pts)
    assert _xy(upper) == [(-1.0, 0.0), (0.0, 1.0), (1.0, 0.0)]
    assert _xy(lower) == [(1.0, 0.0), (0.0, -1.0), (-1.0, 0.0)]
    assert upper.kind is CurveKind.BRANCH
    assert lower.kind is CurveKind.BRANCH


def test_single_valued_points_give_one_curve() -> None:
    pts = [SolutionPoint(float(x), 5.0 - x) for x in range(5, -1, -1)]
    curves = segment_branches(pts)
    assert len(curves) == 1
    assert [p.x for p in curves[0]] == [0.0, 1.0, 2.0, 3.0, 4.0, 5.0]


def test_middle_roots_are_dropped() -> None:
    pts = [SolutionPoint(0.0, y) for y in (-2.0, 0.5, 3.0)]
    upper, lower = segment_branches(pts)
    assert _xy(upper) == [(0.0, 3.0)]
    assert _xy(lower) == [(0.0, -2.0)]


def test_grouping_uses_rounded_x() -> None:
    pts = [SolutionPoint(1.0001, 2.0), SolutionPoint(0.9999, -2.0)]
    upper, lower = segment_branches(pts)
    assert [p.y for p in upper] == [2.0]
    assert [p.y for p in lower] == [-2.0]

    coarse = TraceConfig(segmentation_decimals=5)
    assert len(segment_branches(pts, coarse)) == 1


def test_empty_input() -> None:
    assert segment_branches([]) == []
    assert order_single_branch([]) == []


def test_order_single_branch_sorts_by_y_and_drops_duplicates() -> None:
    pts = [
        SolutionPoint(0.5, 1.0),
        SolutionPoint(-0.2, -3.0),
        SolutionPoint(0.6, 1.0005),
        SolutionPoint(0.0, 0.0),
    ]
    (curve,) = order_single_branch(pts)
    assert curve.kind is CurveKind.CONTINUATION
    assert [p.y for p in curve] == [-3.0, 0.0, 1.0]
