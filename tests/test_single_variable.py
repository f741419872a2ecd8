from __future__ import annotations

import math

import pytest

from eqviz.single_variable import scan_axis, solve_single_variable
from eqviz.types import DEFAULT_DOMAIN, CurveKind, DependencyClass, Domain, Resolution

RES = Resolution(200, 200)


def test_vertical_line() -> None:
    curves, markers = solve_single_variable(
        lambda x, y: x - 5.0, DEFAULT_DOMAIN, RES, DependencyClass.X_ONLY
    )
    assert len(curves) == 1
    (line,) = curves
    assert line.kind is CurveKind.LINE
    assert [(p.x, p.y) for p in line] == [(5.0, -10.0), (5.0, 10.0)]
    assert [(m.x, m.y) for m in markers] == [(5.0, 0.0)]


def test_two_horizontal_lines() -> None:
    curves, markers = solve_single_variable(
        lambda x, y: y * y - 9.0, DEFAULT_DOMAIN, RES, DependencyClass.Y_ONLY
    )
    ys = sorted(c.points[0].y for c in curves)
    assert len(ys) == 2
    assert ys[0] == pytest.approx(-3.0, abs=0.02)
    assert ys[1] == pytest.approx(3.0, abs=0.02)
    for c in curves:
        assert c.points[0].x == DEFAULT_DOMAIN.x_min
        assert c.points[1].x == DEFAULT_DOMAIN.x_max
        assert c.points[0].y == c.points[1].y
    assert sorted(m.y for m in markers) == ys
    assert all(m.x == 0.0 for m in markers)


def test_single_variable_uses_midline_of_other_axis() -> None:
    domain = Domain(0.0, 4.0, 10.0, 20.0)
    seen: list[float] = []

    def f(x: float, y: float) -> float:
        seen.append(y)
        return x - 1.0

    solve_single_variable(f, domain, Resolution(50, 50), DependencyClass.X_ONLY)
    assert set(seen) == {15.0}


def test_no_solution_in_domain() -> None:
    curves, markers = solve_single_variable(
        lambda x, y: x - 50.0, DEFAULT_DOMAIN, RES, DependencyClass.X_ONLY
    )
    assert curves == []
    assert markers == []


def test_constant_and_bivariate_produce_nothing() -> None:
    for dep in (DependencyClass.CONSTANT, DependencyClass.BIVARIATE):
        assert solve_single_variable(lambda x, y: 0.0, DEFAULT_DOMAIN, RES, dep) == ([], [])


def test_scan_axis_clusters_nearby_candidates() -> None:
    # Flat near the root, so many grid samples fall under the residual tolerance.
    roots = scan_axis(lambda t: (t - 2.0) ** 3, -10.0, 10.0, 800)
    assert roots == [2.0]


def test_scan_axis_finds_sign_changes_of_steep_functions() -> None:
    # Residual tolerance alone would miss this root: |50 t| < 0.02 is a tiny window.
    roots = scan_axis(lambda t: 50.0 * (t - 1.234), -10.0, 10.0, 100)
    assert roots == [1.23]


def test_scan_axis_ignores_undefined_samples() -> None:
    roots = scan_axis(lambda t: math.log(t) if t > 0 else math.nan, -10.0, 10.0, 800)
    assert roots == [1.0]
