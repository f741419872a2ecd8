"""End-to-end tracing of the reference equations."""

from __future__ import annotations

import logging
import math

import pytest

from eqviz.compiler import compile_equation
from eqviz.tracer import TraceStrategy, trace_equation, trace_explicit
from eqviz.types import DEFAULT_DOMAIN, CurveKind, DependencyClass, Resolution

RES = Resolution(200, 200)


def test_vertical_line_is_single_variable() -> None:
    result = trace_equation(lambda x, y: x - 5, DEFAULT_DOMAIN, RES)
    assert result.classification.dependency is DependencyClass.X_ONLY
    assert result.strategy is TraceStrategy.SINGLE_VARIABLE
    assert len(result.curves) == 1
    assert {p.x for p in result.curves[0]} == {5.0}
    assert [(m.x, m.y) for m in result.markers] == [(5.0, 0.0)]


def test_horizontal_line_pair() -> None:
    result = trace_equation(compile_equation("y^2 = 9"), DEFAULT_DOMAIN, RES)
    assert result.classification.dependency is DependencyClass.Y_ONLY
    ys = sorted(c.points[0].y for c in result.curves)
    assert ys == [pytest.approx(-3.0, abs=0.02), pytest.approx(3.0, abs=0.02)]
    assert all(c.kind is CurveKind.LINE for c in result.curves)


def test_diagonal_line_is_one_curve() -> None:
    result = trace_equation(lambda x, y: x + y - 5, DEFAULT_DOMAIN, RES)
    assert result.strategy is TraceStrategy.SWEEP_X_SOLVE_Y
    assert len(result.curves) == 1
    (curve,) = result.curves
    for p in curve:
        assert abs(p.x + p.y - 5.0) < 0.01
    xs = [p.x for p in curve]
    assert xs == sorted(xs)
    assert xs[0] < -4.9
    assert xs[-1] > 9.9


def test_circle_is_two_arcs() -> None:
    result = trace_equation(lambda x, y: x * x + y * y - 25, DEFAULT_DOMAIN, RES)
    assert result.strategy is TraceStrategy.SWEEP_X_SOLVE_Y
    assert len(result.curves) == 2
    upper, lower = result.curves
    err = max(abs(p.x * p.x + p.y * p.y - 25.0) for p in result.points())
    assert err < 0.1
    assert max(p.y for p in upper) > 4.9
    assert min(p.y for p in lower) < -4.9
    assert upper.points[0].x < upper.points[-1].x
    assert lower.points[0].x > lower.points[-1].x


def test_sideways_sine_solves_for_x() -> None:
    result = trace_equation(lambda x, y: x - math.sin(y), DEFAULT_DOMAIN, RES)
    assert result.classification.prefer_solving_for_x is True
    assert result.strategy is TraceStrategy.SWEEP_Y_SOLVE_X
    assert len(result.curves) == 1
    (curve,) = result.curves
    assert curve.kind is CurveKind.CONTINUATION
    assert len(curve) == 600
    for p in curve:
        assert abs(p.x - math.sin(p.y)) < 1e-4


def test_compiled_sideways_sine_matches() -> None:
    result = trace_equation(compile_equation("x = sin(y)"), DEFAULT_DOMAIN, RES)
    assert result.strategy is TraceStrategy.SWEEP_Y_SOLVE_X
    for p in result.points():
        assert abs(p.x - math.sin(p.y)) < 1e-4


def test_constant_equation_draws_nothing() -> None:
    result = trace_equation(lambda x, y: 1.0, DEFAULT_DOMAIN, RES)
    assert result.strategy is TraceStrategy.NONE
    assert result.is_empty


def test_always_undefined_function_is_empty_not_an_error() -> None:
    result = trace_equation(lambda x, y: math.nan, DEFAULT_DOMAIN, RES)
    assert result.is_empty
    assert result.classification.dependency is DependencyClass.BIVARIATE
    assert result.strategy is TraceStrategy.SWEEP_X_SOLVE_Y


def test_tracing_is_idempotent() -> None:
    f = compile_equation("x^2 + y^2 = 25")
    first = trace_equation(f, DEFAULT_DOMAIN, RES)
    second = trace_equation(f, DEFAULT_DOMAIN, RES)
    assert first.curves == second.curves
    assert first.evaluations == second.evaluations


def test_evaluations_are_counted_per_trace() -> None:
    result = trace_equation(lambda x, y: x - 5, DEFAULT_DOMAIN, RES)
    assert result.evaluations > 0


def test_explicit_graph_breaks_at_undefined_values() -> None:
    g = lambda x: 1.0 / x if abs(x) > 1.0 else math.nan  # noqa: E731
    result = trace_explicit(g, DEFAULT_DOMAIN, RES)
    assert result.strategy is TraceStrategy.EXPLICIT
    assert result.classification is None
    assert len(result.curves) == 2
    left, right = result.curves
    assert all(p.x < -1.0 for p in left)
    assert all(p.x > 1.0 for p in right)
    assert all(c.kind is CurveKind.EXPLICIT for c in result.curves)


def test_explicit_sample_count() -> None:
    result = trace_explicit(lambda x: x * x, DEFAULT_DOMAIN, Resolution(50, 50))
    (curve,) = result.curves
    assert len(curve) == 101
    assert curve.points[0].x == -10.0
    assert curve.points[-1].x == 10.0


def test_trace_logs_summary_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="eqviz.tracer"):
        trace_equation(lambda x, y: x - 1, DEFAULT_DOMAIN, Resolution(20, 20))
    assert any("trace_equation: strategy=single_variable" in rec.getMessage() for rec in caplog.records)


def test_solve_for_x_misses_curves_when_newton_start_is_degenerate() -> None:
    # Newton always starts at x = 0: a zero slope or an undefined value there
    # leaves every sweep sample without a root.
    parabola = trace_equation(compile_equation("y = x^2"), DEFAULT_DOMAIN, RES)
    assert parabola.classification.prefer_solving_for_x is True
    assert parabola.strategy is TraceStrategy.SWEEP_Y_SOLVE_X
    assert parabola.is_empty

    assert trace_equation(compile_equation("log(x) = y"), DEFAULT_DOMAIN, RES).is_empty
