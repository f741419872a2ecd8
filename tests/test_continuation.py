from __future__ import annotations

import logging
import math

import pytest

from eqviz.compiler import compile_equation
from eqviz.config import DEFAULT_CONFIG, TraceConfig
from eqviz.continuation import newton_solve, sample_count_for, trace_points
from eqviz.scalar_function import CountingFunction
from eqviz.types import DEFAULT_DOMAIN, Domain, Resolution


def test_sample_count_is_capped() -> None:
    assert sample_count_for(Resolution(200, 100), False) == 600
    assert sample_count_for(Resolution(200, 100), True) == 300
    assert sample_count_for(Resolution(900, 650), False) == 1000
    small = TraceConfig(max_samples=2, samples_per_pixel=1)
    assert sample_count_for(Resolution(1, 1), False, small) == 2


def test_newton_solves_linear_slice_in_one_step() -> None:
    root = newton_solve(lambda t: 2.0 * t - 3.0, 0.0, -10.0, 10.0)
    assert root == pytest.approx(1.5, abs=1e-6)


def test_newton_uses_analytic_derivative_when_given() -> None:
    calls = {"slice": 0}

    def slice_fn(t: float) -> float:
        calls["slice"] += 1
        return t * t - 2.0

    root = newton_solve(slice_fn, 1.0, 0.0, 5.0, derivative=lambda t: 2.0 * t)
    assert root == pytest.approx(math.sqrt(2.0), abs=1e-6)
    # one evaluation per iteration plus the acceptance check, no finite differences
    assert calls["slice"] <= DEFAULT_CONFIG.newton_max_iterations + 1


def test_newton_rejects_flat_derivative() -> None:
    # Starting at the vertex of t^2 + 1 the slope is zero.
    assert newton_solve(lambda t: t * t + 1.0, 0.0, -10.0, 10.0, derivative=lambda t: 2.0 * t) is None


def test_newton_rejects_roots_outside_interval() -> None:
    assert newton_solve(lambda t: t - 20.0, 0.0, -10.0, 10.0) is None


def test_newton_rejects_non_converged_results() -> None:
    # No real root: iterates wander without reaching the acceptance residual.
    assert newton_solve(lambda t: t * t + 1.0, 0.3, -10.0, 10.0) is None


def test_newton_returns_none_on_undefined_start() -> None:
    assert newton_solve(lambda t: math.log(t), 0.0, -10.0, 10.0) is None


def test_sweep_y_solves_sideways_sine() -> None:
    f = lambda x, y: x - math.sin(y)  # noqa: E731
    points = trace_points(f, DEFAULT_DOMAIN, True, 300)
    assert len(points) == 300
    for p in points:
        assert abs(p.x - math.sin(p.y)) < 1e-4


def test_sweep_y_uses_compiled_partial_derivative() -> None:
    f = CountingFunction(compile_equation("x = y^2 / 4"))
    points = trace_points(f, DEFAULT_DOMAIN, True, 50)
    assert points
    for p in points:
        assert abs(p.x - p.y * p.y / 4.0) < 0.01
        assert DEFAULT_DOMAIN.contains(p.x, p.y)


def test_sweep_x_finds_both_circle_roots() -> None:
    f = lambda x, y: x * x + y * y - 25.0  # noqa: E731
    points = trace_points(f, DEFAULT_DOMAIN, False, 200)
    assert points
    for p in points:
        assert abs(math.hypot(p.x, p.y) - 5.0) < 0.01
    near_zero = [p for p in points if abs(p.x) < 0.2]
    assert {round(p.y) for p in near_zero} == {-5, 5}


def test_points_stay_inside_domain() -> None:
    domain = Domain(-2.0, 2.0, -2.0, 2.0)
    points = trace_points(lambda x, y: x + y - 5.0, domain, False, 100)
    assert points == []


def test_trace_points_rejects_too_few_samples() -> None:
    with pytest.raises(ValueError):
        trace_points(lambda x, y: x - y, DEFAULT_DOMAIN, False, 1)


def test_always_undefined_function_yields_nothing() -> None:
    f = lambda x, y: math.nan  # noqa: E731
    assert trace_points(f, DEFAULT_DOMAIN, False, 20) == []
    assert trace_points(f, DEFAULT_DOMAIN, True, 20) == []


def test_trace_points_logs_timing(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="eqviz.continuation"):
        trace_points(lambda x, y: x - y, DEFAULT_DOMAIN, True, 10)
    assert any("trace_points:" in rec.getMessage() for rec in caplog.records)
