from __future__ import annotations

import logging
import math

import pytest

from eqviz.config import DEFAULT_CONFIG
from eqviz.roots import bisect_root, evaluate_slice, find_roots


def test_find_roots_of_quadratic_slice() -> None:
    roots = find_roots(lambda t: t * t - 4.0, -5.0, 5.0)
    assert len(roots) == 2
    assert roots[0] == pytest.approx(-2.0, abs=2e-3)
    assert roots[1] == pytest.approx(2.0, abs=2e-3)


def test_find_roots_residuals_are_within_tolerance() -> None:
    roots = find_roots(math.sin, -10.0, 10.0)
    assert len(roots) == 7
    for r in roots:
        assert abs(math.sin(r)) < 2e-3


def test_find_roots_misses_double_roots() -> None:
    # No sign change around a tangency, so it is not reported.
    assert find_roots(lambda t: (t - 1.3) ** 2, -5.0, 5.0) == []


def test_find_roots_skips_undefined_samples() -> None:
    def slice_fn(t: float) -> float:
        if t < 0:
            return math.nan
        return t - 3.3

    roots = find_roots(slice_fn, -10.0, 10.0)
    assert roots == [pytest.approx(3.3, abs=2e-3)]


def test_find_roots_on_always_undefined_slice_is_empty() -> None:
    assert find_roots(lambda t: math.nan, -1.0, 1.0) == []
    assert find_roots(lambda t: 1.0 / 0.0, -1.0, 1.0) == []


def test_find_roots_reports_exact_grid_zero_once() -> None:
    # 0 is a grid point of linspace(-5, 5, 51) and shared by two sub-intervals.
    roots = find_roots(lambda t: t, -5.0, 5.0)
    assert roots == [0.0]


def test_find_roots_argument_validation() -> None:
    with pytest.raises(ValueError):
        find_roots(lambda t: t, 1.0, 1.0)
    with pytest.raises(ValueError):
        find_roots(lambda t: t, -1.0, 1.0, segments=0)


def test_find_roots_custom_segment_count() -> None:
    # With a single segment only the outer sign change can be seen.
    assert find_roots(lambda t: t * t - 4.0, -5.0, 5.0, segments=1) == []


def test_bisect_root_returns_exact_endpoints() -> None:
    assert bisect_root(lambda t: t - 1.0, 1.0, 2.0, 0.0, 1.0) == 1.0
    assert bisect_root(lambda t: t - 2.0, 1.0, 2.0, -1.0, 0.0) == 2.0


def test_bisect_root_gives_up_on_undefined_midpoint() -> None:
    def slice_fn(t: float) -> float:
        if 0.4 < t < 0.6:
            raise ZeroDivisionError
        return t - 0.5

    assert bisect_root(slice_fn, 0.0, 1.0, -0.5, 0.5, config=DEFAULT_CONFIG) is None


def test_evaluate_slice_maps_failures_to_none() -> None:
    assert evaluate_slice(lambda t: t + 1, 1.0) == 2.0
    assert evaluate_slice(lambda t: math.log(t), -1.0) is None
    assert evaluate_slice(lambda t: complex(t, 1.0), 1.0) is None


def test_find_roots_debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="eqviz.roots"):
        find_roots(lambda t: t - 0.25, -1.0, 1.0)
    assert any("find_roots:" in rec.getMessage() for rec in caplog.records)
