"""Property-based checks of the tracer invariants.

Generated lines, circles and ranges exercise the guarantees the rest of the
suite checks on hand-picked examples: reported points satisfy the equation,
stay inside the domain, and tracing is deterministic.
"""

from __future__ import annotations

import math

import pytest

from eqviz.input_convert import InputConvert
from eqviz.roots import find_roots
from eqviz.tracer import trace_equation
from eqviz.types import DEFAULT_DOMAIN, Domain, Resolution

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:  # pragma: no cover - environment-specific fallback
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)


RES = Resolution(40, 40)
COEFFS = st.floats(min_value=-5.0, max_value=5.0, allow_nan=False, allow_infinity=False)
FINITE_FLOATS = st.floats(allow_nan=False, allow_infinity=False, width=64)


@settings(max_examples=25, deadline=None)
@given(a=COEFFS, b=COEFFS, c=COEFFS)
def test_traced_line_points_satisfy_equation(a: float, b: float, c: float) -> None:
    f = lambda x, y: a * x + b * y - c  # noqa: E731
    result = trace_equation(f, DEFAULT_DOMAIN, RES)
    for p in result.points():
        assert DEFAULT_DOMAIN.contains(p.x, p.y)
        # Single-variable solutions are rounded to two decimals.
        assert abs(f(p.x, p.y)) < 0.02 + 0.005 * (abs(a) + abs(b))


@settings(max_examples=20, deadline=None)
@given(
    cx=st.floats(min_value=-4.0, max_value=4.0),
    cy=st.floats(min_value=-4.0, max_value=4.0),
    r=st.floats(min_value=1.0, max_value=5.0),
)
def test_traced_circle_points_lie_on_circle(cx: float, cy: float, r: float) -> None:
    f = lambda x, y: (x - cx) ** 2 + (y - cy) ** 2 - r * r  # noqa: E731
    result = trace_equation(f, DEFAULT_DOMAIN, RES)
    assert len(result.curves) <= 2
    for p in result.points():
        assert abs(math.hypot(p.x - cx, p.y - cy) - r) < 0.1


@settings(max_examples=15, deadline=None)
@given(a=COEFFS, c=COEFFS)
def test_tracing_twice_gives_identical_curves(a: float, c: float) -> None:
    f = lambda x, y: x * x * a + y - c  # noqa: E731
    assert trace_equation(f, DEFAULT_DOMAIN, RES).curves == trace_equation(f, DEFAULT_DOMAIN, RES).curves


@settings(max_examples=50, deadline=None)
@given(root=st.floats(min_value=-9.5, max_value=9.5))
def test_find_roots_locates_simple_root(root: float) -> None:
    roots = find_roots(lambda t: t - root, -10.0, 10.0)
    assert len(roots) == 1
    assert abs(roots[0] - root) < 2e-3


@given(lo=st.floats(min_value=-1e6, max_value=1e6), span=st.floats(min_value=1e-3, max_value=1e6))
def test_domain_accepts_any_non_empty_finite_range(lo: float, span: float) -> None:
    d = Domain(lo, lo + span, lo, lo + span)
    assert d.width > 0
    assert d.zoom_in().width < d.width < d.zoom_out().width


@given(value=FINITE_FLOATS)
def test_inputconvert_float_roundtrip_for_finite_reals(value: float) -> None:
    assert InputConvert(value, float) == value
    assert InputConvert(repr(value), float) == value
