"""The two-argument evaluation capability consumed by the tracer.

The tracer never inspects how a function was built. Anything callable as
``f(x, y)`` works; compiled expressions from :mod:`eqviz.compiler` also offer
an analytic ``partial(var)``. :func:`evaluate` is the single place where raw
results are validated, so the rest of the tracer only ever sees finite floats
or :class:`~eqviz.errors.EvaluationError`.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

from .errors import EvaluationError

__all__ = [
    "CountingFunction",
    "DifferentiableFunction",
    "ScalarFunction",
    "evaluate",
    "partial_of",
]

_ARITHMETIC_FAILURES = (ZeroDivisionError, OverflowError, ValueError, TypeError)


@runtime_checkable
class ScalarFunction(Protocol):
    """Black-box ``f(x, y) -> float`` raising ``EvaluationError`` when undefined."""

    def __call__(self, x: float, y: float) -> float: ...


@runtime_checkable
class DifferentiableFunction(ScalarFunction, Protocol):
    """Scalar function that can also hand out its partial derivatives."""

    def partial(self, var: str) -> ScalarFunction: ...


def evaluate(f: Callable[[float, float], object], x: float, y: float) -> float:
    """Evaluate ``f`` at ``(x, y)`` and return a finite float.

    Raises
    ------
    EvaluationError
        If ``f`` raises an arithmetic error or returns a non-real or
        non-finite value.
    """
    try:
        raw = f(x, y)
        if np.iscomplexobj(raw):
            imag = complex(raw).imag  # type: ignore[arg-type]
            if imag != 0:
                raise EvaluationError(f"f({x!r}, {y!r}) is not real ({raw!r})")
            raw = complex(raw).real  # type: ignore[arg-type]
        value = float(raw)  # type: ignore[arg-type]
    except EvaluationError:
        raise
    except _ARITHMETIC_FAILURES as exc:
        raise EvaluationError(f"f({x!r}, {y!r}) failed: {exc}") from exc
    if not math.isfinite(value):
        raise EvaluationError(f"f({x!r}, {y!r}) is not finite ({value!r})")
    return value


def partial_of(f: Callable[..., object], var: str) -> Optional[ScalarFunction]:
    """Return the analytic partial derivative of ``f`` if it offers one."""
    provider = getattr(f, "partial", None)
    if not callable(provider):
        return None
    return provider(var)


class CountingFunction:
    """Wrap a scalar function and count how often it is called.

    A fresh wrapper is created for every trace, so counts never leak between
    equations. Wrappers handed out by :meth:`partial` share the parent's
    counter.
    """

    __slots__ = ("_fn", "_counter")

    def __init__(
        self,
        fn: Callable[[float, float], object],
        *,
        _counter: Optional[list[int]] = None,
    ) -> None:
        self._fn = fn
        self._counter = _counter if _counter is not None else [0]

    @property
    def calls(self) -> int:
        return self._counter[0]

    def __call__(self, x: float, y: float) -> object:
        self._counter[0] += 1
        return self._fn(x, y)

    def partial(self, var: str) -> Optional["CountingFunction"]:
        derivative = partial_of(self._fn, var)
        if derivative is None:
            return None
        return CountingFunction(derivative, _counter=self._counter)

    def __repr__(self) -> str:
        return f"CountingFunction({self._fn!r}, calls={self.calls})"
