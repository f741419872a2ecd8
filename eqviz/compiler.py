"""Parse equation text into scalar functions the tracer can evaluate.

Purpose
-------
Bridge between what a user types (``x^2 + y^2 = 25``, ``2x + 1``,
``sin(x)``) and the ``f(x, y)`` capability consumed by
:mod:`eqviz.tracer`.

Concepts and structure
----------------------
- :func:`compile_expression` parses one expression with SymPy (``^`` is a
  power, ``2x`` is ``2*x``, ``sin x`` is ``sin(x)``) and compiles it with
  :func:`eqviz.numpify.numpify_cached`.
- :func:`split_equation` validates that the text holds exactly one ``=`` and
  no relational operator, and returns both sides.
- :func:`compile_equation` builds the zero-seeking function
  ``(left) - (right)``.
- :func:`parse_input` routes free-form input: text with ``=`` is an implicit
  equation, a bare expression is the explicit graph ``y = expr``.

Examples
--------
>>> f = compile_equation("x^2 + y^2 = 25")
>>> f(3.0, 4.0)
0.0
>>> parse_input("sin(x)").kind
'explicit'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from .errors import EquationParseError
from .numpify import NumpifiedFunction, numpify_cached
from .scalar_function import evaluate

__all__ = [
    "ParsedInput",
    "SymbolicScalarFunction",
    "X",
    "Y",
    "compile_equation",
    "compile_expression",
    "parse_input",
    "split_equation",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

X, Y = sp.symbols("x y", real=True)

_TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)

_LOCAL_NAMES: dict[str, object] = {
    "x": X,
    "y": Y,
    "e": sp.E,
    "E": sp.E,
    "pi": sp.pi,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "Abs": sp.Abs,
    "sign": sp.sign,
    "floor": sp.floor,
    "ceil": sp.ceiling,
}

_RELATIONAL_CHARS = ("<", ">", "!")


class SymbolicScalarFunction:
    """``f(x, y)`` backed by a SymPy expression and its NumPy compilation.

    Calls return finite floats or raise
    :class:`~eqviz.errors.EvaluationError`; NumPy floating-point warnings are
    silenced because undefined points are an expected part of plotting.
    """

    __slots__ = ("expr", "text", "_compiled")

    def __init__(self, expr: sp.Expr, text: str = "") -> None:
        self.expr = expr
        self.text = text or str(expr)
        self._compiled: NumpifiedFunction = numpify_cached(expr, vars=(X, Y))

    def _raw(self, x: float, y: float) -> object:
        with np.errstate(all="ignore"):
            return self._compiled(x, y)

    def __call__(self, x: float, y: float) -> float:
        return evaluate(self._raw, x, y)

    def partial(self, var: str) -> "SymbolicScalarFunction":
        """Return the symbolic partial derivative with respect to ``"x"`` or ``"y"``."""
        if var == "x":
            sym = X
        elif var == "y":
            sym = Y
        else:
            raise ValueError(f"partial() expects 'x' or 'y', got {var!r}")
        return SymbolicScalarFunction(sp.diff(self.expr, sym), text=f"d/d{var}({self.text})")

    @property
    def free_variables(self) -> tuple[str, ...]:
        return tuple(sorted(s.name for s in self.expr.free_symbols))

    def __repr__(self) -> str:
        return f"SymbolicScalarFunction({self.expr!r})"


def compile_expression(text: str) -> SymbolicScalarFunction:
    """Parse and compile one expression in ``x`` and ``y``.

    Raises
    ------
    EquationParseError
        On empty text, syntax errors, unknown names or non-scalar results.
    """
    source = text.strip() if isinstance(text, str) else ""
    if not source:
        raise EquationParseError("Expression is empty.")
    try:
        expr = parse_expr(source, local_dict=dict(_LOCAL_NAMES), transformations=_TRANSFORMATIONS)
    except Exception as exc:
        raise EquationParseError(f"Could not parse {source!r}: {exc}") from exc

    if not isinstance(expr, sp.Expr):
        raise EquationParseError(
            f"{source!r} is not a numeric expression (got {type(expr).__name__})."
        )
    unknown = sorted(s.name for s in expr.free_symbols if s not in (X, Y))
    unknown += sorted(str(fn.func) for fn in expr.atoms(AppliedUndef))
    if unknown:
        raise EquationParseError(
            f"Unknown name(s) in {source!r}: {', '.join(unknown)}. Only x and y are variables."
        )
    logger.debug("compile_expression: %r -> %s", source, expr)
    return SymbolicScalarFunction(expr, text=source)


def split_equation(text: str) -> tuple[str, str]:
    """Split ``left = right`` into its two sides.

    Raises
    ------
    EquationParseError
        Unless the text holds exactly one ``=``, no ``<``, ``>`` or ``!``, and
        two non-empty sides.

    Examples
    --------
    >>> split_equation("x + y = 5")
    ('x + y', '5')
    """
    source = text.strip() if isinstance(text, str) else ""
    if not source:
        raise EquationParseError("Equation is empty.")
    if any(ch in source for ch in _RELATIONAL_CHARS):
        raise EquationParseError("Inequalities are not supported; use a single '='.")
    count = source.count("=")
    if count != 1:
        raise EquationParseError(f"An equation needs exactly one '=', found {count}.")
    left, right = (side.strip() for side in source.split("="))
    if not left or not right:
        raise EquationParseError("Both sides of '=' must be non-empty.")
    return left, right


def compile_equation(text: str) -> SymbolicScalarFunction:
    """Compile ``left = right`` into the zero-seeking ``(left) - (right)``."""
    left, right = split_equation(text)
    fn = compile_expression(f"({left}) - ({right})")
    fn.text = text.strip()
    return fn


@dataclass(frozen=True)
class ParsedInput:
    """Routed user input.

    Parameters
    ----------
    kind : str
        ``"implicit"`` for equations, ``"explicit"`` for bare expressions.
    text : str
        Stripped source text.
    function : SymbolicScalarFunction
        ``f(x, y)`` whose zero set is the curve for implicit input, or the
        expression ``g`` itself for explicit input.
    """

    kind: str
    text: str
    function: SymbolicScalarFunction

    @property
    def explicit(self) -> Callable[[float], float]:
        """``x -> g(x)`` for explicit input."""
        if self.kind != "explicit":
            raise ValueError("explicit is only available for bare expressions")
        fn = self.function
        return lambda x: fn(x, 0.0)


def parse_input(text: str) -> ParsedInput:
    """Route raw input to an implicit equation or an explicit graph.

    Raises
    ------
    EquationParseError
        For invalid text, or a bare expression that mentions ``y``.
    """
    source = text.strip() if isinstance(text, str) else ""
    if "=" in source or any(ch in source for ch in _RELATIONAL_CHARS):
        return ParsedInput("implicit", source, compile_equation(source))

    fn = compile_expression(source)
    if Y in fn.expr.free_symbols:
        raise EquationParseError(
            f"{source!r} mentions y; write it as an equation, e.g. '{source} = 0'."
        )
    return ParsedInput("explicit", source, fn)
