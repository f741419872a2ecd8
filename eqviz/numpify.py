"""
numpify: Compile SymPy expressions to NumPy-callable Python functions
====================================================================

Purpose
-------
Turn a SymPy expression into a plain Python function with an explicit
argument order that evaluates through NumPy. :mod:`eqviz.compiler` uses it to
build the ``f(x, y)`` callables handed to the tracer, and their symbolic
partial derivatives.

Public API
----------
- :func:`numpify`
- :func:`numpify_cached`
- :class:`NumpifiedFunction`

Examples
--------
>>> import sympy as sp
>>> x, y = sp.symbols("x y")
>>> f = numpify(x**2 + y, vars=(x, y))
>>> float(f(3.0, 1.0))
10.0

Logging
-------
Silent by default. Enable code-generation timings with

>>> import logging
>>> logging.getLogger("eqviz.numpify").setLevel(logging.DEBUG)

Notes
-----
The generated source is executed with ``exec``. Only compile expressions that
came through SymPy's parser, never raw user strings.
"""

from __future__ import annotations

import builtins
import keyword
import logging
import textwrap
import time
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union, cast

import numpy as np
import sympy as sp
from sympy.printing.numpy import NumPyPrinter

__all__ = ["NumpifiedFunction", "numpify", "numpify_cached"]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

_NUMPIFY_CACHE_MAXSIZE = 256


class NumpifiedFunction:
    """Compiled SymPy->NumPy callable that keeps its expression and source."""

    __slots__ = ("_fn", "symbolic", "vars", "source")

    def __init__(
        self,
        fn: Callable[..., Any],
        symbolic: sp.Basic,
        vars: Tuple[sp.Symbol, ...],
        source: str,
    ) -> None:
        self._fn = fn
        self.symbolic = symbolic
        self.vars = vars
        self.source = source

    def __call__(self, *args: Any) -> Any:
        if len(args) != len(self.vars):
            raise TypeError(
                f"Expected {len(self.vars)} positional argument(s) "
                f"({', '.join(v.name for v in self.vars)}), got {len(args)}"
            )
        return self._fn(*args)

    @property
    def var_names(self) -> tuple[str, ...]:
        return tuple(v.name for v in self.vars)

    def __repr__(self) -> str:
        return f"NumpifiedFunction({self.symbolic!r}, vars=({', '.join(self.var_names)}))"


def _normalize_vars(
    expr: sp.Basic, vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]]
) -> Tuple[sp.Symbol, ...]:
    """Normalize vars into a tuple of SymPy Symbols."""
    if vars is None:
        return tuple(sorted(expr.free_symbols, key=sp.default_sort_key))
    if isinstance(vars, sp.Symbol):
        return (vars,)
    try:
        vars_tuple = tuple(vars)
    except TypeError as e:
        raise TypeError("vars must be a SymPy Symbol or an iterable of SymPy Symbols") from e
    for v in vars_tuple:
        if not isinstance(v, sp.Symbol):
            raise TypeError(f"vars must contain only SymPy Symbols, got {type(v)}")
    if len(set(vars_tuple)) != len(vars_tuple):
        raise ValueError(f"vars contains duplicate symbols: {vars_tuple!r}")
    return cast(Tuple[sp.Symbol, ...], vars_tuple)


def _argument_names(vars_tuple: Tuple[sp.Symbol, ...]) -> list[str]:
    reserved = set(keyword.kwlist) | set(dir(builtins)) | {"numpy"}
    names: list[str] = []
    for idx, sym in enumerate(vars_tuple):
        base = sym.name if sym.name.isidentifier() else f"_arg{idx}"
        candidate = base
        while candidate in reserved or candidate in names:
            candidate = f"{candidate}_"
        names.append(candidate)
    return names


def _numpify_uncached(expr: sp.Basic, vars_tuple: Tuple[sp.Symbol, ...]) -> NumpifiedFunction:
    """Generate, exec and wrap the NumPy function for ``expr``."""
    missing = expr.free_symbols - set(vars_tuple)
    if missing:
        missing_str = ", ".join(sorted(s.name for s in missing))
        raise ValueError(
            f"Expression contains unbound symbols: {missing_str}. "
            f"Provide them in vars=({', '.join(v.name for v in vars_tuple)})."
        )

    log_debug = logger.isEnabledFor(logging.DEBUG)
    t0: float | None = time.perf_counter() if log_debug else None

    arg_names = _argument_names(vars_tuple)
    replacement = {sym: sp.Symbol(name) for sym, name in zip(vars_tuple, arg_names)}
    printer = NumPyPrinter(settings={"user_functions": {}})
    expr_code = printer.doprint(expr.xreplace(replacement))

    lines = ["def _generated(" + ", ".join(arg_names) + "):"]
    for nm in arg_names:
        lines.append(f"    {nm} = numpy.asarray({nm}, dtype=float)")
    if not expr.free_symbols and arg_names:
        lines.append(f"    _shape = numpy.broadcast({', '.join(arg_names)}).shape")
        lines.append(f"    return ({expr_code}) + numpy.zeros(_shape)")
    else:
        lines.append(f"    return {expr_code}")
    src = "\n".join(lines)

    glb: Dict[str, Any] = {"numpy": np}
    loc: Dict[str, Any] = {}
    exec(src, glb, loc)
    fn = cast(Callable[..., Any], loc["_generated"])
    fn.__doc__ = textwrap.dedent(
        f"""
        Auto-generated NumPy function from SymPy expression.

        expr: {expr!r}
        vars: {arg_names}
        """
    ).strip()

    if t0 is not None:
        logger.debug(
            "numpify: expr=%s vars=%s compile=%.2fms",
            expr,
            arg_names,
            1000.0 * (time.perf_counter() - t0),
        )
    return NumpifiedFunction(fn=fn, symbolic=expr, vars=vars_tuple, source=src)


@lru_cache(maxsize=_NUMPIFY_CACHE_MAXSIZE)
def _numpify_cached_impl(expr: sp.Basic, vars_tuple: Tuple[sp.Symbol, ...]) -> NumpifiedFunction:
    """Compile on cache misses for :func:`numpify_cached`."""
    logger.debug("numpify_cached: cache MISS (vars=%s)", [v.name for v in vars_tuple])
    return _numpify_uncached(expr, vars_tuple)


def numpify_cached(
    expr: Any, *, vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]] = None
) -> NumpifiedFunction:
    """Cached version of :func:`numpify`, keyed on the expression and vars tuple.

    Compiled functions are immutable, so sharing them between traces is safe.
    Clear the cache with ``numpify_cached.cache_clear()``.
    """
    try:
        expr_sym = sp.sympify(expr)
    except (sp.SympifyError, TypeError) as e:
        raise TypeError(f"numpify expects a SymPy-compatible expression, got {type(expr)}") from e
    return _numpify_cached_impl(expr_sym, _normalize_vars(expr_sym, vars))


def numpify(
    expr: Any,
    *,
    vars: Optional[Union[sp.Symbol, Iterable[sp.Symbol]]] = None,
    cache: bool = True,
) -> NumpifiedFunction:
    """Compile a SymPy expression into a NumPy-evaluable function.

    Parameters
    ----------
    expr:
        A SymPy expression or anything :func:`sympy.sympify` accepts.
    vars:
        Symbols used as positional arguments, in order. Defaults to the free
        symbols sorted by ``sympy.default_sort_key``.
    cache:
        Reuse compiled functions through :func:`numpify_cached` (default).

    Returns
    -------
    NumpifiedFunction

    Raises
    ------
    TypeError
        If ``expr`` cannot be sympified or ``vars`` holds non-symbols.
    ValueError
        If ``expr`` has free symbols missing from ``vars``.
    """
    if cache:
        return numpify_cached(expr, vars=vars)
    try:
        expr_sym = sp.sympify(expr)
    except (sp.SympifyError, TypeError) as e:
        raise TypeError(f"numpify expects a SymPy-compatible expression, got {type(expr)}") from e
    return _numpify_uncached(expr_sym, _normalize_vars(expr_sym, vars))


numpify_cached.cache_info = _numpify_cached_impl.cache_info  # type: ignore[attr-defined]
numpify_cached.cache_clear = _numpify_cached_impl.cache_clear  # type: ignore[attr-defined]
