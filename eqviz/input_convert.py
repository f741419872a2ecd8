"""Coerce user-typed numbers (``"2"``, ``"-pi/2"``, ``"1e3"``) to Python numbers."""

from __future__ import annotations

import math
from typing import Any, Type, TypeVar

import sympy as sp

__all__ = ["InputConvert"]

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float) -> T:
    """
    Convert ``obj`` to a finite real ``dest_type`` (``float`` or ``int``).

    Rules:
    - numbers (not bools) are cast directly,
    - strings are tried with ``float(s)`` first, then parsed by SymPy and
      evaluated, so ``"2*pi"`` and ``"sqrt(2)"`` work,
    - ``int`` requires an exact integer value.

    Raises
    ------
    NotImplementedError
        If ``dest_type`` is not ``float`` or ``int``.
    ValueError
        If the value is empty, non-real, non-finite, or not an exact integer
        when ``int`` is requested.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )

    if isinstance(obj, bool):
        raise ValueError(f"Could not convert boolean {obj!r} to {dest_type.__name__}.")

    if isinstance(obj, str):
        text = obj.strip()
        if text == "":
            raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")
        try:
            value = float(text)
        except ValueError:
            try:
                value = complex(sp.sympify(text).evalf())
            except Exception as e:
                raise ValueError(
                    f"Could not convert {obj!r} to {dest_type.__name__} (neither directly nor via SymPy)."
                ) from e
    else:
        try:
            value = complex(obj)
        except Exception as e:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e

    if isinstance(value, complex):
        if value.imag != 0:
            raise ValueError(
                f"Could not convert non-real {obj!r} to {dest_type.__name__}: imaginary part is non-zero."
            )
        value = value.real

    if not math.isfinite(value):
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}: value is not finite.")

    if dest_type is int:
        if not float(value).is_integer():
            raise ValueError(f"Could not convert {obj!r} to int: value is not an exact integer.")
        return int(value)  # type: ignore[return-value]
    return float(value)  # type: ignore[return-value]
