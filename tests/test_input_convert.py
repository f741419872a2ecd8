from __future__ import annotations

import math

import pytest

from eqviz.input_convert import InputConvert


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(2, 2.0), (2.5, 2.5), ("3", 3.0), (" -1e3 ", -1000.0), ("1/4", 0.25)],
)
def test_inputconvert_float(raw: object, expected: float) -> None:
    assert InputConvert(raw, float) == expected


def test_inputconvert_evaluates_symbolic_strings() -> None:
    assert InputConvert("2*pi") == pytest.approx(2 * math.pi)
    assert InputConvert("-sqrt(2)") == pytest.approx(-math.sqrt(2))


def test_inputconvert_int_requires_exact_integer() -> None:
    assert InputConvert("4", int) == 4
    assert InputConvert(6.0, int) == 6
    with pytest.raises(ValueError, match="exact integer"):
        InputConvert(2.5, int)


@pytest.mark.parametrize("raw", ["", "   ", True, "oo", "nan", "I", 1j, "x +"])
def test_inputconvert_rejects_bad_values(raw: object) -> None:
    with pytest.raises(ValueError):
        InputConvert(raw, float)


def test_inputconvert_rejects_unsupported_destination() -> None:
    with pytest.raises(NotImplementedError):
        InputConvert(1, str)  # type: ignore[arg-type]
