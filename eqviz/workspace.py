"""Equation list state and the per-frame plot pass.

Purpose
-------
Hold the user's equations (text, visibility, color, validation error) and
turn the visible ones into clipped polylines for a renderer.

Architecture notes
------------------
``EquationSet`` owns mutable UI state only. :func:`plot_pass` is a pure
function of that state plus the viewport: every equation is parsed and traced
independently, so one broken equation never affects the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from .clipper import clip
from .compiler import parse_input
from .config import DEFAULT_CONFIG, TraceConfig
from .errors import EquationParseError
from .tracer import TraceResult, trace_equation, trace_explicit
from .types import Domain, Resolution

__all__ = [
    "EXAMPLES",
    "Equation",
    "EquationSet",
    "PALETTE",
    "PlottedEquation",
    "plot_pass",
    "validate",
    "validity_message",
]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PALETTE: tuple[str, ...] = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
)

EXAMPLES: tuple[tuple[str, str], ...] = (
    ("x^2", "Parabola"),
    ("sin(x)", "Sine wave"),
    ("cos(x)", "Cosine wave"),
    ("log(x)", "Logarithm"),
    ("e^x", "Exponential"),
    ("sqrt(abs(x))", "Square root"),
    ("1/x", "Hyperbola"),
    ("sin(x)^2 + cos(x)^2", "Trig identity"),
    ("x^2 + y^2 = 25", "Circle"),
    ("x = y^2", "Sideways parabola"),
    ("x = sin(y)", "Sideways sine"),
    ("y^2 = 9", "Two horizontal lines"),
)


def validate(text: str) -> Optional[str]:
    """Return the parse error message for ``text``, or ``None`` when it compiles.

    Blank text is not an error; it simply plots nothing.
    """
    if not text.strip():
        return None
    try:
        parse_input(text)
    except EquationParseError as exc:
        return str(exc)
    return None


@dataclass
class Equation:
    """One row of the equation list.

    Parameters
    ----------
    id : int
        Stable identifier.
    text : str
        Source text as typed.
    visible : bool
        Whether the equation is drawn.
    color : str
        Stroke color.
    error : str or None
        Last validation error.
    """

    id: int
    text: str = ""
    visible: bool = True
    color: str = PALETTE[0]
    error: Optional[str] = None

    @property
    def is_plottable(self) -> bool:
        return self.visible and bool(self.text.strip()) and self.error is None


def validity_message(equation: Equation) -> Optional[str]:
    """User-facing status line for an equation, or ``None`` for blank input."""
    if equation.error:
        return f"⚠️ {equation.error}"
    if equation.text.strip():
        return "✓ Valid equation"
    return None


class EquationSet:
    """Ordered, editable collection of equations with palette colors."""

    def __init__(self, texts: Iterable[str] = ("sin(x)",)) -> None:
        self._equations: list[Equation] = []
        self._next_id = 1
        for text in texts:
            self.add(text)

    def __iter__(self):
        return iter(list(self._equations))

    def __len__(self) -> int:
        return len(self._equations)

    @property
    def equations(self) -> tuple[Equation, ...]:
        return tuple(self._equations)

    def get(self, equation_id: int) -> Equation:
        """Return the equation with ``equation_id`` or raise ``KeyError``."""
        for eq in self._equations:
            if eq.id == equation_id:
                return eq
        raise KeyError(f"Unknown equation id: {equation_id}")

    def add(self, text: str = "") -> Equation:
        """Append an equation colored ``PALETTE[id % len(PALETTE)]``."""
        eq = Equation(
            id=self._next_id,
            text=text,
            color=PALETTE[self._next_id % len(PALETTE)],
            error=validate(text),
        )
        self._next_id += 1
        self._equations.append(eq)
        return eq

    def remove(self, equation_id: int) -> None:
        """Remove an equation; unknown ids are ignored."""
        self._equations = [eq for eq in self._equations if eq.id != equation_id]

    def update(self, equation_id: int, text: str) -> Equation:
        """Replace the text of an equation and revalidate it."""
        eq = self.get(equation_id)
        eq.text = text
        eq.error = validate(text)
        return eq

    def toggle(self, equation_id: int) -> Equation:
        """Flip the visibility of an equation."""
        eq = self.get(equation_id)
        eq.visible = not eq.visible
        return eq

    def load_example(self, text: str) -> Equation:
        """Fill the only blank equation with ``text``, or append a new one."""
        if len(self._equations) == 1 and not self._equations[0].text:
            return self.update(self._equations[0].id, text)
        return self.add(text)


@dataclass(frozen=True)
class PlottedEquation:
    """Render-ready output for one equation.

    Parameters
    ----------
    equation_id : int
        Source equation id.
    text : str
        Source text, used as legend label.
    color : str
        Stroke color.
    result : TraceResult
        Raw trace in data coordinates.
    segments : tuple[numpy.ndarray, ...]
        Clipped polylines in canvas coordinates.
    """

    equation_id: int
    text: str
    color: str
    result: TraceResult
    segments: tuple[np.ndarray, ...]


def plot_pass(
    equations: Iterable[Equation],
    domain: Domain,
    resolution: Resolution,
    canvas: Optional[Resolution] = None,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> list[PlottedEquation]:
    """Trace and clip every plottable equation.

    Parameters
    ----------
    equations : iterable of Equation
        Hidden, blank and invalid equations are skipped.
    domain : Domain
        Visible data rectangle.
    resolution : Resolution
        Sampling resolution.
    canvas : Resolution, optional
        Canvas used for clipping; defaults to ``resolution``.
    """
    target = canvas if canvas is not None else resolution
    plotted: list[PlottedEquation] = []
    for eq in equations:
        if not eq.is_plottable:
            continue
        try:
            parsed = parse_input(eq.text)
        except EquationParseError as exc:
            logger.info("plot_pass: skipping equation %s: %s", eq.id, exc)
            continue

        if parsed.kind == "explicit":
            result = trace_explicit(parsed.explicit, domain, resolution, config=config)
        else:
            result = trace_equation(parsed.function, domain, resolution, config=config)

        segments: list[np.ndarray] = []
        for curve in result.curves:
            segments.extend(clip(curve, domain, target, config=config))
        plotted.append(
            PlottedEquation(
                equation_id=eq.id,
                text=parsed.text,
                color=eq.color,
                result=result,
                segments=tuple(segments),
            )
        )
    return plotted
