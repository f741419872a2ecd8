"""Value types shared by the tracer modules.

Every object here is produced fresh for one trace and never mutated
afterwards. ``Domain`` also carries the small amount of viewport arithmetic
the workspace needs (zooming and resetting).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Tuple, Union

import numpy as np

from .input_convert import InputConvert

NumberLikeOrStr = Union[int, float, str]
RangeLike = Tuple[NumberLikeOrStr, NumberLikeOrStr]

__all__ = [
    "CurveKind",
    "Curve",
    "DEFAULT_DOMAIN",
    "DependencyClass",
    "Domain",
    "Resolution",
    "SolutionPoint",
]

_ZOOM_FRACTION = 0.25


class DependencyClass(enum.Enum):
    """Which variables a scalar function effectively depends on."""

    CONSTANT = "constant"
    X_ONLY = "x_only"
    Y_ONLY = "y_only"
    BIVARIATE = "bivariate"


class CurveKind(enum.Enum):
    """How a curve was produced; selects the clip margin."""

    BRANCH = "branch"
    CONTINUATION = "continuation"
    LINE = "line"
    EXPLICIT = "explicit"


@dataclass(frozen=True)
class Domain:
    """Rectangular plotting domain ``[x_min, x_max] x [y_min, y_max]``.

    Parameters
    ----------
    x_min, x_max : float
        Horizontal bounds, ``x_min < x_max``.
    y_min, y_max : float
        Vertical bounds, ``y_min < y_max``.

    Raises
    ------
    ValueError
        If a bound is not finite or a range is empty.
    """

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self) -> None:
        for name in ("x_min", "x_max", "y_min", "y_max"):
            value = float(getattr(self, name))
            if not np.isfinite(value):
                raise ValueError(f"Domain bound {name} must be finite, got {value!r}")
            object.__setattr__(self, name, value)
        if not self.x_min < self.x_max:
            raise ValueError(
                f"Domain requires x_min < x_max, got ({self.x_min}, {self.x_max})"
            )
        if not self.y_min < self.y_max:
            raise ValueError(
                f"Domain requires y_min < y_max, got ({self.y_min}, {self.y_max})"
            )

    @classmethod
    def from_ranges(cls, x_range: RangeLike, y_range: RangeLike) -> "Domain":
        """Build a domain from two ``(min, max)`` pairs.

        Bounds may be numbers or strings understood by :func:`InputConvert`,
        e.g. ``"-2*pi"``.

        Examples
        --------
        >>> Domain.from_ranges(("-pi", "pi"), (-1, 1)).x_max  # doctest: +ELLIPSIS
        3.14159...
        """
        return cls(
            InputConvert(x_range[0], float),
            InputConvert(x_range[1], float),
            InputConvert(y_range[0], float),
            InputConvert(y_range[1], float),
        )

    @property
    def x_range(self) -> tuple[float, float]:
        return (self.x_min, self.x_max)

    @property
    def y_range(self) -> tuple[float, float]:
        return (self.y_min, self.y_max)

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return (0.5 * (self.x_min + self.x_max), 0.5 * (self.y_min + self.y_max))

    def contains(self, x: float, y: float) -> bool:
        """Return True when ``(x, y)`` lies inside the closed rectangle."""
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def zoom_in(self) -> "Domain":
        """Return a domain with each side pulled in by a quarter of its span."""
        dx = self.width * _ZOOM_FRACTION
        dy = self.height * _ZOOM_FRACTION
        return Domain(self.x_min + dx, self.x_max - dx, self.y_min + dy, self.y_max - dy)

    def zoom_out(self) -> "Domain":
        """Return a domain with each side pushed out by a quarter of its span."""
        dx = self.width * _ZOOM_FRACTION
        dy = self.height * _ZOOM_FRACTION
        return Domain(self.x_min - dx, self.x_max + dx, self.y_min - dy, self.y_max + dy)


DEFAULT_DOMAIN = Domain(-10.0, 10.0, -10.0, 10.0)


@dataclass(frozen=True)
class Resolution:
    """Pixel size of the target viewport; drives every sampling density."""

    width_px: int
    height_px: int

    def __post_init__(self) -> None:
        for name in ("width_px", "height_px"):
            value = getattr(self, name)
            if isinstance(value, bool) or int(value) != value or int(value) <= 0:
                raise ValueError(f"Resolution.{name} must be a positive integer, got {value!r}")
            object.__setattr__(self, name, int(value))


@dataclass(frozen=True)
class SolutionPoint:
    """A point believed to satisfy ``f(x, y) ~ 0``."""

    x: float
    y: float


@dataclass(frozen=True)
class Curve:
    """One continuous drawable branch: an ordered run of solution points."""

    points: tuple[SolutionPoint, ...]
    kind: CurveKind = CurveKind.BRANCH

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[SolutionPoint]:
        return iter(self.points)

    @property
    def xs(self) -> np.ndarray:
        return np.fromiter((p.x for p in self.points), dtype=float, count=len(self.points))

    @property
    def ys(self) -> np.ndarray:
        return np.fromiter((p.y for p in self.points), dtype=float, count=len(self.points))
