"""Map traced curves to canvas space and prune what falls off screen.

The canvas follows the usual raster convention: ``(0, 0)`` is the top-left
corner and ``y`` grows downward. A point is drawable when it lies inside the
canvas rectangle inflated by a margin; the first point outside ends the
current segment and is dropped, and drawing resumes at the next point back
inside. Margins depend on how a curve was produced (see
:attr:`eqviz.config.TraceConfig.clip_margins`): explicit curves are pruned
tightly, continuation curves loosely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import DEFAULT_CONFIG, TraceConfig
from .types import Curve, Domain, Resolution

__all__ = ["CanvasTransform", "clip"]


@dataclass(frozen=True)
class CanvasTransform:
    """Affine map between data coordinates and canvas pixels."""

    domain: Domain
    canvas: Resolution

    def to_canvas(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Map data coordinates to canvas pixels."""
        d = self.domain
        cx = (np.asarray(xs, dtype=float) - d.x_min) / d.width * self.canvas.width_px
        cy = self.canvas.height_px - (np.asarray(ys, dtype=float) - d.y_min) / d.height * self.canvas.height_px
        return cx, cy

    def to_data(self, cx: np.ndarray, cy: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Inverse of :meth:`to_canvas`."""
        d = self.domain
        xs = d.x_min + np.asarray(cx, dtype=float) / self.canvas.width_px * d.width
        ys = d.y_min + (self.canvas.height_px - np.asarray(cy, dtype=float)) / self.canvas.height_px * d.height
        return xs, ys

    def inside(self, cx: np.ndarray, cy: np.ndarray, margin: float) -> np.ndarray:
        """Boolean mask of canvas points inside the box inflated by ``margin``."""
        w, h = self.canvas.width_px, self.canvas.height_px
        return (cx >= -margin) & (cx <= w + margin) & (cy >= -margin) & (cy <= h + margin)


def clip(
    curve: Curve,
    domain: Domain,
    canvas: Resolution,
    margin: Optional[float] = None,
    *,
    config: TraceConfig = DEFAULT_CONFIG,
) -> list[np.ndarray]:
    """Split ``curve`` into on-screen polyline segments in canvas space.

    Parameters
    ----------
    curve : Curve
        Ordered solution points.
    domain : Domain
        Data rectangle shown on the canvas.
    canvas : Resolution
        Canvas size in pixels.
    margin : float, optional
        Allowed overshoot in pixels; defaults to the margin configured for
        ``curve.kind``.

    Returns
    -------
    list of numpy.ndarray
        Segments of shape ``(N, 2)`` holding ``(cx, cy)`` rows. Empty when
        nothing is visible.
    """
    if len(curve) == 0:
        return []
    if margin is None:
        margin = config.margin_for(curve.kind)

    transform = CanvasTransform(domain, canvas)
    cx, cy = transform.to_canvas(curve.xs, curve.ys)
    mask = transform.inside(cx, cy, float(margin))

    segments: list[np.ndarray] = []
    start: Optional[int] = None
    for i, ok in enumerate(mask):
        if ok and start is None:
            start = i
        elif not ok and start is not None:
            segments.append(np.column_stack((cx[start:i], cy[start:i])))
            start = None
    if start is not None:
        segments.append(np.column_stack((cx[start:], cy[start:])))
    return segments
