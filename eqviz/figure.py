"""Plotly rendering of a plot pass.

:func:`build_figure` is the rendering surface of the package: it strokes the
clipped polylines produced by :func:`eqviz.workspace.plot_pass` as one Plotly
line trace per equation (segments separated by ``None`` gaps) and adds
markers for single-variable solutions.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

import numpy as np
import plotly.graph_objects as go

from .clipper import CanvasTransform
from .types import Domain, Resolution
from .workspace import PlottedEquation

__all__ = ["LINE_WIDTH", "build_figure", "grid_step", "segments_to_xy"]

LINE_WIDTH = 2.5
GRID_COLOR = "#e5e7eb"
AXIS_COLOR = "#374151"


def grid_step(span: float) -> float:
    """Grid spacing for an axis span: ``10 ** floor(log10(span / 10))``.

    >>> grid_step(20.0)
    1.0
    >>> grid_step(5.0)
    0.1
    """
    if not span > 0:
        raise ValueError(f"grid_step expects a positive span, got {span!r}")
    return float(10.0 ** math.floor(math.log10(span / 10.0)))


def segments_to_xy(
    segments: Sequence[np.ndarray], transform: CanvasTransform
) -> tuple[list[Optional[float]], list[Optional[float]]]:
    """Map canvas-space segments back to data space, joined by ``None`` gaps."""
    xs: list[Optional[float]] = []
    ys: list[Optional[float]] = []
    for segment in segments:
        if len(segment) == 0:
            continue
        if xs:
            xs.append(None)
            ys.append(None)
        dx, dy = transform.to_data(segment[:, 0], segment[:, 1])
        xs.extend(float(v) for v in dx)
        ys.extend(float(v) for v in dy)
    return xs, ys


def build_figure(
    plotted: Iterable[PlottedEquation],
    domain: Domain,
    canvas: Resolution,
    *,
    title: Optional[str] = None,
) -> go.Figure:
    """Build a Plotly figure for one plot pass.

    Parameters
    ----------
    plotted : iterable of PlottedEquation
        Output of :func:`eqviz.workspace.plot_pass`.
    domain : Domain
        Visible data rectangle; becomes the axis ranges.
    canvas : Resolution
        Canvas the segments were clipped against; becomes the figure size.
    title : str, optional
        Figure title.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    transform = CanvasTransform(domain, canvas)
    fig = go.Figure()

    for item in plotted:
        xs, ys = segments_to_xy(item.segments, transform)
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                name=item.text,
                line=dict(color=item.color, width=LINE_WIDTH),
                connectgaps=False,
                meta={"equation_id": item.equation_id, "strategy": item.result.strategy.value},
            )
        )
        markers = [m for m in item.result.markers if domain.contains(m.x, m.y)]
        if markers:
            fig.add_trace(
                go.Scatter(
                    x=[m.x for m in markers],
                    y=[m.y for m in markers],
                    mode="markers",
                    name=f"{item.text} (solutions)",
                    marker=dict(color=item.color, size=8),
                    showlegend=False,
                )
            )

    axis_style = dict(
        showgrid=True,
        gridcolor=GRID_COLOR,
        zeroline=True,
        zerolinecolor=AXIS_COLOR,
        zerolinewidth=2,
    )
    fig.update_layout(
        title=title,
        width=canvas.width_px,
        height=canvas.height_px,
        plot_bgcolor="#ffffff",
        xaxis=dict(range=list(domain.x_range), dtick=grid_step(domain.width), **axis_style),
        yaxis=dict(range=list(domain.y_range), dtick=grid_step(domain.height), **axis_style),
        showlegend=True,
    )
    return fig
