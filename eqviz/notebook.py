"""Notebook front end for the equation workspace.

Purpose
-------
:class:`EquationExplorer` wraps an :class:`~eqviz.workspace.EquationSet` in an
ipywidgets panel: one text row per equation with a status line, buttons to
add, remove and hide equations, zoom controls, and view-range inputs. Every
edit re-runs :func:`~eqviz.workspace.plot_pass` and redraws the Plotly figure
inside an ``Output`` widget.

Examples
--------
>>> explorer = EquationExplorer(["x^2 + y^2 = 25"])  # doctest: +SKIP
>>> explorer                                         # doctest: +SKIP

Notes
-----
Construction never displays anything. The widget tree is shown by IPython's
rich display hook (``_ipython_display_``) or by ``display(explorer.widget)``.
Text inputs use ``continuous_update=False`` so tracing runs once per commit,
not once per keystroke.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Optional

import ipywidgets as widgets
import plotly.graph_objects as go
from IPython.display import clear_output, display

from .config import DEFAULT_CONFIG, TraceConfig
from .figure import build_figure
from .types import DEFAULT_DOMAIN, Domain, Resolution
from .workspace import EXAMPLES, Equation, EquationSet, plot_pass, validity_message

__all__ = ["DEFAULT_CANVAS", "EquationExplorer"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_CANVAS = Resolution(900, 650)


class _EquationRow:
    """Widgets for one equation: visibility toggle, text box, remove button, status."""

    def __init__(self, explorer: "EquationExplorer", equation: Equation) -> None:
        self.equation_id = equation.id
        self.toggle = widgets.Checkbox(
            value=equation.visible,
            indent=False,
            layout=widgets.Layout(width="28px"),
        )
        self.text = widgets.Text(
            value=equation.text,
            placeholder="e.g. x^2 + y^2 = 25",
            continuous_update=False,
            layout=widgets.Layout(width="260px", border=f"2px solid {equation.color}"),
        )
        self.remove = widgets.Button(
            icon="trash", tooltip="Remove equation", layout=widgets.Layout(width="36px")
        )
        self.status = widgets.HTML(value="")
        self.box = widgets.VBox(
            [widgets.HBox([self.toggle, self.text, self.remove]), self.status],
            layout=widgets.Layout(margin="0 0 6px 0"),
        )

        eid = equation.id
        self.text.observe(lambda change: explorer._on_text(eid, change["new"]), names="value")
        self.toggle.observe(lambda change: explorer._on_toggle(eid, change["new"]), names="value")
        self.remove.on_click(lambda _btn: explorer.remove_equation(eid))
        self.refresh(equation)

    def refresh(self, equation: Equation) -> None:
        message = validity_message(equation)
        if message is None:
            self.status.value = ""
        elif equation.error:
            self.status.value = f'<span style="color:#b91c1c">{message}</span>'
        else:
            self.status.value = f'<span style="color:#047857">{message}</span>'


class EquationExplorer:
    """Interactive multi-equation plotter for Jupyter.

    Parameters
    ----------
    texts : iterable of str, optional
        Initial equations; defaults to ``("sin(x)",)``.
    domain : Domain, optional
        Initial view rectangle.
    canvas : Resolution, optional
        Figure size in pixels; also the tracing resolution.
    config : TraceConfig, optional
        Tracer tolerances and caps.
    """

    def __init__(
        self,
        texts: Iterable[str] = ("sin(x)",),
        *,
        domain: Domain = DEFAULT_DOMAIN,
        canvas: Resolution = DEFAULT_CANVAS,
        config: TraceConfig = DEFAULT_CONFIG,
    ) -> None:
        self.equations = EquationSet(texts)
        self._domain = domain
        self._canvas = canvas
        self._config = config
        self._figure: Optional[go.Figure] = None
        self._rows: dict[int, _EquationRow] = {}
        self._syncing = False

        self._rows_box = widgets.VBox([])
        self._add_button = widgets.Button(description="Add equation", icon="plus")
        self._add_button.on_click(lambda _btn: self.add_equation())
        self._examples = widgets.Dropdown(
            options=[("Examples...", "")] + [(f"{label}: {text}", text) for text, label in EXAMPLES],
            value="",
            layout=widgets.Layout(width="260px"),
        )
        self._examples.observe(self._on_example, names="value")

        self._zoom_in_button = widgets.Button(description="Zoom in", icon="search-plus")
        self._zoom_out_button = widgets.Button(description="Zoom out", icon="search-minus")
        self._reset_button = widgets.Button(description="Reset view", icon="home")
        self._zoom_in_button.on_click(lambda _btn: self.zoom_in())
        self._zoom_out_button.on_click(lambda _btn: self.zoom_out())
        self._reset_button.on_click(lambda _btn: self.reset_view())

        range_layout = widgets.Layout(width="150px")
        self._range_inputs = {
            name: widgets.FloatText(description=name, layout=range_layout)
            for name in ("x min", "x max", "y min", "y max")
        }
        for field in self._range_inputs.values():
            field.observe(self._on_range_input, names="value")

        self._output = widgets.Output(
            layout=widgets.Layout(width=f"{canvas.width_px + 20}px", min_height=f"{canvas.height_px}px")
        )
        sidebar = widgets.VBox(
            [
                widgets.HTML("<b>Equations</b>"),
                self._rows_box,
                widgets.HBox([self._add_button]),
                self._examples,
                widgets.HTML("<b>View</b>"),
                widgets.HBox([self._zoom_in_button, self._zoom_out_button, self._reset_button]),
                widgets.VBox(list(self._range_inputs.values())),
            ],
            layout=widgets.Layout(width="340px", padding="0 12px 0 0"),
        )
        self._root = widgets.HBox([sidebar, self._output])

        self._rebuild_rows()
        self._sync_range_inputs()
        self.redraw()

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def canvas(self) -> Resolution:
        return self._canvas

    @property
    def figure(self) -> Optional[go.Figure]:
        """Figure built by the latest redraw."""
        return self._figure

    @property
    def widget(self) -> widgets.HBox:
        """Root widget of the panel."""
        return self._root

    # ------------------------------------------------------------------
    # Equation editing
    # ------------------------------------------------------------------

    def add_equation(self, text: str = "") -> Equation:
        eq = self.equations.add(text)
        self._rebuild_rows()
        self.redraw()
        return eq

    def remove_equation(self, equation_id: int) -> None:
        self.equations.remove(equation_id)
        self._rebuild_rows()
        self.redraw()

    def set_text(self, equation_id: int, text: str) -> Equation:
        """Replace an equation's text, refresh its status line and redraw."""
        eq = self.equations.update(equation_id, text)
        row = self._rows.get(equation_id)
        if row is not None:
            row.refresh(eq)
            if row.text.value != text:
                self._syncing = True
                try:
                    row.text.value = text
                finally:
                    self._syncing = False
        self.redraw()
        return eq

    def toggle(self, equation_id: int) -> Equation:
        eq = self.equations.toggle(equation_id)
        row = self._rows.get(equation_id)
        if row is not None and row.toggle.value != eq.visible:
            self._syncing = True
            try:
                row.toggle.value = eq.visible
            finally:
                self._syncing = False
        self.redraw()
        return eq

    def load_example(self, text: str) -> Equation:
        eq = self.equations.load_example(text)
        self._rebuild_rows()
        self.redraw()
        return eq

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def zoom_in(self) -> Domain:
        return self.set_domain(self._domain.zoom_in())

    def zoom_out(self) -> Domain:
        return self.set_domain(self._domain.zoom_out())

    def reset_view(self) -> Domain:
        return self.set_domain(DEFAULT_DOMAIN)

    def set_ranges(self, x_range: Any, y_range: Any) -> Domain:
        """Set the view from two ``(min, max)`` pairs; see :meth:`Domain.from_ranges`."""
        return self.set_domain(Domain.from_ranges(x_range, y_range))

    def set_domain(self, domain: Domain) -> Domain:
        self._domain = domain
        self._sync_range_inputs()
        self.redraw()
        return domain

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def redraw(self) -> go.Figure:
        """Trace every visible equation and replace the figure in the output area."""
        log_debug = logger.isEnabledFor(logging.DEBUG)
        t0 = time.perf_counter() if log_debug else None

        plotted = plot_pass(
            self.equations, self._domain, self._canvas, config=self._config
        )
        fig = build_figure(plotted, self._domain, self._canvas)
        self._figure = fig
        with self._output:
            clear_output(wait=True)
            display(fig)

        if t0 is not None:
            logger.debug(
                "redraw: equations=%d plotted=%d elapsed=%.2fms",
                len(self.equations),
                len(plotted),
                1000.0 * (time.perf_counter() - t0),
            )
        return fig

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the root widget when the explorer is the value of a cell."""
        display(self._root)

    # ------------------------------------------------------------------
    # Widget plumbing
    # ------------------------------------------------------------------

    def _rebuild_rows(self) -> None:
        for row in self._rows.values():
            row.text.unobserve_all()
            row.toggle.unobserve_all()
        self._rows = {eq.id: _EquationRow(self, eq) for eq in self.equations}
        self._rows_box.children = tuple(row.box for row in self._rows.values())

    def _sync_range_inputs(self) -> None:
        self._syncing = True
        try:
            values = (
                self._domain.x_min,
                self._domain.x_max,
                self._domain.y_min,
                self._domain.y_max,
            )
            for field, value in zip(self._range_inputs.values(), values):
                field.value = value
        finally:
            self._syncing = False

    def _on_text(self, equation_id: int, text: str) -> None:
        if not self._syncing:
            self.set_text(equation_id, text)

    def _on_toggle(self, equation_id: int, visible: bool) -> None:
        if self._syncing:
            return
        if self.equations.get(equation_id).visible != visible:
            self.toggle(equation_id)

    def _on_example(self, change: dict[str, Any]) -> None:
        text = change["new"]
        if not text:
            return
        self.load_example(text)
        self._examples.value = ""

    def _on_range_input(self, _change: dict[str, Any]) -> None:
        if self._syncing:
            return
        x_min, x_max, y_min, y_max = (f.value for f in self._range_inputs.values())
        try:
            domain = Domain.from_ranges((x_min, x_max), (y_min, y_max))
        except ValueError as exc:
            logger.info("Ignoring view range (%s, %s, %s, %s): %s", x_min, x_max, y_min, y_max, exc)
            return
        self._domain = domain
        self.redraw()
