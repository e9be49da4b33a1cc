"""
Interactive Jupyter widget for exploring Doppler broadening.

BroadeningExplorer shows the broadening figure with one slider per model
parameter and redraws the curves when a slider moves.

Requirements
------------
- ipywidgets >= 8.0
- plotly >= 5.0

Install with: pip install dbroad[widgets]
"""

# pyright: reportMissingImports=false
# pyright: reportOptionalMemberAccess=false
# pyright: reportOptionalCall=false

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from dbroad.core.constants import DEFAULT_N_POINTS
from dbroad.core.errors import InvalidParameterError
from dbroad.core.logging_config import get_logger
from dbroad.kinematics.broadening import DopplerBroadening
from dbroad.visualization.plots import TRACE_STYLES, plot_broadening

if TYPE_CHECKING:
    import ipywidgets as widgets
    import plotly.graph_objects as go

try:
    import ipywidgets as widgets
    from IPython.display import display

    HAS_IPYWIDGETS = True
except ImportError:
    HAS_IPYWIDGETS = False
    widgets = None  # type: ignore[assignment]
    display = None  # type: ignore[assignment]

try:
    import plotly.graph_objects as go

    HAS_PLOTLY = True
except ImportError:
    HAS_PLOTLY = False
    go = None  # type: ignore[assignment]

HAS_WIDGETS = HAS_IPYWIDGETS and HAS_PLOTLY

logger = get_logger("visualization.widgets")

# parameter -> (description, min, max, step)
SLIDER_RANGES: Dict[str, Tuple[str, float, float, float]] = {
    "energy_MeV": ("E (MeV):", 0.01, 10.0, 0.01),
    "beta": ("beta:", 0.0, 0.99, 0.005),
    "d_theta_deg": ("dtheta (deg):", 0.0, 20.0, 0.1),
    "resolution_const": ("const (sqrt MeV):", 0.0, 2.0, 0.005),
    "d_beta": ("dbeta:", 0.0, 0.1, 0.001),
}


def _require_widgets() -> None:
    """Raise ImportError if widgets dependencies are not available."""
    if not HAS_WIDGETS:
        missing = []
        if not HAS_IPYWIDGETS:
            missing.append("ipywidgets")
        if not HAS_PLOTLY:
            missing.append("plotly")
        raise ImportError(
            f"Widget dependencies not available: {', '.join(missing)}. "
            "Install with: pip install dbroad[widgets]"
        )


class BroadeningExplorer:
    """
    Interactive broadening plot with parameter sliders.

    Parameters
    ----------
    model : DopplerBroadening
        Starting model; its parameters set the initial slider positions
    n_points : int, optional
        Number of samples across 0-180 deg (default: 100)
    height : int, optional
        Figure height in pixels (default: 500)
    width : int, optional
        Figure width in pixels (default: 800)

    Examples
    --------
    >>> explorer = BroadeningExplorer(DopplerBroadening(1.0, 0.3, d_theta_deg=2.0))
    >>> explorer.show()
    """

    def __init__(
        self,
        model: DopplerBroadening,
        n_points: int = DEFAULT_N_POINTS,
        height: int = 500,
        width: int = 800,
    ):
        _require_widgets()

        self.model = model
        self.n_points = n_points
        self.height = height
        self.width = width
        self._fig: Optional["go.FigureWidget"] = None
        self._sliders: Dict[str, "widgets.FloatSlider"] = {}
        self._status: Optional["widgets.HTML"] = None

    def _build_figure(self) -> "go.FigureWidget":
        fig = plot_broadening(self.model, self.n_points, height=self.height, width=self.width)
        return go.FigureWidget(fig)

    def _build_controls(self) -> "widgets.VBox":
        for name, (description, vmin, vmax, step) in SLIDER_RANGES.items():
            value = getattr(self.model, name)
            slider = widgets.FloatSlider(
                value=value,
                min=min(vmin, value),
                max=max(vmax, value),
                step=step,
                description=description,
                continuous_update=False,
                readout_format=".3f",
                style={"description_width": "120px"},
                layout=widgets.Layout(width="420px"),
            )
            slider.observe(self._on_change, names="value")
            self._sliders[name] = slider

        self._status = widgets.HTML(value="")
        return widgets.VBox(list(self._sliders.values()) + [self._status])

    def _on_change(self, change: Dict[str, Any]) -> None:
        params = {name: slider.value for name, slider in self._sliders.items()}
        try:
            self.update(**params)
        except InvalidParameterError as e:
            self._status.value = f"<span style='color:#d62728'>{e}</span>"

    def update(self, **params: float) -> DopplerBroadening:
        """
        Replace model parameters and redraw the curves.

        Returns
        -------
        DopplerBroadening
            The new model
        """
        self.model = self.model.with_parameters(**params)

        if self._fig is not None:
            components = self.model.components()
            with self._fig.batch_update():
                for trace, name in zip(self._fig.data, TRACE_STYLES):
                    theta, values = components[name].sample(self.n_points)
                    trace.x = theta
                    trace.y = values

        if self._status is not None:
            self._status.value = ""

        logger.debug(f"Explorer updated to {self.model!r}")
        return self.model

    def show(self) -> "widgets.HBox":
        """
        Display the explorer.

        Returns
        -------
        widgets.HBox
            Sliders next to the figure
        """
        self._fig = self._build_figure()
        controls = self._build_controls()

        container = widgets.HBox([controls, self._fig])
        display(container)
        return container
