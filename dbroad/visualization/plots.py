"""
Plotly figures of Doppler broadening versus detector angle.

Requirements
------------
- plotly >= 5.0

Install with: pip install dbroad[widgets]
"""

# pyright: reportMissingImports=false
# pyright: reportOptionalMemberAccess=false

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from dbroad.core.constants import DEFAULT_N_POINTS
from dbroad.core.logging_config import get_logger

if TYPE_CHECKING:
    import plotly.graph_objects as go
    from dbroad.kinematics.broadening import DopplerBroadening

try:
    import plotly.graph_objects as go

    HAS_PLOTLY = True
except ImportError:
    HAS_PLOTLY = False
    go = None  # type: ignore[assignment]

logger = get_logger("visualization.plots")

# Line style per component, total drawn first
TRACE_STYLES: Dict[str, Dict[str, Any]] = {
    "total_broadening": {"color": "black", "width": 2},
    "energy_broadening": {"color": "blue", "width": 1.5},
    "solid_angle_broadening": {"color": "red", "width": 1.5},
    "beta_broadening": {"color": "#2ca02c", "width": 1.5},
}

X_AXIS_TITLE = "Angle [°]"
Y_AXIS_TITLE = "Resolution [dE/E]"


def _require_plotly() -> None:
    """Raise ImportError if plotly is not available."""
    if not HAS_PLOTLY:
        raise ImportError("plotly is not available. Install with: pip install dbroad[widgets]")


def broadening_traces(model: "DopplerBroadening", n_points: int = DEFAULT_N_POINTS) -> list:
    """
    One line trace per broadening component, total first.

    Parameters
    ----------
    model : DopplerBroadening
        Model to draw
    n_points : int
        Number of samples across 0-180 deg (default: 100)

    Returns
    -------
    list of go.Scatter
        Traces named after the component titles
    """
    _require_plotly()

    components = model.components()
    traces = []
    for name, style in TRACE_STYLES.items():
        function = components[name]
        theta, values = function.sample(n_points)
        traces.append(
            go.Scatter(
                x=theta,
                y=values,
                mode="lines",
                name=function.title,
                line=dict(color=style["color"], width=style["width"]),
            )
        )
    return traces


def plot_broadening(
    model: "DopplerBroadening",
    n_points: int = DEFAULT_N_POINTS,
    title: Optional[str] = None,
    height: int = 500,
    width: int = 800,
) -> "go.Figure":
    """
    Plot the total broadening and its three components against angle.

    Parameters
    ----------
    model : DopplerBroadening
        Model to draw
    n_points : int
        Number of samples across 0-180 deg (default: 100)
    title : str, optional
        Figure title. If None, summarises the model parameters.
    height : int, optional
        Figure height in pixels (default: 500)
    width : int, optional
        Figure width in pixels (default: 800)

    Returns
    -------
    go.Figure
        Figure with the y axis starting at zero and the legend in the
        lower right of the plot area
    """
    _require_plotly()

    if title is None:
        title = (
            f"E = {model.energy_MeV:g} MeV, beta = {model.beta:g}, "
            f"dtheta = {model.d_theta_deg:g}°, dbeta = {model.d_beta:g}"
        )

    fig = go.Figure(data=broadening_traces(model, n_points))
    fig.update_layout(
        title=title,
        xaxis_title=X_AXIS_TITLE,
        yaxis_title=Y_AXIS_TITLE,
        height=height,
        width=width,
        template="simple_white",
        legend=dict(
            yanchor="bottom",
            y=0.12,
            xanchor="right",
            x=0.88,
            bordercolor="black",
            borderwidth=1,
        ),
    )
    fig.update_xaxes(range=[0, 180])
    fig.update_yaxes(rangemode="tozero")

    logger.debug(f"Built broadening figure for {model!r}")
    return fig


def save_figure(fig: "go.Figure", path: str) -> None:
    """
    Write a figure to HTML, or to a static image for other suffixes.

    Static images (png, pdf, svg) need the kaleido package.
    """
    _require_plotly()

    if str(path).lower().endswith((".html", ".htm")):
        fig.write_html(path)
    else:
        fig.write_image(path)

    logger.info(f"Saved figure to {path}")
