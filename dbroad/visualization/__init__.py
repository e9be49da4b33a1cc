"""
Visualization of broadening curves.

This module provides a plotly figure of the total broadening and its
components, and a Jupyter widget for exploring the model parameters.

Optional Dependencies
---------------------
Plotting requires plotly, the explorer also ipywidgets:

    pip install dbroad[widgets]

Usage
-----
>>> from dbroad.visualization import plot_broadening
>>> fig = plot_broadening(DopplerBroadening(1.0, 0.5, d_theta_deg=0.1, d_beta=0.01))
>>> fig.show()
"""

from __future__ import annotations

# pyright: reportMissingImports=false

# Check for optional dependencies
HAS_PLOTLY = False
HAS_WIDGETS = False

try:
    import plotly

    HAS_PLOTLY = True
except ImportError:
    pass

try:
    import ipywidgets

    HAS_WIDGETS = HAS_PLOTLY
except ImportError:
    pass

# Public API (only if dependencies available)
__all__ = ["HAS_PLOTLY", "HAS_WIDGETS"]

if HAS_PLOTLY:
    from dbroad.visualization.plots import broadening_traces, plot_broadening, save_figure

    __all__.extend(["broadening_traces", "plot_broadening", "save_figure"])

if HAS_WIDGETS:
    from dbroad.visualization.widgets import BroadeningExplorer

    __all__.append("BroadeningExplorer")
