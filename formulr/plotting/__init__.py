"""
Plotting utilities for formulation datasets.

All chart functions accept the dataset plus column names and return a
Matplotlib ``Figure``. No statistics are computed here beyond what the chart
itself draws.

Modules:
    charts:
        Scatterplot, histogram, box plots and the time-ordered control chart.

    style:
        rcParams, axis cleanup and figure-saving helpers.
"""

from .charts import (
    boxplot,
    compare_distributions,
    control_chart,
    histogram,
    scatterplot,
)
from .style import save_figure, set_global_style

__all__ = [
    "boxplot",
    "compare_distributions",
    "control_chart",
    "histogram",
    "scatterplot",
    "save_figure",
    "set_global_style",
]
