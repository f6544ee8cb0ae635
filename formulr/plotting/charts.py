"""Exploratory charts for formulation datasets.

Every function validates its column arguments, draws one Matplotlib figure
and returns it without saving or showing it. Callers own the figure and
should ``plt.close`` it when done.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from ..data import numeric_column, require_columns
from ..schema import COLUMNS, DEFAULTS
from .style import (
    EDGE_COLOR,
    FILL_COLORS,
    LIMIT_COLOR,
    LINE_COLOR,
    POINT_COLOR,
    STYLE,
    clean_axis,
    new_figure,
    set_axis_labels,
)

CONTROL_SIGMA = 3.0


def scatterplot(data: pd.DataFrame, x: str, y: str) -> Figure:
    """Plot ``y`` against ``x`` as a scatter of individual observations.

    Raises:
        MissingColumnError: If either column is absent.
    """
    require_columns(data, [x, y], purpose="scatterplot")
    points = data[[x, y]].dropna()

    fig, ax = new_figure()
    ax.scatter(
        points[x],
        points[y],
        s=STYLE.SCATTER_SIZE,
        color=POINT_COLOR,
        alpha=STYLE.ALPHA_POINT,
    )
    set_axis_labels(ax, x=x, y=y, title="Scatterplot")
    clean_axis(ax, grid_axis="both")
    return fig


def histogram(data: pd.DataFrame, x: str, bins: int = DEFAULTS.bins) -> Figure:
    """Plot the distribution of one numeric column.

    Args:
        data (pandas.DataFrame): Formulation dataset.
        x (str): Numeric column to bin.
        bins (int, optional): Number of equal-width bins. Defaults to ``20``.

    Returns:
        matplotlib.figure.Figure: Histogram with a ``"Frequency"`` y-axis.

    Raises:
        MissingColumnError: If ``x`` is absent.
        NonNumericColumnError: If ``x`` is not numeric.
        ValueError: If ``bins`` is not a positive integer.
    """
    if isinstance(bins, bool) or not isinstance(bins, (int, np.integer)) or bins < 1:
        raise ValueError(f"bins must be a positive integer, got {bins!r}.")
    values = numeric_column(data, x, min_obs=1, purpose="histogram")

    fig, ax = new_figure()
    ax.hist(
        values.to_numpy(dtype=float),
        bins=int(bins),
        color=FILL_COLORS["histogram"],
        edgecolor=EDGE_COLOR,
    )
    set_axis_labels(ax, x=x, y="Frequency", title="Histogram")
    clean_axis(ax, grid_axis="y")
    return fig


def _grouped_boxplot(
    data: pd.DataFrame, x: str, y: str, *, fill: str, title: str, purpose: str
) -> Figure:
    """Draw one box per level of ``x``, ordered by label."""
    require_columns(data, [x, y], purpose=purpose)
    numeric_column(data, y, purpose=purpose)
    frame = data[[x, y]].dropna()
    labels = frame[x].to_numpy()
    values = frame[y].to_numpy(dtype=float)

    levels = sorted(pd.unique(labels), key=str)
    grouped = [values[labels == level] for level in levels]
    positions = np.arange(1, len(levels) + 1)

    fig, ax = new_figure()
    if levels:
        ax.boxplot(
            grouped,
            positions=positions,
            patch_artist=True,
            boxprops={"facecolor": fill, "edgecolor": EDGE_COLOR, "linewidth": 1.0},
            medianprops={"color": EDGE_COLOR, "linewidth": STYLE.LINEWIDTH},
            whiskerprops={"color": EDGE_COLOR, "linewidth": 1.0},
            capprops={"color": EDGE_COLOR, "linewidth": 1.0},
            flierprops={"markeredgecolor": EDGE_COLOR},
        )
        ax.set_xticks(positions, labels=[str(level) for level in levels])
    set_axis_labels(ax, x=x, y=y, title=title)
    clean_axis(ax, grid_axis="y", nbins_x=None)
    return fig


def boxplot(data: pd.DataFrame, x: str, y: str) -> Figure:
    """Compare the distribution of ``y`` across the groups in ``x``.

    Raises:
        MissingColumnError: If either column is absent.
        NonNumericColumnError: If ``y`` is not numeric.
    """
    return _grouped_boxplot(
        data, x, y, fill=FILL_COLORS["boxplot"], title="Boxplot", purpose="boxplot"
    )


def compare_distributions(data: pd.DataFrame, group_var: str, response_var: str) -> Figure:
    """Box-plot comparison of ``response_var`` across ``group_var`` levels."""
    return _grouped_boxplot(
        data,
        group_var,
        response_var,
        fill=FILL_COLORS["comparison"],
        title="Boxplot Comparison",
        purpose="distribution comparison",
    )


def control_chart(
    data: pd.DataFrame,
    parameter: str,
    time: str = COLUMNS.time,
    limits: bool = False,
) -> Figure:
    """Plot a monitored parameter over time.

    Args:
        data (pandas.DataFrame): Formulation dataset.
        parameter (str): Numeric quality-control column for the y-axis.
        time (str, optional): Ordering column for the x-axis. Defaults to
            ``"Time"``.
        limits (bool, optional): Also draw the centre line at the mean and
            control limits at plus/minus three sample standard deviations.

    Returns:
        matplotlib.figure.Figure: Line chart titled ``"Control Chart"``.

    Raises:
        MissingColumnError: If ``parameter`` or ``time`` is absent.
        NonNumericColumnError: If ``parameter`` is not numeric.
    """
    require_columns(data, [parameter, time], purpose="control chart")
    numeric_column(data, parameter, purpose="control chart")
    series = data[[time, parameter]].dropna().sort_values(time, kind="mergesort")
    times = series[time].to_numpy()
    values = series[parameter].to_numpy(dtype=float)

    fig, ax = new_figure("wide")
    ax.plot(times, values, color=LINE_COLOR, linewidth=STYLE.LINEWIDTH)

    if limits and len(values) >= 2:
        centre = float(np.mean(values))
        sigma = float(np.std(values, ddof=1))
        ax.axhline(centre, color=LINE_COLOR, linewidth=STYLE.LINEWIDTH_THIN, linestyle="--")
        for bound in (centre - CONTROL_SIGMA * sigma, centre + CONTROL_SIGMA * sigma):
            ax.axhline(bound, color=LIMIT_COLOR, linewidth=STYLE.LINEWIDTH_THIN, linestyle=":")

    set_axis_labels(ax, x=time, y=parameter, title="Control Chart")
    clean_axis(ax, grid_axis="both")
    return fig
