"""Centralized plotting style, axis helpers, and save helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

OUTPUT_FORMATS: tuple[str, ...] = ("png", "pdf", "svg")
FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 11.0
    TITLE_FONTSIZE: float = 13.0
    LABEL_FONTSIZE: float = 11.0
    TICK_FONTSIZE: float = 10.0
    LEGEND_FONTSIZE: float = 10.0
    LINEWIDTH: float = 1.6
    LINEWIDTH_THIN: float = 1.0
    MARKERSIZE: float = 5.0
    SCATTER_SIZE: float = 24.0
    ALPHA_POINT: float = 0.8
    GRID_ALPHA: float = 0.20
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.2)
    FIGSIZE_WIDE: tuple[float, float] = (9.5, 4.2)


STYLE = StyleConfig()

FIG_SIZES: dict[str, tuple[float, float]] = {
    "single": STYLE.FIGSIZE_SINGLE,
    "wide": STYLE.FIGSIZE_WIDE,
}

FONT_SIZES = {
    "base": STYLE.BASE_FONTSIZE,
    "title": STYLE.TITLE_FONTSIZE,
    "axis_label": STYLE.LABEL_FONTSIZE,
    "tick": STYLE.TICK_FONTSIZE,
    "legend": STYLE.LEGEND_FONTSIZE,
}

FILL_COLORS = {
    "histogram": "skyblue",
    "boxplot": "lightgreen",
    "comparison": "lightblue",
}
EDGE_COLOR = "black"
LINE_COLOR = "black"
POINT_COLOR = "#2C4B7D"
LIMIT_COLOR = "#C13B2A"


def apply_global_style(font_scale: float = 1.0) -> None:
    """Apply global Matplotlib style scaled by ``font_scale``."""
    scale = float(font_scale)
    plt.rcParams.update(
        {
            "font.size": STYLE.BASE_FONTSIZE * scale,
            "axes.titlesize": STYLE.TITLE_FONTSIZE * scale,
            "axes.labelsize": STYLE.LABEL_FONTSIZE * scale,
            "xtick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "ytick.labelsize": STYLE.TICK_FONTSIZE * scale,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE * scale,
            "axes.titlepad": 8,
            "axes.labelpad": 6,
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "grid.alpha": STYLE.GRID_ALPHA,
            "grid.linestyle": ":",
            "grid.linewidth": 0.7,
            "legend.frameon": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "figure.dpi": 120,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )


def set_global_style() -> None:
    """Apply global plotting style once per process."""
    if not _STYLE_STATE["initialized"]:
        apply_global_style(font_scale=1.0)
        _STYLE_STATE["initialized"] = True


def fig_size(kind: str = "single") -> tuple[float, float]:
    """Return standardized figure size tuple for a named figure kind."""
    if kind not in FIG_SIZES:
        raise ValueError(f"Unknown figure kind '{kind}'. Expected one of {tuple(FIG_SIZES)}.")
    return FIG_SIZES[kind]


def new_figure(kind: str = "single") -> tuple[Figure, Axes]:
    """Create one styled figure with a single axes."""
    set_global_style()
    fig, ax = plt.subplots(figsize=fig_size(kind), constrained_layout=True)
    return fig, ax


def clean_axis(
    ax: Axes,
    *,
    grid_axis: str = "y",
    nbins_x: int | None = 6,
    nbins_y: int | None = 6,
) -> None:
    """Apply consistent ticks, grid, and spine formatting to one axis.

    Pass ``nbins_x=None`` for categorical x-axes so their tick positions are
    left alone.
    """
    ax.tick_params(axis="both", which="major", labelsize=FONT_SIZES["tick"], width=1.0)
    if nbins_x is not None:
        ax.xaxis.set_major_locator(MaxNLocator(nbins=nbins_x, min_n_ticks=4))
    if nbins_y is not None:
        ax.yaxis.set_major_locator(MaxNLocator(nbins=nbins_y, min_n_ticks=4))
    for side in ("left", "bottom"):
        ax.spines[side].set_linewidth(STYLE.LINEWIDTH_THIN)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(False)
    if grid_axis == "both":
        ax.grid(True, axis="both", alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)
    elif grid_axis in {"x", "y"}:
        ax.grid(
            True, axis=grid_axis, alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7
        )


def set_axis_labels(
    ax: Axes, x: str | None = None, y: str | None = None, title: str | None = None
) -> None:
    """Apply axis labels and title with project typography."""
    if x is not None:
        ax.set_xlabel(x, fontsize=FONT_SIZES["axis_label"], labelpad=6)
    if y is not None:
        ax.set_ylabel(y, fontsize=FONT_SIZES["axis_label"], labelpad=6)
    if title is not None:
        ax.set_title(title, fontsize=FONT_SIZES["title"])


def sanitize_filename(name: str) -> str:
    """Normalize a filename component into a stable, filesystem-safe token."""
    text = re.sub(r"\s+", "_", str(name).strip())
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"_+", "_", text).strip("._")
    return text or "figure"


def save_figure(
    fig: Figure,
    savepath_base: str | Path,
    formats: Sequence[str] = ("png",),
    dpi: int = FIGURE_DPI,
    *,
    bbox_inches: str = "tight",
    pad_inches: float = 0.12,
) -> Path:
    """Save a figure to one or more formats using one extensionless base path.

    Returns:
        Path: Path of the first format written.
    """
    unsupported = [ext for ext in formats if ext not in OUTPUT_FORMATS]
    if unsupported or not formats:
        raise ValueError(
            f"Unsupported formats {unsupported or list(formats)}. "
            f"Expected a subset of {OUTPUT_FORMATS}."
        )
    base = Path(savepath_base)
    base = base.with_name(sanitize_filename(base.name))
    base.parent.mkdir(parents=True, exist_ok=True)
    for ext in formats:
        target = base.with_suffix(f".{ext}")
        fig.savefig(
            str(target),
            dpi=dpi if ext == "png" else None,
            bbox_inches=bbox_inches,
            pad_inches=pad_inches,
        )
    return base.with_suffix(f".{formats[0]}")
