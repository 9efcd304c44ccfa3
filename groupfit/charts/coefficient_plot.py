"""
Coefficient plot for the tidy coefficient table.

Each row is drawn as a point at its estimate with a horizontal bar spanning
[conf_low, conf_high]; rows are stacked along a categorical y axis. When the
category column is an ordered categorical its level order is used (first
level at the bottom), otherwise row order is kept.
"""

from __future__ import annotations

import io
from typing import List, Optional

import matplotlib
import numpy as np
import pandas as pd
from matplotlib.figure import Figure

from groupfit.charts.config import PlotConfig

_SINGLE_COLOR = "#333333"


def _row_order(table: pd.DataFrame, category: str) -> pd.DataFrame:
    col = table[category]
    if isinstance(col.dtype, pd.CategoricalDtype):
        return table.assign(_code=col.cat.codes).sort_values("_code", kind="mergesort").drop(columns="_code")
    return table


def _colors(n: int, config: PlotConfig) -> List:
    if config.color_mode == "none" or n == 0:
        return [_SINGLE_COLOR] * n
    if config.color_mode == "by_category":
        cmap = matplotlib.colormaps["tab10"]
        return [cmap(i % cmap.N) for i in range(n)]
    cmap = matplotlib.colormaps[config.palette_name]
    return [cmap(v) for v in np.linspace(0.0, 1.0, n)]


def render_coefficient_plot(
    table: pd.DataFrame,
    config: Optional[PlotConfig] = None,
    *,
    category: str = "country",
    fig: Optional[Figure] = None,
) -> Figure:
    """Draw *table* (one row per category value) on *fig* and return it.

    Parameters
    ----------
    table : pandas.DataFrame
        Must hold ``estimate``, ``conf_low``, ``conf_high`` and *category*.
    config : PlotConfig
        Titles, labels, colouring and the reference line.
    category : str
        Column placed on the y axis.
    fig : matplotlib.figure.Figure or None
        Figure to draw on (will be cleared); a new one is created if omitted.
    """
    config = config or PlotConfig()
    rows = _row_order(table, category)
    n = len(rows)

    if fig is None:
        height = config.height or max(2.5, 0.35 * n + 1.5)
        fig = Figure(figsize=(config.width, height), dpi=config.dpi)
    fig.clf()
    ax = fig.add_subplot(111)

    ys = np.arange(n)
    labels = [str(v) for v in rows[category]]
    est = rows["estimate"].to_numpy(dtype=float)
    low = rows["conf_low"].to_numpy(dtype=float)
    high = rows["conf_high"].to_numpy(dtype=float)

    for y, label, e, lo, hi, color in zip(ys, labels, est, low, high, _colors(n, config)):
        ax.errorbar(
            e,
            y,
            xerr=[[e - lo], [hi - e]],
            fmt="o",
            color=color,
            ecolor=color,
            elinewidth=1.5,
            markersize=5,
            label=label,
        )

    ref = config.reference_line
    if ref is not None:
        ax.axvline(ref.value, color=ref.color, linestyle=ref.style, linewidth=1)

    ax.set_yticks(ys)
    ax.set_yticklabels(labels)
    ax.set_xlabel(config.x_label)
    ax.set_ylabel(config.y_label)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    if config.title:
        fig.suptitle(config.title, fontweight="bold")
    if config.subtitle:
        ax.set_title(config.subtitle, fontsize="small", loc="left")
    if config.show_legend and config.color_mode != "none" and n:
        ax.legend(loc="best", fontsize="small", frameon=False)

    fig.tight_layout()
    return fig


def render_png(table: pd.DataFrame, config: Optional[PlotConfig] = None, *, category: str = "country") -> bytes:
    """Render the coefficient plot and return PNG bytes."""
    config = config or PlotConfig()
    fig = render_coefficient_plot(table, config, category=category)
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=config.dpi)
    return buf.getvalue()
