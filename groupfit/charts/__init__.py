"""Coefficient plot rendering (matplotlib)."""

from .config import PlotConfig, ReferenceLine
from .coefficient_plot import render_coefficient_plot, render_png

__all__ = [
    "PlotConfig",
    "ReferenceLine",
    "render_coefficient_plot",
    "render_png",
]
