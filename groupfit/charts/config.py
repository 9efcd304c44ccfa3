"""Declarative configuration handed to the coefficient plot renderer."""

from __future__ import annotations

from typing import Literal, Optional

import matplotlib
from matplotlib.colors import is_color_like
from pydantic import BaseModel, Field, field_validator


class ReferenceLine(BaseModel):
    value: float = 0.0
    color: str = "grey"
    style: Literal["solid", "dashed", "dashdot", "dotted"] = "dashed"

    @field_validator("color")
    @classmethod
    def _known_color(cls, v: str) -> str:
        if not is_color_like(v):
            raise ValueError(f"not a matplotlib colour: {v!r}")
        return v


class PlotConfig(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    x_label: str = "Estimate"
    y_label: str = ""
    show_legend: bool = False

    # "palette" cycles through the named matplotlib colormap
    color_mode: Literal["none", "by_category", "palette"] = "none"
    palette_name: str = "viridis"
    reference_line: Optional[ReferenceLine] = Field(default_factory=ReferenceLine)

    width: float = Field(7.0, gt=0)
    height: Optional[float] = Field(None, gt=0)
    dpi: int = Field(100, ge=10)

    @field_validator("palette_name")
    @classmethod
    def _known_palette(cls, v: str) -> str:
        if v not in matplotlib.colormaps:
            raise ValueError(f"unknown matplotlib colormap: {v!r}")
        return v
