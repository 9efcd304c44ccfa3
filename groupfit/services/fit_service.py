"""
Grouped regression service.

Bridges request models to the fitting pipeline and applies the optional
filter/sort query to the resulting coefficient table.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pandas as pd

from groupfit.charts.coefficient_plot import render_png
from groupfit.engine.grouper import Rows
from groupfit.engine.pipeline import PipelineResult, run_pipeline
from groupfit.engine.tables import filter_coefficients, order_by_estimate
from groupfit.errors import MalformedInput
from groupfit.models.fits import FitRequest, FitResponse, PipelineOptions, PlotRequest, TableQuery


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    out = df.copy()
    for c in out.columns:
        if isinstance(out[c].dtype, pd.CategoricalDtype):
            out[c] = out[c].astype(object)
    return out.to_dict(orient="records")


def axis_category(options: PipelineOptions) -> str:
    """Key column placed on the plot axis: country when grouped by it, else the first key."""
    return "country" if "country" in options.keys else options.keys[0]


def apply_query(coefficients: pd.DataFrame, query: TableQuery, category: str = "country") -> pd.DataFrame:
    """Filter by continent/term, then optionally sort and re-level the *category* axis."""
    if query.continent is not None and "continent" not in coefficients.columns:
        raise MalformedInput("continent filter requires a continent key column", missing_columns=["continent"])
    table = filter_coefficients(coefficients, continent=query.continent, term=query.term)
    if query.sort != "none":
        table = order_by_estimate(table, descending=query.sort == "desc", category=category)
    return table


def fit_table(data: Rows, options: PipelineOptions, query: TableQuery) -> Tuple[PipelineResult, pd.DataFrame]:
    result = run_pipeline(data, options)
    return result, apply_query(result.coefficients, query, category=axis_category(options))


def fit_response(data: Rows, options: PipelineOptions, query: TableQuery) -> FitResponse:
    result, table = fit_table(data, options, query)
    return FitResponse(
        n_groups=result.n_groups,
        coefficients=_records(table),
        summaries=_records(result.summaries),
        failures=result.failures,
    )


def run_fits(request: FitRequest) -> FitResponse:
    return fit_response(request.rows, request.options, request.query)


def plot_fits(request: PlotRequest) -> bytes:
    """
    Fit, apply the query and render the coefficient plot as PNG.

    A plot needs one row per country, so without an explicit term filter the
    predictor term is used.
    """
    query = request.query
    if query.term is None:
        query = query.model_copy(update={"term": request.options.predictor})
    _, table = fit_table(request.rows, request.options, query)
    return render_png(table, request.plot, category=axis_category(request.options))
