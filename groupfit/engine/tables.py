from __future__ import annotations

from typing import Optional

import pandas as pd


def filter_coefficients(
    df: pd.DataFrame,
    continent: Optional[str] = None,
    term: Optional[str] = None,
) -> pd.DataFrame:
    """Rows matching every filter given; ``None`` means no filter on that column."""
    mask = pd.Series(True, index=df.index)
    if continent is not None:
        mask &= df["continent"] == continent
    if term is not None:
        mask &= df["term"] == term
    return df.loc[mask].reset_index(drop=True)


def order_by_estimate(
    df: pd.DataFrame,
    descending: bool = True,
    category: str = "country",
) -> pd.DataFrame:
    """
    Sort by estimate and re-level *category* as an ordered categorical in that order.

    Only row order and the category levels change; numeric fields are untouched.
    Expects at most one row per category value (filter to a single term first).
    """
    out = df.sort_values("estimate", ascending=not descending, kind="mergesort").reset_index(drop=True)
    levels = pd.unique(out[category].astype(object))
    out[category] = pd.Categorical(out[category].astype(object), categories=levels, ordered=True)
    return out
