from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Query

from groupfit.datasets.gapminder import load_gapminder_sample
from groupfit.models.fits import FitResponse, PipelineOptions, TableQuery
from groupfit.services.fit_service import fit_response

router = APIRouter()


@router.get("/gapminder/coefficients", response_model=FitResponse)
def gapminder_coefficients(
    continent: Optional[str] = Query(None),
    term: Optional[str] = Query(None),
    sort: Literal["none", "asc", "desc"] = Query("none"),
):
    """Per-country life expectancy trends for the embedded Gapminder sample."""
    query = TableQuery(continent=continent, term=term, sort=sort)
    return fit_response(load_gapminder_sample(), PipelineOptions(), query)
