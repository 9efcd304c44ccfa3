from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from groupfit.errors import GroupError, GroupFitError, MalformedInput
from groupfit.models.fits import FitRequest, FitResponse, PlotRequest
from groupfit.services.fit_service import plot_fits, run_fits

router = APIRouter()


def _http_error(e: GroupFitError) -> HTTPException:
    if isinstance(e, GroupError):
        return HTTPException(
            status_code=400,
            detail={"error": e.kind, "message": e.message, "group": list(e.key)},
        )
    if isinstance(e, MalformedInput):
        return HTTPException(
            status_code=422,
            detail={
                "error": e.kind,
                "message": e.message,
                "missing_columns": e.missing_columns,
                "bad_columns": e.bad_columns,
            },
        )
    return HTTPException(status_code=400, detail={"error": e.kind, "message": e.message})


@router.post("", response_model=FitResponse)
def fit_groups(req: FitRequest):
    try:
        return run_fits(req)
    except GroupFitError as e:
        raise _http_error(e)


@router.post("/plot", response_class=Response)
def plot_groups(req: PlotRequest):
    try:
        png = plot_fits(req)
    except GroupFitError as e:
        raise _http_error(e)
    return Response(content=png, media_type="image/png")
