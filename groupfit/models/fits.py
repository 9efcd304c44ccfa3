from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from groupfit.charts.config import PlotConfig


class CoefficientRecord(BaseModel):
    """One (group, term) row of the tidy coefficient table."""

    # Non-default key columns travel as extra fields
    model_config = ConfigDict(extra="allow")

    country: Optional[str] = None
    continent: Optional[str] = None
    term: str
    estimate: float
    std_error: float
    statistic: float
    p_value: float
    conf_low: float
    conf_high: float


class ModelSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    country: Optional[str] = None
    continent: Optional[str] = None
    nobs: int
    r_squared: float
    adj_r_squared: float
    sigma: float
    f_statistic: float
    f_pvalue: float
    df_model: float
    df_resid: float
    aic: float
    bic: float


class FitFailure(BaseModel):
    key: Dict[str, Any]
    kind: Literal["degenerate_group", "numeric_instability"]
    message: str


class PipelineOptions(BaseModel):
    keys: List[str] = Field(default_factory=lambda: ["country", "continent"], min_length=1)
    predictor: str = "year"
    response: str = "life_exp"
    conf_level: Optional[float] = Field(None, gt=0.0, lt=1.0)
    on_failure: Optional[Literal["skip", "raise"]] = None
    max_workers: Optional[int] = Field(None, ge=1)


class TableQuery(BaseModel):
    continent: Optional[str] = None
    term: Optional[str] = None
    sort: Literal["none", "asc", "desc"] = "none"


class FitRequest(BaseModel):
    rows: List[Dict[str, Any]]
    options: PipelineOptions = Field(default_factory=PipelineOptions)
    query: TableQuery = Field(default_factory=TableQuery)


class PlotRequest(FitRequest):
    plot: PlotConfig = Field(default_factory=PlotConfig)


class FitResponse(BaseModel):
    n_groups: int
    coefficients: List[Dict[str, Any]]
    summaries: List[Dict[str, Any]]
    failures: List[FitFailure] = Field(default_factory=list)
