from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm

from groupfit.config import settings
from groupfit.engine.grouper import DEFAULT_PREDICTOR, DEFAULT_RESPONSE
from groupfit.errors import DegenerateGroup, NumericInstability
from groupfit.logging import get_logger

logger = get_logger(__name__)

# statsmodels names the column added by add_constant "const"
CONST_COLUMN = "const"
INTERCEPT_TERM = "(Intercept)"

# Predictor spread below this many ulps of its magnitude is treated as constant
_SPREAD_ULPS = 64


@dataclass(frozen=True)
class FittedModel:
    """A fitted OLS model owned by exactly one group."""

    key: Tuple[Any, ...]
    results: Any  # statsmodels RegressionResultsWrapper
    predictor: str
    response: str

    @property
    def nobs(self) -> int:
        return int(self.results.nobs)

    @property
    def df_resid(self) -> float:
        return float(self.results.df_resid)

    @property
    def terms(self) -> Tuple[str, ...]:
        return tuple(INTERCEPT_TERM if n == CONST_COLUMN else n for n in self.results.params.index)


def fit_group(
    rows: pd.DataFrame,
    key: Tuple[Any, ...],
    predictor: str = DEFAULT_PREDICTOR,
    response: str = DEFAULT_RESPONSE,
    max_condition_number: float | None = None,
) -> FittedModel:
    """
    Fit ``response ~ 1 + predictor`` by OLS on one group's rows.

    Raises DegenerateGroup when the predictor has fewer than 2 distinct values
    or no residual degrees of freedom remain, and NumericInstability when the
    design matrix is near-singular or the fit yields non-finite statistics.
    """
    limit = settings.max_condition_number if max_condition_number is None else max_condition_number

    x = rows[predictor].to_numpy(dtype=float)
    y = rows[response].to_numpy(dtype=float)
    n = x.size
    n_distinct = int(np.unique(x).size)

    if n_distinct < 2:
        raise DegenerateGroup(
            f"Need at least 2 distinct {predictor} values, found {n_distinct}",
            key,
            n_obs=n,
            n_distinct=n_distinct,
        )
    if n <= 2:
        raise DegenerateGroup(
            f"Need at least 3 observations to estimate standard errors, found {n}",
            key,
            n_obs=n,
            n_distinct=n_distinct,
        )

    scale = max(1.0, float(np.abs(x).max()))
    spread = float(np.ptp(x))
    if spread <= _SPREAD_ULPS * np.finfo(float).eps * scale:
        raise NumericInstability(
            f"{predictor} values differ only by rounding (spread={spread!r})",
            key,
        )

    X = sm.add_constant(pd.DataFrame({predictor: x}), has_constant="add")
    cond = float(np.linalg.cond(X.to_numpy()))
    if not np.isfinite(cond) or cond > limit:
        raise NumericInstability(
            f"Design matrix is near-singular (condition number {cond:.3g} > {limit:.3g})",
            key,
            condition_number=cond,
        )

    with np.errstate(divide="ignore", invalid="ignore"):
        results = sm.OLS(y, X).fit()
        estimates_ok = all(
            np.isfinite(np.asarray(v, dtype=float)).all() for v in (results.params, results.bse)
        )
        tests_ok = all(
            np.isfinite(np.asarray(v, dtype=float)).all() for v in (results.tvalues, results.pvalues)
        )
    if not estimates_ok:
        raise NumericInstability(
            "Fit produced non-finite estimates or standard errors",
            key,
            condition_number=cond,
        )
    if not tests_ok:
        raise NumericInstability(
            f"Fit produced a non-finite t statistic or p-value ({response} has no residual variation)",
            key,
            condition_number=cond,
        )

    logger.debug("group_fitted", key=list(key), nobs=n, condition_number=cond)
    return FittedModel(key=tuple(key), results=results, predictor=predictor, response=response)
