from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from groupfit.engine.fitter import CONST_COLUMN, INTERCEPT_TERM, FittedModel
from groupfit.models.fits import CoefficientRecord, ModelSummary

COEFFICIENT_COLUMNS = [
    "term",
    "estimate",
    "std_error",
    "statistic",
    "p_value",
    "conf_low",
    "conf_high",
]

SUMMARY_COLUMNS = [
    "nobs",
    "r_squared",
    "adj_r_squared",
    "sigma",
    "f_statistic",
    "f_pvalue",
    "df_model",
    "df_resid",
    "aic",
    "bic",
]


def _key_fields(fitted: FittedModel, key_names: Sequence[str]) -> Dict[str, str]:
    return {name: value for name, value in zip(key_names, fitted.key)}


def tidy(fitted: FittedModel, key_names: Sequence[str], conf_level: float = 0.95) -> List[CoefficientRecord]:
    """
    One record per model term, intercept first.

    Confidence bounds are estimate +/- t(df_resid) * std_error, the same
    convention as ``RegressionResults.conf_int``.
    """
    res = fitted.results
    t_crit = float(stats.t.ppf((1 + conf_level) / 2, df=res.df_resid))
    keys = _key_fields(fitted, key_names)

    order = [CONST_COLUMN] + [n for n in res.params.index if n != CONST_COLUMN]
    records: List[CoefficientRecord] = []
    for name in order:
        estimate = float(res.params[name])
        se = float(res.bse[name])
        records.append(
            CoefficientRecord(
                **keys,
                term=INTERCEPT_TERM if name == CONST_COLUMN else name,
                estimate=estimate,
                std_error=se,
                statistic=float(res.tvalues[name]),
                p_value=float(res.pvalues[name]),
                conf_low=estimate - t_crit * se,
                conf_high=estimate + t_crit * se,
            )
        )
    return records


def glance(fitted: FittedModel, key_names: Sequence[str]) -> ModelSummary:
    """Model-level fit statistics for one group."""
    res = fitted.results
    return ModelSummary(
        **_key_fields(fitted, key_names),
        nobs=int(res.nobs),
        r_squared=float(res.rsquared),
        adj_r_squared=float(res.rsquared_adj),
        sigma=float(np.sqrt(res.scale)),
        f_statistic=float(res.fvalue),
        f_pvalue=float(res.f_pvalue),
        df_model=float(res.df_model),
        df_resid=float(res.df_resid),
        aic=float(res.aic),
        bic=float(res.bic),
    )


def coefficients_frame(records: Iterable[CoefficientRecord], key_names: Sequence[str]) -> pd.DataFrame:
    """Flatten records into a table with the key columns first."""
    columns = list(key_names) + COEFFICIENT_COLUMNS
    rows = [r.model_dump() for r in records]
    return pd.DataFrame(rows, columns=columns)


def summaries_frame(summaries: Iterable[ModelSummary], key_names: Sequence[str]) -> pd.DataFrame:
    columns = list(key_names) + SUMMARY_COLUMNS
    return pd.DataFrame([s.model_dump() for s in summaries], columns=columns)
