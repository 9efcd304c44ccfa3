from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from groupfit.config import settings
from groupfit.engine.fitter import FittedModel, fit_group
from groupfit.engine.grouper import Group, Rows, as_frame, group_dataset
from groupfit.engine.tidy import coefficients_frame, glance, summaries_frame, tidy
from groupfit.errors import GroupError
from groupfit.logging import get_logger
from groupfit.models.fits import FitFailure, PipelineOptions

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    n_groups: int
    coefficients: pd.DataFrame
    summaries: pd.DataFrame
    failures: List[FitFailure] = field(default_factory=list)
    models: List[FittedModel] = field(default_factory=list)


def _fit_one(df: pd.DataFrame, group: Group, options: PipelineOptions) -> Tuple[Optional[FittedModel], Optional[GroupError]]:
    try:
        fitted = fit_group(group.rows(df), group.key, options.predictor, options.response)
    except GroupError as e:
        return None, e
    return fitted, None


def run_pipeline(data: Rows, options: Optional[PipelineOptions] = None) -> PipelineResult:
    """
    Group -> fit -> tidy over a whole dataset.

    Groups are fitted independently (concurrently unless max_workers is 1) and
    collected back in group order. A group that cannot be fitted is either
    recorded as a failure ("skip") or re-raised ("raise"); MalformedInput
    always propagates.
    """
    options = options or PipelineOptions()
    conf_level = options.conf_level if options.conf_level is not None else settings.confidence_level
    on_failure = options.on_failure or settings.on_failure
    max_workers = options.max_workers if options.max_workers is not None else settings.max_workers

    df = as_frame(data)
    index = group_dataset(df, options.keys, options.predictor, options.response)
    groups = list(index)

    if max_workers == 1 or len(groups) <= 1:
        outcomes = [_fit_one(df, g, options) for g in groups]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            outcomes = list(executor.map(lambda g: _fit_one(df, g, options), groups))

    models: List[FittedModel] = []
    failures: List[FitFailure] = []
    for group, (fitted, error) in zip(groups, outcomes):
        if error is None:
            models.append(fitted)
            continue
        if on_failure == "raise":
            raise error
        logger.warning(
            "group_fit_skipped",
            key=list(group.key),
            kind=error.kind,
            reason=error.message,
        )
        failures.append(
            FitFailure(key=group.key_dict(index.key_names), kind=error.kind, message=error.message)
        )

    records = [r for m in models for r in tidy(m, index.key_names, conf_level)]
    result = PipelineResult(
        n_groups=len(groups),
        coefficients=coefficients_frame(records, index.key_names),
        summaries=summaries_frame((glance(m, index.key_names) for m in models), index.key_names),
        failures=failures,
        models=models,
    )
    logger.info(
        "pipeline_complete",
        n_groups=result.n_groups,
        n_fitted=len(models),
        n_failed=len(failures),
        n_records=len(result.coefficients),
    )
    return result
