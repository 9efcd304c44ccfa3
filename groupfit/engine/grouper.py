from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from groupfit.errors import MalformedInput
from groupfit.logging import get_logger

logger = get_logger(__name__)

DEFAULT_KEYS: Tuple[str, ...] = ("country", "continent")
DEFAULT_PREDICTOR = "year"
DEFAULT_RESPONSE = "life_exp"

Rows = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


@dataclass(frozen=True)
class Group:
    """One composite key plus the positions of its rows in the source dataset."""

    key: Tuple[Any, ...]
    positions: np.ndarray

    @property
    def size(self) -> int:
        return int(self.positions.size)

    def rows(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.iloc[self.positions]

    def key_dict(self, names: Sequence[str]) -> Dict[str, Any]:
        return dict(zip(names, self.key))


class GroupIndex:
    """All groups of a dataset laid out in a single arena.

    ``order`` is one permutation of row positions where every group's rows are
    contiguous; ``offsets[i]:offsets[i + 1]`` is group ``i``'s slice. Groups are
    numbered in order of first appearance and rows inside a group keep their
    original relative order.
    """

    def __init__(self, key_names: Sequence[str], keys: List[Tuple[Any, ...]], order: np.ndarray, offsets: np.ndarray):
        self.key_names = tuple(key_names)
        self.keys = keys
        self.order = order
        self.offsets = offsets

    def __len__(self) -> int:
        return len(self.keys)

    def __getitem__(self, i: int) -> Group:
        if i < 0:
            i += len(self)
        if not 0 <= i < len(self):
            raise IndexError(f"group index out of range: {i}")
        start, stop = self.offsets[i], self.offsets[i + 1]
        return Group(key=self.keys[i], positions=self.order[start:stop])

    def __iter__(self) -> Iterator[Group]:
        for i in range(len(self)):
            yield self[i]

    def key_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.keys, columns=list(self.key_names))


def as_frame(data: Rows) -> pd.DataFrame:
    """Accept a DataFrame as-is or build one from a sequence of row mappings."""
    if isinstance(data, pd.DataFrame):
        return data
    try:
        return pd.DataFrame.from_records(list(data))
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"Rows could not be read as a table: {e}") from e


def _is_text_column(s: pd.Series) -> bool:
    values = s.astype(object) if isinstance(s.dtype, pd.CategoricalDtype) else s
    return all(isinstance(v, str) for v in values)


def _is_number_column(s: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(s) and not pd.api.types.is_bool_dtype(s)


def validate_dataset(
    df: pd.DataFrame,
    keys: Sequence[str] = DEFAULT_KEYS,
    predictor: str = DEFAULT_PREDICTOR,
    response: str = DEFAULT_RESPONSE,
) -> None:
    """Raise MalformedInput unless every required column is present, complete and well typed."""
    required = list(keys) + [predictor, response]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise MalformedInput(
            f"Columns not found: {missing}",
            missing_columns=missing,
            context={"available": [str(c) for c in df.columns]},
        )

    bad: Dict[str, str] = {}
    for c in required:
        n_missing = int(df[c].isna().sum())
        if n_missing:
            bad[c] = f"{n_missing} missing values"
    for c in keys:
        if c not in bad and not _is_text_column(df[c]):
            bad[c] = f"expected text values, got {df[c].dtype}"
    for c in (predictor, response):
        if c in bad:
            continue
        if not _is_number_column(df[c]):
            bad[c] = f"expected numeric values, got {df[c].dtype}"
        elif not np.isfinite(df[c].to_numpy(dtype=float)).all():
            bad[c] = "contains non-finite values"

    if bad:
        raise MalformedInput(f"Invalid columns: {bad}", bad_columns=bad)


def group_dataset(
    data: Rows,
    keys: Sequence[str] = DEFAULT_KEYS,
    predictor: str = DEFAULT_PREDICTOR,
    response: str = DEFAULT_RESPONSE,
) -> GroupIndex:
    """Partition *data* by the composite *keys*, preserving first-encountered key order."""
    df = as_frame(data)
    validate_dataset(df, keys, predictor, response)

    seen: Dict[Tuple[Any, ...], int] = {}
    codes = np.empty(len(df), dtype=np.intp)
    columns = [df[k].astype(object).to_numpy() for k in keys]
    for i, key in enumerate(zip(*columns)):
        codes[i] = seen.setdefault(key, len(seen))

    order = np.argsort(codes, kind="stable")
    counts = np.bincount(codes, minlength=len(seen))
    offsets = np.concatenate(([0], np.cumsum(counts))).astype(np.intp)

    logger.debug("groups_built", n_rows=len(df), n_groups=len(seen), keys=list(keys))
    return GroupIndex(keys, list(seen), order, offsets)
