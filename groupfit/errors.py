"""
Error classifications for grouped model fitting.

MalformedInput fails the whole grouping step. DegenerateGroup and
NumericInstability are local to a single group's fit and always carry the
group key so the offending subset of input rows can be located.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple


class GroupFitError(Exception):
    """Base class for every error raised by the fitting pipeline."""

    kind = "group_fit_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class MalformedInput(GroupFitError):
    """A required column is missing, contains nulls, or has the wrong type."""

    kind = "malformed_input"

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        bad_columns: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.missing_columns = missing_columns or []
        self.bad_columns = bad_columns or {}


class GroupError(GroupFitError):
    """A failure scoped to one group; other groups are unaffected."""

    def __init__(self, message: str, key: Tuple[Any, ...], **kwargs):
        super().__init__(message, **kwargs)
        self.key = tuple(key)

    def __str__(self) -> str:
        return f"{self.message} (group={self.key!r})"


class DegenerateGroup(GroupError):
    """Too few distinct predictor values (or observations) to estimate the model."""

    kind = "degenerate_group"

    def __init__(self, message: str, key: Tuple[Any, ...], n_obs: int = 0, n_distinct: int = 0, **kwargs):
        super().__init__(message, key, **kwargs)
        self.n_obs = n_obs
        self.n_distinct = n_distinct


class NumericInstability(GroupError):
    """The design matrix is near-singular even though the predictor nominally varies."""

    kind = "numeric_instability"

    def __init__(self, message: str, key: Tuple[Any, ...], condition_number: Optional[float] = None, **kwargs):
        super().__init__(message, key, **kwargs)
        self.condition_number = condition_number
