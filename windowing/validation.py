"""
PRISM Windowing Input Validation
================================

Everything here runs BEFORE any window is evaluated.
No partial computation on invalid input.

Checks:
    - before/after element counts (int, integral float, or UNBOUNDED)
    - starts/stops position vectors (integer-like, no missing values)
    - index: no missing values, non-decreasing, same size as the sequence
    - user function is callable
"""

import math
import numbers
from typing import Any, Callable

import numpy as np
import pandas as pd
import polars as pl

from windowing.errors import (
    IndexOrderError,
    MissingIndexError,
    SizeMismatchError,
    WindowSpecError,
)

UNBOUNDED = math.inf


def is_unbounded(value: Any) -> bool:
    """True for the positive-infinity sentinel (math.inf, np.inf, float('inf'))."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value == math.inf


def check_function(f: Callable) -> Callable:
    if not callable(f):
        raise TypeError(f"`f` must be callable, got {type(f).__name__}")
    return f


def check_count(value: Any, name: str) -> Any:
    """
    Validate an element/block count for before/after.

    Returns an int, or UNBOUNDED.
    """
    if is_unbounded(value):
        return UNBOUNDED
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise WindowSpecError(f"`{name}` must be a whole number or UNBOUNDED, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if math.isnan(value) or math.isinf(value) or not float(value).is_integer():
        raise WindowSpecError(f"`{name}` must be a whole number or UNBOUNDED, got {value!r}")
    return int(value)


def check_positions(values: Any, name: str) -> np.ndarray:
    """Validate starts/stops: integer-like, no missing values."""
    if np.isscalar(values) or values is None:
        values = [values]
    arr = np.asarray(values, dtype=object).ravel()
    out = np.empty(len(arr), dtype=np.int64)
    for k, v in enumerate(arr):
        if v is None or isinstance(v, bool) or not isinstance(v, numbers.Real):
            raise WindowSpecError(f"`{name}` must contain integer positions, element {k} is {v!r}")
        if isinstance(v, numbers.Integral):
            out[k] = int(v)
            continue
        if math.isnan(v) or math.isinf(v) or not float(v).is_integer():
            raise WindowSpecError(f"`{name}` must contain integer positions, element {k} is {v!r}")
        out[k] = int(v)
    return out


def check_index(index: Any, size: int) -> pd.Index:
    """
    Validate an index against a sequence of `size` observations.

    Returns:
        pandas Index (DatetimeIndex for datetime-like input)

    Raises:
        SizeMismatchError: size(index) != size
        MissingIndexError: index contains None/NaN/NaT
        IndexOrderError: index is not non-decreasing
    """
    if isinstance(index, pl.Series):
        index = index.to_numpy()
    elif isinstance(index, (str, bytes)) or not hasattr(index, "__len__"):
        index = [index]
    idx = pd.Index(index)
    if idx.dtype == object and pd.api.types.infer_dtype(idx, skipna=True) in ("date", "datetime"):
        idx = pd.DatetimeIndex(idx)

    if len(idx) != size:
        raise SizeMismatchError(f"Index has size {len(idx)}, but the sequence has size {size}")

    missing = np.flatnonzero(np.asarray(idx.isna()))
    if len(missing):
        raise MissingIndexError(f"Index can't contain missing values, found one at position {missing[0]}")

    _check_non_decreasing(idx, "Index")
    return idx


def check_range(bound: pd.Index, name: str) -> None:
    """Validate a computed lower/upper range (index -/+ before/after)."""
    missing = np.flatnonzero(np.asarray(bound.isna()))
    if len(missing):
        raise WindowSpecError(f"Computed `{name}` range has a missing value at position {missing[0]}")
    try:
        _check_non_decreasing(bound, f"Computed `{name}` range")
    except IndexOrderError as e:
        raise WindowSpecError(str(e)) from e


def _check_non_decreasing(idx: pd.Index, what: str) -> None:
    if idx.is_monotonic_increasing:
        return
    values = idx.to_numpy()
    for k in range(1, len(values)):
        try:
            decreasing = values[k] < values[k - 1]
        except TypeError as e:
            raise IndexOrderError(f"{what} must hold comparable values: {e}") from e
        if decreasing:
            raise IndexOrderError(
                f"{what} must be non-decreasing: position {k} ({values[k]!r}) "
                f"is less than position {k - 1} ({values[k - 1]!r})"
            )
    # incomparable elements leave is_monotonic_increasing False
    raise IndexOrderError(f"{what} must be non-decreasing")


def check_complete(complete: Any) -> bool:
    if not isinstance(complete, (bool, np.bool_)):
        raise WindowSpecError(f"`complete` must be True or False, got {complete!r}")
    return bool(complete)
