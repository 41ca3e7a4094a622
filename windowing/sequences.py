"""
Sequence helpers shared by every window family.

A "sequence" is anything with an ordered first axis: list, tuple, range,
numpy array, polars Series/DataFrame, pandas Series/DataFrame. DataFrames are
sliced row-wise. Strings and non-sized objects are a sequence of size one.
"""

from typing import Any, List, Sequence

import numpy as np
import pandas as pd
import polars as pl

from windowing.errors import SizeMismatchError


def as_sequence(x: Any) -> Any:
    """Wrap scalars (including str/bytes) into a size-1 list."""
    if isinstance(x, (str, bytes)) or not hasattr(x, '__len__'):
        return [x]
    if isinstance(x, np.ndarray) and x.ndim == 0:
        return x.reshape(1)
    return x


def size_of(x: Any) -> int:
    """Number of observations along the first axis."""
    if isinstance(x, (pl.DataFrame, pd.DataFrame)):
        return x.shape[0]
    return len(x)


def slice_window(x: Any, start: int, stop: int) -> Any:
    """
    Inclusive slice x[start..stop], already clamped.

    Returns an empty slice of the same type when start > stop.
    """
    length = max(0, stop - start + 1)
    if isinstance(x, (pl.Series, pl.DataFrame)):
        return x.slice(start, length)
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return x.iloc[start:start + length]
    return x[start:start + length]


def recycle_size(sizes: Sequence[int], what: str = "inputs") -> int:
    """
    Common size under recycling rules: size 1 recycles to anything.

    Raises:
        SizeMismatchError: if two sizes other than 1 disagree
    """
    common = 1
    for k, size in enumerate(sizes):
        if size == 1:
            continue
        if common == 1:
            common = size
        elif size != common:
            raise SizeMismatchError(
                f"Can't recycle {what}: element {k} has size {size}, expected {common} or 1"
            )
    if not sizes:
        return 0
    return common


def recycle(x: Any, size: int) -> Any:
    """Repeat a size-1 sequence to `size` observations."""
    n = size_of(x)
    if n == size:
        return x
    if isinstance(x, (pl.Series, pl.DataFrame)):
        return pl.concat([x] * size) if size else x.clear()
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return pd.concat([x] * size) if size else x.iloc[0:0]
    if isinstance(x, np.ndarray):
        return np.repeat(x, size, axis=0)
    return list(x) * size


def recycle_all(xs: Sequence[Any]) -> List[Any]:
    """Normalize and recycle an ordered collection of sequences to a common size."""
    if isinstance(xs, (str, bytes)) or not hasattr(xs, '__iter__'):
        raise TypeError(f"Expected an ordered collection of sequences, got {type(xs).__name__}")
    xs = [as_sequence(x) for x in xs]
    if not xs:
        raise SizeMismatchError("At least one sequence is required")
    size = recycle_size([size_of(x) for x in xs], what="sequences")
    return [recycle(x, size) for x in xs]


def labels_of(x: Any) -> Any:
    """Row labels carried by the sequence itself (pandas only), else None."""
    if isinstance(x, (pd.Series, pd.DataFrame)):
        return list(x.index)
    return None
