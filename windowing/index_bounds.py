"""
PRISM Index Boundary Translator - irregular, duration-aware windows.

The Problem:
    "3 days back" is not "3 observations back" when observations are irregular.
    A window must be defined in index space, then mapped back to positions.

The Solution:
    For each position i:

        Lo(i) = index[i] - before        (UNBOUNDED -> -inf)
        Hi(i) = index[i] + after         (UNBOUNDED -> +inf)

        start(i) = smallest p with index[p] >= Lo(i)
        stop(i)  = largest  p with index[p] <= Hi(i)

    index, Lo and Hi are all non-decreasing in i, so both bounds come out of
    ONE forward sweep with two pointers that never move backwards: O(n) total.

    Inclusive comparisons keep duplicate index values together - a tie is
    never split across a window boundary.

Completeness is decided in value space: Lo(i) >= index[0] and Hi(i) <= index[-1].

The sweep assumes before/after are constant for the whole call. Arbitrary
start/stop values (hop_index) fall back to a binary search per window.
"""

import logging
import numbers
from typing import Any

import numpy as np
import pandas as pd

from windowing.boundaries import WindowBounds
from windowing.errors import SizeMismatchError, WindowSpecError
from windowing.validation import check_index, check_range, is_unbounded

logger = logging.getLogger(__name__)


def _shift(idx: pd.Index, delta: Any, sign: int, name: str) -> pd.Index:
    """index - before (sign=-1) or index + after (sign=+1), as a validated range."""
    # integer 0 is the default for every index type, datetime-like included
    if isinstance(delta, numbers.Integral) and not isinstance(delta, bool) and delta == 0:
        return idx
    try:
        shifted = idx - delta if sign < 0 else idx + delta
    except (TypeError, ValueError, OverflowError) as e:
        raise WindowSpecError(
            f"`{name}` ({delta!r}) can't be combined with an index of type {idx.dtype}: {e}"
        ) from e
    shifted = pd.Index(shifted)
    check_range(shifted, name)
    return shifted


def compute_index_bounds(index: Any, before: Any = 0, after: Any = 0, size: int = None) -> WindowBounds:
    """
    Translate index-space before/after into boundary pairs.

    Args:
        index: Non-decreasing index, one value per observation
        before: Index-space delta subtracted from each index value, or UNBOUNDED
        after: Index-space delta added to each index value, or UNBOUNDED
        size: Size of the paired sequence (defaults to len(index))

    Returns:
        WindowBounds with one pair per observation

    Example:
        >>> bounds = compute_index_bounds([0, 1, 5, 6], before=2)
        >>> bounds.starts.tolist(), bounds.stops.tolist()
        ([0, 0, 2, 2], [0, 1, 2, 3])
    """
    if size is None:
        size = len(index)
    idx = check_index(index, size)
    n = len(idx)

    lo = None if is_unbounded(before) else _shift(idx, before, -1, "before")
    hi = None if is_unbounded(after) else _shift(idx, after, +1, "after")

    values = idx.to_numpy()
    lo_values = None if lo is None else lo.to_numpy()
    hi_values = None if hi is None else hi.to_numpy()

    starts = np.zeros(n, dtype=np.int64)
    stops = np.full(n, n - 1, dtype=np.int64)

    p = 0  # first position not below Lo(i)
    q = 0  # first position above Hi(i)
    for i in range(n):
        if lo_values is not None:
            while p < n and values[p] < lo_values[i]:
                p += 1
            starts[i] = p
        if hi_values is not None:
            while q < n and values[q] <= hi_values[i]:
                q += 1
            stops[i] = q - 1

    complete = np.ones(n, dtype=bool)
    if n:
        if lo is not None:
            complete &= np.asarray(lo >= values[0], dtype=bool)
        if hi is not None:
            complete &= np.asarray(hi <= values[-1], dtype=bool)

    logger.debug(f"Index bounds: {n} windows, {int(complete.sum())} complete")
    return WindowBounds(starts=starts, stops=stops, complete=complete)


def locate_ranges(index: Any, starts: Any, stops: Any, size: int = None) -> WindowBounds:
    """
    Map arbitrary index-valued starts/stops to boundary pairs.

    start(k) = smallest p with index[p] >= starts[k]
    stop(k)  = largest  p with index[p] <= stops[k]

    starts/stops need not be ordered, so each is located by binary search.
    Every pair is considered complete.
    """
    if size is None:
        size = len(index)
    idx = check_index(index, size)

    lo = pd.Index(starts if hasattr(starts, '__len__') and not isinstance(starts, str) else [starts])
    hi = pd.Index(stops if hasattr(stops, '__len__') and not isinstance(stops, str) else [stops])
    for name, bound in (("starts", lo), ("stops", hi)):
        missing = np.flatnonzero(np.asarray(bound.isna()))
        if len(missing):
            raise WindowSpecError(f"`{name}` can't contain missing values, found one at position {missing[0]}")

    if len(lo) != len(hi) and 1 not in (len(lo), len(hi)):
        raise SizeMismatchError(f"Can't recycle `starts` (size {len(lo)}) and `stops` (size {len(hi)})")
    if isinstance(idx, pd.DatetimeIndex):
        try:
            lo, hi = pd.DatetimeIndex(lo), pd.DatetimeIndex(hi)
        except (TypeError, ValueError) as e:
            raise WindowSpecError(f"`starts`/`stops` must be datetime-like for a datetime index: {e}") from e

    length = max(len(lo), len(hi)) if min(len(lo), len(hi)) else 0
    if len(lo) == 1:
        lo = lo.repeat(length)
    if len(hi) == 1:
        hi = hi.repeat(length)

    try:
        out_starts = idx.searchsorted(lo, side='left')
        out_stops = idx.searchsorted(hi, side='right') - 1
    except TypeError as e:
        raise WindowSpecError(f"`starts`/`stops` are not comparable with the index: {e}") from e

    return WindowBounds(
        starts=np.asarray(out_starts, dtype=np.int64),
        stops=np.asarray(out_stops, dtype=np.int64),
        complete=np.ones(length, dtype=bool),
    )
