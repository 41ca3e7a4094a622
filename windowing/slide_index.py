"""
PRISM Slide Index - windows defined in index space.

Like slide(), but window membership comes from a secondary index paired
1:1 with x. Useful when "3 days back" must respect an irregular calendar:

    i = [Thu, Fri, Tue, Wed]          # day offsets 0, 1, 5, 6
    slide_index(x, i, f, before=2)    # Tue's window is {Tue} - Fri is 4 days back

Index restrictions (checked before anything runs):
    - same size as x (never recycled)
    - non-decreasing; duplicates allowed and always kept together
    - no missing values

before/after may be anything the index supports `-`/`+` with: numbers,
datetime.timedelta, numpy.timedelta64, pandas Timedelta / DateOffset, or
UNBOUNDED.
"""

from typing import Any, Callable, List, Optional, Sequence

import polars as pl

from windowing.assemble import (
    as_list, as_vector, bind_cols, bind_rows, check_align, check_labels, check_name_repair, check_ptype,
)
from windowing.hop import apply_windows
from windowing.index_bounds import compute_index_bounds
from windowing.sequences import as_sequence, labels_of, recycle_all, size_of
from windowing.validation import check_complete, check_function


def _slide_index_impl(
    xs: Sequence[Any], index: Any, f: Callable, args: tuple, kwargs: dict, before: Any, after: Any, complete: bool,
    labels: Optional[Sequence[Any]] = None,
) -> List[Any]:
    check_function(f)
    complete = check_complete(complete)
    xs = recycle_all(xs)
    bounds = compute_index_bounds(index, before=before, after=after, size=size_of(xs[0]))
    check_labels(labels, len(bounds))
    evaluate = bounds.evaluate_mask(complete) if complete else None
    return apply_windows(xs, bounds.starts, bounds.stops, f, args, kwargs, evaluate=evaluate)


# =============================================================================
# SLIDE INDEX
# =============================================================================

def slide_index(
    x: Any, index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False, **kwargs
) -> List[Any]:
    """
    Apply `f` to an index-defined window around every element of `x`.

    Args:
        x: Sequence (DataFrames slide row-wise)
        index: Non-decreasing index, same size as x
        f: Function applied to each window slice, plus *args/**kwargs
        before: Index-space lookback; window starts at index[i] - before
        after: Index-space lookahead; window stops at index[i] + after
        complete: If True, windows whose range leaves [index[0], index[-1]]
                  are not evaluated and yield None

    Returns:
        List of len(x) raw results
    """
    return as_list(_slide_index_impl([as_sequence(x)], index, f, args, kwargs, before, after, complete))


def slide_index_vec(
    x: Any, index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    ptype: Any = None, **kwargs,
) -> pl.Series:
    """Type-stable slide_index()."""
    check_ptype(ptype)
    return as_vector(_slide_index_impl([as_sequence(x)], index, f, args, kwargs, before, after, complete), ptype)


def slide_index_rows(
    x: Any, index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    """Row-bind the results of slide_index()."""
    align = check_align(align)
    x = as_sequence(x)
    raw = _slide_index_impl([x], index, f, args, kwargs, before, after, complete, labels=labels)
    labels = labels if labels is not None else labels_of(x)
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def slide_index_cols(
    x: Any, index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    name_repair: Optional[str] = None, **kwargs,
) -> pl.DataFrame:
    """Column-bind the results of slide_index()."""
    name_repair = check_name_repair(name_repair)
    raw = _slide_index_impl([as_sequence(x)], index, f, args, kwargs, before, after, complete)
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# PSLIDE INDEX (N-ary)
# =============================================================================

def pslide_index(
    xs: Sequence[Any], index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    **kwargs,
) -> List[Any]:
    """slide_index() over several sequences sharing one index."""
    return as_list(_slide_index_impl(xs, index, f, args, kwargs, before, after, complete))


def pslide_index_vec(
    xs: Sequence[Any], index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    ptype: Any = None, **kwargs,
) -> pl.Series:
    check_ptype(ptype)
    return as_vector(_slide_index_impl(xs, index, f, args, kwargs, before, after, complete), ptype)


def pslide_index_rows(
    xs: Sequence[Any], index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    align = check_align(align)
    xs = recycle_all(xs)
    raw = _slide_index_impl(xs, index, f, args, kwargs, before, after, complete, labels=labels)
    labels = labels if labels is not None else labels_of(xs[0])
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def pslide_index_cols(
    xs: Sequence[Any], index: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    name_repair: Optional[str] = None, **kwargs,
) -> pl.DataFrame:
    name_repair = check_name_repair(name_repair)
    raw = _slide_index_impl(xs, index, f, args, kwargs, before, after, complete)
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# TYPED WRAPPERS
# =============================================================================

def slide_index_float(x: Any, index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_index_vec(..., ptype=float)."""
    return slide_index_vec(x, index, f, *args, ptype=float, **kwargs)


def slide_index_int(x: Any, index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_index_vec(..., ptype=int)."""
    return slide_index_vec(x, index, f, *args, ptype=int, **kwargs)


def slide_index_bool(x: Any, index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_index_vec(..., ptype=bool)."""
    return slide_index_vec(x, index, f, *args, ptype=bool, **kwargs)


def slide_index_str(x: Any, index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_index_vec(..., ptype=str)."""
    return slide_index_vec(x, index, f, *args, ptype=str, **kwargs)


def pslide_index_float(xs: Sequence[Any], index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_index_vec(..., ptype=float)."""
    return pslide_index_vec(xs, index, f, *args, ptype=float, **kwargs)


def pslide_index_int(xs: Sequence[Any], index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_index_vec(..., ptype=int)."""
    return pslide_index_vec(xs, index, f, *args, ptype=int, **kwargs)


def pslide_index_bool(xs: Sequence[Any], index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_index_vec(..., ptype=bool)."""
    return pslide_index_vec(xs, index, f, *args, ptype=bool, **kwargs)


def pslide_index_str(xs: Sequence[Any], index: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_index_vec(..., ptype=str)."""
    return pslide_index_vec(xs, index, f, *args, ptype=str, **kwargs)
