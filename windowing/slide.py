"""
PRISM Slide - element-count windows.

One output per observation (size stability). The window for position i
covers positions max(0, i - before) .. min(n - 1, i + after).

Usage:
    from windowing import slide, slide_float, UNBOUNDED

    slide([1, 2, 3], list, before=1)            # [[1], [1, 2], [2, 3]]
    slide_float(values, np.mean, before=4, complete=True)
    slide_float(values, sum, before=UNBOUNDED)  # cumulative sum

    # N-ary: one slice per sequence
    pslide([x, y], lambda a, b: np.corrcoef(a, b)[0, 1], before=20)
"""

from typing import Any, Callable, List, Optional, Sequence

import polars as pl

from windowing.assemble import (
    as_list, as_vector, bind_cols, bind_rows, check_align, check_labels, check_name_repair, check_ptype,
)
from windowing.boundaries import compute_bounds
from windowing.hop import apply_windows
from windowing.sequences import as_sequence, labels_of, recycle_all, size_of
from windowing.validation import check_complete, check_function


def _slide_impl(
    xs: Sequence[Any], f: Callable, args: tuple, kwargs: dict, before: Any, after: Any, complete: bool,
    labels: Optional[Sequence[Any]] = None,
) -> List[Any]:
    check_function(f)
    complete = check_complete(complete)
    xs = recycle_all(xs)
    bounds = compute_bounds(size_of(xs[0]), before=before, after=after)
    check_labels(labels, len(bounds))
    evaluate = bounds.evaluate_mask(complete) if complete else None
    return apply_windows(xs, bounds.starts, bounds.stops, f, args, kwargs, evaluate=evaluate)


# =============================================================================
# SLIDE
# =============================================================================

def slide(x: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False, **kwargs) -> List[Any]:
    """
    Apply `f` to a sliding window around every element of `x`.

    Args:
        x: Sequence (DataFrames slide row-wise)
        f: Function applied to each window slice, plus *args/**kwargs
        before: Elements before the current one (UNBOUNDED for all); negative shifts forward
        after: Elements after the current one (UNBOUNDED for all); negative shifts backward
        complete: If True, windows reaching outside x are not evaluated and yield None

    Returns:
        List of len(x) raw results
    """
    return as_list(_slide_impl([as_sequence(x)], f, args, kwargs, before, after, complete))


def slide_vec(
    x: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    ptype: Any = None, **kwargs,
) -> pl.Series:
    """Type-stable slide(): one value per window, coerced to ptype (or the inferred common type)."""
    check_ptype(ptype)
    return as_vector(_slide_impl([as_sequence(x)], f, args, kwargs, before, after, complete), ptype)


def slide_rows(
    x: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    """Row-bind the results of slide(). Identity labels default to the pandas index of x."""
    align = check_align(align)
    x = as_sequence(x)
    raw = _slide_impl([x], f, args, kwargs, before, after, complete, labels=labels)
    labels = labels if labels is not None else labels_of(x)
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def slide_cols(
    x: Any, f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    name_repair: Optional[str] = None, **kwargs,
) -> pl.DataFrame:
    """Column-bind the results of slide()."""
    name_repair = check_name_repair(name_repair)
    raw = _slide_impl([as_sequence(x)], f, args, kwargs, before, after, complete)
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# PSLIDE (N-ary)
# =============================================================================

def pslide(xs: Sequence[Any], f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False, **kwargs) -> List[Any]:
    """
    slide() over several sequences at once.

    The sequences are recycled to a common size; `f` receives one slice per
    sequence, in input order.
    """
    return as_list(_slide_impl(xs, f, args, kwargs, before, after, complete))


def pslide_vec(
    xs: Sequence[Any], f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    ptype: Any = None, **kwargs,
) -> pl.Series:
    check_ptype(ptype)
    return as_vector(_slide_impl(xs, f, args, kwargs, before, after, complete), ptype)


def pslide_rows(
    xs: Sequence[Any], f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    align = check_align(align)
    xs = recycle_all(xs)
    raw = _slide_impl(xs, f, args, kwargs, before, after, complete, labels=labels)
    labels = labels if labels is not None else labels_of(xs[0])
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def pslide_cols(
    xs: Sequence[Any], f: Callable, *args, before: Any = 0, after: Any = 0, complete: bool = False,
    name_repair: Optional[str] = None, **kwargs,
) -> pl.DataFrame:
    name_repair = check_name_repair(name_repair)
    raw = _slide_impl(xs, f, args, kwargs, before, after, complete)
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# TYPED WRAPPERS
# =============================================================================

def slide_float(x: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_vec(..., ptype=float)."""
    return slide_vec(x, f, *args, ptype=float, **kwargs)


def slide_int(x: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_vec(..., ptype=int)."""
    return slide_vec(x, f, *args, ptype=int, **kwargs)


def slide_bool(x: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_vec(..., ptype=bool)."""
    return slide_vec(x, f, *args, ptype=bool, **kwargs)


def slide_str(x: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_vec(..., ptype=str)."""
    return slide_vec(x, f, *args, ptype=str, **kwargs)


def pslide_float(xs: Sequence[Any], f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_vec(..., ptype=float)."""
    return pslide_vec(xs, f, *args, ptype=float, **kwargs)


def pslide_int(xs: Sequence[Any], f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_vec(..., ptype=int)."""
    return pslide_vec(xs, f, *args, ptype=int, **kwargs)


def pslide_bool(xs: Sequence[Any], f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_vec(..., ptype=bool)."""
    return pslide_vec(xs, f, *args, ptype=bool, **kwargs)


def pslide_str(xs: Sequence[Any], f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_vec(..., ptype=str)."""
    return pslide_vec(xs, f, *args, ptype=str, **kwargs)
