"""
PRISM Slide Period - one window per period block.

The index is cut into blocks of whole periods ("month", "2 weeks", ...) and
`f` is applied once per block, optionally reaching `before` blocks back and
`after` blocks forward. Output size is the number of blocks, NOT len(x).

    i = 5 days in late Aug 2019 + 5 days in late Nov 2019
    slide_period(x, i, 'month', len)    # [5, 5] - two blocks, not ten results

before/after count blocks that are present in the data; a month with no
observations is not a block.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

import polars as pl

from windowing.assemble import (
    as_list, as_vector, bind_cols, bind_rows, check_align, check_labels, check_name_repair, check_ptype,
)
from windowing.blocks import Block, compute_block_bounds
from windowing.hop import apply_windows
from windowing.sequences import as_sequence, recycle_all, size_of
from windowing.validation import check_complete, check_function


def _slide_period_impl(
    xs: Sequence[Any], index: Any, period: str, f: Callable, args: tuple, kwargs: dict,
    every: int, origin: Any, before: Any, after: Any, complete: bool,
    labels: Optional[Sequence[Any]] = None,
) -> Tuple[List[Any], List[Block]]:
    check_function(f)
    complete = check_complete(complete)
    xs = recycle_all(xs)
    bounds, blocks = compute_block_bounds(
        index, period, every=every, origin=origin, before=before, after=after, size=size_of(xs[0]),
    )
    check_labels(labels, len(bounds))
    evaluate = bounds.evaluate_mask(complete) if complete else None
    return apply_windows(xs, bounds.starts, bounds.stops, f, args, kwargs, evaluate=evaluate), blocks


# =============================================================================
# SLIDE PERIOD
# =============================================================================

def slide_period(
    x: Any, index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False, **kwargs,
) -> List[Any]:
    """
    Apply `f` once per period block of `index`.

    Args:
        x: Sequence (DataFrames slide row-wise)
        index: Non-decreasing datetime-like index, same size as x
        period: year, quarter, month, week, day, hour, minute, second, millisecond
        f: Function applied to each window slice, plus *args/**kwargs
        every: Periods per block (every=2 with 'month' -> 2-month blocks)
        origin: Where period counting starts (config period.origin, 1970-01-01)
        before: Blocks before the current one (UNBOUNDED for all)
        after: Blocks after the current one (UNBOUNDED for all)
        complete: If True, block windows reaching past the first/last block yield None

    Returns:
        List with one raw result per block
    """
    raw, _ = _slide_period_impl(
        [as_sequence(x)], index, period, f, args, kwargs, every, origin, before, after, complete,
    )
    return as_list(raw)


def slide_period_vec(
    x: Any, index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False, ptype: Any = None, **kwargs,
) -> pl.Series:
    """Type-stable slide_period()."""
    check_ptype(ptype)
    raw, _ = _slide_period_impl(
        [as_sequence(x)], index, period, f, args, kwargs, every, origin, before, after, complete,
    )
    return as_vector(raw, ptype)


def slide_period_rows(
    x: Any, index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    """Row-bind the results of slide_period(). Identity labels default to each block's period start."""
    align = check_align(align)
    raw, blocks = _slide_period_impl(
        [as_sequence(x)], index, period, f, args, kwargs, every, origin, before, after, complete, labels=labels,
    )
    labels = labels if labels is not None else [b.period_start.to_pydatetime() for b in blocks]
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def slide_period_cols(
    x: Any, index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False, name_repair: Optional[str] = None, **kwargs,
) -> pl.DataFrame:
    """Column-bind the results of slide_period()."""
    name_repair = check_name_repair(name_repair)
    raw, _ = _slide_period_impl(
        [as_sequence(x)], index, period, f, args, kwargs, every, origin, before, after, complete,
    )
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# PSLIDE PERIOD (N-ary)
# =============================================================================

def pslide_period(
    xs: Sequence[Any], index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False, **kwargs,
) -> List[Any]:
    """slide_period() over several sequences sharing one index."""
    raw, _ = _slide_period_impl(xs, index, period, f, args, kwargs, every, origin, before, after, complete)
    return as_list(raw)


def pslide_period_vec(
    xs: Sequence[Any], index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False, ptype: Any = None, **kwargs,
) -> pl.Series:
    check_ptype(ptype)
    raw, _ = _slide_period_impl(xs, index, period, f, args, kwargs, every, origin, before, after, complete)
    return as_vector(raw, ptype)


def pslide_period_rows(
    xs: Sequence[Any], index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    align = check_align(align)
    raw, blocks = _slide_period_impl(
        xs, index, period, f, args, kwargs, every, origin, before, after, complete, labels=labels,
    )
    labels = labels if labels is not None else [b.period_start.to_pydatetime() for b in blocks]
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def pslide_period_cols(
    xs: Sequence[Any], index: Any, period: str, f: Callable, *args, every: int = 1, origin: Any = None,
    before: Any = 0, after: Any = 0, complete: bool = False, name_repair: Optional[str] = None, **kwargs,
) -> pl.DataFrame:
    name_repair = check_name_repair(name_repair)
    raw, _ = _slide_period_impl(xs, index, period, f, args, kwargs, every, origin, before, after, complete)
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# TYPED WRAPPERS
# =============================================================================

def slide_period_float(x: Any, index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_period_vec(..., ptype=float)."""
    return slide_period_vec(x, index, period, f, *args, ptype=float, **kwargs)


def slide_period_int(x: Any, index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_period_vec(..., ptype=int)."""
    return slide_period_vec(x, index, period, f, *args, ptype=int, **kwargs)


def slide_period_bool(x: Any, index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_period_vec(..., ptype=bool)."""
    return slide_period_vec(x, index, period, f, *args, ptype=bool, **kwargs)


def slide_period_str(x: Any, index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """slide_period_vec(..., ptype=str)."""
    return slide_period_vec(x, index, period, f, *args, ptype=str, **kwargs)


def pslide_period_float(xs: Sequence[Any], index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_period_vec(..., ptype=float)."""
    return pslide_period_vec(xs, index, period, f, *args, ptype=float, **kwargs)


def pslide_period_int(xs: Sequence[Any], index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_period_vec(..., ptype=int)."""
    return pslide_period_vec(xs, index, period, f, *args, ptype=int, **kwargs)


def pslide_period_bool(xs: Sequence[Any], index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_period_vec(..., ptype=bool)."""
    return pslide_period_vec(xs, index, period, f, *args, ptype=bool, **kwargs)


def pslide_period_str(xs: Sequence[Any], index: Any, period: str, f: Callable, *args, **kwargs) -> pl.Series:
    """pslide_period_vec(..., ptype=str)."""
    return pslide_period_vec(xs, index, period, f, *args, ptype=str, **kwargs)
