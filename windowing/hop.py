"""
PRISM Hop Engine
================

The universal primitive: given explicit (start, stop) position pairs, slice
the sequence(s) and apply a function to each slice. Every other window
family (slide, slide_index, slide_period) resolves its boundaries and then
hands them to apply_windows().

Rules:
    - starts/stops are recycled to a common length L
    - start is clamped up to 0 and stop down to n - 1, independently;
      out-of-range values never error
    - slices are inclusive; start > stop is an empty slice
    - windows are applied in increasing order; the first error from `f`
      propagates immediately and no partial result is returned

Usage:
    from windowing.hop import hop, hop_float

    hop([1, 2, 3, 4], starts=[0, 2], stops=[1, 3], f=sum)        # [3, 7]
    hop_float([1, 2, 3, 4], starts=[0, 2], stops=[1, 3], f=sum)  # Series [3.0, 7.0]
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence

import numpy as np
import polars as pl

from windowing.assemble import (
    as_list, as_vector, bind_cols, bind_rows, check_align, check_labels, check_name_repair, check_ptype,
)
from windowing.config import get_config
from windowing.errors import SizeMismatchError
from windowing.index_bounds import locate_ranges
from windowing.sequences import as_sequence, recycle_all, size_of, slice_window
from windowing.validation import check_function, check_positions

logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE
# =============================================================================

def apply_windows(
    xs: List[Any],
    starts: np.ndarray,
    stops: np.ndarray,
    f: Callable,
    args: tuple = (),
    kwargs: Optional[dict] = None,
    evaluate: Optional[np.ndarray] = None,
) -> List[Any]:
    """
    Slice every sequence in `xs` with each boundary pair and apply `f`.

    Args:
        xs: Sequences of one common size n
        starts: Window starts (inclusive), length L
        stops: Window stops (inclusive), length L
        f: Called as f(slice_0, slice_1, ..., *args, **kwargs)
        evaluate: Optional boolean mask; unevaluated windows yield None

    Returns:
        List of L raw results
    """
    kwargs = kwargs or {}
    n = size_of(xs[0]) if xs else 0
    length = len(starts)

    clamped_starts = np.maximum(starts, 0)
    clamped_stops = np.minimum(stops, n - 1)

    def run(k: int) -> Any:
        start = int(clamped_starts[k])
        stop = int(clamped_stops[k])
        slices = [slice_window(x, start, stop) for x in xs]
        return f(*slices, *args, **kwargs)

    todo = range(length) if evaluate is None else np.flatnonzero(evaluate).tolist()
    out: List[Any] = [None] * length

    execution = get_config().execution
    if execution.parallel and len(todo) >= execution.min_windows:
        logger.debug(f"Applying {len(todo)}/{length} windows on {execution.max_workers} threads")
        # one chunk in flight at a time; an error stops later chunks from being submitted
        with ThreadPoolExecutor(max_workers=execution.max_workers) as pool:
            for offset in range(0, len(todo), execution.chunk_size):
                futures = [(k, pool.submit(run, k)) for k in todo[offset:offset + execution.chunk_size]]
                try:
                    for k, future in futures:
                        out[k] = future.result()
                except BaseException:
                    for _, future in futures:
                        future.cancel()
                    raise
        return out

    logger.debug(f"Applying {len(todo)}/{length} windows sequentially")
    for k in todo:
        out[k] = run(k)
    return out


def _hop_impl(
    xs: Sequence[Any], starts: Any, stops: Any, f: Callable, args: tuple, kwargs: dict,
    labels: Optional[Sequence[Any]] = None,
) -> List[Any]:
    check_function(f)
    xs = recycle_all(xs)

    starts = check_positions(starts, "starts")
    stops = check_positions(stops, "stops")
    if len(starts) != len(stops):
        if len(starts) == 1:
            starts = np.repeat(starts, len(stops))
        elif len(stops) == 1:
            stops = np.repeat(stops, len(starts))
        else:
            raise SizeMismatchError(
                f"Can't recycle `starts` (size {len(starts)}) and `stops` (size {len(stops)})"
            )

    check_labels(labels, len(starts))
    return apply_windows(xs, starts, stops, f, args, kwargs)


def _hop_index_impl(
    xs: Sequence[Any], index: Any, starts: Any, stops: Any, f: Callable, args: tuple, kwargs: dict
) -> List[Any]:
    check_function(f)
    xs = recycle_all(xs)
    bounds = locate_ranges(index, starts, stops, size=size_of(xs[0]))
    return apply_windows(xs, bounds.starts, bounds.stops, f, args, kwargs)


# =============================================================================
# HOP
# =============================================================================

def hop(x: Any, starts: Any, stops: Any, f: Callable, *args, **kwargs) -> List[Any]:
    """
    Apply `f` to x[starts[k]..stops[k]] for every k.

    Args:
        x: Sequence to slice
        starts: Inclusive start positions (0-based, may be out of range)
        stops: Inclusive stop positions (0-based, may be out of range)
        f: Function applied to each slice, plus *args/**kwargs

    Returns:
        List with one raw result per boundary pair
    """
    return as_list(_hop_impl([as_sequence(x)], starts, stops, f, args, kwargs))


def hop_vec(x: Any, starts: Any, stops: Any, f: Callable, *args, ptype: Any = None, **kwargs) -> pl.Series:
    """
    Type-stable hop: every result must be a single value.

    ptype is float, int, bool, str, a polars dtype, or None to infer the common type.
    """
    check_ptype(ptype)
    return as_vector(_hop_impl([as_sequence(x)], starts, stops, f, args, kwargs), ptype)


def hop_rows(
    x: Any, starts: Any, stops: Any, f: Callable, *args,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    """Row-bind the results of hop()."""
    align = check_align(align)
    raw = _hop_impl([as_sequence(x)], starts, stops, f, args, kwargs, labels=labels)
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def hop_cols(x: Any, starts: Any, stops: Any, f: Callable, *args, name_repair: Optional[str] = None, **kwargs) -> pl.DataFrame:
    """Column-bind the results of hop()."""
    name_repair = check_name_repair(name_repair)
    raw = _hop_impl([as_sequence(x)], starts, stops, f, args, kwargs)
    return bind_cols(raw, name_repair=name_repair)


def hop_index(x: Any, index: Any, starts: Any, stops: Any, f: Callable, *args, **kwargs) -> List[Any]:
    """
    Hop with boundaries given as index values instead of positions.

    Window k covers every position p with starts[k] <= index[p] <= stops[k].
    """
    return as_list(_hop_index_impl([as_sequence(x)], index, starts, stops, f, args, kwargs))


def hop_index_vec(
    x: Any, index: Any, starts: Any, stops: Any, f: Callable, *args, ptype: Any = None, **kwargs
) -> pl.Series:
    """Type-stable hop_index()."""
    check_ptype(ptype)
    return as_vector(_hop_index_impl([as_sequence(x)], index, starts, stops, f, args, kwargs), ptype)


# =============================================================================
# PHOP (N-ary)
# =============================================================================

def phop(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, **kwargs) -> List[Any]:
    """
    N-ary hop: every sequence in `xs` is sliced with the same boundary pair
    and `f` receives one slice per sequence, in input order.
    """
    return as_list(_hop_impl(xs, starts, stops, f, args, kwargs))


def phop_vec(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, ptype: Any = None, **kwargs) -> pl.Series:
    check_ptype(ptype)
    return as_vector(_hop_impl(xs, starts, stops, f, args, kwargs), ptype)


def phop_rows(
    xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args,
    names_to: Optional[str] = None, labels: Optional[Sequence[Any]] = None, align: Optional[str] = None,
    **kwargs,
) -> pl.DataFrame:
    align = check_align(align)
    raw = _hop_impl(xs, starts, stops, f, args, kwargs, labels=labels)
    return bind_rows(raw, names_to=names_to, labels=labels, align=align)


def phop_cols(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, name_repair: Optional[str] = None, **kwargs) -> pl.DataFrame:
    name_repair = check_name_repair(name_repair)
    raw = _hop_impl(xs, starts, stops, f, args, kwargs)
    return bind_cols(raw, name_repair=name_repair)


# =============================================================================
# TYPED WRAPPERS
# =============================================================================

def hop_float(x: Any, starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """hop_vec(..., ptype=float)."""
    return hop_vec(x, starts, stops, f, *args, ptype=float, **kwargs)


def hop_int(x: Any, starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """hop_vec(..., ptype=int)."""
    return hop_vec(x, starts, stops, f, *args, ptype=int, **kwargs)


def hop_bool(x: Any, starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """hop_vec(..., ptype=bool)."""
    return hop_vec(x, starts, stops, f, *args, ptype=bool, **kwargs)


def hop_str(x: Any, starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """hop_vec(..., ptype=str)."""
    return hop_vec(x, starts, stops, f, *args, ptype=str, **kwargs)


def phop_float(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """phop_vec(..., ptype=float)."""
    return phop_vec(xs, starts, stops, f, *args, ptype=float, **kwargs)


def phop_int(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """phop_vec(..., ptype=int)."""
    return phop_vec(xs, starts, stops, f, *args, ptype=int, **kwargs)


def phop_bool(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """phop_vec(..., ptype=bool)."""
    return phop_vec(xs, starts, stops, f, *args, ptype=bool, **kwargs)


def phop_str(xs: Sequence[Any], starts: Any, stops: Any, f: Callable, *args, **kwargs) -> pl.Series:
    """phop_vec(..., ptype=str)."""
    return phop_vec(xs, starts, stops, f, *args, ptype=str, **kwargs)
