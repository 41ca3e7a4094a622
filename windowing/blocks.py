"""
PRISM Block Partitioner - period-based block windows.

Steps:
    1. Floor every index value to an integer period label
       (e.g. "2 months" counted from the origin, 1970-01-01 by default)
    2. Collapse consecutive equal labels into Blocks (label, first, last)
    3. Resolve before/after over the BLOCK sequence, counted in whole blocks
    4. Map each block window back to a position pair:
           (first position of leftmost block, last position of rightmost block)

One output per block - not per observation. Flooring preserves order, so
blocks come out in non-decreasing label order.

Usage:
    from windowing.blocks import partition_blocks, compute_block_bounds

    blocks = partition_blocks(dates, 'month')
    bounds, blocks = compute_block_bounds(dates, 'month', before=1)
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np
import pandas as pd

from windowing.boundaries import WindowBounds, compute_bounds
from windowing.config import get_config
from windowing.errors import WindowSpecError
from windowing.validation import check_index

logger = logging.getLogger(__name__)


# Fixed-length periods, in nanoseconds
FIXED_PERIODS = {
    'week': 7 * 86_400_000_000_000,
    'day': 86_400_000_000_000,
    'hour': 3_600_000_000_000,
    'minute': 60_000_000_000,
    'second': 1_000_000_000,
    'millisecond': 1_000_000,
}

# Calendar periods, in months
CALENDAR_PERIODS = {
    'year': 12,
    'quarter': 3,
    'month': 1,
}

PERIODS = tuple(CALENDAR_PERIODS) + tuple(FIXED_PERIODS)


@dataclass
class Block:
    """Maximal run of consecutive positions sharing one period label."""
    label: int
    period_start: pd.Timestamp
    first: int
    last: int

    @property
    def size(self) -> int:
        return self.last - self.first + 1


# =============================================================================
# PERIOD LABELS
# =============================================================================

def _as_datetime_index(idx: pd.Index) -> pd.DatetimeIndex:
    if isinstance(idx, pd.DatetimeIndex):
        return idx
    if pd.api.types.is_numeric_dtype(idx.dtype) or pd.api.types.is_bool_dtype(idx.dtype):
        raise WindowSpecError(f"Period windows need a datetime-like index, got dtype {idx.dtype}")
    try:
        return pd.DatetimeIndex(idx)
    except (TypeError, ValueError) as e:
        raise WindowSpecError(f"Period windows need a datetime-like index: {e}") from e


def _check_period(period: str, every: Any) -> int:
    if period not in PERIODS:
        raise WindowSpecError(f"Unknown period {period!r}. Available: {', '.join(PERIODS)}")
    if isinstance(every, bool) or not isinstance(every, (int, np.integer)) or every < 1:
        raise WindowSpecError(f"`every` must be a positive integer, got {every!r}")
    return int(every)


def period_labels(
    index: pd.DatetimeIndex,
    period: str,
    every: int = 1,
    origin: Optional[pd.Timestamp] = None,
) -> np.ndarray:
    """
    Integer period label per index value: floor(distance from origin / (every periods)).

    Timezone-aware indexes are labelled on their local wall-clock time.
    """
    every = _check_period(period, every)
    if origin is None:
        origin = get_config().period.origin
    origin = pd.Timestamp(origin)
    if origin.tzinfo is not None:
        origin = origin.tz_localize(None)
    if index.tz is not None:
        index = index.tz_localize(None)

    if period in CALENDAR_PERIODS:
        months = (index.year - origin.year) * 12 + (index.month - origin.month)
        return np.floor_divide(np.asarray(months, dtype=np.int64), CALENDAR_PERIODS[period] * every)

    # Fixed-length periods floor against the origin's exact instant
    elapsed = np.asarray((index - origin).as_unit('ns').asi8, dtype=np.int64)
    return np.floor_divide(elapsed, FIXED_PERIODS[period] * every)


def _period_start(label: int, period: str, every: int, origin: pd.Timestamp) -> pd.Timestamp:
    if period in CALENDAR_PERIODS:
        months = int(label) * CALENDAR_PERIODS[period] * every
        anchor = pd.Timestamp(year=origin.year, month=origin.month, day=1)
        return anchor + pd.DateOffset(months=months)
    return origin + pd.Timedelta(int(label) * FIXED_PERIODS[period] * every, unit='ns')


# =============================================================================
# BLOCKS
# =============================================================================

def partition_blocks(
    index: Any,
    period: str,
    every: int = 1,
    origin: Any = None,
    size: int = None,
) -> List[Block]:
    """
    Segment an index into period-based contiguous blocks.

    Args:
        index: Non-decreasing datetime-like index
        period: One of year, quarter, month, week, day, hour, minute, second, millisecond
        every: Number of periods per block (e.g. 2 for "2 months")
        origin: Where period counting starts (config period.origin by default)
        size: Size of the paired sequence (defaults to len(index))

    Returns:
        List of Blocks in index order
    """
    if size is None:
        size = len(index)
    every = _check_period(period, every)
    idx = _as_datetime_index(check_index(index, size))
    origin = pd.Timestamp(get_config().period.origin if origin is None else origin)
    if origin.tzinfo is not None:
        origin = origin.tz_localize(None)

    labels = period_labels(idx, period, every, origin)
    if len(labels) == 0:
        return []

    # positions where a new block begins
    breaks = np.flatnonzero(np.diff(labels) != 0) + 1
    firsts = np.concatenate(([0], breaks))
    lasts = np.concatenate((breaks - 1, [len(labels) - 1]))

    blocks = [
        Block(
            label=int(labels[first]),
            period_start=_period_start(labels[first], period, every, origin),
            first=int(first),
            last=int(last),
        )
        for first, last in zip(firsts, lasts)
    ]
    logger.debug(f"Partitioned {len(labels)} observations into {len(blocks)} {every}-{period} blocks")
    return blocks


def compute_block_bounds(
    index: Any,
    period: str,
    every: int = 1,
    origin: Any = None,
    before: Any = 0,
    after: Any = 0,
    size: int = None,
) -> Tuple[WindowBounds, List[Block]]:
    """
    Resolve block-level before/after windows into position pairs.

    before/after count whole blocks ("this block plus 1 preceding block").
    Completeness is decided in block space.

    Returns:
        (WindowBounds with one pair per block, blocks)
    """
    blocks = partition_blocks(index, period, every=every, origin=origin, size=size)
    block_bounds = compute_bounds(len(blocks), before=before, after=after)

    firsts = np.array([b.first for b in blocks], dtype=np.int64)
    lasts = np.array([b.last for b in blocks], dtype=np.int64)

    starts = np.zeros(len(blocks), dtype=np.int64)
    stops = np.full(len(blocks), -1, dtype=np.int64)
    non_empty = block_bounds.starts <= block_bounds.stops
    starts[non_empty] = firsts[block_bounds.starts[non_empty]]
    stops[non_empty] = lasts[block_bounds.stops[non_empty]]

    bounds = WindowBounds(starts=starts, stops=stops, complete=block_bounds.complete)
    return bounds, blocks
