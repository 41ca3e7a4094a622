"""
PRISM Boundary Resolver - element-count windows.

For each position i of a sequence of n observations:

    start(i) = max(0, i - before)        before = UNBOUNDED -> 0
    stop(i)  = min(n - 1, i + after)     after  = UNBOUNDED -> n - 1

Negative before/after shift the window off the current position. When that
makes start > stop the window is empty, not an error.

A window is complete when its unclamped extent lies inside [0, n - 1].
An unbounded side never makes a window incomplete.

Usage:
    from windowing.boundaries import compute_bounds

    bounds = compute_bounds(5, before=1, after=0)
    bounds.starts    # [0, 0, 1, 2, 3]
    bounds.stops     # [0, 1, 2, 3, 4]
    bounds.complete  # [False, True, True, True, True]
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from windowing.validation import UNBOUNDED, check_count


@dataclass
class WindowBounds:
    """Boundary pairs (inclusive positions) and completeness per output slot."""
    starts: np.ndarray
    stops: np.ndarray
    complete: np.ndarray

    def __len__(self) -> int:
        return len(self.starts)

    def evaluate_mask(self, complete_only: bool) -> np.ndarray:
        """Which windows should be evaluated."""
        if complete_only:
            return self.complete.copy()
        return np.ones(len(self), dtype=bool)


def compute_bounds(n: int, before: Any = 0, after: Any = 0) -> WindowBounds:
    """
    Resolve element-count before/after into boundary pairs.

    Args:
        n: Number of observations (or blocks)
        before: Observations before the current one, or UNBOUNDED
        after: Observations after the current one, or UNBOUNDED

    Returns:
        WindowBounds with n pairs
    """
    before = check_count(before, "before")
    after = check_count(after, "after")

    i = np.arange(n, dtype=np.int64)

    if before == UNBOUNDED:
        starts = np.zeros(n, dtype=np.int64)
        start_ok = np.ones(n, dtype=bool)
    else:
        raw_starts = i - before
        starts = np.maximum(raw_starts, 0)
        start_ok = raw_starts >= 0

    if after == UNBOUNDED:
        stops = np.full(n, n - 1, dtype=np.int64)
        stop_ok = np.ones(n, dtype=bool)
    else:
        raw_stops = i + after
        stops = np.minimum(raw_stops, n - 1)
        stop_ok = raw_stops <= n - 1

    return WindowBounds(starts=starts, stops=stops, complete=start_ok & stop_ok)
