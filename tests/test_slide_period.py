"""
Tests for period-block windows (slide_period / partition_blocks).

One result per block, not per observation.
"""

from datetime import date, datetime

import pandas as pd
import pytest

from windowing import (
    IndexOrderError,
    WindowSpecError,
    compute_block_bounds,
    partition_blocks,
    pslide_period,
    slide_period,
    slide_period_int,
    slide_period_rows,
)


def _aug_nov_2019():
    """Five consecutive days at the end of Aug 2019 and five in Nov 2019."""
    aug = pd.date_range("2019-08-27", periods=5, freq="D")
    nov = pd.date_range("2019-11-26", periods=5, freq="D")
    return aug.append(nov)


# ─────────────────────────────────────────────────────────────────────
# Tests: Monthly blocks
# ─────────────────────────────────────────────────────────────────────

class TestMonthlyBlocks:
    """Output size is the number of blocks."""

    def test_one_result_per_month(self):
        i = _aug_nov_2019()
        assert slide_period(list(range(10)), i, 'month', len) == [5, 5]

    def test_before_counts_present_blocks(self):
        i = _aug_nov_2019()
        # Sep and Oct have no observations, so "one month back" from Nov is Aug
        assert slide_period(list(range(10)), i, 'month', len, before=1) == [5, 10]

    def test_complete_drops_partial_block_window(self):
        i = _aug_nov_2019()
        out = slide_period(list(range(10)), i, 'month', len, before=1, complete=True)
        assert out == [None, 10]

    def test_complete_as_null_in_vector(self):
        i = _aug_nov_2019()
        out = slide_period_int(list(range(10)), i, 'month', len, before=1, complete=True)
        assert out.to_list() == [None, 10]

    def test_block_contents(self):
        i = pd.to_datetime(["2019-01-05", "2019-01-20", "2019-02-01", "2019-03-15", "2019-03-16"])
        assert slide_period([1, 2, 3, 4, 5], i, 'month', list) == [[1, 2], [3], [4, 5]]

    def test_every_two_months_merges_jul_aug(self):
        i = pd.to_datetime(["2019-07-10", "2019-08-10", "2019-09-10"])
        assert slide_period([1, 2, 3], i, 'month', list, every=2) == [[1, 2], [3]]

    def test_quarter_and_year(self):
        i = pd.to_datetime(["2019-01-15", "2019-03-31", "2019-04-01", "2020-01-01"])
        assert slide_period([1, 2, 3, 4], i, 'quarter', list) == [[1, 2], [3], [4]]
        assert slide_period([1, 2, 3, 4], i, 'year', list) == [[1, 2, 3], [4]]

    def test_python_dates(self):
        i = [date(2019, 8, 30), date(2019, 8, 31), date(2019, 9, 1)]
        assert slide_period(["a", "b", "c"], i, 'month', list) == [["a", "b"], ["c"]]


# ─────────────────────────────────────────────────────────────────────
# Tests: Fixed-length periods and origin
# ─────────────────────────────────────────────────────────────────────

class TestFixedPeriods:
    """Weeks and days count from the origin instant."""

    def test_weeks_start_on_origin_weekday(self):
        # 1970-01-01 was a Thursday, so Thu 2019-08-15 opens a new week block
        i = pd.date_range("2019-08-13", "2019-08-22", freq="D")
        blocks = partition_blocks(i, 'week')
        assert [b.size for b in blocks] == [2, 7, 1]
        assert blocks[1].period_start == pd.Timestamp("2019-08-15")

    def test_hours(self):
        i = pd.to_datetime(["2019-01-01 00:10", "2019-01-01 00:50", "2019-01-01 01:00"])
        assert slide_period([1, 2, 3], i, 'hour', sum) == [3, 3]

    def test_custom_origin_shifts_blocks(self):
        i = pd.date_range("2019-08-15", periods=4, freq="D")
        default = slide_period([1, 2, 3, 4], i, 'day', list, every=2)
        shifted = slide_period([1, 2, 3, 4], i, 'day', list, every=2, origin="2019-08-15")

        assert shifted == [[1, 2], [3, 4]]
        assert default != shifted

    def test_timezone_aware_index(self):
        i = pd.to_datetime(["2019-08-31 23:00", "2019-09-01 01:00"]).tz_localize("America/New_York")
        assert slide_period([1, 2], i, 'month', list) == [[1], [2]]


# ─────────────────────────────────────────────────────────────────────
# Tests: Blocks and bounds
# ─────────────────────────────────────────────────────────────────────

class TestBlocks:

    def test_partition_blocks_period_start(self):
        blocks = partition_blocks(_aug_nov_2019(), 'month')

        assert [(b.first, b.last) for b in blocks] == [(0, 4), (5, 9)]
        assert blocks[0].period_start == pd.Timestamp("2019-08-01")
        assert blocks[1].period_start == pd.Timestamp("2019-11-01")

    def test_every_two_period_start(self):
        blocks = partition_blocks(pd.to_datetime(["2019-08-10"]), 'month', every=2)
        assert blocks[0].period_start == pd.Timestamp("2019-07-01")

    def test_block_bounds(self):
        bounds, blocks = compute_block_bounds(_aug_nov_2019(), 'month', after=1)
        assert len(blocks) == 2
        assert bounds.starts.tolist() == [0, 5]
        assert bounds.stops.tolist() == [9, 9]
        assert bounds.complete.tolist() == [True, False]

    def test_empty_index(self):
        assert partition_blocks(pd.DatetimeIndex([]), 'day') == []
        assert slide_period([], pd.DatetimeIndex([]), 'day', len) == []


# ─────────────────────────────────────────────────────────────────────
# Tests: Assembled output
# ─────────────────────────────────────────────────────────────────────

class TestPeriodAssembly:

    def test_rows_labelled_by_period_start(self):
        out = slide_period_rows(
            list(range(10)), _aug_nov_2019(), 'month', lambda s: {"n": len(s)}, names_to="period",
        )
        assert out.columns == ["period", "n"]
        assert out["period"].to_list() == [datetime(2019, 8, 1), datetime(2019, 11, 1)]
        assert out["n"].to_list() == [5, 5]

    def test_pslide_period(self):
        i = _aug_nov_2019()
        out = pslide_period([list(range(10)), [1] * 10], i, 'month', lambda a, b: sum(a) + sum(b))
        assert out == [15, 40]


# ─────────────────────────────────────────────────────────────────────
# Tests: Validation
# ─────────────────────────────────────────────────────────────────────

class TestPeriodValidation:

    def test_unknown_period(self):
        with pytest.raises(WindowSpecError):
            slide_period([1], pd.to_datetime(["2019-01-01"]), 'fortnight', len)

    @pytest.mark.parametrize("every", [0, -1, 1.5, True])
    def test_bad_every(self, every):
        with pytest.raises(WindowSpecError):
            slide_period([1], pd.to_datetime(["2019-01-01"]), 'day', len, every=every)

    def test_numeric_index(self):
        with pytest.raises(WindowSpecError):
            slide_period([1, 2], [1, 2], 'day', len)

    def test_decreasing_dates(self):
        with pytest.raises(IndexOrderError):
            slide_period([1, 2], pd.to_datetime(["2019-02-01", "2019-01-01"]), "month", len)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
