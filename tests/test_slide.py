"""
Tests for element-count windows (slide / pslide).

Positions are 0-based; windows are inclusive on both ends.
"""

import numpy as np
import pandas as pd
import polars as pl
import pytest

from windowing import (
    UNBOUNDED,
    WindowSpecError,
    hop,
    slide,
    slide_float,
    slide_rows,
)


# ─────────────────────────────────────────────────────────────────────
# Tests: Basic window shapes
# ─────────────────────────────────────────────────────────────────────

class TestSlideWindows:
    """Window contents for before/after combinations."""

    def test_default_window_is_current_element(self):
        assert slide([1, 2, 3], list) == [[1], [2], [3]]

    def test_identity_returns_window_contents(self):
        x = ["a", "b", "c", "d"]
        out = slide(x, lambda s: s, before=1, after=1)
        assert out == [["a", "b"], ["a", "b", "c"], ["b", "c", "d"], ["c", "d"]]

    def test_before_lookback(self):
        assert slide([1, 2, 3, 4], list, before=2) == [[1], [1, 2], [1, 2, 3], [2, 3, 4]]

    def test_unbounded_before_is_cumulative(self):
        assert slide([1, 2, 3], sum, before=UNBOUNDED) == [1, 3, 6]

    def test_unbounded_after_is_reverse_cumulative(self):
        assert slide([1, 2, 3], list, after=UNBOUNDED) == [[1, 2, 3], [2, 3], [3]]

    def test_np_inf_is_unbounded(self):
        assert slide([1, 2, 3], sum, before=np.inf) == [1, 3, 6]

    def test_integral_float_counts_accepted(self):
        assert slide([1, 2, 3], list, before=1.0) == slide([1, 2, 3], list, before=1)

    def test_empty_sequence(self):
        assert slide([], list, before=3) == []

    def test_extra_arguments_passed_through(self):
        out = slide([1, 2, 3], lambda s, k, scale=1: (sum(s) + k) * scale, 10, before=1, scale=2)
        assert out == [22, 26, 30]


# ─────────────────────────────────────────────────────────────────────
# Tests: Negative before/after (shifted windows)
# ─────────────────────────────────────────────────────────────────────

class TestShiftedWindows:
    """Negative before/after shift the window; start > stop is an empty window."""

    def test_negative_before_looks_forward(self):
        out = slide([1, 2, 3, 4], list, before=-1, after=2)
        assert out == [[2, 3], [3, 4], [4], []]

    def test_negative_after_looks_backward(self):
        out = slide([1, 2, 3, 4], list, before=2, after=-1)
        assert out == [[], [1], [1, 2], [2, 3]]

    def test_empty_window_is_not_an_error(self):
        calls = []
        slide([1, 2, 3], lambda s: calls.append(len(s)), before=-2, after=-1)
        assert calls == [0, 0, 0]

    def test_shifted_window_completeness(self):
        out = slide([1, 2, 3, 4], list, before=-1, after=1, complete=True)
        assert out == [[2], [3], [4], None]


# ─────────────────────────────────────────────────────────────────────
# Tests: Complete windows
# ─────────────────────────────────────────────────────────────────────

class TestComplete:
    """complete=True replaces partial windows with None without evaluating them."""

    def test_first_k_positions_missing(self):
        x = [1, 2, 3, 4, 5]
        out = slide(x, list, before=2, complete=True)
        assert out[:2] == [None, None]
        assert out[2:] == [[1, 2, 3], [2, 3, 4], [3, 4, 5]]

    def test_after_incomplete_at_end(self):
        assert slide([1, 2, 3], list, after=1, complete=True) == [[1, 2], [2, 3], None]

    def test_incomplete_windows_not_evaluated(self):
        calls = []
        slide([1, 2, 3, 4], lambda s: calls.append(list(s)), before=1, after=1, complete=True)
        assert calls == [[1, 2, 3], [2, 3, 4]]

    def test_unbounded_side_never_incomplete(self):
        assert slide([1, 2, 3], sum, before=UNBOUNDED, complete=True) == [1, 3, 6]


# ─────────────────────────────────────────────────────────────────────
# Tests: Equivalence with hop
# ─────────────────────────────────────────────────────────────────────

class TestHopEquivalence:
    """slide(x, before=b, after=a) == hop(x, max(0, i-b), min(n-1, i+a))."""

    @pytest.mark.parametrize("before,after", [(0, 0), (2, 1), (3, 0), (0, 4), (1, 1)])
    def test_matches_hop(self, before, after):
        x = np.arange(10.0)
        n = len(x)
        starts = [max(0, i - before) for i in range(n)]
        stops = [min(n - 1, i + after) for i in range(n)]

        expected = hop(x, starts, stops, np.sum)
        actual = slide(x, np.sum, before=before, after=after)

        np.testing.assert_allclose(actual, expected)


# ─────────────────────────────────────────────────────────────────────
# Tests: Sequence types
# ─────────────────────────────────────────────────────────────────────

class TestSequenceTypes:
    """Arrays slide along axis 0; DataFrames slide row-wise."""

    def test_numpy_mean(self):
        out = slide_float(np.array([1.0, 2.0, 3.0, 4.0]), np.mean, before=1)
        assert out.to_list() == [1.0, 1.5, 2.5, 3.5]

    def test_polars_dataframe_rowwise(self):
        df = pl.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6]})
        out = slide(df, lambda d: d["a"].sum() + d["b"].sum(), before=1)
        assert out == [5, 12, 16]

    def test_pandas_dataframe_rowwise(self):
        df = pd.DataFrame({"a": [1, 2, 3]})
        out = slide(df, len, after=1)
        assert out == [2, 2, 1]

    def test_pandas_series_slices_by_position(self):
        s = pd.Series([10, 20, 30], index=[100, 200, 300])
        out = slide(s, lambda w: w.tolist(), before=1)
        assert out == [[10], [10, 20], [20, 30]]

    def test_string_is_a_single_element(self):
        assert slide("abc", list) == [["abc"]]

    def test_rows_use_pandas_labels(self):
        s = pd.Series([1, 2], index=["a", "b"])
        out = slide_rows(s, lambda w: {"total": int(w.sum())}, before=1, names_to="id")
        assert out["id"].to_list() == ["a", "b"]
        assert out["total"].to_list() == [1, 3]


# ─────────────────────────────────────────────────────────────────────
# Tests: Validation and failure
# ─────────────────────────────────────────────────────────────────────

class TestSlideErrors:
    """Malformed specs fail before evaluation; user errors propagate untouched."""

    @pytest.mark.parametrize("bad", [1.5, "a", -np.inf, np.nan, True, None])
    def test_malformed_before(self, bad):
        with pytest.raises(WindowSpecError):
            slide([1, 2, 3], list, before=bad)

    def test_malformed_after(self):
        with pytest.raises(WindowSpecError):
            slide([1, 2, 3], list, after=0.5)

    def test_malformed_complete(self):
        with pytest.raises(WindowSpecError):
            slide([1, 2, 3], list, complete="yes")

    def test_non_callable(self):
        with pytest.raises(TypeError):
            slide([1, 2, 3], "sum")

    def test_function_error_fails_fast(self):
        calls = []

        def f(s):
            calls.append(len(s))
            if len(calls) == 3:
                raise ZeroDivisionError("boom")
            return sum(s)

        with pytest.raises(ZeroDivisionError, match="boom"):
            slide([1, 2, 3, 4, 5], f)

        assert len(calls) == 3


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
