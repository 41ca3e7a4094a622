"""
PRISM Result Assembler
======================

Turns the hop engine's raw per-window results into output.

Modes:
    - list:    raw results, unmodified, in window order
    - vector:  one homogeneous polars Series (type stability)
    - rows:    polars DataFrame, one or more rows per window, stacked by name
    - cols:    polars DataFrame, window results concatenated column-wise

Skipped (incomplete) windows arrive as None: a null in vector mode, nothing
at all in row/column mode.

Vector widening rules:
    bool -> int -> float      (never the reverse without an explicit ptype)
    str combines only with str
    anything else (dates, datetimes, durations, ...) must share one kind and
    is typed by polars

Explicit casts (ptype):
    float  <- bool, int, float
    int    <- bool, int, float with an integral value
    bool   <- bool, numbers equal to 0 or 1
    str    <- anything, rendered with str()
    a polars dtype (pl.Date, pl.Datetime("us"), ...) <- polars strict cast

Bind options (align, name_repair, labels) are validated by the entry points
before any window runs; see check_align(), check_name_repair(), check_labels().
"""

import math
import numbers
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
import polars as pl

from windowing.config import NAME_REPAIR_MODES, ROW_ALIGN_MODES, get_config
from windowing.errors import (
    BindError,
    CastError,
    IncompatibleTypeError,
    ResultSizeError,
    SizeMismatchError,
)
from windowing.sequences import recycle_size

PTYPES: Dict[type, pl.DataType] = {
    float: pl.Float64,
    int: pl.Int64,
    bool: pl.Boolean,
    str: pl.Utf8,
}

# Widening order for numeric kinds
_RANK = {'bool': 0, 'int': 1, 'float': 2}
_KIND_TYPE = {'bool': bool, 'int': int, 'float': float, 'str': str}

_POLARS_ERRORS = (TypeError, ValueError, OverflowError, pl.exceptions.PolarsError)


def _is_polars_dtype(ptype: Any) -> bool:
    if isinstance(ptype, pl.DataType):
        return True
    return isinstance(ptype, type) and issubclass(ptype, pl.DataType)


def check_ptype(ptype: Any) -> Any:
    if ptype is None or _is_polars_dtype(ptype):
        return ptype
    if ptype not in PTYPES:
        names = ', '.join(t.__name__ for t in PTYPES)
        raise TypeError(f"`ptype` must be None, a polars dtype, or one of {names}, got {ptype!r}")
    return ptype


def check_align(align: Optional[str]) -> str:
    """Resolve `align` against config bind.row_align and validate it."""
    align = align or get_config().bind.row_align
    if align not in ROW_ALIGN_MODES:
        raise ValueError(f"`align` must be one of {ROW_ALIGN_MODES}, got {align!r}")
    return align


def check_name_repair(name_repair: Optional[str]) -> str:
    """Resolve `name_repair` against config bind.name_repair and validate it."""
    name_repair = name_repair or get_config().bind.name_repair
    if name_repair not in NAME_REPAIR_MODES:
        raise ValueError(f"`name_repair` must be one of {NAME_REPAIR_MODES}, got {name_repair!r}")
    return name_repair


def check_labels(labels: Optional[Sequence[Any]], size: int) -> None:
    """Caller-supplied identity labels need one entry per window."""
    if labels is not None and len(labels) != size:
        raise SizeMismatchError(f"`labels` has size {len(labels)}, but there are {size} windows")


# =============================================================================
# LIST MODE
# =============================================================================

def as_list(raw: Sequence[Any]) -> List[Any]:
    return list(raw)


# =============================================================================
# VECTOR MODE
# =============================================================================

def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    if isinstance(value, (np.datetime64, np.timedelta64)):
        return bool(np.isnat(value))
    return False


def _scalar(value: Any) -> Any:
    """numpy / pandas scalars as plain Python values; missing values as None."""
    if _is_missing(value):
        return None
    if isinstance(value, np.datetime64):
        return pd.Timestamp(value).to_pydatetime()
    if isinstance(value, np.timedelta64):
        return pd.Timedelta(value).to_pytimedelta()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, pd.Timedelta):
        return value.to_pytimedelta()
    return value


def _unwrap(value: Any, position: int) -> Any:
    """Reduce a size-one result to a Python scalar."""
    if value is None or isinstance(value, (str, bytes, numbers.Number, np.generic)):
        return _scalar(value)

    if isinstance(value, (pl.DataFrame, pd.DataFrame)):
        if value.shape != (1, 1):
            raise ResultSizeError(
                f"Window {position} must return a single value, got a frame of shape {value.shape}",
                position=position, value=value,
            )
        element = value.item() if isinstance(value, pl.DataFrame) else value.iat[0, 0]
    elif isinstance(value, np.ndarray):
        if value.size != 1:
            raise ResultSizeError(
                f"Window {position} must return a single value, got an array of size {value.size}",
                position=position, value=value,
            )
        element = value.reshape(-1)[0]
    elif isinstance(value, (list, tuple, pl.Series, pd.Series)):
        if len(value) != 1:
            raise ResultSizeError(
                f"Window {position} must return a single value, got size {len(value)}",
                position=position, value=value,
            )
        element = value.iloc[0] if isinstance(value, pd.Series) else value[0]
    elif hasattr(value, '__len__'):
        raise ResultSizeError(
            f"Window {position} must return a single value, got a {type(value).__name__}",
            position=position, value=value,
        )
    else:
        return _scalar(value)

    return _scalar(element)


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, numbers.Integral):
        return 'int'
    if isinstance(value, numbers.Real):
        return 'float'
    if isinstance(value, str):
        return 'str'
    if isinstance(value, datetime):
        return 'datetime'
    if isinstance(value, date):
        return 'date'
    if isinstance(value, timedelta):
        return 'timedelta'
    return type(value).__name__


def _common_kind(values: List[Any]) -> Optional[str]:
    """Infer the common kind of non-missing values, or raise at the first misfit."""
    common = None
    for position, value in enumerate(values):
        if value is None:
            continue
        kind = _kind(value)
        if common is None:
            common = kind
        elif kind == common:
            continue
        elif kind in _RANK and common in _RANK:
            common = kind if _RANK[kind] > _RANK[common] else common
        else:
            raise IncompatibleTypeError(
                f"Can't combine window {position} <{kind}> with earlier windows <{common}>",
                position=position, value=value,
            )
    return common


def _cast(value: Any, ptype: type, position: int) -> Any:
    kind = _kind(value)

    if ptype is str:
        return value if kind == 'str' else str(value)

    if kind not in _RANK:
        raise CastError(
            f"Can't cast window {position} <{kind}> to <{ptype.__name__}>",
            position=position, value=value,
        )

    if ptype is float:
        return float(value)
    if ptype is int:
        if kind == 'float' and not float(value).is_integer():
            raise CastError(
                f"Can't cast window {position} ({value!r}) to <int> without losing precision",
                position=position, value=value,
            )
        return int(value)
    # bool
    if value not in (0, 1):
        raise CastError(
            f"Can't cast window {position} ({value!r}) to <bool>: only 0 and 1 convert",
            position=position, value=value,
        )
    return bool(value)


def _polars_vector(values: List[Any], kind: str) -> pl.Series:
    """Let polars type a single non-numeric, non-str kind (dates, datetimes, durations)."""
    first = next(p for p, v in enumerate(values) if v is not None)
    try:
        out = pl.Series("", values, strict=True)
    except _POLARS_ERRORS as e:
        raise IncompatibleTypeError(
            f"Window results of type <{kind}> can't be combined into a vector: {e}",
            position=first, value=values[first],
        ) from e
    if out.dtype == pl.Object:
        raise IncompatibleTypeError(
            f"Window {first} returned a {kind}, which can't be combined into a vector",
            position=first, value=values[first],
        )
    return out


def _polars_cast(values: List[Any], dtype: Any) -> pl.Series:
    """Strict construction as `dtype`; the first value that fails names the window."""
    try:
        return pl.Series("", values, dtype=dtype, strict=True)
    except _POLARS_ERRORS as e:
        for position, value in enumerate(values):
            if value is None:
                continue
            try:
                pl.Series("", [value], dtype=dtype, strict=True)
            except _POLARS_ERRORS as inner:
                raise CastError(
                    f"Can't cast window {position} ({value!r}) to <{dtype}>: {inner}",
                    position=position, value=value,
                ) from inner
        raise CastError(f"Can't cast window results to <{dtype}>: {e}") from e


def as_vector(raw: Sequence[Any], ptype: Any = None) -> pl.Series:
    """
    Coerce size-one window results to one homogeneous polars Series.

    Args:
        raw: Raw window results (None for skipped windows)
        ptype: float, int, bool, str, a polars dtype, or None to infer the
               common type

    Returns:
        pl.Series with one element per window; missing results are null
    """
    check_ptype(ptype)
    values = [_unwrap(value, position) for position, value in enumerate(raw)]

    if _is_polars_dtype(ptype):
        return _polars_cast(values, ptype)

    if ptype is None:
        kind = _common_kind(values)
        if kind is None:
            return pl.Series("", values, dtype=pl.Null)
        if kind not in _KIND_TYPE:
            return _polars_vector(values, kind)
        ptype = _KIND_TYPE[kind]

    cast = [None if v is None else _cast(v, ptype, position) for position, v in enumerate(values)]
    return pl.Series("", cast, dtype=PTYPES[ptype])


# =============================================================================
# ROW / COLUMN BINDING
# =============================================================================

def _listify(value: Any) -> list:
    if isinstance(value, pl.Series):
        return value.to_list()
    if isinstance(value, (pd.Series, np.ndarray)):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _record_frame(value: Any, position: int) -> pl.DataFrame:
    """One window result as a DataFrame of records (row-bind view)."""
    try:
        if isinstance(value, pl.DataFrame):
            return value
        if isinstance(value, pd.DataFrame):
            return pl.DataFrame({str(c): value[c].tolist() for c in value.columns})
        if isinstance(value, dict):
            return pl.DataFrame({str(k): _listify(v) for k, v in value.items()})
        # a positional vector is a single row
        return pl.DataFrame({f"column_{j}": [v] for j, v in enumerate(_listify(value))})
    except (pl.exceptions.PolarsError, TypeError, ValueError) as e:
        raise BindError(f"Window {position} result can't be read as records: {e}", position=position, value=value) from e


def _column_frame(value: Any, position: int) -> pl.DataFrame:
    """One window result as a DataFrame of columns (column-bind view)."""
    if isinstance(value, (pl.DataFrame, pd.DataFrame, dict)):
        return _record_frame(value, position)
    name = getattr(value, 'name', None) if isinstance(value, (pl.Series, pd.Series)) else None
    try:
        return pl.DataFrame({str(name) if name else "column": _listify(value)})
    except (pl.exceptions.PolarsError, TypeError, ValueError) as e:
        raise BindError(f"Window {position} result can't be read as a column: {e}", position=position, value=value) from e


def bind_rows(
    raw: Sequence[Any],
    names_to: Optional[str] = None,
    labels: Optional[Sequence[Any]] = None,
    align: Optional[str] = None,
) -> pl.DataFrame:
    """
    Stack window results row-wise, aligning fields by name.

    Args:
        raw: Raw window results (None contributes no rows)
        names_to: If given, prepend an identity column of this name
        labels: One identity label per window (defaults to window positions)
        align: 'strict' (identical fields required) or 'union' (missing -> null);
               defaults to config bind.row_align

    Returns:
        pl.DataFrame
    """
    align = check_align(align)
    check_labels(labels, len(raw))

    frames = []
    reference = None
    for position, value in enumerate(raw):
        if value is None:
            continue
        frame = _record_frame(value, position)

        if reference is None:
            reference = frame.columns
        elif align == 'strict' and set(frame.columns) != set(reference):
            raise BindError(
                f"Window {position} has fields {frame.columns}, expected {reference}. "
                f"Use align='union' to fill missing fields with null.",
                position=position, value=value,
            )
        elif align == 'strict':
            frame = frame.select(reference)

        if names_to is not None:
            if names_to in frame.columns:
                raise BindError(
                    f"`names_to` column {names_to!r} already exists in window {position}",
                    position=position, value=value,
                )
            label = position if labels is None else labels[position]
            frame = frame.select([pl.lit(label).alias(names_to), pl.all()])

        frames.append(frame)

    if not frames:
        return pl.DataFrame()

    how = 'vertical_relaxed' if align == 'strict' else 'diagonal_relaxed'
    try:
        return pl.concat(frames, how=how)
    except pl.exceptions.PolarsError as e:
        raise BindError(f"Window results have incompatible field types: {e}") from e


def _repair_names(names: List[str]) -> List[str]:
    """
    Rename every colliding name to '<name>_<column position>'.

    A repaired name that is still taken gets another '_<column position>'.
    """
    counts: Dict[str, int] = {}
    for name in names:
        counts[name] = counts.get(name, 0) + 1

    taken = {name for name in names if counts[name] == 1}
    repaired = []
    for j, name in enumerate(names):
        if counts[name] == 1:
            repaired.append(name)
            continue
        candidate = f"{name}_{j}"
        while candidate in taken:
            candidate = f"{candidate}_{j}"
        taken.add(candidate)
        repaired.append(candidate)
    return repaired


def bind_cols(raw: Sequence[Any], name_repair: Optional[str] = None) -> pl.DataFrame:
    """
    Concatenate window results column-wise.

    Every result must have the same number of rows, or exactly one (recycled).
    Colliding names become '<name>_<column position>' under name_repair='unique';
    name_repair='check_unique' raises instead.
    """
    name_repair = check_name_repair(name_repair)

    positions = []
    frames = []
    for position, value in enumerate(raw):
        if value is None:
            continue
        positions.append(position)
        frames.append(_column_frame(value, position))

    if not frames:
        return pl.DataFrame()

    try:
        height = recycle_size([f.height for f in frames], what="window results")
    except SizeMismatchError:
        height = next(f.height for f in frames if f.height != 1)
        bad = next(p for p, f in zip(positions, frames) if f.height not in (1, height))
        raise BindError(
            f"Window {bad} has a row count that can't be recycled to {height}",
            position=bad,
        ) from None

    frames = [f if f.height == height else (pl.concat([f] * height) if height else f.clear()) for f in frames]

    names = [name for f in frames for name in f.columns]

    if name_repair == 'check_unique':
        for position, f in zip(positions, frames):
            for name in f.columns:
                if names.count(name) > 1:
                    raise BindError(
                        f"Column name {name!r} from window {position} is not unique",
                        position=position,
                    )

    repaired = iter(_repair_names(names))
    frames = [f.rename(dict(zip(f.columns, [next(repaired) for _ in f.columns]))) for f in frames]

    try:
        return pl.concat(frames, how='horizontal')
    except pl.exceptions.PolarsError as e:
        raise BindError(f"Window results can't be joined column-wise: {e}") from e
