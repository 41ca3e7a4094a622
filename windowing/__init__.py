"""
PRISM Windowing - Rolling Window Engine
=======================================

Apply any function over windows of a sequence.

Architecture:
    - boundaries.py:    element-count windows (before/after in observations)
    - index_bounds.py:  index-space windows (before/after in index units)
    - blocks.py:        period blocks (month, week, ...) and block windows
    - hop.py:           the engine - slice by (start, stop) and apply
    - assemble.py:      list / vector / row-bind / column-bind output
    - slide*.py:        public window families, single and N-ary

Usage:
    import numpy as np
    from windowing import slide_float, slide_index_float, slide_period, UNBOUNDED

    slide_float(values, np.mean, before=4)
    slide_index_float(values, dates, np.mean, before=pd.Timedelta(days=7))
    slide_period(values, dates, 'month', np.sum)
"""

__version__ = "1.0.0"

from windowing.blocks import Block, partition_blocks, compute_block_bounds
from windowing.boundaries import WindowBounds, compute_bounds
from windowing.config import activate_profile, get_config, load_windowing_config
from windowing.errors import (
    AssemblyError,
    BindError,
    CastError,
    IncompatibleTypeError,
    IndexOrderError,
    MissingIndexError,
    ResultSizeError,
    SizeMismatchError,
    WindowingError,
    WindowSpecError,
    WindowValidationError,
)
from windowing.hop import (
    hop, hop_vec, hop_float, hop_int, hop_bool, hop_str, hop_rows, hop_cols,
    hop_index, hop_index_vec,
    phop, phop_vec, phop_float, phop_int, phop_bool, phop_str, phop_rows, phop_cols,
)
from windowing.index_bounds import compute_index_bounds
from windowing.slide import (
    slide, slide_vec, slide_float, slide_int, slide_bool, slide_str, slide_rows, slide_cols,
    pslide, pslide_vec, pslide_float, pslide_int, pslide_bool, pslide_str, pslide_rows, pslide_cols,
)
from windowing.slide_index import (
    slide_index, slide_index_vec, slide_index_float, slide_index_int, slide_index_bool,
    slide_index_str, slide_index_rows, slide_index_cols,
    pslide_index, pslide_index_vec, pslide_index_float, pslide_index_int, pslide_index_bool,
    pslide_index_str, pslide_index_rows, pslide_index_cols,
)
from windowing.slide_period import (
    slide_period, slide_period_vec, slide_period_float, slide_period_int, slide_period_bool,
    slide_period_str, slide_period_rows, slide_period_cols,
    pslide_period, pslide_period_vec, pslide_period_float, pslide_period_int, pslide_period_bool,
    pslide_period_str, pslide_period_rows, pslide_period_cols,
)
from windowing.validation import UNBOUNDED

__all__ = [
    '__version__',
    'UNBOUNDED',
    # Boundaries
    'WindowBounds', 'compute_bounds', 'compute_index_bounds',
    'Block', 'partition_blocks', 'compute_block_bounds',
    # Hop
    'hop', 'hop_vec', 'hop_float', 'hop_int', 'hop_bool', 'hop_str', 'hop_rows', 'hop_cols',
    'hop_index', 'hop_index_vec',
    'phop', 'phop_vec', 'phop_float', 'phop_int', 'phop_bool', 'phop_str', 'phop_rows', 'phop_cols',
    # Slide
    'slide', 'slide_vec', 'slide_float', 'slide_int', 'slide_bool', 'slide_str', 'slide_rows', 'slide_cols',
    'pslide', 'pslide_vec', 'pslide_float', 'pslide_int', 'pslide_bool', 'pslide_str', 'pslide_rows', 'pslide_cols',
    # Slide index
    'slide_index', 'slide_index_vec', 'slide_index_float', 'slide_index_int', 'slide_index_bool',
    'slide_index_str', 'slide_index_rows', 'slide_index_cols',
    'pslide_index', 'pslide_index_vec', 'pslide_index_float', 'pslide_index_int', 'pslide_index_bool',
    'pslide_index_str', 'pslide_index_rows', 'pslide_index_cols',
    # Slide period
    'slide_period', 'slide_period_vec', 'slide_period_float', 'slide_period_int', 'slide_period_bool',
    'slide_period_str', 'slide_period_rows', 'slide_period_cols',
    'pslide_period', 'pslide_period_vec', 'pslide_period_float', 'pslide_period_int', 'pslide_period_bool',
    'pslide_period_str', 'pslide_period_rows', 'pslide_period_cols',
    # Config
    'load_windowing_config', 'get_config', 'activate_profile',
    # Errors
    'WindowingError', 'WindowValidationError', 'SizeMismatchError', 'MissingIndexError',
    'IndexOrderError', 'WindowSpecError', 'AssemblyError', 'ResultSizeError',
    'IncompatibleTypeError', 'CastError', 'BindError',
]
