"""
PRISM Windowing Errors
======================

Three kinds of failure, raised at three different moments:

    - Validation errors:  before any window is evaluated (sizes, index, specs)
    - Evaluation errors:  whatever the user function raises - never wrapped
    - Assembly errors:    while coercing or binding raw results

Usage:
    from windowing.errors import WindowValidationError, AssemblyError

    try:
        out = slide_index_float(x, i, np.mean, before=3)
    except WindowValidationError as e:
        ...
"""

from typing import Any, Optional


class WindowingError(Exception):
    """Base class for all windowing errors."""
    pass


# =============================================================================
# VALIDATION (pre-computation)
# =============================================================================

class WindowValidationError(WindowingError, ValueError):
    """Raised before any window evaluates, when the inputs are unusable."""
    pass


class SizeMismatchError(WindowValidationError):
    """Sizes of sequences, index, starts or stops cannot be reconciled."""
    pass


class MissingIndexError(WindowValidationError):
    """Index contains a missing value (None, NaN, NaT)."""
    pass


class IndexOrderError(WindowValidationError):
    """Index is not non-decreasing."""
    pass


class WindowSpecError(WindowValidationError):
    """Malformed before/after, starts/stops, or period specification."""
    pass


# =============================================================================
# ASSEMBLY (post-computation)
# =============================================================================

class AssemblyError(WindowingError):
    """
    Raised while turning raw window results into typed output.

    Carries the position of the offending window (0-based output slot).
    """

    def __init__(self, message: str, position: Optional[int] = None, value: Any = None):
        super().__init__(message)
        self.position = position
        self.value = value


class ResultSizeError(AssemblyError):
    """A window result does not have exactly one element."""
    pass


class IncompatibleTypeError(AssemblyError):
    """No common type exists between window results."""
    pass


class CastError(AssemblyError):
    """A window result cannot be cast to the requested type without loss."""
    pass


class BindError(AssemblyError):
    """Window results cannot be stacked into a table."""
    pass
