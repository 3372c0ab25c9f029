"""Structural equality of data frames, including factor level sequences and codes."""

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .factors import is_factor


@dataclass(frozen=True)
class FrameComparison:
    """Outcome of :func:`compare_frames`.

    Attributes:
        shape_mismatch: Description of a row/column count difference, if any.
        column_mismatch: Description of a column name/order difference, if any.
        index_mismatch: True if the row labels differ.
        differences: Per-column reason for every column that differs.
    """

    shape_mismatch: str | None = None
    column_mismatch: str | None = None
    index_mismatch: bool = False
    differences: dict[str, str] = field(default_factory=dict)

    @property
    def equal(self) -> bool:
        return (
            self.shape_mismatch is None
            and self.column_mismatch is None
            and not self.index_mismatch
            and not self.differences
        )

    def summary(self) -> str:
        """One-line description of the differences (``"equal"`` if there are none)."""
        if self.equal:
            return "equal"
        parts = [p for p in (self.shape_mismatch, self.column_mismatch) if p]
        if self.index_mismatch:
            parts.append("row index differs")
        parts.extend(f"{col}: {reason}" for col, reason in self.differences.items())
        return "; ".join(parts)


def _compare_factor(left: pd.Series, right: pd.Series) -> str | None:
    if not is_factor(right):
        return f"factor vs {right.dtype}"
    if left.cat.ordered != right.cat.ordered:
        return "ordered flag differs"
    left_levels = left.cat.categories.tolist()
    right_levels = right.cat.categories.tolist()
    if left_levels != right_levels:
        return f"levels differ ({len(left_levels)} vs {len(right_levels)})"
    if not np.array_equal(left.cat.codes.to_numpy(), right.cat.codes.to_numpy()):
        return "codes differ"
    return None


def _compare_column(left: pd.Series, right: pd.Series) -> str | None:
    if is_factor(left):
        return _compare_factor(left, right)
    if is_factor(right):
        return f"{left.dtype} vs factor"
    if left.dtype != right.dtype:
        return f"dtype {left.dtype} vs {right.dtype}"
    # Series.equals treats nulls in the same position as equal.
    if not left.reset_index(drop=True).equals(right.reset_index(drop=True)):
        return "values differ"
    return None


def compare_frames(left: pd.DataFrame, right: pd.DataFrame) -> FrameComparison:
    """Compare two frames structurally.

    Checks shape, column names and order, row index, dtypes, factor level sequences,
    ordered flags, codes and values (nulls compare equal to nulls).
    """
    if left.shape != right.shape:
        return FrameComparison(shape_mismatch=f"shape {left.shape} vs {right.shape}")
    if left.columns.tolist() != right.columns.tolist():
        return FrameComparison(
            column_mismatch=f"columns {left.columns.tolist()} vs {right.columns.tolist()}",
        )

    differences = {
        col: reason
        for col in left.columns
        if (reason := _compare_column(left[col], right[col])) is not None
    }
    return FrameComparison(
        index_mismatch=not left.index.equals(right.index),
        differences=differences,
    )


def frames_equal(left: pd.DataFrame, right: pd.DataFrame) -> bool:
    """Return True if both frames are structurally identical (see :func:`compare_frames`)."""
    return compare_frames(left, right).equal
