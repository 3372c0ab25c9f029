"""Factor (categorical column) helpers: construction, level pruning and level reordering.

A factor column is a pandas ``Categorical``. ``Series.cat.categories`` is its level
sequence and ``Series.cat.codes`` the per-record index into it (``-1`` marks a null).
Level order only drives display and plot order, it never changes which label a
record carries.

All functions return new frames and leave their input untouched.

Example:
    >>> df = pd.DataFrame({"artist": ["A", "B", "C"], "pop": [5, 9, 1]})
    >>> df = df.assign(artist=as_factor(df["artist"]))
    >>> list(reorder_levels(df, "artist", by="pop")["artist"].cat.categories)
    ['B', 'A', 'C']
"""

import logging
from collections.abc import Hashable, Iterable, Sequence
from typing import Literal

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)

LevelAggregation = Literal["first", "median", "mean", "min", "max"]
_AGGREGATIONS: tuple[str, ...] = ("first", "median", "mean", "min", "max")


def is_factor(values: pd.Series) -> bool:
    """Return True if ``values`` is stored as a categorical."""
    return isinstance(values.dtype, pd.CategoricalDtype)


def to_labels(values: pd.Series) -> pd.Series:
    """Render values as text labels, keeping nulls as nulls.

    Integral floats (``1999.0``, as produced by ``read_csv`` for an integer column with
    gaps) are rendered without the decimal part. Columns holding an infinite value or a
    value outside the int64 range keep the plain ``str()`` rendering.
    """
    if pd.api.types.is_float_dtype(values):
        non_null = values.dropna()
        fits_int64 = np.isfinite(non_null).all() and (non_null.abs() < 2**63).all()
        if fits_int64 and (non_null == np.round(non_null)).all():
            values = values.astype("Int64")
    return values.astype(object).map(str, na_action="ignore")


def as_factor(values: pd.Series, levels: Sequence[Hashable] | None = None) -> pd.Series:
    """Convert a column to a factor.

    Args:
        values: Raw column values.
        levels: Explicit level sequence. Defaults to the distinct labels sorted ascending.

    Returns:
        Categorical Series with the same index and name.

    Raises:
        ValueError: If ``values`` carries labels missing from an explicit ``levels``.
    """
    labels = to_labels(values)
    observed = labels.dropna().unique().tolist()
    if levels is None:
        levels = sorted(observed)
    else:
        unknown = sorted(set(observed) - set(levels))
        if unknown:
            msg = f"Labels {unknown} of '{values.name}' are not part of the given levels."
            raise ValueError(msg)

    return pd.Series(
        pd.Categorical(labels, categories=list(levels), ordered=False),
        index=values.index,
        name=values.name,
    )


def _require_column(df: pd.DataFrame, column: str) -> pd.Series:
    if column not in df.columns:
        msg = f"Column '{column}' not found. Available columns: {df.columns.tolist()}"
        raise KeyError(msg)
    return df[column]


def require_factor(df: pd.DataFrame, column: str) -> pd.Series:
    values = _require_column(df, column)
    if not is_factor(values):
        msg = f"Column '{column}' is not a factor (dtype={values.dtype}). Convert it with as_factor() first."
        raise TypeError(msg)
    return values


def drop_level(df: pd.DataFrame, column: str, sentinel: Hashable) -> pd.DataFrame:
    """Remove records labelled ``sentinel`` and prune levels no record references anymore.

    The relative order of the remaining levels is kept and codes are remapped to the
    pruned level sequence. The row index is reset so the result reads like a freshly
    loaded table. Records whose label is null are kept.

    Args:
        df: Input frame.
        column: Factor column to filter on.
        sentinel: Label treated as invalid (e.g. ``"0"`` for an unknown year).

    Returns:
        Filtered frame, or an unchanged copy if ``sentinel`` is not a level of ``column``.
    """
    factor = require_factor(df, column)
    if sentinel not in factor.cat.categories:
        logger.debug("Level %r not present in '%s'; nothing to drop", sentinel, column)
        return df.copy()

    keep = (factor != sentinel).to_numpy()
    filtered = df.loc[keep].reset_index(drop=True)
    filtered[column] = filtered[column].cat.remove_unused_categories()

    logger.info(
        "Dropped %d of %d rows where %s == %r (%d -> %d levels)",
        len(df) - len(filtered),
        len(df),
        column,
        sentinel,
        len(factor.cat.categories),
        len(filtered[column].cat.categories),
    )
    return filtered


def drop_unused_levels(df: pd.DataFrame, columns: Iterable[str] | None = None) -> pd.DataFrame:
    """Prune unused levels from the given factor columns (defaults to every factor column)."""
    if columns is None:
        columns = [col for col in df.columns if is_factor(df[col])]
    else:
        columns = list(columns)
        for col in columns:
            require_factor(df, col)

    return df.assign(**{col: df[col].cat.remove_unused_categories() for col in columns})


def level_keys(
    df: pd.DataFrame,
    column: str,
    by: str,
    fun: LevelAggregation = "first",
) -> pd.Series:
    """Compute the per-level sort key used by :func:`reorder_levels`.

    ``fun="first"`` takes the ``by`` value of the first record (in row order) carrying
    each level, even when that value is null. The other aggregations skip nulls.
    Levels that no record uses get a null key.

    Returns:
        Float Series indexed by the current level sequence (in level order).
    """
    factor = require_factor(df, column)
    numeric = _require_column(df, by)
    if not pd.api.types.is_numeric_dtype(numeric) or pd.api.types.is_bool_dtype(numeric):
        msg = f"Column '{by}' must be numeric to order levels by it (dtype={numeric.dtype})."
        raise TypeError(msg)
    if fun not in _AGGREGATIONS:
        msg = f"Invalid fun='{fun}'. Use one of {list(_AGGREGATIONS)}."
        raise ValueError(msg)

    mask = factor.notna().to_numpy()
    labels = factor[mask].astype(object)
    values = numeric[mask].astype("float64")

    if fun == "first":
        first_seen = ~labels.duplicated()
        keys = pd.Series(values[first_seen].to_numpy(), index=labels[first_seen].to_numpy())
    else:
        keys = values.groupby(labels, sort=False).agg(fun)

    levels = factor.cat.categories.astype(object)
    return keys.reindex(levels).rename(by)


def _sort_key(value: float, ascending: bool) -> tuple[int, float]:
    # Nulls always sort last, whatever the direction.
    if pd.isna(value):
        return (1, 0.0)
    return (0, value if ascending else -value)


def reorder_levels(
    df: pd.DataFrame,
    column: str,
    by: str,
    fun: LevelAggregation = "first",
    ascending: bool = False,
) -> pd.DataFrame:
    """Reorder the levels of a factor by a numeric column.

    Levels are sorted by their key from :func:`level_keys` (descending by default).
    Levels with a null key go last, and ties keep their current relative order.
    Only the level sequence changes: every record resolves to the same label before
    and after, and rows are not reordered.

    Args:
        df: Input frame.
        column: Factor column whose levels are reordered.
        by: Numeric column providing the per-level key.
        fun: How to derive one key per level from its records.
        ascending: Sort keys ascending instead of descending.

    Returns:
        Copy of ``df`` with the new level sequence on ``column``.
    """
    keys = level_keys(df, column, by, fun=fun)
    levels = df[column].cat.categories.tolist()
    key_values = keys.to_numpy()

    order = sorted(range(len(levels)), key=lambda i: _sort_key(key_values[i], ascending))
    new_levels = [levels[i] for i in order]

    logger.debug("Reordered '%s' by %s(%s): %s", column, fun, by, new_levels[:10])
    return df.assign(**{column: df[column].cat.reorder_categories(new_levels)})


def relevel(df: pd.DataFrame, column: str, *levels: Hashable) -> pd.DataFrame:
    """Move the given levels to the front of the level sequence, keeping the rest in order."""
    factor = require_factor(df, column)
    current = factor.cat.categories.tolist()
    missing = [level for level in levels if level not in current]
    if missing:
        msg = f"Levels {missing} not found in '{column}'."
        raise ValueError(msg)

    new_levels = [*levels, *(level for level in current if level not in levels)]
    return df.assign(**{column: factor.cat.reorder_categories(new_levels)})


def level_table(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Tabulate a factor's levels with their code and record count, in level order."""
    factor = require_factor(df, column)
    n_levels = len(factor.cat.categories)
    counts = factor.cat.codes.value_counts().reindex(range(n_levels), fill_value=0)
    return pd.DataFrame(
        {
            "level": factor.cat.categories.tolist(),
            "code": np.arange(n_levels),
            "count": counts.to_numpy(),
        },
    )
