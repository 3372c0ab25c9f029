"""Per-group coordinate uniqueness check following the analyzer pattern.

Summaries that keep one location per group (e.g. one point per artist on a map) are
only valid when no group carries two different coordinate pairs. The checker reports
the number of distinct complete pairs per group; :func:`first_locations` refuses to
summarize when any group is ambiguous.
"""

from dataclasses import dataclass

import pandas as pd

from song_tlbx.data.views import DatasetView

from .base_analyser import BaseAnalyser


@dataclass(frozen=True)
class CoordinateUniquenessResult:
    """Container for coordinate uniqueness results.

    Attributes:
        pairs_per_group: Number of distinct non-null (lat, long) pairs per group, indexed by
            group label in order of first appearance. Groups without a complete pair count 0.
        group_col: Name of the grouping column.
        lat_col: Name of the latitude column.
        long_col: Name of the longitude column.
    """

    pairs_per_group: pd.Series
    group_col: str
    lat_col: str
    long_col: str

    @property
    def ambiguous_groups(self) -> list:
        """Groups with more than one distinct coordinate pair."""
        return self.pairs_per_group[self.pairs_per_group > 1].index.tolist()

    @property
    def is_unique(self) -> bool:
        return not self.ambiguous_groups

    def to_frame(self) -> pd.DataFrame:
        return (
            self.pairs_per_group.rename("n_pairs")
            .to_frame()
            .assign(ambiguous=lambda d: d["n_pairs"] > 1)
            .reset_index(names=self.group_col)
        )


def _complete_pairs(view: DatasetView, group_col: str, lat_col: str, long_col: str) -> pd.DataFrame:
    """Rows with a group label and both coordinates, groups rendered as plain labels."""
    frame = view.df
    groups = frame[group_col].astype(object)
    complete = (groups.notna() & frame[lat_col].notna() & frame[long_col].notna()).to_numpy()
    return pd.DataFrame(
        {
            group_col: groups[complete],
            lat_col: frame.loc[complete, lat_col],
            long_col: frame.loc[complete, long_col],
        },
    )


class CoordinateUniquenessChecker(BaseAnalyser):
    """Count distinct coordinate pairs per group.

    Only records where both coordinates are non-null take part. Two pairs are distinct
    when either coordinate differs.

    Example:
        >>> from song_tlbx.data import SongDataset
        >>> result = SongDataset.from_csv().make_coordinate_checker().fit().result()
        >>> result.is_unique, result.ambiguous_groups
    """

    def __init__(self, view: DatasetView, group_col: str, lat_col: str, long_col: str) -> None:
        """Initialize the checker.

        Args:
            view: Immutable dataset view holding the three columns
            group_col: Column defining the groups (e.g. artist)
            lat_col: Latitude column
            long_col: Longitude column
        """
        missing = [col for col in (group_col, lat_col, long_col) if col not in view.df.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found in view.")

        self._view = view
        self.group_col = group_col
        self.lat_col = lat_col
        self.long_col = long_col
        self._fitted = False
        self._pairs_per_group: pd.Series | None = None

    def fit(self) -> "CoordinateUniquenessChecker":
        """Count the distinct complete coordinate pairs of every group.

        Returns:
            Self for method chaining.
        """
        groups = self._view.df[self.group_col].astype(object)
        pairs = _complete_pairs(self._view, self.group_col, self.lat_col, self.long_col).drop_duplicates()
        counts = pairs.groupby(self.group_col, sort=False).size()

        order = pd.Index(groups.dropna().unique(), name=self.group_col)
        self._pairs_per_group = counts.reindex(order, fill_value=0).astype(int)
        self._fitted = True
        return self

    def result(self) -> CoordinateUniquenessResult:
        """Return packaged results."""
        self._check_fitted()
        return CoordinateUniquenessResult(
            pairs_per_group=self._pairs_per_group,
            group_col=self.group_col,
            lat_col=self.lat_col,
            long_col=self.long_col,
        )


def first_locations(view: DatasetView, group_col: str, lat_col: str, long_col: str) -> pd.DataFrame:
    """Summarize to one location per group.

    Takes the first complete coordinate pair of each group (in row order) and counts the
    group's records. Groups without any complete pair are left out.

    Raises:
        ValueError: If any group has more than one distinct coordinate pair.
    """
    result = CoordinateUniquenessChecker(view, group_col, lat_col, long_col).fit().result()
    if not result.is_unique:
        ambiguous = result.ambiguous_groups
        msg = (
            f"Cannot keep one location per {group_col}: {len(ambiguous)} groups have more than one "
            f"distinct coordinate pair (e.g. {ambiguous[:5]})."
        )
        raise ValueError(msg)

    firsts = _complete_pairs(view, group_col, lat_col, long_col).groupby(group_col, sort=False).first()
    n_records = view.df[group_col].astype(object).value_counts()
    return firsts.assign(n_records=n_records.reindex(firsts.index).to_numpy()).reset_index()
