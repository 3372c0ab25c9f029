"""Base dataset class for all dataset implementations."""

from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Self

import pandas as pd


if TYPE_CHECKING:
    from song_tlbx.analysis.coordinate_uniqueness import CoordinateUniquenessChecker

from . import factors, io
from .base_columns import BaseColumn
from .compare import FrameComparison, compare_frames
from .views import DatasetView


class BaseDataset(ABC):
    """Abstract base class for dataset handlers used throughout the toolbox.

    Datasets are treated as values: every transformation returns a new instance and
    leaves the current one untouched.
    """

    Col: type[BaseColumn]

    def __init__(self, df: pd.DataFrame | None = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and cleaned DataFrame (optional)
        """
        self._df: pd.DataFrame | None = df

    @classmethod
    @abstractmethod
    def from_csv(cls, csv_path: str | Path | None = None, **kwargs: object) -> "BaseDataset":
        """Load dataset from CSV file.

        Args:
            csv_path: Path to the CSV file
            **kwargs: Additional loading parameters

        Returns:
            Dataset instance with loaded data
        """
        ...

    @classmethod
    def from_structured(cls, path: str | Path) -> Self:
        """Restore a dataset written with :meth:`to_structured`."""
        return cls(df=io.read_structured(path))

    @property
    def df(self) -> pd.DataFrame:
        """Get the cleaned DataFrame.

        Raises:
            ValueError: If dataset not loaded
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Use from_csv() to load data.")
        return self._df

    def __len__(self) -> int:
        return len(self.df)

    def __repr__(self) -> str:
        if self._df is None:
            return f"{type(self).__name__}(not loaded)"
        return f"{type(self).__name__}(rows={len(self._df)}, columns={self._df.columns.tolist()})"

    @property
    def numeric_cols(self) -> pd.Index:
        """Get numeric column names.

        Default implementation filters columns by numeric dtypes.
        """
        return self.df.select_dtypes(include=["number"]).columns

    @property
    def categorical_cols(self) -> pd.Index:
        """Get factor column names, in frame order."""
        return self.df.select_dtypes(include=["category"]).columns

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to pretty name for visualization.

        Args:
            column_name: The cleaned column name

        Returns:
            Pretty name suitable for plot labels and titles
        """
        try:
            col_enum = self.Col(column_name)
        except ValueError:
            # Fallback: capitalize and replace underscores if not in enum
            return column_name.replace("_", " ").title()
        else:
            return str(col_enum.pretty_name)

    def view(
        self,
        columns: Iterable[str] | None = None,
        missing_strategy: Literal["keep", "drop"] = "keep",
    ) -> DatasetView:
        """Build an immutable dataset view for analyzers and plotting layers.

        Args:
            columns: Columns to include in the view (defaults to all)
            missing_strategy: ``"keep"`` rows with nulls or ``"drop"`` them (within the selected columns)

        Returns:
            DatasetView containing selected data and metadata
        """
        if missing_strategy not in ("keep", "drop"):
            raise ValueError(
                f"Invalid missing_strategy='{missing_strategy}'. Use 'keep' or 'drop'.",
            )

        selected_cols = list(columns or self.df.columns.to_list())
        missing = [col for col in selected_cols if col not in self.df.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found in dataset.")

        frame = self.df.loc[:, selected_cols]
        if missing_strategy == "drop":
            frame = frame.dropna(axis=0, how="any")

        target = self.Col.TARGET if self.Col.TARGET in selected_cols else None
        return DatasetView(
            df=frame,
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=[col for col in selected_cols if col in self.numeric_cols],
            categorical_cols=[col for col in selected_cols if col in self.categorical_cols],
            target_col=target,
        )

    # Factor operations

    def _with_df(self, df: pd.DataFrame) -> Self:
        return type(self)(df=df)

    def levels(self, column: str) -> list[Hashable]:
        """Return the current level sequence of a factor column."""
        return factors.require_factor(self.df, column).cat.categories.tolist()

    def level_table(self, column: str) -> pd.DataFrame:
        return factors.level_table(self.df, column)

    def drop_level(self, column: str, sentinel: Hashable) -> Self:
        """Drop records labelled ``sentinel`` in ``column`` and prune unused levels."""
        return self._with_df(factors.drop_level(self.df, column, sentinel))

    def drop_unused_levels(self, columns: Iterable[str] | None = None) -> Self:
        return self._with_df(factors.drop_unused_levels(self.df, columns))

    def reorder_levels(
        self,
        column: str,
        by: str | None = None,
        fun: factors.LevelAggregation = "first",
        ascending: bool = False,
    ) -> Self:
        """Reorder the levels of ``column`` by a numeric column (defaults to ``Col.TARGET``).

        See :func:`song_tlbx.data.factors.reorder_levels` for the ordering rules.
        """
        return self._with_df(
            factors.reorder_levels(self.df, column, by or self.Col.TARGET, fun=fun, ascending=ascending),
        )

    def relevel(self, column: str, *levels: Hashable) -> Self:
        return self._with_df(factors.relevel(self.df, column, *levels))

    # Serialization

    def to_text(self, path: str | Path) -> Path:
        return io.write_text(self.df, path)

    def to_structured(self, path: str | Path) -> Path:
        return io.write_structured(self.df, path)

    def round_trip(self, path: str | Path, fmt: io.Format = "structured") -> io.RoundTripResult:
        """Write the dataset in ``fmt``, read it back and compare against the current frame."""
        return io.round_trip(self.df, path, fmt)

    def compare(self, other: "BaseDataset | pd.DataFrame") -> FrameComparison:
        other_df = other.df if isinstance(other, BaseDataset) else other
        return compare_frames(self.df, other_df)

    def equals(self, other: "BaseDataset | pd.DataFrame") -> bool:
        """Structural equality: values, dtypes, level sequences, codes and row order."""
        return self.compare(other).equal

    # Analyzers

    def make_coordinate_checker(
        self,
        group_col: str | None = None,
        lat_col: str | None = None,
        long_col: str | None = None,
    ) -> "CoordinateUniquenessChecker":
        """Instantiate a coordinate uniqueness checker configured for this dataset.

        Args:
            group_col: Grouping column
            lat_col: Latitude column
            long_col: Longitude column

        Latitude and longitude default to ``Col.coordinate_columns()``. Subclasses may supply
        a default grouping column by overriding ``_coordinate_columns``.

        Returns:
            CoordinateUniquenessChecker instance
        """
        from song_tlbx.analysis.coordinate_uniqueness import CoordinateUniquenessChecker

        group_col, lat_col, long_col = self._coordinate_columns(group_col, lat_col, long_col)
        return CoordinateUniquenessChecker(
            self.view(columns=[group_col, lat_col, long_col]),
            group_col=group_col,
            lat_col=lat_col,
            long_col=long_col,
        )

    def _coordinate_columns(
        self,
        group_col: str | None,
        lat_col: str | None,
        long_col: str | None,
    ) -> tuple[str, str, str]:
        if group_col is None:
            raise ValueError("group_col must be given for this dataset.")
        default_lat, default_long = self.Col.coordinate_columns()
        return group_col, lat_col or default_lat, long_col or default_long
