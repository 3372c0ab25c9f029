"""Dataset class for the song/artist metadata table."""

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

import pandas as pd

from song_tlbx.utils.paths import get_dataset_path

from .base_dataset import BaseDataset
from .factors import as_factor
from .song_columns import SongColumn as Col


logger = logging.getLogger(__name__)

ColumnSource = str | Callable[[pd.DataFrame], pd.Series]
"""A raw column name, or a callable computing the column from the raw frame."""


def select_columns(raw: pd.DataFrame, column_map: Mapping[str, ColumnSource]) -> pd.DataFrame:
    """Select and rename raw columns.

    Args:
        raw: Frame as read from disk.
        column_map: ``{destination_name: source_column | callable}`` in output order.
            A callable receives ``raw`` and must return one value per row.

    Returns:
        Frame holding exactly the mapped columns, in mapping order.

    Raises:
        KeyError: If any named source column does not exist in ``raw``.
        ValueError: If a callable returns the wrong number of values, or a Series whose
            index differs from ``raw.index``.
    """
    missing = [src for src in column_map.values() if isinstance(src, str) and src not in raw.columns]
    if missing:
        msg = f"Source columns {missing} not found. Available columns: {raw.columns.tolist()}"
        raise KeyError(msg)

    return pd.DataFrame(
        {str(dest): _evaluate(raw, str(dest), src) for dest, src in column_map.items()},
        index=raw.index,
    )


def _evaluate(raw: pd.DataFrame, dest: str, src: ColumnSource) -> pd.Series:
    if isinstance(src, str):
        return raw[src]

    values = src(raw)
    if isinstance(values, pd.Series) and not values.index.equals(raw.index):
        msg = f"Expression for '{dest}' returned a Series whose index does not match the raw frame."
        raise ValueError(msg)
    if len(values) != len(raw):
        msg = f"Expression for '{dest}' returned {len(values)} values for {len(raw)} rows."
        raise ValueError(msg)
    return values if isinstance(values, pd.Series) else pd.Series(values, index=raw.index)


class SongDataset(BaseDataset):
    """Loading and factor handling for the song table.

    **Example workflow**:
    >>> from song_tlbx.data import SongCol, SongDataset
    >>> ds = SongDataset.from_csv()
    >>> ds = (
    ...     ds.drop_level(SongCol.YEAR, "0")
    ...     .reorder_levels(SongCol.ARTIST, by=SongCol.POPULARITY)
    ...     .reorder_levels(SongCol.ALBUM, by=SongCol.POPULARITY)
    ... )
    >>> ds.levels(SongCol.ARTIST)[:3]
    >>> ds.round_trip("out/song.pkl").lossless
    True
    >>> locations = ds.make_coordinate_checker().fit().result()
    >>> locations.ambiguous_groups
    """

    Col = Col

    @classmethod
    def from_csv(
        cls,
        csv_path: str | Path | None = None,
        *,
        column_map: Mapping[str, ColumnSource] | None = None,
        categorical: Iterable[str] | None = None,
    ) -> "SongDataset":
        """Load the song table from a CSV file.

        - Select and rename columns (default: :meth:`SongColumn.column_map`)
        - Coerce numeric columns, turn categorical columns into factors with sorted levels

        Args:
            csv_path: Path to the CSV file (defaults to the bundled sample)
            column_map: Mapping ``{destination: source_column | callable}``
            categorical: Destination columns to store as factors (default: album, artist, year)

        Returns:
            SongDataset instance with loaded and typed data
        """
        csv_path = get_dataset_path("songs") if csv_path is None else Path(csv_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found at: {csv_path}")

        raw = pd.read_csv(csv_path)
        logger.info("Loaded %d rows x %d columns from %s", len(raw), raw.shape[1], csv_path)
        return cls.from_frame(raw, column_map=column_map, categorical=categorical)

    @classmethod
    def from_frame(
        cls,
        raw: pd.DataFrame,
        *,
        column_map: Mapping[str, ColumnSource] | None = None,
        categorical: Iterable[str] | None = None,
    ) -> "SongDataset":
        """Build a dataset from an in-memory raw frame (same rules as :meth:`from_csv`)."""
        column_map = Col.column_map() if column_map is None else column_map
        categorical = Col.categorical_columns() if categorical is None else [str(col) for col in categorical]

        songs = select_columns(raw, column_map).pipe(cls._convert_data_types, categorical=categorical)
        return cls(df=songs)

    @staticmethod
    def _convert_data_types(df: pd.DataFrame, categorical: list[str]) -> pd.DataFrame:
        """Set appropriate data types for each col.

        Factor columns get levels sorted ascending by label text. Known numeric columns
        are coerced, so unparsable values become null.
        """
        missing = [col for col in categorical if col not in df.columns]
        if missing:
            raise KeyError(f"Categorical columns {missing} are not among the selected columns.")

        numeric_cols = [col for col in Col.numeric_columns() if col in df.columns and col not in categorical]
        return df.assign(
            **{col: as_factor(df[col]) for col in categorical},
            **{col: pd.to_numeric(df[col], errors="coerce").astype("float64") for col in numeric_cols},
        )

    def _coordinate_columns(
        self,
        group_col: str | None,
        lat_col: str | None,
        long_col: str | None,
    ) -> tuple[str, str, str]:
        return super()._coordinate_columns(group_col or Col.ARTIST, lat_col, long_col)

    def first_locations(self) -> pd.DataFrame:
        """One row per artist with its (unique) location; see :func:`first_locations`."""
        from song_tlbx.analysis.coordinate_uniqueness import first_locations

        group_col, lat_col, long_col = self._coordinate_columns(None, None, None)
        return first_locations(self.view(columns=[group_col, lat_col, long_col]), group_col, lat_col, long_col)
