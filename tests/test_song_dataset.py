"""Tests for SongDataset loading and its factor/serialization methods."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from song_tlbx.data import SongCol, SongDataset
from song_tlbx.data.song_dataset import select_columns


class TestSelectColumns:
    """Test column selection and renaming."""

    def test_selects_and_renames_in_mapping_order(self, raw_songs: pd.DataFrame) -> None:
        selected = select_columns(raw_songs, {"artist": "artist_name", "title": "title"})

        assert selected.columns.tolist() == ["artist", "title"]
        assert selected["artist"].tolist() == raw_songs["artist_name"].tolist()

    def test_expression_columns(self, raw_songs: pd.DataFrame) -> None:
        selected = select_columns(
            raw_songs,
            {"title": "title", "minutes": lambda raw: raw["duration"] / 60},
        )
        assert selected["minutes"].iloc[0] == pytest.approx(200.0 / 60)

    def test_expression_returning_array(self, raw_songs: pd.DataFrame) -> None:
        selected = select_columns(raw_songs, {"n": lambda raw: np.arange(len(raw))})
        assert selected["n"].tolist() == [0, 1, 2, 3, 4]

    def test_expression_with_foreign_index(self, raw_songs: pd.DataFrame) -> None:
        def shifted(raw: pd.DataFrame) -> pd.Series:
            return raw["duration"].reset_index(drop=True).set_axis(range(10, 15))

        with pytest.raises(ValueError, match="index does not match"):
            select_columns(raw_songs, {"duration": shifted})

    def test_expression_with_wrong_length(self, raw_songs: pd.DataFrame) -> None:
        with pytest.raises(ValueError, match="returned 2 values for 5 rows"):
            select_columns(raw_songs, {"pair": lambda raw: [1, 2]})

    def test_missing_source_column(self, raw_songs: pd.DataFrame) -> None:
        with pytest.raises(KeyError, match="song_hotttnesss"):
            select_columns(raw_songs, {"title": "title", "pop": "song_hotttnesss"})


class TestSongDataset:
    """Test SongDataset functionality."""

    @pytest.fixture
    def sample_dataset(self, raw_songs: pd.DataFrame, tmp_path: Path) -> SongDataset:
        """Create a sample dataset from CSV."""
        csv_path = tmp_path / "songs.csv"
        raw_songs.to_csv(csv_path, index=False)
        return SongDataset.from_csv(csv_path)

    def test_columns_selected_and_renamed(self, sample_dataset: SongDataset) -> None:
        assert sample_dataset.df.columns.tolist() == [
            "title",
            "album",
            "artist",
            "year",
            "popularity",
            "lat",
            "long",
        ]
        assert "duration" not in sample_dataset.df.columns

    def test_factor_columns(self, sample_dataset: SongDataset) -> None:
        assert sample_dataset.categorical_cols.tolist() == ["album", "artist", "year"]
        assert sample_dataset.levels(SongCol.ALBUM) == ["Alpha", "Beta", "Gamma"]
        assert sample_dataset.levels(SongCol.ARTIST) == ["A", "B", "C"]
        assert sample_dataset.levels(SongCol.YEAR) == ["0", "1999", "2001", "2003"]

    def test_title_is_not_a_factor(self, sample_dataset: SongDataset) -> None:
        assert not isinstance(sample_dataset.df[SongCol.TITLE].dtype, pd.CategoricalDtype)

    def test_numeric_columns(self, sample_dataset: SongDataset) -> None:
        assert sample_dataset.numeric_cols.tolist() == ["popularity", "lat", "long"]
        assert np.isnan(sample_dataset.df[SongCol.LAT].iloc[1])

    def test_unparsable_numbers_become_null(self, raw_songs: pd.DataFrame) -> None:
        raw = raw_songs.assign(artist_hotttnesss=["0.9", "n/a", "0.9", "0.1", ""])
        dataset = SongDataset.from_frame(raw)
        assert dataset.df[SongCol.POPULARITY].isna().tolist() == [False, True, False, False, True]

    def test_infinite_year_does_not_abort_load(self, raw_songs: pd.DataFrame) -> None:
        raw = raw_songs.assign(year=[2001.0, np.inf, 2001.0, 1999.0, 2003.0])
        dataset = SongDataset.from_frame(raw)
        assert "inf" in dataset.levels(SongCol.YEAR)
        assert len(dataset) == 5

    def test_missing_source_column_is_fatal(self, raw_songs: pd.DataFrame) -> None:
        with pytest.raises(KeyError, match="artist_name"):
            SongDataset.from_frame(raw_songs.drop(columns=["artist_name"]))

    def test_custom_mapping_and_factors(self, raw_songs: pd.DataFrame) -> None:
        dataset = SongDataset.from_frame(
            raw_songs,
            column_map={"artist": "artist_name", "duration": "duration"},
            categorical=["artist"],
        )
        assert dataset.df.columns.tolist() == ["artist", "duration"]
        assert dataset.categorical_cols.tolist() == ["artist"]

    def test_unknown_factor_column(self, raw_songs: pd.DataFrame) -> None:
        with pytest.raises(KeyError, match="genre"):
            SongDataset.from_frame(raw_songs, categorical=["genre"])

    def test_missing_csv(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SongDataset.from_csv(tmp_path / "nope.csv")

    def test_not_loaded(self) -> None:
        with pytest.raises(ValueError, match="not loaded"):
            _ = SongDataset().df

    def test_drop_level_returns_new_dataset(self, sample_dataset: SongDataset) -> None:
        filtered = sample_dataset.drop_level(SongCol.YEAR, "0")

        assert isinstance(filtered, SongDataset)
        assert len(filtered) == 4
        assert len(sample_dataset) == 5
        assert filtered.levels(SongCol.YEAR) == ["1999", "2001", "2003"]

    def test_reorder_defaults_to_popularity(self, sample_dataset: SongDataset) -> None:
        reordered = sample_dataset.reorder_levels(SongCol.ARTIST)
        assert reordered.levels(SongCol.ARTIST) == ["B", "A", "C"]
        assert sample_dataset.levels(SongCol.ARTIST) == ["A", "B", "C"]

    def test_relevel_and_level_table(self, sample_dataset: SongDataset) -> None:
        releveled = sample_dataset.relevel(SongCol.ALBUM, "Gamma")
        table = releveled.level_table(SongCol.ALBUM)
        assert table["level"].tolist() == ["Gamma", "Alpha", "Beta"]
        assert table["count"].tolist() == [1, 2, 2]

    def test_structured_round_trip(self, sample_dataset: SongDataset, tmp_path: Path) -> None:
        transformed = sample_dataset.drop_level(SongCol.YEAR, "0").reorder_levels(SongCol.ARTIST)
        path = transformed.to_structured(tmp_path / "song.pkl")

        restored = SongDataset.from_structured(path)

        assert transformed.equals(restored)
        assert restored.levels(SongCol.ARTIST) == transformed.levels(SongCol.ARTIST)

    def test_text_round_trip_is_lossy(self, sample_dataset: SongDataset, tmp_path: Path) -> None:
        result = sample_dataset.round_trip(tmp_path / "song.csv", fmt="text")
        assert not result.lossless
        assert set(result.comparison.differences) >= {"album", "artist", "year"}

    def test_get_pretty_name(self, sample_dataset: SongDataset) -> None:
        assert sample_dataset.get_pretty_name("popularity") == "Artist Popularity (hotttnesss)"
        assert sample_dataset.get_pretty_name("year") == "Release Year"
        assert sample_dataset.get_pretty_name("song_count") == "Song Count"

    def test_view(self, sample_dataset: SongDataset) -> None:
        view = sample_dataset.view(columns=[SongCol.ARTIST, SongCol.POPULARITY, SongCol.LAT])

        assert view.categorical_cols == ["artist"]
        assert view.numeric_cols == ["popularity", "lat"]
        assert view.target_col == "popularity"
        assert len(view.df) == 5

    def test_view_drop_missing(self, sample_dataset: SongDataset) -> None:
        view = sample_dataset.view(columns=[SongCol.LAT, SongCol.LONG], missing_strategy="drop")
        assert len(view.df) == 4

    def test_view_invalid_strategy(self, sample_dataset: SongDataset) -> None:
        with pytest.raises(ValueError, match="missing_strategy"):
            sample_dataset.view(missing_strategy="impute")  # type: ignore[arg-type]

    def test_view_unknown_column(self, sample_dataset: SongDataset) -> None:
        with pytest.raises(KeyError):
            sample_dataset.view(columns=["genre"])


class TestBundledSample:
    """Checks against the bundled sample in ``_data/songs.csv``."""

    def test_loads(self, songs_dataset: SongDataset) -> None:
        assert len(songs_dataset) == 21
        assert "0" in songs_dataset.levels(SongCol.YEAR)

    def test_unknown_years_dropped(self, songs_dataset: SongDataset) -> None:
        known = songs_dataset.drop_level(SongCol.YEAR, "0")

        assert len(known) == 17
        assert "0" not in known.levels(SongCol.YEAR)
        # artist levels are untouched by the year filter
        assert known.levels(SongCol.ARTIST) == songs_dataset.levels(SongCol.ARTIST)

    def test_artists_by_popularity(self, songs_dataset: SongDataset) -> None:
        levels = songs_dataset.drop_level(SongCol.YEAR, "0").reorder_levels(SongCol.ARTIST).levels(SongCol.ARTIST)

        assert levels[:3] == ["The Beatles", "Bob Dylan", "ABBA"]
        # equal popularity: alphabetical order is kept
        assert levels.index("Gob") < levels.index("The Box Tops")
        # Fleetwood Mac has no popularity, artists without known-year songs have no records
        assert levels[-5:] == ["Delbert McClinton", "Fleetwood Mac", "Jacques Brel", "JennyAnyKind", "Planet P Project"]
