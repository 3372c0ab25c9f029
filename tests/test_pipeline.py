"""End-to-end tests of the song pipeline on the bundled sample."""

import logging
from pathlib import Path

import pandas as pd
import pytest

from song_tlbx.data import SongCol, SongDataset
from song_tlbx.pipeline import SongPipelineConfig, main, run_song_pipeline


@pytest.fixture
def pipeline_result(tmp_path: Path):
    return run_song_pipeline(SongPipelineConfig(output_dir=tmp_path))


def test_rows_and_levels(pipeline_result) -> None:
    dataset = pipeline_result.dataset

    assert pipeline_result.n_loaded == 21
    assert len(dataset) == 17
    assert "0" not in dataset.levels(SongCol.YEAR)
    assert dataset.levels(SongCol.ARTIST)[0] == "The Beatles"
    assert dataset.levels(SongCol.ALBUM)[0] == "Revolver"


def test_files_written(pipeline_result, tmp_path: Path) -> None:
    assert pipeline_result.text.path == tmp_path / "song.csv"
    assert pipeline_result.structured.path == tmp_path / "song.pkl"
    assert pipeline_result.text.path.exists()
    assert pipeline_result.structured.path.exists()


def test_round_trip_outcomes(pipeline_result) -> None:
    assert pipeline_result.structured.lossless
    assert not pipeline_result.text.lossless

    restored = SongDataset.from_structured(pipeline_result.structured.path)
    assert restored.equals(pipeline_result.dataset)


def test_locations_unique(pipeline_result) -> None:
    assert pipeline_result.locations.is_unique


def test_ambiguous_locations_are_reported(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    raw = pd.read_csv(Path(__file__).resolve().parents[1] / "_data" / "songs.csv")
    raw.loc[raw["artist_name"] == "ABBA", "latitude"] = [59.33217, 55.0]
    csv_path = tmp_path / "songs.csv"
    raw.to_csv(csv_path, index=False)

    with caplog.at_level(logging.WARNING, logger="song_tlbx.pipeline"):
        result = run_song_pipeline(SongPipelineConfig(csv_path=csv_path, output_dir=tmp_path / "out"))

    assert result.locations.ambiguous_groups == ["ABBA"]
    assert "more than one location" in caplog.text


def test_missing_source_column_stops_the_run(tmp_path: Path) -> None:
    raw = pd.read_csv(Path(__file__).resolve().parents[1] / "_data" / "songs.csv")
    csv_path = tmp_path / "songs.csv"
    raw.drop(columns=["release"]).to_csv(csv_path, index=False)

    with pytest.raises(KeyError, match="release"):
        run_song_pipeline(SongPipelineConfig(csv_path=csv_path, output_dir=tmp_path / "out"))
    assert not (tmp_path / "out").exists()


def test_main(tmp_path: Path) -> None:
    assert main(["--output-dir", str(tmp_path), "--log-level", "WARNING"]) == 0
    assert (tmp_path / "song.pkl").exists()
