"""Test configuration for the song toolbox."""

from pathlib import Path
import sys

import matplotlib
import pandas as pd
import pytest


matplotlib.use("Agg")

# Ensure the local package is importable when the repo isn't installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(scope="session")
def songs_dataset():
    """Load the bundled song sample once per test session."""
    from song_tlbx.data import SongDataset

    return SongDataset.from_csv()


@pytest.fixture
def raw_songs() -> pd.DataFrame:
    """Raw frame with the source column names of the song table."""
    return pd.DataFrame(
        {
            "title": ["Song 1", "Song 2", "Song 3", "Song 4", "Song 5"],
            "release": ["Beta", "Alpha", "Beta", "Gamma", "Alpha"],
            "artist_name": ["B", "A", "B", "C", "A"],
            "year": [2001, 0, 2001, 1999, 2003],
            "artist_hotttnesss": [0.9, 0.5, 0.9, 0.1, 0.5],
            "latitude": [10.0, None, 10.0, -5.0, 20.0],
            "longitude": [1.0, None, 1.0, 3.0, 2.0],
            "duration": [200.0, 180.0, 240.0, 210.0, 190.0],
        },
    )


@pytest.fixture
def artist_df() -> pd.DataFrame:
    """Three artists with levels [A, B, C] and popularity [5, 9, 1]."""
    from song_tlbx.data.factors import as_factor

    df = pd.DataFrame({"artist": ["A", "B", "C"], "pop": [5.0, 9.0, 1.0]})
    return df.assign(artist=as_factor(df["artist"]))
