"""Data module for dataset classes, factor handling and serialization."""

from .compare import FrameComparison, compare_frames, frames_equal
from .io import RoundTripError, RoundTripResult
from .song_columns import SongColumn as SongCol
from .song_dataset import SongDataset


__all__ = [
    "FrameComparison",
    "RoundTripError",
    "RoundTripResult",
    "SongCol",
    "SongDataset",
    "compare_frames",
    "frames_equal",
]
