"""song_tlbx: factor handling, serialization and checks for song/artist metadata tables."""

from .data import SongCol, SongDataset


__all__ = ["SongCol", "SongDataset"]
