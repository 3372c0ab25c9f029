"""Column definitions for the song/artist metadata table."""

from .base_columns import BaseColumn, ColumnMetadata


class SongColumn(BaseColumn):
    """Column names for the song table (a subset of the [Million Song Dataset](http://millionsongdataset.com/) summary file).

    Columns:
    - ``title``: str - Song title
    - ``album``: category - Album (release) the song appears on
    - ``artist``: category - Artist name
    - ``year``: category - Release year as a text label (``"0"`` marks an unknown year)
    - ``popularity``: float - Artist "hotttnesss" score in [0, 1]
    - ``lat``: float - Artist location latitude
    - ``long``: float - Artist location longitude
    """

    TITLE = "title"
    """Song title."""

    # Factors
    ALBUM = "album"
    """Album (release) the song appears on."""
    ARTIST = "artist"
    """Artist name."""
    YEAR = "year"
    """Release year as a text label."""

    # Numeric
    POPULARITY = "popularity"
    """Artist hotttnesss score."""
    TARGET = POPULARITY
    LAT = "lat"
    """Artist location latitude."""
    LONG = "long"
    """Artist location longitude."""

    def metadata(self) -> ColumnMetadata:
        return _COLUMN_METADATA_SONGS[self]

    @classmethod
    def coordinate_columns(cls) -> tuple[str, str]:
        return cls.LAT, cls.LONG


_COLUMN_METADATA_SONGS: dict[SongColumn, ColumnMetadata] = {
    SongColumn.TITLE: ColumnMetadata(
        original_name="title",
        cleaned_name="title",
        dtype="str",
        pretty_name="Title",
    ),
    # Factors
    SongColumn.ALBUM: ColumnMetadata(
        original_name="release",
        cleaned_name="album",
        dtype="category",
        pretty_name="Album",
        categorical=True,
    ),
    SongColumn.ARTIST: ColumnMetadata(
        original_name="artist_name",
        cleaned_name="artist",
        dtype="category",
        pretty_name="Artist",
        categorical=True,
    ),
    SongColumn.YEAR: ColumnMetadata(
        original_name="year",
        cleaned_name="year",
        dtype="category",
        pretty_name="Release Year",
        categorical=True,
    ),
    # Numeric
    SongColumn.POPULARITY: ColumnMetadata(
        original_name="artist_hotttnesss",
        cleaned_name="popularity",
        dtype="float64",
        pretty_name="Artist Popularity (hotttnesss)",
    ),
    SongColumn.LAT: ColumnMetadata(
        original_name="latitude",
        cleaned_name="lat",
        dtype="float64",
        pretty_name="Latitude",
    ),
    SongColumn.LONG: ColumnMetadata(
        original_name="longitude",
        cleaned_name="long",
        dtype="float64",
        pretty_name="Longitude",
    ),
}
