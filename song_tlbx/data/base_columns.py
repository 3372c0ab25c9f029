"""Base column definitions and metadata structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a dataset column.

    Attributes:
        cleaned_name: Standardized column name used in DataFrames.
        dtype: Expected pandas data type as a string.
        pretty_name: Human-readable name for use in plots and reports.
        categorical: Whether the column is stored as a factor (levels + codes).
    """

    original_name: str
    """Column name as it appears in the raw CSV file."""
    cleaned_name: str
    dtype: str
    pretty_name: str
    categorical: bool = False


class BaseColumn(StrEnum):
    """Base class for dataset column enums.

    All derived column enums must define a TARGET member naming the numeric
    column used to order factor levels.

    Subclasses must implement:
    - metadata(): Return ColumnMetadata for each enum member
    - coordinate_columns(): Return the (latitude, longitude) column names
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement metadata() method")

    @classmethod
    def coordinate_columns(cls) -> tuple[str, str]:
        """Get the (latitude, longitude) column names.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{cls.__name__} must implement coordinate_columns() method")

    @classmethod
    def categorical_columns(cls) -> list[str]:
        """Get the names of all columns stored as factors."""
        return [col.value for col in cls if col.is_categorical]

    @classmethod
    def numeric_columns(cls) -> list[str]:
        """Get the names of all numeric (float/int) columns."""
        return [col.value for col in cls if not col.is_categorical and col.dtype_name != "str"]

    @classmethod
    def column_map(cls) -> dict[str, str]:
        """Map cleaned column names to their raw source names, in enum order."""
        return {col.value: col.original_name for col in cls}

    @property
    def pretty_name(self) -> str:
        """Get the human-readable name for plots and reports."""
        return self.metadata().pretty_name

    @property
    def original_name(self) -> str:
        """Get the original column name from the CSV file."""
        return self.metadata().original_name

    @property
    def dtype_name(self) -> str:
        """Get the expected data type as a string."""
        return self.metadata().dtype

    @property
    def is_categorical(self) -> bool:
        return self.metadata().categorical
