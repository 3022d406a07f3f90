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
        levels: Fixed set of category levels for categorical columns, empty for numeric ones.
    """

    original_name: str
    """Column name as it appears in the raw CSV file."""
    cleaned_name: str
    dtype: str
    pretty_name: str
    levels: tuple[str, ...] = ()

    @property
    def is_categorical(self) -> bool:
        """Whether the column holds a finite set of category levels."""
        return bool(self.levels)


class BaseColumn(StrEnum):
    """Base class for dataset column enums.

    All derived column enums must define a TARGET member naming the label column.

    Subclasses must implement:
    - metadata(): Return ColumnMetadata for each enum member
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        """Get metadata for this column.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement metadata() method")

    @classmethod
    def numeric_columns(cls) -> list[str]:
        """Names of all continuous numeric columns."""
        return [col.value for col in cls if not col.metadata().is_categorical]

    @classmethod
    def categorical_columns(cls) -> list[str]:
        """Names of all categorical columns."""
        return [col.value for col in cls if col.metadata().is_categorical]

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
    def levels(self) -> tuple[str, ...]:
        """Category levels (empty for numeric columns)."""
        return self.metadata().levels
