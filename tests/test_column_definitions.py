"""Tests for column definition modules."""

import pytest

from iris_tlbx.data.base_columns import BaseColumn, ColumnMetadata
from iris_tlbx.data.iris_columns import SPECIES_LEVELS, IrisColumn


class TestColumnMetadata:
    """Test ColumnMetadata dataclass."""

    def test_column_metadata_creation(self) -> None:
        """Test creating column metadata."""
        metadata = ColumnMetadata(
            original_name="Test Name",
            cleaned_name="test_name",
            dtype="float64",
            pretty_name="Test Name (units)",
        )
        assert metadata.original_name == "Test Name"
        assert metadata.cleaned_name == "test_name"
        assert metadata.levels == ()
        assert not metadata.is_categorical

    def test_column_metadata_is_frozen(self) -> None:
        """Test that ColumnMetadata is immutable."""
        metadata = ColumnMetadata(original_name="Test", cleaned_name="test", dtype="str", pretty_name="Test")
        with pytest.raises(AttributeError):
            metadata.original_name = "Changed"  # type: ignore[misc]

    def test_levels_mark_categorical(self) -> None:
        metadata = ColumnMetadata("Kind", "kind", "category", "Kind", levels=("a", "b"))
        assert metadata.is_categorical


class TestIrisColumn:
    """Test IrisColumn enum."""

    def test_is_base_column(self) -> None:
        assert issubclass(IrisColumn, BaseColumn)

    def test_target_is_species(self) -> None:
        assert IrisColumn.TARGET == "species"
        assert IrisColumn.SPECIES is IrisColumn.TARGET

    def test_members_are_strings(self) -> None:
        """Enum members compare equal to the cleaned DataFrame column names."""
        assert IrisColumn.PETAL_LENGTH == "petal_length"
        assert f"{IrisColumn.SEPAL_WIDTH}" == "sepal_width"

    def test_numeric_and_categorical_columns(self) -> None:
        assert IrisColumn.numeric_columns() == ["sepal_length", "sepal_width", "petal_length", "petal_width"]
        assert IrisColumn.categorical_columns() == ["species"]

    def test_every_member_has_metadata(self) -> None:
        for col in IrisColumn:
            meta = col.metadata()
            assert meta.cleaned_name == col.value
            assert meta.pretty_name

    def test_species_levels(self) -> None:
        assert IrisColumn.SPECIES.levels == SPECIES_LEVELS
        assert IrisColumn.PETAL_WIDTH.levels == ()

    def test_pretty_and_original_names(self) -> None:
        assert IrisColumn.PETAL_LENGTH.pretty_name == "Petal Length (cm)"
        assert IrisColumn.SEPAL_LENGTH.original_name == "Sepal.Length"
        assert IrisColumn.SPECIES.dtype_name == "category"
