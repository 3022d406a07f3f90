"""Column definitions for the Iris dataset."""

from .base_columns import BaseColumn, ColumnMetadata


SPECIES_LEVELS: tuple[str, ...] = ("setosa", "versicolor", "virginica")


class IrisColumn(BaseColumn):
    """Column names for [Fisher's Iris dataset](https://archive.ics.uci.edu/dataset/53/iris).

    Columns:
    - ``sepal_length``: float - Sepal length in cm
    - ``sepal_width``: float - Sepal width in cm
    - ``petal_length``: float - Petal length in cm
    - ``petal_width``: float - Petal width in cm
    - ``species``: category - Iris species (setosa, versicolor, virginica)
    """

    # Label column
    TARGET = "species"
    """Iris species (setosa, versicolor, virginica)."""
    SPECIES = TARGET

    # Measurements (cm)
    SEPAL_LENGTH = "sepal_length"
    SEPAL_WIDTH = "sepal_width"
    PETAL_LENGTH = "petal_length"
    PETAL_WIDTH = "petal_width"

    def metadata(self) -> ColumnMetadata:
        return _COLUMN_METADATA_IRIS[self]


_COLUMN_METADATA_IRIS: dict[IrisColumn, ColumnMetadata] = {
    IrisColumn.SEPAL_LENGTH: ColumnMetadata(
        original_name="Sepal.Length",
        cleaned_name="sepal_length",
        dtype="float64",
        pretty_name="Sepal Length (cm)",
    ),
    IrisColumn.SEPAL_WIDTH: ColumnMetadata(
        original_name="Sepal.Width",
        cleaned_name="sepal_width",
        dtype="float64",
        pretty_name="Sepal Width (cm)",
    ),
    IrisColumn.PETAL_LENGTH: ColumnMetadata(
        original_name="Petal.Length",
        cleaned_name="petal_length",
        dtype="float64",
        pretty_name="Petal Length (cm)",
    ),
    IrisColumn.PETAL_WIDTH: ColumnMetadata(
        original_name="Petal.Width",
        cleaned_name="petal_width",
        dtype="float64",
        pretty_name="Petal Width (cm)",
    ),
    IrisColumn.SPECIES: ColumnMetadata(
        original_name="Species",
        cleaned_name="species",
        dtype="category",
        pretty_name="Species",
        levels=SPECIES_LEVELS,
    ),
}
