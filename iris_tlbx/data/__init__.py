"""Data module for dataset classes and preprocessing."""

from .iris_columns import IrisColumn as IrisCol
from .iris_dataset import IrisDataset
from .preprocessing import add_dummy_columns, add_scaled_columns


__all__ = ["IrisCol", "IrisDataset", "add_dummy_columns", "add_scaled_columns"]
