"""Seeded train/test partitioning of dataset rows."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import pandas as pd

from iris_tlbx.errors import ConfigurationError, DataError


logger = logging.getLogger(__name__)

_STAGE = "split"


@dataclass(frozen=True)
class Split:
    """Disjoint train/test partition of a frame.

    Attributes:
        train: Rows sampled for training (in sampling order).
        test: All remaining rows (in original order).
        seed: Seed used for sampling.
        train_fraction: Requested training proportion ``p``.
    """

    train: pd.DataFrame
    test: pd.DataFrame
    seed: int
    train_fraction: float

    @property
    def train_index(self) -> pd.Index:
        """Row labels of the training rows."""
        return self.train.index

    @property
    def test_index(self) -> pd.Index:
        """Row labels of the test rows."""
        return self.test.index

    def summary(self) -> pd.DataFrame:
        """Row counts and shares per partition."""
        n_total = len(self.train) + len(self.test)
        return pd.DataFrame(
            {
                "n_rows": [len(self.train), len(self.test)],
                "share": [len(self.train) / n_total, len(self.test) / n_total],
            },
            index=pd.Index(["train", "test"], name="partition"),
        )


def split_dataset(df: pd.DataFrame, *, seed: int, train_fraction: float = 0.8) -> Split:
    """Partition rows into train/test by uniform sampling without replacement.

    Exactly ``floor(train_fraction * len(df))`` rows are drawn with
    :meth:`pandas.DataFrame.sample` seeded by ``seed``; the remaining rows form the
    test set. The same ``(df, seed, train_fraction)`` always yields the same split.

    Args:
        df: Frame to partition. Its index must uniquely identify rows.
        seed: Explicit random seed.
        train_fraction: Training proportion, strictly between 0 and 1.

    Returns:
        Split with disjoint ``train``/``test`` frames whose union is ``df``.

    Raises:
        ConfigurationError: If ``train_fraction`` is outside (0, 1) or leaves one partition empty.
        DataError: If ``df`` is empty or its index has duplicates.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ConfigurationError(
            f"train_fraction must lie strictly between 0 and 1, got {train_fraction}.",
            stage=_STAGE,
            field="train_fraction",
        )
    n_rows = len(df)
    if n_rows == 0:
        raise DataError("Cannot split an empty dataset.", stage=_STAGE)
    if not df.index.is_unique:
        raise DataError("Row index must be unique to identify split membership.", stage=_STAGE)

    n_train = math.floor(train_fraction * n_rows)
    if n_train in (0, n_rows):
        raise ConfigurationError(
            f"train_fraction={train_fraction} leaves an empty partition for {n_rows} rows.",
            stage=_STAGE,
            field="train_fraction",
        )

    train = df.sample(n=n_train, replace=False, random_state=seed)
    test = df.drop(index=train.index)
    logger.info("Split %d rows into %d train / %d test (seed=%d)", n_rows, len(train), len(test), seed)

    return Split(train=train.copy(), test=test.copy(), seed=seed, train_fraction=train_fraction)
