"""Seeded train/validation and k-fold partitioning."""

import numpy as np
from typing import List, Tuple
import logging

from .containers import Dataset
from ..exceptions import InvalidSplitError

logger = logging.getLogger(__name__)


class Splitter:
    """
    Deterministic dataset partitioning.

    Every method draws one permutation from `numpy.random.default_rng(seed)`,
    so identical seeds and input order always give identical partitions.
    """

    @staticmethod
    def _permutation(n: int, seed: int) -> np.ndarray:
        return np.random.default_rng(seed).permutation(n)

    @classmethod
    def train_validation_indices(cls, n: int, train_fraction: float, seed: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Permuted record indices for a train/validation split.

        Args:
            n: Number of records
            train_fraction: Share of records assigned to train, in (0, 1)
            seed: Random seed

        Returns:
            (train_indices, validation_indices)
        """
        if not 0 < train_fraction < 1:
            raise InvalidSplitError(f"train_fraction must be in (0, 1), got {train_fraction}")

        n_train = int(np.floor(n * train_fraction))
        if n_train == 0 or n_train == n:
            raise InvalidSplitError(
                f"train_fraction={train_fraction} on {n} records leaves an empty partition"
            )

        perm = cls._permutation(n, seed)
        return perm[:n_train], perm[n_train:]

    @classmethod
    def train_validation_split(cls, dataset: Dataset, train_fraction: float, seed: int) -> Tuple[Dataset, Dataset]:
        """Split a dataset into disjoint train and validation sets."""
        train_idx, val_idx = cls.train_validation_indices(len(dataset), train_fraction, seed)
        logger.info(f"Split {len(dataset)} records: train={len(train_idx)}, validation={len(val_idx)}")
        return dataset.subset(train_idx), dataset.subset(val_idx)

    @classmethod
    def k_fold_indices(cls, n: int, k: int, seed: int) -> List[Tuple[np.ndarray, np.ndarray]]:
        """
        Contiguous blocks of one permutation, each held out once.

        Block sizes differ by at most one record.

        Returns:
            List of k (train_indices, test_indices) pairs
        """
        if k < 2:
            raise InvalidSplitError(f"k-fold cross-validation needs k >= 2, got {k}")
        if k > n:
            raise InvalidSplitError(f"Cannot make {k} folds from {n} records")

        blocks = np.array_split(cls._permutation(n, seed), k)
        folds = []
        for i, test_idx in enumerate(blocks):
            train_idx = np.concatenate([b for j, b in enumerate(blocks) if j != i])
            folds.append((train_idx, test_idx))
        return folds

    @classmethod
    def fold_assignment(cls, n: int, k: int, seed: int) -> np.ndarray:
        """Fold id (0..k-1) for every record index."""
        assignment = np.empty(n, dtype=int)
        for fold_id, (_, test_idx) in enumerate(cls.k_fold_indices(n, k, seed)):
            assignment[test_idx] = fold_id
        return assignment

    @classmethod
    def k_fold(cls, dataset: Dataset, k: int, seed: int) -> List[Tuple[Dataset, Dataset]]:
        """(train_fold, test_fold) dataset pairs; preserves the dataset type."""
        return [
            (dataset.subset(train_idx), dataset.subset(test_idx))
            for train_idx, test_idx in cls.k_fold_indices(len(dataset), k, seed)
        ]
