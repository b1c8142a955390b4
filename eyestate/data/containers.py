"""
Data containers for the eye-state classification pipeline.

`Dataset` holds raw features and optional labels. `ScaledDataset` is the
only type a classifier accepts; it is produced exclusively by
`FeatureScaler.transform`, so unscaled data cannot reach a model by accident.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from ..exceptions import EmptyInputError, FeatureDimensionError

if TYPE_CHECKING:
    from .feature_scaler import ScalingParameters

# Held by feature_scaler; ScaledDataset refuses construction without it.
_SCALER_KEY = object()

LABELS = (0, 1)


def _readonly(array: np.ndarray) -> np.ndarray:
    array = np.array(array, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Immutable feature matrix with optional binary labels.

    Attributes:
        X: Features of shape (n_records, n_features)
        y: Labels of shape (n_records,) with values in {0, 1}, or None
        feature_names: Optional column names, one per feature
    """
    X: np.ndarray
    y: Optional[np.ndarray] = None
    feature_names: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        X = np.asarray(self.X, dtype=float)
        if X.ndim != 2:
            raise FeatureDimensionError(
                f"X must be 2D (n_records, n_features), got shape {X.shape}"
            )
        if X.shape[0] == 0:
            raise EmptyInputError("Dataset must contain at least one record")
        object.__setattr__(self, 'X', _readonly(X))

        if self.y is not None:
            y = np.asarray(self.y)
            if y.ndim != 1 or len(y) != X.shape[0]:
                raise FeatureDimensionError(
                    f"Length of y ({y.shape}) must match number of records ({X.shape[0]})"
                )
            if not np.all(np.isin(y, LABELS)):
                bad = sorted(set(np.unique(y).tolist()) - set(LABELS))
                raise ValueError(f"Labels must be 0 or 1, found {bad}")
            object.__setattr__(self, 'y', _readonly(y.astype(int)))

        if self.feature_names is not None:
            names = tuple(str(name) for name in self.feature_names)
            if len(names) != X.shape[1]:
                raise FeatureDimensionError(
                    f"Number of feature names ({len(names)}) must match "
                    f"number of features ({X.shape[1]})"
                )
            object.__setattr__(self, 'feature_names', names)

    @property
    def n_records(self) -> int:
        return self.X.shape[0]

    @property
    def n_features(self) -> int:
        return self.X.shape[1]

    @property
    def is_labeled(self) -> bool:
        return self.y is not None

    def __len__(self) -> int:
        return self.n_records

    def column_names(self) -> Tuple[str, ...]:
        """Feature names, falling back to positional names."""
        if self.feature_names is not None:
            return self.feature_names
        return tuple(f'feature_{i}' for i in range(self.n_features))

    def subset(self, indices: Sequence[int]) -> 'Dataset':
        """
        Select records by index, in the given order.

        Args:
            indices: Record indices to keep

        Returns:
            New Dataset with the selected records
        """
        indices = np.asarray(indices, dtype=int)
        return Dataset(
            X=self.X[indices],
            y=self.y[indices] if self.y is not None else None,
            feature_names=self.feature_names,
        )

    def __repr__(self) -> str:
        label_info = f", y={self.y.shape}" if self.y is not None else ", y=None"
        return f"{self.__class__.__name__}(X={self.X.shape}{label_info})"


class ScaledDataset(Dataset):
    """Standardized dataset; created only by `FeatureScaler.transform`."""

    def __init__(
        self,
        X: np.ndarray,
        y: Optional[np.ndarray],
        feature_names: Optional[Tuple[str, ...]],
        params: 'ScalingParameters',
        _key: object = None
    ):
        if _key is not _SCALER_KEY:
            raise TypeError(
                "ScaledDataset instances are created by FeatureScaler.transform"
            )
        super().__init__(X=X, y=y, feature_names=feature_names)
        object.__setattr__(self, 'params', params)

    def subset(self, indices: Sequence[int]) -> 'ScaledDataset':
        indices = np.asarray(indices, dtype=int)
        return ScaledDataset(
            X=self.X[indices],
            y=self.y[indices] if self.y is not None else None,
            feature_names=self.feature_names,
            params=self.params,
            _key=_SCALER_KEY,
        )
