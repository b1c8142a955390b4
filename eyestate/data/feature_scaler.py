"""
Feature Scaler Module
====================

Standardization of EEG channels using statistics from training data only.

"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple, Union
import logging

from .containers import Dataset, ScaledDataset, _SCALER_KEY, _readonly
from ..exceptions import DegenerateFeatureError, FeatureDimensionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ScalingParameters:
    """Per-feature mean and sample standard deviation."""
    mean: np.ndarray
    std: np.ndarray
    feature_names: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        mean = np.asarray(self.mean, dtype=float)
        std = np.asarray(self.std, dtype=float)
        if mean.shape != std.shape or mean.ndim != 1:
            raise FeatureDimensionError(
                f"mean and std must be 1D of equal length, got {mean.shape} and {std.shape}"
            )

        names = self.feature_names or tuple(f'feature_{i}' for i in range(len(std)))
        degenerate = [names[i] for i in np.flatnonzero(~(std > 0))]
        if degenerate:
            raise DegenerateFeatureError(degenerate)

        object.__setattr__(self, 'mean', _readonly(mean))
        object.__setattr__(self, 'std', _readonly(std))

    @property
    def n_features(self) -> int:
        return len(self.mean)


class FeatureScaler:
    """Z-score scaler: fit on the training partition, apply everywhere."""

    def __init__(self):
        self.params: Optional[ScalingParameters] = None

    def fit(self, dataset: Dataset) -> ScalingParameters:
        """
        Compute per-feature mean and sample standard deviation.

        Args:
            dataset: Reference (training) dataset

        Returns:
            Immutable scaling parameters

        Raises:
            DegenerateFeatureError: If any feature has zero standard deviation
        """
        X = dataset.X
        mean = X.mean(axis=0)
        if dataset.n_records > 1:
            std = X.std(axis=0, ddof=1)
        else:
            # sample deviation is undefined for one record
            std = np.zeros(dataset.n_features)

        self.params = ScalingParameters(mean=mean, std=std, feature_names=dataset.feature_names)
        logger.info(f"Fitted standard scaler on {dataset.n_records} records, {dataset.n_features} features")
        return self.params

    def transform(self, dataset: Dataset, params: Optional[ScalingParameters] = None) -> ScaledDataset:
        """Standardize a dataset with the given (or fitted) parameters."""
        params = params or self.params
        if params is None:
            raise RuntimeError("Scaler not fitted. Call fit() first.")

        if dataset.n_features != params.n_features:
            raise FeatureDimensionError(
                f"Dataset has {dataset.n_features} features, scaler was fitted on {params.n_features}"
            )

        X_scaled = (dataset.X - params.mean) / params.std
        return ScaledDataset(
            X=X_scaled,
            y=dataset.y,
            feature_names=dataset.feature_names,
            params=params,
            _key=_SCALER_KEY,
        )

    def fit_transform(self, train: Dataset, *datasets: Dataset) -> Union[ScaledDataset, tuple]:
        """
        Fit on training data and transform all provided datasets.

        Args:
            train: Training data to fit on
            *datasets: Additional datasets to transform (e.g. validation, test)

        Returns:
            Single ScaledDataset if only train provided, tuple otherwise
        """
        params = self.fit(train)
        train_scaled = self.transform(train, params)

        if not datasets:
            return train_scaled
        return (train_scaled,) + tuple(self.transform(ds, params) for ds in datasets)

    @staticmethod
    def inverse_transform(scaled: ScaledDataset) -> Dataset:
        """Undo standardization using the parameters carried by the dataset."""
        params = scaled.params
        return Dataset(
            X=scaled.X * params.std + params.mean,
            y=scaled.y,
            feature_names=scaled.feature_names,
        )
