"""Shared fixtures: synthetic eye-state datasets."""

import numpy as np
import pytest

from eyestate.data import Dataset, FeatureScaler


def make_separable(n: int = 100, seed: int = 0) -> Dataset:
    """Two features, label = 1 iff feature 0 > 0, with a gap around zero."""
    rng = np.random.default_rng(seed)
    y = np.arange(n) % 2
    magnitude = rng.uniform(2.0, 4.0, size=n)
    x0 = np.where(y == 1, magnitude, -magnitude)
    x1 = rng.uniform(-1.0, 1.0, size=n)
    return Dataset(X=np.column_stack([x0, x1]), y=y)


@pytest.fixture
def separable():
    return make_separable()


@pytest.fixture
def eeg_like():
    """14 channels around typical EEG magnitudes; label tied to channel 0."""
    rng = np.random.default_rng(7)
    X = rng.normal(4300.0, 40.0, size=(60, 14))
    y = (X[:, 0] > 4300.0).astype(int)
    names = tuple(f'ch{i}' for i in range(14))
    return Dataset(X=X, y=y, feature_names=names)


@pytest.fixture
def scaled_separable(separable):
    return FeatureScaler().fit_transform(separable)
