"""Classical classifier strategies backed by scikit-learn."""

import numpy as np
from dataclasses import dataclass
from typing import Any, Optional
from sklearn.svm import SVC
from sklearn.neighbors import NearestNeighbors
from loguru import logger

from .base import ClassifierStrategy, Hyperparameters, ModelFactory, to_float, to_int
from ..data.containers import ScaledDataset
from ..exceptions import InvalidHyperparameterError


class KernelClassifier(ClassifierStrategy):
    """
    RBF kernel support vector machine.

    K(x, x') = exp(-gamma * ||x - x'||^2); C trades training error against
    margin width. The quadratic program is solved by `sklearn.svm.SVC`.
    """

    name = "svm"
    param_names = ("C", "gamma")

    def _validate(self, params: Hyperparameters, n_train: Optional[int]) -> Hyperparameters:
        C = to_float(params["C"], "C")
        gamma = to_float(params["gamma"], "gamma")
        if not C > 0:
            raise InvalidHyperparameterError(f"C must be > 0, got {C}")
        if not gamma > 0:
            raise InvalidHyperparameterError(f"gamma must be > 0, got {gamma}")
        return {"C": C, "gamma": gamma}

    def fit(self, train: ScaledDataset, params: Hyperparameters) -> SVC:
        self._require_scaled(train, labeled=True)
        params = self.validate(params)
        model = SVC(kernel="rbf", C=params["C"], gamma=params["gamma"])
        model.fit(train.X, train.y)
        logger.debug(f"{self.name} fitted on {len(train)} records: {params}, "
                     f"{int(model.n_support_.sum())} support vectors")
        return model

    def predict(self, model: SVC, data: ScaledDataset) -> np.ndarray:
        self._require_scaled(data)
        return model.predict(data.X).astype(int)


@dataclass(frozen=True, eq=False)
class NeighborModel:
    """Stored training set plus the neighbour index built over it."""
    train: ScaledDataset
    n_neighbors: int
    index: Any


class NeighborClassifier(ClassifierStrategy):
    """
    k-nearest-neighbour majority vote under Euclidean distance.

    Ties on an even k go to the lower label (0, eye open).
    """

    name = "knn"
    param_names = ("n_neighbors",)

    def _validate(self, params: Hyperparameters, n_train: Optional[int]) -> Hyperparameters:
        k = to_int(params["n_neighbors"], "n_neighbors")
        if k < 1:
            raise InvalidHyperparameterError(f"n_neighbors must be >= 1, got {k}")
        if n_train is not None and k > n_train:
            raise InvalidHyperparameterError(
                f"n_neighbors={k} exceeds the {n_train} available training records"
            )
        return {"n_neighbors": k}

    def fit(self, train: ScaledDataset, params: Hyperparameters) -> NeighborModel:
        self._require_scaled(train, labeled=True)
        params = self.validate(params, n_train=len(train))
        # brute force keeps neighbour order stable for equal distances
        index = NearestNeighbors(n_neighbors=params["n_neighbors"], algorithm="brute", metric="euclidean")
        index.fit(train.X)
        return NeighborModel(train=train, n_neighbors=params["n_neighbors"], index=index)

    def predict(self, model: NeighborModel, data: ScaledDataset) -> np.ndarray:
        self._require_scaled(data)
        neighbor_idx = model.index.kneighbors(data.X, return_distance=False)
        return self.vote(model.train.y[neighbor_idx])

    @staticmethod
    def vote(neighbor_labels: np.ndarray) -> np.ndarray:
        """
        Majority label per row of neighbour labels.

        Label 1 wins only with a strict majority, so a tied vote yields 0.
        """
        neighbor_labels = np.atleast_2d(neighbor_labels)
        k = neighbor_labels.shape[1]
        closed_votes = neighbor_labels.sum(axis=1)
        return (2 * closed_votes > k).astype(int)


# Register all models
ModelFactory.register_model('svm', KernelClassifier)
ModelFactory.register_model('knn', NeighborClassifier)
