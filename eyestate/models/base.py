"""Classifier strategy interface and factory.

This module provides the contract every classifier family implements so the
model-selection pipeline can treat them interchangeably, plus a registry for
creating strategies by name and helpers for coercing YAML hyperparameters.

Key Components:
    - ClassifierStrategy: Stateless fit/predict interface over scaled data
    - ModelFactory: Registry for strategy creation by name
    - to_float / to_int: Strict numeric conversion of grid values
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Any, Dict, Optional, Type

from ..data.containers import Dataset, ScaledDataset
from ..exceptions import InvalidHyperparameterError

Hyperparameters = Dict[str, Any]


def to_float(value: Any, name: str) -> float:
    """
    Convert a hyperparameter value to float.

    Accepts numbers and numeric strings (PyYAML reads `1e-3` as a string).

    Args:
        value: Value to convert
        name: Hyperparameter name, used in the error message

    Raises:
        InvalidHyperparameterError: If the value is not numeric
    """
    if isinstance(value, bool):
        raise InvalidHyperparameterError(f"{name} must be a number, got {value!r}")
    try:
        return float(str(value)) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise InvalidHyperparameterError(f"{name} must be a number, got {value!r}") from None


def to_int(value: Any, name: str) -> int:
    """Convert a hyperparameter value to int, rejecting fractional values."""
    number = to_float(value, name)
    if not number.is_integer():
        raise InvalidHyperparameterError(f"{name} must be an integer, got {value!r}")
    return int(number)


class ClassifierStrategy(ABC):
    """
    Abstract interface for a classifier family.

    Strategies hold no fitted state: `fit` returns a model handle that is
    passed back to `predict`. This keeps cross-validation folds independent
    and safe to evaluate in parallel.

    Attributes:
        name: Registered name of the strategy
        param_names: Hyperparameters the strategy accepts
    """

    name: str = "base"
    param_names: tuple = ()

    def validate(self, params: Hyperparameters, n_train: Optional[int] = None) -> Hyperparameters:
        """
        Check and normalize one grid point.

        Args:
            params: Raw hyperparameters
            n_train: Number of training records the point will be fitted on

        Returns:
            Normalized hyperparameters

        Raises:
            InvalidHyperparameterError: On unknown, missing or out-of-range values
        """
        unknown = set(params) - set(self.param_names)
        missing = set(self.param_names) - set(params)
        if unknown or missing:
            raise InvalidHyperparameterError(
                f"{self.name} expects {list(self.param_names)}, got {sorted(params)}"
            )
        return self._validate(params, n_train)

    @abstractmethod
    def _validate(self, params: Hyperparameters, n_train: Optional[int]) -> Hyperparameters:
        """Strategy-specific range checks and coercion."""
        pass

    @abstractmethod
    def fit(self, train: ScaledDataset, params: Hyperparameters) -> Any:
        """
        Train a model on scaled, labeled data.

        Args:
            train: Scaled training records with labels
            params: Hyperparameters for this fit

        Returns:
            Model handle accepted by `predict`
        """
        pass

    @abstractmethod
    def predict(self, model: Any, data: ScaledDataset) -> np.ndarray:
        """
        Predict one label per record, preserving order.

        Args:
            model: Handle returned by `fit`
            data: Scaled records

        Returns:
            Predicted labels of shape (n_records,)
        """
        pass

    @staticmethod
    def _require_scaled(data: Dataset, labeled: bool = False) -> None:
        if not isinstance(data, ScaledDataset):
            raise TypeError(
                f"Classifiers accept ScaledDataset only, got {type(data).__name__}; "
                "use FeatureScaler.transform first"
            )
        if labeled and not data.is_labeled:
            raise ValueError("Training data must carry labels")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


# ============================================================================
# FACTORY
# ============================================================================

class ModelFactory:
    """
    Factory class for creating classifier strategies by name.

    New classifier families are added by registering a strategy class;
    nothing else in the pipeline changes.
    """

    _models: Dict[str, Type[ClassifierStrategy]] = {}

    @classmethod
    def register_model(cls, name: str, model_class: Type[ClassifierStrategy]) -> None:
        """
        Register a strategy class with the factory.

        Args:
            name: Name to register the strategy under
            model_class: Class implementing ClassifierStrategy
        """
        cls._models[name] = model_class

    @classmethod
    def create_model(cls, name: str, **kwargs) -> ClassifierStrategy:
        """
        Create a strategy instance by name.

        Raises:
            ValueError: If the name is not registered
        """
        if name not in cls._models:
            raise ValueError(f"Unknown model: {name}. Available: {cls.list_models()}")
        return cls._models[name](**kwargs)

    @classmethod
    def list_models(cls) -> list:
        """Get list of all registered model names."""
        return list(cls._models.keys())
