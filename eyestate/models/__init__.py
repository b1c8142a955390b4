"""Classifier strategies for the eye-state framework.

This module provides:
- The ClassifierStrategy interface and ModelFactory registry
- Kernel (RBF SVM) and neighbour (k-NN) strategies backed by scikit-learn
"""

# Base classes and factories
from .base import (
    ClassifierStrategy,
    ModelFactory,
    to_float,
    to_int
)

# Classical models
from .classical import (
    KernelClassifier,
    NeighborClassifier,
    NeighborModel
)

# Public API
__all__ = [
    # Base classes
    'ClassifierStrategy',
    'ModelFactory',

    # Utilities
    'to_float',
    'to_int',

    # Classical models
    'KernelClassifier',
    'NeighborClassifier',
    'NeighborModel',
]
