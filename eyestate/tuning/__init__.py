"""Hyperparameter search module."""

from .grid import HyperparameterGrid
from .grid_search import GridSearchCV, GridPointResult, ModelResult

__all__ = ["HyperparameterGrid", "GridSearchCV", "GridPointResult", "ModelResult"]
