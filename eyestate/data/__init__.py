"""Data handling module."""

from .containers import Dataset, ScaledDataset
from .loader import DataLoader
from .feature_scaler import FeatureScaler, ScalingParameters
from .splitter import Splitter

__all__ = [
    "Dataset",
    "ScaledDataset",
    "DataLoader",
    "FeatureScaler",
    "ScalingParameters",
    "Splitter",
]
