"""EEG eye-state classification: model selection and evaluation framework."""

from .data import Dataset, ScaledDataset, DataLoader, FeatureScaler, ScalingParameters, Splitter
from .models import ClassifierStrategy, ModelFactory, KernelClassifier, NeighborClassifier
from .tuning import HyperparameterGrid, GridSearchCV, ModelResult
from .metrics import Evaluator, ConfusionMatrix
from .pipeline import EyeStatePipeline, PipelineResult, PipelineStage
from .utils import Config

__version__ = '0.1.0'

__all__ = [
    'Dataset',
    'ScaledDataset',
    'DataLoader',
    'FeatureScaler',
    'ScalingParameters',
    'Splitter',
    'ClassifierStrategy',
    'ModelFactory',
    'KernelClassifier',
    'NeighborClassifier',
    'HyperparameterGrid',
    'GridSearchCV',
    'ModelResult',
    'Evaluator',
    'ConfusionMatrix',
    'EyeStatePipeline',
    'PipelineResult',
    'PipelineStage',
    'Config',
]
