"""
Model Selection Pipeline
========================

Orchestrates one run for one classifier strategy:

1. Loaded     - datasets validated
2. Scaled     - scaler fit on the training partition only, applied to all data
3. Split      - scaled train / validation partitions fixed
4. Tuned      - k-fold grid search on the training partition
5. Evaluated  - confusion matrix and error rate on validation
6. Predicted  - labels for the unlabeled test set

Stages advance strictly in order; any failure aborts the run.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np
from loguru import logger

from .data.containers import Dataset, ScaledDataset
from .data.feature_scaler import FeatureScaler, ScalingParameters
from .data.loader import DataLoader
from .data.splitter import Splitter
from .metrics.evaluator import ConfusionMatrix, Evaluator
from .models.base import ClassifierStrategy
from .tuning.grid import HyperparameterGrid
from .tuning.grid_search import GridSearchCV, ModelResult


class PipelineStage(IntEnum):
    INITIAL = 0
    LOADED = 1
    SCALED = 2
    SPLIT = 3
    TUNED = 4
    EVALUATED = 5
    PREDICTED = 6


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """Immutable outcome of a completed run."""
    strategy_name: str
    model_result: ModelResult
    scaling_params: ScalingParameters
    validation_confusion: ConfusionMatrix
    validation_error: float
    validation_metrics: Dict[str, float]
    test_predictions: Optional[np.ndarray]
    test_label_distribution: Dict[int, int]
    stages: Tuple[PipelineStage, ...]

    @property
    def best_params(self) -> Dict:
        return self.model_result.params

    def summary(self) -> Dict:
        """Flat, JSON-friendly summary of the run."""
        return {
            'model': self.strategy_name,
            'best_params': self.best_params,
            'cv_mean_error': self.model_result.mean_cv_error,
            'cv_fold_errors': list(self.model_result.fold_errors),
            'val_error': self.validation_error,
            'val_confusion_matrix': self.validation_confusion.to_dict(),
            **{f'val_{k}': v for k, v in self.validation_metrics.items() if k != 'error_rate'},
            'test_label_distribution': {str(k): v for k, v in self.test_label_distribution.items()},
        }


class EyeStatePipeline:
    """
    Model selection and evaluation for one classifier strategy.

    Args:
        strategy: Classifier family to tune
        grid: Hyperparameter points to search
        n_folds: Cross-validation folds (>= 2)
        train_fraction: Share of labeled records used for training
        random_state: Seed for the train/validation split and the folds
        n_jobs: Parallel workers for cross-validation fits

    Example:
        >>> pipeline = EyeStatePipeline(KernelClassifier(),
        ...                             HyperparameterGrid.from_axes({'C': [1, 10], 'gamma': [0.1]}))
        >>> result = pipeline.run(labeled, unlabeled)
        >>> result.validation_error
    """

    def __init__(
        self,
        strategy: ClassifierStrategy,
        grid: HyperparameterGrid,
        n_folds: int = 10,
        train_fraction: float = 0.8,
        random_state: int = 42,
        n_jobs: int = 1
    ):
        self.strategy = strategy
        self.grid = grid
        self.n_folds = n_folds
        self.train_fraction = train_fraction
        self.random_state = random_state
        self.n_jobs = n_jobs

        self.stage = PipelineStage.INITIAL
        self.history: List[PipelineStage] = []

    def _advance(self, stage: PipelineStage) -> None:
        if stage != self.stage + 1:
            raise RuntimeError(f"Cannot move from {self.stage.name} to {stage.name}")
        self.stage = stage
        self.history.append(stage)
        logger.info(f"[{self.strategy.name}] stage {stage.name}")

    def run(self, labeled: Dataset, unlabeled: Optional[Dataset] = None) -> PipelineResult:
        """
        Execute the complete pipeline.

        Args:
            labeled: Labeled dataset used for training and validation
            unlabeled: Optional dataset to predict after evaluation

        Returns:
            PipelineResult with validation diagnostics and test predictions
        """
        self.stage = PipelineStage.INITIAL
        self.history = []

        logger.info("=" * 60)
        logger.info(f"MODEL SELECTION: {self.strategy.name} "
                    f"({len(self.grid)} grid points, {self.n_folds} folds, seed {self.random_state})")
        logger.info("=" * 60)

        try:
            self._load(labeled, unlabeled)
            train_idx, val_idx, scaled, scaled_test, params = self._scale(labeled, unlabeled)
            train, validation = self._split(scaled, train_idx, val_idx)
            model_result = self._tune(train)
            confusion, val_error, val_metrics = self._evaluate(model_result, validation)
            predictions = self._predict(model_result, scaled_test)
        except Exception as e:
            logger.error(f"[{self.strategy.name}] pipeline aborted after {self.stage.name}: {e}")
            raise

        distribution = Evaluator.label_distribution(predictions) if predictions is not None else {}

        return PipelineResult(
            strategy_name=self.strategy.name,
            model_result=model_result,
            scaling_params=params,
            validation_confusion=confusion,
            validation_error=val_error,
            validation_metrics=val_metrics,
            test_predictions=predictions,
            test_label_distribution=distribution,
            stages=tuple(self.history),
        )

    def _load(self, labeled: Dataset, unlabeled: Optional[Dataset]) -> None:
        if not labeled.is_labeled:
            raise ValueError("Training dataset must carry labels")
        if unlabeled is not None:
            DataLoader.check_compatible(labeled, unlabeled)
        self._advance(PipelineStage.LOADED)

    def _scale(self, labeled: Dataset, unlabeled: Optional[Dataset]):
        """Fit the scaler on the training partition and transform everything."""
        train_idx, val_idx = Splitter.train_validation_indices(
            len(labeled), self.train_fraction, self.random_state
        )

        scaler = FeatureScaler()
        params = scaler.fit(labeled.subset(train_idx))
        scaled = scaler.transform(labeled, params)
        scaled_test = scaler.transform(unlabeled, params) if unlabeled is not None else None

        self._advance(PipelineStage.SCALED)
        return train_idx, val_idx, scaled, scaled_test, params

    def _split(self, scaled: ScaledDataset, train_idx: np.ndarray, val_idx: np.ndarray) -> Tuple[ScaledDataset, ScaledDataset]:
        train, validation = scaled.subset(train_idx), scaled.subset(val_idx)
        logger.info(f"  Train: {len(train)} records, validation: {len(validation)} records")
        for name, ds in [('Train', train), ('Validation', validation)]:
            logger.info(f"  {name} classes: {Evaluator.label_distribution(ds.y)}")
        self._advance(PipelineStage.SPLIT)
        return train, validation

    def _tune(self, train: ScaledDataset) -> ModelResult:
        search = GridSearchCV(n_jobs=self.n_jobs)
        model_result = search.search(self.strategy, train, self.grid, self.n_folds, self.random_state)
        self._advance(PipelineStage.TUNED)
        return model_result

    def _evaluate(self, model_result: ModelResult, validation: ScaledDataset):
        y_pred = self.strategy.predict(model_result.model, validation)
        confusion = Evaluator.confusion_matrix(validation.y, y_pred)
        val_error = Evaluator.error_rate(validation.y, y_pred)
        val_metrics = Evaluator.summary(validation.y, y_pred)
        logger.info(f"  Validation error: {val_error:.4f}  {confusion}")
        self._advance(PipelineStage.EVALUATED)
        return confusion, val_error, val_metrics

    def _predict(self, model_result: ModelResult, scaled_test: Optional[ScaledDataset]) -> Optional[np.ndarray]:
        predictions = None
        if scaled_test is not None:
            predictions = self.strategy.predict(model_result.model, scaled_test)
            logger.info(f"  Test predictions: {Evaluator.label_distribution(predictions)}")
        self._advance(PipelineStage.PREDICTED)
        return predictions
