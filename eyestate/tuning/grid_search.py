"""
Grid Search Cross-Validation
============================

Exhaustive k-fold search over a hyperparameter grid for any
`ClassifierStrategy`. Every (grid point, fold) pair is fitted exactly once;
folds are drawn once per search so all grid points see identical partitions.

"""

import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple
from joblib import Parallel, delayed
from loguru import logger

from ..data.containers import ScaledDataset
from ..data.splitter import Splitter
from ..exceptions import InvalidHyperparameterError, NoViableConfigurationError
from ..metrics.evaluator import Evaluator
from ..models.base import ClassifierStrategy, Hyperparameters
from .grid import HyperparameterGrid


@dataclass(frozen=True)
class GridPointResult:
    """Cross-validation outcome for one grid point."""
    params: Hyperparameters
    fold_errors: Tuple[float, ...] = ()
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def mean_error(self) -> float:
        return float(np.mean(self.fold_errors)) if not self.failed else float('nan')

    @property
    def std_error(self) -> float:
        return float(np.std(self.fold_errors)) if not self.failed else float('nan')


@dataclass(frozen=True, eq=False)
class ModelResult:
    """
    Selected configuration and refitted model from a grid search.

    Attributes:
        strategy_name: Name of the classifier strategy searched
        params: Winning hyperparameters
        model: Model handle refitted on the full training set
        mean_cv_error: Mean validation error of the winner across folds
        fold_errors: Per-fold validation errors of the winner
        grid_results: Outcome of every grid point, in grid order
        n_folds: Number of folds used
    """
    strategy_name: str
    params: Hyperparameters
    model: Any
    mean_cv_error: float
    fold_errors: Tuple[float, ...]
    grid_results: Tuple[GridPointResult, ...] = field(default_factory=tuple)
    n_folds: int = 0

    def cv_results_frame(self) -> pd.DataFrame:
        """One row per grid point with params, fold errors, mean and rank."""
        records = []
        for i, res in enumerate(self.grid_results):
            record = {'point': i, **res.params}
            for fold, err in enumerate(res.fold_errors):
                record[f'fold_{fold}_error'] = err
            record['mean_error'] = res.mean_error
            record['std_error'] = res.std_error
            record['status'] = 'failed' if res.failed else 'ok'
            record['message'] = res.error or ''
            records.append(record)

        df = pd.DataFrame(records)
        df['rank'] = df['mean_error'].rank(method='first').astype('Int64')
        return df


def _evaluate_fold(strategy: ClassifierStrategy, params: Hyperparameters,
                   train_fold: ScaledDataset, test_fold: ScaledDataset) -> Tuple[Optional[float], Optional[str]]:
    """Fit on one fold and score it; classifier failures are returned, not raised."""
    try:
        model = strategy.fit(train_fold, params)
        y_pred = strategy.predict(model, test_fold)
    except Exception as e:
        return None, f"{type(e).__name__}: {e}"
    return Evaluator.error_rate(test_fold.y, y_pred), None


class GridSearchCV:
    """
    k-fold cross-validated grid search with minimum-error selection.

    Args:
        n_jobs: Parallel workers for (grid point, fold) fits; 1 runs serially,
                -1 uses all cores (joblib semantics)
    """

    def __init__(self, n_jobs: int = 1):
        self.n_jobs = n_jobs

    def search(
        self,
        strategy: ClassifierStrategy,
        train: ScaledDataset,
        grid: HyperparameterGrid,
        k: int,
        seed: int
    ) -> ModelResult:
        """
        Evaluate every grid point with k-fold CV and refit the best one.

        Args:
            strategy: Classifier family to tune
            train: Scaled, labeled training set
            grid: Ordered hyperparameter points
            k: Number of folds (>= 2)
            seed: Seed for the fold permutation

        Returns:
            ModelResult for the point with the lowest mean error
            (earliest point on ties)

        Raises:
            InvalidHyperparameterError: If any grid point is malformed
            InvalidSplitError: If k < 2 or k exceeds the number of records
            NoViableConfigurationError: If every grid point failed
        """
        if not isinstance(train, ScaledDataset) or not train.is_labeled:
            raise TypeError("GridSearchCV requires a labeled ScaledDataset")

        fold_indices = Splitter.k_fold_indices(len(train), k, seed)
        min_fold_train = min(len(train_idx) for train_idx, _ in fold_indices)

        # Reject malformed points before any fitting
        points = []
        for i, params in enumerate(grid):
            try:
                points.append(strategy.validate(params, n_train=min_fold_train))
            except InvalidHyperparameterError as e:
                raise InvalidHyperparameterError(f"Grid point {i} {params}: {e}") from e

        folds = [(train.subset(tr), train.subset(te)) for tr, te in fold_indices]

        logger.info(f"Grid search for {strategy.name}: {len(points)} points x {k} folds "
                    f"= {len(points) * k} fits (n_jobs={self.n_jobs})")

        outcomes = Parallel(n_jobs=self.n_jobs)(
            delayed(_evaluate_fold)(strategy, params, train_fold, test_fold)
            for params in points
            for train_fold, test_fold in folds
        )

        grid_results = []
        for i, params in enumerate(points):
            point_outcomes = outcomes[i * k:(i + 1) * k]
            errors = [msg for _, msg in point_outcomes if msg is not None]
            if errors:
                logger.warning(f"  Point {i} {params} failed: {errors[0]}")
                grid_results.append(GridPointResult(params=params, error=errors[0]))
                continue

            result = GridPointResult(params=params, fold_errors=tuple(err for err, _ in point_outcomes))
            logger.debug(f"  Point {i} {params}: mean error {result.mean_error:.4f}")
            grid_results.append(result)

        best = self._select(grid_results)
        if best is None:
            raise NoViableConfigurationError(
                f"All {len(grid_results)} grid points failed for {strategy.name}"
            )

        logger.info(f"  Best {strategy.name} params: {best.params} "
                    f"(mean CV error {best.mean_error:.4f})")

        model = strategy.fit(train, best.params)

        return ModelResult(
            strategy_name=strategy.name,
            params=best.params,
            model=model,
            mean_cv_error=best.mean_error,
            fold_errors=best.fold_errors,
            grid_results=tuple(grid_results),
            n_folds=k,
        )

    @staticmethod
    def _select(grid_results: List[GridPointResult]) -> Optional[GridPointResult]:
        """Lowest mean error; strict comparison keeps the earliest point on ties."""
        best = None
        for result in grid_results:
            if result.failed:
                continue
            if best is None or result.mean_error < best.mean_error:
                best = result
        return best
