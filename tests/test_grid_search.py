import numpy as np
import pytest

from eyestate.exceptions import (
    InvalidHyperparameterError, InvalidSplitError, NoViableConfigurationError
)
from eyestate.models import KernelClassifier, NeighborClassifier
from eyestate.tuning import GridSearchCV, HyperparameterGrid


class RecordingNeighbors(NeighborClassifier):
    """Records every (params, training fold) it is fitted on."""

    def __init__(self):
        self.calls = []

    def fit(self, train, params):
        self.calls.append((params['n_neighbors'], train.X.tobytes()))
        return super().fit(train, params)


class FlakyKernel(KernelClassifier):
    """Fails whenever C equals the configured value."""

    def __init__(self, bad_C):
        self.bad_C = bad_C

    def fit(self, train, params):
        if params['C'] == self.bad_C:
            raise RuntimeError("solver did not converge")
        return super().fit(train, params)


def test_grid_from_axes_order():
    grid = HyperparameterGrid.from_axes({'C': [1, 10], 'gamma': [0.1, 1]})
    assert grid.points == [
        {'C': 1, 'gamma': 0.1}, {'C': 1, 'gamma': 1},
        {'C': 10, 'gamma': 0.1}, {'C': 10, 'gamma': 1},
    ]


def test_grid_rejects_empty():
    with pytest.raises(InvalidHyperparameterError):
        HyperparameterGrid([])
    with pytest.raises(InvalidHyperparameterError):
        HyperparameterGrid.from_axes({'n_neighbors': []})


def test_each_point_fold_pair_fitted_once(scaled_separable):
    strategy = RecordingNeighbors()
    grid = HyperparameterGrid.from_axes({'n_neighbors': [1, 3, 5]})

    result = GridSearchCV().search(strategy, scaled_separable, grid, k=4, seed=0)

    cv_calls = strategy.calls[:-1]
    assert len(cv_calls) == 3 * 4
    assert len(set(cv_calls)) == len(cv_calls)
    # final refit on the full training set
    assert strategy.calls[-1] == (result.params['n_neighbors'], scaled_separable.X.tobytes())


def test_ties_prefer_first_grid_point(scaled_separable):
    grid = HyperparameterGrid.from_axes({'n_neighbors': [5, 1, 3]})
    result = GridSearchCV().search(NeighborClassifier(), scaled_separable, grid, k=5, seed=0)

    assert all(r.mean_error == 0.0 for r in result.grid_results)
    assert result.params == {'n_neighbors': 5}


def test_selects_minimum_mean_error(scaled_separable):
    # k equal to a whole fold's training set votes the fold majority, so it errs
    grid = HyperparameterGrid.from_axes({'n_neighbors': [75, 1]})
    result = GridSearchCV().search(NeighborClassifier(), scaled_separable, grid, k=4, seed=0)

    assert result.params == {'n_neighbors': 1}
    assert result.mean_cv_error == 0.0
    assert len(result.fold_errors) == 4
    assert result.grid_results[0].mean_error > 0


def test_failed_point_is_excluded(scaled_separable):
    grid = HyperparameterGrid([{'C': 13, 'gamma': 0.5}, {'C': 1, 'gamma': 0.5}])
    result = GridSearchCV().search(FlakyKernel(bad_C=13.0), scaled_separable, grid, k=3, seed=0)

    failed, ok = result.grid_results
    assert failed.failed and 'did not converge' in failed.error
    assert not ok.failed
    assert result.params == {'C': 1.0, 'gamma': 0.5}

    frame = result.cv_results_frame()
    assert frame['status'].tolist() == ['failed', 'ok']


def test_all_points_failing_raises(scaled_separable):
    grid = HyperparameterGrid([{'C': 13, 'gamma': 0.5}])
    with pytest.raises(NoViableConfigurationError):
        GridSearchCV().search(FlakyKernel(bad_C=13.0), scaled_separable, grid, k=3, seed=0)


def test_invalid_point_rejected_before_fitting(scaled_separable):
    strategy = RecordingNeighbors()
    grid = HyperparameterGrid([{'n_neighbors': 1}, {'n_neighbors': -2}])

    with pytest.raises(InvalidHyperparameterError):
        GridSearchCV().search(strategy, scaled_separable, grid, k=3, seed=0)
    assert strategy.calls == []


def test_neighbor_count_checked_against_fold_size(scaled_separable):
    # 100 records, 4 folds -> 75 training records per fold
    grid = HyperparameterGrid([{'n_neighbors': 76}])
    with pytest.raises(InvalidHyperparameterError):
        GridSearchCV().search(NeighborClassifier(), scaled_separable, grid, k=4, seed=0)


@pytest.mark.parametrize("k", [0, 1])
def test_degenerate_cross_validation_rejected(scaled_separable, k):
    grid = HyperparameterGrid([{'n_neighbors': 1}])
    with pytest.raises(InvalidSplitError):
        GridSearchCV().search(NeighborClassifier(), scaled_separable, grid, k=k, seed=0)


def test_rejects_unscaled_training_data(separable):
    grid = HyperparameterGrid([{'n_neighbors': 1}])
    with pytest.raises(TypeError):
        GridSearchCV().search(NeighborClassifier(), separable, grid, k=3, seed=0)


def test_parallel_matches_serial(scaled_separable):
    grid = HyperparameterGrid.from_axes({'C': [0.1, 1, 10], 'gamma': [0.05, 0.5]})
    serial = GridSearchCV(n_jobs=1).search(KernelClassifier(), scaled_separable, grid, k=5, seed=11)
    parallel = GridSearchCV(n_jobs=2).search(KernelClassifier(), scaled_separable, grid, k=5, seed=11)

    assert serial.params == parallel.params
    np.testing.assert_allclose(
        [r.mean_error for r in serial.grid_results],
        [r.mean_error for r in parallel.grid_results],
    )
