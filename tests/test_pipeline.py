import numpy as np
import pytest

from eyestate.data import Dataset, Splitter
from eyestate.exceptions import DegenerateFeatureError, FeatureDimensionError
from eyestate.models import KernelClassifier, NeighborClassifier
from eyestate.pipeline import EyeStatePipeline, PipelineStage
from eyestate.tuning import HyperparameterGrid


STRATEGIES = [
    (KernelClassifier(), {'C': [1, 10], 'gamma': [0.1, 0.5]}),
    (NeighborClassifier(), {'n_neighbors': [1, 3, 5]}),
]


@pytest.mark.parametrize("strategy, axes", STRATEGIES)
def test_separable_data_gives_zero_validation_error(separable, strategy, axes):
    pipeline = EyeStatePipeline(strategy, HyperparameterGrid.from_axes(axes),
                                n_folds=5, train_fraction=0.8, random_state=42)
    result = pipeline.run(separable)

    assert result.validation_error == 0.0
    assert result.validation_confusion.total == 20
    assert result.validation_confusion.trace == 20
    assert result.model_result.mean_cv_error == 0.0


def test_stages_advance_in_order(separable):
    test_set = Dataset(X=np.array([[3.0, 0.0], [-3.0, 0.5], [2.5, -0.5]]))
    pipeline = EyeStatePipeline(NeighborClassifier(), HyperparameterGrid([{'n_neighbors': 3}]), n_folds=4)

    result = pipeline.run(separable, test_set)

    assert result.stages == (
        PipelineStage.LOADED, PipelineStage.SCALED, PipelineStage.SPLIT,
        PipelineStage.TUNED, PipelineStage.EVALUATED, PipelineStage.PREDICTED,
    )
    np.testing.assert_array_equal(result.test_predictions, [1, 0, 1])
    assert result.test_label_distribution == {0: 1, 1: 2}


def test_scaler_fitted_on_training_partition_only(separable):
    pipeline = EyeStatePipeline(NeighborClassifier(), HyperparameterGrid([{'n_neighbors': 1}]),
                                n_folds=3, train_fraction=0.8, random_state=5)
    result = pipeline.run(separable)

    train_idx, _ = Splitter.train_validation_indices(len(separable), 0.8, 5)
    np.testing.assert_allclose(result.scaling_params.mean, separable.X[train_idx].mean(axis=0))
    assert not np.allclose(result.scaling_params.mean, separable.X.mean(axis=0))


def test_zero_variance_aborts_at_scaling():
    X = np.full((40, 3), 4200.0)
    data = Dataset(X=X, y=np.arange(40) % 2)
    pipeline = EyeStatePipeline(NeighborClassifier(), HyperparameterGrid([{'n_neighbors': 1}]), n_folds=3)

    with pytest.raises(DegenerateFeatureError):
        pipeline.run(data)
    assert pipeline.stage == PipelineStage.LOADED


def test_test_set_must_match_feature_count(separable):
    pipeline = EyeStatePipeline(NeighborClassifier(), HyperparameterGrid([{'n_neighbors': 1}]), n_folds=3)

    with pytest.raises(FeatureDimensionError):
        pipeline.run(separable, Dataset(X=np.ones((4, 3))))
    assert pipeline.stage == PipelineStage.INITIAL


def test_unlabeled_training_data_rejected(separable):
    pipeline = EyeStatePipeline(NeighborClassifier(), HyperparameterGrid([{'n_neighbors': 1}]), n_folds=3)
    with pytest.raises(ValueError):
        pipeline.run(Dataset(X=separable.X))


def test_runs_are_reproducible(eeg_like):
    grid = HyperparameterGrid.from_axes({'C': [0.5, 5], 'gamma': [0.01, 0.1]})
    first = EyeStatePipeline(KernelClassifier(), grid, n_folds=3, random_state=1).run(eeg_like)
    second = EyeStatePipeline(KernelClassifier(), grid, n_folds=3, random_state=1).run(eeg_like)

    assert first.best_params == second.best_params
    assert first.validation_error == second.validation_error
    assert first.model_result.fold_errors == second.model_result.fold_errors


def test_summary_is_flat(separable):
    result = EyeStatePipeline(NeighborClassifier(), HyperparameterGrid([{'n_neighbors': 1}]),
                              n_folds=3).run(separable)
    summary = result.summary()

    assert summary['model'] == 'knn'
    assert summary['best_params'] == {'n_neighbors': 1}
    assert summary['val_error'] == 0.0
    assert set(summary['val_confusion_matrix']) == {'tn', 'fp', 'fn', 'tp'}
