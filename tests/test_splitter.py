import numpy as np
import pytest

from eyestate.data import Splitter
from eyestate.exceptions import InvalidSplitError


def _rows(ds):
    return {tuple(row) for row in ds.X}


def test_train_validation_split_is_deterministic(separable):
    a_train, a_val = Splitter.train_validation_split(separable, 0.8, seed=3)
    b_train, b_val = Splitter.train_validation_split(separable, 0.8, seed=3)

    np.testing.assert_array_equal(a_train.X, b_train.X)
    np.testing.assert_array_equal(a_val.X, b_val.X)


def test_train_validation_split_is_disjoint_and_complete(separable):
    train, val = Splitter.train_validation_split(separable, 0.75, seed=1)

    assert len(train) == 75
    assert len(val) == 25
    assert not _rows(train) & _rows(val)
    assert _rows(train) | _rows(val) == _rows(separable)


def test_train_size_rounds_down():
    train_idx, val_idx = Splitter.train_validation_indices(10, 0.55, seed=0)
    assert len(train_idx) == 5
    assert len(val_idx) == 5


def test_different_seeds_give_different_partitions():
    a, _ = Splitter.train_validation_indices(100, 0.8, seed=0)
    b, _ = Splitter.train_validation_indices(100, 0.8, seed=1)
    assert not np.array_equal(a, b)


@pytest.mark.parametrize("fraction", [0.0, 1.0, -0.2, 1.5, 0.01])
def test_invalid_train_fraction(fraction):
    with pytest.raises(InvalidSplitError):
        Splitter.train_validation_indices(10, fraction, seed=0)


def test_k_fold_covers_each_record_once():
    folds = Splitter.k_fold_indices(23, 5, seed=9)
    held_out = np.concatenate([test for _, test in folds])

    assert sorted(held_out.tolist()) == list(range(23))
    sizes = [len(test) for _, test in folds]
    assert max(sizes) - min(sizes) <= 1
    for train, test in folds:
        assert not set(train) & set(test)
        assert len(train) + len(test) == 23


def test_k_fold_is_deterministic():
    a = Splitter.fold_assignment(50, 4, seed=2)
    b = Splitter.fold_assignment(50, 4, seed=2)
    np.testing.assert_array_equal(a, b)
    assert set(a.tolist()) == {0, 1, 2, 3}


def test_k_fold_datasets_keep_type(scaled_separable):
    folds = Splitter.k_fold(scaled_separable, 4, seed=0)
    assert len(folds) == 4
    for train, test in folds:
        assert type(train) is type(scaled_separable)
        assert len(train) + len(test) == len(scaled_separable)


@pytest.mark.parametrize("k", [0, 1])
def test_degenerate_fold_count_rejected(k):
    with pytest.raises(InvalidSplitError):
        Splitter.k_fold_indices(10, k, seed=0)


def test_more_folds_than_records_rejected():
    with pytest.raises(InvalidSplitError):
        Splitter.k_fold_indices(3, 4, seed=0)
