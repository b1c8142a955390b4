import numpy as np
import pytest

from eyestate.exceptions import EmptyInputError, LengthMismatchError
from eyestate.metrics import ConfusionMatrix, Evaluator


def test_confusion_matrix_counts():
    cm = Evaluator.confusion_matrix([0, 0, 1, 1, 1], [0, 1, 1, 0, 1])

    assert cm.to_dict() == {'tn': 1, 'fp': 1, 'fn': 1, 'tp': 2}
    assert cm.total == 5
    assert cm.trace == 3


def test_confusion_matrix_always_two_by_two():
    cm = Evaluator.confusion_matrix([1, 1, 1], [1, 1, 1])
    assert cm.counts.shape == (2, 2)
    assert cm.tp == 3 and cm.tn == 0


def test_error_rate_zero_iff_all_match():
    y = np.array([0, 1, 1, 0])
    assert Evaluator.error_rate(y, y) == 0.0
    assert Evaluator.error_rate(y, [0, 1, 1, 1]) > 0.0


def test_error_rate_one_iff_all_mismatch():
    y = np.array([0, 1, 1, 0])
    assert Evaluator.error_rate(y, 1 - y) == 1.0
    assert Evaluator.error_rate(y, [1, 0, 0, 0]) < 1.0


def test_error_rate_matches_confusion_trace():
    rng = np.random.default_rng(4)
    y_true = rng.integers(0, 2, 200)
    y_pred = rng.integers(0, 2, 200)

    cm = Evaluator.confusion_matrix(y_true, y_pred)
    assert Evaluator.error_rate(y_true, y_pred) == pytest.approx(1 - cm.trace / cm.total)
    assert cm.error_rate == pytest.approx(Evaluator.error_rate(y_true, y_pred))


def test_length_mismatch():
    with pytest.raises(LengthMismatchError):
        Evaluator.confusion_matrix([0, 1], [0])
    with pytest.raises(LengthMismatchError):
        Evaluator.error_rate([0, 1], [0, 1, 1])


def test_empty_input():
    with pytest.raises(EmptyInputError):
        Evaluator.error_rate([], [])
    with pytest.raises(EmptyInputError):
        Evaluator.confusion_matrix([], [])


def test_summary_metrics():
    summary = Evaluator.summary([0, 0, 1, 1], [0, 1, 1, 1])

    assert summary['error_rate'] == pytest.approx(0.25)
    assert summary['sensitivity'] == pytest.approx(1.0)
    assert summary['specificity'] == pytest.approx(0.5)
    assert summary['accuracy'] == pytest.approx(0.75)


def test_label_distribution_includes_both_classes():
    assert Evaluator.label_distribution([1, 1, 1]) == {0: 0, 1: 3}


def test_confusion_matrix_is_read_only():
    cm = ConfusionMatrix(np.array([[1, 0], [0, 1]]))
    with pytest.raises(ValueError):
        cm.counts[0, 0] = 5
