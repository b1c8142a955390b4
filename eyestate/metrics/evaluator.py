import numpy as np
from dataclasses import dataclass
from typing import Dict, Sequence
from sklearn.metrics import (
    confusion_matrix, accuracy_score, balanced_accuracy_score,
    precision_score, recall_score, f1_score
)

from ..data.containers import LABELS
from ..exceptions import EmptyInputError, LengthMismatchError


@dataclass(frozen=True, eq=False)
class ConfusionMatrix:
    """
    2x2 count table: rows are true labels, columns predicted labels, order [0, 1].
    """
    counts: np.ndarray

    def __post_init__(self):
        counts = np.array(self.counts, dtype=int, copy=True)
        if counts.shape != (2, 2):
            raise ValueError(f"Confusion matrix must be 2x2, got {counts.shape}")
        counts.setflags(write=False)
        object.__setattr__(self, 'counts', counts)

    @property
    def tn(self) -> int:
        return int(self.counts[0, 0])

    @property
    def fp(self) -> int:
        return int(self.counts[0, 1])

    @property
    def fn(self) -> int:
        return int(self.counts[1, 0])

    @property
    def tp(self) -> int:
        return int(self.counts[1, 1])

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    @property
    def trace(self) -> int:
        return int(np.trace(self.counts))

    @property
    def accuracy(self) -> float:
        return self.trace / self.total

    @property
    def error_rate(self) -> float:
        return 1.0 - self.accuracy

    def to_dict(self) -> Dict[str, int]:
        return {'tn': self.tn, 'fp': self.fp, 'fn': self.fn, 'tp': self.tp}

    def __repr__(self) -> str:
        return f"ConfusionMatrix(tn={self.tn}, fp={self.fp}, fn={self.fn}, tp={self.tp})"


class Evaluator:
    """
    Diagnostics for binary eye-state predictions.

    All methods take true and predicted label sequences of equal,
    non-zero length.
    """

    # Define once, use everywhere
    METRICS = {
        'accuracy': accuracy_score,
        'balanced_accuracy': balanced_accuracy_score,
        'precision': lambda y_t, y_p: precision_score(y_t, y_p, zero_division=0),
        'sensitivity': lambda y_t, y_p: recall_score(y_t, y_p, pos_label=1, zero_division=0),
        'specificity': lambda y_t, y_p: recall_score(y_t, y_p, pos_label=0, zero_division=0),
        'f1': lambda y_t, y_p: f1_score(y_t, y_p, zero_division=0),
    }

    @staticmethod
    def _check(y_true: Sequence[int], y_pred: Sequence[int]):
        y_true = np.asarray(y_true)
        y_pred = np.asarray(y_pred)
        if len(y_true) != len(y_pred):
            raise LengthMismatchError(
                f"y_true has {len(y_true)} labels, y_pred has {len(y_pred)}"
            )
        if len(y_true) == 0:
            raise EmptyInputError("Cannot evaluate zero-length label sequences")
        return y_true, y_pred

    @staticmethod
    def confusion_matrix(y_true: Sequence[int], y_pred: Sequence[int]) -> ConfusionMatrix:
        """True x predicted counts over labels [0, 1]."""
        y_true, y_pred = Evaluator._check(y_true, y_pred)
        return ConfusionMatrix(confusion_matrix(y_true, y_pred, labels=list(LABELS)))

    @staticmethod
    def error_rate(y_true: Sequence[int], y_pred: Sequence[int]) -> float:
        """Fraction of mismatched labels, in [0, 1]."""
        y_true, y_pred = Evaluator._check(y_true, y_pred)
        return float(np.mean(y_true != y_pred))

    @staticmethod
    def summary(y_true: Sequence[int], y_pred: Sequence[int]) -> Dict[str, float]:
        """
        Compute the standard binary metrics plus error rate.

        Examples:
            >>> Evaluator.summary([0, 1, 1, 0], [0, 1, 0, 0])['error_rate']
            0.25
        """
        y_true, y_pred = Evaluator._check(y_true, y_pred)
        results = {name: float(func(y_true, y_pred)) for name, func in Evaluator.METRICS.items()}
        results['error_rate'] = Evaluator.error_rate(y_true, y_pred)
        return results

    @staticmethod
    def label_distribution(labels: Sequence[int]) -> Dict[int, int]:
        """Count of each class label, always including 0 and 1."""
        labels = np.asarray(labels, dtype=int)
        return {label: int(np.sum(labels == label)) for label in LABELS}
