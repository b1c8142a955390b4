"""Exception hierarchy for the eye-state classification framework."""

from typing import Sequence


class EyeStateError(Exception):
    """Base class for all framework errors."""


class DegenerateFeatureError(EyeStateError, ValueError):
    """A feature has zero standard deviation, so it cannot be standardized."""

    def __init__(self, feature_names: Sequence[str]):
        self.feature_names = list(feature_names)
        super().__init__(
            f"Zero standard deviation for feature(s): {', '.join(self.feature_names)}"
        )


class FeatureDimensionError(EyeStateError, ValueError):
    """Feature counts of two datasets (or a dataset and scaling parameters) differ."""


class InvalidHyperparameterError(EyeStateError, ValueError):
    """A hyperparameter grid entry is malformed or out of range."""


class InvalidSplitError(EyeStateError, ValueError):
    """A train fraction or fold count cannot produce a valid partition."""


class LengthMismatchError(EyeStateError, ValueError):
    """True and predicted label sequences have different lengths."""


class EmptyInputError(EyeStateError, ValueError):
    """An operation that needs at least one record received none."""


class NoViableConfigurationError(EyeStateError, RuntimeError):
    """Every grid point failed during cross-validation."""
