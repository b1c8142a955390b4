"""Evaluation metrics module."""

from .evaluator import Evaluator, ConfusionMatrix

__all__ = ["Evaluator", "ConfusionMatrix"]
