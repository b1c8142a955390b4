"""Ordered hyperparameter grids."""

import itertools
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, Tuple

from ..exceptions import InvalidHyperparameterError


class HyperparameterGrid:
    """
    Immutable, ordered sequence of hyperparameter points.

    Order matters: grid search breaks ties in favour of the earliest point.
    """

    def __init__(self, points: Iterable[Mapping[str, Any]]):
        self._points: Tuple[Dict[str, Any], ...] = tuple(dict(p) for p in points)
        if not self._points:
            raise InvalidHyperparameterError("Hyperparameter grid is empty")

    @classmethod
    def from_axes(cls, axes: Mapping[str, Sequence[Any]]) -> 'HyperparameterGrid':
        """
        Cartesian product of named axes.

        Axes keep the order given; the last axis varies fastest, so
        {'C': [1, 10], 'gamma': [0.1, 1]} yields (1, 0.1), (1, 1), (10, 0.1), (10, 1).
        """
        if not axes:
            raise InvalidHyperparameterError("Hyperparameter grid has no axes")

        names = list(axes)
        values = []
        for name in names:
            axis = axes[name]
            if isinstance(axis, (str, bytes)) or not isinstance(axis, Sequence):
                axis = [axis]
            if len(axis) == 0:
                raise InvalidHyperparameterError(f"Axis '{name}' has no values")
            values.append(list(axis))

        return cls(dict(zip(names, combo)) for combo in itertools.product(*values))

    @property
    def points(self) -> List[Dict[str, Any]]:
        """Copies of the grid points, in order."""
        return [dict(p) for p in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.points)

    def __getitem__(self, index: int) -> Dict[str, Any]:
        return dict(self._points[index])

    def __repr__(self) -> str:
        return f"HyperparameterGrid({len(self)} points)"
