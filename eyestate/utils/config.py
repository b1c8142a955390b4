"""Configuration management for the eye-state framework."""

import yaml
import copy
from typing import Dict, List, Any, Union
from pathlib import Path

from ..tuning.grid import HyperparameterGrid


DEFAULTS = {
    'data': {
        'train_fraction': 0.8,
        'random_state': 42,
        'skip_rows': 0,
    },
    'cross_validation': {
        'n_folds': 10,
        'n_jobs': 1,
    },
    'output': {
        'output_dir': 'results',
    },
    'visualization': {
        'enabled': True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Config:
    """
    YAML configuration loader with section defaults.

    Sections: data, cross_validation, models, output, visualization.
    Each entry under `models` names a registered strategy and carries an
    `enabled` flag and a `grid` of hyperparameter axes.
    """

    def __init__(self, config_path: Union[str, Path]):
        """Load configuration from YAML file."""
        self.config_path = Path(config_path)
        with open(self.config_path, 'r') as f:
            raw = yaml.safe_load(f) or {}
        self.config = _merge(DEFAULTS, raw)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'Config':
        """Build a configuration without a file (tests, notebooks)."""
        instance = cls.__new__(cls)
        instance.config_path = None
        instance.config = _merge(DEFAULTS, config)
        return instance

    def get_model_names(self, enabled_only: bool = True) -> List[str]:
        """Model names in file order."""
        models = self.config.get('models', {})
        return [name for name, cfg in models.items()
                if not enabled_only or (cfg or {}).get('enabled', True)]

    def get_model_grid(self, model_name: str) -> HyperparameterGrid:
        """
        Build the hyperparameter grid for a model.

        The `grid` entry is either a mapping of axes (cartesian product) or an
        explicit list of points.

        Raises:
            ValueError: If model not found or has no grid
        """
        models = self.config.get('models', {})
        if model_name not in models:
            raise ValueError(f"Model '{model_name}' not found")

        grid = (models[model_name] or {}).get('grid')
        if not grid:
            raise ValueError(f"Model '{model_name}' has no 'grid' section")

        if isinstance(grid, list):
            return HyperparameterGrid(grid)
        return HyperparameterGrid.from_axes(grid)

    # Simple getters for other sections
    def get_data_config(self) -> Dict[str, Any]:
        """Get data configuration."""
        return self.config.get('data', {})

    def get_cv_config(self) -> Dict[str, Any]:
        """Get cross-validation configuration."""
        return self.config.get('cross_validation', {})

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration."""
        return self.config.get('output', {})

    def get_visualization_config(self) -> Dict[str, Any]:
        """Get visualization configuration."""
        return self.config.get('visualization', {})

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access to config."""
        return self.config[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with default."""
        return self.config.get(key, default)
